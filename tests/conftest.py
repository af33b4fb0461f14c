import logging
import textwrap

import httpx
import pytest

from kubeclient.clients.api import KubeClient
from kubeclient.structs.credentials import External, Token

SAMPLE_MINIKUBE_CA = textwrap.dedent('''
-----BEGIN CERTIFICATE-----
MIIC5zCCAc+gAwIBAgIBATANBgkqhkiG9w0BAQsFADAVMRMwEQYDVQQDEwptaW5p
a3ViZUNBMB4XDTE5MDUyMTA5MTgzNloXDTI5MDUxOTA5MTgzNlowFTETMBEGA1UE
AxMKbWluaWt1YmVDQTCCASIwDQYJKoZIhvcNAQEBBQADggEPADCCAQoCggEBANNU
9eyjlDfWZNSTXbdM9uebYseWWo6KeGGQ/OISrnVc6+AjuIv/fxtdCc8nVyLXBWu2
dlDjBqOsG2WfY7m1RVwsF0L2G8pgNZJ4eOww/PyDZzzIcB911eWiry528YB2PZQu
sN6sUItSZrHsin3dkcEZMUKcvVOY3FaNqXukCoMywZBO7QlLZasHhCCaanMFjxBx
WiqB4gxcyTlGRBSoa49agSW2r45873xmJ+JglI/tNjeobGLynYwrDvRWmrhVOFAj
QeiMr5lkzVO5cC2t84WdEihXVqFcZQUe0jfRHmmgpUxJRtiJMv7yudgnK2ALdhOY
eDVtV1wIyWgLpF2lZk8CAwEAAaNCMEAwDgYDVR0PAQH/BAQDAgKkMB0GA1UdJQQW
MBQGCCsGAQUFBwMCBggrBgEFBQcDATAPBgNVHRMBAf8EBTADAQH/MA0GCSqGSIb3
DQEBCwUAA4IBAQBdsqvuvK+8RJ5xqwGkdpSAK1U2LrZ3Hm0MzXoEo8GH79F1yubv
Ig1VRLHDIDY1d/fKrK4a7uulSFTFvpt6AGSB/225wJVBQUAALH1lPkTXq5TDi5jE
NqoXk3d61qf9StUEc1YehL6ZgkSknNU7ksAe5Ht0lfJlSa3DmACkI4CZJ1F5cztk
m2p3RZYkxizY2i/9P34f59F3XCNUSOW52aJgLhnMugEM0baOTHN0mcYZRGmrunT6
fs/5eZq6ZrXBu0nIkEZkEWAM2WoqDGxMlUao5IOnf289HyBxJTFGte5tysg1sJF0
JCH4VcilJllzUki594R1Yv8O5qtxkXXfXQNR
-----END CERTIFICATE-----
''').strip()

API_URL = 'https://api.example.com:6443'


@pytest.fixture(autouse=True)
def _restore_root_logging():
    # The CLI commands configure the root logger; keep the tests isolated.
    logger = logging.getLogger()
    original_handlers = logger.handlers[:]
    original_level = logger.level
    yield
    logger.handlers[:] = original_handlers
    logger.setLevel(original_level)


@pytest.fixture()
def handler(mocker):
    """ The fake API server: set `.return_value` or `.side_effect` per test. """
    return mocker.Mock(return_value=httpx.Response(200, json={}))


@pytest.fixture()
def transport(handler):
    return httpx.MockTransport(handler)


@pytest.fixture()
def config():
    return External(api_url=API_URL, auth_info=Token('tkn'))


@pytest.fixture()
def client(config, transport):
    with KubeClient(config, transport=transport) as client:
        yield client


@pytest.fixture()
def ca_pem():
    return SAMPLE_MINIKUBE_CA
