"""
Authentication-related structures.

The client needs a minimally sufficient set of information to talk to the API:

* the API server's base URL (scheme, host, port);
* the SSL certificate authority to trust, if not a system-wide one;
* the authentication method (only ``Authorization: Bearer <token>`` for now).

It is either specified explicitly (`External`), or is taken from the pod's
environment and the mounted service account files (`InCluster`).

The other authentication methods (client certificates, basic auth) are
declared so that the configs can express them, but they are not supported
by the client yet: selecting them fails loudly at the point of use,
instead of sending the requests without authentication.

.. seealso::
    :mod:`kubeclient.clients.login` for the bootstrapping of these structures.
"""
import dataclasses
from typing import NewType, Optional

# PEM-encoded certificate(s) of a certificate authority, already verified to be parseable.
Certificate = NewType('Certificate', str)


class AuthConfig:
    """ A base class for all supported and unsupported authentication methods. """


@dataclasses.dataclass(frozen=True)
class Token(AuthConfig):
    """
    A bearer token, sent as ``Authorization: Bearer <token>`` exactly as is.
    """
    token: str

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(token=<hidden>)'


@dataclasses.dataclass(frozen=True)
class ClientCertificate(AuthConfig):
    """ The client certificate authentication. Not implemented yet. """


@dataclasses.dataclass(frozen=True)
class BasicAuth(AuthConfig):
    """ The username/password authentication. Not implemented yet. """


class ClientConfig:
    """ A base class for the ways to connect to the API. """


@dataclasses.dataclass(frozen=True)
class InCluster(ClientConfig):
    """
    Connect from inside the cluster: the environment variables & mounted files
    of the pod's service account supply everything.
    """


@dataclasses.dataclass(frozen=True)
class External(ClientConfig):
    """
    A single endpoint with specific credentials and connection flags to use.
    """
    api_url: str  # e.g. "https://localhost:443"
    auth_info: AuthConfig
    ca: Optional[Certificate] = None
    insecure: bool = False
    default_namespace: Optional[str] = None
