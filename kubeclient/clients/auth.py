import base64
import ssl
from typing import Optional, Union

import httpx

from kubeclient.clients import errors
from kubeclient.structs import configuration, credentials

PEM_MARKER = '-----BEGIN '


def decode_to_pem(data: Union[str, bytes]) -> str:
    """
    Get the PEM text of certificates either as is, or from a base64-encoded PEM.

    Kubeconfigs keep the inline certificates base64-encoded (the ``*-data``
    fields). The files and the pods' mounted secrets keep them as PEM,
    and are parsed with `parse_certificate` directly, not via this function.
    """
    if isinstance(data, str) and data.startswith(PEM_MARKER):
        return data
    elif isinstance(data, bytes) and data.startswith(PEM_MARKER.encode('ascii')):
        return data.decode('ascii')
    else:
        return base64.b64decode(data).decode('ascii')


def parse_certificate(data: Union[str, bytes]) -> credentials.Certificate:
    """
    Verify that the PEM text contains the parseable CA certificate(s).

    Anything before the first certificate (comments, blank lines) is dropped,
    as the PEM readers (``openssl`` included) do.

    Raises `ssl.SSLError` or `ValueError` if the data are not usable.
    """
    text = data.decode('ascii') if isinstance(data, bytes) else data
    start = text.find(PEM_MARKER)
    if start < 0:
        raise ValueError("No PEM certificates found.")
    pem = text[start:]
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.load_verify_locations(cadata=pem)
    return credentials.Certificate(pem)


def parse_certificate_data(data: Union[str, bytes]) -> credentials.Certificate:
    """ Same as `parse_certificate`, but for the base64-encoded inline data. """
    return parse_certificate(decode_to_pem(data))


def make_ssl_context(
        *,
        ca: Optional[credentials.Certificate] = None,
        insecure: bool = False,
) -> ssl.SSLContext:
    # The CA is added as an extra trusted root, the system-wide ones remain trusted.
    context = ssl.create_default_context(cadata=ca)
    if insecure:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


def make_http_client(
        info: credentials.External,
        *,
        settings: configuration.ClientSettings,
        transport: Optional[httpx.BaseTransport] = None,
) -> httpx.Client:
    """
    Build the HTTP client for the specific connection info.

    The client is configured once: the certificate authority, the TLS
    verification, the timeouts, the self-identification. The authentication
    is added per request (see `get_authorization`), not here.
    """
    try:
        context = make_ssl_context(ca=info.ca, insecure=info.insecure)
    except (ssl.SSLError, ValueError) as e:
        raise errors.InvalidCertError(e) from e

    try:
        url = httpx.URL(info.api_url)
        if url.scheme not in ['http', 'https'] or not url.host:
            raise ValueError(f"The API URL must be an absolute http(s) URL, got {info.api_url!r}.")

        networking = settings.networking
        timeout = (httpx.Timeout(networking.request_timeout) if networking.connect_timeout is None else
                   httpx.Timeout(networking.request_timeout, connect=networking.connect_timeout))

        return httpx.Client(
            verify=context,
            timeout=timeout,
            headers={'User-Agent': settings.user_agent},
            transport=transport,
        )
    except (httpx.InvalidURL, ValueError, TypeError) as e:
        raise errors.ClientBuildingError(e) from e


def get_authorization(auth_info: credentials.AuthConfig) -> str:
    """
    Render the value of the ``Authorization`` header for the auth method.

    The token is used exactly as is: no trimming, no escaping.
    """
    if isinstance(auth_info, credentials.Token):
        return f'Bearer {auth_info.token}'
    elif isinstance(auth_info, (credentials.ClientCertificate, credentials.BasicAuth)):
        raise NotImplementedError(f"{auth_info.__class__.__name__} authentication "
                                  f"is not implemented yet.")
    else:
        raise TypeError(f"Unsupported authentication config: {auth_info!r}")
