"""
K8s API errors.

The underlying client library (now, ``httpx``) can be replaced in the future.
We cannot rely on embedding its exceptions all over the code of the client.
Hence, we have our own hierarchy of exceptions for K8s API errors.

There are three disjoint hierarchies, one per stage:

* `ClientInitError` -- when the client is constructed (bootstrapping).
* `RequestError` -- when a request is performed and its response is decoded.
* `KubeconfigParseError` -- when a kubeconfig is interpreted into a config.

All of them are terminal: nothing is retried, nothing falls back to
other authentication methods. The original errors of the client library
and of the OS are chained as the causes of our own specialised errors --
for better explainability of errors in the stack traces.

Some selected HTTP statuses are made into their own classes, so that they
could be intercepted and handled by the callers (e.g. 404 on deletion).
Unlike many other clients, the HTTP errors do not parse the response's body:
the raw response is exposed as is, and the callers can interpret it if needed.
"""
from typing import Optional

import httpx

#
# Construction-time errors.
#


class ClientInitError(Exception):
    """ Raised when the client cannot be constructed. """


class EnvVarError(ClientInitError):
    """ A required environment variable is absent or unusable. """

    def __init__(self, name: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"Environment variable {name!r} is not available.", name, cause)
        self.name = name
        self.cause = cause


class IoError(ClientInitError):
    """ A required file cannot be read. """

    def __init__(self, path: str, cause: Optional[Exception] = None) -> None:
        super().__init__(f"File {path!r} cannot be read: {cause}", path, cause)
        self.path = path
        self.cause = cause


class InvalidCertError(ClientInitError):
    """ The certificate authority's data are not a valid certificate. """


class ClientBuildingError(ClientInitError):
    """ The underlying HTTP client cannot be built with the given settings. """


#
# Request-time errors.
#


class RequestError(Exception):
    """ A base class for all errors of the individual requests. """


class TransportError(RequestError):
    """ No response was received: a network, TLS, or timeout failure. """


class MiscError(RequestError):
    """ The request cannot be built: e.g. an invalid URL, or non-ASCII headers. """


class SerdeError(RequestError):
    """ The request body cannot be encoded, or the response body cannot be decoded. """


class HttpError(RequestError):
    """
    A response was received, but its HTTP status indicates a failure.

    The response is exposed as is: its body is not parsed, so it can be
    anything: a K8s ``Status`` object, an HTML page of a proxy, or nothing.
    """

    def __init__(self, response: httpx.Response) -> None:
        super().__init__(f"{response.status_code} {response.reason_phrase}".strip())
        self._response = response

    @property
    def response(self) -> httpx.Response:
        return self._response

    @property
    def status(self) -> int:
        return self._response.status_code


class HttpUnauthorizedError(HttpError):
    pass


class HttpForbiddenError(HttpError):
    pass


class HttpNotFoundError(HttpError):
    pass


class HttpConflictError(HttpError):
    pass


def check_response(
        response: httpx.Response,
) -> None:
    """
    Check for non-2xx statuses, and raise with the raw response attached.

    The body is neither read as JSON nor interpreted: an error status
    is enough to classify the response as a failed one.
    """
    if not response.is_success:
        cls = (
            HttpUnauthorizedError if response.status_code == 401 else
            HttpForbiddenError if response.status_code == 403 else
            HttpNotFoundError if response.status_code == 404 else
            HttpConflictError if response.status_code == 409 else
            HttpError
        )
        raise cls(response)


#
# Kubeconfig interpretation errors.
#


class KubeconfigParseError(Exception):
    """ Raised when a kubeconfig cannot be turned into a client config. """
    template = "The kubeconfig cannot be interpreted: {reference!r}"

    def __init__(self, reference: Optional[str], details: Optional[str] = None) -> None:
        message = self.template.format(reference=reference)
        super().__init__(message if details is None else f"{message}: {details}")
        self.reference = reference
        self.details = details


class MissingContextError(KubeconfigParseError):
    template = "No such context in the kubeconfig: {reference!r}"


class MissingUserError(KubeconfigParseError):
    template = "No such user in the kubeconfig: {reference!r}"


class MissingClusterError(KubeconfigParseError):
    template = "No such cluster in the kubeconfig: {reference!r}"


class MissingFileError(KubeconfigParseError):
    template = "The file referenced in the kubeconfig cannot be read: {reference!r}"


class InvalidCertificateError(KubeconfigParseError):
    template = "The certificate authority in the kubeconfig is invalid: {reference!r}"


class UnsupportedAuthError(KubeconfigParseError):
    template = "The authentication method of the user is not supported yet: {reference!r}"


class InvalidKubeconfigError(KubeconfigParseError):
    template = "The kubeconfig has a malformed entry: {reference!r}"
