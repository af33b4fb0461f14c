"""
Bootstrapping of the connection configs: in-cluster and from kubeconfigs.

Both ways end up with the same explicit config (`credentials.External`),
which is then used to construct the client. The in-cluster way is only
a shortcut to build such an explicit config from the pod's environment.

Authentication capabilities are limited to keep the code short & simple:
only the bearer tokens are supported. No sophisticated multi-step token
retrieval (auth-providers, exec-plugins) is performed.

.. seealso::
    :mod:`kubeclient.structs.credentials` and :mod:`kubeclient.structs.kubeconfig`.
"""
import logging
import os
import ssl
from typing import Optional

from kubeclient.clients import auth, errors
from kubeclient.structs import credentials, kubeconfig

logger = logging.getLogger(__name__)

# As per https://kubernetes.io/docs/tasks/run-application/access-api-from-pod/
INCLUSTER_HOST_ENV = 'KUBERNETES_SERVICE_HOST'
INCLUSTER_PORT_ENV = 'KUBERNETES_SERVICE_PORT'
INCLUSTER_TOKEN_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/token'
INCLUSTER_CA_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/ca.crt'
INCLUSTER_NAMESPACE_PATH = '/var/run/secrets/kubernetes.io/serviceaccount/namespace'


def join_host_port(host: str, port: str) -> str:
    """
    Build the API's base URL from the host & port, IPv6-aware.

    IPv6 literals (with colons, or with a ``%`` zone index) are bracketed.
    """
    if ':' in host or '%' in host:
        return f'https://[{host}]:{port}'
    else:
        return f'https://{host}:{port}'


def _getenv(name: str) -> str:
    try:
        return os.environ[name]
    except KeyError as e:
        raise errors.EnvVarError(name, e) from e


def _read_file(path: str) -> str:
    try:
        with open(path, encoding='utf-8') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise errors.IoError(path, e) from e


def login_in_cluster() -> credentials.External:
    """
    Build the connection config from the pod's service account.

    The sources are checked in a strict order, and the first failed one
    is reported: the host variable, the port variable, the token file,
    the CA file. Nothing is read after the first failure.

    The namespace file is optional: it is only used as the default namespace.
    """
    host = _getenv(INCLUSTER_HOST_ENV)
    port = _getenv(INCLUSTER_PORT_ENV)
    token = _read_file(INCLUSTER_TOKEN_PATH).strip()
    ca_pem = _read_file(INCLUSTER_CA_PATH)

    try:
        ca = auth.parse_certificate(ca_pem)
    except (ssl.SSLError, ValueError) as e:
        raise errors.InvalidCertError(e) from e

    namespace: Optional[str] = None
    if os.path.exists(INCLUSTER_NAMESPACE_PATH):
        namespace = _read_file(INCLUSTER_NAMESPACE_PATH).strip() or None

    logger.debug("Client is configured in cluster with a service account.")
    return credentials.External(
        api_url=join_host_port(host, port),
        auth_info=credentials.Token(token),
        ca=ca,
        default_namespace=namespace,
    )


def get_auth_config(name: Optional[str], user: kubeconfig.AuthInfo) -> credentials.AuthConfig:
    """
    Interpret the kubeconfig's user into a supported authentication method.

    Only the inline tokens are supported. Any other method is reported
    as such -- instead of silently connecting without authentication.
    """
    if user.token:
        return credentials.Token(user.token)
    elif user.token_file:
        raise errors.UnsupportedAuthError(name, "tokenFile")
    elif (user.client_certificate or user.client_certificate_data or
          user.client_key or user.client_key_data):
        raise errors.UnsupportedAuthError(name, "client certificates")
    elif user.username or user.password:
        raise errors.UnsupportedAuthError(name, "basic auth")
    else:
        raise errors.UnsupportedAuthError(name, "no authentication method is specified")


def get_ca(cluster: kubeconfig.Cluster) -> Optional[credentials.Certificate]:
    """
    Get the cluster's CA, either inline (base64-encoded), or from a PEM file.
    """
    if cluster.certificate_authority_data:
        try:
            return auth.parse_certificate_data(cluster.certificate_authority_data)
        except (ssl.SSLError, ValueError) as e:
            raise errors.InvalidCertificateError('<inline certificate-authority-data>',
                                                 str(e)) from e
    elif cluster.certificate_authority:
        path = os.path.expanduser(cluster.certificate_authority)
        try:
            with open(path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise errors.MissingFileError(path, str(e)) from e
        try:
            return auth.parse_certificate(data)
        except (ssl.SSLError, ValueError) as e:
            raise errors.InvalidCertificateError(path, str(e)) from e
    else:
        return None


def resolve_from_kubeconfig(
        config: kubeconfig.Kubeconfig,
        context: Optional[str] = None,
) -> credentials.External:
    """
    Turn a kubeconfig into the connection config of a specific context.

    The context is either explicitly specified, or the current one.
    The cluster and the user are taken as referenced by that context.
    """
    context_name = context if context is not None else config.current_context
    found_context = config.find_context(context_name)
    if found_context is None:
        raise errors.MissingContextError(context_name)

    cluster = config.find_cluster(found_context.cluster)
    if cluster is None:
        raise errors.MissingClusterError(found_context.cluster)

    user = config.find_user(found_context.user)
    if user is None:
        raise errors.MissingUserError(found_context.user)

    if not cluster.server:
        raise errors.InvalidKubeconfigError(found_context.cluster, "the cluster has no server")

    auth_info = get_auth_config(found_context.user, user)
    ca = get_ca(cluster)

    logger.debug(f"Client is configured via kubeconfig with context {context_name!r}.")
    return credentials.External(
        api_url=cluster.server,
        auth_info=auth_info,
        ca=ca,
        insecure=bool(cluster.insecure_skip_tls_verify),
        default_namespace=found_context.namespace,
    )


def detect_config(
        *,
        kubeconfig_path: Optional[str] = None,
        context: Optional[str] = None,
) -> credentials.ClientConfig:
    """
    Detect the most suitable config: in-cluster if inside a pod, else kubeconfig.

    An explicit kubeconfig path or context always means the kubeconfig.
    """
    if kubeconfig_path is None and context is None and os.environ.get(INCLUSTER_HOST_ENV):
        return credentials.InCluster()
    config = kubeconfig.read_kubeconfig(kubeconfig_path)
    return resolve_from_kubeconfig(config, context)
