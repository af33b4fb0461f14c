"""
The main module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from kubeclient.clients.api import (
    KubeClient,
)
from kubeclient.clients.auth import (
    get_authorization,
)
from kubeclient.clients.errors import (
    ClientInitError,
    EnvVarError,
    IoError,
    InvalidCertError,
    ClientBuildingError,
    RequestError,
    TransportError,
    HttpError,
    HttpUnauthorizedError,
    HttpForbiddenError,
    HttpNotFoundError,
    HttpConflictError,
    SerdeError,
    MiscError,
    KubeconfigParseError,
    MissingContextError,
    MissingUserError,
    MissingClusterError,
    MissingFileError,
    InvalidCertificateError,
    UnsupportedAuthError,
    InvalidKubeconfigError,
)
from kubeclient.clients.login import (
    login_in_cluster,
    resolve_from_kubeconfig,
    detect_config,
    join_host_port,
)
from kubeclient.engines.loggers import (
    LogFormat,
    ObjectLogger,
    make_ref,
    configure as configure_logging,
)
from kubeclient.structs.bodies import (
    KubeObject,
    ObjectList,
)
from kubeclient.structs.configuration import (
    ClientSettings,
    NetworkingSettings,
)
from kubeclient.structs.credentials import (
    AuthConfig,
    Token,
    ClientCertificate,
    BasicAuth,
    ClientConfig,
    InCluster,
    External,
    Certificate,
)
from kubeclient.structs.kubeconfig import (
    Kubeconfig,
    read_kubeconfig,
    parse_kubeconfig,
)
from kubeclient.structs.references import (
    Resource,
    build_path,
)
from kubeclient.utilities.versions import (
    version as __version__,
)

__all__ = [
    'KubeClient',
    'get_authorization',
    'ClientInitError',
    'EnvVarError',
    'IoError',
    'InvalidCertError',
    'ClientBuildingError',
    'RequestError',
    'TransportError',
    'HttpError',
    'HttpUnauthorizedError',
    'HttpForbiddenError',
    'HttpNotFoundError',
    'HttpConflictError',
    'SerdeError',
    'MiscError',
    'KubeconfigParseError',
    'MissingContextError',
    'MissingUserError',
    'MissingClusterError',
    'MissingFileError',
    'InvalidCertificateError',
    'UnsupportedAuthError',
    'InvalidKubeconfigError',
    'login_in_cluster',
    'resolve_from_kubeconfig',
    'detect_config',
    'join_host_port',
    'LogFormat',
    'ObjectLogger',
    'make_ref',
    'configure_logging',
    'KubeObject',
    'ObjectList',
    'ClientSettings',
    'NetworkingSettings',
    'AuthConfig',
    'Token',
    'ClientCertificate',
    'BasicAuth',
    'ClientConfig',
    'InCluster',
    'External',
    'Certificate',
    'Kubeconfig',
    'read_kubeconfig',
    'parse_kubeconfig',
    'Resource',
    'build_path',
]
