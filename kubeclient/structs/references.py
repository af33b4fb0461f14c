import dataclasses
from typing import Iterator, NewType, Optional

# A specific really existing addressable namespace (at least, the one assumed to be so).
# Made as a NewType for stricter type-checking to avoid collisions with other strings.
NamespaceName = NewType('NamespaceName', str)

# A namespace reference usable in the API calls. `None` means cluster-wide API calls.
Namespace = Optional[NamespaceName]

# The API group of the legacy core API, e.g. for pods, secrets, namespaces.
# K8s itself uses an empty string for it in the API documents; both are accepted.
CORE_GROUPS = frozenset({'core', ''})


def build_path(
        group: str,
        version: str,
        kind_name: str,
        namespace: Optional[str] = None,
        name: Optional[str] = None,
) -> str:
    """
    Build the API path of a resource, relative to the server's root.

    The core resources (pods, secrets, etc.) live under ``/api/<version>``,
    all other resources under ``/apis/<group>/<version>``. The namespace and
    the object's name are added only when specified::

        >>> build_path('core', 'v1', 'pods', 'default', 'x')
        '/api/v1/namespaces/default/pods/x'
        >>> build_path('apps', 'v1', 'deployments')
        '/apis/apps/v1/deployments'

    The namespace & name are not encoded: they are expected to be valid
    K8s names already. Empty strings are rejected, since they would silently
    turn a namespaced or named path into a cluster-wide or a list one.
    """
    if namespace is not None and not namespace:
        raise ValueError("The namespace must be a non-empty string or None.")
    if name is not None and not name:
        raise ValueError("The object name must be a non-empty string or None.")

    parts = ['api', version] if group in CORE_GROUPS else ['apis', group, version]
    if namespace is not None:
        parts.extend(['namespaces', namespace])
    parts.append(kind_name)
    if name is not None:
        parts.append(name)
    return '/' + '/'.join(parts)


@dataclasses.dataclass(frozen=True)
class Resource:
    """
    A reference to a very specific built-in or custom resource kind.

    It is used to form the K8s API URLs. Generally, K8s API only needs
    an API group, an API version, and a plural name of the resource.
    The kind is remembered for informational purposes and for name lookups.
    """

    group: str
    """
    The resource's API group; e.g. ``"apps"``, ``"batch"``.
    For Core v1 API resources, ``"core"``.
    """

    version: str
    """
    The resource's API version; e.g. ``"v1"``, ``"v1beta1"``, etc.
    """

    plural: str
    """
    The resource's plural name; e.g. ``"pods"``, ``"deployments"``.
    It is used as an API endpoint, together with API group & version.
    """

    kind: Optional[str] = None
    """
    The resource's kind (as in YAML files); e.g. ``"Pod"``, ``"Deployment"``.
    """

    namespaced: Optional[bool] = None
    """
    Whether the resource is namespaced (``True``) or cluster-scoped (``False``).
    """

    def __repr__(self) -> str:
        return f'{self.plural}.{self.version}.{self.group}'

    # Mostly for tests and the CLI: `group, version, plural = resource`.
    def __iter__(self) -> Iterator[str]:
        return iter((self.group, self.version, self.plural))

    @property
    def name(self) -> str:
        return self.plural if self.group in CORE_GROUPS else f'{self.plural}.{self.group}'

    @property
    def api_version(self) -> str:
        # As used in the bodies' "apiVersion" fields: no group for the core API.
        return self.version if self.group in CORE_GROUPS else f'{self.group}/{self.version}'

    def get_path(
            self,
            *,
            namespace: Namespace = None,
            name: Optional[str] = None,
    ) -> str:
        return build_path(self.group, self.version, self.plural, namespace=namespace, name=name)
