"""
The kubeconfig structures, as read from the YAML files.

Only the fields relevant to the client are declared. All other fields
(e.g. ``auth-provider``, ``exec``, ``extensions``) are ignored.

The structures are read-only: they are produced once from the parsed YAML
and then consumed by :func:`kubeclient.clients.login.resolve_from_kubeconfig`.

.. seealso::
    https://kubernetes.io/docs/concepts/configuration/organize-cluster-access-kubeconfig/
"""
import collections.abc
import dataclasses
import os
import typing
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar, Union

import yaml

from kubeclient.clients import errors

_T = TypeVar('_T')

DEFAULT_PATH = '~/.kube/config'


def _key(key: str) -> Any:
    """ Map a dataclass field to a differently named YAML key. """
    return dataclasses.field(default=None, metadata={'key': key})


@dataclasses.dataclass(frozen=True)
class Preferences:
    colors: Optional[bool] = None


@dataclasses.dataclass(frozen=True)
class Cluster:
    server: Optional[str] = None
    insecure_skip_tls_verify: Optional[bool] = _key('insecure-skip-tls-verify')
    certificate_authority: Optional[str] = _key('certificate-authority')
    certificate_authority_data: Optional[str] = _key('certificate-authority-data')


@dataclasses.dataclass(frozen=True)
class AuthInfo:

    # Client certificate authentication.
    client_certificate: Optional[str] = _key('client-certificate')
    client_certificate_data: Optional[str] = _key('client-certificate-data')
    client_key: Optional[str] = _key('client-key')
    client_key_data: Optional[str] = _key('client-key-data')

    # Token authentication.
    token: Optional[str] = None
    token_file: Optional[str] = _key('tokenFile')

    # Impersonation.
    impersonate: Optional[str] = _key('as')
    impersonate_groups: Optional[List[str]] = _key('as-groups')

    # Basic authentication.
    username: Optional[str] = None
    password: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Context:
    cluster: Optional[str] = None
    user: Optional[str] = None
    namespace: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class NamedCluster:
    name: str
    cluster: Cluster


@dataclasses.dataclass(frozen=True)
class NamedAuthInfo:
    name: str
    user: AuthInfo


@dataclasses.dataclass(frozen=True)
class NamedContext:
    name: str
    context: Context


@dataclasses.dataclass(frozen=True)
class Kubeconfig:
    clusters: Sequence[NamedCluster] = ()
    users: Sequence[NamedAuthInfo] = ()
    contexts: Sequence[NamedContext] = ()
    current_context: Optional[str] = None
    preferences: Preferences = Preferences()
    kind: Optional[str] = None
    api_version: Optional[str] = None

    def find_context(self, name: Optional[str]) -> Optional[Context]:
        return next((item.context for item in self.contexts if item.name == name), None)

    def find_cluster(self, name: Optional[str]) -> Optional[Cluster]:
        return next((item.cluster for item in self.clusters if item.name == name), None)

    def find_user(self, name: Optional[str]) -> Optional[AuthInfo]:
        return next((item.user for item in self.users if item.name == name), None)


def _expected_type(field: "dataclasses.Field[Any]") -> type:
    # Optional[X] -> X; List[X] -> list. Only the flat leaf structures are converted here.
    hint = next(arg for arg in typing.get_args(field.type) if arg is not type(None))
    return typing.get_origin(hint) or hint


def _convert(cls: Type[_T], raw: Any, *, where: str) -> _T:
    if raw is None:
        raw = {}
    if not isinstance(raw, collections.abc.Mapping):
        raise errors.InvalidKubeconfigError(where, "expected a mapping")
    kwargs: Dict[str, Any] = {}
    for field in dataclasses.fields(cls):
        key = field.metadata.get('key', field.name)
        value = raw.get(key)
        expected = _expected_type(field)
        if value is not None and not isinstance(value, expected):
            # E.g. `insecure-skip-tls-verify: "false"` would be truthy if taken as is.
            raise errors.InvalidKubeconfigError(where, f"{key} must be of type {expected.__name__}")
        kwargs[field.name] = value
    return cls(**kwargs)


def _convert_named(raw: Any, field: str, cls: Type[Any], *, where: str) -> Any:
    if not isinstance(raw, collections.abc.Mapping) or not raw.get('name'):
        raise errors.InvalidKubeconfigError(where, "expected a mapping with a name")
    return raw['name'], _convert(cls, raw.get(field), where=f"{where}/{raw['name']}")


def parse_kubeconfig(raw: Optional[Mapping[str, Any]]) -> Kubeconfig:
    """
    Convert the raw YAML-parsed kubeconfig into the typed structures.
    """
    raw = raw if raw is not None else {}
    if not isinstance(raw, collections.abc.Mapping):
        raise errors.InvalidKubeconfigError(None, "the root must be a mapping")

    clusters = []
    for item in raw.get('clusters') or []:
        name, cluster = _convert_named(item, 'cluster', Cluster, where='clusters')
        clusters.append(NamedCluster(name=name, cluster=cluster))

    users = []
    for item in raw.get('users') or []:
        name, user = _convert_named(item, 'user', AuthInfo, where='users')
        users.append(NamedAuthInfo(name=name, user=user))

    contexts = []
    for item in raw.get('contexts') or []:
        name, context = _convert_named(item, 'context', Context, where='contexts')
        contexts.append(NamedContext(name=name, context=context))

    return Kubeconfig(
        kind=raw.get('kind'),
        api_version=raw.get('apiVersion'),
        preferences=_convert(Preferences, raw.get('preferences'), where='preferences'),
        clusters=tuple(clusters),
        users=tuple(users),
        contexts=tuple(contexts),
        current_context=raw.get('current-context') or None,
    )


def get_default_paths() -> List[str]:
    """
    Get the kubeconfig paths as kubectl does: ``$KUBECONFIG`` or ``~/.kube/config``.
    """
    kubeconfig = os.environ.get('KUBECONFIG')
    paths = kubeconfig.split(os.pathsep) if kubeconfig else [DEFAULT_PATH]
    return [os.path.expanduser(path.strip()) for path in paths if path.strip()]


def read_kubeconfig(
        paths: Union[None, str, Iterable[str]] = None,
) -> Kubeconfig:
    """
    Read and merge one or more kubeconfig files.

    As prescribed by kubectl: if a file is absent or non-deserialisable,
    then fail. For the merged files, the first value of every named entry
    (and of the current context) wins; the later duplicates are ignored.
    """
    paths = get_default_paths() if paths is None else [paths] if isinstance(paths, str) else paths

    merged: Dict[str, Any] = {}
    entries: Dict[str, List[Any]] = {'clusters': [], 'users': [], 'contexts': []}
    for path in paths:

        try:
            with open(path, encoding='utf-8') as f:
                config = yaml.safe_load(f.read()) or {}
        except OSError as e:
            raise errors.MissingFileError(path, str(e)) from e
        except yaml.YAMLError as e:
            raise errors.InvalidKubeconfigError(path, str(e)) from e

        if not isinstance(config, collections.abc.Mapping):
            raise errors.InvalidKubeconfigError(path, "the root must be a mapping")

        for key in ['kind', 'apiVersion', 'preferences', 'current-context']:
            if merged.get(key) is None and config.get(key) is not None:
                merged[key] = config[key]

        # Malformed (e.g. unnamed) entries are passed through to fail in the parser.
        for key, items in entries.items():
            seen = {item.get('name') for item in items if isinstance(item, collections.abc.Mapping)}
            for item in config.get(key) or []:
                if not isinstance(item, collections.abc.Mapping) or item.get('name') not in seen:
                    items.append(item)

    merged.update(entries)
    return parse_kubeconfig(merged)
