"""
All the structures coming from/to the Kubernetes API.

The raw structures are detailed to the per-field level (``TypedDict``)
as far as the client itself uses them. All other fields are accepted
and preserved at runtime, but not declared for type-checking.

The typed objects are dicts with a few convenience properties: they are
sent to the API as is (JSON-serialised), and the API responses are wrapped
into them without copying or validation of the individual fields.

Every kind class declares its API coordinates when it is defined::

    class Deployment(KubeObject, group='apps', version='v1', plural='deployments'):
        pass

After that, the class carries its resource descriptor (``Deployment.resource``),
the same values as plain constants (``KIND_NAME``, ``API_GROUP``,
``API_VERSION``), and its own list container (``Deployment.List``) --
so that the client can build the URLs and decode the responses
without having an object in hand.
"""
import collections.abc
import dataclasses
from typing import Any, ClassVar, Dict, Generic, Iterator, List, Mapping, \
                   Optional, Type, TypeVar, cast

from typing_extensions import TypedDict

from kubeclient.structs import references

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    generateName: str
    namespace: str
    labels: Labels
    annotations: Annotations
    finalizers: List[str]
    resourceVersion: str
    generation: int
    deletionTimestamp: str
    creationTimestamp: str
    selfLink: str


class RawListMeta(TypedDict, total=False):
    resourceVersion: str
    selfLink: str
    # "continue" is a reserved keyword, so it is declared only at runtime.


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


class RawList(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawListMeta
    items: List[RawBody]


class KubeObject(Dict[str, Any]):
    """
    A base class for all kinds of resources: a dict with the API coordinates.

    The class-level attributes are set only for the subclasses which declare
    the API coordinates (``group``, ``version``, ``plural``) in the class
    definition. Intermediate base classes can omit them.
    """

    resource: ClassVar[references.Resource]
    KIND_NAME: ClassVar[str]
    API_GROUP: ClassVar[str]
    API_VERSION: ClassVar[str]
    List: ClassVar[Type["ObjectList[Any]"]]

    def __init_subclass__(
            cls,
            *,
            group: Optional[str] = None,
            version: Optional[str] = None,
            plural: Optional[str] = None,
            kind: Optional[str] = None,
            namespaced: Optional[bool] = None,
            **kwargs: Any,
    ) -> None:
        super().__init_subclass__(**kwargs)
        if plural is None and group is None and version is None:
            return
        if plural is None or group is None or version is None:
            raise TypeError(f"{cls.__name__} needs all of group, version, plural declared.")

        cls.resource = references.Resource(group, version, plural,
                                           kind=kind or cls.__name__, namespaced=namespaced)
        cls.KIND_NAME = plural
        cls.API_GROUP = group
        cls.API_VERSION = version
        cls.List = cast(Type["ObjectList[Any]"], type(f'{cls.__name__}List', (ObjectList,), {
            '__module__': cls.__module__,
            '__qualname__': f'{cls.__qualname__}List',
            'item_cls': cls,
        }))

    @classmethod
    def from_raw(cls, raw: object) -> "KubeObject":
        if not isinstance(raw, collections.abc.Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(raw).__name__}.")
        return cls(raw)

    @property
    def metadata(self) -> RawMeta:
        return cast(RawMeta, self.setdefault('metadata', {}))

    @property
    def name(self) -> Optional[str]:
        return self.get('metadata', {}).get('name')

    @property
    def namespace(self) -> references.Namespace:
        return self.get('metadata', {}).get('namespace')

    @property
    def labels(self) -> Labels:
        return self.get('metadata', {}).get('labels', {})

    @property
    def annotations(self) -> Annotations:
        return self.get('metadata', {}).get('annotations', {})

    @property
    def spec(self) -> Mapping[str, Any]:
        return self.get('spec', {})

    @property
    def status(self) -> Mapping[str, Any]:
        return self.get('status', {})


_O = TypeVar('_O', bound=KubeObject)


@dataclasses.dataclass(frozen=True)
class ObjectList(Generic[_O]):
    """
    A generic container for multi-object responses: ``{kind, items, metadata}``.

    Every kind has its own subclass (e.g. ``Pod.List``), which knows
    which class to wrap the items into.
    """
    items: List[_O]
    metadata: RawListMeta = dataclasses.field(default_factory=lambda: cast(RawListMeta, {}))
    api_version: Optional[str] = None
    kind: Optional[str] = None

    item_cls: ClassVar[Type[KubeObject]] = KubeObject

    def __iter__(self) -> Iterator[_O]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @classmethod
    def from_raw(cls, raw: object) -> "ObjectList[Any]":
        if not isinstance(raw, collections.abc.Mapping):
            raise TypeError(f"{cls.__name__} expects a JSON object, got {type(raw).__name__}.")

        # K8s sends `"items": null` for some empty lists, so it is the same as absent.
        raw_items = raw.get('items') or []
        if not isinstance(raw_items, list):
            raise TypeError(f"{cls.__name__} expects a list of items, got {raw_items!r}.")

        # The items in the lists have no kind & apiVersion -- restore them from the list.
        kind: Optional[str] = raw.get('kind')
        api_version: Optional[str] = raw.get('apiVersion')
        items: List[KubeObject] = []
        for raw_item in raw_items:
            item = cls.item_cls.from_raw(raw_item)
            if kind is not None:
                item.setdefault('kind', kind[:-4] if kind.endswith('List') else kind)
            if api_version is not None:
                item.setdefault('apiVersion', api_version)
            items.append(item)

        metadata = raw.get('metadata') or {}
        if not isinstance(metadata, collections.abc.Mapping):
            raise TypeError(f"{cls.__name__} expects the list metadata as an object.")

        return cls(
            items=cast(List[Any], items),
            metadata=cast(RawListMeta, dict(metadata)),
            api_version=api_version,
            kind=kind,
        )
