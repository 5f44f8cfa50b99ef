"""
A runtime registry of the list kinds known to the listing core.

The listing core is generic: it is addressed with a kind reference only,
and has no knowledge of the kinds' shapes. Yet, the callers expect
the lists of specific kinds with the specific item classes in them.

The registry maps every list kind to a factory of its empty list.
The list itself knows how to convert the raw bodies to its items,
so that every kind is explicit and checkable on its own, while the core
only dispatches to them dynamically.
"""
from typing import Any, Callable, Dict, Generic, Iterator, List, Mapping, \
                   MutableMapping, Optional, Type, TypeVar

from ktables.structs import bodies, references

_T = TypeVar('_T')


class UnregisteredKindError(LookupError):
    """ Raised when a list is requested for a kind unknown to the registry. """


class Body(Mapping[str, Any]):
    """
    A read-only view over the raw body of an object, with some shortcuts.

    The raw body is kept as is, so the whole content is available
    via the mapping protocol: ``body['spec']['displayName']``.
    """

    def __init__(self, __src: bodies.RawBody) -> None:
        super().__init__()
        self._src = __src

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.namespace or ""}/{self.name}>'

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Body):
            return type(self) is type(other) and self._src == other._src
        return NotImplemented

    def __len__(self) -> int:
        return len(self._src)

    def __iter__(self) -> Iterator[str]:
        return iter(self._src)

    def __getitem__(self, item: str) -> Any:
        return self._src[item]  # type: ignore

    @property
    def raw(self) -> bodies.RawBody:
        return self._src

    @property
    def metadata(self) -> bodies.RawMeta:
        return self._src.get('metadata', {})

    @property
    def name(self) -> Optional[str]:
        return self.metadata.get('name')

    @property
    def namespace(self) -> Optional[str]:
        return self.metadata.get('namespace')

    @property
    def labels(self) -> bodies.Labels:
        return self.metadata.get('labels', {})

    @property
    def spec(self) -> Mapping[str, Any]:
        return self._src.get('spec', {})

    @property
    def status(self) -> Mapping[str, Any]:
        return self._src.get('status', {})


class ObjectList(Generic[_T]):
    """
    A list of objects of one specific kind, as returned to the callers.

    The subclasses define the item classes by implementing :meth:`parse`.
    """

    gvk: references.GroupVersionKind
    items: List[_T]
    resource_version: Optional[str]

    def __init__(self, gvk: references.GroupVersionKind) -> None:
        super().__init__()
        self.gvk = gvk.as_list()
        self.items = []
        self.resource_version = None

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {self.gvk.kind} ({len(self.items)} items)>'

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[_T]:
        return iter(self.items)

    def parse(self, raw: bodies.RawBody) -> _T:
        raise NotImplementedError

    def append(self, raw: bodies.RawBody) -> None:
        self.items.append(self.parse(raw))


class RawObjectList(ObjectList[bodies.RawBody]):
    def parse(self, raw: bodies.RawBody) -> bodies.RawBody:
        return raw


class BodyList(ObjectList[Body]):
    item_cls: Type[Body] = Body

    def parse(self, raw: bodies.RawBody) -> Body:
        return self.item_cls(raw)


ListFactory = Callable[[references.GroupVersionKind], ObjectList[Any]]


class KindRegistry:
    """
    A mapping of list kinds to the factories of their empty lists.

    The kinds are registered and looked up by their list kinds (``CFAppList``),
    but the item kinds (``CFApp``) are accepted for convenience too.
    """

    def __init__(self) -> None:
        super().__init__()
        self._factories: MutableMapping[references.GroupVersionKind, ListFactory] = {}

    def __contains__(self, gvk: object) -> bool:
        return isinstance(gvk, references.GroupVersionKind) and gvk.as_list() in self._factories

    def register(self, gvk: references.GroupVersionKind, factory: ListFactory) -> None:
        self._factories[gvk.as_list()] = factory

    def copy(self) -> "KindRegistry":
        registry = KindRegistry()
        registry._factories.update(self._factories)
        return registry

    def new_list(self, gvk: references.GroupVersionKind) -> ObjectList[Any]:
        try:
            factory = self._factories[gvk.as_list()]
        except KeyError:
            raise UnregisteredKindError(f"The kind is not registered: {gvk}") from None
        return factory(gvk.as_list())


# The platform's resource kinds, as projected from the user-facing concepts (apps, orgs, spaces...).
KORIFI_GROUP = 'korifi.cloudfoundry.org'
KORIFI_VERSION = 'v1alpha1'
KORIFI_KINDS = [
    'CFApp', 'CFBuild', 'CFDomain', 'CFOrg', 'CFPackage', 'CFProcess', 'CFRoute',
    'CFSecurityGroup', 'CFServiceBinding', 'CFServiceBroker', 'CFServiceInstance',
    'CFServiceOffering', 'CFServicePlan', 'CFSpace', 'CFTask',
]


def _make_body_list_cls(kind: str) -> Type[BodyList]:
    item_cls = type(kind, (Body,), {'__module__': __name__})
    list_cls = type(f'{kind}List', (BodyList,), {'__module__': __name__, 'item_cls': item_cls})
    return list_cls


KORIFI_LIST_CLASSES: Dict[str, Type[BodyList]] = {
    kind: _make_body_list_cls(kind) for kind in KORIFI_KINDS
}


def default_registry() -> KindRegistry:
    registry = KindRegistry()
    for kind, list_cls in KORIFI_LIST_CLASSES.items():
        gvk = references.GroupVersionKind(KORIFI_GROUP, KORIFI_VERSION, f'{kind}List')
        registry.register(gvk, list_cls)
    return registry
