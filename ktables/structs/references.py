import dataclasses
import urllib.parse
from typing import Iterator, List, Mapping, NewType, Optional

# A specific really existing addressable namespace (at least, the one assumed to be so).
# Made as a NewType for stricter type-checking to avoid collisions with other strings.
NamespaceName = NewType('NamespaceName', str)

# A namespace reference usable in the API calls. `None` means cluster-wide API calls.
Namespace = Optional[NamespaceName]


@dataclasses.dataclass(frozen=True)
class GroupVersionKind:
    """
    A reference to a resource kind as the callers know it: by its kind name.

    The listing core is usually addressed with the kinds of the lists
    (e.g. ``"CFAppList"``), as the Go-style clients do, but the item kinds
    (e.g. ``"CFApp"``) are accepted everywhere too.
    """

    group: str
    """
    The kind's API group; e.g. ``"korifi.cloudfoundry.org"``, ``"apps"``.
    For Core v1 API resources, an empty string: ``""``.
    """

    version: str
    """
    The kind's API version; e.g. ``"v1"``, ``"v1alpha1"``, etc.
    """

    kind: str
    """
    The kind's name as in YAML files; e.g. ``"CFAppList"``, ``"CFApp"``.
    """

    def __str__(self) -> str:
        return f'{self.api_version}, Kind={self.kind}'

    # Mostly for tests, to be used as `GroupVersionKind(*gvk)`.
    def __iter__(self) -> Iterator[str]:
        return iter((self.group, self.version, self.kind))

    @property
    def api_version(self) -> str:
        return f'{self.group}/{self.version}' if self.group else self.version

    @property
    def item_kind(self) -> str:
        """ The kind of the individual objects, with the ``List`` suffix stripped. """
        return self.kind[:-4] if self.kind.endswith('List') and len(self.kind) > 4 else self.kind

    @property
    def list_kind(self) -> str:
        return self.kind if self.kind.endswith('List') else f'{self.kind}List'

    def as_list(self) -> "GroupVersionKind":
        return dataclasses.replace(self, kind=self.list_kind)


@dataclasses.dataclass(frozen=True)
class Resource:
    """
    A reference to a very specific custom or built-in resource endpoint.

    It is used to form the K8s API URLs. Generally, K8s API only needs
    an API group, an API version, and a plural name of the resource.
    """

    group: str
    version: str
    plural: str
    namespaced: bool = True

    def __repr__(self) -> str:
        return f'{self.plural}.{self.version}.{self.group}'.strip('.')

    @property
    def api_version(self) -> str:
        return f'{self.group}/{self.version}' if self.group else self.version

    def get_url(
            self,
            *,
            server: Optional[str] = None,
            namespace: Namespace = None,
            params: Optional[Mapping[str, str]] = None,
    ) -> str:
        """
        Build a URL of the resource list to be used with K8s API.

        If the namespace is not set, a cluster-wide URL is returned.
        For cluster-scoped resources, the namespace is not allowed.

        Params go to the query parameters (``?param1=value1&param2=value2...``).
        """
        if not self.namespaced and namespace is not None:
            raise ValueError("Specific namespaces are not supported for cluster-scoped resources.")

        parts: List[Optional[str]] = [
            '/api' if self.group == '' and self.version == 'v1' else '/apis',
            self.group,
            self.version,
            'namespaces' if namespace is not None else None,
            namespace,
            self.plural,
        ]

        query = urllib.parse.urlencode(params, encoding='utf-8') if params else ''
        path = '/'.join([part for part in parts if part])
        url = path + ('?' if query else '') + query
        return url if server is None else server.rstrip('/') + '/' + url.lstrip('/')
