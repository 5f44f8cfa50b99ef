"""
All the structures coming from the Kubernetes API.

For strict type-checking, they are detailed to the per-field level
(e.g. `TypedDict` instead of just ``Mapping[Any, Any]``), as used
by the listing core. The objects can have arbitrary fields at runtime,
which are not declared in the type definitions at type-checking time.

Everything marked "raw" is a plain unwrapped unprocessed data as JSON-decoded
from Kubernetes API. All non-used payload falls into `Any`.
"""
from typing import Any, List, Mapping, Optional

from typing_extensions import Literal, TypedDict

Labels = Mapping[str, str]
Annotations = Mapping[str, str]


class RawMeta(TypedDict, total=False):
    uid: str
    name: str
    namespace: str
    labels: Labels
    annotations: Annotations
    resourceVersion: str
    creationTimestamp: str


class RawBody(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawMeta
    spec: Mapping[str, Any]
    status: Mapping[str, Any]


class RawListMeta(TypedDict, total=False):
    resourceVersion: str


class RawList(TypedDict, total=False):
    apiVersion: str
    kind: str
    metadata: RawListMeta
    items: List[RawBody]


# The declared column types, as per the OpenAPI data types; only some are sortable.
# https://kubernetes.io/docs/reference/using-api/api-concepts/#receiving-resources-as-tables
ColumnType = Literal['integer', 'number', 'string', 'boolean', 'date']


class RawColumnDefinition(TypedDict, total=False):
    name: str
    type: str
    format: str
    description: str
    priority: int


class RawTableRow(TypedDict, total=False):
    cells: List[Any]
    conditions: List[Mapping[str, Any]]
    object: Optional[Mapping[str, Any]]


# https://kubernetes.io/docs/reference/generated/kubernetes-api/v1.29/#table-v1-meta
class RawTable(TypedDict, total=False):
    apiVersion: str
    kind: Literal['Table']
    metadata: RawListMeta
    columnDefinitions: List[RawColumnDefinition]
    rows: List[RawTableRow]
