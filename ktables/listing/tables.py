import dataclasses
from typing import Any, Callable, List, Mapping, Sequence, Tuple

from ktables.listing import errors
from ktables.structs import bodies

# The column holding the objects' identifiers, as rendered by K8s API for every resource kind.
NAME_COLUMN = 'Name'

SortKey = Callable[[Any], Tuple[bool, Any]]


def _integer_key(cell: Any) -> Tuple[bool, Any]:
    return (cell is not None, 0 if cell is None else int(cell))


def _string_key(cell: Any) -> Tuple[bool, Any]:
    # Python strings compare by code points, which is the same as UTF-8 bytes.
    return (cell is not None, '' if cell is None else str(cell))


# Absent cells (nulls) go first in the ascending order, as if they are the least values.
SORT_KEYS: Mapping[str, SortKey] = {
    'integer': _integer_key,
    'string': _string_key,
}


@dataclasses.dataclass(frozen=True)
class ColumnDefinition:
    name: str
    type: str


class ResultSetDescriptor:
    """
    An in-memory view over one server-rendered table of objects.

    The rows can be sorted and filtered by the columns in place, in any order
    and combination. The columns never change. The objects' identifiers
    are then extracted from the ``Name`` column in the current row order.
    """

    def __init__(self, table: bodies.RawTable) -> None:
        super().__init__()
        self._columns = [
            ColumnDefinition(name=column['name'], type=column.get('type', ''))
            for column in table.get('columnDefinitions') or []
        ]
        self._rows: List[List[Any]] = [
            list(row.get('cells') or []) for row in table.get('rows') or []
        ]

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} {len(self._columns)} columns, {len(self._rows)} rows>'

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def columns(self) -> Sequence[ColumnDefinition]:
        return tuple(self._columns)

    @property
    def rows(self) -> Sequence[Sequence[Any]]:
        return tuple(tuple(row) for row in self._rows)

    def guids(self) -> List[str]:
        index, _ = self._find_column(NAME_COLUMN)
        return [row[index] for row in self._rows]

    def sort(self, column: str, descending: bool = False) -> None:
        """
        Sort the rows by a column, stable in both directions.

        The rows with equal values keep their previous relative order even in
        the descending sorting: it is not a reversed ascending sorting.
        """
        index, definition = self._find_column(column)
        try:
            key = SORT_KEYS[definition.type]
        except KeyError:
            raise errors.UnsupportedColumnTypeError(column, definition.type) from None

        # Python's sorting is stable, and remains stable with `reverse=True`.
        self._rows.sort(key=lambda row: key(row[index]), reverse=descending)

    def filter(self, column: str, predicate: Callable[[Any], bool]) -> None:
        """
        Keep only the rows where the column's raw value satisfies the predicate.

        The values are not interpreted here, so all column types are usable,
        including those unsuitable for sorting, such as arrays & objects.
        """
        index, _ = self._find_column(column)
        self._rows[:] = [row for row in self._rows if predicate(row[index])]

    def _find_column(self, name: str) -> Tuple[int, ColumnDefinition]:
        for index, definition in enumerate(self._columns):
            if definition.name == name:
                return index, definition
        raise errors.ColumnNotFoundError(name)
