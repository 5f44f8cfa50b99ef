"""
The callers' vocabulary for the listing requests.

Every option is a small object that applies itself onto a `ListOptions`.
The options are combined by :func:`unpack` in the order of appearance,
so that the later options override or extend the earlier ones.

The scope options (namespace, labels, fields) are passed to K8s API as is.
The sorting, filtering, and paging options are served by the listing core
on top of the server-rendered tables (see :mod:`ktables.listing.lister`).
"""
import dataclasses
from typing import Any, Callable, Collection, Dict, List, Mapping, Optional

from typing_extensions import Protocol

from ktables.structs import references, selectors


class InvalidListOptionError(ValueError):
    """ Raised when an option cannot be applied, e.g. due to unsupported fields. """


@dataclasses.dataclass(frozen=True)
class SortOpt:
    by: str  # a table column
    desc: bool = False

    def apply_to_list(self, opts: "ListOptions") -> None:
        opts.sort = self


@dataclasses.dataclass(frozen=True)
class FilterOpt:
    column: str
    predicate: Callable[[Any], bool]

    def apply_to_list(self, opts: "ListOptions") -> None:
        opts.filter = self


@dataclasses.dataclass(frozen=True)
class PagingOpt:
    page_size: int
    page_number: int

    def apply_to_list(self, opts: "ListOptions") -> None:
        opts.paging = self


@dataclasses.dataclass
class ListOptions:
    namespace: references.Namespace = None
    field_selector: Dict[str, str] = dataclasses.field(default_factory=dict)
    requirements: List[selectors.Requirement] = dataclasses.field(default_factory=list)
    sort: Optional[SortOpt] = None
    filter: Optional[FilterOpt] = None
    paging: Optional[PagingOpt] = None

    def as_query(self) -> Dict[str, str]:
        """ The scope-only part of the options as K8s API's query parameters. """
        query: Dict[str, str] = {}
        if self.requirements:
            query['labelSelector'] = selectors.render_label_selector(self.requirements)
        if self.field_selector:
            query['fieldSelector'] = selectors.render_field_selector(self.field_selector)
        return query

    def apply_to_list(self, opts: "ListOptions") -> None:
        """ Merge these options into others, so that the options could be passed around. """
        if self.namespace is not None:
            opts.namespace = self.namespace
        if self.field_selector:
            opts.field_selector = dict(self.field_selector)
        opts.requirements.extend(self.requirements)
        if self.sort is not None:
            opts.sort = self.sort
        if self.filter is not None:
            opts.filter = self.filter
        if self.paging is not None:
            opts.paging = self.paging

    def scope_only(self) -> "ListOptions":
        """ Same options, but without anything served by the listing core itself. """
        return ListOptions(
            namespace=self.namespace,
            field_selector=dict(self.field_selector),
            requirements=list(self.requirements),
        )


class ListOption(Protocol):
    def apply_to_list(self, opts: ListOptions) -> None: ...


@dataclasses.dataclass(frozen=True)
class NoopListOption:
    def apply_to_list(self, opts: ListOptions) -> None:
        pass


@dataclasses.dataclass(frozen=True)
class ErroringListOption:
    """ An option that fails when applied; used to postpone the validation errors. """
    message: str

    def apply_to_list(self, opts: ListOptions) -> None:
        raise InvalidListOptionError(self.message)


@dataclasses.dataclass(frozen=True)
class InNamespace:
    namespace: str

    def apply_to_list(self, opts: ListOptions) -> None:
        opts.namespace = references.NamespaceName(self.namespace)


@dataclasses.dataclass(frozen=True)
class MatchingFields:
    fields: Mapping[str, str]

    def apply_to_list(self, opts: ListOptions) -> None:
        opts.field_selector = dict(self.fields)


@dataclasses.dataclass(frozen=True)
class WithRequirements:
    requirements: Collection[selectors.Requirement]

    def apply_to_list(self, opts: ListOptions) -> None:
        opts.requirements.extend(self.requirements)


@dataclasses.dataclass(frozen=True)
class WithLabelSelector:
    selector: str

    def apply_to_list(self, opts: ListOptions) -> None:
        try:
            requirements = selectors.parse_label_selector(self.selector)
        except selectors.InvalidSelectorError as e:
            raise InvalidListOptionError(f"Invalid label selector: {e}") from e
        opts.requirements.extend(requirements)


def in_namespace(namespace: str) -> ListOption:
    return InNamespace(namespace)


def matching_fields(**fields: str) -> ListOption:
    return MatchingFields(fields)


def with_label(key: str, value: str) -> ListOption:
    return WithRequirements([selectors.Requirement.equals(key, value)])


def with_label_in(key: str, values: Collection[str]) -> ListOption:
    if not values:
        return NoopListOption()
    return WithRequirements([selectors.Requirement.is_in(key, values)])


def with_label_strictly_in(key: str, values: Collection[str]) -> ListOption:
    """ Same as :func:`with_label_in`, but an empty set of values matches nothing. """
    if not values:
        return WithRequirements(selectors.match_nothing())
    return with_label_in(key, values)


def with_label_exists(key: str) -> ListOption:
    return WithRequirements([selectors.Requirement.exists(key)])


def with_label_selector(selector: str) -> ListOption:
    return WithLabelSelector(selector)


def with_paging(per_page: int, page: int) -> ListOption:
    """ Request a specific page; zeros mean that no paging is requested at all. """
    if per_page == 0 or page == 0:
        return NoopListOption()
    return PagingOpt(page_size=per_page, page_number=page)


def with_filter(column: str, predicate: Callable[[Any], bool]) -> ListOption:
    return FilterOpt(column=column, predicate=predicate)


# The timestamp columns are rendered for every resource kind of the platform.
DEFAULT_ORDERING_COLUMNS: Mapping[str, str] = {
    'created_at': 'Created At',
    'updated_at': 'Updated At',
}


def with_ordering(order_by: str, **mappings: str) -> ListOption:
    """
    Translate the API-level ordering field into the table column sorting.

    The field can be prefixed with ``-`` for the descending order,
    e.g. ``-created_at``. The fields are mapped to the columns via the default
    mappings for the timestamps plus the mappings provided by the caller.
    The unsupported fields fail only when the option is applied.
    """
    order_by_to_column = dict(DEFAULT_ORDERING_COLUMNS, **mappings)

    desc = order_by.startswith('-')
    order_by = order_by[1:] if desc else order_by
    if not order_by:
        return NoopListOption()

    try:
        column = order_by_to_column[order_by]
    except KeyError:
        return ErroringListOption(f"unsupported field for ordering: {order_by!r}")

    return SortOpt(by=column, desc=desc)


def unpack(*opts: ListOption) -> ListOptions:
    list_options = ListOptions()
    for opt in opts:
        opt.apply_to_list(list_options)
    return list_options
