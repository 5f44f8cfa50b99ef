"""
The errors of the listing core.

All of them carry enough context (the kind, the column, the identifier)
to diagnose the failure from the logs without re-running the request.
The causes (e.g. K8s API errors) are chained via ``raise ... from``.

Only :class:`ObjectResolutionError` is temporary (and retried by the lister);
all other errors are permanent and are escalated to the callers immediately.
"""
from typing import Optional

from ktables.structs import references


class ListingError(Exception):
    """ A base class for all listing-specific errors. """


class ColumnNotFoundError(ListingError):
    def __init__(self, column: str) -> None:
        super().__init__(f"column not found: {column!r}")
        self.column = column


class UnsupportedColumnTypeError(ListingError):
    def __init__(self, column: str, column_type: str) -> None:
        super().__init__(f"unsupported column type for sorting: {column!r} is {column_type!r}")
        self.column = column
        self.column_type = column_type


class PagingError(ListingError, ValueError):
    pass


class KindNotFoundError(ListingError):
    def __init__(self, gvk: references.GroupVersionKind) -> None:
        super().__init__(f"kind {gvk.item_kind!r} not found in {gvk.api_version!r}")
        self.gvk = gvk


class FilteringError(ListingError):
    """ The caller's visibility scope cannot be determined. """


class DescriptorFetchError(ListingError):
    def __init__(self, gvk: references.GroupVersionKind, reason: Optional[str] = None) -> None:
        super().__init__(f"failed to list descriptors for {gvk}" + (f": {reason}" if reason else ""))
        self.gvk = gvk


class ObjectFetchError(ListingError):
    def __init__(self, gvk: references.GroupVersionKind, reason: Optional[str] = None) -> None:
        super().__init__(f"failed to list objects for {gvk}" + (f": {reason}" if reason else ""))
        self.gvk = gvk


class ObjectResolutionError(ListingError):
    """
    An object seen in the descriptors is absent in the objects fetched afterwards.

    It is a race between the two reads, not a mistake of the caller:
    the object was deleted, renamed, or relabelled in between.
    """
    def __init__(self, guid: str, gvk: references.GroupVersionKind) -> None:
        super().__init__(f"failed to resolve object with guid {guid!r} for {gvk}")
        self.guid = guid
        self.gvk = gvk
