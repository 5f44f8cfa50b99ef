import dataclasses
from typing import Generic, Sequence, TypeVar

from ktables.listing import errors

_T = TypeVar('_T')


@dataclasses.dataclass(frozen=True)
class PageInfo:
    total_results: int
    total_pages: int
    page_number: int
    page_size: int


@dataclasses.dataclass(frozen=True)
class Page(Generic[_T]):
    page_info: PageInfo
    items: Sequence[_T]


def single_page_info(total_results: int, page_size: int) -> PageInfo:
    return PageInfo(
        total_results=total_results,
        total_pages=1,
        page_number=1,
        page_size=page_size,
    )


def single_page(items: Sequence[_T], page_size: int) -> Page[_T]:
    return Page(page_info=single_page_info(len(items), page_size), items=items)


def get_page(items: Sequence[_T], page_size: int, page_number: int) -> Page[_T]:
    """
    Cut one page out of all the items, and describe it.

    A page past the end is not an error: it is empty, but described properly.
    If all the items fit into one page, that page is returned regardless
    of the requested page number.
    """
    if page_size < 1:
        raise errors.PagingError("pageSize cannot be less than 1")
    if page_number < 1:
        raise errors.PagingError("pageNumber cannot be less than 1")

    if page_size >= len(items):
        return single_page(items, page_size)

    total_pages = (len(items) + page_size - 1) // page_size  # ceil() without floats
    page_info = PageInfo(
        total_results=len(items),
        total_pages=total_pages,
        page_number=page_number,
        page_size=page_size,
    )

    if page_number > total_pages:
        return Page(page_info=page_info, items=items[:0])

    start = page_size * (page_number - 1)
    end = min(len(items), page_size * page_number)
    return Page(page_info=page_info, items=items[start:end])
