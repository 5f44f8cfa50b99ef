import asyncio
import collections.abc
import itertools
import logging
from typing import Any, Optional, Sequence, Tuple

from typing_extensions import Protocol

from ktables.helpers import typedefs
from ktables.listing import errors, paging, tables
from ktables.structs import configuration, kinds, options, references

logger = logging.getLogger(__name__)


class DescriptorClient(Protocol):
    async def list(
            self,
            gvk: references.GroupVersionKind,
            *opts: options.ListOption,
            logger: typedefs.Logger = ...,
    ) -> tables.ResultSetDescriptor: ...


class ObjectListMapper(Protocol):
    async def guids_to_object_list(
            self,
            gvk: references.GroupVersionKind,
            ordered_guids: Sequence[str],
            *opts: options.ListOption,
            logger: typedefs.Logger = ...,
    ) -> kinds.ObjectList[Any]: ...


class DescriptorsBasedLister:
    """
    List the objects of any kind sorted, filtered, and paged by their columns.

    The whole pipeline is re-run from scratch if the objects seen in the
    descriptors cannot be resolved afterwards: the descriptors themselves
    can be stale, so re-resolving the same identifiers would not help.
    """

    def __init__(
            self,
            *,
            descriptor_client: DescriptorClient,
            object_list_mapper: ObjectListMapper,
            settings: configuration.Settings,
    ) -> None:
        super().__init__()
        self._descriptor_client = descriptor_client
        self._object_list_mapper = object_list_mapper
        self._settings = settings

    async def list(
            self,
            gvk: references.GroupVersionKind,
            *opts: options.ListOption,
            logger: typedefs.Logger = logger,
    ) -> Tuple[kinds.ObjectList[Any], paging.PageInfo]:
        list_options = options.unpack(*opts)

        backoffs = self._settings.listing.resolution_backoffs
        backoffs = backoffs if isinstance(backoffs, collections.abc.Iterable) else [backoffs]
        count = len(backoffs) + 1 if isinstance(backoffs, collections.abc.Sized) else None
        backoff: Optional[float]
        for attempt, backoff in enumerate(itertools.chain(backoffs, [None]), start=1):
            idx = f"#{attempt}/{count}" if count is not None else f"#{attempt}"
            try:
                if attempt > 1:
                    logger.debug(f"Listing attempt {idx}: {gvk}")
                result = await self._list_once(gvk, list_options, logger=logger)
            except errors.ObjectResolutionError as e:
                if backoff is None:  # i.e. the last or the only attempt.
                    logger.error(f"Listing attempt {idx} failed; escalating: {gvk} -> {e}")
                    raise
                else:
                    logger.warning(f"Listing attempt {idx} failed; will retry: {gvk} -> {e}")
                    await asyncio.sleep(backoff)  # cancellable.
            else:
                if attempt > 1:
                    logger.debug(f"Listing attempt {idx} succeeded: {gvk}")
                return result

        raise RuntimeError("Broken retryable routine.")  # impossible, but needed for type-checking.

    async def _list_once(
            self,
            gvk: references.GroupVersionKind,
            list_options: options.ListOptions,
            *,
            logger: typedefs.Logger,
    ) -> Tuple[kinds.ObjectList[Any], paging.PageInfo]:
        scope = list_options.scope_only()
        descriptors = await self._descriptor_client.list(gvk, scope, logger=logger)

        if list_options.sort is not None:
            descriptors.sort(list_options.sort.by, list_options.sort.desc)
        if list_options.filter is not None:
            descriptors.filter(list_options.filter.column, list_options.filter.predicate)

        guids = descriptors.guids()
        if list_options.paging is None:
            page = paging.single_page(guids, len(guids))
        else:
            page = paging.get_page(guids, list_options.paging.page_size, list_options.paging.page_number)

        object_list = await self._object_list_mapper.guids_to_object_list(
            gvk, page.items, scope, logger=logger)
        return object_list, page.page_info
