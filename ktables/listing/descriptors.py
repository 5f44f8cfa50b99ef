import asyncio
import collections.abc
import logging
from typing import Optional

import aiohttp

from ktables.clients import auth, errors as api_errors, fetching
from ktables.helpers import typedefs
from ktables.listing import errors, filtering, pluralizing, tables
from ktables.structs import configuration, options, references

logger = logging.getLogger(__name__)


class DescriptorClient:
    """
    Fetch the lightweight descriptors of all objects visible to the caller.

    The descriptors are the server-rendered tables of the resources' columns
    (as in ``kubectl get``), without the objects' bodies. They are fetched
    with the library's own principal, but restricted by the caller's visibility.
    """

    def __init__(
            self,
            *,
            context: auth.APIContext,
            settings: configuration.Settings,
            filtering_opts: filtering.FilteringOpts,
            pluralizer: Optional[pluralizing.Pluralizer] = None,
    ) -> None:
        super().__init__()
        self._context = context
        self._settings = settings
        self._filtering_opts = filtering_opts
        self._pluralizer = pluralizer if pluralizer is not None else pluralizing.NaivePluralizer()

    async def list(
            self,
            gvk: references.GroupVersionKind,
            *opts: options.ListOption,
            logger: typedefs.Logger = logger,
    ) -> tables.ResultSetDescriptor:

        # Visibility failures are not ours to interpret: escalate them as they are.
        list_options = await self._filtering_opts.apply(*opts)

        try:
            resource = await self._pluralizer.resolve(gvk, logger=logger)
            table = await fetching.list_table(
                resource=resource,
                namespace=list_options.namespace,
                params=list_options.as_query(),
                context=self._context,
                settings=self._settings,
                logger=logger,
            )
        except (api_errors.APIError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise errors.DescriptorFetchError(gvk, str(e)) from e

        if not isinstance(table, collections.abc.Mapping) or table.get('kind') != 'Table':
            raise errors.DescriptorFetchError(gvk, "the response is not a table")

        return tables.ResultSetDescriptor(table)
