import asyncio
import logging
from typing import Any, Dict, Optional, Sequence

import aiohttp

from ktables.clients import auth, errors as api_errors, fetching
from ktables.helpers import typedefs
from ktables.listing import errors, pluralizing
from ktables.structs import bodies, configuration, kinds, options, references, selectors

logger = logging.getLogger(__name__)


class ObjectListMapper:
    """
    Resolve the ordered identifiers to the full objects, in the same order.

    The objects are fetched in one request with the calling user's principal,
    selected by the set membership of their identifiers. Then, they are
    arranged into a list of the specific kind exactly as the identifiers go.
    If any identifier cannot be resolved, the whole resolution fails.
    """

    def __init__(
            self,
            *,
            user_client_factory: auth.UserClientFactory,
            settings: configuration.Settings,
            registry: kinds.KindRegistry,
            pluralizer: Optional[pluralizing.Pluralizer] = None,
    ) -> None:
        super().__init__()
        self._user_client_factory = user_client_factory
        self._settings = settings
        self._registry = registry
        self._pluralizer = pluralizer if pluralizer is not None else pluralizing.NaivePluralizer()

    async def guids_to_object_list(
            self,
            gvk: references.GroupVersionKind,
            ordered_guids: Sequence[str],
            *opts: options.ListOption,
            logger: typedefs.Logger = logger,
    ) -> kinds.ObjectList[Any]:
        object_list = self._registry.new_list(gvk)

        # An empty membership selector is either invalid or matches everything. Neither is right.
        if not ordered_guids:
            return object_list

        list_options = options.unpack(*opts)
        list_options.requirements.append(
            selectors.Requirement.is_in(self._settings.listing.guid_label, ordered_guids))

        identity = auth.identity_var.get()
        try:
            resource = await self._pluralizer.resolve(gvk, logger=logger)
            async with self._user_client_factory.build_client(identity) as context:
                rsp = await fetching.list_objs(
                    resource=resource,
                    namespace=list_options.namespace,
                    params=list_options.as_query(),
                    context=context,
                    settings=self._settings,
                    logger=logger,
                )
        except (api_errors.APIError, aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise errors.ObjectFetchError(gvk, str(e)) from e

        objects_by_guid: Dict[str, bodies.RawBody] = {}
        for item in rsp.get('items') or []:
            objects_by_guid[item.get('metadata', {}).get('name', '')] = item

        for guid in ordered_guids:
            try:
                raw = objects_by_guid[guid]
            except KeyError:
                raise errors.ObjectResolutionError(guid, gvk) from None
            object_list.append(raw)

        object_list.resource_version = rsp.get('metadata', {}).get('resourceVersion')
        return object_list
