"""
The assembly of the listing components into one ready-to-use lister.

The API servers build the lister once at startup and keep it for all requests.
The one-shot tools (e.g. the CLI) build it for one call only, and close
the connections when done; see :func:`list_objects`.
"""
import logging
from typing import Any, Optional, Tuple

from ktables.clients import auth
from ktables.helpers import typedefs
from ktables.listing import descriptors, filtering, lister, mapping, paging, pluralizing
from ktables.structs import configuration, credentials, kinds, options, references

logger = logging.getLogger(__name__)


def build_lister(
        *,
        context: auth.APIContext,
        info: credentials.ConnectionInfo,
        settings: configuration.Settings,
        registry: kinds.KindRegistry,
        filtering_opts: filtering.FilteringOpts,
) -> lister.DescriptorsBasedLister:
    """
    Wire the lister with the discovery-backed resolution of the kinds.

    Both the descriptors and the objects are addressed via the same resolver,
    so the kinds are discovered only once for both.
    """
    pluralizer = pluralizing.CachingPluralizer(context=context, settings=settings)
    descriptor_client = descriptors.DescriptorClient(
        context=context,
        settings=settings,
        filtering_opts=filtering_opts,
        pluralizer=pluralizer,
    )
    object_list_mapper = mapping.ObjectListMapper(
        user_client_factory=auth.UserClientFactory(info),
        settings=settings,
        registry=registry,
        pluralizer=pluralizer,
    )
    return lister.DescriptorsBasedLister(
        descriptor_client=descriptor_client,
        object_list_mapper=object_list_mapper,
        settings=settings,
    )


async def list_objects(
        gvk: references.GroupVersionKind,
        *opts: options.ListOption,
        info: credentials.ConnectionInfo,
        settings: Optional[configuration.Settings] = None,
        registry: Optional[kinds.KindRegistry] = None,
        root_namespace: Optional[str] = None,
        logger: typedefs.Logger = logger,
) -> Tuple[kinds.ObjectList[Any], paging.PageInfo]:
    """
    List the objects once, with the library's own principal for everything.

    The kinds unknown to the registry are listed as raw bodies;
    the caller's registry is left intact.
    """
    settings = settings if settings is not None else configuration.Settings()
    registry = registry if registry is not None else kinds.default_registry()
    if gvk not in registry:
        registry = registry.copy()
        registry.register(gvk, kinds.RawObjectList)

    filtering_opts: filtering.FilteringOpts
    if root_namespace:
        filtering_opts = filtering.RootNamespaceFilteringOpts(root_namespace)
    else:
        filtering_opts = filtering.PassThroughFilteringOpts()

    async with auth.APIContext(info) as context:
        the_lister = build_lister(
            context=context,
            info=info,
            settings=settings,
            registry=registry,
            filtering_opts=filtering_opts,
        )
        return await the_lister.list(gvk, *opts, logger=logger)
