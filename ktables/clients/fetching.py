from typing import Mapping, Optional

from ktables.clients import api, auth
from ktables.helpers import typedefs
from ktables.structs import bodies, configuration, references


async def list_table(
        *,
        resource: references.Resource,
        namespace: references.Namespace = None,
        params: Optional[Mapping[str, str]] = None,
        context: auth.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> bodies.RawTable:
    """
    List the objects of a specific resource type as a server-rendered table.

    Only the columns & cells are requested, not the objects themselves:
    the objects are not rendered, not transferred, not parsed.
    """
    query = dict(params or {}, includeObject='None')
    rsp: bodies.RawTable = await api.get(
        url=resource.get_url(namespace=namespace),
        params=query,
        headers={'Accept': settings.listing.table_accept},
        context=context,
        settings=settings,
        logger=logger,
    )
    return rsp


async def list_objs(
        *,
        resource: references.Resource,
        namespace: references.Namespace = None,
        params: Optional[Mapping[str, str]] = None,
        context: auth.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> bodies.RawList:
    """
    List the objects of a specific resource type in full.

    The items get their ``kind`` & ``apiVersion`` from the list if absent
    (K8s API omits them in the lists' items).
    """
    rsp: bodies.RawList = await api.get(
        url=resource.get_url(namespace=namespace),
        params=params,
        context=context,
        settings=settings,
        logger=logger,
    )

    kind = rsp.get('kind')
    api_version = rsp.get('apiVersion')
    for item in rsp.get('items') or []:
        if kind is not None:
            item.setdefault('kind', kind[:-4] if kind[-4:] == 'List' else kind)
        if api_version is not None:
            item.setdefault('apiVersion', api_version)
    return rsp
