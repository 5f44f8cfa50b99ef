from typing import Collection

from typing_extensions import TypedDict

from ktables.clients import api, auth, errors
from ktables.helpers import typedefs
from ktables.structs import configuration


class APIResource(TypedDict):
    kind: str
    plural: str
    namespaced: bool


async def read_group_version(
        *,
        group: str,
        version: str,
        context: auth.APIContext,
        settings: configuration.Settings,
        logger: typedefs.Logger,
) -> Collection[APIResource]:
    """
    Read all the resources served by one API group & version.

    The subresources (``"cfapps/status"``) are excluded: only the main
    endpoints are returned. An absent group/version has no resources.
    """
    url = f'/api/{version}' if group == '' else f'/apis/{group}/{version}'
    try:
        rsp = await api.get(url, context=context, settings=settings, logger=logger)
    except errors.APINotFoundError:
        # This happens when the last and the only resource of a group/version
        # has been deleted, the whole group/version is gone.
        return []
    else:
        return [
            APIResource(
                kind=resource['kind'],
                plural=resource['name'],
                namespaced=resource.get('namespaced', True),
            )
            for resource in rsp.get('resources') or []
            if '/' not in resource['name']
        ]
