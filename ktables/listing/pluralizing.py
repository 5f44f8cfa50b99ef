"""
Resolution of the kinds to the REST-style resource endpoints.

K8s API is addressed by the plural names of the resources, while the callers
know the kinds only. Two resolvers are available:

* :class:`NaivePluralizer` guesses the plural name by appending ``"s"``.
  It makes no API calls, but is wrong for irregular plurals
  (e.g. ``CFProcess`` → ``cfprocesss`` instead of ``cfprocesses``).
* :class:`CachingPluralizer` asks the cluster's discovery API once per kind,
  and remembers the answer for the process lifetime.

They are interchangeable only for the kinds with regular plurals.
"""
import logging
from typing import Dict, Optional

from typing_extensions import Protocol

from ktables.clients import auth, discovery
from ktables.helpers import typedefs
from ktables.listing import errors
from ktables.structs import configuration, references

logger = logging.getLogger(__name__)


class Pluralizer(Protocol):
    async def resolve(
            self,
            gvk: references.GroupVersionKind,
            *,
            logger: typedefs.Logger,
    ) -> references.Resource: ...


def naive_plural(kind: str) -> str:
    kind = kind[:-4] if kind.endswith('List') and len(kind) > 4 else kind
    return f'{kind.lower()}s'


class NaivePluralizer:

    async def resolve(
            self,
            gvk: references.GroupVersionKind,
            *,
            logger: typedefs.Logger = logger,
    ) -> references.Resource:
        return references.Resource(gvk.group, gvk.version, naive_plural(gvk.kind))


class CachingPluralizer:
    """
    Resolve the kinds to the resources via discovery, remember them forever.

    The plural names of the kinds never change within a running process,
    so the cache is never invalidated. The failures are not cached,
    so that the absent kinds are re-discovered on the next calls.

    Concurrent resolutions of the same kind can both go to the API;
    they both get the same answer, so whichever is stored last, is fine.
    """

    def __init__(
            self,
            *,
            context: auth.APIContext,
            settings: configuration.Settings,
    ) -> None:
        super().__init__()
        self._context = context
        self._settings = settings
        self._cache: Dict[str, references.Resource] = {}

    async def pluralize(
            self,
            gvk: references.GroupVersionKind,
            *,
            logger: typedefs.Logger = logger,
    ) -> str:
        resource = await self.resolve(gvk, logger=logger)
        return resource.plural

    async def resolve(
            self,
            gvk: references.GroupVersionKind,
            *,
            logger: typedefs.Logger = logger,
    ) -> references.Resource:
        key = f'{gvk.api_version}/{gvk.item_kind}'
        cached: Optional[references.Resource] = self._cache.get(key)
        if cached is not None:
            return cached

        api_resources = await discovery.read_group_version(
            group=gvk.group,
            version=gvk.version,
            context=self._context,
            settings=self._settings,
            logger=logger,
        )
        for api_resource in api_resources:
            if api_resource['kind'] == gvk.item_kind:
                resource = references.Resource(
                    group=gvk.group,
                    version=gvk.version,
                    plural=api_resource['plural'],
                    namespaced=api_resource['namespaced'],
                )
                self._cache[key] = resource
                logger.debug(f"Kind {gvk.item_kind!r} is served as {resource!r}.")
                return resource

        raise errors.KindNotFoundError(gvk)
