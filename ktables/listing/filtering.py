"""
Visibility scoping of the listings: what the calling user is permitted to see.

The descriptors are fetched with the library's own (privileged) principal,
so the visibility must be enforced by the selectors before the fetching.
The objects are fetched with the user's principal afterwards, and so
they are additionally protected by the cluster's own authorization.
"""
import dataclasses
from typing import Collection, Optional

from typing_extensions import Protocol

from ktables.clients import auth
from ktables.listing import errors
from ktables.structs import credentials, options, references, selectors


class FilteringOpts(Protocol):
    async def apply(self, *opts: options.ListOption) -> options.ListOptions: ...


class NamespacePermissions(Protocol):
    async def get_authorized_namespaces(
            self,
            identity: Optional[credentials.Identity],
    ) -> Collection[str]: ...


@dataclasses.dataclass(frozen=True)
class PassThroughFilteringOpts:
    """
    No restrictions: the caller sees whatever the library's own principal sees.

    Only for the trusted callers, e.g. the administrative tools & the CLI.
    """

    async def apply(self, *opts: options.ListOption) -> options.ListOptions:
        return options.unpack(*opts)


@dataclasses.dataclass(frozen=True)
class RootNamespaceFilteringOpts:
    """
    Restrict the listing to the root namespace, where the global resources live.

    E.g. the orgs, the domains, the service brokers and offerings.
    Any namespace requested by the caller is overridden.
    """
    root_namespace: str

    async def apply(self, *opts: options.ListOption) -> options.ListOptions:
        list_options = options.unpack(*opts)
        list_options.namespace = references.NamespaceName(self.root_namespace)
        return list_options


@dataclasses.dataclass(frozen=True)
class PermittedNamespacesFilteringOpts:
    """
    Restrict the listing to the namespaces (spaces) the calling user can access.

    The objects are selected by the label with their space's namespace name,
    since K8s API cannot list several specific namespaces at once.
    If the caller requests a specific namespace which is not permitted,
    nothing is listed, the same as if the namespace had no objects at all.
    """
    permissions: NamespacePermissions
    namespace_label: str = 'korifi.cloudfoundry.org/space-guid'

    async def apply(self, *opts: options.ListOption) -> options.ListOptions:
        list_options = options.unpack(*opts)
        identity = auth.identity_var.get()
        try:
            namespaces = set(await self.permissions.get_authorized_namespaces(identity))
        except Exception as e:
            raise errors.FilteringError(f"failed to get authorized namespaces for {identity!r}") from e

        if list_options.namespace is not None and list_options.namespace not in namespaces:
            list_options.requirements.extend(selectors.match_nothing())
        elif not namespaces:
            list_options.requirements.extend(selectors.match_nothing())
        else:
            requirement = selectors.Requirement.is_in(self.namespace_label, sorted(namespaces))
            list_options.requirements.append(requirement)
        return list_options
