"""
The main ktables module for all the exported functions & classes.
"""
# isort: skip_file

# Unlike all other places, where we import other modules and refer
# the functions via the modules, this is the library's top-level interface,
# as it is seen by the users. So, we export the individual functions.

from ktables.clients.auth import (
    APIContext,
    UserClientFactory,
    identity_var,
)
from ktables.clients.errors import (
    APIError,
    APIServerError,
    APIUnauthorizedError,
    APIForbiddenError,
    APINotFoundError,
    APIConflictError,
)
from ktables.clients.piggybacking import (
    login,
    login_with_kubeconfig,
    login_with_service_account,
)
from ktables.engines.loggers import (
    LogFormat,
    configure,
)
from ktables.helpers.typedefs import (
    Logger,
)
from ktables.listing.descriptors import (
    DescriptorClient,
)
from ktables.listing.errors import (
    ListingError,
    ColumnNotFoundError,
    UnsupportedColumnTypeError,
    PagingError,
    KindNotFoundError,
    FilteringError,
    DescriptorFetchError,
    ObjectFetchError,
    ObjectResolutionError,
)
from ktables.listing.filtering import (
    FilteringOpts,
    NamespacePermissions,
    PassThroughFilteringOpts,
    RootNamespaceFilteringOpts,
    PermittedNamespacesFilteringOpts,
)
from ktables.listing.lister import (
    DescriptorsBasedLister,
)
from ktables.listing.mapping import (
    ObjectListMapper,
)
from ktables.listing.paging import (
    Page,
    PageInfo,
    get_page,
    single_page,
    single_page_info,
)
from ktables.listing.pluralizing import (
    Pluralizer,
    NaivePluralizer,
    CachingPluralizer,
    naive_plural,
)
from ktables.listing.running import (
    build_lister,
    list_objects,
)
from ktables.listing.tables import (
    ColumnDefinition,
    ResultSetDescriptor,
)
from ktables.structs.bodies import (
    RawBody,
    RawList,
    RawTable,
    RawTableRow,
    RawColumnDefinition,
)
from ktables.structs.configuration import (
    Settings,
    NetworkingSettings,
    ListingSettings,
)
from ktables.structs.credentials import (
    LoginError,
    ConnectionInfo,
    Identity,
)
from ktables.structs.kinds import (
    Body,
    ObjectList,
    RawObjectList,
    BodyList,
    KindRegistry,
    UnregisteredKindError,
    default_registry,
)
from ktables.structs.options import (
    ListOption,
    ListOptions,
    InvalidListOptionError,
    SortOpt,
    FilterOpt,
    PagingOpt,
    in_namespace,
    matching_fields,
    with_label,
    with_label_in,
    with_label_strictly_in,
    with_label_exists,
    with_label_selector,
    with_paging,
    with_ordering,
    with_filter,
    unpack,
)
from ktables.structs.references import (
    GroupVersionKind,
    Resource,
    Namespace,
    NamespaceName,
)
from ktables.structs.selectors import (
    InvalidSelectorError,
    Operator,
    Requirement,
    parse_label_selector,
)

__all__ = [
    'APIContext', 'UserClientFactory', 'identity_var',
    'APIError', 'APIServerError', 'APIUnauthorizedError',
    'APIForbiddenError', 'APINotFoundError', 'APIConflictError',
    'login', 'login_with_kubeconfig', 'login_with_service_account',
    'LogFormat', 'configure',
    'Logger',
    'DescriptorClient',
    'ListingError', 'ColumnNotFoundError', 'UnsupportedColumnTypeError', 'PagingError',
    'KindNotFoundError', 'FilteringError', 'DescriptorFetchError', 'ObjectFetchError',
    'ObjectResolutionError',
    'FilteringOpts', 'NamespacePermissions', 'PassThroughFilteringOpts',
    'RootNamespaceFilteringOpts', 'PermittedNamespacesFilteringOpts',
    'DescriptorsBasedLister',
    'ObjectListMapper',
    'Page', 'PageInfo', 'get_page', 'single_page', 'single_page_info',
    'Pluralizer', 'NaivePluralizer', 'CachingPluralizer', 'naive_plural',
    'build_lister', 'list_objects',
    'ColumnDefinition', 'ResultSetDescriptor',
    'RawBody', 'RawList', 'RawTable', 'RawTableRow', 'RawColumnDefinition',
    'Settings', 'NetworkingSettings', 'ListingSettings',
    'LoginError', 'ConnectionInfo', 'Identity',
    'Body', 'ObjectList', 'RawObjectList', 'BodyList', 'KindRegistry',
    'UnregisteredKindError', 'default_registry',
    'ListOption', 'ListOptions', 'InvalidListOptionError', 'SortOpt', 'FilterOpt', 'PagingOpt',
    'in_namespace', 'matching_fields', 'with_label', 'with_label_in', 'with_label_strictly_in',
    'with_label_exists', 'with_label_selector', 'with_paging', 'with_ordering', 'with_filter',
    'unpack',
    'GroupVersionKind', 'Resource', 'Namespace', 'NamespaceName',
    'InvalidSelectorError', 'Operator', 'Requirement', 'parse_label_selector',
]
