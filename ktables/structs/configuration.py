"""
All configuration flags, options, settings to fine-tune the listing core.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

Some of the settings are flags, some are scalars, some are optional,
some are not (but all of them have reasonable defaults).

The settings are never read from the globals: they are passed explicitly
to every call that needs them, so that different listers of the same process
(e.g. a user-scoped one and a root-namespace-scoped one) can be tuned apart.
"""
import dataclasses
from typing import Iterable, Optional, Union


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for all API requests (in seconds).
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for the connection establishment, if different from the total one.
    """

    error_backoffs: Union[float, Iterable[float]] = (1, 1, 2, 3, 5, 8)
    """
    Backoffs (in seconds) for retrying the temporary errors of a single request.

    The temporary errors are the connection errors, the timeouts,
    and the server-side HTTP errors (5xx) & "too many requests" (429).
    Other HTTP errors (4xx) are permanent and are escalated immediately.

    The number of retries is the number of backoffs, so the total number
    of attempts is one more than that. An empty sequence disables the retries.
    """


@dataclasses.dataclass
class ListingSettings:

    resolution_backoffs: Union[float, Iterable[float]] = (0.01, 0.05, 0.25)
    """
    Backoffs (in seconds) for re-running the whole listing pipeline
    when the objects seen in the descriptors cannot be resolved afterwards.

    The descriptors and the objects are fetched in two independent requests,
    so an object can be deleted or relabelled in between. This is a normal
    race, not an error: a new attempt usually sees a consistent state.

    The defaults (10ms growing by 5x, four attempts in total) are the same
    as the platform's default retry policy for conflicts.
    """

    guid_label: str = 'korifi.cloudfoundry.org/guid'
    """
    The label that holds the objects' identifiers (equal to their names).

    It is used to fetch only the selected objects by the set membership:
    ``korifi.cloudfoundry.org/guid in (guid1,guid2,...)``.
    """

    table_accept: str = 'application/json;as=Table;g=meta.k8s.io;v=v1'
    """
    The content negotiation for the server-side rendering of the tables.
    """


@dataclasses.dataclass
class Settings:
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
    listing: ListingSettings = dataclasses.field(default_factory=ListingSettings)
