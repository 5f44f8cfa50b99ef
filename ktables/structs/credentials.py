"""
Authentication-related structures.

The "rudimentary" authentication is supported only: the information passed
to the HTTP protocol and TCP/SSL connection only, i.e. everything usable
in a generic HTTP client, and nothing more than that:

* TCP server host & port.
* SSL verification/ignorance flag.
* SSL certificate authority.
* SSL client certificate and its private key.
* HTTP ``Authorization: Basic username:password``.
* HTTP ``Authorization: Bearer token`` (or other schemes: Bearer, Digest, etc).
* URL's default namespace for the cases when this is implied.

Two kinds of principals are distinguished: the library's own one
(`ConnectionInfo` as logged in), which sees everything and is used
for the cheap descriptor listing; and the calling users' ones (`Identity`),
which are used for fetching the actual objects on their behalf.
"""
import dataclasses
from typing import Optional


class LoginError(Exception):
    """ Raised when the library cannot login to the API. """


@dataclasses.dataclass(frozen=True)
class ConnectionInfo:
    """
    A single endpoint with specific credentials and connection flags to use.
    """
    server: str  # e.g. "https://localhost:443"
    ca_path: Optional[str] = None
    ca_data: Optional[bytes] = None
    insecure: Optional[bool] = None
    username: Optional[str] = None
    password: Optional[str] = None
    scheme: Optional[str] = None  # RFC-7235/5.1: e.g. Bearer, Basic, Digest, etc.
    token: Optional[str] = None
    certificate_path: Optional[str] = None
    certificate_data: Optional[bytes] = None
    private_key_path: Optional[str] = None
    private_key_data: Optional[bytes] = None
    default_namespace: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class Identity:
    """
    The calling user on whose behalf the objects are fetched.

    Either a token or a client certificate with its key must be set.
    The name is only informational (for logging).
    """
    name: str
    token: Optional[str] = None
    certificate_data: Optional[bytes] = None
    private_key_data: Optional[bytes] = None

    def __post_init__(self) -> None:
        has_cert = self.certificate_data is not None or self.private_key_data is not None
        if self.token is None and not has_cert:
            raise LoginError(f"Identity {self.name!r} has neither a token nor a certificate.")
        if self.token is not None and has_cert:
            raise LoginError(f"Identity {self.name!r} has both a token and a certificate.")
        if has_cert and (self.certificate_data is None or self.private_key_data is None):
            raise LoginError(f"Identity {self.name!r} needs both a certificate and a key.")

    def __repr__(self) -> str:
        return f'{self.__class__.__name__}(name={self.name!r})'  # no secrets in the logs

    def as_connection_info(self, base: ConnectionInfo) -> ConnectionInfo:
        """ Replace the principal of the base connection with this identity. """
        return dataclasses.replace(
            base,
            username=None,
            password=None,
            scheme=None,
            token=self.token,
            certificate_path=None,
            certificate_data=self.certificate_data,
            private_key_path=None,
            private_key_data=self.private_key_data,
        )
