import base64
import os
import ssl
import tempfile
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Mapping, Optional

import aiohttp

from ktables.structs import credentials

# The calling user of the current request; set by the API layer for every request.
# Used by the object fetching to see only what the user is permitted to see.
identity_var: ContextVar[Optional[credentials.Identity]] = ContextVar('identity_var', default=None)


class APIContext:
    """
    An aiohttp session bound to one principal, plus the server to talk to.

    One context exists per `ConnectionInfo`: the library's own one, or one
    per calling user. It is an async context manager and must be closed.
    """

    session: aiohttp.ClientSession
    server: str
    default_namespace: Optional[str]
    _tempfiles: "_TempFiles"

    def __init__(
            self,
            info: credentials.ConnectionInfo,
    ) -> None:
        super().__init__()
        self._tempfiles = _TempFiles()
        self.server = info.server
        self.default_namespace = info.default_namespace
        auth: Optional[aiohttp.BasicAuth] = None
        if info.username and info.password:
            auth = aiohttp.BasicAuth(info.username, info.password)
        self.session = aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(limit=0, ssl=self._make_ssl_context(info)),
            headers=self._make_headers(info),
            auth=auth,
        )

    def _make_ssl_context(self, info: credentials.ConnectionInfo) -> ssl.SSLContext:
        ca_path = self._as_path('CA', info.ca_path, info.ca_data)
        certificate_path = self._as_path('certificate', info.certificate_path, info.certificate_data)
        private_key_path = self._as_path('private key', info.private_key_path, info.private_key_data)

        context = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH, cafile=ca_path)
        if certificate_path and private_key_path:
            context.load_cert_chain(certfile=certificate_path, keyfile=private_key_path)
        if info.insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _as_path(self, what: str, path: Optional[str], data: Optional[bytes]) -> Optional[str]:
        """ SSL accepts only the files, so the base64-encoded data go to temp files. """
        if path and data:
            raise credentials.LoginError(f"Both {what} path & data are set. Need only one.")
        elif data:
            return self._tempfiles[base64.b64decode(data)]
        else:
            return path or None

    @staticmethod
    def _make_headers(info: credentials.ConnectionInfo) -> Dict[str, str]:
        headers = {'User-Agent': 'ktables'}
        if info.scheme or info.token:
            scheme = info.scheme or 'Bearer'
            headers['Authorization'] = f'{scheme} {info.token}' if info.token else scheme
        return headers

    async def __aenter__(self) -> "APIContext":
        return self

    async def __aexit__(self, *_: Any) -> None:
        await self.close()

    async def close(self) -> None:
        await self.session.close()
        self._tempfiles.purge()


class UserClientFactory:
    """
    Build the API contexts scoped to the calling users' identities.

    The server & SSL settings are taken from the library's own connection.
    The principal is replaced with the identity's token or certificate.
    Without an identity (e.g. for the internal calls with no user involved),
    the library's own principal is used as is.
    """

    def __init__(self, info: credentials.ConnectionInfo) -> None:
        super().__init__()
        self._info = info

    def build_client(self, identity: Optional[credentials.Identity]) -> APIContext:
        if identity is None:
            return APIContext(self._info)
        return APIContext(identity.as_connection_info(self._info))


class _TempFiles(Mapping[bytes, str]):
    """ Temp files by their content; removed on `purge()` or on garbage collection. """

    def __init__(self) -> None:
        super().__init__()
        self._paths: Dict[bytes, str] = {}

    def __del__(self) -> None:
        self.purge()

    def __len__(self) -> int:
        return len(self._paths)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._paths)

    def __getitem__(self, item: bytes) -> str:
        if item not in self._paths:
            with tempfile.NamedTemporaryFile(delete=False) as f:
                f.write(item)
            self._paths[item] = f.name
        return self._paths[item]

    def purge(self) -> None:
        while self._paths:
            _, path = self._paths.popitem()
            try:
                os.remove(path)
            except OSError:
                pass
