import asyncio
import logging
import ssl
from typing import NamedTuple, Optional, Union, Dict

import aiohttp
from multidict import CIMultiDictProxy
from yarl import URL

from ajam.exceptions import TransportError


class RawResponse(NamedTuple):
    status: int
    reason: Optional[str]
    body: bytes
    headers: CIMultiDictProxy


class HTTPTransport:
    """
    Issues GET requests to the Asterisk HTTP server and hands back the raw reply.
    """

    def __init__(self, host: str, port: int, ssl_enabled: bool = False,
                 cert_ca: Union[str, bytes] = None, request_timeout: Optional[float] = None):
        self.logger = logging.getLogger('HTTP Transport')
        self.host = host
        self.port = port
        self._ssl_enabled = ssl_enabled
        self._cert_chain = cert_ca
        self._timeout = aiohttp.ClientTimeout(total=request_timeout)

    @property
    def scheme(self) -> str:
        return 'https' if self._ssl_enabled else 'http'

    def _ssl_context(self) -> Optional[ssl.SSLContext]:
        if not self._ssl_enabled or self._cert_chain is None:
            return None
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.verify_mode = ssl.VerifyMode.CERT_REQUIRED
        context.load_verify_locations(self._cert_chain)
        return context

    def url(self, target: str) -> URL:
        """
        Builds the absolute URL for an already percent-encoded path and query.

        :param target: The path and query, e.g. ``/mxml?Action=Ping``
        """
        return URL(f"{self.scheme}://{self.host}:{self.port}{target}", encoded=True)

    async def request(self, target: str, headers: Dict[str, str]) -> RawResponse:
        """
        Sends one GET request.

        :param target: The percent-encoded path and query
        :param headers: Extra request headers
        :return: Status, body and headers of the response
        :raises TransportError: If the request fails or the server answers with an error status
        """
        kwargs = {}
        url = self.url(target)
        try:
            context = self._ssl_context()
            if context is not None:
                kwargs['ssl'] = context
            # Cookies are handled by SessionManager, not by aiohttp
            async with aiohttp.ClientSession(cookie_jar=aiohttp.DummyCookieJar(),
                                             timeout=self._timeout) as session:
                async with session.get(url, headers=headers, **kwargs) as resp:
                    body = await resp.read()
                    self.logger.debug(f"{resp.status} {resp.reason} for {url.path}")
                    if resp.status >= 400:
                        raise TransportError(f"Asterisk answered {resp.status} {resp.reason}",
                                             host=self.host, port=self.port, status=resp.status)
                    return RawResponse(resp.status, resp.reason, body, resp.headers)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise TransportError(f"Unable to perform the request on the remote asterisk: {e!r}",
                                 host=self.host, port=self.port) from e
