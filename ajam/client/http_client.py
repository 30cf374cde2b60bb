import logging
import urllib.parse
from typing import List, Union, Optional, Dict

from aiohttp import hdrs

from ajam.base import AJAMClientBase
from ajam.client.transport import HTTPTransport
from ajam.decoder import decode, classify
from ajam.session import SessionManager

MASKED_PARAMETERS = ('Secret',)


def _format_value(value) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def build_target(path: str, query: dict) -> str:
    """
    Builds the request path and query string for a command.

    Keys are used as given and values are percent-encoded, in the iteration order
    of ``query``. Parameters whose value is None are left out.

    :param path: The location of the AJAM interface, e.g. ``/mxml``
    :param query: The command parameters
    :return: The path with its query string
    """
    pairs = [f"{key}={urllib.parse.quote(_format_value(value), safe='')}"
             for key, value in query.items() if value is not None]
    return f"{path}?{'&'.join(pairs)}"


class HTTPClient(AJAMClientBase):
    def __init__(self, host: str, port: int = 8088, path: str = '/mxml', ssl_enabled: bool = False,
                 cert_ca: Union[str, bytes] = None, username: Optional[str] = None,
                 secret: Optional[str] = None, session_id: Optional[str] = None,
                 request_timeout: Optional[float] = None, encoding: str = 'utf-8'):
        if ssl_enabled and port == 8088:
            port = 8089
        super().__init__(host, port, username, secret)
        self.logger = logging.getLogger('HTTP Client')
        self.path = path
        self.encoding = encoding
        self.session = SessionManager(session_id)
        self.transport = HTTPTransport(host, port, ssl_enabled, cert_ca, request_timeout)

    def _headers(self) -> Dict[str, str]:
        headers = {hdrs.HOST: self.host}
        cookie = self.session.cookie_header()
        if cookie is not None:
            headers[hdrs.COOKIE] = cookie
        return headers

    async def execute(self, query: dict) -> List[dict]:
        """
        Sends an AJAM command and decodes the reply.

        :param query: The command parameters, including ``Action``
        :return: One record per ``generic`` element of the reply, in document order
        :raises TransportError: If the request could not be completed
        :raises DecodeError: If the reply is not well-formed XML
        :raises RemoteCommandError: If Asterisk reported an error for the command
        """
        action = query.get('Action')
        target = build_target(self.path, query)
        masked = {key: '***' if key in MASKED_PARAMETERS and value is not None else value
                  for key, value in query.items()}
        self.logger.debug(f"Performing request on: {build_target(self.path, masked)}")

        raw = await self.transport.request(target, self._headers())
        records = decode(raw.body, self.encoding)
        self.session.capture(raw.headers)

        if action != 'WaitEvent':
            self.logger.info(f"Response {records} for {action}")
        else:
            self.logger.debug(f"Response {records} for {action}")
        return classify(records, action)
