import threading
from typing import Iterable, Optional

from aiohttp import hdrs

SESSION_COOKIE = 'mansession_id'


def parse_set_cookie(value: str) -> Optional[str]:
    """
    Extracts the manager session id from one ``Set-Cookie`` header value.

    :param value: The header value, e.g. ``mansession_id="abc123"; Version=1; Max-Age=60``
    :return: The session id, or None when the cookie is not the manager session
    """
    cookie = value.split(';', 1)[0]
    name, sep, token = cookie.partition('=')
    if not sep or name.strip() != SESSION_COOKIE:
        return None
    return token.strip().strip('"')


class SessionManager:
    """
    Holds the manager session id shared by every request of a client.
    """

    def __init__(self, token: Optional[str] = None):
        self._lock = threading.Lock()
        self._token = token

    @property
    def token(self) -> Optional[str]:
        return self.current_token()

    def current_token(self) -> Optional[str]:
        with self._lock:
            return self._token

    def set_token(self, token: Optional[str]) -> None:
        """
        Overrides the session id, e.g. with one persisted from an earlier process.

        :param token: The session id, or None to forget the session
        """
        with self._lock:
            self._token = token

    def capture(self, headers) -> Optional[str]:
        """
        Applies the session id carried by ``Set-Cookie`` response headers, if any.

        :param headers: Response headers (a multidict, as returned by aiohttp)
        :return: The session id held after the call
        """
        values: Iterable[str] = headers.getall(hdrs.SET_COOKIE, ())
        with self._lock:
            for value in values:
                token = parse_set_cookie(value)
                if token is not None:
                    self._token = token
            return self._token

    def cookie_header(self) -> Optional[str]:
        token = self.current_token()
        if not token:
            return None
        return f'{SESSION_COOKIE}="{token}"'
