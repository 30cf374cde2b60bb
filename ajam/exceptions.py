"""Exceptions raised by the AJAM client.

Every failure of a single command is reported as exactly one of
:class:`TransportError`, :class:`DecodeError` or :class:`RemoteCommandError`.
"""

from typing import Any, Dict, List, Optional


class AJAMError(Exception):
    """Base exception class for all AJAM client errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details (optional)
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


class TransportError(AJAMError):
    """Raised when the HTTP round trip to Asterisk fails.

    This covers refused or reset connections, timeouts and HTTP error
    statuses. The underlying exception, if any, is chained as ``__cause__``.

    Attributes:
        host: Asterisk host the request was sent to
        port: Asterisk port the request was sent to
        status: HTTP status code when the server answered with an error page
    """

    def __init__(
            self,
            message: str,
            host: Optional[str] = None,
            port: Optional[int] = None,
            status: Optional[int] = None,
            details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.host = host
        self.port = port
        self.status = status

    def __str__(self) -> str:
        parts = [self.message]
        if self.host:
            parts.append(f"host={self.host}")
        if self.port:
            parts.append(f"port={self.port}")
        if self.status:
            parts.append(f"status={self.status}")

        if len(parts) > 1:
            return f"{parts[0]} ({', '.join(parts[1:])})"
        return parts[0]


class DecodeError(AJAMError):
    """Raised when a response body is not a parseable XML document.

    Attributes:
        body: The raw body that failed to parse
    """

    def __init__(self, message: str, body: Optional[bytes] = None,
                 details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)
        self.body = body


class RemoteCommandError(AJAMError):
    """Raised when Asterisk answers a command with ``response="Error"``.

    Attributes:
        action: The ``Action`` of the command that failed
        response: The records decoded from the error reply
    """

    def __init__(
            self,
            message: str,
            action: Optional[str] = None,
            response: Optional[List[Dict[str, str]]] = None,
            details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details)
        self.action = action
        self.response = response or []
