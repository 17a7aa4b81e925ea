"""Exceptions raised by chat backend clients.

Every failure talking to the backend surfaces as a ``ChatApiError`` so
callers can degrade uniformly without knowing the transport in use.
"""


class ChatApiError(Exception):
    """Base class for backend failures."""


class ApiStatusError(ChatApiError):
    """The backend answered with a non-success status code."""

    def __init__(self, status_code: int, body: str = "", reason: str = ""):
        self.status_code = status_code
        self.body = body
        self.reason = reason
        super().__init__(f"API {status_code}: {body or reason}")


class TransportError(ChatApiError):
    """The request never produced a response (connection, protocol, ...)."""


class RequestTimeoutError(TransportError):
    """The request did not complete within its timeout."""


class MalformedResponseError(ChatApiError):
    """The backend answered successfully but the body has the wrong shape."""

    def __init__(self, path: str, detail: str):
        self.path = path
        self.detail = detail
        super().__init__(f"Malformed response from {path}: {detail}")
