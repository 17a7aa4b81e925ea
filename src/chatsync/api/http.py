import mimetypes
from pathlib import Path
from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from ..state.models import (
    ChatPayload,
    ChatReply,
    MessageListing,
    ModelListing,
    SessionListing,
    UploadReceipt,
)
from .base import ChatBackend
from .errors import ApiStatusError, MalformedResponseError, RequestTimeoutError, TransportError

T = TypeVar("T", bound=BaseModel)

UPLOAD_FILE_PATH = "/uploads/file"
UPLOAD_PHOTO_PATH = "/uploads/photo"


class HttpChatBackend(ChatBackend):
    """Chat backend reached over HTTP with JSON bodies.

    Hidden design decisions:
    - httpx client setup, base URL joining and timeouts
    - Status handling (every non-2xx becomes ``ApiStatusError``)
    - Body decoding (JSON only when the content type says so)
    - Multipart encoding for uploads
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: float | None = 30.0,
        **client_kwargs: Any
    ):
        """Initialize the HTTP backend.

        Args:
            base_url: Root URL of the chat service; paths are appended to it
            timeout: Per-request timeout in seconds (None disables it)
            **client_kwargs: Additional kwargs for httpx.AsyncClient (e.g. transport)
        """
        super().__init__()
        self._base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            **client_kwargs
        )

    @property
    def base_url(self) -> str:
        """Get the configured service URL."""
        return self._base_url

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """Issue a request and decode the body.

        Returns:
            Parsed JSON when the response declares a JSON content type,
            otherwise the raw text body

        Raises:
            ApiStatusError: On a non-2xx status
            RequestTimeoutError: If the request timed out
            TransportError: On any other transport failure
        """
        self._debug("debug", f"{method} {path}")
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(f"Request to {path} timed out") from e
        except httpx.RequestError as e:
            raise TransportError(f"Request to {path} failed: {e}") from e

        if not response.is_success:
            self._debug("warning", f"{method} {path} -> {response.status_code}")
            raise ApiStatusError(response.status_code, response.text, response.reason_phrase)

        content_type = response.headers.get("content-type", "")
        if "application/json" in content_type:
            try:
                return response.json()
            except ValueError as e:
                raise MalformedResponseError(path, "body is not valid JSON") from e
        return response.text

    @staticmethod
    def _parse(model: type[T], data: Any, path: str) -> T:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "body"
            raise MalformedResponseError(path, f"{location}: {first['msg']}") from e

    async def list_models(self) -> ModelListing:
        data = await self._request("GET", "/models")
        return self._parse(ModelListing, data, "/models")

    async def list_sessions(self) -> SessionListing:
        data = await self._request("GET", "/chat/sessions")
        return self._parse(SessionListing, data, "/chat/sessions")

    async def load_messages(self, session_id: str) -> MessageListing:
        path = f"/chat/{quote(session_id, safe='')}/messages"
        data = await self._request("GET", path)
        return self._parse(MessageListing, data, path)

    async def send_message(self, payload: ChatPayload) -> ChatReply:
        data = await self._request("POST", "/chat", json=payload.model_dump(mode="json"))
        return self._parse(ChatReply, data, "/chat")

    async def upload(self, path: Path, photo: bool = False) -> str:
        endpoint = UPLOAD_PHOTO_PATH if photo else UPLOAD_FILE_PATH
        field = "photo" if photo else "file"
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        files = {field: (path.name, path.read_bytes(), content_type)}
        data = await self._request("POST", endpoint, files=files)
        return self._parse(UploadReceipt, data, endpoint).id

    async def close(self) -> None:
        await self._client.aclose()
