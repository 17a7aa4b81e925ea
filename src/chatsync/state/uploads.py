"""File and photo uploads staged for the next message."""

from pathlib import Path
from typing import TYPE_CHECKING

from ..api.errors import ChatApiError
from .base import StateComponent
from .models import AttachmentRef

if TYPE_CHECKING:
    from ..api.base import ChatBackend


class UploadError(Exception):
    """An upload failed; shown to the user as a blocking alert."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Upload failed: {reason}")


class AttachmentUploader(StateComponent):
    """Uploads files and keeps the returned ids until they are sent.

    Unlike send failures, upload failures are raised to the caller:
    they are reported through a separate, blocking channel and the
    attachment is simply not added.
    """

    COMPONENT = "Upload"

    def __init__(self, backend: "ChatBackend") -> None:
        super().__init__()
        self._backend = backend
        self._pending: list[AttachmentRef] = []

    @property
    def pending(self) -> list[AttachmentRef]:
        """Attachment ids waiting to go out with the next message."""
        return list(self._pending)

    async def upload(self, path: str | Path, photo: bool = False) -> AttachmentRef:
        """Upload a file and stage its id.

        Args:
            path: Local file to upload
            photo: Use the photo endpoint

        Returns:
            The attachment id

        Raises:
            UploadError: If the file cannot be read or the backend rejects it
        """
        path = Path(path).expanduser()
        if not path.is_file():
            raise UploadError(path, f"{path} is not a file")

        kind = "photo" if photo else "file"
        self._debug("info", f"Uploading {kind} {path.name}")
        try:
            ref = await self._backend.upload(path, photo=photo)
        except (ChatApiError, OSError) as e:
            self._debug("error", f"Upload of {path.name} failed: {e}")
            raise UploadError(path, str(e)) from e

        self._pending.append(ref)
        self._debug("info", f"Uploaded {path.name} as {ref}")
        return ref

    def discard(self, refs: list[AttachmentRef]) -> None:
        """Unstage ids that went out with a message."""
        self._pending = [ref for ref in self._pending if ref not in refs]

    def clear(self) -> None:
        self._pending = []
