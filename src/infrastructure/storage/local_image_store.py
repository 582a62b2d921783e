"""
infrastructure.storage.local_image_store - Uploaded images on local disk.

Implements ImageStorePort. Files are written under UPLOAD_DIR with a
random name and served by the REST app's /uploads static mount, so the
returned URL stays valid as long as the directory does.
"""

from __future__ import annotations

import logging
import mimetypes
import uuid
from pathlib import Path

from domain.exceptions import ImageStorageError, InvalidInputError

logger = logging.getLogger(__name__)


class LocalImageStore:
    """Writes images to a directory and returns their public URL."""

    def __init__(self, upload_dir: str, public_base_url: str):
        self._upload_dir = Path(upload_dir)
        self._public_base_url = public_base_url.rstrip("/")

    def ensure_dir(self) -> Path:
        self._upload_dir.mkdir(parents=True, exist_ok=True)
        return self._upload_dir

    async def save(self, data: bytes, filename: str, content_type: str) -> str:
        if content_type and not content_type.startswith("image/"):
            raise InvalidInputError(
                f"Unsupported content type '{content_type}', expected an image."
            )

        suffix = Path(filename or "").suffix.lower()
        if not suffix:
            suffix = mimetypes.guess_extension(content_type or "") or ".jpg"
        name = f"{uuid.uuid4().hex}{suffix}"

        try:
            dest = self.ensure_dir() / name
            dest.write_bytes(data)
        except OSError as exc:
            raise ImageStorageError(f"Could not store image: {exc}") from exc

        logger.info("Stored image %s (%d bytes)", name, len(data))
        return f"{self._public_base_url}/uploads/{name}"

    async def delete(self, url: str) -> None:
        """Remove a file previously returned by save(); unknown URLs are ignored."""
        name = url.rsplit("/", 1)[-1]
        path = self._upload_dir / name
        if name in ("", ".", "..") or path.parent != self._upload_dir:
            return
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise ImageStorageError(f"Could not remove image: {exc}") from exc
        logger.info("Removed image %s", name)
