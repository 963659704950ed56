import logging
import mimetypes
from pathlib import Path
from uuid import uuid4

from fastapi import UploadFile

from fleetops.config import settings
from fleetops.utils.exceptions import NotFoundException

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png":  ".png",
    "image/webp": ".webp",
}


class LocalImageStore:
    """Stores vehicle photos on the local filesystem.

    Every upload gets its own file name, so discarding one request's photo
    never touches a photo another request stored for the same VIN.
    """

    def __init__(self, root: str | Path, base_url: str, max_bytes: int, allowed_types: list[str]):
        self.root = Path(root)
        self.base_url = base_url.rstrip("/")
        self.max_bytes = max_bytes
        self.allowed_types = set(allowed_types)

    def upload(self, vin: str, file: UploadFile) -> str | None:
        """Write the photo and return its public URL, or None if it was rejected."""
        content_type = file.content_type or ""
        if content_type not in self.allowed_types:
            logger.warning(f"Rejected photo for {vin}: content type {content_type!r}")
            return None

        data = file.file.read(self.max_bytes + 1)
        if not data:
            logger.warning(f"Rejected photo for {vin}: empty file")
            return None
        if len(data) > self.max_bytes:
            logger.warning(f"Rejected photo for {vin}: larger than {self.max_bytes} bytes")
            return None

        ext = _EXTENSIONS.get(content_type) or mimetypes.guess_extension(content_type) or ""
        filename = f"{vin}-{uuid4().hex}{ext}"
        target = self._inside_root(filename)
        if target is None:
            logger.warning(f"Rejected photo for {vin!r}: file name escapes the image store")
            return None
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            target.write_bytes(data)
        except OSError as e:
            logger.warning(f"Could not store photo for {vin}: {e}")
            return None

        return f"{self.base_url}/{filename}"

    def _inside_root(self, filename: str) -> Path | None:
        if Path(filename).name != filename:
            return None
        root = self.root.resolve()
        path = (root / filename).resolve()
        if path.parent != root:
            return None
        return path

    def path_for(self, filename: str) -> Path:
        # Only bare file names are served
        if Path(filename).name != filename or filename in ("", ".", ".."):
            raise NotFoundException(f"Image {filename} not found")
        path = self.root / filename
        if not path.is_file():
            raise NotFoundException(f"Image {filename} not found")
        return path

    def delete(self, url: str) -> None:
        filename = url.rsplit("/", 1)[-1]
        try:
            (self.root / Path(filename).name).unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Could not remove photo {filename}: {e}")


def get_image_store() -> LocalImageStore:
    return LocalImageStore(
        settings.IMAGE_STORE_DIR,
        settings.IMAGE_BASE_URL,
        settings.IMAGE_MAX_BYTES,
        settings.get_image_allowed_types(),
    )
