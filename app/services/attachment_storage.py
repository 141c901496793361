import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from fastapi import UploadFile

from app.core.config import settings
from app.core.exceptions import BadRequest

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


@dataclass
class StoredFile:
    filename: str
    original_filename: str
    file_path: str
    file_type: str | None
    file_size: int


def generate_unique_filename(original_filename: str) -> str:
    # <epoch-ms>-<random-hex>.<ext>
    ext = Path(original_filename or "").suffix.lower()
    return f"{int(time.time() * 1000)}-{secrets.token_hex(8)}{ext}"


class AttachmentStorage:
    """Local-disk store for notice attachment bytes."""

    def __init__(self, root: str | os.PathLike, max_bytes: int | None = None):
        self.root = Path(root)
        self.max_bytes = max_bytes if max_bytes is not None else settings.max_upload_bytes

    def save(self, upload: UploadFile) -> StoredFile:
        self.root.mkdir(parents=True, exist_ok=True)

        original = upload.filename or "file"
        filename = generate_unique_filename(original)
        target = self.root / filename

        size = 0
        with open(target, "wb") as out:
            while True:
                chunk = upload.file.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_bytes:
                    out.close()
                    target.unlink(missing_ok=True)
                    raise BadRequest(f"File too large: {original}")
                out.write(chunk)

        logger.info("stored attachment %s (%d bytes) as %s", original, size, target)
        return StoredFile(
            filename=filename,
            original_filename=original,
            file_path=str(target),
            file_type=upload.content_type,
            file_size=size,
        )

    def delete(self, file_path: str) -> None:
        """Raises OSError when the file cannot be removed."""
        os.remove(file_path)


def get_attachment_storage() -> AttachmentStorage:
    return AttachmentStorage(settings.UPLOAD_DIR)
