"""Storage for uploaded images."""

import logging
import mimetypes
import re
import time
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from postboard.config import Settings

logger = logging.getLogger(__name__)

_EXTENSION_RE = re.compile(r"\.[a-z0-9]{1,10}")


class InvalidUploadError(ValueError):
    """Raised when an uploaded file is rejected before it is stored."""


def file_extension(filename: str | None, content_type: str | None) -> str:
    """Extension for the stored file, taken from the original filename.

    Falls back to the extension registered for the content type when the
    filename has none or an unusable one.
    """
    suffix = Path(filename or "").suffix.lower()
    if _EXTENSION_RE.fullmatch(suffix):
        return suffix
    return mimetypes.guess_extension(content_type or "") or ""


def write_unique(directory: Path, timestamp_ms: int, suffix: str, data: bytes) -> str:
    """Write data to `<timestamp><suffix>` and return the stored name.

    Files are created exclusively; if the name is taken the timestamp is
    bumped until a free one is found.
    """
    directory.mkdir(parents=True, exist_ok=True)
    stamp = timestamp_ms
    while True:
        name = f"{stamp}{suffix}"
        try:
            with open(directory / name, "xb") as fh:
                fh.write(data)
        except FileExistsError:
            stamp += 1
            continue
        return name


async def save_upload(file: UploadFile, settings: Settings) -> str:
    """Validate and store an uploaded image, returning its public path."""
    if file.content_type not in settings.allowed_image_types:
        raise InvalidUploadError(
            f"Invalid file type. Allowed types: {', '.join(settings.allowed_image_types)}"
        )

    # Read one byte past the limit so oversized files can be detected
    data = await file.read(settings.max_upload_bytes + 1)
    if not data:
        raise InvalidUploadError("Uploaded file is empty")
    if len(data) > settings.max_upload_bytes:
        raise InvalidUploadError(
            f"File too large. Maximum size is {settings.max_upload_bytes} bytes."
        )

    name = await run_in_threadpool(
        write_unique,
        Path(settings.upload_dir),
        int(time.time() * 1000),
        file_extension(file.filename, file.content_type),
        data,
    )
    logger.info(f"Stored upload {name} ({len(data)} bytes)")
    return f"{settings.upload_url_prefix.rstrip('/')}/{name}"


def discard_upload(public_path: str | None, settings: Settings) -> None:
    """Remove a stored upload whose request failed after it was written."""
    if not public_path:
        return
    name = public_path.rsplit("/", 1)[-1]
    (Path(settings.upload_dir) / name).unlink(missing_ok=True)
    logger.info(f"Discarded upload {name}")
