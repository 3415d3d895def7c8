"""Storage of uploaded profile photos.

Photos are validated by extension and declared content type, size-checked
while being read, and written under the upload directory with a random
name. The rest of the application refers to them by a reference path of
the form `/uploads/<name>`, which is also the URL they are served from.
"""

import base64
import logging
import uuid
from pathlib import Path, PurePosixPath

from fastapi import UploadFile

from portfolio_generator.app.core.exceptions import (
    FileTooLargeError,
    FileTypeRejectedError,
)

log = logging.getLogger(__name__)

UPLOAD_URL_PREFIX = "/uploads/"
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/jpg", "image/png"}
MEDIA_TYPES = {".jpg": "image/jpeg", ".jpeg": "image/jpeg", ".png": "image/png"}
_CHUNK_SIZE = 64 * 1024


def has_upload(photo: UploadFile | None) -> bool:
    """True if the request actually carried a file (browsers send an empty part otherwise)."""
    return photo is not None and bool(photo.filename)


def validate_photo_type(filename: str, content_type: str | None) -> str:
    """Check that an upload is a JPEG or PNG image.

    Args:
        filename (str): The client-side file name.
        content_type (str | None): The declared content type of the file part.

    Returns:
        str: The lower-cased file extension, including the dot.

    Raises:
        FileTypeRejectedError: If either the extension or the content type is not allowed.

    """
    extension = PurePosixPath(filename).suffix.lower()
    declared = (content_type or "").split(";")[0].strip().lower()
    if extension not in ALLOWED_EXTENSIONS or declared not in ALLOWED_CONTENT_TYPES:
        _msg = f"Rejected upload {filename!r} with content type {declared!r}"
        log.warning(_msg)
        raise FileTypeRejectedError()
    return extension


async def read_limited(photo: UploadFile, max_bytes: int) -> bytes:
    """Read an upload into memory, failing as soon as it exceeds `max_bytes`.

    Raises:
        FileTooLargeError: If the upload is larger than `max_bytes`.

    """
    chunks: list[bytes] = []
    total = 0
    while chunk := await photo.read(_CHUNK_SIZE):
        total += len(chunk)
        if total > max_bytes:
            _msg = f"Rejected upload {photo.filename!r}: larger than {max_bytes} bytes"
            log.warning(_msg)
            raise FileTooLargeError(
                f"File too large. Maximum size is {max_bytes // (1024 * 1024)} MB",
            )
        chunks.append(chunk)
    return b"".join(chunks)


async def store_photo(photo: UploadFile, upload_dir: Path, max_bytes: int) -> str:
    """Validate an uploaded photo and write it to the upload directory.

    Args:
        photo (UploadFile): The uploaded file.
        upload_dir (Path): Directory the file is written to.
        max_bytes (int): Largest accepted size in bytes.

    Returns:
        str: The reference path of the stored photo, `/uploads/photo-<hex><ext>`.

    Raises:
        FileTypeRejectedError: If the file is not a JPEG or PNG.
        FileTooLargeError: If the file is larger than `max_bytes`.

    Notes:
        1. Validate the extension and declared content type.
        2. Read the whole file, enforcing the size limit, before anything is written.
        3. Write it under a random collision-resistant name.
        4. Disk access: writes one file under upload_dir.

    """
    extension = validate_photo_type(photo.filename or "", photo.content_type)
    content = await read_limited(photo, max_bytes)

    name = f"photo-{uuid.uuid4().hex}{extension}"
    upload_dir.mkdir(parents=True, exist_ok=True)
    (upload_dir / name).write_bytes(content)

    _msg = f"Stored uploaded photo as {name} ({len(content)} bytes)"
    log.debug(_msg)
    return f"{UPLOAD_URL_PREFIX}{name}"


def resolve_photo_path(reference: str | None, upload_dir: Path) -> Path | None:
    """Map a photo reference path to the file it names.

    Only the final path component is used, so a reference can never point
    outside the upload directory.

    Returns:
        Path | None: The file location, or None if the reference is empty or malformed.

    """
    if not reference or not reference.startswith(UPLOAD_URL_PREFIX):
        return None
    name = PurePosixPath(reference).name
    if not name or name != reference[len(UPLOAD_URL_PREFIX) :]:
        return None
    return upload_dir / name


def discard_photo(reference: str | None, upload_dir: Path) -> None:
    """Delete a stored photo. Missing files are ignored."""
    path = resolve_photo_path(reference, upload_dir)
    if path is None:
        return
    _msg = f"Discarding stored photo {path.name}"
    log.debug(_msg)
    path.unlink(missing_ok=True)


def photo_data_uri(reference: str | None, upload_dir: Path) -> str | None:
    """Load a stored photo as a `data:` URI so rendered HTML is self-contained.

    Args:
        reference (str | None): The photo reference path.
        upload_dir (Path): Directory holding stored photos.

    Returns:
        str | None: The data URI, or None if there is no photo or the file is gone.

    """
    path = resolve_photo_path(reference, upload_dir)
    if path is None:
        return None
    media_type = MEDIA_TYPES.get(path.suffix.lower())
    if media_type is None:
        return None
    try:
        content = path.read_bytes()
    except FileNotFoundError:
        _msg = f"Stored photo {path.name} is missing, rendering without it"
        log.warning(_msg)
        return None
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{media_type};base64,{encoded}"
