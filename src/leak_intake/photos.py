"""Photo intake — turns uploaded image files into inline ``EncodedImage`` payloads.

Both functions take the current ``AnswerSet`` and return a replacement; the
input is never modified.  Uploads are anything with an awaitable ``read()``
plus optional ``content_type`` / ``filename`` attributes (FastAPI's
``UploadFile`` fits).
"""

from __future__ import annotations

import logging
import mimetypes
from typing import Any, Protocol

from leak_intake.constants import ACCEPTED_MEDIA_TYPES, MAX_PHOTOS
from leak_intake.errors import UnsupportedMediaType, ValidationError
from leak_intake.models.answers import AnswerSet, EncodedImage

logger = logging.getLogger(__name__)

# mimetypes does not know the HEIF family on every platform.
_EXTRA_EXTENSIONS = {
    ".heic": "image/heic",
    ".heif": "image/heif",
    ".webp": "image/webp",
}


class Upload(Protocol):
    filename: Any
    content_type: Any

    async def read(self) -> bytes: ...


def resolve_media_type(content_type: str | None, filename: str | None) -> str | None:
    """Pick the media type from the declared content type, else the file name."""
    if content_type and content_type != "application/octet-stream":
        return content_type.split(";", 1)[0].strip().lower()
    if filename:
        lowered = filename.lower()
        for ext, media_type in _EXTRA_EXTENSIONS.items():
            if lowered.endswith(ext):
                return media_type
        guessed, _ = mimetypes.guess_type(lowered)
        return guessed
    return None


async def add_photo(
    answers: AnswerSet,
    upload: Upload,
) -> tuple[AnswerSet, EncodedImage | None]:
    """Read, encode and append one photo.

    At the photo limit this is a no-op: the answers come back unchanged
    with ``None`` in place of the image.

    Raises:
        UnsupportedMediaType: if the file is not an accepted image type.
        ValidationError: if the file is empty.
    """
    if len(answers.photos) >= MAX_PHOTOS:
        logger.info("Photo limit (%d) reached; ignoring upload", MAX_PHOTOS)
        return answers, None

    media_type = resolve_media_type(
        getattr(upload, "content_type", None),
        getattr(upload, "filename", None),
    )
    if media_type not in ACCEPTED_MEDIA_TYPES:
        raise UnsupportedMediaType(f"Rejected upload with media type {media_type!r}")

    raw = await upload.read()
    if not raw:
        raise ValidationError("Uploaded file is empty")

    image = EncodedImage.from_bytes(raw, media_type)
    updated = answers.replace(photos=(*answers.photos, image))
    logger.debug("Photo added (%s, %d bytes); now %d", media_type, len(raw), len(updated.photos))
    return updated, image


def remove_photo(answers: AnswerSet, index: int) -> AnswerSet:
    """Remove the photo at ``index``; later photos shift down.

    Raises:
        ValidationError: if ``index`` is out of range.
    """
    if not 0 <= index < len(answers.photos):
        raise ValidationError(f"Photo index {index} out of range (have {len(answers.photos)})")
    photos = answers.photos[:index] + answers.photos[index + 1:]
    return answers.replace(photos=photos)
