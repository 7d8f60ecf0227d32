"""Upload validation, transport encoding and result normalization."""

import base64
import io
import logging
import math
from dataclasses import dataclass
from pathlib import PurePath
from typing import TYPE_CHECKING, Literal

from PIL import Image, UnidentifiedImageError

from ..config import settings
from .errors import (
    ERROR_MESSAGES,
    EditFailed,
    ErrorCategory,
    UploadRejected,
    classify_error,
)

if TYPE_CHECKING:
    from .base import BaseImageEditor

logger = logging.getLogger(__name__)

ALLOWED_MEDIA_TYPES = ("image/png", "image/jpeg", "image/webp")
DEFAULT_RESULT_EXTENSION = "png"
DOWNLOAD_SUFFIX = "-processed"


def format_file_size(size: int) -> str:
    """Human readable size with 1024-based units, e.g. ``1.5 MB``."""
    if not size:
        return "0 Bytes"
    units = ["Bytes", "KB", "MB", "GB", "TB"]
    index = min(int(math.floor(math.log(size, 1024))), len(units) - 1)
    value = round(size / 1024**index, 2)
    return f"{value:g} {units[index]}"


def validate_upload(media_type: str | None, size: int, max_mb: int | None = None) -> None:
    """Reject files of an unsupported type or above the size ceiling.

    Raises:
        UploadRejected: with a message suitable for the user
    """
    if media_type not in ALLOWED_MEDIA_TYPES:
        raise UploadRejected("Invalid file format. Please choose a PNG, JPG, or WEBP image.")

    limit_mb = max_mb if max_mb is not None else settings.max_upload_mb
    if size > limit_mb * 1024 * 1024:
        raise UploadRejected(f"File is too large. Please choose a file smaller than {limit_mb}MB.")


def to_data_url(data: bytes, media_type: str) -> str:
    return f"data:{media_type};base64,{base64.b64encode(data).decode('ascii')}"


def parse_data_url(data_url: str) -> tuple[str, bytes]:
    """Split a base64 data URL into (media type, raw bytes)."""
    header, sep, payload = data_url.partition(",")
    if not sep or not header.startswith("data:") or not header.endswith(";base64"):
        raise ValueError("Not a base64 data URL")
    media_type = header[len("data:"):-len(";base64")]
    return media_type, base64.b64decode(payload)


def data_url_size(data_url: str) -> int:
    """Decoded byte size of a base64 data URL, computed from its length."""
    payload = data_url[data_url.find(",") + 1:]
    padding = 2 if payload.endswith("==") else 1 if payload.endswith("=") else 0
    return len(payload) * 3 // 4 - padding


@dataclass
class SourceImage:
    """An uploaded image waiting to be edited."""

    filename: str
    media_type: str
    data: bytes
    width: int
    height: int

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def data_url(self) -> str:
        return to_data_url(self.data, self.media_type)

    def to_dict(self):
        return {
            "filename": self.filename,
            "media_type": self.media_type,
            "size": self.size,
            "size_label": format_file_size(self.size),
            "width": self.width,
            "height": self.height,
        }


def load_source_image(filename: str, media_type: str | None, data: bytes) -> SourceImage:
    """Validate an upload and read its natural pixel dimensions."""
    validate_upload(media_type, len(data))
    try:
        with Image.open(io.BytesIO(data)) as img:
            width, height = img.size
    except (UnidentifiedImageError, OSError):
        raise UploadRejected(ERROR_MESSAGES[ErrorCategory.UNSUPPORTED_IMAGE])

    logger.info(f"Loaded source image {filename}: {width}x{height}, {format_file_size(len(data))}")
    return SourceImage(
        filename=filename,
        media_type=media_type,
        data=data,
        width=width,
        height=height,
    )


@dataclass
class ResultImage:
    """Edited image held as a data URL. Crops replace it with a new instance."""

    data_url: str

    @classmethod
    def from_bytes(cls, data: bytes, media_type: str) -> "ResultImage":
        return cls(data_url=to_data_url(data, media_type))

    @property
    def media_type(self) -> str:
        return self.data_url[len("data:"):self.data_url.find(";")]

    @property
    def size(self) -> int:
        return data_url_size(self.data_url)

    @property
    def data(self) -> bytes:
        return parse_data_url(self.data_url)[1]

    def to_dict(self):
        return {
            "media_type": self.media_type,
            "size": self.size,
            "size_label": format_file_size(self.size),
        }


def download_filename(original_filename: str, media_type: str | None) -> str:
    """Name for the downloaded result: original stem plus a fixed suffix."""
    stem = PurePath(original_filename).stem or "image"
    extension = ""
    if media_type and "/" in media_type:
        extension = media_type.split("/", 1)[1]
    return f"{stem}{DOWNLOAD_SUFFIX}.{extension or DEFAULT_RESULT_EXTENSION}"


@dataclass
class EditOutcome:
    """Result of one edit submission that did not raise."""

    status: Literal["ok", "no_image"]
    result: ResultImage | None = None
    caption: str | None = None


async def submit_edit(
    editor: "BaseImageEditor", source: SourceImage, prompt: str
) -> EditOutcome:
    """Send the source image and instruction to the editor backend.

    Raises:
        EditFailed: when the call raised; the cause is classified for the user
    """
    logger.info(
        f"Edit request: editor={editor.name}, {source.media_type}, "
        f"{format_file_size(source.size)}, prompt={prompt[:50]}..."
    )
    try:
        result = await editor.edit(source.data, source.media_type, prompt)
    except Exception as e:
        category = classify_error(e)
        logger.exception(f"Edit request failed ({category.value})")
        raise EditFailed(category) from e

    if result.image_bytes is None:
        logger.warning("Editor response did not contain an image")
        return EditOutcome(status="no_image", caption=result.text)

    return EditOutcome(
        status="ok",
        result=ResultImage.from_bytes(result.image_bytes, result.mime_type or "image/png"),
        caption=result.text,
    )
