"""Image input handling for provider requests."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from did_i_fumble.exceptions import ImageError

ImageInput = str | Path | bytes | Image.Image

_FORMAT_MIME_TYPES = {
    "PNG": "image/png",
    "JPEG": "image/jpeg",
    "WEBP": "image/webp",
}


@dataclass(frozen=True)
class ImagePayload:
    """Encoded image bytes with their MIME type."""

    content: bytes
    mime_type: str

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.content).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


def _encode_pil_image(image: Image.Image) -> ImagePayload:
    fmt = (image.format or "PNG").upper()
    if fmt not in _FORMAT_MIME_TYPES:
        fmt = "PNG"
    with BytesIO() as buffer:
        image.save(buffer, format=fmt)
        content = buffer.getvalue()
    return ImagePayload(content=content, mime_type=_FORMAT_MIME_TYPES[fmt])


def _sniff_mime_type(content: bytes) -> str:
    try:
        with Image.open(BytesIO(content)) as image:
            fmt = (image.format or "").upper()
    except (Image.DecompressionBombError, UnidentifiedImageError, OSError) as e:
        raise ImageError(f"Failed to open image: {e}") from e
    return _FORMAT_MIME_TYPES.get(fmt, "image/png")


def load_image_payload(image: ImageInput, mime_type: str | None = None) -> ImagePayload:
    """Resolve a path, raw bytes or PIL image into an ImagePayload.

    Args:
        image: File path (str or Path), raw image bytes, or PIL Image.
        mime_type: MIME type of raw bytes, if already known.

    Raises:
        ImageError: If the file is missing, empty or not a readable image.
    """
    if isinstance(image, Image.Image):
        try:
            return _encode_pil_image(image)
        except (OSError, ValueError) as e:
            raise ImageError(f"Failed to encode image: {e}") from e

    if isinstance(image, bytes):
        content = image
    else:
        path = Path(image) if isinstance(image, str) else image
        if not path.exists():
            raise ImageError(f"Image file not found: {path}")
        content = path.read_bytes()

    if not content:
        raise ImageError("Image is empty")
    if mime_type:
        normalized = mime_type.split(";")[0].strip().lower()
        return ImagePayload(content=content, mime_type="image/jpeg" if normalized == "image/jpg" else normalized)
    return ImagePayload(content=content, mime_type=_sniff_mime_type(content))
