import base64
import logging
from dataclasses import dataclass

from studio_errors import DecodeFailed

logger = logging.getLogger(__name__)

DOWNLOAD_STEM = "ai-generated-image"
DEFAULT_EXTENSION = "bin"

EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
    "image/bmp": "bmp",
    "image/svg+xml": "svg",
    "image/heic": "heic",
    "image/heif": "heif",
}


@dataclass(frozen=True)
class ImagePayload:
    """An image held in memory as base64 plus its MIME type"""

    base64: str
    mime_type: str

    @property
    def data_url(self) -> str:
        """Inline data URL form of the payload (data:<mime>;base64,...)"""
        return f"data:{self.mime_type};base64,{self.base64}"

    @property
    def raw_bytes(self) -> bytes:
        return base64.b64decode(self.base64)

    @property
    def download_name(self) -> str:
        ext = EXTENSIONS.get(self.mime_type, DEFAULT_EXTENSION)
        return f"{DOWNLOAD_STEM}.{ext}"


def is_image_type(mime_type) -> bool:
    return bool(mime_type) and mime_type.startswith("image/")


def file_to_base64(file) -> ImagePayload:
    """
    Read an uploaded file into an in-memory base64 payload.

    Args:
        file: Streamlit UploadedFile (anything with getvalue() and .type)

    Raises:
        DecodeFailed: the read errored or returned nothing
    """
    try:
        data = file.getvalue()
    except Exception as e:
        logger.error(f"Failed to read uploaded file: {e}")
        raise DecodeFailed("Failed to load image.") from e

    if not data:
        logger.error("Uploaded file is empty")
        raise DecodeFailed("Failed to load image.")

    logger.info(f"✓ Loaded upload: {getattr(file, 'name', '<memory>')} ({len(data) / 1024:.1f} KB, {file.type})")
    return ImagePayload(base64=base64.b64encode(data).decode("utf-8"), mime_type=file.type)
