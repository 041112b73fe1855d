import asyncio
import binascii
from typing import List, Sequence
from fastapi import UploadFile
from loguru import logger
from .errors import FileReadError, ImageTooLargeError, UnsupportedMediaError
from .table_types import ImageInput
from ..core.config import settings


def check_image(filename: str | None, content_type: str | None, size: int) -> None:
    if not content_type or not content_type.startswith("image/"):
        raise UnsupportedMediaError(f"Unsupported media type for {filename}: {content_type}")
    if size > settings.max_image_bytes:
        raise ImageTooLargeError(
            f"{filename} exceeds max size of {settings.max_image_bytes} bytes"
        )


async def read_upload(file: UploadFile) -> ImageInput:
    try:
        content = await file.read()
    except Exception as e:
        logger.error(f"Failed to read upload {file.filename}: {e!r}")
        raise FileReadError(file.filename) from e

    check_image(file.filename, file.content_type, len(content))
    return ImageInput(data=content, mime_type=file.content_type, filename=file.filename)


async def read_uploads(files: Sequence[UploadFile]) -> List[ImageInput]:
    """
    Read every upload concurrently and wait for all of them.

    Order follows the selection order, not completion order. A single failed
    read fails the whole batch.
    """
    images = await asyncio.gather(*(read_upload(f) for f in files))
    logger.info(
        "Uploads read",
        files=len(images),
        total_bytes=sum(img.size for img in images),
    )
    return list(images)


def read_data_uri(data_uri: str, mime_type: str | None = None, filename: str | None = None) -> ImageInput:
    """Decode one base64 data-URI image, as browsers produce with FileReader.readAsDataURL"""
    try:
        image = ImageInput.from_data_uri(data_uri, mime_type=mime_type, filename=filename)
    except (binascii.Error, ValueError) as e:
        logger.error(f"Failed to decode data URI {filename}: {e!r}")
        raise FileReadError(filename) from e

    check_image(filename, image.mime_type, image.size)
    return image
