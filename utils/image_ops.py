import io
from datetime import datetime

import piexif
from PIL import Image

from logging_config import get_logger

logger = get_logger(__name__)

SUPPORTED_FORMATS = ("JPEG", "PNG")


def identify_image_format(image_bytes: bytes) -> str:
    """
    Identifies and verifies an encoded image without fully decoding it.

    Args:
        image_bytes: Raw uploaded payload.

    Returns:
        str: The Pillow format name ("JPEG" or "PNG").

    Raises:
        ValueError: If the payload is not a readable PNG or JPEG image.
    """
    if not image_bytes:
        raise ValueError("image payload is empty")

    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            image_format = img.format
            # verify() checks structure and checksums without decoding pixels.
            img.verify()
    except Exception as e:
        raise ValueError(f"image payload could not be parsed: {e}") from e

    if image_format not in SUPPORTED_FORMATS:
        raise ValueError(
            f"unsupported image format {image_format!r}, expected PNG or JPEG"
        )
    return image_format


def read_capture_time(image_bytes: bytes) -> datetime | None:
    """
    Returns the EXIF DateTimeOriginal of a JPEG as a naive datetime.

    Returns None when the image carries no usable capture time (PNG files,
    stripped EXIF, unparsable values).
    """
    try:
        exif_dict = piexif.load(image_bytes)
        raw = exif_dict["Exif"].get(piexif.ExifIFD.DateTimeOriginal)
        if not raw:
            return None
        # Format is typically "YYYY:MM:DD HH:MM:SS"
        return datetime.strptime(raw.decode("utf-8").strip("\x00 "), "%Y:%m:%d %H:%M:%S")
    except Exception as e:
        logger.debug(f"No EXIF capture time in upload: {e}")
        return None
