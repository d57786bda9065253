"""Decode images from a path, bytes or stream and correct their EXIF orientation.

The source is read once into memory; the orientation lookup and the pixel
decode both run from that buffer, so streams that can only be consumed once
are supported.
"""
from __future__ import annotations

import io
import logging
import os
from enum import Enum
from typing import BinaryIO, Union

from PIL import Image, UnidentifiedImageError

from .errors import ErrorKind, Failure
from .geometry import rotate

logger = logging.getLogger(__name__)

ImageSource = Union[str, "os.PathLike[str]", bytes, bytearray, BinaryIO]

EXIF_ORIENTATION_TAG = 0x0112


class Orientation(Enum):
    NORMAL = 0
    ROTATE_90 = 90
    ROTATE_180 = 180
    ROTATE_270 = 270


# Mirrored variants (2, 4, 5, 7) are treated as NORMAL.
_EXIF_TO_ORIENTATION = {
    6: Orientation.ROTATE_90,
    3: Orientation.ROTATE_180,
    8: Orientation.ROTATE_270,
}


def _read_source(source: ImageSource) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as handle:
            return handle.read()
    if hasattr(source, "read"):
        data = source.read()
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError(f"Image stream must be binary, got {type(data).__name__}")
        return bytes(data)
    raise TypeError(f"Unsupported image source: {type(source).__name__}")


def read_orientation(data: bytes) -> Orientation:
    """Return the EXIF orientation of encoded image ``data``.

    Never raises: unreadable or absent metadata yields ``NORMAL``.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            value = img.getexif().get(EXIF_ORIENTATION_TAG, 1)
    except Exception as exc:  # metadata is best-effort
        logger.warning("Error reading EXIF orientation: %s", exc)
        return Orientation.NORMAL
    return _EXIF_TO_ORIENTATION.get(value, Orientation.NORMAL)


def apply_orientation(image: Image.Image, orientation: Orientation) -> Image.Image:
    if orientation is Orientation.NORMAL:
        return image
    return rotate(image, orientation.value)


def load_from_source(source: ImageSource) -> Union[Image.Image, Failure]:
    """Decode ``source`` into an upright image, or return a DECODE_ERROR failure."""
    try:
        data = _read_source(source)
    except (OSError, TypeError, ValueError) as exc:
        logger.error("Error opening image source: %s", exc)
        return Failure(ErrorKind.DECODE_ERROR, f"Could not open image source: {exc}", exc)

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            image = img.copy()
    except (UnidentifiedImageError, OSError, EOFError, SyntaxError, ValueError, Image.DecompressionBombError) as exc:
        logger.error("Error decoding image: %s", exc)
        return Failure(ErrorKind.DECODE_ERROR, f"Could not decode image: {exc}", exc)

    orientation = read_orientation(data)
    if orientation is not Orientation.NORMAL:
        logger.debug("Applying EXIF rotation of %s degrees", orientation.value)
    return apply_orientation(image, orientation)
