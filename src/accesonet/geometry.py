"""Pure rotate/scale helpers for in-memory images."""
from __future__ import annotations

from PIL import Image

try:  # Pillow>=9
    _SCALE_RESAMPLE = Image.Resampling.BILINEAR  # type: ignore[attr-defined]
    _ROTATE_RESAMPLE = Image.Resampling.BICUBIC  # type: ignore[attr-defined]
except AttributeError:  # pragma: no cover - fallback for older Pillow
    _SCALE_RESAMPLE = Image.BILINEAR
    _ROTATE_RESAMPLE = Image.BICUBIC


def rotate(image: Image.Image, angle_degrees: float) -> Image.Image:
    """Return a copy of ``image`` rotated clockwise by ``angle_degrees``.

    The canvas grows to the rotated bounds, so 90 and 270 swap width and
    height. Multiples of 90 are lossless transposes.
    """
    # PIL rotates counter-clockwise
    return image.rotate(-float(angle_degrees), resample=_ROTATE_RESAMPLE, expand=True)


def scale_to_max(image: Image.Image, max_dimension: int) -> Image.Image:
    """Shrink ``image`` so its larger side equals ``max_dimension``.

    Images already within bounds are returned as-is (same object).
    """
    if max_dimension <= 0:
        raise ValueError("`max_dimension` must be positive.")

    width, height = image.size
    if width <= max_dimension and height <= max_dimension:
        return image

    if width >= height:
        new_width = max_dimension
        new_height = max(1, round(height * max_dimension / width))
    else:
        new_height = max_dimension
        new_width = max(1, round(width * max_dimension / height))
    return image.resize((new_width, new_height), resample=_SCALE_RESAMPLE)
