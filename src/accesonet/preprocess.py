"""Turn an image into the flat float32 buffer the classifier model consumes."""
from __future__ import annotations

from enum import Enum

import numpy as np
from PIL import Image

try:  # Pillow>=9
    _RESAMPLE = Image.Resampling.BILINEAR  # type: ignore[attr-defined]
except AttributeError:  # pragma: no cover - fallback for older Pillow
    _RESAMPLE = Image.BILINEAR


class Normalization(str, Enum):
    # channel / 127.5 - 1, range [-1, 1]
    SYMMETRIC = "symmetric"
    # unscaled [0, 255]; the model normalizes internally
    RAW = "raw"


def to_input_tensor(
    image: Image.Image,
    width: int,
    height: int,
    normalization: Normalization = Normalization.RAW,
) -> np.ndarray:
    """Resize ``image`` to ``width`` x ``height`` and flatten it to R,G,B floats.

    Returns a contiguous float32 array of length ``width * height * 3`` in
    row-major, channel-interleaved order and native byte order.
    """
    if width <= 0 or height <= 0:
        raise ValueError("Tensor `width` and `height` must be positive.")

    rgb = image.convert("RGB")
    if rgb.size != (width, height):
        rgb = rgb.resize((width, height), resample=_RESAMPLE)
    arr = np.asarray(rgb, dtype=np.float32).reshape(-1)

    normalization = Normalization(normalization)
    if normalization is Normalization.SYMMETRIC:
        arr = arr / np.float32(127.5) - np.float32(1.0)
    return np.ascontiguousarray(arr, dtype=np.float32)
