from __future__ import annotations

from typing import Optional

import numpy as np

from ..core.document import Image


def is_same_image(a: Optional[Image], b: Optional[Image]) -> bool:
    """Return ``True`` when both images have the same format, size and pixels."""

    if a is b:
        return True
    if a is None or b is None:
        return False
    if a.pixel_format != b.pixel_format:
        return False
    if a.pixels.shape != b.pixels.shape:
        return False
    return bool(np.array_equal(a.pixels, b.pixels))


def count_different_pixels(a: Image, b: Image) -> int:
    """Number of pixels where any channel differs between ``a`` and ``b``."""

    if a.pixel_format != b.pixel_format:
        raise ValueError(f"Pixel formats differ: {a.pixel_format.name} vs {b.pixel_format.name}")
    if a.pixels.shape != b.pixels.shape:
        raise ValueError(f"Image sizes differ: {a.pixels.shape} vs {b.pixels.shape}")
    return int(np.count_nonzero(np.any(a.pixels != b.pixels, axis=-1)))
