"""Utility functions used across the project."""

from .image_ops import count_different_pixels, is_same_image

__all__ = [
    "count_different_pixels",
    "is_same_image",
]
