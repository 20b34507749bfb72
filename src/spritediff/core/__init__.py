"""Read-only sprite document model and snapshot loading."""

from .types import AniDir, ColorSpaceType, LayerFlags, LayerType, PixelFormat, Rect
from .document import (
    Cel,
    ColorSpace,
    Doc,
    Grid,
    Image,
    Layer,
    LayerGroup,
    LayerImage,
    LayerTilemap,
    Palette,
    Sprite,
    Tag,
    Tileset,
    Tilesets,
)
from .loader import doc_from_dict, load_doc

__all__ = [
    "AniDir",
    "Cel",
    "ColorSpace",
    "ColorSpaceType",
    "Doc",
    "Grid",
    "Image",
    "Layer",
    "LayerFlags",
    "LayerGroup",
    "LayerImage",
    "LayerTilemap",
    "LayerType",
    "Palette",
    "PixelFormat",
    "Rect",
    "Sprite",
    "Tag",
    "Tileset",
    "Tilesets",
    "doc_from_dict",
    "load_doc",
]
