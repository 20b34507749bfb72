"""Build :class:`Doc` snapshots from JSON files.

Snapshot layout (all keys but ``width`` and ``height`` are optional)::

    {
      "width": 32, "height": 32, "pixel_format": "rgb",
      "frames": [100, 100],
      "tags": [{"name": "walk", "from": 0, "to": 1, "color": "#ff0000ff",
                "ani_dir": "ping_pong", "repeat": 0}],
      "palettes": [{"frame": 0, "colors": ["#000000ff", "#ffffffff"]}],
      "tilesets": [{"tile_size": [8, 8], "tiles": [<image>, ...]}],
      "layers": [
        {"type": "image", "name": "bg", "flags": 3, "opacity": 255,
         "cels": [{"frame": 0, "bounds": [0, 0, 2, 2], "opacity": 255,
                   "image": <image>}]},
        {"type": "tilemap", "name": "map", "tileset_index": 0, "cels": []},
        {"type": "group", "name": "fx", "layers": [...]}
      ],
      "color_space": {"type": "rgb_with_gamma", "gamma": 2.2},
      "grid_bounds": [0, 0, 16, 16]
    }

An ``<image>`` is ``{"width": w, "height": h, "pixels": [...]}`` with an
optional ``pixel_format`` (defaults to the sprite's).  ``pixels`` may be flat
or nested; it is reshaped to ``(h, w, channels)``.
"""
from __future__ import annotations

import base64
import binascii
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..errors import InvalidSnapshotError
from .document import (
    DEFAULT_FRAME_DURATION,
    DEFAULT_GRID_BOUNDS,
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
from .types import AniDir, ColorSpaceType, LayerFlags, PixelFormat, Rect

logger = logging.getLogger(__name__)

_DEFAULT_LAYER_FLAGS = int(LayerFlags.VISIBLE | LayerFlags.EDITABLE)


def load_doc(path: str | Path) -> Doc:
    """Read a JSON snapshot from ``path``."""

    try:
        with Path(path).open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        raise InvalidSnapshotError(f"Cannot read snapshot '{path}': {exc}") from exc
    return doc_from_dict(data, filename=str(path))


def doc_from_dict(data: Dict[str, Any], filename: Optional[str] = None) -> Doc:
    if not isinstance(data, dict):
        raise InvalidSnapshotError("Snapshot must be a JSON object")
    try:
        sprite = _parse_sprite(data)
    except InvalidSnapshotError:
        raise
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise InvalidSnapshotError(f"Invalid snapshot {filename or '<memory>'}: {exc!r}") from exc
    logger.debug(
        "Loaded %s: %dx%d, %d frame(s), %d layer(s)",
        filename or "<memory>",
        sprite.width,
        sprite.height,
        sprite.total_frames,
        sprite.all_layers_count(),
    )
    return Doc(sprite=sprite, filename=filename or "")


def parse_color(value: Any) -> int:
    """Return a packed ``0xRRGGBBAA`` integer from a hex string or integer."""

    if isinstance(value, bool):
        raise ValueError(f"Invalid color {value!r}")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFFFF:
            raise ValueError(f"Color {value} out of range")
        return value
    if not isinstance(value, str):
        raise ValueError(f"Invalid color {value!r}")
    text = value.strip()
    if text.startswith("#"):
        text = text[1:]
    if len(text) == 6:
        text += "ff"
    if len(text) != 8:
        raise ValueError("Hex colors must be #RRGGBB or #RRGGBBAA")
    return int(text, 16)


def _enum_value(enum_cls, value: Any, default):
    if value is None:
        return default
    if isinstance(value, str):
        try:
            return enum_cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown {enum_cls.__name__} '{value}'") from None
    return enum_cls(value)


def _object(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{what} must be a JSON object, got {type(value).__name__}")
    return value


def _items(data: Dict[str, Any], key: str, default: Any = ()) -> List[Any]:
    value = data.get(key, default)
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"'{key}' must be a JSON array, got {type(value).__name__}")
    return list(value)


def _parse_sprite(data: Dict[str, Any]) -> Sprite:
    pixel_format = _enum_value(PixelFormat, data.get("pixel_format"), PixelFormat.RGB)
    frames = tuple(int(d) for d in _items(data, "frames", [DEFAULT_FRAME_DURATION]))
    if not frames:
        raise ValueError("A sprite needs at least one frame")

    tilesets = None if data.get("tilesets") is None else _items(data, "tilesets")
    grid_bounds = data.get("grid_bounds")
    return Sprite(
        width=int(data["width"]),
        height=int(data["height"]),
        pixel_format=pixel_format,
        frame_durations=frames,
        tags=tuple(_parse_tag(t) for t in _items(data, "tags")),
        palettes=tuple(_parse_palette(p) for p in _items(data, "palettes")),
        tilesets=None if tilesets is None else Tilesets(
            tuple(_parse_tileset(t, pixel_format) for t in tilesets)
        ),
        root=LayerGroup("Root", layers=_parse_layers(_items(data, "layers"), pixel_format)),
        color_space=_parse_color_space(data.get("color_space")),
        grid_bounds=DEFAULT_GRID_BOUNDS if grid_bounds is None else Rect.from_sequence(grid_bounds),
    )


def _parse_tag(data: Dict[str, Any]) -> Tag:
    data = _object(data, "tag")
    return Tag(
        name=str(data.get("name", "")),
        from_frame=int(data["from"]),
        to_frame=int(data["to"]),
        color=parse_color(data.get("color", 0x000000FF)),
        ani_dir=_enum_value(AniDir, data.get("ani_dir"), AniDir.FORWARD),
        repeat=int(data.get("repeat", 0)),
    )


def _parse_palette(data: Dict[str, Any]) -> Palette:
    data = _object(data, "palette")
    return Palette(
        frame=int(data.get("frame", 0)),
        entries=tuple(parse_color(c) for c in _items(data, "colors")),
    )


def _parse_image(data: Dict[str, Any], pixel_format: PixelFormat) -> Image:
    data = _object(data, "image")
    fmt = _enum_value(PixelFormat, data.get("pixel_format"), pixel_format)
    width = int(data["width"])
    height = int(data["height"])
    pixels = np.asarray(data.get("pixels", []), dtype=np.uint8)
    if pixels.size == 0 and width * height:
        return Image.blank(fmt, width, height)
    return Image(fmt, pixels.reshape(height, width, fmt.channels))


def _parse_tileset(data: Dict[str, Any], pixel_format: PixelFormat) -> Tileset:
    data = _object(data, "tileset")
    tile_size: Tuple[int, int] = tuple(int(v) for v in data.get("tile_size", (16, 16)))  # type: ignore[assignment]
    if len(tile_size) != 2:
        raise ValueError("tile_size must have two values")
    return Tileset(
        grid=Grid(tile_size=tile_size),
        tiles=tuple(_parse_image(t, pixel_format) for t in _items(data, "tiles")),
    )


def _parse_cel(data: Dict[str, Any], pixel_format: PixelFormat) -> Cel:
    data = _object(data, "cel")
    image_data = data.get("image")
    image = None if image_data is None else _parse_image(image_data, pixel_format)
    bounds = data.get("bounds")
    if bounds is None:
        bounds = (0, 0, image.width, image.height) if image is not None else (0, 0, 0, 0)
    return Cel(
        frame=int(data["frame"]),
        bounds=Rect.from_sequence(bounds),
        opacity=int(data.get("opacity", 255)),
        image=image,
    )


def _parse_layers(items: List[Dict[str, Any]], pixel_format: PixelFormat) -> Tuple[Layer, ...]:
    layers: List[Layer] = []
    for item in items:
        data = _object(item, "layer")
        kind = str(data.get("type", "image")).lower()
        name = str(data.get("name", ""))
        flags = int(data.get("flags", _DEFAULT_LAYER_FLAGS))
        if kind == "group":
            layers.append(
                LayerGroup(name, flags=flags, layers=_parse_layers(_items(data, "layers"), pixel_format))
            )
            continue
        cels = tuple(_parse_cel(c, pixel_format) for c in _items(data, "cels"))
        opacity = int(data.get("opacity", 255))
        if kind == "image":
            layers.append(LayerImage(name, flags=flags, opacity=opacity, cels=cels))
        elif kind == "tilemap":
            layers.append(
                LayerTilemap(
                    name,
                    flags=flags,
                    opacity=opacity,
                    cels=cels,
                    tileset_index=int(data.get("tileset_index", 0)),
                )
            )
        else:
            raise ValueError(f"Unknown layer type '{kind}'")
    return tuple(layers)


def _parse_color_space(data: Optional[Dict[str, Any]]) -> ColorSpace:
    if data is None:
        return ColorSpace()
    data = _object(data, "color_space")
    icc = data.get("icc")
    try:
        icc_bytes = base64.b64decode(icc, validate=True) if icc else b""
    except binascii.Error as exc:
        raise ValueError(f"Invalid ICC profile: {exc}") from exc
    return ColorSpace(
        type=_enum_value(ColorSpaceType, data.get("type"), ColorSpaceType.SRGB),
        name=str(data.get("name", "")),
        gamma=float(data.get("gamma", 1.0)),
        icc=icc_bytes,
    )
