"""Immutable in-memory model of a layered, animated sprite document.

The comparator only reads from these objects.  Every container is a tuple and
every pixel buffer is flagged read-only, so a snapshot cannot change while it
is being compared.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

from .types import AniDir, ColorSpaceType, LayerFlags, LayerType, PixelFormat, Rect

DEFAULT_FRAME_DURATION = 100  # milliseconds
DEFAULT_GRID_BOUNDS = Rect(0, 0, 16, 16)
GAMMA_TOLERANCE = 1e-3


@dataclass(frozen=True, eq=False)
class Image:
    """Pixel buffer of shape ``(height, width, channels)``."""

    pixel_format: PixelFormat
    pixels: np.ndarray

    def __post_init__(self) -> None:
        pixels = np.asarray(self.pixels, dtype=np.uint8)
        channels = PixelFormat(self.pixel_format).channels
        if pixels.ndim == 2 and channels == 1:
            pixels = pixels.reshape(pixels.shape + (1,))
        if pixels.ndim != 3 or pixels.shape[2] != channels:
            raise ValueError(
                f"{PixelFormat(self.pixel_format).name} image needs shape (h, w, {channels}), "
                f"got {pixels.shape}"
            )
        pixels = pixels.copy()
        pixels.setflags(write=False)
        object.__setattr__(self, "pixel_format", PixelFormat(self.pixel_format))
        object.__setattr__(self, "pixels", pixels)

    @classmethod
    def blank(cls, pixel_format: PixelFormat, width: int, height: int) -> "Image":
        channels = PixelFormat(pixel_format).channels
        return cls(pixel_format, np.zeros((height, width, channels), dtype=np.uint8))

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def bounds(self) -> Rect:
        return Rect(0, 0, self.width, self.height)


@dataclass(frozen=True)
class Palette:
    frame: int
    entries: Tuple[int, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def count_diff(self, other: "Palette") -> int:
        """Return how many entries differ, counting missing ones."""
        shared = min(len(self.entries), len(other.entries))
        diff = sum(1 for i in range(shared) if self.entries[i] != other.entries[i])
        return diff + abs(len(self.entries) - len(other.entries))


@dataclass(frozen=True)
class Tag:
    name: str
    from_frame: int
    to_frame: int
    color: int = 0x000000FF
    ani_dir: AniDir = AniDir.FORWARD
    repeat: int = 0


@dataclass(frozen=True)
class Grid:
    tile_size: Tuple[int, int] = (16, 16)


@dataclass(frozen=True)
class Tileset:
    grid: Grid
    tiles: Tuple[Image, ...] = ()

    @property
    def size(self) -> int:
        return len(self.tiles)

    def get(self, index: int) -> Image:
        return self.tiles[index]


@dataclass(frozen=True)
class Tilesets:
    items: Tuple[Tileset, ...] = ()

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Tileset]:
        return iter(self.items)

    def get(self, index: int) -> Tileset:
        return self.items[index]


@dataclass(frozen=True)
class Cel:
    frame: int
    bounds: Rect
    opacity: int = 255
    image: Optional[Image] = None


@dataclass(frozen=True, eq=False)
class Layer:
    name: str
    flags: int = LayerFlags.VISIBLE | LayerFlags.EDITABLE

    type = LayerType.IMAGE

    @property
    def is_image(self) -> bool:
        return self.type in (LayerType.IMAGE, LayerType.TILEMAP)

    @property
    def is_tilemap(self) -> bool:
        return self.type is LayerType.TILEMAP

    @property
    def is_group(self) -> bool:
        return self.type is LayerType.GROUP

    @property
    def persistent_flags(self) -> int:
        return int(self.flags) & int(LayerFlags.PERSISTENT_MASK)

    def cel(self, frame: int) -> Optional[Cel]:
        return None


@dataclass(frozen=True, eq=False)
class LayerImage(Layer):
    opacity: int = 255
    cels: Tuple[Cel, ...] = ()
    _by_frame: Dict[int, Cel] = field(init=False, repr=False, compare=False)

    type = LayerType.IMAGE

    def __post_init__(self) -> None:
        by_frame: Dict[int, Cel] = {}
        for cel in self.cels:
            if cel.frame in by_frame:
                raise ValueError(f"Layer '{self.name}' has two cels in frame {cel.frame}")
            by_frame[cel.frame] = cel
        object.__setattr__(self, "_by_frame", by_frame)

    def cel(self, frame: int) -> Optional[Cel]:
        return self._by_frame.get(frame)


@dataclass(frozen=True, eq=False)
class LayerTilemap(LayerImage):
    tileset_index: int = 0

    type = LayerType.TILEMAP


@dataclass(frozen=True, eq=False)
class LayerGroup(Layer):
    layers: Tuple[Layer, ...] = ()

    type = LayerType.GROUP

    def all_layers(self) -> List[Layer]:
        """Flatten the tree depth-first, children before their group."""
        result: List[Layer] = []
        for child in self.layers:
            if isinstance(child, LayerGroup):
                result.extend(child.all_layers())
            result.append(child)
        return result


@dataclass(frozen=True)
class ColorSpace:
    type: ColorSpaceType = ColorSpaceType.SRGB
    name: str = ""
    gamma: float = 1.0
    icc: bytes = b""

    def nearly_equal(self, other: "ColorSpace") -> bool:
        if self.type != other.type:
            return False
        if self.type == ColorSpaceType.RGB_WITH_GAMMA:
            return math.isclose(self.gamma, other.gamma, rel_tol=0.0, abs_tol=GAMMA_TOLERANCE)
        if self.type == ColorSpaceType.ICC:
            return self.icc == other.icc
        return True


@dataclass(frozen=True, eq=False)
class Sprite:
    width: int
    height: int
    pixel_format: PixelFormat = PixelFormat.RGB
    frame_durations: Tuple[int, ...] = (DEFAULT_FRAME_DURATION,)
    tags: Tuple[Tag, ...] = ()
    palettes: Tuple[Palette, ...] = ()
    tilesets: Optional[Tilesets] = None
    root: LayerGroup = field(default_factory=lambda: LayerGroup("Root"))
    color_space: ColorSpace = field(default_factory=ColorSpace)
    grid_bounds: Rect = DEFAULT_GRID_BOUNDS

    @property
    def total_frames(self) -> int:
        return len(self.frame_durations)

    def frame_duration(self, frame: int) -> int:
        return self.frame_durations[frame]

    @property
    def has_tilesets(self) -> bool:
        return self.tilesets is not None

    def all_layers(self) -> List[Layer]:
        return self.root.all_layers()

    def all_layers_count(self) -> int:
        return len(self.all_layers())


@dataclass(frozen=True, eq=False)
class Doc:
    sprite: Sprite
    filename: str = ""
