from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum, IntFlag


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_sequence(cls, values) -> "Rect":
        x, y, width, height = (int(v) for v in values)
        return cls(x, y, width, height)


class PixelFormat(IntEnum):
    RGB = 0
    GRAYSCALE = 1
    INDEXED = 2

    @property
    def channels(self) -> int:
        # RGBA, value + alpha, palette index
        return {PixelFormat.RGB: 4, PixelFormat.GRAYSCALE: 2, PixelFormat.INDEXED: 1}[self]


class LayerType(Enum):
    IMAGE = "image"
    GROUP = "group"
    TILEMAP = "tilemap"


class LayerFlags(IntFlag):
    NONE = 0
    VISIBLE = 1
    EDITABLE = 2
    LOCK_MOVE = 4
    BACKGROUND = 8
    CONTINUOUS = 16
    COLLAPSED = 32
    REFERENCE = 64

    PERSISTENT_MASK = 0xFFFF

    # Session state, never saved
    INTERNAL_WAS_VISIBLE = 0x10000


class AniDir(IntEnum):
    FORWARD = 0
    REVERSE = 1
    PING_PONG = 2
    PING_PONG_REVERSE = 3


class ColorSpaceType(IntEnum):
    NONE = 0
    SRGB = 1
    RGB_WITH_GAMMA = 2
    ICC = 3
