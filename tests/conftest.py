from pathlib import Path
import sys

import numpy as np
import pytest

# Ensure src directory is on the path
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from spritediff.core import (  # noqa: E402
    AniDir,
    Cel,
    ColorSpace,
    ColorSpaceType,
    Doc,
    Grid,
    Image,
    LayerFlags,
    LayerGroup,
    LayerImage,
    LayerTilemap,
    Palette,
    PixelFormat,
    Rect,
    Sprite,
    Tag,
    Tileset,
    Tilesets,
)


def make_image(width=2, height=2, value=0, pixel_format=PixelFormat.RGB):
    pixels = np.full((height, width, pixel_format.channels), value, dtype=np.uint8)
    return Image(pixel_format, pixels)


def make_cel(frame, value=10, opacity=255, bounds=None, image=True):
    img = make_image(value=value) if image else None
    return Cel(frame=frame, bounds=bounds or Rect(0, 0, 2, 2), opacity=opacity, image=img)


def make_layers(frames=4, cel_frames=None, background_flags=None):
    """Layer tree with an image layer, a tilemap and a group holding one layer."""

    cel_frames = range(frames) if cel_frames is None else cel_frames
    background = LayerImage(
        "Background",
        flags=background_flags if background_flags is not None else LayerFlags.VISIBLE | LayerFlags.BACKGROUND,
        opacity=255,
        cels=tuple(make_cel(f, value=f) for f in cel_frames),
    )
    tilemap = LayerTilemap("Map", opacity=200, tileset_index=0, cels=(make_cel(0, value=3),))
    shading = LayerImage("Shading", opacity=128, cels=(make_cel(1, value=7, opacity=90),))
    return (background, tilemap, LayerGroup("FX", layers=(shading,)))


def make_sprite(**overrides):
    frames = overrides.pop("frames", 4)
    fields = dict(
        width=32,
        height=24,
        pixel_format=PixelFormat.RGB,
        frame_durations=(100,) * frames,
        tags=(
            Tag("idle", 0, 1, color=0xFF0000FF, ani_dir=AniDir.FORWARD),
            Tag("walk", 2, 3, color=0x00FF00FF, ani_dir=AniDir.PING_PONG, repeat=2),
        ),
        palettes=(Palette(0, (0x000000FF, 0xFFFFFFFF, 0x808080FF)),),
        tilesets=Tilesets((Tileset(Grid((2, 2)), (make_image(value=0), make_image(value=1))),)),
        root=LayerGroup("Root", layers=make_layers(frames)),
        color_space=ColorSpace(ColorSpaceType.RGB_WITH_GAMMA, gamma=2.2),
        grid_bounds=Rect(0, 0, 16, 16),
    )
    fields.update(overrides)
    return Sprite(**fields)


def make_doc(filename="doc.aseprite", **overrides):
    return Doc(sprite=make_sprite(**overrides), filename=filename)


@pytest.fixture
def doc_factory():
    return make_doc


@pytest.fixture
def layers_factory():
    return make_layers


@pytest.fixture
def cel_factory():
    return make_cel


@pytest.fixture
def image_factory():
    return make_image
