import numpy as np
import pytest

from spritediff.core import (
    ColorSpace,
    ColorSpaceType,
    Image,
    LayerFlags,
    LayerGroup,
    LayerImage,
    Palette,
    PixelFormat,
    Rect,
)
from spritediff.utils import count_different_pixels, is_same_image


def test_all_layers_lists_children_before_group():
    a = LayerImage("a")
    b = LayerImage("b")
    inner = LayerGroup("inner", layers=(b,))
    root = LayerGroup("Root", layers=(a, inner, LayerImage("c")))
    assert [layer.name for layer in root.all_layers()] == ["a", "b", "inner", "c"]


def test_cel_lookup_by_frame(cel_factory):
    layer = LayerImage("bg", cels=(cel_factory(0), cel_factory(2)))
    assert layer.cel(0).frame == 0
    assert layer.cel(1) is None
    assert LayerGroup("g").cel(0) is None


def test_duplicate_cel_frame_is_rejected(cel_factory):
    with pytest.raises(ValueError):
        LayerImage("bg", cels=(cel_factory(1), cel_factory(1)))


def test_persistent_flags_drop_session_bits():
    layer = LayerImage("bg", flags=LayerFlags.VISIBLE | LayerFlags.INTERNAL_WAS_VISIBLE)
    assert layer.persistent_flags == int(LayerFlags.VISIBLE)


def test_palette_count_diff():
    pal = Palette(0, (1, 2, 3))
    assert pal.count_diff(Palette(0, (1, 2, 3))) == 0
    assert pal.count_diff(Palette(0, (1, 5, 3))) == 1
    assert pal.count_diff(Palette(0, (1,))) == 2


def test_color_space_nearly_equal():
    gamma = ColorSpace(ColorSpaceType.RGB_WITH_GAMMA, gamma=2.2)
    assert gamma.nearly_equal(ColorSpace(ColorSpaceType.RGB_WITH_GAMMA, gamma=2.2004))
    assert not gamma.nearly_equal(ColorSpace(ColorSpaceType.RGB_WITH_GAMMA, gamma=2.21))
    assert ColorSpace(ColorSpaceType.SRGB, name="a").nearly_equal(ColorSpace(ColorSpaceType.SRGB, name="b"))
    assert not ColorSpace(ColorSpaceType.ICC, icc=b"x").nearly_equal(ColorSpace(ColorSpaceType.ICC, icc=b"y"))


def test_image_is_read_only_copy():
    pixels = np.zeros((2, 3, 4), dtype=np.uint8)
    image = Image(PixelFormat.RGB, pixels)
    pixels[0, 0, 0] = 1
    assert image.pixels[0, 0, 0] == 0
    assert image.bounds == Rect(0, 0, 3, 2)
    with pytest.raises(ValueError):
        image.pixels[0, 0, 0] = 5


def test_image_shape_must_match_pixel_format():
    with pytest.raises(ValueError):
        Image(PixelFormat.RGB, np.zeros((2, 2, 2), dtype=np.uint8))
    indexed = Image(PixelFormat.INDEXED, np.zeros((2, 2), dtype=np.uint8))
    assert indexed.pixels.shape == (2, 2, 1)


def test_is_same_image(image_factory):
    a = image_factory(value=1)
    assert is_same_image(a, a)
    assert is_same_image(a, image_factory(value=1))
    assert not is_same_image(a, image_factory(value=2))
    assert not is_same_image(a, image_factory(width=3, value=1))
    assert not is_same_image(
        image_factory(value=1, pixel_format=PixelFormat.GRAYSCALE),
        image_factory(value=1, pixel_format=PixelFormat.INDEXED),
    )
    assert not is_same_image(a, None)
    assert is_same_image(None, None)


def test_count_different_pixels(image_factory):
    a = image_factory(width=3, height=2, value=1)
    pixels = a.pixels.copy()
    pixels[0, 0, 3] = 0
    pixels[1, 2] = (9, 9, 9, 9)
    b = Image(PixelFormat.RGB, pixels)
    assert count_different_pixels(a, a) == 0
    assert count_different_pixels(a, b) == 2


def test_count_different_pixels_needs_matching_images(image_factory):
    with pytest.raises(ValueError):
        count_different_pixels(image_factory(width=2), image_factory(width=3))
    with pytest.raises(ValueError):
        count_different_pixels(
            image_factory(pixel_format=PixelFormat.GRAYSCALE),
            image_factory(pixel_format=PixelFormat.INDEXED),
        )
