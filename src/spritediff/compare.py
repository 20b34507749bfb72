"""Category level comparison of two sprite documents.

``compare_docs`` answers *which parts* of a document changed (canvas, frames,
tags, layers, cels ...) without building a patch.  Each category is checked by
its own function; a category may stop scanning early once it found a
difference but every category is always evaluated.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Dict, List, Optional

from .core.document import Cel, Doc, Layer, Sprite
from .presets import CompareOptions
from .utils.image_ops import count_different_pixels, is_same_image

logger = logging.getLogger(__name__)

CATEGORIES = (
    "canvas",
    "total_frames",
    "frame_duration",
    "tags",
    "palettes",
    "tilesets",
    "layers",
    "cels",
    "images",
    "color_profiles",
    "grid_bounds",
)


@dataclass(frozen=True)
class DiffResult:
    anything: bool = False
    canvas: bool = False
    total_frames: bool = False
    frame_duration: bool = False
    tags: bool = False
    palettes: bool = False
    tilesets: bool = False
    layers: bool = False
    cels: bool = False
    images: bool = False
    color_profiles: bool = False
    grid_bounds: bool = False

    def __post_init__(self) -> None:
        if self.anything != any(getattr(self, name) for name in CATEGORIES):
            raise ValueError("'anything' must be set exactly when a category differs")

    def __bool__(self) -> bool:
        return self.anything

    def changed_categories(self) -> List[str]:
        return [name for name in CATEGORIES if getattr(self, name)]

    def to_dict(self) -> Dict[str, bool]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


class _DiffFlags:
    """Mutable flags filled while walking the documents."""

    def __init__(self) -> None:
        self.flags = dict.fromkeys(("anything",) + CATEGORIES, False)

    def mark(self, category: str) -> None:
        if not self.flags[category]:
            logger.debug("Category '%s' differs", category)
        self.flags["anything"] = self.flags[category] = True

    def __getitem__(self, category: str) -> bool:
        return self.flags[category]

    def freeze(self) -> DiffResult:
        return DiffResult(**self.flags)


def compare_docs(a: Doc, b: Doc, options: Optional[CompareOptions] = None) -> DiffResult:
    """Compare two documents and report the categories that differ.

    Filenames are not compared.  ``options`` selects the cel and palette
    rules, see :class:`~spritediff.presets.CompareOptions`.
    """

    options = options or CompareOptions()
    sa, sb = a.sprite, b.sprite
    diff = _DiffFlags()

    _compare_canvas(sa, sb, diff)
    _compare_frames(sa, sb, diff)
    _compare_tags(sa, sb, diff)
    _compare_palettes(sa, sb, diff, options)
    _compare_tilesets(sa, sb, diff)
    _compare_layers(sa, sb, diff, options)

    if not sa.color_space.nearly_equal(sb.color_space):
        diff.mark("color_profiles")

    if sa.grid_bounds != sb.grid_bounds:
        diff.mark("grid_bounds")

    result = diff.freeze()
    logger.debug("Compared %r and %r: %s", a.filename, b.filename, result.changed_categories())
    return result


def _compare_canvas(sa: Sprite, sb: Sprite, diff: _DiffFlags) -> None:
    if (
        sa.width != sb.width
        or sa.height != sb.height
        or sa.pixel_format != sb.pixel_format
    ):
        diff.mark("canvas")


def _compare_frames(sa: Sprite, sb: Sprite, diff: _DiffFlags) -> None:
    if sa.total_frames != sb.total_frames:
        diff.mark("total_frames")
        return
    for frame in range(sa.total_frames):
        if sa.frame_duration(frame) != sb.frame_duration(frame):
            diff.mark("frame_duration")
            break


def _compare_tags(sa: Sprite, sb: Sprite, diff: _DiffFlags) -> None:
    if len(sa.tags) != len(sb.tags):
        diff.mark("tags")
        return
    for tag_a, tag_b in zip(sa.tags, sb.tags):
        if (
            tag_a.from_frame != tag_b.from_frame
            or tag_a.to_frame != tag_b.to_frame
            or tag_a.name != tag_b.name
            or tag_a.color != tag_b.color
            or tag_a.ani_dir != tag_b.ani_dir
            or tag_a.repeat != tag_b.repeat
        ):
            diff.mark("tags")


def _compare_palettes(sa: Sprite, sb: Sprite, diff: _DiffFlags, options: CompareOptions) -> None:
    count_differs = len(sa.palettes) != len(sb.palettes)
    if not count_differs and options.palette_check != "content":
        return
    if count_differs and options.palette_check != "source":
        diff.mark("palettes")
        return
    for pal_a, pal_b in zip(sa.palettes, sb.palettes):
        if pal_a.count_diff(pal_b):
            diff.mark("palettes")
            break


def _compare_tilesets(sa: Sprite, sb: Sprite, diff: _DiffFlags) -> None:
    size_a = len(sa.tilesets) if sa.has_tilesets else 0
    size_b = len(sb.tilesets) if sb.has_tilesets else 0
    if size_a != size_b:
        diff.mark("tilesets")
        return
    for index in range(size_a):
        ts_a = sa.tilesets.get(index)
        ts_b = sb.tilesets.get(index)
        if ts_a.grid.tile_size != ts_b.grid.tile_size or ts_a.size != ts_b.size:
            diff.mark("tilesets")
            return
        for ti in range(ts_a.size):
            if not is_same_image(ts_a.get(ti), ts_b.get(ti)):
                logger.debug("Tileset %d: tile %d differs", index, ti)
                diff.mark("tilesets")
                return


def _layers_differ(la: Layer, lb: Layer) -> bool:
    if la.type != lb.type or la.name != lb.name or la.persistent_flags != lb.persistent_flags:
        return True
    if la.is_image and lb.is_image and la.opacity != lb.opacity:
        return True
    if la.is_tilemap and lb.is_tilemap and la.tileset_index != lb.tileset_index:
        return True
    return False


def _compare_layers(sa: Sprite, sb: Sprite, diff: _DiffFlags, options: CompareOptions) -> None:
    if sa.all_layers_count() != sb.all_layers_count():
        diff.mark("layers")
        return

    for la, lb in zip(sa.all_layers(), sb.all_layers()):
        if _layers_differ(la, lb):
            logger.debug("Layer '%s' differs from '%s'", la.name, lb.name)
            diff.mark("layers")
            break

        # Cels of documents with a different frame count are not comparable
        if diff["total_frames"]:
            continue

        for frame in range(sa.total_frames):
            _compare_cels(la.cel(frame), lb.cel(frame), diff, options)


def _cels_differ(cel_a: Cel, cel_b: Cel, options: CompareOptions) -> bool:
    if options.cel_check == "legacy":
        return (
            cel_a.frame == cel_b.frame
            or cel_a.bounds == cel_b.bounds
            or cel_a.opacity == cel_b.opacity
        )
    return (
        cel_a.frame != cel_b.frame
        or cel_a.bounds != cel_b.bounds
        or cel_a.opacity != cel_b.opacity
    )


def _compare_cels(
    cel_a: Optional[Cel],
    cel_b: Optional[Cel],
    diff: _DiffFlags,
    options: CompareOptions,
) -> None:
    if cel_a is None and cel_b is None:
        return
    if cel_a is None or cel_b is None:
        diff.mark("cels")
        return

    if _cels_differ(cel_a, cel_b, options):
        diff.mark("cels")

    image_a, image_b = cel_a.image, cel_b.image
    if image_a is not None and image_b is not None:
        if image_a.bounds != image_b.bounds or not is_same_image(image_a, image_b):
            diff.mark("images")
            if (
                logger.isEnabledFor(logging.DEBUG)
                and image_a.pixel_format == image_b.pixel_format
                and image_a.pixels.shape == image_b.pixels.shape
            ):
                logger.debug(
                    "Frame %d: %d pixel(s) differ", cel_a.frame, count_different_pixels(image_a, image_b)
                )
    elif image_a is not None or image_b is not None:
        diff.mark("images")
