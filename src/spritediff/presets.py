"""Comparison option presets."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Mapping

PRESET_ENV_VAR = "SPRITEDIFF_PRESET"
DEFAULT_PRESET = "default"

CEL_CHECKS = ("legacy", "strict")
PALETTE_CHECKS = ("count", "source", "content")


@dataclass(frozen=True)
class CompareOptions:
    """Switches between historical and corrected comparison rules.

    ``cel_check``
        ``"legacy"`` flags two present cels when their frame, bounds or
        opacity are *equal*; this is the historical rule, kept for
        compatibility with existing change classifications.
        ``"strict"`` flags them when any of those fields differ.
    ``palette_check``
        ``"count"`` flags palettes when the number of palettes differs.
        ``"source"`` only flags a count mismatch when one of the palettes both
        documents share differs (historical rule).
        ``"content"`` flags a count mismatch or any differing palette pair.
    """

    cel_check: str = "strict"
    palette_check: str = "count"

    def __post_init__(self) -> None:
        if self.cel_check not in CEL_CHECKS:
            raise ValueError(
                f"Unknown cel check '{self.cel_check}'. Available: {', '.join(CEL_CHECKS)}"
            )
        if self.palette_check not in PALETTE_CHECKS:
            raise ValueError(
                f"Unknown palette check '{self.palette_check}'. Available: {', '.join(PALETTE_CHECKS)}"
            )

    def to_dict(self) -> Dict[str, str]:
        return {
            "cel_check": self.cel_check,
            "palette_check": self.palette_check,
        }

    def copy(self, **overrides: str) -> "CompareOptions":
        return replace(self, **overrides)


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    options: CompareOptions

    def to_dict(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "options": self.options.to_dict(),
        }


PRESETS: Mapping[str, Preset] = {
    "default": Preset(
        name="default",
        description="Cels differ on any field; a palette count mismatch is a change.",
        options=CompareOptions(cel_check="strict", palette_check="count"),
    ),
    "legacy": Preset(
        name="legacy",
        description="The editor's cel and palette rules, kept for compatibility.",
        options=CompareOptions(cel_check="legacy", palette_check="source"),
    ),
    "strict": Preset(
        name="strict",
        description="Cels differ on any field; palettes are also compared by content.",
        options=CompareOptions(cel_check="strict", palette_check="content"),
    ),
}


def get_preset(name: str) -> Preset:
    key = name.lower()
    if key not in PRESETS:
        raise KeyError(f"Unknown preset '{name}'. Available: {', '.join(sorted(PRESETS))}")
    return PRESETS[key]


def iter_presets() -> Iterable[Preset]:
    return PRESETS.values()


def default_preset_name() -> str:
    value = os.getenv(PRESET_ENV_VAR, "").strip()
    return value or DEFAULT_PRESET
