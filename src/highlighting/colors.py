from __future__ import annotations

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class ColorOption:
    name: str
    value: str
    highlight: str  # lighter variant used for highlight overlays


UNIFIED_COLORS: List[ColorOption] = [
    ColorOption("Blue", "#3B82F6", "#60A5FA"),
    ColorOption("Green", "#10B981", "#34D399"),
    ColorOption("Purple", "#8B5CF6", "#A78BFA"),
    ColorOption("Red", "#EF4444", "#F87171"),
    ColorOption("Orange", "#F97316", "#FB923C"),
    ColorOption("Pink", "#EC4899", "#F472B6"),
    ColorOption("Yellow", "#EAB308", "#FBBF24"),
    ColorOption("Gray", "#6B7280", "#9CA3AF"),
]

HIGHLIGHT_COLORS: List[str] = [c.highlight for c in UNIFIED_COLORS]
DEFAULT_HIGHLIGHT_COLOR = HIGHLIGHT_COLORS[0]


def color_by_name(name: str) -> ColorOption:
    for option in UNIFIED_COLORS:
        if option.name.lower() == name.lower():
            return option
    raise KeyError(name)
