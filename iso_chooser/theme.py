from __future__ import annotations

import curses
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Tuple

BANNER_HEIGHT = 3
DEFAULT_TITLE = "Choose an Ubuntu version to install"

UPPER_HALF_BLOCK = "▀"
LOWER_HALF_BLOCK = "▄"
BUTTON_ARROW = "▸"


@dataclass(frozen=True)
class ThemeColor:
    """A color slot, its true-color value, and its 256-color fallback.

    slot is the basic curses color that gets redefined when the terminal
    supports recoloring; it is also what 8-color terminals get.
    """

    slot: int
    rgb: Tuple[int, int, int]
    xterm256: int

    def curses_rgb(self) -> Tuple[int, int, int]:
        # curses color components run 0..1000
        return tuple(int(c / 255.0 * 1000) for c in self.rgb)  # type: ignore[return-value]


@dataclass(frozen=True)
class Theme:
    """Banner geometry and colors, modelled on the Subiquity installer look."""

    title: str = DEFAULT_TITLE
    banner_height: int = BANNER_HEIGHT
    accent: ThemeColor = field(
        default_factory=lambda: ThemeColor(curses.COLOR_RED, (0xE9, 0x54, 0x20), 202)
    )
    text: ThemeColor = field(
        default_factory=lambda: ThemeColor(curses.COLOR_WHITE, (0xFF, 0xFF, 0xFF), 231)
    )
    highlight: ThemeColor = field(
        default_factory=lambda: ThemeColor(curses.COLOR_GREEN, (0x0E, 0x84, 0x20), 28)
    )
    shadow: ThemeColor = field(
        default_factory=lambda: ThemeColor(curses.COLOR_BLACK, (0x00, 0x00, 0x00), 0)
    )

    def colors(self) -> Dict[str, ThemeColor]:
        return {
            "accent": self.accent,
            "text": self.text,
            "highlight": self.highlight,
            "shadow": self.shadow,
        }


@dataclass(frozen=True)
class Palette:
    """Resolved curses attributes for each drawing role."""

    banner_edge: int = 0
    banner_text: int = 0
    selected: int = 0
    normal: int = 0


def _parse_rgb(value: Any) -> Tuple[int, int, int]:
    if isinstance(value, str):
        h = value.lstrip("#")
        if len(h) != 6:
            raise ValueError(f"rgb color must be #RRGGBB, got {value!r}")
        return (int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16))
    if isinstance(value, (list, tuple)) and len(value) == 3:
        rgb = tuple(int(c) for c in value)
        if any(c < 0 or c > 255 for c in rgb):
            raise ValueError(f"rgb components must be 0..255, got {value!r}")
        return rgb  # type: ignore[return-value]
    raise ValueError(f"unsupported rgb color {value!r}")


def theme_from_mapping(raw: Mapping[str, Any], *, title: str = DEFAULT_TITLE) -> Theme:
    """Build a Theme from a config `theme:` section, keeping defaults for omitted keys."""

    theme = Theme(title=title)
    updates: Dict[str, Any] = {}

    if "banner_height" in raw:
        height = int(raw["banner_height"])
        if height < 1:
            raise ValueError("theme.banner_height must be at least 1")
        updates["banner_height"] = height

    colors = raw.get("colors") or {}
    if not isinstance(colors, Mapping):
        raise ValueError("theme.colors must be a mapping")
    defaults = theme.colors()
    for role, values in colors.items():
        if role not in defaults:
            raise ValueError(f"unknown theme color role {role!r}")
        values = values or {}
        if not isinstance(values, Mapping):
            raise ValueError(f"theme.colors.{role} must be a mapping")
        color = defaults[role]
        if "rgb" in values:
            color = replace(color, rgb=_parse_rgb(values["rgb"]))
        if "xterm256" in values:
            color = replace(color, xterm256=int(values["xterm256"]))
        updates[role] = color

    return replace(theme, **updates)
