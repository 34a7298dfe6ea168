# calgrid/palette.py
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Optional, Tuple

from .model import DEFAULT_COLOR


@dataclass(frozen=True)
class PaletteEntry:
    name: str          # symbolic tag, e.g. "blue"
    label: str
    hex: str
    active: bool = True


# Togglable palette. Symbolic names are the canonical color tags; hex
# literals are accepted on events but are never togglable.
DEFAULT_PALETTE: Tuple[PaletteEntry, ...] = (
    PaletteEntry("blue", "Work", "#3b82f6"),
    PaletteEntry("emerald", "Personal", "#10b981"),
    PaletteEntry("violet", "Meetings", "#8b5cf6"),
    PaletteEntry("orange", "Travel", "#f97316"),
    PaletteEntry("rose", "Important", "#f43f5e"),
)

_HEX_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")


def is_hex_color(color: str) -> bool:
    return bool(_HEX_RE.match(color or ""))


@dataclass(frozen=True)
class ColorVisibility:
    """Active color tags plus the palette they are toggled from.

    Visibility is fail-open: only a known palette tag that is switched off
    hides an event.
    """

    active: FrozenSet[str]
    palette: Tuple[PaletteEntry, ...] = DEFAULT_PALETTE

    @classmethod
    def from_palette(cls, palette: Tuple[PaletteEntry, ...] = DEFAULT_PALETTE) -> "ColorVisibility":
        return cls(active=frozenset(p.name for p in palette if p.active), palette=palette)

    @classmethod
    def of(cls, colors: Iterable[str], palette: Tuple[PaletteEntry, ...] = DEFAULT_PALETTE) -> "ColorVisibility":
        return cls(active=frozenset(colors), palette=palette)

    @property
    def palette_names(self) -> FrozenSet[str]:
        return frozenset(p.name for p in self.palette)

    def is_visible(self, color: Optional[str]) -> bool:
        if not color:
            return True
        if color in self.active:
            return True
        if color.startswith("#"):
            return True
        return color not in self.palette_names

    def toggle(self, color: str) -> "ColorVisibility":
        if color in self.active:
            return ColorVisibility(active=self.active - {color}, palette=self.palette)
        return ColorVisibility(active=self.active | {color}, palette=self.palette)


def resolve_hex(color: Optional[str], palette: Tuple[PaletteEntry, ...] = DEFAULT_PALETTE) -> Optional[str]:
    if not color:
        return None
    for p in palette:
        if p.name == color:
            return p.hex
    return color if is_hex_color(color) else None


def _hex_to_rgb(hex_color: str) -> Optional[Tuple[int, int, int]]:
    m = _HEX_RE.match(hex_color)
    if not m:
        return None
    digits = m.group(1)
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


_FALLBACK_STYLES = {
    "background_color": "rgba(191, 219, 254, 0.5)",
    "color": "rgba(30, 58, 138, 0.9)",
    "box_shadow": "0 1px 3px 0 rgba(59, 130, 246, 0.08)",
}


def color_styles(color: Optional[str], palette: Tuple[PaletteEntry, ...] = DEFAULT_PALETTE) -> Dict[str, str]:
    """Inline style values for an event chip: 50% tint background, darkened text, faint shadow."""
    hex_color = resolve_hex(color or DEFAULT_COLOR, palette)
    rgb = _hex_to_rgb(hex_color) if hex_color else None
    if rgb is None:
        return dict(_FALLBACK_STYLES)

    r, g, b = rgb
    tr, tg, tb = (max(0, min(255, round(c * 0.3))) for c in rgb)
    return {
        "background_color": f"rgba({r}, {g}, {b}, 0.5)",
        "color": f"rgba({tr}, {tg}, {tb}, 0.9)",
        "box_shadow": f"0 1px 3px 0 rgba({r}, {g}, {b}, 0.08)",
    }
