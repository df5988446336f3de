"""Color model used by the color builtins.

Colors are parsed with tinycss2's CSS Color Level 3 parser (named colors,
hex, rgb(), rgba(), hsl(), hsla(), transparent) and manipulated in RGBA
space, with colorsys handling the HSL round trips.
"""

import colorsys
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Any

from tinycss2.color3 import parse_color

HEX_COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")

# WCAG 2.0 AA contrast ratio for normal-size text
READABLE_CONTRAST_RATIO = 4.5


def _round_half_up(value: float) -> int:
    """Round like browsers do (0.5 goes up), not banker's rounding."""
    return int(math.floor(value + 0.5))


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def _format_alpha(alpha: float) -> str:
    rounded = _round_half_up(alpha * 100) / 100
    return f"{rounded:g}"


def is_hex_color(value: Any) -> bool:
    """Check for a 3- or 6-digit hex color."""
    return isinstance(value, str) and bool(HEX_COLOR_RE.match(value))


@dataclass(frozen=True)
class Color:
    """An RGBA color; channels are 0-255 floats, alpha is 0-1."""

    r: float
    g: float
    b: float
    a: float = 1.0

    @classmethod
    def parse(cls, value: Any) -> "Color | None":
        """Parse a CSS color string or an {r, g, b[, a]} mapping.

        Returns None when the value is not a color.
        """
        if isinstance(value, Color):
            return value

        if isinstance(value, Mapping):
            try:
                return cls(
                    float(value["r"]),
                    float(value["g"]),
                    float(value["b"]),
                    _clamp01(float(value.get("a", 1))),
                )
            except (KeyError, TypeError, ValueError):
                return None

        if not isinstance(value, str) or not value.strip():
            return None

        parsed = parse_color(value.strip())
        if parsed is None or isinstance(parsed, str):
            # None on error, "currentColor" has no fixed value
            return None
        return cls(
            parsed.red * 255,
            parsed.green * 255,
            parsed.blue * 255,
            parsed.alpha,
        )

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def to_rgb_string(self) -> str:
        """Format as rgb(r, g, b), or rgba(r, g, b, a) when not opaque."""
        r = _round_half_up(self.r)
        g = _round_half_up(self.g)
        b = _round_half_up(self.b)
        alpha = _round_half_up(self.a * 100) / 100
        if alpha == 1:
            return f"rgb({r}, {g}, {b})"
        return f"rgba({r}, {g}, {b}, {_format_alpha(self.a)})"

    def __str__(self) -> str:
        return self.to_rgb_string()

    # -------------------------------------------------------------------------
    # Transforms
    # -------------------------------------------------------------------------

    def with_alpha(self, alpha: float) -> "Color":
        return replace(self, a=_clamp01(alpha))

    def brighten(self, amount: float) -> "Color":
        """Shift every channel by amount% of 255 (negative darkens)."""
        delta = _round_half_up(255 * -(amount / 100))
        return replace(
            self,
            r=max(0.0, min(255.0, _round_half_up(self.r) - delta)),
            g=max(0.0, min(255.0, _round_half_up(self.g) - delta)),
            b=max(0.0, min(255.0, _round_half_up(self.b) - delta)),
        )

    def _shift_lightness(self, amount: float) -> "Color":
        h, l, s = colorsys.rgb_to_hls(self.r / 255, self.g / 255, self.b / 255)
        l = _clamp01(l + amount / 100)
        r, g, b = colorsys.hls_to_rgb(h, l, s)
        return replace(self, r=r * 255, g=g * 255, b=b * 255)

    def lighten(self, amount: float) -> "Color":
        """Raise HSL lightness by amount percentage points."""
        return self._shift_lightness(amount)

    def darken(self, amount: float) -> "Color":
        """Lower HSL lightness by amount percentage points."""
        return self._shift_lightness(-amount)

    def mix(self, other: "Color", amount: float) -> "Color":
        """Blend amount% of other into this color."""
        p = amount / 100
        return Color(
            (other.r - self.r) * p + self.r,
            (other.g - self.g) * p + self.g,
            (other.b - self.b) * p + self.b,
            (other.a - self.a) * p + self.a,
        )

    def tint(self, amount: float) -> "Color":
        """Mix amount% of white into this color."""
        return self.mix(WHITE, amount)

    # -------------------------------------------------------------------------
    # Contrast
    # -------------------------------------------------------------------------

    @property
    def luminance(self) -> float:
        """WCAG relative luminance."""

        def channel(value: float) -> float:
            srgb = value / 255
            if srgb <= 0.03928:
                return srgb / 12.92
            return ((srgb + 0.055) / 1.055) ** 2.4

        return (
            0.2126 * channel(self.r)
            + 0.7152 * channel(self.g)
            + 0.0722 * channel(self.b)
        )


WHITE = Color(255, 255, 255)
BLACK = Color(0, 0, 0)


def contrast_ratio(first: Color, second: Color) -> float:
    """WCAG contrast ratio between two colors (1 to 21)."""
    lighter = max(first.luminance, second.luminance)
    darker = min(first.luminance, second.luminance)
    return (lighter + 0.05) / (darker + 0.05)


def is_readable(first: Color, second: Color) -> bool:
    """Check whether text in one color is readable on the other (WCAG AA, small text)."""
    return contrast_ratio(first, second) >= READABLE_CONTRAST_RATIO


def to_color(value: Any) -> Color:
    """Parse a color leniently; anything unparsable becomes opaque black."""
    color = Color.parse(value)
    if color is None:
        return BLACK
    return color
