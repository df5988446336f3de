"""Font values and the CSS `font` shorthand formatter."""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

# Shorthand fields in output order; size and lineHeight are joined with '/'
FONT_FIELDS = ("style", "variant", "weight", "stretch", "size", "lineHeight", "family")

DEFAULT_FONT: dict[str, Any] = {
    "style": "",
    "variant": "",
    "weight": "",
    "stretch": "",
    "size": "",
    "lineHeight": "",
    "family": [],
}


def _as_family(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(item) for item in value)


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


@dataclass(frozen=True)
class FontValue:
    """A resolved font: the pieces of a CSS `font` shorthand."""

    style: str = ""
    variant: str = ""
    weight: str = ""
    stretch: str = ""
    size: str = ""
    line_height: str = ""
    family: tuple[str, ...] = ()
    underline: bool = False

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FontValue":
        """Build from a camelCase mapping (``lineHeight``); snake_case also accepted."""
        line_height = data.get("lineHeight", data.get("line_height", ""))
        return cls(
            style=_as_text(data.get("style")),
            variant=_as_text(data.get("variant")),
            weight=_as_text(data.get("weight")),
            stretch=_as_text(data.get("stretch")),
            size=_as_text(data.get("size")),
            line_height=_as_text(line_height),
            family=_as_family(data.get("family")),
            underline=bool(data.get("underline", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "style": self.style,
            "variant": self.variant,
            "weight": self.weight,
            "stretch": self.stretch,
            "size": self.size,
            "lineHeight": self.line_height,
            "family": list(self.family),
            "underline": self.underline,
        }


def to_font_css_value(font: FontValue | Mapping[str, Any]) -> str:
    """Format a font as a CSS `font` shorthand value.

    Example:
        FontValue(style="italic", weight="bold", size="10", line_height="1.4",
                  family=("family",))  ->  "italic bold 10/1.4 family"
    """
    if not isinstance(font, FontValue):
        font = FontValue.from_dict(font)

    parts = [font.style, font.variant, font.weight, font.stretch]

    size = font.size
    if size and font.line_height:
        size = f"{size}/{font.line_height}"
    parts.append(size)
    parts.append(",".join(font.family))

    return " ".join(part for part in parts if part)
