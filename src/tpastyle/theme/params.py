"""Theme parameters (TPAParams) and their construction from raw site data.

TPAParams is the environment every expression is evaluated against. It is
built once per render request from the site's colors, text presets and
style parameters, then treated as read-only.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from tpastyle.constants import IS_RTL_PARAM
from tpastyle.theme.fonts import FontValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TPAParams:
    """Resolved theme environment available to expression evaluation.

    Attributes:
        colors: Color name -> color string
        numbers: Parameter name -> number
        booleans: Parameter name -> bool (always includes isRTL)
        fonts: Preset or parameter name -> FontValue
        strings: Parameter name -> raw string
    """

    colors: Mapping[str, str] = field(default_factory=dict)
    numbers: Mapping[str, int | float] = field(default_factory=dict)
    booleans: Mapping[str, bool] = field(default_factory=lambda: {IS_RTL_PARAM: False})
    fonts: Mapping[str, FontValue] = field(default_factory=dict)
    strings: Mapping[str, str] = field(default_factory=dict)

    @property
    def is_rtl(self) -> bool:
        return bool(self.booleans.get(IS_RTL_PARAM, False))

    def resolve(self, name: str) -> tuple[bool, Any]:
        """Look a name up in colors, fonts, numbers, booleans, then strings.

        Returns:
            (found, value) - the first mapping containing the name wins
        """
        for mapping in (self.colors, self.fonts, self.numbers, self.booleans, self.strings):
            if name in mapping:
                return True, mapping[name]
        return False, None


@dataclass
class SiteStyles:
    """Raw per-site styling data from a render request.

    Attributes:
        site_colors: List of {name, reference, value} site palette entries
        site_text_presets: Preset name -> {fontFamily, size, lineHeight, ...}
        style_params: {colors, numbers, booleans, fonts} set by the site owner
    """

    site_colors: list[dict[str, Any]] = field(default_factory=list)
    site_text_presets: dict[str, dict[str, Any]] = field(default_factory=dict)
    style_params: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SiteStyles":
        """Create from a request payload using camelCase keys."""
        return cls(
            site_colors=list(data.get("siteColors") or []),
            site_text_presets=dict(data.get("siteTextPresets") or {}),
            style_params=dict(data.get("styleParams") or {}),
        )


# -----------------------------------------------------------------------------
# Colors
# -----------------------------------------------------------------------------


def _site_colors(site_colors: list[dict[str, Any]]) -> dict[str, str]:
    colors: dict[str, str] = {}
    for entry in site_colors:
        value = entry.get("value")
        if not value:
            continue
        for key in ("reference", "name"):
            if entry.get(key):
                colors[entry[key]] = value
    return colors


def _full_color_styles(
    color_styles: Mapping[str, Any], site_colors: list[dict[str, Any]]
) -> dict[str, str]:
    colors = _site_colors(site_colors)

    for name, style in (color_styles or {}).items():
        if isinstance(style, str):
            colors[name] = style
            continue
        theme_name = style.get("themeName")
        if theme_name and theme_name in colors:
            colors[name] = colors[theme_name]
        elif style.get("value"):
            colors[name] = style["value"]
        else:
            logger.debug("Color style '%s' has no resolvable value", name)

    return colors


# -----------------------------------------------------------------------------
# Fonts
# -----------------------------------------------------------------------------


def _preset_to_font(preset: Mapping[str, Any]) -> FontValue:
    family = preset.get("fontFamily") or preset.get("family")
    return FontValue.from_dict(
        {
            "style": preset.get("style", ""),
            "variant": preset.get("variant", ""),
            "weight": preset.get("weight", ""),
            "stretch": preset.get("stretch", ""),
            "size": preset.get("size", ""),
            "lineHeight": preset.get("lineHeight", ""),
            "family": family,
        }
    )


def is_font_param(value: Any) -> bool:
    """A style-param font entry that describes an actual font."""
    return isinstance(value, Mapping) and bool(value.get("fontStyleParam"))


def is_string_param(value: Any) -> bool:
    """A style-param font entry abused to carry a plain string."""
    return (
        isinstance(value, Mapping)
        and not value.get("fontStyleParam")
        and isinstance(value.get("value"), str)
    )


def _style_font(param: Mapping[str, Any], fonts: Mapping[str, FontValue]) -> FontValue:
    preset = fonts.get(param.get("preset", ""))
    merged = preset.to_dict() if preset else {}

    if param.get("family"):
        merged["family"] = param["family"]

    size = param.get("size")
    if isinstance(size, (int, float)) and not isinstance(size, bool):
        merged["size"] = f"{size}px"
    elif size:
        merged["size"] = size

    flags = param.get("style") or {}
    if flags.get("bold"):
        merged["weight"] = "bold"
    if flags.get("italic"):
        merged["style"] = "italic"
    merged["underline"] = bool(flags.get("underline"))

    return FontValue.from_dict(merged)


def _full_font_styles(
    font_styles: Mapping[str, Any], site_text_presets: Mapping[str, Any]
) -> dict[str, FontValue]:
    fonts: dict[str, FontValue] = {}

    for name, preset in (site_text_presets or {}).items():
        font = _preset_to_font(preset)
        fonts[name] = font
        if preset.get("editorKey"):
            fonts[preset["editorKey"]] = font

    for name, param in (font_styles or {}).items():
        if is_font_param(param):
            fonts[name] = _style_font(param, fonts)

    return fonts


# -----------------------------------------------------------------------------
# Entry point
# -----------------------------------------------------------------------------


def generate_tpa_params(styles: SiteStyles, is_rtl: bool = False) -> TPAParams:
    """Build the evaluation environment for one render request.

    Args:
        styles: Raw site colors, text presets and style params
        is_rtl: Whether the page renders right-to-left

    Returns:
        An immutable TPAParams snapshot
    """
    style_params = styles.style_params or {}
    font_params = style_params.get("fonts") or {}

    colors = _full_color_styles(style_params.get("colors") or {}, styles.site_colors)
    fonts = _full_font_styles(font_params, styles.site_text_presets)
    strings = {
        name: param["value"]
        for name, param in font_params.items()
        if is_string_param(param)
    }
    numbers = dict(style_params.get("numbers") or {})
    booleans = {**(style_params.get("booleans") or {}), IS_RTL_PARAM: bool(is_rtl)}

    return TPAParams(
        colors=colors,
        numbers=numbers,
        booleans=booleans,
        fonts=fonts,
        strings=strings,
    )
