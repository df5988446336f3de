"""Built-in functions for tpastyle custom syntax.

This module registers all built-in functions with a FunctionRegistry.
Every implementation takes the active TPAParams as its last argument.

Categories:
- Color: color, join, opacity, withoutOpacity, darken, lighten, whiten,
  readableFallback, smartBGContrast
- Font: font, underline
- Text: string, unit
- Number: number, calculate, zeroAsTrue
- Logic: fallback
- Direction: direction
"""

import math
from collections.abc import Mapping
from typing import Any

from tpastyle.constants import DIRECTION_MAP
from tpastyle.errors import UnknownDirectionTokenError, UnparsableColorError
from tpastyle.expressions.functions import (
    FunctionCategory,
    FunctionDefinition,
    FunctionParameter,
    FunctionRegistry,
)
from tpastyle.expressions.parser import parse_object_shorthand
from tpastyle.theme.colors import Color, is_hex_color, is_readable, to_color
from tpastyle.theme.fonts import DEFAULT_FONT, FontValue, to_font_css_value
from tpastyle.theme.params import TPAParams

# Background adjustments tried by smartBGContrast, in percent
LUMINOSITY_STEPS = (1, 5, 10, 20, 30, 40, 50, 60)

FONT_PASSTHROUGH_PREFIX = "font:"


def register_all_builtins(registry: FunctionRegistry) -> None:
    """Register all built-in functions with the given registry."""
    _register_color_functions(registry)
    _register_font_functions(registry)
    _register_text_functions(registry)
    _register_number_functions(registry)
    _register_logic_functions(registry)
    _register_direction_functions(registry)


def create_default_registry() -> FunctionRegistry:
    """Create a registry pre-populated with every builtin."""
    registry = FunctionRegistry()
    register_all_builtins(registry)
    return registry


def escape_html(value: Any) -> Any:
    """Escape angle brackets; non-strings pass through."""
    if not isinstance(value, str):
        return value
    return value.replace("<", "&lt;").replace(">", "&gt;")


def _to_float(value: Any, default: float) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


def is_truthy(value: Any) -> bool:
    """Truthiness as the style sheets expect it: None, False, "", 0 and NaN are falsy."""
    if value is None or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    return True


# -----------------------------------------------------------------------------
# Color Functions
# -----------------------------------------------------------------------------


def _color(value: Any, params: TPAParams) -> Any:
    """Resolve a theme color name, pass hex through, or normalize any CSS color."""
    if isinstance(value, str) and value in params.colors:
        return params.colors[value]

    if is_hex_color(value):
        return value

    if value is None or value == "":
        return ""

    color = Color.parse(value)
    if color is None:
        raise UnparsableColorError(value)
    return color.to_rgb_string()


def _join(
    color1: Any, strength1: Any, color2: Any, strength2: Any, params: TPAParams
) -> str:
    """Average two colors channel by channel.

    The strength arguments are accepted but not yet used for weighting.
    """
    first = to_color(color1)
    second = to_color(color2)

    r = (first.r / 255 + second.r / 255) / 2 * 255
    g = (first.g / 255 + second.g / 255) / 2 * 255
    b = (first.b / 255 + second.b / 255) / 2 * 255
    a = (first.a + second.a) / 2

    return Color(r, g, b, a).to_rgb_string()


def _opacity(color: Any, opacity: Any, params: TPAParams) -> str:
    """Multiply the color's alpha by opacity."""
    old_color = to_color(color)
    return old_color.with_alpha(old_color.a * _to_float(opacity, 1.0)).to_rgb_string()


def _without_opacity(color: Any, params: TPAParams) -> str:
    """Force alpha to 1."""
    return to_color(color).with_alpha(1).to_rgb_string()


def _darken(color: Any, amount: Any, params: TPAParams) -> str:
    """Darken by a 0-1 fraction of full brightness."""
    return to_color(color).brighten(-1 * _to_float(amount, 0.0) * 100).to_rgb_string()


def _lighten(color: Any, amount: Any, params: TPAParams) -> str:
    """Raise HSL lightness by a 0-1 fraction."""
    return to_color(color).lighten(_to_float(amount, 0.0) * 100).to_rgb_string()


def _whiten(color: Any, amount: Any, params: TPAParams) -> str:
    """Mix in white by a 0-1 fraction."""
    return to_color(color).tint(_to_float(amount, 0.0) * 100).to_rgb_string()


def _readable_fallback(
    base: Any, suggested: Any, fallback: Any, params: TPAParams
) -> Any:
    """Return suggested if it is readable on base, else fallback."""
    if is_readable(to_color(base), to_color(suggested)):
        return suggested
    return fallback


def _smart_bg_contrast(foreground: Any, background: Any, params: TPAParams) -> Any:
    """Nudge background until foreground text on it is readable.

    The background is lightened when it is at least as bright as the
    foreground and darkened otherwise, trying each step in
    LUMINOSITY_STEPS in turn. The last attempted value is returned even if
    it is still not readable.
    """
    fg_color = to_color(foreground)
    bg_color = to_color(background)

    if is_readable(fg_color, bg_color):
        return background

    is_background_brighter = fg_color.luminance <= bg_color.luminance

    for step in LUMINOSITY_STEPS:
        if is_background_brighter:
            bg_color = bg_color.lighten(step)
        else:
            bg_color = bg_color.darken(step)
        if is_readable(fg_color, bg_color):
            break

    return bg_color.to_rgb_string()


def _register_color_functions(registry: FunctionRegistry) -> None:
    registry.register(
        FunctionDefinition(
            name="color",
            description="Resolves a theme color, passes hex through, or normalizes a CSS color",
            category=FunctionCategory.COLOR,
            parameters=[
                FunctionParameter("value", "color", "Theme color name or CSS color", required=False)
            ],
            return_type="string",
            examples=['"color(color-1)"', '"color(#ff0000)"', '"color(red)"'],
            implementation=_color,
        )
    )

    registry.register(
        FunctionDefinition(
            name="join",
            description="Averages two colors channel by channel",
            category=FunctionCategory.COLOR,
            parameters=[
                FunctionParameter("color1", "color", "First color"),
                FunctionParameter("strength1", "number", "Weight of the first color (unused)"),
                FunctionParameter("color2", "color", "Second color"),
                FunctionParameter("strength2", "number", "Weight of the second color (unused)"),
            ],
            return_type="string",
            examples=['"join(color(color-1), 1, color(color-2), 1)"'],
            implementation=_join,
        )
    )

    registry.register(
        FunctionDefinition(
            name="opacity",
            description="Multiplies the color's alpha by a factor",
            category=FunctionCategory.COLOR,
            parameters=[
                FunctionParameter("color", "color", "The color"),
                FunctionParameter("factor", "number", "Alpha multiplier (0-1)"),
            ],
            return_type="string",
            examples=['"opacity(color(color-1), 0.5)"'],
            implementation=_opacity,
        )
    )

    registry.register(
        FunctionDefinition(
            name="withoutOpacity",
            description="Returns the color fully opaque",
            category=FunctionCategory.COLOR,
            parameters=[FunctionParameter("color", "color", "The color")],
            return_type="string",
            examples=['"withoutOpacity(color(my-bg))"'],
            implementation=_without_opacity,
        )
    )

    for name, implementation, verb in (
        ("darken", _darken, "Darkens"),
        ("lighten", _lighten, "Lightens"),
        ("whiten", _whiten, "Mixes white into"),
    ):
        registry.register(
            FunctionDefinition(
                name=name,
                description=f"{verb} a color by a 0-1 fraction",
                category=FunctionCategory.COLOR,
                parameters=[
                    FunctionParameter("color", "color", "The color"),
                    FunctionParameter("amount", "number", "Fraction between 0 and 1"),
                ],
                return_type="string",
                examples=[f'"{name}(color(color-8), 0.2)"'],
                implementation=implementation,
            )
        )

    registry.register(
        FunctionDefinition(
            name="readableFallback",
            description="Returns the suggested color if readable on the base, else the fallback",
            category=FunctionCategory.COLOR,
            parameters=[
                FunctionParameter("base", "color", "Background color"),
                FunctionParameter("suggested", "color", "Preferred text color"),
                FunctionParameter("fallback", "color", "Color used when not readable"),
            ],
            return_type="string",
            examples=['"readableFallback(color(color-1), color(color-8), color(color-5))"'],
            implementation=_readable_fallback,
        )
    )

    registry.register(
        FunctionDefinition(
            name="smartBGContrast",
            description="Adjusts a background color until the foreground is readable on it",
            category=FunctionCategory.COLOR,
            parameters=[
                FunctionParameter("foreground", "color", "Text color"),
                FunctionParameter("background", "color", "Background color"),
            ],
            return_type="string",
            examples=['"smartBGContrast(color(color-5), color(color-1))"'],
            implementation=_smart_bg_contrast,
        )
    )


# -----------------------------------------------------------------------------
# Font Functions
# -----------------------------------------------------------------------------


def _is_json_like(value: Any) -> bool:
    return isinstance(value, str) and value.startswith("{") and value.endswith("}")


def _merge_font_overrides(overrides: Mapping[str, Any], params: TPAParams) -> dict[str, Any]:
    """Merge an override map over the defaults and its `theme` preset."""
    overrides = dict(overrides)
    theme = overrides.pop("theme", None)
    merged = dict(DEFAULT_FONT)
    if theme is not None and theme in params.fonts:
        preset = params.fonts[theme]
        merged.update(preset.to_dict() if isinstance(preset, FontValue) else preset)
    merged.update(overrides)
    return merged


def _format_font(font: FontValue | Mapping[str, Any]) -> str:
    css_value = to_font_css_value(font)
    return escape_html(css_value.split(";")[0])


def _font(value: Any, params: TPAParams) -> Any:
    """Produce a CSS font shorthand from a preset, an override map or raw text."""
    if isinstance(value, FontValue):
        return _format_font(value)

    if isinstance(value, Mapping):
        return _format_font(_merge_font_overrides(value, params))

    if _is_json_like(value):
        return _format_font(_merge_font_overrides(parse_object_shorthand(value), params))

    if isinstance(value, str) and value in params.fonts:
        return _format_font(params.fonts[value])

    if isinstance(value, str) and value.startswith(FONT_PASSTHROUGH_PREFIX):
        raw = value[len(FONT_PASSTHROUGH_PREFIX):]
        if raw.endswith(";"):
            raw = raw[:-1]
        return raw

    return escape_html(value)


def _underline(font: Any, params: TPAParams) -> str:
    """Return "underline" when the font's underline flag is set."""
    if isinstance(font, FontValue):
        flag = font.underline
    elif isinstance(font, Mapping):
        flag = font.get("underline")
    else:
        flag = False
    return "underline" if flag else ""


def _register_font_functions(registry: FunctionRegistry) -> None:
    registry.register(
        FunctionDefinition(
            name="font",
            description="Formats a text preset, font override map or raw value as a font shorthand",
            category=FunctionCategory.FONT,
            parameters=[
                FunctionParameter("value", "font|string", "Preset, override map or raw value")
            ],
            return_type="string",
            examples=[
                '"font(Body-M)"',
                "\"font({theme: 'Body-M', size: '20px', lineHeight: '1em'})\"",
                '"font(my-font-param)"',
            ],
            implementation=_font,
        )
    )

    registry.register(
        FunctionDefinition(
            name="underline",
            description='Returns "underline" if the font is underlined, else an empty string',
            category=FunctionCategory.FONT,
            parameters=[FunctionParameter("font", "font", "A font value")],
            return_type="string",
            examples=['"underline(my-font-param)"'],
            implementation=_underline,
        )
    )


# -----------------------------------------------------------------------------
# Text Functions
# -----------------------------------------------------------------------------


def _string(value: Any, params: TPAParams) -> Any:
    """HTML-escape a value."""
    return escape_html(value)


def _unit(value: Any, unit: Any, params: TPAParams) -> str:
    """Append a unit to a value."""
    return escape_html(f"{_format_number(value)}{'' if unit is None else unit}")


def _register_text_functions(registry: FunctionRegistry) -> None:
    registry.register(
        FunctionDefinition(
            name="string",
            description="Returns the value HTML-escaped",
            category=FunctionCategory.TEXT,
            parameters=[FunctionParameter("value", "string", "The value")],
            return_type="string",
            examples=['"string(my-label)"'],
            implementation=_string,
        )
    )

    registry.register(
        FunctionDefinition(
            name="unit",
            description="Concatenates a value and a unit suffix",
            category=FunctionCategory.TEXT,
            parameters=[
                FunctionParameter("value", "number|string", "The value"),
                FunctionParameter("unit", "string", "Unit suffix, e.g. px"),
            ],
            return_type="string",
            examples=['"unit(number(border-width), px)"'],
            implementation=_unit,
        )
    )


# -----------------------------------------------------------------------------
# Number Functions
# -----------------------------------------------------------------------------


def _format_number(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def _number(value: Any, params: TPAParams) -> int | float:
    """Coerce to a number; anything non-numeric becomes NaN."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        text = value.strip()
        if text == "":
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _zero_as_true(value: Any, params: TPAParams) -> Any:
    """Turn numbers into strings so a numeric 0 survives fallback()."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(_format_number(value))
    return value


def _calculate(operator: Any, *args: Any) -> Any:
    """Wrap two or more operands in calc(); a single operand is returned as is."""
    numbers = [_format_number(arg) for arg in args[:-1]]
    if len(numbers) > 1:
        return f"calc({f' {operator} '.join(str(n) for n in numbers)})"
    if numbers:
        return numbers[0]
    return None


def _register_number_functions(registry: FunctionRegistry) -> None:
    registry.register(
        FunctionDefinition(
            name="number",
            description="Coerces a value to a number (NaN when not numeric)",
            category=FunctionCategory.NUMBER,
            parameters=[FunctionParameter("value", "any", "The value")],
            return_type="number",
            examples=['"number(border-width)"'],
            implementation=_number,
        )
    )

    registry.register(
        FunctionDefinition(
            name="zeroAsTrue",
            description="Converts numbers to strings so that 0 is not treated as absent",
            category=FunctionCategory.NUMBER,
            parameters=[FunctionParameter("value", "any", "The value")],
            return_type="any",
            examples=['"fallback(zeroAsTrue(number(radius)), 5)"'],
            implementation=_zero_as_true,
        )
    )

    registry.register(
        FunctionDefinition(
            name="calculate",
            description="Joins operands with an operator inside calc()",
            category=FunctionCategory.NUMBER,
            parameters=[
                FunctionParameter("operator", "string", "Operator, e.g. + or -"),
                FunctionParameter("values", "any", "Operands", variadic=True),
            ],
            return_type="string",
            examples=['"calculate(+, unit(number(gap), px), 10%)"'],
            implementation=_calculate,
        )
    )


# -----------------------------------------------------------------------------
# Logic Functions
# -----------------------------------------------------------------------------


def _fallback(*args: Any) -> Any:
    """Return the first truthy argument (the trailing TPAParams is ignored)."""
    for value in args[:-1]:
        if is_truthy(value):
            return value
    return None


def _register_logic_functions(registry: FunctionRegistry) -> None:
    registry.register(
        FunctionDefinition(
            name="fallback",
            description="Returns the first value that is not falsy",
            category=FunctionCategory.LOGIC,
            parameters=[
                FunctionParameter("values", "any", "Candidate values", variadic=True)
            ],
            return_type="any",
            examples=['"fallback(color(my-bg), color(color-1))"'],
            implementation=_fallback,
        )
    )


# -----------------------------------------------------------------------------
# Direction Functions
# -----------------------------------------------------------------------------


def _direction(value: Any, params: TPAParams) -> str:
    """Map a direction token to its value for the active text direction."""
    direction = "rtl" if params.is_rtl else "ltr"
    if not isinstance(value, str) or value not in DIRECTION_MAP:
        raise UnknownDirectionTokenError(value)
    return DIRECTION_MAP[value][direction]


def _register_direction_functions(registry: FunctionRegistry) -> None:
    registry.register(
        FunctionDefinition(
            name="direction",
            description="Resolves START/END/STARTSIGN/ENDSIGN/DIR/DEG-START/DEG-END for LTR or RTL",
            category=FunctionCategory.DIRECTION,
            parameters=[FunctionParameter("token", "string", "Direction token")],
            return_type="string",
            examples=["float: START;", '"direction(END)"'],
            implementation=_direction,
        )
    )
