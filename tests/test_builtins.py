"""Tests for the built-in expression functions."""

import math

import pytest

from tpastyle.constants import DIRECTION_MAP
from tpastyle.errors import UnknownDirectionTokenError, UnparsableColorError
from tpastyle.expressions import evaluate_expression
from tpastyle.expressions.builtins import create_default_registry, escape_html, is_truthy
from tpastyle.theme import Color, FontValue, TPAParams, is_readable
from tpastyle.theme.colors import WHITE


PRESET = {
    "size": "10",
    "lineHeight": "1.4",
    "style": "italic",
    "family": ["family", "family2;"],
    "weight": "bold",
    "variant": "variant",
}


@pytest.fixture
def registry():
    return create_default_registry()


@pytest.fixture
def params():
    return TPAParams(
        colors={"color-1": "rgb(255, 0, 0)"},
        fonts={"Body-M": FontValue.from_dict(PRESET)},
    )


@pytest.fixture
def call(registry, params):
    def _call(name, *args, tpa_params=None):
        return registry.call(name, list(args), tpa_params or params)

    return _call


# =============================================================================
# Color Functions
# =============================================================================


class TestJoin:
    def test_join_two_colors(self, call):
        assert call("join", "#ff0000", 0, "#00ff00", 0) == "rgb(128, 128, 0)"

    def test_join_two_colors_with_alpha(self, call):
        assert call("join", "rgba(255,0,0,.5)", 0, "rgba(0,255,0,.5)", 0) == (
            "rgba(128, 128, 0, 0.5)"
        )

    @pytest.mark.parametrize(
        "first, second",
        [
            ("#ff0000", "#00ff00"),
            ("rgb(10, 20, 30)", "rgb(200, 100, 7)"),
            ("rgba(1, 2, 3, 0.2)", "white"),
            ("hsl(120, 50%, 50%)", "#abc"),
        ],
    )
    def test_join_is_commutative(self, call, first, second):
        assert call("join", first, 0, second, 0) == call("join", second, 0, first, 0)

    def test_join_ignores_strengths(self, call):
        assert call("join", "#ff0000", 1, "#00ff00", 9) == call(
            "join", "#ff0000", 0, "#00ff00", 0
        )


class TestColor:
    def test_css_color(self, call):
        assert call("color", "red", tpa_params=TPAParams()) == "rgb(255, 0, 0)"

    def test_color_mapping(self, call):
        assert call("color", {"r": 255, "g": 0, "b": 0}, tpa_params=TPAParams()) == (
            "rgb(255, 0, 0)"
        )

    def test_color_from_params(self, call):
        assert call("color", "color-1") == "rgb(255, 0, 0)"

    def test_hex_passthrough(self, call):
        assert call("color", "#ff0000") == "#ff0000"
        assert call("color", "#ABC") == "#ABC"

    @pytest.mark.parametrize("value", ["", None])
    def test_empty_value(self, call, value):
        assert call("color", value) == ""

    def test_unparsable_color(self, call):
        with pytest.raises(UnparsableColorError) as exc_info:
            call("color", "rgb(bla)")
        assert str(exc_info.value) == "Unparsable color rgb(bla)"


class TestOpacity:
    def test_add_opacity(self, call):
        assert call("opacity", "red", 0.4) == "rgba(255, 0, 0, 0.4)"

    def test_multiplies_existing_alpha(self, call):
        assert call("opacity", "rgba(255,0,0,.8)", 0.5) == "rgba(255, 0, 0, 0.4)"

    def test_remove_opacity(self, call):
        assert call("withoutOpacity", "rgba(255,0,0,.5)") == "rgb(255, 0, 0)"

    @pytest.mark.parametrize("factor", [0, 0.1, 0.4, 0.99, 1])
    def test_without_opacity_after_opacity(self, call, factor):
        faded = call("opacity", "red", factor)

        assert Color.parse(call("withoutOpacity", faded)).a == 1


class TestBrightness:
    def test_darken_white(self, call):
        assert call("darken", "rgb(255,255,255)", 0.5) == "rgb(127, 127, 127)"

    def test_darken_red(self, call):
        assert call("darken", "rgb(255,0,0)", 0.5) == "rgb(127, 0, 0)"

    def test_lighten(self, call):
        assert call("lighten", "rgb(0, 0, 0)", 0.5) == "rgb(128, 128, 128)"

    def test_whiten(self, call):
        assert call("whiten", "rgb(0, 0, 0)", 0.5) == "rgb(128, 128, 128)"
        assert call("whiten", "rgb(0, 0, 0)", 1) == "rgb(255, 255, 255)"


class TestContrast:
    def test_readable_fallback_keeps_suggestion(self, call):
        assert call("readableFallback", "#ffffff", "#000000", "red") == "#000000"

    def test_readable_fallback_uses_fallback(self, call):
        assert call("readableFallback", "#ffffff", "#eeeeee", "#000000") == "#000000"

    def test_smart_bg_contrast_keeps_readable_background(self, call):
        assert call("smartBGContrast", "#000000", "#ffffff") == "#ffffff"

    def test_smart_bg_contrast_darkens_background(self, call):
        result = call("smartBGContrast", "#ffffff", "#eeeeee")

        assert result.startswith("rgb(")
        assert is_readable(WHITE, Color.parse(result))

    def test_smart_bg_contrast_lightens_background(self, call):
        result = call("smartBGContrast", "#000000", "#333333")
        background = Color.parse(result)

        assert background.luminance > Color.parse("#333333").luminance
        assert is_readable(Color.parse("#000000"), background)


# =============================================================================
# Font Functions
# =============================================================================


class TestFont:
    def test_font_as_object(self, call):
        assert call("font", PRESET, tpa_params=TPAParams()) == (
            "italic variant bold 10/1.4 family,family2"
        )

    def test_tpa_text_preset(self, call):
        assert call("font", "Body-M") == "italic variant bold 10/1.4 family,family2"

    def test_override_tpa_text_preset(self, call):
        value = "{theme: 'Body-M', size: '20px', style:'normal', lineHeight: '1em'}"

        assert call("font", value) == "normal variant bold 20px/1em family,family2"

    def test_override_from_object_literal(self, registry, params):
        expression = "\"font({theme: 'Body-M', size: '20px', style: 'normal', lineHeight: '1em'})\""

        assert evaluate_expression(expression, params, registry) == (
            "normal variant bold 20px/1em family,family2"
        )

    def test_override_without_theme(self, call):
        assert call("font", {"size": "12px", "family": ["Arial"]}) == "12px Arial"

    def test_unknown_font(self, call):
        assert call("font", "unknown-font", tpa_params=TPAParams()) == "unknown-font"

    def test_font_prefix_passthrough(self, call):
        assert call("font", "font:italic 12px Arial;") == "italic 12px Arial"

    def test_font_escapes_html(self, call):
        assert call("font", "<b>") == "&lt;b&gt;"

    def test_underline(self, call):
        assert call("underline", {"underline": True}) == "underline"
        assert call("underline", FontValue(underline=True)) == "underline"

    def test_no_underline(self, call):
        assert call("underline", {}) == ""
        assert call("underline", "Body-M") == ""


# =============================================================================
# Text and Number Functions
# =============================================================================


class TestText:
    def test_string(self, call):
        assert call("string", "str") == "str"

    def test_string_escapes_angle_brackets(self, call):
        assert call("string", "<script>") == "&lt;script&gt;"

    def test_escape_html_passes_non_strings(self):
        assert escape_html(5) == 5

    def test_unit(self, call):
        assert call("unit", 10, "px") == "10px"
        assert call("unit", 10.0, "px") == "10px"
        assert call("unit", 1.5, "em") == "1.5em"


class TestNumber:
    def test_number(self, call):
        assert call("number", "1") == 1
        assert call("number", "1.5") == 1.5
        assert call("number", 7) == 7

    def test_always_converts(self, call):
        assert math.isnan(call("number", "s"))
        assert math.isnan(call("number", None))

    def test_number_edge_values(self, call):
        assert call("number", "") == 0
        assert call("number", True) == 1

    def test_zero_as_true(self, call):
        assert call("zeroAsTrue", 0) == "0"
        assert call("zeroAsTrue", 2.0) == "2"
        assert call("zeroAsTrue", "x") == "x"

    def test_calculate(self, call):
        assert call("calculate", "+", "10px", "5px") == "calc(10px + 5px)"
        assert call("calculate", "-", "100%", "2px", "1em") == "calc(100% - 2px - 1em)"

    def test_calculate_single_operand(self, call):
        assert call("calculate", "+", "10px") == "10px"

    def test_calculate_no_operands(self, call):
        assert call("calculate", "+") is None

    def test_calculate_expression(self, registry, params):
        expression = '"calculate(+, unit(number(4), px), 10%)"'

        assert evaluate_expression(expression, params, registry) == "calc(4px + 10%)"


# =============================================================================
# Logic and Direction Functions
# =============================================================================


class TestFallback:
    def test_first_truthy(self, call):
        assert call("fallback", 0, "", False, None, "abs") == "abs"

    def test_nan_is_falsy(self, call):
        assert call("fallback", math.nan, 3) == 3

    def test_all_falsy(self, call):
        assert call("fallback", 0, "") is None

    def test_zero_as_true_survives(self, call):
        assert call("fallback", call("zeroAsTrue", 0), 5) == "0"

    @pytest.mark.parametrize(
        "value, expected",
        [(None, False), (False, False), ("", False), (0, False), (0.0, False),
         ("0", True), (1, True), ([], True), ({}, True)],
    )
    def test_is_truthy(self, value, expected):
        assert is_truthy(value) is expected


class TestDirection:
    @pytest.mark.parametrize("is_rtl", [False, True])
    @pytest.mark.parametrize("token", sorted(DIRECTION_MAP))
    def test_direction(self, call, token, is_rtl):
        tpa_params = TPAParams(booleans={"isRTL": is_rtl})

        assert call("direction", token, tpa_params=tpa_params) == (
            DIRECTION_MAP[token]["rtl" if is_rtl else "ltr"]
        )

    def test_start(self, call):
        assert call("direction", "START", tpa_params=TPAParams(booleans={"isRTL": False})) == "left"
        assert call("direction", "START", tpa_params=TPAParams(booleans={"isRTL": True})) == "right"

    def test_unknown_token(self, call):
        with pytest.raises(UnknownDirectionTokenError) as exc_info:
            call("direction", "MIDDLE")
        assert exc_info.value.token == "MIDDLE"
