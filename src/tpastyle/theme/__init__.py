"""Theme parameters, colors and fonts."""

from tpastyle.theme.colors import Color, contrast_ratio, is_readable
from tpastyle.theme.fonts import FontValue, to_font_css_value
from tpastyle.theme.params import SiteStyles, TPAParams, generate_tpa_params

__all__ = [
    "Color",
    "FontValue",
    "SiteStyles",
    "TPAParams",
    "contrast_ratio",
    "generate_tpa_params",
    "is_readable",
    "to_font_css_value",
]
