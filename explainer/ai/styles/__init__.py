"""
Styles Module - preset catalog and custom style derivation.
"""

from explainer.ai.styles.catalog import (
    PRESETS,
    ColorMode,
    CustomStyle,
    FontPairing,
    StyleColors,
    StylePreset,
)
from explainer.ai.styles.resolver import (
    StyleResolver,
    build_custom_preset,
    derive_colors,
    get_random_preset,
    hex_to_hsl,
    hsl_to_hex,
    style_resolver,
)

__all__ = [
    "PRESETS",
    "ColorMode",
    "CustomStyle",
    "FontPairing",
    "StyleColors",
    "StylePreset",
    "StyleResolver",
    "build_custom_preset",
    "derive_colors",
    "get_random_preset",
    "hex_to_hsl",
    "hsl_to_hex",
    "style_resolver",
]
