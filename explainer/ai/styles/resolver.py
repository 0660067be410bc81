"""
Style Resolver - picks a catalog preset or derives one from a custom style.

Colour derivation works in HSL: the accent's hue is kept, saturation is
clamped to stay muted, and background/text/surface are placed at fixed
lightness targets for the chosen mode. The accent itself passes through
unchanged.
"""

import logging
import math
import random
import re
from typing import Optional, Sequence, Tuple

from explainer.core.config import settings
from explainer.ai.styles.catalog import (
    PRESETS,
    ColorMode,
    CustomStyle,
    FontPairing,
    StyleColors,
    StylePreset,
    find_preset,
)

logger = logging.getLogger("explainer.ai.styles")

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")

# Returned for anything that is not a 6-digit hex colour
NEUTRAL_HSL: Tuple[int, int, int] = (0, 0, 50)


def _js_round(value: float) -> int:
    """Round half up, so 0.5 -> 1 and 2.5 -> 3."""
    return int(math.floor(value + 0.5))


def hex_to_hsl(hex_color: str) -> Tuple[int, int, int]:
    """
    Convert "#RRGGBB" to (hue 0-360, saturation 0-100, lightness 0-100).

    Malformed input degrades to a neutral gray instead of raising.
    """
    if not isinstance(hex_color, str) or not HEX_COLOR_PATTERN.match(hex_color):
        return NEUTRAL_HSL

    raw = hex_color[1:]
    r = int(raw[0:2], 16) / 255
    g = int(raw[2:4], 16) / 255
    b = int(raw[4:6], 16) / 255

    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2

    if high == low:
        return 0, 0, _js_round(lightness * 100)

    d = high - low
    saturation = d / (2 - high - low) if lightness > 0.5 else d / (high + low)

    if high == r:
        hue = ((g - b) / d + (6 if g < b else 0)) / 6
    elif high == g:
        hue = ((b - r) / d + 2) / 6
    else:
        hue = ((r - g) / d + 4) / 6

    return _js_round(hue * 360), _js_round(saturation * 100), _js_round(lightness * 100)


def hsl_to_hex(h: float, s: float, l: float) -> str:
    """Convert HSL (degrees, percent, percent) back to "#rrggbb"."""
    s_norm = s / 100
    l_norm = l / 100

    c = (1 - abs(2 * l_norm - 1)) * s_norm
    x = c * (1 - abs(((h / 60) % 2) - 1))
    m = l_norm - c / 2

    if h < 60:
        r, g, b = c, x, 0.0
    elif h < 120:
        r, g, b = x, c, 0.0
    elif h < 180:
        r, g, b = 0.0, c, x
    elif h < 240:
        r, g, b = 0.0, x, c
    elif h < 300:
        r, g, b = x, 0.0, c
    else:
        r, g, b = c, 0.0, x

    def to_hex(channel: float) -> str:
        clamped = max(0, min(255, _js_round((channel + m) * 255)))
        return f"{clamped:02x}"

    return f"#{to_hex(r)}{to_hex(g)}{to_hex(b)}"


def derive_colors(accent_hex: str, mode: ColorMode) -> StyleColors:
    """
    Derive a full palette from one accent colour.

    Dark:  bg L10, text L90 (S10), surface L15
    Light: bg L97, text L15, surface white
    """
    h, s, _ = hex_to_hsl(accent_hex)

    if ColorMode(mode) == ColorMode.DARK:
        return StyleColors(
            bg=hsl_to_hex(h, min(s, 30), 10),
            text=hsl_to_hex(h, 10, 90),
            surface=hsl_to_hex(h, min(s, 25), 15),
            accent=accent_hex,
        )

    return StyleColors(
        bg=hsl_to_hex(h, min(s, 30), 97),
        text=hsl_to_hex(h, min(s, 30), 15),
        surface="#ffffff",
        accent=accent_hex,
    )


class StyleResolver:
    """
    Selects styles from an injected catalog.

    Usage:
        resolver = StyleResolver()                       # built-in catalog
        resolver = StyleResolver([my_preset], rng=random.Random(7))

        preset = resolver.get_random_preset()
        preset = resolver.build_custom_preset(custom_style)
    """

    def __init__(
        self,
        catalog: Sequence[StylePreset] = PRESETS,
        rng: Optional[random.Random] = None,
        default_font_preset: Optional[str] = None,
    ):
        if not catalog:
            raise ValueError("Style catalog must contain at least one preset")
        self._catalog = tuple(catalog)
        self._rng = rng or random.Random()
        self._default_font_preset = default_font_preset or settings.DEFAULT_FONT_PRESET

    @property
    def catalog(self) -> Tuple[StylePreset, ...]:
        return self._catalog

    def get_random_preset(self) -> StylePreset:
        """Uniform choice over the catalog."""
        return self._rng.choice(self._catalog)

    def get_preset_by_name(self, name: str) -> Optional[StylePreset]:
        return find_preset(self._catalog, name)

    def build_custom_preset(self, custom: CustomStyle) -> StylePreset:
        """
        Compose derived colours with a borrowed font pair.

        Unknown font_pairing names fall back to the default font preset,
        then to the first catalog entry.
        """
        font_source = (
            self.get_preset_by_name(custom.font_pairing)
            or self.get_preset_by_name(self._default_font_preset)
            or self._catalog[0]
        )
        mode = ColorMode(custom.mode)
        colors = derive_colors(custom.accent_color, mode)

        _, saturation, _ = hex_to_hsl(custom.accent_color)
        vibrancy = "vibrant" if saturation > 50 else "warm"

        logger.debug(f"Custom preset: accent={custom.accent_color} mode={mode.value} fonts={font_source.name}")

        return StylePreset(
            name=f"custom-{mode.value}",
            colors=colors,
            fonts=FontPairing(heading=font_source.fonts.heading, body=font_source.fonts.body),
            mood=f"custom {mode.value}, {vibrancy}",
        )


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
style_resolver = StyleResolver()


def get_random_preset() -> StylePreset:
    return style_resolver.get_random_preset()


def build_custom_preset(custom: CustomStyle) -> StylePreset:
    return style_resolver.build_custom_preset(custom)
