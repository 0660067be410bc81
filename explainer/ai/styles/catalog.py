"""
Style catalog - the fixed table of named presets.

Each preset bundles a colour palette, a Google Fonts pairing and a mood
string. Presets are immutable; the resolver receives the catalog as an
injected read-only table so tests can substitute their own.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class ColorMode(str, Enum):
    """Light or dark base for a custom style."""
    LIGHT = "light"
    DARK = "dark"


@dataclass(frozen=True)
class StyleColors:
    bg: str
    text: str
    accent: str
    surface: str


@dataclass(frozen=True)
class FontPairing:
    heading: str
    body: str


@dataclass(frozen=True)
class StylePreset:
    """A named visual style used to parameterize the renderer prompts."""
    name: str
    colors: StyleColors
    fonts: FontPairing
    mood: str


@dataclass(frozen=True)
class CustomStyle:
    """
    User-chosen style.

    accent_color is a "#RRGGBB" hex string, font_pairing names a catalog
    preset whose fonts are borrowed.
    """
    accent_color: str
    font_pairing: str
    mode: ColorMode = ColorMode.DARK


def _preset(name: str, bg: str, text: str, accent: str, surface: str,
            heading: str, body: str, mood: str) -> StylePreset:
    return StylePreset(
        name=name,
        colors=StyleColors(bg=bg, text=text, accent=accent, surface=surface),
        fonts=FontPairing(heading=heading, body=body),
        mood=mood,
    )


PRESETS: Tuple[StylePreset, ...] = (
    _preset("midnight-scholar", "#0f172a", "#e2e8f0", "#38bdf8", "#1e293b",
            "Space Grotesk", "Inter", "dark, technical, clean"),
    _preset("warm-notebook", "#fef3c7", "#451a03", "#d97706", "#ffffff",
            "Playfair Display", "Source Sans 3", "warm, editorial, approachable"),
    _preset("forest-green", "#064e3b", "#d1fae5", "#34d399", "#065f46",
            "Merriweather", "Lato", "natural, calm, earthy"),
    _preset("sunset-coral", "#fff1f2", "#4c0519", "#f43f5e", "#ffffff",
            "Poppins", "Nunito", "energetic, vibrant, friendly"),
    _preset("ocean-deep", "#0c4a6e", "#e0f2fe", "#0ea5e9", "#075985",
            "Archivo", "IBM Plex Sans", "professional, deep, modern"),
    _preset("lavender-dream", "#faf5ff", "#3b0764", "#a855f7", "#ffffff",
            "DM Serif Display", "DM Sans", "elegant, soft, creative"),
    _preset("charcoal-minimal", "#18181b", "#fafafa", "#a1a1aa", "#27272a",
            "Geist", "Geist Mono", "stark, focused, monochrome"),
    _preset("terracotta", "#fef2f2", "#7c2d12", "#ea580c", "#ffffff",
            "Libre Baskerville", "Karla", "classic, warm, grounded"),
    _preset("arctic-frost", "#f0f9ff", "#0c4a6e", "#06b6d4", "#ffffff",
            "Outfit", "Work Sans", "crisp, airy, minimal"),
    _preset("golden-hour", "#fffbeb", "#78350f", "#f59e0b", "#ffffff",
            "Cormorant Garamond", "Fira Sans", "luxurious, refined, warm"),
)


def find_preset(catalog, name: str) -> Optional[StylePreset]:
    """Look up a preset by exact name."""
    for preset in catalog:
        if preset.name == name:
            return preset
    return None
