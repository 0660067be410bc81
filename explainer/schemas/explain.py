"""
Explain schemas - Pydantic models for the generation endpoints.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from explainer.ai.detail_levels import DetailLevel
from explainer.ai.styles import ColorMode, CustomStyle


class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, still accepts snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# REQUEST SCHEMAS (what the client sends)
# ---------------------------------------------------------------------------

class CustomStyleSchema(CamelModel):
    """
    User-chosen style, turned into a preset by the style resolver.

    Example:
    {
        "accentColor": "#06B6D4",
        "fontPairing": "midnight-scholar",
        "mode": "dark"
    }
    """
    # accent_color: 6-digit hex, passed through unchanged as the accent
    accent_color: str = Field(..., pattern=r"^#[0-9a-fA-F]{6}$", description="Accent colour, e.g. #06B6D4")

    # font_pairing: name of the catalog preset whose fonts are borrowed
    font_pairing: str = Field("midnight-scholar", max_length=64)

    mode: ColorMode = ColorMode.DARK

    def to_domain(self) -> CustomStyle:
        return CustomStyle(
            accent_color=self.accent_color,
            font_pairing=self.font_pairing,
            mode=self.mode,
        )


class ExplainRequest(CamelModel):
    """
    Example request body:
    {
        "question": "How do vaccines work?",
        "detailLevel": "balanced",
        "customStyle": {"accentColor": "#06B6D4", "fontPairing": "midnight-scholar", "mode": "dark"}
    }
    """
    question: str = Field(..., min_length=1, max_length=500)
    custom_style: Optional[CustomStyleSchema] = None
    detail_level: DetailLevel = DetailLevel.BALANCED


class PreviewRequest(CamelModel):
    question: str = Field(..., min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# RESPONSE SCHEMAS (what the server returns)
# ---------------------------------------------------------------------------

class ExplainResponse(CamelModel):
    html: str
    # preset: name of the resolved style preset
    preset: str


class PreviewResponse(CamelModel):
    text: str
