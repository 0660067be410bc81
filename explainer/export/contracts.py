"""
Contracts for the export engine.

Rendering produces a CapturedCanvas; encoding turns it into an
ExportedFile; the download store hands that file out exactly once per
export under a short-lived link.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from PIL import Image


class ExportFormat(str, Enum):
    PNG = "png"
    PDF = "pdf"

    @property
    def media_type(self) -> str:
        return _MEDIA_TYPES[self]

    @property
    def extension(self) -> str:
        return f".{self.value}"


_MEDIA_TYPES: Dict[ExportFormat, str] = {
    ExportFormat.PNG: "image/png",
    ExportFormat.PDF: "application/pdf",
}


class ExportError(Exception):
    """Capture or encoding failed. Offscreen resources are already released."""

    def __init__(self, message: str, phase: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.phase = phase


@dataclass
class ResolvedStyles:
    """
    Inherited styles read from the fully parsed document's body.

    These are re-applied inline on the host container so cascade-dependent
    properties survive the move out of the real document root.
    """
    background_color: str = "rgb(255, 255, 255)"
    color: str = "rgb(0, 0, 0)"
    font_family: str = ""
    font_size: str = ""
    line_height: str = ""
    margin: str = ""
    padding: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, str]) -> "ResolvedStyles":
        return cls(
            background_color=data.get("backgroundColor") or cls.background_color,
            color=data.get("color") or cls.color,
            font_family=data.get("fontFamily") or "",
            font_size=data.get("fontSize") or "",
            line_height=data.get("lineHeight") or "",
            margin=data.get("margin") or "",
            padding=data.get("padding") or "",
        )

    def to_inline_css(self) -> Dict[str, str]:
        """CSS property -> value, empty values omitted."""
        declarations = {
            "background-color": self.background_color,
            "color": self.color,
            "font-family": self.font_family,
            "font-size": self.font_size,
            "line-height": self.line_height,
            "margin": self.margin,
            "padding": self.padding,
        }
        return {prop: value for prop, value in declarations.items() if value}


@dataclass
class CapturedCanvas:
    """A rasterized host container."""
    image: Image.Image
    background: Tuple[int, int, int] = (255, 255, 255)
    scale: int = 2

    @property
    def logical_width(self) -> float:
        return self.image.width / self.scale

    @property
    def logical_height(self) -> float:
        return self.image.height / self.scale


@dataclass
class ExportedFile:
    """Encoded export, ready to hand to the download store."""
    filename: str
    format: ExportFormat
    data: bytes
    page_count: int = 1
    metadata: Dict[str, object] = field(default_factory=dict)

    @property
    def media_type(self) -> str:
        return self.format.media_type

    @property
    def size(self) -> int:
        return len(self.data)
