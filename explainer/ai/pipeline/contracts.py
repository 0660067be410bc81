"""
Contracts for the explain pipeline.

Dataclasses passed between stages. ImagePrompt and ImageGenResult live
only for the duration of one run.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ImagePrompt:
    """An image request extracted from the content plan."""

    id: str
    """Placeholder key, e.g. "img-1"."""

    prompt: str
    """Free-text description sent to the image model."""


@dataclass(frozen=True)
class ImageGenResult:
    """A generated image, ready to be injected into its placeholder."""

    id: str
    data_url: str


@dataclass(frozen=True)
class ExplainResult:
    """Final output of one pipeline run."""

    html: str
    preset_name: str

    def describe(self) -> str:
        """Human-readable description."""
        return (
            f"ExplainResult: preset={self.preset_name}, "
            f"html={len(self.html)} chars, svgs={self.html.lower().count('<svg')}"
        )
