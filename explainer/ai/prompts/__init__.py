"""
Prompts Module - fixed instruction text for every pipeline role.

- Planner: question -> content plan (parameterized by detail level)
- Renderer: content plan -> HTML (parameterized by style preset)
- Short renderer: question -> compact HTML (parameterized by style preset)
- Preview: question -> 2-3 sentence answer

All builders are pure: identical inputs give identical text.
"""

from explainer.ai.prompts.planner import build_planner_prompt
from explainer.ai.prompts.renderer import (
    build_renderer_prompt,
    build_short_renderer_prompt,
    font_url,
)
from explainer.ai.prompts.preview import (
    PREVIEW_MAX_TOKENS,
    PREVIEW_PROMPT,
    PREVIEW_TEMPERATURE,
)

__all__ = [
    "build_planner_prompt",
    "build_renderer_prompt",
    "build_short_renderer_prompt",
    "font_url",
    "PREVIEW_PROMPT",
    "PREVIEW_TEMPERATURE",
    "PREVIEW_MAX_TOKENS",
]
