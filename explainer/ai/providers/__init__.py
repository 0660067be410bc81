"""
AI Providers Module - OpenRouter clients used by the pipeline.

- CompletionClient: system + user message in, text out
- ImageClient: prompt in, image data URL out

Both follow the same contract: they never raise for upstream problems and
report them through ``AIResponse.success`` / ``AIResponse.error``.
"""

from explainer.ai.providers.base import AIResponse, ProviderType, ReasoningEffort, TokenUsage
from explainer.ai.providers.openrouter import CompletionClient, completion_client
from explainer.ai.providers.image import ImageClient, image_client

__all__ = [
    "AIResponse",
    "ProviderType",
    "ReasoningEffort",
    "TokenUsage",
    "CompletionClient",
    "completion_client",
    "ImageClient",
    "image_client",
]
