"""
Base AI Provider - shared response contract for the OpenRouter clients.

Both the completion client and the image client return the same
structure, so the pipeline and the monitor can treat them uniformly.

Contract:
=========
Providers never raise for upstream problems. A non-success HTTP status,
a transport error or a malformed body is reported as
``AIResponse(success=False, error=..., status_code=...)``.
Cancellation (asyncio.CancelledError) is NOT swallowed, so a timer armed
around a call can still interrupt it.

Example:
    response = await completion_client.complete(system_prompt, question)
    if response.success:
        print(response.content)
"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Any, Dict
from enum import Enum
import logging

logger = logging.getLogger("explainer.ai")


class ProviderType(str, Enum):
    """Remote endpoints the pipeline talks to."""
    OPENROUTER = "openrouter"
    OPENROUTER_IMAGE = "openrouter_image"


class ReasoningEffort(str, Enum):
    """Reasoning-effort hint forwarded to reasoning-capable models."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass
class TokenUsage:
    """
    Token usage statistics for an AI request.

    Used for cost tracking and the /api/stats endpoint.
    """
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __post_init__(self):
        """Calculate total if not provided."""
        if self.total_tokens == 0:
            self.total_tokens = self.prompt_tokens + self.completion_tokens


@dataclass
class AIResponse:
    """
    Standardized response from a provider.

    Attributes:
        content: Generated text, or an image data URL for image calls
        provider: Which endpoint produced this response
        model: The specific model used
        usage: Token usage statistics
        latency_ms: How long the request took
        success: Whether the request succeeded
        error: Error message if failed
        status_code: HTTP status of a failed upstream call, if known
        raw_response: Original provider response (for debugging)
        metadata: Additional provider-specific data
        created_at: Timestamp of the response
    """
    content: str
    provider: ProviderType
    model: str
    usage: TokenUsage = field(default_factory=TokenUsage)
    latency_ms: float = 0.0
    success: bool = True
    error: Optional[str] = None
    status_code: Optional[int] = None
    raw_response: Optional[Any] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "content": self.content[:100] + "..." if len(self.content) > 100 else self.content,
            "provider": self.provider.value,
            "model": self.model,
            "tokens": {
                "prompt": self.usage.prompt_tokens,
                "completion": self.usage.completion_tokens,
                "total": self.usage.total_tokens,
            },
            "latency_ms": self.latency_ms,
            "success": self.success,
            "error": self.error,
            "status_code": self.status_code,
            "created_at": self.created_at.isoformat(),
        }


class ProviderMixin:
    """
    Helpers shared by the OpenRouter clients.

    Subclasses set ``provider_type`` and call ``_create_error_response``
    instead of raising.
    """

    provider_type: ProviderType

    def _measure_latency(self, start_time: float) -> float:
        """Calculate latency in milliseconds."""
        return (time.time() - start_time) * 1000

    def _create_error_response(
        self,
        error: str,
        model: str,
        latency_ms: float = 0.0,
        status_code: Optional[int] = None,
    ) -> AIResponse:
        """Create a standardized error response."""
        logger.error(f"AI Provider Error [{self.provider_type.value}]: {error}")
        return AIResponse(
            content="",
            provider=self.provider_type,
            model=model,
            latency_ms=latency_ms,
            success=False,
            error=error,
            status_code=status_code,
        )
