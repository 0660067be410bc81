"""
OpenRouter Completion Client - text generation for every pipeline role.

One POST per call to OpenRouter's OpenAI-compatible chat completions
endpoint, always with a two-message array:

    [{"role": "system", "content": <role prompt>},
     {"role": "user",   "content": <question or content plan>}]

Roles that use it:
=================
- Planner  (fast model)  -> structured content plan
- Renderer (main model)  -> complete HTML document
- Preview  (fast model)  -> 2-3 sentence plain answer

API Documentation: https://openrouter.ai/docs/api-reference/chat-completion
"""

import time
import logging
from typing import Optional

from openai import AsyncOpenAI, APIStatusError

from explainer.core.config import settings
from explainer.ai.providers.base import (
    AIResponse,
    ProviderMixin,
    ProviderType,
    ReasoningEffort,
    TokenUsage,
)

logger = logging.getLogger("explainer.ai.openrouter")


class CompletionClient(ProviderMixin):
    """
    OpenRouter text completion client.

    Usage:
        client = CompletionClient()
        response = await client.complete(
            system_prompt=build_planner_prompt(DetailLevel.BALANCED),
            user_message="Why is the sky blue?",
            temperature=0.5,
            max_tokens=4000,
            reasoning_effort=ReasoningEffort.MEDIUM,
        )
    """

    provider_type = ProviderType.OPENROUTER

    def __init__(
        self,
        model: str = None,
        api_key: str = None,
        base_url: str = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize the completion client.

        Args:
            model: Default model (default: settings.OPENROUTER_MODEL)
            api_key: API key (default: settings.OPENROUTER_API_KEY)
            base_url: Endpoint root (default: settings.OPENROUTER_BASE_URL)
            client: Pre-built AsyncOpenAI client (tests)
        """
        self.model = model or settings.OPENROUTER_MODEL
        self.api_key = api_key or settings.OPENROUTER_API_KEY

        if client is not None:
            self._client = client
        elif self.api_key:
            self._client = AsyncOpenAI(
                api_key=self.api_key,
                base_url=base_url or settings.OPENROUTER_BASE_URL,
                timeout=settings.AI_REQUEST_TIMEOUT,
                max_retries=0,
            )
            logger.info(f"OpenRouter client initialized with model: {self.model or '<unset>'}")
        else:
            self._client = None
            logger.warning("OPENROUTER_API_KEY not configured - completion client unavailable")

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        temperature: float = 0.6,
        max_tokens: int = 24576,
        reasoning_effort: Optional[ReasoningEffort] = None,
        model_override: Optional[str] = None,
    ) -> AIResponse:
        """
        Generate a completion.

        Args:
            system_prompt: Role instructions
            user_message: Question text or content plan
            temperature: Sampling temperature
            max_tokens: Output token budget
            reasoning_effort: Optional reasoning hint, forwarded as
                ``{"reasoning": {"effort": ...}}``
            model_override: Use this model instead of the default

        Returns:
            AIResponse with the generated text. On failure ``success`` is
            False and ``error`` embeds the HTTP status and response body.
        """
        start_time = time.time()
        model = model_override or self.model

        if not self._client:
            return self._create_error_response(
                error="OPENROUTER_API_KEY environment variable is not set",
                model=model or "",
                latency_ms=self._measure_latency(start_time),
            )
        if not model:
            return self._create_error_response(
                error="OPENROUTER_MODEL environment variable is not set",
                model="",
                latency_ms=self._measure_latency(start_time),
            )

        extra_body = {}
        if reasoning_effort is not None:
            extra_body["reasoning"] = {"effort": ReasoningEffort(reasoning_effort).value}

        try:
            response = await self._client.chat.completions.create(
                model=model,
                temperature=temperature,
                max_tokens=max_tokens,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_message},
                ],
                extra_body=extra_body or None,
            )
        except APIStatusError as e:
            body = _response_text(e)
            return self._create_error_response(
                error=f"OpenRouter API error ({e.status_code}): {body}",
                model=model,
                latency_ms=self._measure_latency(start_time),
                status_code=e.status_code,
            )
        except Exception as e:
            logger.error(f"OpenRouter request failed: {e}")
            return self._create_error_response(
                error=f"OpenRouter request failed: {e}",
                model=model,
                latency_ms=self._measure_latency(start_time),
            )

        latency_ms = self._measure_latency(start_time)

        choices = getattr(response, "choices", None) or []
        content = choices[0].message.content if choices and choices[0].message else None
        if not content or not isinstance(content, str):
            return self._create_error_response(
                error="OpenRouter returned an empty or malformed response",
                model=model,
                latency_ms=latency_ms,
            )

        usage = TokenUsage(
            prompt_tokens=response.usage.prompt_tokens if response.usage else 0,
            completion_tokens=response.usage.completion_tokens if response.usage else 0,
        )

        logger.info(f"OpenRouter request completed in {latency_ms:.0f}ms, tokens: {usage.total_tokens}")

        return AIResponse(
            content=content,
            provider=self.provider_type,
            model=model,
            usage=usage,
            latency_ms=latency_ms,
            success=True,
            raw_response=response,
        )


def _response_text(error: APIStatusError) -> str:
    """Body of a failed response, or a fixed sentinel when unreadable."""
    try:
        text = error.response.text
    except Exception:
        return "unknown error"
    return text or "unknown error"


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
completion_client = CompletionClient()
