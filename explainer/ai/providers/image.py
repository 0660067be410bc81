"""
OpenRouter Image Client - one prompt in, one image (data URL) out.

Uses the same chat completions endpoint as the text client, with the
image output modality requested. OpenRouter answers with the images in
``choices[0].message.images[*].image_url.url``, usually as
``data:image/png;base64,...``.
"""

import time
import logging
from typing import Any, Dict, Optional

from openai import AsyncOpenAI, APIStatusError

from explainer.core.config import settings
from explainer.ai.providers.base import (
    AIResponse,
    ProviderMixin,
    ProviderType,
)
from explainer.ai.providers.openrouter import _response_text

logger = logging.getLogger("explainer.ai.image")


class ImageClient(ProviderMixin):
    """
    OpenRouter image generation client.

    Usage:
        client = ImageClient()
        response = await client.generate("A cross-section of a volcano", image_id="img-1")
        if response.success:
            data_url = response.content
    """

    provider_type = ProviderType.OPENROUTER_IMAGE

    def __init__(
        self,
        model: str = None,
        api_key: str = None,
        base_url: str = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        self.model = model or settings.OPENROUTER_IMAGE_MODEL
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
        else:
            self._client = None
            logger.warning("OPENROUTER_API_KEY not configured - image client unavailable")

    async def generate(self, prompt: str, image_id: str) -> AIResponse:
        """
        Generate a single image.

        Args:
            prompt: Free-text image description
            image_id: Placeholder key (e.g. "img-1"), echoed in metadata

        Returns:
            AIResponse whose content is the image data URL
        """
        start_time = time.time()
        model = self.model

        if not self._client:
            return self._create_error_response(
                error="OPENROUTER_API_KEY environment variable is not set",
                model=model or "",
            )
        if not model:
            return self._create_error_response(
                error="OPENROUTER_IMAGE_MODEL environment variable is not set",
                model="",
            )

        try:
            response = await self._client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}],
                extra_body={"modalities": ["image"]},
            )
        except APIStatusError as e:
            return self._create_error_response(
                error=f"Image generation API error ({e.status_code}): {_response_text(e)}",
                model=model,
                latency_ms=self._measure_latency(start_time),
                status_code=e.status_code,
            )
        except Exception as e:
            return self._create_error_response(
                error=f"Image generation request failed: {e}",
                model=model,
                latency_ms=self._measure_latency(start_time),
            )

        latency_ms = self._measure_latency(start_time)
        payload = response.model_dump() if hasattr(response, "model_dump") else response

        images = _first_message(payload).get("images")
        if not images or not isinstance(images, list):
            return self._create_error_response(
                error="Image generation returned no images",
                model=model,
                latency_ms=latency_ms,
            )

        first = images[0] if isinstance(images[0], dict) else {}
        image_url = first.get("image_url")
        data_url = image_url.get("url") if isinstance(image_url, dict) else None
        if not data_url or not isinstance(data_url, str):
            return self._create_error_response(
                error="Image generation returned malformed image data",
                model=model,
                latency_ms=latency_ms,
            )

        logger.info(f"Image {image_id} generated in {latency_ms:.0f}ms ({len(data_url)} chars)")

        return AIResponse(
            content=data_url,
            provider=self.provider_type,
            model=model,
            latency_ms=latency_ms,
            success=True,
            metadata={"image_id": image_id},
        )


def _first_message(payload: Any) -> Dict[str, Any]:
    """choices[0].message of a dumped response, or {}."""
    if not isinstance(payload, dict):
        return {}
    choices = payload.get("choices") or []
    if not choices or not isinstance(choices[0], dict):
        return {}
    return choices[0].get("message") or {}


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
image_client = ImageClient()
