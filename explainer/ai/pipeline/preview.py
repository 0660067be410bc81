"""
Quick preview answer - a few plain sentences shown while the canvas renders.
"""

import logging
import uuid
from typing import Optional

from explainer.core.config import settings
from explainer.ai.monitoring import AIMonitor, ai_monitor
from explainer.ai.prompts import PREVIEW_MAX_TOKENS, PREVIEW_PROMPT, PREVIEW_TEMPERATURE
from explainer.ai.providers import CompletionClient

from .errors import InvalidRequestError, UpstreamError
from .tasks import StageTask

logger = logging.getLogger("explainer.ai.pipeline.preview")

PREVIEW_TIMEOUT_SECONDS = 30.0


class PreviewService:
    """
    Answers a question in 2-3 sentences with the fast model.

    Usage:
        text = await preview_service.answer("Why is the sky blue?")
    """

    def __init__(
        self,
        completion: Optional[CompletionClient] = None,
        monitor: Optional[AIMonitor] = None,
        model: Optional[str] = None,
        timeout_s: float = PREVIEW_TIMEOUT_SECONDS,
    ):
        if completion is None:
            from explainer.ai.providers import completion_client as completion

        self._completion = completion
        self._monitor = monitor or ai_monitor
        self._model = model or settings.OPENROUTER_FAST_MODEL or None
        self._timeout_s = timeout_s

    async def answer(self, question: str) -> str:
        if not isinstance(question, str) or not question.strip():
            raise InvalidRequestError("Question is required")
        if len(question) > settings.MAX_QUESTION_LENGTH:
            raise InvalidRequestError(
                f"Question must be {settings.MAX_QUESTION_LENGTH} characters or fewer"
            )

        request_id = uuid.uuid4().hex[:12]
        task = StageTask(
            "preview",
            self._complete(request_id, question),
            timeout_s=self._timeout_s,
            on_timeout=lambda t: self._monitor.track_timeout(request_id, t.name, t.timeout_s),
        )
        text = await task
        logger.info(f"[{request_id}] Preview done, length: {len(text)}")
        return text

    async def _complete(self, request_id: str, question: str) -> str:
        self._monitor.track_request(request_id, "preview", question)

        response = await self._completion.complete(
            system_prompt=PREVIEW_PROMPT,
            user_message=question,
            temperature=PREVIEW_TEMPERATURE,
            max_tokens=PREVIEW_MAX_TOKENS,
            model_override=self._model,
        )
        self._monitor.track_response(request_id, "preview", response)

        if not response.success:
            raise UpstreamError(response.error or "Preview failed", stage="preview", status_code=response.status_code)
        return response.content.strip()


_preview_instance: Optional[PreviewService] = None


def get_preview_service() -> PreviewService:
    """Get or create the singleton preview service."""
    global _preview_instance
    if _preview_instance is None:
        _preview_instance = PreviewService()
    return _preview_instance
