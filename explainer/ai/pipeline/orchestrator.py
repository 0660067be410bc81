"""
ExplainPipeline - question in, styled HTML canvas out.

Two shapes, chosen by the detail level:

Short (skip_planning):
    question ──► short renderer ──► strip fences ──► html

Full:
    question ──► planner ──► plan
                              │
                 ┌────────────┴─────────────┐
                 ▼                          ▼
       renderer(plan)              image(img-1), image(img-2)
       critical, fail-fast         optional, all-settle, 30s each
                 │                          │
                 └────────────┬─────────────┘
                              ▼
              strip fences ──► inject successful images ──► html

No state survives across runs; the pipeline object only holds its
collaborators and can serve concurrent requests.
"""

import logging
import time
import uuid
from typing import List, Optional

from explainer.core.config import settings
from explainer.ai.detail_levels import (
    PLAN_TEMPERATURE,
    RENDER_TEMPERATURE,
    DetailLevel,
    DetailLevelConfig,
    get_detail_config,
)
from explainer.ai.monitoring import AIMonitor, ai_monitor
from explainer.ai.prompts import (
    build_planner_prompt,
    build_renderer_prompt,
    build_short_renderer_prompt,
)
from explainer.ai.providers import CompletionClient, ImageClient, ReasoningEffort
from explainer.ai.styles import CustomStyle, StylePreset, StyleResolver, style_resolver
from explainer.ai.styles.resolver import HEX_COLOR_PATTERN
from explainer.ai.styles.catalog import ColorMode

from .contracts import ExplainResult, ImageGenResult, ImagePrompt
from .errors import InvalidRequestError, UpstreamError
from .postprocess import inject_images, parse_image_prompts, strip_code_fences
from .tasks import StageTask, join_critical

logger = logging.getLogger("explainer.ai.pipeline")


class ExplainPipeline:
    """
    Orchestrates planner, renderer and image stages for one question.

    Usage:
        pipeline = ExplainPipeline()
        result = await pipeline.run(
            question="How do vaccines work?",
            detail_level=DetailLevel.BALANCED,
        )
        print(result.preset_name, len(result.html))

    Raises:
        InvalidRequestError: bad question or custom style (no remote call made)
        StageTimeoutError: planner or renderer exceeded its budget
        UpstreamError: planner or renderer failed
    """

    def __init__(
        self,
        completion: Optional[CompletionClient] = None,
        images: Optional[ImageClient] = None,
        styles: Optional[StyleResolver] = None,
        monitor: Optional[AIMonitor] = None,
        plan_model: Optional[str] = None,
        render_model: Optional[str] = None,
        image_timeout_s: Optional[float] = None,
        max_images: Optional[int] = None,
    ):
        """
        Initialize the pipeline.

        Args:
            completion: Text client (default: shared singleton)
            images: Image client (default: shared singleton)
            styles: Style resolver (default: built-in catalog)
            monitor: Metrics/log sink (default: shared singleton)
            plan_model: Model for the planner (default: OPENROUTER_FAST_MODEL)
            render_model: Model for the renderer (default: OPENROUTER_MODEL)
            image_timeout_s: Per-image budget (default: IMAGE_TIMEOUT_SECONDS)
            max_images: Image prompt cap (default: MAX_IMAGES)
        """
        if completion is None:
            from explainer.ai.providers import completion_client as completion
        if images is None:
            from explainer.ai.providers import image_client as images

        self._completion = completion
        self._images = images
        self._styles = styles or style_resolver
        self._monitor = monitor or ai_monitor
        self._plan_model = plan_model or settings.OPENROUTER_FAST_MODEL or None
        self._render_model = render_model or settings.OPENROUTER_MODEL or None
        self._image_timeout_s = image_timeout_s or settings.IMAGE_TIMEOUT_SECONDS
        self._max_images = max_images if max_images is not None else settings.MAX_IMAGES

    # -----------------------------------------------------------------------
    # PUBLIC API
    # -----------------------------------------------------------------------

    async def run(
        self,
        question: str,
        detail_level: DetailLevel = DetailLevel.BALANCED,
        style: Optional[StylePreset] = None,
        custom_style: Optional[CustomStyle] = None,
    ) -> ExplainResult:
        """
        Execute the pipeline for one question.

        Args:
            question: Free-text question (1..MAX_QUESTION_LENGTH chars)
            detail_level: short | balanced | detailed
            style: Explicit preset (wins over custom_style)
            custom_style: Accent/mode/font choice to derive a preset from

        Returns:
            ExplainResult with the final HTML and the resolved preset name
        """
        start_time = time.time()
        request_id = uuid.uuid4().hex[:12]

        question = self._validate_question(question)
        config = get_detail_config(detail_level)
        preset = self._resolve_style(style, custom_style)

        logger.info(
            f"[{request_id}] Pipeline started: level={DetailLevel(detail_level).value} "
            f"preset={preset.name} question={question[:50]!r}"
        )

        if config.skip_planning:
            html = await self._run_short(request_id, question, config, preset)
        else:
            html = await self._run_full(request_id, question, detail_level, config, preset)

        result = ExplainResult(html=html, preset_name=preset.name)
        logger.info(f"[{request_id}] {result.describe()} in {(time.time() - start_time) * 1000:.0f}ms")
        return result

    # -----------------------------------------------------------------------
    # PIPELINE SHAPES
    # -----------------------------------------------------------------------

    async def _run_short(
        self,
        request_id: str,
        question: str,
        config: DetailLevelConfig,
        preset: StylePreset,
    ) -> str:
        """Short mode: one render call straight from the question."""
        render = self._start_completion(
            request_id,
            stage="render_short",
            system_prompt=build_short_renderer_prompt(preset),
            user_message=question,
            temperature=RENDER_TEMPERATURE,
            max_tokens=config.render_max_tokens,
            reasoning=config.render_reasoning,
            model=self._render_model,
            timeout_s=config.render_timeout_s,
        )
        return strip_code_fences(await render)

    async def _run_full(
        self,
        request_id: str,
        question: str,
        detail_level: DetailLevel,
        config: DetailLevelConfig,
        preset: StylePreset,
    ) -> str:
        """Full mode: plan, then render + images concurrently, then merge."""
        # ===== STAGE 1: Plan =====
        plan = await self._start_completion(
            request_id,
            stage="plan",
            system_prompt=build_planner_prompt(detail_level),
            user_message=question,
            temperature=PLAN_TEMPERATURE,
            max_tokens=config.plan_max_tokens,
            reasoning=config.plan_reasoning,
            model=self._plan_model,
            timeout_s=config.plan_timeout_s,
        )
        logger.info(f"[{request_id}] Plan done, length: {len(plan)}")

        image_prompts: List[ImagePrompt] = (
            [] if config.skip_images else parse_image_prompts(plan, limit=self._max_images)
        )
        logger.info(f"[{request_id}] Image prompts found: {len(image_prompts)}")

        # ===== STAGE 2: Render + images, in parallel =====
        render = self._start_completion(
            request_id,
            stage="render",
            system_prompt=build_renderer_prompt(preset),
            user_message=plan,
            temperature=RENDER_TEMPERATURE,
            max_tokens=config.render_max_tokens,
            reasoning=config.render_reasoning,
            model=self._render_model,
            timeout_s=config.render_timeout_s,
        )
        image_tasks = [self._start_image(request_id, prompt) for prompt in image_prompts]

        raw_html, image_results = await join_critical(render, image_tasks)

        # ===== STAGE 3: Merge =====
        html = strip_code_fences(raw_html)
        successful: List[ImageGenResult] = [r for r in image_results if r is not None]
        if successful:
            html = inject_images(html, successful)

        self._monitor.track_event(request_id, "pipeline_merged", {
            "html_length": len(html),
            "svg_count": html.lower().count("<svg"),
            "images_requested": len(image_prompts),
            "images_injected": len(successful),
        })
        return html

    # -----------------------------------------------------------------------
    # STAGE HELPERS
    # -----------------------------------------------------------------------

    def _start_completion(
        self,
        request_id: str,
        stage: str,
        system_prompt: str,
        user_message: str,
        temperature: float,
        max_tokens: int,
        reasoning: ReasoningEffort,
        model: Optional[str],
        timeout_s: float,
    ) -> StageTask:
        """Start a completion call as its own timed task."""
        return StageTask(
            stage,
            self._complete(
                request_id, stage, system_prompt, user_message,
                temperature, max_tokens, reasoning, model,
            ),
            timeout_s=timeout_s,
            on_timeout=lambda t: self._monitor.track_timeout(request_id, t.name, t.timeout_s),
        )

    async def _complete(
        self,
        request_id: str,
        stage: str,
        system_prompt: str,
        user_message: str,
        temperature: float,
        max_tokens: int,
        reasoning: ReasoningEffort,
        model: Optional[str],
    ) -> str:
        self._monitor.track_request(request_id, stage, user_message)

        response = await self._completion.complete(
            system_prompt=system_prompt,
            user_message=user_message,
            temperature=temperature,
            max_tokens=max_tokens,
            reasoning_effort=None if reasoning == ReasoningEffort.NONE else reasoning,
            model_override=model,
        )
        self._monitor.track_response(request_id, stage, response)

        if not response.success:
            raise UpstreamError(response.error or "Completion failed", stage=stage, status_code=response.status_code)
        return response.content

    def _start_image(self, request_id: str, prompt: ImagePrompt) -> StageTask:
        """Start one image generation as its own timed task."""
        stage = f"image:{prompt.id}"
        return StageTask(
            stage,
            self._generate_image(request_id, stage, prompt),
            timeout_s=self._image_timeout_s,
            on_timeout=lambda t: self._monitor.track_timeout(request_id, t.name, t.timeout_s),
        )

    async def _generate_image(self, request_id: str, stage: str, prompt: ImagePrompt) -> ImageGenResult:
        self._monitor.track_request(request_id, stage, prompt.prompt)

        response = await self._images.generate(prompt.prompt, image_id=prompt.id)
        self._monitor.track_response(request_id, stage, response)

        if not response.success:
            raise UpstreamError(response.error or "Image generation failed", stage=stage, status_code=response.status_code)
        return ImageGenResult(id=prompt.id, data_url=response.content)

    # -----------------------------------------------------------------------
    # VALIDATION
    # -----------------------------------------------------------------------

    def _validate_question(self, question: str) -> str:
        if not isinstance(question, str) or not question.strip():
            raise InvalidRequestError("Question is required")
        if len(question) > settings.MAX_QUESTION_LENGTH:
            raise InvalidRequestError(
                f"Question must be {settings.MAX_QUESTION_LENGTH} characters or fewer"
            )
        return question

    def _resolve_style(
        self,
        style: Optional[StylePreset],
        custom_style: Optional[CustomStyle],
    ) -> StylePreset:
        if style is not None:
            return style
        if custom_style is None:
            return self._styles.get_random_preset()

        if not HEX_COLOR_PATTERN.match(custom_style.accent_color or ""):
            raise InvalidRequestError("Custom accent color must be a 6-digit hex value like #06B6D4")
        try:
            ColorMode(custom_style.mode)
        except ValueError:
            raise InvalidRequestError("Custom style mode must be 'light' or 'dark'")
        return self._styles.build_custom_preset(custom_style)

    def __repr__(self) -> str:
        return f"ExplainPipeline(max_images={self._max_images}, image_timeout_s={self._image_timeout_s})"


# Singleton for easy import
_pipeline_instance: Optional[ExplainPipeline] = None


def get_pipeline() -> ExplainPipeline:
    """Get or create the singleton pipeline instance."""
    global _pipeline_instance
    if _pipeline_instance is None:
        _pipeline_instance = ExplainPipeline()
    return _pipeline_instance
