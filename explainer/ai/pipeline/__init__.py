"""
Pipeline Module - turns a question into a styled HTML canvas.

Flow (balanced / detailed):
    question -> planner -> plan -> [renderer || image x2] -> merge -> html

Flow (short):
    question -> short renderer -> html

Usage:
    from explainer.ai.pipeline import get_pipeline, DetailLevel

    result = await get_pipeline().run("How do tides work?", DetailLevel.SHORT)
"""

from explainer.ai.detail_levels import DetailLevel
from explainer.ai.pipeline.contracts import ExplainResult, ImageGenResult, ImagePrompt
from explainer.ai.pipeline.errors import (
    InvalidRequestError,
    PipelineError,
    StageTimeoutError,
    UpstreamError,
)
from explainer.ai.pipeline.orchestrator import ExplainPipeline, get_pipeline
from explainer.ai.pipeline.postprocess import inject_images, parse_image_prompts, strip_code_fences
from explainer.ai.pipeline.preview import PreviewService, get_preview_service
from explainer.ai.pipeline.tasks import StageTask, join_critical, settle_all

__all__ = [
    "DetailLevel",
    "ExplainResult",
    "ImageGenResult",
    "ImagePrompt",
    "InvalidRequestError",
    "PipelineError",
    "StageTimeoutError",
    "UpstreamError",
    "ExplainPipeline",
    "get_pipeline",
    "inject_images",
    "parse_image_prompts",
    "strip_code_fences",
    "PreviewService",
    "get_preview_service",
    "StageTask",
    "join_critical",
    "settle_all",
]
