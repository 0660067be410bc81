"""
Explain Router - canvas generation and the quick preview answer.

    POST /api/explain   question -> {html, preset}
    POST /api/preview   question -> {text}

Business logic lives in the pipeline; this file only translates HTTP
to pipeline calls and pipeline errors to status codes.
"""

import logging

from fastapi import APIRouter, Depends

from explainer.ai.pipeline import ExplainPipeline, PreviewService, get_pipeline, get_preview_service
from explainer.routers.errors import to_http_exception
from explainer.schemas.explain import ExplainRequest, ExplainResponse, PreviewRequest, PreviewResponse


# ---------------------------------------------------------------------------
# LOGGER SETUP
# ---------------------------------------------------------------------------
logger = logging.getLogger("explainer.routers.explain")


# ---------------------------------------------------------------------------
# ROUTER SETUP
# ---------------------------------------------------------------------------
router = APIRouter(prefix="/api", tags=["explain"])


# ---------------------------------------------------------------------------
# ENDPOINTS
# ---------------------------------------------------------------------------

@router.post("/explain", response_model=ExplainResponse)
async def explain(
    request: ExplainRequest,
    pipeline: ExplainPipeline = Depends(get_pipeline),
):
    """
    Generate a styled HTML canvas that explains the question.

    **Detail levels:**
    - short: one render call, no plan, no images
    - balanced: plan, then render + up to 2 images in parallel
    - detailed: same as balanced with larger budgets
    """
    try:
        result = await pipeline.run(
            question=request.question,
            detail_level=request.detail_level,
            custom_style=request.custom_style.to_domain() if request.custom_style else None,
        )
    except Exception as e:
        raise to_http_exception(e, "Explain") from e

    return ExplainResponse(html=result.html, preset=result.preset_name)


@router.post("/preview", response_model=PreviewResponse)
async def preview(
    request: PreviewRequest,
    service: PreviewService = Depends(get_preview_service),
):
    """Answer the question in 2-3 plain sentences while the canvas renders."""
    try:
        text = await service.answer(request.question)
    except Exception as e:
        raise to_http_exception(e, "Preview") from e

    return PreviewResponse(text=text)
