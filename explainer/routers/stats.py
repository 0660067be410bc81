"""
Stats Router - AI usage statistics since process start.
"""

from typing import Any, Dict, List

from fastapi import APIRouter
from pydantic import BaseModel

from explainer.ai.monitoring import ai_monitor

router = APIRouter(prefix="/api", tags=["stats"])


class AIStatsResponse(BaseModel):
    """Response schema for /api/stats."""
    total_requests: int
    successful_requests: int
    failed_requests: int
    timed_out_requests: int
    success_rate: str
    total_tokens: int
    avg_latency_ms: float
    requests_by_stage: Dict[str, int]
    failures_by_stage: Dict[str, int]
    recent: List[Dict[str, Any]] = []


@router.get("/stats", response_model=AIStatsResponse)
async def get_ai_stats(limit: int = 10):
    """
    Aggregated metrics for every planner, renderer, image and preview
    call, plus the most recent calls (newest first).
    """
    stats = ai_monitor.get_stats()
    recent = [
        {
            "request_id": m.request_id,
            "stage": m.stage,
            "model": m.model,
            "success": m.success,
            "latency_ms": round(m.latency_ms, 2),
            "total_tokens": m.total_tokens,
            "timestamp": m.timestamp.isoformat(),
        }
        for m in ai_monitor.get_recent_requests(limit=max(1, min(limit, 100)))
    ]
    return AIStatsResponse(**stats.to_dict(), recent=recent)
