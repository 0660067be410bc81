"""
AI Monitor - Unified logging and metrics tracking.

One call tracks everything for a remote generation call:
- Structured JSON logs
- In-memory metrics aggregation

Usage:
    from explainer.ai.monitoring import ai_monitor

    ai_monitor.track_response(request_id="abc123", stage="render", response=response)
    stats = ai_monitor.get_stats()
"""

import json
import logging
import sys
from dataclasses import dataclass, field
from datetime import datetime, timezone
from threading import Lock
from typing import Dict, List, Optional, Any

from explainer.ai.providers.base import AIResponse


# ---------------------------------------------------------------------------
# LOGGING SETUP
# ---------------------------------------------------------------------------
# The package root logger; every module logs under "explainer.*".
logger = logging.getLogger("explainer")
logger.setLevel(logging.INFO)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)
    formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s [%(name)s] %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


# ---------------------------------------------------------------------------
# METRICS DATA CLASSES
# ---------------------------------------------------------------------------
@dataclass
class RequestMetrics:
    """Metrics for a single remote call."""
    request_id: str
    stage: str
    provider: str
    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    latency_ms: float
    success: bool
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class AggregatedMetrics:
    """Aggregated metrics since process start (or last reset)."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    timed_out_requests: int = 0
    total_tokens: int = 0
    total_latency_ms: float = 0.0
    requests_by_stage: Dict[str, int] = field(default_factory=dict)
    failures_by_stage: Dict[str, int] = field(default_factory=dict)

    @property
    def avg_latency_ms(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return self.total_latency_ms / self.total_requests

    @property
    def success_rate(self) -> float:
        if self.total_requests == 0:
            return 0.0
        return (self.successful_requests / self.total_requests) * 100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "timed_out_requests": self.timed_out_requests,
            "success_rate": f"{self.success_rate:.1f}%",
            "total_tokens": self.total_tokens,
            "avg_latency_ms": round(self.avg_latency_ms, 2),
            "requests_by_stage": dict(self.requests_by_stage),
            "failures_by_stage": dict(self.failures_by_stage),
        }


# ---------------------------------------------------------------------------
# UNIFIED AI MONITOR
# ---------------------------------------------------------------------------
class AIMonitor:
    """
    Unified AI monitoring: logging + metrics in one call.

    Each track_* method writes a structured JSON log line and, for
    responses and timeouts, updates the in-memory aggregate.
    """

    def __init__(self, max_history: int = 1000):
        self._logger = logging.getLogger("explainer.ai.monitor")
        self._history: List[RequestMetrics] = []
        self._max_history = max_history
        self._lock = Lock()
        self._aggregated = AggregatedMetrics()

    # -----------------------------------------------------------------------
    # MAIN TRACKING METHODS
    # -----------------------------------------------------------------------

    def track_request(
        self,
        request_id: str,
        stage: str,
        prompt: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Track the start of a remote call."""
        log_data = {
            "event": "ai_request",
            "request_id": request_id,
            "stage": stage,
            "prompt_length": len(prompt),
            "prompt_preview": prompt[:100] + "..." if len(prompt) > 100 else prompt,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if metadata:
            log_data["metadata"] = metadata

        self._logger.info(f"AI Request: {json.dumps(log_data)}")

    def track_response(
        self,
        request_id: str,
        stage: str,
        response: AIResponse,
    ) -> None:
        """Track a provider response (logs + metrics in one call)."""
        provider = response.provider.value if hasattr(response.provider, "value") else str(response.provider)
        usage = response.usage

        metrics = RequestMetrics(
            request_id=request_id,
            stage=stage,
            provider=provider,
            model=response.model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
            total_tokens=usage.total_tokens if usage else 0,
            latency_ms=response.latency_ms,
            success=response.success,
        )

        with self._lock:
            self._history.append(metrics)
            if len(self._history) > self._max_history:
                self._history = self._history[-self._max_history:]
            self._update_aggregated(metrics)

        log_data = {
            "event": "ai_response",
            "request_id": request_id,
            "stage": stage,
            "provider": provider,
            "model": response.model,
            "success": response.success,
            "latency_ms": round(response.latency_ms, 2),
            "tokens": metrics.total_tokens,
            "response_length": len(response.content) if response.content else 0,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if response.error:
            log_data["error"] = response.error[:300]

        level = logging.INFO if response.success else logging.WARNING
        self._logger.log(level, f"AI Response: {json.dumps(log_data)}")

    def track_timeout(self, request_id: str, stage: str, timeout_s: float) -> None:
        """Track a call abandoned because its timer fired."""
        with self._lock:
            self._aggregated.total_requests += 1
            self._aggregated.failed_requests += 1
            self._aggregated.timed_out_requests += 1
            self._bump(self._aggregated.requests_by_stage, stage)
            self._bump(self._aggregated.failures_by_stage, stage)

        log_data = {
            "event": "ai_timeout",
            "request_id": request_id,
            "stage": stage,
            "timeout_s": timeout_s,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        self._logger.warning(f"AI Timeout: {json.dumps(log_data)}")

    def track_event(
        self,
        request_id: str,
        event_type: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Track a generic pipeline event."""
        log_data = {
            "event": event_type,
            "request_id": request_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if data:
            log_data.update(data)

        self._logger.info(f"AI Event: {json.dumps(log_data)}")

    # -----------------------------------------------------------------------
    # METRICS METHODS
    # -----------------------------------------------------------------------

    def get_stats(self) -> AggregatedMetrics:
        """Get current aggregated statistics."""
        with self._lock:
            return self._aggregated

    def get_recent_requests(self, limit: int = 10) -> List[RequestMetrics]:
        """Get recent requests, newest first."""
        with self._lock:
            return list(reversed(self._history[-limit:]))

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._history = []
            self._aggregated = AggregatedMetrics()

    # -----------------------------------------------------------------------
    # PRIVATE METHODS
    # -----------------------------------------------------------------------

    @staticmethod
    def _bump(counter: Dict[str, int], key: str) -> None:
        counter[key] = counter.get(key, 0) + 1

    def _update_aggregated(self, metrics: RequestMetrics) -> None:
        """Update aggregated metrics with a new request."""
        self._aggregated.total_requests += 1

        if metrics.success:
            self._aggregated.successful_requests += 1
        else:
            self._aggregated.failed_requests += 1
            self._bump(self._aggregated.failures_by_stage, metrics.stage)

        self._aggregated.total_tokens += metrics.total_tokens
        self._aggregated.total_latency_ms += metrics.latency_ms
        self._bump(self._aggregated.requests_by_stage, metrics.stage)


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------
ai_monitor = AIMonitor()
