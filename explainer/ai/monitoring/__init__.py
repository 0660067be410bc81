"""
Monitoring Module - logging and metrics for remote generation calls.

Usage:
    from explainer.ai.monitoring import ai_monitor

    ai_monitor.track_request(request_id, "plan", prompt)
    ai_monitor.track_response(request_id, "plan", response)
    stats = ai_monitor.get_stats()
"""

from explainer.ai.monitoring.monitor import AIMonitor, AggregatedMetrics, ai_monitor

__all__ = [
    "AIMonitor",
    "AggregatedMetrics",
    "ai_monitor",
]
