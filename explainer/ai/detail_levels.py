"""
Detail levels - the closed set of pipeline configurations.

A detail level fully determines which stages run and with what budgets:

    short     question -> short renderer                 (one call)
    balanced  question -> planner -> renderer + images   (two stages)
    detailed  same shape as balanced, larger budgets

This is a static lookup table, not a runtime entity.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from explainer.ai.providers.base import ReasoningEffort


class DetailLevel(str, Enum):
    SHORT = "short"
    BALANCED = "balanced"
    DETAILED = "detailed"


@dataclass(frozen=True)
class DetailLevelConfig:
    """Per-level budgets. Timeouts are in seconds."""
    plan_max_tokens: int
    plan_timeout_s: float
    plan_reasoning: ReasoningEffort
    render_max_tokens: int
    render_timeout_s: float
    render_reasoning: ReasoningEffort
    skip_planning: bool
    skip_images: bool


DETAIL_LEVELS: Dict[DetailLevel, DetailLevelConfig] = {
    DetailLevel.SHORT: DetailLevelConfig(
        plan_max_tokens=0,
        plan_timeout_s=0,
        plan_reasoning=ReasoningEffort.NONE,
        render_max_tokens=12000,
        render_timeout_s=30,
        render_reasoning=ReasoningEffort.NONE,
        skip_planning=True,
        skip_images=True,
    ),
    DetailLevel.BALANCED: DetailLevelConfig(
        plan_max_tokens=4000,
        plan_timeout_s=30,
        plan_reasoning=ReasoningEffort.MEDIUM,
        render_max_tokens=24576,
        render_timeout_s=45,
        render_reasoning=ReasoningEffort.MEDIUM,
        skip_planning=False,
        skip_images=False,
    ),
    DetailLevel.DETAILED: DetailLevelConfig(
        plan_max_tokens=6000,
        plan_timeout_s=45,
        plan_reasoning=ReasoningEffort.HIGH,
        render_max_tokens=32000,
        render_timeout_s=60,
        render_reasoning=ReasoningEffort.HIGH,
        skip_planning=False,
        skip_images=False,
    ),
}

# Sampling temperatures per role
PLAN_TEMPERATURE = 0.5
RENDER_TEMPERATURE = 0.2


def get_detail_config(level: DetailLevel) -> DetailLevelConfig:
    return DETAIL_LEVELS[DetailLevel(level)]
