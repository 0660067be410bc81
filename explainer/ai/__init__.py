"""
AI Module - everything that talks to a model.

Architecture Overview:
=====================

┌──────────────────────────────────────────────────────────────┐
│                    ExplainPipeline                            │
│                                                               │
│   short:     question ──► short renderer ──► html             │
│   balanced/  question ──► planner ──► plan                    │
│   detailed:                    │                              │
│                    ┌───────────┴───────────┐                  │
│                    ▼                       ▼                  │
│             renderer(plan)         image(img-1..2)            │
│             [critical]             [optional]                 │
│                    └───────────┬───────────┘                  │
│                                ▼                              │
│                         merge ──► html                        │
└──────────────────────────────────────────────────────────────┘

Module Structure:
================
- providers/: OpenRouter completion and image clients
- prompts/: Planner, renderer, short renderer and preview instructions
- styles/: Preset catalog and custom style derivation
- pipeline/: Orchestration, stage tasks, output post-processing
- monitoring/: Logging, metrics, and usage tracking
- detail_levels.py: Token/time budgets per detail level
"""

__version__ = "0.1.0"

from explainer.ai.detail_levels import DetailLevel, get_detail_config
from explainer.ai.pipeline import ExplainPipeline, ExplainResult, get_pipeline

__all__ = [
    "DetailLevel",
    "get_detail_config",
    "ExplainPipeline",
    "ExplainResult",
    "get_pipeline",
]
