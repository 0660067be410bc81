"""
Configuration module - centralized settings for the entire application.
Uses pydantic-settings to load values from environment variables and .env file.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Pydantic-settings automatically:
    1. Reads from environment variables (highest priority)
    2. Falls back to .env file values
    3. Uses default values if neither exists

    To override locally, set environment variables:
        export OPENROUTER_API_KEY=sk-or-...
        export OPENROUTER_MODEL=anthropic/claude-sonnet-4.5
    """

    # ---------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIGURATION
    # ---------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ---------------------------------------------------------------------------
    # APPLICATION SETTINGS
    # ---------------------------------------------------------------------------
    # APP_NAME: Display name shown in API docs and logging
    APP_NAME: str = "Visual Explainer"

    # DEBUG: More verbose errors and DEBUG-level logs
    DEBUG: bool = False

    # ---------------------------------------------------------------------------
    # OPENROUTER SETTINGS
    # ---------------------------------------------------------------------------
    # All text and image generation goes through OpenRouter's
    # OpenAI-compatible chat completions endpoint.
    OPENROUTER_API_KEY: str = ""
    OPENROUTER_BASE_URL: str = "https://openrouter.ai/api/v1"

    # OPENROUTER_MODEL: renderer model (writes the HTML canvas)
    OPENROUTER_MODEL: str = ""

    # OPENROUTER_FAST_MODEL: planner + preview model
    OPENROUTER_FAST_MODEL: str = ""

    # OPENROUTER_IMAGE_MODEL: image model (must support the image modality)
    OPENROUTER_IMAGE_MODEL: str = ""

    # Transport-level timeout for the SDK client, in seconds.
    # Stage budgets (see detail_levels.py) are enforced separately and are tighter.
    AI_REQUEST_TIMEOUT: int = 120

    # ---------------------------------------------------------------------------
    # PIPELINE SETTINGS
    # ---------------------------------------------------------------------------
    # Flat per-image budget, independent of detail level
    IMAGE_TIMEOUT_SECONDS: float = 30.0

    # Only the first N image prompts of a plan are generated
    MAX_IMAGES: int = 2

    # Font pairing used when a custom style names an unknown preset
    DEFAULT_FONT_PRESET: str = "midnight-scholar"

    # Questions longer than this are rejected before any remote call
    MAX_QUESTION_LENGTH: int = 500

    # ---------------------------------------------------------------------------
    # HISTORY SETTINGS
    # ---------------------------------------------------------------------------
    # HISTORY_DIR: where the local key-value store keeps its files
    HISTORY_DIR: str = "~/.visual-explainer"
    HISTORY_STORAGE_KEY: str = "ai-explain-history"

    # Serialized history is trimmed (oldest first) to fit this budget
    HISTORY_MAX_BYTES: int = 4_500_000

    # ---------------------------------------------------------------------------
    # EXPORT SETTINGS
    # ---------------------------------------------------------------------------
    # Logical width of the offscreen host container, in CSS pixels
    EXPORT_WIDTH: int = 1200

    # Capture scale (device pixel ratio)
    EXPORT_SCALE: int = 2

    # Readiness ceilings while rendering offscreen
    FONT_WAIT_SECONDS: float = 5.0
    IMAGE_WAIT_SECONDS: float = 10.0

    # Download links are revoked after this many seconds
    DOWNLOAD_TTL_SECONDS: float = 60.0


# ---------------------------------------------------------------------------
# GLOBAL SETTINGS INSTANCE
# ---------------------------------------------------------------------------
# Usage: from explainer.core.config import settings
settings = Settings()
