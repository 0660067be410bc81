"""
Main application entry point - FastAPI app instance and configuration.
Run with: uvicorn explainer.main:app --reload
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from explainer import __version__
from explainer.core.config import settings
from explainer.ai import monitoring  # noqa: F401  configures the "explainer" log handler
from explainer.routers import explain, export, history, shell, stats

if settings.DEBUG:
    logging.getLogger("explainer").setLevel(logging.DEBUG)

# ---------------------------------------------------------------------------
# CREATE FASTAPI APPLICATION
# ---------------------------------------------------------------------------
app = FastAPI(
    title=settings.APP_NAME,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
)

# ---------------------------------------------------------------------------
# CORS MIDDLEWARE
# ---------------------------------------------------------------------------
# The shell is served from the same origin; this only matters when a
# separate dev frontend calls the API.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
# REGISTER ROUTERS
# ---------------------------------------------------------------------------
# explain.router: /api/explain, /api/preview
# export.router: /api/export, /api/downloads/{token}
# history.router: /api/history
# stats.router: /api/stats
# shell.router: / (presentation page)
app.include_router(explain.router)
app.include_router(export.router)
app.include_router(history.router)
app.include_router(stats.router)
app.include_router(shell.router)


# ---------------------------------------------------------------------------
# HEALTH CHECK ENDPOINT
# ---------------------------------------------------------------------------
@app.get("/health", tags=["health"])
def health_check():
    """
    Simple health check endpoint.

    Reports whether the OpenRouter key is configured; does not call it.

    Returns:
        {"status": "ok", "openrouter_configured": bool}
    """
    return {"status": "ok", "openrouter_configured": bool(settings.OPENROUTER_API_KEY)}
