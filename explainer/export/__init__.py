"""
Export Module - canvas HTML to PNG or multi-page PDF.

- sanitize: strip scripts and inline event handlers
- renderer: two-phase resolve/clone capture in headless Chromium (Playwright)
- encoders: PNG, and A4-sliced JPEG PDF pages (Pillow)
- downloads: one-time links revoked after a TTL
- exporter: the whole flow

Usage:
    from explainer.export import canvas_exporter, ExportFormat

    link = await canvas_exporter.export_canvas(html, ExportFormat.PNG)
"""

from explainer.export.contracts import (
    CapturedCanvas,
    ExportedFile,
    ExportError,
    ExportFormat,
    ResolvedStyles,
)
from explainer.export.downloads import DownloadLink, DownloadStore, download_store
from explainer.export.encoders import PageSlice, encode_pdf, encode_png, plan_pdf_pages
from explainer.export.exporter import CanvasExporter, canvas_exporter
from explainer.export.renderer import CanvasRenderer, canvas_renderer
from explainer.export.sanitize import sanitize_for_export
from explainer.export.styles import rewrite_root_selectors

__all__ = [
    "CapturedCanvas",
    "ExportedFile",
    "ExportError",
    "ExportFormat",
    "ResolvedStyles",
    "DownloadLink",
    "DownloadStore",
    "download_store",
    "PageSlice",
    "encode_pdf",
    "encode_png",
    "plan_pdf_pages",
    "CanvasExporter",
    "canvas_exporter",
    "CanvasRenderer",
    "canvas_renderer",
    "sanitize_for_export",
    "rewrite_root_selectors",
]
