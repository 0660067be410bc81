"""
Canvas Exporter - HTML canvas to a one-time PNG/PDF download.

    sanitize -> render (two-phase, 2x) -> encode -> deliver once

Failures propagate as ExportError; the caller decides how to present
them. Offscreen resources are released by the renderer on every path.
"""

import logging
import re
import time
from typing import Optional, Union

from explainer.export.contracts import ExportedFile, ExportError, ExportFormat
from explainer.export.downloads import DownloadLink, DownloadStore, download_store
from explainer.export.encoders import encode_pdf, encode_png, plan_pdf_pages
from explainer.export.renderer import CanvasRenderer, canvas_renderer
from explainer.export.sanitize import sanitize_for_export

logger = logging.getLogger("explainer.export")

DEFAULT_FILENAME_PREFIX = "ai-explain"

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def default_filename() -> str:
    return f"{DEFAULT_FILENAME_PREFIX}-{int(time.time() * 1000)}"


def build_filename(stem: Optional[str], fmt: ExportFormat) -> str:
    """Safe download name with the format's extension."""
    cleaned = _UNSAFE_FILENAME_CHARS.sub("-", (stem or "").strip()).strip(".-")
    if cleaned.lower().endswith(fmt.extension):
        cleaned = cleaned[: -len(fmt.extension)]
    return f"{cleaned or default_filename()}{fmt.extension}"


class CanvasExporter:
    """
    Usage:
        link = await canvas_exporter.export_canvas(html, ExportFormat.PDF)
        print(link.url, link.file.page_count)
    """

    def __init__(
        self,
        renderer: Optional[CanvasRenderer] = None,
        downloads: Optional[DownloadStore] = None,
    ):
        self._renderer = renderer or canvas_renderer
        self._downloads = downloads or download_store

    async def export_canvas(
        self,
        html: str,
        fmt: Union[ExportFormat, str],
        filename: Optional[str] = None,
    ) -> DownloadLink:
        """
        Export ``html`` and trigger exactly one download.

        Raises:
            ExportError: bad input, capture failure or encoding failure
        """
        try:
            fmt = ExportFormat(fmt)
        except ValueError as e:
            raise ExportError(f"Unsupported export format: {fmt}", phase="setup") from e
        if not html or not html.strip():
            raise ExportError("Nothing to export", phase="setup")

        start_time = time.time()
        sanitized = sanitize_for_export(html)
        canvas = await self._renderer.capture(sanitized)
        if canvas.image.width == 0 or canvas.image.height == 0:
            raise ExportError("Captured canvas is empty", phase="capture")

        if fmt == ExportFormat.PNG:
            data = encode_png(canvas)
            page_count = 1
        else:
            data = encode_pdf(canvas)
            page_count = len(plan_pdf_pages(canvas.image.width, canvas.image.height))

        exported = ExportedFile(
            filename=build_filename(filename, fmt),
            format=fmt,
            data=data,
            page_count=page_count,
            metadata={
                "width": canvas.logical_width,
                "height": canvas.logical_height,
                "scale": canvas.scale,
            },
        )
        link = self._downloads.trigger_download(exported)

        logger.info(
            f"Exported {exported.filename}: {page_count} page(s), {exported.size} bytes "
            f"in {(time.time() - start_time) * 1000:.0f}ms"
        )
        return link


canvas_exporter = CanvasExporter()
