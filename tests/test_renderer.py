"""
Tests for CanvasRenderer against a real headless Chromium.

Skipped when Playwright or its Chromium build is not installed
(``playwright install chromium``).
"""

import os

import pytest

pytest.importorskip("playwright", reason="Playwright not installed")

from explainer.export import CanvasExporter, DownloadStore, ExportError, ExportFormat
from explainer.export.encoders import A4_RATIO
from explainer.export.renderer import CanvasRenderer


def _chromium_available() -> bool:
    try:
        from playwright.sync_api import sync_playwright

        with sync_playwright() as p:
            return os.path.exists(p.chromium.executable_path)
    except Exception:
        return False


requires_chromium = pytest.mark.skipif(
    not _chromium_available(),
    reason="Chromium not installed for Playwright",
)

WIDTH = 400

# Elements the renderer adds to its page and must remove again
LEFTOVERS = """
() => document.querySelectorAll(
    '[data-export-host], link[data-export-font], iframe[data-export-frame]'
).length
"""

CANVAS = """<!DOCTYPE html>
<html>
<head>
<link rel="stylesheet" href="https://fonts.googleapis.com/css2?family=Inter&display=swap">
<style>
  :root { --accent: rgb(255, 0, 0); }
  body { background: #0f172a; margin: 0; padding: 0; }
  .box { width: 100px; height: 100px; background: var(--accent); }
</style>
</head>
<body><div class="box"></div><div style="height: 60px"></div></body>
</html>"""


def _tall_canvas(height: int) -> str:
    return (
        "<!DOCTYPE html><html><head><style>body { margin: 0; background: #ffffff; }</style></head>"
        f'<body><div style="height: {height}px"></div></body></html>'
    )


class RecordingRenderer(CanvasRenderer):
    """Counts offscreen elements around cleanup, optionally failing the screenshot."""

    def __init__(self, fail_capture: bool = False):
        super().__init__(width=WIDTH, scale=2, font_wait_s=1.0, image_wait_s=1.0)
        self.fail_capture = fail_capture
        self.before_cleanup = None
        self.after_cleanup = None

    async def _capture(self, page, export_id, resolved):
        if self.fail_capture:
            raise RuntimeError("screenshot failed")
        return await super()._capture(page, export_id, resolved)

    async def _cleanup(self, page, export_id, frame_name):
        if page is not None:
            self.before_cleanup = await page.evaluate(LEFTOVERS)
        await super()._cleanup(page, export_id, frame_name)
        if page is not None:
            self.after_cleanup = await page.evaluate(LEFTOVERS)


def _close(actual, expected, tolerance=3):
    return all(abs(a - e) <= tolerance for a, e in zip(actual, expected))


@requires_chromium
class TestCanvasRendererIntegration:
    """Two-phase capture in a real browser."""

    @pytest.mark.asyncio
    async def test_body_background_and_root_variables_survive(self):
        canvas = await RecordingRenderer().capture(CANVAS)

        assert canvas.background == (15, 23, 42)
        assert canvas.image.width == WIDTH * 2
        # Outside the box: the resolved body background
        assert _close(canvas.image.getpixel((canvas.image.width - 10, 10)), (15, 23, 42))
        # Inside the box: var(--accent) defined on :root
        assert _close(canvas.image.getpixel((100, 100)), (255, 0, 0))

    @pytest.mark.asyncio
    async def test_offscreen_elements_removed_after_success(self):
        renderer = RecordingRenderer()

        await renderer.capture(CANVAS)

        assert renderer.before_cleanup >= 1
        assert renderer.after_cleanup == 0

    @pytest.mark.asyncio
    async def test_offscreen_elements_removed_after_failure(self):
        renderer = RecordingRenderer(fail_capture=True)

        with pytest.raises(ExportError) as exc_info:
            await renderer.capture(CANVAS)

        assert exc_info.value.phase == "capture"
        assert renderer.before_cleanup >= 1
        assert renderer.after_cleanup == 0

    @pytest.mark.asyncio
    async def test_tall_canvas_exports_three_pdf_pages(self):
        page_height = WIDTH * A4_RATIO
        downloads = DownloadStore(ttl_seconds=60)
        exporter = CanvasExporter(renderer=RecordingRenderer(), downloads=downloads)

        link = await exporter.export_canvas(_tall_canvas(int(page_height * 2.6)), ExportFormat.PDF)

        assert link.file.page_count == 3
        assert link.file.data.startswith(b"%PDF")
        downloads.revoke(link.token)
