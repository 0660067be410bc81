"""
Canvas Renderer - two-phase resolve-then-capture in headless Chromium.

The canvas HTML is a full standalone document: its body/html/:root rules
only resolve when it is parsed as a real document, but capture needs the
content to live in the host page. So:

Phase 1 (resolve):
    hidden iframe(srcdoc=html) -> wait fonts (5s) + images (10s each)
    -> read computed body styles -> collect <style> text + font links

Phase 2 (clone into host):
    font links -> rewritten style blocks -> deep clone of body children
    into a host container with the resolved styles inline
    -> drop the iframe -> re-wait fonts + images

Capture:
    screenshot the host container at 2x, flatten onto the resolved
    background colour.

Every capture owns its own browser and context, torn down on every exit
path together with the host container and injected font links.
"""

import asyncio
import io
import logging
import re
import time
import uuid
from typing import Any, Optional, Tuple, TYPE_CHECKING

from PIL import Image, ImageColor

from explainer.core.config import settings
from explainer.export import scripts
from explainer.export.contracts import CapturedCanvas, ExportError, ResolvedStyles
from explainer.export.styles import host_selector, rewrite_root_selectors

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger("explainer.export.renderer")

WHITE = (255, 255, 255)

_RGB_FUNCTION = re.compile(r"rgba?\(([^)]*)\)", re.IGNORECASE)

# Ceiling for the secondary browsing context to finish parsing
FRAME_LOAD_TIMEOUT_MS = 15000


def parse_css_color(value: Optional[str]) -> Tuple[int, int, int]:
    """
    Computed CSS colour -> RGB tuple.

    Transparent or unparseable values fall back to white.
    """
    if not value or value.strip().lower() == "transparent":
        return WHITE

    match = _RGB_FUNCTION.search(value)
    if match:
        parts = [p.strip() for p in re.split(r"[,\s/]+", match.group(1).strip()) if p.strip()]
        try:
            channels = [int(round(float(p))) for p in parts[:3]]
            alpha = float(parts[3]) if len(parts) > 3 else 1.0
        except ValueError:
            return WHITE
        if len(channels) < 3 or alpha == 0:
            return WHITE
        return tuple(max(0, min(255, c)) for c in channels)  # type: ignore[return-value]

    try:
        return ImageColor.getrgb(value)[:3]
    except ValueError:
        return WHITE


def flatten(image_bytes: bytes, background: Tuple[int, int, int]) -> Image.Image:
    """Decode a screenshot and composite it over an opaque backdrop."""
    captured = Image.open(io.BytesIO(image_bytes)).convert("RGBA")
    backdrop = Image.new("RGBA", captured.size, background + (255,))
    backdrop.alpha_composite(captured)
    return backdrop.convert("RGB")


def _inline_css(styles: ResolvedStyles) -> str:
    return "".join(f"{prop}:{value};" for prop, value in styles.to_inline_css().items())


class CanvasRenderer:
    """
    Rasterizes canvas HTML with Playwright.

    Usage:
        canvas = await canvas_renderer.capture(sanitized_html)
        canvas.image.save("out.png")
    """

    def __init__(
        self,
        width: Optional[int] = None,
        scale: Optional[int] = None,
        font_wait_s: Optional[float] = None,
        image_wait_s: Optional[float] = None,
    ):
        self.width = width or settings.EXPORT_WIDTH
        self.scale = scale or settings.EXPORT_SCALE
        self.font_wait_s = font_wait_s if font_wait_s is not None else settings.FONT_WAIT_SECONDS
        self.image_wait_s = image_wait_s if image_wait_s is not None else settings.IMAGE_WAIT_SECONDS

    async def capture(self, html: str) -> CapturedCanvas:
        """
        Render ``html`` (already sanitized) and return the captured bitmap.

        Raises:
            ExportError: Chromium unavailable, or any phase failed
        """
        try:
            from playwright.async_api import async_playwright
        except ImportError as e:
            raise ExportError(
                "Playwright not installed - pip install playwright && playwright install chromium",
                phase="setup",
            ) from e

        start_time = time.time()
        export_id = uuid.uuid4().hex[:12]
        frame_name = f"export-frame-{export_id}"
        phase = "setup"

        playwright = None
        browser = None
        context = None
        page: Optional["Page"] = None

        try:
            playwright = await async_playwright().start()
            browser = await playwright.chromium.launch(headless=True)
            context = await browser.new_context(
                viewport={"width": self.width, "height": 800},
                device_scale_factor=self.scale,
                bypass_csp=True,
            )
            page = await context.new_page()
            await page.set_content(scripts.HOST_PAGE)

            phase = "resolve"
            resolved, resources = await self._resolve(page, frame_name, html)

            phase = "clone"
            await self._mount(page, frame_name, export_id, resolved, resources)

            phase = "capture"
            image = await self._capture(page, export_id, resolved)

            logger.info(
                f"[{export_id}] Captured {image.width}x{image.height} "
                f"in {(time.time() - start_time) * 1000:.0f}ms"
            )
            return CapturedCanvas(
                image=image,
                background=parse_css_color(resolved.background_color),
                scale=self.scale,
            )

        except ExportError:
            raise
        except Exception as e:
            logger.error(f"[{export_id}] Export {phase} failed: {e}", exc_info=True)
            raise ExportError(f"Export {phase} failed: {e}", phase=phase) from e

        finally:
            await self._cleanup(page, export_id, frame_name)
            for resource in (context, browser):
                if resource is None:
                    continue
                try:
                    await resource.close()
                except Exception as e:
                    logger.warning(f"[{export_id}] Error closing browser resource: {e}")
            if playwright is not None:
                try:
                    await playwright.stop()
                except Exception as e:
                    logger.warning(f"[{export_id}] Error stopping Playwright: {e}")

    # -----------------------------------------------------------------------
    # PHASES
    # -----------------------------------------------------------------------

    async def _resolve(self, page: "Page", frame_name: str, html: str) -> Tuple[ResolvedStyles, Any]:
        """Phase 1: parse in a hidden frame and read what only a real document knows."""
        await page.evaluate(scripts.CREATE_FRAME, {
            "name": frame_name,
            "html": html,
            "width": self.width,
            "timeoutMs": FRAME_LOAD_TIMEOUT_MS,
        })

        frame = page.frame(name=frame_name)
        if frame is None:
            raise ExportError("Offscreen document did not load", phase="resolve")

        await self._wait_ready(frame, root=None)

        resolved = ResolvedStyles.from_dict(await frame.evaluate(scripts.RESOLVE_STYLES) or {})
        resources = await frame.evaluate(scripts.COLLECT_RESOURCES) or {}
        logger.debug(
            f"Resolved background={resolved.background_color} font={resolved.font_family!r}, "
            f"{len(resources.get('styles', []))} style blocks"
        )
        return resolved, resources

    async def _mount(
        self,
        page: "Page",
        frame_name: str,
        export_id: str,
        resolved: ResolvedStyles,
        resources: Any,
    ) -> None:
        """Phase 2: fonts, rewritten styles, then the body clone into the host container."""
        replacement = host_selector(export_id)
        styles = [rewrite_root_selectors(css, replacement) for css in resources.get("styles", [])]

        mounted = await page.evaluate(scripts.MOUNT_HOST, {
            "frameName": frame_name,
            "hostId": export_id,
            "width": self.width,
            "inlineStyle": _inline_css(resolved),
            "styles": styles,
            "fontLinks": resources.get("fontLinks", []),
        })
        logger.debug(f"[{export_id}] Mounted host container with {mounted} children")

        # Moving nodes can invalidate font and image readiness
        await self._wait_ready(page, root=replacement)

    async def _capture(self, page: "Page", export_id: str, resolved: ResolvedStyles) -> Image.Image:
        if not await page.evaluate(scripts.PLACE_FOR_CAPTURE, export_id):
            raise ExportError("Host container missing at capture time", phase="capture")

        screenshot = await page.locator(host_selector(export_id)).screenshot(
            type="png",
            scale="device",
            animations="disabled",
        )
        return flatten(screenshot, parse_css_color(resolved.background_color))

    # -----------------------------------------------------------------------
    # HELPERS
    # -----------------------------------------------------------------------

    async def _wait_ready(self, target: Any, root: Optional[str]) -> None:
        """Fonts (bounded) and images (bounded each), waited concurrently."""
        fonts_ms = int(self.font_wait_s * 1000)
        images_ms = int(self.image_wait_s * 1000)
        await asyncio.gather(
            target.evaluate(scripts.WAIT_FOR_FONTS, fonts_ms),
            target.evaluate(scripts.WAIT_FOR_IMAGES, {"ceilingMs": images_ms, "root": root}),
        )

    async def _cleanup(self, page: Optional["Page"], export_id: str, frame_name: str) -> None:
        if page is None:
            return
        try:
            removed = await page.evaluate(scripts.CLEANUP, {"hostId": export_id, "frameName": frame_name})
            logger.debug(f"[{export_id}] Cleanup removed {removed} offscreen elements")
        except Exception as e:
            logger.warning(f"[{export_id}] Offscreen cleanup failed: {e}")


# ---------------------------------------------------------------------------
# SINGLETON INSTANCE
# ---------------------------------------------------------------------------

canvas_renderer = CanvasRenderer()
