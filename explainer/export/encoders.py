"""
Encoders - CapturedCanvas to file bytes.

PNG is a straight encode. PDF pages are JPEG-compressed (quality 0.92)
and sized in logical pixels (the 2x capture scale is undone through the
PDF resolution). Content taller than one A4-proportioned page is sliced
from the full-resolution bitmap, one page per slice, rather than scaling
a single oversized image down.
"""

import io
import logging
import math
from dataclasses import dataclass
from typing import List

from PIL import Image

from explainer.export.contracts import CapturedCanvas, ExportError

logger = logging.getLogger("explainer.export.encoders")

# A4 height / width
A4_RATIO = 297 / 210

JPEG_QUALITY = 92

# PDF user space is 72 points per inch
POINTS_PER_INCH = 72


@dataclass(frozen=True)
class PageSlice:
    """A horizontal band of the canvas: rows [top, top + height)."""
    top: int
    height: int

    @property
    def bottom(self) -> int:
        return self.top + self.height


def plan_pdf_pages(width: int, height: int) -> List[PageSlice]:
    """
    Split a canvas of ``width`` x ``height`` pixels into A4-proportioned pages.

    Slices are contiguous and cover every row exactly once; only the last
    one may be shorter than a full page.
    """
    if width <= 0 or height <= 0:
        raise ValueError(f"Cannot paginate an empty canvas ({width}x{height})")

    page_height = max(1, int(round(width * A4_RATIO)))
    if height <= page_height:
        return [PageSlice(top=0, height=height)]

    count = math.ceil(height / page_height)
    return [
        PageSlice(top=i * page_height, height=min(page_height, height - i * page_height))
        for i in range(count)
    ]


def encode_png(canvas: CapturedCanvas) -> bytes:
    buffer = io.BytesIO()
    try:
        canvas.image.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise ExportError(f"Failed to create PNG: {e}", phase="encode") from e
    return buffer.getvalue()


def slice_pages(canvas: CapturedCanvas) -> List[Image.Image]:
    """Crop the full-resolution bitmap into one RGB image per page."""
    image = canvas.image.convert("RGB")
    return [
        image.crop((0, page.top, image.width, page.bottom))
        for page in plan_pdf_pages(image.width, image.height)
    ]


def encode_pdf(canvas: CapturedCanvas) -> bytes:
    """
    Encode as a multi-page PDF.

    Each page measures logical width x slice height in PDF points.
    """
    buffer = io.BytesIO()
    try:
        pages = slice_pages(canvas)
        pages[0].save(
            buffer,
            format="PDF",
            save_all=True,
            append_images=pages[1:],
            resolution=POINTS_PER_INCH * canvas.scale,
            quality=JPEG_QUALITY,
        )
    except (OSError, ValueError) as e:
        raise ExportError(f"Failed to create PDF: {e}", phase="encode") from e

    logger.debug(f"Encoded PDF: {len(pages)} pages, {canvas.logical_width:.0f}pt wide")
    return buffer.getvalue()
