"""
Post-processing of model output.

Three pure functions:
- strip_code_fences: unwrap a document the model fenced in ```html
- parse_image_prompts: scrape ``**img-N:** ...`` lines from a content plan
- inject_images: substitute generated images into <img data-image-id> placeholders

Image prompt scraping is best-effort free-text parsing. A plan that does
not follow the format yields zero prompts, never an error.
"""

import logging
import re
from typing import Iterable, List

from explainer.ai.pipeline.contracts import ImageGenResult, ImagePrompt

logger = logging.getLogger("explainer.ai.pipeline.postprocess")

MAX_IMAGE_PROMPTS = 2

NO_IMAGES_MARKER = "no images needed"

# Applied when a placeholder has no max-width of its own
DEFAULT_IMAGE_STYLE = (
    "max-width:600px; width:100%; height:auto; object-fit:cover; "
    "border-radius:16px; display:block; margin:2rem auto;"
)

_CODE_FENCE = re.compile(r"^```(?:html|htm)?\s*\n?(.*?)\n?\s*```$", re.DOTALL | re.IGNORECASE)

_IMAGE_PROMPT_LINE = re.compile(r"\*\*img-(\d+):\*\*[ \t]*(.+)")

# src attribute, but not data-src or similar
_SRC_ATTR = re.compile(r"""\s*(?<![\w-])src\s*=\s*(?:"[^"]*"|'[^']*'|[^\s>]+)""", re.IGNORECASE)

_STYLE_ATTR = re.compile(r"""(?<![\w-])style\s*=\s*(?:"([^"]*)"|'([^']*)')""", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """
    Unwrap a fenced document.

    "```html\\nX\\n```" -> "X" (trimmed); anything else is returned trimmed.
    """
    trimmed = text.strip()
    match = _CODE_FENCE.match(trimmed)
    return match.group(1).strip() if match else trimmed


def parse_image_prompts(content_plan: str, limit: int = MAX_IMAGE_PROMPTS) -> List[ImagePrompt]:
    """
    Extract image prompts from a content plan, in document order.

    Lines mentioning "no images needed" (any case) are skipped, then the
    result is capped at ``limit``.
    """
    if not isinstance(content_plan, str):
        return []

    prompts: List[ImagePrompt] = []
    for match in _IMAGE_PROMPT_LINE.finditer(content_plan):
        prompt = match.group(2).strip()
        if not prompt or NO_IMAGES_MARKER in prompt.lower():
            continue
        prompts.append(ImagePrompt(id=f"img-{match.group(1)}", prompt=prompt))

    return prompts[:limit]


def _placeholder_pattern(image_id: str) -> "re.Pattern[str]":
    quoted = re.escape(image_id)
    return re.compile(
        rf"""<img\b([^>]*?(?<![\w-])data-image-id\s*=\s*(?:"{quoted}"|'{quoted}')[^>]*?)\s*/?>""",
        re.IGNORECASE,
    )


def _rebuild_placeholder(attrs: str, data_url: str) -> str:
    clean_attrs = _SRC_ATTR.sub("", attrs)

    if "max-width" not in clean_attrs:
        style = _STYLE_ATTR.search(clean_attrs)
        if style:
            # Keep the original quote; the value may contain the other one
            quote = '"' if style.group(1) is not None else "'"
            existing = (style.group(1) if style.group(1) is not None else style.group(2)).strip()
            merged = f"{DEFAULT_IMAGE_STYLE} {existing}".strip()
            clean_attrs = (
                clean_attrs[:style.start()]
                + f"style={quote}{merged}{quote}"
                + clean_attrs[style.end():]
            )
        else:
            clean_attrs += f' style="{DEFAULT_IMAGE_STYLE}"'

    return f'<img src="{data_url}"{clean_attrs} />'


def inject_images(html: str, images: Iterable[ImageGenResult]) -> str:
    """
    Point every placeholder of each image at its data URL.

    Placeholders without a matching image are left exactly as the renderer
    wrote them.
    """
    result = html
    for image in images:
        pattern = _placeholder_pattern(image.id)
        result, count = pattern.subn(
            lambda m, url=image.data_url: _rebuild_placeholder(m.group(1), url),
            result,
        )
        if count == 0:
            logger.info(f"No placeholder found for {image.id}")
        else:
            logger.debug(f"Injected {image.id} into {count} placeholder(s)")
    return result
