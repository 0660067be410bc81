"""
Export sanitization.

Canvas HTML is untrusted model output. It is normally viewed inside an
isolated frame, but export places it in a live page, so every script
element and every inline event-handler attribute is removed first.
"""

import logging

from bs4 import BeautifulSoup

logger = logging.getLogger("explainer.export.sanitize")


def _is_event_handler(attribute: str) -> bool:
    return attribute.lower().startswith("on") and len(attribute) > 2


def sanitize_for_export(html: str) -> str:
    """Strip <script> elements and on* attributes, keep everything else."""
    soup = BeautifulSoup(html, "html.parser")

    scripts = soup.find_all("script")
    for script in scripts:
        script.decompose()

    stripped_handlers = 0
    for element in soup.find_all(True):
        handlers = [attr for attr in element.attrs if _is_event_handler(attr)]
        for attr in handlers:
            del element[attr]
        stripped_handlers += len(handlers)

    if scripts or stripped_handlers:
        logger.info(f"Sanitized export HTML: {len(scripts)} scripts, {stripped_handlers} event handlers removed")

    return str(soup)
