"""
Stylesheet rewriting for the host container.

Once content is moved out of its own document, rules aimed at the
document root (``body``, ``html``, ``:root``) match nothing. Selectors
textually equal to one of those are retargeted at the host container's
attribute selector; compound selectors such as ``body.dark`` or
``html > main`` are left untouched.
"""

import re

ROOT_SELECTORS = frozenset({"body", "html", ":root"})

HOST_ATTRIBUTE = "data-export-host"

# Rule prelude: the text between the previous brace and an opening brace
_PRELUDE = re.compile(r"[^{}]+(?=\{)")

_COMMENT = re.compile(r"/\*.*?\*/", re.DOTALL)


def host_selector(host_id: str) -> str:
    return f'[{HOST_ATTRIBUTE}="{host_id}"]'


def _rewrite_selector_list(prelude: str, replacement: str) -> str:
    # Statements such as @import end with ";" and precede the selector
    head, sep, selectors = prelude.rpartition(";")
    if selectors.lstrip().startswith("@"):
        return prelude
    prelude = selectors

    parts = prelude.split(",")
    rewritten = []
    for part in parts:
        if part.strip().lower() in ROOT_SELECTORS:
            leading = part[: len(part) - len(part.lstrip())]
            trailing = part[len(part.rstrip()):]
            rewritten.append(f"{leading}{replacement}{trailing}")
        else:
            rewritten.append(part)
    return head + sep + ",".join(rewritten)


def rewrite_root_selectors(css: str, replacement: str) -> str:
    """
    Retarget root-scoped rules at ``replacement``.

    Example:
        rewrite_root_selectors("body, h1 { color: red }", '[data-export-host="x"]')
        -> '[data-export-host="x"], h1 { color: red }'
    """
    css = _COMMENT.sub("", css)
    return _PRELUDE.sub(lambda m: _rewrite_selector_list(m.group(0), replacement), css)
