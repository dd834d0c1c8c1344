"""Extract renderable HTML from a model reply."""

import re

_FENCED_HTML = re.compile(r"```(?:html|HTML)?\s*\n?([\s\S]*?)```")
_DOCTYPE = re.compile(r"<!DOCTYPE\s+html[\s\S]*", re.IGNORECASE)
_HTML_TAG = re.compile(r"<html[\s\S]*", re.IGNORECASE)


def extract_html(content: str) -> str:
    """Return the most plausible HTML document contained in content.

    Tries, in order: a fenced code block that looks like markup, a document
    starting at ``<!DOCTYPE html``, then one starting at ``<html``. Anything
    else (raw markup or plain prose) is returned unchanged.
    """
    if not content:
        return ""

    block = _FENCED_HTML.search(content)
    if block:
        extracted = block.group(1).strip()
        if "<" in extracted and ">" in extracted:
            return extracted

    for pattern in (_DOCTYPE, _HTML_TAG):
        match = pattern.search(content)
        if match:
            return match.group(0).strip()

    return content
