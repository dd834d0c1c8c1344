"""Best-effort extraction of a JSON payload from a free-text model reply."""

import json
import re
from typing import Any

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def extract_json_payload(text: str) -> Any:
    """Parse the first fenced block in text, or the whole text when there is none.

    Raises:
        ValueError: if the candidate text is not valid JSON.
    """
    match = _FENCED_BLOCK.search(text)
    candidate = match.group(1) if match else text
    return json.loads(candidate.strip())
