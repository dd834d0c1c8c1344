"""Recover a ParsedScore from the judge model's free-text reply."""

import json
import re

from pydantic import ValidationError

from skill_duel.judge.domain.score import ParsedScore

_JSON_BLOCK = re.compile(r"```json\s*([\s\S]*?)```", re.IGNORECASE)
_BOLD_WINNER = re.compile(r"\*\*\[(A|B)\]\*\*")


def parse_judge_response(response: str) -> ParsedScore | None:
    """Parse a judge reply; never raises.

    1. A fenced ```json block that decodes to a valid ParsedScore wins.
    2. Otherwise a bolded ``**[A]**`` / ``**[B]**`` marker yields a winner-only
       score with null totals and breakdown.
    3. Otherwise the reply is unparseable and None is returned.
    """
    if not response:
        return None

    block = _JSON_BLOCK.search(response)
    if block:
        try:
            return ParsedScore.model_validate(json.loads(block.group(1).strip()))
        except (ValueError, ValidationError):
            pass

    marker = _BOLD_WINNER.search(response)
    if marker:
        return ParsedScore(winner=marker.group(1))

    return None
