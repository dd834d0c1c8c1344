"""Render a SuggestedConfig as a loadable YAML config document."""

from pathlib import Path
from typing import Any

import yaml

from skill_duel.autoconfig.domain.suggestion import SuggestedConfig


def build_config_document(
    suggestion: SuggestedConfig,
    name: str,
    skill_a_path: Path,
    skill_b_path: Path,
) -> dict[str, Any]:
    """Return a mapping in the shape YamlConfigLoader accepts.

    Skills are referenced by path so the document stays small; the API key
    is read from ANTHROPIC_API_KEY at load time.
    """
    return {
        "name": name,
        "skill_a": {"path": str(skill_a_path)},
        "skill_b": {"path": str(skill_b_path)},
        "output_type": suggestion.output_type.value,
        "criteria": [c.model_dump() for c in suggestion.criteria],
        "prompts": list(suggestion.prompts),
        "api_key": "${ANTHROPIC_API_KEY}",
    }


def dump_config_yaml(document: dict[str, Any]) -> str:
    return yaml.safe_dump(document, sort_keys=False, allow_unicode=True, width=100)
