"""YAML config loader — parses, interpolates env vars, resolves files, validates."""

from collections import Counter
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from skill_duel.config.domain.config import EvalConfig
from skill_duel.config.domain.observer import ConfigObserver
from skill_duel.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from skill_duel.config.infrastructure.errors import (
    ConfigLoadError,
    ConfigValidationError,
    MissingEnvVarsError,
)

_SKILL_KEYS = ("skill_a", "skill_b")


class YamlConfigLoader:
    """Loads, interpolates, validates, and returns an EvalConfig from a YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path) -> EvalConfig:
        """
        Load, interpolate, validate, and return an EvalConfig from a YAML file.

        Skill ``path`` entries and ``prompts_file`` are resolved relative to the
        directory containing the config file.

        Raises:
            ConfigLoadError: if the config file or a referenced file is missing.
            MissingEnvVarsError: if any ${ENV_VAR} references are unset (all collected first).
            ConfigValidationError: if the file is not valid YAML, the schema is
                violated, or criterion ids repeat.
        """
        raw = _parse_yaml(path=path)
        _check_missing_env_vars(raw=raw)
        interpolated = _interpolate(raw=raw)
        resolved = _resolve_files(interpolated=interpolated, base_dir=path.parent)
        cfg = _build_config(resolved=resolved)
        _check_unique_criteria(cfg=cfg)
        _emit_warnings(cfg=cfg, observer=self._observer)
        self._observer.config_loaded(
            name=cfg.name, prompts=len(cfg.prompts), criteria=len(cfg.criteria)
        )
        return cfg


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigValidationError("top-level YAML value must be a mapping")
    return data


def _check_missing_env_vars(raw: Any) -> None:
    """Raise MissingEnvVarsError if any ${ENV_VAR} references in raw are unset."""
    missing = collect_missing_vars(raw)
    if missing:
        raise MissingEnvVarsError(missing)


def _interpolate(raw: Any) -> Any:
    """Return a fully interpolated copy of raw with all ${ENV_VAR} substituted."""
    return interpolate(raw)


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigLoadError(path=path) from exc


def _resolve_skill(skill_raw: Any, base_dir: Path) -> Any:
    """Inline a skill's ``path`` into ``content``, defaulting ``name`` to the file name."""
    if not isinstance(skill_raw, dict) or "path" not in skill_raw:
        return skill_raw
    skill_path = base_dir / str(skill_raw["path"])
    resolved = {key: value for key, value in skill_raw.items() if key != "path"}
    resolved["content"] = _read_text(skill_path)
    resolved.setdefault("name", skill_path.name)
    return resolved


def _resolve_files(interpolated: dict[str, Any], base_dir: Path) -> dict[str, Any]:
    """
    Replace file references with their contents so Pydantic sees plain values.

    ``prompts_file`` holds one prompt per non-blank line and is appended after
    any inline ``prompts``.
    """
    resolved = dict(interpolated)
    for key in _SKILL_KEYS:
        if key in resolved:
            resolved[key] = _resolve_skill(resolved[key], base_dir=base_dir)

    prompts_file = resolved.pop("prompts_file", None)
    if prompts_file:
        lines = _read_text(base_dir / str(prompts_file)).splitlines()
        inline = list(resolved.get("prompts") or [])
        resolved["prompts"] = inline + [line.strip() for line in lines if line.strip()]
    return resolved


def _build_config(resolved: Any) -> EvalConfig:
    try:
        return EvalConfig.model_validate(resolved)
    except ValidationError as exc:
        raise ConfigValidationError(str(exc)) from exc


def _check_unique_criteria(cfg: EvalConfig) -> None:
    """Raise ConfigValidationError listing every criterion id used more than once."""
    counts = Counter(c.id for c in cfg.criteria)
    duplicates = sorted(cid for cid, n in counts.items() if n > 1)
    if duplicates:
        raise ConfigValidationError(
            f"duplicate criterion ids: {', '.join(duplicates)}"
        )


def _emit_warnings(cfg: EvalConfig, observer: ConfigObserver) -> None:
    for criterion in cfg.criteria:
        if not criterion.has_complete_rubric():
            observer.config_rubric_incomplete(
                criterion_id=criterion.id,
                levels=sorted(criterion.rubric.keys()),
            )
