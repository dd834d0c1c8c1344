"""CLI entrypoint for skill-duel — typer app comparing two skills head to head."""

import asyncio
import json
import os
import re
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

import structlog
import typer

from skill_duel.autoconfig.application.suggester import ConfigSuggester
from skill_duel.autoconfig.domain.suggestion import GenerationType
from skill_duel.autoconfig.infrastructure.observer import StructlogSuggestionObserver
from skill_duel.cli.output.export import build_export_csv, build_export_json
from skill_duel.cli.output.suggestion import build_config_document, dump_config_yaml
from skill_duel.config.domain.config import EvalConfig
from skill_duel.config.domain.models import DEFAULT_MODEL
from skill_duel.config.domain.skill import SkillDocument
from skill_duel.config.infrastructure.observer import StructlogConfigObserver
from skill_duel.config.infrastructure.yaml_loader import YamlConfigLoader
from skill_duel.core.errors import SkillDuelError
from skill_duel.evaluation.application.controller import EvaluationRunController
from skill_duel.evaluation.application.generation import GenerationStage
from skill_duel.evaluation.application.judging import JudgingStage
from skill_duel.evaluation.domain.observer import EvaluationObserver
from skill_duel.evaluation.domain.run_state import RunState
from skill_duel.evaluation.domain.stats import RunStats
from skill_duel.evaluation.infrastructure.composite_observer import (
    CompositeEvaluationObserver,
)
from skill_duel.evaluation.infrastructure.observer import StructlogEvaluationObserver
from skill_duel.evaluation.infrastructure.progress_observer import (
    ProgressEvaluationObserver,
)
from skill_duel.evaluation.infrastructure.state_store import JsonRunStateStore
from skill_duel.gateway.infrastructure.litellm import LiteLLMGateway
from skill_duel.gateway.infrastructure.observer import StructlogGatewayObserver
from skill_duel.rendering.infrastructure.http_renderer import HttpRenderer
from skill_duel.rendering.infrastructure.observer import StructlogRendererObserver

app = typer.Typer(add_completion=False)

_CONFIG_ARG = typer.Argument(..., help="Path to evaluation config YAML")
_STATE_DIR_OPT = typer.Option(
    Path(".skill-duel"), "--state-dir", help="Directory holding persisted run state"
)
_LOG_FORMAT_OPT = typer.Option(
    "console", "--log-format", help="Log format: 'console' or 'json'"
)


def _configure_structlog(log_format: str) -> None:
    """Configure structlog based on the requested format."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.")
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@contextmanager
def _cli_errors() -> Iterator[None]:
    """Translate project errors into a printed message and exit status 1."""
    try:
        yield
    except KeyboardInterrupt:
        typer.echo("Evaluation interrupted.")
        sys.exit(1)
    except SkillDuelError as exc:
        typer.echo(str(exc))
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.")
        sys.exit(1)


def _state_path(state_dir: Path, config_name: str) -> Path:
    slug = re.sub(r"[^A-Za-z0-9_.-]+", "-", config_name).strip("-") or "run"
    return state_dir / f"{slug}.json"


def _load_config(config_path: Path) -> EvalConfig:
    loader = YamlConfigLoader(observer=StructlogConfigObserver())
    return loader.load(path=config_path)


def _build_controller(
    config: EvalConfig, state_dir: Path, log_format: str
) -> EvaluationRunController:
    observers: list[EvaluationObserver] = [StructlogEvaluationObserver()]
    if log_format != "json":
        observers.append(ProgressEvaluationObserver())
    observer = CompositeEvaluationObserver(observers=observers)

    gateway = LiteLLMGateway(observer=StructlogGatewayObserver())
    renderer = HttpRenderer(config=config.renderer, observer=StructlogRendererObserver())
    return EvaluationRunController(
        config=config,
        generation_stage=GenerationStage(
            gateway=gateway, observer=observer, execution=config.execution
        ),
        judging_stage=JudgingStage(
            gateway=gateway,
            renderer=renderer,
            observer=observer,
            execution=config.execution,
        ),
        store=JsonRunStateStore(path=_state_path(state_dir, config.name)),
        observer=observer,
    )


def _output_stem(config_name: str) -> str:
    """Build the export file stem: skill-duel_{config_name}_{YYYYMMDD}."""
    date_str = datetime.now().strftime("%Y%m%d")
    return f"skill-duel_{config_name}_{date_str}"


def _write_exports(
    output_dir: Path, config: EvalConfig, state: RunState
) -> tuple[Path, Path]:
    """Write JSON and CSV exports. Returns (json_path, csv_path)."""
    output_dir.mkdir(parents=True, exist_ok=True)
    stem = _output_stem(config_name=config.name)
    json_path = output_dir / f"{stem}.json"
    csv_path = output_dir / f"{stem}.csv"
    json_path.write_text(
        json.dumps(build_export_json(config, state.evaluations), indent=2),
        encoding="utf-8",
    )
    csv_path.write_text(build_export_csv(config, state.evaluations), encoding="utf-8")
    return json_path, csv_path


# ---------------------------------------------------------------------------
# ANSI helpers
# ---------------------------------------------------------------------------
_RESET = "\033[0m"
_BOLD = "\033[1m"
_DIM = "\033[2m"
_CYAN = "\033[36m"
_YELLOW = "\033[33m"
_GREEN = "\033[32m"
_RED = "\033[31m"
_BLUE = "\033[34m"
_MAGENTA = "\033[35m"
_WHITE = "\033[97m"

_BAR_W = 20


def _rule(width: int = 72, color: str = _DIM) -> None:
    typer.echo(f"{color}{'─' * width}{_RESET}")


def _format_elapsed(elapsed_seconds: float) -> str:
    """Format elapsed seconds as '1m 23.4s' or '5.2s'."""
    minutes, seconds = divmod(elapsed_seconds, 60)
    if minutes >= 1:
        return f"{int(minutes)}m {seconds:.1f}s"
    return f"{elapsed_seconds:.1f}s"


def _bar(count: int, total: int, color: str) -> str:
    filled = round(count / total * _BAR_W) if total else 0
    return f"{color}{'█' * filled}{_DIM}{'░' * (_BAR_W - filled)}{_RESET}"


def _print_results_table(config: EvalConfig, stats: RunStats) -> None:
    """Win/loss/tie rows with a proportional bar, then a winner callout."""
    name_a, name_b = config.skill_names
    rows: list[tuple[str, int, str]] = [
        (f"A wins ({name_a})", stats.a_wins, _CYAN),
        (f"B wins ({name_b})", stats.b_wins, _MAGENTA),
        ("Ties", stats.ties, _YELLOW),
        ("Unscored", stats.unscored, _DIM),
    ]
    label_w = max(len(label) for label, _, _ in rows)
    total = stats.judged_count
    typer.echo("")
    _rule(color=_BLUE)
    typer.echo(f"{_BLUE}{_BOLD}  Results{_RESET}")
    typer.echo("")
    typer.echo(f"  {_DIM}{'Outcome':<{label_w}}  {'Count':>5}  {'Share':>6}  Bar{_RESET}")
    typer.echo(f"  {'─' * label_w}  {'─' * 5}  {'─' * 6}  {'─' * _BAR_W}")
    for label, count, color in rows:
        share = f"{100.0 * count / total:.1f}%" if total else "--"
        typer.echo(
            f"  {_WHITE}{label:<{label_w}}{_RESET}"
            f"  {count:>5}"
            f"  {_DIM}{share:>6}{_RESET}"
            f"  {_bar(count, total, color)}"
        )

    if stats.a_wins != stats.b_wins:
        winner = name_a if stats.a_wins > stats.b_wins else name_b
        margin = abs(stats.a_wins - stats.b_wins)
        typer.echo("")
        typer.echo(
            f"  {_GREEN}{_BOLD}Winner: {winner}{_RESET}"
            f"  {_DIM}(+{margin} vs other skill){_RESET}"
        )
    elif total:
        typer.echo("")
        typer.echo(f"  {_YELLOW}{_BOLD}Dead heat{_RESET}")


def _print_summary(
    config: EvalConfig,
    state: RunState,
    stats: RunStats,
    title: str,
    extra_rows: list[tuple[str, str]] | None = None,
) -> None:
    """Print a colorized summary of the persisted run state to stdout."""
    typer.echo("")
    _rule(color=_CYAN)
    typer.echo(f"{_CYAN}{_BOLD}  skill-duel  ·  {title}{_RESET}")
    _rule(color=_CYAN)
    typer.echo("")

    name_a, name_b = config.skill_names
    meta_rows: list[tuple[str, str]] = [
        ("Config", config.name),
        ("Skill A", name_a),
        ("Skill B", name_b),
        ("Output type", config.output_type.value),
        ("Phase", state.phase.value),
        ("Generated", f"{stats.generated_count}/{stats.total_evals}"),
        ("Judged", f"{stats.judged_count}/{stats.generated_count}"),
    ]
    if state.started_at and state.ended_at:
        elapsed = (state.ended_at - state.started_at).total_seconds()
        meta_rows.append(("Elapsed", _format_elapsed(elapsed_seconds=elapsed)))
    meta_rows.extend(extra_rows or [])
    label_w = max(len(label) for label, _ in meta_rows)
    for label, value in meta_rows:
        typer.echo(f"  {_DIM}{label:<{label_w}}{_RESET}  {_WHITE}{value}{_RESET}")

    if state.error:
        typer.echo("")
        typer.echo(f"  {_RED}{_BOLD}Error:{_RESET} {state.error}")

    failed = [
        (item.id, side, result.error)
        for item in state.evaluations
        for side, result in (("A", item.result_a), ("B", item.result_b))
        if result.error
    ]
    if failed:
        typer.echo("")
        typer.echo(f"  {_YELLOW}{_BOLD}Failed generations  ({len(failed)} total){_RESET}")
        for item_id, side, error in failed[:10]:
            short = (error or "")[:60] + ("…" if len(error or "") > 60 else "")
            typer.echo(f"  {_DIM}[#{item_id} {side}]{_RESET} {short}")
        if len(failed) > 10:
            typer.echo(f"  {_DIM}… and {len(failed) - 10} more, see export{_RESET}")

    if stats.judged_count:
        _print_results_table(config=config, stats=stats)

    typer.echo("")
    _rule(color=_CYAN)
    typer.echo("")


async def _generate_then_judge(controller: EvaluationRunController) -> bool:
    if not await controller.run_generations():
        return False
    return await controller.run_judgments()


@app.command()
def run(
    config_path: Path = _CONFIG_ARG,
    output_dir: Path = typer.Option(
        Path("./results"),
        "--output-dir",
        "-o",
        help="Directory for export files",
    ),
    state_dir: Path = _STATE_DIR_OPT,
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Generate both skills' outputs for every prompt, then judge every pair."""
    _configure_structlog(log_format=log_format)
    with _cli_errors():
        config = _load_config(config_path)
        controller = _build_controller(config, state_dir, log_format)

        judged = asyncio.run(_generate_then_judge(controller))

        json_path, csv_path = _write_exports(output_dir, config, controller.state)
        _print_summary(
            config=config,
            state=controller.state,
            stats=controller.stats,
            title="Run Complete" if judged else "Run Incomplete",
            extra_rows=[("Export JSON", str(json_path)), ("Export CSV", str(csv_path))],
        )
        if not judged:
            sys.exit(1)


@app.command()
def generate(
    config_path: Path = _CONFIG_ARG,
    state_dir: Path = _STATE_DIR_OPT,
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Start a fresh batch and generate both outputs for every prompt."""
    _configure_structlog(log_format=log_format)
    with _cli_errors():
        config = _load_config(config_path)
        controller = _build_controller(config, state_dir, log_format)
        ok = asyncio.run(controller.run_generations())
        _print_summary(
            config=config,
            state=controller.state,
            stats=controller.stats,
            title="Generation Complete" if ok else "Generation Failed",
        )
        if not ok:
            sys.exit(1)


@app.command()
def judge(
    config_path: Path = _CONFIG_ARG,
    state_dir: Path = _STATE_DIR_OPT,
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Judge every generated pair in the persisted run that is not judged yet."""
    _configure_structlog(log_format=log_format)
    with _cli_errors():
        config = _load_config(config_path)
        controller = _build_controller(config, state_dir, log_format)
        ok = asyncio.run(controller.run_judgments())
        _print_summary(
            config=config,
            state=controller.state,
            stats=controller.stats,
            title="Judging Complete" if ok else "Judging Failed",
        )
        if not ok:
            sys.exit(1)


@app.command()
def status(
    config_path: Path = _CONFIG_ARG,
    state_dir: Path = _STATE_DIR_OPT,
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Print the aggregate statistics of the persisted run."""
    _configure_structlog(log_format=log_format)
    with _cli_errors():
        config = _load_config(config_path)
        controller = _build_controller(config, state_dir, log_format)
        _print_summary(
            config=config,
            state=controller.state,
            stats=controller.stats,
            title="Status",
            extra_rows=[("Can judge", "yes" if controller.stats.can_judge else "no")],
        )


@app.command()
def export(
    config_path: Path = _CONFIG_ARG,
    export_format: str = typer.Option(
        "json", "--format", "-f", help="Export format: 'json' or 'csv'"
    ),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write to this file instead of stdout"
    ),
    state_dir: Path = _STATE_DIR_OPT,
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Export the persisted run as JSON or CSV."""
    _configure_structlog(log_format=log_format)
    if export_format not in ("json", "csv"):
        typer.echo(f"Invalid export format: {export_format!r}. Must be 'json' or 'csv'.")
        raise typer.Exit(code=1)
    with _cli_errors():
        config = _load_config(config_path)
        controller = _build_controller(config, state_dir, log_format)
        evaluations = controller.state.evaluations
        if export_format == "json":
            text = json.dumps(build_export_json(config, evaluations), indent=2)
        else:
            text = build_export_csv(config, evaluations)
        if output is None:
            typer.echo(text)
        else:
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(text, encoding="utf-8")
            typer.echo(f"Wrote {output}")


@app.command()
def clear(
    config_path: Path = _CONFIG_ARG,
    state_dir: Path = _STATE_DIR_OPT,
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Discard the persisted run state."""
    _configure_structlog(log_format=log_format)
    with _cli_errors():
        config = _load_config(config_path)
        controller = _build_controller(config, state_dir, log_format)
        controller.clear()
        typer.echo(f"Cleared run state for {config.name}")


@app.command()
def suggest(
    skill_a_path: Path = typer.Argument(..., help="Path to the first skill document"),
    skill_b_path: Path = typer.Argument(..., help="Path to the second skill document"),
    output: Path = typer.Option(
        Path("skill-duel.yaml"), "--output", "-o", help="Where to write the config YAML"
    ),
    name: str = typer.Option("suggested", "--name", help="Config name"),
    prompt_count: int = typer.Option(
        50, "--prompt-count", min=1, help="Number of prompts to request"
    ),
    model: str = typer.Option(DEFAULT_MODEL, "--model", help="Model used to suggest"),
    api_key: str = typer.Option(
        "", "--api-key", envvar="ANTHROPIC_API_KEY", help="Model provider API key"
    ),
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Ask the model to propose criteria, prompts, and output type for two skills."""
    _configure_structlog(log_format=log_format)
    with _cli_errors():
        skills: list[SkillDocument] = []
        for path in (skill_a_path, skill_b_path):
            try:
                skills.append(
                    SkillDocument(name=path.name, content=path.read_text(encoding="utf-8"))
                )
            except OSError as exc:
                typer.echo(f"Failed to read skill file {path}: {exc}")
                sys.exit(1)

        suggester = ConfigSuggester(
            gateway=LiteLLMGateway(observer=StructlogGatewayObserver()),
            observer=StructlogSuggestionObserver(),
            model=model,
        )
        suggestion = asyncio.run(
            suggester.suggest(
                api_key=api_key,
                skill_a=skills[0],
                skill_b=skills[1],
                generation_type=GenerationType.ALL,
                prompt_count=prompt_count,
            )
        )

        base_dir = output.resolve().parent
        document = build_config_document(
            suggestion=suggestion,
            name=name,
            skill_a_path=Path(os.path.relpath(skill_a_path.resolve(), base_dir)),
            skill_b_path=Path(os.path.relpath(skill_b_path.resolve(), base_dir)),
        )
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(dump_config_yaml(document), encoding="utf-8")

        typer.echo(f"Wrote {output}")
        typer.echo(f"Output type: {suggestion.output_type.value}")
        if suggestion.output_type_reasoning:
            typer.echo(f"  {_DIM}{suggestion.output_type_reasoning}{_RESET}")
        typer.echo(f"Criteria: {len(suggestion.criteria)}  Prompts: {len(suggestion.prompts)}")
        for warning in suggestion.warnings:
            typer.echo(f"{_YELLOW}Warning:{_RESET} {warning}")
        if suggestion.generation_error:
            typer.echo(
                f"{_RED}Generation failed, wrote fallback config:{_RESET} "
                f"{suggestion.generation_error}"
            )
            sys.exit(1)


@app.command("renderer-health")
def renderer_health(
    config_path: Path = _CONFIG_ARG,
    log_format: str = _LOG_FORMAT_OPT,
) -> None:
    """Probe the screenshot service configured for visual evaluations."""
    _configure_structlog(log_format=log_format)
    with _cli_errors():
        config = _load_config(config_path)
        renderer = HttpRenderer(
            config=config.renderer, observer=StructlogRendererObserver()
        )
        health = asyncio.run(renderer.health())
        if not health.available:
            typer.echo(f"{_RED}Renderer unavailable:{_RESET} {health.error}")
            sys.exit(1)
        browser = {True: "running", False: "not started", None: "unknown"}[
            health.browser_running
        ]
        typer.echo(
            f"{_GREEN}Renderer available{_RESET}  "
            f"status={health.status or 'unknown'}  browser={browser}"
        )


if __name__ == "__main__":
    app()
