"""
Typer CLI for the TypeQuest engine.

Commands:
    typequest replay LOG.json        - Replay a recorded keystroke log
    typequest drill KEYS             - Preview drills generated for a set of keys
    typequest lessons                - List the built-in curriculum
    typequest wpm                    - Compute WPM from raw counters

Usage:
    typequest --help
    typequest replay sessions/home_row.json
    typequest drill fj --difficulty 1.2 --seed 7
    typequest lessons --stage 2
    typequest wpm --chars 250 --errors 3 --seconds 60
"""

from __future__ import annotations

import random
import sys
from pathlib import Path

import typer
from loguru import logger
from pydantic import ValidationError
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from typequest import __version__
from typequest.analytics import metrics_calculator as calc
from typequest.config import get_settings
from typequest.core.errors import TypeQuestError
from typequest.core.models import Exercise
from typequest.curriculum.catalog import STAGE_NAMES, CurriculumContentStore
from typequest.curriculum.exercise_generator import ContextLevel, ExerciseGenerator
from typequest.session.engine import SessionState
from typequest.session.replay import load_replay, replay

app = typer.Typer(
    help="TypeQuest engine developer CLI: replay sessions and preview generated drills",
    no_args_is_help=True,
)

console = Console()


def _configure_logging(verbose: bool) -> None:
    settings = get_settings()
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else settings.log_level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """
    TypeQuest typing engine.

    Deterministic metrics, lesson verdicts and drill generation.
    """
    _configure_logging(verbose)


# ========================================
# REPLAY
# ========================================


@app.command("replay")
def replay_command(
    log_path: Path = typer.Argument(..., help="JSON keystroke log to replay"),
) -> None:
    """
    Replay a recorded keystroke log and print the resulting metrics.

    Replays are deterministic: the same log always produces the same numbers.
    """
    try:
        log = load_replay(log_path)
    except FileNotFoundError:
        rprint(f"[red]✗[/red] Log file not found: {log_path}")
        raise typer.Exit(1)
    except ValidationError as e:
        rprint(f"[red]✗[/red] Invalid replay log: {e.error_count()} error(s)")
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"])
            rprint(f"  {location}: {error['msg']}")
        raise typer.Exit(1)

    try:
        engine = replay(log)
    except TypeQuestError as e:
        rprint(f"[red]✗[/red] Replay failed: {e}")
        raise typer.Exit(1)

    table = Table(title=f"Replay: {log_path.name}", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    table.add_row("State", engine.state.value)
    table.add_row("Progress", f"{engine.cursor}/{len(engine.text)}")
    table.add_row("Elapsed", f"{engine.elapsed_seconds:.1f}s")
    table.add_row("WPM", f"{engine.wpm:.1f}")
    table.add_row("Accuracy", f"{engine.accuracy:.1f}%")
    table.add_row("Raw accuracy", f"{engine.raw_accuracy:.1f}%")
    table.add_row("Corrected accuracy", f"{engine.corrected_accuracy:.1f}%")
    table.add_row("Errors", str(engine.error_count))
    table.add_row("Backspaces", str(engine.backspace_count))
    if engine.result is not None:
        table.add_row("Consistency", f"{engine.result.consistency:.2f}")
        table.add_row("Timed out", "yes" if engine.result.timed_out else "no")
    console.print(table)

    ranked = engine.key_stats.ranked()
    if ranked:
        keys = Table(title="Key Statistics", show_header=True)
        keys.add_column("Key", style="cyan")
        keys.add_column("Presses", justify="right")
        keys.add_column("Errors", justify="right", style="red")
        keys.add_column("Avg latency", justify="right")
        keys.add_column("Struggle", justify="right", style="yellow")
        for stat in ranked:
            keys.add_row(
                repr(stat.key),
                str(stat.press_count),
                str(stat.error_count) if stat.error_count else "-",
                f"{stat.avg_latency:.2f}s",
                f"{stat.struggle_score:.1f}",
            )
        console.print(keys)

    if engine.state != SessionState.COMPLETED:
        rprint("\n[yellow]⚠[/yellow] Log ended before the session completed")


# ========================================
# DRILL
# ========================================


def _exercise_row(table: Table, name: str, exercise: Exercise) -> None:
    target = exercise.target_metric
    table.add_row(
        name,
        exercise.type.value,
        f"{target.metric.value} >= {target.threshold:g}",
        str(exercise.repetitions),
        f"{exercise.time_limit}s" if exercise.time_limit else "-",
        exercise.content,
    )


@app.command("drill")
def drill_command(
    keys: str = typer.Argument(..., help="Keys to drill, e.g. 'fj' or 'asdf'"),
    difficulty: float = typer.Option(1.0, "--difficulty", "-d", help="Difficulty multiplier (1.0-2.5)"),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Random seed for reproducible drills"),
) -> None:
    """
    Preview the drills generated for a set of keys.

    Examples:
        typequest drill fj
        typequest drill qwe --difficulty 1.5 --seed 42
    """
    settings = get_settings()
    key_list = [k for k in keys.lower() if not k.isspace()]
    if not key_list:
        rprint("[red]✗[/red] No keys given")
        raise typer.Exit(1)

    rng = random.Random(seed if seed is not None else settings.random_seed)
    generator = ExerciseGenerator(rng=rng, settings=settings)
    ngrams = generator.adaptive_ngrams(key_list)

    table = Table(title=f"Drills for {''.join(key_list).upper()}", show_header=True)
    table.add_column("Drill", style="cyan")
    table.add_column("Type")
    table.add_column("Target")
    table.add_column("Reps", justify="right")
    table.add_column("Limit", justify="right")
    table.add_column("Content", overflow="fold")

    _exercise_row(
        table, "Anchor", generator.anchor_drill(key_list, difficulty, settings.anchor_drill_seconds)
    )
    _exercise_row(
        table, "N-grams", generator.ngram_drill(ngrams, ContextLevel.ISOLATED, difficulty)
    )
    _exercise_row(table, "Words", generator.word_drill(allowed_keys=key_list))
    console.print(table)

    lesson = generator.adaptive_lesson(key_list)
    rprint(f"\n[bold]{lesson.name}[/bold] ({lesson.id})")
    rprint(f"  {lesson.content_pattern}")


# ========================================
# LESSONS
# ========================================


@app.command("lessons")
def lessons_command(
    stage: int | None = typer.Option(None, "--stage", help="Only show one stage"),
) -> None:
    """List the built-in curriculum with passing requirements."""
    store = CurriculumContentStore()
    stage_ids = [stage] if stage is not None else store.stage_ids()

    for stage_id in stage_ids:
        lessons = store.lessons(stage_id)
        if not lessons:
            rprint(f"[yellow]⚠[/yellow] No lessons in stage {stage_id}")
            continue

        table = Table(title=f"Stage {stage_id}: {STAGE_NAMES.get(stage_id, '')}", show_header=True)
        table.add_column("ID", style="cyan")
        table.add_column("Lesson")
        table.add_column("Difficulty")
        table.add_column("Min WPM", justify="right")
        table.add_column("Min Acc", justify="right")
        table.add_column("Keys")
        table.add_column("Gate", justify="center")

        for lesson in lessons:
            requirements = lesson.passing_requirements
            table.add_row(
                lesson.id,
                lesson.name,
                lesson.difficulty.value,
                f"{requirements.min_wpm:g}",
                f"{requirements.min_accuracy:g}%",
                " ".join(lesson.required_keys or []) or "-",
                "★" if lesson.is_gatekeeper else "",
            )
        console.print(table)


# ========================================
# WPM
# ========================================


@app.command("wpm")
def wpm_command(
    chars: int = typer.Option(..., "--chars", "-c", min=0, help="Characters typed"),
    errors: int = typer.Option(0, "--errors", "-e", min=0, help="Uncorrected errors"),
    seconds: float = typer.Option(..., "--seconds", "-t", help="Elapsed seconds"),
) -> None:
    """Compute net words per minute from raw counters."""
    value = calc.wpm(chars, errors, seconds, word_length=get_settings().standard_word_length)
    rprint(f"[bold]{value:.1f}[/bold] WPM")


@app.command("version")
def version() -> None:
    """Show version information."""
    rprint(f"[bold]typequest-engine[/bold] v{__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
