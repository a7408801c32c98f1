"""Command-line interface for the training engine."""
import json

import click
from rich.console import Console
from rich.table import Table

from vocabtrainer.config import settings
from vocabtrainer.exceptions import TrainingError
from vocabtrainer.logging_config import setup_logging
from vocabtrainer.models.base import SessionLocal, init_db
from vocabtrainer.models.training_models import MasteryLevel, ReviewMode, TrainingResult
from vocabtrainer.monitoring import start_metrics_server
from vocabtrainer.services.training_service import TrainingService
from vocabtrainer.services.word_service import WordService

console = Console()

REVIEW_MODES = [mode.name for mode in ReviewMode]
RESULTS = [result.name for result in TrainingResult]
MASTERY_LEVELS = [level.name for level in MasteryLevel]


def _fail(error: TrainingError) -> None:
    console.print(f"\n[bold red]Error:[/bold red] {error.message}\n")
    raise click.Abort()


def _print_session(view, as_json: bool) -> None:
    if as_json:
        click.echo(json.dumps(view.to_dict(), indent=2, ensure_ascii=False))
        return

    status = "completed" if view.completed_at else "in progress"
    console.print(
        f"\n[bold cyan]Session {view.id}[/bold cyan] "
        f"({view.review_mode.name}, {status})"
    )
    console.print(f"Correct answers: {view.correct_answers}/{view.total_words}")

    if view.words:
        table = Table()
        table.add_column("#", style="dim", no_wrap=True)
        table.add_column("Word ID", style="cyan")
        table.add_column("Text", style="white")
        table.add_column("Translation", style="magenta")
        table.add_column("Level", style="green")
        for position, word in enumerate(view.words):
            table.add_row(
                str(position),
                str(word.id),
                word.text,
                word.translation or "",
                word.mastery_level.name,
            )
        console.print(table)
    console.print()


@click.group()
@click.version_option(version="0.1.0", prog_name="vocabtrainer")
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
@click.option("--metrics", is_flag=True, help="Expose Prometheus metrics while the command runs")
def cli(log_level, metrics):
    """Spaced-repetition training sessions for vocabulary."""
    setup_logging(level=log_level or settings.logging.level)
    init_db()
    if metrics:
        start_metrics_server()


@cli.command("init-db")
def init_db_command():
    """Create the database tables."""
    init_db()
    console.print(f"Database initialized at [cyan]{settings.database.url}[/cyan]")


@cli.command("add-word")
@click.argument("text")
@click.option("--translation", "-t", default=None, help="Translation of the word")
@click.option("--level", type=click.Choice(MASTERY_LEVELS, case_sensitive=False),
              default=MasteryLevel.NEW.name, help="Initial mastery level")
def add_word(text, translation, level):
    """Add a word to the vocabulary."""
    with SessionLocal() as db:
        word = WordService(db).create_word(text, translation, MasteryLevel[level.upper()])
        console.print(f"Added word [cyan]{word.id}[/cyan]: {word.text}")


@cli.command()
@click.option("--mode", "-m", type=click.Choice(REVIEW_MODES, case_sensitive=False),
              default=ReviewMode.MIXED.name, help="Review mode")
@click.option("--length", "-n", type=int, default=None, help="Number of words to review")
@click.option("--json", "as_json", is_flag=True, help="Print the session as JSON")
def start(mode, length, as_json):
    """Start a new training session."""
    with SessionLocal() as db:
        service = TrainingService(db)
        try:
            session = service.start_session(mode, length)
            _print_session(service.get_session_view(session.id), as_json)
        except TrainingError as e:
            _fail(e)


@cli.command()
@click.argument("session_id", type=int)
@click.argument("word_id", type=int)
@click.argument("result", type=click.Choice(RESULTS, case_sensitive=False))
def record(session_id, word_id, result):
    """Record the result of one answered word."""
    with SessionLocal() as db:
        try:
            TrainingService(db).record_result(session_id, word_id, result)
        except TrainingError as e:
            _fail(e)
        console.print(f"Recorded {result.upper()} for word {word_id} in session {session_id}")


@cli.command()
@click.argument("session_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the session as JSON")
def complete(session_id, as_json):
    """Complete a training session."""
    with SessionLocal() as db:
        service = TrainingService(db)
        try:
            service.complete_session(session_id)
            _print_session(service.get_session_view(session_id), as_json)
        except TrainingError as e:
            _fail(e)


@cli.command()
@click.argument("session_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the session as JSON")
def show(session_id, as_json):
    """Show a training session and its words."""
    with SessionLocal() as db:
        try:
            view = TrainingService(db).get_session_view(session_id)
        except TrainingError as e:
            _fail(e)
        _print_session(view, as_json)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print statistics as JSON")
def stats(as_json):
    """Show statistics over completed sessions."""
    with SessionLocal() as db:
        training_stats = TrainingService(db).get_training_stats()

    if as_json:
        click.echo(json.dumps(training_stats.to_dict(), indent=2))
        return

    console.print("\n[bold cyan]Training Statistics[/bold cyan]\n")
    console.print(f"Completed sessions: {training_stats.total_sessions}")
    console.print(f"Words reviewed: {training_stats.total_words_reviewed}")
    console.print(f"Average accuracy: {training_stats.average_accuracy:.2f}%")

    if training_stats.accuracy_by_review_mode:
        console.print("\n[bold]Accuracy by review mode:[/bold]")
        for mode, value in training_stats.accuracy_by_review_mode.items():
            console.print(f"  • {mode.name}: {value:.2f}%")

    if training_stats.recent_sessions:
        table = Table(title="\nRecent Sessions")
        table.add_column("ID", style="cyan", no_wrap=True)
        table.add_column("Completed", style="white")
        table.add_column("Mode", style="magenta")
        table.add_column("Correct", style="green")
        table.add_column("Accuracy", style="green")
        for session in training_stats.recent_sessions:
            table.add_row(
                str(session.id),
                session.completed_at.strftime("%Y-%m-%d %H:%M"),
                session.review_mode.name,
                f"{session.correct_answers}/{session.total_words}",
                f"{session.accuracy:.1f}%",
            )
        console.print(table)
    console.print()


@cli.command()
@click.argument("count", type=int)
def prune(count):
    """Delete the COUNT oldest training sessions."""
    with SessionLocal() as db:
        try:
            deleted = TrainingService(db).prune_oldest_sessions(count)
        except TrainingError as e:
            _fail(e)
        console.print(f"Deleted {deleted} training sessions")


if __name__ == "__main__":
    cli()
