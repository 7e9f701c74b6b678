"""
specforge command line interface.

Usage:
    specforge component spec.md --constraint "Use TypeScript" -o out/
    specforge architecture tree.txt --schema schema.txt --db-type prisma -o out/
    specforge architecture tree.txt --base out/ -o out/
    specforge pipeline pipeline.json --context userInput="a todo list"

Providers are read from --config (JSON) or from OPENAI_API_KEY /
ANTHROPIC_API_KEY. Exit status is 1 when nothing was generated.
"""

import logging
import sys
from collections.abc import Callable
from functools import wraps
from pathlib import Path
from typing import Any, NoReturn, TypeVar

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from specforge import __version__
from specforge.application import (
    CircuitBreakerRegistry,
    CodeGenerationService,
    CodeParsingService,
    GenerationPipeline,
    NotificationEmitter,
)
from specforge.config import (
    Settings,
    create_providers,
    load_pipeline_config,
    load_settings,
)
from specforge.domain.exceptions import SpecforgeError
from specforge.domain.models import (
    CodeArtifact,
    ComponentSpec,
    GenerationStage,
    PhaseResult,
    new_artifact,
)
from specforge.infrastructure.notifications import ConsoleNotifier
from specforge.infrastructure.persistence import ArtifactWriter
from specforge.logging_setup import setup_logging

logger = logging.getLogger(__name__)

console = Console()
error_console = Console(stderr=True)

F = TypeVar("F", bound=Callable[..., Any])


def common_options(func: F) -> F:
    """
    Decorator adding common CLI options to a click command.

    Options added:
        --config: Path to settings JSON
        --output/-o: Directory to write generated files to
        --log-file: Path to log file
        -v/--verbose: Enable verbose logging
    """

    @click.option(
        "--config",
        "config_path",
        default=None,
        type=click.Path(exists=True, dir_okay=False),
        help="Path to settings JSON (default: environment variables)",
    )
    @click.option(
        "-o",
        "--output",
        default=None,
        type=click.Path(file_okay=False),
        help="Directory to write generated files to",
    )
    @click.option(
        "--log-file",
        default=None,
        type=click.Path(dir_okay=False),
        help="Path to log file",
    )
    @click.option(
        "-v",
        "--verbose",
        is_flag=True,
        help="Enable verbose (DEBUG) logging to console",
    )
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _fail(message: str, hint: str | None = None) -> NoReturn:
    error_console.print(f"[bold red]ERROR:[/bold red] {escape(message)}")
    if hint:
        error_console.print(f"[yellow]Hint:[/yellow] {escape(hint)}")
    sys.exit(1)


def _prepare(
    config_path: str | None, log_file: str | None, verbose: bool
) -> tuple[Settings, NotificationEmitter]:
    setup_logging(verbose=verbose, log_file=log_file)
    try:
        settings = load_settings(config_path)
    except SpecforgeError as e:
        _fail(str(e), "Check the settings file passed with --config")
    return settings, NotificationEmitter(ConsoleNotifier(console, error_console))


def _build_service(
    settings: Settings, notifications: NotificationEmitter
) -> CodeGenerationService:
    return CodeGenerationService(
        create_providers(settings),
        notifications=notifications,
        breakers=CircuitBreakerRegistry(
            failure_threshold=settings.breaker.failure_threshold,
            recovery_timeout=settings.breaker.recovery_timeout,
        ),
    )


def _print_artifact(artifact: CodeArtifact) -> None:
    table = Table(show_header=True, box=None)
    table.add_column("File", style="cyan")
    table.add_column("Lines", justify="right")
    for path, content in artifact.files.items():
        table.add_row(path, str(content.count("\n") + 1))
    console.print(table)
    console.print(
        f"[dim]Provider: {artifact.metadata.provider_used} | "
        f"Stage: {artifact.metadata.stage}[/dim]"
    )


def _finish(artifact: CodeArtifact | None, output: str | None) -> None:
    if artifact is None:
        _fail("No files were generated", "Run with -v for provider errors")
    _print_artifact(artifact)
    if output:
        written = ArtifactWriter(output).write(artifact)
        console.print(f"Wrote {len(written)} file(s) to {output}")


def _parse_context(pairs: tuple[str, ...]) -> dict[str, str]:
    context: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise click.BadParameter(
                f"expected KEY=VALUE, got '{pair}'", param_hint="--context"
            )
        context[key] = value
    return context


@click.group()
@click.version_option(__version__, prog_name="specforge")
def main() -> None:
    """Generate source files from specifications with LLM providers."""


@main.command()
@click.argument("spec_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--architecture",
    "architecture_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Architecture notes passed to every stage",
)
@click.option(
    "--constraint", "constraints", multiple=True, help="Additional constraint (repeatable)"
)
@common_options
def component(
    spec_file: str,
    architecture_file: str | None,
    constraints: tuple[str, ...],
    config_path: str | None,
    output: str | None,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Generate one component through analysis, architecture and implementation."""
    settings, notifications = _prepare(config_path, log_file, verbose)
    spec = ComponentSpec(
        specification=Path(spec_file).read_text(encoding="utf-8"),
        architecture=(
            Path(architecture_file).read_text(encoding="utf-8")
            if architecture_file
            else None
        ),
        constraints=constraints,
    )
    try:
        artifact = _build_service(settings, notifications).generate_component(spec)
        _finish(artifact, output)
    except SpecforgeError as e:
        logger.debug("Component generation failed", exc_info=True)
        _fail(str(e))


@main.command()
@click.argument("arch_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--schema",
    "schema_file",
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help="Database schema to generate database files from",
)
@click.option("--db-type", default=None, help="Database type (default: prisma)")
@click.option(
    "--base",
    "base_dir",
    default=None,
    type=click.Path(exists=True, file_okay=False),
    help="Previous output directory to generate on top of",
)
@click.option(
    "--constraint", "constraints", multiple=True, help="Additional constraint (repeatable)"
)
@common_options
def architecture(
    arch_file: str,
    schema_file: str | None,
    db_type: str | None,
    base_dir: str | None,
    constraints: tuple[str, ...],
    config_path: str | None,
    output: str | None,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Generate every file listed in an architecture tree.

    With --base, files of a previous run are kept and regenerated ones replace them.
    """
    settings, notifications = _prepare(config_path, log_file, verbose)
    schema = (
        Path(schema_file).read_text(encoding="utf-8")
        if schema_file
        else settings.database_schema
    )
    try:
        previous = ArtifactWriter(base_dir).read() if base_dir else None
        artifact = _build_service(
            settings, notifications
        ).generate_files_from_architecture(
            Path(arch_file).read_text(encoding="utf-8"),
            list(constraints),
            database_schema=schema,
            database_type=db_type or settings.database_type,
        )
        if artifact is not None and previous is not None:
            artifact = previous.merge(artifact)
        _finish(artifact, output)
    except SpecforgeError as e:
        logger.debug("Architecture generation failed", exc_info=True)
        _fail(str(e))


@main.command()
@click.argument("pipeline_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--context",
    "context_pairs",
    multiple=True,
    help="Initial context value as KEY=VALUE (repeatable)",
)
@common_options
def pipeline(
    pipeline_file: str,
    context_pairs: tuple[str, ...],
    config_path: str | None,
    output: str | None,
    log_file: str | None,
    verbose: bool,
) -> None:
    """Run a phase pipeline described in JSON.

    With --output, files parsed from the last phase's output are written.
    """
    initial_context = _parse_context(context_pairs)
    settings, notifications = _prepare(config_path, log_file, verbose)
    try:
        config = load_pipeline_config(pipeline_file)
        runner = GenerationPipeline(config, notifications)
        runner.register_providers(create_providers(settings))
        results = runner.execute(initial_context)
    except SpecforgeError as e:
        logger.debug("Pipeline failed", exc_info=True)
        _fail(str(e))

    _print_phase_results(results)

    last = results[config.phases[-1].name]
    files = CodeParsingService(notifications).parse_code_blocks(last.output)
    _finish(
        new_artifact(files, last.metadata.provider, GenerationStage.IMPLEMENTATION),
        output,
    )


def _print_phase_results(results: dict[str, PhaseResult]) -> None:
    table = Table(show_header=True, box=None)
    table.add_column("Phase", style="cyan")
    table.add_column("Provider", style="magenta")
    table.add_column("Retry", justify="right")
    table.add_column("Validation")
    for name, result in results.items():
        report = result.validation_report
        if report is None:
            status = "-"
        elif report.is_valid:
            status = "[green]valid[/green]"
        else:
            status = f"[red]{'; '.join(report.errors)}[/red]"
        table.add_row(
            name, result.metadata.provider, str(result.metadata.retry_count), status
        )
    console.print(table)


if __name__ == "__main__":
    main()
