"""
Command-line interface for frog identification.

Usage:
    frog-finder match --targets photos/unknown --standards photos/known
    frog-finder match --targets photos/unknown/017_a_pond.png --standards photos/known --all
    frog-finder accuracy --targets photos/test --standards photos/known --output-dir reports
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from frog_finder.config import (
    ConfigurationError,
    Settings,
    get_safe_config,
    get_settings,
    load_settings,
    load_yaml_config,
)
from frog_finder.core.exceptions import FrogFinderError, TargetsEmpty
from frog_finder.logging import get_logger, setup_logging
from frog_finder.pipeline import create_batch_matcher
from frog_finder.services.accuracy import evaluate_accuracy
from frog_finder.services.batch import resolve_targets

if TYPE_CHECKING:
    from collections.abc import Sequence

    from frog_finder.models import AccuracyReport, BatchResultTable

console = Console()
logger = get_logger("cli")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2


def ratio_type(value: str) -> float:
    """Parse a Lowe ratio, which must lie in (0, 1]."""
    ratio = float(value)
    if not 0.0 < ratio <= 1.0:
        raise argparse.ArgumentTypeError(f"ratio must be in (0, 1], got {value}")
    return ratio


def workers_type(value: str) -> int:
    """Parse a thread count, which must be at least 1."""
    workers = int(value)
    if workers < 1:
        raise argparse.ArgumentTypeError(f"workers must be at least 1, got {value}")
    return workers


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="frog-finder",
        description="Identify individual frogs by matching photos against labeled standards",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to config.yaml (default: $FROG_FINDER_CONFIG or ./config.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--targets",
        type=Path,
        required=True,
        help="Target image file, or directory of target images",
    )
    common.add_argument(
        "--standards",
        type=Path,
        required=True,
        help="Directory of standard images named <id>_<tag>_<suffix>.<ext>",
    )
    common.add_argument(
        "--ratio",
        type=ratio_type,
        default=None,
        help="Lowe ratio in (0, 1] (default: matching.ratio from config)",
    )
    common.add_argument(
        "--workers",
        type=workers_type,
        default=None,
        help="Threads used to score standards (default: batch.workers from config)",
    )

    match_parser = subparsers.add_parser(
        "match",
        parents=[common],
        help="Rank standards for each target",
    )
    match_parser.add_argument(
        "--all",
        action="store_true",
        help="Report every standard per target instead of the best match only",
    )
    match_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write the result table to this CSV file",
    )

    accuracy_parser = subparsers.add_parser(
        "accuracy",
        parents=[common],
        help="Match targets with known identities and report accuracy",
    )
    accuracy_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Write results.csv, confusion_matrix.csv and accuracy.json here",
    )

    return parser


def load_cli_settings(config_path: Path | None) -> Settings:
    """Load settings from an explicit path or the default location."""
    if config_path is not None:
        return load_settings(load_yaml_config(config_path))
    return get_settings()


def render_results(table: BatchResultTable) -> Table:
    """Render batch results as a rich table."""
    title = "Best Matches" if table.best_only else "Ranked Matches"
    rich_table = Table(title=title)
    rich_table.add_column("Target", style="cyan")
    rich_table.add_column("Standard", style="yellow")
    rich_table.add_column("Match Quality", style="green", justify="right")
    rich_table.add_column("Standard Image", style="dim")

    for row in table:
        quality = str(row.outcome)
        if not row.outcome.is_computable:
            quality = f"[red]{quality}[/red]"
        rich_table.add_row(row.target.name, row.standard.name, quality, str(row.standard_path))

    return rich_table


def render_accuracy(report: AccuracyReport) -> Table:
    """Render the confusion matrix as a rich table."""
    crosstab = report.to_crosstab()
    rich_table = Table(title=f"Confusion Matrix ({report.correct}/{report.total} correct)")
    rich_table.add_column("True \\ Predicted", style="cyan")
    for predicted_id in crosstab.columns:
        rich_table.add_column(str(predicted_id), justify="right")

    for true_id, counts in crosstab.iterrows():
        cells = []
        for predicted_id, count in counts.items():
            cell = str(int(count))
            if true_id == predicted_id and count > 0:
                cell = f"[green]{cell}[/green]"
            cells.append(cell)
        rich_table.add_row(str(true_id), *cells)

    return rich_table


def run_batch(
    args: argparse.Namespace,
    settings: Settings,
    best_only: bool,
) -> BatchResultTable:
    """Run a batch with a progress bar."""
    ratio = args.ratio if args.ratio is not None else settings.matching.ratio
    matcher = create_batch_matcher(settings, workers=args.workers)
    total = len(resolve_targets(args.targets))

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
    ) as progress:
        task = progress.add_task("Matching targets", total=total)
        return matcher.match(
            args.targets,
            args.standards,
            ratio,
            best_only,
            on_target=lambda _ranked: progress.advance(task),
        )


def cmd_match(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the match command."""
    best_only = settings.batch.best_only and not args.all
    table = run_batch(args, settings, best_only=best_only)
    console.print(render_results(table))

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        table.to_dataframe().to_csv(args.output, index=False)
        console.print(f"[green]Results written to {args.output}[/green]")

    return EXIT_OK


def cmd_accuracy(args: argparse.Namespace, settings: Settings) -> int:
    """Handle the accuracy command."""
    table = run_batch(args, settings, best_only=True)
    if len(table) == 0:
        raise TargetsEmpty(args.targets)
    report = evaluate_accuracy(table)

    console.print(render_results(table))
    console.print(render_accuracy(report))
    console.print(f"[bold]Percent correct:[/bold] {report.percent_correct:.1%}")

    if args.output_dir is not None:
        args.output_dir.mkdir(parents=True, exist_ok=True)
        table.to_dataframe().to_csv(args.output_dir / "results.csv", index=False)
        report.to_crosstab().to_csv(args.output_dir / "confusion_matrix.csv")
        summary = {
            "percent_correct": report.percent_correct,
            "correct": report.correct,
            "total": report.total,
        }
        (args.output_dir / "accuracy.json").write_text(json.dumps(summary, indent=2))
        console.print(f"[green]Reports written to {args.output_dir}[/green]")

    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = load_cli_settings(args.config)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error: {e}[/red]")
        return EXIT_CONFIG_ERROR

    setup_logging(settings.logging.level)
    logger.debug("Loaded configuration", extra={"config": get_safe_config(settings)})

    try:
        if args.command == "match":
            return cmd_match(args, settings)
        return cmd_accuracy(args, settings)
    except FrogFinderError as e:
        console.print(f"[red]Error: {e.message}[/red]")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
