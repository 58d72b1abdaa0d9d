"""CLI to grade an IELTS Task 2 essay with Gemini."""
import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ielts_coach.cli.common import add_logging_args, configure_logging, setup_gateway
from ielts_coach.models.grading import GradingReport, ScorePolicy
from ielts_coach.tools.errors import PipelineError
from ielts_coach.tools.handlers import grade_essay
from ielts_coach.tools.storage_io import save_model_json

console = Console()


def main():
    load_dotenv()
    parser = argparse.ArgumentParser(description="Grade an IELTS Task 2 essay")
    parser.add_argument("essay", type=Path, help="Text file containing the essay")
    parser.add_argument("--prompt", required=True, help="The Task 2 question the essay answers")
    parser.add_argument("--output", type=Path, help="Save the grading report as JSON")
    add_logging_args(parser)
    args = parser.parse_args()
    configure_logging(args)

    if not args.essay.exists():
        console.print(f"[red]Error: essay file not found: {args.essay}[/red]")
        sys.exit(1)

    essay = args.essay.read_text(encoding="utf-8")
    console.print(f"Grading essay ({len(essay.split())} words)...")

    try:
        score_policy = ScorePolicy.from_env()
    except ValueError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)

    try:
        gateway = setup_gateway()
        report = asyncio.run(grade_essay(gateway, essay, args.prompt, score_policy=score_policy))
    except (PipelineError, RuntimeError) as e:
        console.print(f"\n[red]✗ Grading failed: {e}[/red]")
        sys.exit(1)

    _show_report(report)

    if args.output:
        save_model_json(report, args.output)
        console.print(f"\nReport saved to {args.output}")


def _show_report(report: GradingReport):
    table = Table(title=f"Overall Band: {report.overall_score}")
    table.add_column("Criterion", style="cyan")
    table.add_column("Band", style="magenta", justify="right")

    table.add_row("Task Response", str(report.task_response))
    table.add_row("Coherence & Cohesion", str(report.coherence))
    table.add_row("Lexical Resource", str(report.lexical))
    table.add_row("Grammatical Range & Accuracy", str(report.grammar))
    console.print(table)

    console.print("\n[bold]Examiner feedback:[/bold]")
    for point in report.critique_points:
        console.print(f"  • {point}")

    console.print("\n[bold]Band 8.5+ rewrite:[/bold]")
    console.print(report.rewritten_essay)


if __name__ == "__main__":
    main()
