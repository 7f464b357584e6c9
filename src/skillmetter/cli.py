"""CLI for Skillmetter.

Commands:
- compare: Compare two users and print the verdict (or the JSON bundle)
- score: Score a single user and show the assigned title
- batch: Compare every pair in a CSV file and write verdict rows
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import typer
from rich import print as rprint
from rich.markup import escape

from .application.batch import run_batch_compare
from .application.compare import ComparisonResult, ComparisonService, ScoreReport
from .application.serialization import comparison_to_payload, score_report_to_payload
from .config import ProfileSourceEnvVarError, SkillmetterConfig
from .domain.aggregation import METRIC_ORDER
from .domain.comparison import Winner
from .domain.profiles import DOMAIN_COLORS, DOMAIN_LABELS, CyberDomain
from .exceptions import SkillmetterError
from .observability import set_log_level
from .protocols import FileSystem, ProfileSource, RequestGate


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: SkillmetterConfig, throttled: bool) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem
    profile_source: ProfileSource
    request_gate: RequestGate | None


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: SkillmetterConfig
    deps_builder: DependenciesBuilder

    def resolve_config(self, source: str | None) -> SkillmetterConfig:
        """Apply a ``--source`` override, reporting bad values as a usage error."""
        if source is None:
            return self.config
        try:
            return self.config.with_overrides(profile_source=source)
        except ProfileSourceEnvVarError as exc:
            raise typer.BadParameter(str(exc), param_hint="--source") from exc

    def build_service(
        self, *, source: str | None, throttled: bool
    ) -> tuple[ComparisonService, CliDependencies]:
        deps = self.deps_builder(config=self.resolve_config(source), throttled=throttled)
        service = ComparisonService(
            profile_source=deps.profile_source, request_gate=deps.request_gate
        )
        return service, deps


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the skillmetter entry point.")


DEFAULT_BATCH_INPUT = Path("data/pairs.csv")
DEFAULT_BATCH_OUTPUT = Path("data/verdicts.csv")

SourceOption = Annotated[
    str | None,
    typer.Option(
        "--source",
        "-s",
        help="Profile source: api (live TryHackMe) or mock (seeded demo data)",
    ),
]


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _fail(error: Exception) -> typer.Exit:
    rprint(f"[red]✗ {escape(str(error))}[/red]")
    return typer.Exit(code=1)


def _print_comparison(result: ComparisonResult) -> None:
    verdict = result.verdict
    user1, user2 = result.user1.username, result.user2.username
    if verdict.winner is Winner.TIE:
        rprint("[bold yellow]⚖ It's a tie![/bold yellow]")
    else:
        rprint(f"[bold green]🏆 Winner: {verdict.winner_username}[/bold green]")
    rprint(f"  {verdict.summary}")
    rprint(f"  Closeness: {verdict.margin}/100")
    rprint("")
    for username, title, scores in (
        (user1, verdict.user1_title, result.user1_scores),
        (user2, verdict.user2_title, result.user2_scores),
    ):
        rprint(f"[bold]{username}[/bold] {title.icon} {title.title}: {scores.total_score:.2f}")
    rprint("")
    for comparison in result.metric_comparisons:
        marker = {Winner.USER1: "◀", Winner.USER2: "▶", Winner.TIE: "="}[comparison.winner]
        rprint(
            f"  {comparison.label:<22} {comparison.user1_value:>10,.2f} {marker} "
            f"{comparison.user2_value:<10,.2f} (weight {comparison.weight:.0%})"
        )
    for username, strengths, insights in (
        (user1, verdict.user1_strengths, result.user1_insights),
        (user2, verdict.user2_strengths, result.user2_insights),
    ):
        rprint("")
        rprint(f"[bold]{username}[/bold] strengths: {', '.join(strengths) or 'none'}")
        for insight in insights:
            rprint(f"  {insight.icon} {insight.message}")
    rprint("")
    rprint(f"  Share id: {result.share_id}")


def _domain(domain: CyberDomain) -> str:
    return f"[{DOMAIN_COLORS[domain]}]{DOMAIN_LABELS[domain]}[/]"


def _print_score(report: ScoreReport) -> None:
    profile, scores, title = report.profile, report.scores, report.title
    rprint(f"[bold]{profile.username}[/bold] {title.icon} {title.title}")
    rprint(f"  {title.description}")
    rprint(f"  Total: {scores.total_score:.2f}")
    for metric in METRIC_ORDER:
        rprint(f"  {metric.value:<10} {scores.for_metric(metric):>6.2f}")
    rprint(
        f"  Top domains: {_domain(profile.dominant_domain)}, "
        f"{_domain(profile.secondary_domain)}"
    )


def create_app(deps_builder: DependenciesBuilder) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder."""
    app = typer.Typer(
        add_completion=False,
        help="Skillmetter: compare two TryHackMe profiles and get an explainable verdict",
    )

    @app.callback()
    def main(
        ctx: typer.Context,
        verbose: Annotated[
            bool,
            typer.Option("--verbose", "-v", help="Enable debug logging"),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        if verbose:
            set_log_level("DEBUG")
        ctx.obj = CliContext(config=SkillmetterConfig.from_env(), deps_builder=deps_builder)

    @app.command()
    def compare(
        ctx: typer.Context,
        user1: Annotated[str, typer.Argument(help="First username")],
        user2: Annotated[str, typer.Argument(help="Second username")],
        source: SourceOption = None,
        json_output: Annotated[
            bool,
            typer.Option("--json", help="Print the full comparison bundle as JSON"),
        ] = False,
        output: Annotated[
            Path | None,
            typer.Option("--output", "-o", help="Also write the JSON bundle to this path"),
        ] = None,
    ) -> None:
        """Compare two users and print the verdict."""
        state = _get_context(ctx)
        service, deps = state.build_service(source=source, throttled=True)
        try:
            result = service.compare(user1, user2)
        except SkillmetterError as exc:
            raise _fail(exc) from exc

        payload = comparison_to_payload(result)
        if output is not None:
            deps.fs.write_json(payload, output)
        if json_output:
            typer.echo(json.dumps(payload, ensure_ascii=False, indent=2))
            return
        _print_comparison(result)
        if output is not None:
            rprint(f"[green]✓ Saved:[/green] {output}")

    @app.command()
    def score(
        ctx: typer.Context,
        username: Annotated[str, typer.Argument(help="Username to score")],
        source: SourceOption = None,
        json_output: Annotated[
            bool,
            typer.Option("--json", help="Print the profile, scores and title as JSON"),
        ] = False,
    ) -> None:
        """Score a single user and show the assigned title."""
        state = _get_context(ctx)
        service, _ = state.build_service(source=source, throttled=False)
        try:
            report = service.score(username)
        except SkillmetterError as exc:
            raise _fail(exc) from exc
        if json_output:
            typer.echo(json.dumps(score_report_to_payload(report), ensure_ascii=False, indent=2))
            return
        _print_score(report)

    @app.command()
    def batch(
        ctx: typer.Context,
        pairs_path: Annotated[
            Path,
            typer.Option("--input", "-i", help="CSV with user1,user2 columns"),
        ] = DEFAULT_BATCH_INPUT,
        out_path: Annotated[
            Path,
            typer.Option("--output", "-o", help="Output path for verdict rows"),
        ] = DEFAULT_BATCH_OUTPUT,
        source: SourceOption = None,
        progress: Annotated[
            bool,
            typer.Option("--progress/--no-progress", help="Show a progress bar"),
        ] = True,
    ) -> None:
        """Compare every pair in a CSV file and write one verdict row per pair."""
        state = _get_context(ctx)
        service, deps = state.build_service(source=source, throttled=False)
        try:
            summary = run_batch_compare(
                pairs_path, out_path, service=service, fs=deps.fs, show_progress=progress
            )
        except SkillmetterError as exc:
            raise _fail(exc) from exc
        rprint(f"[green]✓ Batch complete:[/green] {summary.out_path}")
        rprint(f"  {summary.total:,} pairs → {summary.succeeded:,} ok, {summary.failed:,} failed")

    return app
