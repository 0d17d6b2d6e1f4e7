"""CLI commands for running the trend miner outside the web API.

Commands Overview:
- init-db: Create the service-owned tables
- reset-db: Drop and recreate them (saved patterns and run history are lost)
- mine: Run a custom model and print its patterns and today's matches
- check-patterns: Check a user's saved patterns against a day's slate
- settle: Copy final outcomes onto tracked matches
- roi: Recompute ROI for every saved pattern
- serve: Start the API server with uvicorn

Useful for scheduled jobs (check, settle and ROI run once a day) and for
exploring feature sets from a terminal.
"""

import json
import logging
from datetime import datetime

import typer
from rich.console import Console
from rich.table import Table

from trendminer.config import settings
from trendminer.database.connection import get_session_context
from trendminer.database.init_db import create_database, reset_database
from trendminer.mining.exceptions import TrendMinerError
from trendminer.mining.roi import PatternROIService
from trendminer.mining.saved_patterns import SavedPatternService
from trendminer.mining.service import TrendMiningService

logger = logging.getLogger(__name__)

# Create CLI app and console for rich output
app = typer.Typer(help="Trend pattern mining and matching")
console = Console()


def _parse_date(value: str | None):
    return datetime.strptime(value, "%Y-%m-%d").date() if value else None


def _fail(error: Exception) -> None:
    console.print(f"❌ {error}", style="red")
    raise typer.Exit(1) from error


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")) -> None:
    logging.basicConfig(level=logging.DEBUG if verbose else settings.log_level)


@app.command("init-db")
def init_db() -> None:
    """Create the database tables this service owns."""
    create_database()
    console.print("✅ Database tables created", style="green")


@app.command("reset-db")
def reset_db(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Drop and recreate the service-owned tables."""
    if not yes:
        typer.confirm("Drop all saved patterns, daily matches and model runs?", abort=True)
    reset_database()
    console.print("✅ Database reset", style="green")


@app.command()
def mine(
    model_name: str = typer.Option(..., help="Display name for the run"),
    feature: list[str] = typer.Option(..., "--feature", "-f", help="Feature to mine over (repeatable)"),
    target: str = typer.Option("moneyline", help="moneyline, runline or over_under"),
    game_date: str = typer.Option(None, help="Slate date to match (YYYY-MM-DD, default today in UTC)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw JSON result"),
) -> None:
    """Mine trend patterns for a feature set and match today's games."""
    try:
        with get_session_context() as session:
            result = TrendMiningService(session).run_custom_model(
                model_name, list(feature), target, _parse_date(game_date)
            )
            payload = result.to_dict()
    except TrendMinerError as e:
        _fail(e)

    if as_json:
        typer.echo(json.dumps(payload, indent=2))
        return

    console.print(f"Model {payload['model_id']} ({payload['target']})")
    if not payload["trend_matches"]:
        console.print("😞 No patterns cleared the sample and skew filters.", style="yellow")
        return

    table = Table(title=f"📈 Top {len(payload['trend_matches'])} patterns")
    table.add_column("Combo", style="cyan")
    table.add_column("Features", style="magenta")
    table.add_column("Games", justify="right")
    table.add_column("Win %", justify="right", style="green")
    for trend in payload["trend_matches"]:
        table.add_row(
            trend["combo"],
            ", ".join(trend["features"]),
            str(trend["games"]),
            f"{trend['win_pct']:.1%}",
        )
    console.print(table)

    table = Table(title=f"🎯 {len(payload['today_matches'])} matches today")
    table.add_column("Game", style="cyan")
    table.add_column("Matchup")
    table.add_column("Combo", style="magenta")
    table.add_column("Win %", justify="right", style="green")
    for match in payload["today_matches"]:
        table.add_row(
            match["unique_id"],
            f"{match['primary_team']} vs {match['opponent_team']}",
            match["combo"],
            f"{match['win_pct']:.1%}",
        )
    console.print(table)


@app.command("check-patterns")
def check_patterns(
    user_id: str = typer.Option(..., help="Owner of the saved patterns"),
    game_date: str = typer.Option(None, help="Slate date (YYYY-MM-DD, default today in UTC)"),
) -> None:
    """Check a user's saved patterns against a day's slate."""
    try:
        with get_session_context() as session:
            matches = SavedPatternService(session).check_saved_patterns(user_id, _parse_date(game_date))
    except TrendMinerError as e:
        _fail(e)

    console.print(f"🔍 Found {len(matches)} matches")
    for match in matches:
        console.print(f"   • {match['pattern_name']}: {match['primary_team']} vs {match['opponent_team']}")


@app.command()
def settle() -> None:
    """Copy final outcomes onto tracked daily matches."""
    try:
        with get_session_context() as session:
            settled = SavedPatternService(session).settle_daily_matches()
    except TrendMinerError as e:
        _fail(e)
    console.print(f"✅ Settled {settled} matches", style="green")


@app.command()
def roi() -> None:
    """Recompute ROI for every saved pattern."""
    try:
        with get_session_context() as session:
            calculations = [c.to_dict() for c in PatternROIService(session).recalculate_all()]
    except TrendMinerError as e:
        _fail(e)

    table = Table(title=f"💰 Pattern ROI ({len(calculations)} patterns)")
    table.add_column("Pattern", style="cyan")
    table.add_column("Games", justify="right")
    table.add_column("Record", justify="center")
    table.add_column("Avg ROI", justify="right", style="bright_green")
    for calculation in calculations:
        table.add_row(
            str(calculation["saved_pattern_id"]),
            str(calculation["total_games"]),
            f"{calculation['wins']}-{calculation['losses']}",
            f"{calculation['average_roi_percentage']:+.2f}%",
        )
    console.print(table)


@app.command()
def serve(
    host: str = typer.Option(settings.api_host, help="Host to bind"),
    port: int = typer.Option(settings.api_port, help="Port to bind"),
    reload: bool = typer.Option(settings.api_reload, help="Auto-reload on code changes"),
) -> None:
    """Start the API server."""
    import uvicorn

    uvicorn.run("trendminer.api.main:app", host=host, port=port, reload=reload)
