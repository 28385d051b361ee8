#!/usr/bin/env python3
"""
Command-line interface for the opportunity tracker.

Data is stored per signed-in user in a JSON key-value store
(default ~/.optrack/store.json, override with OPTRACK_STORE).

Commands:
    signin    - Sign in as a user (namespaces all stored data)
    signout   - Forget the signed-in user
    whoami    - Show the signed-in user
    add       - Add an opportunity (optionally prefilled from its URL)
    list      - List opportunities with eligibility status
    update    - Edit fields of one opportunity
    delete    - Delete one opportunity
    clear     - Delete every opportunity (asks for confirmation)
    profile   - Show or edit the eligibility profile
    check     - Show the eligibility assessment for one opportunity
    dashboard - Show counts, next actions, watchlist, and deadline radar
    extract   - Fetch a listing URL and print the extracted fields
    export    - Export opportunities to CSV
"""

from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv

from optrack.contexts.intake.fetcher import MetadataFetcher, fetch_and_merge
from optrack.contexts.intake.exceptions import FetchInProgressError, MetadataFetchError
from optrack.contexts.intake.logger import setup_intake_logger
from optrack.contexts.reporting.dashboard import build_dashboard
from optrack.contexts.tracking.exceptions import NotSignedInError, OpportunityNotFoundError
from optrack.contexts.tracking.export import export_csv
from optrack.contexts.tracking.logger import setup_tracking_logger
from optrack.contexts.tracking.opportunity import Opportunity, UserIdentity
from optrack.contexts.tracking.state import TrackerSession
from optrack.contexts.tracking.storage import JsonFileStore, TrackerStorage
from optrack.utils.config import TrackerSettings, load_settings
from optrack.utils.timestamp import format_timestamp

load_dotenv()

app = typer.Typer(
    add_completion=False,
    help="Track internship, scholarship, and job opportunities",
    invoke_without_command=True,
)

STATUS_COLORS = {
    "strong": typer.colors.GREEN,
    "review": typer.colors.YELLOW,
    "gap": typer.colors.RED,
    "unknown": typer.colors.WHITE,
}


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# =============================================================================
# HELPERS
# =============================================================================


def _settings() -> TrackerSettings:
    settings = load_settings()
    setup_tracking_logger(settings.log_dir, settings.store_file, console_level="WARNING")
    return settings


def _open_session(settings: TrackerSettings) -> TrackerSession:
    storage = TrackerStorage(JsonFileStore(settings.store_file), prefix=settings.storage_prefix)
    return TrackerSession.open(storage)


def _signed_in_session(settings: TrackerSettings) -> TrackerSession:
    session = _open_session(settings)
    if not session.state.signed_in:
        typer.secho("Not signed in. Run: manage_tracker.py signin --id <id>", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return session


def _parse_assignments(assignments: List[str]) -> dict:
    """Parse repeated key=value options into a dict (dashes become underscores)."""
    changes = {}
    for assignment in assignments:
        if "=" not in assignment:
            typer.secho(f"Expected key=value, got: {assignment}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        key, value = assignment.split("=", 1)
        changes[key.strip().replace("-", "_")] = value.strip()
    return changes


def _echo_assessment(opportunity: Opportunity) -> None:
    assessment = opportunity.assessment
    if assessment is None:
        return
    color = STATUS_COLORS.get(assessment.status.value, typer.colors.WHITE)
    typer.secho(f"  Eligibility: {assessment.summary} [{assessment.status.value}]", fg=color)
    for match in assessment.matches:
        typer.echo(f"    ✓ {match}")
    for gap in assessment.gaps:
        typer.echo(f"    ✗ {gap}")
    if assessment.detail:
        typer.echo(f"    {assessment.detail}")


# =============================================================================
# ACCOUNT
# =============================================================================


@app.command("signin")
def signin_command(
    user_id: str = typer.Option(..., "--id", help="Stable account identifier"),
    name: str = typer.Option("", "--name", help="Display name"),
    email: str = typer.Option("", "--email", help="Account email"),
    provider: str = typer.Option("local", "--provider", help="Identity provider label"),
):
    """Sign in as a user. All records and the profile are stored under this id."""
    settings = _settings()
    session = _open_session(settings)
    state = session.sign_in(UserIdentity(id=user_id, name=name, email=email, provider=provider))
    typer.secho(
        f"✓ Signed in as {name or user_id} ({len(state.opportunities)} opportunities)",
        fg=typer.colors.GREEN,
    )


@app.command("signout")
def signout_command():
    """Forget the signed-in user (stored data is kept)."""
    session = _open_session(_settings())
    session.sign_out()
    typer.echo("Signed out")


@app.command("whoami")
def whoami_command():
    """Show the signed-in user."""
    session = _open_session(_settings())
    user = session.state.user
    if user is None:
        typer.echo("Not signed in")
        raise typer.Exit(code=1)
    typer.echo(f"{user.name or user.id} <{user.email or 'no email'}> via {user.provider or 'unknown'}")


# =============================================================================
# RECORDS
# =============================================================================


@app.command("add")
def add_command(
    title: str = typer.Option("", "--title", help="Opportunity title (required unless fetched)"),
    url: str = typer.Option("", "--url", help="Listing URL; blank fields are filled from the page"),
    organization: str = typer.Option("", "--organization"),
    opportunity_type: str = typer.Option("", "--type"),
    location: str = typer.Option("", "--location"),
    remote: str = typer.Option("", "--remote", help="Yes, No, or Hybrid"),
    deadline: str = typer.Option("", "--deadline"),
    priority: str = typer.Option("Medium", "--priority", help="High, Medium, or Low"),
    status: str = typer.Option("Not Started", "--status"),
    tags: str = typer.Option("", "--tags", help="Comma-separated tags"),
    eligibility: str = typer.Option("", "--eligibility"),
    next_action: str = typer.Option("", "--next-action"),
    next_action_date: str = typer.Option("", "--next-action-date"),
    notes: str = typer.Option("", "--notes"),
):
    """
    Add an opportunity.

    Examples:\n

        $ manage_tracker.py add --title "Summer Research Internship" --deadline 2025-03-01

        $ manage_tracker.py add --url https://acme.org/internships/42 --priority High
    """
    settings = _settings()
    session = _signed_in_session(settings)

    form = {
        "title": title,
        "link": url,
        "organization": organization,
        "opportunity_type": opportunity_type,
        "location": location,
        "remote": remote,
        "deadline": deadline,
        "priority": priority,
        "status": status,
        "tags": tags,
        "eligibility": eligibility,
        "next_action": next_action,
        "next_action_date": next_action_date,
        "notes": notes,
    }

    if url:
        fetcher = MetadataFetcher(proxy_base=settings.proxy_base, timeout=settings.fetch_timeout)
        outcome = fetch_and_merge(fetcher, url, form)
        form = outcome.form
        if outcome.notice:
            typer.secho(outcome.notice, fg=typer.colors.GREEN if outcome.ok else typer.colors.YELLOW)

    try:
        opportunity = session.add(Opportunity.create(**form))
    except ValueError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ Added {opportunity.title} ({opportunity.id})", fg=typer.colors.GREEN)
    _echo_assessment(opportunity)


@app.command("list")
def list_command(
    status: Optional[str] = typer.Option(None, "--status", help="Only show this workflow status"),
):
    """List opportunities, newest first."""
    session = _signed_in_session(_settings())
    opportunities = [
        o for o in session.opportunities if status is None or o.status.lower() == status.lower()
    ]

    if not opportunities:
        typer.echo("No opportunities found")
        return

    for opportunity in opportunities:
        eligibility = opportunity.assessment.status.value if opportunity.assessment else "unknown"
        organization = f" @ {opportunity.organization}" if opportunity.organization else ""
        typer.echo(f"{opportunity.id[:8]}  {opportunity.title}{organization}")
        typer.echo(
            f"          {opportunity.status} | {opportunity.priority} | "
            f"deadline: {opportunity.deadline or '-'} | eligibility: {eligibility}"
        )

    typer.echo(f"\nTotal: {len(opportunities)}")


def _resolve_id(session: TrackerSession, prefix: str) -> str:
    """Accept a full id or a unique prefix (as shown by `list`)."""
    matches = [o.id for o in session.opportunities if o.id.startswith(prefix)]
    if len(matches) == 1:
        return matches[0]
    if len(matches) > 1:
        typer.secho(f"Ambiguous id prefix: {prefix}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return prefix


@app.command("update")
def update_command(
    opportunity_id: str = typer.Argument(..., help="Opportunity id (or unique prefix)"),
    assignments: List[str] = typer.Option(
        [], "--set", "-s", help="Field assignment, e.g. --set status=Submitted"
    ),
):
    """Edit fields of one opportunity."""
    session = _signed_in_session(_settings())
    changes = _parse_assignments(assignments)
    if not changes:
        typer.echo("Nothing to update")
        raise typer.Exit()

    try:
        opportunity = session.update(_resolve_id(session, opportunity_id), **changes)
    except (OpportunityNotFoundError, ValueError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"✓ Updated {opportunity.title}", fg=typer.colors.GREEN)
    _echo_assessment(opportunity)


@app.command("delete")
def delete_command(opportunity_id: str = typer.Argument(..., help="Opportunity id (or unique prefix)")):
    """Delete one opportunity."""
    session = _signed_in_session(_settings())
    try:
        session.delete(_resolve_id(session, opportunity_id))
    except OpportunityNotFoundError as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo("Deleted")


@app.command("clear")
def clear_command(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
):
    """Delete every opportunity for the signed-in user."""
    session = _signed_in_session(_settings())
    count = len(session.opportunities)
    if count == 0:
        typer.echo("Nothing to clear")
        return
    if not yes and not typer.confirm(f"Delete all {count} opportunities?", default=False):
        typer.echo("Aborted")
        raise typer.Exit(code=1)
    removed = session.clear()
    typer.echo(f"Cleared {removed} opportunities")


# =============================================================================
# PROFILE AND ELIGIBILITY
# =============================================================================


@app.command("profile")
def profile_command(
    assignments: List[str] = typer.Option(
        [], "--set", "-s", help="Profile assignment, e.g. --set gpa=3.6 --set skills='python, sql'"
    ),
):
    """Show the eligibility profile, or update it with --set."""
    session = _signed_in_session(_settings())

    if assignments:
        try:
            profile = session.profile.with_updates(**_parse_assignments(assignments))
            session.save_profile(profile)
        except (ValueError, NotSignedInError) as e:
            typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        typer.secho("✓ Profile saved", fg=typer.colors.GREEN)

    profile = session.profile.to_dict()
    last_updated = profile.pop("lastUpdated")
    for key, value in profile.items():
        typer.echo(f"  {key}: {value or '(empty)'}")
    if last_updated:
        typer.echo(f"\nLast updated {format_timestamp(last_updated, relative=True)}")


@app.command("check")
def check_command(opportunity_id: str = typer.Argument(..., help="Opportunity id (or unique prefix)")):
    """Show the eligibility assessment for one opportunity."""
    session = _signed_in_session(_settings())
    opportunity = session.state.find(_resolve_id(session, opportunity_id))
    if opportunity is None:
        typer.secho(f"Opportunity not found: {opportunity_id}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.echo(opportunity.title)
    _echo_assessment(opportunity)


@app.command("dashboard")
def dashboard_command():
    """Show counts, next actions, eligibility watchlist, and deadline radar."""
    settings = _settings()
    session = _signed_in_session(settings)
    dashboard = build_dashboard(
        session.opportunities,
        due_soon_days=settings.due_soon_days,
        limit=settings.list_limit,
    )
    summary = dashboard.summary

    typer.secho("\n=== Overview ===", bold=True)
    typer.echo(f"  Total: {summary.total}  Open: {summary.open_count}")
    typer.echo(f"  Due soon: {summary.due_soon}  Overdue: {summary.overdue}")
    typer.echo(f"  High priority: {summary.high_priority}")
    for status, count in summary.by_status.items():
        typer.echo(f"    {status}: {count}")

    typer.secho("\n=== Next Actions ===", bold=True)
    for opportunity in dashboard.next_actions:
        when = opportunity.next_action_date or "no date"
        typer.echo(f"  • {opportunity.next_action} ({when}) - {opportunity.title}")
    if not dashboard.next_actions:
        typer.echo("  None")

    typer.secho("\n=== Eligibility Watchlist ===", bold=True)
    for opportunity in dashboard.watchlist:
        typer.echo(f"  • {opportunity.title}: {opportunity.assessment.summary}")
    if not dashboard.watchlist:
        typer.echo("  None")

    typer.secho("\n=== Deadline Radar ===", bold=True)
    for entry in dashboard.radar:
        color = typer.colors.RED if entry.days_left < 0 else None
        typer.secho(f"  • {entry.label}: {entry.opportunity.title} ({entry.deadline:%b %d, %Y})", fg=color)
    if not dashboard.radar:
        typer.echo("  None")


# =============================================================================
# INTAKE AND EXPORT
# =============================================================================


@app.command("extract")
def extract_command(url: str = typer.Argument(..., help="Listing URL to fetch")):
    """Fetch a listing through the read proxy and print the extracted fields."""
    settings = load_settings()
    setup_intake_logger(settings.log_dir, settings.proxy_base, console_level="WARNING")
    fetcher = MetadataFetcher(proxy_base=settings.proxy_base, timeout=settings.fetch_timeout)

    try:
        result = fetcher.fetch_metadata(url)
    except (MetadataFetchError, FetchInProgressError) as e:
        typer.secho(f"Could not fetch {url}: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    for field_name, value in result.fields.items():
        if value:
            typer.echo(f'  ✓ {field_name}: "{value}"')
        else:
            typer.echo(f"  ✗ {field_name}")


@app.command("export")
def export_command(output: Path = typer.Argument(..., help="Destination CSV file")):
    """Export opportunities to CSV."""
    session = _signed_in_session(_settings())
    count = export_csv(session.opportunities, output)
    typer.secho(f"✓ Exported {count} opportunities to {output}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
