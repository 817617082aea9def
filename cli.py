"""CLI commands for managing events, invites and RSVPs."""

import asyncio
import json
from datetime import date, datetime

import typer

from rsvp_engine.config.database import upgrade_database
from rsvp_engine.config.logging import setup_logging
from rsvp_engine.core.clock import utc_now
from rsvp_engine.core.ids import ensure_entropy
from rsvp_engine.dashboard.aggregator import build_report
from rsvp_engine.dashboard.features.get_report.read_model import StoreDashboardReadModel
from rsvp_engine.errors import RSVPEngineError
from rsvp_engine.events.dtos import EventCreateDTO
from rsvp_engine.events.repository.store import get_event_store
from rsvp_engine.invites.dtos import GuestRowDTO
from rsvp_engine.invites.hosting import get_hosting_link_resolver
from rsvp_engine.invites.repository.store import get_invite_store
from rsvp_engine.responses.dtos import ResponseFilters, ResponseSubmissionDTO
from rsvp_engine.responses.repository.store import get_response_store

app = typer.Typer(help="CLI commands for invite and RSVP management")


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show engine logs")):
    if verbose:
        setup_logging()
    ensure_entropy()


def _run(coro):
    """Run an async engine call, reporting engine errors in red."""
    try:
        return asyncio.run(coro)
    except RSVPEngineError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)


def _read_guest_list(path: str) -> list[GuestRowDTO]:
    with open(path, encoding="utf-8") as f:
        rows = json.load(f)
    return [
        GuestRowDTO(name=row.get("name"), email=row.get("email"), message=row.get("message"))
        for row in rows
        if isinstance(row, dict)
    ]


@app.command()
def init_db():
    """Apply database migrations."""
    asyncio.run(upgrade_database())
    typer.secho("Database is up to date", fg=typer.colors.GREEN)


@app.command()
def create_event(
    name: str = typer.Option(..., "--name", "-n", help="Event name"),
    event_date: str = typer.Option(..., "--date", help="Event date (YYYY-MM-DD)"),
    location: str = typer.Option("", "--location", help="Event location"),
    max_guests: int | None = typer.Option(None, "--max-guests", help="Guest capacity"),
    timezone: str | None = typer.Option(None, "--timezone", help="IANA timezone, e.g. Europe/Madrid"),
):
    """Register a new event."""
    event = _run(
        get_event_store().create(
            EventCreateDTO(
                name=name,
                date=date.fromisoformat(event_date),
                location=location,
                max_guests=max_guests,
                timezone=timezone,
            )
        )
    )

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Event ID: {event.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Name: {event.name}", fg=typer.colors.BLUE)
    typer.secho(f"  Date: {event.date.isoformat()}", fg=typer.colors.BLUE)


@app.command()
def create_invites(
    event_id: str = typer.Argument(..., help="Event ID"),
    count: int = typer.Option(1, "--count", "-c", help="Number of anonymous invites"),
    guest_list: str | None = typer.Option(
        None,
        "--guest-list",
        help="JSON file with a list of {name, email, message} rows",
    ),
    external: bool = typer.Option(False, "--external", help="Try external hosting for RSVP links"),
):
    """Issue anonymous or personalized invites for an event."""

    async def _create_invites():
        event = await get_event_store().get(event_id)
        if guest_list:
            return await get_invite_store().create_personalized(
                event.id, _read_guest_list(guest_list), get_hosting_link_resolver(), external
            )
        return await get_invite_store().create_batch(event.id, count, get_hosting_link_resolver(), external)

    invites = _run(_create_invites())

    typer.secho(f"Created {len(invites)} invites", fg=typer.colors.GREEN)
    for invite in invites:
        label = invite.guest_name or invite.guest_email or "anonymous"
        typer.secho(f"  {invite.id} ({label}) [{invite.hosting_method.value}]", fg=typer.colors.BLUE)
        typer.secho(f"    {invite.rsvp_url}", fg=typer.colors.CYAN)


@app.command()
def list_invites(event_id: str = typer.Argument(..., help="Event ID")):
    """List an event's invites with their status."""

    async def _list_invites():
        store = get_invite_store()
        return await store.list_by_event(event_id), await store.stats(event_id)

    invites, stats = _run(_list_invites())

    for invite in invites:
        colour = typer.colors.BLUE if invite.status.value == "active" else typer.colors.YELLOW
        typer.secho(f"{invite.id} {invite.status.value} {invite.guest_name}", fg=colour)
    typer.echo()
    typer.secho(
        f"Total: {stats.total_invites}  Active: {stats.active_invites}  "
        f"Deactivated: {stats.deactivated_invites}",
        fg=typer.colors.GREEN,
    )


@app.command()
def deactivate_invite(invite_id: str = typer.Argument(..., help="Invite ID")):
    """Deactivate an invite. Existing responses stay valid."""
    invite = _run(get_invite_store().deactivate(invite_id))

    typer.secho("Invite deactivated", fg=typer.colors.GREEN)
    typer.secho(f"  Invite ID: {invite.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Deactivated at: {invite.deactivated_at}", fg=typer.colors.BLUE)


@app.command()
def submit_rsvp(
    event_id: str = typer.Argument(..., help="Event ID"),
    name: str = typer.Option(..., "--name", help="Guest name"),
    email: str = typer.Option(..., "--email", help="Guest email"),
    attendance: str = typer.Option(..., "--attendance", help="yes, no or maybe"),
    invite_id: str | None = typer.Option(None, "--invite", help="Invite ID"),
    guest_count: str = typer.Option("1", "--guests", help="Number of guests"),
    dietary: str = typer.Option("", "--dietary", help="Comma-separated dietary options"),
):
    """Record an RSVP on a guest's behalf."""

    async def _submit():
        event = await get_event_store().get(event_id)
        return await get_response_store().submit(
            ResponseSubmissionDTO(
                event_id=event.id,
                guest_name=name,
                guest_email=email,
                attendance=attendance,
                invite_id=invite_id,
                guest_count=guest_count,
                dietary_options=dietary,
            )
        )

    response = _run(_submit())

    typer.secho("RSVP recorded!", fg=typer.colors.GREEN)
    typer.secho(f"  Response ID: {response.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Attendance: {response.attendance.value} ({response.guest_count} guests)", fg=typer.colors.BLUE)
    if response.unmatched_invite:
        typer.secho("  Invite did not match this event", fg=typer.colors.YELLOW)


@app.command()
def list_responses(
    event_id: str = typer.Argument(..., help="Event ID"),
    search: str | None = typer.Option(None, "--search", help="Match guest name or email"),
    attendance: str = typer.Option("all", "--attendance", help="all, yes, no or maybe"),
    sort_by: str = typer.Option("submitted_at", "--sort-by", help="submitted_at, guest_name or guest_count"),
    descending: bool = typer.Option(False, "--desc", help="Sort descending"),
):
    """List an event's responses."""

    async def _list_responses():
        event = await get_event_store().get(event_id)
        return await get_response_store().filter(
            event.id,
            ResponseFilters(search=search, attendance=attendance, sort_by=sort_by, descending=descending),
        )

    result = _run(_list_responses())

    for response in result.responses:
        typer.secho(
            f"{response.submitted_at:%Y-%m-%d %H:%M} {response.attendance.value:<5} "
            f"{response.guest_count} {response.guest_name} <{response.guest_email}>",
            fg=typer.colors.BLUE,
        )
    typer.secho(f"Showing {result.total_count} of {result.original_count}", fg=typer.colors.GREEN)


@app.command()
def export_responses(
    event_id: str = typer.Argument(..., help="Event ID"),
    export_format: str = typer.Option("csv", "--format", "-f", help="csv or json"),
    output: str | None = typer.Option(None, "--output", "-o", help="File to write, defaults to stdout"),
):
    """Export an event's responses as CSV or JSON."""

    async def _export():
        event = await get_event_store().get(event_id)
        return await get_response_store().export(event.id, export_format)

    content = _run(_export())

    if output is None:
        typer.echo(content)
        return
    with open(output, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    typer.secho(f"Exported responses to {output}", fg=typer.colors.GREEN)


@app.command()
def report(
    event_id: str = typer.Argument(..., help="Event ID"),
    at: str | None = typer.Option(None, "--at", help="Report time (ISO 8601), defaults to now"),
):
    """Print the dashboard report for an event as JSON."""
    now = datetime.fromisoformat(at) if at else utc_now()

    async def _report():
        event = await get_event_store().get(event_id)
        invites = await get_invite_store().list_by_event(event.id)
        responses = await get_response_store().list_by_event(event.id)
        return build_report(event, invites, responses, now=now)

    typer.echo(_run(_report()).model_dump_json(indent=2))


@app.command()
def overview(
    host_email: str | None = typer.Option(None, "--host", help="Only this host's events"),
):
    """Show headline RSVP numbers for every event."""
    read_model = StoreDashboardReadModel(
        event_store=get_event_store(),
        invite_store=get_invite_store(),
        response_store=get_response_store(),
    )

    for item in _run(read_model.get_overview(host_email)):
        summary = item.summary
        typer.secho(f"{item.event_date.isoformat()} {item.event_name} ({item.event_id})", fg=typer.colors.CYAN)
        typer.secho(
            f"  Invites: {summary.total_invites}  Responses: {summary.total_responses}  "
            f"Rate: {summary.response_rate}%  Attending: {summary.attending}  Guests: {summary.total_guests}",
            fg=typer.colors.BLUE,
        )


if __name__ == "__main__":
    app()
