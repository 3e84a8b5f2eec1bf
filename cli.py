"""CLI commands for occasion RSVP management."""

import asyncio
from pathlib import Path

import typer

from rsvp_api.auth import create_access_token
from rsvp_api.config.logging import setup_logging
from rsvp_api.email_service import get_email_service
from rsvp_api.events.repository.read_models import SqlEventReadModel
from rsvp_api.guests.dtos import GuestCreateDTO, InvalidGuestError, RsvpStatus
from rsvp_api.guests.features.import_guests.importer import import_guests as run_import
from rsvp_api.guests.repository.read_models import SqlGuestReadModel, SqlRsvpReadModel
from rsvp_api.guests.repository.write_models import SqlGuestWriteModel
from rsvp_api.occasions.dtos import AliasTakenError, InvalidAliasError, OccasionCreateDTO
from rsvp_api.occasions.repository.write_models import SqlOccasionWriteModel
from rsvp_api.relay.service import InvitationRelay
from rsvp_api.stats.engine import get_all_event_stats

app = typer.Typer(help="CLI commands for occasion RSVP management")

HOST_OPTION = typer.Option(..., "--host", help="Host id (the `sub` of the host token)")


@app.callback()
def main():
    setup_logging()


@app.command()
def create_occasion(
    name: str = typer.Argument(..., help="Occasion name"),
    alias: str = typer.Argument(..., help="Globally unique URL slug"),
    host: str = HOST_OPTION,
    hosts: list[str] = typer.Option([], "--display-host", "-d", help="Host display names"),
    description: str = typer.Option(None, "--description", help="Optional description"),
):
    """Create an occasion and claim its alias."""
    data = OccasionCreateDTO(name=name, alias=alias, hosts=hosts, description=description)
    try:
        occasion = asyncio.run(SqlOccasionWriteModel().create_occasion(host, data))
    except (InvalidAliasError, AliasTakenError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Occasion created!", fg=typer.colors.GREEN)
    typer.secho(f"  ID: {occasion.id}", fg=typer.colors.CYAN)
    typer.secho(f"  Alias: {occasion.alias}", fg=typer.colors.BLUE)


@app.command()
def create_guest(
    occasion_id: str = typer.Argument(..., help="Occasion id"),
    first_name: str = typer.Argument(..., help="First name"),
    last_name: str = typer.Argument(..., help="Last name"),
    host: str = HOST_OPTION,
    email: str = typer.Option(None, "--email", "-e", help="Guest email"),
    events: list[str] = typer.Option(
        [], "--event", help="Event ids to invite to (default: every event)"
    ),
):
    """Create a guest invited to the given events."""

    async def _create_guest():
        event_ids = events or [
            e.id for e in await SqlEventReadModel().list_events(host, occasion_id)
        ]
        data = GuestCreateDTO(
            first_name=first_name,
            last_name=last_name,
            email=email,
            rsvps={event_id: RsvpStatus.AWAITING_RESPONSE.value for event_id in event_ids},
        )
        return await SqlGuestWriteModel().create_guest(host, occasion_id, data)

    try:
        guest = asyncio.run(_create_guest())
    except (ValueError, InvalidGuestError) as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Guest created!", fg=typer.colors.GREEN)
    typer.secho(f"  Guest ID: {guest.id}", fg=typer.colors.CYAN)
    typer.secho(f"  RSVP URL: {guest.rsvp_link}", fg=typer.colors.CYAN)
    typer.secho(f"  Invited to {len(guest.rsvps)} event(s)", fg=typer.colors.BLUE)


@app.command()
def import_guests(
    occasion_id: str = typer.Argument(..., help="Occasion id"),
    csv_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV file"),
    host: str = HOST_OPTION,
):
    """Import guests from `firstName,lastName,email[,eventType]` lines."""
    result = asyncio.run(
        run_import(
            host_id=host,
            occasion_id=occasion_id,
            csv_text=csv_file.read_text(encoding="utf-8"),
            event_read_model=SqlEventReadModel(),
            guest_write_model=SqlGuestWriteModel(),
        )
    )

    typer.secho(f"Imported {result.imported} guest(s)", fg=typer.colors.GREEN)
    if result.failed:
        typer.secho(f"Failed {result.failed} row(s)", fg=typer.colors.YELLOW)
        for error in result.errors:
            typer.secho(f"  - {error}", fg=typer.colors.YELLOW)


@app.command()
def stats(
    occasion_id: str = typer.Argument(..., help="Occasion id"),
    host: str = HOST_OPTION,
    tags: list[str] = typer.Option([], "--tag", "-t", help="Only count guests with these tags"),
):
    """Print attendance statistics for every event of an occasion."""

    async def _stats():
        events = await SqlEventReadModel().list_events(host, occasion_id)
        guests = await SqlGuestReadModel().list_guests(host, occasion_id)
        return events, get_all_event_stats(guests, [e.id for e in events], tags)

    events, all_stats = asyncio.run(_stats())
    if not events:
        typer.secho("No events found", fg=typer.colors.YELLOW)
        return

    for event, event_stats in zip(events, all_stats):
        typer.secho(event.name, fg=typer.colors.GREEN)
        typer.echo(
            f"  invited {event_stats.invited}, responded {event_stats.responded}, "
            f"attending {event_stats.attending}, not attending {event_stats.not_attending}, "
            f"pending {event_stats.pending}, not invited {event_stats.not_invited}"
        )


@app.command()
def send_invites(
    occasion_id: str = typer.Argument(..., help="Occasion id"),
    host: str = HOST_OPTION,
    resend: bool = typer.Option(False, "--resend", help="Also email guests already emailed"),
):
    """Send the built-in invitation to the guests of an occasion."""

    async def _send_invites():
        guests = await SqlGuestReadModel().list_guests(host, occasion_id)
        guest_ids = [g.id for g in guests if resend or not g.email_sent]
        relay = InvitationRelay(SqlRsvpReadModel(), SqlGuestWriteModel(), get_email_service())
        return await relay.send(guest_ids)

    result = asyncio.run(_send_invites())

    typer.secho(f"Sent {result.sent} invitation(s)", fg=typer.colors.GREEN)
    if result.skipped:
        typer.secho(f"Skipped {result.skipped} guest(s) without email", fg=typer.colors.YELLOW)


@app.command()
def issue_token(
    host: str = typer.Argument(..., help="Host id"),
    minutes: int = typer.Option(None, "--minutes", "-m", help="Lifetime in minutes"),
):
    """Issue a host bearer token for local development."""
    typer.echo(create_access_token(host, expires_minutes=minutes))


if __name__ == "__main__":
    app()
