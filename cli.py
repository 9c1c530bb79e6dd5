"""CLI commands for guest list management."""

import asyncio

import typer
import uvicorn

from src.config.database import init_db
from src.config.logging import setup_logging
from src.config.settings import settings
from src.guestlist.codes import confirmation_link, public_registration_link
from src.guestlist.dtos import ListType, User, UserRole
from src.guestlist.errors import GuestListError
from src.guestlist.features.confirmation.write_model import ConfirmationWriteModel
from src.guestlist.features.events.write_model import EventWriteModel
from src.guestlist.features.guests.write_model import GuestWriteModel
from src.guestlist.features.users.write_model import UserWriteModel
from src.guestlist.permissions import accessible_events, event_stats
from src.guestlist.repository.store import SqlEventStore

app = typer.Typer(help="CLI commands for guest list management")


def _run(coro):
    """Run ``coro`` and turn guest list errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except GuestListError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(code=1)


async def _require_current_user(store: SqlEventStore) -> User:
    user = await store.get_current_user()
    if user is None:
        typer.secho("Nobody is logged in, run `login` first", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    return user


@app.callback()
def main():
    setup_logging()


@app.command()
def migrate():
    """Create or upgrade the blob store tables."""
    asyncio.run(init_db())
    typer.secho("Database is up to date", fg=typer.colors.GREEN)


@app.command()
def serve(reload: bool = typer.Option(False, help="Reload on code changes")):
    """Run the HTTP API."""
    uvicorn.run("src.main:app", host=settings.app_host, port=settings.app_port, reload=reload)


@app.command()
def create_user(
    name: str = typer.Argument(..., help="Display name"),
    role: UserRole = typer.Option(UserRole.OWNER, help="Self-asserted role"),
    email: str = typer.Option(None, help="Email, derived from the name when omitted"),
    phone: str = typer.Option("", help="Phone number"),
):
    """Create a user and log in as them."""

    async def _create():
        write_model = UserWriteModel(store=SqlEventStore())
        user = await write_model.create_user(role=role, name=name, email=email, phone=phone)
        await write_model.login(user.id)
        return user

    user = _run(_create())
    typer.secho(f"Created {user.role.value} {user.name}", fg=typer.colors.GREEN)
    typer.secho(f"User id: {user.id}", fg=typer.colors.CYAN)


@app.command()
def login(user_id: str = typer.Argument(..., help="Id of an existing user")):
    """Make an existing user the current user."""
    user = _run(UserWriteModel(store=SqlEventStore()).login(user_id))
    typer.secho(f"Logged in as {user.name} ({user.role.value})", fg=typer.colors.GREEN)


@app.command()
def logout():
    """Forget the current user."""
    _run(UserWriteModel(store=SqlEventStore()).logout())
    typer.secho("Logged out", fg=typer.colors.GREEN)


@app.command()
def whoami():
    """Show the current user."""
    user = _run(_require_current_user(SqlEventStore()))
    typer.secho(f"{user.name} <{user.email}> ({user.role.value}) {user.id}", fg=typer.colors.BLUE)


@app.command()
def create_event(
    name: str = typer.Argument(..., help="Event name"),
    date: str = typer.Option(..., help="Event date"),
    location: str = typer.Option(..., help="Venue"),
    max_capacity: int = typer.Option(100, min=1, help="Maximum confirmed guests"),
):
    """Create an event owned by the current user."""

    async def _create():
        store = SqlEventStore()
        actor = await _require_current_user(store)
        return await EventWriteModel(store=store).create_event(
            actor=actor, name=name, date=date, location=location, max_capacity=max_capacity
        )

    event = _run(_create())
    typer.secho(f"Event created: {event.name}", fg=typer.colors.GREEN)
    typer.secho(f"Event id: {event.id}", fg=typer.colors.CYAN)
    typer.secho(f"Public link: {public_registration_link(event.id)}", fg=typer.colors.CYAN)


@app.command()
def list_events():
    """List the events the current user owns or promotes."""

    async def _list():
        store = SqlEventStore()
        actor = await _require_current_user(store)
        return accessible_events(actor, await store.get_events())

    events = _run(_list())
    if not events:
        typer.secho("No events", fg=typer.colors.YELLOW)
    for event in events:
        stats = event_stats(event)
        typer.secho(
            f"{event.id}  {event.name}  {event.date}  "
            f"{stats.confirmed_count}/{event.max_capacity} confirmed  {stats.status.value}",
            fg=typer.colors.BLUE,
        )


@app.command()
def add_guest(
    event_id: str = typer.Argument(..., help="Event id"),
    name: str = typer.Argument(..., help="Guest name"),
    phone: str = typer.Option("", help="Guest phone"),
    email: str = typer.Option(None, help="Guest email"),
    list_type: ListType = typer.Option(ListType.NORMAL, help="List the guest goes on"),
):
    """Add a guest to an event as the current user."""

    async def _add():
        store = SqlEventStore()
        actor = await _require_current_user(store)
        return await GuestWriteModel(store=store).add_guest(
            actor=actor,
            event_id=event_id,
            name=name,
            phone=phone,
            email=email,
            list_type=list_type,
        )

    guest = _run(_add())
    typer.secho(f"Guest added: {guest.name}", fg=typer.colors.GREEN)
    typer.secho(f"Confirmation code: {guest.confirmation_code}", fg=typer.colors.CYAN)
    typer.secho(f"Confirmation link: {confirmation_link(guest.confirmation_token)}", fg=typer.colors.CYAN)


@app.command()
def confirm_code(code: str = typer.Argument(..., help="Confirmation code, any case")):
    """Confirm a guest's presence by their confirmation code."""
    result = _run(ConfirmationWriteModel(store=SqlEventStore()).confirm_by_code(code))
    color = typer.colors.YELLOW if result.already_confirmed else typer.colors.GREEN
    typer.secho(f"{result.guest.name} @ {result.event.name}: {result.message}", fg=color)


@app.command()
def backfill_codes():
    """Give stored guests without a confirmation code a new one."""
    count = _run(EventWriteModel(store=SqlEventStore()).backfill_confirmation_codes())
    typer.secho(f"Backfilled {count} confirmation codes", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
