import asyncio
import json
from pathlib import Path
import subprocess
from typing import Annotated

from rich import print
from rich.console import Console
from rich.table import Table
import typer

app = typer.Typer()


async def init_db_task() -> None:
    """
    Create every table registered on the model metadata.

    Intended for local databases and replays; production schemas are managed
    with ``migrate``.
    """
    from billing_sync.core.db import dispose_db, init_db

    print("[yellow]Creating database tables[/yellow]")
    try:
        await init_db()
    finally:
        await dispose_db()
    print("[green]Database tables created[/green]")


async def dispatch_task(event: dict) -> bool:
    """Dispatch one Stripe event envelope and release the shared clients."""
    from billing_sync.core.config import app_logger
    from billing_sync.core.db import dispose_db
    from billing_sync.core.services import Stripe
    from billing_sync.jobs import dispatch_event

    app_logger.info(f"Replaying event {event.get('id')} ({event['type']})")
    try:
        handled = await dispatch_event(event)
        app_logger.info(
            f"Replay of {event.get('id')} finished: {'handled' if handled else 'skipped'}"
        )
        return handled
    finally:
        await Stripe.aclose()
        await dispose_db()


def _run_alembic(command: str, done: str) -> None:
    """Run an alembic command line, echoing it first; failures propagate."""
    print(f"[yellow]$ {command}[/yellow]")
    try:
        subprocess.run(command, shell=True, check=True)
    except subprocess.CalledProcessError as e:
        print(f"[red]alembic exited with status {e.returncode}[/red]")
        raise
    print(f"[green]{done}[/green]")


@app.command()
def initdb():
    """Create the tables straight from the models, skipping migrations."""
    asyncio.run(init_db_task())


@app.command()
def makemigrations(comment: Annotated[str, typer.Argument()] = "auto"):
    """Autogenerate a migration revision named after COMMENT."""
    _run_alembic(
        f'alembic revision --autogenerate -m "{comment}"', "Revision generated"
    )


@app.command()
def showmigrations():
    """Print the migration history."""
    _run_alembic("alembic history", "History listed")


@app.command()
def migrate():
    """Upgrade the database schema to the newest revision."""
    _run_alembic("alembic upgrade head", "Database is at head")


@app.command()
def dispatch(
    event_file: Annotated[
        Path,
        typer.Argument(
            exists=True,
            dir_okay=False,
            readable=True,
            help="JSON file holding a Stripe event envelope",
        ),
    ],
):
    """
    Replays a Stripe event from a JSON file through the job dispatcher.

    Examples:
        python manage.py dispatch events/customer.subscription.created.json
    """
    with event_file.open("r", encoding="utf-8") as f:
        try:
            event = json.load(f)
        except json.JSONDecodeError as e:
            print(f"[red]Error: {event_file} is not valid JSON:[/red] {e}")
            raise typer.Exit(1)

    if not isinstance(event, dict) or "type" not in event:
        print(f"[red]Error: {event_file} does not hold a Stripe event[/red]")
        raise typer.Exit(1)

    handled = asyncio.run(dispatch_task(event))
    if handled:
        print(f"[green]Event {event.get('id')} ({event['type']}) handled[/green]")
    else:
        print(f"[cyan]Event {event.get('id')} ({event['type']}) skipped[/cyan]")


@app.command()
def jobs():
    """
    Lists the registered jobs and the Stripe events bound to them.
    """
    from billing_sync.jobs import get_job_configs

    table = Table(title="Registered jobs")
    table.add_column("Job")
    table.add_column("Events")
    table.add_column("Filtered", justify="center")
    table.add_column("Description")

    for job in get_job_configs():
        table.add_row(
            job.id,
            "\n".join(job.events),
            "yes" if job.filter else "",
            job.description or "",
        )

    Console().print(table)


@app.callback()
def main(ctx: typer.Context):
    print(f"Executing the command: {ctx.invoked_subcommand}")


if __name__ == "__main__":
    app()
