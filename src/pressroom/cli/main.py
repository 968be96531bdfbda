"""Pressroom admin CLI — schema setup, admin accounts, subscriber list.

Usage:
    pressroom init-db                         # Create missing tables
    pressroom create-admin --email a@b.c      # New admin account (prompts)
    pressroom promote someone@example.com     # Make an existing user admin
    pressroom promote --demote x@example.com  # Back to a regular user
    pressroom subscribers                     # Print the mailing list
    pressroom serve                           # Run the API with uvicorn

The API never grants the admin role, so the first admin has to be made
here.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys

import click

from pressroom import __version__
from pressroom.config import settings
from pressroom.db.models import Role

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k, "—"))[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="pressroom")
def main():
    """Pressroom — accounts and mailing list administration."""


@main.command("init-db")
def init_db():
    """Create all tables that don't exist yet."""
    from pressroom.db.engine import create_schema

    _run(create_schema())
    click.secho("Schema ready", fg="green")


@main.command("create-admin")
@click.option("--email", required=True)
@click.option("--firstname", prompt=True)
@click.option("--lastname", prompt=True)
@click.password_option()
def create_admin(email: str, firstname: str, lastname: str, password: str):
    """Create a new account with the admin role."""
    _run(_create_admin_impl(email, firstname, lastname, password))


async def _create_admin_impl(email: str, firstname: str, lastname: str, password: str):
    from pressroom.db.engine import async_session_factory
    from pressroom.services.user_service import EmailAlreadyRegistered, UserService

    async with async_session_factory() as db:
        svc = UserService(db, bcrypt_rounds=settings.bcrypt_rounds)
        try:
            user = await svc.create(
                firstname=firstname,
                lastname=lastname,
                email=email,
                password=password,
                role=Role.ADMIN,
            )
        except EmailAlreadyRegistered:
            click.secho(f"{email} is already registered; use `promote`", fg="red", err=True)
            sys.exit(1)
    click.secho(f"Admin {user.email} created ({user.id})", fg="green")


@main.command()
@click.argument("email")
@click.option("--demote", is_flag=True, help="Set the role back to a regular user")
def promote(email: str, demote: bool):
    """Grant (or with --demote, revoke) the admin role."""
    role = Role.USER if demote else Role.ADMIN
    _run(_promote_impl(email, role))


async def _promote_impl(email: str, role: Role):
    from pressroom.db.engine import async_session_factory
    from pressroom.services.user_service import UserService

    async with async_session_factory() as db:
        user = await UserService(db).set_role(email, role)
    if user is None:
        click.secho(f"No user with email {email}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"{email} is now {role.value}", fg="green")


@main.command()
def subscribers():
    """List mailing-list subscribers, newest first."""
    _run(_subscribers_impl())


async def _subscribers_impl():
    from pressroom.db.engine import async_session_factory
    from pressroom.services.subscriber_service import SubscriberService

    async with async_session_factory() as db:
        rows = await SubscriberService(db).list_all()

    if not rows:
        click.echo("No subscribers.")
        return
    _print_table(
        [{"id": str(s.id), "email": s.email, "created_at": s.created_at} for s in rows],
        [("ID", "id", 36), ("EMAIL", "email", 40), ("SINCE", "created_at", 19)],
    )


@main.command()
@click.option("--host", default=None, help=f"Bind address (default {settings.host})")
@click.option("--port", default=None, type=int, help=f"Port (default {settings.port})")
@click.option("--reload", is_flag=True)
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "pressroom.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


if __name__ == "__main__":
    main()
