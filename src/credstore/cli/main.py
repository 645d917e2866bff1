"""credstore CLI: sign up, log in, log out, and inspect the session.

Usage:
    credstore signup "Ann" ann@x.com          # Register (password prompted)
    credstore login ann@x.com                 # Start the session
    credstore whoami                          # Who is logged in
    credstore users                           # Registered names + emails
    credstore logout                          # End the session

Storage comes from CREDSTORE_* env vars (see credstore.config); by
default everything lives in ~/.credstore/store.json, so the session
survives between invocations.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import sys
from typing import Awaitable, Callable, Optional, TypeVar

import click

from credstore import __version__
from credstore.auth.errors import AuthResult
from credstore.config import Settings
from credstore.logging import configure_logging
from credstore.schemas.user import UserRead
from credstore.services.auth_manager import AuthManager

T = TypeVar("T")

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
        # No running loop: normal CLI invocation
        return asyncio.run(coro)
    else:
        # Already inside an event loop (e.g. test runner): run in a thread
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _with_manager(settings: Settings, action: Callable[[AuthManager], Awaitable[T]]) -> T:
    """Open a manager over the configured store, run one action, close it."""

    async def runner() -> T:
        async with AuthManager.from_settings(settings) as auth:
            return await action(auth)

    return _run(runner())


def _exit_on_error(result: AuthResult) -> None:
    """Print the error keyed by form field; storage problems exit 2, the rest 1."""
    if result.ok:
        return
    error = result.error
    if error.field == "general":
        click.secho(f"Error: {error.message}", fg="red", err=True)
    else:
        click.secho(f"Error ({error.field}): {error.message}", fg="red", err=True)
    sys.exit(2 if error.kind.category == "persistence" else 1)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="credstore")
@click.pass_context
def main(ctx: click.Context):
    """credstore: local credential store with a persisted session."""
    try:
        settings = Settings()
    except ValueError as e:
        click.secho(f"Error: invalid configuration: {e}", fg="red", err=True)
        sys.exit(1)
    configure_logging(settings)
    ctx.obj = settings


# ---------------------------------------------------------------------------
# credstore signup
# ---------------------------------------------------------------------------


@main.command()
@click.argument("name")
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True,
              help="Password (prompted if omitted)")
@click.pass_obj
def signup(settings: Settings, name: str, email: str, password: str):
    """Register NAME with EMAIL. Does not log in."""
    result = _with_manager(settings, lambda auth: auth.signup(name, email, password))
    _exit_on_error(result)
    click.secho(f"Registered {email}. Run `credstore login {email}` to sign in.", fg="green")


# ---------------------------------------------------------------------------
# credstore login
# ---------------------------------------------------------------------------


@main.command()
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, help="Password (prompted if omitted)")
@click.pass_obj
def login(settings: Settings, email: str, password: str):
    """Log in as EMAIL."""
    result = _with_manager(settings, lambda auth: auth.login(email, password))
    _exit_on_error(result)
    click.secho(f"Welcome, {result.user.name}!", fg="green")


# ---------------------------------------------------------------------------
# credstore logout
# ---------------------------------------------------------------------------


@main.command()
@click.pass_obj
def logout(settings: Settings):
    """End the current session."""
    result = _with_manager(settings, lambda auth: auth.logout())
    _exit_on_error(result)
    click.echo("Logged out.")


# ---------------------------------------------------------------------------
# credstore whoami
# ---------------------------------------------------------------------------


@main.command()
@click.pass_obj
def whoami(settings: Settings):
    """Show the logged-in user."""

    async def current(auth: AuthManager) -> Optional[UserRead]:
        user = auth.current_user
        return UserRead.model_validate(user) if user else None

    user = _with_manager(settings, current)
    if user is None:
        click.secho("Not logged in.", fg="yellow")
        sys.exit(1)
    click.echo(f"{user.name} <{user.email}>")


# ---------------------------------------------------------------------------
# credstore users
# ---------------------------------------------------------------------------


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


@main.command()
@click.pass_obj
def users(settings: Settings):
    """List registered users (passwords are never shown)."""

    async def registry(auth: AuthManager) -> list[UserRead]:
        return [UserRead.model_validate(u) for u in auth.registered_users]

    rows = _with_manager(settings, registry)
    if not rows:
        click.echo("No registered users.")
        return
    _print_table(
        [r.model_dump() for r in rows],
        [("NAME", "name", 24), ("EMAIL", "email", 40)],
    )


if __name__ == "__main__":
    main()
