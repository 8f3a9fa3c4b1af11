"""CLI commands for oauthrefresh."""

import asyncio
import logging
import os
import time

import typer
from rich.console import Console
from rich.markup import escape

from oauthrefresh import __logo__, __version__
from oauthrefresh.auth.constants import DEFAULT_TIMEOUT_SEC
from oauthrefresh.auth.exchange import TokenExchanger
from oauthrefresh.auth.flow import read_token_state, refresh_oauth_tokens
from oauthrefresh.ci.environment import GitHubActionsEnvironment
from oauthrefresh.config.loader import get_profile, list_profiles, resolve_profile_name
from oauthrefresh.config.schema import Profile
from oauthrefresh.errors import TokenRefreshError

app = typer.Typer(
    name="oauthrefresh",
    help=f"{__logo__} oauthrefresh - Refresh OAuth tokens inside CI jobs",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} oauthrefresh v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """oauthrefresh - Refresh OAuth tokens inside CI jobs."""
    pass


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
    )


def _build_exchanger(profile: Profile, timeout: float) -> TokenExchanger:
    return profile.build_exchanger(timeout=timeout or None)


def _fail(exc: TokenRefreshError) -> None:
    err_console.print(f"[red]Error ({exc.kind}):[/red] {escape(str(exc))}")
    raise typer.Exit(1)


def _run(profile: Profile, timeout: float) -> None:
    env = GitHubActionsEnvironment(export_style=profile.export_style)
    try:
        tokens = asyncio.run(
            refresh_oauth_tokens(env, profile, _build_exchanger(profile, timeout))
        )
    except TokenRefreshError as exc:
        _fail(exc)

    if tokens is None:
        console.print(f"[dim]OAuth disabled ({profile.use_oauth_input} is not 'true'), nothing to do[/dim]")
        return
    console.print(f"[green]✓[/green] Exported {', '.join(profile.outputs.as_tuple())}")


# ============================================================================
# Refresh Commands
# ============================================================================


@app.command()
def refresh(
    profile: str = typer.Option(None, "--profile", "-p", help=f"Profile ({', '.join(list_profiles())})"),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT_SEC, "--timeout", help="Token endpoint timeout in seconds (0 disables)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logs"),
):
    """Refresh tokens read from environment variables and export the results."""
    _configure_logging(verbose)
    try:
        selected = get_profile(resolve_profile_name(profile, os.environ))
    except TokenRefreshError as exc:
        _fail(exc)
    _run(selected, timeout)


@app.command()
def action(
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT_SEC, "--timeout", help="Token endpoint timeout in seconds (0 disables)"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logs"),
):
    """Refresh tokens passed as action inputs (requires use_oauth=true)."""
    _configure_logging(verbose)
    _run(get_profile("action"), timeout)


# ============================================================================
# Status Commands
# ============================================================================


@app.command()
def status(
    profile: str = typer.Option(None, "--profile", "-p", help=f"Profile ({', '.join(list_profiles())})"),
):
    """Report whether the current token would be refreshed. Makes no network call."""
    try:
        selected = get_profile(resolve_profile_name(profile, os.environ))
        state = read_token_state(GitHubActionsEnvironment(), selected)
    except TokenRefreshError as exc:
        _fail(exc)

    console.print(f"{__logo__} oauthrefresh Status\n")
    console.print(f"Profile: {selected.name}")
    console.print(f"Endpoint: {selected.token_url}")
    console.print(f"Buffer: {selected.policy.buffer_seconds}s ({selected.policy.unit.value})")

    if state is None:
        console.print("Token: [dim]OAuth disabled[/dim]")
        return

    now = selected.policy.unit.now(time.time)
    remaining = (state.expires_at - now) / selected.policy.unit.per_second
    if selected.policy.is_expired(state.expires_at, now):
        console.print(f"Token: [yellow]needs refresh[/yellow] ({remaining:.0f}s remaining)")
    else:
        console.print(f"Token: [green]✓ valid[/green] ({remaining:.0f}s remaining)")


if __name__ == "__main__":
    app()
