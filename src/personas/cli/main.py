import typer
from typing import NoReturn, Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..config import DEFAULT_PROFILE_NAME, VERSION, Settings
from ..domain.errors import PersonasError
from ..profiles import AuthInfo, ProfileManager
from ..utils.dates import format_relative
from ..utils.logging_setup import setup_logging

app = typer.Typer(
    help="Manage multiple profiles with isolated configurations for the wrapped CLI tool.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

TOOL_COMMAND = "claude"
PROGRAM = "claude-profile"


def get_profile_manager() -> ProfileManager:
    """get profile manager instance."""
    return ProfileManager.from_settings(Settings.from_env())


def exit_with_error(e: Exception) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {escape(str(e))}")
    raise typer.Exit(1)


def format_auth_tag(auth: AuthInfo) -> str:
    if not auth.authenticated:
        return "[yellow]not authenticated[/yellow]"
    return f"[cyan]{escape(auth.subscription_type or 'authenticated')} ✓[/cyan]"


def _version_callback(value: bool):
    if value:
        typer.echo(f"{PROGRAM} {VERSION}")
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log what is happening to stderr"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
):
    """manage multiple profiles with isolated configurations."""
    setup_logging("DEBUG" if verbose else "WARNING")


@app.command("list")
def list_profiles():
    """list all profiles."""
    manager = get_profile_manager()

    try:
        profiles = manager.list()
    except PersonasError as e:
        exit_with_error(e)

    if not profiles:
        console.print("[yellow]No profiles found.[/yellow]")
        console.print(f"\nCreate one with: [cyan]{PROGRAM} create <name>[/cyan]")
        return

    table = Table(title="Profiles")
    table.add_column("", style="green")
    table.add_column("Name")
    table.add_column("Auth")
    table.add_column("Last used", style="dim")

    for profile in profiles:
        marker = "▸" if profile.active else ""
        name = f"[bold green]{profile.name}[/bold green] (active)" if profile.active else profile.name
        last_used = "" if profile.last_used_at == "unknown" else format_relative(profile.last_used_at)
        table.add_row(marker, name, format_auth_tag(profile.auth), last_used)

    console.print(table)
    console.print(f"[dim]{len(profiles)} profile(s) total[/dim]")


app.command("ls", hidden=True)(list_profiles)


@app.command("create")
def create_profile(name: str):
    """create a new profile."""
    manager = get_profile_manager()

    try:
        metadata = manager.create(name)
    except PersonasError as e:
        exit_with_error(e)

    console.print(f"[green]✓[/green] Profile '{metadata.name}' created.")
    console.print(f"[dim]  Switch to it with: {PROGRAM} switch {name}[/dim]")


@app.command("switch")
def switch_profile(name: str):
    """switch to a profile."""
    manager = get_profile_manager()

    try:
        manager.switch(name)
        auth = manager.get_auth_info()
    except PersonasError as e:
        exit_with_error(e)

    auth_status = "[green]authenticated[/green]" if auth.authenticated else "[yellow]not authenticated[/yellow]"
    console.print(f"[green]✓[/green] Switched to profile '{name}'.")
    console.print(f"[dim]  Auth: [/dim]{auth_status}")
    console.print(f"[dim]  Restart {TOOL_COMMAND} for changes to take effect.[/dim]")


app.command("use", hidden=True)(switch_profile)


@app.command("delete")
def delete_profile(name: str):
    """delete a profile (the active profile cannot be deleted)."""
    manager = get_profile_manager()

    try:
        manager.delete(name)
    except PersonasError as e:
        exit_with_error(e)

    console.print(f"[green]✓[/green] Profile '{name}' deleted.")


app.command("rm", hidden=True)(delete_profile)


@app.command("login")
def login(name: str = typer.Argument(DEFAULT_PROFILE_NAME, help="Profile to log in to")):
    """
    log in to a profile.

    creates the profile if needed and clears the stored credentials so the
    next run starts a fresh login.
    """
    manager = get_profile_manager()

    try:
        manager.login(name)
    except PersonasError as e:
        exit_with_error(e)

    console.print(f"[green]✓[/green] Switched to profile '{name}'.")
    console.print(
        f"[yellow]  Credentials cleared. Run `{TOOL_COMMAND}` to log in with a new account.[/yellow]"
    )


@app.command("logout")
def logout():
    """log out of the current profile (clears its credentials)."""
    manager = get_profile_manager()

    try:
        manager.logout()
    except PersonasError as e:
        exit_with_error(e)

    console.print("[green]✓[/green] Logged out from current profile.")
    console.print(f"[dim]  Run `{TOOL_COMMAND}` to log in again.[/dim]")


@app.command("status")
def status(
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Print only the active profile name")
):
    """show current profile status."""
    manager = get_profile_manager()

    try:
        current = manager.status()
    except PersonasError as e:
        exit_with_error(e)

    if quiet:
        if current.active_profile:
            typer.echo(current.active_profile)
        return

    if current.auth.authenticated:
        subscription = f" ({escape(current.auth.subscription_type)})" if current.auth.subscription_type else ""
        auth_status = f"[green]yes{subscription}[/green]"
    else:
        auth_status = "[yellow]no[/yellow]"

    if current.active_profile:
        active = f"[bold green]{current.active_profile}[/bold green]"
    else:
        active = "[yellow]none (not managed)[/yellow]"

    console.print("\n[bold]Profile Manager Status:[/bold]\n")
    console.print(f"  Active profile : {active}")
    console.print(f"  Authenticated  : {auth_status}")
    console.print(f"  Config path    : [cyan]{escape(current.config_dir)}[/cyan]")
    console.print(f"  Symlink active : {'[green]yes[/green]' if current.is_symlink else '[yellow]no[/yellow]'}")
    console.print(f"  Profiles dir   : [cyan]{escape(current.profiles_dir)}[/cyan]")
    console.print(f"  Total profiles : {current.total_profiles}")

    if current.migration_blocked:
        console.print(
            f"\n[yellow]Warning:[/yellow] {escape(current.config_dir)} is a real directory and a "
            f"'{DEFAULT_PROFILE_NAME}' profile already exists, so it was not migrated. "
            "Move it aside to enable switching."
        )
    console.print()


if __name__ == "__main__":
    app()
