"""CLI commands using Typer."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Annotated, NoReturn

import click
import typer
from typer.core import TyperGroup

from torc import __version__
from torc.context import create_context
from torc.deploy import POPULAR_STATS, SESSIONS_DIR
from torc.errors import SourceUnavailable, TorcError
from torc.logging_config import resolve_level, setup_logging
from torc.menu import MenuDocument, MenuEditor, locate_menu_file
from torc.tui import TUI, console

if TYPE_CHECKING:
    from torc.context import AppContext


class VerbGroup(TyperGroup):
    """Command group that answers unknown verbs with a pointer to `help`."""

    def resolve_command(
        self, ctx: click.Context, args: Sequence[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        name = args[0] if args else None
        if name and not name.startswith("-") and self.get_command(ctx, name) is None:
            console.print(f"Unknown command: {name}")
            console.print("Run 'torc help' for usage information.")
            ctx.exit(1)
        return super().resolve_command(ctx, list(args))


app = typer.Typer(
    name="torc",
    help="Tea or Coffee (torc) - Server Installer CLI",
    cls=VerbGroup,
    add_completion=False,
)

tui = TUI()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"torc v{__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log diagnostics to stderr"),
    ] = False,
) -> None:
    """Tea or Coffee (torc) - Server Installer CLI."""
    setup_logging(resolve_level(verbose))
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _create_context() -> AppContext:
    """Build the production context, exiting on setup failure."""
    try:
        return create_context(reporter=tui)
    except TorcError as e:
        tui.show_error(str(e))
        raise typer.Exit(1) from e


def _fail(error: TorcError) -> NoReturn:
    """Report a fatal lifecycle error and exit with status 1."""
    if error.step is not None:
        tui.show_error(f"Failed to {error.step.value}: {error}")
    else:
        tui.show_error(str(error))
    tui.show_output(error.output)
    raise typer.Exit(1) from error


def _show_access(ctx: AppContext, addresses: list[str]) -> None:
    tui.show_access_urls(ctx.settings.order_port, ctx.settings.admin_port, addresses)


# ============================================================================
# Commands
# ============================================================================


@app.command()
def install(
    _context=None,
) -> None:
    """Install and start the Tea or Coffee server."""
    ctx = _context or _create_context()
    tui.show_header("Installing Tea or Coffee server...")

    try:
        report = ctx.lifecycle.install()
    except SourceUnavailable as e:
        tui.show_info("Please either:")
        tui.show_info(f"  1. Clone the repository manually: git clone {ctx.settings.repo_url}")
        tui.show_info("  2. Run 'torc install' from within the project directory")
        _fail(e)
    except TorcError as e:
        _fail(e)

    console.print()
    tui.show_success("Installation complete!")
    if report.service_started:
        tui.show_success("Server is running!")
    console.print()
    _show_access(ctx, ctx.inspector.addresses())
    tui.show_management_hints(ctx.registrar.management_hints())


@app.command()
def status(
    _context=None,
) -> None:
    """Show server status and access URLs."""
    ctx = _context or _create_context()
    tui.show_header("Tea or Coffee Server Status")

    report = ctx.inspector.inspect()
    tui.show_status(report)
    console.print()
    _show_access(ctx, report.addresses)


@app.command("update-menu")
def update_menu(
    _context=None,
) -> None:
    """Edit the menu items."""
    ctx = _context or _create_context()

    path = locate_menu_file(ctx.profile, marker=ctx.settings.build_marker)
    if path is None:
        tui.show_error("menu.txt not found")
        tui.show_info("Please install the server first with 'torc install'")
        raise typer.Exit(1)

    try:
        document = MenuDocument.load(path)
        tui.show_header("Menu Editor")
        saved = MenuEditor(document, path, tui).run()
    except OSError as e:
        tui.show_error(f"Failed to update menu {path}: {e}")
        raise typer.Exit(1) from e

    if saved:
        tui.show_success("Menu saved successfully!")
    else:
        tui.show_info("Exiting without saving...")


@app.command()
def uninstall(
    _context=None,
) -> None:
    """Remove the server installation."""
    ctx = _context or _create_context()
    tui.show_header("Uninstall Tea or Coffee Server")
    root = ctx.profile.install_root

    def confirm() -> bool:
        tui.show_uninstall_plan(
            [
                f"Session data ({SESSIONS_DIR}/ directory)",
                f"Popular items stats ({POPULAR_STATS})",
            ]
        )
        return tui.confirm("Do you want to continue?")

    report = ctx.lifecycle.uninstall(confirm)
    if not report.installed:
        tui.show_info("Server does not appear to be installed.")
        return
    if not report.confirmed:
        tui.show_info("Uninstall cancelled.")
        return

    console.print()
    tui.show_success("Uninstall complete!")
    if report.preserved:
        tui.show_info("Session data and popular.json were preserved.")
        tui.show_info("To remove them manually, delete:")
        for name in report.preserved:
            tui.show_info(f"  {root / name}")


@app.command()
def update(
    _context=None,
) -> None:
    """Update the CLI and the installed server."""
    ctx = _context or _create_context()
    tui.show_header("Updating Tea or Coffee...")

    report = ctx.lifecycle.update()
    console.print()
    if not report.cli_updated:
        tui.show_warning("CLI update failed or skipped")
    if report.server_installed and not report.server_updated:
        tui.show_warning("Server update failed")
    tui.show_success("Update complete!")


@app.command("help")
def help_command(ctx: typer.Context) -> None:
    """Show this help message."""
    parent = ctx.parent or ctx
    typer.echo(parent.get_help())


if __name__ == "__main__":
    app()
