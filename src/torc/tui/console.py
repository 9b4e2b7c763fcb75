"""Rich console output and prompts for the torc CLI."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import Confirm, IntPrompt, Prompt
from rich.table import Table

if TYPE_CHECKING:
    from torc.types import StatusReport


console = Console()

MENU_ACTIONS = {
    "a": "Add item",
    "r": "Remove item",
    "e": "Edit item",
    "s": "Save and exit",
    "q": "Quit without saving",
}


class TUI:
    """Text User Interface for torc.

    Satisfies the Reporter protocol structurally.
    """

    def __init__(self) -> None:
        """Initialize TUI."""
        self.console = Console()

    def show_header(self, title: str) -> None:
        """Display a section title with an underline."""
        self.console.print(f"[bold]{escape(title)}[/bold]")
        self.console.print("=" * 31)
        self.console.print()

    def confirm(self, message: str, default: bool = False) -> bool:
        """Show confirmation prompt.

        Args:
            message: Confirmation message.
            default: Default response.

        Returns:
            User's response.
        """
        return Confirm.ask(message, default=default, console=self.console)

    def ask(self, message: str) -> str:
        """Prompt for free text."""
        return Prompt.ask(message, console=self.console, default="")

    def ask_int(self, message: str) -> int:
        """Prompt until a whole number is entered."""
        return IntPrompt.ask(message, console=self.console)

    def show_success(self, message: str) -> None:
        """Show success message.

        Args:
            message: Success message.
        """
        self.console.print(f"[green]✓[/green] {escape(message)}")

    def show_error(self, message: str) -> None:
        """Show error message.

        Args:
            message: Error message.
        """
        self.console.print(f"[red]✗[/red] {escape(message)}")

    def show_warning(self, message: str) -> None:
        """Show warning message.

        Args:
            message: Warning message.
        """
        self.console.print(f"[yellow]![/yellow] {escape(message)}")

    def show_info(self, message: str) -> None:
        """Show info message.

        Args:
            message: Info message.
        """
        self.console.print(f"[blue]i[/blue] {escape(message)}")

    def show_output(self, output: str, title: str = "Output") -> None:
        """Show captured subprocess output verbatim.

        Args:
            output: Text to show. Nothing is printed if empty.
            title: Panel title.
        """
        if not output:
            return
        self.console.print(Panel(escape(output), title=title, border_style="dim"))

    def show_access_urls(
        self,
        order_port: int,
        admin_port: int,
        addresses: list[str],
    ) -> None:
        """Display where the ordering and admin UIs can be reached.

        Args:
            order_port: Port of the ordering UI.
            admin_port: Port of the admin UI.
            addresses: Network addresses of the host.
        """
        table = Table(title="Access URLs")
        table.add_column("Host", style="cyan")
        table.add_column("Orders UI")
        table.add_column("Admin UI")
        for host in ["localhost", *addresses]:
            table.add_row(
                host,
                f"http://{host}:{order_port}/",
                f"http://{host}:{admin_port}/",
            )
        self.console.print(table)

    def show_management_hints(self, hints: list[tuple[str, str]]) -> None:
        """Display commands for managing the service by hand."""
        self.console.print("\n[bold]Manage service:[/bold]")
        for action, command in hints:
            self.console.print(f"  {action + ':':<8} {escape(command)}")

    def show_status(self, report: StatusReport) -> None:
        """Display a status snapshot.

        Args:
            report: Status collected by the inspector.
        """
        if report.running:
            self.console.print("Status: [green]✓ Running[/green]")
        else:
            self.console.print("Status: [red]✗ Not running[/red]")
        self.console.print()
        self.console.print("[bold]Service location:[/bold]")
        self.console.print(f"  {escape(str(report.service_path))}")
        if report.logs:
            self.console.print()
            self.show_output("\n".join(report.logs), title="Recent logs")

    def show_uninstall_plan(self, preserved: list[str]) -> None:
        """Explain what uninstall will and will not delete."""
        self.console.print("This will:")
        self.console.print("  - Stop and remove the service")
        self.console.print("  - Remove the server binary")
        self.console.print("  - Remove installation files")
        self.console.print()
        self.console.print("[yellow]WARNING:[/yellow] This will NOT delete:")
        for name in preserved:
            self.console.print(f"  - {escape(name)}")
        self.console.print()

    def show_menu_items(self, items: list[str]) -> None:
        """Display the current menu.

        Args:
            items: Menu item names in order.
        """
        if not items:
            self.console.print("[yellow]Menu is empty[/yellow]")
            return
        self.console.print("[bold]Current menu items:[/bold]")
        for i, item in enumerate(items, 1):
            self.console.print(f"  {i}. {escape(item)}")

    def prompt_menu_action(self) -> str:
        """Show menu editor options and get a selection.

        Returns:
            One of the MENU_ACTIONS keys.
        """
        self.console.print()
        self.console.print("Options:")
        for key, label in MENU_ACTIONS.items():
            self.console.print(f"  \\[{key}] {label}")
        self.console.print()
        return Prompt.ask(
            "Enter choice",
            choices=list(MENU_ACTIONS),
            show_choices=False,
            console=self.console,
        )
