"""Rich console output helpers for the CLI."""

from rich.console import Console
from rich.panel import Panel

console = Console()
error_console = Console(stderr=True)


def print_error(message: str) -> None:
    error_console.print(f"[bold red]✗[/bold red] {message}")


def print_warning(message: str) -> None:
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    console.print(f"[cyan]ℹ[/cyan] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_panel(content: str, title: str | None = None, style: str = "cyan") -> None:
    console.print(Panel(content, title=title, border_style=style))
