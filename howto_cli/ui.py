from rich.console import Console
from rich.markup import escape

error_console = Console(stderr=True)


def print_command(command: str) -> None:
    """Prints the generated command as raw text so tabs and carriage returns reach the shell intact."""
    print(command)


def print_error(message: str) -> None:
    """Prints an error message to stderr."""
    error_console.print(f"Error: {escape(message)}", style="bold red", emoji=False, highlight=False)
