"""Console output helpers built on rich."""

from rich.console import Console
from rich.theme import Theme


_theme = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "yellow",
    "error": "bold red",
})

console = Console(theme=_theme, highlight=False)
error_console = Console(theme=_theme, highlight=False, stderr=True)


def _rich_echo(message: str, style: str = None):
    """Print a message verbatim (no markup), optionally styled."""
    console.print(message, style=style, markup=False, soft_wrap=True)


def _rich_info(message: str):
    _rich_echo(message, style="info")


def _rich_success(message: str):
    _rich_echo(message, style="success")


def _rich_warning(message: str):
    _rich_echo(message, style="warning")


def _rich_error(message: str):
    error_console.print(message, style="error", markup=False, soft_wrap=True)
