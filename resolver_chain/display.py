"""Terminal rendering for resolution failures."""

from rich.console import Console
from rich.console import Group
from rich.text import Text

from .errors import get_import_stack

console = Console()


def format_import_stack(text: str) -> Text:
    """Style an import stack for display (header bold, entries gray)."""
    header, _, body = text.partition("\n")
    styled = Text(header, style="bold grey50")
    if body:
        styled.append("\n")
        styled.append(body, style="grey50")
    return styled


def format_resolution_error(error: BaseException) -> Group:
    """Render an error message followed by its import stack, if any."""
    parts = [Text(str(error) or type(error).__name__, style="red")]
    if stack := get_import_stack(error):
        parts.append(Text(""))
        parts.append(format_import_stack(stack))
    return Group(*parts)


def print_resolution_error(error: BaseException, out: Console | None = None) -> None:
    (out or console).print(format_resolution_error(error))
