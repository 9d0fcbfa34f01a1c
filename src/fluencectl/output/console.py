"""Rich theme and in-memory rendering for fluencectl output.

Renderers draw onto a Console backed by a string buffer, so every output
mode ends up as plain ``str`` that :class:`AppContext` routes to stdout or
stderr.  A buffer is never a TTY, so Rich leaves colour codes out unless a
caller forces them.
"""

from __future__ import annotations

from collections.abc import Callable
from io import StringIO

from rich.console import Console
from rich.theme import Theme

DEFAULT_WIDTH = 120

FLUENCE_THEME = Theme(
    {
        "fl.ok": "bold green",
        "fl.error": "bold red",
        "fl.warning": "bold yellow",
        "fl.op": "bold cyan",
        "fl.key": "dim",
        "fl.path": "dim",
        "fl.name": "bold",
        "fl.address": "bold blue",
        "fl.cid": "magenta",
        "fl.network": "cyan",
    }
)


def render_to_string(
    draw: Callable[[Console], None],
    *,
    width: int = DEFAULT_WIDTH,
    no_color: bool = False,
) -> str:
    """Run *draw* against a themed buffer console and return what it printed.

    Trailing newlines are stripped; callers add their own line endings.
    """
    buffer = StringIO()
    console = Console(
        file=buffer,
        theme=FLUENCE_THEME,
        width=width,
        no_color=no_color,
        highlight=False,
    )
    draw(console)
    return buffer.getvalue().rstrip("\n")
