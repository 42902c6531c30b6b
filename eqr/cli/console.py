"""Console output for the CLI.

Provides a Console class that wraps rich for consistent output.
All CLI output should go through this module.
"""

from typing import Any

from rich.console import Console as RichConsole
from rich.panel import Panel
from rich.table import Table

from eqr.domain.response.model import Counts, Events, SearchResponse, Sequences


class Console:
    """CLI output manager wrapping rich.

    Rendered documents go to stdout untouched; status messages and errors
    go to stderr so output can be piped.
    """

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        quiet: bool = False,
    ) -> None:
        self._console = RichConsole(force_terminal=force_terminal, stderr=False)
        self._err_console = RichConsole(force_terminal=force_terminal, stderr=True)
        self._quiet = quiet

    # -------------------------------------------------------------------------
    # Status messages
    # -------------------------------------------------------------------------

    def success(self, message: str) -> None:
        """Print a success message."""
        self._err_console.print(f"[green]✓[/green] {message}")

    def error(self, message: str, *, hint: str | None = None) -> None:
        """Print an error message to stderr."""
        self._err_console.print(f"[red]✗[/red] {message}")
        if hint:
            self._err_console.print(f"  [dim]{hint}[/dim]")

    def info(self, message: str) -> None:
        """Print an info message (suppressed in quiet mode)."""
        if not self._quiet:
            self._err_console.print(f"[dim]{message}[/dim]")

    # -------------------------------------------------------------------------
    # Structured output
    # -------------------------------------------------------------------------

    def raw(self, text: str) -> None:
        """Write text to stdout without markup or highlighting."""
        self._console.out(text, highlight=False)

    def table(
        self,
        rows: list[dict[str, Any]],
        columns: list[tuple[str, str]],  # (key, header)
        *,
        title: str | None = None,
        numbered: bool = False,
    ) -> None:
        table = Table(title=title, show_header=True, header_style="bold")

        if numbered:
            table.add_column("#", style="dim", width=3)

        for key, header in columns:
            table.add_column(header)

        for i, row in enumerate(rows, 1):
            values = [str(row.get(key, "")) for key, _ in columns]
            if numbered:
                table.add_row(str(i), *values)
            else:
                table.add_row(*values)

        self._console.print(table)

    def response_summary(self, response: SearchResponse) -> None:
        """Print a panel with envelope fields and a table of the result entries."""
        hits = response.hits
        lines = [
            f"[cyan]Took:[/cyan] {response.took} ms",
            f"[cyan]Timed out:[/cyan] {'yes' if response.timed_out else 'no'}",
        ]
        if hits.total is not None:
            lines.append(f"[cyan]Total:[/cyan] {hits.total.value} ({hits.total.relation.value})")
        lines.append(f"[cyan]Variant:[/cyan] {hits.variant or 'none'}")

        self._console.print(Panel("\n".join(lines), title="[bold]Response[/bold]", border_style="blue"))

        entries = hits.entries
        if entries is None:
            return
        if not len(entries):
            self.info(f"No {entries.name}")
            return

        if isinstance(entries, Events):
            rows = [
                {"index": e.index or "", "id": e.id, "score": "" if e.score is None else e.score}
                for e in entries.entries
            ]
            self.table(rows, [("index", "Index"), ("id", "ID"), ("score", "Score")], numbered=True)
        elif isinstance(entries, Sequences):
            rows = [
                {
                    "join_keys": ", ".join(s.join_keys),
                    "events": len(s.events),
                    "ids": ", ".join(e.id for e in s.events.entries),
                }
                for s in entries.entries
            ]
            self.table(
                rows,
                [("join_keys", "Join keys"), ("events", "Events"), ("ids", "Event IDs")],
                numbered=True,
            )
        elif isinstance(entries, Counts):
            rows = [
                {"keys": ", ".join(c.keys), "count": c.count, "percent": f"{c.percent:.2%}"}
                for c in entries.entries
            ]
            self.table(rows, [("keys", "Keys"), ("count", "Count"), ("percent", "Percent")], numbered=True)


# Module-level default instance for convenience
_default: Console | None = None


def get_console() -> Console:
    """Get the default console instance."""
    global _default
    if _default is None:
        _default = Console()
    return _default
