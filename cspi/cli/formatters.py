"""Output formatter abstractions for CLI commands."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Mapping, Sequence, TextIO

from rich.box import SIMPLE
from rich.console import Console
from rich.table import Table

Rows = Sequence[Mapping[str, object]]


class OutputFormatter:
    """Protocol-like base class for CLI output formatters."""

    name: str

    def render(self, sections: Mapping[str, Rows], *, stream: TextIO) -> None:
        """Render named row sections to the target stream."""

        raise NotImplementedError


@dataclass(slots=True)
class TableFormatter(OutputFormatter):
    """Render each section as a titled Rich table."""

    name: str = "table"
    no_color: bool = False

    def render(self, sections: Mapping[str, Rows], *, stream: TextIO) -> None:
        console = Console(file=stream, color_system=None if self.no_color else "auto", no_color=self.no_color)
        for title, rows in sections.items():
            if not rows:
                console.print(f"{title}: no data available.")
                continue
            columns = list(rows[0].keys())
            table = Table(title=title, box=SIMPLE, show_lines=False)
            header_style = "" if self.no_color else "bold"
            for column in columns:
                table.add_column(column, header_style=header_style)
            for row in rows:
                table.add_row(*(self._format_cell(row.get(column)) for column in columns))
            console.print(table)

    def _format_cell(self, value: object) -> str:
        if value is None:
            return "-"
        if isinstance(value, bool):
            return "yes" if value else "no"
        return str(value)


@dataclass(slots=True)
class JSONFormatter(OutputFormatter):
    """Render all sections as a single JSON document."""

    name: str = "json"

    def render(self, sections: Mapping[str, Rows], *, stream: TextIO) -> None:
        document = {title: list(rows) for title, rows in sections.items()}
        json.dump(document, stream, ensure_ascii=False, default=str, indent=2)
        stream.write("\n")
        stream.flush()


def create_formatter(name: str, *, no_color: bool = False) -> OutputFormatter:
    """Instantiate a formatter by name."""

    normalized = name.strip().lower()
    if normalized == "table":
        return TableFormatter(no_color=no_color)
    if normalized == "json":
        return JSONFormatter()
    msg = f"Unsupported format '{name}'. Available formats: table, json."
    raise ValueError(msg)


__all__ = ["OutputFormatter", "TableFormatter", "JSONFormatter", "create_formatter"]
