"""Table renderers for bills and sales reports.

``TextTableRenderer`` lays tables out for the terminal with rupee
amounts; ``CsvTableRenderer`` writes plain numbers for spreadsheets.
Neither knows where the tables came from.
"""

from __future__ import annotations

import csv
import io
from collections.abc import Sequence

from billing.application.export import LINE_HEADERS, ExportTable, TableRenderer
from billing.domain.model.value_objects import Money


class TextTableRenderer(TableRenderer):

    def __init__(self, header: str = "", footer: str = "", width: int = 47) -> None:
        self._header = header
        self._footer = footer
        self._width = width

    def render(self, tables: Sequence[ExportTable]) -> str:
        out: list[str] = []
        if self._header:
            out.append(self._header.center(self._width).rstrip())
            out.append("")
        for table in tables:
            out.extend(self._render_table(table))
            out.append("")
        if self._footer:
            out.append(self._footer.center(self._width).rstrip())
        return "\n".join(out).rstrip() + "\n"

    def _render_table(self, table: ExportTable) -> list[str]:
        lines = [table.title]
        if table.subtitle:
            lines.append(table.subtitle)
        lines.append("")

        if table.headers == LINE_HEADERS:
            row_fmt = "  {:<20} {:>5} {:>10} {:>10}"
            header = row_fmt.format("Item", "Qty", "Price", "Total")
        else:
            row_fmt = "  " + " ".join("{:<20}" for _ in table.headers)
            header = row_fmt.format(*table.headers)

        lines.append(header.rstrip())
        lines.append(f"  {'-' * (self._width - 2)}")
        if table.rows:
            for row in table.rows:
                lines.append(row_fmt.format(*(str(cell) for cell in row)).rstrip())
        else:
            lines.append("  (no rows)")
        lines.append(f"  {'-' * (self._width - 2)}")

        for label, value in table.summary:
            lines.append(f"  {label:<27} {str(value):>{self._width - 30}}")

        if table.note:
            lines.append("")
            lines.append("Notes:")
            lines.extend(f"  {part}" for part in table.note.splitlines())
        return lines


class CsvTableRenderer(TableRenderer):

    def render(self, tables: Sequence[ExportTable]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        for position, table in enumerate(tables):
            if position:
                writer.writerow([])
            writer.writerow([table.title])
            if table.subtitle:
                writer.writerow([table.subtitle])
            writer.writerow(table.headers)
            for row in table.rows:
                writer.writerow([_plain(cell) for cell in row])
            for label, value in table.summary:
                writer.writerow([label, _plain(value)])
            if table.note:
                writer.writerow(["Notes", table.note])
        return buffer.getvalue()


def _plain(value: object) -> object:
    if isinstance(value, Money):
        return value.plain()
    return value
