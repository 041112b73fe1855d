"""
Markdown pipe-table transforms.

Turns the raw model output into:
- rows for the preview (first row is styled as the header)
- a BOM-prefixed, fully quoted CSV
- the untouched markdown for the .md export

Parsing is deliberately loose. Any line with a "|" is a row, any line
containing "---" is treated as the header separator and dropped, even when
the "---" sits inside a real cell value. Ragged rows are passed through as-is.
"""

import csv
import html
import io
import time
from dataclasses import dataclass
from typing import List
from .table_types import TableRow

BOM = "\ufeff"
CSV_MEDIA_TYPE = "text/csv;charset=utf-8"
MARKDOWN_MEDIA_TYPE = "text/markdown"


def is_separator_line(line: str) -> bool:
    return "---" in line


def split_row(line: str) -> TableRow:
    # "| a | b |".split("|") -> ["", " a ", " b ", ""]; the outer fields are syntax
    return [cell.strip() for cell in line.split("|")[1:-1]]


def parse_table(markdown: str) -> List[TableRow]:
    return [
        split_row(line)
        for line in markdown.split("\n")
        if "|" in line and not is_separator_line(line)
    ]


def to_csv(markdown: str) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerows(parse_table(markdown))
    # Rows are newline-joined, without a trailing newline after the last one
    return BOM + buf.getvalue().removesuffix("\n")


def to_markdown(markdown: str) -> str:
    return markdown


def render_preview_html(markdown: str) -> str:
    """Render the parsed rows as an HTML table, header row first"""
    lines = []
    for i, row in enumerate(parse_table(markdown)):
        if i == 0:
            cells = "".join(f'<td class="header">{html.escape(c)}</td>' for c in row)
            lines.append(f'<tr class="header">{cells}</tr>')
        else:
            cells = "".join(f"<td>{html.escape(c)}</td>" for c in row)
            lines.append(f"<tr>{cells}</tr>")

    return (
        '<table class="table-preview">\n<tbody>\n'
        + "\n".join(lines)
        + "\n</tbody>\n</table>"
    )


def export_filename(ext: str, now: float | None = None) -> str:
    """table-export-<epoch milliseconds>.<ext>"""
    millis = int((time.time() if now is None else now) * 1000)
    return f"table-export-{millis}.{ext}"


@dataclass(frozen=True)
class ExportFile:
    filename: str
    media_type: str
    content: bytes

    @property
    def content_disposition(self) -> str:
        return f'attachment; filename="{self.filename}"'


def csv_export(markdown: str, now: float | None = None) -> ExportFile:
    return ExportFile(
        filename=export_filename("csv", now),
        media_type=CSV_MEDIA_TYPE,
        content=to_csv(markdown).encode("utf-8"),
    )


def markdown_export(markdown: str, now: float | None = None) -> ExportFile:
    return ExportFile(
        filename=export_filename("md", now),
        media_type=MARKDOWN_MEDIA_TYPE,
        content=to_markdown(markdown).encode("utf-8"),
    )
