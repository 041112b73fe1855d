"""
Tests for the markdown pipe-table transforms.

Covers row parsing, separator handling, CSV quoting and BOM, markdown
passthrough, HTML preview and export file naming.
"""

import csv
import io
from src.services.prompt import COLUMNS
from src.services.table_transform import (
    BOM,
    csv_export,
    export_filename,
    markdown_export,
    parse_table,
    render_preview_html,
    split_row,
    to_csv,
    to_markdown,
)
from conftest import SAMPLE_MARKDOWN


def _sixteen_column_table(data_rows: int) -> str:
    lines = ["| " + " | ".join(COLUMNS) + " |", "|" + "---|" * len(COLUMNS)]
    for n in range(data_rows):
        cells = [f"r{n}c{c}" for c in range(len(COLUMNS))]
        lines.append("| " + " | ".join(cells) + " |")
    return "\n".join(lines)


def _read_csv(text: str) -> list[list[str]]:
    assert text.startswith(BOM)
    return list(csv.reader(io.StringIO(text[len(BOM):])))


def test_sample_table_rows():
    """Header and data row come back trimmed, separator dropped"""
    rows = parse_table(SAMPLE_MARKDOWN)
    assert rows == [["編號", "名稱"], ["IM250001", "測試案, A"]]


def test_sample_table_csv():
    assert to_csv(SAMPLE_MARKDOWN) == BOM + '"編號","名稱"\n"IM250001","測試案, A"'


def test_sixteen_columns_preview_and_csv_row_counts():
    """N data rows + header -> N+1 preview rows and N+1 CSV lines of 16 fields"""
    markdown = _sixteen_column_table(5)

    rows = parse_table(markdown)
    assert len(rows) == 6
    assert all(len(r) == 16 for r in rows)
    assert rows[0] == COLUMNS

    csv_rows = _read_csv(to_csv(markdown))
    assert len(csv_rows) == 6
    assert all(len(r) == 16 for r in csv_rows)


def test_csv_double_quote_round_trip():
    """A literal double quote survives a standard CSV reader unchanged"""
    markdown = '| name | note |\n|---|---|\n| 18" panel | say "hi" |'
    text = to_csv(markdown)

    assert '"18"" panel"' in text
    assert _read_csv(text)[1] == ['18" panel', 'say "hi"']


def test_csv_comma_stays_inside_quotes():
    markdown = "| amount |\n|---|\n| NT$1,234,567 |"
    text = to_csv(markdown)

    assert '"NT$1,234,567"' in text
    assert _read_csv(text) == [["amount"], ["NT$1,234,567"]]


def test_csv_starts_with_utf8_bom_bytes():
    export = csv_export(SAMPLE_MARKDOWN)
    assert export.content[:3] == b"\xef\xbb\xbf"
    assert export.media_type == "text/csv;charset=utf-8"
    assert export.filename.endswith(".csv")


def test_csv_has_no_trailing_newline():
    assert not to_csv(SAMPLE_MARKDOWN).endswith("\n")


def test_separator_lines_excluded():
    markdown = "| a | b |\n| --- | --- |\n| 1 | 2 |\n|:---|---:|\n| 3 | 4 |"
    assert parse_table(markdown) == [["a", "b"], ["1", "2"], ["3", "4"]]
    assert "---" not in to_csv(markdown)


def test_cell_containing_triple_hyphen_is_dropped():
    """Known heuristic gap: a real row containing '---' is treated as a separator"""
    markdown = "| id | note |\n|---|---|\n| 1 | a---b |\n| 2 | ok |"
    assert parse_table(markdown) == [["id", "note"], ["2", "ok"]]


def test_lines_without_pipes_ignored():
    markdown = "Here is the table:\n\n| a | b |\n|---|---|\n| 1 | 2 |\n\nDone."
    assert parse_table(markdown) == [["a", "b"], ["1", "2"]]


def test_ragged_rows_pass_through():
    """Malformed output is not an error; rows keep whatever cells they have"""
    markdown = "| a | b | c |\n|---|---|---|\n| 1 | 2 |\n| 1 | 2 | 3 | 4 |"
    assert parse_table(markdown) == [["a", "b", "c"], ["1", "2"], ["1", "2", "3", "4"]]


def test_split_row_drops_outer_fields():
    assert split_row("|  x  |  y  |") == ["x", "y"]
    # Without outer pipes the first and last cells are lost, as with any loose line
    assert split_row("x | y | z") == ["y"]
    assert split_row("| a |\r") == ["a"]


def test_crlf_input():
    markdown = "| a | b |\r\n|---|---|\r\n| 1 | 2 |\r\n"
    assert parse_table(markdown) == [["a", "b"], ["1", "2"]]


def test_empty_input():
    assert parse_table("") == []
    assert to_csv("") == BOM


def test_markdown_export_is_verbatim():
    raw = "Intro line\n" + SAMPLE_MARKDOWN + "\n\n"
    assert to_markdown(raw) == raw

    export = markdown_export(raw)
    assert export.content == raw.encode("utf-8")
    assert export.media_type == "text/markdown"
    assert export.filename.endswith(".md")


def test_export_filename_uses_epoch_millis():
    assert export_filename("csv", now=1700000000.5) == "table-export-1700000000500.csv"
    assert export_filename("md", now=0) == "table-export-0.md"


def test_content_disposition_names_the_file():
    export = csv_export(SAMPLE_MARKDOWN, now=1.5)
    assert export.content_disposition == 'attachment; filename="table-export-1500.csv"'


def test_preview_html_styles_header_and_escapes():
    markdown = "| a | <b> |\n|---|---|\n| 1 | x & y |"
    out = render_preview_html(markdown)

    assert '<tr class="header"><td class="header">a</td><td class="header">&lt;b&gt;</td></tr>' in out
    assert "<tr><td>1</td><td>x &amp; y</td></tr>" in out
    assert out.count("<tr") == 2
