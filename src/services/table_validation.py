"""
Post-response checks for an extracted table.

The model is trusted to honor the instruction text, so nothing here fails an
extraction. Each broken expectation becomes a human-readable warning that is
returned alongside the markdown.
"""

import re
from typing import List
from loguru import logger
from .prompt import COLUMNS, CONSTANT_COLUMNS, DATE_COLUMNS, MISSING_VALUE
from .table_types import TableRow

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_rows(rows: List[TableRow], expected_columns: List[str] = COLUMNS) -> List[str]:
    """
    Check parsed rows against the 16-column contract.

    Args:
        rows: Output of parse_table(); rows[0] is the header
        expected_columns: Column names in contract order

    Returns:
        Warnings, empty when the table looks well-formed
    """
    warnings: List[str] = []
    if not rows:
        return ["No table rows found in extraction result"]

    width = len(expected_columns)
    header, data = rows[0], rows[1:]

    if len(header) != width:
        warnings.append(f"Header has {len(header)} columns, expected {width}")

    for n, row in enumerate(data, start=1):
        if len(row) != width:
            warnings.append(f"Row {n} has {len(row)} columns, expected {width}")
            # Column positions are unreliable on a ragged row
            continue

        cells = dict(zip(expected_columns, row))
        for column in DATE_COLUMNS:
            value = cells.get(column)
            if value is not None and value != MISSING_VALUE and not DATE_RE.match(value):
                warnings.append(f"Row {n} column {column} is not YYYY-MM-DD: {value!r}")

        for column, literal in CONSTANT_COLUMNS.items():
            value = cells.get(column)
            if value is not None and value != literal:
                warnings.append(f"Row {n} column {column} should be {literal!r}, got {value!r}")

    if warnings:
        logger.warning("Extracted table failed validation checks", warnings=len(warnings), rows=len(rows))

    return warnings
