#!/usr/bin/env python3
"""Plain table and CSV printers."""

from typing import List, Sequence


def _column_widths(rows: Sequence[Sequence[str]]) -> List[int]:
    n_columns = max((len(row) for row in rows), default=0)
    return [
        max((len(row[i]) for row in rows if i < len(row)), default=0)
        for i in range(n_columns)
    ]


def format_table(rows: Sequence[Sequence[str]]) -> List[str]:
    """Box-drawn table, every column as wide as its widest cell.

    The first row is treated as the header.
    """
    if not rows:
        return []
    widths = _column_widths(rows)

    def rule(left: str, mid: str, right: str) -> str:
        return left + mid.join("─" * w for w in widths) + right

    lines = [rule("┌", "┬", "┐")]
    for idx, row in enumerate(rows):
        cells = [
            (row[i] if i < len(row) else "").ljust(w) for i, w in enumerate(widths)
        ]
        lines.append("│" + "│".join(cells) + "│")
        if idx == 0 and len(rows) > 1:
            lines.append(rule("├", "┼", "┤"))
    lines.append(rule("└", "┴", "┘"))
    return lines


def csv_field(value: str) -> str:
    """Escape one CSV field: quotes become single quotes and fields with a
    comma are wrapped in double quotes."""
    value = value.replace('"', "'")
    if "," in value:
        return f'"{value}"'
    return value


def format_csv(rows: Sequence[Sequence[str]]) -> List[str]:
    return [",".join(csv_field(str(cell)) for cell in row) for row in rows]
