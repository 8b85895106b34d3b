"""Split body rows into groups that must stay on one page."""

from typing import List, Sequence

from .table_model import DataRow


def has_subtotals(rows: Sequence[DataRow]) -> bool:
    """True if any row is a subtotal row."""
    return any(row.is_subtotal for row in rows)


def group_rows_with_subtotals(rows: Sequence[DataRow]) -> List[List[DataRow]]:
    """
    Partition rows into contiguous groups.

    A group closes right after a subtotal row, or at the last row of the
    table, so every group ends with its subtotal (or with the table's final
    row) and no group spans a subtotal boundary. Group sizes are not bounded
    by the page budget.
    """
    groups: List[List[DataRow]] = []
    current: List[DataRow] = []
    last_index = len(rows) - 1

    for index, row in enumerate(rows):
        current.append(row)
        if row.is_subtotal or index == last_index:
            groups.append(current)
            current = []

    return groups
