"""Shared fixtures for paginator tests."""

from typing import List

import pytest
import structlog

from report_pager.table_model import (
    Cell, DataRow, GrandTotalRow, HeaderKind, HeaderRow, RowType, TableModel
)


@pytest.fixture(autouse=True)
def _reset_structlog():
    yield
    structlog.reset_defaults()


def make_rows(pattern: str) -> List[DataRow]:
    """Rows from a pattern string: 'd' is a data row, 'S' a subtotal row."""
    rows = []
    for i, code in enumerate(pattern):
        row_type = RowType.SUBTOTAL if code == "S" else RowType.DATA
        rows.append(DataRow(
            cells=(Cell(text=f"{code}{i}"),),
            row_type=row_type,
            subtotal_level=1 if row_type is RowType.SUBTOTAL else None,
            index=i,
        ))
    return rows


def make_headers(count: int = 1) -> tuple:
    return tuple(
        HeaderRow(cells=(Cell(text=f"H{i}", kind=HeaderKind.HIERARCHY, is_header=True),),
                  kind=HeaderKind.HIERARCHY, index=i)
        for i in range(count)
    )


def make_table(pattern: str, header_rows: int = 1, grand_total: bool = False) -> TableModel:
    return TableModel(
        headers=make_headers(header_rows),
        rows=tuple(make_rows(pattern)),
        grand_total=GrandTotalRow(cells=(Cell(text="Grand Total"),)) if grand_total else None,
        metadata={"tableType": "test"},
    )


@pytest.fixture
def headers():
    return make_headers(1)


@pytest.fixture
def grand_total():
    return GrandTotalRow(cells=(Cell(text="Grand Total", colspan=2), Cell(text="1,000.00")))
