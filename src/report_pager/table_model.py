"""Table model types handed to the pagination engine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class RowType(Enum):
    """Row types carried by body rows."""
    DATA = "data"          # Ordinary data row
    SUBTOTAL = "subtotal"  # Closes a subtotal group

    @classmethod
    def from_wire(cls, value: Any) -> "RowType":
        """Map an extractor row-type string to a RowType.

        Only "subtotal" is special; anything else is a data row.
        """
        if isinstance(value, RowType):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.SUBTOTAL.value:
            return cls.SUBTOTAL
        return cls.DATA


class HeaderKind(Enum):
    """Header row kinds emitted by pivot and aggregate tables."""
    HIERARCHY = "hierarchy"  # Row-dimension labels (Region, Category)
    VALUES = "values"        # Pivoted column values (Jan, Feb, ...)
    METRICS = "metrics"      # Measure names (Sales, Units)
    OTHER = "other"

    @classmethod
    def from_wire(cls, value: Any) -> Optional["HeaderKind"]:
        if value is None or value == "":
            return None
        if isinstance(value, HeaderKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Cell:
    """A single table cell."""
    text: str = ""
    colspan: int = 1
    rowspan: int = 1
    kind: Optional[HeaderKind] = None
    column_id: Optional[str] = None
    class_name: Optional[str] = None
    is_header: bool = False


@dataclass(frozen=True)
class HeaderRow:
    """One row of the table head; repeated verbatim on every page."""
    cells: Tuple[Cell, ...] = ()
    kind: Optional[HeaderKind] = None
    index: int = 0
    repeat: bool = True


@dataclass(frozen=True)
class DataRow:
    """A body row. Order within the table is significant."""
    cells: Tuple[Cell, ...] = ()
    row_type: RowType = RowType.DATA
    subtotal_level: Optional[int] = None
    index: Optional[int] = None

    @property
    def is_subtotal(self) -> bool:
        return self.row_type is RowType.SUBTOTAL


@dataclass(frozen=True)
class GrandTotalRow:
    """The table footer row; at most one per table."""
    cells: Tuple[Cell, ...] = ()


@dataclass(frozen=True)
class TableModel:
    """Extracted table: headers, body rows, optional grand total.

    ``metadata`` is opaque to the engine and is passed through to every page.
    """
    headers: Tuple[HeaderRow, ...] = ()
    rows: Tuple[DataRow, ...] = ()
    grand_total: Optional[GrandTotalRow] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def header_row_count(self) -> int:
        """Header rows used for budgeting; an absent head counts as one row."""
        return len(self.headers) or 1

    @property
    def has_grand_total(self) -> bool:
        return self.grand_total is not None


# ============================================================================
# WIRE ENCODING
# ============================================================================

def cell_to_dict(cell: Cell) -> Dict[str, Any]:
    """Convert a Cell to the extractor's JSON shape."""
    data: Dict[str, Any] = {
        "text": cell.text,
        "colspan": cell.colspan,
        "rowspan": cell.rowspan,
    }
    if cell.kind is not None:
        data["kind"] = cell.kind.value
    if cell.column_id is not None:
        data["columnId"] = cell.column_id
    if cell.class_name is not None:
        data["className"] = cell.class_name
    if cell.is_header:
        data["isHeader"] = True
    return data


def header_row_to_dict(header: HeaderRow) -> Dict[str, Any]:
    return {
        "headerType": header.kind.value if header.kind else None,
        "headerRowIndex": header.index,
        "repeatHeader": header.repeat,
        "cells": [cell_to_dict(c) for c in header.cells],
    }


def data_row_to_dict(row: DataRow) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "type": row.row_type.value,
        "cells": [cell_to_dict(c) for c in row.cells],
    }
    if row.subtotal_level is not None:
        data["subtotalLevel"] = row.subtotal_level
    if row.index is not None:
        data["index"] = row.index
    return data


def grand_total_to_dict(grand_total: Optional[GrandTotalRow]) -> Optional[Dict[str, Any]]:
    if grand_total is None:
        return None
    return {"cells": [cell_to_dict(c) for c in grand_total.cells]}


def table_model_to_dict(table: TableModel) -> Dict[str, Any]:
    """Encode a TableModel in the JSON-compatible input contract."""
    return {
        "headers": [header_row_to_dict(h) for h in table.headers],
        "rows": [data_row_to_dict(r) for r in table.rows],
        "grandTotal": grand_total_to_dict(table.grand_total),
        "metadata": dict(table.metadata),
    }
