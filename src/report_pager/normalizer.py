"""Validate and shape extractor output into a TableModel."""

from typing import Any, List, Mapping, Optional, Tuple

from .table_model import (
    Cell, DataRow, GrandTotalRow, HeaderKind, HeaderRow, RowType, TableModel
)


class TableModelError(ValueError):
    """Raised when extractor output cannot be shaped into a TableModel."""

    def __init__(self, path: str, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


def _first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    """Value of the first key present; accepts camelCase and snake_case."""
    for key in keys:
        if key in data:
            return data[key]
    return default


def _span(value: Any) -> int:
    """colspan/rowspan: a missing or unusable span means 1."""
    try:
        span = int(value)
    except (TypeError, ValueError, OverflowError):
        return 1
    return span if span >= 1 else 1


def _optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _require_list(value: Any, path: str) -> List[Any]:
    if not isinstance(value, (list, tuple)):
        raise TableModelError(path, f"expected a list, got {type(value).__name__}")
    return list(value)


def normalize_cell(
    data: Any,
    path: str,
    default_kind: Optional[HeaderKind] = None
) -> Cell:
    """Build a Cell; a bare string is taken as the cell text."""
    if isinstance(data, Cell):
        return data
    if isinstance(data, str):
        return Cell(text=data.strip(), kind=default_kind)
    if not isinstance(data, Mapping):
        raise TableModelError(path, f"expected a cell mapping, got {type(data).__name__}")

    kind = HeaderKind.from_wire(_first(data, "kind", "headerType", "header_type"))
    return Cell(
        text=_text(data.get("text")),
        colspan=_span(_first(data, "colspan", "colSpan", default=1)),
        rowspan=_span(_first(data, "rowspan", "rowSpan", default=1)),
        kind=kind if kind is not None else default_kind,
        column_id=_optional_str(_first(data, "columnId", "column_id")),
        class_name=_optional_str(_first(data, "className", "class_name")),
        is_header=bool(_first(data, "isHeader", "is_header", default=False)),
    )


def _normalize_cells(
    data: Any,
    path: str,
    default_kind: Optional[HeaderKind] = None
) -> Tuple[Cell, ...]:
    cells = _require_list(data, path)
    return tuple(
        normalize_cell(cell, f"{path}[{i}]", default_kind)
        for i, cell in enumerate(cells)
    )


def normalize_header_row(data: Any, index: int) -> HeaderRow:
    """Build a HeaderRow; a bare list is taken as the row's cells."""
    path = f"headers[{index}]"
    if isinstance(data, HeaderRow):
        return data
    if isinstance(data, (list, tuple)):
        return HeaderRow(cells=_normalize_cells(data, f"{path}.cells"), index=index)
    if not isinstance(data, Mapping):
        raise TableModelError(path, f"expected a header row mapping, got {type(data).__name__}")
    if "cells" not in data:
        raise TableModelError(path, "missing 'cells'")

    kind = HeaderKind.from_wire(_first(data, "headerType", "header_type", "kind"))
    row_index = _optional_int(_first(data, "headerRowIndex", "header_row_index", "index"))
    return HeaderRow(
        cells=_normalize_cells(data["cells"], f"{path}.cells", kind),
        kind=kind,
        index=row_index if row_index is not None else index,
        repeat=bool(_first(data, "repeatHeader", "repeat_header", "repeat", default=True)),
    )


def normalize_data_row(data: Any, index: int) -> DataRow:
    path = f"rows[{index}]"
    if isinstance(data, DataRow):
        return data
    if not isinstance(data, Mapping):
        raise TableModelError(path, f"expected a row mapping, got {type(data).__name__}")
    if "cells" not in data:
        raise TableModelError(path, "missing 'cells'")

    row_type = RowType.from_wire(_first(data, "type", "rowType", "row_type"))
    row_index = _optional_int(data.get("index"))
    return DataRow(
        cells=_normalize_cells(data["cells"], f"{path}.cells"),
        row_type=row_type,
        subtotal_level=_optional_int(_first(data, "subtotalLevel", "subtotal_level")),
        index=row_index if row_index is not None else index,
    )


def normalize_grand_total(data: Any) -> Optional[GrandTotalRow]:
    if data is None:
        return None
    if isinstance(data, GrandTotalRow):
        return data
    if isinstance(data, (list, tuple)):
        return GrandTotalRow(cells=_normalize_cells(data, "grandTotal.cells"))
    if not isinstance(data, Mapping):
        raise TableModelError("grandTotal", f"expected a mapping, got {type(data).__name__}")
    return GrandTotalRow(cells=_normalize_cells(data.get("cells", []), "grandTotal.cells"))


def normalize_table(data: Any) -> Optional[TableModel]:
    """
    Shape extractor output into a TableModel.

    Returns None for None (nothing to paginate). Structural problems raise
    TableModelError naming the offending path; cosmetic ones (bad spans,
    unknown row types or header kinds) are coerced to their defaults.
    """
    if data is None:
        return None
    if isinstance(data, TableModel):
        return data
    if not isinstance(data, Mapping):
        raise TableModelError("table", f"expected a mapping, got {type(data).__name__}")

    headers = _require_list(data.get("headers") or [], "headers")
    rows = _require_list(data.get("rows") or [], "rows")

    metadata = data.get("metadata")
    if metadata is None:
        metadata = {}
    elif not isinstance(metadata, Mapping):
        raise TableModelError("metadata", f"expected a mapping, got {type(metadata).__name__}")

    return TableModel(
        headers=tuple(normalize_header_row(h, i) for i, h in enumerate(headers)),
        rows=tuple(normalize_data_row(r, i) for i, r in enumerate(rows)),
        grand_total=normalize_grand_total(_first(data, "grandTotal", "grand_total")),
        metadata=dict(metadata),
    )
