"""Seeded synthetic tables for demos, load tests and property tests."""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple
import numpy as np
from faker import Faker

from .config import TableVariant
from .table_model import (
    Cell, DataRow, GrandTotalRow, HeaderKind, HeaderRow, RowType, TableModel
)


REGIONS = [
    "Northeast", "Southeast", "Midwest", "Southwest", "Mountain",
    "Pacific", "Great Lakes", "Mid-Atlantic", "New England", "Gulf Coast",
]

CATEGORIES = [
    "Management Fees", "Legal Fees", "Accounting Fees", "Insurance",
    "Electricity", "Gas", "Water & Sewer", "General Maintenance",
    "Landscaping", "Janitorial Services", "Elevator Maintenance",
    "Security", "Snow Removal", "Pest Control", "Supplies",
]

PERIOD_START = date(2025, 1, 1)
PERIOD_END = date(2025, 12, 31)

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]


def _money(value: float) -> str:
    return f"{value:,.2f}"


def _header_cell(text: str, kind: HeaderKind, colspan: int = 1, rowspan: int = 1,
                 column_id: Optional[str] = None) -> Cell:
    return Cell(text=text, colspan=colspan, rowspan=rowspan, kind=kind,
                column_id=column_id, is_header=True)


def _group_sizes(
    rng: np.random.Generator,
    num_groups: int,
    rows_per_group: Tuple[int, int]
) -> List[int]:
    low, high = rows_per_group
    return [int(rng.integers(low, high + 1)) for _ in range(num_groups)]


def _pick(rng: np.random.Generator, options: Sequence[str], count: int) -> List[str]:
    """Pick ``count`` labels, cycling with a suffix once the list runs out."""
    order = list(rng.permutation(len(options)))
    picked = []
    for i in range(count):
        label = options[order[i % len(options)]]
        if i >= len(options):
            label = f"{label} {i // len(options) + 1}"
        picked.append(label)
    return picked


def generate_pivot_table(
    num_groups: int = 4,
    rows_per_group: Tuple[int, int] = (3, 8),
    num_months: int = 3,
    metrics: Sequence[str] = ("Sales", "Units"),
    with_grand_total: bool = True,
    seed: int = 42
) -> TableModel:
    """
    Generate a pivot table: Region x Category rows, Month x Metric columns.

    Two header rows: hierarchy labels plus month headers spanning the
    metrics, then one metric header per month. Each region closes with a
    level-1 subtotal row.
    """
    rng = np.random.default_rng(seed)
    months = MONTHS[:max(1, min(num_months, len(MONTHS)))]
    n_values = len(months) * len(metrics)

    top = [
        _header_cell("Region", HeaderKind.HIERARCHY, rowspan=2, column_id="region"),
        _header_cell("Category", HeaderKind.HIERARCHY, rowspan=2, column_id="category"),
    ]
    top += [
        _header_cell(month, HeaderKind.VALUES, colspan=len(metrics), column_id=month.lower())
        for month in months
    ]
    bottom = [
        _header_cell(metric, HeaderKind.METRICS,
                     column_id=f"{month.lower()}_{metric.lower()}")
        for month in months for metric in metrics
    ]
    headers = (
        HeaderRow(cells=tuple(top), kind=HeaderKind.HIERARCHY, index=0),
        HeaderRow(cells=tuple(bottom), kind=HeaderKind.METRICS, index=1),
    )

    rows: List[DataRow] = []
    grand = np.zeros(n_values)
    regions = _pick(rng, REGIONS, num_groups)

    for region, size in zip(regions, _group_sizes(rng, num_groups, rows_per_group)):
        subtotal = np.zeros(n_values)
        for category in _pick(rng, CATEGORIES, size):
            values = rng.uniform(100, 25000, n_values).round(2)
            subtotal += values
            cells = [Cell(text=region, is_header=True), Cell(text=category, is_header=True)]
            cells += [Cell(text=_money(v)) for v in values]
            rows.append(DataRow(cells=tuple(cells), row_type=RowType.DATA, index=len(rows)))

        grand += subtotal
        cells = [Cell(text=f"{region} Total", colspan=2, is_header=True, class_name="subtotal")]
        cells += [Cell(text=_money(v), class_name="subtotal") for v in subtotal]
        rows.append(DataRow(cells=tuple(cells), row_type=RowType.SUBTOTAL,
                            subtotal_level=1, index=len(rows)))

    grand_total = None
    if with_grand_total:
        cells = [Cell(text="Grand Total", colspan=2, is_header=True)]
        cells += [Cell(text=_money(v)) for v in grand]
        grand_total = GrandTotalRow(cells=tuple(cells))

    metadata: Dict[str, Any] = {
        "tableType": "pivot",
        "rowLevels": 2,
        "pivotLevels": 1,
        "totalRows": len(rows),
        "hasGrandTotal": grand_total is not None,
    }
    return TableModel(headers=headers, rows=tuple(rows),
                      grand_total=grand_total, metadata=metadata)


def generate_aggregate_table(
    num_groups: int = 5,
    rows_per_group: Tuple[int, int] = (2, 10),
    with_grand_total: bool = True,
    seed: int = 42
) -> TableModel:
    """Generate a group-by table: one header row, vendor rows per category."""
    rng = np.random.default_rng(seed)
    fake = Faker()
    fake.seed_instance(seed)

    header = HeaderRow(cells=(
        _header_cell("Category", HeaderKind.HIERARCHY, column_id="category"),
        _header_cell("Vendor", HeaderKind.HIERARCHY, column_id="vendor"),
        _header_cell("Invoices", HeaderKind.METRICS, column_id="invoices"),
        _header_cell("Amount", HeaderKind.METRICS, column_id="amount"),
    ), kind=HeaderKind.HIERARCHY)

    rows: List[DataRow] = []
    grand_count = 0
    grand_amount = 0.0

    categories = _pick(rng, CATEGORIES, num_groups)
    for category, size in zip(categories, _group_sizes(rng, num_groups, rows_per_group)):
        group_count = 0
        group_amount = 0.0
        for _ in range(size):
            count = int(rng.integers(1, 25))
            amount = round(float(rng.uniform(250, 40000)), 2)
            group_count += count
            group_amount += amount
            rows.append(DataRow(cells=(
                Cell(text=category),
                Cell(text=fake.company()),
                Cell(text=str(count)),
                Cell(text=_money(amount)),
            ), index=len(rows)))

        grand_count += group_count
        grand_amount += group_amount
        rows.append(DataRow(cells=(
            Cell(text=f"Subtotal: {category}", colspan=2, class_name="subtotal"),
            Cell(text=str(group_count), class_name="subtotal"),
            Cell(text=_money(group_amount), class_name="subtotal"),
        ), row_type=RowType.SUBTOTAL, subtotal_level=1, index=len(rows)))

    grand_total = None
    if with_grand_total:
        grand_total = GrandTotalRow(cells=(
            Cell(text="Grand Total", colspan=2),
            Cell(text=str(grand_count)),
            Cell(text=_money(grand_amount)),
        ))

    metadata = {
        "tableType": "aggregate",
        "groupByCount": 1,
        "totalRows": len(rows),
        "hasGrandTotal": grand_total is not None,
    }
    return TableModel(headers=(header,), rows=tuple(rows),
                      grand_total=grand_total, metadata=metadata)


def generate_data_table(num_rows: int = 100, seed: int = 42) -> TableModel:
    """Generate a plain data table of payments; no subtotals, no footer."""
    rng = np.random.default_rng(seed)
    fake = Faker()
    fake.seed_instance(seed)

    columns = [("Date", "date"), ("Payee", "payee"), ("Reference", "reference"),
               ("Description", "description"), ("Amount", "amount")]
    header = HeaderRow(cells=tuple(
        _header_cell(name, HeaderKind.VALUES, column_id=column_id)
        for name, column_id in columns
    ), kind=HeaderKind.VALUES)

    rows = []
    for i in range(num_rows):
        rows.append(DataRow(cells=(
            Cell(text=fake.date_between(start_date=PERIOD_START, end_date=PERIOD_END).strftime("%m/%d/%Y")),
            Cell(text=fake.company()),
            Cell(text=f"CHK{int(rng.integers(1000, 9999))}"),
            Cell(text=fake.sentence(nb_words=4).rstrip(".")),
            Cell(text=_money(float(rng.uniform(50, 9000)))),
        ), index=i))

    metadata = {"tableType": "data", "totalRows": num_rows}
    return TableModel(headers=(header,), rows=tuple(rows), metadata=metadata)


def generate_table(variant: Any = TableVariant.PIVOT, seed: int = 42, **kwargs: Any) -> TableModel:
    """Generate a sample table for a variant."""
    variant = TableVariant.coerce(variant)
    if variant is TableVariant.AGGREGATE:
        return generate_aggregate_table(seed=seed, **kwargs)
    if variant is TableVariant.DATA:
        return generate_data_table(seed=seed, **kwargs)
    return generate_pivot_table(seed=seed, **kwargs)
