"""Assemble table rows into printed pages with repeated headers."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Tuple, Union

from .config import GeometryConfig, PaginationOptions
from .grouping import group_rows_with_subtotals, has_subtotals
from .layout_engine import PageLayout
from .logging import get_logger
from .normalizer import normalize_table
from .table_model import DataRow, GrandTotalRow, HeaderRow, TableModel

logger = get_logger(__name__)


@dataclass
class Page:
    """One printed page of a paginated table."""
    headers: Tuple[HeaderRow, ...]
    rows: Union[List[DataRow], Tuple[DataRow, ...]] = field(default_factory=list)
    page_number: int = 1
    total_pages: int = 0  # Set by stamp_pages once every page exists
    grand_total: Optional[GrandTotalRow] = None
    metadata: Mapping[str, Any] = field(default_factory=dict)

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def is_grand_total_only(self) -> bool:
        return not self.rows and self.grand_total is not None


class PageAssembler:
    """Packs rows (or subtotal groups) into pages of at most max_data_rows."""

    def __init__(
        self,
        headers: Sequence[HeaderRow],
        max_data_rows: int,
        metadata: Optional[Mapping[str, Any]] = None
    ):
        self.headers = tuple(headers)
        self.max_data_rows = max_data_rows
        self.metadata = metadata if metadata is not None else {}
        self.pages: List[Page] = []
        self.current_page = self._new_page()
        self.current_row_count = 0

    def _new_page(self) -> Page:
        return Page(
            headers=self.headers,
            page_number=len(self.pages) + 1,
            metadata=self.metadata,
        )

    def start_new_page(self) -> Page:
        """Close the current page and open an empty one."""
        self.pages.append(self.current_page)
        self.current_page = self._new_page()
        self.current_row_count = 0
        return self.current_page

    def add_group(self, group: Sequence[DataRow]) -> None:
        """
        Place a whole group on a page.

        The group moves to a fresh page when it would overflow a page that
        already has rows. A group larger than the budget is still placed
        whole, so that page overflows instead of splitting the subtotal block.
        """
        size = len(group)
        if self.current_row_count + size > self.max_data_rows and self.current_page.rows:
            self.start_new_page()
        self.current_page.rows.extend(group)
        self.current_row_count += size

    def add_row(self, row: DataRow) -> None:
        if self.current_row_count >= self.max_data_rows and self.current_page.rows:
            self.start_new_page()
        self.current_page.rows.append(row)
        self.current_row_count += 1

    def finish(self) -> List[Page]:
        """Push the last page if it has rows and return all pages."""
        if self.current_page.rows:
            self.pages.append(self.current_page)
            self.current_page = self._new_page()
            self.current_row_count = 0
        return self.pages


def assemble_pages(
    headers: Sequence[HeaderRow],
    rows: Sequence[DataRow],
    max_data_rows: int,
    metadata: Optional[Mapping[str, Any]] = None,
    keep_subtotals_together: bool = True
) -> List[Page]:
    """
    Bin-pack rows into pages without grand total or page totals.

    Subtotal groups are kept whole when ``keep_subtotals_together`` is set and
    the table has subtotal rows; otherwise rows are packed one by one.
    """
    assembler = PageAssembler(headers, max_data_rows, metadata)

    if keep_subtotals_together and has_subtotals(rows):
        groups = group_rows_with_subtotals(rows)
        logger.debug("pagination.groups", group_count=len(groups))
        for group in groups:
            assembler.add_group(group)
    else:
        for row in rows:
            assembler.add_row(row)

    return assembler.finish()


def grand_total_fits(page: Page, header_row_count: int, max_data_rows: int) -> bool:
    """True if the grand total row fits under the page's data rows."""
    rows_on_page = header_row_count + len(page.rows) + 1
    return rows_on_page <= header_row_count + max_data_rows


def place_grand_total(
    pages: List[Page],
    grand_total: Optional[GrandTotalRow],
    header_row_count: int,
    max_data_rows: int,
    metadata: Optional[Mapping[str, Any]] = None
) -> List[Page]:
    """
    Attach the grand total to the last page, or to a page of its own.

    Nothing happens without a grand total or without pages.
    """
    if grand_total is None or not pages:
        return pages

    last_page = pages[-1]
    if grand_total_fits(last_page, header_row_count, max_data_rows):
        last_page.grand_total = grand_total
    else:
        pages.append(Page(
            headers=last_page.headers,
            page_number=len(pages) + 1,
            grand_total=grand_total,
            metadata=metadata if metadata is not None else last_page.metadata,
        ))
    return pages


def stamp_pages(pages: List[Page]) -> List[Page]:
    """Write the final page count into every page and freeze its rows."""
    total = len(pages)
    for page in pages:
        page.total_pages = total
        page.rows = tuple(page.rows)
    return pages


def paginate_table(
    table: Any,
    options: Optional[PaginationOptions] = None,
    geometry: Optional[GeometryConfig] = None
) -> List[Page]:
    """
    Split a table into printed pages.

    Args:
        table: TableModel, or the extractor's JSON-compatible mapping
        options: Page size, orientation, variant, subtotal grouping
        geometry: Overrides the geometry the options resolve to

    Returns:
        Stamped pages; empty when there is no table or no rows
    """
    model: Optional[TableModel] = normalize_table(table)
    if model is None:
        logger.info("pagination.skipped", reason="no table")
        return []

    options = options or PaginationOptions()
    geometry = geometry or options.resolve_geometry()
    header_row_count = model.header_row_count

    layout = PageLayout.for_page(
        options.page_size, options.orientation, header_row_count, geometry
    )
    max_data_rows = layout.max_data_rows

    logger.info(
        "pagination.budget",
        variant=options.variant.value,
        page_size=layout.page_size.value,
        orientation=layout.orientation.value,
        header_rows=header_row_count,
        page_height=round(layout.page_height, 1),
        available_height=round(layout.available_height, 1),
        row_height=layout.row_height,
        max_data_rows=max_data_rows,
        total_rows_per_page=layout.total_rows_per_page,
        row_count=len(model.rows),
    )

    pages = assemble_pages(
        model.headers,
        model.rows,
        max_data_rows,
        model.metadata,
        keep_subtotals_together=options.keep_subtotals_together,
    )

    place_grand_total(
        pages, model.grand_total, header_row_count, max_data_rows, model.metadata
    )

    stamp_pages(pages)

    for page in pages:
        logger.debug(
            "pagination.page",
            page_number=page.page_number,
            header_rows=header_row_count,
            data_rows=len(page.rows),
            grand_total=page.grand_total is not None,
            total_rows=header_row_count + len(page.rows) + (1 if page.grand_total else 0),
        )

    logger.info(
        "pagination.complete",
        page_count=len(pages),
        row_count=len(model.rows),
        rows_per_page=[len(p.rows) for p in pages],
        grand_total_page=next(
            (p.page_number for p in pages if p.grand_total is not None), None
        ),
    )
    return pages
