"""Page budget: how many data rows fit on one printed page."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple
from reportlab.lib.pagesizes import A3, A4, A5, LEGAL, LETTER, landscape, portrait
from reportlab.lib.units import inch, mm

from .config import GeometryConfig


class PageSize(Enum):
    """Paper sizes the print engine accepts."""
    LETTER = "Letter"
    LEGAL = "Legal"
    A4 = "A4"
    A3 = "A3"
    A5 = "A5"

    @classmethod
    def coerce(cls, value: Any) -> "PageSize":
        """Return the matching size, falling back to Letter."""
        if isinstance(value, PageSize):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for size in cls:
                if size.value.lower() == wanted:
                    return size
        return cls.LETTER


class Orientation(Enum):
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"

    @classmethod
    def coerce(cls, value: Any) -> "Orientation":
        """Return the matching orientation, falling back to portrait."""
        if isinstance(value, Orientation):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.LANDSCAPE.value:
            return cls.LANDSCAPE
        return cls.PORTRAIT


# Physical page sizes in points (1/72 inch)
PAGE_SIZES: Dict[PageSize, Tuple[float, float]] = {
    PageSize.LETTER: LETTER,  # 8.5 x 11 in
    PageSize.LEGAL: LEGAL,    # 8.5 x 14 in
    PageSize.A4: A4,          # 210 x 297 mm
    PageSize.A3: A3,          # 297 x 420 mm
    PageSize.A5: A5,          # 148 x 210 mm
}


def points_to_units(points: float, dpi: float) -> float:
    """Convert points to reference units at the given resolution."""
    return points / inch * dpi


def mm_to_units(millimeters: float, dpi: float) -> float:
    return points_to_units(millimeters * mm, dpi)


def page_dimensions(
    page_size: Any,
    orientation: Any,
    geometry: Optional[GeometryConfig] = None
) -> Tuple[float, float]:
    """Page (width, height) in reference units for a size and orientation."""
    geometry = geometry or GeometryConfig()
    size = PAGE_SIZES[PageSize.coerce(page_size)]
    if Orientation.coerce(orientation) is Orientation.LANDSCAPE:
        size = landscape(size)
    else:
        size = portrait(size)
    width, height = size
    return points_to_units(width, geometry.dpi), points_to_units(height, geometry.dpi)


@dataclass(frozen=True)
class PageLayout:
    """Vertical budget of one printed page, in reference units."""
    page_size: PageSize
    orientation: Orientation
    page_height: float
    margins: float
    page_padding: float
    page_header_height: float
    header_row_count: int
    row_height: float
    safety_buffer: float
    headroom_rows: int = 1

    @classmethod
    def for_page(
        cls,
        page_size: Any = PageSize.LETTER,
        orientation: Any = Orientation.PORTRAIT,
        header_row_count: Optional[int] = 1,
        geometry: Optional[GeometryConfig] = None
    ) -> "PageLayout":
        """Build the layout for a page; invalid inputs take their fallbacks."""
        geometry = geometry or GeometryConfig()
        size = PageSize.coerce(page_size)
        orient = Orientation.coerce(orientation)
        _, height = page_dimensions(size, orient, geometry)
        return cls(
            page_size=size,
            orientation=orient,
            page_height=height,
            margins=mm_to_units(geometry.margin_top_mm + geometry.margin_bottom_mm, geometry.dpi),
            page_padding=geometry.page_padding,
            page_header_height=geometry.page_header_height,
            header_row_count=_coerce_header_rows(header_row_count),
            row_height=geometry.row_height,
            safety_buffer=geometry.safety_buffer,
            headroom_rows=geometry.headroom_rows,
        )

    @property
    def header_height(self) -> float:
        try:
            return self.header_row_count * self.row_height
        except OverflowError:
            return math.inf

    @property
    def available_height(self) -> float:
        """Height left for data rows once all fixed blocks are taken."""
        return (
            self.page_height
            - self.margins
            - self.page_padding
            - self.page_header_height
            - self.header_height
            - self.safety_buffer
        )

    @property
    def max_data_rows(self) -> int:
        rows_that_fit = self.available_height / self.row_height
        if not math.isfinite(rows_that_fit):
            return 1
        return max(1, math.floor(rows_that_fit) - self.headroom_rows)

    @property
    def total_rows_per_page(self) -> int:
        """Header rows plus data rows."""
        return self.header_row_count + self.max_data_rows


def _coerce_header_rows(header_row_count: Any) -> int:
    try:
        count = int(header_row_count)
    except (TypeError, ValueError, OverflowError):
        return 1
    return count if count > 0 else 1


def compute_max_data_rows(
    page_size: Any = PageSize.LETTER,
    orientation: Any = Orientation.PORTRAIT,
    header_row_count: Optional[int] = 1,
    geometry: Optional[GeometryConfig] = None
) -> int:
    """
    Maximum data rows per page for the given page and header height.

    Never raises: an unknown page size uses Letter, an unknown orientation
    uses portrait, and a missing header count means one header row.
    """
    return PageLayout.for_page(page_size, orientation, header_row_count, geometry).max_data_rows


def estimate_rows_per_page(
    page_size: Any = PageSize.LETTER,
    orientation: Any = Orientation.PORTRAIT,
    has_multi_row_headers: bool = False,
    header_row_count: Optional[int] = 1,
    geometry: Optional[GeometryConfig] = None
) -> int:
    """Older entry point; ``has_multi_row_headers`` is ignored."""
    return compute_max_data_rows(page_size, orientation, header_row_count, geometry)
