"""Configuration dataclasses and YAML loading for the paginator."""

from dataclasses import dataclass, fields, replace, asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
import yaml


class ConfigError(ValueError):
    """Raised when a configuration file holds unusable values."""


class TableVariant(Enum):
    """Table modes sharing one geometry definition."""
    PIVOT = "pivot"          # Pivot tables with hierarchical headers
    AGGREGATE = "aggregate"  # Group-by tables with subtotals
    DATA = "data"            # Plain data tables

    @classmethod
    def coerce(cls, value: Any) -> "TableVariant":
        """Return the matching variant, defaulting to PIVOT."""
        if isinstance(value, TableVariant):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.PIVOT


@dataclass(frozen=True)
class GeometryConfig:
    """Fixed layout constants shared by the budget math and the renderer.

    Lengths are in reference units (CSS px at ``dpi`` units per inch) except
    the margins, which are given in millimeters as the print engine takes them.
    """

    dpi: float = 96.0
    margin_top_mm: float = 15.0
    margin_bottom_mm: float = 15.0
    page_padding: float = 40.0       # .page padding, top + bottom
    page_header_height: float = 64.0  # Title + date + optional filter line
    row_height: float = 27.0          # th/td height; header rows use it too
    safety_buffer: float = 16.0       # Border collapsing and rounding
    headroom_rows: int = 1            # Keeps the last row's border off the edge

    def __post_init__(self):
        if self.dpi <= 0:
            raise ConfigError("dpi must be positive")
        if self.row_height <= 0:
            raise ConfigError("row_height must be positive")
        if self.headroom_rows < 0:
            raise ConfigError("headroom_rows must not be negative")

    @classmethod
    def for_variant(cls, variant: Any) -> "GeometryConfig":
        """Default geometry for a table variant."""
        return VARIANT_GEOMETRY[TableVariant.coerce(variant)]

    def with_overrides(self, **overrides: Any) -> "GeometryConfig":
        """Copy with the given non-None fields replaced."""
        values = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **values) if values else self

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "GeometryConfig":
        data = dict(data or {})
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown geometry keys: {', '.join(unknown)}")
        try:
            values = {
                k: int(v) if k == "headroom_rows" else float(v)
                for k, v in data.items()
            }
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Geometry values must be numbers: {exc}") from exc
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Pivot tables carry a taller title block than the aggregate and data modes.
VARIANT_GEOMETRY: Dict[TableVariant, GeometryConfig] = {
    TableVariant.PIVOT: GeometryConfig(page_header_height=64.0),
    TableVariant.AGGREGATE: GeometryConfig(page_header_height=56.0),
    TableVariant.DATA: GeometryConfig(page_header_height=56.0),
}


@dataclass
class PaginationOptions:
    """Per-request pagination settings."""

    page_size: str = "Letter"
    orientation: str = "portrait"
    variant: TableVariant = TableVariant.PIVOT
    keep_subtotals_together: bool = True
    geometry: Optional[GeometryConfig] = None

    def __post_init__(self):
        self.variant = TableVariant.coerce(self.variant)

    def resolve_geometry(self) -> GeometryConfig:
        """Explicit geometry wins over the variant preset."""
        if self.geometry is not None:
            return self.geometry
        return GeometryConfig.for_variant(self.variant)

    @classmethod
    def from_yaml(cls, path: Path) -> "PaginationOptions":
        """Load options from a YAML file.

        The optional ``geometry`` mapping is layered over the variant preset,
        so a file only needs the constants it changes.
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigError(f"{path}: top level must be a mapping")

        data = dict(data)
        geometry_data = data.pop("geometry", None)

        known = {f.name for f in fields(cls)} - {"geometry"}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"{path}: unknown keys: {', '.join(unknown)}")

        options = cls(**data)
        if geometry_data is not None:
            if not isinstance(geometry_data, dict):
                raise ConfigError(f"{path}: geometry must be a mapping")
            base = GeometryConfig.for_variant(options.variant).to_dict()
            base.update(geometry_data)
            options.geometry = GeometryConfig.from_dict(base)
        return options

    def to_yaml(self, path: Path) -> None:
        """Save options to a YAML file."""
        data: Dict[str, Any] = {
            "page_size": self.page_size,
            "orientation": self.orientation,
            "variant": self.variant.value,
            "keep_subtotals_together": self.keep_subtotals_together,
        }
        if self.geometry is not None:
            data["geometry"] = self.geometry.to_dict()
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_config(path: Optional[Path] = None) -> PaginationOptions:
    """Load options from path or return default options."""
    if path is None:
        return PaginationOptions()
    return PaginationOptions.from_yaml(path)
