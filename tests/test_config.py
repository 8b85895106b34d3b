"""Tests for geometry and pagination config."""

import pytest

from report_pager.config import (
    ConfigError, GeometryConfig, PaginationOptions, TableVariant, load_config
)


def test_default_geometry_constants():
    geometry = GeometryConfig()
    assert geometry.dpi == 96
    assert geometry.margin_top_mm == 15
    assert geometry.margin_bottom_mm == 15
    assert geometry.page_padding == 40
    assert geometry.page_header_height == 64
    assert geometry.row_height == 27
    assert geometry.safety_buffer == 16
    assert geometry.headroom_rows == 1


@pytest.mark.parametrize("variant,header_height", [
    (TableVariant.PIVOT, 64),
    (TableVariant.AGGREGATE, 56),
    (TableVariant.DATA, 56),
    ("aggregate", 56),
    ("unknown", 64),
])
def test_variant_presets(variant, header_height):
    assert GeometryConfig.for_variant(variant).page_header_height == header_height


def test_variants_share_row_geometry():
    presets = [GeometryConfig.for_variant(v) for v in TableVariant]
    assert len({(g.row_height, g.page_padding, g.safety_buffer, g.margin_top_mm) for g in presets}) == 1


def test_invalid_geometry_rejected():
    with pytest.raises(ConfigError):
        GeometryConfig(row_height=0)
    with pytest.raises(ConfigError):
        GeometryConfig(dpi=-1)
    with pytest.raises(ConfigError):
        GeometryConfig.from_dict({"row_hieght": 20})
    with pytest.raises(ConfigError):
        GeometryConfig.from_dict({"row_height": "tall"})


def test_with_overrides_skips_none():
    geometry = GeometryConfig().with_overrides(row_height=30.0, safety_buffer=None)
    assert geometry.row_height == 30.0
    assert geometry.safety_buffer == 16


def test_options_resolve_geometry():
    assert PaginationOptions(variant="aggregate").resolve_geometry().page_header_height == 56
    custom = GeometryConfig(row_height=22.0)
    assert PaginationOptions(geometry=custom).resolve_geometry() is custom


def test_data_variant_only_changes_geometry():
    options = PaginationOptions(variant="data")
    assert options.variant is TableVariant.DATA
    assert options.keep_subtotals_together
    assert options.resolve_geometry() == GeometryConfig(page_header_height=56.0)


def test_load_default_config():
    options = load_config()
    assert options.page_size == "Letter"
    assert options.orientation == "portrait"
    assert options.variant is TableVariant.PIVOT


def test_yaml_round_trip(tmp_path):
    path = tmp_path / "pager.yaml"
    options = PaginationOptions(
        page_size="A4",
        orientation="landscape",
        variant=TableVariant.AGGREGATE,
        keep_subtotals_together=False,
        geometry=GeometryConfig(page_header_height=56.0, row_height=24.0),
    )
    options.to_yaml(path)

    assert load_config(path) == options


def test_yaml_geometry_layers_over_variant(tmp_path):
    path = tmp_path / "pager.yaml"
    path.write_text("variant: aggregate\ngeometry:\n  row_height: 30\n")

    options = load_config(path)
    assert options.geometry.row_height == 30.0
    assert options.geometry.page_header_height == 56.0


def test_yaml_unknown_keys_rejected(tmp_path):
    path = tmp_path / "pager.yaml"
    path.write_text("page_size: A4\npaper: thick\n")
    with pytest.raises(ConfigError):
        load_config(path)


def test_yaml_must_be_mapping(tmp_path):
    path = tmp_path / "pager.yaml"
    path.write_text("- A4\n")
    with pytest.raises(ConfigError):
        load_config(path)


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "pager.yaml"
    path.write_text("")
    assert load_config(path) == PaginationOptions()
