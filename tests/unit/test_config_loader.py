"""Unit tests for configuration loading and merging."""

import pytest

from scribe.utils.config_loader import InvalidConfigError, load_config, merge_configs


@pytest.mark.unit
def test_load_packaged_config():
    """Test the packaged YAML assets load with their required keys."""
    data = load_config("sections", required_keys=("columns", "aliases"))
    assert "experience" in data["columns"]["secondary"]
    assert data["aliases"]["workexperience"] == "experience"


@pytest.mark.unit
def test_missing_file(tmp_path):
    """Test a missing asset raises InvalidConfigError."""
    with pytest.raises(InvalidConfigError):
        load_config("nope", config_dir=tmp_path)


@pytest.mark.unit
def test_missing_required_key(tmp_path):
    """Test an asset without a required key is rejected."""
    (tmp_path / "partial.yaml").write_text("version: 1\n", encoding="utf-8")
    with pytest.raises(InvalidConfigError, match="missing required keys"):
        load_config("partial", required_keys=("version", "technical"), config_dir=tmp_path)


@pytest.mark.unit
def test_non_mapping_config(tmp_path):
    """Test a top-level list is rejected."""
    (tmp_path / "listy.yaml").write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(InvalidConfigError):
        load_config("listy", config_dir=tmp_path)


@pytest.mark.unit
def test_merge_configs():
    """Test left-to-right merging with dotlist overrides."""
    merged = merge_configs(
        {"layout": {"margin": 15, "gap": 8}},
        {"layout": {"margin": 20}},
        dotlist=["layout.gap=4", "colors.primary=[1,2,3]"],
    )
    assert merged == {"layout": {"margin": 20, "gap": 4}, "colors": {"primary": [1, 2, 3]}}


@pytest.mark.unit
def test_utils_package_exports():
    """Test every name the utils package advertises is importable from it."""
    import scribe.utils as utils

    for name in utils.__all__:
        assert hasattr(utils, name), name
