"""Unit tests for style profile resolution."""

import pytest

from scribe.contexts.rendering.keywords import KeywordCategory
from scribe.contexts.rendering.styles import StyleProfile, list_styles, resolve_style
from scribe.utils.config_loader import InvalidConfigError


@pytest.mark.unit
def test_default_profile():
    """Test the professional preset carries the shared defaults."""
    style = resolve_style("professional")

    assert isinstance(style, StyleProfile)
    assert style.name == "professional"
    assert style.fonts.family == "helvetica"
    assert style.fonts.body_size == 10
    assert style.layout.margin == 15
    assert style.layout.overflow == "spill"
    assert style.features.highlight_keywords is True
    assert style.colors.primary == (41, 71, 135)


@pytest.mark.unit
def test_presets_override_defaults():
    """Test presets override only the keys they name."""
    modern = resolve_style("modern")
    assert modern.features.header_band is True
    assert modern.fonts.name_size == 24
    assert modern.fonts.body_size == 10

    ats = resolve_style("ats")
    assert ats.features.highlight_keywords is False
    assert ats.features.bold_keywords is False
    assert ats.layout.line_spacing == pytest.approx(1.3)

    assert resolve_style("simple").layout.margin == 20


@pytest.mark.unit
def test_list_styles():
    """Test every preset is listed."""
    assert set(list_styles()) >= {"professional", "modern", "clean", "deedy", "ats", "simple"}


@pytest.mark.unit
def test_dotlist_overrides():
    """Test dotlist overrides apply on top of the preset."""
    style = resolve_style("modern", ["layout.overflow=truncate", "colors.primary=[0,0,0]", "layout.margin=18"])

    assert style.layout.overflow == "truncate"
    assert style.colors.primary == (0, 0, 0)
    assert style.layout.margin == 18
    assert style.features.header_band is True


@pytest.mark.unit
@pytest.mark.parametrize(
    "override",
    [
        "layout.overflow=sideways",
        "layout.left_column_ratio=1.5",
        "fonts.body_size=0",
        "layout.margin=-1",
        "colors.primary=[300,0,0]",
        "colors.primary=[1,2]",
        "layout.bogus=1",
    ],
)
def test_invalid_overrides_raise(override):
    """Test invalid values are rejected with InvalidConfigError."""
    with pytest.raises(InvalidConfigError):
        resolve_style("professional", [override])


@pytest.mark.unit
def test_unknown_preset_raises():
    """Test an unknown preset name is rejected."""
    with pytest.raises(InvalidConfigError):
        resolve_style("neon")


@pytest.mark.unit
def test_line_height():
    """Test line height scales with font size and spacing."""
    layout = resolve_style("professional").layout
    assert layout.line_height(10) == pytest.approx(10 * 0.35 * 1.25)


@pytest.mark.unit
def test_palette_for_category():
    """Test keyword categories map to their palette colors."""
    colors = resolve_style("professional").colors
    assert colors.for_category(KeywordCategory.TECHNICAL) == colors.technical
    assert colors.for_category(KeywordCategory.METRIC) == colors.metric
    assert colors.for_category(KeywordCategory.NONE) == colors.text


@pytest.mark.unit
def test_profile_is_frozen():
    """Test profiles cannot be modified after resolution."""
    style = resolve_style("professional")
    with pytest.raises(AttributeError):
        style.name = "other"
    assert style.to_dict()["layout"]["margin"] == 15
