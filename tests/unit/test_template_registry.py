"""Unit tests for TemplateRegistry class."""

import pytest
from pathlib import Path
from jinja2 import TemplateNotFound, UndefinedError

from scribe.contexts.rendering.template_registry import TemplateRegistry


@pytest.fixture
def custom_registry(tmp_path):
    (tmp_path / "greeting.html.jinja").write_text("<p>{{ name }}</p>", encoding="utf-8")
    return TemplateRegistry(templates_path=tmp_path)


@pytest.mark.unit
def test_template_registry_init():
    """Test TemplateRegistry initialization."""
    registry = TemplateRegistry()
    assert registry.templates_path.exists()
    assert registry._cache == {}


@pytest.mark.unit
def test_get_view_template():
    """Test loading the packaged view template."""
    registry = TemplateRegistry()
    template = registry.get_template("view")

    assert template is not None
    assert "view" in registry._cache


@pytest.mark.unit
def test_template_caching():
    """Test that templates are cached after first load."""
    registry = TemplateRegistry()

    template1 = registry.get_template("view")
    assert registry.is_cached("view")

    template2 = registry.get_template("view")
    assert template1 is template2


@pytest.mark.unit
def test_get_template_not_found():
    """Test error handling for missing template."""
    registry = TemplateRegistry()

    with pytest.raises(TemplateNotFound):
        registry.get_template("nonexistent_view")
    assert not registry.is_cached("nonexistent_view")


@pytest.mark.unit
def test_get_template_path():
    """Test getting template file path."""
    registry = TemplateRegistry()
    path = registry.get_template_path("view")

    assert isinstance(path, Path)
    assert path.name == "view.html.jinja"
    assert path.exists()


@pytest.mark.unit
def test_clear_cache():
    """Test cache clearing."""
    registry = TemplateRegistry()

    registry.get_template("view")
    assert len(registry._cache) == 1

    registry.clear_cache()
    assert len(registry._cache) == 0


@pytest.mark.unit
def test_custom_templates_path(custom_registry):
    """Test templates load from a custom directory."""
    assert custom_registry.get_template("greeting").render(name="Jane") == "<p>Jane</p>"


@pytest.mark.unit
def test_autoescape(custom_registry):
    """Test document text is HTML-escaped."""
    result = custom_registry.get_template("greeting").render(name="<b>Jane & Co</b>")
    assert result == "<p>&lt;b&gt;Jane &amp; Co&lt;/b&gt;</p>"


@pytest.mark.unit
def test_strict_undefined(custom_registry):
    """Test a missing variable fails loudly instead of rendering empty."""
    with pytest.raises(UndefinedError):
        custom_registry.get_template("greeting").render()
