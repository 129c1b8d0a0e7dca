"""
Registry for loading and caching the Jinja2 templates of the screen view.
"""

import os
from pathlib import Path
from typing import Dict

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound

load_dotenv()
TEMPLATES_PATH = Path(os.getenv("SCRIBE_TEMPLATES_PATH", Path(__file__).resolve().parent / "templates"))


class TemplateRegistry:
    """
    Registry for loading and caching HTML view templates.

    Templates are stored in scribe/contexts/rendering/templates/{name}.html.jinja.
    Autoescaping is always on: document text is untrusted model output.
    """

    def __init__(self, templates_path: Path = None):
        """
        Initialize the template registry.

        Args:
            templates_path: Directory holding *.html.jinja files. Defaults to
                            SCRIBE_TEMPLATES_PATH or the packaged templates
        """
        if templates_path is None:
            templates_path = TEMPLATES_PATH

        self.templates_path = Path(templates_path)
        self._cache: Dict[str, Template] = {}

        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def get_template(self, name: str) -> Template:
        """
        Get a template by name, loading and caching it if necessary.

        Args:
            name: Template name without extension (e.g., 'view')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        if name in self._cache:
            return self._cache[name]

        try:
            template = self.env.get_template(f"{name}.html.jinja")
        except TemplateNotFound as e:
            raise TemplateNotFound(f"View template '{name}' not found at {self.get_template_path(name)}") from e

        self._cache[name] = template
        return template

    def get_template_path(self, name: str) -> Path:
        """File path of a named template."""
        return self.templates_path / f"{name}.html.jinja"

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, name: str) -> bool:
        return name in self._cache
