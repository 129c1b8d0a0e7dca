"""
Integration test for the full document pipeline.
Tests: generate collaborator → RawDocument → structured document → HTML view and PDF.
"""

import asyncio
from datetime import date

import pytest

from scribe.contexts.generation.drafting import DocumentStore, draft_document
from scribe.contexts.intake.contact import extract_contact_info
from scribe.contexts.intake.document import DocumentKind
from scribe.contexts.rendering.exporter import export_pdf
from scribe.contexts.rendering.validator import validate_pdf
from scribe.contexts.rendering.view import render_view, view_to_html
from scribe.contexts.structuring.assembler import parse_document

GENERATED = """**Carlos Ruiz**
Ingeniero de Software
carlos@ruiz.es | Teléfono: +34 612 345 678 9
EXPERIENCIA LABORAL
Ingeniero Senior | Banco Sol | 2020 - 2024
- Reduje la latencia un 40% con Redis
FORMACIÓN
- Universidad de Sevilla
IDIOMAS
- Español, Inglés"""


class MemoryStore(DocumentStore):
    def __init__(self):
        self.saved = None

    def save(self, raw):
        self.saved = raw

    def load(self):
        return self.saved


async def fake_generate(prompt, context=None):
    return GENERATED


@pytest.mark.integration
def test_localized_resume_pipeline():
    """Test a Spanish resume flows from drafting to a validated PDF."""
    store = MemoryStore()
    raw = asyncio.run(draft_document(fake_generate, "Escribe mi CV", country="Spain", store=store))

    assert store.load() is raw
    assert raw.kind == DocumentKind.RESUME
    assert raw.language == "es"

    document = parse_document(raw)
    assert document.name == "Carlos Ruiz"
    assert [s.name for s in document.primary_column] == ["education", "languages"]
    assert [s.name for s in document.secondary_column] == ["experience"]
    assert document.section("experience").lines[1].content == "Reduje la latencia un 40% con Redis"

    info = extract_contact_info(raw.text)
    assert info.name == "Carlos Ruiz"
    assert info.email == "carlos@ruiz.es"

    html = view_to_html(render_view(document), language=raw.language)
    assert '<html lang="es">' in html
    assert "EXPERIENCIA LABORAL" in html

    export = export_pdf(document, on_date=date(2024, 1, 31))
    assert export.filename == "carlos_ruiz_senior_spain_resume_2024-01-31.pdf"
    assert validate_pdf(export.data, document, expected_pages=export.page_count).is_valid
