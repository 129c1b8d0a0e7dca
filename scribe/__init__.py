"""
SCRIBE - Structured Conversion of Resumes Into Browser and print Exports

Turns free-form, AI-drafted resume and cover-letter text into structured
documents, then into an on-screen view tree or paginated PDF output.

Architecture:
- Intake Context: Raw text ingestion, normalization and line classification
- Structuring Context: Section assembly into resume / cover-letter models
- Rendering Context: Keyword emphasis, screen view, pagination and PDF export
- Generation Context: Adapter for the external text-generation collaborator
"""

__version__ = "0.1.0"
