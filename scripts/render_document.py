#!/usr/bin/env python3
"""
Document Rendering CLI

Turns AI-generated resume / cover letter text into structured data, an HTML
view or a PDF.

Commands:
    parse    - Print the structured document as YAML
    view     - Write the HTML screen view
    pdf      - Write a styled (or plain) PDF
    text     - Write the raw text download
    filename - Print the derived output filename
    validate - Check a PDF against the text it was rendered from
    styles   - List style presets

Examples:\n

    render_document.py parse resume.txt                           # Structured YAML

    render_document.py pdf resume.txt --style modern              # Styled PDF

    render_document.py pdf resume.txt --set layout.overflow=truncate

    render_document.py pdf letter.txt --kind cover-letter --plain # Linear layout

    render_document.py validate resume.txt outs/jane_doe_engineer_resume_2025-01-31.pdf
"""

import os
from pathlib import Path
from typing import List, Optional

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf
from typing_extensions import Annotated

from scribe.contexts.intake.document import RawDocument
from scribe.contexts.rendering.exceptions import ExportError
from scribe.contexts.rendering.exporter import export_pdf, export_text
from scribe.contexts.rendering.filename import derive_filename
from scribe.contexts.rendering.logger import setup_rendering_logger
from scribe.contexts.rendering.styles import list_styles, resolve_style
from scribe.contexts.rendering.validator import validate_pdf
from scribe.contexts.rendering.view import render_view, view_to_html
from scribe.contexts.structuring.assembler import parse_document
from scribe.utils.config_loader import InvalidConfigError

load_dotenv()
OUTPUT_PATH = Path(os.getenv("SCRIBE_OUTPUT_PATH", "outs"))


app = typer.Typer(
    help="Render AI-generated resumes and cover letters to YAML, HTML and PDF",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


InputFile = Annotated[Path, typer.Argument(help="Text file holding the generated document", exists=True, dir_okay=False)]
KindOption = Annotated[
    Optional[str], typer.Option("--kind", "-k", help="resume, cover-letter or email (default: detected)")
]
LanguageOption = Annotated[Optional[str], typer.Option("--language", "-l", help="Language tag (default: detected)")]
CountryOption = Annotated[str, typer.Option("--country", "-c", help="Target country")]
OutputDirOption = Annotated[Path, typer.Option("--output-dir", "-o", help="Directory for written files")]


def load_raw(path: Path, kind: Optional[str], language: Optional[str], country: str) -> RawDocument:
    """Read a text file into a RawDocument, exiting with code 1 on a bad kind."""
    try:
        return RawDocument.create(path.read_text(encoding="utf-8"), kind=kind, language=language, country=country)
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def write_output(output_dir: Path, filename: str, data: bytes) -> Path:
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / filename
    path.write_bytes(data)
    return path


@app.command("parse")
def parse_command(
    input_file: InputFile,
    kind: KindOption = None,
    language: LanguageOption = None,
    country: CountryOption = "International",
):
    """
    Print the structured document as YAML.

    Examples:\n

        $ render_document.py parse resume.txt

        $ render_document.py parse letter.txt --kind cover-letter
    """
    raw = load_raw(input_file, kind, language, country)
    document = parse_document(raw)
    typer.echo(OmegaConf.to_yaml(OmegaConf.create(document.to_dict())))


@app.command("view")
def view_command(
    input_file: InputFile,
    kind: KindOption = None,
    language: LanguageOption = None,
    country: CountryOption = "International",
    style: Annotated[Optional[str], typer.Option("--style", "-s", help="Style preset")] = None,
    output_dir: OutputDirOption = OUTPUT_PATH,
):
    """
    Write the HTML screen view next to the other outputs.

    Examples:\n

        $ render_document.py view resume.txt --style clean
    """
    raw = load_raw(input_file, kind, language, country)
    document = parse_document(raw)
    try:
        profile = resolve_style(style)
    except InvalidConfigError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    html = view_to_html(render_view(document), style=profile, language=raw.language)
    path = write_output(output_dir, derive_filename(document, extension="html"), html.encode("utf-8"))
    typer.secho(f"✓ View written: {path}", fg=typer.colors.GREEN, bold=True)


@app.command("pdf")
def pdf_command(
    input_file: InputFile,
    kind: KindOption = None,
    language: LanguageOption = None,
    country: CountryOption = "International",
    style: Annotated[Optional[str], typer.Option("--style", "-s", help="Style preset")] = None,
    overrides: Annotated[
        Optional[List[str]],
        typer.Option("--set", help="Style override as dotlist, e.g. layout.margin=18 (repeatable)"),
    ] = None,
    plain: Annotated[bool, typer.Option("--plain", help="Linear layout without structural parsing")] = False,
    validate: Annotated[bool, typer.Option("--validate", help="Read the PDF back and check it")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show every warning")] = False,
    output_dir: OutputDirOption = OUTPUT_PATH,
):
    """
    Write a PDF of the document.

    Examples:\n

        $ render_document.py pdf resume.txt

        $ render_document.py pdf resume.txt --style deedy --set layout.overflow=truncate

        $ render_document.py pdf letter.txt --plain
    """
    setup_rendering_logger(style_name=style)
    raw = load_raw(input_file, kind, language, country)
    document = parse_document(raw)

    typer.secho(f"\nRendering: {input_file}", fg=typer.colors.BLUE, bold=True)
    try:
        result = export_pdf(document, style=style, overrides=overrides, plain=plain)
    except (ExportError, InvalidConfigError) as e:
        typer.secho(f"✗ Export failed: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    path = write_output(output_dir, result.filename, result.data)
    typer.secho(f"✓ PDF written: {path}", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Pages: {result.page_count}{' (plain layout)' if result.plain else ''}")
    if result.warnings:
        typer.echo(f"  Warnings: {len(result.warnings)}")
        limit = len(result.warnings) if verbose else 5
        for warning in result.warnings[:limit]:
            typer.secho(f"  - {warning}", fg=typer.colors.YELLOW)
        if len(result.warnings) > limit:
            typer.echo(f"  ... and {len(result.warnings) - limit} more")

    if validate:
        check = validate_pdf(result.data, document, expected_pages=result.page_count)
        if check.is_valid:
            typer.secho("✓ Validation passed", fg=typer.colors.GREEN)
        else:
            typer.secho(f"✗ Validation failed with {len(check.issues)} issue(s)", fg=typer.colors.RED)
            for issue in check.issues:
                typer.echo(f"  - {issue}")
            raise typer.Exit(code=1)
    typer.echo("")


@app.command("text")
def text_command(
    input_file: InputFile,
    kind: KindOption = None,
    language: LanguageOption = None,
    country: CountryOption = "International",
    output_dir: OutputDirOption = OUTPUT_PATH,
):
    """
    Write the unparsed text as a .txt download with a derived filename.
    """
    raw = load_raw(input_file, kind, language, country)
    export = export_text(raw)
    path = write_output(output_dir, export.filename, export.data)
    typer.secho(f"✓ Text written: {path}", fg=typer.colors.GREEN, bold=True)


@app.command("filename")
def filename_command(
    input_file: InputFile,
    kind: KindOption = None,
    language: LanguageOption = None,
    country: CountryOption = "International",
    extension: Annotated[str, typer.Option("--extension", "-e", help="File extension")] = "pdf",
):
    """Print the filename a download of this document would get."""
    raw = load_raw(input_file, kind, language, country)
    typer.echo(derive_filename(parse_document(raw), extension=extension))


@app.command("validate")
def validate_command(
    input_file: InputFile,
    pdf_file: Annotated[Path, typer.Argument(help="PDF rendered from the input", exists=True, dir_okay=False)],
    kind: KindOption = None,
    language: LanguageOption = None,
    country: CountryOption = "International",
):
    """
    Check that a PDF is readable and holds the document's name and section headers.

    Examples:\n

        $ render_document.py validate resume.txt outs/jane_doe_engineer_resume_2025-01-31.pdf
    """
    raw = load_raw(input_file, kind, language, country)
    result = validate_pdf(pdf_file.read_bytes(), parse_document(raw))

    if result.is_valid:
        typer.secho("\n✓ Validation passed", fg=typer.colors.GREEN, bold=True)
    else:
        typer.secho("\n✗ Validation failed", fg=typer.colors.RED, bold=True)
        for issue in result.issues:
            typer.echo(f"  - {issue}")
    typer.echo(f"  Page count: {result.page_count}")
    typer.echo("")

    raise typer.Exit(code=0 if result.is_valid else 1)


@app.command("styles")
def styles_command():
    """List the available style presets."""
    for name in list_styles():
        typer.echo(name)


if __name__ == "__main__":
    app()
