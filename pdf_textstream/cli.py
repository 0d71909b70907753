"""
Command-line interface for PDF TextStream.
"""

import json
import logging
import sys

import click
from rich.console import Console
from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn
from rich.table import Table

from pdf_textstream import __version__
from pdf_textstream.exceptions import PDFTextStreamError
from pdf_textstream.observers import CallbackObserver
from pdf_textstream.options import ParseOptions
from pdf_textstream.parser import parse_file
from pdf_textstream.utils import get_logger, page_text, result_to_dict

console = Console(stderr=True)


def _format_size(size_bytes: float) -> str:
    for unit in ['B', 'KB', 'MB', 'GB', 'TB']:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} PB"


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """
    PDF TextStream - Extract per-page text with page numbers removed.
    """
    get_logger("pdf_textstream", logging.DEBUG if verbose else logging.WARNING)


@cli.command(name="extract")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Write output to this file')
@click.option('--json', 'as_json', is_flag=True, help='Emit the full result as JSON')
@click.option('--keep-page-numbers', is_flag=True, help='Do not detect or remove page numbers')
@click.option('--password', default=None, help='Password for encrypted PDFs')
@click.option('--sample-size', type=click.IntRange(min=1), default=None,
              help='Number of page number candidates to sample')
def extract(input_pdf, output, as_json, keep_page_numbers, password, sample_size):
    """
    Extract text from every page.

    Examples:

        pdf-textstream extract report.pdf

        pdf-textstream extract report.pdf --json -o report.json
    """
    overrides = {"password": password}
    if keep_page_numbers:
        overrides["remove_page_numbers"] = False
    if sample_size is not None:
        overrides["sample_size"] = sample_size

    try:
        options = ParseOptions.from_env(**overrides)
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Extracting pages", total=None)

            def on_document(document, pages):
                progress.update(task, total=len(pages))

            def on_pages(pages):
                progress.update(task, completed=sum(1 for page in pages if page.items))

            observer = CallbackObserver(document_parsed=on_document, page_parsed=on_pages)
            result = parse_file(input_pdf, observer, options=options)
    except (PDFTextStreamError, OSError) as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    if as_json:
        rendered = json.dumps(result_to_dict(result), ensure_ascii=False, indent=2) + "\n"
    else:
        rendered = "\f\n".join(page_text(page) + "\n" for page in result.pages)

    if output:
        with open(output, 'w', encoding='utf-8') as handle:
            handle.write(rendered)
        console.print(f"[bold green]✓ Wrote {len(result.pages)} page(s) to {output}[/bold green]")
    else:
        click.echo(rendered, nl=False)


@cli.command(name="info")
@click.argument('input_pdf', type=click.Path(exists=True, dir_okay=False))
@click.option('--password', default=None, help='Password for encrypted PDFs')
def show_info(input_pdf, password):
    """
    Display metadata, page numbering and fonts of a PDF file.

    Example:

        pdf-textstream info report.pdf
    """
    try:
        result = parse_file(input_pdf, options=ParseOptions.from_env(password=password))
    except (PDFTextStreamError, OSError) as e:
        console.print(f"[bold red]✗ Error:[/bold red] {e}")
        sys.exit(1)

    out = Console()
    info_table = Table(title="PDF Information", show_header=False)
    info_table.add_column("Property", style="cyan")
    info_table.add_column("Value", style="green")

    metadata = result.metadata
    info_table.add_row("Pages", str(len(result.pages)))
    info_table.add_row("Size", _format_size(metadata.content_length))
    if metadata.pdf_version:
        info_table.add_row("PDF Version", metadata.pdf_version)
    for key in sorted(metadata.info):
        info_table.add_row(key, metadata.info[key])
    if result.first_page:
        info_table.add_row(
            "Numbering",
            f"starts on page {result.first_page.page_index + 1} at {result.first_page.page_num}",
        )
    else:
        info_table.add_row("Numbering", "not detected")
    out.print(info_table)

    if result.fonts.ids:
        font_table = Table(title="Embedded Fonts")
        font_table.add_column("Id", style="cyan")
        font_table.add_column("Name", style="green")
        font_table.add_column("Program")
        for font_id in sorted(result.fonts.ids):
            resource = result.fonts.map[font_id]
            font_table.add_row(
                font_id,
                str(getattr(resource, "name", "")),
                str(getattr(resource, "program_type", "") or ""),
            )
        out.print(font_table)


def main():
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
