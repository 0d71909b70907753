"""Two-pass document parse producing page-number-free text items."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .backends import PDFBackend, PypdfBackend
from .exceptions import InvalidPDFError
from .fonts import FontRegistry
from .geometry import RENDER_SCALE, normalize_items
from .observers import NullObserver, ParseObserver
from .options import ParseOptions
from .page_numbers import PageNumberRemover, detect_first_page
from .types import FirstPageRecord, Page, ParseResult
from .utils import resolve_path

__all__ = ["parse", "parse_file"]

LOGGER = logging.getLogger("pdf_textstream.parser")


def parse(
    data: bytes,
    observer: Optional[ParseObserver] = None,
    *,
    options: Optional[ParseOptions] = None,
    backend: Optional[PDFBackend] = None,
) -> ParseResult:
    """Parse a PDF buffer into pages of normalized text items.

    The first pass samples leading pages to find where printed page numbering
    starts; the second pass extracts every page, removes the expected numeral,
    and resolves generated fonts. Engine errors propagate unchanged and no
    partial result is returned.

    Args:
        data: PDF file contents.
        observer: Receives metadata, page and font progress.
        options: Parse configuration, defaults to :class:`ParseOptions`.
        backend: Decoding engine, defaults to :class:`PypdfBackend`.

    Returns:
        The fonts, metadata, pages and engine document of the parse.
    """

    observer = observer or NullObserver()
    options = options or ParseOptions()
    engine: PDFBackend = backend or PypdfBackend()

    document = engine.open(data, password=options.password)
    metadata = document.get_metadata()
    observer.on_metadata(metadata)

    pages: List[Page] = [Page(index=index) for index in range(document.num_pages)]
    observer.on_document_ready(document, pages)

    first_page: Optional[FirstPageRecord] = None
    if options.remove_page_numbers:
        first_page = detect_first_page(
            document,
            sample_size=options.sample_size,
            predicate=options.page_number_candidate,
            max_pages=options.max_sample_pages,
        )

    remover = PageNumberRemover(first_page)
    fonts = FontRegistry()
    for page_number in range(1, document.num_pages + 1):
        page = document.get_page(page_number)
        # Embedded fonts only become resolvable once drawing operations are decoded.
        page.get_operator_list()
        viewport = page.get_viewport(RENDER_SCALE)
        content = page.get_text_content()

        items = remover.apply(page.page_index, normalize_items(content.items, viewport))
        pages[page.page_index].items = items
        LOGGER.debug("Extracted %d item(s) from page %d", len(items), page_number)
        observer.on_page_update([replace(entry, items=list(entry.items)) for entry in pages])

        for _font_id in fonts.resolve_fonts(
            items, document.common_objs, is_generated=options.is_generated_font
        ):
            observer.on_font_update(fonts.snapshot())

    LOGGER.info("Parsed %d page(s) with %d generated font(s)", len(pages), len(fonts))
    return ParseResult(
        fonts=fonts,
        metadata=metadata,
        pages=pages,
        document=document,
        first_page=first_page,
    )


def parse_file(
    path: str | Path,
    observer: Optional[ParseObserver] = None,
    *,
    options: Optional[ParseOptions] = None,
    backend: Optional[PDFBackend] = None,
) -> ParseResult:
    """Read ``path`` and :func:`parse` its contents."""

    pdf_path = resolve_path(path)
    if not pdf_path.is_file():
        raise InvalidPDFError(f"PDF file not found: {path}")
    try:
        data = pdf_path.read_bytes()
    except OSError as exc:
        raise InvalidPDFError(f"Unable to read PDF file: {path}. Error: {exc}") from exc
    return parse(data, observer, options=options, backend=backend)
