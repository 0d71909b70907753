"""
PDF TextStream - per-page PDF text without printed page numbers.

Decodes a PDF into pages of positioned text items, normalizes their geometry
into device space, detects where sequential page numbering starts, and strips
the printed numeral from each page from that point on. Fonts synthesized from
embedded font programs are resolved once per document.

Quick Start:
    >>> from pdf_textstream import parse_file
    >>> result = parse_file('report.pdf')
    >>> [len(page.items) for page in result.pages]

Main Functions:
    - parse: Parse a PDF byte buffer
    - parse_file: Parse a PDF file from disk

Data Classes:
    - TextItem, Page: Normalized page content
    - FirstPageRecord: Detected start of page numbering
    - ParseResult: Aggregate parse output

For CLI usage, use the 'pdf-textstream' command after installation.
"""

__version__ = "1.0.0"

from pdf_textstream.exceptions import (
    EncryptedPDFError,
    FontResolutionError,
    InvalidOptionsError,
    InvalidPDFError,
    PageOutOfBoundsError,
    PDFTextStreamError,
)
from pdf_textstream.fonts import FontRegistry, is_generated_font_id
from pdf_textstream.observers import CallbackObserver, NullObserver, ParseObserver
from pdf_textstream.options import ParseOptions
from pdf_textstream.page_numbers import find_first_page, parse_page_number_candidate
from pdf_textstream.parser import parse, parse_file
from pdf_textstream.types import (
    DocumentMetadata,
    FirstPageRecord,
    FontResource,
    Page,
    ParseResult,
    RawTextItem,
    TextItem,
)
from pdf_textstream.utils import page_text, result_to_dict

__author__ = "PDF TextStream Contributors"
__license__ = "MIT"

__all__ = [
    "parse",
    "parse_file",
    "ParseOptions",
    "ParseObserver",
    "CallbackObserver",
    "NullObserver",
    "FontRegistry",
    "is_generated_font_id",
    "find_first_page",
    "parse_page_number_candidate",
    "page_text",
    "result_to_dict",
    "DocumentMetadata",
    "FirstPageRecord",
    "FontResource",
    "Page",
    "ParseResult",
    "RawTextItem",
    "TextItem",
    "PDFTextStreamError",
    "InvalidPDFError",
    "EncryptedPDFError",
    "PageOutOfBoundsError",
    "FontResolutionError",
    "InvalidOptionsError",
]
