"""
Type definitions and dataclasses for PDF TextStream.

This module defines data structures used throughout the library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

if TYPE_CHECKING:  # pragma: no cover
    from .fonts import FontRegistry

Matrix = Sequence[float]


@dataclass(frozen=True)
class RawTextItem:
    """
    Text item as emitted by the decoding engine, before normalization.

    Attributes:
        transform: Text rendering matrix ``[a, b, c, d, e, f]``
        width: Advance width in device units
        height: Glyph box height in device units
        text: Decoded string
        font_name: Engine font id
    """
    transform: tuple[float, float, float, float, float, float]
    width: float
    height: float
    text: str
    font_name: str


@dataclass
class TextContent:
    """Ordered text items of one page in engine emission order."""

    items: List[RawTextItem] = field(default_factory=list)


@dataclass(frozen=True)
class TextItem:
    """
    Normalized text item with integer device-space position and size.

    Attributes:
        x: Horizontal position
        y: Vertical position
        width: Rounded advance width
        height: Rounded glyph box height
        text: Item string
        font: Font id
    """
    x: int
    y: int
    width: int
    height: int
    text: str
    font: str


@dataclass
class Page:
    """A document page; ``items`` stays empty until the extraction pass fills it."""

    index: int
    items: List[TextItem] = field(default_factory=list)


@dataclass(frozen=True)
class FirstPageRecord:
    """Page index (0-based) and printed numeral where sequential numbering begins."""

    page_index: int
    page_num: int


@dataclass(frozen=True)
class FontResource:
    """
    Font object materialized by the decoding engine.

    Attributes:
        font_id: Engine font id
        name: Base font name
        subtype: PDF font subtype (``Type1``, ``TrueType``, ``Type0``...)
        program_type: Key of the embedded program (``FontFile2``...) or ``Type3``
        data: Decoded font program bytes
    """
    font_id: str
    name: str
    subtype: Optional[str] = None
    program_type: Optional[str] = None
    data: bytes = field(default=b"", repr=False)


@dataclass
class DocumentMetadata:
    """
    Document level metadata.

    Attributes:
        info: Document information dictionary with leading slashes stripped
        xmp: Raw XMP packet if present
        pdf_version: Version from the file header
        content_length: Size of the parsed buffer in bytes
    """
    info: Dict[str, str] = field(default_factory=dict)
    xmp: Optional[str] = None
    pdf_version: Optional[str] = None
    content_length: int = 0

    @property
    def title(self) -> Optional[str]:
        return self.info.get("Title")


@dataclass
class ParseResult:
    """
    Aggregate result of a document parse.

    Attributes:
        fonts: Registry of resolved generated fonts
        metadata: Document metadata
        pages: Pages in document order with page numbers removed
        document: Engine document handle
        first_page: Detected start of page numbering, if any
    """
    fonts: "FontRegistry"
    metadata: DocumentMetadata
    pages: List[Page]
    document: Any
    first_page: Optional[FirstPageRecord] = None

    def __str__(self) -> str:
        return (
            f"ParseResult(pages={len(self.pages)}, fonts={len(self.fonts)}, "
            f"first_page={self.first_page})"
        )
