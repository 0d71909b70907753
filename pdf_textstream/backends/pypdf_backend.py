"""pypdf backend implementation for PDF TextStream."""

from __future__ import annotations

import io
import itertools
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from pypdf import PageObject, PdfReader
from pypdf.errors import PdfReadError
from pypdf.generic import ArrayObject, DictionaryObject, IndirectObject, StreamObject

from ..exceptions import EncryptedPDFError, InvalidPDFError, PageOutOfBoundsError
from ..fonts import GENERATED_FONT_PREFIX
from ..geometry import Viewport, transform
from ..types import DocumentMetadata, FontResource, RawTextItem, TextContent
from .base import BackendDocument, BackendPage, PDFBackend

LOGGER = logging.getLogger("pdf_textstream.backends.pypdf")

_DOCUMENT_IDS = itertools.count()
_FONT_PROGRAM_KEYS = ("/FontFile", "/FontFile2", "/FontFile3")
_DEFAULT_GLYPH_WIDTH = 500.0
UNKNOWN_FONT = "unknown"


def _resolve(obj: Any) -> Any:
    if isinstance(obj, IndirectObject):
        return obj.get_object()
    return obj


def _matrix(values) -> Tuple[float, float, float, float, float, float]:
    a, b, c, d, e, f = (float(v) for v in list(values)[:6])
    return (a, b, c, d, e, f)


def _base_font_name(font: DictionaryObject) -> str:
    name = _resolve(font.get("/BaseFont"))
    if name is None:
        return UNKNOWN_FONT
    return str(name).lstrip("/") or UNKNOWN_FONT


def _font_descriptors(font: DictionaryObject) -> List[DictionaryObject]:
    descriptors: List[DictionaryObject] = []
    descriptor = _resolve(font.get("/FontDescriptor"))
    if isinstance(descriptor, DictionaryObject):
        descriptors.append(descriptor)
    descendants = _resolve(font.get("/DescendantFonts"))
    if isinstance(descendants, ArrayObject):
        for entry in descendants:
            child = _resolve(entry)
            if not isinstance(child, DictionaryObject):
                continue
            child_descriptor = _resolve(child.get("/FontDescriptor"))
            if isinstance(child_descriptor, DictionaryObject):
                descriptors.append(child_descriptor)
    return descriptors


def _embedded_program(font: DictionaryObject) -> Optional[Tuple[str, Optional[StreamObject]]]:
    """Return the program kind and stream of an embedded font, if any."""

    if _resolve(font.get("/Subtype")) == "/Type3":
        return "Type3", None
    for descriptor in _font_descriptors(font):
        for key in _FONT_PROGRAM_KEYS:
            stream = _resolve(descriptor.get(key))
            if isinstance(stream, StreamObject):
                return key.lstrip("/"), stream
    return None


def _advance_width(text: str, font: Optional[DictionaryObject]) -> float:
    """Advance of ``text`` in text space units (ems)."""

    widths: Optional[List[float]] = None
    first_char = 0
    missing_width = _DEFAULT_GLYPH_WIDTH
    if isinstance(font, DictionaryObject):
        raw_widths = _resolve(font.get("/Widths"))
        if isinstance(raw_widths, ArrayObject):
            widths = [float(_resolve(width)) for width in raw_widths]
        first_char = int(_resolve(font.get("/FirstChar")) or 0)
        descriptor = _resolve(font.get("/FontDescriptor"))
        if isinstance(descriptor, DictionaryObject) and "/MissingWidth" in descriptor:
            missing_width = float(_resolve(descriptor["/MissingWidth"]))

    total = 0.0
    for char in text:
        code = ord(char) - first_char
        if widths is not None and 0 <= code < len(widths):
            total += widths[code]
        else:
            total += missing_width
    return total / 1000.0


class PypdfObjectTable:
    """Object table with single-shot callbacks keyed by object id."""

    def __init__(self) -> None:
        self._objects: Dict[str, Any] = {}
        self._pending: Dict[str, List[Callable[[Any], None]]] = defaultdict(list)

    def has(self, obj_id: str) -> bool:
        return obj_id in self._objects

    def resolve(self, obj_id: str, data: Any) -> None:
        self._objects[obj_id] = data
        for callback in self._pending.pop(obj_id, []):
            callback(data)

    def get(self, obj_id: str, callback: Callable[[Any], None]) -> None:
        if obj_id in self._objects:
            callback(self._objects[obj_id])
        else:
            self._pending[obj_id].append(callback)


class _FontIdentifier:
    """Hands out stable font ids: generated ids for embedded fonts, base names otherwise."""

    def __init__(self, doc_id: int) -> None:
        self._doc_id = doc_id
        self._ids: Dict[object, str] = {}
        self._fonts: List[DictionaryObject] = []
        self._counter = itertools.count(1)

    @staticmethod
    def _key(font: DictionaryObject) -> object:
        ref = getattr(font, "indirect_reference", None)
        if ref is not None:
            return (ref.idnum, ref.generation)
        return ("direct", id(font))

    def font_id(self, font: Optional[DictionaryObject]) -> str:
        if not isinstance(font, DictionaryObject):
            return UNKNOWN_FONT
        key = self._key(font)
        cached = self._ids.get(key)
        if cached is not None:
            return cached
        if _embedded_program(font) is not None:
            font_id = f"{GENERATED_FONT_PREFIX}{self._doc_id}_f{next(self._counter)}"
        else:
            font_id = _base_font_name(font)
        self._ids[key] = font_id
        # Keep the dictionary alive so id()-based keys are never reused.
        self._fonts.append(font)
        return font_id


@dataclass
class PypdfPage(BackendPage):
    document: "PypdfDocument" = field(repr=False, default=None)  # type: ignore[assignment]
    page: PageObject = field(repr=False, default=None)  # type: ignore[assignment]

    def get_text_content(self) -> TextContent:
        items: List[RawTextItem] = []
        fonts = self.document.font_identifier

        def _visit(text, cm, tm, font_dict, font_size) -> None:
            cleaned = text.strip("\r\n") if text else ""
            if not cleaned.strip():
                return
            size = float(font_size or 0.0)
            matrix = transform(_matrix(cm), transform(_matrix(tm), (size, 0.0, 0.0, size, 0.0, 0.0)))
            font = font_dict if isinstance(font_dict, DictionaryObject) else None
            items.append(
                RawTextItem(
                    transform=matrix,
                    width=_advance_width(cleaned, font) * math.hypot(matrix[0], matrix[1]),
                    height=math.hypot(matrix[2], matrix[3]),
                    text=cleaned,
                    font_name=fonts.font_id(font),
                )
            )

        self.page.extract_text(visitor_text=_visit)
        return TextContent(items=items)

    def get_viewport(self, scale: float) -> Viewport:
        box = self.page.cropbox
        x0, x1 = sorted((float(box.left), float(box.right)))
        y0, y1 = sorted((float(box.bottom), float(box.top)))
        rotation = int(self.page.rotation or 0)
        return Viewport.from_box((x0, y0, x1, y1), scale=scale, rotation=rotation)

    def get_operator_list(self) -> List[Tuple[Any, bytes]]:
        contents = self.page.get_contents()
        operations = list(contents.operations) if contents is not None else []
        self._materialize_fonts(self.page.get("/Resources"), set())
        return operations

    def _materialize_fonts(self, resources: Any, visited: set) -> None:
        resources = _resolve(resources)
        if not isinstance(resources, DictionaryObject):
            return
        fonts = _resolve(resources.get("/Font"))
        if isinstance(fonts, DictionaryObject):
            for value in fonts.values():
                font = _resolve(value)
                if isinstance(font, DictionaryObject):
                    self.document.materialize_font(font)
        xobjects = _resolve(resources.get("/XObject"))
        if isinstance(xobjects, DictionaryObject):
            for value in xobjects.values():
                xobject = _resolve(value)
                if not isinstance(xobject, StreamObject) or id(xobject) in visited:
                    continue
                if _resolve(xobject.get("/Subtype")) != "/Form":
                    continue
                visited.add(id(xobject))
                self._materialize_fonts(xobject.get("/Resources"), visited)


@dataclass
class PypdfDocument(BackendDocument):
    reader: PdfReader = field(repr=False, default=None)  # type: ignore[assignment]
    raw_bytes: bytes = field(repr=False, default=b"")
    doc_id: int = 0
    _objects: PypdfObjectTable = field(init=False, repr=False, default_factory=PypdfObjectTable)
    _pages: Dict[int, PypdfPage] = field(init=False, repr=False, default_factory=dict)
    _font_identifier: Optional[_FontIdentifier] = field(init=False, repr=False, default=None)

    @property
    def common_objs(self) -> PypdfObjectTable:
        return self._objects

    @property
    def font_identifier(self) -> _FontIdentifier:
        if self._font_identifier is None:
            self._font_identifier = _FontIdentifier(self.doc_id)
        return self._font_identifier

    def get_page(self, page_number: int) -> PypdfPage:
        if page_number < 1 or page_number > self.num_pages:
            raise PageOutOfBoundsError(f"Page out of range: {page_number} (1..{self.num_pages})")
        page = self._pages.get(page_number)
        if page is None:
            page = PypdfPage(page_number=page_number, document=self, page=self.reader.pages[page_number - 1])
            self._pages[page_number] = page
        return page

    def materialize_font(self, font: DictionaryObject) -> None:
        font_id = self.font_identifier.font_id(font)
        if self._objects.has(font_id):
            return
        program = _embedded_program(font)
        if program is None:
            return
        program_type, stream = program
        subtype = _resolve(font.get("/Subtype"))
        self._objects.resolve(
            font_id,
            FontResource(
                font_id=font_id,
                name=_base_font_name(font),
                subtype=str(subtype).lstrip("/") if subtype is not None else None,
                program_type=program_type,
                data=stream.get_data() if stream is not None else b"",
            ),
        )
        LOGGER.debug("Materialized font %s (%s)", font_id, program_type)

    def get_metadata(self) -> DocumentMetadata:
        info: Dict[str, str] = {}
        metadata = self.reader.metadata
        if metadata:
            for key, value in metadata.items():
                info[str(key).lstrip("/")] = str(_resolve(value))
        header = self.reader.pdf_header or ""
        return DocumentMetadata(
            info=info,
            xmp=self._xmp_packet(),
            pdf_version=header[len("%PDF-"):] if header.startswith("%PDF-") else None,
            content_length=len(self.raw_bytes),
        )

    def _xmp_packet(self) -> Optional[str]:
        catalog = _resolve(self.reader.trailer.get("/Root"))
        if not isinstance(catalog, DictionaryObject):
            return None
        stream = _resolve(catalog.get("/Metadata"))
        if not isinstance(stream, StreamObject):
            return None
        return stream.get_data().decode("utf-8", errors="ignore")


class PypdfBackend(PDFBackend):
    """Backend implementation that uses `pypdf` under the hood."""

    def open(self, data: bytes, password: str | None = None) -> PypdfDocument:
        if not data:
            raise InvalidPDFError("PDF buffer is empty")

        try:
            reader = PdfReader(io.BytesIO(data))
        except PdfReadError as exc:
            raise InvalidPDFError(f"Corrupted or invalid PDF data. Error: {exc}") from exc
        except Exception as exc:
            raise InvalidPDFError(f"Unexpected error reading PDF data. Error: {exc}") from exc

        if reader.is_encrypted:
            if password:
                if reader.decrypt(password) == 0:
                    raise EncryptedPDFError("Failed to decrypt PDF with supplied password.")
            else:
                raise EncryptedPDFError("PDF is encrypted. Supply a password to process this file.")

        try:
            num_pages = len(reader.pages)
        except PdfReadError as exc:
            raise InvalidPDFError(f"Unable to read the page tree. Error: {exc}") from exc
        if num_pages == 0:
            raise InvalidPDFError("PDF has no pages")

        doc_id = next(_DOCUMENT_IDS)
        LOGGER.debug("Opened document d%d with %d page(s)", doc_id, num_pages)
        return PypdfDocument(num_pages=num_pages, reader=reader, raw_bytes=bytes(data), doc_id=doc_id)
