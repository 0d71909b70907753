from __future__ import annotations

import io
from pathlib import Path
from typing import Callable, Sequence
import sys

import pytest
from pypdf import PdfWriter
from pypdf.generic import (
    ArrayObject,
    DecodedStreamObject,
    DictionaryObject,
    NameObject,
    NumberObject,
)

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

# (text, x, y, font_size, font resource name)
TextRun = tuple[str, float, float, float, str]

STANDARD_FONT = "/F1"
EMBEDDED_FONT = "/F2"


def _standard_font() -> DictionaryObject:
    return DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/Type1"),
            NameObject("/BaseFont"): NameObject("/Helvetica"),
            NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
        }
    )


def _embedded_font(writer: PdfWriter) -> DictionaryObject:
    program = DecodedStreamObject()
    program.set_data(b"fake truetype program")
    descriptor = DictionaryObject(
        {
            NameObject("/Type"): NameObject("/FontDescriptor"),
            NameObject("/FontName"): NameObject("/ABCDEF+Custom"),
            NameObject("/Flags"): NumberObject(32),
            NameObject("/FontBBox"): ArrayObject(
                [NumberObject(0), NumberObject(-200), NumberObject(1000), NumberObject(800)]
            ),
            NameObject("/ItalicAngle"): NumberObject(0),
            NameObject("/Ascent"): NumberObject(800),
            NameObject("/Descent"): NumberObject(-200),
            NameObject("/CapHeight"): NumberObject(700),
            NameObject("/StemV"): NumberObject(80),
            NameObject("/FontFile2"): writer._add_object(program),
        }
    )
    return DictionaryObject(
        {
            NameObject("/Type"): NameObject("/Font"),
            NameObject("/Subtype"): NameObject("/TrueType"),
            NameObject("/BaseFont"): NameObject("/ABCDEF+Custom"),
            NameObject("/FirstChar"): NumberObject(32),
            NameObject("/LastChar"): NumberObject(126),
            NameObject("/Widths"): ArrayObject([NumberObject(600) for _ in range(95)]),
            NameObject("/Encoding"): NameObject("/WinAnsiEncoding"),
            NameObject("/FontDescriptor"): writer._add_object(descriptor),
        }
    )


def build_text_pdf(
    pages: Sequence[Sequence[TextRun]],
    *,
    title: str | None = None,
    width: float = 612,
    height: float = 792,
    password: str | None = None,
) -> bytes:
    """Write a PDF whose pages draw each run in its own text object."""

    writer = PdfWriter()
    fonts = DictionaryObject(
        {
            NameObject(STANDARD_FONT): writer._add_object(_standard_font()),
            NameObject(EMBEDDED_FONT): writer._add_object(_embedded_font(writer)),
        }
    )
    fonts_ref = writer._add_object(fonts)
    for runs in pages:
        page = writer.add_blank_page(width=width, height=height)
        operations = "".join(
            f"BT {font} {size:g} Tf {x:g} {y:g} Td ({text}) Tj ET\n"
            for text, x, y, size, font in runs
        )
        stream = DecodedStreamObject()
        stream.set_data(operations.encode("latin-1"))
        page[NameObject("/Contents")] = writer._add_object(stream)
        page[NameObject("/Resources")] = DictionaryObject({NameObject("/Font"): fonts_ref})
    if title is not None:
        writer.add_metadata({"/Title": title})
    if password is not None:
        writer.encrypt(user_password=password, algorithm="RC4-128")
    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def numbered_document() -> list[list[TextRun]]:
    """Cover page followed by three pages printing 1, 2, 3 at the bottom."""

    pages: list[list[TextRun]] = [[("Annual Report", 72, 720, 24, STANDARD_FONT)]]
    for number, word in enumerate(["Alpha", "Beta", "Gamma"], start=1):
        pages.append(
            [
                (f"Section {word}", 72, 720, 12, EMBEDDED_FONT),
                (str(number), 300, 40, 10, STANDARD_FONT),
            ]
        )
    return pages


@pytest.fixture()
def text_pdf() -> Callable[..., bytes]:
    return build_text_pdf


@pytest.fixture()
def numbered_pdf_bytes() -> bytes:
    return build_text_pdf(numbered_document(), title="Annual Report")


@pytest.fixture()
def numbered_pdf(tmp_path: Path, numbered_pdf_bytes: bytes) -> Path:
    pdf_path = tmp_path / "numbered.pdf"
    pdf_path.write_bytes(numbered_pdf_bytes)
    return pdf_path
