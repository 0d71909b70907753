from __future__ import annotations

from pathlib import Path

import pytest

from pdf_textstream import CallbackObserver, ParseOptions, parse, parse_file
from pdf_textstream.exceptions import FontResolutionError, InvalidPDFError
from pdf_textstream.types import FirstPageRecord
from tests.fakes import FakeBackend, body, folio, scenario_pages


class RecordingObserver:
    def __init__(self) -> None:
        self.events: list[tuple] = []
        self.skeletons = None

    def on_metadata(self, metadata) -> None:
        self.events.append(("metadata", metadata.title))

    def on_document_ready(self, document, pages) -> None:
        self.skeletons = [(page.index, list(page.items)) for page in pages]
        self.events.append(("document", len(pages)))

    def on_page_update(self, pages) -> None:
        self.events.append(("pages", sum(1 for page in pages if page.items)))

    def on_font_update(self, fonts) -> None:
        self.events.append(("fonts", sorted(fonts.ids)))


def test_parse_twelve_page_scenario() -> None:
    raw_pages = scenario_pages()
    backend = FakeBackend(raw_pages)

    result = parse(b"%PDF-fake", backend=backend)

    assert result.first_page == FirstPageRecord(page_index=2, page_num=1)
    assert [len(page.items) for page in result.pages[:2]] == [1, 2]
    for page, raw in zip(result.pages[2:], raw_pages[2:]):
        assert len(page.items) == len(raw) - 1
        assert [item.text for item in page.items] == [raw[0].text]
    assert result.document is backend.document
    assert result.metadata.title == "Fake"


def test_parse_short_document_infers_from_partial_map() -> None:
    raw_pages = [[body(f"page {number}"), folio(number)] for number in range(1, 6)]

    result = parse(b"%PDF-fake", backend=FakeBackend(raw_pages))

    assert result.first_page == FirstPageRecord(page_index=0, page_num=1)
    assert all(len(page.items) == 1 for page in result.pages)


def test_parse_non_sequential_numerals_pass_through() -> None:
    raw_pages = [[body("text"), folio(number)] for number in (7, 3, 9, 1)]

    result = parse(b"%PDF-fake", backend=FakeBackend(raw_pages))

    assert result.first_page is None
    assert [len(page.items) for page in result.pages] == [2, 2, 2, 2]


def test_parse_preserves_item_order_and_geometry() -> None:
    raw_pages = [[body("b"), folio(1), body("a")], [folio(2), body("c")]]

    result = parse(b"%PDF-fake", backend=FakeBackend(raw_pages))

    assert [item.text for item in result.pages[0].items] == ["b", "a"]
    assert [(item.x, item.y) for item in result.pages[1].items] == [(72, 700)]


def test_parse_keep_page_numbers_skips_sampling() -> None:
    raw_pages = [[body("text"), folio(number)] for number in range(1, 4)]
    backend = FakeBackend(raw_pages)

    result = parse(b"%PDF-fake", backend=backend, options=ParseOptions(remove_page_numbers=False))

    assert result.first_page is None
    assert backend.document.text_requests() == [1, 2, 3]
    assert all(len(page.items) == 2 for page in result.pages)


def test_parse_notifies_observer_in_pipeline_order() -> None:
    raw_pages = [
        [body("one", font="g_d0_f1")],
        [body("two", font="g_d0_f1"), body("three", font="g_d0_f2"), body("four", font="Times")],
    ]
    observer = RecordingObserver()

    parse(b"%PDF-fake", observer, backend=FakeBackend(raw_pages))

    assert observer.events == [
        ("metadata", "Fake"),
        ("document", 2),
        ("pages", 1),
        ("fonts", ["g_d0_f1"]),
        ("pages", 2),
        ("fonts", ["g_d0_f1", "g_d0_f2"]),
    ]
    assert observer.skeletons == [(0, []), (1, [])]


def test_parse_page_updates_are_independent_copies() -> None:
    seen: list = []
    observer = CallbackObserver(page_parsed=seen.append)

    result = parse(
        b"%PDF-fake",
        observer,
        backend=FakeBackend([[body("a")], [body("b")]]),
        options=ParseOptions(remove_page_numbers=False),
    )

    assert [item.text for item in seen[0][0].items] == ["a"]
    assert seen[0][1].items == []
    assert [item.text for item in seen[1][1].items] == ["b"]
    assert seen[1][1] is not result.pages[1]


def test_parse_resolves_each_font_once_across_pages() -> None:
    raw_pages = [[body(f"page {index}", font="g_d0_f1"), body("x", font="g_d0_f2")] for index in range(6)]
    backend = FakeBackend(raw_pages)

    result = parse(b"%PDF-fake", backend=backend)

    assert result.fonts.ids == {"g_d0_f1", "g_d0_f2"}
    assert backend.document.objects.requests == {"g_d0_f1": 1, "g_d0_f2": 1}


def test_parse_materializes_operators_before_text_in_extraction_pass() -> None:
    raw_pages = [[body("text")], [body("more")]]
    backend = FakeBackend(raw_pages)

    parse(b"%PDF-fake", backend=backend, options=ParseOptions(remove_page_numbers=False))

    assert backend.document.calls == [
        ("metadata",),
        ("page", 1),
        ("operators", 1),
        ("viewport", 1),
        ("text", 1),
        ("page", 2),
        ("operators", 2),
        ("viewport", 2),
        ("text", 2),
    ]


def test_parse_fails_when_font_never_materializes() -> None:
    raw_pages = [[body("text", font="g_d0_f1")]]
    backend = FakeBackend(raw_pages, materialize_on_operators=False)

    with pytest.raises(FontResolutionError):
        parse(b"%PDF-fake", backend=backend)


def test_parse_propagates_engine_failure() -> None:
    raw_pages = [[body("text")], [body("text")]]
    observer = RecordingObserver()

    with pytest.raises(RuntimeError):
        parse(
            b"%PDF-fake",
            observer,
            backend=FakeBackend(raw_pages, fail_on_page=2),
            options=ParseOptions(remove_page_numbers=False),
        )
    assert ("pages", 1) in observer.events


def test_parse_forwards_password() -> None:
    backend = FakeBackend([[body("text")]])

    parse(b"%PDF-fake", backend=backend, options=ParseOptions(password="secret"))

    assert backend.opened == [(b"%PDF-fake", "secret")]


def test_callback_observer_with_partial_hooks() -> None:
    seen: list[int] = []
    observer = CallbackObserver(page_parsed=lambda pages: seen.append(len(pages)))

    parse(b"%PDF-fake", observer, backend=FakeBackend([[body("a")], [body("b")]]))

    assert seen == [2, 2]


def test_parse_file_missing_path(tmp_path: Path) -> None:
    with pytest.raises(InvalidPDFError):
        parse_file(tmp_path / "missing.pdf")


def test_parse_file_reads_bytes(tmp_path: Path) -> None:
    pdf_path = tmp_path / "doc.pdf"
    pdf_path.write_bytes(b"%PDF-fake")
    backend = FakeBackend([[body("a")]])

    parse_file(pdf_path, backend=backend)

    assert backend.opened == [(b"%PDF-fake", None)]
