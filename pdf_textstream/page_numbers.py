"""Detection and removal of printed page numbers.

Detection samples the leading pages of a document, records at most one
numeral per page in a candidate map, and looks for the longest unbroken run of
entries whose numerals advance in lockstep with the page index. The first
entry of that run marks where numbering starts. Removal then strips the
expected numeral from every page from that point on, advancing the expected
value once per page whether or not it was found.
"""

from __future__ import annotations

import logging
import re
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from .types import FirstPageRecord, RawTextItem, TextItem

__all__ = [
    "DEFAULT_SAMPLE_SIZE",
    "PageNumberRemover",
    "detect_first_page",
    "find_first_page",
    "find_page_numbers",
    "parse_page_number_candidate",
    "remove_page_number",
    "sample_page_numbers",
]

LOGGER = logging.getLogger("pdf_textstream.page_numbers")

DEFAULT_SAMPLE_SIZE = 10

_NUMERAL_PATTERN = re.compile(r"[0-9]{1,4}")

CandidatePredicate = Callable[[RawTextItem], Optional[int]]


def parse_page_number_candidate(item: RawTextItem) -> Optional[int]:
    """Return the numeral printed by ``item`` when it looks like a page number."""

    text = item.text.strip()
    if _NUMERAL_PATTERN.fullmatch(text):
        return int(text)
    return None


def find_page_numbers(
    candidates: Dict[int, int],
    page_index: int,
    items: Iterable[RawTextItem],
    predicate: CandidatePredicate = parse_page_number_candidate,
) -> Dict[int, int]:
    """Record the first candidate numeral of a page; existing entries win."""

    if page_index in candidates:
        return candidates
    for item in items:
        value = predicate(item)
        if value is not None:
            candidates[page_index] = value
            break
    return candidates


def sample_page_numbers(
    document,
    *,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    predicate: CandidatePredicate = parse_page_number_candidate,
    max_pages: Optional[int] = None,
) -> Dict[int, int]:
    """Read pages in order until ``sample_size`` candidates are known."""

    candidates: Dict[int, int] = {}
    pages_read = 0
    for page_number in range(1, document.num_pages + 1):
        if len(candidates) >= sample_size:
            break
        if max_pages is not None and pages_read >= max_pages:
            break
        page = document.get_page(page_number)
        content = page.get_text_content()
        pages_read += 1
        candidates = find_page_numbers(candidates, page.page_index, content.items, predicate)
    LOGGER.debug("Sampled %d page(s), found %d page number candidate(s)", pages_read, len(candidates))
    return candidates


def find_first_page(candidates: Mapping[int, int]) -> Optional[FirstPageRecord]:
    """Infer where sequential numbering starts from a candidate map.

    Entries are walked in page order. A run continues while each entry keeps
    the previous entry's ``numeral - page_index`` offset; pages without a
    candidate may sit between them, but a disagreeing candidate ends the run.
    The longest run of at least two entries wins, ties going to the run that
    starts on the lowest page index.
    """

    runs: List[List[int]] = []
    previous_offset: Optional[int] = None
    for page_index in sorted(candidates):
        offset = candidates[page_index] - page_index
        if runs and offset == previous_offset:
            runs[-1].append(page_index)
        else:
            runs.append([page_index])
        previous_offset = offset

    best: Optional[List[int]] = None
    for run in runs:
        if len(run) < 2:
            continue
        if best is None or len(run) > len(best):
            best = run

    if best is None:
        return None
    start = best[0]
    return FirstPageRecord(page_index=start, page_num=candidates[start])


def detect_first_page(
    document,
    *,
    sample_size: int = DEFAULT_SAMPLE_SIZE,
    predicate: CandidatePredicate = parse_page_number_candidate,
    max_pages: Optional[int] = None,
) -> Optional[FirstPageRecord]:
    candidates = sample_page_numbers(
        document, sample_size=sample_size, predicate=predicate, max_pages=max_pages
    )
    first_page = find_first_page(candidates)
    if first_page is None:
        LOGGER.info("No sequential page numbering detected")
    else:
        LOGGER.info(
            "Page numbering starts at page index %d with number %d",
            first_page.page_index,
            first_page.page_num,
        )
    return first_page


def remove_page_number(items: Sequence[TextItem], page_num: int) -> List[TextItem]:
    """Drop the first item printing ``page_num``; at most one item is removed."""

    target = str(page_num)
    for position, item in enumerate(items):
        if item.text == target:
            return [*items[:position], *items[position + 1:]]
    return list(items)


class PageNumberRemover:
    """Strips expected page numerals from pages at or after the detected start."""

    def __init__(self, first_page: Optional[FirstPageRecord]) -> None:
        self.first_page = first_page
        self.expected_number: Optional[int] = first_page.page_num if first_page else None

    def apply(self, page_index: int, items: Sequence[TextItem]) -> List[TextItem]:
        if self.first_page is None or self.expected_number is None:
            return list(items)
        if page_index < self.first_page.page_index:
            return list(items)

        result = remove_page_number(items, self.expected_number)
        if len(result) == len(items):
            LOGGER.debug("Page number %d not found on page index %d", self.expected_number, page_index)
        self.expected_number += 1
        return result
