"""Observer hooks notified while a document is parsed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, List, Protocol

from .fonts import FontRegistry
from .types import DocumentMetadata, Page

__all__ = ["CallbackObserver", "NullObserver", "ParseObserver"]


class ParseObserver(Protocol):
    """Receives parse progress; every hook is called synchronously."""

    def on_metadata(self, metadata: DocumentMetadata) -> None:
        """Called once with the document metadata."""

    def on_document_ready(self, document: Any, pages: List[Page]) -> None:
        """Called once with the engine document and the empty page skeletons."""

    def on_page_update(self, pages: List[Page]) -> None:
        """Called after each page is extracted with all pages so far."""

    def on_font_update(self, fonts: FontRegistry) -> None:
        """Called after each newly resolved font with the whole registry."""


class NullObserver:
    def on_metadata(self, metadata: DocumentMetadata) -> None:
        pass

    def on_document_ready(self, document: Any, pages: List[Page]) -> None:
        pass

    def on_page_update(self, pages: List[Page]) -> None:
        pass

    def on_font_update(self, fonts: FontRegistry) -> None:
        pass


def _no_op(*_args: Any) -> None:
    return None


@dataclass
class CallbackObserver:
    """Adapts plain callables to :class:`ParseObserver`; unset hooks do nothing."""

    metadata_parsed: Callable[[DocumentMetadata], None] = _no_op
    document_parsed: Callable[[Any, List[Page]], None] = _no_op
    page_parsed: Callable[[List[Page]], None] = _no_op
    font_parsed: Callable[[FontRegistry], None] = _no_op

    def on_metadata(self, metadata: DocumentMetadata) -> None:
        self.metadata_parsed(metadata)

    def on_document_ready(self, document: Any, pages: List[Page]) -> None:
        self.document_parsed(document, pages)

    def on_page_update(self, pages: List[Page]) -> None:
        self.page_parsed(pages)

    def on_font_update(self, fonts: FontRegistry) -> None:
        self.font_parsed(fonts)
