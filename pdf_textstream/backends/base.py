"""Backend protocol for PDF decoding."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol

from ..geometry import Viewport
from ..types import DocumentMetadata, TextContent


class ObjectTable(Protocol):
    """Document-wide table of objects the engine materializes lazily."""

    def get(self, obj_id: str, callback: Callable[[Any], None]) -> None:
        """Deliver the object to ``callback`` once; immediately if already available."""


@dataclass
class BackendPage:
    """A page of a loaded document with backend-specific accessors."""

    page_number: int  # 1-indexed

    @property
    def page_index(self) -> int:
        return self.page_number - 1

    def get_text_content(self) -> TextContent:
        raise NotImplementedError

    def get_viewport(self, scale: float) -> Viewport:
        raise NotImplementedError

    def get_operator_list(self) -> object:
        """Decode drawing operations, materializing the page's fonts."""
        raise NotImplementedError


@dataclass
class BackendDocument:
    """Represents a loaded PDF document with backend-specific helpers."""

    num_pages: int

    def get_page(self, page_number: int) -> BackendPage:
        raise NotImplementedError

    def get_metadata(self) -> DocumentMetadata:
        raise NotImplementedError

    @property
    def common_objs(self) -> ObjectTable:
        raise NotImplementedError


class PDFBackend(Protocol):
    """Protocol defining how a backend opens PDF data."""

    def open(self, data: bytes, password: str | None = None) -> BackendDocument:
        """Decode a PDF byte buffer and return a backend document wrapper."""
