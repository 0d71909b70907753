"""Backend abstractions for PDF TextStream."""

from .base import BackendDocument, BackendPage, ObjectTable, PDFBackend
from .pypdf_backend import PypdfBackend, PypdfDocument, PypdfObjectTable, PypdfPage

__all__ = [
    "BackendDocument",
    "BackendPage",
    "ObjectTable",
    "PDFBackend",
    "PypdfBackend",
    "PypdfDocument",
    "PypdfObjectTable",
    "PypdfPage",
]
