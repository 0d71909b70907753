"""
Custom exceptions for PDF TextStream.

This module defines all custom exceptions used throughout the library.
"""


class PDFTextStreamError(Exception):
    """Base exception for all PDF TextStream errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF text extraction error occurred."


class InvalidPDFError(PDFTextStreamError):
    """Raised when the PDF buffer is invalid or corrupted."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class EncryptedPDFError(PDFTextStreamError):
    """Raised when PDF is encrypted and cannot be processed."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted and cannot be processed without a password."


class PageOutOfBoundsError(PDFTextStreamError):
    """Raised when requested page number is out of bounds."""

    @property
    def default_message(self) -> str:
        return "Requested page number is out of bounds."


class FontResolutionError(PDFTextStreamError):
    """Raised when a generated font object never becomes available."""

    @property
    def default_message(self) -> str:
        return "Font object could not be resolved from the document."


class InvalidOptionsError(PDFTextStreamError):
    """Raised when parse options are inconsistent."""

    @property
    def default_message(self) -> str:
        return "Invalid parse options."
