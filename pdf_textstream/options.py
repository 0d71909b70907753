"""Configuration for a document parse."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from .exceptions import InvalidOptionsError
from .fonts import is_generated_font_id
from .page_numbers import DEFAULT_SAMPLE_SIZE, parse_page_number_candidate
from .types import RawTextItem

_SAMPLE_SIZE_ENV_VAR = "PDF_TEXTSTREAM_SAMPLE_SIZE"
_KEEP_PAGE_NUMBERS_ENV_VAR = "PDF_TEXTSTREAM_KEEP_PAGE_NUMBERS"

CandidatePredicate = Callable[[RawTextItem], Optional[int]]
FontIdPredicate = Callable[[str], bool]


def _env_flag(name: str) -> bool | None:
    value = os.getenv(name)
    if value is None:
        return None
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as exc:
        raise InvalidOptionsError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True)
class ParseOptions:
    """
    Options controlling a parse.

    Attributes:
        sample_size: Candidate map capacity for the page number sampling pass
        max_sample_pages: Optional cap on pages read while sampling
        password: Password for encrypted documents
        remove_page_numbers: Disable to skip detection and keep every item
        page_number_candidate: Returns the numeral an item prints, or ``None``
        is_generated_font: Tells engine-generated font ids from standard fonts
    """
    sample_size: int = DEFAULT_SAMPLE_SIZE
    max_sample_pages: Optional[int] = None
    password: Optional[str] = None
    remove_page_numbers: bool = True
    page_number_candidate: CandidatePredicate = field(default=parse_page_number_candidate)
    is_generated_font: FontIdPredicate = field(default=is_generated_font_id)

    def __post_init__(self) -> None:
        if self.sample_size <= 0:
            raise InvalidOptionsError("sample_size must be a positive integer")
        if self.max_sample_pages is not None and self.max_sample_pages <= 0:
            raise InvalidOptionsError("max_sample_pages must be a positive integer")

    @classmethod
    def from_env(cls, **overrides) -> "ParseOptions":
        """Build options, letting environment switches replace the defaults."""

        options = cls(**overrides)
        sample_size = _env_int(_SAMPLE_SIZE_ENV_VAR)
        if sample_size is not None and "sample_size" not in overrides:
            options = replace(options, sample_size=sample_size)
        keep = _env_flag(_KEEP_PAGE_NUMBERS_ENV_VAR)
        if keep is not None and "remove_page_numbers" not in overrides:
            options = replace(options, remove_page_numbers=not keep)
        return options
