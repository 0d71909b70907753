"""Utilities shared by PDF TextStream modules."""

from __future__ import annotations

import logging
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from .types import Page, ParseResult


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
        logger.propagate = False
    if level is not None:
        logger.setLevel(level)
    return logger


def resolve_path(path: str | Path | None) -> Path:
    if path is None:
        raise ValueError("Path must not be None")
    return Path(path).expanduser().resolve()


def page_text(page: Page) -> str:
    """Join item texts in emission order, breaking lines where ``y`` changes."""

    lines: List[List[str]] = []
    last_y: Optional[int] = None
    for item in page.items:
        if last_y is None or item.y != last_y:
            lines.append([])
        lines[-1].append(item.text)
        last_y = item.y
    return "\n".join(" ".join(parts) for parts in lines)


def result_to_dict(result: ParseResult) -> Dict[str, Any]:
    """Return a JSON-serializable view of a parse result."""

    fonts: Dict[str, Any] = {}
    for font_id in sorted(result.fonts.ids):
        resource = result.fonts.map.get(font_id)
        fonts[font_id] = getattr(resource, "name", None)

    return {
        "metadata": asdict(result.metadata),
        "first_page": asdict(result.first_page) if result.first_page else None,
        "fonts": fonts,
        "pages": [
            {"index": page.index, "items": [asdict(item) for item in page.items]}
            for page in result.pages
        ],
    }
