"""Registry of fonts resolved from the decoding engine's object table."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, Iterator, List, Set

from .exceptions import FontResolutionError
from .types import TextItem

__all__ = ["GENERATED_FONT_PREFIX", "FontRegistry", "is_generated_font_id"]

LOGGER = logging.getLogger("pdf_textstream.fonts")

GENERATED_FONT_PREFIX = "g_d"


def is_generated_font_id(font_id: str) -> bool:
    """Whether ``font_id`` names a font built from an embedded font program."""

    return font_id.startswith(GENERATED_FONT_PREFIX)


class FontRegistry:
    """Generated fonts resolved so far, keyed by font id."""

    def __init__(self) -> None:
        self.ids: Set[str] = set()
        self.map: Dict[str, Any] = {}

    def __contains__(self, font_id: object) -> bool:
        return font_id in self.ids

    def __len__(self) -> int:
        return len(self.ids)

    def __repr__(self) -> str:
        return f"FontRegistry(ids={sorted(self.ids)!r})"

    def add(self, font_id: str, resource: Any) -> None:
        self.ids.add(font_id)
        self.map[font_id] = resource

    def snapshot(self) -> "FontRegistry":
        copy = FontRegistry()
        copy.ids = set(self.ids)
        copy.map = dict(self.map)
        return copy

    def resolve_fonts(
        self,
        items: Iterable[TextItem],
        objects,
        *,
        is_generated: Callable[[str], bool] = is_generated_font_id,
    ) -> Iterator[str]:
        """Resolve unseen generated fonts referenced by ``items``.

        Yields each newly registered font id after it has been added, so
        callers can publish the registry between resolutions. Every id is
        requested from ``objects`` at most once over the registry lifetime.
        """

        font_ids: List[str] = []
        for item in items:
            if item.font not in font_ids:
                font_ids.append(item.font)

        for font_id in font_ids:
            if font_id in self.ids or not is_generated(font_id):
                continue
            resource = _resolve_once(objects, font_id)
            self.add(font_id, resource)
            LOGGER.debug("Resolved font %s", font_id)
            yield font_id


def _resolve_once(objects, font_id: str) -> Any:
    completions: List[Any] = []
    objects.get(font_id, completions.append)
    if not completions:
        raise FontResolutionError(f"Font object {font_id!r} was not materialized by the engine")
    return completions[0]
