"""Affine helpers and text item normalization into device space."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .types import RawTextItem, TextItem

__all__ = [
    "IDENTITY_MATRIX",
    "RENDER_SCALE",
    "Viewport",
    "normalize_item",
    "normalize_items",
    "transform",
]

Matrix6 = tuple[float, float, float, float, float, float]

IDENTITY_MATRIX: Matrix6 = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)

# Translation is read from the item's own transform, which only matches
# device space at this scale.
RENDER_SCALE = 1.0


def transform(m1: Sequence[float], m2: Sequence[float]) -> Matrix6:
    """Compose two affine matrices; ``m2`` is applied first, then ``m1``."""

    return (
        m1[0] * m2[0] + m1[2] * m2[1],
        m1[1] * m2[0] + m1[3] * m2[1],
        m1[0] * m2[2] + m1[2] * m2[3],
        m1[1] * m2[2] + m1[3] * m2[3],
        m1[0] * m2[4] + m1[2] * m2[5] + m1[4],
        m1[1] * m2[4] + m1[3] * m2[5] + m1[5],
    )


@dataclass(frozen=True)
class Viewport:
    """Mapping from PDF user space to a top-left origin device space."""

    view_box: tuple[float, float, float, float]
    scale: float
    rotation: int
    transform: Matrix6
    width: float
    height: float

    @classmethod
    def from_box(
        cls,
        view_box: Sequence[float],
        *,
        scale: float = RENDER_SCALE,
        rotation: int = 0,
    ) -> "Viewport":
        x0, y0, x1, y1 = (float(v) for v in view_box)
        center_x = (x1 + x0) / 2
        center_y = (y1 + y0) / 2

        rotation %= 360
        if rotation == 90:
            rotate_a, rotate_b, rotate_c, rotate_d = 0.0, 1.0, 1.0, 0.0
        elif rotation == 180:
            rotate_a, rotate_b, rotate_c, rotate_d = -1.0, 0.0, 0.0, 1.0
        elif rotation == 270:
            rotate_a, rotate_b, rotate_c, rotate_d = 0.0, -1.0, -1.0, 0.0
        elif rotation == 0:
            rotate_a, rotate_b, rotate_c, rotate_d = 1.0, 0.0, 0.0, -1.0
        else:
            raise ValueError(f"Page rotation must be a multiple of 90, got {rotation}")

        if rotate_a == 0:
            offset_x = abs(center_y - y0) * scale
            offset_y = abs(center_x - x0) * scale
            width = (y1 - y0) * scale
            height = (x1 - x0) * scale
        else:
            offset_x = abs(center_x - x0) * scale
            offset_y = abs(center_y - y0) * scale
            width = (x1 - x0) * scale
            height = (y1 - y0) * scale

        matrix: Matrix6 = (
            rotate_a * scale,
            rotate_b * scale,
            rotate_c * scale,
            rotate_d * scale,
            offset_x - rotate_a * scale * center_x - rotate_c * scale * center_y,
            offset_y - rotate_b * scale * center_x - rotate_d * scale * center_y,
        )
        return cls(
            view_box=(x0, y0, x1, y1),
            scale=scale,
            rotation=rotation,
            transform=matrix,
            width=width,
            height=height,
        )


def normalize_item(item: RawTextItem, viewport: Viewport) -> TextItem:
    """Round one engine text item into device-space integers.

    The height is divided by the vertical scale of the combined transform when
    that scale exceeds the raw height, so glyph boxes that were stretched by the
    text matrix come out at their rendered size.
    """

    tx = transform(viewport.transform, item.transform)
    font_height = math.sqrt(tx[2] * tx[2] + tx[3] * tx[3])
    height = item.height
    if font_height:
        divided_height = item.height / font_height
        if divided_height > 1:
            height = divided_height
    return TextItem(
        x=_round(item.transform[4]),
        y=_round(item.transform[5]),
        width=_round(item.width),
        height=_round(height),
        text=item.text,
        font=item.font_name,
    )


def normalize_items(items: Iterable[RawTextItem], viewport: Viewport) -> List[TextItem]:
    return [normalize_item(item, viewport) for item in items]


def _round(value: float) -> int:
    # Half-up like the renderer; Python's round() is banker's rounding.
    return int(math.floor(value + 0.5))
