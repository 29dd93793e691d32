"""
Highlight geometry for the PDF viewer.

Selection rectangles arrive in client (viewport) coordinates. They are
stored relative to the top-left of the page's rendered text layer, together
with the zoom scale at capture time, and rescaled on render so the overlay
stays on the same text when the user zooms.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from highlighting.colors import DEFAULT_HIGHLIGHT_COLOR

# Text layer and page boxes closer than this (px) are treated as the same box.
REFERENCE_TOLERANCE_PX = 1.0


@dataclass(frozen=True)
class Rect:
    left: float
    top: float
    right: float
    bottom: float

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def offset(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)

    def scaled(self, ratio: float) -> "Rect":
        return Rect(self.left * ratio, self.top * ratio, self.right * ratio, self.bottom * ratio)


@dataclass
class Highlight:
    id: str
    page_number: int
    text: str
    rects: Tuple[Rect, ...]
    base_scale: float
    color: str = DEFAULT_HIGHLIGHT_COLOR
    title: str = ""
    timestamp: float = field(default_factory=time.time)
    tags: List[str] = field(default_factory=list)


def reference_rect(page_rect: Rect, text_layer_rect: Optional[Rect]) -> Rect:
    """The box selection rects are measured from: the text layer when it is offset from the page."""
    if text_layer_rect is not None and (
        abs(text_layer_rect.left - page_rect.left) > REFERENCE_TOLERANCE_PX
        or abs(text_layer_rect.top - page_rect.top) > REFERENCE_TOLERANCE_PX
    ):
        return text_layer_rect
    return page_rect


def to_page_relative(client_rects: Sequence[Rect], reference: Rect) -> Tuple[Rect, ...]:
    return tuple(r.offset(-reference.left, -reference.top) for r in client_rects)


def capture_highlight(
    *,
    selected_text: str,
    client_rects: Sequence[Rect],
    page_rect: Rect,
    page_number: int,
    scale: float,
    text_layer_rect: Optional[Rect] = None,
    color: str = DEFAULT_HIGHLIGHT_COLOR,
    title: str = "",
) -> Optional[Highlight]:
    """Build a Highlight from a text selection on the active page.

    Returns None when there is nothing to highlight (blank text or no
    rectangles). Selections spanning several pages are not supported; all
    rects are taken relative to the given page.
    """
    text = selected_text.strip()
    if not text or not client_rects:
        return None
    if scale <= 0:
        raise ValueError("scale must be positive")

    reference = reference_rect(page_rect, text_layer_rect)
    return Highlight(
        id=f"highlight-{uuid.uuid4().hex[:12]}",
        page_number=page_number,
        text=text,
        rects=to_page_relative(client_rects, reference),
        base_scale=scale,
        color=color,
        title=title,
    )


def render_rects(highlight: Highlight, current_scale: float) -> List[Rect]:
    """Stored rects rescaled by ``current_scale / base_scale``, edge by edge."""
    ratio = current_scale / highlight.base_scale
    return [r.scaled(ratio) for r in highlight.rects]
