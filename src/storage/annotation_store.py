"""
Session-scoped store for PDF annotations: highlights, tags and notes.

Nothing is persisted; one AnnotationStore lives for one viewer session and
is passed explicitly to whatever needs it.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from highlighting.geometry import Highlight
from lexical.models import ChatMessage


@dataclass
class Tag:
    id: str
    name: str
    color: str
    created_at: float = field(default_factory=time.time)


@dataclass(frozen=True)
class TagResult:
    success: bool
    tag: Optional[Tag] = None
    error: Optional[str] = None


class UnknownHighlightError(KeyError):
    pass


class UnknownTagError(KeyError):
    pass


class AnnotationStore:
    def __init__(self):
        self._highlights: Dict[str, Highlight] = {}
        self._tags: List[Tag] = []
        self._notes: Dict[str, List[ChatMessage]] = {}

    # highlights

    @property
    def highlights(self) -> List[Highlight]:
        return list(self._highlights.values())

    def get_highlight(self, highlight_id: str) -> Highlight:
        try:
            return self._highlights[highlight_id]
        except KeyError:
            raise UnknownHighlightError(highlight_id) from None

    def add_highlight(self, highlight: Highlight) -> Highlight:
        if not highlight.title:
            highlight.title = f"Highlight {len(self._highlights) + 1}"
        self._highlights[highlight.id] = highlight
        return highlight

    def delete_highlight(self, highlight_id: str) -> None:
        self._highlights.pop(highlight_id, None)
        self._notes.pop(highlight_id, None)

    def set_highlight_color(self, highlight_id: str, color: str) -> None:
        self.get_highlight(highlight_id).color = color

    def rename_highlight(self, highlight_id: str, title: str) -> None:
        title = title.strip()
        if title:
            self.get_highlight(highlight_id).title = title

    def filter_highlights(
        self,
        tag_ids: Optional[Iterable[str]] = None,
        page: Optional[int] = None,
    ) -> List[Highlight]:
        """Highlights carrying any of ``tag_ids`` and/or on ``page``; no filter means all."""
        wanted = set(tag_ids or ())
        out = self.highlights
        if wanted:
            out = [h for h in out if wanted.intersection(h.tags)]
        if page is not None:
            out = [h for h in out if h.page_number == page]
        return out

    def highlighted_pages(self) -> List[int]:
        return sorted({h.page_number for h in self._highlights.values()})

    # tags

    @property
    def tags(self) -> List[Tag]:
        return list(self._tags)

    def _name_taken(self, name: str, exclude_id: Optional[str] = None) -> bool:
        folded = name.casefold()
        return any(t.name.casefold() == folded and t.id != exclude_id for t in self._tags)

    def create_tag(self, name: str, color: str) -> TagResult:
        name = name.strip()
        if not name:
            return TagResult(False, error="Tag name is required")
        if self._name_taken(name):
            return TagResult(False, error=f'A tag named "{name}" already exists')

        tag = Tag(id=f"tag-{uuid.uuid4().hex[:12]}", name=name, color=color)
        self._tags.append(tag)
        return TagResult(True, tag=tag)

    def update_tag(self, tag_id: str, name: str, color: str) -> TagResult:
        tag = next((t for t in self._tags if t.id == tag_id), None)
        if tag is None:
            return TagResult(False, error=f"Unknown tag: {tag_id}")
        name = name.strip()
        if not name:
            return TagResult(False, error="Tag name is required")
        if self._name_taken(name, exclude_id=tag_id):
            return TagResult(False, error=f'A tag named "{name}" already exists')

        tag.name = name
        tag.color = color
        return TagResult(True, tag=tag)

    def delete_tag(self, tag_id: str) -> None:
        self._tags = [t for t in self._tags if t.id != tag_id]
        for h in self._highlights.values():
            if tag_id in h.tags:
                h.tags = [t for t in h.tags if t != tag_id]

    def assign_tag(self, highlight_id: str, tag_id: str) -> None:
        highlight = self.get_highlight(highlight_id)
        if not any(t.id == tag_id for t in self._tags):
            raise UnknownTagError(tag_id)
        if tag_id not in highlight.tags:
            highlight.tags.append(tag_id)

    def unassign_tag(self, highlight_id: str, tag_id: str) -> None:
        highlight = self.get_highlight(highlight_id)
        highlight.tags = [t for t in highlight.tags if t != tag_id]

    # notes

    def attach_note(self, highlight_id: str, note: ChatMessage) -> None:
        self.get_highlight(highlight_id)
        self._notes.setdefault(highlight_id, []).append(note)

    def notes_for(self, highlight_id: str) -> List[ChatMessage]:
        return list(self._notes.get(highlight_id, []))
