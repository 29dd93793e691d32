"""
Client-side state for the calendar and flowchart views.

Each logical operation gets a request-sequence token; a response is applied
only if its token is still the latest issued for that operation, so a slow
earlier request cannot overwrite the result of a newer one.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Union

import httpx
from pydantic import ValidationError

from flowchart.layout import DEFAULT_SPACING, LayoutSpacing, layout_flowchart
from integration.lexical_client import LexicalClient, Notification, notification_for_error
from lexical.models import AssignmentBlock, FlowchartGraph
from scheduling.calendar_expander import assignments_for_date, expand_blocks

logger = logging.getLogger(__name__)


class RequestSequencer:
    def __init__(self):
        self._latest: Dict[str, int] = defaultdict(int)

    def issue(self, operation: str) -> int:
        self._latest[operation] += 1
        return self._latest[operation]

    def is_latest(self, operation: str, token: int) -> bool:
        return self._latest[operation] == token


@dataclass(frozen=True)
class Outcome:
    success: bool
    applied: bool = False
    superseded: bool = False
    error: Optional[str] = None

    @property
    def notification(self) -> Optional[Notification]:
        return notification_for_error(self.error) if self.error else None


def _failed(message: str) -> Outcome:
    return Outcome(success=False, error=message)


class SyllabusWorkspace:
    """Holds the most recent extraction and its per-day expansion."""

    OPERATION = "syllabus"

    def __init__(self, client: LexicalClient, sequencer: Optional[RequestSequencer] = None):
        self.client = client
        self.sequencer = sequencer or RequestSequencer()
        self.blocks: List[AssignmentBlock] = []
        self.by_day: Dict[str, AssignmentBlock] = {}

    async def upload(self, pdf_bytes: bytes, filename: str = "syllabus.pdf") -> Outcome:
        token = self.sequencer.issue(self.OPERATION)
        result = await self.client.extract_assignments(pdf_bytes, filename)
        if not self.sequencer.is_latest(self.OPERATION, token):
            logger.info("Discarding superseded syllabus response")
            return Outcome(success=bool(result.get("success")), superseded=True)
        if not result.get("success"):
            return _failed(result.get("error") or "Failed to process the PDF file. Please try again.")

        try:
            blocks = [AssignmentBlock.model_validate(b) for b in result.get("data") or []]
        except ValidationError as e:
            logger.error(f"Unexpected assignment payload: {e}")
            return _failed("Received malformed assignment data")

        self.blocks = blocks
        self.by_day = expand_blocks(blocks)
        return Outcome(success=True, applied=True)

    def for_day(self, day: Union[date, datetime]) -> Optional[AssignmentBlock]:
        return assignments_for_date(self.by_day, day)


class FlowchartWorkspace:
    """Keeps the last successful graph (sent back on refine) and its layout."""

    OPERATION = "flowchart"

    def __init__(
        self,
        client: LexicalClient,
        sequencer: Optional[RequestSequencer] = None,
        spacing: LayoutSpacing = DEFAULT_SPACING,
    ):
        self.client = client
        self.sequencer = sequencer or RequestSequencer()
        self.spacing = spacing
        self.current: Optional[FlowchartGraph] = None
        self.laid_out: Optional[FlowchartGraph] = None

    async def generate(self, prompt: str) -> Outcome:
        if not prompt.strip():
            return _failed("Please enter a description for your flowchart")
        token = self.sequencer.issue(self.OPERATION)
        try:
            result = await self.client.generate_flowchart(prompt)
        except httpx.HTTPError as e:
            logger.error(f"Generation error: {e}")
            return _failed("Failed to generate flowchart. Please check your connection and try again.")
        return self._apply(token, result, "Failed to generate flowchart")

    async def refine(self, refinement_request: str) -> Outcome:
        if self.current is None or not refinement_request.strip():
            return _failed("Please enter your refinement request")
        token = self.sequencer.issue(self.OPERATION)
        try:
            result = await self.client.refine_flowchart(self.current.to_wire(), refinement_request)
        except httpx.HTTPError as e:
            logger.error(f"Refinement error: {e}")
            return _failed("Failed to refine flowchart. Please check your connection and try again.")
        return self._apply(token, result, "Failed to refine flowchart")

    def _apply(self, token: int, result: dict, default_error: str) -> Outcome:
        if not self.sequencer.is_latest(self.OPERATION, token):
            logger.info("Discarding superseded flowchart response")
            return Outcome(success=bool(result.get("success")), superseded=True)
        if not result.get("success") or not result.get("data"):
            return _failed(result.get("error") or default_error)

        try:
            graph = FlowchartGraph.model_validate(result["data"])
        except ValidationError as e:
            logger.error(f"Unexpected flowchart payload: {e}")
            return _failed(default_error)

        self.current = graph
        self.laid_out = layout_flowchart(graph, self.spacing)
        return Outcome(success=True, applied=True)
