from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, List, Dict

from pydantic import BaseModel, ConfigDict, Field


AssignmentTag = Literal["read", "write", "oral", "evaluation", "other"]
NodeType = Literal["start", "process", "decision", "end", "input", "output"]

ASSIGNMENT_TAGS = ("read", "write", "oral", "evaluation", "other")


class _CamelModel(BaseModel):
    # Wire format is camelCase; Python attributes stay snake_case.
    model_config = ConfigDict(populate_by_name=True)


class Assignment(_CamelModel):
    title: str
    tag: AssignmentTag


class AssignmentBlock(_CamelModel):
    """One calendar date (or date range) with its grouped assignments.

    Dates and times are kept as the strings the model produced
    ("YYYY-MM-DD" / "HH:MM"); the calendar expander parses them.
    """

    start_date: Optional[str] = Field(..., alias="startDate")
    end_date: Optional[str] = Field(..., alias="endDate")
    start_time: Optional[str] = Field(..., alias="startTime")
    end_time: Optional[str] = Field(..., alias="endTime")
    location: Optional[str] = Field(...)
    assignments: List[Assignment] = Field(...)

    items_by_tag: Optional[Dict[AssignmentTag, List[str]]] = Field(default=None, alias="itemsByTag")

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


class FlowchartNode(_CamelModel):
    id: str
    type: NodeType
    label: str
    x: Optional[float] = None
    y: Optional[float] = None


class FlowchartEdge(_CamelModel):
    id: str
    source: str
    target: str
    label: Optional[str] = None


class FlowchartGraph(_CamelModel):
    title: str
    description: str = ""
    nodes: List[FlowchartNode]
    edges: List[FlowchartEdge]

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ChatMessage(BaseModel):
    id: str
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime = Field(default_factory=datetime.now)
    is_error: bool = False
    can_regenerate: bool = False
