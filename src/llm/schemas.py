from __future__ import annotations

from typing import Any, List

from pydantic import TypeAdapter, ValidationError

from lexical.models import AssignmentBlock, FlowchartGraph
from llm.errors import SchemaValidationError

_BLOCKS = TypeAdapter(List[AssignmentBlock])


def _first_error(e: ValidationError) -> str:
    err = e.errors()[0]
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg')}" if loc else str(err.get("msg"))


def validate_assignment_blocks(data: Any, raw: str = "") -> List[AssignmentBlock]:
    """Check that ``data`` is an array of assignment blocks.

    Shape only: every block must carry startDate, endDate, startTime,
    endTime and location (each may be null) plus an ``assignments`` list of
    title/tag pairs with a known tag. Date values are not interpreted here.
    """
    if not isinstance(data, list):
        raise SchemaValidationError("AI response is not a valid JSON array", raw=raw)
    try:
        return _BLOCKS.validate_python(data)
    except ValidationError as e:
        raise SchemaValidationError(
            f"AI response is not a valid JSON array of assignments ({_first_error(e)})",
            raw=raw,
        ) from e


def validate_flowchart(data: Any, raw: str = "") -> FlowchartGraph:
    """Check that ``data`` has a title plus node and edge lists of the right shape.

    Graph content (start/end nodes present, edges pointing at known ids) is
    left to the model and not checked here.
    """
    if not isinstance(data, dict):
        raise SchemaValidationError("Invalid flowchart structure", raw=raw)
    try:
        return FlowchartGraph.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError(f"Invalid flowchart structure ({_first_error(e)})", raw=raw) from e
