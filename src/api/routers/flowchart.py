import logging
import time
from typing import Any, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import MAX_FLOWCHART_PROMPT_CHARS, MAX_REFINEMENT_CHARS, get_flowchart_service
from api.errors import error_response, llm_error_response
from api.metrics import FLOWCHART_NODES_TOTAL, observe_request
from flowchart.flowchart_service import FlowchartResult, FlowchartService
from llm.errors import LLMError

router = APIRouter(prefix="/api/flowchart")
logger = logging.getLogger(__name__)

INVALID_JSON_MESSAGE = "Invalid JSON response from AI"


class GenerateFlowchartIn(BaseModel):
    prompt: Any = None


class RefineFlowchartIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    current_flowchart: Optional[Any] = Field(default=None, alias="currentFlowchart")
    refinement_request: Any = Field(default=None, alias="refinementRequest")


def _success(result: FlowchartResult) -> dict:
    FLOWCHART_NODES_TOTAL.inc(len(result.graph.nodes))
    return {"success": True, "data": result.graph.to_wire(), "usage": result.usage}


@router.post("/generate")
async def generate_flowchart(
    payload: GenerateFlowchartIn,
    service: FlowchartService = Depends(get_flowchart_service),
):
    start = time.time()
    endpoint = "/api/flowchart/generate"

    prompt = payload.prompt
    if not prompt or not isinstance(prompt, str):
        observe_request(endpoint, "rejected", start)
        return error_response(400, "Prompt is required and must be a string")
    if len(prompt) > MAX_FLOWCHART_PROMPT_CHARS:
        observe_request(endpoint, "rejected", start)
        return error_response(400, f"Prompt must be less than {MAX_FLOWCHART_PROMPT_CHARS} characters")

    try:
        result = await service.generate(prompt)
    except LLMError as e:
        logger.error(f"Generate flowchart error: {e}")
        observe_request(endpoint, "failed", start)
        return llm_error_response(e, parse_message=INVALID_JSON_MESSAGE)

    observe_request(endpoint, "processed", start)
    return _success(result)


@router.post("/refine")
async def refine_flowchart(
    payload: RefineFlowchartIn,
    service: FlowchartService = Depends(get_flowchart_service),
):
    start = time.time()
    endpoint = "/api/flowchart/refine"

    current = payload.current_flowchart
    request = payload.refinement_request
    if not current or not request:
        observe_request(endpoint, "rejected", start)
        return error_response(400, "Current flowchart and refinement request are required")
    if not isinstance(current, dict):
        observe_request(endpoint, "rejected", start)
        return error_response(400, "Current flowchart must be a JSON object")
    if not isinstance(request, str) or len(request) > MAX_REFINEMENT_CHARS:
        observe_request(endpoint, "rejected", start)
        return error_response(
            400, f"Refinement request must be a string with less than {MAX_REFINEMENT_CHARS} characters"
        )

    try:
        result = await service.refine(current, request)
    except LLMError as e:
        logger.error(f"Refine flowchart error: {e}")
        observe_request(endpoint, "failed", start)
        return llm_error_response(e, parse_message=INVALID_JSON_MESSAGE)

    observe_request(endpoint, "processed", start)
    return _success(result)
