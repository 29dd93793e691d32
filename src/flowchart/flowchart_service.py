import logging
from dataclasses import dataclass
from typing import Any, Optional

from lexical.models import FlowchartGraph
from llm.errors import InvalidAIResponseError, SchemaValidationError
from llm.json_extraction import extract_json
from llm.llm_client import LLMClient, LLMResult
from llm.prompts import flowchart_refine_prompt, flowchart_system_prompt
from llm.schemas import validate_flowchart

logger = logging.getLogger(__name__)

FLOWCHART_MAX_TOKENS = 2000
FLOWCHART_TEMPERATURE = 0.3


@dataclass
class FlowchartResult:
    graph: FlowchartGraph
    usage: Optional[dict[str, Any]] = None


class FlowchartService:
    """Turns a natural-language description (or a refinement of a prior graph) into a FlowchartGraph."""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self._llm_client = llm_client

    @property
    def llm(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return self._llm_client

    async def generate(self, prompt: str) -> FlowchartResult:
        result = await self.llm.generate(
            prompt,
            system=flowchart_system_prompt(prompt),
            max_tokens=FLOWCHART_MAX_TOKENS,
            temperature=FLOWCHART_TEMPERATURE,
        )
        return self._to_result(result)

    async def refine(self, current: Any, refinement_request: str) -> FlowchartResult:
        if isinstance(current, FlowchartGraph):
            current = current.to_wire()
        result = await self.llm.generate(
            flowchart_refine_prompt(current, refinement_request),
            max_tokens=FLOWCHART_MAX_TOKENS,
            temperature=FLOWCHART_TEMPERATURE,
        )
        return self._to_result(result)

    def _to_result(self, result: LLMResult) -> FlowchartResult:
        try:
            data = extract_json(result.content, expect="object")
            graph = validate_flowchart(data, raw=result.content)
        except (InvalidAIResponseError, SchemaValidationError) as e:
            logger.error(f"Flowchart response unusable: {e}")
            logger.error(f"Raw content: {result.content}")
            raise

        logger.info(f"Flowchart '{graph.title}' with {len(graph.nodes)} nodes, {len(graph.edges)} edges")
        return FlowchartResult(graph=graph, usage=result.usage)
