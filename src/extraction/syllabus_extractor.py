import asyncio
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from extraction.pdf_text import extract_pdf_text
from lexical.models import AssignmentBlock
from llm.errors import InvalidAIResponseError, SchemaValidationError
from llm.json_extraction import extract_json
from llm.llm_client import LLMClient
from llm.prompts import syllabus_prompt
from llm.schemas import validate_assignment_blocks

logger = logging.getLogger(__name__)

SYLLABUS_MAX_TOKENS = 3000
SYLLABUS_TEMPERATURE = 0.1


@dataclass
class SyllabusExtraction:
    blocks: List[AssignmentBlock]
    usage: Optional[dict[str, Any]] = None


class SyllabusExtractor:
    """Syllabus text -> prompt -> LLM -> JSON extraction -> shape validation."""

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self._llm_client = llm_client

    @property
    def llm(self) -> LLMClient:
        if self._llm_client is None:
            self._llm_client = LLMClient()
        return self._llm_client

    async def extract_from_pdf(self, pdf_bytes: bytes) -> SyllabusExtraction:
        # PyPDF2 is synchronous and CPU bound.
        text = await asyncio.to_thread(extract_pdf_text, pdf_bytes)
        return await self.extract(text)

    async def extract(self, text: str) -> SyllabusExtraction:
        result = await self.llm.generate(
            syllabus_prompt(text),
            max_tokens=SYLLABUS_MAX_TOKENS,
            temperature=SYLLABUS_TEMPERATURE,
        )

        try:
            data = extract_json(result.content, expect="array")
            blocks = validate_assignment_blocks(data, raw=result.content)
        except (InvalidAIResponseError, SchemaValidationError) as e:
            logger.error(f"Syllabus extraction returned unusable output: {e}")
            logger.error(f"Raw content: {result.content}")
            raise

        logger.info(f"Extracted {len(blocks)} assignment block(s) from syllabus")
        return SyllabusExtraction(blocks=blocks, usage=result.usage)
