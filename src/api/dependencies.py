import os
from functools import lru_cache

from extraction.syllabus_extractor import SyllabusExtractor
from flowchart.flowchart_service import FlowchartService
from llm.llm_client import LLMClient

# Configuration
MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(10 * 1024 * 1024)))
MAX_FLOWCHART_PROMPT_CHARS = 1000
MAX_REFINEMENT_CHARS = 500


@lru_cache(maxsize=1)
def get_llm_client() -> LLMClient:
    # Built lazily so the app imports without provider credentials.
    return LLMClient()


def get_syllabus_extractor() -> SyllabusExtractor:
    return SyllabusExtractor(llm_client=get_llm_client())


def get_flowchart_service() -> FlowchartService:
    return FlowchartService(llm_client=get_llm_client())
