import logging
import time
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from api.dependencies import MAX_UPLOAD_BYTES, get_llm_client, get_syllabus_extractor
from api.errors import error_response, llm_error_response
from api.metrics import ASSIGNMENT_BLOCKS_TOTAL, observe_request
from extraction.pdf_text import PDFTextExtractionError
from extraction.syllabus_extractor import SyllabusExtractor
from llm.errors import LLMError
from llm.llm_client import LLMClient

router = APIRouter(prefix="/api/deepseek")
logger = logging.getLogger(__name__)

PDF_MIMETYPE = "application/pdf"


class GenerateOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    max_tokens: Optional[int] = Field(default=None, alias="maxTokens", gt=0)
    temperature: Optional[float] = Field(default=None, ge=0, le=2)


class GenerateIn(BaseModel):
    prompt: Optional[str] = None
    options: Optional[GenerateOptions] = None


@router.post("/syllabus/process")
async def process_syllabus(
    file: Optional[UploadFile] = File(None),
    extractor: SyllabusExtractor = Depends(get_syllabus_extractor),
):
    start = time.time()
    endpoint = "/api/deepseek/syllabus/process"

    if file is None:
        observe_request(endpoint, "rejected", start)
        return error_response(400, "No PDF file uploaded")
    if file.content_type != PDF_MIMETYPE:
        observe_request(endpoint, "rejected", start)
        return error_response(400, "Only PDF files are allowed")

    pdf_bytes = await file.read(MAX_UPLOAD_BYTES + 1)
    if len(pdf_bytes) > MAX_UPLOAD_BYTES:
        observe_request(endpoint, "rejected", start)
        return error_response(413, f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)}MB")

    logger.info(f"Processing syllabus upload {file.filename!r} ({len(pdf_bytes)} bytes)")
    try:
        extraction = await extractor.extract_from_pdf(pdf_bytes)
    except PDFTextExtractionError as e:
        logger.warning(f"PDF text extraction failed: {e}")
        observe_request(endpoint, "rejected", start)
        return error_response(400, f"Failed to extract text from PDF: {e}")
    except LLMError as e:
        observe_request(endpoint, "failed", start)
        return llm_error_response(e)

    ASSIGNMENT_BLOCKS_TOTAL.inc(len(extraction.blocks))
    observe_request(endpoint, "processed", start)
    return {
        "success": True,
        "data": [block.to_wire() for block in extraction.blocks],
        "usage": extraction.usage,
    }


@router.post("/generate")
async def generate_response(
    payload: GenerateIn,
    llm: LLMClient = Depends(get_llm_client),
):
    start = time.time()
    endpoint = "/api/deepseek/generate"

    if not payload.prompt:
        observe_request(endpoint, "rejected", start)
        return error_response(400, "Prompt is required")

    options = payload.options or GenerateOptions()
    try:
        result = await llm.generate(
            payload.prompt,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
        )
    except LLMError as e:
        logger.error(f"Generate failed: {e}")
        observe_request(endpoint, "failed", start)
        return llm_error_response(e)

    observe_request(endpoint, "processed", start)
    return {"success": True, "content": result.content, "usage": result.usage}
