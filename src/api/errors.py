import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from api.metrics import LLM_FAILURES_TOTAL
from llm.errors import (
    InvalidAIResponseError,
    LLMError,
    RateLimitExceededError,
    SchemaValidationError,
    ServiceUnavailableError,
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR = "Internal server error"
PARSE_ERROR = "Failed to parse AI response. The response may not be valid JSON."


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


def llm_error_category(e: LLMError) -> str:
    if isinstance(e, RateLimitExceededError):
        return "rate_limit"
    if isinstance(e, ServiceUnavailableError):
        return "unavailable"
    if isinstance(e, InvalidAIResponseError):
        return "invalid_response"
    if isinstance(e, SchemaValidationError):
        return "schema"
    return "provider"


def llm_error_response(e: LLMError, parse_message: str = PARSE_ERROR) -> JSONResponse:
    category = llm_error_category(e)
    LLM_FAILURES_TOTAL.labels(category=category).inc()
    if category == "invalid_response":
        return error_response(500, parse_message)
    return error_response(500, str(e))


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    err = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
    message = err.get("msg", "Invalid request")
    return error_response(400, f"{field}: {message}" if field else message)


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return error_response(500, INTERNAL_ERROR)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
