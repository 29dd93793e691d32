"""
Async client for the LexiCal HTTP API, mirroring what the browser UI calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "http://localhost:3001/api"
DEFAULT_TIMEOUT_S = 120.0

_CLIENT_ERRORS = {
    401: "Authentication failed. Please check API credentials.",
    403: "Access forbidden. Please check permissions.",
    404: "Service not found. Please contact support.",
    429: "Rate limit exceeded. Please wait a moment and try again.",
}
_SERVER_ERRORS = {
    500: "Internal server error. Please try again later.",
    502: "Service temporarily unavailable. Please try again.",
    503: "Service unavailable. Please try again later.",
}
NETWORK_ERROR = "Network error. Please check your connection and try again."


def _body_error(response: httpx.Response) -> Optional[str]:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error") or body.get("message")
    return None


def describe_http_error(response: httpx.Response) -> str:
    """User-facing message for a failed upload response."""
    status = response.status_code
    detail = _body_error(response)
    if status == 400:
        return detail or "Invalid file or request format"
    if status in _CLIENT_ERRORS:
        return _CLIENT_ERRORS[status]
    if 400 <= status < 500:
        return detail or f"Client error ({status})"
    # The backend already reports rate-limit/unavailable/parse failures as 500 with a message.
    return detail or _SERVER_ERRORS.get(status, f"Server error ({status})")


class LexicalClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ):
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout_s)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "LexicalClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def health(self) -> Dict[str, Any]:
        r = await self._client.get("/health")
        r.raise_for_status()
        return r.json()

    async def extract_assignments(self, pdf_bytes: bytes, filename: str = "syllabus.pdf") -> Dict[str, Any]:
        """Upload a syllabus. Never raises for HTTP/network failures; see ``statusCode``."""
        try:
            r = await self._client.post(
                "/deepseek/syllabus/process",
                files={"file": (filename, pdf_bytes, "application/pdf")},
            )
        except httpx.RequestError as e:
            logger.error(f"Assignment extraction error: {e}")
            return {"success": False, "error": NETWORK_ERROR, "statusCode": 0}

        if r.is_error:
            logger.error(f"Assignment extraction failed with HTTP {r.status_code}")
            return {"success": False, "error": describe_http_error(r), "statusCode": r.status_code}
        return r.json()

    async def generate(self, prompt: str, options: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"prompt": prompt}
        if options:
            payload["options"] = options
        r = await self._client.post("/deepseek/generate", json=payload)
        r.raise_for_status()
        return r.json()

    async def generate_flowchart(self, prompt: str) -> Dict[str, Any]:
        r = await self._client.post("/flowchart/generate", json={"prompt": prompt})
        return self._json_or_raise(r)

    async def refine_flowchart(self, current: Dict[str, Any], refinement_request: str) -> Dict[str, Any]:
        r = await self._client.post(
            "/flowchart/refine",
            json={"currentFlowchart": current, "refinementRequest": refinement_request},
        )
        return self._json_or_raise(r)

    @staticmethod
    def _json_or_raise(r: httpx.Response) -> Dict[str, Any]:
        # Flowchart failures come back as {"success": false, "error": ...} with a 4xx/5xx status.
        if r.is_error and _body_error(r) is None:
            r.raise_for_status()
        return r.json()


@dataclass(frozen=True)
class Notification:
    level: str
    message: str
    duration_ms: int


RATE_LIMIT_NOTICE = "API rate limit exceeded. Please wait a moment before trying again."
UNAVAILABLE_NOTICE = "AI service is temporarily unavailable. Please try again in a few minutes."
LONG_NOTICE_MS = 5000
DEFAULT_NOTICE_MS = 4000


def notification_for_error(message: str) -> Notification:
    lowered = message.lower()
    if "rate limit" in lowered or "429" in lowered:
        return Notification("error", RATE_LIMIT_NOTICE, LONG_NOTICE_MS)
    if "temporarily unavailable" in lowered:
        return Notification("error", UNAVAILABLE_NOTICE, LONG_NOTICE_MS)
    return Notification("error", message, DEFAULT_NOTICE_MS)
