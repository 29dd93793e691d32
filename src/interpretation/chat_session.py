"""
Question answering over a piece of selected or highlighted text.
"""

from __future__ import annotations

import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from lexical.models import ChatMessage
from llm.errors import LLMError
from llm.prompts import context_question_prompt
from storage.annotation_store import AnnotationStore

logger = logging.getLogger(__name__)

GENERIC_FAILURE = "Sorry, I encountered an error processing your request."
TRANSPORT_FAILURE = "Sorry, I encountered an error. Please try again."

# Matches LexicalClient.generate: returns {"success", "content"} or {"success": False, "error"}.
GenerateFn = Callable[[str], Awaitable[Dict[str, Any]]]


def _new_id() -> str:
    return uuid.uuid4().hex


def _error_from_exception(e: Exception) -> str:
    if isinstance(e, httpx.HTTPStatusError):
        try:
            body = e.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return TRANSPORT_FAILURE
    if isinstance(e, LLMError):
        return str(e)
    return TRANSPORT_FAILURE


class ChatSession:
    """A conversation bound to one context text.

    Failed answers are kept in the transcript as assistant messages flagged
    ``is_error``/``can_regenerate``; ``regenerate`` re-asks the preceding
    question and replaces the failed message in place.
    """

    def __init__(self, context_text: str, generate: GenerateFn):
        self.context_text = context_text
        self._generate = generate
        self.messages: List[ChatMessage] = []

    async def send(self, question: str) -> Optional[ChatMessage]:
        if not question.strip():
            return None
        self.messages.append(ChatMessage(id=_new_id(), role="user", content=question))
        reply = await self._ask(question, reply_id=_new_id())
        self.messages.append(reply)
        return reply

    async def regenerate(self, message_id: str) -> Optional[ChatMessage]:
        index = next((i for i, m in enumerate(self.messages) if m.id == message_id), None)
        if index is None or index == 0:
            return None
        question = self.messages[index - 1]
        if question.role != "user":
            return None

        reply = await self._ask(question.content, reply_id=message_id)
        self.messages[index] = reply
        return reply

    async def _ask(self, question: str, reply_id: str) -> ChatMessage:
        prompt = context_question_prompt(self.context_text, question)
        try:
            response = await self._generate(prompt)
        except (httpx.HTTPError, LLMError) as e:
            logger.error(f"Error sending message: {e}")
            return ChatMessage(
                id=reply_id,
                role="assistant",
                content=_error_from_exception(e),
                is_error=True,
                can_regenerate=True,
            )

        if response.get("success"):
            return ChatMessage(id=reply_id, role="assistant", content=response.get("content") or "")
        return ChatMessage(
            id=reply_id,
            role="assistant",
            content=response.get("error") or GENERIC_FAILURE,
            is_error=True,
            can_regenerate=True,
        )

    def attach_as_note(self, store: AnnotationStore, highlight_id: str, message: ChatMessage) -> None:
        store.attach_note(highlight_id, message)
