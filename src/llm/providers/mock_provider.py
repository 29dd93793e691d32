from __future__ import annotations
import json
from typing import Optional

from llm.providers.base import Completion, LLMProvider

_USAGE = {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}


class MockProvider(LLMProvider):
    async def generate(
        self,
        *,
        user: str,
        system: Optional[str] = None,
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> Completion:
        """
        Returns canned responses based on the prompt content, for running without an API key.
        """
        prompt = f"{system or ''}\n{user}"

        if "Legal Syllabus Data Extractor" in prompt:
            return Completion(content=json.dumps([
                {
                    "startDate": "2024-08-26",
                    "endDate": None,
                    "startTime": "09:00",
                    "endTime": "10:50",
                    "location": None,
                    "itemsByTag": {"read": ["Casebook pp. 1-25"], "write": [], "oral": [], "evaluation": [], "other": []},
                    "assignments": [{"title": "Casebook pp. 1-25", "tag": "read"}],
                },
                {
                    "startDate": "2024-09-02",
                    "endDate": None,
                    "startTime": None,
                    "endTime": None,
                    "location": None,
                    "itemsByTag": {"read": [], "write": [], "oral": [], "evaluation": [], "other": ["No Class - Labor Day"]},
                    "assignments": [{"title": "No Class - Labor Day", "tag": "other"}],
                },
            ]), usage=_USAGE)

        if "flowchart" in prompt.lower():
            return Completion(content=json.dumps({
                "title": "Sample process",
                "description": "A minimal start-to-end process",
                "nodes": [
                    {"id": "start", "type": "start", "label": "Start"},
                    {"id": "step", "type": "process", "label": "Do the work"},
                    {"id": "check", "type": "decision", "label": "Done?"},
                    {"id": "end", "type": "end", "label": "End"},
                ],
                "edges": [
                    {"id": "e1", "source": "start", "target": "step"},
                    {"id": "e2", "source": "step", "target": "check"},
                    {"id": "e3", "source": "check", "target": "end", "label": "Yes"},
                    {"id": "e4", "source": "check", "target": "step", "label": "No"},
                ],
            }), usage=_USAGE)

        return Completion(content="This is a mock response.", usage=_USAGE)
