from __future__ import annotations

import json
import re
from typing import Any, Iterator, Literal, Optional

from llm.errors import InvalidAIResponseError

Expect = Optional[Literal["array", "object"]]

_JSON_FENCE = re.compile(r"```json\s*([\s\S]*?)\s*```", re.IGNORECASE)
_ANY_FENCE = re.compile(r"```[a-zA-Z0-9_-]*\s*([\s\S]*?)\s*```")


def _balanced_spans(text: str, opener: str, closer: str) -> Iterator[str]:
    """Yield substrings that start at ``opener`` and end at its matching ``closer``.

    String literals are skipped so braces inside quoted titles do not
    unbalance the scan.
    """
    start = text.find(opener)
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == opener:
                depth += 1
            elif ch == closer:
                depth -= 1
                if depth == 0:
                    yield text[start : i + 1]
                    break
        start = text.find(opener, start + 1)


def _candidates(text: str, expect: Expect) -> Iterator[str]:
    yield text.strip()

    m = _JSON_FENCE.search(text)
    if m:
        yield m.group(1)

    m = _ANY_FENCE.search(text)
    if m:
        yield m.group(1)

    if expect in (None, "array"):
        yield from _balanced_spans(text, "[", "]")
    if expect in (None, "object"):
        yield from _balanced_spans(text, "{", "}")


def _matches(value: Any, expect: Expect) -> bool:
    if expect == "array":
        return isinstance(value, list)
    if expect == "object":
        return isinstance(value, dict)
    return True


def extract_json(text: str, expect: Expect = None) -> Any:
    """Pull the first parseable JSON payload out of raw model output.

    Order: the whole text, a ```json fence, any fence, then balanced
    ``[...]``/``{...}`` substrings. With ``expect`` set, a candidate of the
    other container type is skipped in favour of a later one; if nothing of
    the expected type parses, the first parseable value is returned so the
    schema validator can report the shape mismatch.
    """
    if not text or not text.strip():
        raise InvalidAIResponseError("AI returned an empty response", raw=text or "")

    fallback: Any = None
    found = False
    for candidate in _candidates(text, expect):
        try:
            value = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if _matches(value, expect):
            return value
        if not found:
            fallback, found = value, True

    if found:
        return fallback
    raise InvalidAIResponseError(raw=text)
