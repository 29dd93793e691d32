import pytest

from llm.providers.base import Completion


class FakeProvider:
    """Replays queued outcomes: a string is returned as content, an exception is raised."""

    def __init__(self, *outcomes, usage=None):
        self._outcomes = list(outcomes)
        self._usage = usage or {"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30}
        self.calls = []

    async def generate(self, *, user, system=None, max_tokens=1000, temperature=0.7) -> Completion:
        self.calls.append(
            {"user": user, "system": system, "max_tokens": max_tokens, "temperature": temperature}
        )
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return Completion(content=outcome, usage=self._usage)


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, delay):
        self.delays.append(delay)


@pytest.fixture
def fake_provider_factory():
    def _make(*outcomes, usage=None):
        return FakeProvider(*outcomes, usage=usage)
    return _make


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
