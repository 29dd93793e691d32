import asyncio
import json

import pytest

from flowchart.flowchart_service import FlowchartService
from llm.errors import InvalidAIResponseError, SchemaValidationError
from llm.llm_client import LLMClient
from llm.providers.mock_provider import MockProvider

GRAPH = {
    "title": "Order fulfilment",
    "description": "From order to delivery",
    "nodes": [
        {"id": "1", "type": "start", "label": "Order received"},
        {"id": "2", "type": "decision", "label": "In stock?"},
        {"id": "3", "type": "end", "label": "Shipped"},
    ],
    "edges": [
        {"id": "e1", "source": "1", "target": "2"},
        {"id": "e2", "source": "2", "target": "3", "label": "Yes"},
    ],
}


async def _no_sleep(delay):
    return None


def _service(provider):
    return FlowchartService(llm_client=LLMClient(provider=provider, sleep=_no_sleep))


def test_generate_sends_system_prompt(fake_provider_factory):
    provider = fake_provider_factory("Here is your flowchart:\n" + json.dumps(GRAPH))

    result = asyncio.run(_service(provider).generate("How an order is fulfilled"))

    assert result.graph.title == "Order fulfilment"
    assert len(result.graph.nodes) == 3
    call = provider.calls[0]
    assert call["user"] == "How an order is fulfilled"
    assert 'User\'s request: "How an order is fulfilled"' in call["system"]
    assert call["max_tokens"] == 2000
    assert call["temperature"] == 0.3


def test_refine_embeds_current_graph(fake_provider_factory):
    provider = fake_provider_factory(json.dumps(GRAPH))

    asyncio.run(_service(provider).refine(GRAPH, "Add a restock step"))

    call = provider.calls[0]
    assert call["system"] is None
    assert json.dumps(GRAPH, indent=2) in call["user"]
    assert 'User\'s refinement request: "Add a restock step"' in call["user"]


def test_unparseable_output(fake_provider_factory):
    provider = fake_provider_factory("Sorry, I can't draw that.")
    with pytest.raises(InvalidAIResponseError):
        asyncio.run(_service(provider).generate("x"))


def test_wrong_shape(fake_provider_factory):
    provider = fake_provider_factory('{"title": "No nodes"}')
    with pytest.raises(SchemaValidationError):
        asyncio.run(_service(provider).generate("x"))


def test_mock_provider_graph_is_valid():
    result = asyncio.run(_service(MockProvider()).generate("a login flowchart"))
    assert {n.type for n in result.graph.nodes} >= {"start", "end"}
