import pytest

from llm.errors import SchemaValidationError
from llm.schemas import validate_assignment_blocks, validate_flowchart


def _block(**overrides):
    block = {
        "startDate": "2024-09-03",
        "endDate": None,
        "startTime": "09:00",
        "endTime": "10:50",
        "location": "Room 101",
        "assignments": [{"title": "Read pp. 1-20", "tag": "read"}],
    }
    block.update(overrides)
    return block


def test_valid_blocks():
    blocks = validate_assignment_blocks([_block(), _block(startDate="2024-09-05", location=None)])
    assert len(blocks) == 2
    assert blocks[0].start_date == "2024-09-03"
    assert blocks[1].location is None
    assert blocks[0].assignments[0].tag == "read"


def test_items_by_tag_is_optional_and_kept():
    blocks = validate_assignment_blocks([
        _block(itemsByTag={"read": ["Read pp. 1-20"], "write": [], "oral": [], "evaluation": [], "other": []}),
    ])
    assert blocks[0].items_by_tag["read"] == ["Read pp. 1-20"]
    assert "itemsByTag" in blocks[0].to_wire()
    assert "itemsByTag" not in validate_assignment_blocks([_block()])[0].to_wire()


def test_not_an_array():
    with pytest.raises(SchemaValidationError, match="not a valid JSON array"):
        validate_assignment_blocks({"startDate": "2024-09-03"})


def test_missing_field_is_rejected():
    block = _block()
    del block["location"]
    with pytest.raises(SchemaValidationError):
        validate_assignment_blocks([block])


def test_unknown_tag_is_rejected():
    with pytest.raises(SchemaValidationError):
        validate_assignment_blocks([_block(assignments=[{"title": "Brief", "tag": "essay"}])])


def test_empty_array_is_valid():
    assert validate_assignment_blocks([]) == []


def test_valid_flowchart():
    graph = validate_flowchart({
        "title": "Login",
        "description": "User login",
        "nodes": [
            {"id": "1", "type": "start", "label": "Start"},
            {"id": "2", "type": "end", "label": "End"},
        ],
        "edges": [{"id": "e1", "source": "1", "target": "2"}],
    })
    assert graph.title == "Login"
    assert [n.type for n in graph.nodes] == ["start", "end"]


def test_flowchart_content_is_not_checked():
    # No start/end node and an edge to an unknown id still pass shape validation.
    graph = validate_flowchart({
        "title": "Odd",
        "nodes": [{"id": "a", "type": "process", "label": "A"}],
        "edges": [{"id": "e1", "source": "a", "target": "missing"}],
    })
    assert graph.edges[0].target == "missing"
    assert graph.description == ""


def test_flowchart_missing_nodes():
    with pytest.raises(SchemaValidationError, match="Invalid flowchart structure"):
        validate_flowchart({"title": "No nodes", "edges": []})


def test_flowchart_not_an_object():
    with pytest.raises(SchemaValidationError):
        validate_flowchart([{"title": "x"}])
