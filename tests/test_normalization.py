import pytest

from pathway_graph.graph_model import ExpandableContent, Position, Reference, Resource
from pathway_graph.graph_orchestrator import IdFactory
from pathway_graph.recovery.normalization import (
    DEFAULT_GRAPH_TITLE,
    DEFAULT_NODE_TITLE,
    ensure_list,
    layout_seed,
    normalize_edge,
    normalize_graph,
    normalize_node,
    normalize_position,
    normalize_resources,
    sanitize_code,
    sanitize_string,
)


def test_sanitize_string_escapes_quotes_and_backslashes():
    assert sanitize_string('say "hi"') == 'say \\"hi\\"'
    assert sanitize_string("a\\b") == "a\\\\b"


@pytest.mark.parametrize("value", ['say "hi"', "a\\b", 'mixed \\" and "', "plain"])
def test_sanitize_string_is_idempotent(value):
    once = sanitize_string(value)
    assert sanitize_string(once) == once


def test_sanitize_string_stringifies_scalars():
    assert sanitize_string(None) == ""
    assert sanitize_string(True) == "true"
    assert sanitize_string(3) == "3"


def test_sanitize_code_expands_tabs_and_drops_carriage_returns():
    assert sanitize_code("def f():\r\n\treturn 1") == "def f():\n    return 1"


@pytest.mark.parametrize(
    "value, expected",
    [(None, []), ("", []), ({}, []), ("solo", ["solo"]), (["a"], ["a"]), (("a", "b"), ["a", "b"]), (0, [0])],
)
def test_ensure_list(value, expected):
    assert ensure_list(value) == expected


def test_layout_seed_wraps_rows_of_five():
    assert layout_seed(0) == Position(0, 0)
    assert layout_seed(6) == Position(1200, 200)


def test_normalize_position_fills_missing_coordinates():
    assert normalize_position({"x": "15", "y": None}, 2) == Position(15.0, 0)
    assert normalize_position({"x": float("nan"), "y": 7}, 0) == Position(0, 7)
    assert normalize_position("left", 1) == Position(200, 0)


def test_scalar_topics_are_wrapped():
    node = normalize_node({"id": "a", "title": "A", "topics": "solo"})
    assert node.topics == ["solo"]


def test_normalize_node_defaults():
    node = normalize_node({}, index=3, ids=IdFactory(seed=1))
    assert node.id.startswith("node-")
    assert len(node.id) == len("node-") + 6
    assert node.title == DEFAULT_NODE_TITLE
    assert node.description == ""
    assert node.position == Position(600, 0)
    assert node.topics == [] and node.resources == [] and node.code_examples == []
    assert node.expandable_content is None


def test_normalize_node_accepts_snake_case_and_string_payload():
    node = normalize_node({"id": 7, "parent_id": "root", "code_examples": "x = 1", "title": 'A "B"'})
    assert node.id == "7"
    assert node.parent_id == "root"
    assert node.code_examples == ["x = 1"]
    assert node.title == 'A \\"B\\"'
    assert normalize_node("Just a title").title == "Just a title"


def test_normalize_resources():
    resources = normalize_resources(
        ["https://example.com", "a book", {"name": "Docs", "link": "https://docs"}, {}, 3]
    )
    assert resources == [
        Resource(title="https://example.com", url="https://example.com"),
        Resource(title="a book", url=""),
        Resource(title="Docs", url="https://docs"),
        Resource(title="Resource", url=""),
    ]


def test_normalize_node_references_and_expandable():
    node = normalize_node(
        {
            "title": "A",
            "pyqs": ["2019 Q1", {"title": "GATE 2020", "url": "https://gate", "type": "exam"}],
            "keyConcepts": "span",
            "expandableContent": {"detailedExplanation": "long", "applications": "physics"},
        }
    )
    assert node.pyqs == ["2019 Q1", Reference(title="GATE 2020", url="https://gate", type="exam")]
    assert node.key_concepts == ["span"]
    assert node.expandable_content == ExpandableContent(detailed_explanation="long", applications=["physics"])


def test_normalize_edge():
    edge = normalize_edge({"source": "a", "target": 2, "animated": "true", "label": ""}, IdFactory(seed=1))
    assert edge.id.startswith("edge-")
    assert (edge.source, edge.target, edge.label, edge.animated) == ("a", "2", None, True)
    assert normalize_edge("a->b") is None


def test_normalize_graph_keeps_explicit_ids_unique():
    graph = normalize_graph({"nodes": [{"title": "gen"}, {"id": "n1"}]}, IdFactory(seed=3))
    assert graph.title == DEFAULT_GRAPH_TITLE
    assert graph.nodes[1].id == "n1"
    assert graph.nodes[0].id != "n1"


def test_normalize_graph_uses_default_title_and_single_node_object():
    graph = normalize_graph({"title": "  ", "nodes": {"id": "only"}}, default_title="Topic")
    assert graph.title == "Topic"
    assert [node.id for node in graph.nodes] == ["only"]


def test_outline_is_converted_to_nodes_and_edges():
    payload = {
        "title": "Outline",
        "outline": [
            {
                "title": "A",
                "description": "root",
                "learning_objectives": ["o1"],
                "children": [{"title": "B", "activities": ["practice"]}],
            }
        ],
    }
    graph = normalize_graph(payload, IdFactory(seed=5))
    first, second = graph.nodes
    assert first.title == "A"
    assert "Learning Objectives:\n- o1" in first.description
    assert first.topics == ["o1"]
    assert second.parent_id == first.id
    assert second.questions == ["practice"]
    assert second.position == Position(300, 0)
    assert [(edge.source, edge.target) for edge in graph.edges] == [(first.id, second.id)]
