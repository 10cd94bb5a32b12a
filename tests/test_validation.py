import pytest

from pathway_graph.graph_model import PathwayEdge, PathwayGraph, PathwayNode, Position
from pathway_graph.graph_orchestrator import GraphOrchestrator, IdFactory, reassign_ids
from pathway_graph.recovery.fallback import FALLBACK_NODE_TITLE, build_fallback_graph
from pathway_graph.recovery.validation import check_integrity, validate_graph


def _node(node_id, parent_id=None):
    return PathwayNode(id=node_id, title=node_id.upper(), position=Position(), parent_id=parent_id)


def test_id_factory_is_reproducible_with_seed():
    first = IdFactory(seed=42)
    second = IdFactory(seed=42)
    assert [first.new_id("node") for _ in range(3)] == [second.new_id("node") for _ in range(3)]


def test_id_factory_never_repeats_reserved_ids():
    ids = IdFactory(seed=1)
    taken = IdFactory(seed=1).new_id("node")
    ids.reserve(taken)
    assert ids.new_id("node") != taken
    assert ids.is_taken(taken)


def test_orchestrator_rejects_edges_to_unknown_nodes():
    orchestrator = GraphOrchestrator(title="T")
    orchestrator.add_node(_node("a"))
    with pytest.raises(ValueError):
        orchestrator.add_edge(PathwayEdge(id="e1", source="a", target="ghost"))


def test_orchestrator_renames_duplicate_node_ids():
    orchestrator = GraphOrchestrator(title="T", ids=IdFactory(seed=2))
    assert orchestrator.add_node(_node("a")) == "a"
    renamed = orchestrator.add_node(_node("a"))
    assert renamed != "a"
    assert orchestrator.state.node_ids() == ["a", renamed]


def test_orchestrator_merges_duplicate_edges():
    orchestrator = GraphOrchestrator(title="T")
    orchestrator.add_node(_node("a"))
    orchestrator.add_node(_node("b"))
    first = orchestrator.add_edge(PathwayEdge(id="e1", source="a", target="b"))
    second = orchestrator.add_edge(PathwayEdge(id="e2", source="a", target="b"))
    assert first == second == "e1"
    assert [edge["id"] for edge in orchestrator.to_json()["edges"]] == ["e1"]


def test_dangling_edges_are_dropped():
    graph = PathwayGraph(
        title="T",
        nodes=[_node("A"), _node("B")],
        edges=[
            PathwayEdge(id="e1", source="A", target="B"),
            PathwayEdge(id="e2", source="A", target="ghost"),
        ],
    )
    validated, stats = check_integrity(graph)
    assert [(edge.source, edge.target) for edge in validated.edges] == [("A", "B")]
    assert stats == {"dropped_edges": 1, "synthesized_edges": 0}


def test_chain_is_synthesized_for_edgeless_graph():
    graph = PathwayGraph(title="T", nodes=[_node("n0"), _node("n1"), _node("n2")])
    validated, stats = check_integrity(graph, IdFactory(seed=4))
    assert [(edge.source, edge.target) for edge in validated.edges] == [("n0", "n1"), ("n1", "n2")]
    assert stats["synthesized_edges"] == 2


def test_chain_is_synthesized_when_every_edge_dangles():
    graph = PathwayGraph(
        title="T",
        nodes=[_node("a"), _node("b")],
        edges=[PathwayEdge(id="e1", source="a", target="")],
    )
    validated = validate_graph(graph)
    assert [(edge.source, edge.target) for edge in validated.edges] == [("a", "b")]


def test_single_node_graph_keeps_zero_edges():
    validated, stats = check_integrity(PathwayGraph(title="T", nodes=[_node("a")]))
    assert validated.edges == []
    assert stats["synthesized_edges"] == 0


def test_empty_graph_gets_placeholder_titled_after_graph():
    validated = validate_graph(PathwayGraph(title="Graphs"))
    assert len(validated.nodes) == 1
    assert validated.nodes[0].title == "Graphs"
    assert validated.edges == []


def test_fallback_graph():
    graph = build_fallback_graph(ids=IdFactory(seed=1))
    assert graph.title == "Learning Pathway"
    assert [node.title for node in graph.nodes] == [FALLBACK_NODE_TITLE]
    assert graph.edges == []

    titled = build_fallback_graph("Rust")
    assert titled.title == "Rust"
    assert titled.nodes[0].title == "Rust"


def test_reassign_ids_remaps_parents_and_edges():
    graph = PathwayGraph(
        title="T",
        nodes=[_node("a"), _node("b", parent_id="a")],
        edges=[PathwayEdge(id="e1", source="a", target="b", label="next")],
    )
    fresh = reassign_ids(graph, IdFactory(seed=9))
    first, second = fresh.nodes
    assert first.id not in ("a", "b")
    assert second.parent_id == first.id
    edge = fresh.edges[0]
    assert (edge.source, edge.target, edge.label) == (first.id, second.id, "next")
    assert edge.id != "e1"
    assert graph.nodes[0].id == "a"
