import pytest

from growgraph.core.exceptions import NodeNotFoundException, UnknownParentError
from growgraph.models.graph import InitialMindMap, Position, RawEdge, RawNode
from growgraph.services.graph_store import GraphStore


def seeded_store() -> GraphStore:
    store = GraphStore(radius=260, max_slots=7)
    store.seed(
        [
            RawNode(id="root", position=Position(x=0, y=0), data={"label": "나"}),
            RawNode(id="dev", position=Position(x=0, y=260), data="Developer"),
        ],
        [RawEdge(source="root", target="dev")],
    )
    return store


def test_seed_extracts_labels_and_derives_edge_ids():
    store = seeded_store()
    assert [node.label for node in store.nodes] == ["나", "Developer"]
    assert [edge.id for edge in store.edges] == ["eroot-dev"]
    assert store.child_counts == {}


def test_seed_drops_dangling_edges():
    store = GraphStore()
    graph = store.seed(
        [RawNode(id="a", data=None)],
        [RawEdge(id="e1", source="a", target="ghost"), RawEdge(id="e2", source="ghost", target="a")],
    )
    assert graph.edges == []
    assert [edge.id for edge in store.dangling_edges] == ["e1", "e2"]
    assert store.get_node("a").label == "No Label"


def test_seed_keeps_first_of_duplicate_node_ids():
    store = GraphStore()
    store.seed([RawNode(id="a", data="first"), RawNode(id="a", data="second")], [])
    assert [node.label for node in store.nodes] == ["first"]


def test_seed_replaces_previous_state():
    store = seeded_store()
    store.add_child("root", "Data Scientist")
    store.seed([RawNode(id="solo", data="Solo")], [])
    assert [node.id for node in store.nodes] == ["solo"]
    assert store.edges == []
    assert store.child_count("root") == 0


def test_add_child_repeatedly_on_one_parent():
    store = seeded_store()
    created = [store.add_child("root", f"Career {i}") for i in range(5)]

    new_ids = {node.id for node, _ in created}
    assert len(new_ids) == 5
    assert not new_ids & {"root", "dev"}
    assert all(edge.source == "root" for _, edge in created)
    assert [edge.target for _, edge in created] == [node.id for node, _ in created]
    assert store.child_count("root") == 5
    assert len(store.edges) == 6


def test_add_child_places_middle_slot_below_parent():
    store = seeded_store()
    for i in range(3):
        store.add_child("dev", f"Career {i}")
    node, edge = store.add_child("dev", "Middle")
    assert node.position.x == pytest.approx(0, abs=1e-9)
    assert node.position.y == pytest.approx(520)
    assert edge.id == f"edev-{node.id}"


def test_add_child_corrects_empty_label():
    store = seeded_store()
    node, _ = store.add_child("root", "")
    assert node.label == "No Label"


def test_add_child_past_capacity_still_adds(caplog):
    store = GraphStore(max_slots=1)
    store.seed([RawNode(id="root", data="root")], [])
    store.add_child("root", "one")
    with caplog.at_level("WARNING"):
        store.add_child("root", "two")
    assert store.child_count("root") == 2
    assert "overlap" in caplog.text


def test_add_child_unknown_parent_leaves_graph_untouched():
    store = seeded_store()
    before = store.to_graph()
    with pytest.raises(UnknownParentError) as exc:
        store.add_child("ghost", "Data Scientist")
    assert exc.value.parent_id == "ghost"
    assert store.to_graph() == before
    assert store.child_counts == {}


def test_get_node_unknown_id():
    with pytest.raises(NodeNotFoundException):
        seeded_store().get_node("ghost")


def test_initial_map_from_messy_payload():
    payload = {
        "nodes": [
            {"id": "root", "position": {"x": 10, "y": "bad"}, "data": ["Me"]},
            {"id": 2, "data": {"title": "Designer"}},
            {"position": {"x": 1, "y": 1}},
            "junk",
        ],
        "edges": [
            {"source": "root", "target": 2},
            {"id": "e-x", "source": "root"},
            None,
        ],
    }
    initial = InitialMindMap.from_payload(payload)
    assert [node.id for node in initial.nodes] == ["root", "2"]
    assert initial.nodes[0].position == Position(x=10, y=0)
    assert [edge.resolved_id for edge in initial.edges] == ["eroot-2"]

    store = GraphStore()
    store.seed(initial.nodes, initial.edges)
    assert [node.label for node in store.nodes] == ["Me", "Designer"]


@pytest.mark.parametrize("payload", [None, "map", [], {"nodes": "x", "edges": 5}])
def test_initial_map_from_unusable_payload_is_empty(payload):
    initial = InitialMindMap.from_payload(payload)
    assert initial.nodes == []
    assert initial.edges == []


def test_seed_keeps_edges_whose_derived_ids_clash():
    store = GraphStore()
    store.seed(
        [RawNode(id=node_id, data=node_id) for node_id in ("a-b", "c", "a", "b-c")],
        [RawEdge(source="a-b", target="c"), RawEdge(source="a", target="b-c")],
    )
    assert [(edge.source, edge.target) for edge in store.edges] == [("a-b", "c"), ("a", "b-c")]
    assert len({edge.id for edge in store.edges}) == 2


def test_seed_drops_repeated_endpoint_pairs():
    store = GraphStore()
    store.seed(
        [RawNode(id="a", data="A"), RawNode(id="b", data="B")],
        [RawEdge(id="e1", source="a", target="b"), RawEdge(id="e2", source="a", target="b")],
    )
    assert [edge.id for edge in store.edges] == ["e1"]
