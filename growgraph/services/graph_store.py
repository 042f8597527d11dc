# growgraph/services/graph_store.py
import logging
from uuid import uuid4
from growgraph.core.exceptions import NodeNotFoundException, UnknownParentError
from growgraph.models.graph import Edge, Graph, Node, RawEdge, RawNode, edge_id_for
from growgraph.services.label_extractor import extract_label
from growgraph.services.layout import DEFAULT_MAX_SLOTS, DEFAULT_RADIUS, compute_position, has_free_slot

logger = logging.getLogger(__name__)


class GraphStore:
    """
    Holds the mind map's nodes, edges and per-parent child counts.

    The map only grows: `seed` replaces everything once per session and
    `add_child` is the single way to attach new nodes afterwards.
    """

    def __init__(self, radius: float = DEFAULT_RADIUS, max_slots: int = DEFAULT_MAX_SLOTS):
        self.radius = radius
        self.max_slots = max_slots
        self._nodes: dict[str, Node] = {}
        self._edges: list[Edge] = []
        self._child_counts: dict[str, int] = {}
        self.dangling_edges: list[RawEdge] = []

    @property
    def nodes(self) -> list[Node]:
        return list(self._nodes.values())

    @property
    def edges(self) -> list[Edge]:
        return list(self._edges)

    @property
    def child_counts(self) -> dict[str, int]:
        return dict(self._child_counts)

    def child_count(self, parent_id: str) -> int:
        return self._child_counts.get(parent_id, 0)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: str) -> Node:
        node = self._nodes.get(node_id)
        if node is None:
            raise NodeNotFoundException(f"Node '{node_id}' not found.")
        return node

    def to_graph(self) -> Graph:
        return Graph(nodes=self.nodes, edges=self.edges)

    def seed(self, nodes: list[RawNode], edges: list[RawEdge]) -> Graph:
        self._nodes = {}
        self._edges = []
        self._child_counts = {}
        self.dangling_edges = []

        for raw in nodes:
            if raw.id in self._nodes:
                logger.warning("Duplicate node id '%s' in initial map; keeping the first one.", raw.id)
                continue
            self._nodes[raw.id] = Node(id=raw.id, position=raw.position, label=extract_label(raw.data))

        pairs = set()
        edge_ids = set()
        for raw in edges:
            if raw.source not in self._nodes or raw.target not in self._nodes:
                logger.warning(
                    "Dropping dangling edge '%s' (%s -> %s): endpoint missing.",
                    raw.resolved_id, raw.source, raw.target,
                )
                self.dangling_edges.append(raw)
                continue
            if (raw.source, raw.target) in pairs:
                logger.warning("Duplicate edge %s -> %s in initial map; keeping the first one.", raw.source, raw.target)
                continue
            pairs.add((raw.source, raw.target))
            edge_id = raw.resolved_id
            if edge_id in edge_ids:
                # Distinct endpoints can still render the same derived id, e.g. ("a-b", "c") and ("a", "b-c").
                edge_id = self._unique_edge_id(edge_id, edge_ids)
                logger.warning("Edge id '%s' already taken; using '%s'.", raw.resolved_id, edge_id)
            edge_ids.add(edge_id)
            self._edges.append(Edge(id=edge_id, source=raw.source, target=raw.target))

        logger.info("Seeded mind map with %d nodes and %d edges.", len(self._nodes), len(self._edges))
        return self.to_graph()

    def add_child(self, parent_id: str, label: str) -> tuple[Node, Edge]:
        parent = self._nodes.get(parent_id)
        if parent is None:
            raise UnknownParentError(parent_id)

        child_index = self._child_counts.get(parent_id, 0)
        if not has_free_slot(child_index, self.max_slots):
            logger.warning(
                "Parent '%s' already has %d children (layout fits %d); new child will overlap.",
                parent_id, child_index, self.max_slots,
            )

        position = compute_position(parent.position, child_index, self.max_slots, self.radius)
        node = Node(id=self._new_node_id(), position=position, label=extract_label(label))
        edge = Edge(id=edge_id_for(parent_id, node.id), source=parent_id, target=node.id)

        self._nodes[node.id] = node
        self._edges.append(edge)
        self._child_counts[parent_id] = child_index + 1
        return node, edge

    def _new_node_id(self) -> str:
        node_id = str(uuid4())
        while node_id in self._nodes:
            node_id = str(uuid4())
        return node_id

    @staticmethod
    def _unique_edge_id(edge_id: str, taken: set[str]) -> str:
        suffix = 2
        while f"{edge_id}#{suffix}" in taken:
            suffix += 1
        return f"{edge_id}#{suffix}"
