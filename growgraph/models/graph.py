# growgraph/models/graph.py
import logging
from collections.abc import Mapping
from typing import Any
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


def edge_id_for(source: str, target: str) -> str:
    """
    Edge ids follow the `e{source}-{target}` form used by the map generator.
    The form is ambiguous when node ids contain "-"; seeding deduplicates on
    the endpoint pair and suffixes clashing ids instead of trusting them.
    """
    return f"e{source}-{target}"


class Position(BaseModel):
    x: float = 0.0
    y: float = 0.0

class Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    position: Position
    label: str

class Edge(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str

class Graph(BaseModel):
    nodes: list[Node]
    edges: list[Edge]

class RawNode(BaseModel):
    """A node as produced by the initial-map generator; `data` is unvalidated."""
    model_config = ConfigDict(extra="ignore")

    id: str
    position: Position = Field(default_factory=Position)
    data: Any = None

class RawEdge(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    source: str
    target: str

    @property
    def resolved_id(self) -> str:
        return self.id or edge_id_for(self.source, self.target)


def _coerce_position(raw: Any) -> Position:
    if isinstance(raw, Mapping):
        coords = {}
        for axis in ("x", "y"):
            value = raw.get(axis)
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                coords[axis] = float(value)
        return Position(**coords)
    return Position()


def _coerce_id(raw: Any) -> str | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str) and raw:
        return raw
    if isinstance(raw, int):
        return str(raw)
    return None


class InitialMindMap(BaseModel):
    nodes: list[RawNode] = Field(default_factory=list)
    edges: list[RawEdge] = Field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Any) -> "InitialMindMap":
        """
        Builds an initial map from an arbitrary remote payload.

        Entries that cannot be identified are skipped instead of failing the
        whole map: a node needs an id, an edge needs both endpoints.
        """
        if not isinstance(payload, Mapping):
            logger.warning("Initial mind map payload is not an object; seeding an empty graph.")
            return cls()

        raw_nodes = payload.get("nodes")
        raw_edges = payload.get("edges")

        nodes = []
        for entry in raw_nodes if isinstance(raw_nodes, list) else []:
            node_id = _coerce_id(entry.get("id")) if isinstance(entry, Mapping) else None
            if node_id is None:
                logger.warning("Skipping initial node without a usable id: %r", entry)
                continue
            nodes.append(RawNode(
                id=node_id,
                position=_coerce_position(entry.get("position")),
                data=entry.get("data"),
            ))

        edges = []
        for entry in raw_edges if isinstance(raw_edges, list) else []:
            if not isinstance(entry, Mapping):
                logger.warning("Skipping initial edge that is not an object: %r", entry)
                continue
            source = _coerce_id(entry.get("source"))
            target = _coerce_id(entry.get("target"))
            if source is None or target is None:
                logger.warning("Skipping initial edge without both endpoints: %r", entry)
                continue
            edges.append(RawEdge(id=_coerce_id(entry.get("id")), source=source, target=target))

        return cls(nodes=nodes, edges=edges)
