# growgraph/services/session_service.py
import logging
from dataclasses import dataclass
from growgraph.core.exceptions import SessionNotFoundException
from growgraph.models.graph import Graph, InitialMindMap
from growgraph.services.career_advisor import CareerAdvisor
from growgraph.services.expansion import ExpansionController
from growgraph.services.graph_store import GraphStore

logger = logging.getLogger(__name__)


@dataclass
class MindMapSession:
    store: GraphStore
    controller: ExpansionController


class SessionService:
    """In-memory mind maps keyed by workspace id. Nothing outlives the process."""

    def __init__(self, radius: float, max_slots: int):
        self.radius = radius
        self.max_slots = max_slots
        self._sessions: dict[str, MindMapSession] = {}

    def start(self, user_id: str, initial: InitialMindMap, advisor: CareerAdvisor) -> Graph:
        store = GraphStore(radius=self.radius, max_slots=self.max_slots)
        graph = store.seed(initial.nodes, initial.edges)
        self._sessions[user_id] = MindMapSession(store=store, controller=ExpansionController(store, advisor))
        logger.info("Started mind map for workspace '%s'.", user_id)
        return graph

    def get(self, user_id: str) -> MindMapSession:
        session = self._sessions.get(user_id)
        if session is None:
            raise SessionNotFoundException()
        return session

    def discard(self, user_id: str) -> bool:
        return self._sessions.pop(user_id, None) is not None
