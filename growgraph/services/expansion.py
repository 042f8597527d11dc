# growgraph/services/expansion.py
import logging
from typing import Any
from growgraph.core.exceptions import RemoteCallFailure
from growgraph.models.career import CareerDetail
from growgraph.models.graph import Edge, Node
from growgraph.models.workflow import WorkflowSnapshot, WorkflowState
from growgraph.services.career_advisor import CareerAdvisor
from growgraph.services.career_normalizer import fallback_career_detail, normalize_career_detail
from growgraph.services.graph_store import GraphStore

logger = logging.getLogger(__name__)

SUGGESTIONS_FAILED_MESSAGE = "추천 결과를 불러오지 못했습니다."
DETAIL_FAILED_MESSAGE = "상세 정보를 불러오지 못했습니다."

_LOADING_STATES = {WorkflowState.LOADING_SUGGESTIONS, WorkflowState.LOADING_DETAIL}
_CLOSABLE_STATES = {WorkflowState.SHOWING_SUGGESTIONS, WorkflowState.SHOWING_DETAIL, WorkflowState.ERROR}


def _parse_suggestions(payload: Any) -> list[str] | None:
    if not isinstance(payload, dict):
        return None
    suggestions = payload.get("suggestions")
    if not isinstance(suggestions, list) or not all(isinstance(s, str) for s in suggestions):
        return None
    return suggestions


class ExpansionController:
    """
    Drives the expansion of one node at a time:
    select -> fetch suggestions -> choose -> fetch detail -> commit.

    Every event returns the resulting state. Events that do not apply to the
    current state are ignored. Each remote request carries a sequence token;
    a response whose token is no longer current is discarded.
    """

    def __init__(self, store: GraphStore, advisor: CareerAdvisor):
        self.store = store
        self.advisor = advisor
        self._request_seq = 0
        self._clear()

    def _clear(self) -> None:
        self.state = WorkflowState.IDLE
        self.selected_node: Node | None = None
        self.suggestions: list[str] = []
        self.chosen_suggestion: str | None = None
        self.detail: CareerDetail | None = None
        self.error_message: str | None = None

    @property
    def is_loading(self) -> bool:
        return self.state in _LOADING_STATES

    def snapshot(self) -> WorkflowSnapshot:
        return WorkflowSnapshot(
            state=self.state,
            is_loading=self.is_loading,
            selected_node=self.selected_node,
            suggestions=list(self.suggestions),
            chosen_suggestion=self.chosen_suggestion,
            detail=self.detail,
            error_message=self.error_message,
        )

    async def select_node(self, node_id: str) -> WorkflowState:
        if self.state is not WorkflowState.IDLE:
            logger.info("Ignoring click on '%s' while %s.", node_id, self.state.value)
            return self.state
        self.selected_node = self.store.get_node(node_id)
        return await self._load_suggestions()

    async def retry(self) -> WorkflowState:
        if self.state is not WorkflowState.ERROR or self.selected_node is None:
            logger.info("Nothing to retry while %s.", self.state.value)
            return self.state
        return await self._load_suggestions()

    async def choose_suggestion(self, label: str) -> WorkflowState:
        if self.state is not WorkflowState.SHOWING_SUGGESTIONS:
            logger.info("Ignoring suggestion '%s' while %s.", label, self.state.value)
            return self.state
        if label not in self.suggestions:
            logger.info("Ignoring '%s': it was not among the suggestions.", label)
            return self.state

        self.state = WorkflowState.LOADING_DETAIL
        self.chosen_suggestion = label
        token = self._next_token()
        try:
            payload = await self.advisor.get_career_detail(label)
            detail = normalize_career_detail(payload)
        except RemoteCallFailure as exc:
            logger.warning("Career detail for '%s' unavailable: %s", label, exc)
            detail = fallback_career_detail(label, DETAIL_FAILED_MESSAGE)
        except Exception as exc:
            logger.error("Unexpected error fetching career detail for '%s': %s", label, exc)
            detail = fallback_career_detail(label, DETAIL_FAILED_MESSAGE)

        if self._is_stale(token, WorkflowState.LOADING_DETAIL):
            return self.state
        self.detail = detail
        self.state = WorkflowState.SHOWING_DETAIL
        return self.state

    def add_to_map(self) -> tuple[Node, Edge] | None:
        """Commits the shown career as a child of the selected node and returns to idle."""
        if self.state is not WorkflowState.SHOWING_DETAIL or self.selected_node is None or self.detail is None:
            logger.info("Nothing to add while %s.", self.state.value)
            return None
        created = self.store.add_child(self.selected_node.id, self.detail.title)
        logger.info("Added '%s' under '%s'.", created[0].label, self.selected_node.label)
        self._clear()
        return created

    def close(self) -> WorkflowState:
        if self.state not in _CLOSABLE_STATES:
            logger.info("Nothing to close while %s.", self.state.value)
            return self.state
        self._clear()
        return self.state

    def reset(self) -> WorkflowState:
        # Invalidates any in-flight request as well.
        self._next_token()
        self._clear()
        return self.state

    async def _load_suggestions(self) -> WorkflowState:
        node = self.selected_node
        self.state = WorkflowState.LOADING_SUGGESTIONS
        self.error_message = None
        self.suggestions = []
        token = self._next_token()
        try:
            suggestions = _parse_suggestions(await self.advisor.get_suggestions(node.label))
            if suggestions is None:
                logger.error("Suggestions for '%s' came back malformed.", node.label)
        except RemoteCallFailure as exc:
            logger.error("Suggestions for '%s' failed: %s", node.label, exc)
            suggestions = None
        except Exception as exc:
            logger.error("Unexpected error fetching suggestions for '%s': %s", node.label, exc)
            suggestions = None

        if self._is_stale(token, WorkflowState.LOADING_SUGGESTIONS):
            return self.state
        if suggestions is None:
            self.state = WorkflowState.ERROR
            self.error_message = SUGGESTIONS_FAILED_MESSAGE
        else:
            self.suggestions = suggestions
            self.state = WorkflowState.SHOWING_SUGGESTIONS
        return self.state

    def _next_token(self) -> int:
        self._request_seq += 1
        return self._request_seq

    def _is_stale(self, token: int, expected: WorkflowState) -> bool:
        if token != self._request_seq or self.state is not expected:
            logger.debug("Discarding stale response (request %d, current %d).", token, self._request_seq)
            return True
        return False
