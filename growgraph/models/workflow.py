# growgraph/models/workflow.py
from enum import Enum
from pydantic import BaseModel
from growgraph.models.career import CareerDetail
from growgraph.models.graph import Node

class WorkflowState(str, Enum):
    IDLE = "idle"
    LOADING_SUGGESTIONS = "loading_suggestions"
    SHOWING_SUGGESTIONS = "showing_suggestions"
    LOADING_DETAIL = "loading_detail"
    SHOWING_DETAIL = "showing_detail"
    ERROR = "error"

class WorkflowSnapshot(BaseModel):
    state: WorkflowState
    is_loading: bool
    selected_node: Node | None = None
    suggestions: list[str] = []
    chosen_suggestion: str | None = None
    detail: CareerDetail | None = None
    error_message: str | None = None
