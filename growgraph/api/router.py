# growgraph/api/router.py
from typing import Any
from fastapi import APIRouter, Body, Depends, status, HTTPException, Response, Header, Request
from pydantic import BaseModel
from growgraph.core.config import settings
from growgraph.core.exceptions import RemoteCallFailure
from growgraph.core.limiter import limiter
from growgraph.models.career import UserProfile
from growgraph.models.graph import Graph, InitialMindMap
from growgraph.models.workflow import WorkflowSnapshot
from growgraph.services.career_advisor import CareerAdvisor, HttpCareerAdvisor
from growgraph.services.session_service import MindMapSession, SessionService

router = APIRouter()

session_service = SessionService(radius=settings.LAYOUT_RADIUS, max_slots=settings.LAYOUT_MAX_SLOTS)
_advisor: CareerAdvisor | None = None

class ChooseRequest(BaseModel):
    label: str

# Dependency to extract the User ID from a header
def get_user_id(x_user_id: str = Header(..., description="Client-generated unique ID for the user workspace.")) -> str:
    if not x_user_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="X-User-ID header is required.")
    return x_user_id

def get_advisor() -> CareerAdvisor:
    global _advisor
    if _advisor is None:
        _advisor = HttpCareerAdvisor(
            settings.CAREER_API_URL,
            timeout=settings.CAREER_API_TIMEOUT,
            retries=settings.CAREER_API_RETRIES,
        )
    return _advisor

async def close_advisor() -> None:
    global _advisor
    if isinstance(_advisor, HttpCareerAdvisor):
        await _advisor.aclose()
    _advisor = None

def get_session_service() -> SessionService:
    return session_service

def get_session(
    user_id: str = Depends(get_user_id),
    sessions: SessionService = Depends(get_session_service)
) -> MindMapSession:
    return sessions.get(user_id)

@router.post("/mindmap", status_code=status.HTTP_201_CREATED, response_model=Graph, tags=["Mind Map"])
@limiter.limit("10/minute")
async def generate_mind_map(
    request: Request,
    profile: UserProfile,
    user_id: str = Depends(get_user_id),
    sessions: SessionService = Depends(get_session_service),
    advisor: CareerAdvisor = Depends(get_advisor)
):
    """Asks the career service for a starting map built from the profile and seeds the workspace with it."""
    try:
        payload = await advisor.generate_initial_mind_map(profile)
    except RemoteCallFailure as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="마인드맵 생성에 실패했습니다. 다시 시도해주세요."
        ) from e
    return sessions.start(user_id, InitialMindMap.from_payload(payload), advisor)

@router.put("/mindmap", response_model=Graph, tags=["Mind Map"])
@limiter.limit("10/minute")
async def seed_mind_map(
    request: Request,
    payload: Any = Body(...),
    user_id: str = Depends(get_user_id),
    sessions: SessionService = Depends(get_session_service),
    advisor: CareerAdvisor = Depends(get_advisor)
):
    """Seeds the workspace from an initial map the client already holds."""
    return sessions.start(user_id, InitialMindMap.from_payload(payload), advisor)

@router.get("/mindmap", response_model=Graph, tags=["Mind Map"])
async def get_mind_map(session: MindMapSession = Depends(get_session)):
    return session.store.to_graph()

@router.delete("/mindmap", status_code=status.HTTP_204_NO_CONTENT, tags=["Mind Map"])
async def discard_mind_map(
    user_id: str = Depends(get_user_id),
    sessions: SessionService = Depends(get_session_service)
):
    if not sessions.discard(user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Mind map not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/mindmap/workflow", response_model=WorkflowSnapshot, tags=["Expansion"])
async def get_workflow(session: MindMapSession = Depends(get_session)):
    return session.controller.snapshot()

@router.post("/mindmap/nodes/{node_id}/expand", response_model=WorkflowSnapshot, tags=["Expansion"])
@limiter.limit("30/minute")
async def expand_node(
    request: Request,
    node_id: str,
    session: MindMapSession = Depends(get_session)
):
    """Selects a node and loads career suggestions for it."""
    await session.controller.select_node(node_id)
    return session.controller.snapshot()

@router.post("/mindmap/workflow/choose", response_model=WorkflowSnapshot, tags=["Expansion"])
@limiter.limit("30/minute")
async def choose_suggestion(
    request: Request,
    choice: ChooseRequest,
    session: MindMapSession = Depends(get_session)
):
    await session.controller.choose_suggestion(choice.label)
    return session.controller.snapshot()

@router.post("/mindmap/workflow/commit", response_model=WorkflowSnapshot, tags=["Expansion"])
async def commit_detail(session: MindMapSession = Depends(get_session)):
    """Adds the career currently on display to the map under the selected node."""
    session.controller.add_to_map()
    return session.controller.snapshot()

@router.post("/mindmap/workflow/close", response_model=WorkflowSnapshot, tags=["Expansion"])
async def close_workflow(session: MindMapSession = Depends(get_session)):
    session.controller.close()
    return session.controller.snapshot()

@router.post("/mindmap/workflow/retry", response_model=WorkflowSnapshot, tags=["Expansion"])
@limiter.limit("30/minute")
async def retry_workflow(request: Request, session: MindMapSession = Depends(get_session)):
    await session.controller.retry()
    return session.controller.snapshot()

@router.post("/mindmap/workflow/reset", response_model=WorkflowSnapshot, tags=["Expansion"])
async def reset_workflow(session: MindMapSession = Depends(get_session)):
    session.controller.reset()
    return session.controller.snapshot()
