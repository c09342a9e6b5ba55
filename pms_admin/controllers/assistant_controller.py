"""
Assistant controller — chat widget relay.

Available to every signed-in user; the conversation lives on the
caller's dashboard session.
"""

from fastapi import APIRouter, Depends

from pms_admin.core.security import get_dashboard_session
from pms_admin.core.sessions import DashboardSession
from pms_admin.schemas import ChatMessage, ChatRequest

router = APIRouter(prefix="/api/ui/assistant", tags=["Assistant"])


@router.get("/messages", response_model=list[ChatMessage])
async def get_messages(session: DashboardSession = Depends(get_dashboard_session)):
    return session.assistant.messages


@router.post("/chat", response_model=list[ChatMessage])
async def chat(body: ChatRequest, session: DashboardSession = Depends(get_dashboard_session)):
    """Send one message; the reply (or the fallback apology) is appended to the history."""
    await session.assistant.send(body.message)
    return session.assistant.messages
