"""
Assistant service — relays chat turns to the backend AI endpoint.
"""

from pms_admin.core.backend import BackendClient, BackendError
from pms_admin.schemas import ChatMessage

CHAT_URL = "/api/ai/chat"


async def send_message(client: BackendClient, message: str, history: list[ChatMessage]) -> str:
    body = await client.post(
        CHAT_URL,
        {"message": message, "history": [m.model_dump() for m in history]},
        fallback="Failed to get AI response",
    )
    reply = body.get("response") if isinstance(body, dict) else None
    if not isinstance(reply, str):
        raise BackendError("Failed to get AI response")
    return reply
