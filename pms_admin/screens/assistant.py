"""
Assistant chat — the floating help widget.

Keeps the conversation for one session and relays each turn, together
with the history so far, to the backend AI endpoint.  A failed turn is
answered with a fixed apology instead of an error.
"""

import logging

from pms_admin.core.backend import BackendClient, BackendError
from pms_admin.schemas import ChatMessage, ChatPart
from pms_admin.services import assistant_service

logger = logging.getLogger(__name__)

FALLBACK_REPLY = (
    "Sorry, I encountered an error. Please check your connection or try again later."
)


def _message(role: str, text: str) -> ChatMessage:
    return ChatMessage(role=role, parts=[ChatPart(text=text)])


class AssistantChat:
    def __init__(self, client: BackendClient):
        self.client = client
        self.messages: list[ChatMessage] = []
        self.is_loading = False

    async def send(self, text: str) -> bool:
        if not text.strip() or self.is_loading:
            return False

        history = list(self.messages)
        self.messages.append(_message("user", text))
        self.is_loading = True
        ok = True
        try:
            reply = await assistant_service.send_message(self.client, text, history)
        except BackendError:
            logger.exception("Assistant request failed")
            reply = FALLBACK_REPLY
            ok = False
        finally:
            self.is_loading = False

        self.messages.append(_message("model", reply))
        return ok

    def reset(self) -> None:
        self.messages = []
