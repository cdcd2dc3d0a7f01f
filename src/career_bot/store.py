from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .dialogue import Conversation

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)


@dataclass
class ChatSlot:
    conversation: Conversation
    view: Any


class ConversationStore:
    """Live conversations by chat id. Memory only; a restart forgets everyone."""

    def __init__(self, llm: "LLMClient") -> None:
        self.llm = llm
        self._slots: dict[int, ChatSlot] = {}

    def __len__(self) -> int:
        return len(self._slots)

    def get(self, chat_id: int) -> ChatSlot | None:
        return self._slots.get(chat_id)

    async def get_or_start(self, chat_id: int, view: Any) -> tuple[ChatSlot, bool]:
        slot = self._slots.get(chat_id)
        if slot is not None:
            return slot, False
        conversation = Conversation(self.llm, listener=view, conversation_id=chat_id)
        slot = ChatSlot(conversation=conversation, view=view)
        # registered before start() so concurrent updates see the same slot
        self._slots[chat_id] = slot
        logger.info("store: conversation_started chat_id=%s live=%s", chat_id, len(self._slots))
        await conversation.start()
        return slot, True

    def discard(self, chat_id: int) -> ChatSlot | None:
        slot = self._slots.pop(chat_id, None)
        if slot is not None:
            logger.info(
                "store: conversation_ended chat_id=%s state=%s messages=%s",
                chat_id,
                slot.conversation.state.name,
                len(slot.conversation.transcript),
            )
        return slot
