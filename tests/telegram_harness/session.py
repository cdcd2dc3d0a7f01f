from __future__ import annotations

import datetime as dt
from typing import Any, AsyncGenerator

from aiogram import Bot
from aiogram.client.session.base import BaseSession
from aiogram.methods import (
    AnswerCallbackQuery,
    EditMessageReplyMarkup,
    GetFile,
    SendAudio,
    SendMessage,
)
from aiogram.types import Chat, File, InlineKeyboardMarkup, Message, User


class RecordingSession(BaseSession):
    """Bot session that answers every API call locally and remembers it."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict[str, Any]] = []
        self.messages_by_chat: dict[int, list[Message]] = {}
        self.audio_by_chat: dict[int, list[Any]] = {}
        self._message_id_counter: dict[int, int] = {}
        # bytes served for every file download (voice notes)
        self.download_content = b"OggS fake voice"

    async def close(self) -> None:
        return None

    async def stream_content(
        self,
        url: str,
        headers: dict[str, Any] | None = None,
        timeout: int = 30,
        chunk_size: int = 65536,
        raise_for_status: bool = True,
    ) -> AsyncGenerator[bytes, None]:
        yield self.download_content

    def methods(self) -> list[str]:
        return [call["method"] for call in self.calls]

    def _record_call(self, method_name: str, payload: dict[str, Any], chat_id: int | None) -> None:
        self.calls.append(
            {
                "method": method_name,
                "payload": payload,
                "chat_id": chat_id,
                "timestamp": dt.datetime.now(tz=dt.timezone.utc),
            }
        )

    def _bot_user(self) -> User:
        return User.model_validate(
            {
                "id": 0,
                "is_bot": True,
                "first_name": "Career Guide",
                "username": "career_guide_bot",
            }
        )

    def _next_message_id(self, chat_id: int) -> int:
        current = self._message_id_counter.get(chat_id, 0) + 1
        self._message_id_counter[chat_id] = current
        return current

    def _build_message(self, chat_id: int, text: str | None, reply_markup: Any) -> Message:
        message = Message.model_validate(
            {
                "message_id": self._next_message_id(chat_id),
                "date": dt.datetime.now(tz=dt.timezone.utc),
                "chat": Chat.model_validate({"id": chat_id, "type": "private"}),
                "from": self._bot_user().model_dump(by_alias=True),
                "text": text,
                "reply_markup": self._normalize_reply_markup(reply_markup),
            }
        )
        self.messages_by_chat.setdefault(chat_id, []).append(message)
        return message

    def _normalize_reply_markup(self, reply_markup: Any) -> Any:
        if isinstance(reply_markup, dict):
            return InlineKeyboardMarkup.model_validate(reply_markup)
        return reply_markup

    def _replace_markup(self, chat_id: int, message_id: int | None, reply_markup: Any) -> Message | None:
        # aiogram objects are immutable; swap in an edited copy
        messages = self.messages_by_chat.get(chat_id, [])
        for pos, message in enumerate(messages):
            if message.message_id == message_id:
                messages[pos] = message.model_copy(
                    update={"reply_markup": self._normalize_reply_markup(reply_markup)}
                )
                return messages[pos]
        return None

    async def make_request(self, bot: Bot, method: Any, timeout: int | None = None) -> Any:
        payload = method.model_dump(exclude_none=True)
        chat_id = payload.get("chat_id")
        method_name = method.__class__.__name__
        self._record_call(method_name, payload, chat_id)

        if isinstance(method, SendMessage):
            return self._build_message(int(chat_id), payload.get("text"), payload.get("reply_markup"))

        if isinstance(method, SendAudio):
            self.audio_by_chat.setdefault(int(chat_id), []).append(method.audio)
            return self._build_message(int(chat_id), None, None)

        if isinstance(method, EditMessageReplyMarkup):
            message = self._replace_markup(int(chat_id), payload.get("message_id"), payload.get("reply_markup"))
            return message if message is not None else True

        if isinstance(method, GetFile):
            return File(
                file_id=method.file_id,
                file_unique_id=f"u-{method.file_id}",
                file_path=f"voice/{method.file_id}.ogg",
            )

        if isinstance(method, AnswerCallbackQuery):
            return True

        return True
