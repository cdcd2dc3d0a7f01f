from __future__ import annotations
import logging

from aiogram import Bot, Dispatcher, F
from aiogram.filters import Command, CommandStart
from aiogram.types import CallbackQuery, Message

from .choices import resolve_choice
from .config import Settings
from .i18n import t
from .keyboards import kb_quiz_answered, kb_quiz_options
from .llm import LLMClient
from .models import ChatMessage, ChatState, Sender
from .render import render_message
from .speech import Speaker, speech_text, transcribe_voice
from .store import ChatSlot, ConversationStore

logger = logging.getLogger(__name__)

class TelegramTranscriptView:
    """Mirrors a conversation's transcript into one Telegram chat."""

    def __init__(self, bot: Bot, chat_id: int, speaker: Speaker, *, voice_enabled: bool = False):
        self._bot = bot
        self.chat_id = chat_id
        self._speaker = speaker
        self.voice_enabled = voice_enabled
        # transcript index -> telegram message id of quiz keyboards not yet answered
        self.open_keyboards: dict[int, int] = {}

    async def message_added(self, index: int, message: ChatMessage) -> None:
        if message.sender is Sender.USER:
            return
        chunks = render_message(message)
        if message.options and chunks:
            chunks[-1]["reply_markup"] = kb_quiz_options(index, len(message.options))
        sent = None
        for kwargs in chunks:
            sent = await self._bot.send_message(self.chat_id, **kwargs)
        if message.options and sent is not None:
            self.open_keyboards[index] = sent.message_id
        if self.voice_enabled:
            self._speaker.speak(self._bot, self.chat_id, speech_text(message))

    async def message_answered(self, index: int, message: ChatMessage) -> None:
        message_id = self.open_keyboards.pop(index, None)
        if message_id is None:
            return
        await self._bot.edit_message_reply_markup(
            chat_id=self.chat_id,
            message_id=message_id,
            reply_markup=kb_quiz_answered(len(message.options or ()), message.selected_option),
        )

async def _submit(slot: ChatSlot, text: str) -> None:
    conversation = slot.conversation
    # typed "B", "2" or the option text counts as clicking that option
    if conversation.state is ChatState.IN_QUIZ:
        option_index = resolve_choice(text, conversation.current_options)
        if option_index is not None:
            await conversation.submit_option(option_index)
            return
    await conversation.submit_text(text)

def register_handlers(
    dp: Dispatcher,
    *,
    settings: Settings,
    llm: LLMClient | None = None,
    store: ConversationStore | None = None,
) -> ConversationStore:
    llm = llm or LLMClient.from_settings(settings.llm)
    store = store or ConversationStore(llm)
    speaker = Speaker(llm)

    async def _slot(bot: Bot, chat_id: int) -> tuple[ChatSlot, bool]:
        view = TelegramTranscriptView(bot, chat_id, speaker, voice_enabled=settings.voice_replies)
        return await store.get_or_start(chat_id, view)

    @dp.message(CommandStart())
    async def on_start(m: Message):
        speaker.cancel(m.chat.id)
        store.discard(m.chat.id)
        await _slot(m.bot, m.chat.id)

    @dp.message(Command("voice"))
    async def on_voice_toggle(m: Message):
        slot, _ = await _slot(m.bot, m.chat.id)
        slot.view.voice_enabled = not slot.view.voice_enabled
        if not slot.view.voice_enabled:
            speaker.cancel(m.chat.id)
        logger.info("voice_toggle: chat_id=%s enabled=%s", m.chat.id, slot.view.voice_enabled)
        await m.answer(t("voice_on") if slot.view.voice_enabled else t("voice_off"), parse_mode=None)

    @dp.message(F.voice)
    async def on_voice_message(m: Message):
        # the student started talking: stop reading the previous reply
        speaker.cancel(m.chat.id)
        slot, created = await _slot(m.bot, m.chat.id)
        if created:
            return
        try:
            text = await transcribe_voice(m.bot, m.voice, llm)
        except Exception:
            logger.exception("voice_message: transcription_failed chat_id=%s", m.chat.id)
            text = ""
        if not text:
            await m.answer(t("voice_not_understood"), parse_mode=None)
            return
        await _submit(slot, text)

    @dp.message(F.text)
    async def on_text(m: Message):
        slot, created = await _slot(m.bot, m.chat.id)
        if created:
            # first contact: the greeting asks for the name, this text is not it
            return
        await _submit(slot, m.text)

    @dp.callback_query(F.data.startswith("quiz:"))
    async def on_quiz_option(c: CallbackQuery):
        # answer right away; analysis and the report can take a while
        await c.answer()
        parts = c.data.split(":")
        if len(parts) != 3 or not (parts[1].isdigit() and parts[2].isdigit()):
            return
        chat_id = c.message.chat.id if c.message else c.from_user.id
        slot = store.get(chat_id)
        if slot is None:
            return
        message_index, option_index = int(parts[1]), int(parts[2])
        if slot.conversation.transcript.last_open_question() != message_index:
            logger.info("quiz_option: stale_click chat_id=%s message_index=%s", chat_id, message_index)
            return
        await slot.conversation.submit_option(option_index)

    return store
