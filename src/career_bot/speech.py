from __future__ import annotations

import asyncio
import io
import logging
import wave
from typing import TYPE_CHECKING

from aiogram import Bot
from aiogram.types import BufferedInputFile, Voice

from .models import ChatMessage
from .normalize import strip_markdown

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)

# Gemini TTS output: 24 kHz, 16-bit, mono PCM
PCM_RATE = 24000
PCM_SAMPLE_WIDTH = 2
PCM_CHANNELS = 1


def pcm_to_wav(pcm: bytes, *, rate: int = PCM_RATE) -> bytes:
    buf = io.BytesIO()
    with wave.open(buf, "wb") as wav:
        wav.setnchannels(PCM_CHANNELS)
        wav.setsampwidth(PCM_SAMPLE_WIDTH)
        wav.setframerate(rate)
        wav.writeframes(pcm)
    return buf.getvalue()


def speech_text(message: ChatMessage) -> str:
    if message.analysis is not None:
        a = message.analysis
        text = f"{a.headline}. {a.overall_feedback}. {a.next_steps}"
    else:
        text = message.text
    return strip_markdown(text).strip()


async def transcribe_voice(bot: Bot, voice: Voice, llm: "LLMClient") -> str:
    audio = await bot.download(voice)
    data = audio.read() if audio is not None else b""
    if not data:
        return ""
    text = await llm.transcribe(data, voice.mime_type or "audio/ogg")
    logger.info("speech: transcribed duration=%s text_len=%s", voice.duration, len(text))
    return text.strip()


class Speaker:
    """Speaks assistant replies, one utterance per chat at a time.

    A new utterance cancels the one still being synthesized or sent.
    """

    def __init__(self, llm: "LLMClient") -> None:
        self._llm = llm
        self._tasks: dict[int, asyncio.Task] = {}

    def speaking(self, chat_id: int) -> bool:
        task = self._tasks.get(chat_id)
        return task is not None and not task.done()

    def cancel(self, chat_id: int) -> bool:
        task = self._tasks.pop(chat_id, None)
        if task is None or task.done():
            return False
        task.cancel()
        logger.info("speech: cancelled chat_id=%s", chat_id)
        return True

    def speak(self, bot: Bot, chat_id: int, text: str) -> asyncio.Task | None:
        self.cancel(chat_id)
        if not text:
            return None
        task = asyncio.create_task(self._speak(bot, chat_id, text))
        self._tasks[chat_id] = task
        task.add_done_callback(lambda done: self._forget(chat_id, done))
        return task

    def _forget(self, chat_id: int, task: asyncio.Task) -> None:
        if self._tasks.get(chat_id) is task:
            del self._tasks[chat_id]

    async def _speak(self, bot: Bot, chat_id: int, text: str) -> None:
        try:
            pcm = await self._llm.synthesize(text)
            audio = BufferedInputFile(pcm_to_wav(pcm), filename="reply.wav")
            await bot.send_audio(chat_id, audio)
        except asyncio.CancelledError:
            raise
        except Exception:
            # spoken replies are a side channel; the text reply was already sent
            logger.exception("speech: synthesis_failed chat_id=%s text_len=%s", chat_id, len(text))
