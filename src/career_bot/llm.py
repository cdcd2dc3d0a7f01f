from __future__ import annotations
from dataclasses import dataclass, field
import json
import logging
from typing import Any, Optional
from google import genai
from google.genai import types

from . import prompts
from .config import LLMSettings
from .schemas import DomainCheck, QuizAnalysisOut, QuizQuestionOut, RoadmapStepOut, StreamCheck

logger = logging.getLogger(__name__)

@dataclass
class FollowUpChat:
    """Open-ended chat handle owned by exactly one conversation."""

    _chat: Any
    model: str
    turns: int = 0

    async def send(self, text: str) -> str:
        logger.info("llm_usage: follow_up_chat model=%s turn=%s text_len=%s", self.model, self.turns + 1, len(text))
        resp = await self._chat.send_message(text)
        self.turns += 1
        return (resp.text or "").strip()

@dataclass
class LLMClient:
    api_key: str
    model: str = "gemini-2.5-flash"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    tts_voice: str = "Kore"
    _genai: Optional[genai.Client] = field(default=None, init=False, repr=False)

    @classmethod
    def from_settings(cls, settings: LLMSettings) -> "LLMClient":
        return cls(
            settings.gemini_api_key,
            model=settings.llm_model,
            tts_model=settings.tts_model,
            tts_voice=settings.tts_voice,
        )

    def _client(self) -> genai.Client:
        if self._genai is None:
            self._genai = genai.Client(api_key=self.api_key)
        return self._genai

    async def _generate(
        self,
        task: str,
        contents: Any,
        *,
        system_instruction: str | None = None,
        schema: Any = None,
        fast: bool = False,
        max_output_tokens: int | None = None,
    ) -> str:
        config = types.GenerateContentConfig(system_instruction=system_instruction)
        if schema is not None:
            config.response_mime_type = "application/json"
            config.response_schema = schema
        if fast:
            # classification-style calls: no thinking, lowest latency
            config.thinking_config = types.ThinkingConfig(thinking_budget=0)
        if max_output_tokens is not None:
            config.max_output_tokens = max_output_tokens
        logger.info(
            "llm_usage: %s model=%s structured=%s fast=%s contents_len=%s",
            task,
            self.model,
            schema is not None,
            fast,
            len(contents) if isinstance(contents, str) else "n/a",
        )
        resp = await self._client().aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=config,
        )
        return (resp.text or "").strip()

    # ---------- validation gateway ----------
    async def extract_name(self, text: str) -> str:
        return await self._generate(
            "extract_name",
            f'Extract the first name from this text: "{text}"',
            system_instruction=prompts.NAME_EXTRACTION,
            fast=True,
        )

    async def check_stream(self, text: str) -> str:
        return await self._generate(
            "check_stream",
            f'Validate this stream: "{text}"',
            system_instruction=prompts.STREAM_VALIDATION,
            schema=StreamCheck,
            fast=True,
        )

    async def check_domain(self, text: str) -> str:
        return await self._generate(
            "check_domain",
            f'Validate this domain: "{text}"',
            system_instruction=prompts.DOMAIN_VALIDATION,
            schema=DomainCheck,
            fast=True,
        )

    async def classify_feedback(self, text: str) -> str:
        return await self._generate(
            "classify_feedback",
            f'Is the following user feedback positive or negative?\n\nFeedback: "{text}"',
            system_instruction=prompts.FEEDBACK_CLASSIFICATION,
            fast=True,
            max_output_tokens=5,
        )

    # ---------- quiz ----------
    async def generate_quiz(self, domain: str) -> str:
        return await self._generate(
            "generate_quiz",
            f"Generate a 5-question quiz for the domain: {domain}",
            system_instruction=prompts.QUIZ_GENERATION,
            schema=list[QuizQuestionOut],
        )

    async def analyze_quiz(self, domain: str, items: list[dict[str, Any]]) -> str:
        contents = (
            f'Analyze the following quiz results for the domain "{domain}":\n\n'
            + json.dumps(items, ensure_ascii=False, indent=2)
        )
        return await self._generate(
            "analyze_quiz",
            contents,
            system_instruction=prompts.QUIZ_ANALYSIS,
            schema=QuizAnalysisOut,
        )

    # ---------- report ----------
    async def domain_guide(self, domain: str) -> str:
        return await self._generate(
            "domain_guide",
            f"Generate the domain details for: {domain}",
            system_instruction=prompts.DOMAIN_GUIDE,
        )

    async def domain_roadmap(self, domain: str) -> str:
        return await self._generate(
            "domain_roadmap",
            f"Generate a 3-stage, 12-month roadmap for the domain: {domain}",
            system_instruction=prompts.ROADMAP,
            schema=list[RoadmapStepOut],
        )

    # ---------- follow-up chat ----------
    def start_follow_up_chat(self) -> FollowUpChat:
        chat = self._client().aio.chats.create(
            model=self.model,
            config=types.GenerateContentConfig(system_instruction=prompts.FOLLOW_UP_CHAT),
        )
        logger.info("llm_usage: start_follow_up_chat model=%s", self.model)
        return FollowUpChat(chat, model=self.model)

    # ---------- speech ----------
    async def transcribe(self, audio: bytes, mime_type: str) -> str:
        return await self._generate(
            "transcribe",
            [types.Part.from_bytes(data=audio, mime_type=mime_type), prompts.TRANSCRIPTION],
            fast=True,
        )

    async def synthesize(self, text: str) -> bytes:
        """Return raw 24 kHz 16-bit mono PCM for ``text``."""
        logger.info("llm_usage: synthesize model=%s text_len=%s", self.tts_model, len(text))
        resp = await self._client().aio.models.generate_content(
            model=self.tts_model,
            contents=text,
            config=types.GenerateContentConfig(
                response_modalities=["AUDIO"],
                speech_config=types.SpeechConfig(
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=self.tts_voice),
                    ),
                ),
            ),
        )
        for candidate in resp.candidates or []:
            for part in (candidate.content.parts if candidate.content else None) or []:
                if part.inline_data and part.inline_data.data:
                    return part.inline_data.data
        raise ValueError("speech synthesis returned no audio")
