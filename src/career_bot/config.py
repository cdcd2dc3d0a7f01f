from __future__ import annotations
import os
from dataclasses import dataclass
from typing import List
from dotenv import load_dotenv

load_dotenv()

def _split_csv_ints(s: str) -> List[int]:
    out = []
    for part in (s or "").split(","):
        part = part.strip()
        if part:
            out.append(int(part))
    return out

def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}

@dataclass(frozen=True)
class LLMSettings:
    gemini_api_key: str
    llm_model: str = "gemini-2.5-flash"
    tts_model: str = "gemini-2.5-flash-preview-tts"
    tts_voice: str = "Kore"

@dataclass(frozen=True)
class Settings:
    bot_token: str
    llm: LLMSettings
    admin_ids: List[int]
    voice_replies: bool = False  # default for new chats; /voice toggles per chat

def load_llm_settings() -> LLMSettings:
    load_dotenv()
    gemini_api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    if not gemini_api_key:
        raise RuntimeError("GEMINI_API_KEY is required")
    return LLMSettings(
        gemini_api_key=gemini_api_key,
        llm_model=os.getenv("LLM_MODEL", "gemini-2.5-flash").strip(),
        tts_model=os.getenv("TTS_MODEL", "gemini-2.5-flash-preview-tts").strip(),
        tts_voice=os.getenv("TTS_VOICE", "Kore").strip(),
    )

def load_settings() -> Settings:
    load_dotenv()
    bot_token = os.getenv("BOT_TOKEN")
    if not bot_token:
        raise RuntimeError("BOT_TOKEN is required")

    return Settings(
        bot_token=bot_token,
        llm=load_llm_settings(),
        admin_ids=_split_csv_ints(os.getenv("ADMIN_IDS", "")),
        voice_replies=_env_flag("VOICE_REPLIES"),
    )
