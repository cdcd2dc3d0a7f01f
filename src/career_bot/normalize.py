from __future__ import annotations
import re
import unicodedata

_QUOTE_MAP = {
    "’": "'",
    "‘": "'",
    "“": "\"",
    "”": "\"",
}

# markers the assistant's markdown uses that sound wrong when read aloud
_SPEECH_MARKERS = re.compile(r"(\*\*|### |#### |---|\* )")

def _nfkc_normalize(s: str) -> str:
    if not s:
        return ""
    s = unicodedata.normalize("NFKC", s)
    for src, dst in _QUOTE_MAP.items():
        s = s.replace(src, dst)
    return s

def norm_text(s: str) -> str:
    s = _nfkc_normalize(s or "")
    s = s.strip()
    s = re.sub(r"\s+", " ", s)
    return s

def collapse_repeated_words(s: str) -> str:
    """Drop a token when it repeats the previous one, ignoring case.

    "good good morning morning sir" -> "good morning sir". Only adjacent
    repeats are removed; punctuation and casing of kept tokens are untouched.
    """
    words = (s or "").split()
    kept: list[str] = []
    for word in words:
        if kept and kept[-1].lower() == word.lower():
            continue
        kept.append(word)
    return " ".join(kept)

def token_count(s: str) -> int:
    return len((s or "").split())

def strip_markdown(s: str) -> str:
    return _SPEECH_MARKERS.sub("", s or "")

def same_utterance(a: str | None, b: str | None) -> bool:
    if a is None or b is None:
        return False
    return a.strip().lower() == b.strip().lower()
