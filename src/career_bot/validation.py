from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .normalize import token_count
from .schemas import DomainCheck, StreamCheck

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)

# inputs this short are taken as already canonical
_NAME_MAX_TOKENS = 2
_DOMAIN_MAX_TOKENS = 3

POSITIVE = "POSITIVE"
NEGATIVE = "NEGATIVE"


class ValidationKind(str, enum.Enum):
    NAME = "name"
    STREAM = "stream"
    DOMAIN = "domain"
    SENTIMENT = "sentiment"


@dataclass(frozen=True)
class Validation:
    ok: bool
    canonical: str | None = None

    @property
    def is_positive(self) -> bool:
        return self.ok and self.canonical == POSITIVE


REJECTED = Validation(ok=False)


def _parse_stream(raw: str) -> Validation:
    try:
        check = StreamCheck.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning("validation: malformed_stream_check error_count=%s raw_len=%s", exc.error_count(), len(raw))
        return REJECTED
    name = check.streamName.strip()
    if check.isValid and name:
        return Validation(ok=True, canonical=name)
    return REJECTED


def _parse_domain(raw: str) -> Validation:
    try:
        check = DomainCheck.model_validate_json(raw)
    except ValidationError as exc:
        logger.warning("validation: malformed_domain_check error_count=%s raw_len=%s", exc.error_count(), len(raw))
        return REJECTED
    name = check.domainName.strip()
    if check.isValid and name:
        return Validation(ok=True, canonical=name)
    return REJECTED


async def extract_name(text: str, llm: "LLMClient") -> Validation:
    cleaned = text.strip()
    if token_count(cleaned) <= _NAME_MAX_TOKENS:
        return Validation(ok=True, canonical=cleaned)
    extracted = (await llm.extract_name(cleaned)).strip()
    # extraction never rejects; an empty reply keeps what the student typed
    return Validation(ok=True, canonical=extracted or cleaned)


async def validate_stream(text: str, llm: "LLMClient") -> Validation:
    return _parse_stream(await llm.check_stream(text.strip()))


async def validate_domain(text: str, llm: "LLMClient") -> Validation:
    cleaned = text.strip()
    if not cleaned:
        return REJECTED
    if token_count(cleaned) <= _DOMAIN_MAX_TOKENS:
        return Validation(ok=True, canonical=cleaned)
    return _parse_domain(await llm.check_domain(cleaned))


async def classify_sentiment(text: str, llm: "LLMClient") -> Validation:
    reply = (await llm.classify_feedback(text.strip())).strip().upper()
    # anything but an exact POSITIVE leads to exploring another domain
    return Validation(ok=True, canonical=POSITIVE if reply == POSITIVE else NEGATIVE)


_VALIDATORS = {
    ValidationKind.NAME: extract_name,
    ValidationKind.STREAM: validate_stream,
    ValidationKind.DOMAIN: validate_domain,
    ValidationKind.SENTIMENT: classify_sentiment,
}


async def validate(kind: ValidationKind | str, raw_text: str, llm: "LLMClient") -> Validation:
    """Check ``raw_text`` against ``kind`` and return its canonical form.

    Backend transport errors propagate; malformed classifier output is a
    rejection.
    """
    kind = ValidationKind(kind)
    result = await _VALIDATORS[kind](raw_text or "", llm)
    logger.info("validation: kind=%s ok=%s canonical=%r", kind.value, result.ok, result.canonical)
    return result
