from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import TypeAdapter

from .models import ROADMAP_STAGES, RoadmapStep
from .schemas import RoadmapStepOut

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)

_STEPS = TypeAdapter(list[RoadmapStepOut])


class RoadmapGenerationError(ValueError):
    pass


def _clean_list(values: list[str]) -> tuple[str, ...]:
    return tuple(v.strip() for v in values if v and v.strip())


def parse_roadmap(raw: str) -> tuple[RoadmapStep, ...]:
    try:
        items = _STEPS.validate_json(raw)
        if len(items) != ROADMAP_STAGES:
            raise ValueError(f"expected {ROADMAP_STAGES} stages, got {len(items)}")
        steps = []
        for item in items:
            if not item.title.strip() or not item.duration.strip():
                raise ValueError("stage title/duration required")
            steps.append(
                RoadmapStep(
                    title=item.title.strip(),
                    duration=item.duration.strip(),
                    goals=_clean_list(item.goals),
                    project=item.project.strip(),
                    skills_to_practice=_clean_list(item.skillsToPractice),
                )
            )
    except ValueError as exc:
        logger.warning("report: malformed_roadmap error=%s", str(exc).splitlines()[0])
        raise RoadmapGenerationError("Could not generate a valid roadmap. Please try again.") from exc
    return tuple(steps)


async def generate_guide(domain: str, llm: "LLMClient") -> str:
    guide = await llm.domain_guide(domain)
    logger.info("report: guide domain=%r length=%s", domain, len(guide))
    return guide


async def generate_roadmap(domain: str, llm: "LLMClient") -> tuple[RoadmapStep, ...]:
    steps = parse_roadmap(await llm.domain_roadmap(domain))
    logger.info("report: roadmap domain=%r stages=%s", domain, len(steps))
    return steps
