from __future__ import annotations

from aiogram.utils.formatting import (
    Bold,
    Text,
    as_key_value,
    as_list,
    as_marked_section,
    as_section,
)

from .keyboards import LETTERS
from .models import ChatMessage, QuizAnalysis, RoadmapStep

# Telegram's hard limit is 4096 UTF-16 units
MAX_MESSAGE_LEN = 4000
BLOCK_SEP = "\n\n"


def split_text(text: str, limit: int = MAX_MESSAGE_LEN) -> list[str]:
    """Cut ``text`` into pieces of at most ``limit`` UTF-16 units."""
    chunks: list[str] = []
    start = size = 0
    for i, ch in enumerate(text):
        width = 2 if ord(ch) > 0xFFFF else 1
        if size + width > limit:
            chunks.append(text[start:i])
            start, size = i, 0
        size += width
    if start < len(text):
        chunks.append(text[start:])
    return chunks


def telegram_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def pack_blocks(blocks: list[Text], limit: int = MAX_MESSAGE_LEN) -> list[dict[str, object]]:
    """Group formatted blocks into as few messages as fit under ``limit``.

    A block that is too long on its own is sent as plain text chunks.
    """
    groups: list[list[Text]] = []
    for block in blocks:
        if groups:
            candidate = as_list(*groups[-1], block, sep=BLOCK_SEP).as_kwargs()
            if telegram_len(candidate["text"]) <= limit:
                groups[-1].append(block)
                continue
        groups.append([block])

    messages: list[dict[str, object]] = []
    for group in groups:
        kwargs = as_list(*group, sep=BLOCK_SEP).as_kwargs()
        if telegram_len(kwargs["text"]) <= limit:
            messages.append(kwargs)
            continue
        messages.extend({"text": chunk, "parse_mode": None} for chunk in split_text(kwargs["text"], limit))
    return messages


def render_question(message: ChatMessage) -> dict[str, object]:
    options = message.options or ()
    lines = [Text(Bold(f"{LETTERS[i]})"), " ", opt) for i, opt in enumerate(options)]
    return Text(Bold(message.text), "\n\n", as_list(*lines)).as_kwargs()


def render_analysis(analysis: QuizAnalysis) -> list[dict[str, object]]:
    total = len(analysis.question_breakdown)
    correct = analysis.score
    blocks: list[Text] = [
        Bold(analysis.headline),
        Text(f"{correct} Correct · {total - correct} Incorrect"),
        as_section(Bold("Overall Feedback"), analysis.overall_feedback),
        Bold("Question Breakdown"),
    ]
    for i, item in enumerate(analysis.question_breakdown, start=1):
        mark = "✅" if item.is_correct else "❌"
        blocks.append(
            as_section(
                Text(mark, " ", Bold(f"Q{i}:"), " ", item.question_text),
                as_list(
                    as_key_value("Your answer", item.user_answer),
                    as_key_value("Correct is", item.correct_answer),
                    as_key_value("Reason", item.justification),
                ),
            )
        )
    blocks.append(as_section(Bold("Next Steps"), analysis.next_steps))
    return pack_blocks(blocks)


def _render_step(step: RoadmapStep) -> Text:
    return as_list(
        Bold(f"{step.title} ({step.duration})"),
        as_marked_section(Bold("Goals"), *step.goals, marker="• "),
        as_key_value("Project", step.project),
        as_marked_section(Bold("Skills to practice"), *step.skills_to_practice, marker="• "),
    )


def render_roadmap(title: str, steps: tuple[RoadmapStep, ...]) -> list[dict[str, object]]:
    return pack_blocks([Bold(title), *(_render_step(step) for step in steps)])


def render_message(message: ChatMessage) -> list[dict[str, object]]:
    """Telegram send_message kwargs for one assistant message, in send order."""
    if message.analysis is not None:
        return render_analysis(message.analysis)
    if message.roadmap is not None:
        return render_roadmap(message.text, message.roadmap)
    if message.options:
        return [render_question(message)]
    return [{"text": chunk, "parse_mode": None} for chunk in split_text(message.text) if chunk.strip()]
