"""Conversation state machine.

Each text turn is dispatched to one handler per ``ChatState``. A handler
receives the current ``Session`` value and returns the next one; the
``Conversation`` commits it only when the handler finishes, so a failed turn
leaves the session exactly as it was. Transcript messages are published to an
optional listener as soon as they are appended.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Awaitable, Callable, Protocol

from .i18n import t
from .models import (
    ChatMessage,
    ChatState,
    QuizAnalysis,
    QuizSession,
    RoadmapStep,
    Sender,
    Session,
    Transcript,
)
from .normalize import collapse_repeated_words, same_utterance
from .quiz import QuizGenerationError, analyze, generate_quiz, record_answer
from .report import generate_guide, generate_roadmap
from .validation import ValidationKind, validate

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)


class TranscriptListener(Protocol):
    async def message_added(self, index: int, message: ChatMessage) -> None: ...

    async def message_answered(self, index: int, message: ChatMessage) -> None: ...


@dataclass(frozen=True)
class Turn:
    llm: "LLMClient"
    say: Callable[..., Awaitable[ChatMessage]]


Handler = Callable[[Turn, Session, str], Awaitable[Session]]


# ---------------- shared steps ----------------
async def _present_question(turn: Turn, quiz: QuizSession) -> None:
    question = quiz.current_question
    if question is None:
        return
    await turn.say(
        t(
            "quiz_question",
            number=len(quiz.user_answers) + 1,
            total=len(quiz.questions),
            question=question.question,
        ),
        options=question.options,
    )


async def _deliver_report(turn: Turn, session: Session, domain: str) -> Session:
    session = replace(session, state=ChatState.GENERATING_DETAILS)
    try:
        await turn.say(t("report_intro", domain=domain))
        guide = await generate_guide(domain, turn.llm)
        await turn.say(guide)
        roadmap = await generate_roadmap(domain, turn.llm)
        await turn.say(t("roadmap_intro"), roadmap=roadmap)
    except Exception:
        logger.exception("dialogue: report_failed domain=%r", domain)
        await turn.say(t("report_failed"))
        return replace(session, state=ChatState.AWAITING_INTERESTED_DOMAIN)
    await turn.say(t("ask_final_feedback"))
    return replace(session, state=ChatState.AWAITING_FINAL_FEEDBACK)


# ---------------- text handlers ----------------
async def _on_name(turn: Turn, session: Session, text: str) -> Session:
    result = await validate(ValidationKind.NAME, text, turn.llm)
    name = result.canonical or text
    await turn.say(t("ask_class_level", name=name))
    return replace(session, student_name=name, state=ChatState.AWAITING_CLASS_LEVEL)


async def _on_class_level(turn: Turn, session: Session, text: str) -> Session:
    # substring match: "class 10", "10th" and "I'm in 10" all count
    level = text.lower()
    if "10" in level:
        await turn.say(t("ask_predicted_domain"))
        return replace(session, class_level="Class 10", state=ChatState.AWAITING_PREDICTED_DOMAIN)
    if "12" in level:
        await turn.say(t("ask_stream"))
        return replace(session, class_level="Class 12", state=ChatState.AWAITING_STREAM)
    await turn.say(t("reask_class_level"))
    return session


async def _on_stream(turn: Turn, session: Session, text: str) -> Session:
    result = await validate(ValidationKind.STREAM, text, turn.llm)
    if not result.ok:
        await turn.say(t("reask_stream"))
        return session
    await turn.say(t("stream_accepted", stream=result.canonical))
    return replace(session, stream=result.canonical, state=ChatState.AWAITING_PREDICTED_DOMAIN)


async def _on_predicted_domain(turn: Turn, session: Session, text: str) -> Session:
    result = await validate(ValidationKind.DOMAIN, text, turn.llm)
    if not result.ok:
        await turn.say(t("reask_predicted_domain"))
        return session
    await turn.say(t("ask_satisfaction", domain=result.canonical))
    return replace(
        session,
        quiz=QuizSession(predicted_domain=result.canonical),
        state=ChatState.AWAITING_SATISFACTION,
    )


async def _on_satisfaction(turn: Turn, session: Session, text: str) -> Session:
    lowered = text.lower()
    predicted = session.quiz.predicted_domain if session.quiz else None
    if "satisfied" in lowered and "not" not in lowered and predicted:
        return await _deliver_report(turn, session, predicted)
    await turn.say(t("ask_interested_domain"))
    return replace(session, state=ChatState.AWAITING_INTERESTED_DOMAIN)


async def _on_interested_domain(turn: Turn, session: Session, text: str) -> Session:
    result = await validate(ValidationKind.DOMAIN, text, turn.llm)
    if not result.ok:
        await turn.say(t("reask_interested_domain"))
        return session
    domain = result.canonical
    quiz = replace(session.quiz or QuizSession(), interested_domain=domain, questions=(), user_answers=())
    session = replace(session, quiz=quiz, state=ChatState.GENERATING_QUIZ)
    await turn.say(t("quiz_intro", domain=domain))
    try:
        questions = await generate_quiz(domain, turn.llm)
    except QuizGenerationError as exc:
        await turn.say(str(exc))
        return replace(session, state=ChatState.AWAITING_INTERESTED_DOMAIN)
    except Exception:
        logger.exception("dialogue: quiz_generation_failed domain=%r", domain)
        await turn.say(t("quiz_failed"))
        return replace(session, state=ChatState.AWAITING_INTERESTED_DOMAIN)
    quiz = replace(quiz, questions=questions)
    await _present_question(turn, quiz)
    return replace(session, quiz=quiz, state=ChatState.IN_QUIZ)


async def _on_adjacent_choice(turn: Turn, session: Session, text: str) -> Session:
    result = await validate(ValidationKind.DOMAIN, text, turn.llm)
    if not result.ok:
        await turn.say(t("reask_adjacent_choice"))
        return session
    return await _deliver_report(turn, session, result.canonical)


async def _on_final_feedback(turn: Turn, session: Session, text: str) -> Session:
    result = await validate(ValidationKind.SENTIMENT, text, turn.llm)
    if result.is_positive:
        await turn.say(t("follow_up_open"))
        chat = turn.llm.start_follow_up_chat()
        return replace(session, follow_up=chat, state=ChatState.POST_GUIDANCE_CHAT)
    await turn.say(t("explore_again"))
    return replace(session, state=ChatState.AWAITING_INTERESTED_DOMAIN)


async def _on_follow_up(turn: Turn, session: Session, text: str) -> Session:
    if session.follow_up is None:
        await turn.say(t("follow_up_missing"))
        return session
    reply = await session.follow_up.send(text)
    await turn.say(reply)
    return session


_TEXT_HANDLERS: dict[ChatState, Handler] = {
    ChatState.AWAITING_NAME: _on_name,
    ChatState.AWAITING_CLASS_LEVEL: _on_class_level,
    ChatState.AWAITING_STREAM: _on_stream,
    ChatState.AWAITING_PREDICTED_DOMAIN: _on_predicted_domain,
    ChatState.AWAITING_SATISFACTION: _on_satisfaction,
    ChatState.AWAITING_INTERESTED_DOMAIN: _on_interested_domain,
    ChatState.AWAITING_ADJACENT_CHOICE: _on_adjacent_choice,
    ChatState.AWAITING_FINAL_FEEDBACK: _on_final_feedback,
    ChatState.POST_GUIDANCE_CHAT: _on_follow_up,
}


class Conversation:
    def __init__(
        self,
        llm: "LLMClient",
        *,
        listener: TranscriptListener | None = None,
        conversation_id: object = "-",
    ) -> None:
        self.llm = llm
        self.listener = listener
        self.conversation_id = conversation_id
        self.session = Session()
        self.transcript = Transcript()
        self.busy = False

    @property
    def state(self) -> ChatState:
        return self.session.state

    @property
    def awaiting_input(self) -> bool:
        return not self.busy and self.state in _TEXT_HANDLERS

    @property
    def current_options(self) -> tuple[str, ...]:
        quiz = self.session.quiz
        if self.state is not ChatState.IN_QUIZ or quiz is None or quiz.current_question is None:
            return ()
        return quiz.current_question.options

    # ---------- transcript ----------
    async def _append(self, message: ChatMessage) -> ChatMessage:
        index = self.transcript.append(message)
        if self.listener is not None:
            await self.listener.message_added(index, message)
        return message

    async def say(
        self,
        text: str,
        *,
        options: tuple[str, ...] | None = None,
        analysis: QuizAnalysis | None = None,
        roadmap: tuple[RoadmapStep, ...] | None = None,
    ) -> ChatMessage:
        return await self._append(
            ChatMessage(Sender.ASSISTANT, text, options=options, analysis=analysis, roadmap=roadmap)
        )

    def _turn(self) -> Turn:
        return Turn(llm=self.llm, say=self.say)

    def _commit(self, session: Session) -> None:
        if session.state is not self.session.state:
            logger.info(
                "dialogue: transition conversation=%s from=%s to=%s",
                self.conversation_id,
                self.session.state.name,
                session.state.name,
            )
        self.session = session

    def _drop(self, reason: str) -> bool:
        logger.info("dialogue: turn_dropped conversation=%s state=%s reason=%s", self.conversation_id, self.state.name, reason)
        return False

    # ---------- entry points ----------
    async def start(self) -> None:
        if self.busy or self.state is not ChatState.INITIAL:
            return
        self.busy = True
        try:
            await self.say(t("greeting"))
            self._commit(replace(self.session, state=ChatState.AWAITING_NAME))
        finally:
            self.busy = False

    async def submit_text(self, raw_text: str) -> bool:
        """Process one typed (or transcribed) utterance.

        Returns False when the turn is dropped: busy, empty, a repeat of the
        previous user message, or a state that takes no text.
        """
        if self.busy:
            return self._drop("busy")
        text = collapse_repeated_words(raw_text)
        if not text:
            return self._drop("empty")
        if same_utterance(text, self.transcript.last_user_text()):
            return self._drop("duplicate")
        handler = _TEXT_HANDLERS.get(self.state)
        if handler is None:
            if self.state is ChatState.IN_QUIZ:
                await self.say(t("quiz_use_options"))
            return self._drop("no_text_handler")

        self.busy = True
        try:
            await self._append(ChatMessage(Sender.USER, text))
            session = await handler(self._turn(), self.session, text)
            self._commit(session)
        except Exception:
            logger.exception("dialogue: turn_failed conversation=%s state=%s", self.conversation_id, self.state.name)
            await self.say(t("apology"))
        finally:
            self.busy = False
        return True

    async def submit_option(self, option_index: int, *, question_index: int | None = None) -> bool:
        """Answer the open quiz question with ``option_index``."""
        if self.busy:
            return self._drop("busy")
        quiz = self.session.quiz
        question = quiz.current_question if quiz else None
        if self.state is not ChatState.IN_QUIZ or quiz is None or question is None:
            return self._drop("no_open_question")
        if question_index is not None and question_index != len(quiz.user_answers):
            return self._drop("stale_question")
        if not 0 <= option_index < len(question.options):
            return self._drop("bad_option")

        self.busy = True
        try:
            await self._answer(quiz, option_index)
        except Exception:
            logger.exception("dialogue: answer_failed conversation=%s state=%s", self.conversation_id, self.state.name)
            await self.say(t("apology"))
        finally:
            self.busy = False
        return True

    async def _answer(self, quiz: QuizSession, option_index: int) -> None:
        question = quiz.current_question
        open_index = self.transcript.last_open_question()
        if open_index is not None:
            message = self.transcript[open_index]
            message.mark_answered(option_index)
            if self.listener is not None:
                await self.listener.message_answered(open_index, message)
        await self._append(ChatMessage(Sender.USER, question.options[option_index]))
        quiz = record_answer(quiz, option_index)
        self._commit(replace(self.session, quiz=quiz))
        turn = self._turn()

        if not quiz.is_complete:
            await _present_question(turn, quiz)
            return

        # ANALYZING_QUIZ takes no input: every exit below must leave it
        self._commit(replace(self.session, state=ChatState.ANALYZING_QUIZ))
        try:
            await self.say(t("quiz_analyzing"))
            verdict = await analyze(quiz, self.llm)
            await self.say(verdict.analysis.headline, analysis=verdict.analysis)
        except Exception:
            logger.exception("dialogue: quiz_analysis_failed conversation=%s", self.conversation_id)
            self._commit(replace(self.session, state=ChatState.AWAITING_INTERESTED_DOMAIN))
            await self.say(t("quiz_analysis_failed"))
            return
        if not verdict.is_good_fit:
            self._commit(replace(self.session, state=ChatState.AWAITING_ADJACENT_CHOICE))
            return
        try:
            session = await _deliver_report(turn, self.session, quiz.interested_domain or "")
        except Exception:
            self._commit(replace(self.session, state=ChatState.AWAITING_INTERESTED_DOMAIN))
            raise
        self._commit(session)
