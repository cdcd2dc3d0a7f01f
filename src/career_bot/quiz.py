from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from pydantic import TypeAdapter, ValidationError

from .models import (
    OPTIONS_PER_QUESTION,
    QUIZ_LENGTH,
    QuestionBreakdown,
    QuizAnalysis,
    QuizQuestion,
    QuizSession,
)
from .schemas import QuizAnalysisOut, QuizQuestionOut

if TYPE_CHECKING:
    from .llm import LLMClient

logger = logging.getLogger(__name__)

_QUESTIONS = TypeAdapter(list[QuizQuestionOut])


class QuizGenerationError(ValueError):
    pass


class QuizAnalysisError(ValueError):
    pass


@dataclass(frozen=True)
class QuizVerdict:
    analysis: QuizAnalysis
    is_good_fit: bool


def performance_label(score: int) -> str:
    if score >= 4:
        return "Good"
    if score == 3:
        return "Medium"
    return "Poor"


def _validate_question(item: QuizQuestionOut) -> QuizQuestion:
    question = item.question.strip()
    if not question:
        raise ValueError("question text required")
    options = tuple(opt.strip() for opt in item.options)
    if len(options) != OPTIONS_PER_QUESTION:
        raise ValueError(f"expected {OPTIONS_PER_QUESTION} options, got {len(options)}")
    if any(not opt for opt in options):
        raise ValueError("empty option")
    if len({opt.casefold() for opt in options}) != len(options):
        raise ValueError("options must be distinct")
    if not 0 <= item.correctAnswerIndex < len(options):
        raise ValueError(f"correctAnswerIndex out of range: {item.correctAnswerIndex}")
    return QuizQuestion(question=question, options=options, correct_answer_index=item.correctAnswerIndex)


def parse_questions(raw: str) -> tuple[QuizQuestion, ...]:
    try:
        items = _QUESTIONS.validate_json(raw)
        if len(items) != QUIZ_LENGTH:
            raise ValueError(f"expected {QUIZ_LENGTH} questions, got {len(items)}")
        return tuple(_validate_question(item) for item in items)
    except ValueError as exc:
        # pydantic's ValidationError is a ValueError too
        logger.warning("quiz: malformed_questions error=%s", str(exc).splitlines()[0])
        raise QuizGenerationError("Could not generate a valid quiz. Please try a different domain.") from exc


async def generate_quiz(domain: str, llm: "LLMClient") -> tuple[QuizQuestion, ...]:
    questions = parse_questions(await llm.generate_quiz(domain))
    logger.info("quiz: generated domain=%r questions=%s", domain, len(questions))
    return questions


def record_answer(quiz: QuizSession, option_index: int) -> QuizSession:
    question = quiz.current_question
    if question is None:
        raise ValueError("quiz has no open question")
    if not 0 <= option_index < len(question.options):
        raise ValueError(f"option index out of range: {option_index}")
    return replace(quiz, user_answers=quiz.user_answers + (option_index,))


def analysis_items(quiz: QuizSession) -> list[dict[str, Any]]:
    """Pair every question with its correct option and the student's option."""
    if len(quiz.user_answers) != len(quiz.questions):
        raise ValueError(
            f"quiz incomplete: {len(quiz.user_answers)}/{len(quiz.questions)} answered"
        )
    return [
        {
            "question": q.question,
            "options": list(q.options),
            "correctAnswer": q.correct_option,
            "studentAnswer": q.options[answer],
        }
        for q, answer in zip(quiz.questions, quiz.user_answers)
    ]


def _reconcile(quiz: QuizSession, out: QuizAnalysisOut) -> QuizAnalysis:
    breakdown: list[QuestionBreakdown] = []
    for idx, (item, question, answer) in enumerate(
        zip(out.questionBreakdown, quiz.questions, quiz.user_answers), start=1
    ):
        actual = answer == question.correct_answer_index
        if item.isCorrect != actual:
            logger.warning(
                "quiz: breakdown_flag_mismatch question=%s reported=%s recorded=%s",
                idx,
                item.isCorrect,
                actual,
            )
        breakdown.append(
            QuestionBreakdown(
                question_text=item.questionText,
                user_answer=item.userAnswer,
                correct_answer=item.correctAnswer,
                justification=item.justification,
                is_correct=actual,
            )
        )
    score = sum(1 for b in breakdown if b.is_correct)
    label = f"{performance_label(score)} Performance"
    headline = out.headline.strip()
    if label.lower() not in headline.lower():
        logger.warning("quiz: headline_rewritten reported=%r score=%s", headline, score)
        headline = f"Your Score: {score}/{len(breakdown)} - {label}"
    return QuizAnalysis(
        headline=headline,
        overall_feedback=out.overallFeedback,
        question_breakdown=tuple(breakdown),
        next_steps=out.nextSteps,
    )


def parse_analysis(raw: str, quiz: QuizSession) -> QuizAnalysis:
    try:
        out = QuizAnalysisOut.model_validate_json(raw)
        if len(out.questionBreakdown) != len(quiz.questions):
            raise ValueError(
                f"expected {len(quiz.questions)} breakdown entries, got {len(out.questionBreakdown)}"
            )
    except ValueError as exc:
        logger.warning("quiz: malformed_analysis error=%s", str(exc).splitlines()[0])
        raise QuizAnalysisError("Could not analyze quiz results.") from exc
    return _reconcile(quiz, out)


async def analyze(quiz: QuizSession, llm: "LLMClient") -> QuizVerdict:
    items = analysis_items(quiz)
    raw = await llm.analyze_quiz(quiz.interested_domain or "", items)
    analysis = parse_analysis(raw, quiz)
    logger.info(
        "quiz: analyzed domain=%r score=%s good_fit=%s",
        quiz.interested_domain,
        analysis.score,
        analysis.is_good_fit,
    )
    return QuizVerdict(analysis=analysis, is_good_fit=analysis.is_good_fit)
