from __future__ import annotations
import enum
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .llm import FollowUpChat

QUIZ_LENGTH = 5
OPTIONS_PER_QUESTION = 4
GOOD_FIT_MIN_SCORE = 4
ROADMAP_STAGES = 3


class ChatState(enum.Enum):
    INITIAL = "initial"
    AWAITING_NAME = "awaiting_name"
    AWAITING_CLASS_LEVEL = "awaiting_class_level"
    AWAITING_STREAM = "awaiting_stream"
    AWAITING_PREDICTED_DOMAIN = "awaiting_predicted_domain"
    AWAITING_SATISFACTION = "awaiting_satisfaction"
    AWAITING_INTERESTED_DOMAIN = "awaiting_interested_domain"
    GENERATING_QUIZ = "generating_quiz"
    IN_QUIZ = "in_quiz"
    ANALYZING_QUIZ = "analyzing_quiz"
    AWAITING_ADJACENT_CHOICE = "awaiting_adjacent_choice"
    GENERATING_DETAILS = "generating_details"
    AWAITING_FINAL_FEEDBACK = "awaiting_final_feedback"
    POST_GUIDANCE_CHAT = "post_guidance_chat"


class Sender(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class QuizQuestion:
    question: str
    options: tuple[str, ...]
    correct_answer_index: int

    @property
    def correct_option(self) -> str:
        return self.options[self.correct_answer_index]


@dataclass(frozen=True)
class QuizSession:
    predicted_domain: str | None = None
    interested_domain: str | None = None
    questions: tuple[QuizQuestion, ...] = ()
    # len(user_answers) doubles as the current-question cursor
    user_answers: tuple[int, ...] = ()

    @property
    def is_complete(self) -> bool:
        return bool(self.questions) and len(self.user_answers) >= len(self.questions)

    @property
    def current_question(self) -> QuizQuestion | None:
        idx = len(self.user_answers)
        if idx < len(self.questions):
            return self.questions[idx]
        return None


@dataclass(frozen=True)
class QuestionBreakdown:
    question_text: str
    user_answer: str
    correct_answer: str
    justification: str
    is_correct: bool


@dataclass(frozen=True)
class QuizAnalysis:
    headline: str
    overall_feedback: str
    question_breakdown: tuple[QuestionBreakdown, ...]
    next_steps: str

    @property
    def score(self) -> int:
        return sum(1 for item in self.question_breakdown if item.is_correct)

    @property
    def is_good_fit(self) -> bool:
        return self.score >= GOOD_FIT_MIN_SCORE


@dataclass(frozen=True)
class RoadmapStep:
    title: str
    duration: str
    goals: tuple[str, ...]
    project: str
    skills_to_practice: tuple[str, ...]


@dataclass(frozen=True)
class Session:
    state: ChatState = ChatState.INITIAL
    student_name: str | None = None
    class_level: str | None = None
    stream: str | None = None
    quiz: QuizSession | None = None
    follow_up: Optional["FollowUpChat"] = None


@dataclass
class ChatMessage:
    sender: Sender
    text: str
    options: tuple[str, ...] | None = None
    analysis: QuizAnalysis | None = None
    roadmap: tuple[RoadmapStep, ...] | None = None
    answered: bool = False
    selected_option: int | None = None

    @property
    def is_open_question(self) -> bool:
        return self.sender is Sender.ASSISTANT and bool(self.options) and not self.answered

    def mark_answered(self, option_index: int) -> None:
        if self.answered:
            raise ValueError("question already answered")
        if not self.options or not 0 <= option_index < len(self.options):
            raise ValueError(f"option index out of range: {option_index}")
        self.answered = True
        self.selected_option = option_index


@dataclass
class Transcript:
    _messages: list[ChatMessage] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self):
        return iter(self._messages)

    def __getitem__(self, index: int) -> ChatMessage:
        return self._messages[index]

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    def append(self, message: ChatMessage) -> int:
        self._messages.append(message)
        return len(self._messages) - 1

    def last_user_text(self) -> str | None:
        for message in reversed(self._messages):
            if message.sender is Sender.USER:
                return message.text
        return None

    def last_open_question(self) -> int | None:
        for idx in range(len(self._messages) - 1, -1, -1):
            if self._messages[idx].is_open_question:
                return idx
        return None
