"""Gemini structured-output schemas.

Field names follow the camelCase keys the prompts ask for. These models are
passed as ``response_schema`` and used to parse the returned JSON; shape
rules the schema language cannot express (counts, distinct options) are
checked by the quiz and report modules.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class StreamCheck(BaseModel):
    isValid: bool = Field(..., description="Whether the input is a valid academic stream.")
    streamName: str = Field(
        ...,
        description="The standardized stream name if valid, otherwise an empty string.",
    )


class DomainCheck(BaseModel):
    isValid: bool = Field(..., description="Whether the input is a valid career/academic domain.")
    domainName: str = Field(
        ...,
        description="The standardized domain name if valid, otherwise an empty string.",
    )


class QuizQuestionOut(BaseModel):
    question: str = Field(..., description="The full text of the quiz question.")
    options: List[str] = Field(..., description="An array of 4 string options for the question.")
    correctAnswerIndex: int = Field(
        ...,
        description="The 0-based index of the correct answer in the options array.",
    )


class QuestionBreakdownOut(BaseModel):
    questionText: str
    userAnswer: str
    correctAnswer: str
    justification: str = Field(..., description="A brief explanation of why the correct answer is right.")
    isCorrect: bool


class QuizAnalysisOut(BaseModel):
    headline: str = Field(
        ...,
        description="The overall score and performance label, e.g., 'Your Score: 4/5 - Good Performance'.",
    )
    overallFeedback: str = Field(
        ...,
        description="An encouraging summary of performance with 2-3 actionable improvement tips.",
    )
    questionBreakdown: List[QuestionBreakdownOut] = Field(
        ...,
        description="A detailed breakdown for each of the 5 questions.",
    )
    nextSteps: str = Field(
        ...,
        description="The final recommendation and prompt for the user's next action.",
    )


class RoadmapStepOut(BaseModel):
    title: str
    duration: str
    goals: List[str]
    project: str
    skillsToPractice: List[str]
