"""
Document Model: format-agnostic result of one extraction.

Built once per request, frozen, handed to exactly one renderer.
"""

from typing import Tuple
from pydantic import BaseModel, ConfigDict, Field


class AnswerOption(BaseModel):
    """One multiple-choice option, in presentation order."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str
    is_correct: bool = Field(default=False, alias="isCorrect")


class QuestionRecord(BaseModel):
    """A single extracted question. Only emitted with a prompt and ≥1 option."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    question: str
    answers: Tuple[AnswerOption, ...]
    feedback: str = ""
    is_incorrect: bool = Field(default=False, alias="isIncorrect")

    @property
    def has_correct_answer(self) -> bool:
        return any(a.is_correct for a in self.answers)


class DocumentModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    items: Tuple[QuestionRecord, ...] = ()

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def incorrect_count(self) -> int:
        return sum(1 for q in self.items if q.is_incorrect)
