"""
Shared fixtures: a small builder for Google Form quiz-review markup.
"""

from __future__ import annotations

import os

# Before any quizexport import: disables the production rate limiter.
os.environ["ENV"] = "development"

from typing import Iterable, Optional

import pytest

from quizexport.schemas.document import AnswerOption, DocumentModel, QuestionRecord


class FormBuilder:
    """Builds HTML fragments shaped like a submitted Google Form quiz."""

    @staticmethod
    def option(
        text: str,
        *,
        indicator: Optional[str] = None,
        marker: Optional[str] = None,
        emphasis: bool = False,
        container: str = "yUJIWb",
    ) -> str:
        wrapper_cls = "ulDsOb IqbSqf" if emphasis else "ulDsOb"
        inner = f'<div class="{wrapper_cls}"><span class="aDTYNe snByac">{text}</span></div>'
        if indicator is not None:
            inner += f'<div class="fKfAyc">{indicator}</div>'
        if marker is not None:
            inner += f'<div class="{marker}" aria-hidden="true"></div>'
        if not container:
            return inner
        return f'<div class="{container}">{inner}</div>'

    @staticmethod
    def block(
        prompt: str,
        options: Iterable[str],
        *,
        feedback: Optional[str] = None,
        extra: str = "",
    ) -> str:
        fb = ""
        if feedback is not None:
            fb = f'<div class="PcXV5e"><div class="sIQxvc">{feedback}</div></div>'
        return (
            '<div class="Qr7Oae"><div class="OxAavc">'
            f'<div class="HoXoMd"><span class="M7eMe">{prompt}</span></div>'
            f'<div class="SG0AAe">{"".join(options)}</div>'
            f"{fb}{extra}"
            "</div></div>"
        )

    @staticmethod
    def page(blocks: Iterable[str], title: Optional[str] = "Quiz A") -> str:
        heading = f'<div class="F9yp7e">{title}</div>' if title is not None else ""
        return (
            "<!DOCTYPE html><html><head><title>Form</title></head><body>"
            f'<div class="RH5hzf">{heading}</div>{"".join(blocks)}'
            "</body></html>"
        )


@pytest.fixture
def form() -> FormBuilder:
    return FormBuilder()


@pytest.fixture
def quiz_a_html(form: FormBuilder) -> str:
    """One correctly answered question, option B correct, with feedback."""
    return form.page([
        form.block(
            "What is 2 + 2?",
            [form.option("3"), form.option("4", indicator="Tama")],
            feedback="<div>Basic addition.</div><br><div>See chapter 1.</div>",
        ),
    ])


@pytest.fixture
def quiz_a_model() -> DocumentModel:
    return DocumentModel(
        title="Quiz A",
        items=[
            QuestionRecord(
                question="What is 2 + 2?",
                answers=[
                    AnswerOption(text="3", is_correct=False),
                    AnswerOption(text="4", is_correct=True),
                ],
                feedback="Basic addition.\nSee chapter 1.",
            ),
        ],
    )


@pytest.fixture
def wrong_answer_model() -> DocumentModel:
    return DocumentModel(
        title="Quiz B",
        items=[
            QuestionRecord(
                question="Capital of France?",
                answers=[
                    AnswerOption(text="Paris", is_correct=True),
                    AnswerOption(text="Lyon", is_correct=False),
                ],
                feedback="Paris has been the capital since 987.",
                is_incorrect=True,
            ),
            QuestionRecord(
                question="Largest planet?",
                answers=[
                    AnswerOption(text="Jupiter", is_correct=True),
                    AnswerOption(text="Mars", is_correct=False),
                ],
            ),
        ],
    )


@pytest.fixture
def empty_model() -> DocumentModel:
    return DocumentModel(title="Empty Quiz", items=[])
