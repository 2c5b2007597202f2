"""
DOCX Renderer: DocumentModel → Word document (python-docx).

Word has paragraphs and runs, not a cursor, so there is no "current color" to
carry over. Instead every run is written with a complete RunStyle: bold,
italic, color and size are always set explicitly.
"""

import io
import logging
from dataclasses import dataclass

from docx import Document as DocxDocument
from docx.enum.text import WD_ALIGN_PARAGRAPH
from docx.shared import Cm, Pt, RGBColor

from quizexport.schemas.document import DocumentModel, QuestionRecord
from quizexport.services.styling import (
    BODY_SIZE,
    CORRECT_COLOR,
    DEFAULT_COLOR,
    FEEDBACK_LABEL,
    QUESTION_LABEL_SIZE,
    TITLE_SIZE,
    WARNING_COLOR,
    answer_line,
    question_label,
    sanitize_for_xml,
    summary_lines,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunStyle:
    bold: bool
    italic: bool
    color: str
    size: float


BODY = RunStyle(bold=False, italic=False, color=DEFAULT_COLOR, size=BODY_SIZE)
TITLE = RunStyle(bold=True, italic=False, color=DEFAULT_COLOR, size=TITLE_SIZE)
LABEL = RunStyle(bold=True, italic=False, color=DEFAULT_COLOR, size=QUESTION_LABEL_SIZE)
LABEL_WARNING = RunStyle(bold=True, italic=False, color=WARNING_COLOR, size=QUESTION_LABEL_SIZE)
BODY_WARNING = RunStyle(bold=False, italic=False, color=WARNING_COLOR, size=BODY_SIZE)
ANSWER_CORRECT = RunStyle(bold=True, italic=False, color=CORRECT_COLOR, size=BODY_SIZE)
FEEDBACK_HEADING = RunStyle(bold=True, italic=True, color=DEFAULT_COLOR, size=BODY_SIZE)
FEEDBACK = RunStyle(bold=False, italic=True, color=DEFAULT_COLOR, size=BODY_SIZE)
SUMMARY = RunStyle(bold=True, italic=False, color=DEFAULT_COLOR, size=BODY_SIZE)
SUMMARY_WARNING = RunStyle(bold=True, italic=False, color=WARNING_COLOR, size=BODY_SIZE)


def _add_run(paragraph, text: str, style: RunStyle):
    run = paragraph.add_run(sanitize_for_xml(text))
    run.font.bold = style.bold
    run.font.italic = style.italic
    run.font.size = Pt(style.size)
    run.font.color.rgb = RGBColor.from_string(style.color)
    return run


class DocxRenderer:
    media_type = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
    extension = "docx"

    def _new_document(self):
        doc = DocxDocument()

        # ── Page setup (A4) ──
        section = doc.sections[0]
        section.page_width = Cm(21)
        section.page_height = Cm(29.7)
        section.top_margin = Cm(2)
        section.bottom_margin = Cm(2)
        section.left_margin = Cm(2.5)
        section.right_margin = Cm(2)

        style = doc.styles["Normal"]
        style.font.name = "Times New Roman"
        style.font.size = Pt(BODY_SIZE)
        style.paragraph_format.space_after = Pt(4)
        return doc

    def _write_question(self, doc, number: int, item: QuestionRecord):
        # Question header: "Question 1:" (+ wrong-answer marker)
        p_q = doc.add_heading(level=2)
        p_q.paragraph_format.space_before = Pt(20)
        p_q.paragraph_format.space_after = Pt(10)
        p_q.paragraph_format.keep_with_next = True
        _add_run(
            p_q,
            question_label(number, item.is_incorrect),
            LABEL_WARNING if item.is_incorrect else LABEL,
        )

        p_body = doc.add_paragraph()
        p_body.paragraph_format.space_after = Pt(10)
        _add_run(p_body, item.question, BODY_WARNING if item.is_incorrect else BODY)

        for index, answer in enumerate(item.answers):
            p_ans = doc.add_paragraph()
            p_ans.paragraph_format.left_indent = Cm(0.5)
            p_ans.paragraph_format.space_after = Pt(5)
            _add_run(
                p_ans,
                answer_line(index, answer.text),
                ANSWER_CORRECT if answer.is_correct else BODY,
            )

        if item.feedback:
            p_fb = doc.add_heading(level=3)
            p_fb.paragraph_format.space_before = Pt(10)
            p_fb.paragraph_format.space_after = Pt(10)
            _add_run(p_fb, FEEDBACK_LABEL, FEEDBACK_HEADING)

            for line in item.feedback.split("\n"):
                line = line.strip()
                if not line:
                    continue
                p_line = doc.add_paragraph()
                p_line.paragraph_format.space_after = Pt(5)
                _add_run(p_line, line, FEEDBACK)

    def build(self, model: DocumentModel):
        """Build the python-docx Document (not yet serialized)."""
        doc = self._new_document()

        p_title = doc.add_heading(level=1)
        p_title.alignment = WD_ALIGN_PARAGRAPH.CENTER
        p_title.paragraph_format.space_after = Pt(20)
        _add_run(p_title, model.title, TITLE)

        for number, item in enumerate(model.items, 1):
            self._write_question(doc, number, item)

        for i, line in enumerate(summary_lines(model)):
            p_sum = doc.add_paragraph()
            if i == 0:
                p_sum.paragraph_format.space_before = Pt(20)
            _add_run(p_sum, line, SUMMARY if i == 0 else SUMMARY_WARNING)

        return doc

    def render(self, model: DocumentModel) -> bytes:
        buf = io.BytesIO()
        self.build(model).save(buf)
        content = buf.getvalue()
        logger.info(f"Rendered DOCX: {model.total} questions, {len(content)} bytes")
        return content
