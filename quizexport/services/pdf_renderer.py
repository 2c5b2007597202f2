"""
PDF Renderer: DocumentModel → paginated PDF (reportlab platypus).

Layout flows top-to-bottom; page breaks are left to SimpleDocTemplate.
Font/size/color live in an explicit PdfStyleState passed from paragraph to
paragraph. The state is reset in exactly two places: before a question starts
and before its feedback block.
"""

import io
import logging
from dataclasses import dataclass, replace
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_LEFT
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import Flowable, Paragraph, SimpleDocTemplate, Spacer

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

# Standard PDF fonts, no font files needed
REGULAR_FONT = "Times-Roman"
BOLD_FONT = "Times-Bold"
ITALIC_FONT = "Times-Italic"

PAGE_SIZES = {"A4": A4, "LETTER": LETTER}


@dataclass(frozen=True)
class PdfStyleState:
    """Current text style of the content stream."""
    font: str = REGULAR_FONT
    size: float = BODY_SIZE
    color: str = DEFAULT_COLOR

    def with_(self, **changes) -> "PdfStyleState":
        return replace(self, **changes)

    def reset(self) -> "PdfStyleState":
        return PdfStyleState()


class PdfRenderer:
    media_type = "application/pdf"
    extension = "pdf"

    def __init__(self, page_size: str = "A4"):
        try:
            self.page_size = PAGE_SIZES[page_size.upper()]
        except KeyError:
            raise ValueError(f"Unknown page size: {page_size}")

    # ── Paragraph factory ──

    def _para(
        self,
        text: str,
        state: PdfStyleState,
        *,
        align: int = TA_LEFT,
        space_before: float = 0,
        space_after: float = 6,
        indent: float = 0,
    ) -> Paragraph:
        style = ParagraphStyle(
            name=f"{state.font}-{state.size}-{state.color}",
            fontName=state.font,
            fontSize=state.size,
            leading=state.size * 1.25,
            textColor=colors.HexColor(f"#{state.color}"),
            alignment=align,
            spaceBefore=space_before,
            spaceAfter=space_after,
            leftIndent=indent,
        )
        return Paragraph(escape(sanitize_for_xml(text)), style)

    # ── Story ──

    def build_story(self, doc: DocumentModel) -> List[Flowable]:
        story: List[Flowable] = []
        state = PdfStyleState()

        story.append(self._para(
            doc.title, state.with_(font=BOLD_FONT, size=TITLE_SIZE),
            align=TA_CENTER, space_after=TITLE_SIZE,
        ))

        for number, item in enumerate(doc.items, 1):
            state = self._render_question(story, number, item, state.reset())

        state = state.reset().with_(font=BOLD_FONT)
        for i, line in enumerate(summary_lines(doc)):
            line_state = state if i == 0 else state.with_(color=WARNING_COLOR)
            story.append(self._para(line, line_state, space_before=12 if i == 0 else 0))

        return story

    def _render_question(
        self, story: List[Flowable], number: int, item: QuestionRecord, state: PdfStyleState
    ) -> PdfStyleState:
        if item.is_incorrect:
            state = state.with_(color=WARNING_COLOR)

        story.append(self._para(
            question_label(number, item.is_incorrect),
            state.with_(font=BOLD_FONT, size=QUESTION_LABEL_SIZE),
            space_before=14,
        ))
        story.append(self._para(item.question, state, space_after=10))

        base = state.with_(color=DEFAULT_COLOR)
        for index, answer in enumerate(item.answers):
            answer_state = (
                base.with_(font=BOLD_FONT, color=CORRECT_COLOR) if answer.is_correct else base
            )
            story.append(self._para(answer_line(index, answer.text), answer_state, indent=0.5 * cm))

        if item.feedback:
            state = state.reset().with_(font=ITALIC_FONT)
            story.append(self._para(FEEDBACK_LABEL, state, space_before=6))
            for line in item.feedback.split("\n"):
                if line.strip():
                    story.append(self._para(line.strip(), state, space_after=3))
                else:
                    story.append(Spacer(1, BODY_SIZE * 0.5))

        return state

    def render(self, doc: DocumentModel) -> bytes:
        buf = io.BytesIO()
        pdf = SimpleDocTemplate(
            buf,
            pagesize=self.page_size,
            title=sanitize_for_xml(doc.title),
            leftMargin=2.5 * cm,
            rightMargin=2 * cm,
            topMargin=2 * cm,
            bottomMargin=2 * cm,
        )
        pdf.build(self.build_story(doc))
        content = buf.getvalue()
        logger.info(f"Rendered PDF: {doc.total} questions, {len(content)} bytes")
        return content
