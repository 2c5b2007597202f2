"""
Question Extractor: rendered Google Form (quiz review) HTML → DocumentModel.

Walks every question block in document order. A block without a prompt or
without answer options is dropped silently (decorative/section blocks are
common); only a payload that cannot be parsed at all is fatal.
"""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from quizexport.core.config import settings
from quizexport.core.exceptions import ExtractionError
from quizexport.schemas.document import AnswerOption, DocumentModel, QuestionRecord
from quizexport.services.feedback import normalize_feedback
from quizexport.services.markers import (
    FEEDBACK_INNER_CLASS,
    FEEDBACK_OUTER_CLASS,
    OPTION_SELECTOR,
    PROMPT_SELECTOR,
    QUESTION_CONTAINER_CLASS,
    TITLE_CLASS,
    MarkerResolver,
)

logger = logging.getLogger(__name__)


def _joined_text(tags) -> str:
    return "".join(t.get_text() for t in tags).strip()


class QuestionExtractor:
    """Builds one QuestionRecord per usable question block."""

    def __init__(self, resolver: Optional[MarkerResolver] = None, default_title: Optional[str] = None):
        self.resolver = resolver or MarkerResolver()
        self.default_title = default_title or settings.DEFAULT_FORM_TITLE

    def parse(self, html: str) -> BeautifulSoup:
        if not isinstance(html, str):
            raise ExtractionError("Form page is not text")
        if not html.strip():
            raise ExtractionError("Form page is empty")
        try:
            return BeautifulSoup(html, "html.parser")
        except Exception as e:
            raise ExtractionError(f"Could not parse form page as HTML: {e}") from e

    def extract(self, html: str) -> DocumentModel:
        soup = self.parse(html)

        title = _joined_text(soup.find_all(class_=TITLE_CLASS)) or self.default_title

        blocks = soup.find_all(class_=QUESTION_CONTAINER_CLASS)
        items: List[QuestionRecord] = []
        for block in blocks:
            record = self.extract_block(block)
            if record is not None:
                items.append(record)

        doc = DocumentModel(title=title, items=items)
        logger.info(
            f"Extracted {doc.total}/{len(blocks)} question blocks "
            f"({doc.incorrect_count} marked incorrect) from '{title}'"
        )
        return doc

    def extract_block(self, block: Tag) -> Optional[QuestionRecord]:
        question = _joined_text(block.select(PROMPT_SELECTOR))
        if not question:
            logger.debug("Dropping question block: empty prompt")
            return None

        feedback = self.extract_feedback(block)

        texts: List[str] = []
        flags: List[bool] = []
        for option in block.select(OPTION_SELECTOR):
            texts.append(option.get_text().strip())
            flags.append(self.resolver.is_correct(option))

        if not texts:
            logger.debug(f"Dropping question block '{question[:40]}': no answer options")
            return None

        flags = self.resolver.apply_fallback(block, flags)

        return QuestionRecord(
            question=question,
            answers=[AnswerOption(text=t, is_correct=c) for t, c in zip(texts, flags)],
            feedback=feedback,
            is_incorrect=self.resolver.is_incorrect(block),
        )

    @staticmethod
    def extract_feedback(block: Tag) -> str:
        outer = block.find(class_=FEEDBACK_OUTER_CLASS)
        if outer is None:
            return ""
        inner = outer.find(class_=FEEDBACK_INNER_CLASS)
        if inner is None:
            return ""
        return normalize_feedback(inner.decode_contents())


def extract_document(html: str) -> DocumentModel:
    """Convenience wrapper with the default resolver."""
    return QuestionExtractor().extract(html)
