"""
Export Service: raw form HTML → PDF / DOCX bytes.

    extract_and_render(html, fmt)
        HTML ──QuestionExtractor──▶ DocumentModel ──(PdfRenderer | DocxRenderer)──▶ bytes

One synchronous pass per request; the model is built, rendered once and dropped.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from quizexport.core.config import settings
from quizexport.core.exceptions import RenderFailure, UnsupportedFormat
from quizexport.schemas.document import DocumentModel
from quizexport.services.docx_renderer import DocxRenderer
from quizexport.services.extractor import QuestionExtractor
from quizexport.services.pdf_renderer import PdfRenderer

logger = logging.getLogger(__name__)


class ExportFormat(str, Enum):
    PDF = "pdf"
    DOCX = "docx"

    @classmethod
    def parse(cls, value: Union["ExportFormat", str]) -> "ExportFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise UnsupportedFormat(
                f"Unsupported file type '{value}'. Allowed: {', '.join(f.value for f in cls)}"
            )


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    media_type: str
    extension: str
    model: DocumentModel


def get_renderer(fmt: ExportFormat, page_size: Optional[str] = None):
    if fmt is ExportFormat.PDF:
        return PdfRenderer(page_size or settings.PDF_PAGE_SIZE)
    return DocxRenderer()


def render_document(
    model: DocumentModel,
    fmt: Union[ExportFormat, str],
    *,
    page_size: Optional[str] = None,
) -> RenderedDocument:
    fmt = ExportFormat.parse(fmt)
    renderer = get_renderer(fmt, page_size)
    try:
        content = renderer.render(model)
    except Exception as e:
        logger.exception(f"{fmt.value.upper()} rendering failed")
        raise RenderFailure(f"Failed to generate {fmt.value.upper()} document: {e}") from e
    return RenderedDocument(
        content=content,
        media_type=renderer.media_type,
        extension=renderer.extension,
        model=model,
    )


def extract_and_render(
    html: str,
    fmt: Union[ExportFormat, str],
    *,
    page_size: Optional[str] = None,
    extractor: Optional[QuestionExtractor] = None,
) -> RenderedDocument:
    """Extract the quiz from `html` and render it as `fmt` ("pdf" or "docx")."""
    fmt = ExportFormat.parse(fmt)
    model = (extractor or QuestionExtractor()).extract(html)
    return render_document(model, fmt, page_size=page_size)
