"""
Scrape API: Google Form quiz → PDF / DOCX.

Endpoints:
    POST /scrape          - JSON envelope with the base64 document
    POST /scrape/download - Same document as a file attachment
    POST /scrape/preview  - Extracted questions as JSON (no rendering)
"""

import base64
import io
import logging
import re

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from quizexport.schemas.scrape import (
    PreviewRequest, PreviewResponse, ScrapeRequest, ScrapeResponse,
)
from quizexport.services import form_fetcher
from quizexport.services.exporter import RenderedDocument, extract_and_render
from quizexport.services.extractor import QuestionExtractor

logger = logging.getLogger(__name__)

router = APIRouter()


# ─── Helpers ──────────────────────────────────────────────────

def _safe_filename(text: str) -> str:
    """Create safe filename from text."""
    clean = re.sub(r'[^\w\s\-]', '', text)
    clean = re.sub(r'\s+', '_', clean.strip())
    return clean[:60] or "export"


async def _fetch_and_render(req: ScrapeRequest) -> RenderedDocument:
    html = await form_fetcher.fetch(str(req.form_link))
    rendered = extract_and_render(html, req.file_type)
    logger.info(
        f"Exported '{rendered.model.title}' as {rendered.extension}: "
        f"{rendered.model.total} questions, {rendered.model.incorrect_count} incorrect"
    )
    return rendered


# ═══════════════════════════════════════════════════════════════
#  ENDPOINTS
# ═══════════════════════════════════════════════════════════════

@router.post("", response_model=ScrapeResponse, response_model_exclude_none=True)
async def scrape_form(req: ScrapeRequest):
    """Fetch the form, render it, return the file base64-encoded."""
    rendered = await _fetch_and_render(req)
    return ScrapeResponse(
        success=True,
        data=base64.b64encode(rendered.content).decode("ascii"),
        file_name=f"{req.file_name}.{rendered.extension}",
    )


@router.post("/download")
async def download_form(req: ScrapeRequest):
    """Fetch the form and stream the rendered file as an attachment."""
    rendered = await _fetch_and_render(req)
    filename = f"{_safe_filename(req.file_name)}.{rendered.extension}"
    return StreamingResponse(
        io.BytesIO(rendered.content),
        media_type=rendered.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/preview", response_model=PreviewResponse)
async def preview_form(req: PreviewRequest):
    """Extract questions without rendering, for checking what will be exported."""
    html = await form_fetcher.fetch(str(req.form_link))
    model = QuestionExtractor().extract(html)
    logger.info(f"Preview of '{model.title}': {model.total} questions")
    return PreviewResponse(
        title=model.title,
        items=model.items,
        total=model.total,
        incorrect=model.incorrect_count,
    )
