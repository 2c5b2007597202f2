"""
Pydantic schemas for the scrape API.

Field aliases keep the camelCase body the web form posts
({"formLink", "fileName", "fileType"}); snake_case is accepted too.
"""

from typing import Optional, Tuple
from pydantic import AnyHttpUrl, BaseModel, ConfigDict, Field

from quizexport.schemas.document import QuestionRecord
from quizexport.services.exporter import ExportFormat


class ScrapeRequest(BaseModel):
    """Fetch a form and render it as PDF or DOCX."""
    model_config = ConfigDict(populate_by_name=True)

    form_link: AnyHttpUrl = Field(alias="formLink")
    file_name: str = Field(alias="fileName", min_length=1, max_length=200)
    file_type: ExportFormat = Field(default=ExportFormat.PDF, alias="fileType")


class PreviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    form_link: AnyHttpUrl = Field(alias="formLink")


class ScrapeResponse(BaseModel):
    """JSON envelope: base64 document on success, message on failure."""
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    data: Optional[str] = None
    file_name: Optional[str] = Field(default=None, alias="fileName")
    error: Optional[str] = None


class PreviewResponse(BaseModel):
    title: str
    items: Tuple[QuestionRecord, ...]
    total: int
    incorrect: int
