import json
from typing import Annotated, List, Union
from pydantic import AnyHttpUrl, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


# ─── Fetch defaults ──────────────────────────────────────────

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

MAX_HTML_SIZE_MB: int = 10


def _split_csv(v: Union[str, List[str]]) -> List[str]:
    """Accept a JSON list, a comma-separated string, or an actual list."""
    if isinstance(v, str) and v.strip().startswith("["):
        return json.loads(v)
    if isinstance(v, str):
        return [i.strip() for i in v.split(",") if i.strip()]
    if isinstance(v, list):
        return v
    raise ValueError(v)


class Settings(BaseSettings):
    PROJECT_NAME: str = "Quiz Form Exporter"
    API_V1_STR: str = "/api/v1"

    # FETCH
    FETCH_USER_AGENT: str = DEFAULT_USER_AGENT
    FETCH_TIMEOUT_SECONDS: float = 30.0
    MAX_HTML_SIZE_MB: int = MAX_HTML_SIZE_MB

    # EXTRACTION
    DEFAULT_FORM_TITLE: str = "Form Questions and Answers"
    # Indicator words shown next to a revealed answer, one per supported language.
    CORRECT_ANSWER_SYNONYMS: Annotated[List[str], NoDecode] = ["tama", "correct", "right"]
    INCORRECT_ANSWER_WORDS: Annotated[List[str], NoDecode] = ["mali", "incorrect"]

    # RENDERING
    PDF_PAGE_SIZE: str = "A4"  # "A4" or "LETTER"

    # CORS
    BACKEND_CORS_ORIGINS: Annotated[List[AnyHttpUrl], NoDecode] = []

    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # ENVIRONMENT
    ENV: str = "production"  # "development" or "production"

    @property
    def MAX_HTML_BYTES(self) -> int:
        return self.MAX_HTML_SIZE_MB * 1024 * 1024

    @field_validator("PDF_PAGE_SIZE", mode="after")
    def validate_page_size(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in ("A4", "LETTER"):
            raise ValueError("PDF_PAGE_SIZE must be A4 or LETTER")
        return v

    @field_validator("CORRECT_ANSWER_SYNONYMS", "INCORRECT_ANSWER_WORDS", mode="before")
    def assemble_word_lists(cls, v: Union[str, List[str]]) -> List[str]:
        return [w.strip().lower() for w in _split_csv(v)]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> List[str]:
        return _split_csv(v)

    model_config = SettingsConfigDict(
        case_sensitive=True,
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
