"""
Error taxonomy for the scrape → extract → render pipeline.

Every fatal failure is a QuizExportError carrying a human-readable message and
the HTTP status the API layer reports it with. A malformed question block is
NOT an error: the extractor drops it and carries on.
"""


class QuizExportError(Exception):
    """Base class for fatal, user-visible failures."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SourceUnavailable(QuizExportError):
    """The form page could not be fetched (transport error, HTTP error, too large)."""

    status_code = 502


class ExtractionError(QuizExportError):
    """The payload could not be parsed as an HTML document at all."""

    status_code = 422


class RenderFailure(QuizExportError):
    """A renderer failed while assembling the binary document."""

    status_code = 500


class UnsupportedFormat(QuizExportError):
    status_code = 400
