"""
Styling rules shared by the PDF and DOCX renderers.

Both formats label, color and summarize questions identically; only the way
the style is applied differs (content-stream state vs. per-run attributes).
"""

import re
import string
from typing import List

from quizexport.schemas.document import DocumentModel

# ── Colors (hex RGB, no leading '#') ──
DEFAULT_COLOR = "000000"
CORRECT_COLOR = "2E7D32"
WARNING_COLOR = "C62828"

WRONG_ANSWER_MARKER = "[WRONG ANSWER]"
FEEDBACK_LABEL = "Feedback:"

# ── Sizes (pt) ──
TITLE_SIZE = 24
QUESTION_LABEL_SIZE = 14
BODY_SIZE = 12

# Everything outside the XML 1.0 Char production, incl. U+FFFE/U+FFFF and lone surrogates
_RE_XML_INVALID = re.compile(r'[^\x09\x0a\x0d\x20-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]')


def sanitize_for_xml(text: str) -> str:
    """Remove characters that are invalid in XML (python-docx and reportlab both choke).

    XML 1.0 allows: #x9 | #xA | #xD | [#x20-#xD7FF] | [#xE000-#xFFFD] | [#x10000-#x10FFFF]
    """
    if not text:
        return ""
    return _RE_XML_INVALID.sub('', text)


def option_letter(index: int) -> str:
    """0 → A, 1 → B, … 25 → Z, then AA, AB, … like spreadsheet columns."""
    if index < 0:
        raise ValueError(f"Option index must be non-negative, got {index}")
    letters = ""
    n = index + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = string.ascii_uppercase[rem] + letters
    return letters


def question_label(number: int, is_incorrect: bool) -> str:
    label = f"Question {number}:"
    if is_incorrect:
        label += f" {WRONG_ANSWER_MARKER}"
    return label


def answer_line(index: int, text: str) -> str:
    return f"{option_letter(index)}. {text}"


def summary_lines(doc: DocumentModel) -> List[str]:
    """Trailing summary; the second line only when something was answered wrong."""
    lines = [f"Total Questions: {doc.total}"]
    if doc.incorrect_count:
        lines.append(f"Incorrect Answers: {doc.incorrect_count}")
    return lines
