"""
Feedback Normalizer: HTML fragment → clean multi-line plain text.

Whitespace/structure normalization only:
  1. container <div> tags are removed (their text is kept)
  2. <br> becomes a newline
  3. each line is trimmed
  4. runs of blank lines collapse into a single paragraph break ("\\n\\n")
  5. leading/trailing blank lines are dropped, single newlines join lines
"""

import html
import re
from typing import Optional

# ── Pre-compiled regex patterns ──
_RE_DIV_TAG      = re.compile(r'</?div\b[^>]*>', re.IGNORECASE)
_RE_BR_TAG       = re.compile(r'<br\s*/?>', re.IGNORECASE)
_RE_OTHER_TAG    = re.compile(r'<[^>]+>')
_RE_EXTRA_BREAKS = re.compile(r'\n{3,}')
_RE_NBSP         = re.compile(r'[\xa0\t]')


def normalize_feedback(fragment: Optional[str]) -> str:
    """Normalize a feedback HTML fragment; empty/absent input gives ""."""
    if not fragment:
        return ""

    text = _RE_DIV_TAG.sub('', fragment)
    text = _RE_BR_TAG.sub('\n', text)
    # Inline markup (<span>, <b>, links) carries no structure here
    text = _RE_OTHER_TAG.sub('', text)
    text = html.unescape(text)
    text = _RE_NBSP.sub(' ', text)
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = _RE_EXTRA_BREAKS.sub('\n\n', text)

    paragraphs = []
    current = []
    for line in text.split('\n'):
        line = line.strip()
        if line:
            current.append(line)
        elif current:
            paragraphs.append('\n'.join(current))
            current = []
    if current:
        paragraphs.append('\n'.join(current))

    return '\n\n'.join(paragraphs)
