"""
Marker Resolver: decides answer correctness and question wrongness from the
reveal-answer markup of a submitted Google Form.

The form's class names are obfuscated, versioned and localized, so no single
signal is reliable. Correctness is resolved by an ordered list of detectors,
each a pure function (option, context) → Optional[bool]; the first definite
answer wins and an all-inconclusive chain means "not correct".

    1. textual indicator - indicator text equals an affirmative synonym
    2. visual indicator  - choice container holds a positive-marker icon
    3. styling emphasis  - option's styling wrapper has the emphasis class

When a whole question comes out with zero correct options, a positional
fallback maps positive-marker icons back to answer indexes via the ordinal
position of their choice container.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from bs4 import Tag

from quizexport.core.config import settings

logger = logging.getLogger(__name__)


# ── Form markup identifiers ──
QUESTION_CONTAINER_CLASS = "OxAavc"
TITLE_CLASS              = "F9yp7e"
PROMPT_SELECTOR          = "span.M7eMe"
OPTION_SELECTOR          = ".aDTYNe.snByac"
FEEDBACK_OUTER_CLASS     = "PcXV5e"
FEEDBACK_INNER_CLASS     = "sIQxvc"

CHOICE_CONTAINER_CLASSES: Tuple[str, ...] = ("yUJIWb", "nWQGrd")
INDICATOR_CLASS                           = "fKfAyc"
# Checkmark / "correct" badge icons across product revisions
POSITIVE_MARKER_CLASSES: Tuple[str, ...]  = ("fgyVMd", "D42QGf", "vXDlac")
EMPHASIS_CLASS                            = "IqbSqf"
# Wrong-answer badge that also appears on neutral rows; needs a negative word
WRONG_ANSWER_CLASS                        = "RbaFfe"
# Wrong-answer classes that are sufficient on their own
WRONG_ANSWER_EXTRA_CLASSES: Tuple[str, ...] = ("qCjEgb", "E7C6Jf")


def class_selector(classes: Iterable[str]) -> str:
    """CSS selector list matching any of `classes`: ".a, .b"."""
    return ", ".join(f".{c}" for c in classes)


def has_class(tag: Tag, name: str) -> bool:
    return name in (tag.get("class") or [])


def closest(tag: Tag, classes: Sequence[str]) -> Optional[Tag]:
    """Nearest ancestor (excluding `tag`) carrying any of `classes`."""
    for parent in tag.parents:
        if not isinstance(parent, Tag):
            continue
        if any(has_class(parent, c) for c in classes):
            return parent
    return None


@dataclass(frozen=True)
class OptionContext:
    """What the per-option detectors may look at besides the option itself."""
    container: Optional[Tag]
    synonyms: Tuple[str, ...]


Detector = Callable[[Tag, OptionContext], Optional[bool]]


def detect_textual_indicator(option: Tag, ctx: OptionContext) -> Optional[bool]:
    if ctx.container is None:
        return None
    indicators = ctx.container.find_all(class_=INDICATOR_CLASS)
    if not indicators:
        return None
    text = "".join(el.get_text() for el in indicators).strip().lower()
    return True if text in ctx.synonyms else None


def detect_visual_indicator(option: Tag, ctx: OptionContext) -> Optional[bool]:
    if ctx.container is None:
        return None
    marker = ctx.container.select_one(class_selector(POSITIVE_MARKER_CLASSES))
    return True if marker is not None else None


def detect_styling_emphasis(option: Tag, ctx: OptionContext) -> Optional[bool]:
    wrapper = option.parent
    if isinstance(wrapper, Tag) and has_class(wrapper, EMPHASIS_CLASS):
        return True
    return None


DEFAULT_DETECTORS: Tuple[Detector, ...] = (
    detect_textual_indicator,
    detect_visual_indicator,
    detect_styling_emphasis,
)


@dataclass
class MarkerResolver:
    """Tiered correctness / wrongness detection for one form page."""
    synonyms: Tuple[str, ...] = field(
        default_factory=lambda: tuple(settings.CORRECT_ANSWER_SYNONYMS)
    )
    negative_words: Tuple[str, ...] = field(
        default_factory=lambda: tuple(settings.INCORRECT_ANSWER_WORDS)
    )
    detectors: Tuple[Detector, ...] = DEFAULT_DETECTORS

    def __post_init__(self):
        self.synonyms = tuple(s.strip().lower() for s in self.synonyms)
        words = [re.escape(w.strip()) for w in self.negative_words if w.strip()]
        self._negative_re = (
            re.compile(r'\b(?:' + '|'.join(words) + r')\b', re.IGNORECASE)
            if words else None
        )

    # ── Per-option pass ──

    def is_correct(self, option: Tag) -> bool:
        ctx = OptionContext(
            container=closest(option, CHOICE_CONTAINER_CLASSES),
            synonyms=self.synonyms,
        )
        for detector in self.detectors:
            verdict = detector(option, ctx)
            if verdict is not None:
                return verdict
        return False

    # ── Question-scoped fallback ──

    def fallback_positions(self, block: Tag) -> List[int]:
        """Ordinal positions of choice containers holding a positive marker."""
        positions = []
        for marker in block.select(class_selector(POSITIVE_MARKER_CLASSES)):
            container = closest(marker, CHOICE_CONTAINER_CLASSES)
            if container is None or container.parent is None:
                continue
            siblings = [
                s for s in container.parent.find_all(True, recursive=False)
                if any(has_class(s, c) for c in CHOICE_CONTAINER_CLASSES)
            ]
            for idx, sibling in enumerate(siblings):
                # identity, not Tag.__eq__ (which compares markup)
                if sibling is container:
                    if idx not in positions:
                        positions.append(idx)
                    break
        return positions

    def apply_fallback(self, block: Tag, correct_flags: List[bool]) -> List[bool]:
        """Flip flags by marker position when the primary pass found nothing."""
        if not correct_flags or any(correct_flags):
            return correct_flags
        flags = list(correct_flags)
        for idx in self.fallback_positions(block):
            if 0 <= idx < len(flags):
                flags[idx] = True
                logger.debug(f"Positional fallback marked option {idx} correct")
        return flags

    # ── Question wrongness ──

    def is_incorrect(self, block: Tag) -> bool:
        if block.select_one(class_selector(WRONG_ANSWER_EXTRA_CLASSES)) is not None:
            return True
        if block.select_one(f".{WRONG_ANSWER_CLASS}") is None:
            return False
        return bool(self._negative_re and self._negative_re.search(str(block)))
