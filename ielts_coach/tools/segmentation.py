"""Sentence segmentation for flashcard context."""
import re
from typing import Protocol

from ielts_coach.tools.errors import InvalidSelection

MAX_SELECTION_WORDS = 3


class SentenceSegmenter(Protocol):
    def segments(self, text: str) -> list[str]: ...


class RegexSentenceSegmenter:
    """
    Split on terminal punctuation (., ! or ?).

    A sentence is a run of non-terminal characters followed by one or more
    terminators. Text with no terminator at all is returned whole as a
    single sentence.
    """

    SENTENCE_RE = re.compile(r"[^.!?]+[.!?]+")

    def segments(self, text: str) -> list[str]:
        sentences = self.SENTENCE_RE.findall(text)
        return sentences or [text]


def find_context_sentence(text: str, span: str, segmenter: SentenceSegmenter | None = None) -> str:
    """Return the first sentence of `text` containing `span`, else `span` itself."""
    segmenter = segmenter or RegexSentenceSegmenter()
    for sentence in segmenter.segments(text):
        if span in sentence:
            return sentence.strip()
    return span.strip()


def validate_selection(span: str) -> str:
    """Trim a selected span and check it is 1-3 words long."""
    text = span.strip()
    if not text:
        raise InvalidSelection("Selection is empty")
    if len(text.split()) > MAX_SELECTION_WORDS:
        raise InvalidSelection(f"Selection is longer than {MAX_SELECTION_WORDS} words: {text!r}")
    return text
