"""
Text complexity analysis.

Maps free text to one of the closed set of content categories. The
classifier is total: anything it cannot analyze falls back to the default
category instead of raising into the engine.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from loguru import logger

from recall.constants import Category

_WORD_RE = re.compile(r"\w+(?:['’-]\w+)*", re.UNICODE)
_SENTENCE_END_RE = re.compile(r"[.!?…]+(?=\s|$)")


@dataclass(frozen=True)
class AnalysisResult:
    """Classifier verdict with the measurements behind it."""

    category: Category
    word_count: int
    sentence_count: int
    average_word_length: float
    reason: str


class TextComplexityAnalyzer:
    """
    Heuristic length/structure classifier.

    Rules:
    - Empty text -> default category
    - At least ``long_min_words`` words or ``long_min_sentences`` sentences -> LONG
    - At most ``short_max_words`` words in a single sentence -> SHORT
    - Anything else -> MEDIUM
    """

    def __init__(
        self,
        short_max_words: int = 12,
        long_min_words: int = 40,
        long_min_sentences: int = 4,
        default_category: Category = Category.MEDIUM,
    ):
        if short_max_words >= long_min_words:
            raise ValueError("short_max_words must be below long_min_words")
        self.short_max_words = short_max_words
        self.long_min_words = long_min_words
        self.long_min_sentences = long_min_sentences
        self.default_category = Category(default_category)

    def analyze(self, text: str) -> AnalysisResult:
        """
        Measure ``text`` and pick a category.

        Args:
            text: Content to classify

        Returns:
            AnalysisResult (never raises)
        """
        try:
            return self._analyze(text)
        except Exception:
            logger.exception("Text analysis failed; using default category")
            return AnalysisResult(
                category=self.default_category,
                word_count=0,
                sentence_count=0,
                average_word_length=0.0,
                reason="analysis failed",
            )

    def classify(self, text: str) -> Category:
        return self.analyze(text).category

    def _analyze(self, text: str) -> AnalysisResult:
        words = _WORD_RE.findall(text or "")
        if not words:
            return AnalysisResult(self.default_category, 0, 0, 0.0, "no words")

        stripped = text.strip()
        sentences = len(_SENTENCE_END_RE.findall(stripped))
        if not _SENTENCE_END_RE.search(stripped[-1:] + " "):
            sentences += 1  # trailing fragment without punctuation
        sentences = max(1, sentences)

        count = len(words)
        average = sum(len(w) for w in words) / count

        if count >= self.long_min_words:
            category, reason = Category.LONG, f"{count} words"
        elif sentences >= self.long_min_sentences:
            category, reason = Category.LONG, f"{sentences} sentences"
        elif count <= self.short_max_words and sentences == 1:
            category, reason = Category.SHORT, f"{count} words in one sentence"
        else:
            category, reason = Category.MEDIUM, f"{count} words in {sentences} sentences"

        return AnalysisResult(category, count, sentences, round(average, 2), reason)
