"""
Word count and reading time for the selected main text.
"""

from __future__ import annotations

from dataclasses import dataclass

DEFAULT_WORDS_PER_MINUTE = 200


@dataclass(slots=True, frozen=True)
class ContentMetrics:
    word_count: int = 0
    reading_time: int = 1


def count_words(text: str) -> int:
    """Number of whitespace-delimited, non-empty tokens."""
    return len(text.split()) if text else 0


def reading_time(word_count: int, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> int:
    """Whole minutes to read ``word_count`` words, rounded down, never below 1."""
    if words_per_minute < 1:
        raise ValueError("words_per_minute must be at least 1")
    return max(1, word_count // words_per_minute)


def calculate_metrics(main_text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> ContentMetrics:
    words = count_words(main_text)
    return ContentMetrics(word_count=words, reading_time=reading_time(words, words_per_minute))
