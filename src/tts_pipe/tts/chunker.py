"""
Text Segmentation for Remote Synthesis.

The remote endpoint rejects long inputs, so job text is cut into chunks of
at most ``max_length`` characters before dispatch.

Strategy (greedy word packing):
    - Split on any whitespace run
    - Append a word to the current chunk while
      ``len(current) + (1 if current else 0) + len(word) <= max_length``
    - Otherwise close the chunk and start a new one with that word
    - A single word longer than ``max_length`` becomes its own chunk

Joining the chunk texts with single spaces gives back the input with its
whitespace normalized.

Example:
    >>> [c.text for c in split_text("hello world foo", 10)]
    ['hello', 'world foo']

Also hosts the input helpers applied before segmentation:
    clean_text(), validate_text(), text_stats().
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List

from tts_pipe.core.config import Defaults
from tts_pipe.core.errors import EmptyInputError, InputTooLongError, InvalidInputError
from tts_pipe.core.logging import get_logger, verbose
from tts_pipe.utils.timeit import timeit

_LOG = get_logger("tts-pipe.chunker")


# =============================================================================
# Regex Patterns
# =============================================================================

_WHITESPACE = re.compile(r"\s+")

# Characters kept by clean_text(): word characters, whitespace and basic
# punctuation. Everything else (emoji, symbols, markup) is dropped.
_DISALLOWED = re.compile(r"[^\w\s.,!?;:'\"()-]")


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Chunk:
    """
    A bounded slice of the job text.

    Attributes:
        index: Position of the chunk in the original text (0-based).
        text: Chunk text, words joined by single spaces.
    """
    index: int
    text: str


@dataclass
class TextStats:
    characters: int
    words: int
    chunks: int
    average_chunk_size: int


# =============================================================================
# Segmentation
# =============================================================================

def split_text(text: str, max_length: int = Defaults.PERF_MAX_CHUNK_LENGTH) -> List[Chunk]:
    """
    Split text into ordered chunks by greedy word packing.

    Args:
        text: Input text.
        max_length: Maximum characters per chunk.

    Returns:
        Chunks with consecutive indices starting at 0.

    Raises:
        EmptyInputError: If text is blank after trimming.
        InvalidInputError: If max_length is not positive.
    """
    if max_length <= 0:
        raise InvalidInputError(
            f"max_length must be positive, got {max_length}",
            details={"max_length": max_length},
        )
    if not text or not text.strip():
        raise EmptyInputError()

    with timeit("split", meta={"chars": len(text)}) as t:
        out: List[str] = []
        current = ""
        for word in text.split():
            sep = 1 if current else 0
            if current and len(current) + sep + len(word) > max_length:
                out.append(current)
                current = word
            elif current:
                current = f"{current} {word}"
            else:
                current = word
        if current:
            out.append(current)

    chunks = [Chunk(index=i, text=part) for i, part in enumerate(out)]
    verbose(
        _LOG,
        "chunked",
        chunks=len(chunks),
        max_length=max_length,
        seconds=round(t.timing.seconds, 4) if t.timing else None,
    )
    return chunks


# =============================================================================
# Input Helpers
# =============================================================================

def clean_text(text: str) -> str:
    """Trim, collapse whitespace runs and drop unsupported characters."""
    collapsed = _WHITESPACE.sub(" ", text.strip())
    return _DISALLOWED.sub("", collapsed)


def validate_text(text: str, max_chars: int = Defaults.PERF_MAX_TEXT_LENGTH) -> None:
    """
    Reject text that cannot become a job.

    Raises:
        EmptyInputError: Blank text.
        InputTooLongError: More than ``max_chars`` characters.
    """
    if not text or not text.strip():
        raise EmptyInputError()
    if len(text) > max_chars:
        raise InputTooLongError(
            f"Text is too long (maximum {max_chars:,} characters)",
            details={"length": len(text), "max_chars": max_chars},
        )


def text_stats(text: str, max_length: int = Defaults.PERF_MAX_CHUNK_LENGTH) -> TextStats:
    """
    Summarize text for dry runs and progress displays.

    Raises:
        EmptyInputError: If text is blank.
    """
    chunks = split_text(text, max_length)
    return TextStats(
        characters=len(text),
        words=len(text.split()),
        chunks=len(chunks),
        average_chunk_size=round(len(text) / len(chunks)),
    )
