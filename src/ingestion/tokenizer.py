"""Tokenizer, stop-word source and content-word filter.

The stop-word set is process-wide and read-only once loaded. It is either
installed explicitly at startup with :func:`init_stop_words` or loaded lazily,
once, from ``settings.stop_words_path`` on first use.
"""

from __future__ import annotations

import logging
import re
import threading
from collections.abc import Iterable, Iterator
from pathlib import Path

from src.errors import MissingStopWordFileError

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(r"[A-Za-z0-9'_-]+")
MIN_CONTENT_WORD_LENGTH = 3

_stop_words: frozenset[str] | None = None
_stop_words_lock = threading.Lock()


class Tokens:
    """Lazy, restartable token sequence over a piece of text.

    Every iteration rescans the text, so the same ``Tokens`` can be consumed
    more than once.
    """

    __slots__ = ("text",)

    def __init__(self, text: str) -> None:
        self.text = text

    def __iter__(self) -> Iterator[str]:
        return (m.group(0).lower() for m in TOKEN_RE.finditer(self.text))

    def __repr__(self) -> str:
        return f"Tokens({self.text!r})"


def tokenize(text: str) -> Tokens:
    """Split *text* on runs of ASCII letters, digits, ``'``, ``_`` and ``-``; lowercase each."""
    return Tokens(text)


def load_stop_words(path: str | Path) -> frozenset[str]:
    """Read a newline-delimited stop-word file.

    Raises:
        MissingStopWordFileError: If *path* does not exist or cannot be read.
    """
    try:
        with open(path, encoding="utf-8") as f:
            words = frozenset(line.strip().lower() for line in f if line.strip())
    except OSError as exc:
        raise MissingStopWordFileError(str(path)) from exc
    logger.info("Loaded %d stop words from %s", len(words), path)
    return words


def init_stop_words(source: str | Path | Iterable[str]) -> frozenset[str]:
    """Install the process-wide stop-word set from a path or an iterable of words."""
    global _stop_words
    if isinstance(source, (str, Path)):
        words = load_stop_words(source)
    else:
        words = frozenset(w.lower() for w in source)
    with _stop_words_lock:
        _stop_words = words
    return words


def get_stop_words() -> frozenset[str]:
    """Return the stop-word set, loading it from settings on first use."""
    global _stop_words
    if _stop_words is None:
        with _stop_words_lock:
            if _stop_words is None:
                from src.config import settings

                _stop_words = load_stop_words(settings.stop_words_path)
    return _stop_words


def is_stop_word(token: str) -> bool:
    return token in get_stop_words()


def is_content_word(token: str) -> bool:
    """True for tokens longer than two characters that are not stop words."""
    return len(token) >= MIN_CONTENT_WORD_LENGTH and not is_stop_word(token)
