from __future__ import annotations

import logging
from pathlib import Path

from nltk.corpus import stopwords

logger = logging.getLogger(__name__)


def load_stop_words(path: str | Path) -> frozenset[str]:
    """Read a stop-word list with one word per line (UTF-8)."""

    words = set()
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            word = line.strip()
            if word:
                words.add(word)

    logger.info(f"Loaded {len(words)} stop words from {path}")
    return frozenset(words)


def nltk_stop_words(language: str = "english") -> frozenset[str]:
    """Stop words from the NLTK corpus.

    Raises LookupError when the corpus is missing; run
    `scripts/00_setup_nltk.py` to download it.
    """

    return frozenset(stopwords.words(language))
