from __future__ import annotations

import re
import string
from dataclasses import dataclass
from functools import partial
from typing import Callable, Iterable

import regex  # type: ignore


Tokenizer = Callable[[str], list[str]]

_ASCII_PUNCT_RE = re.compile(f"[{re.escape(string.punctuation)}]+")
_UNICODE_PUNCT_RE = regex.compile(r"[\p{P}\p{S}]+")
_ASCII_SPACE_RE = re.compile(r"[ \t\n\v\f\r]+")
_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


@dataclass(frozen=True)
class TokenizerConfig:
    """
    Options of the default tokenizer.

    By default only ASCII whitespace separates tokens and only ASCII letters
    are lowercased, which keeps tokens identical to those stored in models
    written by earlier releases. `unicode_case` splits on any Unicode
    whitespace and lowercases every cased character instead.
    """

    lowercase: bool = True
    unicode_punctuation: bool = False
    unicode_case: bool = False


def simple_tokenize(text: str, config: TokenizerConfig | None = None) -> list[str]:
    """Whitespace tokenization with lowercasing and punctuation stripping.

    Punctuation is removed from inside tokens too ("don't" -> "dont"), and
    tokens left empty are dropped.
    """

    cfg = config or TokenizerConfig()
    punct_re = _UNICODE_PUNCT_RE if cfg.unicode_punctuation else _ASCII_PUNCT_RE
    pieces = text.split() if cfg.unicode_case else _ASCII_SPACE_RE.split(text)

    tokens: list[str] = []
    for raw in pieces:
        tok = raw
        if cfg.lowercase:
            tok = tok.lower() if cfg.unicode_case else tok.translate(_ASCII_LOWER)
        tok = punct_re.sub("", tok)
        if tok:
            tokens.append(tok)
    return tokens


def make_tokenizer(config: TokenizerConfig | None = None) -> Tokenizer:
    return partial(simple_tokenize, config=config or TokenizerConfig())


def remove_stop_words(tokens: Iterable[str], stop_words: frozenset[str] | set[str]) -> list[str]:
    if not stop_words:
        return list(tokens)
    return [t for t in tokens if t not in stop_words]
