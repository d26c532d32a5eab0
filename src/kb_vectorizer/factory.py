from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from .config import TfidfConfig
from .tfidf import TfidfVectorizer
from .vectorizer import Vectorizer

logger = logging.getLogger(__name__)

VectorizerBuilder = Callable[[Mapping[str, Any]], Vectorizer]


def _build_tfidf(params: Mapping[str, Any]) -> Vectorizer:
    return TfidfVectorizer(TfidfConfig.from_params(params))


_REGISTRY: Dict[str, VectorizerBuilder] = {
    "tfidf": _build_tfidf,
}


def register_vectorizer(kind: str, builder: VectorizerBuilder) -> None:
    """Make a vectorizer strategy available to `create_vectorizer`."""
    _REGISTRY[kind] = builder


def available_vectorizers() -> list[str]:
    return sorted(_REGISTRY)


def create_vectorizer(kind: str, params: Mapping[str, Any] | None = None) -> Vectorizer:
    """
    Create a vectorizer by type name.

    Args:
        kind: Registered type name, e.g. "tfidf"
        params: Parameter map; values may be strings such as "0.5" or "true"

    Raises:
        ValueError: If the type is unknown or a parameter is malformed
    """
    logger.info(f"Creating vectorizer of type: {kind}")

    builder = _REGISTRY.get(kind)
    if builder is None:
        logger.error(f"Unsupported vectorizer type: {kind}")
        raise ValueError(
            f"Unsupported vectorizer type: {kind!r} (available: {', '.join(available_vectorizers())})"
        )

    try:
        return builder(params or {})
    except ValueError as e:
        logger.error(f"Failed to create vectorizer: {e}")
        raise
