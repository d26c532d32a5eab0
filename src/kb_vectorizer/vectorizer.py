"""
Abstract text-to-vector contract.

Every strategy (TF-IDF, or any embedding-based alternative) implements the
same capability set so callers never depend on a concrete class.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, Sequence, final

import numpy as np


class Vectorizer(ABC):
    """Base class for text vectorizers."""

    @abstractmethod
    def fit(self, documents: Sequence[str]) -> None:
        """Fit on a document collection.

        An empty collection is logged and ignored, never raised.
        """

    @abstractmethod
    def transform(self, document: str) -> np.ndarray:
        """Vector of length `get_vocabulary_size()` for one document."""

    @abstractmethod
    def transform_batch(self, documents: Sequence[str]) -> np.ndarray:
        """Matrix with one row per document and one column per feature."""

    @final
    def fit_transform(self, documents: Iterable[str]) -> np.ndarray:
        """Fit, then transform the same documents.

        Shared by every strategy so the result is always exactly
        `fit(X)` followed by `transform_batch(X)`.
        """
        docs = as_document_list(documents)
        self.fit(docs)
        return self.transform_batch(docs)

    @abstractmethod
    def get_vocabulary_size(self) -> int:
        ...

    @abstractmethod
    def get_feature_names(self) -> list[str]:
        """Feature names in vector/matrix column order."""

    @abstractmethod
    def save(self, path: str | Path) -> bool:
        ...

    @abstractmethod
    def load(self, path: str | Path) -> bool:
        """Restore a saved model; on failure return False and keep current state."""


def as_document_list(documents: Iterable[str]) -> list[str]:
    if isinstance(documents, str):
        raise TypeError("Iterable over raw text documents expected, string object received")
    return list(documents)
