from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Sequence

import numpy as np

from .config import TfidfConfig


@dataclass(frozen=True, eq=False)
class TfidfModel:
    """
    Fitted state of a TF-IDF vectorizer.

    A model is never mutated: fit and load build a new one and the
    vectorizer swaps it in whole. `vocabulary` and `feature_names` are two
    views of the same bijection between tokens and column indices.
    """

    config: TfidfConfig
    num_documents: int
    feature_names: tuple[str, ...]
    idf: np.ndarray
    vocabulary: Mapping[str, int] = field(init=False, repr=False)

    def __post_init__(self):
        vocabulary = {name: i for i, name in enumerate(self.feature_names)}
        if len(vocabulary) != len(self.feature_names):
            raise ValueError("Feature names must be unique")

        idf = np.array(self.idf, dtype=np.float32).reshape(-1)
        if idf.shape[0] != len(self.feature_names):
            raise ValueError(
                f"IDF length {idf.shape[0]} does not match vocabulary size {len(self.feature_names)}"
            )
        idf.setflags(write=False)

        object.__setattr__(self, "idf", idf)
        object.__setattr__(self, "vocabulary", MappingProxyType(vocabulary))

    @classmethod
    def empty(cls, config: TfidfConfig) -> "TfidfModel":
        return cls(config=config, num_documents=0, feature_names=(), idf=np.zeros(0, dtype=np.float32))

    @classmethod
    def from_vocabulary(
        cls,
        config: TfidfConfig,
        num_documents: int,
        vocabulary: Mapping[str, int],
        idf: Sequence[float] | np.ndarray,
    ) -> "TfidfModel":
        """Build a model from a token -> index mapping.

        Raises ValueError unless the indices are exactly 0..n-1.
        """
        names: list[str | None] = [None] * len(vocabulary)
        for token, index in vocabulary.items():
            if not 0 <= index < len(names) or names[index] is not None:
                raise ValueError(f"Vocabulary index {index} for {token!r} is out of range or repeated")
            names[index] = token
        return cls(config=config, num_documents=num_documents, feature_names=tuple(names), idf=idf)

    @property
    def size(self) -> int:
        return len(self.feature_names)

    @property
    def is_fitted(self) -> bool:
        return self.num_documents > 0
