from __future__ import annotations

from pathlib import Path
from typing import Sequence

import numpy as np
import pandas as pd


def load_corpus(path: str | Path, text_column: str = "text") -> list[str]:
    """Read documents from a CSV column, or one per line from a text file."""

    path = Path(path)
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path)
        if text_column not in df.columns:
            raise ValueError(f"CSV must have a '{text_column}' column")
        return df[text_column].fillna("").astype(str).tolist()

    with open(path, encoding="utf-8") as fh:
        return [line.strip() for line in fh if line.strip()]


def vectors_to_frame(
    matrix: np.ndarray,
    feature_names: Sequence[str],
    index: Sequence | None = None,
) -> pd.DataFrame:
    matrix = np.atleast_2d(matrix)
    if matrix.shape[1] != len(feature_names):
        raise ValueError(
            f"Matrix has {matrix.shape[1]} columns but {len(feature_names)} feature names were given"
        )
    return pd.DataFrame(matrix, columns=list(feature_names), index=index)
