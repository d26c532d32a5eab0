"""
TF-IDF vectorizer.

Fitting builds a vocabulary filtered by document frequency, a sparse
term-frequency matrix and a smoothed IDF vector

    idf[i] = ln((N + smooth) / (df[i] + smooth)) + 1

which stays positive even for terms present in every document. Transforming
multiplies term frequencies by the IDF vector and normalizes each row.

Usage:
    vectorizer = TfidfVectorizer(TfidfConfig(max_features=5000))
    matrix = vectorizer.fit_transform(documents)
    vectorizer.save("model.bin")
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Iterable, Mapping, Sequence

import numpy as np
from scipy import sparse
from sklearn.preprocessing import normalize

from .config import TfidfConfig
from .model import TfidfModel
from .serialization import ModelFormatError, decode_model, encode_model
from .tokenization import Tokenizer, remove_stop_words, simple_tokenize
from .vectorizer import Vectorizer, as_document_list

logger = logging.getLogger(__name__)


class TfidfVectorizer(Vectorizer):
    """
    TF-IDF implementation of the vectorizer contract.

    The fitted state lives in one immutable `TfidfModel` that `fit` and
    `load` replace as a whole, so concurrent `transform` calls on a fitted
    instance are safe. `fit`/`load` must not run concurrently with anything
    else on the same instance.

    Attributes:
        config: Parameters of the current model
        vocabulary: Read-only token -> column index mapping
        idf: Copy of the IDF vector
        stop_words: Tokens removed before counting
    """

    def __init__(
        self,
        config: TfidfConfig | None = None,
        *,
        tokenizer: Tokenizer | None = None,
        stop_words: Iterable[str] | None = None,
    ):
        cfg = config or TfidfConfig()
        self._tokenizer: Tokenizer = tokenizer or simple_tokenize
        self._stop_words = frozenset(stop_words or ())
        self._model = TfidfModel.empty(cfg)

        logger.info(
            f"Created TF-IDF vectorizer: min_df={cfg.min_df}, max_df={cfg.max_df}, "
            f"max_features={cfg.max_features}, normalization={cfg.normalization}, "
            f"binary={cfg.use_binary}, smooth={cfg.smooth}"
        )

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def fit(self, documents: Sequence[str]) -> None:
        docs = as_document_list(documents)
        logger.info(f"Fitting TF-IDF vectorizer, documents: {len(docs)}")

        if not docs:
            logger.warning("Document collection is empty, nothing to fit")
            return

        cfg = self._model.config
        num_documents = len(docs)
        tokenized = self._tokenize_documents(docs)

        doc_freq = document_frequencies(tokenized)
        terms = select_terms(doc_freq, num_documents, cfg)
        vocabulary = {term: i for i, term in enumerate(terms)}

        if not vocabulary:
            logger.warning("Vocabulary is empty after document-frequency filtering")
            idf = np.zeros(0, dtype=np.float32)
        else:
            logger.info(f"Vocabulary size: {len(vocabulary)}")
            tf = term_frequency_matrix(tokenized, vocabulary, cfg.use_binary)
            idf = inverse_document_frequency(tf, num_documents, cfg.smooth)

        self._model = TfidfModel(
            config=cfg,
            num_documents=num_documents,
            feature_names=tuple(terms),
            idf=idf,
        )
        logger.info("TF-IDF vectorizer fitted")

    def transform(self, document: str) -> np.ndarray:
        model = self._model
        if not model.is_fitted:
            logger.warning("Vectorizer is not fitted, returning an empty vector")

        tokens = self._tokenize(document)
        if not tokens:
            logger.warning("Document has no tokens, returning a zero vector")

        return _weigh(model, [tokens])[0]

    def transform_batch(self, documents: Sequence[str]) -> np.ndarray:
        docs = as_document_list(documents)
        model = self._model

        if not docs:
            return np.zeros((0, model.size), dtype=np.float32)
        if not model.is_fitted:
            logger.warning("Vectorizer is not fitted, returning an empty matrix")

        logger.info(f"Transforming documents to TF-IDF matrix, documents: {len(docs)}")

        tokenized = self._tokenize_documents(docs)
        empty = sum(1 for tokens in tokenized if not tokens)
        if empty:
            logger.warning(f"{empty} of {len(docs)} documents have no tokens")

        matrix = _weigh(model, tokenized)
        logger.info(f"TF-IDF transform done, matrix size: {matrix.shape[0]}x{matrix.shape[1]}")
        return matrix

    def get_vocabulary_size(self) -> int:
        return self._model.size

    def get_feature_names(self) -> list[str]:
        return list(self._model.feature_names)

    def save(self, path: str | Path) -> bool:
        try:
            payload = encode_model(self._model, self._stop_words)
            Path(path).write_bytes(payload)
        except (OSError, ModelFormatError) as e:
            logger.error(f"Failed to save TF-IDF model to {path}: {e}")
            return False

        logger.info(f"Saved TF-IDF model to {path}")
        return True

    def load(self, path: str | Path) -> bool:
        try:
            payload = Path(path).read_bytes()
        except OSError as e:
            logger.error(f"Cannot open model file {path}: {e}")
            return False

        try:
            model, stop_words = decode_model(payload)
        except ModelFormatError as e:
            logger.error(f"Failed to load TF-IDF model from {path}: {e}")
            return False

        self._model = model
        self._stop_words = stop_words
        logger.info(f"Loaded TF-IDF model from {path}")
        logger.info(f"Vocabulary size: {model.size}")
        return True

    # ------------------------------------------------------------------
    # Configuration and state
    # ------------------------------------------------------------------

    def set_tokenizer(self, tokenizer: Tokenizer) -> None:
        self._tokenizer = tokenizer

    def set_stop_words(self, stop_words: Iterable[str]) -> None:
        """Replace the whole stop-word set."""
        self._stop_words = frozenset(stop_words)

    @property
    def model(self) -> TfidfModel:
        return self._model

    @property
    def config(self) -> TfidfConfig:
        return self._model.config

    @property
    def vocabulary(self) -> Mapping[str, int]:
        return self._model.vocabulary

    @property
    def idf(self) -> np.ndarray:
        return self._model.idf.copy()

    @property
    def num_documents(self) -> int:
        return self._model.num_documents

    @property
    def is_fitted(self) -> bool:
        return self._model.is_fitted

    @property
    def stop_words(self) -> frozenset[str]:
        return self._stop_words

    def _tokenize(self, document: str) -> list[str]:
        return remove_stop_words(self._tokenizer(document), self._stop_words)

    def _tokenize_documents(self, documents: Sequence[str]) -> list[list[str]]:
        return [self._tokenize(doc) for doc in documents]


def document_frequencies(tokenized: Iterable[Sequence[str]]) -> dict[str, int]:
    """Number of documents containing each token.

    Keys are ordered by first occurrence in the corpus.
    """
    doc_freq: dict[str, int] = {}
    for tokens in tokenized:
        for token in dict.fromkeys(tokens):
            doc_freq[token] = doc_freq.get(token, 0) + 1
    return doc_freq


def within_df_bounds(df: int, num_documents: int, config: TfidfConfig) -> bool:
    if config.min_df > 0:
        if config.min_df < 1.0:
            if df / num_documents < config.min_df:
                return False
        elif df < config.min_df:
            return False

    if config.max_df < 1.0:
        if df / num_documents > config.max_df:
            return False
    elif config.max_df > 1.0 and df > config.max_df:
        return False

    return True


def select_terms(doc_freq: Mapping[str, int], num_documents: int, config: TfidfConfig) -> list[str]:
    """Apply the df bounds and the max_features cap.

    Survivors keep first-occurrence order. When the cap applies the result
    is ordered by df descending, ties broken lexicographically.
    """
    terms = [t for t, df in doc_freq.items() if within_df_bounds(df, num_documents, config)]
    if len(terms) < len(doc_freq):
        logger.info(f"Filtered features by document frequency, from {len(doc_freq)} to {len(terms)}")

    if 0 < config.max_features < len(terms):
        terms = sorted(terms, key=lambda t: (-doc_freq[t], t))[: config.max_features]
        logger.info(f"Kept the {config.max_features} most frequent features")

    return terms


def term_frequency_matrix(
    tokenized: Sequence[Sequence[str]],
    vocabulary: Mapping[str, int],
    use_binary: bool = False,
) -> sparse.csr_matrix:
    """Sparse documents x vocabulary counts, built from coordinate triplets.

    Out-of-vocabulary tokens are skipped.
    """
    rows: list[int] = []
    cols: list[int] = []
    values: list[float] = []

    for row, tokens in enumerate(tokenized):
        counts = Counter(t for t in tokens if t in vocabulary)
        for token, count in counts.items():
            rows.append(row)
            cols.append(vocabulary[token])
            values.append(1.0 if use_binary else float(count))

    coo = sparse.coo_matrix(
        (
            np.asarray(values, dtype=np.float32),
            (np.asarray(rows, dtype=np.int64), np.asarray(cols, dtype=np.int64)),
        ),
        shape=(len(tokenized), len(vocabulary)),
        dtype=np.float32,
    )
    return coo.tocsr()


def inverse_document_frequency(tf: sparse.csr_matrix, num_documents: int, smooth: float) -> np.ndarray:
    """Smoothed IDF, with df taken from the nonzero structure of `tf`."""
    df = np.bincount(tf.indices, minlength=tf.shape[1]).astype(np.float64)
    idf = np.log((num_documents + smooth) / (df + smooth)) + 1.0
    return idf.astype(np.float32)


def _weigh(model: TfidfModel, tokenized: Sequence[Sequence[str]]) -> np.ndarray:
    """Dense, normalized TF-IDF rows for already tokenized documents."""
    if model.size == 0:
        return np.zeros((len(tokenized), 0), dtype=np.float32)

    tf = term_frequency_matrix(tokenized, model.vocabulary, model.config.use_binary)
    weighted = tf.toarray() * model.idf

    if model.config.normalization != "none":
        # Rows summing to zero are left untouched.
        weighted = normalize(weighted, norm=model.config.normalization, copy=False)
    return weighted
