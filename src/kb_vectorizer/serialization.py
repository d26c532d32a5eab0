"""
Binary persistence for fitted TF-IDF models.

All integers are little-endian. A versioned file is

    magic  b"KBTFIDF\\0"
    u32    format version
    body

and the body, which is also the complete content of a legacy (headerless)
file, is

    f32 min_df, f32 max_df, u64 max_features,
    u64 len + bytes normalization,
    u8  use_binary, f32 smooth, u64 num_documents,
    u64 vocabulary size, then per entry: u64 len + bytes token, u64 index
    u64 idf length, then that many f32 values
    u64 stop-word count, then per word: u64 len + bytes word

Strings are UTF-8. Vocabulary entries are written in index order and stop
words in sorted order, so equal models encode to equal bytes.
"""

from __future__ import annotations

import struct
from typing import Iterable

import numpy as np

from .config import TfidfConfig
from .model import TfidfModel


MAGIC = b"KBTFIDF\x00"
FORMAT_VERSION = 1

_U8 = struct.Struct("<B")
_U32 = struct.Struct("<I")
_U64 = struct.Struct("<Q")
_F32 = struct.Struct("<f")

# Smallest possible encoding of one vocabulary entry: empty token + index.
_MIN_VOCAB_ENTRY = 2 * _U64.size


class ModelFormatError(ValueError):
    """Raised when a persisted model cannot be decoded."""


def encode_model(model: TfidfModel, stop_words: Iterable[str] = (), *, legacy: bool = False) -> bytes:
    """Serialize a model and its stop words.

    With `legacy=True` the header is omitted and the output matches the
    layout written by earlier headerless releases.
    """
    try:
        return b"".join(_encode_parts(model, stop_words, legacy))
    except (struct.error, OverflowError) as e:
        raise ModelFormatError(f"Model cannot be encoded: {e}") from e


def _encode_parts(model: TfidfModel, stop_words: Iterable[str], legacy: bool) -> list[bytes]:
    cfg = model.config
    parts: list[bytes] = []

    if not legacy:
        parts.append(MAGIC)
        parts.append(_U32.pack(FORMAT_VERSION))

    parts.append(_F32.pack(cfg.min_df))
    parts.append(_F32.pack(cfg.max_df))
    parts.append(_U64.pack(cfg.max_features))
    parts.append(_pack_str(cfg.normalization))
    parts.append(_U8.pack(1 if cfg.use_binary else 0))
    parts.append(_F32.pack(cfg.smooth))
    parts.append(_U64.pack(model.num_documents))

    parts.append(_U64.pack(model.size))
    for index, token in enumerate(model.feature_names):
        parts.append(_pack_str(token))
        parts.append(_U64.pack(index))

    parts.append(_U64.pack(model.size))
    parts.append(model.idf.astype("<f4").tobytes())

    words = sorted(stop_words)
    parts.append(_U64.pack(len(words)))
    for word in words:
        parts.append(_pack_str(word))

    return parts


def decode_model(payload: bytes) -> tuple[TfidfModel, frozenset[str]]:
    """Parse a persisted model.

    Nothing is returned unless the whole payload is consistent.

    Raises:
        ModelFormatError: On truncation, inconsistent length prefixes,
            bad UTF-8, an invalid vocabulary or trailing bytes
    """
    reader = _Reader(payload)

    if payload.startswith(MAGIC):
        reader.take(len(MAGIC))
        version = reader.unpack(_U32)
        if version != FORMAT_VERSION:
            raise ModelFormatError(f"Unsupported model format version {version}")

    min_df = reader.unpack(_F32)
    max_df = reader.unpack(_F32)
    max_features = reader.unpack(_U64)
    normalization = reader.string()
    use_binary = reader.unpack(_U8)
    if use_binary not in (0, 1):
        raise ModelFormatError(f"Invalid boolean byte {use_binary}")
    smooth = reader.unpack(_F32)
    num_documents = reader.unpack(_U64)

    try:
        config = TfidfConfig(
            min_df=min_df,
            max_df=max_df,
            max_features=max_features,
            normalization=normalization,
            use_binary=bool(use_binary),
            smooth=smooth,
        )
    except ValueError as e:
        raise ModelFormatError(f"Invalid stored configuration: {e}") from e

    vocab_size = reader.count(_MIN_VOCAB_ENTRY)
    vocabulary: dict[str, int] = {}
    for _ in range(vocab_size):
        token = reader.string()
        index = reader.unpack(_U64)
        if token in vocabulary:
            raise ModelFormatError(f"Duplicate vocabulary token {token!r}")
        vocabulary[token] = index

    idf_size = reader.count(_F32.size)
    if idf_size != vocab_size:
        raise ModelFormatError(f"IDF length {idf_size} does not match vocabulary size {vocab_size}")
    idf_bytes = reader.take(idf_size * _F32.size)
    idf = np.frombuffer(idf_bytes, dtype="<f4").astype(np.float32) if idf_size else np.zeros(0, dtype=np.float32)

    stop_count = reader.count(_U64.size)
    stop_words = frozenset(reader.string() for _ in range(stop_count))

    if reader.remaining:
        raise ModelFormatError(f"{reader.remaining} unexpected trailing bytes")

    try:
        model = TfidfModel.from_vocabulary(config, num_documents, vocabulary, idf)
    except ValueError as e:
        raise ModelFormatError(str(e)) from e

    return model, stop_words


def _pack_str(value: str) -> bytes:
    data = value.encode("utf-8")
    return _U64.pack(len(data)) + data


class _Reader:
    def __init__(self, payload: bytes):
        self._view = memoryview(payload)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._view) - self._pos

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            raise ModelFormatError(
                f"Truncated model: need {size} bytes at offset {self._pos}, {self.remaining} left"
            )
        chunk = self._view[self._pos:self._pos + size].tobytes()
        self._pos += size
        return chunk

    def unpack(self, fmt: struct.Struct):
        return fmt.unpack(self.take(fmt.size))[0]

    def count(self, item_size: int) -> int:
        """Read an element count and check the stream can hold that many items."""
        n = self.unpack(_U64)
        if n * item_size > self.remaining:
            raise ModelFormatError(f"Length prefix {n} exceeds remaining stream length")
        return n

    def string(self) -> str:
        data = self.take(self.count(1))
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ModelFormatError(f"Invalid UTF-8 in model: {e}") from e
