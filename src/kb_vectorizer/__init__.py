"""Text vectorization core of the knowledge-base ingestion toolkit.

`TfidfVectorizer` turns document strings into fixed-length vectors and can
persist its fitted state; `create_vectorizer` selects a strategy by name.
"""

__version__ = "1.0.0"

from .config import TfidfConfig
from .factory import available_vectorizers, create_vectorizer, register_vectorizer
from .model import TfidfModel
from .serialization import ModelFormatError
from .tfidf import TfidfVectorizer
from .tokenization import TokenizerConfig, make_tokenizer, simple_tokenize
from .vectorizer import Vectorizer

__all__ = [
    "ModelFormatError",
    "TfidfConfig",
    "TfidfModel",
    "TfidfVectorizer",
    "TokenizerConfig",
    "Vectorizer",
    "available_vectorizers",
    "create_vectorizer",
    "make_tokenizer",
    "register_vectorizer",
    "simple_tokenize",
]
