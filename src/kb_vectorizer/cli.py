"""
Command line interface for fitting and applying TF-IDF models.

Usage:
    kb-vectorize fit corpus.csv model.bin --max-features 5000
    kb-vectorize transform model.bin queries.txt --output vectors.csv
    kb-vectorize info model.bin --top 20
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Sequence

import numpy as np

from .config import NORMALIZATIONS, TfidfConfig
from .datasets import load_corpus, vectors_to_frame
from .stop_words import load_stop_words, nltk_stop_words
from .tfidf import TfidfVectorizer

logger = logging.getLogger(__name__)


def cmd_fit(args: argparse.Namespace) -> int:
    config = TfidfConfig(
        min_df=args.min_df,
        max_df=args.max_df,
        max_features=args.max_features,
        normalization=args.norm,
        use_binary=args.binary,
        smooth=args.smooth,
    )

    stop_words: set[str] = set()
    if args.stop_words:
        stop_words |= load_stop_words(args.stop_words)
    if args.nltk_stop_words:
        stop_words |= nltk_stop_words(args.nltk_stop_words)

    documents = load_corpus(args.corpus, text_column=args.text_column)
    vectorizer = TfidfVectorizer(config, stop_words=stop_words)
    vectorizer.fit(documents)

    if not vectorizer.is_fitted:
        print(f"No documents found in {args.corpus}", file=sys.stderr)
        return 1
    if not vectorizer.save(args.model):
        print(f"Could not save model to {args.model}", file=sys.stderr)
        return 1

    print(f"Fitted {vectorizer.num_documents} documents, vocabulary size {vectorizer.get_vocabulary_size()}")
    print(f"Model saved to {args.model}")
    return 0


def cmd_transform(args: argparse.Namespace) -> int:
    vectorizer = _load(args.model)
    if vectorizer is None:
        return 1

    documents = load_corpus(args.input, text_column=args.text_column)
    matrix = vectorizer.transform_batch(documents)
    frame = vectors_to_frame(matrix, vectorizer.get_feature_names())

    if args.output:
        frame.to_csv(args.output, index=False)
        print(f"Wrote {matrix.shape[0]}x{matrix.shape[1]} matrix to {args.output}")
    else:
        print(frame.to_string(index=False))
    return 0


def cmd_info(args: argparse.Namespace) -> int:
    vectorizer = _load(args.model)
    if vectorizer is None:
        return 1

    print("=" * 50)
    print(f"Model: {args.model}")
    print("=" * 50)
    for key, value in vectorizer.config.to_dict().items():
        print(f"{key:>14}: {value}")
    print(f"{'documents':>14}: {vectorizer.num_documents}")
    print(f"{'vocabulary':>14}: {vectorizer.get_vocabulary_size()}")
    print(f"{'stop words':>14}: {len(vectorizer.stop_words)}")

    if args.top and vectorizer.get_vocabulary_size():
        names = vectorizer.get_feature_names()
        idf = vectorizer.idf
        print("-" * 50)
        print(f"Most widespread features (lowest IDF), top {args.top}:")
        for i in np.argsort(idf, kind="stable")[: args.top]:
            print(f"  {names[i]:<30} {idf[i]:.4f}")
    return 0


def _load(path: str) -> TfidfVectorizer | None:
    vectorizer = TfidfVectorizer()
    if not vectorizer.load(path):
        print(f"Could not load model from {path}", file=sys.stderr)
        return None
    return vectorizer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kb-vectorize",
        description="Fit, apply and inspect TF-IDF text vectorization models",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    fit = sub.add_parser("fit", help="Fit a model on a corpus and save it")
    fit.add_argument("corpus", help="CSV file (see --text-column) or text file with one document per line")
    fit.add_argument("model", help="Output model path")
    fit.add_argument("--min-df", type=float, default=0.0, help="Minimum document frequency (fraction or count)")
    fit.add_argument("--max-df", type=float, default=1.0, help="Maximum document frequency (fraction or count)")
    fit.add_argument("--max-features", type=int, default=0, help="Vocabulary cap, 0 for unlimited")
    fit.add_argument("--norm", choices=NORMALIZATIONS, default="l2", help="Row normalization")
    fit.add_argument("--binary", action="store_true", help="Count term presence instead of frequency")
    fit.add_argument("--smooth", type=float, default=1.0, help="IDF smoothing constant")
    fit.add_argument("--stop-words", help="Stop-word file, one word per line")
    fit.add_argument("--nltk-stop-words", metavar="LANG", help="Add NLTK stop words for a language")
    fit.add_argument("--text-column", default="text", help="Text column for CSV input")
    fit.set_defaults(func=cmd_fit)

    transform = sub.add_parser("transform", help="Vectorize documents with a saved model")
    transform.add_argument("model", help="Model path")
    transform.add_argument("input", help="CSV file or text file with one document per line")
    transform.add_argument("--output", help="Write the matrix as CSV instead of printing it")
    transform.add_argument("--text-column", default="text", help="Text column for CSV input")
    transform.set_defaults(func=cmd_transform)

    info = sub.add_parser("info", help="Describe a saved model")
    info.add_argument("model", help="Model path")
    info.add_argument("--top", type=int, default=10, help="Number of features to list")
    info.set_defaults(func=cmd_info)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        return args.func(args)
    except (OSError, ValueError, LookupError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
