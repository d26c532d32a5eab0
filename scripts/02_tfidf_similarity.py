from __future__ import annotations

import tempfile
from pathlib import Path

from sklearn.metrics.pairwise import cosine_similarity

from kb_vectorizer import TfidfConfig, TfidfVectorizer


DOCUMENTS = [
    "The knowledge base stores entities and relations extracted from documents.",
    "Documents are split into chunks before entity extraction.",
    "Relations link two entities in the knowledge graph.",
    "Backups of the graph store are taken every night.",
    "TF-IDF vectors support similarity search over document chunks.",
]


def main() -> None:
    vectorizer = TfidfVectorizer(TfidfConfig(normalization="l2"), stop_words={"the", "of", "are", "in", "and"})
    X = vectorizer.fit_transform(DOCUMENTS)
    print(f"Matrix: {X.shape[0]}x{X.shape[1]}")

    with tempfile.TemporaryDirectory() as tmp:
        model_path = Path(tmp) / "tfidf.bin"
        vectorizer.save(model_path)

        restored = TfidfVectorizer()
        restored.load(model_path)

    query = "similarity search over knowledge graph entities"
    scores = cosine_similarity(restored.transform(query).reshape(1, -1), X)[0]

    print(f"Query: {query}")
    for idx in scores.argsort()[::-1]:
        print(f"  {scores[idx]:.4f}  {DOCUMENTS[idx]}")


if __name__ == "__main__":
    main()
