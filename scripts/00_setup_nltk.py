from __future__ import annotations

import nltk


def main() -> None:
    # Stop-word lists read by `kb-vectorize fit --nltk-stop-words LANG`
    nltk.download("stopwords")


if __name__ == "__main__":
    main()
