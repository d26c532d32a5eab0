from __future__ import annotations

from kb_vectorizer.tokenization import TokenizerConfig, remove_stop_words, simple_tokenize


def main() -> None:
    raw = "The cat sat on the mat!!! Café-owners, don't panic: 100% «safe»."
    stop_words = {"the", "on"}

    ascii_tokens = simple_tokenize(raw)
    unicode_tokens = simple_tokenize(raw, TokenizerConfig(unicode_punctuation=True))

    print("RAW:", raw)
    print("TOKENS:", ascii_tokens)
    print("UNICODE TOKENS:", unicode_tokens)
    print("WITHOUT STOP WORDS:", remove_stop_words(ascii_tokens, stop_words))


if __name__ == "__main__":
    main()
