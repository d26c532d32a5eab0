"""
Tests for the TF-IDF vectorizer

Covers fitting, document-frequency filtering, transform/normalization and
the fit_transform composition.
"""

import math
import sys
import unittest
from pathlib import Path

import numpy as np
from numpy.testing import assert_allclose, assert_array_equal

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from kb_vectorizer import TfidfConfig, TfidfModel, TfidfVectorizer
from kb_vectorizer.tfidf import _weigh, document_frequencies, select_terms, term_frequency_matrix


CORPUS = ["the cat sat", "the dog sat", "the cat ran"]

IDF_THE = 1.0
IDF_CAT = math.log(4 / 3) + 1.0
IDF_DOG = math.log(4 / 2) + 1.0


class TestFit(unittest.TestCase):
    """Tests for vocabulary construction."""

    def test_example_corpus(self):
        """Test vocabulary and IDF on the three-document corpus."""
        vec = TfidfVectorizer()
        vec.fit(CORPUS)

        self.assertEqual(vec.get_feature_names(), ["the", "cat", "sat", "dog", "ran"])
        self.assertEqual(vec.get_vocabulary_size(), 5)
        self.assertEqual(vec.num_documents, 3)
        assert_allclose(vec.idf, [IDF_THE, IDF_CAT, IDF_CAT, IDF_DOG, IDF_DOG], rtol=1e-6)

    def test_vocabulary_bijection(self):
        """Test that feature names and vocabulary indices agree."""
        vec = TfidfVectorizer()
        vec.fit(CORPUS + ["a completely different document about dogs"])

        names = vec.get_feature_names()
        for i, name in enumerate(names):
            self.assertEqual(vec.vocabulary[name], i)
        self.assertEqual(sorted(vec.vocabulary.values()), list(range(len(names))))

    def test_idf_positive_for_ubiquitous_term(self):
        """Test that a term in every document still gets a positive IDF."""
        vec = TfidfVectorizer(TfidfConfig(smooth=0.0))
        vec.fit(["common a", "common b", "common c"])

        self.assertTrue(np.all(vec.idf > 0))
        self.assertAlmostEqual(float(vec.idf[vec.vocabulary["common"]]), 1.0, places=6)

    def test_empty_corpus_is_a_noop(self):
        """Test that fitting an empty corpus leaves the vectorizer unfitted."""
        vec = TfidfVectorizer()
        with self.assertLogs("kb_vectorizer.tfidf", level="WARNING"):
            vec.fit([])

        self.assertFalse(vec.is_fitted)
        self.assertEqual(vec.get_vocabulary_size(), 0)

    def test_empty_refit_keeps_previous_model(self):
        """Test that re-fitting with an empty corpus is rejected."""
        vec = TfidfVectorizer()
        vec.fit(CORPUS)
        vec.fit([])

        self.assertEqual(vec.get_vocabulary_size(), 5)
        self.assertEqual(vec.num_documents, 3)

    def test_refit_replaces_state(self):
        """Test that a second fit discards the first vocabulary."""
        vec = TfidfVectorizer()
        vec.fit(CORPUS)
        vec.fit(["alpha beta", "beta gamma"])

        self.assertEqual(vec.get_feature_names(), ["alpha", "beta", "gamma"])
        self.assertEqual(vec.num_documents, 2)
        self.assertNotIn("cat", vec.vocabulary)

    def test_string_input_rejected(self):
        """Test that a bare string is not treated as a corpus."""
        with self.assertRaises(TypeError):
            TfidfVectorizer().fit("the cat sat")

    def test_stop_words_excluded(self):
        """Test stop-word removal during fitting."""
        vec = TfidfVectorizer(stop_words={"the"})
        vec.fit(CORPUS)

        self.assertEqual(vec.get_feature_names(), ["cat", "sat", "dog", "ran"])

    def test_set_stop_words_replaces_set(self):
        """Test that stop words are replaced wholesale."""
        vec = TfidfVectorizer(stop_words={"the"})
        vec.set_stop_words({"cat"})
        vec.fit(CORPUS)

        self.assertEqual(vec.stop_words, frozenset({"cat"}))
        self.assertIn("the", vec.vocabulary)
        self.assertNotIn("cat", vec.vocabulary)

    def test_custom_tokenizer(self):
        """Test an injected tokenizer."""
        vec = TfidfVectorizer(tokenizer=lambda text: text.split(","))
        vec.fit(["a,b c", "a"])

        self.assertEqual(vec.get_feature_names(), ["a", "b c"])

    def test_everything_filtered(self):
        """Test a fit whose filters reject every term."""
        vec = TfidfVectorizer(TfidfConfig(min_df=10))
        with self.assertLogs("kb_vectorizer.tfidf", level="WARNING"):
            vec.fit(CORPUS)

        self.assertTrue(vec.is_fitted)
        self.assertEqual(vec.get_vocabulary_size(), 0)
        self.assertEqual(vec.transform("the cat").shape, (0,))


class TestDocumentFrequencyFilter(unittest.TestCase):
    """Tests for min_df, max_df and max_features."""

    def fit_names(self, **kwargs):
        vec = TfidfVectorizer(TfidfConfig(**kwargs))
        vec.fit(CORPUS)
        return vec.get_feature_names()

    def test_min_df_count(self):
        self.assertEqual(self.fit_names(min_df=2), ["the", "cat", "sat"])

    def test_min_df_fraction(self):
        self.assertEqual(self.fit_names(min_df=0.5), ["the", "cat", "sat"])

    def test_max_df_fraction(self):
        self.assertEqual(self.fit_names(max_df=0.9), ["cat", "sat", "dog", "ran"])

    def test_max_df_count(self):
        self.assertEqual(self.fit_names(max_df=2), ["cat", "sat", "dog", "ran"])

    def test_max_df_one_means_no_upper_filter(self):
        self.assertIn("the", self.fit_names(max_df=1.0))

    def test_max_features_cap(self):
        """Test that the cap keeps exactly k terms."""
        for k in range(1, 5):
            vec = TfidfVectorizer(TfidfConfig(max_features=k))
            vec.fit(CORPUS)
            self.assertEqual(vec.get_vocabulary_size(), k)

    def test_max_features_ties_are_lexicographic(self):
        """Test tie-breaking among equal document frequencies."""
        self.assertEqual(self.fit_names(max_features=2), ["the", "cat"])
        self.assertEqual(self.fit_names(max_features=4), ["the", "cat", "sat", "dog"])

    def test_max_features_above_vocabulary_is_ignored(self):
        self.assertEqual(self.fit_names(max_features=50), ["the", "cat", "sat", "dog", "ran"])

    def test_document_frequencies_deduplicate(self):
        """Test that repeated tokens in one document count once."""
        df = document_frequencies([["a", "a", "a", "b"], ["b"]])
        self.assertEqual(df, {"a": 1, "b": 2})
        self.assertEqual(list(df), ["a", "b"])

    def test_select_terms_combined(self):
        df = {"x": 5, "y": 3, "z": 3, "w": 1}
        terms = select_terms(df, 5, TfidfConfig(min_df=2, max_df=0.9, max_features=1))
        self.assertEqual(terms, ["y"])


class TestTransform(unittest.TestCase):
    """Tests for single and batch transforms."""

    def setUp(self):
        """Set up test fixtures."""
        self.raw = TfidfVectorizer(TfidfConfig(normalization="none"))
        self.raw.fit(CORPUS)
        self.l2 = TfidfVectorizer()
        self.l2.fit(CORPUS)

    def test_example_weights(self):
        """Test that 'the' gets the lowest weight in 'the cat sat'."""
        vector = self.raw.transform("the cat sat")

        assert_allclose(vector, [IDF_THE, IDF_CAT, IDF_CAT, 0.0, 0.0], rtol=1e-6)
        present = vector[:3]
        self.assertTrue(np.all(present > 0))
        self.assertEqual(int(np.argmin(present)), 0)

    def test_raw_counts(self):
        vector = self.raw.transform("cat cat dog")
        assert_allclose(vector, [0.0, 2 * IDF_CAT, 0.0, IDF_DOG, 0.0], rtol=1e-6)

    def test_binary_counts(self):
        vec = TfidfVectorizer(TfidfConfig(normalization="none", use_binary=True))
        vec.fit(CORPUS)
        vector = vec.transform("cat cat dog")
        assert_allclose(vector, [0.0, IDF_CAT, 0.0, IDF_DOG, 0.0], rtol=1e-6)

    def test_l1_normalization(self):
        vec = TfidfVectorizer(TfidfConfig(normalization="l1"))
        vec.fit(CORPUS)
        self.assertAlmostEqual(float(np.abs(vec.transform("the dog ran")).sum()), 1.0, places=6)

    def test_l2_normalization(self):
        self.assertAlmostEqual(float(np.linalg.norm(self.l2.transform("the dog ran"))), 1.0, places=6)

    def test_l2_idempotent(self):
        """Test that the engine leaves an already L2-normalized row unchanged."""
        vector = self.l2.transform("the cat sat")
        names = self.l2.get_feature_names()

        # Each feature occurs once, so the weighted row is the stored IDF.
        model = TfidfModel(config=TfidfConfig(), num_documents=1, feature_names=tuple(names), idf=vector)
        again = _weigh(model, [names])[0]

        assert_allclose(again, vector, rtol=1e-6, atol=1e-7)
        self.assertAlmostEqual(float(np.linalg.norm(again)), 1.0, places=6)

    def test_l2_unit_idf(self):
        model = TfidfModel(config=TfidfConfig(), num_documents=1, feature_names=("a", "b"), idf=[1.0, 1.0])
        assert_allclose(_weigh(model, [["a"] * 3 + ["b"] * 4])[0], [0.6, 0.8], rtol=1e-6)
        assert_allclose(_weigh(model, [["a", "b"]])[0], [math.sqrt(0.5)] * 2, rtol=1e-6)

    def test_out_of_vocabulary_document(self):
        """Test that unseen tokens yield a zero vector rather than an error."""
        vector = self.l2.transform("zebra giraffe")
        self.assertEqual(vector.shape, (5,))
        self.assertFalse(np.any(vector))

    def test_empty_document(self):
        with self.assertLogs("kb_vectorizer.tfidf", level="WARNING"):
            vector = self.l2.transform("")
        assert_array_equal(vector, np.zeros(5, dtype=np.float32))

    def test_unfitted_transform(self):
        """Test degenerate output before fitting."""
        vec = TfidfVectorizer()
        self.assertEqual(vec.transform("the cat").shape, (0,))
        self.assertEqual(vec.transform_batch(["a", "b"]).shape, (2, 0))

    def test_batch_shape(self):
        matrix = self.l2.transform_batch(["the cat", "dog", "unknown"])
        self.assertEqual(matrix.shape, (3, 5))
        self.assertEqual(matrix.dtype, np.float32)

    def test_empty_batch(self):
        self.assertEqual(self.l2.transform_batch([]).shape, (0, 5))

    def test_batch_matches_single(self):
        """Test that each batch row equals the single-document transform."""
        docs = CORPUS + ["the the the cat", "nothing known", "ran ran dog"]
        for vec in (self.raw, self.l2):
            matrix = vec.transform_batch(docs)
            for row, doc in zip(matrix, docs):
                assert_allclose(row, vec.transform(doc), rtol=1e-6, atol=1e-7)

    def test_fit_transform_matches_fit_then_transform(self):
        """Test the inherited fit_transform composition."""
        combined = TfidfVectorizer().fit_transform(iter(CORPUS))
        assert_array_equal(combined, self.l2.transform_batch(CORPUS))

    def test_deterministic(self):
        """Test that repeated fits give identical vectors."""
        docs = CORPUS + ["a dog and a cat"]
        first = TfidfVectorizer().fit_transform(docs)
        second = TfidfVectorizer().fit_transform(docs)
        assert_array_equal(first, second)


class TestTermFrequencyMatrix(unittest.TestCase):
    """Tests for the sparse term-frequency builder."""

    def test_counts_and_oov(self):
        vocab = {"a": 0, "b": 1}
        tf = term_frequency_matrix([["a", "a", "c"], ["b"], []], vocab)

        self.assertEqual(tf.shape, (3, 2))
        assert_array_equal(tf.toarray(), [[2, 0], [0, 1], [0, 0]])

    def test_binary(self):
        tf = term_frequency_matrix([["a", "a"]], {"a": 0}, use_binary=True)
        assert_array_equal(tf.toarray(), [[1]])


if __name__ == '__main__':
    unittest.main()
