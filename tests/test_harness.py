"""End-to-end tests for the evaluation harness (count and TF-IDF pipelines)."""

from __future__ import annotations

import pytest

from Src.errors import InvalidParameterError
from Src.eval.harness import compare_pipelines, run_pipeline

GRID = [{"ccp_alpha": 0.0}, {"ccp_alpha": 0.05}]
FAST = dict(param_grid=GRID, k=3, repeats=2, seed=0, n_jobs=1)


@pytest.mark.parametrize("weighting", ["count", "tfidf"])
def test_run_pipeline(train_corpus, test_corpus, weighting):
    texts, labels = train_corpus
    test_texts, test_labels = test_corpus
    rep = run_pipeline(texts, labels, test_texts, test_labels, weighting=weighting, **FAST)

    assert rep.weighting == weighting
    assert rep.best_params in GRID
    assert rep.selection.cv_result.accuracy.shape == (2, 6)
    assert 0.0 <= rep.cv_accuracy <= 1.0
    assert 0.0 <= rep.test_accuracy <= 1.0
    assert set(rep.test_metrics.metrics["labels"]) == {"Biology", "Machine Learning", "Psychology"}


def test_vocabulary_comes_from_train_only(train_corpus, test_corpus):
    texts, labels = train_corpus
    test_texts, test_labels = test_corpus
    rep = run_pipeline(texts, labels, test_texts, test_labels, **FAST)
    # "transformer" / "crispr" only appear in the held-out documents
    assert "transform" not in rep.vocabulary
    assert "crispr" not in rep.vocabulary
    assert rep.selection.final_model.n_features_in_ == len(rep.vocabulary)


def test_report_is_plain_data(train_corpus, test_corpus):
    texts, labels = train_corpus
    test_texts, test_labels = test_corpus
    out = run_pipeline(texts, labels, test_texts, test_labels, weighting="tfidf", **FAST).to_dict()
    assert out["weighting"] == "tfidf"
    assert out["n_folds"] == 6
    assert set(out["cv_result"]) == {"ccp_alpha=0.0", "ccp_alpha=0.05"}
    for name, importance in out["top_features"]:
        assert name.isidentifier()
        assert importance > 0


def test_compare_pipelines(train_corpus, test_corpus):
    texts, labels = train_corpus
    test_texts, test_labels = test_corpus
    cmp = compare_pipelines(texts, labels, test_texts, test_labels, weightings=("count", "tfidf"), **FAST)
    assert list(cmp.reports) == ["count", "tfidf"]
    best = max(rep.cv_accuracy for rep in cmp.reports.values())
    assert cmp.reports[cmp.winner].cv_accuracy == best
    assert cmp.to_dict()["winner"] == cmp.winner


def test_unknown_weighting(train_corpus, test_corpus):
    texts, labels = train_corpus
    with pytest.raises(InvalidParameterError):
        run_pipeline(texts, labels, texts, labels, weighting="bm25", **FAST)


def test_too_many_folds(train_corpus):
    texts, labels = train_corpus
    with pytest.raises(InvalidParameterError):
        run_pipeline(texts, labels, texts, labels, **dict(FAST, k=7))


def test_all_documents_filtered(train_corpus):
    _, labels = train_corpus
    empty = ["1234 !!"] * len(labels)
    with pytest.raises(InvalidParameterError):
        run_pipeline(empty, labels, empty, labels, **FAST)


def test_greek_letter_terms():
    texts = ["The α subunit of the protein binds DNA cells"] * 3 + ["Neural β networks learn gradient models"] * 3
    labels = ["Biology"] * 3 + ["Machine Learning"] * 3
    rep = run_pipeline(texts, labels, texts, labels, **dict(FAST, k=3, repeats=1))
    assert "α" in rep.vocabulary and "β" in rep.vocabulary
    assert len(set(rep.vocabulary.feature_names)) == len(rep.vocabulary)
    assert rep.test_accuracy == 1.0
