"""Tests for corpus loading, validation and the stratified train/test split."""

from __future__ import annotations

from collections import Counter

import pandas as pd
import pytest

from Src.data.io import Corpus, load_corpus, read_csv, split_corpus, validate_and_prepare


def test_load_corpus(corpus_csv):
    corpus = load_corpus(corpus_csv)
    assert len(corpus) == 24
    assert corpus.ids[0] == "0"
    assert set(corpus.labels) == {"Machine Learning", "Biology", "Psychology"}


def test_read_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_csv(tmp_path / "nope.csv")


def test_validate_rejects_unknown_label():
    df = pd.DataFrame({"Id": [1], "Text": ["abc"], "Label": ["Astrology"]})
    with pytest.raises(ValueError, match="illegal labels"):
        validate_and_prepare(df)


def test_validate_keeps_empty_text_and_drops_unlabeled():
    df = pd.DataFrame(
        {"Id": [1, 2, 3], "Text": [None, "cells", "memory"], "Label": [" Biology ", None, "Psychology"]}
    )
    out = validate_and_prepare(df)
    assert out["Text"].tolist() == ["", "memory"]
    assert out["Label"].tolist() == ["Biology", "Psychology"]


def test_validate_missing_column():
    with pytest.raises(ValueError, match="Missing required columns"):
        validate_and_prepare(pd.DataFrame({"Text": ["a"]}))


def test_split_is_stratified_and_disjoint(corpus_csv):
    corpus = load_corpus(corpus_csv)
    train, test = split_corpus(corpus, test_size=0.25, seed=0)
    assert len(train) == 18 and len(test) == 6
    assert set(train.ids).isdisjoint(test.ids)
    assert Counter(test.labels) == {"Machine Learning": 2, "Biology": 2, "Psychology": 2}


def test_corpus_length_check():
    with pytest.raises(ValueError):
        Corpus(ids=("1",), texts=("a", "b"), labels=("x",))
