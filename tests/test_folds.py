"""Tests for stratified, repeated k-fold generation."""

from __future__ import annotations

from collections import Counter

import numpy as np
import pytest

from Src.errors import InvalidParameterError
from Src.eval.folds import make_folds

LABELS = ["bio"] * 10 + ["ml"] * 15 + ["psy"] * 5


def _by_repeat(folds):
    out = {}
    for f in folds:
        out.setdefault(f.repeat, []).append(f)
    return out


class TestMakeFolds:
    def test_number_of_folds(self):
        folds = make_folds(LABELS, k=5, repeats=3, seed=1)
        assert len(folds) == 15
        assert [f.repeat for f in folds] == [r for r in range(3) for _ in range(5)]
        assert [f.index for f in folds] == list(range(5)) * 3

    def test_holdouts_partition_each_repetition(self):
        folds = make_folds(LABELS, k=5, repeats=2, seed=7)
        n = len(LABELS)
        for reps in _by_repeat(folds).values():
            holdouts = np.concatenate([f.holdout_indices for f in reps])
            assert len(holdouts) == n
            assert sorted(holdouts.tolist()) == list(range(n))

    def test_train_and_holdout_are_complementary(self):
        for f in make_folds(LABELS, k=5, repeats=1, seed=0):
            assert set(f.train_indices).isdisjoint(f.holdout_indices)
            assert len(f.train_indices) + len(f.holdout_indices) == len(LABELS)

    def test_stratification_tolerance(self):
        k = 5
        y = np.asarray(LABELS)
        overall = {c: n / len(y) for c, n in Counter(LABELS).items()}
        for f in make_folds(LABELS, k=k, repeats=2, seed=3):
            held = Counter(y[f.holdout_indices].tolist())
            for c, p in overall.items():
                assert abs(held[c] / len(f.holdout_indices) - p) <= 1 / k

    def test_deterministic_for_seed(self):
        a = make_folds(LABELS, k=5, repeats=2, seed=11)
        b = make_folds(LABELS, k=5, repeats=2, seed=11)
        for fa, fb in zip(a, b):
            assert fa.holdout_indices.tolist() == fb.holdout_indices.tolist()

    def test_repetitions_reshuffle(self):
        folds = make_folds(LABELS, k=5, repeats=2, seed=11)
        reps = _by_repeat(folds)
        first = [f.holdout_indices.tolist() for f in reps[0]]
        second = [f.holdout_indices.tolist() for f in reps[1]]
        assert first != second

    def test_fold_id(self):
        folds = make_folds(LABELS, k=5, repeats=2, seed=0)
        assert folds[0].fold_id == "Fold1.Rep1"
        assert folds[-1].fold_id == "Fold5.Rep2"


class TestInvalidParameters:
    def test_class_smaller_than_k(self):
        with pytest.raises(InvalidParameterError, match="psy"):
            make_folds(LABELS, k=6, repeats=1, seed=0)

    @pytest.mark.parametrize("k", [0, 1])
    def test_k_too_small(self, k):
        with pytest.raises(InvalidParameterError):
            make_folds(LABELS, k=k, repeats=1, seed=0)

    def test_repeats_must_be_positive(self):
        with pytest.raises(InvalidParameterError):
            make_folds(LABELS, k=2, repeats=0, seed=0)

    def test_empty_labels(self):
        with pytest.raises(InvalidParameterError):
            make_folds([], k=2, repeats=1, seed=0)
