# Src/eval/folds.py
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence

import numpy as np
from sklearn.model_selection import RepeatedStratifiedKFold

import config
from Src.errors import InvalidParameterError


@dataclass(frozen=True, eq=False)
class Fold:
    """一次 (训练, 留出) 划分；索引都指向 Train 集内部的行号。"""
    repeat: int
    index: int
    train_indices: np.ndarray
    holdout_indices: np.ndarray

    @property
    def fold_id(self) -> str:
        # 形如 Fold1.Rep1
        return f"Fold{self.index + 1}.Rep{self.repeat + 1}"


def make_folds(
    labels: Sequence,
    k: int = config.CV_FOLDS,
    repeats: int = config.CV_REPEATS,
    seed: int = config.CV_SEED,
) -> List[Fold]:
    """
    分层、重复的 k 折划分：
    - 每次重复把全部索引分成 k 组，类别比例与整体一致
    - 每组轮流作为留出集，共 k * repeats 折
    - 同一个 seed 结果完全一致
    """
    if k < 2:
        raise InvalidParameterError(f"k must be >= 2, got {k}")
    if repeats < 1:
        raise InvalidParameterError(f"repeats must be >= 1, got {repeats}")

    y = np.asarray(labels)
    if y.shape[0] == 0:
        raise InvalidParameterError("Cannot make folds for an empty label sequence")

    counts = Counter(y.tolist())
    too_small = {str(lbl): n for lbl, n in counts.items() if n < k}
    if too_small:
        raise InvalidParameterError(
            f"Cannot stratify into k={k} folds; classes with fewer than k members: {too_small}"
        )

    rskf = RepeatedStratifiedKFold(n_splits=k, n_repeats=repeats, random_state=seed)
    folds: List[Fold] = []
    for i, (train_idx, holdout_idx) in enumerate(rskf.split(np.zeros(len(y)), y)):
        folds.append(
            Fold(
                repeat=i // k,
                index=i % k,
                train_indices=np.sort(train_idx),
                holdout_indices=np.sort(holdout_idx),
            )
        )
    return folds
