# Src/models/decision_tree.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import sparse
from sklearn.tree import DecisionTreeClassifier

import config


MatrixLike = Union[sparse.spmatrix, np.ndarray]


def build_tree_model(tree_params: Optional[Dict[str, Any]] = None) -> DecisionTreeClassifier:
    """
    构建决策树。
    tree_params: 网格中的一组超参数；未指定的项取 config.TREE_BASE_PARAMS
    """
    params = dict(config.TREE_BASE_PARAMS)
    if tree_params:
        params.update(tree_params)
    return DecisionTreeClassifier(**params)


def train_tree(
    X_train: MatrixLike,
    y_train: np.ndarray,
    tree_params: Optional[Dict[str, Any]] = None,
) -> DecisionTreeClassifier:
    """
    训练决策树（供模型选择器调用的 train_fn）。
    """
    model = build_tree_model(tree_params)
    model.fit(X_train, y_train)
    return model


def predict_tree(model: DecisionTreeClassifier, X: MatrixLike) -> np.ndarray:
    """预测类别标签。"""
    return model.predict(X)


def top_feature_importances(
    model: DecisionTreeClassifier,
    feature_names: Sequence[str],
    n: int = config.TOP_FEATURES,
) -> List[Tuple[str, float]]:
    """
    按重要性取前 n 个特征（只返回重要性 > 0 的）。
    """
    importances = getattr(model, "feature_importances_", None)
    if importances is None:
        return []
    if len(importances) != len(feature_names):
        raise ValueError(
            f"Model has {len(importances)} features but {len(feature_names)} names were given"
        )
    # 稳定排序：重要性相同时按列序
    order = np.argsort(-importances, kind="stable")[:n]
    return [(feature_names[i], float(importances[i])) for i in order if importances[i] > 0]
