# Src/eval/harness.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

import config
from Src.data.preprocess import tokenize_texts
from Src.errors import InvalidParameterError
from Src.eval.folds import make_folds
from Src.eval.metrics import MetricsOutput, evaluate_classifier
from Src.eval.selection import SelectionOutput, TrainFn, param_label, select_model
from Src.features.tfidf import TfIdfWeighter
from Src.features.vectorize import Vocabulary, build_matrix, build_vocabulary
from Src.models.decision_tree import predict_tree, top_feature_importances, train_tree


WEIGHTINGS = ("count", "tfidf")


@dataclass
class PipelineReport:
    """单条管线（count 或 tfidf）的结果，供报告层使用。"""
    weighting: str
    vocabulary: Vocabulary
    selection: SelectionOutput
    test_metrics: MetricsOutput
    top_features: List[Tuple[str, float]] = field(default_factory=list)

    @property
    def best_params(self) -> Dict[str, Any]:
        return self.selection.best_params

    @property
    def cv_accuracy(self) -> float:
        return self.selection.best_accuracy

    @property
    def test_accuracy(self) -> float:
        return float(self.test_metrics.metrics["accuracy"])

    def to_dict(self) -> Dict[str, Any]:
        cv = self.selection.cv_result
        return {
            "weighting": self.weighting,
            "vocab_size": len(self.vocabulary),
            "best_params": dict(self.best_params),
            "cv_accuracy": self.cv_accuracy,
            "cv_accuracy_std": float(cv.std_accuracy[self.selection.best_index]),
            "cv_kappa": float(cv.mean_kappa[self.selection.best_index]),
            "cv_result": cv.as_dict(),
            "n_folds": len(cv.fold_ids),
            "test_accuracy": self.test_accuracy,
            "test_metrics": self.test_metrics.metrics,
            "top_features": [[name, imp] for name, imp in self.top_features],
        }


@dataclass
class ComparisonReport:
    reports: Dict[str, PipelineReport]

    @property
    def winner(self) -> str:
        # 平均 CV 准确率高者胜；并列取先跑的管线
        best = None
        for name, rep in self.reports.items():
            if best is None or rep.cv_accuracy > self.reports[best].cv_accuracy:
                best = name
        return best

    def to_dict(self) -> Dict[str, Any]:
        return {
            "winner": self.winner,
            "pipelines": {name: rep.to_dict() for name, rep in self.reports.items()},
        }


def run_pipeline(
    train_texts: Sequence[str],
    train_labels: Sequence[str],
    test_texts: Sequence[str],
    test_labels: Sequence[str],
    *,
    weighting: str = "count",
    param_grid: Sequence[Dict[str, Any]] = config.TREE_PARAM_GRID,
    train_fn: TrainFn = train_tree,
    k: int = config.CV_FOLDS,
    repeats: int = config.CV_REPEATS,
    seed: int = config.CV_SEED,
    min_df: int = config.MIN_DF,
    n_jobs: Optional[int] = config.N_JOBS,
    backend: str = config.PARALLEL_BACKEND,
    verbose: int = config.PARALLEL_VERBOSE,
    top_n: int = config.TOP_FEATURES,
) -> PipelineReport:
    """
    单条管线：
    Train 分词 -> Train 建词表 + 词频矩阵 -> (可选) TF-IDF fit
    -> 分层重复 k 折 -> 网格搜索选超参数 -> 全量重训
    -> Test 分词 -> 投影到同一个词表 -> 同一个 TF-IDF 权重 -> 预测评估
    """
    weighting = (weighting or "count").lower()
    if weighting not in WEIGHTINGS:
        raise InvalidParameterError(f"Unsupported weighting: {weighting}. Use 'count' or 'tfidf'.")

    y_train = np.asarray(train_labels)
    y_test = np.asarray(test_labels)

    # 1) 词表只在 Train 上构建，Test 不参与
    train_tokens = tokenize_texts(train_texts)
    vocab = build_vocabulary(train_tokens, min_df=min_df)
    X_train = build_matrix(train_tokens, vocab)

    test_tokens = tokenize_texts(test_texts)
    X_test = build_matrix(test_tokens, vocab)

    # 2) 权重：IDF 在 Train 上 fit，Test 复用
    if weighting == "tfidf":
        weighter = TfIdfWeighter().fit(X_train)
        X_train = weighter.transform(X_train)
        X_test = weighter.transform(X_test)

    # 3) 交叉验证选超参数
    folds = make_folds(y_train, k=k, repeats=repeats, seed=seed)
    selection = select_model(
        X_train,
        y_train,
        folds,
        param_grid,
        train_fn,
        n_jobs=n_jobs,
        backend=backend,
        verbose=verbose,
    )

    # 4) Test 评估
    y_pred = predict_tree(selection.final_model, X_test)
    labels = sorted(set(y_train.tolist()) | set(y_test.tolist()))
    test_metrics = evaluate_classifier(y_test, y_pred, labels=labels)
    test_metrics.metrics["best_params"] = param_label(selection.best_params)

    return PipelineReport(
        weighting=weighting,
        vocabulary=vocab,
        selection=selection,
        test_metrics=test_metrics,
        top_features=top_feature_importances(selection.final_model, vocab.feature_names, top_n),
    )


def compare_pipelines(
    train_texts: Sequence[str],
    train_labels: Sequence[str],
    test_texts: Sequence[str],
    test_labels: Sequence[str],
    *,
    weightings: Sequence[str] = config.PIPELINES,
    **kwargs: Any,
) -> ComparisonReport:
    """依次跑原始词频 / TF-IDF 两条管线，按选中超参数的平均 CV 准确率比较。"""
    if not weightings:
        raise InvalidParameterError("No pipelines to compare")
    reports: Dict[str, PipelineReport] = {}
    for w in weightings:
        reports[w] = run_pipeline(train_texts, train_labels, test_texts, test_labels, weighting=w, **kwargs)
    return ComparisonReport(reports=reports)
