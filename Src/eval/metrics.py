# Src/eval/metrics.py
from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    classification_report,
    cohen_kappa_score,
    confusion_matrix,
    precision_recall_fscore_support,
)

import config

# 画图只在需要时导入 matplotlib（避免无图形环境时影响核心评估）


@dataclass
class MetricsOutput:
    metrics: Dict[str, Any]
    report: str
    cm: np.ndarray


def compute_accuracy(y_true, y_pred) -> float:
    """完全匹配率；空集合无定义，直接报错。"""
    if len(y_true) == 0:
        raise ValueError("Accuracy is undefined for an empty evaluation set")
    return float(accuracy_score(y_true, y_pred))


def compute_kappa(y_true, y_pred) -> float:
    """
    Cohen's kappa。只有一个类别时 sklearn 返回 nan，这里记为 0.0。
    """
    k = cohen_kappa_score(y_true, y_pred)
    return float(k) if np.isfinite(k) else 0.0


def compute_prf(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    *,
    average: str = config.METRICS_AVERAGE,
    zero_division: int = config.ZERO_DIVISION,
) -> Tuple[float, float, float]:
    """
    计算 Precision / Recall / F1
    average: macro/micro/weighted（多分类）
    """
    p, r, f1, _ = precision_recall_fscore_support(
        y_true,
        y_pred,
        average=average,
        zero_division=zero_division,
    )
    return float(p), float(r), float(f1)


def compute_confusion_matrix(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    *,
    labels: Optional[Sequence] = None,
    normalize: Optional[str] = None,  # None / "true" / "pred" / "all"
) -> np.ndarray:
    cm = confusion_matrix(y_true, y_pred, labels=labels, normalize=normalize)
    return cm


def compute_report(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    *,
    labels: Optional[Sequence] = None,
    zero_division: int = config.ZERO_DIVISION,
) -> str:
    return classification_report(
        y_true,
        y_pred,
        labels=labels,
        digits=4,
        zero_division=zero_division,
    )


def evaluate_classifier(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    *,
    labels: Optional[Sequence] = None,
    average: str = config.METRICS_AVERAGE,
    zero_division: int = config.ZERO_DIVISION,
    cm_normalize: Optional[str] = config.CONFUSION_MATRIX_NORMALIZE,
) -> MetricsOutput:
    """
    统一评估入口：返回 dict 指标 + report + confusion matrix
    labels 不传时取 y_true ∪ y_pred 的排序结果，保证矩阵行列顺序固定。
    """
    if labels is None:
        labels = sorted(set(np.asarray(y_true).tolist()) | set(np.asarray(y_pred).tolist()))
    labels = list(labels)

    acc = compute_accuracy(y_true, y_pred)
    kappa = compute_kappa(y_true, y_pred)
    p, r, f1 = compute_prf(y_true, y_pred, average=average, zero_division=zero_division)
    cm = compute_confusion_matrix(y_true, y_pred, labels=labels, normalize=cm_normalize)
    rep = compute_report(y_true, y_pred, labels=labels, zero_division=zero_division)

    metrics = {
        "accuracy": acc,
        "kappa": kappa,
        "precision": p,
        "recall": r,
        "f1": f1,
        "average": average,
        "labels": [str(lbl) for lbl in labels],
        "cm_normalize": cm_normalize,
        "confusion_matrix": cm.tolist(),
    }

    return MetricsOutput(metrics=metrics, report=rep, cm=cm)


def save_json(data: Dict[str, Any], path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")


def save_text(text: str, path: Path) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def plot_and_save_confusion_matrix(
    cm: np.ndarray,
    *,
    out_path: Path,
    labels: Optional[list] = None,
    title: str = "Confusion Matrix",
) -> None:
    """
    可选：绘制混淆矩阵并保存 png。
    注意：不指定颜色（遵循项目的通用约束，避免硬编码风格）。
    """
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    fig, ax = plt.subplots()
    im = ax.imshow(cm)

    ax.set_title(title)
    ax.set_xlabel("Predicted")
    ax.set_ylabel("True")

    # 坐标轴标签
    if labels is None:
        labels = [str(i) for i in range(cm.shape[0])]
    ax.set_xticks(range(len(labels)))
    ax.set_yticks(range(len(labels)))
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_yticklabels(labels)

    # 在格子里写数值
    for i in range(cm.shape[0]):
        for j in range(cm.shape[1]):
            ax.text(j, i, f"{cm[i, j]:.4g}" if isinstance(cm[i, j], float) else str(cm[i, j]),
                    ha="center", va="center")

    fig.colorbar(im, ax=ax)
    fig.tight_layout()
    fig.savefig(out_path, dpi=200)
    plt.close(fig)
