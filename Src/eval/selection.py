# Src/eval/selection.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

import config
from Src.errors import FoldTaskError, InvalidParameterError
from Src.eval.folds import Fold
from Src.eval.metrics import compute_accuracy, compute_kappa
from Src.models.decision_tree import train_tree


TrainFn = Callable[[Any, np.ndarray, Dict[str, Any]], Any]


def param_label(params: Dict[str, Any]) -> str:
    """超参数字典 -> 稳定的字符串键，如 "ccp_alpha=0.01"。"""
    if not isinstance(params, dict):
        return str(params)
    return ", ".join(f"{k}={params[k]}" for k in sorted(params))


@dataclass
class CVResult:
    """
    交叉验证结果：
    - accuracy / kappa: 形状 [超参数个数, 折数]
    - 行顺序与网格一致，列顺序与 folds 一致
    """
    params: List[Dict[str, Any]]
    fold_ids: List[str]
    accuracy: np.ndarray
    kappa: np.ndarray

    @property
    def mean_accuracy(self) -> np.ndarray:
        return self.accuracy.mean(axis=1)

    @property
    def std_accuracy(self) -> np.ndarray:
        if self.accuracy.shape[1] < 2:
            return np.zeros(self.accuracy.shape[0])
        return self.accuracy.std(axis=1, ddof=1)

    @property
    def mean_kappa(self) -> np.ndarray:
        return self.kappa.mean(axis=1)

    def as_dict(self) -> Dict[str, float]:
        """{超参数标签: 平均留出准确率}"""
        return {param_label(p): float(m) for p, m in zip(self.params, self.mean_accuracy)}

    def to_frame(self) -> pd.DataFrame:
        """汇总表：每行一组超参数。"""
        rows = []
        for i, p in enumerate(self.params):
            row = dict(p) if isinstance(p, dict) else {"params": p}
            row.update(
                {
                    "accuracy_mean": float(self.mean_accuracy[i]),
                    "accuracy_std": float(self.std_accuracy[i]),
                    "kappa_mean": float(self.mean_kappa[i]),
                    "n_folds": int(self.accuracy.shape[1]),
                }
            )
            rows.append(row)
        return pd.DataFrame(rows)


@dataclass
class SelectionOutput:
    best_params: Dict[str, Any]
    best_index: int
    cv_result: CVResult
    final_model: Any

    @property
    def best_accuracy(self) -> float:
        return float(self.cv_result.mean_accuracy[self.best_index])


def _fit_and_score(
    features,
    labels: np.ndarray,
    fold: Fold,
    params: Dict[str, Any],
    train_fn: TrainFn,
) -> Tuple[float, float]:
    """
    单个任务：在 fold 的训练行上训练，在留出行上评估。
    无副作用，只读共享的 features/labels。
    """
    try:
        if len(fold.holdout_indices) == 0:
            raise InvalidParameterError(f"{fold.fold_id} has an empty holdout set")
        model = train_fn(features[fold.train_indices], labels[fold.train_indices], params)
        y_true = labels[fold.holdout_indices]
        y_pred = model.predict(features[fold.holdout_indices])
        return compute_accuracy(y_true, y_pred), compute_kappa(y_true, y_pred)
    except Exception as e:
        raise FoldTaskError(params, fold.fold_id, f"{type(e).__name__}: {e}") from e


def select_model(
    features,
    labels: Sequence,
    folds: Sequence[Fold],
    param_grid: Sequence[Dict[str, Any]],
    train_fn: TrainFn = train_tree,
    *,
    n_jobs: Optional[int] = config.N_JOBS,
    backend: str = config.PARALLEL_BACKEND,
    verbose: int = config.PARALLEL_VERBOSE,
) -> SelectionOutput:
    """
    网格搜索 + 交叉验证：
    1) 对每个 (超参数, 折) 组合并行训练/评估
    2) 全部任务结束后按超参数求平均准确率
    3) 取平均准确率最高者（并列取网格中靠前的）
    4) 用选中的超参数在全部数据上重训最终模型

    任意任务失败即整体失败（FoldTaskError 标明是哪组超参数、哪一折），
    不会用剩余结果算平均。
    """
    param_grid = list(param_grid)
    folds = list(folds)
    if not param_grid:
        raise InvalidParameterError("Hyperparameter grid is empty")
    if not folds:
        raise InvalidParameterError("No folds given for cross-validation")

    y = np.asarray(labels)
    n_rows = features.shape[0]
    if y.shape[0] != n_rows:
        raise InvalidParameterError(
            f"Label count {y.shape[0]} does not match feature rows {n_rows}"
        )

    tasks = [(pi, fi) for pi in range(len(param_grid)) for fi in range(len(folds))]

    # worker 池只在这个 with 块内存在，退出时释放（包括出错时）
    with Parallel(n_jobs=n_jobs, backend=backend, verbose=verbose) as parallel:
        scores = parallel(
            delayed(_fit_and_score)(features, y, folds[fi], param_grid[pi], train_fn)
            for pi, fi in tasks
        )

    accuracy = np.empty((len(param_grid), len(folds)), dtype=np.float64)
    kappa = np.empty_like(accuracy)
    for (pi, fi), (acc, kap) in zip(tasks, scores):
        accuracy[pi, fi] = acc
        kappa[pi, fi] = kap

    cv_result = CVResult(
        params=param_grid,
        fold_ids=[f.fold_id for f in folds],
        accuracy=accuracy,
        kappa=kappa,
    )

    # argmax 返回第一个最大值 -> 并列时取网格中靠前的
    best_index = int(np.argmax(cv_result.mean_accuracy))
    best_params = param_grid[best_index]
    final_model = train_fn(features, y, best_params)

    return SelectionOutput(
        best_params=best_params,
        best_index=best_index,
        cv_result=cv_result,
        final_model=final_model,
    )
