# Src/errors.py 管线内的异常类型
from __future__ import annotations

from typing import Any, Dict, Optional


class InvalidParameterError(ValueError):
    """参数/输入不合法（折数过大、网格为空、词表为空等），直接抛给调用方。"""


class FeatureNameCollisionError(InvalidParameterError):
    """两个不同的词清洗成了同一个特征名。"""


class FoldTaskError(RuntimeError):
    """
    某个 (超参数, 折) 训练/评估任务失败。
    参数全部放进 args，保证跨进程 pickle 后仍能还原。
    """

    def __init__(self, params: Optional[Dict[str, Any]], fold_id: str, reason: str):
        super().__init__(params, fold_id, reason)
        self.params = params
        self.fold_id = fold_id
        self.reason = reason

    def __str__(self) -> str:
        return f"Training failed for params={self.params} on {self.fold_id}: {self.reason}"
