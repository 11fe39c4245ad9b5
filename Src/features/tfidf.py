# Src/features/tfidf.py
from __future__ import annotations

from typing import Optional

import numpy as np
from scipy import sparse

from Src.errors import InvalidParameterError


def _as_csr(X) -> sparse.csr_matrix:
    if sparse.issparse(X):
        X = X.tocsr()
    else:
        X = sparse.csr_matrix(np.asarray(X))
    return X


def term_frequency(X: sparse.spmatrix) -> sparse.csr_matrix:
    """
    每行除以该行总词数。
    行总数为 0 的行（空文档）TF 无定义，这里先记为全零，
    由 zero_undefined_rows 统一清理。
    """
    X = _as_csr(X).astype(np.float64)
    row_totals = np.asarray(X.sum(axis=1)).ravel()
    scale = np.zeros_like(row_totals)
    np.divide(1.0, row_totals, out=scale, where=row_totals > 0)
    return sparse.diags(scale).dot(X).tocsr()


def zero_undefined_rows(W: sparse.csr_matrix, row_totals: np.ndarray) -> sparse.csr_matrix:
    """
    清理步骤：原始计数全零的行，权重一律置 0.0（不允许出现 NaN）。
    """
    W = W.tocsr(copy=True)
    empty_rows = np.flatnonzero(row_totals == 0)
    for i in empty_rows:
        W.data[W.indptr[i]:W.indptr[i + 1]] = 0.0
    if W.data.size:
        W.data[~np.isfinite(W.data)] = 0.0
    W.eliminate_zeros()
    return W


class TfIdfWeighter:
    """
    在 Train 矩阵上 fit 出 IDF，之后对 Train/Test 用同一份 IDF 做 transform。
    idf(j) = log10(n_docs / 含词 j 的文档数)
    """

    def __init__(self) -> None:
        self.idf_: Optional[np.ndarray] = None
        self.n_docs_: Optional[int] = None

    def fit(self, X) -> "TfIdfWeighter":
        X = _as_csr(X)
        n_docs = X.shape[0]
        if n_docs == 0:
            raise InvalidParameterError("Cannot fit TF-IDF on a matrix with no documents")

        doc_freq = np.bincount(X.indices[X.data > 0], minlength=X.shape[1])
        missing = np.flatnonzero(doc_freq == 0)
        if missing.size:
            raise InvalidParameterError(
                f"{missing.size} vocabulary column(s) never occur in the fitting matrix "
                f"(first index {int(missing[0])}); IDF would be undefined"
            )

        self.idf_ = np.log10(n_docs / doc_freq.astype(np.float64))
        self.n_docs_ = n_docs
        return self

    def transform(self, X) -> sparse.csr_matrix:
        if self.idf_ is None:
            raise RuntimeError("TfIdfWeighter is not fitted yet; call fit() first")
        X = _as_csr(X)
        if X.shape[1] != self.idf_.shape[0]:
            raise InvalidParameterError(
                f"Matrix has {X.shape[1]} columns but the weighter was fitted on {self.idf_.shape[0]}"
            )

        row_totals = np.asarray(X.sum(axis=1)).ravel()
        W = term_frequency(X).dot(sparse.diags(self.idf_)).tocsr()
        return zero_undefined_rows(W, row_totals)

    def fit_transform(self, X) -> sparse.csr_matrix:
        return self.fit(X).transform(X)


def compute_tfidf(X) -> sparse.csr_matrix:
    """原始词频矩阵 -> TF-IDF 权重矩阵（IDF 取自同一矩阵）。"""
    return TfIdfWeighter().fit_transform(X)
