# Src/features/vectorize.py
from __future__ import annotations

import keyword
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Sequence, Tuple

import numpy as np
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

import config
from Src.errors import FeatureNameCollisionError, InvalidParameterError


# ----------------------------
# 1) 特征名清洗（纯函数、单射，冲突即报错）
# ----------------------------
def _encode_char(ch: str) -> str:
    """
    单字符编码：
    - "_" -> "__"
    - 可出现在标识符中的字符（含 α/β 等 Unicode 字母、数字）原样保留
    - 其余字符 -> "_u{码位}_"
    编码结果里 "_" 后面只会是 "_" 或 "u"，因此可逆。
    """
    if ch == "_":
        return "__"
    if ("_" + ch).isidentifier():
        return ch
    return f"_u{ord(ch):04x}_"


def sanitize_feature_name(term: str) -> str:
    """
    把词转成可用作特征名的标识符，不同的词一定得到不同的名字：
    - 逐字符编码（见 _encode_char）
    - 空串或首字符不能作标识符开头（如数字）时加前缀 "_"
    - Python 关键字后缀 "_"
    """
    name = "".join(_encode_char(ch) for ch in term)
    if not name[:1].isidentifier():
        name = f"_{name}"
    if keyword.iskeyword(name):
        name = f"{name}_"
    return name


def make_feature_names(terms: Sequence[str]) -> Tuple[str, ...]:
    """
    对整个词表做特征名清洗。
    清洗规则是单射，正常不会冲突；一旦冲突属于配置错误，直接抛 FeatureNameCollisionError。
    """
    seen: Dict[str, str] = {}
    names: List[str] = []
    for term in terms:
        name = sanitize_feature_name(term)
        if name in seen and seen[name] != term:
            raise FeatureNameCollisionError(
                f"Feature name collision: terms {seen[name]!r} and {term!r} both map to {name!r}"
            )
        seen[name] = term
        names.append(name)
    return tuple(names)


# ----------------------------
# 2) 词表
# ----------------------------
@dataclass(frozen=True)
class Vocabulary:
    """只在 Train 上构建；Test 复用同一个词表，列序不变。"""
    terms: Tuple[str, ...]
    feature_names: Tuple[str, ...] = field(init=False)
    index: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "feature_names", make_feature_names(self.terms))
        object.__setattr__(self, "index", {t: i for i, t in enumerate(self.terms)})

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: object) -> bool:
        return term in self.index


def build_vocabulary(token_sequences: Sequence[Sequence[str]], *, min_df: int = config.MIN_DF) -> Vocabulary:
    """
    收集所有文档中出现的不同词，按字典序排序（同样输入 -> 同样列序）。
    min_df: 只保留至少出现在 min_df 篇文档中的词。
    """
    if min_df < 1:
        raise InvalidParameterError(f"min_df must be >= 1, got {min_df}")

    doc_freq: Counter = Counter()
    for tokens in token_sequences:
        doc_freq.update(set(tokens))

    terms = tuple(sorted(t for t, df in doc_freq.items() if df >= min_df))
    if not terms:
        raise InvalidParameterError(
            "Vocabulary is empty: every document was filtered away during tokenization"
        )
    return Vocabulary(terms=terms)


# ----------------------------
# 3) 文档-词矩阵
# ----------------------------
def _passthrough_analyzer(tokens: Sequence[str]) -> Sequence[str]:
    """输入已经分好词，CountVectorizer 原样使用。"""
    return tokens


def build_vectorizer(vocab: Vocabulary) -> CountVectorizer:
    """固定词表的 CountVectorizer；词表外的词在 transform 时被忽略。"""
    return CountVectorizer(
        analyzer=_passthrough_analyzer,
        vocabulary=vocab.index,
        dtype=np.int64,
    )


def build_matrix(token_sequences: Sequence[Sequence[str]], vocab: Vocabulary) -> sparse.csr_matrix:
    """
    行 = 文档，列 = 词表中的词，值 = 出现次数。
    空词序列得到全零行。
    """
    vectorizer = build_vectorizer(vocab)
    X = vectorizer.transform(list(token_sequences))
    if not sparse.isspmatrix_csr(X):
        X = X.tocsr()
    return X


# ----------------------------
# 4) 落盘
# ----------------------------
def save_vocabulary(vocab: Vocabulary, path: Path, *, feature_names: bool = False) -> None:
    """一行一个词（或特征名）。"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    items = vocab.feature_names if feature_names else vocab.terms
    path.write_text("\n".join(items), encoding="utf-8")


def save_sparse_matrix(X: sparse.spmatrix, path: Path) -> None:
    """
    保存稀疏矩阵为 .npz（推荐）。
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    sparse.save_npz(path, X)


def load_sparse_matrix(path: Path) -> sparse.csr_matrix:
    """
    读取 .npz 稀疏矩阵。
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Sparse matrix not found: {path}")
    X = sparse.load_npz(path)
    if not sparse.isspmatrix_csr(X):
        X = X.tocsr()
    return X
