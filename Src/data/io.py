# Src/data/io.py 数据的输入和输出
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, List
import pandas as pd
from sklearn.model_selection import train_test_split
import config


@dataclass(frozen=True)
class Corpus:
    """统一的数据载体：文档 id + 原始文本 + 学科标签（加载后不再修改）"""
    ids: Tuple[str, ...]
    texts: Tuple[str, ...]
    labels: Tuple[str, ...]

    def __post_init__(self) -> None:
        if not (len(self.ids) == len(self.texts) == len(self.labels)):
            raise ValueError(
                f"Corpus fields differ in length: ids={len(self.ids)}, "
                f"texts={len(self.texts)}, labels={len(self.labels)}"
            )

    def __len__(self) -> int:
        return len(self.texts)

    def subset(self, indices) -> "Corpus":
        return Corpus(
            ids=tuple(self.ids[i] for i in indices),
            texts=tuple(self.texts[i] for i in indices),
            labels=tuple(self.labels[i] for i in indices),
        )

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {config.ID_COL: list(self.ids), config.TEXT_COL: list(self.texts), config.LABEL_COL: list(self.labels)}
        )


def _assert_columns(df: pd.DataFrame, required: Tuple[str, ...]) -> None:
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValueError(f"Missing required columns: {missing}. "
                         f"Found columns: {list(df.columns)}")


def _normalize_columns(df: pd.DataFrame) -> pd.DataFrame:
    """
    对列名做轻微标准化（去首尾空格）。
    注意：不做大小写转换，避免把真实列名改坏。
    """
    df = df.copy()
    df.columns = [str(c).strip() for c in df.columns]
    return df


def read_csv(path: Path,
             encoding: str = "utf-8",
             sep: str = ",") -> pd.DataFrame:
    """
    读取CSV。常见情况：utf-8 或 utf-8-sig（含BOM）。
    这里优先 utf-8，失败再尝试 utf-8-sig。
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    try:
        df = pd.read_csv(path, encoding=encoding, sep=sep)
    except UnicodeDecodeError:
        # 兼容 Excel 导出的 CSV
        df = pd.read_csv(path, encoding="utf-8-sig", sep=sep)

    df = _normalize_columns(df)
    return df


def save_csv(df: pd.DataFrame,
             path: Path,
             index: bool = False,
             encoding: str = "utf-8") -> None:
    """保存CSV，默认不写index。"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=index, encoding=encoding)


def validate_and_prepare(df: pd.DataFrame,
                         *,
                         text_col: str = config.TEXT_COL,
                         label_col: str = config.LABEL_COL,
                         id_col: Optional[str] = config.ID_COL,
                         allowed_labels: Optional[Tuple[str, ...]] = config.ALLOWED_LABELS,
                         drop_unlabeled: bool = True) -> pd.DataFrame:
    """
    基础校验与准备：
    - 必须包含 text_col 与 label_col（id_col 可选）
    - text 统一转成 str；空文本保留（分词后是全零行，不是错误）
    - label 统一转成 str 去首尾空格，并校验 allowed_labels
    - 无标签的行丢弃（训练/评估数据标签不能为空）
    """
    required = (text_col, label_col) if id_col is None else (id_col, text_col, label_col)
    _assert_columns(df, required)

    out = df.copy()

    # 处理空文本：NaN 先填成空串再转 str，避免变成 "nan"
    out[text_col] = out[text_col].fillna("").astype(str)
    out[label_col] = out[label_col].fillna("").astype(str).str.strip()

    if id_col is not None:
        out[id_col] = out[id_col].astype(str)

    if drop_unlabeled:
        out = out[out[label_col] != ""]
    elif (out[label_col] == "").any():
        raise ValueError(f"Found rows with an empty '{label_col}'")

    # 标签合法性校验
    if allowed_labels is not None:
        illegal = sorted(set(out[label_col].unique()) - set(allowed_labels))
        if illegal:
            raise ValueError(
                f"Found illegal labels: {illegal}. Allowed labels: {allowed_labels}"
            )
    return out.reset_index(drop=True)


def corpus_from_frame(df: pd.DataFrame,
                      *,
                      text_col: str = config.TEXT_COL,
                      label_col: str = config.LABEL_COL,
                      id_col: Optional[str] = config.ID_COL) -> Corpus:
    """DataFrame -> Corpus；没有 id 列时用行号。"""
    ids: List[str] = df[id_col].astype(str).tolist() if id_col is not None else [str(i) for i in range(len(df))]
    return Corpus(
        ids=tuple(ids),
        texts=tuple(df[text_col].tolist()),
        labels=tuple(df[label_col].tolist()),
    )


def load_corpus(path: Path,
                *,
                text_col: str = config.TEXT_COL,
                label_col: str = config.LABEL_COL,
                id_col: Optional[str] = config.ID_COL,
                allowed_labels: Optional[Tuple[str, ...]] = config.ALLOWED_LABELS) -> Corpus:
    """
    一站式读取 + 校验
    返回 Corpus(ids, texts, labels)
    """
    df = read_csv(path)
    df = validate_and_prepare(df, text_col=text_col, label_col=label_col, id_col=id_col,
                              allowed_labels=allowed_labels)
    return corpus_from_frame(df, text_col=text_col, label_col=label_col, id_col=id_col)


def split_corpus(corpus: Corpus,
                 *,
                 test_size: float = config.TEST_SIZE,
                 seed: int = config.RANDOM_SEED,
                 shuffle: bool = config.SHUFFLE,
                 stratify: bool = config.STRATIFY) -> Tuple[Corpus, Corpus]:
    """
    划分 Train/Test（默认分层，保持类别比例）。
    """
    indices = list(range(len(corpus)))
    train_idx, test_idx = train_test_split(
        indices,
        test_size=test_size,
        random_state=seed,
        shuffle=shuffle,
        stratify=list(corpus.labels) if stratify else None,
    )
    return corpus.subset(sorted(train_idx)), corpus.subset(sorted(test_idx))
