# Src/data/preprocess.py
from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Optional

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

import config


# ----------------------------
# 1) 去除符号（用空格替换）
# ----------------------------
# 下划线也算分隔符：\w 包含 "_"
_non_word_re = re.compile(r"[\W_]+", re.UNICODE)


def remove_symbols(text: str) -> str:
    """
    将所有非字母数字字符替换为一个空格。
    示例："(abc);def?" -> " abc def "
    """
    return _non_word_re.sub(" ", text)


# ----------------------------
# 2) 压缩空白
# ----------------------------
_ws_re = re.compile(r"\s+")


def squeeze_whitespace(text: str) -> str:
    """将多个空白压缩为单个空格，并去首尾空格。"""
    return _ws_re.sub(" ", text).strip()


# ----------------------------
# 3) 停用词（固定英文词表，不需要下载语料）
# ----------------------------
STOPWORDS = frozenset(ENGLISH_STOP_WORDS)


def is_artifact(token: str) -> bool:
    """纯数字/纯符号残片：不含任何字母。"""
    return not any(ch.isalpha() for ch in token)


# ----------------------------
# 4) 词干化（依赖 NLTK）
# ----------------------------
@lru_cache(maxsize=None)
def _get_stemmer(stemmer_type: str = "porter"):
    """
    延迟导入 NLTK，避免未安装时影响其他步骤。
    stemmer_type: 'porter' / 'snowball'
    """
    try:
        from nltk.stem import PorterStemmer, SnowballStemmer
    except ImportError as e:
        raise RuntimeError(
            "NLTK is required for stemming but not available. "
            "Install it via: pip install nltk"
        ) from e

    stemmer_type = (stemmer_type or "porter").lower()
    if stemmer_type == "porter":
        return PorterStemmer()
    if stemmer_type == "snowball":
        return SnowballStemmer("english")
    raise ValueError(f"Unsupported stemmer_type: {stemmer_type}")


def stem_token(token: str, stemmer_type: str = config.STEMMER_TYPE) -> str:
    """单个词的词干；只依赖词本身。"""
    return _get_stemmer(stemmer_type).stem(token)


# ----------------------------
# 5) 主分词流程
# ----------------------------
def tokenize(text: Optional[str], *, stemmer_type: str = config.STEMMER_TYPE) -> List[str]:
    """
    单条文本 -> 规范化词序列：
    - 按非字母数字字符切分
    - 丢弃纯数字/纯符号残片
    - 小写
    - 去停用词
    - 词干化
    全部过滤掉时返回空列表（合法，下游当作全零行）。
    """
    if text is None:
        return []

    raw_tokens = remove_symbols(str(text)).split()
    tokens = [tok.lower() for tok in raw_tokens if not is_artifact(tok)]
    tokens = [tok for tok in tokens if tok not in STOPWORDS]
    return [stem_token(tok, stemmer_type) for tok in tokens]


def tokenize_texts(texts: Iterable[Optional[str]], *, stemmer_type: str = config.STEMMER_TYPE) -> List[List[str]]:
    """对一组文本逐条分词，顺序与输入一致。"""
    return [tokenize(t, stemmer_type=stemmer_type) for t in texts]


def join_tokens(tokens: Iterable[str]) -> str:
    """把词序列拼回字符串（用于预览/落盘）。"""
    return squeeze_whitespace(" ".join(tokens))
