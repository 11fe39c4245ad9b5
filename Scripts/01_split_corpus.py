# Scripts/01_split_corpus.py
from __future__ import annotations
from collections import Counter
from datetime import datetime
from pathlib import Path

import config
from Src.data.io import Corpus, load_corpus, save_csv, split_corpus
from Src.data.preprocess import join_tokens, tokenize_texts


def ensure_processed_dir() -> None:
    """确保 Data/Processed 目录存在。"""
    config.PROCESSED_DIR.mkdir(parents=True, exist_ok=True)


def _write_preview(corpus: Corpus, out_path: Path, n: int = 20) -> None:
    """
    写一个对照文件：展示分词前后前N行
    """
    head = corpus.subset(range(min(n, len(corpus))))
    df = head.to_frame()
    df[f"{config.TEXT_COL}_tokens"] = [join_tokens(t) for t in tokenize_texts(head.texts)]
    save_csv(df, out_path, index=False)


def main() -> None:
    ensure_processed_dir()

    # 1) 读取原始语料（已解码为 utf-8）
    corpus = load_corpus(config.RAW_CORPUS_FILE)

    # 2) 分层划分 Train/Test
    train, test = split_corpus(corpus)

    # 3) 保存
    save_csv(train.to_frame(), config.PROCESSED_TRAIN_FILE, index=False)
    save_csv(test.to_frame(), config.PROCESSED_TEST_FILE, index=False)
    _write_preview(train, config.PROCESSED_DIR / "preview_tokens.csv")

    # 4) 写运行日志
    info = [
        f"timestamp: {datetime.now().isoformat(timespec='seconds')}",
        f"raw_file: {config.RAW_CORPUS_FILE}",
        f"total_rows: {len(corpus)}",
        f"train_rows: {len(train)} {dict(Counter(train.labels))}",
        f"test_rows: {len(test)} {dict(Counter(test.labels))}",
        f"test_size: {config.TEST_SIZE}",
        f"seed: {config.RANDOM_SEED}",
        f"stratify: {config.STRATIFY}",
    ]
    (config.PROCESSED_DIR / "split_run.txt").write_text("\n".join(info), encoding="utf-8")

    print(f"[OK] {config.RAW_CORPUS_FILE.name} | rows={len(corpus)}")
    print(f"  Train: {len(train)} {dict(Counter(train.labels))}")
    print(f"  Test : {len(test)} {dict(Counter(test.labels))}")
    print(f"[DONE] Split files are saved under: {config.PROCESSED_DIR}")


if __name__ == "__main__":
    main()
