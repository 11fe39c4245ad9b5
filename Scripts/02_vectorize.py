# Scripts/02_vectorize.py
from __future__ import annotations
from datetime import datetime
import config
from Src.data.io import load_corpus
from Src.data.preprocess import tokenize_texts
from Src.features.tfidf import TfIdfWeighter
from Src.features.vectorize import (
    build_matrix,
    build_vocabulary,
    save_sparse_matrix,
    save_vocabulary,
)


def ensure_out_dir() -> None:
    config.FEATURES_DIR.mkdir(parents=True, exist_ok=True)


def main() -> None:
    ensure_out_dir()

    # 1) 读取 Processed 的 train/test
    train = load_corpus(config.PROCESSED_TRAIN_FILE)
    test = load_corpus(config.PROCESSED_TEST_FILE)

    # 2) 分词；词表只在 Train 上构建
    train_tokens = tokenize_texts(train.texts)
    test_tokens = tokenize_texts(test.texts)

    vocab = build_vocabulary(train_tokens, min_df=config.MIN_DF)
    X_train = build_matrix(train_tokens, vocab)
    X_test = build_matrix(test_tokens, vocab)

    # 3) TF-IDF：IDF 取自 Train
    weighter = TfIdfWeighter().fit(X_train)
    W_train = weighter.transform(X_train)
    W_test = weighter.transform(X_test)

    # 4) 保存矩阵与词表
    paths = {
        "X_train_count": config.FEATURES_DIR / "X_train_count.npz",
        "X_test_count": config.FEATURES_DIR / "X_test_count.npz",
        "X_train_tfidf": config.FEATURES_DIR / "X_train_tfidf.npz",
        "X_test_tfidf": config.FEATURES_DIR / "X_test_tfidf.npz",
    }
    save_sparse_matrix(X_train, paths["X_train_count"])
    save_sparse_matrix(X_test, paths["X_test_count"])
    save_sparse_matrix(W_train, paths["X_train_tfidf"])
    save_sparse_matrix(W_test, paths["X_test_tfidf"])

    save_vocabulary(vocab, config.VOCAB_PATH)
    save_vocabulary(vocab, config.FEATURE_NAMES_PATH, feature_names=True)

    empty_train = int((X_train.getnnz(axis=1) == 0).sum())
    empty_test = int((X_test.getnnz(axis=1) == 0).sum())

    # 5) 写运行日志（可选）
    info = [
        f"timestamp: {datetime.now().isoformat(timespec='seconds')}",
        f"train_rows: {len(train)}",
        f"test_rows: {len(test)}",
        f"vocab_size: {len(vocab)}",
        f"min_df: {config.MIN_DF}",
        f"stemmer_type: {config.STEMMER_TYPE}",
        f"empty_train_docs: {empty_train}",
        f"empty_test_docs: {empty_test}",
        f"vocab_path: {config.VOCAB_PATH}",
        f"feature_names_path: {config.FEATURE_NAMES_PATH}",
    ] + [f"{name}_path: {p}" for name, p in paths.items()]
    (config.FEATURES_DIR / "vectorize_run.txt").write_text("\n".join(info), encoding="utf-8")

    print("[OK] Vectorization completed.")
    for name, p in paths.items():
        print(f"  Saved {name:14s} -> {p}")
    print(f"  Vocab size: {len(vocab)}")
    print(f"  Empty docs (train/test): {empty_train}/{empty_test}")


if __name__ == "__main__":
    main()
