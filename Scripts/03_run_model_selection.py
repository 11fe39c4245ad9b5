# Scripts/03_run_model_selection.py
from __future__ import annotations

from datetime import datetime
from pathlib import Path

import config
from Src.data.io import load_corpus, save_csv
from Src.eval.harness import compare_pipelines
from Src.eval.metrics import plot_and_save_confusion_matrix, save_json, save_text


def _timestamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


def _make_run_dir() -> Path:
    run_dir = config.RESULTS_DIR / f"model_selection_{_timestamp()}"
    run_dir.mkdir(parents=True, exist_ok=True)
    return run_dir


def main() -> None:
    run_dir = _make_run_dir()

    # 1) 读取 Train/Test
    train = load_corpus(config.PROCESSED_TRAIN_FILE)
    test = load_corpus(config.PROCESSED_TEST_FILE)

    print(f"[RUN] pipelines={list(config.PIPELINES)}  "
          f"folds={config.CV_FOLDS}x{config.CV_REPEATS}  grid={len(config.TREE_PARAM_GRID)}")

    # 2) 两条管线：词频 / TF-IDF
    comparison = compare_pipelines(
        train.texts,
        train.labels,
        test.texts,
        test.labels,
        weightings=config.PIPELINES,
        param_grid=config.TREE_PARAM_GRID,
        k=config.CV_FOLDS,
        repeats=config.CV_REPEATS,
        seed=config.CV_SEED,
        n_jobs=config.N_JOBS,
        backend=config.PARALLEL_BACKEND,
        verbose=config.PARALLEL_VERBOSE,
    )

    # 3) 每条管线的输出文件
    for name, rep in comparison.reports.items():
        pipe_dir = run_dir / name
        save_csv(rep.selection.cv_result.to_frame(), pipe_dir / "cv_table.csv", index=False)
        save_json(rep.to_dict(), pipe_dir / "metrics.json")
        save_text(rep.test_metrics.report, pipe_dir / "classification_report.txt")

        if config.SAVE_CONFUSION_MATRIX_FIG:
            plot_and_save_confusion_matrix(
                rep.test_metrics.cm,
                out_path=pipe_dir / "confusion_matrix.png",
                labels=rep.test_metrics.metrics["labels"],
                title=f"Confusion Matrix ({name})"
                if config.CONFUSION_MATRIX_NORMALIZE is None
                else f"Confusion Matrix ({name}, normalize={config.CONFUSION_MATRIX_NORMALIZE})",
            )

        print(f"  [{name}] vocab={len(rep.vocabulary)}  best={rep.best_params}  "
              f"cv_acc={rep.cv_accuracy:.4f}  test_acc={rep.test_accuracy:.4f}")

    # 4) 汇总
    summary = comparison.to_dict()
    summary["timestamp"] = datetime.now().isoformat(timespec="seconds")
    save_json(summary, run_dir / config.CV_SUMMARY_JSON.name)
    save_json(summary, config.CV_SUMMARY_JSON)

    lines = [f"Model Selection Summary ({summary['timestamp']})", "-" * 60]
    for name, rep in comparison.reports.items():
        lines.append(
            f"{name:6s}: best={rep.best_params}  cv_acc={rep.cv_accuracy:.6f}  "
            f"test_acc={rep.test_accuracy:.6f}"
        )
    lines.append(f"winner: {comparison.winner}")
    save_text("\n".join(lines), run_dir / config.CV_SUMMARY_TXT.name)
    save_text("\n".join(lines), config.CV_SUMMARY_TXT)

    print("[DONE] Model selection finished.")
    print(f"Results saved to: {run_dir}")
    print("\n".join(lines))


if __name__ == "__main__":
    main()
