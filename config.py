# config.py 设置项目文件路径和超参数
from __future__ import annotations
from pathlib import Path


# ============================
# 1) 项目根目录与路径
# ============================
ROOT_DIR = Path(__file__).resolve().parent

DATA_DIR = ROOT_DIR / "Data"
RAW_DIR = DATA_DIR / "Raw"
PROCESSED_DIR = DATA_DIR / "Processed"

RESULTS_DIR = ROOT_DIR / "Results"
FIGURES_DIR = RESULTS_DIR / "Figures"
METRICS_DIR = RESULTS_DIR / "Metrics"
FEATURES_DIR = RESULTS_DIR / "Features"

SCRIPTS_DIR = ROOT_DIR / "Scripts"
SRC_DIR = ROOT_DIR / "Src"


# ============================
# 2) 数据文件名（Raw/Processed）
# ============================
RAW_CORPUS_FILE = RAW_DIR / "scientific_abstracts.csv"

PROCESSED_TRAIN_FILE = PROCESSED_DIR / "train_clean.csv"
PROCESSED_TEST_FILE = PROCESSED_DIR / "test_clean.csv"


# ============================
# 3) 结果文件保存路径
# ============================
VOCAB_PATH = FEATURES_DIR / "vocab.txt"
FEATURE_NAMES_PATH = FEATURES_DIR / "feature_names.txt"

CV_SUMMARY_JSON = METRICS_DIR / "cv_summary.json"
CV_SUMMARY_TXT = METRICS_DIR / "cv_summary.txt"


# ============================
# 4) 数据字段与标签
# ============================
ID_COL = "Id"
TEXT_COL = "Text"
LABEL_COL = "Label"

# 学科类别；设为 None 则不校验标签集合
ALLOWED_LABELS = (
    "Machine Learning",
    "Biology",
    "Psychology",
)


# ============================
# 5) 划分超参数
# ============================
RANDOM_SEED = 42
TEST_SIZE = 0.2
SHUFFLE = True
STRATIFY = True


# ============================
# 6) 分词 / 词表超参数
# ============================
STEMMER_TYPE = "porter"      # porter / snowball
MIN_DF = 1                   # 词表最小文档频率；可试 2/3 以剪掉稀疏词


# ============================
# 7) 交叉验证超参数
# ============================
CV_FOLDS = 5
CV_REPEATS = 3
CV_SEED = RANDOM_SEED

# 两条特征管线：原始词频 / TF-IDF
PIPELINES = ("count", "tfidf")


# ============================
# 8) 决策树超参数
# ============================
TREE_BASE_PARAMS = {
    "criterion": "gini",
    "random_state": RANDOM_SEED,
}

# 网格：代价复杂度剪枝系数（越大树越小）
TREE_PARAM_GRID = [
    {"ccp_alpha": 0.0},
    {"ccp_alpha": 0.005},
    {"ccp_alpha": 0.01},
    {"ccp_alpha": 0.02},
    {"ccp_alpha": 0.05},
]


# ============================
# 9) 并行 worker 池
# ============================
N_JOBS = -1                  # -1 表示用满全部 CPU
PARALLEL_BACKEND = "loky"    # loky / threading / multiprocessing
PARALLEL_VERBOSE = 0


# ============================
# 10) 评估超参数
# ============================
METRICS_AVERAGE = "macro"    # 多分类：macro / micro / weighted
ZERO_DIVISION = 0
TOP_FEATURES = 20

SAVE_CONFUSION_MATRIX_FIG = True
CONFUSION_MATRIX_NORMALIZE = None   # None / "true" / "pred" / "all"
