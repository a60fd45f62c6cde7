import logging

##############################
# GENERAL CONSTANTS
##############################

BF_SUPPORTED_EXT_FTYPE: dict[str, str] = {
    "csv": "csv",
    "xlsx": "excel",
    "xls": "excel",
    "json": "json",
    "parquet": "parquet",
}

##############################
# LOGGING CONSTANTS
##############################

# Every class logger is a child of this one
BF_LOGGING_ROOT: str = "bagforest"
BF_LOGGING_LOG_LEVEL: int = logging.INFO
BF_LOGGING_FORMAT: str = "[%(asctime)s] - %(name)s - [%(levelname)s] - %(message)s"
BF_LOGGING_MAX_BYTES: int = 10 * (1 << 20)  # 10 MB
BF_LOGGING_BACKUP_COUNT: int = 3

##############################
# FOREST CONSTANTS
##############################

BF_FOREST_DEFAULT_SIZE: int = 10
BF_FOREST_DEFAULT_FEATURES: int = 1
BF_FOREST_DEFAULT_N_JOBS: int = 1

# Trees in the forest are grown without a minimum information gain
BF_FOREST_TREE_MIN_GAIN: float = 0.0

##############################
# TREE CONSTANTS
##############################

BF_TREE_IMPURITY_METRICS: set[str] = {"entropy", "gini"}
BF_TREE_DEFAULT_IMPURITY_METRIC: str = "entropy"

##############################
# GRAPH CONSTANTS
##############################

BF_GRAPH_FORMAT: str = "png"
BF_GRAPH_NODE_ATTR: dict[str, str] = {
    "shape": "box",
    "style": "filled,rounded",
    "fontname": "helvetica",
}
