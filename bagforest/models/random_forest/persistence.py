import pathlib

import joblib

from bagforest.exceptions import NotFittedError
from bagforest.utils import get_logger
from bagforest.models.random_forest.forest.forest import RandomForest

logger = get_logger(__name__)


def save_forest(forest: RandomForest, path: str | pathlib.Path) -> pathlib.Path:
    """
    Dumps a fitted forest with joblib, creating the parent directory if needed.

    :param RandomForest forest: The fitted forest to save
    :param str | pathlib.Path path: Target file
    :return pathlib.Path: The resolved path the forest was written to
    """
    if not hasattr(forest, "trees_"):
        raise NotFittedError("Only fitted forests can be saved")

    path = pathlib.Path(path).resolve()
    if not path.parent.exists():
        logger.warning(f"Save path parent directory does not exist, creating it: {path.parent}")
        path.parent.mkdir(parents=True, exist_ok=True)

    joblib.dump(forest, path)
    logger.info(f"Forest saved to {path}")
    return path


def load_forest(path: str | pathlib.Path) -> RandomForest:
    path = pathlib.Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"No saved forest at {path}")

    forest = joblib.load(path)
    if not isinstance(forest, RandomForest):
        raise TypeError(f"Expected a RandomForest in {path}, got {type(forest).__name__}")

    logger.info(f"Forest loaded from {path}")
    return forest
