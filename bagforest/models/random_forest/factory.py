from typing import Any, Dict

import bagforest.const as bconst
from bagforest.exceptions import ConfigurationError
from bagforest.models.random_forest.forest.forest import RandomForest
from bagforest.models.random_forest.tree.inducer import ID3Inducer


SUPPORTED_FOREST_KEYS: dict[str, tuple[type, ...]] = {
    "forest_size": (int,),
    "features": (int,),
    "n_jobs": (int, type(None)),
    "seed": (int, type(None)),
    "oob_score": (bool,),
    "inducer": (dict,),
}

SUPPORTED_INDUCER_KEYS: dict[str, tuple[type, ...]] = {
    "impurity_metric": (str,),
}


def _check_keys(config: Dict[str, Any], supported: dict[str, tuple[type, ...]], section: str) -> None:
    unknown = set(config) - set(supported)
    if unknown:
        raise ConfigurationError(
            f"Unsupported {section} config keys: {sorted(unknown)}. Supported keys: {sorted(supported)}")

    for key, value in config.items():
        expected = supported[key]
        # bool is an int subclass, only accept it where it is explicitly allowed
        if isinstance(value, bool) and bool not in expected:
            raise ConfigurationError(f"{section} config key '{key}' must be of type {expected}, got bool")
        if not isinstance(value, expected):
            raise ConfigurationError(
                f"{section} config key '{key}' must be of type {expected}, got {type(value).__name__}")


def build_forest(config: Dict[str, Any]) -> RandomForest:
    """
    Factory function to build an unfitted random forest from a configuration dictionary.

    Trees are always grown without a minimum information gain, only the impurity metric of the
    inducer is configurable.

    :param config: A dictionary with the forest hyperparameters and an optional 'inducer' section.
    :return: An instance of RandomForest.
    """
    if config is None or not isinstance(config, dict):
        raise TypeError("Forest config must be provided and of type dictionary")

    _check_keys(config, SUPPORTED_FOREST_KEYS, "forest")

    inducer_config = config.get("inducer", {})
    _check_keys(inducer_config, SUPPORTED_INDUCER_KEYS, "inducer")

    impurity_metric = inducer_config.get("impurity_metric", bconst.BF_TREE_DEFAULT_IMPURITY_METRIC)
    if impurity_metric not in bconst.BF_TREE_IMPURITY_METRICS:
        raise ConfigurationError(
            f"Unsupported impurity metric: {impurity_metric}. Supported metrics: {sorted(bconst.BF_TREE_IMPURITY_METRICS)}")

    return RandomForest(
        forest_size=config.get("forest_size", bconst.BF_FOREST_DEFAULT_SIZE),
        features=config.get("features", bconst.BF_FOREST_DEFAULT_FEATURES),
        inducer=ID3Inducer(min_gain=bconst.BF_FOREST_TREE_MIN_GAIN, impurity_metric=impurity_metric),
        n_jobs=config.get("n_jobs", bconst.BF_FOREST_DEFAULT_N_JOBS),
        seed=config.get("seed", None),
        oob_score=config.get("oob_score", False),
    )
