import logging
import numbers

import numpy as np
import pandas as pd

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple
from joblib import Parallel, delayed
from sklearn.base import BaseEstimator

import bagforest.const as bconst
from bagforest.data.grid import DataGrid
from bagforest.decorators import time_func
from bagforest.exceptions import ConfigurationError, NotFittedError, SchemaMismatchError
from bagforest.utils import get_logger
from bagforest.models.random_forest.tree.inducer import ID3Inducer, TreeInducer
from bagforest.models.random_forest.sampling.bagging import BaggingSampler

# instance position -> class label -> number of trees voting for it
VoteRatioMap = Dict[int, Dict[Any, int]]


@dataclass
class BootstrappedTree:
    features: List[str]
    oob_indices: np.ndarray
    model: Any

    @classmethod
    def train_from_bag(cls, sampler: BaggingSampler, bag_index: int, inducer: TreeInducer) -> 'BootstrappedTree':
        view, bag = sampler.get_bag(bag_index)
        model = inducer.train(view)
        return cls(features=bag.feature_names, oob_indices=bag.oob_indices, model=model)

    def predict_one(self, inducer: TreeInducer, instance: Mapping[str, Any]) -> Any:
        # the tree only ever sees the attributes of its own feature subset
        instance_sub = {name: instance[name] for name in self.features}
        return inducer.predict(self.model, instance_sub)

    def predict_all(self, inducer: TreeInducer, instances: List[Mapping[str, Any]]) -> List[Any]:
        return [self.predict_one(inducer, instance) for instance in instances]


class RandomForest(BaseEstimator):
    """
    Random forest classifier over a DataGrid, built from bagged ID3 trees.

    - __init__() stores only hyperparameters
    - fit(grid) draws one bootstrap sample and one feature subset per tree and trains the trees
    - predict(grid) labels the grid by plurality vote
    - predict_ratio(grid) returns every instance's vote distribution
    - generate_max_ratio(grid, votes) labels the grid from a vote distribution

    Ties between equally voted labels resolve to the label that comes first in `classes_`
    (the sorted class labels seen at fit time); labels unknown to the forest come after those,
    ordered by their string form.
    """

    def __init__(self,
                 forest_size: int = bconst.BF_FOREST_DEFAULT_SIZE,
                 features: int = bconst.BF_FOREST_DEFAULT_FEATURES,
                 inducer: Optional[TreeInducer] = None,
                 n_jobs: Optional[int] = bconst.BF_FOREST_DEFAULT_N_JOBS,
                 seed: Optional[int] = None,
                 oob_score: bool = False):
        self.forest_size = forest_size
        self.features = features
        self.inducer = inducer
        self.n_jobs = n_jobs
        self.seed = seed
        self.oob_score = oob_score

    @property
    def logger(self) -> logging.Logger:
        return get_logger(self.__class__.__name__)

    def _check_params(self) -> None:
        for name in ("forest_size", "features"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 1:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")

        if self.inducer is not None and not isinstance(self.inducer, TreeInducer):
            raise ConfigurationError(
                f"inducer must provide train(view) and predict(model, instance), got {type(self.inducer).__name__}")

    @time_func
    def fit(self, grid: DataGrid) -> "RandomForest":
        self._check_params()

        if not isinstance(grid, DataGrid):
            raise TypeError(f"fit expects a DataGrid, got {type(grid).__name__}")
        if grid.class_attribute is None:
            raise ValueError("The training grid must have a class attribute designated")

        n_missing = int(pd.isna(grid.class_values()).sum())
        if n_missing:
            raise ValueError(
                f"Class attribute '{grid.class_attribute.name}' has {n_missing} missing values, "
                f"drop or impute them before fitting")

        n_non_class = len(grid.non_class_attributes)
        if n_non_class < self.features:
            raise ConfigurationError(
                f"Random forest with {self.features} features cannot fit "
                f"data grid with {n_non_class} non-class attributes")

        inducer = self.inducer if self.inducer is not None else ID3Inducer(min_gain=bconst.BF_FOREST_TREE_MIN_GAIN)
        sampler = BaggingSampler(grid, n_bags=self.forest_size, max_features=self.features, seed=self.seed)

        self.logger.info(
            f"Fitting {self.forest_size} trees with {self.features}/{n_non_class} features "
            f"on {grid.n_rows} instances (n_jobs={self.n_jobs})")

        # one slot per tree index, returned in order regardless of scheduling
        trees = Parallel(n_jobs=self.n_jobs, prefer="threads")(
            delayed(BootstrappedTree.train_from_bag)(sampler, i, inducer)
            for i in range(self.forest_size)
        )

        # the previous ensemble is only replaced once every tree trained successfully
        self.trees_ = list(trees)
        self.inducer_ = inducer
        self.class_attribute_ = grid.class_attribute.name
        self.classes_ = np.unique(grid.class_values())
        self.class_rank_ = {label: rank for rank, label in enumerate(self.classes_)}
        self.feature_names_in_ = np.array([attr.name for attr in grid.non_class_attributes], dtype=object)
        self.n_features_in_ = n_non_class

        if self.oob_score:
            self._compute_oob_score(grid)

        self.logger.info(f"Fitted random forest with {len(self.trees_)} trees, classes {self.classes_.tolist()}")
        return self

    @time_func
    def predict(self, grid: DataGrid) -> DataGrid:
        votes = self.predict_ratio(grid)
        return self._label_grid(grid, votes)

    @time_func
    def predict_ratio(self, grid: DataGrid) -> VoteRatioMap:
        self._check_fitted()
        self._check_schema(grid)

        tree_votes = self._collect_votes(grid)

        votes: VoteRatioMap = {}
        for i in range(grid.n_rows):
            counts: Dict[Any, int] = {}
            for predictions in tree_votes:
                label = predictions[i]
                counts[label] = counts.get(label, 0) + 1
            votes[i] = counts
        return votes

    @time_func
    def generate_max_ratio(self, grid: DataGrid, votes: VoteRatioMap) -> DataGrid:
        self._check_fitted()
        return self._label_grid(grid, votes)

    def predict_proba(self, grid: DataGrid) -> pd.DataFrame:
        """
        Vote fractions per instance, one column per class label.

        :param DataGrid grid: The grid to predict
        :return pd.DataFrame: Rows in grid order, columns in the tie-break order of the labels
        """
        votes = self.predict_ratio(grid)

        labels = {label for counts in votes.values() for label in counts}
        columns = sorted(labels.union(self.classes_.tolist()), key=self._label_rank)

        proba = pd.DataFrame(
            [[votes[i].get(label, 0) for label in columns] for i in range(grid.n_rows)],
            columns=columns,
            dtype=float,
        )
        return proba / len(self.trees_)

    def _collect_votes(self, grid: DataGrid) -> List[List[Any]]:
        instances = grid.records()
        return Parallel(n_jobs=self.n_jobs, prefer="threads")(
            delayed(tree.predict_all)(self.inducer_, instances) for tree in self.trees_
        )

    def _label_grid(self, grid: DataGrid, votes: VoteRatioMap) -> DataGrid:
        labels = []
        for i in range(grid.n_rows):
            counts = votes.get(i)
            if not counts:
                raise ValueError(f"No votes provided for instance {i}")
            labels.append(self._resolve_votes(counts))

        # a labeled grid keeps its own class column, an unlabeled one gets the training name
        target = grid.class_attribute.name if grid.class_attribute is not None else self.class_attribute_
        return grid.with_class_values(labels, class_attribute=target)

    def _resolve_votes(self, counts: Mapping[Any, int]) -> Any:
        label, _ = min(counts.items(), key=lambda item: (-item[1], self._label_rank(item[0])))
        return label

    def _label_rank(self, label: Any) -> Tuple[int, str]:
        rank = self.class_rank_.get(label)
        if rank is None:
            return len(self.class_rank_), str(label)
        return rank, ""

    def _compute_oob_score(self, grid: DataGrid) -> None:
        instances = grid.records()
        truth = grid.class_values()

        oob_votes: VoteRatioMap = {}
        for tree in self.trees_:
            for i in tree.oob_indices.tolist():
                label = tree.predict_one(self.inducer_, instances[i])
                counts = oob_votes.setdefault(i, {})
                counts[label] = counts.get(label, 0) + 1

        self.oob_votes_ = dict(sorted(oob_votes.items()))
        if not self.oob_votes_:
            self.logger.warning("No instance was left out of every bag, oob score is undefined")
            self.oob_score_ = float("nan")
            return

        hits = [self._resolve_votes(counts) == truth[i] for i, counts in self.oob_votes_.items()]
        self.oob_score_ = float(np.mean(hits))
        self.logger.info(f"Out-of-bag accuracy {self.oob_score_:.4f} over {len(hits)} instances")

    def _check_fitted(self):
        if not hasattr(self, "trees_") or self.trees_ is None or len(self.trees_) == 0:
            raise NotFittedError("Estimator not fitted. "
                                 "Call fit with appropriate input data before using this estimator.")
        if not hasattr(self, "feature_names_in_") or not hasattr(self, "classes_"):
            raise NotFittedError("Estimator not fitted and missing metadata. "
                                 "Call fit with appropriate input data before using this estimator.")

    def _check_schema(self, grid: DataGrid) -> None:
        if not isinstance(grid, DataGrid):
            raise TypeError(f"Expected a DataGrid, got {type(grid).__name__}")

        available = {attr.name for attr in grid.non_class_attributes}
        required = {name for tree in self.trees_ for name in tree.features}
        missing = [name for name in self.feature_names_in_.tolist() if name in required and name not in available]
        if missing:
            self.logger.error(f"Prediction grid is missing attributes {missing}")
            raise SchemaMismatchError(missing)

    def __str__(self) -> str:
        if not hasattr(self, "trees_"):
            return f"RandomForest(ForestSize: {self.forest_size}, Features: {self.features}, unfitted)"

        lines = [f"RandomForest(ForestSize: {self.forest_size}, Features: {self.features},"]
        lines.append(f"  BaggedModel(trees: {len(self.trees_)}, classes: {self.classes_.tolist()})")
        for i, tree in enumerate(self.trees_):
            lines.append(f"  [{i}] features={tree.features} model={tree.model}")
        lines.append(")")
        return "\n".join(lines)
