from typing import Any, List, Mapping, Optional

import numpy as np

import bagforest.const as bconst
from bagforest.data.grid import DataGrid
from .node import Node


class Tree:
    """
    ID3 decision tree for classification over discrete attributes.

    Supports both binary and multi-class classification.
    Designed as a base estimator for the random forest, it is trained on a restricted DataGrid view
    and predicts one instance at a time from an attribute name -> value mapping.
    """
    def __init__(self,
                 min_gain: float = bconst.BF_FOREST_TREE_MIN_GAIN,
                 impurity_metric: str = bconst.BF_TREE_DEFAULT_IMPURITY_METRIC):
        self.root: Optional[Node] = None
        self.attributes_: List[str] = []
        self.is_fitted_ = False

        self.min_gain = min_gain
        self.impurity_metric = impurity_metric

        if self.impurity_metric not in bconst.BF_TREE_IMPURITY_METRICS:
            raise ValueError(f"impurity_metric must be one of {sorted(bconst.BF_TREE_IMPURITY_METRICS)}")
        if self.min_gain < 0:
            raise ValueError("min_gain must be non-negative")

    def fit(self, grid: DataGrid) -> "Tree":
        if grid.class_attribute is None:
            raise ValueError("The training grid must have a class attribute designated")
        if grid.n_rows == 0:
            raise ValueError("Cannot fit a tree on an empty grid")

        self.attributes_ = [attr.name for attr in grid.non_class_attributes]
        self.root = Node(data=grid.frame[self.attributes_],
                         labels=np.asarray(grid.class_values()),
                         attributes=self.attributes_,
                         impurity_metric=self.impurity_metric,
                         min_gain=self.min_gain)
        self.is_fitted_ = True
        return self

    def predict(self, instance: Mapping[str, Any]) -> Any:
        assert self.is_fitted_, "The tree must be trained before prediction"

        current = self.root
        while not current.is_leaf:
            # values never seen at this node fall back to the node's majority class
            child = current.children.get(instance[current.split_attribute])
            if child is None:
                break
            current = child

        return current.best_label

    @property
    def n_nodes(self) -> int:
        return self.root.count_nodes() if self.root is not None else 0

    def __str__(self) -> str:
        return f"Tree(attributes={self.attributes_}, nodes={self.n_nodes})"
