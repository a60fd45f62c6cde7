from typing import Any, Mapping, Protocol, runtime_checkable

import bagforest.const as bconst
from bagforest.data.grid import DataGrid
from .tree import Tree


@runtime_checkable
class TreeInducer(Protocol):
    """Capability the forest needs from a single-tree learner."""

    def train(self, view: DataGrid) -> Any:
        ...

    def predict(self, model: Any, instance: Mapping[str, Any]) -> Any:
        ...


class ID3Inducer:
    def __init__(self,
                 min_gain: float = bconst.BF_FOREST_TREE_MIN_GAIN,
                 impurity_metric: str = bconst.BF_TREE_DEFAULT_IMPURITY_METRIC):
        self.min_gain = min_gain
        self.impurity_metric = impurity_metric

    def train(self, view: DataGrid) -> Tree:
        return Tree(min_gain=self.min_gain, impurity_metric=self.impurity_metric).fit(view)

    def predict(self, model: Tree, instance: Mapping[str, Any]) -> Any:
        return model.predict(instance)

    def __repr__(self) -> str:
        return f"ID3Inducer(min_gain={self.min_gain}, impurity_metric={self.impurity_metric!r})"
