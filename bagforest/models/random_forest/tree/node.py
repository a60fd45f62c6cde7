from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .impurity import compute_impurity, information_gain


class Node:
    """
    Implementation of an ID3-style decision tree node.

    Each node either:
    - Acts as a decision node (internal): splits the samples on the attribute with the highest information gain,
      with one child per distinct value of that attribute (multiway split)
    - Acts as a leaf node: holds the class distribution of the samples reaching it and predicts its majority class

    Attributes are treated as discrete, every distinct value is its own branch, and an attribute is consumed once used
    on a path from the root.
    """
    def __init__(self,
                 data: pd.DataFrame,
                 labels: np.ndarray,
                 attributes: Sequence[str],
                 impurity_metric: str = 'entropy',
                 min_gain: float = 0.0,
                 depth: int = 0):
        """
        Initialize the node and recursively grow the subtree below it.

        :param data: the samples reaching this node, one column per candidate attribute
        :param labels: the class label of each sample, with shape (n_samples,)
        :param attributes: names of the attributes still available for splitting on this path
        :param impurity_metric: 'entropy' or 'gini', metric used for the information gain of a split
        :param min_gain: the minimum information gain a split must reach to be taken
        :param depth: current depth of the node in the tree
        """
        self.impurity_metric = impurity_metric
        self.min_gain = min_gain
        self.depth = depth

        self.n = int(labels.shape[0])
        self.split_attribute: Optional[str] = None
        self.gain: Optional[float] = None
        self.children: Dict[Any, "Node"] = {}
        self.is_leaf = False

        self.class_labels, label_codes, self.class_counts = np.unique(labels, return_inverse=True, return_counts=True)
        self.class_count_dict = {l: int(c) for l, c in zip(self.class_labels, self.class_counts)}

        # np.unique sorts the labels, so ties resolve to the lowest label
        self.best_label = max(self.class_count_dict, key=self.class_count_dict.get)
        self.best_percentage = self.class_count_dict[self.best_label] / self.n

        self.impurity = compute_impurity(self.class_counts, self.impurity_metric)

        # a pure node or one without attributes left cannot be split any further
        if self.impurity == 0.0 or len(attributes) == 0:
            self.is_leaf = True
            return

        self._split_node(data, label_codes.reshape(-1), labels, list(attributes))

        if not self.children:
            self.is_leaf = True

    def _split_node(self, data: pd.DataFrame, label_codes: np.ndarray, labels: np.ndarray, attributes: List[str]):
        attribute, gain, codes, values = self._find_best_split(data, label_codes, attributes)
        if attribute is None or gain < self.min_gain:
            return

        self.split_attribute = attribute
        self.gain = gain

        remaining = [a for a in attributes if a != attribute]
        child_data = data[remaining]
        for code, value in enumerate(values):
            mask = codes == code
            self.children[value] = Node(data=child_data[mask],
                                        labels=labels[mask],
                                        attributes=remaining,
                                        impurity_metric=self.impurity_metric,
                                        min_gain=self.min_gain,
                                        depth=self.depth + 1)

    def _find_best_split(self, data: pd.DataFrame,
                         label_codes: np.ndarray,
                         attributes: List[str]) -> Tuple[Optional[str], float, Optional[np.ndarray], list]:
        best_attribute, best_gain, best_codes, best_values = None, -np.inf, None, []

        for attribute in attributes:
            codes, values = pd.factorize(data[attribute], use_na_sentinel=False)
            # a single distinct value leaves every sample on one branch
            if len(values) < 2:
                continue

            partition_counts = np.zeros((len(values), len(self.class_labels)), dtype=float)
            np.add.at(partition_counts, (codes, label_codes), 1)

            gain = information_gain(self.class_counts, partition_counts, self.impurity_metric)
            if gain > best_gain:
                best_attribute, best_gain, best_codes, best_values = attribute, gain, codes, list(values)

        return best_attribute, best_gain, best_codes, best_values

    def count_nodes(self) -> int:
        return 1 + sum(child.count_nodes() for child in self.children.values())
