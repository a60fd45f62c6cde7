from typing import Iterable

import numpy as np


def gini_impurity(class_counts: np.ndarray) -> float:
    class_counts = np.asarray(class_counts, dtype=float)
    total = np.sum(class_counts)
    return float(1. - np.sum(np.square(class_counts / total))) if total > 0 else 0.0


def entropy(class_counts: np.ndarray) -> float:
    class_counts = np.asarray(class_counts, dtype=float)
    total = np.sum(class_counts)
    if total == 0:
        return 0.0

    probs = class_counts / total
    probs = probs[probs > 0]  # Avoid log(0)
    return float(-np.sum(probs * np.log2(probs)))


def compute_impurity(class_counts: np.ndarray, metric: str) -> float:
    if metric == 'gini':
        return gini_impurity(class_counts)
    elif metric == 'entropy':
        return entropy(class_counts)
    else:
        raise ValueError(f"Unknown impurity metric: {metric}")


def information_gain(parent_counts: np.ndarray, partition_counts: Iterable[np.ndarray], metric: str) -> float:
    """
    Reduction in impurity from a parent node to the partitions produced by a split,
    with each partition weighted by its share of the parent's samples.
    """
    total = float(np.sum(parent_counts))
    if total == 0:
        return 0.0

    split_cost = sum(
        (np.sum(counts) / total) * compute_impurity(counts, metric)
        for counts in partition_counts
    )
    # gain is never negative, clip the rounding noise of zero-gain splits
    return max(compute_impurity(parent_counts, metric) - split_cost, 0.0)
