import numpy as np

from dataclasses import dataclass
from typing import List, Optional, Tuple
from numpy.typing import ArrayLike

from bagforest.data.grid import DataGrid
from bagforest.exceptions import ConfigurationError


@dataclass
class Bag:
    indices: np.ndarray
    features: np.ndarray
    feature_names: List[str]
    oob_indices: np.ndarray


def sample_rows(n: int, rng: np.random.Generator) -> np.ndarray:
    """Draws n row positions in [0, n), uniformly and with replacement."""
    return rng.integers(0, n, size=n)


def sample_features(available: ArrayLike, k: int, rng: np.random.Generator) -> np.ndarray:
    """Draws k distinct entries of `available`, uniformly and without replacement."""
    available = np.asarray(available)
    if not (0 < k <= available.shape[0]):
        raise ConfigurationError(f"Cannot sample {k} features out of {available.shape[0]} available")
    return rng.choice(available, size=k, replace=False)


def spawn_generators(n: int, seed: Optional[int] = None) -> List[np.random.Generator]:
    """
    One independent generator per bag, derived from a single seed.

    The streams do not depend on the order in which the bags are drawn,
    so bags can be built concurrently and still be reproducible.
    """
    return [np.random.default_rng(child) for child in np.random.SeedSequence(seed).spawn(n)]


class BaggingSampler:
    def __init__(self,
                 grid: DataGrid,
                 n_bags: int,
                 max_features: int,
                 seed: Optional[int] = None):
        self.grid = grid
        self.n_bags = n_bags
        self.max_features = max_features
        self.seed = seed

        self.n = grid.n_rows
        self.attributes = grid.non_class_attributes
        self.num_features = len(self.attributes)

        if self.n_bags < 1:
            raise ConfigurationError(f"n_bags must be at least 1, got {self.n_bags}")
        if self.max_features < 1:
            raise ConfigurationError(f"max_features must be at least 1, got {self.max_features}")
        if self.num_features < self.max_features:
            raise ConfigurationError(
                f"Random forest with {self.max_features} features cannot fit "
                f"data grid with {self.num_features} non-class attributes")
        if self.n < 1:
            raise ConfigurationError("Cannot draw bootstrap samples from an empty data grid")

        rngs = spawn_generators(self.n_bags, self.seed)
        self.bags = [self._make_bag(rng) for rng in rngs]

    def _make_bag(self, rng: np.random.Generator) -> Bag:
        positions = np.array([attr.index for attr in self.attributes], dtype=int)
        # feature subspace
        features = sample_features(positions, self.max_features, rng)
        # bootstrap rows
        indices = sample_rows(self.n, rng)

        in_bag = np.zeros(self.n, dtype=bool)
        in_bag[indices] = True
        oob_indices = np.where(~in_bag)[0]

        names = {attr.index: attr.name for attr in self.attributes}
        return Bag(indices=indices,
                   features=features,
                   feature_names=[names[int(f)] for f in features],
                   oob_indices=oob_indices)

    def get_bag(self, bag_index: int) -> Tuple[DataGrid, Bag]:
        assert 0 <= bag_index < len(self.bags), "Bag index out of range"
        bag = self.bags[bag_index]
        return self.grid.restrict(bag.indices, bag.features), bag

    def get_oob_indices(self, bag_index: int) -> np.ndarray:
        assert 0 <= bag_index < len(self.bags), "Bag index out of range"
        return self.bags[bag_index].oob_indices
