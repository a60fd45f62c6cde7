from .forest.forest import RandomForest, BootstrappedTree, VoteRatioMap
from .tree.tree import Tree
from .tree.inducer import ID3Inducer, TreeInducer
from .sampling.bagging import BaggingSampler, Bag

__all__ = ["RandomForest", "BootstrappedTree", "VoteRatioMap", "Tree", "ID3Inducer", "TreeInducer",
           "BaggingSampler", "Bag"]
