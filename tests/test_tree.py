"""Tests for the ID3 tree inducer, its impurity measures and its graph export."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest
from graphviz import Digraph

from bagforest.data.grid import DataGrid
from bagforest.models.random_forest.tree.impurity import compute_impurity, entropy, gini_impurity, information_gain
from bagforest.models.random_forest.tree.inducer import ID3Inducer, TreeInducer
from bagforest.models.random_forest.tree.tree import Tree
from bagforest.models.random_forest.tree.tree_graph import build_graph


class TestImpurity:
    def test_entropy(self) -> None:
        assert entropy(np.array([1, 1])) == pytest.approx(1.0)
        assert entropy(np.array([4, 0])) == 0.0
        assert entropy(np.array([0, 0])) == 0.0

    def test_gini(self) -> None:
        assert gini_impurity(np.array([1, 1])) == pytest.approx(0.5)
        assert gini_impurity(np.array([3])) == pytest.approx(0.0)

    def test_unknown_metric(self) -> None:
        with pytest.raises(ValueError):
            compute_impurity(np.array([1, 1]), "variance")

    def test_information_gain(self) -> None:
        perfect = information_gain(np.array([2, 2]), [np.array([2, 0]), np.array([0, 2])], "entropy")
        useless = information_gain(np.array([2, 2]), [np.array([1, 1]), np.array([1, 1])], "entropy")
        assert perfect == pytest.approx(1.0)
        assert useless == 0.0


class TestTree:
    def test_splits_on_most_informative_attribute(self, weather_grid: DataGrid) -> None:
        tree = Tree().fit(weather_grid)

        assert tree.root.split_attribute == "outlook"
        assert tree.root.gain == pytest.approx(1.0)
        assert set(tree.root.children) == {"sunny", "rain"}
        assert all(child.is_leaf for child in tree.root.children.values())
        assert tree.n_nodes == 3

    def test_predict(self, weather_grid: DataGrid) -> None:
        tree = Tree().fit(weather_grid)
        assert tree.predict({"outlook": "rain", "windy": "no"}) == "yes"
        assert tree.predict({"outlook": "sunny", "windy": "no"}) == "no"

    def test_unseen_value_falls_back_to_majority(self, weather_grid: DataGrid) -> None:
        tree = Tree().fit(weather_grid)
        # root holds 2 "no" and 2 "yes", the lowest label wins the tie
        assert tree.predict({"outlook": "overcast", "windy": "no"}) == "no"

    def test_zero_gain_split_is_taken(self) -> None:
        frame = pd.DataFrame({"noise": ["a", "b", "a", "b"], "label": [0, 1, 1, 0]})
        tree = Tree(min_gain=0.0).fit(DataGrid(frame, class_attribute="label"))
        assert tree.root.split_attribute == "noise"
        assert tree.root.gain == 0.0

    def test_min_gain_stops_splitting(self, weather_grid: DataGrid) -> None:
        tree = Tree(min_gain=2.0).fit(weather_grid)
        assert tree.root.is_leaf
        assert tree.n_nodes == 1

    def test_constant_attribute_is_never_split(self) -> None:
        frame = pd.DataFrame({"const": ["k"] * 3, "label": ["a", "b", "b"]})
        tree = Tree().fit(DataGrid(frame, class_attribute="label"))
        assert tree.root.is_leaf
        assert tree.predict({"const": "k"}) == "b"

    def test_invalid_parameters(self) -> None:
        with pytest.raises(ValueError):
            Tree(impurity_metric="variance")
        with pytest.raises(ValueError):
            Tree(min_gain=-1.0)

    def test_requires_class_attribute(self) -> None:
        with pytest.raises(ValueError):
            Tree().fit(DataGrid(pd.DataFrame({"x": [1, 2]})))


class TestInducer:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(ID3Inducer(), TreeInducer)

    def test_train_and_predict(self, weather_grid: DataGrid) -> None:
        inducer = ID3Inducer(impurity_metric="gini")
        model = inducer.train(weather_grid)
        assert isinstance(model, Tree)
        assert inducer.predict(model, {"outlook": "sunny", "windy": "yes"}) == "no"


class TestTreeGraph:
    def test_build_graph_without_rendering(self, weather_grid: DataGrid) -> None:
        graph = build_graph(Tree().fit(weather_grid), filename="weather")

        assert isinstance(graph, Digraph)
        assert "Split: outlook" in graph.source
        assert "= sunny" in graph.source
        assert "= rain" in graph.source

    def test_unfitted_tree(self) -> None:
        with pytest.raises(ValueError):
            build_graph(Tree())
