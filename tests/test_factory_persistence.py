"""Tests for building forests from config dicts and saving/loading fitted forests."""

from __future__ import annotations

import pathlib

import joblib
import pytest

from bagforest.data.grid import DataGrid
from bagforest.exceptions import ConfigurationError, NotFittedError
from bagforest.models.random_forest import ID3Inducer, RandomForest
from bagforest.models.random_forest.factory import build_forest
from bagforest.models.random_forest.persistence import load_forest, save_forest


class TestBuildForest:
    def test_full_config(self) -> None:
        forest = build_forest({
            "forest_size": 5,
            "features": 2,
            "n_jobs": 2,
            "seed": 13,
            "oob_score": True,
            "inducer": {"impurity_metric": "gini"},
        })

        assert isinstance(forest, RandomForest)
        assert forest.get_params(deep=False)["forest_size"] == 5
        assert forest.features == 2
        assert forest.seed == 13
        assert forest.oob_score is True
        assert isinstance(forest.inducer, ID3Inducer)
        assert forest.inducer.impurity_metric == "gini"
        assert forest.inducer.min_gain == 0.0

    def test_defaults(self) -> None:
        forest = build_forest({})
        assert forest.forest_size == 10
        assert forest.features == 1
        assert forest.inducer.impurity_metric == "entropy"

    @pytest.mark.parametrize("config", [
        {"trees": 5},
        {"forest_size": "5"},
        {"forest_size": True},
        {"oob_score": 1},
        {"inducer": {"min_gain": 0.5}},
        {"inducer": {"impurity_metric": "variance"}},
    ])
    def test_invalid_config(self, config: dict) -> None:
        with pytest.raises(ConfigurationError):
            build_forest(config)

    def test_config_must_be_dict(self) -> None:
        with pytest.raises(TypeError):
            build_forest(None)


class TestPersistence:
    def test_round_trip(self, synthetic_grid: DataGrid, holdout_grid: DataGrid, tmp_path: pathlib.Path) -> None:
        forest = RandomForest(forest_size=4, features=2, seed=0).fit(synthetic_grid)
        path = save_forest(forest, tmp_path / "models" / "forest.pkl")

        assert path.exists()
        loaded = load_forest(path)
        assert loaded.predict_ratio(holdout_grid) == forest.predict_ratio(holdout_grid)
        assert str(loaded) == str(forest)

    def test_unfitted_forest_is_not_saved(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(NotFittedError):
            save_forest(RandomForest(), tmp_path / "forest.pkl")

    def test_load_rejects_other_objects(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "other.pkl"
        joblib.dump({"not": "a forest"}, path)
        with pytest.raises(TypeError):
            load_forest(path)

    def test_load_missing_file(self, tmp_path: pathlib.Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_forest(tmp_path / "missing.pkl")
