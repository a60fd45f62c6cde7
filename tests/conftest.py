"""Shared fixtures: small categorical data grids."""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from bagforest.data.grid import DataGrid


@pytest.fixture
def tiny_grid() -> DataGrid:
    """4 instances, 2 non-class attributes."""
    frame = pd.DataFrame({
        "x1": ["a", "a", "b", "b"],
        "x2": ["p", "q", "p", "q"],
        "label": ["yes", "no", "yes", "no"],
    })
    return DataGrid(frame, class_attribute="label")


@pytest.fixture
def weather_grid() -> DataGrid:
    frame = pd.DataFrame({
        "outlook": ["sunny", "sunny", "rain", "rain"],
        "windy": ["no", "yes", "no", "yes"],
        "play": ["no", "no", "yes", "yes"],
    })
    return DataGrid(frame, class_attribute="play")


@pytest.fixture
def synthetic_grid() -> DataGrid:
    """40 instances, 4 categorical attributes, class mostly driven by `a` and `b`."""
    rng = np.random.default_rng(1234)
    n = 40
    frame = pd.DataFrame({
        "a": rng.choice(["low", "mid", "high"], size=n),
        "b": rng.choice(["x", "y"], size=n),
        "c": rng.choice(["u", "v", "w"], size=n),
        "d": rng.choice(["on", "off"], size=n),
    })
    frame["target"] = np.where((frame["a"] == "high") | (frame["b"] == "x"), "pos", "neg")
    return DataGrid(frame, class_attribute="target")


@pytest.fixture
def holdout_grid(synthetic_grid: DataGrid) -> DataGrid:
    """The synthetic attributes without the class column."""
    return DataGrid(synthetic_grid.frame.drop(columns=["target"]).iloc[:15])
