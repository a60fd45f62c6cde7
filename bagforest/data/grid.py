from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike


@dataclass(frozen=True)
class Attribute:
    index: int
    name: str
    is_class: bool = False


class DataGrid:
    """
    Tabular dataset backed by a pandas DataFrame, with an optional designated class attribute.

    - rows are instances, addressed by position
    - columns are attributes, addressed by position (`Attribute.index`) or name
    - the class attribute is excluded from the non-class attributes used as features

    The wrapped frame is never modified in place, every operation returning a grid returns a copy.
    """

    def __init__(self, frame: pd.DataFrame, class_attribute: Optional[str] = None):
        if not isinstance(frame, pd.DataFrame):
            raise TypeError(f"frame must be a pandas DataFrame, got {type(frame).__name__}")
        # attributes are addressed by name, so every column name is kept as a string
        frame = frame.reset_index(drop=True)
        frame.columns = frame.columns.map(str)
        if frame.columns.has_duplicates:
            raise ValueError(f"Attribute names must be unique, got {frame.columns.tolist()}")
        if class_attribute is not None and class_attribute not in frame.columns:
            raise KeyError(f"Class attribute '{class_attribute}' not found in {frame.columns.tolist()}")

        self._frame = frame
        self._class_attribute = class_attribute

    @classmethod
    def from_arrays(cls, X: ArrayLike, y: Optional[ArrayLike] = None,
                    feature_names: Optional[Sequence[str]] = None,
                    class_attribute: str = "class") -> "DataGrid":
        X_arr = np.asarray(X, dtype=object)
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)

        if feature_names is None:
            feature_names = [f"Feature_{i}" for i in range(X_arr.shape[1])]
        frame = pd.DataFrame(X_arr, columns=list(feature_names))

        if y is None:
            return cls(frame)

        y_arr = np.asarray(y)
        if y_arr.shape[0] != frame.shape[0]:
            raise ValueError(f"X and y must have the same number of samples, got {frame.shape[0]} and {y_arr.shape[0]}")
        frame[class_attribute] = y_arr
        return cls(frame, class_attribute=class_attribute)

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame

    @property
    def n_rows(self) -> int:
        return int(self._frame.shape[0])

    def __len__(self) -> int:
        return self.n_rows

    @property
    def attributes(self) -> List[Attribute]:
        return [
            Attribute(index=i, name=str(name), is_class=(name == self._class_attribute))
            for i, name in enumerate(self._frame.columns)
        ]

    @property
    def non_class_attributes(self) -> List[Attribute]:
        return [attr for attr in self.attributes if not attr.is_class]

    @property
    def class_attribute(self) -> Optional[Attribute]:
        if self._class_attribute is None:
            return None
        return Attribute(index=self._frame.columns.get_loc(self._class_attribute),
                         name=self._class_attribute,
                         is_class=True)

    def class_values(self) -> np.ndarray:
        if self._class_attribute is None:
            raise ValueError("Data grid has no class attribute designated")
        return self._frame[self._class_attribute].to_numpy()

    def records(self) -> List[Dict[str, Any]]:
        """Returns the instances as attribute name -> value mappings, in row order."""
        return self._frame.to_dict(orient="records")

    def restrict(self, rows: ArrayLike, columns: ArrayLike) -> "DataGrid":
        """
        Builds the view seen by a single tree: the given row positions (repeats allowed)
        and the given column positions, plus the class attribute if one is designated.

        :param ArrayLike rows: Row positions, a multiset drawn from [0, n_rows)
        :param ArrayLike columns: Column positions of non-class attributes
        :return DataGrid: A new grid over the restricted copy of the data
        """
        rows = np.asarray(rows, dtype=int)
        columns = np.asarray(columns, dtype=int)

        names = [self._frame.columns[c] for c in columns]
        if self._class_attribute is not None:
            if self._class_attribute in names:
                raise ValueError("The class attribute cannot be part of the restricted feature columns")
            names.append(self._class_attribute)

        view = self._frame.iloc[rows][names].copy()
        return DataGrid(view, class_attribute=self._class_attribute)

    def with_class_values(self, values: ArrayLike, class_attribute: Optional[str] = None) -> "DataGrid":
        """
        Returns a copy of the grid whose class attribute holds `values`.

        The column is appended when the grid has no such column yet (e.g. an unlabeled grid).
        """
        name = class_attribute or self._class_attribute
        if name is None:
            raise ValueError("No class attribute designated and none provided")

        values = np.asarray(values, dtype=object)
        if values.shape[0] != self.n_rows:
            raise ValueError(f"Expected {self.n_rows} class values, got {values.shape[0]}")

        labeled = self._frame.copy()
        labeled[name] = values
        return DataGrid(labeled, class_attribute=name)

    def __repr__(self) -> str:
        return (f"DataGrid(rows={self.n_rows}, attributes={len(self._frame.columns)}, "
                f"class_attribute={self._class_attribute!r})")
