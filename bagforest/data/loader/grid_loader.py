import pathlib
from typing import Any

import numpy as np
import pandas as pd

import bagforest.const as bconst
from bagforest.data.grid import DataGrid
from bagforest.decorators import time_func
from bagforest.utils import get_logger


def detect_filetype(file_path: pathlib.Path) -> str | None:
    """Maps the file extension to a pandas reader name, None for missing files or unknown extensions."""
    if not file_path.exists():
        return None

    return bconst.BF_SUPPORTED_EXT_FTYPE.get(file_path.suffix.lower().lstrip("."))


class DataGridLoader(object):
    def __init__(self, **kwargs) -> None:
        self.init(**kwargs)

    def _process_dataset_path(self, dataset_path: Any) -> pathlib.Path:
        """
        Processes the dataset path such that:
        * the dataset path is set and not None
        * the dataset path is str or pathlib.Path
        * the dataset path is converted to absolute pathlib.Path and validated to exist

        :param Any dataset_path: The dataset path to process
        :return pathlib.Path: The processed dataset path
        :raises ValueError: If the dataset path is not set or does not exist
        """
        if dataset_path is None:
            self.logger.error("No dataset path provided.")
            raise ValueError("dataset_path is required")

        if not isinstance(dataset_path, (str, pathlib.Path)):
            self.logger.error("dataset_path must be a string or pathlib.Path.")
            raise TypeError("dataset_path must be a string or pathlib.Path")

        dataset_path = pathlib.Path(dataset_path).resolve()

        if not dataset_path.exists():
            self.logger.error(f"Dataset path does not exist: {dataset_path}")
            raise ValueError(f"Dataset path does not exist: {dataset_path}")

        return dataset_path

    def init(self, **kwargs) -> None:
        self.logger = get_logger(self.__class__.__name__)

        self.dataset_path = self._process_dataset_path(kwargs.get("dataset_path", None))

        # Column designated as the class attribute, may be None for unlabeled grids
        self.class_attribute = kwargs.get("class_attribute", None)
        assert self.class_attribute is None or isinstance(self.class_attribute, str), \
            "class_attribute must be a string"

        # Separator between columns and instances
        self.separator = kwargs.get("separator", ",")
        assert isinstance(self.separator, str), "separator must be a string"

        # The decimal marker
        self.decimal = kwargs.get("decimal", ".")
        assert isinstance(self.decimal, str), "decimal must be a string"

        # Markers used to indicate missing values in the dataset
        self.missing_markers = kwargs.get("missing_markers", [])
        assert isinstance(self.missing_markers, list), "missing_markers must be a list"
        self.missing_markers = list(set(self.missing_markers))

        # Whether to remove unnamed columns from the dataset (e.g. a saved index)
        self.remove_unnamed = kwargs.get("remove_unnamed", True)
        assert isinstance(self.remove_unnamed, bool), "remove_unnamed must be a boolean"

    def _load_dataset(self) -> pd.DataFrame:
        """
        Loads the raw dataset from its path, considering the filetype.

        Falls back to reading CSV if the filetype is not supported.

        :return pd.DataFrame: The read dataset.
        """
        ftype = detect_filetype(self.dataset_path)
        if not ftype:
            self.logger.warning(f"Could not determine filetype for {self.dataset_path}, falling back to CSV reader!")
            self.logger.info(f"Supported filetypes are: {set(bconst.BF_SUPPORTED_EXT_FTYPE.values())}")
            ftype = "csv"

        try:
            match ftype:
                case "excel":
                    df = pd.read_excel(
                        self.dataset_path,
                        sheet_name=None,
                        na_values=self.missing_markers,
                        decimal=self.decimal,
                    )
                    # Combining all sheets into a single DataFrame
                    df = pd.concat(df.values(), ignore_index=True)
                case "json":
                    df = pd.read_json(self.dataset_path)
                case "parquet":
                    df = pd.read_parquet(self.dataset_path)
                case _:
                    df = pd.read_csv(
                        self.dataset_path,
                        sep=self.separator,
                        decimal=self.decimal,
                        na_values=self.missing_markers,
                    )

            return df
        except Exception as e:
            self.logger.error(f"An error occurred while loading the dataset: {e}")
            raise RuntimeError(f"Failed to load dataset from {self.dataset_path}: {e}") from e

    @time_func
    def load(self) -> DataGrid:
        """
        Loads the dataset from the specified path into a DataGrid.

        :return DataGrid: The loaded grid, with the configured class attribute designated.
        :raises KeyError: if the class attribute is not a column of the dataset.
        :raises RuntimeError: if something wrong happens when reading the data.
        """
        self.logger.info(f"Loading dataset from path: {self.dataset_path}")
        df = self._load_dataset()

        if self.remove_unnamed:
            unnamed_cols = df.columns[df.columns.astype(str).str.contains("^Unnamed")]
            if not unnamed_cols.empty:
                self.logger.info(f"Removing unnamed columns {list(unnamed_cols)}")
                df = df.drop(columns=list(unnamed_cols))

        if self.missing_markers:
            self.logger.info(f"Replacing missing markers {self.missing_markers} with NaN")
            df = df.replace(self.missing_markers, np.nan)

        initial_rows = df.shape[0]
        df = df.dropna(axis=0, how="all").reset_index(drop=True)
        if df.shape[0] != initial_rows:
            self.logger.info(f"Dropped {initial_rows - df.shape[0]} rows with all NaN values")

        if self.class_attribute is not None and self.class_attribute not in df.columns:
            self.logger.error(f"Class attribute '{self.class_attribute}' not found in {df.columns.tolist()}")
            raise KeyError(f"Class attribute '{self.class_attribute}' not found in dataset")

        self.logger.info(f"Loaded {df.shape[0]} instances with {df.shape[1]} attributes")
        return DataGrid(df, class_attribute=self.class_attribute)


def load_data_grid(dataset_path: str | pathlib.Path, class_attribute: str | None = None, **kwargs) -> DataGrid:
    return DataGridLoader(dataset_path=dataset_path, class_attribute=class_attribute, **kwargs).load()
