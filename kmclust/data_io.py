"""
Data loading helpers and the sample-matrix container consumed by the engine.

The loaders only read what is already on disk. Filtering and imputation of
missing values happen upstream; the engine rejects anything non-finite.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from .errors import DimensionMismatch, NonFiniteInput


PathLike = Union[str, Path]
MatrixLike = Union["DataMatrix", pd.DataFrame, np.ndarray]


@dataclass(frozen=True)
class DataMatrix:
    """
    Container for a numeric data matrix and optional axis labels.

    Attributes
    ----------
    values:
        Two-dimensional NumPy array with shape (n_samples, n_features).
    sample_ids:
        Optional iterable of sample identifiers aligned with the rows.
    feature_names:
        Optional iterable of feature identifiers aligned with the columns.
    """

    values: np.ndarray
    sample_ids: Optional[Tuple[str, ...]] = None
    feature_names: Optional[Tuple[str, ...]] = None

    def __post_init__(self) -> None:
        if self.values.ndim != 2:
            raise DimensionMismatch("DataMatrix.values must be two-dimensional.")
        if self.sample_ids is not None and len(self.sample_ids) != self.values.shape[0]:
            raise DimensionMismatch("sample_ids length must match number of rows.")
        if self.feature_names is not None and len(self.feature_names) != self.values.shape[1]:
            raise DimensionMismatch("feature_names length must match number of columns.")

    @property
    def n_samples(self) -> int:
        return int(self.values.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.values.shape[1])

    def require_finite(self) -> "DataMatrix":
        """Raise ``NonFiniteInput`` if any entry is NaN or infinite."""
        n_bad = int(np.count_nonzero(~np.isfinite(self.values)))
        if n_bad:
            raise NonFiniteInput(n_bad)
        return self


def sample_index(sample_ids: Optional[Sequence[str]], n_samples: int) -> pd.Index:
    """Index of sample identifiers, or ``sample_<i>`` when none are known."""
    if sample_ids is not None:
        return pd.Index(sample_ids, name="sample")
    return pd.Index([f"sample_{i}" for i in range(n_samples)], name="sample")


def as_data_matrix(data: MatrixLike, *, dtype: np.dtype = np.float64) -> DataMatrix:
    """
    Coerce a DataMatrix, DataFrame or array into a float ``DataMatrix``.

    The values are copied into a read-only array so concurrent runs can share
    one matrix safely.
    """

    if isinstance(data, DataMatrix):
        if data.values.dtype == dtype and not data.values.flags.writeable:
            return data
        values = np.array(data.values, dtype=dtype)
        sample_ids, feature_names = data.sample_ids, data.feature_names
    elif isinstance(data, pd.DataFrame):
        return matrix_from_frame(data, dtype=dtype)
    else:
        try:
            values = np.array(data, dtype=dtype)
        except ValueError as exc:
            raise DimensionMismatch(f"Could not build a rectangular matrix: {exc}") from exc
        sample_ids = feature_names = None

    values.setflags(write=False)
    return DataMatrix(values=values, sample_ids=sample_ids, feature_names=feature_names)


def matrix_from_frame(frame: pd.DataFrame, *, dtype: np.dtype = np.float64) -> DataMatrix:
    """
    Build a DataMatrix from a DataFrame whose index holds sample IDs.

    Non-numeric cells become NaN and are rejected later by the engine.
    """

    numeric = frame.apply(pd.to_numeric, errors="coerce")
    values = numeric.to_numpy(dtype=dtype, copy=True)
    values.setflags(write=False)
    return DataMatrix(
        values=values,
        sample_ids=tuple(str(idx) for idx in frame.index),
        feature_names=tuple(str(col) for col in frame.columns),
    )


def load_matrix(
    path: PathLike,
    *,
    dtype: np.dtype = np.float64,
) -> DataMatrix:
    """
    Load a complete sample matrix from ``.csv`` or ``.npy`` files.

    Parameters
    ----------
    path:
        Path to the file on disk. CSV files carry sample IDs in the first
        column and feature names in the header row.
    dtype:
        Target numeric dtype. Defaults to ``np.float64`` for numerical
        stability in clustering computations.

    Returns
    -------
    DataMatrix
        Numeric matrix with rows representing samples and columns features.
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    if path.suffix.lower() == ".csv":
        frame = pd.read_csv(path, index_col=0)
        return matrix_from_frame(frame, dtype=dtype)

    if path.suffix.lower() == ".npy":
        array = np.atleast_2d(np.load(path, allow_pickle=False))
        return as_data_matrix(array, dtype=dtype)

    raise ValueError(f"Unsupported file extension: {path.suffix}")
