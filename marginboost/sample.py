"""Labeled training samples consumed by boosters and weak learners."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from typing import Any, Sequence

import numpy as np

from .errors import ConfigurationError


def check_array(
    X: Any,
    *,
    ensure_2d: bool = True,
    dtype: type | None = np.float64,
) -> np.ndarray:
    """Validate input array."""
    try:
        array = np.asarray(X, dtype=dtype)
    except (TypeError, ValueError) as exc:
        raise ValueError("Array cannot be converted to the requested dtype.") from exc
    if np.iscomplexobj(array):
        raise ValueError("Complex data is not supported.")
    if ensure_2d and array.ndim != 2:
        raise ValueError(f"Expected 2D array, got shape {array.shape}.")
    if not ensure_2d and array.ndim != 1:
        raise ValueError(f"Expected 1D array, got shape {array.shape}.")
    if not np.all(np.isfinite(array)):
        raise ValueError("Array contains NaN or infinite values.")
    return array


def _frozen(array: np.ndarray) -> np.ndarray:
    out = np.array(array, copy=True)
    out.setflags(write=False)
    return out


@dataclass(frozen=True, eq=False)
class Sample:
    """
    Immutable set of ``n`` examples with their targets.

    The arrays are copied and marked read-only on construction, so a sample
    can be borrowed by a booster for the whole run without defensive copies.

    Attributes:
        features: Feature matrix of shape ``(n, n_features)``.
        target: Target vector of shape ``(n,)``. Binary classification uses
            labels in ``{-1, +1}``.
        feature_names: Optional column names, one per feature.
    """

    features: np.ndarray
    target: np.ndarray
    feature_names: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        features = check_array(self.features)
        target = check_array(self.target, ensure_2d=False)
        if features.shape[0] != target.shape[0]:
            raise ValueError(
                f"features has {features.shape[0]} rows but target has "
                f"{target.shape[0]} entries."
            )
        if features.shape[0] == 0:
            raise ConfigurationError("A sample must contain at least one example.")
        names = self.feature_names
        if names is not None:
            names = tuple(str(name) for name in names)
            if len(names) != features.shape[1]:
                raise ValueError("feature_names must have one entry per feature.")
        object.__setattr__(self, "features", _frozen(features))
        object.__setattr__(self, "target", _frozen(target))
        object.__setattr__(self, "feature_names", names)

    @classmethod
    def from_arrays(
        cls,
        X: Any,
        y: Any,
        feature_names: Sequence[str] | None = None,
    ) -> "Sample":
        """Build a sample from array-likes."""
        names = None if feature_names is None else tuple(feature_names)
        return cls(features=np.asarray(X), target=np.asarray(y), feature_names=names)

    @classmethod
    def read_csv(
        cls,
        path: str | PathLike[str],
        target_feature: str | int,
        has_header: bool = True,
        delimiter: str = ",",
    ) -> "Sample":
        """
        Read a numeric CSV file, using one column as the target.

        Args:
            path: CSV file location.
            target_feature: Column name (requires ``has_header``) or column
                index of the target.
            has_header: Whether the first line holds column names.
            delimiter: Field separator.
        """
        with open(path, "r", encoding="utf-8") as handle:
            header: list[str] | None = None
            if has_header:
                first = handle.readline()
                header = [field.strip() for field in first.strip().split(delimiter)]
            data = np.loadtxt(handle, delimiter=delimiter, dtype=float, ndmin=2)

        if isinstance(target_feature, str):
            if header is None:
                raise ValueError("A named target requires has_header=True.")
            if target_feature not in header:
                raise ValueError(f"Column {target_feature!r} not found in {path}.")
            target_idx = header.index(target_feature)
        else:
            target_idx = int(target_feature)
        if not 0 <= target_idx < data.shape[1]:
            raise ValueError(f"Target column {target_idx} out of range.")

        keep = [j for j in range(data.shape[1]) if j != target_idx]
        names = None if header is None else tuple(header[j] for j in keep)
        return cls(features=data[:, keep], target=data[:, target_idx], feature_names=names)

    @property
    def n_examples(self) -> int:
        return int(self.features.shape[0])

    def shape(self) -> tuple[int, int]:
        """Return ``(n_examples, n_features)``."""
        return int(self.features.shape[0]), int(self.features.shape[1])

    def is_valid_binary_instance(self) -> bool:
        """Return True if every label is ``-1`` or ``+1``."""
        return bool(np.all(np.isin(self.target, (-1.0, 1.0))))

    def __len__(self) -> int:
        return self.n_examples


__all__ = ["Sample", "check_array"]
