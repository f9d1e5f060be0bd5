"""Pytest configuration and shared fixtures for marginboost tests.

This module provides:
- A deterministic numpy RNG fixture
- Small labeled samples shared by booster and weak learner tests
"""

import os

import numpy as np
import pytest

from marginboost.sample import Sample


@pytest.fixture(scope="function")
def rng() -> np.random.Generator:
    """Provide a deterministic numpy RNG for tests.

    Uses seed from TEST_RNG_SEED environment variable (default: 0).
    This ensures tests are reproducible while allowing override for debugging.

    Returns:
        A seeded numpy.random.Generator instance.
    """
    seed = int(os.environ.get("TEST_RNG_SEED", "0"))
    return np.random.default_rng(seed)


@pytest.fixture(scope="function", autouse=True)
def set_random_seeds() -> None:
    """Auto-use fixture to set the global numpy seed for reproducibility."""
    np.random.seed(int(os.environ.get("TEST_RNG_SEED", "0")))


@pytest.fixture(scope="function")
def separable_sample() -> Sample:
    """Two features; the first separates the labels at 0."""
    X = np.array(
        [
            [-2.0, 0.3],
            [-1.5, -0.7],
            [-1.0, 1.1],
            [-0.5, 0.2],
            [0.5, -0.4],
            [1.0, 0.9],
            [1.5, -1.2],
            [2.0, 0.1],
        ]
    )
    y = np.array([-1.0, -1.0, -1.0, -1.0, 1.0, 1.0, 1.0, 1.0])
    return Sample.from_arrays(X, y)


@pytest.fixture(scope="function")
def noisy_sample(rng: np.random.Generator) -> Sample:
    """Fifty examples with a linear concept and five flipped labels."""
    X = rng.standard_normal((50, 3))
    y = np.where(X[:, 0] + 0.5 * X[:, 1] >= 0.0, 1.0, -1.0)
    flipped = rng.choice(50, size=5, replace=False)
    y[flipped] = -y[flipped]
    return Sample.from_arrays(X, y)
