# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

"""
Testing utilities
-----------------

This module contains helper functions for validating inputs.
"""

import numpy as np
import torch


def assert_positive(name: str, number: float) -> None:
    """
    Assert that a number is positive.

    Args:
        name: The name of the number.
        number: The number to check.

    Raises:
        ValueError: If the number is not positive.
    """
    if number <= 0:
        raise ValueError(f"`{name}` must be positive. Got {number}")


def assert_nonnegative(name: str, number: float) -> None:
    """
    Assert that a number is non-negative.

    Args:
        name: The name of the number.
        number: The number to check.

    Raises:
        ValueError: If the number is negative.
    """
    if number < 0:
        raise ValueError(f"`{name}` must be non-negative. Got {number}")


def assert_all_positive(name: str, array: np.ndarray | torch.Tensor) -> None:
    """
    Assert that all elements of an array are finite and positive.

    Args:
        name: The name of the array.
        array: The array to check.

    Raises:
        ValueError: If any element is non-positive, infinite or NaN.
    """
    array = np.asarray(array)
    bad = ~(np.isfinite(array) & (array > 0))
    if bad.any():
        raise ValueError(
            f"All elements of `{name}` must be finite and positive. "
            f"Got {bad.sum()} invalid value(s), e.g. {array[bad][0]} at position {np.flatnonzero(bad)[0]}"
        )


def assert_all_nonnegative(name: str, array: np.ndarray | torch.Tensor) -> None:
    """
    Assert that all elements of an array are non-negative.

    Args:
        name: The name of the array.
        array: The array to check.

    Raises:
        ValueError: If any element is negative.
    """
    if (array < 0).any():
        raise ValueError(f"All elements of `{name}` must be non-negative.")


def assert_array_length_equal(name: str, array: np.ndarray | torch.Tensor, length: int, length_name: str) -> None:
    """
    Assert that the length of an array matches an expected length.

    Args:
        name: The name of the array.
        array: The array.
        length: The expected length.
        length_name: What the expected length counts.

    Raises:
        ValueError: If the lengths differ.
    """
    if len(array) != length:
        raise ValueError(f"The `{name}` length must match the {length_name}. Got {len(array)} != {length}")


def assert_columns_and_array_lengths_equal(
    matrix_name: str,
    matrix: np.ndarray | torch.Tensor,
    array_name: str,
    array: np.ndarray | torch.Tensor,
) -> None:
    """
    Assert that the number of columns in a matrix matches the length of an array.

    Args:
        matrix_name: The name of the matrix.
        matrix: The matrix.
        array_name: The name of the array.
        array: The array.

    Raises:
        ValueError: If the number of columns in the matrix does not match the length of the array.
    """
    if matrix.shape[1] != len(array):
        raise ValueError(
            f"The number of `{matrix_name}` columns must match the `{array_name}` length. "
            f"Got {matrix.shape[1]} != {len(array)}"
        )
