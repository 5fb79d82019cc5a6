# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

"""
Data utilities
--------------

This module contains helper functions for inspecting and slicing count matrices
regardless of how they are stored.
"""

from typing import Any

import dask.array as da
import numpy as np
import scipy.sparse
from boltons.iterutils import chunk_ranges


def is_lazy_capable(x: Any) -> bool:
    """
    Check whether elementwise division and log-transformation of ``x`` can be deferred
    without materializing it.

    Only :class:`dask.array.Array` objects backed by dense :class:`numpy.ndarray` chunks qualify.
    Dask arrays with sparse chunks are evaluated eagerly, block by block.

    Args:
        x: A count matrix.

    Returns:
        ``True`` if ``x`` supports deferred arithmetic.
    """
    return isinstance(x, da.Array) and isinstance(x._meta, np.ndarray)


def densify(x: Any) -> np.ndarray:
    """
    Convert a block of a count matrix to a dense :class:`numpy.ndarray`.

    Args:
        x: Dense, sparse, dask or backed matrix block.

    Returns:
        Dense matrix.
    """
    if isinstance(x, da.Array):
        x = x.compute()
    if scipy.sparse.issparse(x):
        return x.toarray()
    return np.asarray(x)


def row_sums(x: Any, chunk_size: int = 10_000) -> np.ndarray:
    """
    Sum a count matrix along its rows.

    Backed matrices without a ``sum`` method (e.g. :class:`h5py.Dataset`) are read in
    blocks of ``chunk_size`` rows.

    Args:
        x: Dense, sparse, dask or backed matrix.
        chunk_size: Number of rows read at once from a backed matrix.

    Returns:
        One-dimensional array with one total per row.
    """
    if isinstance(x, da.Array):
        return np.asarray(x.sum(axis=1).compute()).ravel()
    if hasattr(x, "sum"):
        return np.asarray(x.sum(axis=1)).ravel()
    totals = np.empty(x.shape[0], dtype=np.float64)
    for start, end in chunk_ranges(x.shape[0], chunk_size):
        totals[start:end] = densify(x[start:end]).sum(axis=1)
    return totals
