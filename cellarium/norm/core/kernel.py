# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

"""
Normalization kernels
---------------------

Both kernels compute

.. math::

    y_{ng} = \\frac{x_{ng}}{\\mathrm{sf}_{n, k(g)}}

and, if ``return_log`` is set, :math:`\\log_2(y_{ng} + \\mathrm{offset})`.

Counts are assumed non-negative and size factors are validated to be positive, so the
argument of the logarithm is at least the offset. With a positive offset it is always
positive. A zero offset is accepted and maps zero counts to ``-inf``.
"""

import logging
from typing import Any

import dask.array as da
import numpy as np
import torch
from boltons.iterutils import chunk_ranges

from cellarium.norm.core.pipeline import NormalizationPipeline
from cellarium.norm.transforms import DivideBySizeFactors, Log2
from cellarium.norm.utilities.data import densify
from cellarium.norm.utilities.testing import (
    assert_all_nonnegative,
    assert_array_length_equal,
    assert_columns_and_array_lengths_equal,
    assert_positive,
)

logger = logging.getLogger(__name__)


def normalize_counts_eager(
    x_ng: Any,
    size_factors_kn: np.ndarray,
    index_g: np.ndarray,
    log_exprs_offset: float = 1.0,
    return_log: bool = True,
    chunk_size: int = 10_000,
    dtype: np.dtype | type = np.float64,
) -> np.ndarray:
    """
    Normalize counts block by block, materializing the result as a dense array.

    Blocks of ``chunk_size`` cells are densified, divided by the size factors assigned to
    each gene through ``index_g`` and optionally log-transformed. Any matrix that can be
    sliced along its rows is accepted (dense, sparse, dask or backed).

    Args:
        x_ng:
            Gene counts (cells x genes).
        size_factors_kn:
            Size factors, one row per set and one column per cell.
        index_g:
            0-based index of the size-factor set assigned to each gene.
        log_exprs_offset:
            Pseudo-count added before the log-transformation.
        return_log:
            Whether to log2-transform the normalized values.
        chunk_size:
            Number of cells per block.
        dtype:
            Data type of the output.

    Returns:
        Dense normalized matrix with the shape of ``x_ng``.

    Raises:
        ValueError: If the shapes are inconsistent or a block contains negative counts.
    """
    assert_positive("chunk_size", chunk_size)
    size_factors_kn = np.atleast_2d(size_factors_kn)
    n_cells = x_ng.shape[0]
    assert_columns_and_array_lengths_equal("x_ng", x_ng, "index_g", index_g)
    assert_array_length_equal("size_factors_kn", size_factors_kn.T, n_cells, "number of cells")

    transforms: list[torch.nn.Module] = [DivideBySizeFactors(index_g)]
    if return_log:
        transforms.append(Log2(log_exprs_offset))
    pipeline = NormalizationPipeline(transforms)

    y_ng = np.empty(x_ng.shape, dtype=dtype)
    size_factors_nk = torch.as_tensor(np.ascontiguousarray(size_factors_kn.T), dtype=torch.float64)
    n_chunks = 0
    for start, end in chunk_ranges(n_cells, chunk_size):
        block_ng = torch.as_tensor(densify(x_ng[start:end]), dtype=torch.float64)
        assert_all_nonnegative("x_ng", block_ng)
        batch = {"x_ng": block_ng, "size_factors_nk": size_factors_nk[start:end]}
        y_ng[start:end] = pipeline(batch)["x_ng"].numpy()
        n_chunks += 1
    logger.debug(f"Eager normalization of {x_ng.shape} matrix in {n_chunks} block(s) with {pipeline}")
    return y_ng


def normalize_counts_lazy(
    x_ng: da.Array,
    size_factors_n: np.ndarray,
    log_exprs_offset: float = 1.0,
    return_log: bool = True,
) -> da.Array:
    """
    Build a deferred normalization of a dask array with a single size-factor set.

    No computation happens here. The returned array divides every cell by its size factor
    and, if ``return_log`` is set, adds ``log_exprs_offset`` and takes log2 when it is computed.
    Blocks are independent, so the result can be computed partially or streamed.

    Args:
        x_ng:
            Gene counts (cells x genes) as a dask array.
        size_factors_n:
            One size factor per cell.
        log_exprs_offset:
            Pseudo-count added before the log-transformation.
        return_log:
            Whether to log2-transform the normalized values.

    Returns:
        Deferred normalized matrix with the shape and chunking of ``x_ng``.
    """
    size_factors_n = np.asarray(size_factors_n, dtype=np.float64).ravel()
    assert_array_length_equal("size_factors_n", size_factors_n, x_ng.shape[0], "number of cells")
    sf_n1 = da.from_array(size_factors_n[:, None], chunks=(x_ng.chunks[0], 1))
    y_ng = x_ng / sf_n1
    if return_log:
        y_ng = da.log2(y_ng + log_exprs_offset)
    logger.debug(f"Deferred normalization of {x_ng.shape} dask array with {x_ng.npartitions} block(s)")
    return y_ng
