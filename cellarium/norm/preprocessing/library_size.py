# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from typing import Any

import numpy as np

from cellarium.norm.utilities.data import row_sums


def library_size_factors(x_ng: Any) -> np.ndarray:
    r"""
    Compute size factors from library sizes.

    .. math::

        \mathrm{lib}_n = \sum_{g=1}^G x_{ng}

        \mathrm{sf}_n = \frac{\mathrm{lib}_n}{\frac{1}{N} \sum_{m=1}^N \mathrm{lib}_m}

    The size factors are centred to unit mean. Cells without any counts get a size factor of zero,
    which is rejected later when the size factors are used for normalization.

    Args:
        x_ng:
            Gene counts (cells x genes). Dense, sparse, dask and backed matrices are supported.

    Returns:
        One size factor per cell.

    Raises:
        ValueError: If all library sizes are zero.
    """
    lib_n = row_sums(x_ng).astype(np.float64)
    if len(lib_n) == 0:
        return lib_n
    mean_lib = lib_n.mean()
    if mean_lib == 0:
        raise ValueError("Cannot compute library size factors: all library sizes are zero")
    return lib_n / mean_lib
