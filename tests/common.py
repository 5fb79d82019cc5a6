# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import pandas as pd
from anndata import AnnData

# 3 genes x 2 cells in feature-major order, stored transposed (cells x genes) in AnnData
COUNTS_NG = np.array([[10.0, 0.0, 100.0], [20.0, 5.0, 50.0]])


def make_adata(counts_ng: np.ndarray = COUNTS_NG, size_factors_n: np.ndarray | None = None) -> AnnData:
    """A small AnnData object with counts in the ``"counts"`` layer."""
    n, g = counts_ng.shape
    adata = AnnData(
        X=np.zeros((n, g)),
        obs=pd.DataFrame(index=[f"cell_{i}" for i in range(n)]),
        var=pd.DataFrame(index=[f"gene_{i}" for i in range(g)]),
    )
    adata.layers["counts"] = counts_ng
    if size_factors_n is not None:
        adata.obs["size_factor"] = np.asarray(size_factors_n, dtype=np.float64)
    return adata


def random_counts(n: int, g: int, seed: int = 1465) -> np.ndarray:
    rng = np.random.default_rng(seed)
    rates = rng.uniform(0, 20, size=(n, g))
    counts = rng.poisson(rates).astype(np.float64)
    # make sure every cell has counts
    counts[:, 0] += 1
    return counts
