# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

import logging
import warnings
from dataclasses import dataclass
from typing import Any

import numpy as np
from anndata import AnnData

from cellarium.norm.core.centering import SizeFactorDict
from cellarium.norm.data import (
    DEFAULT_KEYS,
    AnnDataKeys,
    control_feature_set_names,
    get_control_feature_set,
    get_size_factors,
    size_factor_names,
)
from cellarium.norm.preprocessing import library_size_factors

logger = logging.getLogger(__name__)


@dataclass
class SizeFactorSets:
    """
    Distinct size-factor sets used for normalization and the per-gene dispatch table.

    Args:
        names:
            Name of each set. ``None`` is the primary set.
        size_factors_kn:
            Size factors, one row per set and one column per cell.
        index_g:
            0-based index into ``names`` for every gene.
    """

    names: list[str | None]
    size_factors_kn: np.ndarray
    index_g: np.ndarray

    @property
    def n_sets(self) -> int:
        return len(self.names)


def collect_size_factors(adata: AnnData, x_ng: Any, keys: AnnDataKeys = DEFAULT_KEYS) -> SizeFactorDict:
    """
    Collect working copies of all stored size-factor sets.

    If the primary size factors are missing, they are estimated from library sizes of ``x_ng``
    and a warning is raised.

    Args:
        adata:
            The AnnData object.
        x_ng:
            Counts used for the fallback estimation.
        keys:
            Locations of the size factors.

    Returns:
        A dictionary mapping set names to size factors, with the primary set under ``None`` first.
    """
    primary = get_size_factors(adata, None, keys)
    if primary is None:
        warnings.warn("using library sizes as size factors", UserWarning)
        primary = library_size_factors(x_ng)
    size_factors: SizeFactorDict = {None: primary}
    for name in size_factor_names(adata, keys):
        size_factors[name] = get_size_factors(adata, name, keys)  # type: ignore[assignment]
    return size_factors


def resolve_size_factor_sets(
    adata: AnnData,
    size_factors: SizeFactorDict,
    keys: AnnDataKeys = DEFAULT_KEYS,
) -> SizeFactorSets:
    """
    Assign a size-factor set to every gene.

    Control feature sets are visited in registration order. Genes of a control set are assigned
    to that set's size factors, with later sets overriding earlier ones for genes in several sets.
    A control set without size factors keeps the primary size factors and raises a warning.
    Sets that no gene uses are dropped.

    Args:
        adata:
            The AnnData object holding the control feature-set membership.
        size_factors:
            Available size factors, as returned by :func:`collect_size_factors`.
        keys:
            Locations of the feature-set membership.

    Returns:
        The distinct size-factor sets in use and the dispatch table.
    """
    names: list[str | None] = [None]
    index_g = np.zeros(adata.n_vars, dtype=np.int64)
    for name in control_feature_set_names(adata, keys):
        if name not in size_factors:
            warnings.warn(
                f"control feature set {name!r} has no size factors, using primary size factors",
                UserWarning,
            )
            continue
        names.append(name)
        index_g[get_control_feature_set(adata, name, keys)] = len(names) - 1

    if adata.n_vars > 0:
        used_k, index_g = np.unique(index_g, return_inverse=True)
        names = [names[k] for k in used_k]
        index_g = index_g.reshape(-1).astype(np.int64)
    else:
        names = [None]

    size_factors_kn = np.stack([size_factors[name] for name in names])
    logger.debug(f"Resolved {len(names)} size-factor set(s): {names}")
    return SizeFactorSets(names=names, size_factors_kn=size_factors_kn, index_g=index_g)
