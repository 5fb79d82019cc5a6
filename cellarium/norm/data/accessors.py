# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

"""
Container accessors
-------------------

Read and write the normalization inputs and outputs stored in an :class:`~anndata.AnnData` object.
Key names are taken from :class:`~cellarium.norm.data.schema.AnnDataKeys`.
"""

from collections.abc import Sequence
from typing import Any

import numpy as np
from anndata import AnnData

from cellarium.norm.data.schema import DEFAULT_KEYS, AnnDataKeys
from cellarium.norm.utilities.testing import assert_array_length_equal


def get_assay(adata: AnnData, name: str) -> Any:
    """
    Get a count matrix. ``"X"`` refers to :attr:`AnnData.X`, any other name to a layer.

    Raises:
        KeyError: If the assay does not exist.
    """
    if name == "X":
        if adata.X is None:
            raise KeyError("`adata.X` is empty")
        return adata.X
    if name not in adata.layers:
        raise KeyError(f"Assay {name!r} not found. Available layers: {list(adata.layers.keys())}")
    return adata.layers[name]


def set_assay(adata: AnnData, name: str, x: Any) -> None:
    if name == "X":
        adata.X = x
    else:
        adata.layers[name] = x


def get_size_factors(adata: AnnData, name: str | None = None, keys: AnnDataKeys = DEFAULT_KEYS) -> np.ndarray | None:
    """
    Get a copy of the size factors of a control feature set, or the primary size factors
    if ``name`` is ``None``. Returns ``None`` if no size factors are stored.
    """
    key = keys.size_factor_key(name)
    if key not in adata.obs:
        return None
    return adata.obs[key].to_numpy(dtype=np.float64, copy=True)


def set_size_factors(
    adata: AnnData,
    size_factors: np.ndarray | Sequence[float],
    name: str | None = None,
    keys: AnnDataKeys = DEFAULT_KEYS,
) -> None:
    """
    Store size factors for a control feature set, or the primary size factors if ``name`` is ``None``.
    The name of a control set is registered in ``.uns``, so that only registered sets are
    picked up by :func:`size_factor_names`.

    Raises:
        ValueError: If the number of size factors differs from the number of cells.
    """
    size_factors = np.asarray(size_factors, dtype=np.float64)
    key = keys.size_factor_key(name)
    assert_array_length_equal(key, size_factors, adata.n_obs, "number of cells")
    adata.obs[key] = size_factors
    if name is not None:
        names = size_factor_names(adata, keys)
        if name not in names:
            names.append(name)
        adata.uns[keys.size_factor_sets] = names


def size_factor_names(adata: AnnData, keys: AnnDataKeys = DEFAULT_KEYS) -> list[str]:
    """
    Names of the control size-factor sets registered by :func:`set_size_factors`, in registration
    order. Names whose ``.obs`` column has been removed are skipped. The primary set is not included.
    """
    names = [str(name) for name in adata.uns.get(keys.size_factor_sets, [])]
    return [name for name in names if keys.size_factor_key(name) in adata.obs]


def control_feature_set_names(adata: AnnData, keys: AnnDataKeys = DEFAULT_KEYS) -> list[str]:
    """Registered control feature-set names, in registration order."""
    return [str(name) for name in adata.uns.get(keys.control_feature_sets, [])]


def get_control_feature_set(adata: AnnData, name: str, keys: AnnDataKeys = DEFAULT_KEYS) -> np.ndarray:
    """
    Boolean mask over genes marking the members of a control feature set.

    Raises:
        KeyError: If the membership column does not exist.
    """
    key = keys.control_membership_key(name)
    if key not in adata.var:
        raise KeyError(f"Control feature set {name!r} has no membership column `adata.var[{key!r}]`")
    return adata.var[key].to_numpy(dtype=bool)


def set_control_feature_set(
    adata: AnnData,
    name: str,
    features: np.ndarray | Sequence[bool] | Sequence[str],
    keys: AnnDataKeys = DEFAULT_KEYS,
) -> None:
    """
    Register a control feature set.

    Example::

        >>> set_control_feature_set(adata, "ERCC", adata.var_names.str.startswith("ERCC-"))
        >>> set_control_feature_set(adata, "mito", ["MT-CO1", "MT-ND1"])

    Args:
        adata:
            The AnnData object.
        name:
            Name of the control set. Re-registering an existing name replaces its membership
            but keeps its position in the registration order.
        features:
            Boolean mask over genes, or a collection of gene names.
    """
    features = np.asarray(features)
    if features.dtype == bool:
        mask = features
        assert_array_length_equal(f"{name} mask", mask, adata.n_vars, "number of genes")
    else:
        mask = adata.var_names.isin(features)
    adata.var[keys.control_membership_key(name)] = mask

    names = control_feature_set_names(adata, keys)
    if name not in names:
        names.append(name)
    adata.uns[keys.control_feature_sets] = names


def get_log_exprs_offset(adata: AnnData, keys: AnnDataKeys = DEFAULT_KEYS) -> float | None:
    """The pseudo-count persisted by the last log-transformation, or ``None``."""
    offset = adata.uns.get(keys.log_exprs_offset)
    return None if offset is None else float(offset)


def set_log_exprs_offset(adata: AnnData, offset: float, keys: AnnDataKeys = DEFAULT_KEYS) -> None:
    adata.uns[keys.log_exprs_offset] = float(offset)
