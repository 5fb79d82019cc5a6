# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from collections.abc import Callable

import numpy as np
from anndata import AnnData

from cellarium.norm.data import DEFAULT_KEYS, AnnDataKeys, get_size_factors, set_size_factors, size_factor_names
from cellarium.norm.utilities.testing import assert_all_positive, assert_array_length_equal, assert_positive

SizeFactorDict = dict[str | None, np.ndarray]


def _set_label(name: str | None) -> str:
    return "size factors" if name is None else f"size factors of {name!r}"


def centre_size_factor_sets(size_factors: SizeFactorDict, centre: float = 1.0) -> SizeFactorDict:
    """
    Centre every size-factor set to have mean ``centre``.

    Each set is first divided by its own mean (centred to unity) and then multiplied by ``centre``.

    Args:
        size_factors:
            Size-factor sets keyed by name (``None`` for the primary set).
        centre:
            Target mean of every set.

    Returns:
        New size-factor sets. The inputs are left unchanged.

    Raises:
        ValueError: If ``centre`` is not positive or a set has zero mean.
    """
    assert_positive("centre", centre)
    centred = {}
    for name, sf in size_factors.items():
        if len(sf) == 0:
            centred[name] = sf.copy()
            continue
        mean = sf.mean()
        if mean == 0:
            raise ValueError(f"Cannot centre {_set_label(name)}: their mean is zero")
        centred[name] = sf / mean
    if centre != 1:
        centred = scale_size_factor_sets(centred, centre)
    return centred


def scale_size_factor_sets(size_factors: SizeFactorDict, scale: float) -> SizeFactorDict:
    """Multiply every size-factor set by ``scale``."""
    return {name: sf * scale for name, sf in size_factors.items()}


def validate_size_factor_sets(size_factors: SizeFactorDict, n_cells: int) -> None:
    """
    Check that every size-factor set has one finite, positive value per cell.

    Raises:
        ValueError: Naming the first invalid set.
    """
    for name, sf in size_factors.items():
        label = _set_label(name)
        assert_array_length_equal(label, sf, n_cells, "number of cells")
        assert_all_positive(label, sf)


def apply_to_size_factors(
    adata: AnnData,
    fn: Callable[[np.ndarray], np.ndarray],
    keys: AnnDataKeys = DEFAULT_KEYS,
) -> None:
    """
    Apply ``fn`` to every size-factor set stored in ``adata`` and store the results.

    Args:
        adata:
            The AnnData object.
        fn:
            Function mapping a size-factor array to a new array of the same length.
        keys:
            Locations of the size factors.
    """
    for name in [None, *size_factor_names(adata, keys)]:
        sf = get_size_factors(adata, name, keys)
        if sf is not None:
            set_size_factors(adata, fn(sf), name, keys)


def centre_size_factors(adata: AnnData, centre: float = 1.0, keys: AnnDataKeys = DEFAULT_KEYS) -> AnnData:
    """
    Centre every size-factor set stored in ``adata`` to have mean ``centre``.

    Example::

        >>> adata.obs["size_factor"] = [2.0, 4.0]
        >>> centre_size_factors(adata).obs["size_factor"].tolist()
        [0.6666666666666666, 1.3333333333333333]

    Raises:
        ValueError: If a set has zero mean. ``adata`` is left unchanged in this case.
    """
    stored = {name: get_size_factors(adata, name, keys) for name in [None, *size_factor_names(adata, keys)]}
    centred = centre_size_factor_sets({name: sf for name, sf in stored.items() if sf is not None}, centre)
    for name, sf in centred.items():
        set_size_factors(adata, sf, name, keys)
    return adata
