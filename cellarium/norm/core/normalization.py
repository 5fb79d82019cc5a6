# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

import logging

import numpy as np
from anndata import AnnData

from cellarium.norm.core.centering import (
    centre_size_factor_sets,
    scale_size_factor_sets,
    validate_size_factor_sets,
)
from cellarium.norm.core.kernel import normalize_counts_eager, normalize_counts_lazy
from cellarium.norm.core.registry import collect_size_factors, resolve_size_factor_sets
from cellarium.norm.data import (
    DEFAULT_KEYS,
    AnnDataKeys,
    get_assay,
    get_log_exprs_offset,
    set_assay,
    set_log_exprs_offset,
    set_size_factors,
)
from cellarium.norm.utilities.data import is_lazy_capable
from cellarium.norm.utilities.testing import assert_nonnegative, assert_positive

logger = logging.getLogger(__name__)


def normalize(
    adata: AnnData,
    assay_name: str = "counts",
    return_log: bool = True,
    log_exprs_offset: float | None = None,
    centre_size_factors: bool = True,
    preserve_zeroes: bool = False,
    *,
    keys: AnnDataKeys | None = None,
    chunk_size: int = 10_000,
) -> AnnData:
    """
    Compute normalized expression values from counts using the size factors stored in ``adata``.

    Counts of each cell are divided by the size factor of that cell. Genes of a registered
    control feature set (see :func:`~cellarium.norm.data.set_control_feature_set`) are divided by
    the size factors of that set if available. A control set without its own size factors is
    normalized with the primary size factors and a warning is raised. If no primary size
    factors are stored, library size factors are computed and a warning is raised.

    If ``centre_size_factors`` is set, every size-factor set is centred to unit mean before
    normalization, so that values are on the scale of the counts and ``log_exprs_offset`` can be
    interpreted as a pseudo-count.

    If ``preserve_zeroes`` is set, every size-factor set is multiplied by ``log_exprs_offset`` and
    the log-transformation uses a pseudo-count of 1, so zero counts stay exactly zero. The result
    equals that of ``preserve_zeroes=False`` minus :math:`\\log_2(\\mathrm{offset})`.

    If the assay is a dask array and a single size-factor set applies to all genes, the result is
    a dask array with deferred division and log-transformation. Otherwise it is computed in blocks
    of ``chunk_size`` cells and stored as a dense array.

    Example::

        >>> adata = AnnData(layers={"counts": counts_ng})
        >>> adata.obs["size_factor"] = size_factors_n
        >>> normalize(adata).layers["logcounts"]

    Args:
        adata:
            AnnData object with counts (cells x genes).
        assay_name:
            Layer holding the counts, or ``"X"`` for :attr:`AnnData.X`.
        return_log:
            Whether to log2-transform the normalized values. Results are stored in the
            ``"logcounts"`` layer if ``True`` and in the ``"normcounts"`` layer otherwise.
        log_exprs_offset:
            Pseudo-count added before the log-transformation. If ``None``, the value persisted by a
            previous log-transformation is used, or 1 if there is none.
        centre_size_factors:
            Whether to centre all size-factor sets to unit mean. Centred size factors are stored
            back in ``adata``.
        preserve_zeroes:
            Whether to fold a non-unity pseudo-count into the size factors so that zeroes are preserved.
        keys:
            Locations of inputs and outputs in ``adata``.
        chunk_size:
            Number of cells per block of the eager computation.

    Returns:
        ``adata``, updated with the normalized layer, the size factors used and, if
        ``return_log`` is set, the pseudo-count.

    Raises:
        KeyError: If the assay does not exist.
        ValueError: If a size-factor set used by some gene is invalid, a set has zero mean, or the
            counts are negative.
            ``adata`` is not modified in this case.
    """
    keys = keys or DEFAULT_KEYS
    x_ng = get_assay(adata, assay_name)

    size_factors = collect_size_factors(adata, x_ng, keys)

    if log_exprs_offset is None:
        log_exprs_offset = get_log_exprs_offset(adata, keys)
        if log_exprs_offset is None:
            log_exprs_offset = 1.0
    assert_nonnegative("log_exprs_offset", log_exprs_offset)

    if centre_size_factors:
        size_factors = centre_size_factor_sets(size_factors)

    if preserve_zeroes:
        assert_positive("log_exprs_offset", log_exprs_offset)
        size_factors = scale_size_factor_sets(size_factors, log_exprs_offset)
        log_exprs_offset = 1.0

    sf_sets = resolve_size_factor_sets(adata, size_factors, keys)
    validate_size_factor_sets({name: size_factors[name] for name in sf_sets.names}, adata.n_obs)

    if sf_sets.n_sets == 1 and is_lazy_capable(x_ng):
        logger.debug("Single size-factor set on a dask array: deferring normalization")
        y_ng = normalize_counts_lazy(x_ng, sf_sets.size_factors_kn[0], log_exprs_offset, return_log)
    else:
        logger.debug(f"Normalizing eagerly with {sf_sets.n_sets} size-factor set(s)")
        y_ng = normalize_counts_eager(
            x_ng,
            sf_sets.size_factors_kn,
            sf_sets.index_g,
            log_exprs_offset,
            return_log,
            chunk_size=chunk_size,
        )

    set_assay(adata, keys.output_layer(return_log), y_ng)
    for name, sf in size_factors.items():
        set_size_factors(adata, np.asarray(sf), name, keys)
    if return_log:
        set_log_exprs_offset(adata, log_exprs_offset, keys)
    return adata
