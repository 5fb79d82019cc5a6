# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from dataclasses import dataclass


@dataclass(frozen=True)
class AnnDataKeys:
    """
    Locations of normalization inputs and outputs inside an :class:`~anndata.AnnData` object.

    AnnData stores matrices as ``n_obs x n_vars``, i.e. cells (samples) are rows and
    genes (features) are columns. Size factors are therefore per-cell ``.obs`` columns and
    feature-set membership is a per-gene ``.var`` column.

    Example::

        >>> keys = AnnDataKeys()
        >>> keys.size_factor_key()
        'size_factor'
        >>> keys.size_factor_key("ERCC")
        'size_factor_ERCC'
        >>> keys.control_membership_key("ERCC")
        'is_control_ERCC'

    Args:
        size_factor:
            ``.obs`` column holding the primary size factors. Control-set size factors are
            stored under ``f"{size_factor}_{name}"``.
        control_feature_sets:
            ``.uns`` key holding the ordered list of registered control feature-set names.
        size_factor_sets:
            ``.uns`` key holding the ordered list of names of stored control size-factor sets.
        control_membership_prefix:
            Prefix of the boolean ``.var`` columns that mark control feature-set membership.
        log_exprs_offset:
            ``.uns`` key holding the pseudo-count used by the last log-transformation.
        normcounts:
            Layer receiving normalized values when no log-transformation is performed.
        logcounts:
            Layer receiving log-normalized values.
    """

    size_factor: str = "size_factor"
    control_feature_sets: str = "control_feature_sets"
    size_factor_sets: str = "size_factor_sets"
    control_membership_prefix: str = "is_control_"
    log_exprs_offset: str = "log_exprs_offset"
    normcounts: str = "normcounts"
    logcounts: str = "logcounts"

    def size_factor_key(self, name: str | None = None) -> str:
        """``.obs`` column of the size factors for the control set ``name`` (primary if ``None``)."""
        if name is None:
            return self.size_factor
        return f"{self.size_factor}_{name}"

    def control_membership_key(self, name: str) -> str:
        """``.var`` column marking the features of the control set ``name``."""
        return f"{self.control_membership_prefix}{name}"

    def output_layer(self, return_log: bool) -> str:
        return self.logcounts if return_log else self.normcounts


DEFAULT_KEYS = AnnDataKeys()
