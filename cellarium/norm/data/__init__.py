# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from .accessors import (
    control_feature_set_names,
    get_assay,
    get_control_feature_set,
    get_log_exprs_offset,
    get_size_factors,
    set_assay,
    set_control_feature_set,
    set_log_exprs_offset,
    set_size_factors,
    size_factor_names,
)
from .schema import DEFAULT_KEYS, AnnDataKeys

__all__ = [
    "AnnDataKeys",
    "DEFAULT_KEYS",
    "control_feature_set_names",
    "get_assay",
    "get_control_feature_set",
    "get_log_exprs_offset",
    "get_size_factors",
    "set_assay",
    "set_control_feature_set",
    "set_log_exprs_offset",
    "set_size_factors",
    "size_factor_names",
]
