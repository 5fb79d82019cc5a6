# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from cellarium.norm.core.centering import (
    apply_to_size_factors,
    centre_size_factor_sets,
    centre_size_factors,
    scale_size_factor_sets,
    validate_size_factor_sets,
)
from cellarium.norm.core.kernel import normalize_counts_eager, normalize_counts_lazy
from cellarium.norm.core.normalization import normalize
from cellarium.norm.core.pipeline import NormalizationPipeline
from cellarium.norm.core.registry import SizeFactorSets, collect_size_factors, resolve_size_factor_sets

__all__ = [
    "NormalizationPipeline",
    "SizeFactorSets",
    "apply_to_size_factors",
    "centre_size_factor_sets",
    "centre_size_factors",
    "collect_size_factors",
    "normalize",
    "normalize_counts_eager",
    "normalize_counts_lazy",
    "resolve_size_factor_sets",
    "scale_size_factor_sets",
    "validate_size_factor_sets",
]
