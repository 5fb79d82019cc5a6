# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from cellarium.norm.core import apply_to_size_factors, centre_size_factors, normalize
from cellarium.norm.data import AnnDataKeys, set_control_feature_set, set_size_factors
from cellarium.norm.preprocessing import library_size_factors

__version__ = "0.1.0"

__all__ = [
    "AnnDataKeys",
    "apply_to_size_factors",
    "centre_size_factors",
    "library_size_factors",
    "normalize",
    "set_control_feature_set",
    "set_size_factors",
]
