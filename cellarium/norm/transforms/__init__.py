# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from cellarium.norm.transforms.divide_by_size_factors import DivideBySizeFactors
from cellarium.norm.transforms.log2 import Log2

__all__ = [
    "DivideBySizeFactors",
    "Log2",
]
