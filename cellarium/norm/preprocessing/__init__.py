# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from cellarium.norm.preprocessing.library_size import library_size_factors

__all__ = ["library_size_factors"]
