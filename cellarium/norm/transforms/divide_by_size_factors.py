# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

import numpy as np
import torch
from torch import nn

from cellarium.norm.utilities.testing import assert_columns_and_array_lengths_equal


class DivideBySizeFactors(nn.Module):
    """
    Divide gene counts by the size factor of the set assigned to each gene.

    .. math::

        y_{ng} = \\frac{x_{ng}}{\\mathrm{sf}_{n, k(g)}}

    where :math:`k(g)` is the size-factor set assigned to gene :math:`g`.

    Args:
        index_g:
            Index of the size-factor set assigned to each gene (0-based).
    """

    def __init__(self, index_g: np.ndarray | torch.Tensor) -> None:
        super().__init__()
        self.index_g: torch.Tensor
        self.register_buffer("index_g", torch.as_tensor(np.asarray(index_g), dtype=torch.long))
        self.single_set = bool(torch.all(self.index_g == 0)) if len(self.index_g) > 0 else True

    def forward(self, x_ng: torch.Tensor, size_factors_nk: torch.Tensor) -> dict[str, torch.Tensor]:
        """
        Args:
            x_ng:
                Gene counts.
            size_factors_nk:
                Size factors of each cell in the batch, one column per size-factor set.

        Returns:
            A dictionary with the following keys:

            - ``x_ng``: The gene counts divided by their size factors.
        """
        assert_columns_and_array_lengths_equal("x_ng", x_ng, "index_g", self.index_g)
        if self.single_set:
            x_ng = x_ng / size_factors_nk[:, :1]
        else:
            x_ng = x_ng / size_factors_nk[:, self.index_g]
        return {"x_ng": x_ng}

    def __repr__(self) -> str:
        n_sets = int(self.index_g.max()) + 1 if len(self.index_g) > 0 else 0
        return f"{self.__class__.__name__}(n_genes={len(self.index_g)}, n_sets={n_sets})"
