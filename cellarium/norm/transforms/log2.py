# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause


import torch
from torch import nn

from cellarium.norm.utilities.testing import assert_nonnegative


class Log2(nn.Module):
    """
    Log2 transform normalized counts after adding a pseudo-count.

    .. math::

        y_{ng} = \\log_2(x_{ng} + \\mathrm{offset})

    The input is assumed non-negative, so the argument of the logarithm is positive
    whenever ``offset > 0``. With ``offset = 1`` zeroes map to exactly zero.

    Args:
        offset:
            Pseudo-count added before the log-transformation.
    """

    def __init__(self, offset: float = 1.0) -> None:
        super().__init__()
        assert_nonnegative("offset", offset)
        self.offset = float(offset)

    def forward(self, x_ng: torch.Tensor) -> dict[str, torch.Tensor]:
        """
        Args:
            x_ng: Normalized gene counts.

        Returns:
            A dictionary with the following keys:

            - ``x_ng``: The log2 transformed values.
        """
        x_ng = torch.log2(x_ng + self.offset)
        return {"x_ng": x_ng}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(offset={self.offset})"
