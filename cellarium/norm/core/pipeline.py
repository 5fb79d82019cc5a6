# Copyright Contributors to the Cellarium project.
# SPDX-License-Identifier: BSD-3-Clause

from collections.abc import Callable
from typing import Any

import numpy as np
import torch


def call_func_with_batch(func: Callable, batch: dict[str, Any]) -> Any:
    """
    Call a function with the keys of a batch dictionary that are present in its annotations.
    If the function has a ``kwargs`` annotation, all keys from the batch dictionary are passed.
    """
    ann = func.__annotations__
    input_keys = {key for key in ann if key != "return" and key in batch}
    if "kwargs" in ann:
        input_keys |= batch.keys()
    return func(**{key: batch[key] for key in input_keys})


class NormalizationPipeline(torch.nn.Module):
    """
    A pipeline of transforms. Transforms are expected to return a dictionary. The input dictionary is
    sequentially passed to (piped through) each transform and updated with its output dictionary.

    Example:

        >>> from cellarium.norm.core import NormalizationPipeline
        >>> from cellarium.norm.transforms import DivideBySizeFactors, Log2
        >>> pipeline = NormalizationPipeline([DivideBySizeFactors(index_g), Log2(offset=1.0)])
        >>> batch = {"x_ng": x_ng, "size_factors_nk": size_factors_nk}
        >>> y_ng = pipeline(batch)["x_ng"]

    Args:
        transforms:
            Transforms to be executed sequentially.
    """

    def __init__(self, transforms: torch.nn.ModuleList | list[torch.nn.Module]) -> None:
        super().__init__()
        self._module_list = torch.nn.ModuleList(transforms)

    @property
    def transforms(self) -> torch.nn.ModuleList:
        return self._module_list

    def forward(self, batch: dict[str, np.ndarray | torch.Tensor]) -> dict[str, torch.Tensor | np.ndarray]:
        for module in self._module_list:
            batch |= call_func_with_batch(module.forward, batch)
        return batch

    def __repr__(self) -> str:
        inner = ", ".join(repr(module) for module in self._module_list)
        return f"{self.__class__.__name__}([{inner}])"
