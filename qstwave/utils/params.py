from typing import Iterable

import torch

from ..errors import DimensionMismatchError


def parameters_to_vector(parameters: Iterable[torch.Tensor]) -> torch.Tensor:
    """Flatten parameters into one vector, in iteration order."""
    return torch.cat([p.detach().reshape(-1) for p in parameters])


def vector_to_parameters(vec, parameters: Iterable[torch.Tensor]) -> None:
    """Write a flattened vector back into parameter tensors, in place."""
    if not isinstance(vec, torch.Tensor):
        raise TypeError(f"expected torch.Tensor, got {torch.typename(vec)}")
    if vec.dim() != 1:
        raise DimensionMismatchError(f"expected a 1-D parameter vector, got shape {tuple(vec.shape)}")

    offset = 0
    for p in parameters:
        n = p.numel()
        if offset + n > vec.numel():
            raise DimensionMismatchError("Parameter vector is too short for parameter shapes.")
        with torch.no_grad():
            p.copy_(vec[offset: offset + n].view_as(p).to(dtype=p.dtype, device=p.device))
        offset += n

    if offset != vec.numel():
        raise DimensionMismatchError(f"Parameter vector has extra elements: used {offset}, total {vec.numel()}.")
