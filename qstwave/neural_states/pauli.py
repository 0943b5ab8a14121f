from math import sqrt
from typing import Mapping

import torch

from ..config import DEVICE

# rows: reference bit, columns: candidate bit
_DEFAULT_ROTATIONS = {
    "X": [[1.0, 1.0], [1.0, -1.0]],
    "Y": [[1.0, -1.0j], [1.0, 1.0j]],
}


def create_dict(device: torch.device = DEVICE, **overrides):
    """
    Rotation table for the non-trivial measurement axes, as (2,2) cdouble.
    'Z' needs no entry: unrotated sites are never looked up.
    """
    table = {name: as_complex_unitary(rows, device) / sqrt(2.0) for name, rows in _DEFAULT_ROTATIONS.items()}
    table.update(unitary_table(overrides, device))
    return table


def as_complex_unitary(U, device: torch.device = DEVICE):
    """Return a (2,2) complex (cdouble) matrix on `device`."""
    U_t = torch.as_tensor(U, dtype=torch.cdouble, device=device)
    if tuple(U_t.shape) != (2, 2):
        raise ValueError(f"as_complex_unitary expects (2,2), got {tuple(U_t.shape)}")
    return U_t.contiguous()


def unitary_table(unitaries: Mapping, device: torch.device = DEVICE):
    """Normalize a label -> matrix mapping into a table of (2,2) cdouble tensors."""
    return {str(k): as_complex_unitary(v, device) for k, v in unitaries.items()}
