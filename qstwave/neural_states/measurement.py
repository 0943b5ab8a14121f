import logging
from typing import Iterable, List, Optional

import torch

from ..config import DEVICE, DTYPE
from ..errors import CapacityExceededError, DimensionMismatchError
from .pauli import as_complex_unitary

logger = logging.getLogger(__name__)

MAX_ROTATED_SITES = 20


def rotated_sites(basis: Iterable[str]) -> List[int]:
    """Indices of the sites whose label is not 'Z', in order."""
    return [i for i, b in enumerate(basis) if b != "Z"]


def enumerate_local_states(num_sites: int, max_sites: int = MAX_ROTATED_SITES,
                           device: torch.device = DEVICE) -> torch.Tensor:
    """
    All 2^num_sites bit patterns as a (2^num_sites, num_sites) DTYPE matrix.
    Row i holds the bits of i, column j <-> bit j (least significant first).
    """
    if num_sites > max_sites:
        raise CapacityExceededError(f"{num_sites} rotated sites exceed the supported {max_sites}")
    ar = torch.arange(1 << num_sites, device=device, dtype=torch.long)
    shifts = torch.arange(num_sites, device=device, dtype=torch.long)
    return ((ar.unsqueeze(1) >> shifts) & 1).to(DTYPE)


def rotate_basis_state(nn_state, basis, state, unitaries=None, max_sites: Optional[int] = None):
    """
    Enumerate the local Hilbert space of the non-Z sites around `state`.

    Returns:
      Ut : (C,) complex — product over rotated sites of U[state bit, candidate bit]
      v  : (C, n) DTYPE — candidates, equal to `state` off the rotated sites
    with C = 2^t, candidate i carrying bit j of i on the j-th rotated site.
    """
    device = nn_state.device
    n_vis = nn_state.num_visible
    basis_seq = list(basis)
    max_sites = nn_state.max_rotated_sites if max_sites is None else max_sites

    if len(basis_seq) != n_vis:
        raise DimensionMismatchError(f"rotate_basis_state: basis length {len(basis_seq)} != num_visible {n_vis}")
    if state.dim() != 1 or state.shape[0] != n_vis:
        raise DimensionMismatchError(
            f"rotate_basis_state: expected a single configuration of length {n_vis}, got {tuple(state.shape)}"
        )

    sites = rotated_sites(basis_seq)
    combos = enumerate_local_states(len(sites), max_sites=max_sites, device=device)  # (C, t)
    logger.debug("enumerating %d candidates over rotated sites %s", combos.shape[0], sites)

    v = state.to(device=device, dtype=DTYPE).unsqueeze(0).repeat(combos.shape[0], 1)
    Ut = torch.ones(combos.shape[0], dtype=torch.cdouble, device=device)
    if not sites:
        return Ut, v

    src = nn_state.U if unitaries is None else unitaries
    v[:, sites] = combos
    ref_bits = state[sites].round().long()
    cand_bits = combos.long()
    for j, site in enumerate(sites):
        label = basis_seq[site]
        if label not in src:
            raise ValueError(f"rotate_basis_state: no unitary for basis label {label!r}")
        U = as_complex_unitary(src[label], device)
        Ut = Ut * U[ref_bits[j], cand_bits[:, j]]
    return Ut, v


def rotate_psi_inner_prod(nn_state, basis, state, unitaries=None, max_sites=None, include_extras=False):
    """
    Inner-product components for measuring `state` in `basis`.

    Returns:
      total  : complex scalar, sum over candidates of U * psi
      (opt) branches : (C,) complex, U * psi per candidate
      (opt) v        : (C, n) DTYPE candidates
    """
    Ut, v = rotate_basis_state(nn_state, basis, state, unitaries=unitaries, max_sites=max_sites)
    with torch.no_grad():
        Upsi_v = Ut * nn_state.psi(v)
    Upsi = Upsi_v.sum(dim=0)

    if include_extras:
        return Upsi, Upsi_v, v
    return Upsi
