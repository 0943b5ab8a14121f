from .complex_wavefunction import ComplexWaveFunction
from .sampling import GibbsSampler
from .pauli import create_dict, as_complex_unitary, unitary_table
from .measurement import (
    enumerate_local_states, rotated_sites, rotate_basis_state,
    rotate_psi_inner_prod,
)

__all__ = [
    "ComplexWaveFunction", "GibbsSampler",
    "create_dict", "as_complex_unitary", "unitary_table",
    "enumerate_local_states", "rotated_sites", "rotate_basis_state",
    "rotate_psi_inner_prod",
]
