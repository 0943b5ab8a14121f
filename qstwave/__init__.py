import logging

from .config import DEVICE, DTYPE, WavefunctionConfig
from .errors import (
    WavefunctionError, DomainError, NumericalInstabilityError,
    CapacityExceededError, DimensionMismatchError,
)

from .models.base import GenerativeModel
from .models.rbm import BinaryRBM

from .neural_states.complex_wavefunction import ComplexWaveFunction
from .neural_states.sampling import GibbsSampler
from .neural_states.pauli import create_dict, as_complex_unitary, unitary_table
from .neural_states.measurement import (
    enumerate_local_states, rotate_basis_state, rotate_psi_inner_prod,
)

from .utils.numeric import logistic, ln1pexp, softplus
from .utils.linalg import guarded_divide

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # config
    "DEVICE", "DTYPE", "WavefunctionConfig",
    # errors
    "WavefunctionError", "DomainError", "NumericalInstabilityError",
    "CapacityExceededError", "DimensionMismatchError",
    # models
    "GenerativeModel", "BinaryRBM",
    # neural states & physics
    "ComplexWaveFunction", "GibbsSampler",
    "create_dict", "as_complex_unitary", "unitary_table",
    "enumerate_local_states", "rotate_basis_state", "rotate_psi_inner_prod",
    # utils
    "logistic", "ln1pexp", "softplus", "guarded_divide",
]
