from .numeric import logistic, ln1pexp, softplus, check_finite
from .params import parameters_to_vector, vector_to_parameters
from .linalg import guarded_divide

__all__ = [
    "logistic", "ln1pexp", "softplus", "check_finite",
    "parameters_to_vector", "vector_to_parameters",
    "guarded_divide",
]
