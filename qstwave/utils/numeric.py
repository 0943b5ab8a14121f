import torch

from ..config import DTYPE
from ..errors import NumericalInstabilityError

# above this, log1p(exp(x)) == x to double precision
LN1PEXP_CUTOFF = 30.0


def _as_tensor(x):
    return x if torch.is_tensor(x) else torch.as_tensor(x, dtype=DTYPE)


def logistic(x):
    """Elementwise 1 / (1 + exp(-x))."""
    return torch.sigmoid(_as_tensor(x))


def ln1pexp(x):
    """Elementwise log(1 + exp(x)), returning x itself past the cutoff."""
    x = _as_tensor(x)
    safe = torch.clamp(x, max=LN1PEXP_CUTOFF)
    return torch.where(x > LN1PEXP_CUTOFF, x, torch.log1p(torch.exp(safe)))


softplus = ln1pexp


def check_finite(x: torch.Tensor, what: str = "value") -> torch.Tensor:
    """Raise NumericalInstabilityError if `x` holds NaN or Inf."""
    if not bool(torch.isfinite(x).all()):
        raise NumericalInstabilityError(f"non-finite {what} encountered")
    return x
