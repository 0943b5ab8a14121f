class WavefunctionError(Exception):
    """Base class for errors raised while evaluating or differentiating a wavefunction."""


class DomainError(WavefunctionError, ValueError):
    """sqrt or log applied to a probability outside its domain."""


class NumericalInstabilityError(WavefunctionError, ArithmeticError):
    """Vanishing denominator or a non-finite value in an evaluation."""


class CapacityExceededError(WavefunctionError, ValueError):
    """Requested enumeration is wider than the supported bound."""


class DimensionMismatchError(WavefunctionError, ValueError):
    """Parameter vector or configuration has the wrong size."""
