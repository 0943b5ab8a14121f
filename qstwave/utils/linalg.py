import logging
import math

import torch

from ..errors import NumericalInstabilityError

logger = logging.getLogger(__name__)


def guarded_divide(num: torch.Tensor, den: torch.Tensor, scale, rtol: float = 1e-10) -> torch.Tensor:
    """
    Complex num / den, refusing when |den| <= rtol * scale.

    `scale` is the magnitude den would have without cancellation
    (e.g. the sum of |terms| it was accumulated from).
    """
    den = den.to(torch.cdouble)
    scale = float(scale)
    if not (torch.isfinite(num).all() and torch.isfinite(den).all()) or not math.isfinite(scale):
        logger.warning("non-finite operands in complex division")
        raise NumericalInstabilityError("non-finite numerator or denominator")
    if float(den.abs()) <= rtol * scale:
        logger.warning("vanishing denominator |den|=%.3e (scale %.3e)", float(den.abs()), scale)
        raise NumericalInstabilityError(
            f"denominator vanishes: |den|={float(den.abs()):.3e} against scale {scale:.3e}"
        )
    return num.to(torch.cdouble) / den

