import math

import pytest
import torch

from qstwave.errors import NumericalInstabilityError
from qstwave.utils.numeric import check_finite, ln1pexp, logistic, softplus


class TestSoftplus:

    def test_large_argument_is_identity(self):
        assert abs(float(softplus(50.0)) - 50.0) < 1e-6

    def test_zero_is_log_two(self):
        assert abs(float(softplus(0.0)) - math.log(2.0)) < 1e-9

    def test_no_overflow_past_cutoff(self):
        out = ln1pexp(torch.tensor([1000.0, -1000.0], dtype=torch.double))
        assert torch.isfinite(out).all()
        assert out[0] == 1000.0
        assert out[1] == 0.0

    def test_matches_log1p_exp_below_cutoff(self):
        x = torch.linspace(-10, 10, 21, dtype=torch.double)
        assert torch.allclose(ln1pexp(x), torch.log1p(torch.exp(x)))


class TestLogistic:

    def test_midpoint_and_tails(self):
        out = logistic(torch.tensor([0.0, 800.0, -800.0], dtype=torch.double))
        assert out[0] == 0.5
        assert out[1] == 1.0
        assert out[2] == 0.0

    def test_complements(self):
        x = torch.linspace(-5, 5, 11, dtype=torch.double)
        assert torch.allclose(logistic(x) + logistic(-x), torch.ones_like(x))


def test_check_finite_rejects_nan():
    with pytest.raises(NumericalInstabilityError):
        check_finite(torch.tensor([1.0, float("nan")]), "test")
    x = torch.ones(3)
    assert check_finite(x) is x
