import pytest
import torch

from qstwave import ComplexWaveFunction, GenerativeModel
from qstwave.config import DTYPE

CPU = torch.device("cpu")


class TableModel(GenerativeModel):
    """Sub-model whose probability is an arbitrary function of v; energy gradient is -v."""

    def __init__(self, num_visible, prob_fn):
        self.num_visible = num_visible
        self.num_pars = num_visible
        self.prob_fn = prob_fn
        self.params = torch.zeros(num_visible, dtype=DTYPE)
        self.visible_state = torch.zeros(1, num_visible, dtype=DTYPE)

    def probability(self, v):
        return self.prob_fn(v)

    def prob_h_given_v(self, v):
        return torch.full((*v.shape[:-1], 1), 0.5, dtype=DTYPE)

    def prob_v_given_h(self, h):
        return torch.full((*h.shape[:-1], self.num_visible), 0.5, dtype=DTYPE)

    def effective_energy_gradient(self, v, reduce=True):
        return -v.sum(0) if reduce and v.dim() > 1 else -v

    def get_parameters(self):
        return self.params.clone()

    def set_parameters(self, vec):
        self.params = vec.clone()

    def gibbs_steps(self, k, initial_state=None, generator=None, overwrite=False):
        return self.visible_state

    def set_visible_layer(self, v):
        self.visible_state = v

    def initialize_parameters(self, sigma=None, generator=None, zero_weights=False):
        pass


def constant_prob(value=1.0):
    return lambda v: torch.full(v.shape[:-1], value, dtype=DTYPE)


@pytest.fixture
def nn_state():
    torch.manual_seed(1234)
    state = ComplexWaveFunction(4, num_hidden=3, num_chains=2, seed=42, device=CPU)
    state.initialize_parameters(sigma=0.5)
    return state


@pytest.fixture
def two_site_state():
    state = ComplexWaveFunction(2, num_hidden=2, seed=7, device=CPU)
    state.initialize_parameters(sigma=0.3)
    return state
