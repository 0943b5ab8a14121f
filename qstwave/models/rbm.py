import numpy as np
import torch
import torch.nn as nn
from torch.nn import functional as F

from ..config import DEVICE, DTYPE
from ..errors import DimensionMismatchError
from ..utils.numeric import ln1pexp, logistic
from ..utils.params import parameters_to_vector, vector_to_parameters
from .base import GenerativeModel


class BinaryRBM(nn.Module, GenerativeModel):
    """
    Bernoulli/Bernoulli RBM used twice: amplitude and phase nets.
    Guardrails:
      - All math in DTYPE (float64) for stability.
      - Parameters have requires_grad=False; gradients are explicit.
    Parameter layout (flat): [W (H*V), visible_bias (V), hidden_bias (H)].
    """

    def __init__(self, num_visible, num_hidden=None, num_chains=1, zero_weights=False,
                 device: torch.device = DEVICE, generator: torch.Generator = None):
        super().__init__()
        self.num_visible = int(num_visible)
        self.num_hidden = int(num_hidden) if num_hidden else self.num_visible
        self.num_chains = int(num_chains)
        self.num_pars = (self.num_visible * self.num_hidden) + self.num_visible + self.num_hidden
        self.device = device
        self.initialize_parameters(generator=generator, zero_weights=zero_weights)
        self.register_buffer(
            "visible_state",
            torch.bernoulli(torch.full((self.num_chains, self.num_visible), 0.5, device=self.device, dtype=DTYPE),
                            generator=generator),
        )

    def __repr__(self):
        return (f"BinaryRBM(num_visible={self.num_visible}, num_hidden={self.num_hidden}, "
                f"num_chains={self.num_chains}, device='{self.device}')")

    def initialize_parameters(self, sigma=None, generator=None, zero_weights=False):
        """
        Gaussian weights, zero biases. With `sigma=None` the weights are
        scaled by 1/sqrt(num_visible); otherwise every parameter is drawn
        with standard deviation `sigma`.
        """
        shape_w = (self.num_hidden, self.num_visible)
        if zero_weights:
            weights = torch.zeros(shape_w, device=self.device, dtype=DTYPE)
        else:
            weights = torch.randn(shape_w, generator=generator, device=self.device, dtype=DTYPE)
            weights = weights / np.sqrt(self.num_visible) if sigma is None else weights * sigma

        if sigma is None or zero_weights:
            vb = torch.zeros(self.num_visible, device=self.device, dtype=DTYPE)
            hb = torch.zeros(self.num_hidden, device=self.device, dtype=DTYPE)
        else:
            vb = sigma * torch.randn(self.num_visible, generator=generator, device=self.device, dtype=DTYPE)
            hb = sigma * torch.randn(self.num_hidden, generator=generator, device=self.device, dtype=DTYPE)

        self.weights = nn.Parameter(weights, requires_grad=False)
        self.visible_bias = nn.Parameter(vb, requires_grad=False)
        self.hidden_bias = nn.Parameter(hb, requires_grad=False)

    # -------------------------------
    # parameters
    # -------------------------------
    def get_parameters(self):
        return parameters_to_vector(self.parameters())

    def set_parameters(self, vec):
        if vec.numel() != self.num_pars:
            raise DimensionMismatchError(f"expected {self.num_pars} parameters, got {vec.numel()}")
        vector_to_parameters(vec, self.parameters())

    # -------------------------------
    # energies / probabilities
    # -------------------------------
    def _check_width(self, x, width, what):
        if x.shape[-1] != width:
            raise DimensionMismatchError(f"{what} width {x.shape[-1]} != {width}")

    def effective_energy(self, v):
        """
        E(v) = -v·a - sum_j ln(1 + exp(b_j + W_j·v))
        Return shape matches input batch rank.
        """
        self._check_width(v, self.num_visible, "visible")
        unsq = False
        if v.dim() < 2:
            v = v.unsqueeze(0)
            unsq = True
        v = v.to(self.weights)
        visible_bias_term = torch.matmul(v, self.visible_bias)
        hid_bias_term = ln1pexp(F.linear(v, self.weights, self.hidden_bias)).sum(-1)
        out = -(visible_bias_term + hid_bias_term)
        return out.squeeze(0) if unsq else out

    def probability(self, v):
        """Unnormalized Boltzmann weight exp(-E(v))."""
        return torch.exp(-self.effective_energy(v))

    def log_probability(self, v):
        return -self.effective_energy(v)

    def effective_energy_gradient(self, v, reduce=True):
        """
        Gradients of E(v) w.r.t. parameters.
          - If reduce=True: returns a flat vector of shape (num_pars,) summed over the batch
          - If reduce=False: returns per-sample grads with trailing grad-dim
        """
        self._check_width(v, self.num_visible, "visible")
        unsq = v.dim() < 2
        v = (v.unsqueeze(0) if unsq else v).to(self.weights)         # (..., V)
        prob = self.prob_h_given_v(v)                                # (..., H)

        if reduce:
            W_grad = -torch.matmul(prob.transpose(0, -1), v)         # (H, V)
            vb_grad = -torch.sum(v, dim=0)                           # (V,)
            hb_grad = -torch.sum(prob, dim=0)                        # (H,)
            return torch.cat([W_grad.reshape(-1), vb_grad, hb_grad], dim=0)

        W_grad = -torch.einsum("...h,...v->...hv", prob, v)          # (..., H, V)
        vec = [W_grad.reshape(*v.shape[:-1], -1), -v, -prob]
        out = torch.cat(vec, dim=-1)                                 # (..., num_pars)
        return out.squeeze(0) if unsq else out

    def prob_v_given_h(self, h):
        self._check_width(h, self.num_hidden, "hidden")
        return logistic(torch.matmul(h.to(self.weights), self.weights) + self.visible_bias).clamp(0, 1)

    def prob_h_given_v(self, v):
        self._check_width(v, self.num_visible, "visible")
        return logistic(torch.matmul(v.to(self.weights), self.weights.t()) + self.hidden_bias).clamp(0, 1)

    # -------------------------------
    # sampling
    # -------------------------------
    def sample_v_given_h(self, h, generator=None):
        return torch.bernoulli(self.prob_v_given_h(h), generator=generator)

    def sample_h_given_v(self, v, generator=None):
        return torch.bernoulli(self.prob_h_given_v(v), generator=generator)

    def set_visible_layer(self, v):
        v = v.unsqueeze(0) if v.dim() < 2 else v
        self._check_width(v, self.num_visible, "visible")
        self.visible_state = v.to(device=self.device, dtype=DTYPE).clone()
        self.num_chains = self.visible_state.shape[0]

    def gibbs_steps(self, k, initial_state=None, generator=None, overwrite=False):
        """
        k-step block Gibbs. Without `initial_state` the held visible batch
        is advanced in place; otherwise the caller tensor is preserved
        unless `overwrite=True`.
        """
        if initial_state is None:
            v = self.visible_state
        else:
            v = (initial_state if overwrite else initial_state.clone()).to(self.weights)
        for _ in range(k):
            h = self.sample_h_given_v(v, generator=generator)
            v.copy_(self.sample_v_given_h(h, generator=generator))
        return v
