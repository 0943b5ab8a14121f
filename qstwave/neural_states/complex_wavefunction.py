import logging

import torch

from ..config import DEVICE, DTYPE, WavefunctionConfig
from ..errors import DimensionMismatchError, DomainError, NumericalInstabilityError
from ..models.base import GenerativeModel
from ..models.rbm import BinaryRBM
from ..utils.linalg import guarded_divide
from ..utils.numeric import check_finite
from .measurement import MAX_ROTATED_SITES, enumerate_local_states, rotate_psi_inner_prod
from .pauli import create_dict, unitary_table
from .sampling import GibbsSampler

logger = logging.getLogger(__name__)


class ComplexWaveFunction:
    """
    Two generative models define magnitude and phase over bitstrings:
      psi(v) = sqrt(p_am(v)) * exp(i * log(p_ph(v)) / 2)

    Sampling only involves the amplitude model; both models share one
    explicit random generator.
    """

    def __init__(self, num_visible, num_hidden=None, num_chains=1, unitary_dict=None,
                 seed=13579, generator: torch.Generator = None,
                 rbm_am: GenerativeModel = None, rbm_ph: GenerativeModel = None,
                 max_rotated_sites=MAX_ROTATED_SITES, device: torch.device = DEVICE):
        self.device = device
        self.generator = generator if generator is not None else torch.Generator(device=device).manual_seed(seed)

        self.rbm_am = rbm_am if rbm_am is not None else BinaryRBM(
            num_visible, num_hidden, num_chains=num_chains, device=device, generator=self.generator)
        self.rbm_ph = rbm_ph if rbm_ph is not None else BinaryRBM(
            num_visible, num_hidden, device=device, generator=self.generator)
        if int(num_visible) != self.rbm_am.num_visible:
            raise DimensionMismatchError(
                f"num_visible={num_visible} but the amplitude model has {self.rbm_am.num_visible} visible units"
            )
        if self.rbm_am.num_visible != self.rbm_ph.num_visible:
            raise DimensionMismatchError(
                f"amplitude model has {self.rbm_am.num_visible} visible units, "
                f"phase model has {self.rbm_ph.num_visible}"
            )

        self.num_visible = self.rbm_am.num_visible
        self._num_am_pars = self.rbm_am.num_pars
        self.num_pars = self.rbm_am.num_pars + self.rbm_ph.num_pars

        raw = unitary_dict if unitary_dict is not None else create_dict(device=device)
        self.U = unitary_table(raw, device)

        self.sampler = GibbsSampler(self.rbm_am, self.generator)
        self.max_rotated_sites = int(max_rotated_sites)
        self._max_size = 20

        logger.info("ComplexWaveFunction: %d visible units, %d parameters (%d amplitude + %d phase)",
                    self.num_visible, self.num_pars, self._num_am_pars, self.num_pars - self._num_am_pars)

    @classmethod
    def from_config(cls, config: WavefunctionConfig, **kwargs):
        """Build from hyperparameters and draw initial parameters with `config.sigma`."""
        nn_state = cls(config.num_visible, config.num_hidden, num_chains=config.num_chains,
                       seed=config.seed, max_rotated_sites=config.max_rotated_sites, **kwargs)
        nn_state.initialize_parameters(config.sigma)
        return nn_state

    @property
    def max_size(self):
        return self._max_size

    def initialize_parameters(self, sigma=None):
        self.rbm_am.initialize_parameters(sigma=sigma, generator=self.generator)
        self.rbm_ph.initialize_parameters(sigma=sigma, generator=self.generator)

    def _as_config(self, v):
        v = torch.as_tensor(v, dtype=DTYPE, device=self.device)
        if v.dim() == 0 or v.shape[-1] != self.num_visible:
            raise DimensionMismatchError(
                f"configuration shape {tuple(v.shape)} does not end in num_visible={self.num_visible}"
            )
        return v

    # amplitudes/phases
    def amplitude(self, v):
        """|psi(v)| = sqrt(p_am(v))."""
        p = self.rbm_am.probability(self._as_config(v))
        if torch.isnan(p).any() or (p < 0).any():
            raise DomainError("amplitude: sqrt of a negative or undefined probability")
        if torch.isinf(p).any():
            raise NumericalInstabilityError("amplitude: probability overflowed")
        return p.sqrt()

    def phase(self, v):
        """
        log(p_ph(v)). p_ph is probability-shaped, so it can underflow to 0
        for large energies; that surfaces as DomainError.
        """
        p = self.rbm_ph.probability(self._as_config(v))
        if torch.isnan(p).any() or (p <= 0).any():
            raise DomainError("phase: log of a non-positive or undefined probability")
        if torch.isinf(p).any():
            raise NumericalInstabilityError("phase: probability overflowed")
        return torch.log(p)

    def psi(self, v):
        """psi(v) as complex tensor (cdouble)."""
        amp = self.amplitude(v).to(torch.cdouble)
        ph = self.phase(v).to(torch.cdouble)
        return amp * torch.exp(0.5j * ph)

    def psi_normalized(self, space=None):
        """
        psi over `space` (default: the full Hilbert space) with unit 2-norm.
        Normalized in log space, so large amplitude-model weights do not overflow.
        """
        space = self._as_config(self.generate_hilbert_space() if space is None else space)
        log_p = self.rbm_am.log_probability(space)
        if torch.isnan(log_p).any():
            raise DomainError("psi_normalized: undefined amplitude log-probability")
        log_z = torch.logsumexp(log_p, dim=0)
        if not torch.isfinite(log_z):
            raise NumericalInstabilityError("psi_normalized: amplitude weights vanish or diverge on this space")
        log_amp = (0.5 * (log_p - log_z)).to(torch.cdouble)
        return torch.exp(log_amp + 0.5j * self.phase(space).to(torch.cdouble))

    def generate_hilbert_space(self, size=None, device=None):
        """All 2^size configurations; row i carries bit j of i on site j."""
        size = self.num_visible if size is None else int(size)
        return enumerate_local_states(size, max_sites=self.max_size, device=self.device if device is None else device)

    # parameters
    def get_parameters(self):
        return torch.cat([self.rbm_am.get_parameters(), self.rbm_ph.get_parameters()])

    def set_parameters(self, pars):
        pars = torch.as_tensor(pars, dtype=DTYPE, device=self.device)
        if pars.dim() != 1 or pars.numel() != self.num_pars:
            raise DimensionMismatchError(f"expected {self.num_pars} parameters, got shape {tuple(pars.shape)}")
        self.rbm_am.set_parameters(pars[:self._num_am_pars])
        self.rbm_ph.set_parameters(pars[self._num_am_pars:])

    # sampling (amplitude model only)
    @property
    def num_chains(self):
        return self.sampler.num_chains

    @property
    def visible_state(self):
        return self.sampler.visible_state

    def visible_state_row(self, s):
        return self.sampler.visible_state_row(s)

    def set_visible_layer(self, v):
        self.sampler.set_visible_layer(v)

    def prob_h_given_v(self, v):
        return self.sampler.prob_h_given_v(v)

    def prob_v_given_h(self, h):
        return self.sampler.prob_v_given_h(h)

    def sample_layer(self, probs):
        return self.sampler.sample_layer(probs)

    def sample(self, k):
        return self.sampler.sample(k)

    # gradients of the effective energies
    def am_grads(self, v):
        return self.rbm_am.effective_energy_gradient(self._as_config(v), reduce=False)

    def ph_grads(self, v):
        return self.rbm_ph.effective_energy_gradient(self._as_config(v), reduce=False)

    def gradient(self, v):
        """[am_grads(v), ph_grads(v)] in get_parameters() order."""
        return check_finite(torch.cat([self.am_grads(v), self.ph_grads(v)], dim=-1), "energy gradient")

    def rotated_gradient(self, basis, state, unitaries=None, max_sites=None, rtol=1e-10):
        """
        Gradient as seen after rotating `state` into `basis`:
          sum_c U_c * grad(c) * psi(c) / sum_c U_c * psi(c)
        summed exactly over the 2^t candidates c of the t non-Z sites.
        Raises NumericalInstabilityError when the denominator cancels.
        """
        state = self._as_config(state)
        table = self.U if unitaries is None else unitary_table(unitaries, self.device)
        Upsi, Upsi_v, v = rotate_psi_inner_prod(self, basis, state, unitaries=table,
                                                max_sites=max_sites, include_extras=True)
        grads = self.gradient(v).to(torch.cdouble)                   # (C, P)
        num = torch.einsum("c,cp->p", Upsi_v, grads)
        rotated = guarded_divide(num, Upsi, Upsi_v.abs().sum(), rtol=rtol)
        if v.shape[0] == 1:
            # single term: the ratio is grad(state) up to rounding
            return grads[0]
        return rotated
