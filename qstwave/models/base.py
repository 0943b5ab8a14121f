# Interface the composite wavefunction needs from a generative sub-model.
# Two independent instances are used: one for amplitudes, one for phases.

from abc import ABC, abstractmethod

import torch


class GenerativeModel(ABC):
    """
    Parameterized probability model over binary configurations.

    Implementations must also expose the integer attributes
      - num_visible: number of degrees of freedom (configuration length)
      - num_pars:    length of the flat parameter vector
    and hold a batch of visible configurations that `gibbs_steps` advances.
    """

    @abstractmethod
    def probability(self, v: torch.Tensor) -> torch.Tensor:
        """Unnormalized probability of each configuration in `v`."""

    def log_probability(self, v: torch.Tensor) -> torch.Tensor:
        """log of `probability`; override when it can be formed without exponentiating."""
        return torch.log(self.probability(v))

    @abstractmethod
    def prob_h_given_v(self, v: torch.Tensor) -> torch.Tensor:
        """Conditional p(h_j = 1 | v) for every hidden unit."""

    @abstractmethod
    def prob_v_given_h(self, h: torch.Tensor) -> torch.Tensor:
        """Conditional p(v_i = 1 | h) for every visible unit."""

    @abstractmethod
    def effective_energy_gradient(self, v: torch.Tensor, reduce: bool = True) -> torch.Tensor:
        """Gradient of the effective energy w.r.t. this model's own parameters."""

    @abstractmethod
    def get_parameters(self) -> torch.Tensor:
        """Flat copy of all parameters."""

    @abstractmethod
    def set_parameters(self, vec: torch.Tensor) -> None:
        """Overwrite all parameters from a flat vector of length num_pars."""

    @abstractmethod
    def gibbs_steps(self, k: int, initial_state=None, generator=None, overwrite=False) -> torch.Tensor:
        """k block-Gibbs steps; with no `initial_state` the held batch is advanced in place."""

    @abstractmethod
    def set_visible_layer(self, v: torch.Tensor) -> None:
        """Replace the held batch of visible configurations."""

    @abstractmethod
    def initialize_parameters(self, sigma=None, generator=None, zero_weights=False) -> None:
        """Random (Gaussian) initialization of the parameters."""
