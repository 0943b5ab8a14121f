import torch

from ..models.base import GenerativeModel


class GibbsSampler:
    """
    Block-Gibbs sampler over the amplitude model, i.e. targeting |psi|^2.
    All randomness comes from the one `generator` handed in, consumed
    in a fixed row-major order.
    """

    def __init__(self, model: GenerativeModel, generator: torch.Generator):
        self.model = model
        self.generator = generator

    # conditional probabilities (no sampling)
    def prob_h_given_v(self, v):
        return self.model.prob_h_given_v(v)

    def prob_v_given_h(self, h):
        return self.model.prob_v_given_h(h)

    def sample_layer(self, probs):
        """Independent Bernoulli draw for every entry of `probs`."""
        return torch.bernoulli(probs, generator=self.generator)

    def sample(self, k):
        """Advance the held chains by k v->h->v steps, in place."""
        return self.model.gibbs_steps(k, generator=self.generator)

    # chain state
    @property
    def visible_state(self):
        return self.model.visible_state

    @property
    def num_chains(self):
        return self.visible_state.shape[0]

    def visible_state_row(self, s):
        return self.visible_state[s]

    def set_visible_layer(self, v):
        self.model.set_visible_layer(v)
