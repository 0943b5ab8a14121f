import torch

from qstwave import ComplexWaveFunction, GibbsSampler
from qstwave.config import DTYPE

from conftest import CPU


def _trajectory(seed, steps=4):
    nn_state = ComplexWaveFunction(4, num_hidden=3, num_chains=3, seed=seed, device=CPU)
    nn_state.initialize_parameters(0.5)
    out = []
    for _ in range(steps):
        out.append(nn_state.sample(2).clone())
        out.append(nn_state.sample_layer(nn_state.prob_h_given_v(nn_state.visible_state)))
    return out


class TestDeterminism:

    def test_same_seed_same_configurations(self):
        first, second = _trajectory(99), _trajectory(99)
        assert all(torch.equal(a, b) for a, b in zip(first, second))

    def test_explicit_generator_is_honoured(self):
        gen_a = torch.Generator(device=CPU).manual_seed(5)
        gen_b = torch.Generator(device=CPU).manual_seed(5)
        a = ComplexWaveFunction(3, generator=gen_a, device=CPU)
        b = ComplexWaveFunction(3, generator=gen_b, device=CPU)
        assert a.generator is gen_a
        assert torch.equal(a.sample(3), b.sample(3))


class TestSampler:

    def test_conditionals_delegate_to_amplitude_model(self, nn_state):
        v = nn_state.generate_hilbert_space()
        assert torch.equal(nn_state.prob_h_given_v(v), nn_state.rbm_am.prob_h_given_v(v))
        h = torch.ones(2, 3, dtype=DTYPE)
        assert torch.equal(nn_state.prob_v_given_h(h), nn_state.rbm_am.prob_v_given_h(h))

    def test_sample_layer_edges(self, nn_state):
        probs = torch.tensor([[0.0, 1.0, 0.0], [1.0, 1.0, 0.0]], dtype=DTYPE)
        assert torch.equal(nn_state.sample_layer(probs), probs)

    def test_sample_mutates_held_batch(self, nn_state):
        held = nn_state.visible_state
        out = nn_state.sample(5)
        assert out is held
        assert nn_state.visible_state is held
        assert held.shape == (nn_state.num_chains, nn_state.num_visible)
        assert torch.all((held == 0) | (held == 1))

    def test_visible_layer_accessors(self, nn_state):
        v = torch.tensor([[1, 0, 1, 0], [0, 0, 1, 1], [1, 1, 1, 1]], dtype=DTYPE)
        nn_state.set_visible_layer(v)
        assert nn_state.num_chains == 3
        assert torch.equal(nn_state.visible_state_row(1), v[1])
        v[1, 0] = 1.0
        assert nn_state.visible_state_row(1)[0] == 0.0

    def test_sampler_wraps_amplitude_model(self, nn_state):
        assert isinstance(nn_state.sampler, GibbsSampler)
        assert nn_state.sampler.model is nn_state.rbm_am
        assert nn_state.sampler.generator is nn_state.generator

    def test_chains_reach_amplitude_distribution(self):
        nn_state = ComplexWaveFunction(2, num_hidden=2, num_chains=4000, seed=2024, device=CPU)
        nn_state.initialize_parameters(0.5)
        samples = nn_state.sample(30)
        idx = (samples[:, 0] + 2 * samples[:, 1]).long()
        empirical = torch.bincount(idx, minlength=4).to(DTYPE) / samples.shape[0]
        expected = nn_state.psi_normalized().abs() ** 2
        assert torch.allclose(empirical, expected, atol=0.04)
