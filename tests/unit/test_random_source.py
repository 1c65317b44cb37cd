"""Unit tests for RandomSource."""

import statistics

import pytest

from resiliencysim.random_source import DEFAULT_SEED, RandomSource


class TestDeterminism:
    def test_default_seed(self):
        assert RandomSource().seed == DEFAULT_SEED == 42

    def test_same_seed_same_sequence(self):
        a, b = RandomSource(7), RandomSource(7)
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_different_seed_different_sequence(self):
        a, b = RandomSource(7), RandomSource(8)
        assert [a.random() for _ in range(5)] != [b.random() for _ in range(5)]

    def test_reseed_restarts_sequence(self):
        rng = RandomSource(3)
        first = [rng.random() for _ in range(5)]
        rng.reseed()
        assert [rng.random() for _ in range(5)] == first

    def test_reseed_with_new_seed(self):
        rng = RandomSource(3)
        rng.reseed(11)
        assert rng.seed == 11
        assert rng.random() == RandomSource(11).random()

    def test_discard_skips_draws(self):
        skipped, reference = RandomSource(5), RandomSource(5)
        skipped.discard(2)
        reference.random()
        reference.random()
        assert skipped.random() == reference.random()


class TestDistributions:
    def test_random_in_unit_interval(self):
        rng = RandomSource(1)
        assert all(0.0 <= rng.random() < 1.0 for _ in range(1000))

    def test_uniform_bounds(self):
        rng = RandomSource(1)
        assert all(2.0 <= rng.uniform(2.0, 3.0) <= 3.0 for _ in range(1000))

    def test_normal_zero_std_is_mean(self):
        assert RandomSource(1).normal(10.0, 0.0) == 10.0

    def test_normal_moments(self):
        rng = RandomSource(1)
        draws = [rng.normal(30.0, 5.0) for _ in range(20_000)]
        assert statistics.fmean(draws) == pytest.approx(30.0, abs=0.2)
        assert statistics.stdev(draws) == pytest.approx(5.0, abs=0.2)

    def test_exponential_mean(self):
        rng = RandomSource(1)
        draws = [rng.exponential(0.4) for _ in range(20_000)]
        assert statistics.fmean(draws) == pytest.approx(2.5, rel=0.05)
