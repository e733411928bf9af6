"""Tests for the Perlin noise driving track curvature."""

import math
import unittest

import numpy as np

from sled_racer.config import NoiseConfig
from sled_racer.noise import NoiseSource


class TestNoiseSource(unittest.TestCase):

    def setUp(self):
        self.noise = NoiseSource(NoiseConfig(), rng=np.random.default_rng(7))

    def test_output_stays_in_unit_interval(self):
        for offset in np.linspace(-50.0, 500.0, 5000):
            value = self.noise.sample(float(offset))
            self.assertGreaterEqual(value, 0.0)
            self.assertLessEqual(value, 1.0)

    def test_small_steps_give_small_changes(self):
        for offset in np.linspace(0.0, 100.0, 2000):
            a = self.noise.sample(float(offset))
            b = self.noise.sample(float(offset) + 0.001)
            self.assertLess(abs(a - b), 0.01)

    def test_not_constant(self):
        values = {round(self.noise.sample(x * 0.37 + 0.1), 6) for x in range(200)}
        self.assertGreater(len(values), 50)

    def test_base_is_drawn_in_permutation_range(self):
        for seed in range(20):
            source = NoiseSource(NoiseConfig(), rng=np.random.default_rng(seed))
            self.assertGreaterEqual(source.base, 0)
            self.assertLess(source.base, NoiseConfig().base_range)

    def test_same_generator_seed_gives_same_track_shape(self):
        other = NoiseSource(NoiseConfig(), rng=np.random.default_rng(7))
        self.assertEqual(self.noise.base, other.base)
        for offset in (0.0, 0.05, 1.3, 42.42):
            self.assertEqual(self.noise.sample(offset), other.sample(offset))

    def test_different_bases_give_different_shapes(self):
        a = NoiseSource(NoiseConfig(), base=0)
        b = NoiseSource(NoiseConfig(), base=1)
        offsets = [x * 0.37 + 0.1 for x in range(40)]
        self.assertNotEqual([a.sample(x) for x in offsets], [b.sample(x) for x in offsets])

    def test_rejects_non_finite_offsets(self):
        for bad in (math.nan, math.inf, -math.inf):
            with self.assertRaises(ValueError):
                self.noise.sample(bad)

    def test_reseed_draws_from_the_new_generator(self):
        self.noise.reseed(np.random.default_rng(99))
        expected = int(np.random.default_rng(99).integers(0, NoiseConfig().base_range))
        self.assertEqual(self.noise.base, expected)


if __name__ == "__main__":
    unittest.main()
