"""Tests for geometry eviction."""

import math
import unittest

from sled_racer.config import PruneConfig
from sled_racer.pruner import GeometryPruner
from sled_racer.state import Obstacle
from tests.helpers import make_generator, make_state, straight_track


class TestTrackPruning(unittest.TestCase):

    def setUp(self):
        self.pruner = GeometryPruner(PruneConfig())
        self.state = make_state()
        straight_track(self.state, 60)  # y = 50 .. 3000

    def test_nothing_behind_nothing_removed(self):
        self.assertEqual(self.pruner.prune_track(self.state), 0)
        self.assertEqual(len(self.state.segments), 60)

    def test_at_most_three_per_call(self):
        self.state.offset = 2000.0
        self.assertEqual(self.pruner.prune_track(self.state), 3)
        self.assertEqual(self.state.segments[0].y, 200.0)

    def test_never_below_fifty_segments(self):
        self.state.offset = 2000.0
        for _ in range(20):
            self.pruner.prune_track(self.state)
        self.assertEqual(len(self.state.segments), 50)

    def test_keeps_segments_within_three_hundred_units(self):
        self.state.offset = 500.0  # only y < 200 qualifies
        for _ in range(5):
            self.pruner.prune_track(self.state)
        self.assertEqual(self.state.segments[0].y, 200.0)

    def test_stops_at_corrupt_head(self):
        self.state.offset = 2000.0
        self.state.segments[0].y = math.nan
        self.assertEqual(self.pruner.prune_track(self.state), 0)

    def test_count_bound_over_a_long_run(self):
        state = make_state()
        generator = make_generator()
        added = 0
        for step in range(400):
            state.offset = step * 25.0
            added += generator.ensure_ahead(state)
            self.pruner.prune_track(state)
            self.assertTrue(len(state.segments) >= 50 or len(state.segments) == added)
        self.assertLess(len(state.segments), 120)


class TestObstaclePruning(unittest.TestCase):

    def setUp(self):
        self.pruner = GeometryPruner(PruneConfig())
        self.state = make_state()
        self.state.offset = 400.0

    def test_drops_obstacles_far_behind(self):
        keep = Obstacle(x=200.0, y=300.0)
        self.state.obstacles = [Obstacle(x=200.0, y=100.0), keep, Obstacle(x=200.0, y=200.0)]
        self.assertEqual(self.pruner.prune_obstacles(self.state), 2)
        self.assertEqual(self.state.obstacles, [keep])

    def test_drops_non_finite_y(self):
        self.state.obstacles = [Obstacle(x=200.0, y=math.nan), Obstacle(x=200.0, y=900.0)]
        self.pruner.prune_obstacles(self.state)
        self.assertEqual(len(self.state.obstacles), 1)

    def test_unreadable_collection_is_cleared(self):
        self.state.obstacles = [Obstacle(x=200.0, y=900.0), None]
        self.pruner.prune_obstacles(self.state)
        self.assertEqual(self.state.obstacles, [])

    def test_obstacle_sweep_is_throttled(self):
        straight_track(self.state, 10)
        self.state.obstacles = [Obstacle(x=200.0, y=0.0)]
        self.assertEqual(self.pruner.prune(self.state, 59), (0, 0))
        self.assertEqual(len(self.state.obstacles), 1)
        self.assertEqual(self.pruner.prune(self.state, 120), (0, 1))
        self.assertEqual(self.state.obstacles, [])


if __name__ == "__main__":
    unittest.main()
