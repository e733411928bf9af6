"""Tests for the local leaderboard and its background submitter."""

import json
import tempfile
import threading
import time
import unittest
from pathlib import Path

from sled_racer.config import LeaderboardConfig
from sled_racer.leaderboard import (
    LeaderboardError,
    LeaderboardStore,
    LeaderboardSubmitter,
    achievement_for,
    mask_email,
    validate_email,
)


class TestHelpers(unittest.TestCase):

    def test_validate_email(self):
        self.assertTrue(validate_email("mario@gmail.com"))
        self.assertTrue(validate_email("a.b+c@sub.example.org"))
        for bad in ("", "mario", "mario@", "@gmail.com", "mario@gmail", "ma rio@gmail.com"):
            self.assertFalse(validate_email(bad), bad)

    def test_mask_email(self):
        self.assertEqual(mask_email("mario@gmail.com"), "m***o@g***l.com")
        self.assertEqual(mask_email("ab@cd.io"), "ab@cd.io")
        self.assertEqual(mask_email("luigi@mail.co.uk"), "l***i@m**l.co.uk")

    def test_achievement_tiers(self):
        cases = {
            0: "Toddler Driver",
            19: "Toddler Driver",
            20: "Getting Good",
            45: "Speed Demon",
            80: "Racing Pro",
            119: "Racing Pro",
            120: "AI Racing Legend",
        }
        for seconds, title in cases.items():
            self.assertEqual(achievement_for(seconds), title)


class TestStore(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "nested" / "board.json"
        self.store = LeaderboardStore(LeaderboardConfig(max_entries=3), path=self.path)

    def tearDown(self):
        self._tmp.cleanup()

    def test_empty_when_missing(self):
        self.assertEqual(self.store.top(), [])

    def test_submit_normalises_and_persists(self):
        entry = self.store.submit("  Mario@Gmail.com ", 1234.9, 20.7)
        self.assertEqual(entry.email, "mario@gmail.com")
        self.assertEqual(entry.score, 1234)
        self.assertEqual(entry.survival_time, 20)
        self.assertEqual(entry.achievement, "Getting Good")
        with self.path.open() as f:
            saved = json.load(f)
        self.assertEqual(saved[0]["survival_time"], 20)

    def test_top_is_sorted_and_limited(self):
        for i, score in enumerate((50, 900, 300, 700)):
            self.store.submit(f"p{i}@x.io", score, score / 60)
        scores = [entry.score for entry in self.store.top()]
        self.assertEqual(scores, [900, 700, 300])

    def test_rank_of(self):
        self.store.submit("a@x.io", 100, 1)
        self.store.submit("b@x.io", 500, 8)
        self.assertEqual(self.store.rank_of("B@x.io"), 1)
        self.assertEqual(self.store.rank_of("a@x.io"), 2)
        self.assertIsNone(self.store.rank_of("c@x.io"))

    def test_rejects_bad_submissions(self):
        with self.assertRaises(LeaderboardError):
            self.store.submit("not-an-email", 500, 8)
        with self.assertRaises(LeaderboardError):
            self.store.submit("a@x.io", 9, 0)
        self.assertEqual(self.store.top(), [])

    def test_corrupt_file_reads_as_empty(self):
        self.path.parent.mkdir(parents=True)
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(self.store.top(), [])
        self.store.submit("a@x.io", 100, 1)
        self.assertEqual(len(self.store.top()), 1)

    def test_malformed_rows_are_skipped(self):
        self.path.parent.mkdir(parents=True)
        rows = [{"email": "a@x.io", "score": 40}, {"score": 10}, "junk"]
        self.path.write_text(json.dumps(rows), encoding="utf-8")
        self.assertEqual([entry.email for entry in self.store.top()], ["a@x.io"])


class SlowStore(LeaderboardStore):

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.release = threading.Event()

    def submit(self, *args, **kwargs):
        self.release.wait(2.0)
        return super().submit(*args, **kwargs)


class TestSubmitter(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.path = Path(self._tmp.name) / "board.json"

    def tearDown(self):
        self._tmp.cleanup()

    def test_successful_submission(self):
        submitter = LeaderboardSubmitter(LeaderboardStore(path=self.path), timeout=5.0)
        self.assertTrue(submitter.submit("mario@gmail.com", 600, 10))
        self.assertEqual(submitter.wait(2.0), LeaderboardSubmitter.DONE)
        self.assertEqual(submitter.entry.score, 600)

    def test_validation_failure_is_reported(self):
        submitter = LeaderboardSubmitter(LeaderboardStore(path=self.path), timeout=5.0)
        submitter.submit("mario", 600, 10)
        self.assertEqual(submitter.wait(2.0), LeaderboardSubmitter.FAILED)
        self.assertEqual(submitter.error, "Please enter a valid email")

    def test_one_submission_at_a_time(self):
        store = SlowStore(path=self.path)
        submitter = LeaderboardSubmitter(store, timeout=5.0)
        self.assertTrue(submitter.submit("a@x.io", 600, 10))
        self.assertTrue(submitter.busy)
        self.assertFalse(submitter.submit("b@x.io", 700, 11))
        store.release.set()
        self.assertEqual(submitter.wait(2.0), LeaderboardSubmitter.DONE)

    def test_slow_submission_times_out(self):
        store = SlowStore(path=self.path)
        submitter = LeaderboardSubmitter(store, timeout=0.05)
        submitter.submit("a@x.io", 600, 10)
        time.sleep(0.15)
        self.assertEqual(submitter.poll(), LeaderboardSubmitter.FAILED)
        self.assertEqual(submitter.error, "Submission timed out")
        store.release.set()
        submitter.wait(2.0)
        self.assertEqual(submitter.status, LeaderboardSubmitter.FAILED)

    def test_reset_returns_to_idle(self):
        submitter = LeaderboardSubmitter(LeaderboardStore(path=self.path), timeout=5.0)
        submitter.submit("a@x.io", 600, 10)
        submitter.wait(2.0)
        submitter.reset()
        self.assertEqual(submitter.poll(), LeaderboardSubmitter.IDLE)
        self.assertIsNone(submitter.entry)


if __name__ == "__main__":
    unittest.main()
