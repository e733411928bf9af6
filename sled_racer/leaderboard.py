"""Local high-score table with non-blocking submission."""

from __future__ import annotations

import json
import logging
import math
import re
import threading
import time
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional

from .config import LeaderboardConfig

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

ACHIEVEMENTS = (
    (20, "Toddler Driver"),
    (40, "Getting Good"),
    (80, "Speed Demon"),
    (120, "Racing Pro"),
)
LEGEND = "AI Racing Legend"


class LeaderboardError(Exception):
    """Raised when a score cannot be recorded."""


def validate_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def _mask_part(part: str) -> str:
    if len(part) <= 2:
        return part
    return part[0] + "*" * (len(part) - 2) + part[-1]


def mask_email(email: str) -> str:
    """Hide most of an address: ``mario@gmail.com`` -> ``m***o@g***l.com``."""
    local, _, domain = email.partition("@")
    if not domain:
        return _mask_part(local)
    name, dot, extension = domain.partition(".")
    return f"{_mask_part(local)}@{_mask_part(name)}{dot}{extension}"


def achievement_for(survival_seconds: int) -> str:
    for limit, title in ACHIEVEMENTS:
        if survival_seconds < limit:
            return title
    return LEGEND


@dataclass(frozen=True)
class LeaderboardEntry:
    """One row of the high-score table."""

    email: str
    score: int
    survival_time: int
    achievement: str

    @classmethod
    def from_dict(cls, data: dict) -> "LeaderboardEntry":
        return cls(
            email=str(data["email"]),
            score=int(data["score"]),
            survival_time=int(data.get("survival_time", 0)),
            achievement=str(data.get("achievement", "")),
        )


class LeaderboardStore:
    """JSON-file backed list of entries, best score first."""

    def __init__(self, config: Optional[LeaderboardConfig] = None, path: Optional[Path] = None) -> None:
        self.cfg = config or LeaderboardConfig()
        self.path = Path(path) if path is not None else self.cfg.path
        self._lock = threading.Lock()

    def _load(self) -> list[LeaderboardEntry]:
        try:
            with self.path.open("r", encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            return []
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read leaderboard %s: %s", self.path, exc)
            return []

        entries: list[LeaderboardEntry] = []
        for item in raw if isinstance(raw, list) else []:
            try:
                entries.append(LeaderboardEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed leaderboard row: %r", item)
        return entries

    def _save(self, entries: list[LeaderboardEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(".tmp")
        with tmp.open("w", encoding="utf-8") as f:
            json.dump([asdict(entry) for entry in entries], f, indent=2)
        tmp.replace(self.path)

    def top(self, limit: Optional[int] = None) -> list[LeaderboardEntry]:
        limit = self.cfg.max_entries if limit is None else limit
        with self._lock:
            entries = self._load()
        entries.sort(key=lambda entry: entry.score, reverse=True)
        return entries[:limit]

    def rank_of(self, email: str) -> Optional[int]:
        wanted = email.strip().lower()
        for rank, entry in enumerate(self.top(), start=1):
            if entry.email.lower() == wanted:
                return rank
        return None

    def submit(self, email: str, score: float, survival_time: float, achievement: Optional[str] = None) -> LeaderboardEntry:
        email = email.strip().lower()
        if not validate_email(email):
            raise LeaderboardError("Please enter a valid email")
        if not math.isfinite(score) or score < self.cfg.min_score:
            raise LeaderboardError("Score too low for leaderboard")

        seconds = int(survival_time) if math.isfinite(survival_time) else 0
        entry = LeaderboardEntry(
            email=email,
            score=int(score),
            survival_time=seconds,
            achievement=achievement or achievement_for(seconds),
        )
        with self._lock:
            entries = self._load()
            entries.append(entry)
            entries.sort(key=lambda item: item.score, reverse=True)
            try:
                self._save(entries)
            except OSError as exc:
                raise LeaderboardError(f"Could not save score: {exc}") from exc
        logger.info("Recorded score %d for %s", entry.score, mask_email(email))
        return entry


class LeaderboardSubmitter:
    """Runs submissions on a background thread so the frame loop never waits."""

    IDLE = "idle"
    SUBMITTING = "submitting"
    DONE = "done"
    FAILED = "failed"

    def __init__(self, store: LeaderboardStore, timeout: Optional[float] = None) -> None:
        self.store = store
        self.timeout = store.cfg.submit_timeout if timeout is None else timeout
        self._lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None
        self._started = 0.0
        self._generation = 0
        self.status = self.IDLE
        self.error = ""
        self.entry: Optional[LeaderboardEntry] = None

    @property
    def busy(self) -> bool:
        return self.status == self.SUBMITTING

    def submit(self, email: str, score: float, survival_time: float) -> bool:
        """Start a submission; False if one is already running."""
        with self._lock:
            if self.status == self.SUBMITTING:
                return False
            self._generation += 1
            generation = self._generation
            self.status = self.SUBMITTING
            self.error = ""
            self.entry = None
            self._started = time.perf_counter()
        self._thread = threading.Thread(
            target=self._run,
            args=(generation, email, score, survival_time),
            name="LeaderboardSubmit",
            daemon=True,
        )
        self._thread.start()
        return True

    def _run(self, generation: int, email: str, score: float, survival_time: float) -> None:
        try:
            entry = self.store.submit(email, score, survival_time)
        except LeaderboardError as exc:
            self._finish(generation, self.FAILED, error=str(exc))
            return
        self._finish(generation, self.DONE, entry=entry)

    def _finish(
        self,
        generation: int,
        status: str,
        error: str = "",
        entry: Optional[LeaderboardEntry] = None,
    ) -> None:
        with self._lock:
            # A timed-out submission must not overwrite a newer result.
            if generation != self._generation or self.status != self.SUBMITTING:
                return
            self.status = status
            self.error = error
            self.entry = entry

    def poll(self) -> str:
        """Return the current status, failing submissions that ran too long."""
        with self._lock:
            if self.status == self.SUBMITTING and time.perf_counter() - self._started > self.timeout:
                logger.warning("Leaderboard submission timed out after %.1fs", self.timeout)
                self.status = self.FAILED
                self.error = "Submission timed out"
            return self.status

    def wait(self, timeout: Optional[float] = None) -> str:
        if self._thread is not None:
            self._thread.join(timeout)
        return self.poll()

    def reset(self) -> None:
        with self._lock:
            self._generation += 1
            self.status = self.IDLE
            self.error = ""
            self.entry = None
