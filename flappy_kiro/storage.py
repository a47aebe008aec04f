"""Best-score persistence on top of a tiny string key/value store."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from .config import HIGH_SCORE_KEY

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Dict-backed store; nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """Stores all keys in one JSON object on disk.

    A missing file reads as empty. An unreadable or corrupt file is logged
    and also read as empty; the next ``set`` overwrites it.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError, RecursionError) as e:
            logger.warning("Ignoring unreadable store %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring store %s: expected a JSON object", self.path)
            return {}
        return data

    def get(self, key: str) -> str | None:
        value = self._read().get(key)
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=".tmp-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise


def parse_high_score(raw: object) -> int:
    """Interpret a stored value the way a leading-integer parse would.

    Leading whitespace and an optional sign are allowed and trailing text is
    ignored, so "12.7" and "12abc" both read as 12. No leading digits, a
    negative number or a boolean gives 0.
    """
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, int):
        value = raw
    else:
        match = _LEADING_INT.match(str(raw))
        if match is None:
            return 0
        value = int(match.group(1))
    return value if value >= 0 else 0


class HighScoreBook:
    """In-memory best score mirrored to a :class:`KeyValueStore`."""

    def __init__(self, store: KeyValueStore, key: str = HIGH_SCORE_KEY) -> None:
        self.store = store
        self.key = key
        self.high_score = 0

    def load(self) -> int:
        try:
            raw = self.store.get(self.key)
            self.high_score = parse_high_score(raw)
        except Exception:
            logger.exception("Failed to load high score")
            self.high_score = 0
        logger.debug("Loaded high score %d", self.high_score)
        return self.high_score

    def save(self) -> bool:
        try:
            self.store.set(self.key, str(self.high_score))
        except (OSError, ValueError) as e:
            logger.error("Failed to save high score: %s", e)
            return False
        return True

    def submit(self, score: int) -> int | None:
        """Record ``score``; on a new best, return the previous best, else None."""
        if score <= self.high_score:
            return None
        previous = self.high_score
        self.high_score = score
        self.save()
        logger.info("New high score %d (was %d)", score, previous)
        return previous
