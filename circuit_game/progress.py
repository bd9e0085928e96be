"""Level unlocks and best-star records persisted as JSON."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

PROGRESS_FILENAME = "progress.json"


class ProgressError(Exception):
    """Raised when progress cannot be persisted."""


@dataclass
class GameProgress:
    unlocked_level: int = 1
    level_stars: Dict[int, int] = field(default_factory=dict)

    def complete_level(self, level_id: int, stars: int) -> None:
        # Keep the best rating and unlock the following level.
        self.level_stars[level_id] = max(self.level_stars.get(level_id, 0), stars)
        self.unlocked_level = max(self.unlocked_level, level_id + 1)

    def is_level_unlocked(self, level_id: int) -> bool:
        return level_id <= self.unlocked_level

    def stars_for(self, level_id: int) -> int:
        return self.level_stars.get(level_id, 0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "unlocked_level": self.unlocked_level,
            # JSON object keys are strings.
            "level_stars": {str(key): value for key, value in self.level_stars.items()},
        }

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "GameProgress":
        stars = {
            int(key): int(value) for key, value in dict(payload.get("level_stars", {})).items()
        }
        unlocked = max(1, int(payload.get("unlocked_level", 1) or 1))
        return cls(unlocked_level=unlocked, level_stars=stars)


def default_progress_path() -> Path:
    return Path(os.path.expanduser("~")) / ".circuit_game" / PROGRESS_FILENAME


class ProgressStore:
    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else default_progress_path()
        self.progress = self.load()

    def load(self) -> GameProgress:
        # Unreadable files fall back to fresh progress.
        if not self.path.exists():
            return GameProgress()
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                payload = json.load(handle)
            return GameProgress.from_dict(payload)
        except (OSError, json.JSONDecodeError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Failed to load progress from %s: %s", self.path, exc)
            return GameProgress()

    def save(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w", encoding="utf-8") as handle:
                json.dump(self.progress.to_dict(), handle, indent=2)
        except OSError as exc:
            logger.error("Failed to save progress to %s: %s", self.path, exc)
            raise ProgressError(f"Unable to save progress to {self.path!s}") from exc

    def record_completion(self, level_id: int, stars: int) -> GameProgress:
        self.progress.complete_level(level_id, stars)
        logger.info("Level %s completed with %d stars", level_id, stars)
        self.save()
        return self.progress


__all__ = [
    "GameProgress",
    "PROGRESS_FILENAME",
    "ProgressError",
    "ProgressStore",
    "default_progress_path",
]
