"""High-score persistence with SQLite."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path

from noteinvaders.models import HighScore

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path.home() / ".noteinvaders" / "scores.db"


class HighScoreStore:
    """One best score per mode key, with the wave it was reached on."""

    def __init__(self, db_path: Path = DEFAULT_DB_PATH) -> None:
        db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn = sqlite3.connect(str(db_path))
        self._init_db()

    def _init_db(self) -> None:
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS high_scores (
                mode_key TEXT PRIMARY KEY,
                score INTEGER NOT NULL,
                wave INTEGER NOT NULL DEFAULT 0,
                achieved_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.commit()

    def load(self, key: str) -> HighScore:
        row = self.conn.execute(
            "SELECT score, wave FROM high_scores WHERE mode_key = ?", (key,)
        ).fetchone()
        if row is None:
            return HighScore()
        return HighScore(score=row[0], wave=row[1])

    def save(self, score: int, key: str, wave: int) -> bool:
        """Store ``score`` if it beats the current record. Returns whether it did."""
        current = self.load(key)
        if score <= current.score:
            return False
        self.conn.execute(
            """INSERT INTO high_scores (mode_key, score, wave)
               VALUES (?, ?, ?)
               ON CONFLICT(mode_key) DO UPDATE SET
                   score = excluded.score,
                   wave = excluded.wave,
                   achieved_at = CURRENT_TIMESTAMP""",
            (key, score, wave),
        )
        self.conn.commit()
        logger.debug("Saved high score %d (wave %d) for %s", score, wave, key)
        return True

    def all_scores(self) -> dict[str, HighScore]:
        cur = self.conn.execute("SELECT mode_key, score, wave FROM high_scores ORDER BY mode_key")
        return {key: HighScore(score=score, wave=wave) for key, score, wave in cur.fetchall()}

    def close(self) -> None:
        self.conn.close()
