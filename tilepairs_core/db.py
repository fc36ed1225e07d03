from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Optional, Tuple

from .board import Board, Pair
from .hashkey import position_key

logger = logging.getLogger(__name__)


def _ensure_db_dir(db_path: str) -> None:
    """Ensures the directory for the SQLite DB exists before connecting."""
    directory = os.path.dirname(db_path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory, exist_ok=True)


def _resolve_db_path(db_path: str) -> str:
    """Resolves a potentially unwritable DB path to a writable one, creating the directory if needed."""
    try:
        _ensure_db_dir(db_path)
        return db_path
    except OSError as e:
        logger.warning('DB directory for %s is not usable (%s); trying fallbacks', db_path, e)
    candidates = [
        os.getenv('TILEPAIRS_DB_DIR'),
        os.path.join(os.getcwd(), 'data'),
        '/tmp',
    ]
    base = os.path.basename(db_path) or 'tilepairs.db'
    for d in candidates:
        if not d:
            continue
        try:
            os.makedirs(d, exist_ok=True)
            return os.path.join(d, base)
        except OSError:
            continue
    # Last resort: current working directory
    return base


def _pair_to_str(p: Pair) -> str:
    return f"{p[0]},{p[1]}"


def _pair_from_str(s: str) -> Pair:
    a_s, b_s = s.split(',')
    return int(a_s), int(b_s)


def _ensure_db(conn: sqlite3.Connection) -> None:
    """Ensures the table of solved positions exists."""
    conn.execute(
        """
        CREATE TABLE IF NOT EXISTS solved (
            key TEXT PRIMARY KEY,
            turn INTEGER NOT NULL,
            depth INTEGER,
            tiles INTEGER NOT NULL,
            gain INTEGER NOT NULL,
            best_pair TEXT,
            solved_at TEXT NOT NULL
        )
        """
    )
    conn.commit()


def db_lookup(db_path: str, key: str) -> Optional[Tuple[int, Optional[Pair]]]:
    """Looks up a solved position; returns (gain, best_pair) or None."""
    resolved = _resolve_db_path(db_path)
    conn = sqlite3.connect(resolved)
    try:
        _ensure_db(conn)
        row = conn.execute("SELECT gain, best_pair FROM solved WHERE key = ?", (key,)).fetchone()
        if not row:
            return None
        gain, best_str = row
        best = _pair_from_str(best_str) if best_str else None
        return int(gain), best
    finally:
        conn.close()


def db_store(
    db_path: str,
    board: Board,
    turn: int,
    max_depth: Optional[int],
    gain: int,
    best_pair: Optional[Pair],
) -> str:
    """Stores the gain of a solved position under its position key and returns the key."""
    resolved = _resolve_db_path(db_path)
    conn = sqlite3.connect(resolved)
    try:
        _ensure_db(conn)
        key = position_key(board, turn, max_depth)
        conn.execute(
            """
            INSERT OR REPLACE INTO solved
            (key, turn, depth, tiles, gain, best_pair, solved_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                key,
                turn % 2,
                max_depth,
                board.tile_count(),
                int(gain),
                _pair_to_str(best_pair) if best_pair is not None else None,
                datetime.now(timezone.utc).isoformat(timespec='seconds'),
            ),
        )
        conn.commit()
        return key
    finally:
        conn.close()


def db_count(db_path: str) -> int:
    resolved = _resolve_db_path(db_path)
    conn = sqlite3.connect(resolved)
    try:
        _ensure_db(conn)
        return int(conn.execute("SELECT COUNT(*) FROM solved").fetchone()[0])
    finally:
        conn.close()
