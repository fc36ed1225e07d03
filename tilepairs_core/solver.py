from __future__ import annotations

import logging
import sqlite3
from typing import Callable, Optional, Tuple

from .board import Board, Pair
from .db import db_lookup, db_store
from .hashkey import position_key
from .search import Observer, SearchResult, SearchStats, solve

logger = logging.getLogger(__name__)

Lookup = Callable[[str, str], Optional[Tuple[int, Optional[Pair]]]]
Store = Callable[[str, Board, int, Optional[int], int, Optional[Pair]], str]


def solve_with_cache(
    board: Board,
    db_path: str,
    accumulated: int = 0,
    turn: int = 0,
    *,
    max_depth: Optional[int] = None,
    workers: int = 1,
    observer: Optional[Observer] = None,
    lookup: Optional[Lookup] = None,
    store: Optional[Store] = None,
) -> SearchResult:
    """
    Solves a position, serving the root value from the SQLite cache when it was
    solved before under the same depth bound. The cache holds gains, so the
    result is valid for any accumulated score.
    A cache hit returns no per-move breakdown.
    """
    lookup = lookup or db_lookup
    store = store or db_store
    key = position_key(board, turn, max_depth)
    try:
        hit = lookup(db_path, key)
    except (sqlite3.Error, OSError) as e:
        logger.warning('cache lookup failed for %s: %s', key, e)
        hit = None
    if hit is not None:
        gain, best = hit
        logger.debug('cache hit %s: gain=%d best=%s', key, gain, best)
        return SearchResult(score=accumulated + gain, best_pair=best, moves=[], stats=SearchStats())

    res = solve(board, accumulated, turn, max_depth=max_depth, workers=workers, observer=observer)
    try:
        store(db_path, board, turn, max_depth, res.score - accumulated, res.best_pair)
    except (sqlite3.Error, OSError) as e:
        logger.warning('cache store failed for %s: %s', key, e)
    return res


def engine_pick(
    board: Board,
    turn: int,
    max_depth: Optional[int] = None,
    workers: int = 1,
) -> Optional[Pair]:
    """The pair the side to move should remove, or None when no pair is left."""
    return solve(board, 0, turn, max_depth=max_depth, workers=workers).best_pair
