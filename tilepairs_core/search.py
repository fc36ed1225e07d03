from __future__ import annotations

import logging
import threading
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from .board import Board, Pair
from .hashkey import board_encoding
from .moves import apply_pair, enumerate_pairs

logger = logging.getLogger(__name__)

Observer = Callable[['SearchStats'], None]
CacheKey = Tuple[bytes, int, Optional[int]]

DEFAULT_REPORT_EVERY = 10000


@dataclass
class SearchStats:
    """Counters for one search; merged across workers."""
    nodes: int = 0
    terminals: int = 0
    cache_hits: int = 0
    max_depth_reached: int = 0

    def merge(self, other: 'SearchStats') -> None:
        self.nodes += other.nodes
        self.terminals += other.terminals
        self.cache_hits += other.cache_hits
        self.max_depth_reached = max(self.max_depth_reached, other.max_depth_reached)


@dataclass(frozen=True)
class MoveValue:
    pair: Pair
    value: int  # rank of the removed tiles
    score: int  # node value reached by playing this pair


@dataclass
class SearchResult:
    score: int
    best_pair: Optional[Pair]
    moves: List[MoveValue] = field(default_factory=list)
    stats: SearchStats = field(default_factory=SearchStats)


def is_maximizing(turn: int) -> bool:
    return turn % 2 == 0


class TranspositionTable:
    """
    Lock-striped map from (board encoding, turn parity, remaining depth) to the
    gain below that node. Safe to share between threads.
    """

    def __init__(self, shards: int = 16) -> None:
        self._shards: List[Dict[CacheKey, int]] = [{} for _ in range(shards)]
        self._locks = [threading.Lock() for _ in range(shards)]

    def _shard(self, key: CacheKey) -> int:
        return hash(key) % len(self._shards)

    def get(self, key: CacheKey) -> Optional[int]:
        i = self._shard(key)
        with self._locks[i]:
            return self._shards[i].get(key)

    def put(self, key: CacheKey, gain: int) -> None:
        i = self._shard(key)
        with self._locks[i]:
            self._shards[i][key] = gain

    def __len__(self) -> int:
        total = 0
        for lock, shard in zip(self._locks, self._shards):
            with lock:
                total += len(shard)
        return total


class _Search:
    """One sequential traversal. Values are computed as gains relative to the node's accumulated score."""

    def __init__(
        self,
        max_depth: Optional[int],
        table: Optional[TranspositionTable],
        observer: Optional[Observer] = None,
        report_every: int = DEFAULT_REPORT_EVERY,
    ) -> None:
        self.max_depth = max_depth
        self.table = table
        self.observer = observer
        self.report_every = report_every
        self.stats = SearchStats()

    def _visit(self, depth: int) -> None:
        self.stats.nodes += 1
        if depth > self.stats.max_depth_reached:
            self.stats.max_depth_reached = depth
        if self.observer is not None and self.stats.nodes % self.report_every == 0:
            self.observer(self.stats)

    def gain(self, board: Board, turn: int, depth: int) -> int:
        self._visit(depth)
        if self.max_depth is not None and depth >= self.max_depth:
            self.stats.terminals += 1
            return 0
        pairs = enumerate_pairs(board)
        if not pairs:
            self.stats.terminals += 1
            return 0

        key: Optional[CacheKey] = None
        if self.table is not None:
            remaining = None if self.max_depth is None else self.max_depth - depth
            key = (board_encoding(board), turn % 2, remaining)
            cached = self.table.get(key)
            if cached is not None:
                self.stats.cache_hits += 1
                return cached

        maximizing = is_maximizing(turn)
        gains: List[int] = []
        for a, b in pairs:
            child, value = apply_pair(board, a, b)
            g = self.gain(child, turn + 1, depth + 1)
            gains.append(g + value if maximizing else g)
        best = max(gains) if maximizing else min(gains)

        if key is not None:
            self.table.put(key, best)
        return best


def _child_gain(
    child: Board,
    turn: int,
    max_depth: Optional[int],
    use_cache: bool,
) -> Tuple[int, SearchStats]:
    """Worker entry point: evaluates one root child at depth 1."""
    table = TranspositionTable() if use_cache else None
    search = _Search(max_depth, table)
    g = search.gain(child, turn, 1)
    return g, search.stats


def _pick(moves: List[MoveValue], maximizing: bool) -> MoveValue:
    best = moves[0]
    for mv in moves[1:]:
        if (mv.score > best.score) if maximizing else (mv.score < best.score):
            best = mv
    return best


def solve(
    board: Board,
    accumulated: int = 0,
    turn: int = 0,
    *,
    max_depth: Optional[int] = None,
    workers: int = 1,
    use_cache: bool = True,
    observer: Optional[Observer] = None,
    report_every: int = DEFAULT_REPORT_EVERY,
) -> SearchResult:
    """
    Computes the value of (board, accumulated, turn) under alternating optimal
    play. Even turns maximize and bank the rank of each removed pair; odd turns
    minimize and bank nothing. max_depth bounds the plies explored below this
    node (None explores to exhaustion).

    With workers > 1 the root's children are evaluated in a process pool and
    reduced with max/min once all of them finish.
    """
    maximizing = is_maximizing(turn)
    pairs = enumerate_pairs(board)
    stats = SearchStats(nodes=1)
    if not pairs or (max_depth is not None and max_depth <= 0):
        stats.terminals = 1
        if observer is not None:
            observer(stats)
        return SearchResult(score=accumulated, best_pair=None, moves=[], stats=stats)

    logger.debug('solve: %d tiles, %d root pairs, turn=%d, max_depth=%s, workers=%d',
                 board.tile_count(), len(pairs), turn, max_depth, workers)

    children = [(pair,) + apply_pair(board, *pair) for pair in pairs]
    gains: List[int] = [0] * len(children)
    if workers > 1 and len(children) > 1:
        # Workers cannot call back into this process; the observer sees the
        # merged stats as each root child finishes.
        with ProcessPoolExecutor(max_workers=workers) as pool:
            futures = {
                pool.submit(_child_gain, child, turn + 1, max_depth, use_cache): i
                for i, (_, child, _) in enumerate(children)
            }
            for fut in as_completed(futures):
                g, child_stats = fut.result()
                gains[futures[fut]] = g
                stats.merge(child_stats)
                if observer is not None:
                    observer(stats)
    else:
        gains = []
        table = TranspositionTable() if use_cache else None
        search = _Search(max_depth, table, observer, report_every)
        for _, child, _ in children:
            gains.append(search.gain(child, turn + 1, 1))
        stats.merge(search.stats)

    moves: List[MoveValue] = []
    for (pair, _, value), g in zip(children, gains):
        total = accumulated + g + (value if maximizing else 0)
        moves.append(MoveValue(pair=pair, value=value, score=total))
    best = _pick(moves, maximizing)
    if observer is not None:
        observer(stats)
    logger.debug('solve: score=%d best=%s nodes=%d cache_hits=%d',
                 best.score, best.pair, stats.nodes, stats.cache_hits)
    return SearchResult(score=best.score, best_pair=best.pair, moves=moves, stats=stats)


def score(
    board: Board,
    accumulated: int = 0,
    turn: int = 0,
    *,
    max_depth: Optional[int] = None,
    workers: int = 1,
    use_cache: bool = True,
    observer: Optional[Observer] = None,
) -> int:
    """Best achievable cumulative score from this node; see solve()."""
    return solve(
        board,
        accumulated,
        turn,
        max_depth=max_depth,
        workers=workers,
        use_cache=use_cache,
        observer=observer,
    ).score
