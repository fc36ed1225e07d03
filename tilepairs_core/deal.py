from __future__ import annotations

import random
from collections import Counter
from typing import List, Optional

from .board import Board, SIZE
from .tiles import COPIES, Tile, all_identities


def full_tile_set() -> List[Tile]:
    """The canonical 120-tile multiset: four copies of each of the 30 identities."""
    tiles: List[Tile] = []
    for identity in all_identities():
        tiles.extend([identity] * COPIES)
    return tiles


def deal_board(seed: Optional[int] = None) -> Board:
    """Shuffles the full tile set uniformly across all 120 slots."""
    rng = random.Random(seed)
    tiles = full_tile_set()
    rng.shuffle(tiles)
    return Board(tiles)


def deal_partial(pairs: int, seed: Optional[int] = None) -> Board:
    """
    Deals a sparse board of `pairs` matching pairs on random slots.
    Identities are drawn from the full set, so no identity exceeds four copies.
    """
    if not 0 <= pairs <= SIZE // 2:
        raise ValueError(f'pairs must be between 0 and {SIZE // 2}')
    rng = random.Random(seed)
    # Two matching pairs per identity in the full set.
    pool = [identity for identity in all_identities() for _ in range(COPIES // 2)]
    chosen = rng.sample(pool, pairs)
    positions = rng.sample(range(SIZE), pairs * 2)
    placed = []
    for i, identity in enumerate(chosen):
        placed.append((positions[2 * i], identity))
        placed.append((positions[2 * i + 1], identity))
    return Board.from_tiles(placed)


def check_full_set(board: Board) -> None:
    """Raises ValueError unless the board holds exactly the canonical 120-tile multiset."""
    counts = Counter(board.slots)
    expected = Counter(full_tile_set())
    if counts != expected:
        missing = expected - counts
        extra = counts - expected
        raise ValueError(f'Board is not a full tile set (missing={dict(missing)}, extra={dict(extra)})')
