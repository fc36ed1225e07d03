from __future__ import annotations

from itertools import combinations
from typing import Dict, List, Tuple

from .board import Board, Pair, ROWS, COLS, SIZE
from .tiles import Tile, VACANT

# up, down, left, right
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


class InvalidPair(ValueError):
    """Raised when two positions cannot be removed together."""


def _line_clear(board: Board, r: int, c: int, dr: int, dc: int) -> bool:
    """True when every slot from (r, c), exclusive, to the edge in direction (dr, dc) is vacant."""
    r += dr
    c += dc
    while 0 <= r < ROWS and 0 <= c < COLS:
        if not board.slots[r * COLS + c].is_vacant:
            return False
        r += dr
        c += dc
    return True


def is_free(board: Board, pos: int) -> bool:
    """
    A tile is free when it has a straight, unobstructed line to the board edge
    in at least one of the four axis directions. Edge tiles are always free.
    """
    if board.slots[pos].is_vacant:
        return False
    r, c = Board.coord(pos)
    return any(_line_clear(board, r, c, dr, dc) for dr, dc in DIRECTIONS)


def free_positions(board: Board) -> List[int]:
    return [pos for pos in board.occupied() if is_free(board, pos)]


def free_tiles(board: Board) -> List[Tile]:
    return [board.slots[pos] for pos in free_positions(board)]


def group_free_by_tile(board: Board) -> Dict[Tile, List[int]]:
    """Free positions grouped by identity; positions ascending within a group."""
    groups: Dict[Tile, List[int]] = {}
    for pos in free_positions(board):
        groups.setdefault(board.slots[pos], []).append(pos)
    return groups


def enumerate_pairs(board: Board) -> List[Pair]:
    """
    All currently matchable pairs: every 2-combination of free positions that
    share an identity. Ordered by identity, then by position.
    """
    pairs: List[Pair] = []
    groups = group_free_by_tile(board)
    for tile in sorted(groups):
        pairs.extend(combinations(groups[tile], 2))
    return pairs


def remove_pair(board: Board, a: int, b: int) -> int:
    """
    Removes the tiles at a and b in place and returns their rank.
    Raises InvalidPair, leaving the board untouched, unless a and b are distinct
    on-board positions holding the same real tile.
    """
    if not (0 <= a < SIZE and 0 <= b < SIZE):
        raise InvalidPair(f'Position out of range: {a}, {b}')
    if a == b:
        raise InvalidPair(f'A tile cannot pair with itself: {a}')
    first, second = board.slots[a], board.slots[b]
    if first.is_vacant or second.is_vacant:
        raise InvalidPair(f'Vacant slot in pair ({a}, {b})')
    if first != second:
        raise InvalidPair(f'Tiles differ: {first.label()} at {a}, {second.label()} at {b}')
    board.slots[a] = VACANT
    board.slots[b] = VACANT
    return first.rank


def apply_pair(board: Board, a: int, b: int) -> Tuple[Board, int]:
    """Removes a pair from a copy of the board and returns (child, value)."""
    child = board.copy()
    value = remove_pair(child, a, b)
    return child, value


def parse_pair(text: str) -> Pair:
    """Parses 'a b' or 'a,b' into a position pair."""
    sep = ',' if ',' in text else None
    parts = [t for t in text.strip().split(sep) if t.strip() != '']
    if len(parts) != 2:
        raise ValueError(f'Expected two positions, got {text!r}')
    a, b = int(parts[0]), int(parts[1])
    return (a, b) if a <= b else (b, a)
