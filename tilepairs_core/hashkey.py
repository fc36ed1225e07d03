from __future__ import annotations

from typing import Optional, Tuple

from .board import Board, SIZE
from .tiles import Tile, VACANT

_MASK64 = 0xFFFFFFFFFFFFFFFF


def board_encoding(board: Board) -> bytes:
    """Canonical 120-byte encoding: one byte per slot, 0 for vacant, else suit * 10 + rank."""
    return bytes(0 if t.is_vacant else t.suit * 10 + t.rank for t in board.slots)


def board_from_encoding(data: bytes) -> Board:
    if len(data) != SIZE:
        raise ValueError(f'Encoding must be {SIZE} bytes')
    return Board([VACANT if v == 0 else Tile((v - 1) % 10 + 1, (v - 1) // 10) for v in data])


def _pair64(left: int, right: int) -> int:
    if left >= right:
        return (left * left) + left + right
    else:
        return left + (right * right)


def _mix64(value: int) -> int:
    value = (value + 0x9e3779b97f4a7c15) & _MASK64
    value ^= (value >> 30)
    value = (value * 0xbf58476d1ce4e5b9) & _MASK64
    value ^= (value >> 27)
    value = (value * 0x94d049bb133111eb) & _MASK64
    value ^= (value >> 31)
    return value & _MASK64


def _hash64(words: Tuple[int, ...]) -> int:
    h = 0
    for w in words:
        h = _mix64(_pair64(h, w & _MASK64) & _MASK64)
    return h


def _words(data: bytes) -> Tuple[int, ...]:
    # 8 slot bytes per word
    return tuple(int.from_bytes(data[i:i + 8], 'little') for i in range(0, len(data), 8))


def board_hash(board: Board) -> int:
    """64-bit hash of the board contents (Szudzik pairing folded through SplitMix64)."""
    return _hash64(_words(board_encoding(board)))


def position_key(board: Board, turn: int, max_depth: Optional[int] = None) -> str:
    """
    Compact key for a search root: board hash, turn parity and depth bound.
    Format: '<16 hex digits>|<parity>|<depth or *>'.
    """
    depth = '*' if max_depth is None else str(int(max_depth))
    return f"{board_hash(board):016x}|{turn % 2}|{depth}"
