from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from .tiles import Tile, VACANT

ROWS = 12
COLS = 10
SIZE = ROWS * COLS

Coord = Tuple[int, int]
Pair = Tuple[int, int]


@dataclass
class Board:
    """The 120-slot playing field, row-major. Only pair removal changes it; copy() gives an independent board."""
    slots: List[Tile] = field(default_factory=lambda: [VACANT] * SIZE)

    def __post_init__(self) -> None:
        self.slots = [t if isinstance(t, Tile) else Tile(*t) for t in self.slots]
        if len(self.slots) != SIZE:
            raise ValueError(f'Board needs exactly {SIZE} slots, got {len(self.slots)}')
        for pos, tile in enumerate(self.slots):
            if not tile.is_valid():
                raise ValueError(f'Invalid tile {tile!r} at position {pos}')

    @classmethod
    def from_tiles(cls, placed: Iterable[Tuple[int, Tile]]) -> 'Board':
        """Builds an otherwise empty board from (position, tile) pairs."""
        slots: List[Tile] = [VACANT] * SIZE
        for pos, tile in placed:
            if not 0 <= pos < SIZE:
                raise ValueError(f'Position {pos} is off the board')
            slots[pos] = tile
        return cls(slots)

    def copy(self) -> 'Board':
        return Board(list(self.slots))

    @staticmethod
    def index(r: int, c: int) -> int:
        """Calculates the 1D index for a given row and column."""
        return r * COLS + c

    @staticmethod
    def coord(pos: int) -> Coord:
        return pos // COLS, pos % COLS

    def at(self, pos: int) -> Tile:
        return self.slots[pos]

    def occupied(self) -> List[int]:
        """Positions holding a real tile, ascending."""
        return [pos for pos, tile in enumerate(self.slots) if not tile.is_vacant]

    def tile_count(self) -> int:
        return len(self.occupied())

    def is_empty(self) -> bool:
        return all(tile.is_vacant for tile in self.slots)

    def pretty(self, show_index: bool = False, marked: Sequence[int] = ()) -> str:
        """Renders the board as 12 lines of 10 glyphs. Marked positions are bracketed."""
        lines: List[str] = []
        for r in range(ROWS):
            row: List[str] = []
            for c in range(COLS):
                pos = self.index(r, c)
                glyph = self.slots[pos].glyph()
                row.append(f"[{glyph}]" if pos in marked else f" {glyph} ")
            prefix = f"{r * COLS:3d} " if show_index else ''
            lines.append(prefix + ''.join(row).rstrip())
        return '\n'.join(lines)

    def labels(self) -> str:
        """ASCII rendering using tile labels, for terminals without mahjong glyphs."""
        return '\n'.join(
            ' '.join(self.slots[self.index(r, c)].label() for c in range(COLS))
            for r in range(ROWS)
        )
