from __future__ import annotations

from dataclasses import dataclass
from typing import List

RANKS = 10
SUITS = 3
COPIES = 4

# Characters, bamboos, circles; rank 10 of each suit maps to an honour tile.
_GLYPHS: List[List[str]] = [
    ['🀇', '🀈', '🀉', '🀊', '🀋', '🀌', '🀍', '🀎', '🀏', '🀩'],
    ['🀐', '🀑', '🀒', '🀓', '🀔', '🀕', '🀖', '🀗', '🀘', '🀅'],
    ['🀙', '🀚', '🀛', '🀜', '🀝', '🀞', '🀟', '🀠', '🀡', '🀆'],
]
_SUIT_LETTERS = 'cbd'
BLANK = ' '


@dataclass(frozen=True, order=True)
class Tile:
    """A tile identity: rank 1..10 and suit 0..2. Tile(0, 0) is the vacant slot."""
    rank: int
    suit: int

    @property
    def is_vacant(self) -> bool:
        return self.rank == 0 and self.suit == 0

    def is_valid(self) -> bool:
        """True for VACANT or a real (rank, suit) identity."""
        if self.is_vacant:
            return True
        return 1 <= self.rank <= RANKS and 0 <= self.suit < SUITS

    def glyph(self) -> str:
        if self.is_vacant:
            return BLANK
        return _GLYPHS[self.suit][self.rank - 1]

    def label(self) -> str:
        """Short ASCII label such as '7b'; '..' for a vacant slot."""
        if self.is_vacant:
            return '..'
        return f"{self.rank}{_SUIT_LETTERS[self.suit]}"


VACANT = Tile(0, 0)


def all_identities() -> List[Tile]:
    """The 30 distinct real identities, ordered by rank then suit."""
    return [Tile(rank, suit) for rank in range(1, RANKS + 1) for suit in range(SUITS)]
