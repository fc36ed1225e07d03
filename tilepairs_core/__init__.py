"""
Tilepairs core Python package.

Pure-logic building blocks for the 12x10 tile-matching board and its
alternating-turn scorer. game.py re-exports the public surface.
Modules:
- tiles.py: Tile, VACANT, glyphs
- board.py: Board, Pair, rendering
- deal.py: shuffled and sparse deals
- moves.py: freedom rule, pair enumeration, pair removal
- hashkey.py: canonical encodings and position keys
- search.py: minimax scorer, transposition table, fork-join root
- db.py / solver.py: SQLite cache of solved positions
"""
