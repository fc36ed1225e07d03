from __future__ import annotations

# Facade module that re-exports the tilepairs core.
# Used by the Flask app and the tests; single-responsibility modules live under tilepairs_core/*.

try:
    from .tilepairs_core.tiles import Tile, VACANT, all_identities  # type: ignore
    from .tilepairs_core.board import Board, Coord, Pair, ROWS, COLS, SIZE  # type: ignore
    from .tilepairs_core.deal import full_tile_set, deal_board, deal_partial, check_full_set  # type: ignore
    from .tilepairs_core.moves import (  # type: ignore
        InvalidPair,
        is_free,
        free_positions,
        free_tiles,
        group_free_by_tile,
        enumerate_pairs,
        remove_pair,
        apply_pair,
        parse_pair,
    )
    from .tilepairs_core.hashkey import board_encoding, board_from_encoding, board_hash, position_key  # type: ignore
    from .tilepairs_core.search import (  # type: ignore
        MoveValue,
        SearchResult,
        SearchStats,
        TranspositionTable,
        score,
        solve,
    )
    from .tilepairs_core.db import db_lookup, db_store, db_count  # type: ignore
    from .tilepairs_core.solver import solve_with_cache, engine_pick  # type: ignore
except ImportError:
    from tilepairs_core.tiles import Tile, VACANT, all_identities  # type: ignore
    from tilepairs_core.board import Board, Coord, Pair, ROWS, COLS, SIZE  # type: ignore
    from tilepairs_core.deal import full_tile_set, deal_board, deal_partial, check_full_set  # type: ignore
    from tilepairs_core.moves import (  # type: ignore
        InvalidPair,
        is_free,
        free_positions,
        free_tiles,
        group_free_by_tile,
        enumerate_pairs,
        remove_pair,
        apply_pair,
        parse_pair,
    )
    from tilepairs_core.hashkey import board_encoding, board_from_encoding, board_hash, position_key  # type: ignore
    from tilepairs_core.search import (  # type: ignore
        MoveValue,
        SearchResult,
        SearchStats,
        TranspositionTable,
        score,
        solve,
    )
    from tilepairs_core.db import db_lookup, db_store, db_count  # type: ignore
    from tilepairs_core.solver import solve_with_cache, engine_pick  # type: ignore


def main() -> None:
    # CLI driver delegated to tilepairs_core.cli
    try:
        from .tilepairs_core.cli import main as _main  # type: ignore
    except ImportError:
        from tilepairs_core.cli import main as _main  # type: ignore
    _main()


if __name__ == '__main__':
    main()
