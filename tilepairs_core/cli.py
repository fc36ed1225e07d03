from __future__ import annotations

import argparse
from typing import Callable, List, Optional

from .board import Board
from .config import PLAY_DEPTH, configure_logging, load_settings
from .deal import deal_board, deal_partial
from .moves import enumerate_pairs, free_positions, parse_pair, remove_pair
from .search import SearchStats, solve
from .solver import engine_pick, solve_with_cache


def run_session(
    board: Board,
    *,
    max_depth: Optional[int] = PLAY_DEPTH,
    workers: int = 1,
    input_fn: Callable[[str], str] = input,
    output_fn: Callable[..., None] = print,
) -> int:
    """
    Interactive game on `board`, which is mutated in place. The human maximizes
    and banks the rank of each pair they remove; the engine answers with the
    pair a bounded search picks for the minimizing side. Ends when no pair is
    left, on 'q', or at end of input. Returns the human's score.
    """
    total = 0
    turn = 0
    while True:
        pairs = enumerate_pairs(board)
        if not pairs:
            output_fn('No pairs left.')
            break
        if turn % 2 == 0:
            output_fn(board.pretty(show_index=True))
            output_fn('Pairs:', pairs)
            try:
                text = input_fn('Enter two positions as "a b" (q to quit): ').strip()
            except EOFError:
                break
            if text.lower() in ('q', 'quit', 'exit'):
                break
            try:
                move = parse_pair(text)
            except ValueError:
                output_fn('Could not parse. Try again.')
                continue
            if move not in pairs:
                output_fn('Not a free matching pair. Try again.')
                continue
            total += remove_pair(board, *move)
        else:
            move = engine_pick(board, turn, max_depth=max_depth, workers=workers)
            if move is None:
                break
            remove_pair(board, *move)
            output_fn(f'Engine removes {move}')
        turn += 1
    output_fn(f'Final score: {total}')
    return total


def _print_progress(stats: SearchStats) -> None:
    print(f'... {stats.nodes} nodes, {stats.cache_hits} cache hits')


def main(argv: Optional[List[str]] = None) -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(description='Tile-pair board and adversarial scorer')
    parser.add_argument('--seed', type=int, default=None, help='RNG seed for the deal')
    parser.add_argument('--pairs', type=int, default=None, help='Deal a sparse board of N matching pairs')
    parser.add_argument('--depth', type=int, default=settings.max_depth, help='Search depth bound in plies')
    parser.add_argument('--workers', type=int, default=settings.workers, help='Processes for the root fan-out')
    parser.add_argument('--db', default=settings.db_path, help='SQLite cache of solved positions')
    parser.add_argument('--no-cache', action='store_true', help='Skip the SQLite cache')
    parser.add_argument('--play', action='store_true', help='Play against the engine')
    parser.add_argument('--progress', action='store_true', help='Print search progress')
    parser.add_argument('--debug', action='store_true', default=settings.debug, help='Debug logging')
    args = parser.parse_args(argv)

    configure_logging(args.debug)

    if args.pairs is not None:
        board = deal_partial(args.pairs, seed=args.seed)
    else:
        board = deal_board(seed=args.seed)

    if args.play:
        depth = args.depth if args.depth is not None else PLAY_DEPTH
        run_session(board, max_depth=depth, workers=args.workers)
        return

    depth = args.depth
    if depth is None and args.pairs is None:
        # A full deal is far too large to search to exhaustion.
        depth = PLAY_DEPTH

    print('Initial board:')
    print(board.pretty(show_index=True))
    print('Free positions:', free_positions(board))
    print('Pairs:', enumerate_pairs(board))
    observer = _print_progress if args.progress else None
    if args.no_cache:
        res = solve(board, max_depth=depth, workers=args.workers, observer=observer)
    else:
        res = solve_with_cache(board, args.db, max_depth=depth, workers=args.workers, observer=observer)
    print(f'\nBest achievable score: {res.score}')
    if res.best_pair is not None:
        print('Suggested pair:', res.best_pair)
    print(f'Depth bound: {"none" if depth is None else depth}')
    print(f'Searched {res.stats.nodes} nodes ({res.stats.cache_hits} cache hits)')


if __name__ == '__main__':
    main()
