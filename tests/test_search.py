import unittest

from game import (
    Board,
    SearchStats,
    Tile,
    TranspositionTable,
    deal_board,
    enumerate_pairs,
    score,
    solve,
)


def make_board(placed):
    return Board.from_tiles((pos, Tile(*rs)) for pos, rs in placed.items())


def three_pairs():
    # ranks 5, 3 and 1, all on the top edge
    return make_board({0: (5, 0), 1: (5, 0), 2: (3, 0), 3: (3, 0), 4: (1, 0), 5: (1, 0)})


class TestSearchScore(unittest.TestCase):
    def test_given_empty_board_when_scoring_then_accumulated_returned(self):
        self.assertEqual(score(Board(), 0, 0), 0)
        self.assertEqual(score(Board(), 17, 0), 17)
        self.assertEqual(score(Board(), 17, 1), 17)
        res = solve(Board(), 4)
        self.assertIsNone(res.best_pair)
        self.assertEqual(res.moves, [])

    def test_given_single_pair_when_maximizing_then_rank_banked(self):
        board = make_board({0: (7, 1), 1: (7, 1)})
        self.assertEqual(score(board, 0, 0), 7)
        # The minimizing side removes it without banking anything.
        self.assertEqual(score(board, 2, 1), 2)

    def test_given_three_pairs_when_maximizer_moves_first_then_minimax_value(self):
        board = three_pairs()
        res = solve(board)
        # Take 5; the minimizer removes 3; the maximizer takes 1.
        self.assertEqual(res.score, 6)
        self.assertEqual(res.best_pair, (0, 1))
        by_pair = {m.pair: m.score for m in res.moves}
        self.assertEqual(by_pair, {(4, 5): 4, (2, 3): 4, (0, 1): 6})
        self.assertEqual(solve(board, 10).score, 16)

    def test_given_three_pairs_when_minimizer_moves_first_then_minimax_value(self):
        res = solve(three_pairs(), 0, 1)
        # Remove the 5; the maximizer can only take 3.
        self.assertEqual(res.score, 3)
        self.assertEqual(res.best_pair, (0, 1))

    def test_given_search_when_finished_then_parent_board_unchanged(self):
        board = three_pairs()
        before = board.copy()
        solve(board)
        self.assertEqual(board, before)

    def test_given_depth_bound_when_scoring_then_search_stops_early(self):
        board = three_pairs()
        self.assertEqual(score(board, 0, 0, max_depth=0), 0)
        self.assertEqual(score(board, 0, 0, max_depth=1), 5)
        self.assertEqual(score(board, 0, 0, max_depth=2), 5)
        self.assertEqual(score(board, 0, 0, max_depth=3), 6)
        self.assertEqual(score(board, 0, 0, max_depth=None), 6)

    def test_given_full_deal_when_single_ply_then_best_immediate_rank(self):
        board = deal_board(seed=4)
        res = solve(board, max_depth=1)
        best_rank = max(board.at(a).rank for a, _ in enumerate_pairs(board))
        self.assertEqual(res.score, best_rank)
        self.assertEqual(len(res.moves), len(enumerate_pairs(board)))

    def test_given_transpositions_when_cache_enabled_then_same_score_with_hits(self):
        board = three_pairs()
        cached = solve(board, use_cache=True)
        plain = solve(board, use_cache=False)
        self.assertEqual(cached.score, plain.score)
        self.assertEqual(plain.stats.cache_hits, 0)
        self.assertGreater(cached.stats.cache_hits, 0)
        self.assertLess(cached.stats.nodes, plain.stats.nodes)

    def test_given_process_pool_when_solving_then_matches_sequential(self):
        board = make_board({
            0: (5, 0), 1: (5, 0), 2: (3, 0), 3: (3, 0),
            4: (1, 0), 5: (1, 0), 6: (2, 1), 7: (2, 1),
        })
        seq = solve(board)
        par = solve(board, workers=2)
        self.assertEqual(par.score, seq.score)
        self.assertEqual(par.best_pair, seq.best_pair)
        self.assertEqual([m.score for m in par.moves], [m.score for m in seq.moves])
        self.assertGreater(par.stats.nodes, 1)

    def test_given_observer_when_solving_then_receives_final_stats(self):
        seen = []
        res = solve(three_pairs(), observer=lambda s: seen.append(s.nodes), report_every=1)
        self.assertGreater(len(seen), 1)
        self.assertEqual(seen[-1], res.stats.nodes)
        self.assertGreaterEqual(res.stats.max_depth_reached, 3)

    def test_given_process_pool_when_solving_then_observer_sees_each_root_child(self):
        board = three_pairs()
        seen = []
        res = solve(board, workers=2, observer=lambda s: seen.append(s.nodes))
        # once per root child, then once at the end
        self.assertEqual(len(seen), len(enumerate_pairs(board)) + 1)
        self.assertEqual(seen, sorted(seen))
        self.assertEqual(seen[-1], res.stats.nodes)


class TestTranspositionTable(unittest.TestCase):
    def test_given_entries_when_stored_then_retrievable_across_shards(self):
        table = TranspositionTable(shards=4)
        for i in range(20):
            table.put((bytes([i]), i % 2, None), i * 3)
        self.assertEqual(len(table), 20)
        self.assertEqual(table.get((bytes([7]), 1, None)), 21)
        self.assertIsNone(table.get((bytes([7]), 0, None)))

    def test_given_stats_when_merged_then_summed_and_max_depth_kept(self):
        a = SearchStats(nodes=3, terminals=1, cache_hits=0, max_depth_reached=2)
        a.merge(SearchStats(nodes=4, terminals=2, cache_hits=1, max_depth_reached=5))
        self.assertEqual((a.nodes, a.terminals, a.cache_hits, a.max_depth_reached), (7, 3, 1, 5))


if __name__ == '__main__':
    unittest.main(verbosity=2)
