import os
import sqlite3
import tempfile
import unittest
from unittest import mock

from app import board_from_json, board_to_json  # noqa: E402
from game import (  # noqa: E402
    Board,
    Tile,
    db_count,
    db_lookup,
    db_store,
    deal_board,
    position_key,
    solve_with_cache,
)


def three_pairs():
    return Board.from_tiles((pos, Tile(*rs)) for pos, rs in {
        0: (5, 0), 1: (5, 0), 2: (3, 0), 3: (3, 0), 4: (1, 0), 5: (1, 0),
    }.items())


class TestJson(unittest.TestCase):
    def test_given_board_when_roundtrip_json_then_equal(self):
        board = deal_board(seed=8)
        bj = board_to_json(board)
        self.assertEqual(bj["rows"], 12)
        self.assertEqual(bj["cols"], 10)
        self.assertEqual(len(bj["slots"]), 120)
        self.assertEqual(board_from_json(bj), board)

    def test_given_malformed_json_when_parsing_then_value_error(self):
        with self.assertRaises(ValueError):
            board_from_json({})
        with self.assertRaises(ValueError):
            board_from_json({"slots": [[1, 0]] * 5})
        with self.assertRaises(ValueError):
            board_from_json({"slots": [[1, 0, 3]] * 120})


class TestDb(unittest.TestCase):
    def test_given_solved_position_when_store_then_lookup_returns_saved_values(self):
        with tempfile.TemporaryDirectory() as td:
            db_path = os.path.join(td, "tilepairs.db")
            board = three_pairs()
            key = db_store(db_path, board, turn=0, max_depth=None, gain=6, best_pair=(0, 1))
            self.assertEqual(key, position_key(board, 0))
            self.assertEqual(db_lookup(db_path, key), (6, (0, 1)))
            self.assertIsNone(db_lookup(db_path, position_key(board, 1)))
            self.assertEqual(db_count(db_path), 1)

    def test_given_nested_path_when_store_then_directories_created_and_lookup_ok(self):
        with tempfile.TemporaryDirectory() as td:
            nested = os.path.join(td, "deep", "nest", "file.db")
            board = Board()
            key = db_store(nested, board, turn=1, max_depth=2, gain=0, best_pair=None)
            self.assertEqual(db_lookup(nested, key), (0, None))

    def test_given_solve_with_cache_when_called_twice_then_second_served_from_db(self):
        with tempfile.TemporaryDirectory() as td:
            db_path = os.path.join(td, "tilepairs.db")
            first = solve_with_cache(three_pairs(), db_path)
            self.assertEqual(first.score, 6)
            self.assertGreater(first.stats.nodes, 0)
            second = solve_with_cache(three_pairs(), db_path, accumulated=10)
            self.assertEqual(second.score, 16)
            self.assertEqual(second.best_pair, (0, 1))
            self.assertEqual(second.stats.nodes, 0)
            # A different depth bound is a different position key.
            bounded = solve_with_cache(three_pairs(), db_path, max_depth=1)
            self.assertEqual(bounded.score, 5)
            self.assertEqual(db_count(db_path), 2)

    def test_given_failing_cache_when_solving_then_search_result_still_returned(self):
        def broken_lookup(db_path, key):
            raise sqlite3.OperationalError("disk I/O error")

        def broken_store(*args):
            raise sqlite3.OperationalError("readonly database")

        res = solve_with_cache(three_pairs(), "unused.db", lookup=broken_lookup, store=broken_store)
        self.assertEqual(res.score, 6)

    def test_given_db_parent_is_a_file_when_solving_then_fallback_dir_used_and_score_returned(self):
        with tempfile.TemporaryDirectory() as td:
            blocker = os.path.join(td, "file.txt")
            with open(blocker, "w", encoding="utf-8") as f:
                f.write("not a directory")
            fallback = os.path.join(td, "fallback")
            with mock.patch.dict(os.environ, {"TILEPAIRS_DB_DIR": fallback}):
                res = solve_with_cache(three_pairs(), os.path.join(blocker, "sub", "c.db"))
                self.assertEqual(res.score, 6)
                self.assertTrue(os.path.isfile(os.path.join(fallback, "c.db")))

    def test_given_lookup_raising_os_error_when_solving_then_treated_as_miss(self):
        def unreachable_lookup(db_path, key):
            raise NotADirectoryError(20, "Not a directory", db_path)

        res = solve_with_cache(three_pairs(), "unused.db", lookup=unreachable_lookup,
                               store=lambda *args: "")
        self.assertEqual(res.score, 6)
        self.assertGreater(res.stats.nodes, 0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
