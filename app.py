from __future__ import annotations

import os
import sys
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request

# Ensure package imports work when executed directly from repo root
if __package__ in (None, ""):
    sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from game import (  # noqa: E402
    Board,
    COLS,
    InvalidPair,
    ROWS,
    SearchResult,
    Tile,
    deal_board,
    deal_partial,
    enumerate_pairs,
    free_positions,
    remove_pair,
    solve_with_cache,
)
from tilepairs_core.config import configure_logging, load_settings  # noqa: E402

SETTINGS = load_settings()
DEFAULT_DB = SETTINGS.db_path
# Largest board solved without a depth bound.
MAX_UNBOUNDED_TILES = 24

app = Flask(__name__)


def board_to_json(b: Board) -> Dict[str, Any]:
    return {"rows": ROWS, "cols": COLS, "slots": [[t.rank, t.suit] for t in b.slots]}


def board_from_json(obj: Dict[str, Any]) -> Board:
    """Builds a Board from {"slots": [[rank, suit], ...]}; raises ValueError on malformed input."""
    try:
        slots = [Tile(int(rank), int(suit)) for rank, suit in obj["slots"]]
    except (KeyError, TypeError) as e:
        raise ValueError(f"bad board: {e}") from None
    return Board(slots)


def _pairs_json(board: Board) -> List[List[int]]:
    return [[a, b] for a, b in enumerate_pairs(board)]


def _board_payload(board: Board) -> Dict[str, Any]:
    return {
        "board": board_to_json(board),
        "free": free_positions(board),
        "pairs": _pairs_json(board),
        "tiles": board.tile_count(),
    }


def result_to_json(res: SearchResult) -> Dict[str, Any]:
    return {
        "score": res.score,
        "best": list(res.best_pair) if res.best_pair is not None else None,
        "moves": [{"pair": list(m.pair), "value": m.value, "score": m.score} for m in res.moves],
        "stats": {
            "nodes": res.stats.nodes,
            "terminals": res.stats.terminals,
            "cacheHits": res.stats.cache_hits,
            "maxDepth": res.stats.max_depth_reached,
        },
    }


def _body() -> Dict[str, Any]:
    body = request.get_json(force=True, silent=True)
    if body is None:
        return {}
    if not isinstance(body, dict):
        raise ValueError("request body must be a JSON object")
    return body


def _body_board() -> Board:
    return board_from_json(_body().get("board") or {})


def _int_field(body: Dict[str, Any], name: str, default: Optional[int], nullable: bool = False) -> Optional[int]:
    """Reads an integer field; JSON null is accepted only for nullable fields."""
    value = body.get(name, default)
    if value is None and nullable:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@app.errorhandler(ValueError)
def handle_value_error(e: ValueError) -> Any:
    # InvalidPair is a ValueError too
    return jsonify({"ok": False, "error": str(e)}), 400


@app.post("/api/new")
def api_new() -> Any:
    body = _body()
    seed = _int_field(body, "seed", None, nullable=True)
    pairs = _int_field(body, "pairs", None, nullable=True)
    if pairs is None:
        board = deal_board(seed=seed)
    else:
        board = deal_partial(pairs, seed=seed)
    return jsonify({"ok": True, **_board_payload(board)})


@app.post("/api/free")
def api_free() -> Any:
    board = _body_board()
    return jsonify({"ok": True, "free": free_positions(board)})


@app.post("/api/pairs")
def api_pairs() -> Any:
    board = _body_board()
    return jsonify({"ok": True, "pairs": _pairs_json(board)})


@app.post("/api/remove")
def api_remove() -> Any:
    body = _body()
    board = board_from_json(body.get("board") or {})
    try:
        a, b = (int(x) for x in body["pair"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"ok": False, "error": "pair must be two positions"}), 400
    move = (min(a, b), max(a, b))
    legal = enumerate_pairs(board)
    child = board.copy()
    try:
        value = remove_pair(child, *move)
    except InvalidPair as e:
        return jsonify({"ok": False, "error": str(e), "pairs": [list(p) for p in legal]}), 400
    if move not in legal:
        return jsonify({"ok": False, "error": "Tiles are not both free", "pairs": [list(p) for p in legal]}), 400
    return jsonify({"ok": True, "value": value, **_board_payload(child)})


@app.post("/api/solve")
def api_solve() -> Any:
    body = _body()
    board = board_from_json(body.get("board") or {})
    accumulated = _int_field(body, "accumulated", 0)
    turn = _int_field(body, "turn", 0)
    depth = _int_field(body, "depth", SETTINGS.max_depth, nullable=True)
    if depth is None and board.tile_count() > MAX_UNBOUNDED_TILES:
        return jsonify({"ok": False, "error": f"board has more than {MAX_UNBOUNDED_TILES} tiles; pass a depth"}), 400
    res = solve_with_cache(
        board,
        DEFAULT_DB,
        accumulated,
        turn,
        max_depth=depth,
        workers=SETTINGS.workers,
    )
    return jsonify({"ok": True, **result_to_json(res)})


@app.post("/api/render")
def api_render() -> Any:
    board = _body_board()
    return jsonify({"ok": True, "text": board.pretty(show_index=True), "labels": board.labels()})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    configure_logging(SETTINGS.debug or debug)
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
