"""Command-line interface: run the HTTP server or replay snapshot files offline."""

from __future__ import annotations

import argparse
import cProfile
import json
import logging
import pstats
import time
from pathlib import Path
from typing import Optional, Sequence

from . import config
from .engine import Engine
from .snapshot import SnapshotError, load_payloads

logger = logging.getLogger(__name__)


def _open_jsonl(path: Optional[str]):
    if not path:
        return None
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    return p.open("a", encoding="utf-8")


def decide(paths: Sequence[str], log_jsonl: Optional[str] = None, engine: Optional[Engine] = None) -> int:
    """Run every snapshot in the given files through one engine, in order.

    Turn memory carries over between snapshots of the same game, exactly as it would
    between live move requests. Prints one move per snapshot.
    """
    config.validate_config()
    engine = engine or Engine()
    jsonl_f = _open_jsonl(log_jsonl)
    t0 = time.time()
    count = 0
    try:
        for path in paths:
            try:
                payloads = load_payloads(path)
            except (OSError, ValueError) as exc:
                logger.error("Unable to read %s: %s", path, exc)
                return 2
            for idx, payload in enumerate(payloads):
                started = time.perf_counter()
                try:
                    decision = engine.move(payload)
                except SnapshotError as exc:
                    logger.error("%s[%d]: %s", path, idx, exc)
                    return 2
                elapsed_ms = 1000.0 * (time.perf_counter() - started)
                count += 1
                print(decision.move)

                if jsonl_f is not None:
                    row = {
                        "ts": time.time(),
                        "file": str(path),
                        "index": idx,
                        "game": payload["game"]["id"],
                        "turn": payload.get("turn", 0),
                        "move": decision.move,
                        "best_score": decision.scores[decision.move],
                        "legal_moves": sum(1 for info in decision.meta.values() if info.get("legal")),
                        "searched": any("reach" in info for info in decision.meta.values()),
                        "elapsed_ms": elapsed_ms,
                    }
                    row.update({f"score_{d}": s for d, s in decision.scores.items()})
                    jsonl_f.write(json.dumps(row) + "\n")
                    jsonl_f.flush()
    finally:
        if jsonl_f is not None:
            jsonl_f.close()

    logger.info("Decided %d move(s) in %.3fs", count, time.time() - t0)
    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Snake move engine")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the game-server HTTP endpoint")
    serve.add_argument("--host", type=str, default=None, help="Bind address (default: $SNAKEBRAIN_HOST or 0.0.0.0)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: $PORT or 3000)")
    serve.add_argument("--debug", action="store_true", help="Enable Flask debug mode")

    dec = sub.add_parser("decide", help="Pick moves for snapshot files (.json, .jsonl, .msgpack)")
    dec.add_argument("files", nargs="+", help="Snapshot files, replayed in order")
    dec.add_argument(
        "--log-jsonl",
        type=str,
        default=None,
        help="Append one decision row per snapshot to a JSONL file (e.g. runs/decisions.jsonl)",
    )
    dec.add_argument("--profile", action="store_true", help="Enable profiling output")

    args = parser.parse_args(argv)

    if args.command == "serve":
        # Imported lazily so `decide` works without the web stack loaded.
        from .server import run_server

        run_server(host=args.host, port=args.port, debug=args.debug)
        return 0

    if args.profile:
        profiler = cProfile.Profile()
        profiler.enable()
        rc = decide(args.files, log_jsonl=args.log_jsonl)
        profiler.disable()
        stats = pstats.Stats(profiler).sort_stats("cumulative")
        print("\n=== Profiling Results ===")
        stats.print_stats(30)
        return rc

    return decide(args.files, log_jsonl=args.log_jsonl)
