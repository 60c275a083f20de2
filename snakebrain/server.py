"""Flask adapter for the game-server HTTP contract."""

from __future__ import annotations

import logging
from typing import Optional

from flask import Flask, jsonify, request

from . import config
from .engine import Engine
from .snapshot import SnapshotError

logger = logging.getLogger(__name__)


def create_app(engine: Optional[Engine] = None) -> Flask:
    app = Flask(__name__)
    app.config["ENGINE"] = engine or Engine()

    def _engine() -> Engine:
        return app.config["ENGINE"]

    @app.errorhandler(SnapshotError)
    def _bad_snapshot(exc: SnapshotError):
        logger.error("Rejected snapshot on %s: %s", request.path, exc)
        return jsonify({"error": str(exc)}), 400

    @app.get("/")
    def index():
        return jsonify(_engine().info())

    @app.post("/start")
    def start():
        return _engine().start(request.get_json(silent=True)), 200

    @app.post("/move")
    def move():
        decision = _engine().move(request.get_json(silent=True))
        return jsonify({"move": decision.move})

    @app.post("/end")
    def end():
        return _engine().end(request.get_json(silent=True)), 200

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None, debug: bool = False) -> None:
    config.validate_config()
    host = host or config.HOST
    port = int(port or config.PORT)
    app = create_app()
    logger.info("Snake server listening at http://%s:%d", host, port)
    # threaded: concurrent games are isolated by the engine's registry.
    app.run(host=host, port=port, debug=debug, threaded=True, use_reloader=False)
