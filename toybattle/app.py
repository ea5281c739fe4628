# toybattle/app.py
import logging
from typing import Any, Mapping, Optional, Tuple

from flask import Flask
from flask_socketio import SocketIO

from . import init_battle
from .config import Config
from .state import RoomRegistry

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[Mapping[str, Any]] = None,
    registry: Optional[RoomRegistry] = None,
) -> Tuple[Flask, SocketIO]:
    app = Flask(__name__)
    app.config.from_object(Config)
    if config:
        app.config.update(config)

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    socketio = SocketIO(app, cors_allowed_origins=app.config["CORS_ALLOWED_ORIGINS"])
    init_battle(app, socketio, registry=registry)
    return app, socketio


def main() -> None:
    app, socketio = create_app()
    logger.info("Game server running on port %s", app.config["PORT"])
    socketio.run(app, host=app.config["HOST"], port=app.config["PORT"], allow_unsafe_werkzeug=True)


if __name__ == "__main__":
    main()
