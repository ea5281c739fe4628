# toybattle/__init__.py
import threading
from typing import Optional

from .rooms import RoomManager
from .state import RoomRegistry


def init_battle(app, socketio, registry: Optional[RoomRegistry] = None) -> RoomManager:
    # transport imports stay local so the engine imports without flask installed
    from .routes import battle_bp
    from .sockets import SocketBroadcaster, background_scheduler, register_battle_socket_handlers

    registry = registry or RoomRegistry()
    lock = threading.RLock()
    manager = RoomManager(
        registry,
        SocketBroadcaster(socketio, registry),
        start_delay=float(app.config.get("MATCH_START_DELAY", 0) or 0),
        scheduler=background_scheduler(socketio, lock),
    )
    app.extensions["toybattle"] = manager
    app.register_blueprint(battle_bp)
    register_battle_socket_handlers(socketio, manager, lock)
    return manager
