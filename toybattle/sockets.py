# toybattle/sockets.py
import functools
import logging
import threading
from typing import Any, Callable, Dict, Optional

from flask import request
from flask_socketio import SocketIO, emit

from .rooms import Broadcaster, RoomManager
from .state import RoomRegistry

logger = logging.getLogger(__name__)


class SocketBroadcaster(Broadcaster):
    """Delivers events to the connection currently bound to a participant."""

    def __init__(self, socketio: SocketIO, registry: RoomRegistry):
        self.socketio = socketio
        self.registry = registry

    def to_participant(self, participant: str, event: str, payload: Any) -> None:
        sid = self.registry.sid_for(participant)
        if sid is None:
            logger.debug("No connection for %s, dropping %s", participant, event)
            return
        self.socketio.emit(event, payload, to=sid)


def background_scheduler(socketio: SocketIO, lock: threading.RLock) -> Callable:
    def schedule(delay: float, fn: Callable[[], None]) -> None:
        def run() -> None:
            socketio.sleep(delay)
            with lock:
                fn()
        socketio.start_background_task(run)
    return schedule


def _payload(data: Any) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _text(value: Any) -> Optional[str]:
    # ids and wallets arrive as plain strings; anything else is treated as absent
    return value if isinstance(value, str) and value else None


def register_battle_socket_handlers(socketio: SocketIO, manager: RoomManager, lock: threading.RLock) -> None:
    registry = manager.registry

    def serialized(handler):
        # one inbound event at a time across all rooms
        @functools.wraps(handler)
        def wrapper(*args, **kwargs):
            with lock:
                return handler(*args, **kwargs)
        return wrapper

    def bind_wallet(data: Dict[str, Any]):
        wallet = _text(data.get("wallet"))
        if wallet is None:
            emit("error", "Missing wallet")
            return None
        registry.bind(request.sid, wallet)
        return wallet

    @socketio.on("authenticate")
    @serialized
    def authenticate(data=None):
        wallet = bind_wallet(_payload(data))
        if wallet:
            manager.authenticate(wallet)

    @socketio.on("room:create")
    @serialized
    def room_create(data=None):
        wallet = bind_wallet(_payload(data))
        if wallet:
            manager.create_room(wallet)

    @socketio.on("room:join")
    @serialized
    def room_join(data=None):
        data = _payload(data)
        wallet = bind_wallet(data)
        if wallet:
            manager.join_room(_text(data.get("roomId")), wallet)

    @socketio.on("matchmaking:find")
    @serialized
    def matchmaking_find(data=None):
        wallet = bind_wallet(_payload(data))
        if wallet:
            manager.find_match(wallet)

    @socketio.on("room:leave")
    @serialized
    def room_leave(data=None):
        participant = registry.participant_for(request.sid)
        manager.leave_room(_text(_payload(data).get("roomId")), participant)

    @socketio.on("game:action")
    @serialized
    def game_action(data=None):
        data = _payload(data)
        participant = registry.participant_for(request.sid)
        manager.dispatch_action(_text(data.get("roomId")), participant, data)

    @socketio.on("disconnect")
    @serialized
    def on_disconnect(reason=None):
        participant = registry.unbind(request.sid)
        logger.debug("Disconnected %s (%s)", participant, reason)
        if participant and registry.sid_for(participant) is not None:
            # the participant is still reachable on a newer connection
            return
        manager.disconnect(participant)
