import pytest

from regression_suite import RecordingBroadcaster
from toybattle.app import create_app
from toybattle.rooms import RoomManager
from toybattle.state import RoomRegistry


@pytest.fixture
def broadcaster():
    return RecordingBroadcaster()


@pytest.fixture
def registry():
    ids = iter(f"room{i}" for i in range(1, 1000))
    return RoomRegistry(seed=42, id_factory=lambda: next(ids))


@pytest.fixture
def manager(registry, broadcaster):
    return RoomManager(registry, broadcaster)


@pytest.fixture
def started(manager):
    """A room that alice created and bob joined, already in progress."""
    room = manager.create_room("alice")
    manager.join_room(room.id, "bob")
    return room


@pytest.fixture
def app_and_socketio(registry):
    return create_app({"TESTING": True, "MATCH_START_DELAY": 0}, registry=registry)
