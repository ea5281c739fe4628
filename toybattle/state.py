# toybattle/state.py
import uuid
from typing import Any, Callable, Dict, List, Optional

from .engine.dice import new_seed, rng_for
from .engine.models import MatchRoom


def _short_id() -> str:
    return uuid.uuid4().hex[:7]


class RoomRegistry:
    """Rooms and connection bindings for one server process.

    Rooms are kept in insertion order, which matchmaking relies on.
    """

    def __init__(self, seed: Optional[int] = None, id_factory: Callable[[], str] = _short_id):
        self._seed = seed
        self._id_factory = id_factory
        self.rooms: Dict[str, MatchRoom] = {}
        self.sid_to_participant: Dict[str, str] = {}
        self.participant_to_sid: Dict[str, str] = {}

    def _next_seed(self) -> int:
        if self._seed is None:
            return new_seed()
        self._seed = (self._seed + 1) & 0xFFFFFFFF
        return self._seed

    def create_room(self, participant: str) -> MatchRoom:
        room_id = self._id_factory()
        while room_id in self.rooms:
            room_id = self._id_factory()
        seed = self._next_seed()
        room = MatchRoom(id=room_id, player1=participant, seed=seed, rng=rng_for(seed))
        self.rooms[room_id] = room
        return room

    def get_room(self, room_id: Any) -> Optional[MatchRoom]:
        if not isinstance(room_id, str) or not room_id:
            return None
        return self.rooms.get(room_id)

    def delete_room(self, room_id: str) -> None:
        self.rooms.pop(room_id, None)

    def waiting_rooms(self) -> List[MatchRoom]:
        return [room for room in self.rooms.values() if room.status == "waiting"]

    def rooms_for(self, participant: str) -> List[MatchRoom]:
        return [room for room in self.rooms.values() if room.role_of(participant)]

    def bind(self, sid: str, participant: str) -> None:
        previous = self.sid_to_participant.get(sid)
        if previous and self.participant_to_sid.get(previous) == sid:
            self.participant_to_sid.pop(previous, None)
        self.sid_to_participant[sid] = participant
        self.participant_to_sid[participant] = sid

    def unbind(self, sid: str) -> Optional[str]:
        participant = self.sid_to_participant.pop(sid, None)
        if participant and self.participant_to_sid.get(participant) == sid:
            self.participant_to_sid.pop(participant, None)
        return participant

    def participant_for(self, sid: str) -> Optional[str]:
        return self.sid_to_participant.get(sid)

    def sid_for(self, participant: Optional[str]) -> Optional[str]:
        if participant is None:
            return None
        return self.participant_to_sid.get(participant)
