# toybattle/rooms.py
"""Room lifecycle: create/join/matchmake/leave, and the action entry point.

Every public method either succeeds and broadcasts, or rejects with a
one-line `error` notice to the requester. Nothing raises past this layer.
"""
import abc
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from .engine import turns
from .engine.models import (
    CombatantTemplate,
    MatchRoom,
    RoomError,
    other_role,
)
from .state import RoomRegistry

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], None]


class Broadcaster(abc.ABC):
    """Outbound side of the transport. Subclasses deliver to one participant."""

    @abc.abstractmethod
    def to_participant(self, participant: str, event: str, payload: Any) -> None:
        ...

    def to_room(self, room: MatchRoom, event: str, payload: Any) -> None:
        for participant in (room.player1, room.player2):
            if participant:
                self.to_participant(participant, event, payload)


class RoomManager:
    def __init__(
        self,
        registry: RoomRegistry,
        broadcaster: Broadcaster,
        start_delay: float = 0.0,
        scheduler: Optional[Scheduler] = None,
        catalog: Optional[Sequence[CombatantTemplate]] = None,
    ):
        self.registry = registry
        self.broadcaster = broadcaster
        self.start_delay = start_delay
        self.scheduler = scheduler
        self.catalog = catalog

    def _reject(self, participant: Optional[str], exc: RoomError) -> None:
        logger.info("Rejected %s: %s", participant, exc)
        if participant:
            self.broadcaster.to_participant(participant, "error", str(exc))

    # -- lobby ---------------------------------------------------------------

    def list_rooms(self) -> List[Dict[str, Any]]:
        return [room.summary() for room in self.registry.waiting_rooms()]

    def authenticate(self, participant: str) -> None:
        self.broadcaster.to_participant(participant, "room:list", self.list_rooms())

    def create_room(self, participant: Optional[str]) -> Optional[MatchRoom]:
        try:
            if not participant:
                raise RoomError("Missing wallet")
            room = self.registry.create_room(participant)
        except RoomError as exc:
            self._reject(participant, exc)
            return None
        logger.info("Room %s created by %s", room.id, participant)
        self.broadcaster.to_participant(participant, "room:update", room.to_dict())
        return room

    def join_room(self, room_id: Optional[str], participant: Optional[str]) -> Optional[MatchRoom]:
        try:
            if not participant:
                raise RoomError("Missing wallet")
            room = self.registry.get_room(room_id)
            if room is None:
                raise RoomError("Room not found")
            if participant in (room.player1, room.player2):
                if room.player2 is None:
                    raise RoomError("Cannot join your own room")
                # rejoin: resend the current room without changing it
                self.broadcaster.to_participant(participant, "room:update", room.to_dict())
                return room
            if room.player2 is not None or room.status != "waiting":
                raise RoomError("Room is full")
        except RoomError as exc:
            self._reject(participant, exc)
            return None

        room.player2 = participant
        room.status = "ready"
        logger.info("Room %s ready: %s vs %s", room.id, room.player1, room.player2)
        self.broadcaster.to_room(room, "room:update", room.to_dict())
        self._schedule_start(room.id)
        return room

    def find_match(self, participant: Optional[str]) -> Optional[MatchRoom]:
        if not participant:
            self._reject(participant, RoomError("Missing wallet"))
            return None
        for room in self.registry.waiting_rooms():
            if room.player1 != participant:
                return self.join_room(room.id, participant)
        return self.create_room(participant)

    def leave_room(self, room_id: Optional[str], participant: Optional[str] = None) -> None:
        room = self.registry.get_room(room_id)
        if room is None:
            return
        if participant is not None and room.role_of(participant) is None:
            self._reject(participant, RoomError("You are not in this room"))
            return

        if room.status == "waiting":
            self.registry.delete_room(room.id)
            logger.info("Room %s deleted before start", room.id)
            return
        if room.status in ("finished", "abandoned"):
            return
        room.status = "abandoned"
        room.log.append(f"{participant or 'A player'} left. Match abandoned.")
        logger.info("Room %s abandoned by %s", room.id, participant)
        self.broadcaster.to_room(room, "room:update", room.to_dict())
        self._evict(room)

    def disconnect(self, participant: Optional[str]) -> None:
        if not participant:
            return
        for room in self.registry.rooms_for(participant):
            if room.status != "in_progress":
                continue
            opponent = room.player2 if participant == room.player1 else room.player1
            if opponent:
                self.broadcaster.to_participant(opponent, "opponent:disconnected", {"roomId": room.id})

    # -- match ---------------------------------------------------------------

    def _schedule_start(self, room_id: str) -> None:
        if self.scheduler is None or self.start_delay <= 0:
            self.start_match(room_id)
            return
        self.scheduler(self.start_delay, lambda: self.start_match(room_id))

    def start_match(self, room_id: str) -> None:
        room = self.registry.get_room(room_id)
        if room is None or room.status != "ready":
            return
        turns.start_match(room, self.catalog)
        logger.info("Room %s started (seed=%s), %s first", room.id, room.seed, room.current_turn)
        self.broadcaster.to_room(room, "game:start", {
            "playerCards": [c.to_dict() for c in room.player1_cards],
            "opponentCards": [c.to_dict() for c in room.player2_cards],
            "startingPlayer": room.current_turn,
        })
        self._announce_selection(room)
        self.broadcaster.to_room(room, "room:update", room.to_dict())
        self.broadcast_state(room)

    def _announce_selection(self, room: MatchRoom) -> None:
        event = turns.selection_event(room, room.current_turn)
        if event:
            self.broadcaster.to_room(room, "game:cardSelected", event)

    def broadcast_state(self, room: MatchRoom) -> None:
        self.broadcaster.to_room(room, "game:stateSync", room.state_sync())

    def _announce_finish(self, room: MatchRoom) -> None:
        self.broadcaster.to_room(room, "game:over", {"winner": room.winner})
        self.broadcaster.to_room(room, "room:update", room.to_dict())
        self._evict(room)

    def _evict(self, room: MatchRoom) -> None:
        """Drop a finished or abandoned room once its final update has gone out."""
        self.registry.delete_room(room.id)
        logger.info("Room %s closed (%s)", room.id, room.status)

    def dispatch_action(self, room_id: Optional[str], participant: Optional[str], action: Dict[str, Any]) -> None:
        room = self.registry.get_room(room_id)
        if room is None or room.status != "in_progress":
            logger.debug("Ignoring action for room %s (missing or not in progress)", room_id)
            return
        role = room.role_of(participant)
        if role is None:
            logger.debug("Ignoring action from %s: not in room %s", participant, room.id)
            return

        kind = action.get("type")
        try:
            if kind == "selectTarget":
                self._select_target(room, role, participant, action)
            elif kind == "endTurn":
                self._end_turn(room, role)
            else:
                raise RoomError(f"Unknown action {kind!r}")
        except RoomError as exc:
            self._reject(participant, exc)

    def _select_target(self, room: MatchRoom, role: str, participant: str, action: Dict[str, Any]) -> None:
        result = turns.select_target(
            room,
            role,
            action.get("targetId"),
            selected_card_id=action.get("selectedCardId"),
            ability_index=action.get("abilityIndex"),
        )
        if not result.outcome.resolved:
            message = result.outcome.messages[-1] if result.outcome.messages else "Nothing happened"
            self.broadcaster.to_participant(participant, "error", message)
            return
        self.broadcaster.to_room(room, "game:abilityExecuted", result.to_event())
        if room.status == "finished":
            self._announce_finish(room)
        self.broadcast_state(room)

    def _end_turn(self, room: MatchRoom, role: str) -> None:
        turns.end_turn(room, role)
        logger.debug("Room %s: %s ended turn, %s to act", room.id, role, other_role(role))
        if room.status == "finished":
            self._announce_finish(room)
        else:
            self._announce_selection(room)
        self.broadcast_state(room)
