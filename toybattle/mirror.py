# toybattle/mirror.py
"""Per-participant read-only replica of a match, fed by outbound server events.

The replica is replaced wholesale on every `game:stateSync`; it is never
patched field by field. Selectors present everything in self/opponent
framing regardless of which server-side role the participant holds.
"""
import copy
import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

ME = "me"
OPPONENT = "opponent"


class ClientMirror:
    def __init__(self, participant: str, combat_log_limit: int = 30):
        self.participant = participant
        self.combat_log_limit = combat_log_limit
        self.role: Optional[str] = None
        self.room: Optional[Dict[str, Any]] = None
        self.cards: Dict[str, List[Dict[str, Any]]] = {ME: [], OPPONENT: []}
        self.current_turn: Optional[str] = None
        self.selections: Dict[str, Dict[str, Any]] = {ME: {}, OPPONENT: {}}
        self.winner: Optional[str] = None
        self.game_over = False
        self.combat_log: List[Dict[str, Any]] = []
        self.last_visual_effect: Optional[Dict[str, Any]] = None
        self.errors: List[str] = []
        self._handlers: Dict[str, Callable[[Any], None]] = {
            "room:update": self._on_room_update,
            "game:start": self._on_game_start,
            "game:cardSelected": self._on_card_selected,
            "game:abilityExecuted": self._on_ability_executed,
            "game:stateSync": self._on_state_sync,
            "game:over": self._on_game_over,
            "error": self._on_error,
        }

    def handle(self, event: str, payload: Any) -> None:
        handler = self._handlers.get(event)
        if handler is None:
            logger.debug("Mirror ignoring %s", event)
            return
        handler(payload)

    # -- framing -------------------------------------------------------------

    def _side_of(self, role: Optional[str]) -> Optional[str]:
        if role is None or self.role is None:
            return None
        return ME if role == self.role else OPPONENT

    def _frame(self, player1_value: Any, player2_value: Any) -> Dict[str, Any]:
        if self.role == "player2":
            return {ME: player2_value, OPPONENT: player1_value}
        return {ME: player1_value, OPPONENT: player2_value}

    # -- handlers ------------------------------------------------------------

    def _on_room_update(self, room: Dict[str, Any]) -> None:
        self.room = copy.deepcopy(room)
        if room.get("player1") == self.participant:
            self.role = "player1"
        elif room.get("player2") == self.participant:
            self.role = "player2"

    def _on_game_start(self, payload: Dict[str, Any]) -> None:
        self.cards = self._frame(
            copy.deepcopy(payload.get("playerCards") or []),
            copy.deepcopy(payload.get("opponentCards") or []),
        )
        self.current_turn = payload.get("startingPlayer")
        self.winner = None
        self.game_over = False
        self.combat_log = []

    def _on_card_selected(self, payload: Dict[str, Any]) -> None:
        side = self._side_of(payload.get("playerRole"))
        if side is None:
            return
        self.selections[side] = {
            "cardId": payload.get("cardId"),
            "abilityIndex": payload.get("abilityIndex"),
        }

    def _on_ability_executed(self, payload: Dict[str, Any]) -> None:
        entry = payload.get("combatLogEntry")
        if entry:
            self.combat_log.append(dict(entry, side=self._side_of(payload.get("playerRole"))))
            self.combat_log = self.combat_log[-self.combat_log_limit:]
        self.last_visual_effect = payload.get("visualEffect")

    def _on_state_sync(self, payload: Dict[str, Any]) -> None:
        self.cards = self._frame(
            copy.deepcopy(payload.get("player1Cards") or []),
            copy.deepcopy(payload.get("player2Cards") or []),
        )
        self.current_turn = payload.get("currentTurn")
        self.selections = self._frame(
            {"cardId": payload.get("player1SelectedCard"), "abilityIndex": payload.get("player1SelectedAbility")},
            {"cardId": payload.get("player2SelectedCard"), "abilityIndex": payload.get("player2SelectedAbility")},
        )

    def _on_game_over(self, payload: Dict[str, Any]) -> None:
        self.game_over = True
        winner = payload.get("winner")
        self.winner = self._side_of(winner) if winner else "draw"

    def _on_error(self, message: Any) -> None:
        self.errors.append(str(message))

    # -- selectors -----------------------------------------------------------

    @property
    def my_cards(self) -> List[Dict[str, Any]]:
        return self.cards[ME]

    @property
    def opponent_cards(self) -> List[Dict[str, Any]]:
        return self.cards[OPPONENT]

    @property
    def is_my_turn(self) -> bool:
        return self.role is not None and self.current_turn == self.role and not self.game_over

    @property
    def my_selection(self) -> Dict[str, Any]:
        return self.selections[ME]

    def alive_cards(self, side: str) -> List[Dict[str, Any]]:
        return [c for c in self.cards[side] if c.get("hp", 0) > 0]

    def get_card(self, side: str, card_id: str) -> Optional[Dict[str, Any]]:
        for card in self.cards[side]:
            if card.get("id") == card_id:
                return card
        return None

    def can_cast_ability(self, card_id: str, ability_index: int) -> bool:
        card = self.get_card(ME, card_id)
        if not card or card.get("hp", 0) <= 0:
            return False
        abilities = card.get("abilities") or []
        if not 0 <= ability_index < len(abilities):
            return False
        if any(d.get("type") in ("stunned", "frozen") for d in card.get("debuffs") or []):
            return False
        return not abilities[ability_index].get("currentCooldown")

    def selected_ability(self) -> Optional[Dict[str, Any]]:
        selection = self.my_selection
        card = self.get_card(ME, selection.get("cardId") or "")
        index = selection.get("abilityIndex")
        if not card or index is None:
            return None
        abilities = card.get("abilities") or []
        return abilities[index] if 0 <= index < len(abilities) else None

    @property
    def waiting_for_target(self) -> bool:
        ability = self.selected_ability()
        return self.is_my_turn and ability is not None and ability.get("targetType") in ("single", "dead_allies")

    def valid_targets(self) -> List[str]:
        """Card ids the player may click for the selected ability."""
        ability = self.selected_ability()
        if not self.is_my_turn or ability is None:
            return []
        target_type = ability.get("targetType")
        if target_type == "single":
            return [c["id"] for c in self.alive_cards(ME) + self.alive_cards(OPPONENT)]
        if target_type == "dead_allies":
            return [c["id"] for c in self.my_cards if c.get("hp", 0) <= 0]
        return []
