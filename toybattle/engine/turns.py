# toybattle/engine/turns.py
"""Turn state machine for one match room.

Phases: awaiting_selection -> awaiting_target -> resolving -> turn_complete.
Auto-selection picks the acting combatant and ability at the start of every
turn; the participant only supplies a target. Every function here assumes
the caller already holds the room (single-threaded handling per room).
"""
import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .catalog import CATALOG
from .dice import pick, pick_many
from .effects import end_of_turn
from .models import (
    PLAYER1,
    PLAYER2,
    ROLES,
    CastResult,
    CombatantInstance,
    CombatantTemplate,
    MatchRoom,
    RoomError,
    other_role,
)
from .resolver import living, resolve_ability
from .visuals import build_combat_log_entry, build_visual_effect
from ..content.balance import DEFAULTS, LAYOUT

logger = logging.getLogger(__name__)


def build_roster(role: str, templates: Sequence[CombatantTemplate]) -> List[CombatantInstance]:
    z = LAYOUT["player1_z"] if role == PLAYER1 else LAYOUT["player2_z"]
    return [
        CombatantInstance.from_template(
            template,
            card_id=f"{role}-card-{i}",
            position=(LAYOUT["left"] + i * LAYOUT["spacing"], 0, z),
        )
        for i, template in enumerate(templates)
    ]


def draw_roster(role: str, catalog: Sequence[CombatantTemplate], rng: Any) -> List[CombatantInstance]:
    return build_roster(role, pick_many(catalog, DEFAULTS["roster_size"], rng))


def start_match(room: MatchRoom, catalog: Optional[Sequence[CombatantTemplate]] = None) -> None:
    """Draw both rosters, choose the starting side and auto-select for it."""
    if room.status != "ready":
        raise RoomError("Match is not ready to start")
    templates = catalog or CATALOG
    room.player1_cards = draw_roster(PLAYER1, templates, room.rng)
    room.player2_cards = draw_roster(PLAYER2, templates, room.rng)
    room.current_turn = PLAYER1 if room.rng.random() < 0.5 else PLAYER2
    room.status = "in_progress"
    room.turn_number = 1
    room.log.append(f"Match started. {room.current_turn} goes first.")
    auto_select(room)


def auto_select(room: MatchRoom) -> Optional[Tuple[CombatantInstance, int]]:
    """Pick a living combatant, then a ready ability, for the side holding the turn."""
    role = room.current_turn
    room.phase = "awaiting_selection"
    alive = living(room.roster(role))
    if not alive:
        room.selections[role] = None
        return None
    card = pick(alive, room.rng)
    ready = [i for i, ability in enumerate(card.abilities) if ability.ready]
    index = pick(ready, room.rng) if ready else 0
    room.selections[role] = (card.id, index)
    room.phase = "awaiting_target"
    return card, index


def selection_event(room: MatchRoom, role: str) -> Optional[Dict[str, Any]]:
    """Payload for game:cardSelected, or None when the side has nothing selected."""
    picked = room.selections.get(role)
    if not picked:
        return None
    card = room.find_card(picked[0])
    if card is None or picked[1] >= len(card.abilities):
        return None
    return {
        "playerRole": role,
        "cardId": card.id,
        "abilityIndex": picked[1],
        "cardName": card.name,
        "abilityName": card.abilities[picked[1]].name,
    }


def require_turn(room: MatchRoom, role: Optional[str]) -> None:
    if room.status != "in_progress":
        raise RoomError("Match is not in progress")
    if role not in ROLES:
        raise RoomError("You are not in this match")
    if room.current_turn != role:
        raise RoomError("Not your turn")


def override_selection(room: MatchRoom, role: str, card_id: Optional[str], ability_index: Any) -> None:
    if card_id is None or ability_index is None:
        return
    try:
        index = int(ability_index)
    except (TypeError, ValueError):
        return
    for card in room.roster(role):
        if card.id == card_id and card.hp > 0 and 0 <= index < len(card.abilities):
            room.selections[role] = (card_id, index)
            return


def select_target(
    room: MatchRoom,
    role: Optional[str],
    target_id: Optional[str],
    selected_card_id: Optional[str] = None,
    ability_index: Any = None,
) -> CastResult:
    """Resolve the acting side's selected ability against `target_id`.

    Raises RoomError for structural rejections. An aborted cast (stunned
    caster, invalid target) comes back with `outcome.resolved` False and the
    room left in `awaiting_target`.
    """
    require_turn(room, role)
    if room.phase != "awaiting_target":
        raise RoomError("Already acted this turn")
    override_selection(room, role, selected_card_id, ability_index)
    picked = room.selections.get(role)
    if not picked:
        raise RoomError("No card selected")

    card_id, index = picked
    allies = room.roster(role)
    enemies = room.roster(other_role(role))
    caster = next((c for c in allies if c.id == card_id), None)
    ability = None
    if caster is not None and 0 <= index < len(caster.abilities):
        ability = caster.abilities[index].template

    room.phase = "resolving"
    outcome = resolve_ability(
        ability, caster, target_id, allies, enemies, room.rng,
        echo_source=room.last_cast.get(other_role(role)),
    )
    result = CastResult(role=role, target_id=target_id, ability_index=index, outcome=outcome)
    if not outcome.resolved:
        room.phase = "awaiting_target"
        logger.debug("Room %s: %s cast aborted: %s", room.id, role, "; ".join(outcome.messages))
        return result

    room.last_cast[role] = outcome.ability
    room.phase = "turn_complete"
    room.log.extend(outcome.messages)
    result.visual_effect = build_visual_effect(outcome, allies, enemies)
    result.combat_log_entry = build_combat_log_entry(outcome)
    check_winner(room)
    return result


def end_turn(room: MatchRoom, role: Optional[str]) -> bool:
    """Tick both rosters, flip the turn marker and auto-select for the new side.

    Returns True when end-of-turn damage finished the match.
    """
    require_turn(room, role)
    end_of_turn(room.roster(PLAYER1) + room.roster(PLAYER2), room.log)
    room.selections[role] = None
    room.current_turn = other_role(role)
    room.turn_number += 1
    if check_winner(room):
        return True
    auto_select(room)
    return False


def check_winner(room: MatchRoom) -> bool:
    """Finish the match once a side has no living combatant. Returns True if finished."""
    p1_alive = any(c.hp > 0 for c in room.roster(PLAYER1))
    p2_alive = any(c.hp > 0 for c in room.roster(PLAYER2))
    if p1_alive and p2_alive:
        return False
    room.status = "finished"
    if p1_alive:
        room.winner = PLAYER1
        room.log.append("player1 wins the match.")
    elif p2_alive:
        room.winner = PLAYER2
        room.log.append("player2 wins the match.")
    else:
        room.winner = None
        room.log.append("Double KO. No winner.")
    logger.info("Room %s finished, winner=%s", room.id, room.winner)
    return True
