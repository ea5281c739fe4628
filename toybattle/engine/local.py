# toybattle/engine/local.py
"""Offline play: one human side against a bot, no transport involved."""
import logging
from typing import List, Optional, Sequence

from .dice import new_seed, pick, rng_for
from .models import (
    PLAYER1,
    AbilityTemplate,
    CastResult,
    CombatantTemplate,
    MatchRoom,
    other_role,
)
from .resolver import living
from .rules import hp_fraction
from .turns import end_turn, select_target, start_match

logger = logging.getLogger(__name__)


def _is_friendly(ability: AbilityTemplate) -> bool:
    return bool(ability.heal) and not ability.damage


def choose_target(room: MatchRoom, role: str) -> Optional[str]:
    """Target for the side's current selection: weakest enemy for attacks, most wounded ally for heals."""
    picked = room.selections.get(role)
    if not picked:
        return None
    allies = room.roster(role)
    enemies = room.roster(other_role(role))
    caster = next((c for c in allies if c.id == picked[0]), None)
    if caster is None or picked[1] >= len(caster.abilities):
        return None
    ability = caster.abilities[picked[1]].template
    if ability.effect == "spell_echo":
        ability = room.last_cast.get(other_role(role)) or ability

    if ability.target_type == "dead_allies":
        fallen = [c for c in allies if c.hp <= 0]
        return fallen[0].id if fallen else None
    if ability.target_type != "single":
        return None
    if _is_friendly(ability):
        wounded = [c for c in living(allies) if c.hp < c.max_hp] or living(allies)
        return min(wounded, key=lambda c: hp_fraction(c.hp, c.max_hp)).id if wounded else None
    foes = living(enemies)
    if not foes:
        return None
    weakest = min(c.hp for c in foes)
    return pick([c for c in foes if c.hp == weakest], room.rng).id


class LocalMatch:
    """Single-player match driving the same turn machine the server uses."""

    def __init__(
        self,
        seed: Optional[int] = None,
        catalog: Optional[Sequence[CombatantTemplate]] = None,
        human_role: str = PLAYER1,
    ):
        seed = new_seed() if seed is None else seed
        self.human_role = human_role
        self.bot_role = other_role(human_role)
        self.room = MatchRoom(
            id="local",
            player1="you" if human_role == PLAYER1 else "bot",
            player2="bot" if human_role == PLAYER1 else "you",
            status="ready",
            seed=seed,
            rng=rng_for(seed),
        )
        self.history: List[CastResult] = []
        start_match(self.room, catalog)
        self.play_bot_turn()

    @property
    def finished(self) -> bool:
        return self.room.status == "finished"

    def cast(self, target_id: Optional[str]) -> CastResult:
        result = select_target(self.room, self.human_role, target_id)
        if result.outcome.resolved:
            self.history.append(result)
        return result

    def end_turn(self) -> None:
        end_turn(self.room, self.human_role)
        self.play_bot_turn()

    def play_bot_turn(self) -> Optional[CastResult]:
        room = self.room
        if room.status != "in_progress" or room.current_turn != self.bot_role:
            return None
        result = select_target(room, self.bot_role, choose_target(room, self.bot_role))
        if result.outcome.resolved:
            self.history.append(result)
        else:
            logger.debug("Bot skipped its cast: %s", "; ".join(result.outcome.messages))
        if room.status == "in_progress":
            end_turn(room, self.bot_role)
        return result
