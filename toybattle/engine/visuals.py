# toybattle/engine/visuals.py
"""Presentation hints attached to a cast. Nothing here feeds back into game state."""
from typing import Any, Dict, List, Optional, Sequence

from .models import AbilityOutcome, CombatantInstance
from ..content.balance import LAYOUT

WIDE_EFFECTS = ("battery_drain", "puppet_master", "chaos_shuffle", "fire_breath")
ALLY_EFFECTS = ("battery_drain", "puppet_master")


def effect_position(card: CombatantInstance) -> List[float]:
    x, _, z = card.position
    return [x, LAYOUT["effect_height"], z]


def effect_type(outcome: AbilityOutcome) -> Optional[str]:
    ability = outcome.ability
    if not (ability.effect or ability.damage or ability.heal):
        return None
    if ability.vfx:
        return ability.vfx
    return ability.effect or ("heal" if ability.heal else "fire")


def build_visual_effect(
    outcome: AbilityOutcome,
    allies: Sequence[CombatantInstance],
    enemies: Sequence[CombatantInstance],
) -> Optional[Dict[str, Any]]:
    kind = effect_type(outcome)
    if kind is None:
        return None
    target_positions = [effect_position(t) for t in outcome.targets]
    hint: Dict[str, Any] = {
        "type": kind,
        "sourcePosition": effect_position(outcome.caster),
        "targetPosition": target_positions[0] if target_positions else None,
        "targetPositions": target_positions,
    }
    if kind in WIDE_EFFECTS:
        hint["enemyPositions"] = [effect_position(c) for c in enemies if c.hp > 0]
    if kind in ALLY_EFFECTS:
        hint["allyPositions"] = [effect_position(c) for c in allies if c.hp > 0]
    if kind == "bath_bomb":
        hint["allyPositions"] = target_positions
    return hint


def build_combat_log_entry(outcome: AbilityOutcome) -> Dict[str, Any]:
    caster = outcome.caster
    entry: Dict[str, Any] = {
        "attackerCard": {"name": caster.name, "texture": caster.texture},
        "targetCards": [{"name": t.name, "texture": t.texture} for t in outcome.targets],
        "abilityName": outcome.ability.name,
        "totalDamage": outcome.total_damage,
        "totalHealing": outcome.total_healing,
    }
    if outcome.debuffs_applied:
        entry["effects"] = [d["debuff"]["type"] for d in outcome.debuffs_applied]
    if outcome.echoed is not None:
        entry["echoedBy"] = outcome.echoed.name
    return entry
