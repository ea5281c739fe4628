# toybattle/engine/effects.py
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from .models import AbilityTemplate, CombatantInstance, Debuff
from .rules import clamp
from ..content.balance import (
    CANT_ACT,
    DAMAGE_PER_STACK,
    DEBUFF_TABLE,
    DEFAULTS,
    NAMED_DEBUFFS,
    SHIELD_AMOUNTS,
    STACK_CAPS,
)

logger = logging.getLogger(__name__)

PERSISTENT = DEFAULTS["persistent_duration"]


def is_permanent(debuff: Debuff) -> bool:
    """Persistent debuffs are never ticked down by duration."""
    return debuff.duration >= PERSISTENT


def get_debuff(target: CombatantInstance, debuff_type: str) -> Optional[Debuff]:
    for debuff in target.debuffs:
        if debuff.type == debuff_type:
            return debuff
    return None


def has_debuff(target: CombatantInstance, debuff_type: str) -> bool:
    return get_debuff(target, debuff_type) is not None


def remove_debuff(target: CombatantInstance, debuff_type: str) -> None:
    target.debuffs = [d for d in target.debuffs if d.type != debuff_type]


def can_act(caster: CombatantInstance) -> bool:
    return not any(has_debuff(caster, debuff_type) for debuff_type in CANT_ACT)


def build_debuff(ability: AbilityTemplate) -> Optional[Debuff]:
    """Debuff an ability installs on its targets, or None if its effect is not in the table."""
    if ability.name in NAMED_DEBUFFS:
        entry = NAMED_DEBUFFS[ability.name]
    elif ability.effect == "shield":
        amount = SHIELD_AMOUNTS.get(ability.name, DEFAULTS["shield_amount"])
        return Debuff(type="shielded", duration=PERSISTENT, shield_amount=amount)
    else:
        entry = DEBUFF_TABLE.get(ability.effect or "")
    if not entry:
        if ability.effect:
            logger.debug("No debuff for effect %r (%s)", ability.effect, ability.name)
        return None
    debuff = Debuff(**entry)
    if debuff.type in STACK_CAPS:
        debuff.max_stacks = STACK_CAPS[debuff.type]
    return debuff


def apply_debuff(target: CombatantInstance, debuff: Debuff) -> Debuff:
    """Install `debuff` on the target, merging into an existing entry of the same type.

    Stacking types gain a stack up to their cap, shields add their amounts,
    `protected` keeps the existing entry and every other type refreshes in
    place. Returns the live entry.
    """
    existing = get_debuff(target, debuff.type)
    if existing is None:
        target.debuffs.append(debuff)
        return debuff

    if debuff.type in STACK_CAPS:
        cap = STACK_CAPS[debuff.type]
        existing.stacks = clamp((existing.stacks or 1) + 1, 1, cap)
        existing.max_stacks = cap
        if debuff.type in DAMAGE_PER_STACK:
            existing.damage = DAMAGE_PER_STACK[debuff.type] * existing.stacks
        existing.duration = max(existing.duration, debuff.duration)
    elif debuff.type == "shielded":
        existing.shield_amount = int(existing.shield_amount or 0) + int(debuff.shield_amount or 0)
    elif debuff.type == "protected":
        pass
    else:
        existing.duration = debuff.duration
        existing.damage = debuff.damage
        existing.damage_reduction = debuff.damage_reduction
    return existing


def absorb_with_shield(target: CombatantInstance, amount: int) -> Tuple[int, int]:
    """Let a `shielded` debuff soak incoming damage. Returns (remaining, absorbed)."""
    shield = get_debuff(target, "shielded")
    if not shield or not shield.shield_amount or amount <= 0:
        return amount, 0
    absorbed = min(shield.shield_amount, amount)
    shield.shield_amount -= absorbed
    if shield.shield_amount <= 0:
        remove_debuff(target, "shielded")
    return amount - absorbed, absorbed


def tick_durations(debuffs: List[Debuff]) -> List[Debuff]:
    """Decrement duration for non-permanent debuffs; drop expired ones."""
    kept: List[Debuff] = []
    for debuff in debuffs:
        if is_permanent(debuff):
            kept.append(debuff)
            continue
        debuff.duration -= 1
        if debuff.duration > 0:
            kept.append(debuff)
    return kept


def tick_dots(card: CombatantInstance, log: List[str]) -> None:
    """Apply periodic damage from every damaging debuff while the card is alive."""
    for debuff in card.debuffs:
        if not debuff.damage or card.hp <= 0:
            continue
        card.hp = clamp(card.hp - debuff.damage, 0, card.max_hp)
        log.append(f"{card.name} takes {debuff.damage} {debuff.type} damage.")
        if card.hp == 0:
            log.append(f"{card.name} is defeated.")


def tick_cooldowns(card: CombatantInstance) -> None:
    for ability in card.abilities:
        if ability.current_cooldown > 0:
            ability.current_cooldown -= 1


def end_of_turn(cards: Iterable[CombatantInstance], log: List[str]) -> None:
    """End-of-turn pipeline: cooldowns, DoTs, duration tick."""
    for card in cards:
        tick_cooldowns(card)
        tick_dots(card, log)
        card.debuffs = tick_durations(card.debuffs)
