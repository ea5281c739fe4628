# toybattle/engine/resolver.py
"""Ability resolution.

`resolve_ability` is the single place where a cast turns into damage,
healing and debuffs. It only touches the combatants handed to it, so the
networked room handler and the offline `LocalMatch` run exactly the same
code.
"""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

from .catalog import CATALOG
from .dice import pick, pick_many, roll_chance
from .effects import (
    absorb_with_shield,
    apply_debuff,
    build_debuff,
    can_act,
    get_debuff,
)
from .models import (
    AbilityInstance,
    AbilityOutcome,
    AbilityTemplate,
    CombatantInstance,
    CombatantTemplate,
)
from .rules import clamp, hp_fraction, multiply, reduce_by
from ..content.balance import DEFAULTS

logger = logging.getLogger(__name__)


def living(cards: Sequence[CombatantInstance]) -> List[CombatantInstance]:
    return [c for c in cards if c.hp > 0]


def resolve_targets(
    ability: AbilityTemplate,
    caster: CombatantInstance,
    target_id: Optional[str],
    allies: Sequence[CombatantInstance],
    enemies: Sequence[CombatantInstance],
    rng: Any,
) -> List[CombatantInstance]:
    target_type = ability.target_type
    if target_type == "single":
        for card in list(allies) + list(enemies):
            if card.id == target_id and card.hp > 0:
                return [card]
        return []
    if target_type == "all":
        if ability.name == "Extinction Protocol":
            return pick_many(living(enemies), DEFAULTS["extinction_targets"], rng)
        return living(enemies)
    if target_type == "self":
        return [caster]
    if target_type == "allies":
        return living(allies)
    if target_type == "dead_allies":
        return [c for c in allies if c.id == target_id and c.hp <= 0]
    if target_type == "random":
        return living(enemies)
    return []


def arm_cooldown(caster: CombatantInstance, ability: AbilityTemplate) -> None:
    if not ability.cooldown:
        return
    for instance in caster.abilities:
        if instance.template.name == ability.name:
            instance.current_cooldown = int(ability.cooldown)
            return


def outgoing_damage(
    ability: AbilityTemplate,
    caster: CombatantInstance,
    target: CombatantInstance,
    rng: Any,
) -> tuple[int, bool]:
    """Damage one target would take before shields. Returns (amount, critical)."""
    amount = int(ability.damage or 0)
    weakened = get_debuff(caster, "weakened")
    if weakened and weakened.damage_reduction:
        amount = reduce_by(amount, weakened.damage_reduction)

    critical = False
    wet = get_debuff(target, "wet")
    if wet and wet.crit_chance_increase:
        chance = (wet.stacks or 1) * wet.crit_chance_increase
        if roll_chance(chance, rng):
            amount = multiply(amount, DEFAULTS["crit_multiplier"])
            critical = True

    protected = get_debuff(target, "protected")
    if protected and protected.damage_reduction:
        amount = reduce_by(amount, protected.damage_reduction)
    return amount, critical


def deal_damage(target: CombatantInstance, amount: int) -> tuple[int, int]:
    """Shield first, then hp. Returns (hp_lost, absorbed)."""
    remaining, absorbed = absorb_with_shield(target, amount)
    hp_lost = min(remaining, target.hp) if remaining > 0 else 0
    target.hp = clamp(target.hp - remaining, 0, target.max_hp)
    return hp_lost, absorbed


def heal(target: CombatantInstance, amount: int) -> int:
    healed = max(0, min(amount, target.max_hp - target.hp))
    target.hp = clamp(target.hp + healed, 0, target.max_hp)
    return healed


def _apply_per_target(outcome: AbilityOutcome, rng: Any) -> None:
    ability, caster = outcome.ability, outcome.caster
    for target in outcome.targets:
        if ability.damage:
            amount, critical = outgoing_damage(ability, caster, target, rng)
            hp_lost, absorbed = deal_damage(target, amount)
            entry = {"cardId": target.id, "amount": hp_lost}
            if absorbed:
                entry["absorbed"] = absorbed
            if critical:
                entry["critical"] = True
                logger.debug("Critical hit: %s -> %s for %s", caster.name, target.name, amount)
                outcome.messages.append(f"CRITICAL HIT! {caster.name} hits {target.name} for {amount}.")
            outcome.damages.append(entry)
        if ability.heal:
            outcome.heals.append({"cardId": target.id, "amount": heal(target, int(ability.heal))})
        if ability.effect:
            debuff = build_debuff(ability)
            if debuff and target.hp > 0:
                live = apply_debuff(target, debuff)
                outcome.debuffs_applied.append({"cardId": target.id, "debuff": live.to_dict()})

    names = ", ".join(t.name for t in outcome.targets)
    outcome.messages.insert(0, f"{caster.name} casts {ability.name} on {names}.")


def _battery_drain(outcome: AbilityOutcome, allies: Sequence[CombatantInstance]) -> None:
    total = 0
    for enemy in outcome.targets:
        drained = min(DEFAULTS["battery_drain_amount"], enemy.hp)
        enemy.hp = clamp(enemy.hp - drained, 0, enemy.max_hp)
        total += drained
        outcome.damages.append({"cardId": enemy.id, "amount": drained})

    receivers = living(allies)
    if receivers:
        share = total // len(receivers)
        for ally in receivers:
            outcome.heals.append({"cardId": ally.id, "amount": heal(ally, share)})
    outcome.messages.append(
        f"{outcome.caster.name} drains {total} HP and shares it with {len(receivers)} allies!"
    )


def _chaos_shuffle(outcome: AbilityOutcome, catalog: Sequence[CombatantTemplate], rng: Any) -> None:
    for card in outcome.targets:
        percentage = hp_fraction(card.hp, card.max_hp)
        template = pick(catalog, rng)
        card.template = template
        card.abilities = [AbilityInstance(template=a) for a in template.abilities]
        card.hp = clamp(max(1, int(template.max_hp * percentage)), 1, template.max_hp)
        card.debuffs = []
    outcome.messages.append(
        f"{outcome.caster.name} casts Chaos Shuffle! All enemy cards have been transformed!"
    )


def _revive(outcome: AbilityOutcome) -> None:
    for card in outcome.targets:
        card.hp = clamp(int(card.max_hp * DEFAULTS["revive_fraction"]), 1, card.max_hp)
        outcome.heals.append({"cardId": card.id, "amount": card.hp})
        outcome.messages.append(f"{outcome.caster.name} revives {card.name} with {card.hp} HP!")


def _puppet_master(outcome: AbilityOutcome, allies: Sequence[CombatantInstance], rng: Any) -> None:
    caster = outcome.caster
    enemy = pick(outcome.targets, rng)
    outcome.targets = [enemy]
    drained = min(DEFAULTS["puppet_master_amount"], enemy.hp)
    enemy.hp = clamp(enemy.hp - drained, 0, enemy.max_hp)
    outcome.damages.append({"cardId": enemy.id, "amount": drained})

    wounded = [c for c in allies if 0 < c.hp < c.max_hp]
    if not wounded:
        outcome.messages.append(f"{caster.name} steals {drained} HP from {enemy.name}!")
        return
    ally = pick(wounded, rng)
    healed = heal(ally, drained)
    outcome.heals.append({"cardId": ally.id, "amount": healed})
    outcome.messages.append(
        f"{caster.name} steals {drained} HP from {enemy.name} and gives it to {ally.name}!"
    )


def resolve_ability(
    ability: Optional[AbilityTemplate],
    caster: Optional[CombatantInstance],
    target_id: Optional[str],
    allies: Sequence[CombatantInstance],
    enemies: Sequence[CombatantInstance],
    rng: Any,
    catalog: Optional[Sequence[CombatantTemplate]] = None,
    echo_source: Optional[AbilityTemplate] = None,
    arm: bool = True,
) -> AbilityOutcome:
    """Resolve one cast of `ability` by `caster` aimed at `target_id`.

    `allies` is the caster's roster and `enemies` the opposing one, both in
    storage order. `echo_source` is the last ability the opposing side cast,
    replayed by Spell Echo. The returned outcome has `resolved=False` when
    the cast was aborted, in which case nothing was mutated.
    """
    outcome = AbilityOutcome(ability=ability, caster=caster)
    if caster is None or ability is None:
        outcome.resolved = False
        outcome.messages.append("Nothing to cast.")
        return outcome
    if caster.hp <= 0:
        outcome.resolved = False
        outcome.messages.append(f"{caster.name} is defeated and cannot act.")
        return outcome
    if not can_act(caster):
        outcome.resolved = False
        outcome.messages.append(f"{caster.name} cannot act this turn.")
        logger.debug("%s is stunned or frozen; %s aborted", caster.name, ability.name)
        return outcome

    if ability.effect == "spell_echo":
        if echo_source is None or echo_source.effect == "spell_echo":
            outcome.resolved = False
            outcome.messages.append(f"{caster.name} has no enemy spell to echo.")
            return outcome
        echoed = resolve_ability(
            echo_source, caster, target_id, allies, enemies, rng,
            catalog=catalog, echo_source=None, arm=False,
        )
        if echoed.resolved:
            arm_cooldown(caster, ability)
            echoed.echoed = ability
            echoed.messages.insert(0, f"{caster.name} echoes {echo_source.name}!")
        return echoed

    outcome.targets = resolve_targets(ability, caster, target_id, allies, enemies, rng)
    if not outcome.targets:
        outcome.resolved = False
        outcome.messages.append(f"{ability.name} has no valid target.")
        return outcome

    if arm:
        arm_cooldown(caster, ability)

    effect = ability.effect
    if effect == "battery_drain":
        _battery_drain(outcome, allies)
    elif effect == "chaos_shuffle":
        _chaos_shuffle(outcome, catalog or CATALOG, rng)
    elif effect == "revive":
        _revive(outcome)
    elif effect == "puppet_master":
        _puppet_master(outcome, allies, rng)
    else:
        _apply_per_target(outcome, rng)
    return outcome
