from toybattle.engine import effects
from toybattle.engine.catalog import template_named
from toybattle.engine.models import CombatantInstance, Debuff


def make_card(name="Robot Guardian", card_id="player2-card-0"):
    return CombatantInstance.from_template(template_named(name), card_id)


def ability(card_name, ability_name):
    template = template_named(card_name)
    return next(a for a in template.abilities if a.name == ability_name)


def test_build_debuff_from_effect_table():
    debuff = effects.build_debuff(ability("Dino", "Fire Breath"))
    assert debuff.type == "burned"
    assert debuff.duration == 3
    assert debuff.damage == 5


def test_fire_aura_is_named_and_persistent():
    debuff = effects.build_debuff(ability("Arch Wizard", "Fire Aura"))
    assert debuff.type == "fire_aura"
    assert effects.is_permanent(debuff)
    assert debuff.max_stacks == 3


def test_shield_amount_depends_on_ability():
    assert effects.build_debuff(ability("Robot Guardian", "Shield Boost")).shield_amount == 15
    assert effects.build_debuff(ability("Brick Dude", "Block Defence")).shield_amount == 10


def test_unknown_effect_builds_nothing():
    assert effects.build_debuff(ability("Arch Wizard", "Chaos Shuffle")) is None
    assert effects.build_debuff(ability("Toy Wizard", "Pyroblast")) is None


def test_timed_debuff_refreshes_instead_of_duplicating():
    card = make_card()
    effects.apply_debuff(card, Debuff(type="poisoned", duration=4, damage=3))
    card.debuffs[0].duration = 1
    effects.apply_debuff(card, Debuff(type="poisoned", duration=4, damage=3))
    assert len(card.debuffs) == 1
    assert card.debuffs[0].duration == 4


def test_shields_add_up():
    card = make_card()
    effects.apply_debuff(card, Debuff(type="shielded", duration=999, shield_amount=15))
    effects.apply_debuff(card, Debuff(type="shielded", duration=999, shield_amount=10))
    assert card.shield == 25


def test_wet_stacks_cap_at_three():
    card = make_card()
    squirt = ability("Duckie", "Water Squirt")
    for _ in range(5):
        effects.apply_debuff(card, effects.build_debuff(squirt))
    wet = effects.get_debuff(card, "wet")
    assert wet.stacks == 3
    assert len(card.debuffs) == 1


def test_fire_aura_damage_grows_with_stacks():
    card = make_card()
    aura = ability("Arch Wizard", "Fire Aura")
    for _ in range(3):
        effects.apply_debuff(card, effects.build_debuff(aura))
    assert effects.get_debuff(card, "fire_aura").damage == 15


def test_absorb_partial_and_full():
    card = make_card()
    effects.apply_debuff(card, Debuff(type="shielded", duration=999, shield_amount=10))
    assert effects.absorb_with_shield(card, 4) == (0, 4)
    assert card.shield == 6
    assert effects.absorb_with_shield(card, 20) == (14, 6)
    assert not effects.has_debuff(card, "shielded")


def test_tick_durations_keeps_persistent_and_drops_expired():
    debuffs = [
        Debuff(type="stunned", duration=1),
        Debuff(type="burned", duration=3, damage=5),
        Debuff(type="wet", duration=999, stacks=1),
    ]
    kept = effects.tick_durations(debuffs)
    assert [(d.type, d.duration) for d in kept] == [("burned", 2), ("wet", 999)]


def test_dots_stop_at_zero_and_skip_dead_cards():
    card = make_card()
    card.hp = 4
    effects.apply_debuff(card, Debuff(type="burned", duration=3, damage=5))
    effects.apply_debuff(card, Debuff(type="poisoned", duration=4, damage=3))
    log = []
    effects.tick_dots(card, log)
    assert card.hp == 0
    assert log[-1] == "Robot Guardian is defeated."
    assert len([line for line in log if "damage" in line]) == 1


def test_end_of_turn_ticks_cooldowns():
    card = make_card()
    card.abilities[0].current_cooldown = 2
    effects.end_of_turn([card], [])
    assert card.abilities[0].current_cooldown == 1
    effects.end_of_turn([card], [])
    effects.end_of_turn([card], [])
    assert card.abilities[0].current_cooldown == 0


def test_stunned_and_frozen_cannot_act():
    card = make_card()
    assert effects.can_act(card)
    effects.apply_debuff(card, Debuff(type="frozen", duration=2))
    assert not effects.can_act(card)
