# toybattle/content/balance.py
DEFAULTS = {
    "roster_size": 4,
    "persistent_duration": 999,
    "shield_amount": 10,
    "revive_fraction": 0.5,
    "battery_drain_amount": 20,
    "puppet_master_amount": 15,
    "extinction_targets": 2,
    "crit_multiplier": 2,
}

# effect tag -> debuff installed on the target
DEBUFF_TABLE = {
    "freeze": {"type": "frozen", "duration": 2},
    "burn": {"type": "burned", "duration": 3, "damage": 5},
    "stun": {"type": "stunned", "duration": 1},
    "poison": {"type": "poisoned", "duration": 4, "damage": 3},
    "weaken": {"type": "weakened", "duration": 6, "damage_reduction": 0.3},
    "water_squirt": {"type": "wet", "duration": 999, "stacks": 1, "crit_chance_increase": 0.2},
    "bath_bomb": {"type": "protected", "duration": 999, "damage_reduction": 0.15},
}

# ability name -> debuff, takes precedence over the effect tag
NAMED_DEBUFFS = {
    "Fire Aura": {"type": "fire_aura", "duration": 999, "damage": 5, "stacks": 1},
}

# ability name -> shield amount for the "shield" effect
SHIELD_AMOUNTS = {
    "Shield Boost": 15,
}

STACK_CAPS = {
    "fire_aura": 3,
    "wet": 3,
}

# per-stack tick damage for stacking debuffs
DAMAGE_PER_STACK = {
    "fire_aura": 5,
}

CANT_ACT = ("stunned", "frozen")

LAYOUT = {
    "spacing": 2,
    "left": -3,
    "player1_z": 2,
    "player2_z": -2,
    "effect_height": 0.5,
}
