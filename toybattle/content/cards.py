# toybattle/content/cards.py
CARDS = {
    "toy_wizard": {
        "name": "Toy Wizard",
        "max_hp": 80,
        "texture": "/wizardnft.webp",
        "abilities": [
            {"name": "Ice Nova", "description": "Freeze all enemies", "effect": "freeze",
             "target_type": "all", "vfx": "ice_nova"},
            {"name": "Pyroblast", "description": "Heavy fire damage (35 HP)", "damage": 35,
             "target_type": "single", "vfx": "fireball"},
            {"name": "Lightning Zap", "description": "Damage all enemies", "damage": 15,
             "target_type": "all", "vfx": "lightning"},
        ],
    },
    "robot_guardian": {
        "name": "Robot Guardian",
        "max_hp": 120,
        "texture": "/robotnft.webp",
        "abilities": [
            {"name": "Laser Beam", "description": "High damage", "damage": 30,
             "target_type": "single", "vfx": "laser_beam"},
            {"name": "Shield Boost", "description": "Shield all allies absorbing 15 damage",
             "effect": "shield", "target_type": "allies", "vfx": "shield_boost"},
            {"name": "Recharge Batteries", "description": "Revive a defeated ally with 50% HP",
             "effect": "revive", "target_type": "dead_allies", "vfx": "resurrection"},
        ],
    },
    "dino": {
        "name": "Dino",
        "max_hp": 100,
        "texture": "/dinonft.webp",
        "abilities": [
            {"name": "Fire Breath", "description": "Burn single target", "damage": 23,
             "effect": "burn", "target_type": "single", "vfx": "fire_breath"},
            {"name": "Mecha Roar", "description": "Weaken all enemies (30% less damage for 6 turns)",
             "effect": "weaken", "target_type": "all", "vfx": "mecha_roar"},
            {"name": "Extinction Protocol",
             "description": "Fire 2 rockets at 2 random enemies dealing massive damage",
             "damage": 45, "target_type": "all", "vfx": "extinction_protocol"},
        ],
    },
    "brick_dude": {
        "name": "Brick Dude",
        "max_hp": 110,
        "texture": "/brickdudenft.webp",
        "abilities": [
            {"name": "Sword Strike", "description": "Basic attack", "damage": 25,
             "target_type": "single", "vfx": "sword_strike"},
            {"name": "Block Defence", "description": "Shield all allies absorbing 10 damage",
             "effect": "shield", "target_type": "allies"},
            {"name": "Whirlwind Slash", "description": "Spin attack damaging all enemies", "damage": 20,
             "target_type": "all", "vfx": "whirlwind_slash"},
        ],
    },
    "duckie": {
        "name": "Duckie",
        "max_hp": 70,
        "texture": "/duckienft.webp",
        "abilities": [
            {"name": "Water Squirt",
             "description": "Squirt water at enemy (20 dmg + wet debuff, +20% crit chance, stacks 3x)",
             "damage": 20, "effect": "water_squirt", "target_type": "single", "vfx": "water_squirt"},
            {"name": "Bath Bomb", "description": "Throw a colorful bath bomb, reduce team damage taken by 15%",
             "effect": "bath_bomb", "target_type": "allies", "vfx": "bath_bomb"},
            {"name": "Duck Swarm", "description": "Summon a swarm of ducks to attack all enemies", "damage": 20,
             "target_type": "all", "vfx": "duck_swarm"},
        ],
    },
    "arch_wizard": {
        "name": "Arch Wizard",
        "max_hp": 60,
        "texture": "/archwizardnft.webp",
        "abilities": [
            {"name": "Chaos Shuffle", "description": "Transform all enemy cards into random ones",
             "effect": "chaos_shuffle", "target_type": "all", "cooldown": 5, "vfx": "chaos_shuffle"},
            {"name": "Fire Aura", "description": "Burn all enemies", "effect": "burn",
             "target_type": "all", "vfx": "fire_breath"},
            {"name": "Battery Drain", "description": "Leech 20 HP from all enemies",
             "effect": "battery_drain", "target_type": "all", "vfx": "battery_drain"},
        ],
    },
    "voodoo": {
        "name": "Voodoo",
        "max_hp": 90,
        "texture": "/voodoonft.webp",
        "abilities": [
            {"name": "Puppet Master", "description": "Steal 15 HP from a random enemy and give it to a random ally",
             "effect": "puppet_master", "target_type": "random", "vfx": "puppet_master"},
            {"name": "Cutlass Slash", "description": "Single target", "damage": 30, "target_type": "single"},
            {"name": "Rum Heal", "description": "Heal self", "heal": 30, "target_type": "self"},
        ],
    },
    "windup_toy": {
        "name": "Wind-up Toy",
        "max_hp": 85,
        "texture": "/winduptoynft.webp",
        "abilities": [
            {"name": "Ray Gun", "description": "Laser damage", "damage": 28, "target_type": "single"},
            {"name": "Mind Control", "description": "Stun target", "effect": "stun", "target_type": "single"},
            {"name": "Probe", "description": "Damage over time", "damage": 10, "effect": "poison",
             "target_type": "single"},
        ],
    },
    "music_box": {
        "name": "Music Box",
        "max_hp": 75,
        "texture": "/musicboxnft.webp",
        "abilities": [
            {"name": "Spell Echo", "description": "Replay the last ability your opponent cast",
             "effect": "spell_echo", "target_type": "single", "cooldown": 3, "vfx": "spell_echo"},
            {"name": "Lullaby", "description": "Put one enemy to sleep", "effect": "stun",
             "target_type": "single"},
            {"name": "Chime Wave", "description": "Ring out at all enemies", "damage": 18,
             "target_type": "all", "vfx": "lightning"},
        ],
    },
}
