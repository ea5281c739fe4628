# toybattle/engine/models.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

PLAYER1 = "player1"
PLAYER2 = "player2"
ROLES = (PLAYER1, PLAYER2)

TARGET_TYPES = ("single", "all", "self", "allies", "dead_allies", "random")
ROOM_STATUSES = ("waiting", "ready", "in_progress", "finished", "abandoned")
TURN_PHASES = ("awaiting_selection", "awaiting_target", "resolving", "turn_complete")


class BattleError(Exception):
    """Base class for errors raised inside the battle core."""


class RoomError(BattleError):
    """Structural rejection; the message is shown to the participant as-is."""


def other_role(role: str) -> str:
    return PLAYER2 if role == PLAYER1 else PLAYER1


def _compact(data: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class AbilityTemplate:
    name: str
    description: str = ""
    target_type: str = "single"
    damage: Optional[int] = None
    heal: Optional[int] = None
    effect: Optional[str] = None
    cooldown: Optional[int] = None
    vfx: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AbilityTemplate":
        target_type = data.get("target_type", "single")
        if target_type not in TARGET_TYPES:
            raise ValueError(f"unknown target type {target_type!r} for {data.get('name')!r}")
        return cls(
            name=data["name"],
            description=data.get("description", ""),
            target_type=target_type,
            damage=data.get("damage"),
            heal=data.get("heal"),
            effect=data.get("effect"),
            cooldown=data.get("cooldown"),
            vfx=data.get("vfx"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "name": self.name,
            "description": self.description,
            "damage": self.damage,
            "heal": self.heal,
            "effect": self.effect,
            "targetType": self.target_type,
            "cooldown": self.cooldown,
        })


@dataclass(frozen=True)
class CombatantTemplate:
    key: str
    name: str
    max_hp: int
    texture: str
    abilities: Tuple[AbilityTemplate, ...] = ()

    @classmethod
    def from_dict(cls, key: str, data: Dict[str, Any]) -> "CombatantTemplate":
        return cls(
            key=key,
            name=data["name"],
            max_hp=int(data["max_hp"]),
            texture=data.get("texture", ""),
            abilities=tuple(AbilityTemplate.from_dict(entry) for entry in data.get("abilities", [])),
        )


@dataclass
class AbilityInstance:
    template: AbilityTemplate
    current_cooldown: int = 0

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def ready(self) -> bool:
        return self.current_cooldown == 0

    def to_dict(self) -> Dict[str, Any]:
        data = self.template.to_dict()
        data["currentCooldown"] = self.current_cooldown
        return data


@dataclass
class Debuff:
    type: str
    duration: int
    damage: Optional[int] = None
    stacks: Optional[int] = None
    max_stacks: Optional[int] = None
    shield_amount: Optional[int] = None
    damage_reduction: Optional[float] = None
    crit_chance_increase: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return _compact({
            "type": self.type,
            "duration": self.duration,
            "damage": self.damage,
            "stacks": self.stacks,
            "maxStacks": self.max_stacks,
            "shieldAmount": self.shield_amount,
            "damageReduction": self.damage_reduction,
            "critChanceIncrease": self.crit_chance_increase,
        })


@dataclass
class CombatantInstance:
    id: str
    template: CombatantTemplate
    hp: int
    abilities: List[AbilityInstance] = field(default_factory=list)
    debuffs: List[Debuff] = field(default_factory=list)
    position: Tuple[float, float, float] = (0, 0, 0)

    @classmethod
    def from_template(
        cls,
        template: CombatantTemplate,
        card_id: str,
        position: Tuple[float, float, float] = (0, 0, 0),
    ) -> "CombatantInstance":
        return cls(
            id=card_id,
            template=template,
            hp=template.max_hp,
            abilities=[AbilityInstance(template=a) for a in template.abilities],
            position=position,
        )

    @property
    def name(self) -> str:
        return self.template.name

    @property
    def max_hp(self) -> int:
        return self.template.max_hp

    @property
    def texture(self) -> str:
        return self.template.texture

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def shield(self) -> int:
        for debuff in self.debuffs:
            if debuff.type == "shielded":
                return int(debuff.shield_amount or 0)
        return 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "maxHp": self.max_hp,
            "hp": self.hp,
            "shield": self.shield,
            "texture": self.texture,
            "abilities": [a.to_dict() for a in self.abilities],
            "debuffs": [d.to_dict() for d in self.debuffs],
            "position": list(self.position),
        }


@dataclass
class AbilityOutcome:
    ability: Optional[AbilityTemplate]
    caster: Optional[CombatantInstance]
    targets: List[CombatantInstance] = field(default_factory=list)
    damages: List[Dict[str, Any]] = field(default_factory=list)      # [{"cardId", "amount"}]
    heals: List[Dict[str, Any]] = field(default_factory=list)
    debuffs_applied: List[Dict[str, Any]] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)
    resolved: bool = True
    echoed: Optional[AbilityTemplate] = None       # the Spell Echo that replayed `ability`

    @property
    def total_damage(self) -> int:
        return sum(entry["amount"] for entry in self.damages)

    @property
    def total_healing(self) -> int:
        return sum(entry["amount"] for entry in self.heals)


@dataclass
class CastResult:
    role: str
    target_id: Optional[str]
    ability_index: int
    outcome: AbilityOutcome
    visual_effect: Optional[Dict[str, Any]] = None
    combat_log_entry: Dict[str, Any] = field(default_factory=dict)

    def to_event(self) -> Dict[str, Any]:
        """Payload for game:abilityExecuted."""
        outcome = self.outcome
        return {
            "playerRole": self.role,
            "casterId": outcome.caster.id,
            "targetId": self.target_id,
            "abilityIndex": self.ability_index,
            "ability": outcome.ability.to_dict(),
            "damages": list(outcome.damages),
            "heals": list(outcome.heals),
            "debuffsApplied": list(outcome.debuffs_applied),
            "visualEffect": self.visual_effect,
            "combatLogEntry": self.combat_log_entry,
        }


@dataclass
class MatchRoom:
    id: str
    player1: Optional[str] = None
    player2: Optional[str] = None
    status: str = "waiting"                 # see ROOM_STATUSES
    seed: int = 0
    rng: Any = field(default=None, repr=False)
    player1_cards: Optional[List[CombatantInstance]] = None
    player2_cards: Optional[List[CombatantInstance]] = None
    current_turn: Optional[str] = None      # "player1" | "player2"
    phase: str = "awaiting_selection"       # see TURN_PHASES
    turn_number: int = 0
    selections: Dict[str, Optional[Tuple[str, int]]] = field(
        default_factory=lambda: {PLAYER1: None, PLAYER2: None}
    )
    last_cast: Dict[str, AbilityTemplate] = field(default_factory=dict)  # role -> last ability cast
    winner: Optional[str] = None
    log: List[str] = field(default_factory=list)

    def role_of(self, participant: Optional[str]) -> Optional[str]:
        if participant is None:
            return None
        if participant == self.player1:
            return PLAYER1
        if participant == self.player2:
            return PLAYER2
        return None

    def roster(self, role: str) -> List[CombatantInstance]:
        cards = self.player1_cards if role == PLAYER1 else self.player2_cards
        return cards or []

    def find_card(self, card_id: Optional[str]) -> Optional[CombatantInstance]:
        for role in ROLES:
            for card in self.roster(role):
                if card.id == card_id:
                    return card
        return None

    def selection_fields(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for role in ROLES:
            picked = self.selections.get(role)
            data[f"{role}SelectedCard"] = picked[0] if picked else None
            data[f"{role}SelectedAbility"] = picked[1] if picked else None
        return data

    def summary(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "player1": self.player1,
            "player2": self.player2,
            "status": self.status,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.summary()
        data.update({
            "currentTurn": self.current_turn,
            "phase": self.phase,
            "turnNumber": self.turn_number,
            "winner": self.winner,
            "player1Cards": [c.to_dict() for c in self.player1_cards] if self.player1_cards is not None else None,
            "player2Cards": [c.to_dict() for c in self.player2_cards] if self.player2_cards is not None else None,
        })
        data.update(self.selection_fields())
        return data

    def state_sync(self) -> Dict[str, Any]:
        """Authoritative full-state payload for game:stateSync."""
        data = {
            "player1Cards": [c.to_dict() for c in self.roster(PLAYER1)],
            "player2Cards": [c.to_dict() for c in self.roster(PLAYER2)],
            "currentTurn": self.current_turn,
        }
        data.update(self.selection_fields())
        return data
