# toybattle/engine/catalog.py
from typing import Any, Dict, List, Optional

from .models import CombatantTemplate
from ..content.cards import CARDS


def load_catalog(cards: Optional[Dict[str, Dict[str, Any]]] = None) -> List[CombatantTemplate]:
    """Build immutable combatant templates from catalog content, in declaration order."""
    source = CARDS if cards is None else cards
    return [CombatantTemplate.from_dict(key, data) for key, data in source.items()]


CATALOG: List[CombatantTemplate] = load_catalog()


def template_named(name: str, catalog: Optional[List[CombatantTemplate]] = None) -> CombatantTemplate:
    for template in catalog or CATALOG:
        if template.name == name:
            return template
    raise KeyError(name)
