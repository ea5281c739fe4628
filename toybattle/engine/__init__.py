# toybattle/engine/__init__.py
from .resolver import resolve_ability
from .turns import auto_select, check_winner, end_turn, select_target, start_match

__all__ = ["resolve_ability", "auto_select", "check_winner", "end_turn", "select_target", "start_match"]
