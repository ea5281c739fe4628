# toybattle/engine/rules.py
import math


def clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


def reduce_by(amount: int, fraction: float) -> int:
    return int(math.floor(amount * (1 - fraction)))


def multiply(amount: int, factor: float) -> int:
    return int(math.floor(amount * factor))


def hp_fraction(hp: int, hp_max: int) -> float:
    return hp / max(1, hp_max)
