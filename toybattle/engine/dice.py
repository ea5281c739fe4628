# toybattle/engine/dice.py
import random
import time
from typing import Any, List, Sequence, TypeVar

T = TypeVar("T")


def new_seed() -> int:
    return int(time.time() * 1000) & 0xFFFFFFFF


def rng_for(seed: int) -> random.Random:
    # deterministic per match seed
    return random.Random(seed)


def roll_chance(chance: float, r: Any) -> bool:
    if chance <= 0:
        return False
    return r.random() < chance


def pick(items: Sequence[T], r: Any) -> T:
    return r.choice(list(items))


def pick_many(items: Sequence[T], count: int, r: Any) -> List[T]:
    """Choose up to `count` items uniformly without replacement."""
    pool = list(items)
    return r.sample(pool, min(count, len(pool)))
