from __future__ import annotations
import random
from typing import MutableSequence, Sequence, TypeVar

T = TypeVar("T")

def shuffle_in_place(items: MutableSequence[T], rng: random.Random | None = None) -> MutableSequence[T]:
    """Fisher-Yates over ``items`` itself. Only use on a sequence you own."""
    randint = rng.randint if rng is not None else random.randint
    for i in range(len(items) - 1, 0, -1):
        j = randint(0, i)
        items[i], items[j] = items[j], items[i]
    return items

def shuffle(items: Sequence[T], rng: random.Random | None = None) -> list[T]:
    return list(shuffle_in_place(list(items), rng))
