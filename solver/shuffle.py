"""Injizierbare Permutation für die zufällige Reihenfolge von Tagen, Lehrkräften
und Räumen. Ein eigener Zufallsgenerator pro Lauf statt des globalen `random`.
"""

import random
from typing import Callable, Optional, Sequence, TypeVar

T = TypeVar("T")

# Nimmt eine Sequenz, gibt eine neue Liste in permutierter Reihenfolge zurück
Shuffler = Callable[[Sequence[T]], list[T]]


def seeded_shuffler(seed: Optional[int]) -> Shuffler:
    """Gleichverteilte Permutation aus einem eigenen random.Random(seed)."""
    rng = random.Random(seed)

    def shuffle(items: Sequence[T]) -> list[T]:
        result = list(items)
        rng.shuffle(result)
        return result

    return shuffle


def identity_shuffler(items: Sequence[T]) -> list[T]:
    """Behält die Eingabereihenfolge bei (für deterministische Tests)."""
    return list(items)
