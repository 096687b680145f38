from __future__ import annotations

import random
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol


class RandomSource(Protocol):
    def random(self) -> float: ...


@dataclass(frozen=True)
class RotationCandidate:
    content_type: str
    content_id: uuid.UUID
    weight: int | None = 1
    position: int = 0

    @property
    def effective_weight(self) -> int:
        return 1 if self.weight is None else self.weight


def eligible_candidates(items: Iterable[RotationCandidate]) -> list[RotationCandidate]:
    eligible = [item for item in items if item.effective_weight > 0]
    # sorted() is stable, so equal positions keep their incoming order.
    return sorted(eligible, key=lambda item: item.position)


def build_random_source(seed: int | None = None) -> RandomSource:
    if seed is None:
        return random.SystemRandom()
    return random.Random(seed)


class WeightedContentRotator:
    """Roulette-wheel pick over campaign content, proportional to weight."""

    def __init__(self, random_source: RandomSource | None = None):
        self._random = random_source if random_source is not None else random.SystemRandom()

    def select(self, items: Iterable[RotationCandidate]) -> RotationCandidate | None:
        eligible = eligible_candidates(items)
        if not eligible:
            return None
        if len(eligible) == 1:
            return eligible[0]

        total = sum(item.effective_weight for item in eligible)
        point = self._random.random() * total
        cumulative = 0
        for item in eligible:
            cumulative += item.effective_weight
            if cumulative > point:
                return item
        return eligible[-1]
