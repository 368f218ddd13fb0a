"""Reply text generation for triaged check-ins."""
from __future__ import annotations

import random
from typing import Protocol, Sequence, TypeVar

from .rules import RiskLevel
from .templates import DEFAULT_REMEDY, GREEN_TIPS, YELLOW_REMEDIES, get_templates

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything exposing ``choice``; ``random.Random`` satisfies it."""

    def choice(self, seq: Sequence[T]) -> T:
        ...


_default_rng = random.Random()


def pick_green_tip(rng: RandomSource | None = None) -> str:
    return (rng or _default_rng).choice(GREEN_TIPS)


def generate_response(
    risk_level: RiskLevel,
    symptoms: Sequence[str],
    *,
    language: str | None = None,
    rng: RandomSource | None = None,
) -> str:
    """
    Render the reply for a classified check-in.

    Yellow and red replies name the first symptom in ``symptoms``, which the
    extractor returns in keyword-table order. Green replies embed one tip drawn
    from ``rng``.
    """
    templates = get_templates(language)
    level = RiskLevel(risk_level)

    if level is RiskLevel.GREEN:
        return templates.green.format(tip=pick_green_tip(rng))

    if not symptoms:
        raise ValueError(f"A {level.value} reply needs at least one symptom")
    primary_symptom = symptoms[0]

    if level is RiskLevel.YELLOW:
        remedy = YELLOW_REMEDIES.get(primary_symptom, DEFAULT_REMEDY)
        return templates.yellow.format(symptom=primary_symptom, remedy=remedy)

    return templates.red.format(symptom=primary_symptom)
