"""
Attraction and compatibility scoring

Both scores are weighted sums of caller-supplied factors, clamped to
0-100 and rounded half away from zero. The weights are fixed game rules.
"""

import math
from typing import Any, Mapping, Union

from ..core.models import AttractionFactors, CompatibilityFactors
from ..logging import get_logger

logger = get_logger(__name__)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)"""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp_score(value: float, low: float = 0, high: float = 100) -> float:
    """Clamp a score into [low, high]"""
    return max(low, min(high, value))


def calculate_attraction(factors: Union[AttractionFactors, Mapping[str, Any]]) -> int:
    """
    Calculate the attraction score (0-100) between two characters.

    Scoring breakdown:
    - Physical attraction: 25%
    - Personality match: 25%
    - Shared genres: 15% (each shared genre is worth 20 points, capped at 100)
    - Fame gap: 15% (a small gap scores near 100, a huge gap approaches 0)
    - Reputation alignment: 10%
    - Proximity: 10%
    """
    if not isinstance(factors, AttractionFactors):
        factors = AttractionFactors(**factors)

    # Power imbalance reduces chemistry
    fame_score = max(0, 100 - abs(factors.fame_gap) / 50)
    genre_score = min(100, factors.shared_genres * 20)

    raw = (
        factors.physical_attraction * 0.25 +
        factors.personality_match * 0.25 +
        genre_score * 0.15 +
        fame_score * 0.15 +
        factors.reputation_alignment * 0.10 +
        factors.proximity_bonus * 0.10
    )

    score = round_half_away(clamp_score(raw))
    logger.debug(f"Attraction {score} (raw {raw:.3f}, fame {fame_score:.1f}, genres {genre_score})")
    return score


def calculate_compatibility(factors: Union[CompatibilityFactors, Mapping[str, Any]]) -> int:
    """
    Calculate the compatibility score (0-100). Informative only, never gates a stage.

    Each conflicting trait pair costs 12 points after the weighted sum of
    trait overlap (30%), genre alignment (25%), ambition (25%) and lifestyle (20%).
    """
    if not isinstance(factors, CompatibilityFactors):
        factors = CompatibilityFactors(**factors)

    conflict_penalty = factors.trait_conflicts * 12

    raw = (
        factors.trait_overlap * 0.30 +
        factors.genre_alignment * 0.25 +
        factors.ambition_match * 0.25 +
        factors.lifestyle_match * 0.20 -
        conflict_penalty
    )

    score = round_half_away(clamp_score(raw))
    logger.debug(f"Compatibility {score} (raw {raw:.3f}, conflict penalty {conflict_penalty})")
    return score
