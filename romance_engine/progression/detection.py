"""
Affair detection model

Additive risk model for the chance that one clandestine interaction gets a
concealed relationship discovered. The random jitter is the only source of
non-determinism in the engine; it is drawn from an injected generator (any
object with numpy's ``Generator.uniform`` signature) or passed in pre-drawn.
"""

from typing import Any, Mapping, Optional, Union

import numpy as np

from ..core.models import AffairDetectionParams
from ..logging import get_logger
from .scoring import round_half_away, clamp_score

logger = get_logger(__name__)

BASE_CHANCE = 3.0
MAX_FAME_BONUS = 20.0
PUBLIC_VENUE_BONUS = 15.0
INTENSITY_WEIGHT = 4.0
RIVAL_BONUS = 10.0
JITTER_RANGE = 5.0

MIN_CHANCE = 1
MAX_CHANCE = 95


def draw_jitter(rng: Optional[np.random.Generator] = None) -> float:
    """Draw one ±5 point jitter value"""
    rng = rng if rng is not None else np.random.default_rng()
    return float(rng.uniform(-JITTER_RANGE, JITTER_RANGE))


def calculate_affair_detection_chance(
    params: Union[AffairDetectionParams, Mapping[str, Any]],
    rng: Optional[np.random.Generator] = None,
    jitter: Optional[float] = None
) -> int:
    """
    Calculate the detection chance (1-95 percent) for one clandestine interaction.

    Risk breakdown:
    - Base: 3
    - Suspicion: 0.3 per point
    - Partner fame: 1 per 500 fame, capped at 20 (paparazzi)
    - Public venue: +15
    - Intensity: 4 per level
    - Rival watching: +10
    - Social media activity: 0.1 per point
    - Jitter: ±5

    Args:
        params: Risk factors for the interaction
        rng: Random generator used for the jitter when `jitter` is not given
        jitter: Pre-drawn jitter value, for reproducible callers and tests

    Returns:
        Integer percentage; detection is never guaranteed nor impossible
    """
    if not isinstance(params, AffairDetectionParams):
        params = AffairDetectionParams(**params)

    chance = BASE_CHANCE
    chance += params.current_suspicion * 0.3
    chance += min(MAX_FAME_BONUS, params.partner_fame / 500)

    if params.is_public_venue:
        chance += PUBLIC_VENUE_BONUS

    chance += params.interaction_intensity * INTENSITY_WEIGHT

    if params.partner_has_rival:
        chance += RIVAL_BONUS

    chance += params.social_media_activity * 0.1

    if jitter is None:
        jitter = draw_jitter(rng)
    chance += jitter

    result = round_half_away(clamp_score(chance, MIN_CHANCE, MAX_CHANCE))
    logger.debug(f"Affair detection chance {result}% (raw {chance:.2f}, jitter {jitter:+.2f})")
    return result


def roll_affair_detection(chance: float, rng: Optional[np.random.Generator] = None) -> bool:
    """Roll once against a detection chance; True means the affair was discovered"""
    rng = rng if rng is not None else np.random.default_rng()
    roll = float(rng.uniform(0, 100))
    return roll < chance
