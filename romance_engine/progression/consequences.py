"""
Rejection and breakup consequences

Penalties scale with the depth of the relationship (stage order + 1), so a
failed marriage hurts far more than a rejected flirt. Public relationships
amplify the happiness loss and cost reputation.
"""

from ..core.models import RomanceStage, RejectionConsequences
from ..logging import get_logger
from .scoring import round_half_away
from .stages import get_stage_definition

logger = get_logger(__name__)

PUBLIC_MULTIPLIER = 1.5


def calculate_rejection_consequences(stage: RomanceStage, commitment: float,
                                     is_public: bool) -> RejectionConsequences:
    """
    Calculate the impact of a rejected advance or a breakup.

    Args:
        stage: Stage the relationship was in when it was rejected or ended
        commitment: Commitment score at that moment (feeds resentment)
        is_public: Whether the relationship was visible to the public

    Returns:
        RejectionConsequences with signed deltas; rejection never helps
    """
    definition = get_stage_definition(stage)
    if definition is None:
        logger.warning(f"Unknown stage '{stage}' for rejection consequences, using depth 1")
    depth = (definition.order if definition is not None else 0) + 1
    public_multiplier = PUBLIC_MULTIPLIER if is_public else 1.0

    consequences = RejectionConsequences(
        happiness_change=round_half_away(-8 * depth * public_multiplier),
        loneliness_change=round_half_away(5 * depth),
        resentment_change=round_half_away(3 * depth + commitment * 0.15),
        obsession_change=round_half_away(2 * depth),
        attraction_loss=round_half_away(-10 * depth),
        reputation_change=round_half_away(-3 * depth) if is_public else 0,
        band_chemistry_change=round_half_away(-5 * depth),
    )

    logger.debug(f"Rejection consequences at {stage} (depth {depth}, public={is_public}): {consequences}")
    return consequences
