"""
Stage transition evaluation

Dry-run check of whether a relationship meets the requirements of its next
forward stage. Nothing here mutates the relationship or applies entry
effects; committing a transition is done by the progression operations.
"""

from typing import Mapping, Optional

from ..core.models import AdvancementCheck, RomanticRelationship
from ..logging import get_logger
from .stages import get_stage_definition, next_forward_stage

logger = get_logger(__name__)

UNKNOWN_STAGE = "Unknown stage"
FINAL_STAGE = "Already at final stage"


class StageTransitionError(ValueError):
    """Raised when a stage change is committed that the rules do not allow"""

    def __init__(self, message: str, missing_requirements=None):
        super().__init__(message)
        self.missing_requirements = list(missing_requirements or [])


def can_advance_stage(relationship: RomanticRelationship,
                      catalog: Optional[Mapping] = None) -> AdvancementCheck:
    """
    Check if a romance can advance to the next stage.

    Args:
        relationship: Relationship snapshot to evaluate
        catalog: Optional stage catalog (stage id -> definition) to evaluate against

    Returns:
        AdvancementCheck; `missing_requirements` holds one entry per unmet
        condition, formatted as "<Score> <value>/<threshold>"
    """
    current = get_stage_definition(relationship.stage, catalog)
    if current is None:
        logger.warning(f"Relationship {relationship.id} has unknown stage '{relationship.stage}'")
        return AdvancementCheck(can_advance=False, next_stage=None, missing_requirements=[UNKNOWN_STAGE])

    nxt = next_forward_stage(current, catalog)
    if nxt is None:
        return AdvancementCheck(can_advance=False, next_stage=None, missing_requirements=[FINAL_STAGE])

    req = nxt.requirements
    missing = []
    if relationship.attraction_score < req.attraction:
        missing.append(f"Attraction {relationship.attraction_score}/{req.attraction}")
    if relationship.passion_score < req.passion:
        missing.append(f"Passion {relationship.passion_score}/{req.passion}")
    if relationship.commitment_score < req.commitment:
        missing.append(f"Commitment {relationship.commitment_score}/{req.commitment}")
    if relationship.tension_score > req.max_tension:
        missing.append(f"Tension too high {relationship.tension_score}/{req.max_tension}")

    return AdvancementCheck(
        can_advance=not missing,
        next_stage=nxt.id,
        missing_requirements=missing
    )
