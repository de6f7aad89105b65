"""
Relationship stage catalog

The nine stages of a romance, their advancement thresholds and one-time
entry effects. Forward progress follows the `order` rank; the secret affair
carries a negative order and is only entered sideways, as are the
post-relationship stages when a caller ends a romance.
"""

from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional

from ..core.models import (
    RomanceStage,
    RomanceStageDefinition,
    StageRequirements,
    EmotionalImpact,
    ReputationImpact,
    ReputationAxis,
)


ROMANCE_STAGES: List[RomanceStageDefinition] = [
    RomanceStageDefinition(
        id=RomanceStage.FLIRTING,
        label="Flirting",
        emoji="😏",
        order=0,
        requirements=StageRequirements(attraction=0, passion=0, commitment=0, max_tension=100),
        unlocks=("Flirty chat options", "Send compliments", "Subtle gifts"),
        emotional_impact=EmotionalImpact(happiness=5, loneliness=-5, jealousy=0, obsession=3),
        reputation_impact=None,
        band_chemistry_modifier=0,
        is_public=False,
    ),
    RomanceStageDefinition(
        id=RomanceStage.DATING,
        label="Dating",
        emoji="💐",
        order=1,
        requirements=StageRequirements(attraction=40, passion=30, commitment=10, max_tension=60),
        unlocks=("Go on dates", "Romantic gifts", "Duet songwriting bonus", "Private messages"),
        emotional_impact=EmotionalImpact(happiness=10, loneliness=-15, jealousy=5, obsession=5),
        reputation_impact=None,
        band_chemistry_modifier=3,
        is_public=False,
    ),
    RomanceStageDefinition(
        id=RomanceStage.EXCLUSIVE,
        label="Exclusive",
        emoji="💕",
        order=2,
        requirements=StageRequirements(attraction=55, passion=45, commitment=30, max_tension=50),
        unlocks=("Exclusive dialogue", "Jealousy triggers active", "Loyalty bonus", "Joint social posts"),
        emotional_impact=EmotionalImpact(happiness=12, loneliness=-20, jealousy=10, obsession=8),
        reputation_impact=None,
        band_chemistry_modifier=5,
        is_public=False,
    ),
    RomanceStageDefinition(
        id=RomanceStage.PUBLIC_RELATIONSHIP,
        label="Public Relationship",
        emoji="❤️",
        order=3,
        requirements=StageRequirements(attraction=60, passion=50, commitment=45, max_tension=45),
        unlocks=("Media coverage", "Joint interviews", "Couple merch",
                 "Fame boost from appearances", "Affair risk begins"),
        emotional_impact=EmotionalImpact(happiness=15, loneliness=-25, jealousy=8, obsession=5),
        reputation_impact=ReputationImpact(axis=ReputationAxis.AUTHENTICITY, change=5),
        band_chemistry_modifier=8,
        is_public=True,
    ),
    RomanceStageDefinition(
        id=RomanceStage.ENGAGED,
        label="Engaged",
        emoji="💍",
        order=4,
        requirements=StageRequirements(attraction=65, passion=55, commitment=70, max_tension=35),
        unlocks=("Wedding planning", "Engagement press event", "Fiancé title", "Shared finances option"),
        emotional_impact=EmotionalImpact(happiness=20, loneliness=-30, jealousy=5, obsession=10),
        reputation_impact=ReputationImpact(axis=ReputationAxis.RELIABILITY, change=8),
        band_chemistry_modifier=10,
        is_public=True,
    ),
    RomanceStageDefinition(
        id=RomanceStage.MARRIED,
        label="Married",
        emoji="💒",
        order=5,
        requirements=StageRequirements(attraction=60, passion=50, commitment=80, max_tension=30),
        unlocks=("Shared home base", "Joint bank account", "Spouse title", "Tax benefits",
                 "Maximum loyalty bonus", "Divorce consequences active"),
        emotional_impact=EmotionalImpact(happiness=25, loneliness=-35, jealousy=3, obsession=5),
        reputation_impact=ReputationImpact(axis=ReputationAxis.RELIABILITY, change=12),
        band_chemistry_modifier=12,
        is_public=True,
    ),
    RomanceStageDefinition(
        id=RomanceStage.SEPARATED,
        label="Separated",
        emoji="💔",
        order=6,
        requirements=StageRequirements(attraction=0, passion=0, commitment=0, max_tension=100),
        unlocks=("Reconciliation attempts", "Separation press event", "Solo activities resume"),
        emotional_impact=EmotionalImpact(happiness=-20, loneliness=25, jealousy=15, obsession=10),
        reputation_impact=ReputationImpact(axis=ReputationAxis.ATTITUDE, change=-5),
        band_chemistry_modifier=-10,
        is_public=True,
    ),
    RomanceStageDefinition(
        id=RomanceStage.DIVORCED,
        label="Divorced",
        emoji="📝",
        order=7,
        requirements=StageRequirements(attraction=0, passion=0, commitment=0, max_tension=100),
        unlocks=("Ex-partner interactions", "Rebound dating", "Divorce album bonus", "Asset splitting"),
        emotional_impact=EmotionalImpact(happiness=-15, loneliness=20, jealousy=10, obsession=-10),
        reputation_impact=ReputationImpact(axis=ReputationAxis.AUTHENTICITY, change=-3),
        band_chemistry_modifier=-15,
        is_public=True,
    ),
    RomanceStageDefinition(
        id=RomanceStage.SECRET_AFFAIR,
        label="Secret Affair",
        emoji="🤫",
        order=-1,  # reachable from any forward stage
        requirements=StageRequirements(attraction=50, passion=60, commitment=0, max_tension=100),
        unlocks=("Clandestine meetings", "Guilt mechanics", "Detection risk per interaction",
                 "Scandal potential"),
        emotional_impact=EmotionalImpact(happiness=10, loneliness=-10, jealousy=20, obsession=20),
        reputation_impact=None,  # only matters if caught
        band_chemistry_modifier=-5,
        is_public=False,
    ),
]

STAGE_CATALOG: Mapping[RomanceStage, RomanceStageDefinition] = MappingProxyType(
    {definition.id: definition for definition in ROMANCE_STAGES}
)

FORWARD_STAGES: FrozenSet[RomanceStage] = frozenset({
    RomanceStage.FLIRTING,
    RomanceStage.DATING,
    RomanceStage.EXCLUSIVE,
    RomanceStage.PUBLIC_RELATIONSHIP,
    RomanceStage.ENGAGED,
    RomanceStage.MARRIED,
})

ENDED_STAGES: FrozenSet[RomanceStage] = frozenset({RomanceStage.SEPARATED, RomanceStage.DIVORCED})

# Caller-triggered exits that are never gated by scores
LATERAL_TRANSITIONS: Dict[RomanceStage, FrozenSet[RomanceStage]] = {
    stage: frozenset({RomanceStage.SECRET_AFFAIR, RomanceStage.SEPARATED, RomanceStage.DIVORCED})
    for stage in FORWARD_STAGES
}
LATERAL_TRANSITIONS[RomanceStage.SECRET_AFFAIR] = frozenset({RomanceStage.SEPARATED, RomanceStage.DIVORCED})
LATERAL_TRANSITIONS[RomanceStage.SEPARATED] = frozenset({RomanceStage.DIVORCED})
LATERAL_TRANSITIONS[RomanceStage.DIVORCED] = frozenset()


def get_stage_definition(stage, catalog: Optional[Mapping] = None) -> Optional[RomanceStageDefinition]:
    """Get the stage definition for a stage id, or None if the catalog lacks it"""
    catalog = STAGE_CATALOG if catalog is None else catalog
    try:
        return catalog.get(RomanceStage(stage))
    except ValueError:
        return None


def next_forward_stage(current: RomanceStageDefinition,
                       catalog: Optional[Mapping] = None) -> Optional[RomanceStageDefinition]:
    """The definition with the smallest order above the current one, skipping negative orders"""
    catalog = STAGE_CATALOG if catalog is None else catalog
    candidates = [
        definition for definition in catalog.values()
        if definition.order > current.order and definition.order >= 0
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda definition: definition.order)


def can_transition_laterally(from_stage: RomanceStage, to_stage: RomanceStage) -> bool:
    """Whether a caller may move a relationship sideways from one stage to another"""
    return to_stage in LATERAL_TRANSITIONS.get(from_stage, frozenset())
