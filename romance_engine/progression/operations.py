"""
Progression operations

The caller side of the engine: starting a romance, applying interactions,
committing stage changes and ending relationships. Each operation takes a
relationship value and returns a new one together with the RomanticEvent a
persistence layer would record. Inputs are never mutated.
"""

from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple, Union

import numpy as np

from ..config import get_config
from ..core.models import (
    RomanceStage,
    PartnerType,
    EndReason,
    ReputationAxis,
    RomanticRelationship,
    RomanticEvent,
    AttractionFactors,
    CompatibilityFactors,
    AffairDetectionParams,
    StageEntryEffects,
    InteractionOutcome,
    StageAdvance,
    RomanceEnding,
)
from ..logging import get_logger, with_romance_id
from .consequences import calculate_rejection_consequences
from .detection import calculate_affair_detection_chance, roll_affair_detection
from .scoring import calculate_attraction, calculate_compatibility, clamp_score
from .stages import ENDED_STAGES, FORWARD_STAGES, can_transition_laterally, get_stage_definition
from .transitions import StageTransitionError, can_advance_stage

logger = get_logger(__name__)

DETECTED_SUSPICION = 100


def _resolve_now(now: Optional[datetime]) -> datetime:
    return now if now is not None else datetime.now(timezone.utc)


def _clamped(value: int) -> int:
    return int(clamp_score(value))


def _stage_name(stage) -> str:
    return getattr(stage, "value", str(stage))


def start_romance(
    partner_a_id: str,
    partner_b_id: str,
    partner_b_name: str,
    partner_b_type: PartnerType = PartnerType.NPC,
    partner_a_type: PartnerType = PartnerType.PLAYER,
    attraction_score: int = 0,
    compatibility_score: int = 0,
    is_secret: bool = False,
    now: Optional[datetime] = None
) -> Tuple[RomanticRelationship, RomanticEvent]:
    """Create a new relationship, flirting in the open or as a secret affair"""
    now = _resolve_now(now)
    stage = RomanceStage.SECRET_AFFAIR if is_secret else RomanceStage.FLIRTING

    relationship = RomanticRelationship(
        partner_a_id=partner_a_id,
        partner_a_type=partner_a_type,
        partner_b_id=partner_b_id,
        partner_b_type=partner_b_type,
        partner_b_name=partner_b_name,
        stage=stage,
        attraction_score=_clamped(attraction_score),
        compatibility_score=_clamped(compatibility_score),
        is_secret=is_secret,
        initiated_by=partner_a_id,
        stage_changed_at=now,
        created_at=now,
        updated_at=now
    )

    event = RomanticEvent(
        romance_id=relationship.id,
        event_type="affair_started" if is_secret else "romance_started",
        new_stage=stage,
        description=(f"Started a secret affair with {partner_b_name}" if is_secret
                     else f"Started flirting with {partner_b_name}"),
        created_at=now
    )

    with with_romance_id(relationship.id):
        logger.info(f"Romance started between {partner_a_id} and {partner_b_id} ({stage.value})")
    return relationship, event


def refresh_scores(
    relationship: RomanticRelationship,
    attraction_factors: Optional[Union[AttractionFactors, Mapping[str, Any]]] = None,
    compatibility_factors: Optional[Union[CompatibilityFactors, Mapping[str, Any]]] = None,
    now: Optional[datetime] = None
) -> RomanticRelationship:
    """Re-run the scorers after an interaction and store their results"""
    update = {}
    if attraction_factors is not None:
        update["attraction_score"] = calculate_attraction(attraction_factors)
    if compatibility_factors is not None:
        update["compatibility_score"] = calculate_compatibility(compatibility_factors)

    if not update:
        return relationship

    update["updated_at"] = _resolve_now(now)
    return relationship.model_copy(update=update)


def apply_interaction(
    relationship: RomanticRelationship,
    event_type: str,
    attraction_change: int = 0,
    passion_change: int = 0,
    commitment_change: int = 0,
    tension_change: int = 0,
    description: Optional[str] = None,
    detection: Optional[Mapping[str, Any]] = None,
    rng: Optional[np.random.Generator] = None,
    now: Optional[datetime] = None
) -> InteractionOutcome:
    """
    Apply one interaction (date, gift, argument, ...) to a relationship.

    Score changes are clamped to 0-100. For a secret relationship that has not
    been discovered yet, the interaction rolls for detection: on discovery the
    suspicion jumps to 100, otherwise it creeps up by a small random amount.

    Args:
        relationship: Relationship before the interaction
        event_type: Interaction kind; "date" also stamps last_date_at
        attraction_change, passion_change, commitment_change, tension_change: Signed deltas
        description: Optional text stored on the event
        detection: Overrides for the detection risk factors (partner_fame,
            is_public_venue, interaction_intensity, partner_has_rival, ...)
        rng: Random generator for the detection jitter, roll and suspicion gain
        now: Timestamp to record; defaults to the current UTC time

    Returns:
        InteractionOutcome with the new relationship and its event
    """
    now = _resolve_now(now)
    config = get_config().interaction

    update = {
        "attraction_score": _clamped(relationship.attraction_score + attraction_change),
        "passion_score": _clamped(relationship.passion_score + passion_change),
        "commitment_score": _clamped(relationship.commitment_score + commitment_change),
        "tension_score": _clamped(relationship.tension_score + tension_change),
        "updated_at": now,
    }
    if event_type == "date":
        update["last_date_at"] = now

    event_fields = {
        "romance_id": relationship.id,
        "attraction_change": attraction_change,
        "passion_change": passion_change,
        "commitment_change": commitment_change,
        "tension_change": tension_change,
        "created_at": now,
    }

    with with_romance_id(relationship.id):
        if not relationship.is_secret or relationship.affair_detected:
            event = RomanticEvent(event_type=event_type, description=description, **event_fields)
            return InteractionOutcome(
                relationship=relationship.model_copy(update=update),
                event=event
            )

        rng = rng if rng is not None else np.random.default_rng()

        params = {
            "current_suspicion": relationship.affair_suspicion,
            "partner_fame": 0,
            "is_public_venue": False,
            "interaction_intensity": config.default_interaction_intensity,
            "partner_has_rival": False,
            "social_media_activity": config.default_social_media_activity,
        }
        if detection:
            params.update(detection)

        chance = calculate_affair_detection_chance(AffairDetectionParams(**params), rng=rng)

        if roll_affair_detection(chance, rng):
            suspicion_change = DETECTED_SUSPICION - relationship.affair_suspicion
            update.update({
                "affair_detected": True,
                "affair_detected_at": now,
                "affair_suspicion": DETECTED_SUSPICION,
            })
            event = RomanticEvent(
                event_type="affair_detected",
                suspicion_change=suspicion_change,
                description="The affair has been discovered!",
                **event_fields
            )
            logger.info(f"Affair detected on {event_type} (chance {chance}%)")
            return InteractionOutcome(
                relationship=relationship.model_copy(update=update),
                event=event,
                detected=True,
                detection_chance=chance,
                suspicion_change=suspicion_change
            )

        gain = int(rng.integers(config.suspicion_gain_min, config.suspicion_gain_max + 1))
        new_suspicion = _clamped(relationship.affair_suspicion + gain)
        suspicion_change = new_suspicion - relationship.affair_suspicion
        update["affair_suspicion"] = new_suspicion

        event = RomanticEvent(
            event_type=event_type,
            suspicion_change=suspicion_change,
            description=description,
            **event_fields
        )
        logger.debug(f"Affair undetected on {event_type} (chance {chance}%), suspicion +{suspicion_change}")
        return InteractionOutcome(
            relationship=relationship.model_copy(update=update),
            event=event,
            detection_chance=chance,
            suspicion_change=suspicion_change
        )


def stage_entry_effects(stage: RomanceStage, shares_band: bool = False) -> StageEntryEffects:
    """
    One-time effects of entering a stage.

    Reputation only moves for public stages, band chemistry only when both
    partners play in the same band.
    """
    definition = get_stage_definition(stage)
    if definition is None:
        raise StageTransitionError(f"Unknown stage: {stage}")

    return StageEntryEffects(
        stage=definition.id,
        emotional_impact=definition.emotional_impact,
        reputation_impact=definition.reputation_impact if definition.is_public else None,
        band_chemistry_change=definition.band_chemistry_modifier if shares_band else 0
    )


def advance_stage(
    relationship: RomanticRelationship,
    shares_band: bool = False,
    now: Optional[datetime] = None
) -> StageAdvance:
    """
    Commit the move to the next forward stage.

    Only forward stages are entered here. Separation and divorce carry
    breakup consequences and go through end_romance. Advancing out of a
    secret affair brings the couple into the open as flirting.

    Raises:
        StageTransitionError: the relationship does not meet the next stage's
            requirements, or the next stage is not a forward stage
    """
    check = can_advance_stage(relationship)
    if not check.can_advance or check.next_stage is None:
        raise StageTransitionError(
            f"Cannot advance: {', '.join(check.missing_requirements)}",
            check.missing_requirements
        )

    new_stage = check.next_stage
    if new_stage not in FORWARD_STAGES:
        raise StageTransitionError(
            f"Cannot advance from {_stage_name(relationship.stage)} to {new_stage.value}; "
            f"use end_romance to separate or divorce"
        )

    now = _resolve_now(now)
    definition = get_stage_definition(new_stage)
    effects = stage_entry_effects(new_stage, shares_band)

    update = {
        "stage": new_stage,
        "stage_changed_at": now,
        "updated_at": now,
    }
    if relationship.stage == RomanceStage.SECRET_AFFAIR:
        update["is_secret"] = False
    updated = relationship.model_copy(update=update)

    reputation = definition.reputation_impact
    event = RomanticEvent(
        romance_id=relationship.id,
        event_type="stage_advance",
        old_stage=relationship.stage,
        new_stage=new_stage,
        reputation_axis=reputation.axis if reputation else None,
        reputation_change=reputation.change if reputation else 0,
        description=f"Relationship advanced to {definition.label}",
        created_at=now
    )

    with with_romance_id(relationship.id):
        logger.info(f"Stage advanced {_stage_name(relationship.stage)} -> {new_stage.value}")

    return StageAdvance(
        relationship=updated,
        old_stage=relationship.stage,
        new_stage=new_stage,
        effects=effects,
        event=event
    )


def enter_secret_affair(
    relationship: RomanticRelationship,
    shares_band: bool = False,
    now: Optional[datetime] = None
) -> StageAdvance:
    """
    Move a relationship sideways into a secret affair.

    Allowed from any forward stage, regardless of scores.

    Raises:
        StageTransitionError: the current stage has no path into a secret affair
    """
    if not can_transition_laterally(relationship.stage, RomanceStage.SECRET_AFFAIR):
        raise StageTransitionError(
            f"Cannot start a secret affair from stage {_stage_name(relationship.stage)}"
        )

    now = _resolve_now(now)
    effects = stage_entry_effects(RomanceStage.SECRET_AFFAIR, shares_band)

    updated = relationship.model_copy(update={
        "stage": RomanceStage.SECRET_AFFAIR,
        "is_secret": True,
        "stage_changed_at": now,
        "updated_at": now,
    })

    event = RomanticEvent(
        romance_id=relationship.id,
        event_type="affair_started",
        old_stage=relationship.stage,
        new_stage=RomanceStage.SECRET_AFFAIR,
        description=f"Started a secret affair with {relationship.partner_b_name}",
        created_at=now
    )

    with with_romance_id(relationship.id):
        logger.info(f"Secret affair started from {_stage_name(relationship.stage)}")

    return StageAdvance(
        relationship=updated,
        old_stage=relationship.stage,
        new_stage=RomanceStage.SECRET_AFFAIR,
        effects=effects,
        event=event
    )


def end_romance(
    relationship: RomanticRelationship,
    reason: Union[EndReason, str],
    ended_by: Optional[str] = None,
    target_stage: Optional[RomanceStage] = None,
    now: Optional[datetime] = None
) -> RomanceEnding:
    """
    End or downgrade a relationship.

    Engaged and married couples separate by default; everything else ends in
    divorce. Consequences are computed from the stage being left. The
    relationship stays active; archiving it is a separate caller decision.

    Raises:
        StageTransitionError: invalid target stage or nothing left to end
    """
    reason = EndReason(reason)

    if target_stage is not None:
        target_stage = RomanceStage(target_stage)
        if target_stage not in ENDED_STAGES:
            raise StageTransitionError(
                f"Romance can only end as separated or divorced, not {target_stage.value}"
            )
        new_stage = target_stage
    elif relationship.stage in (RomanceStage.ENGAGED, RomanceStage.MARRIED):
        new_stage = RomanceStage.SEPARATED
    else:
        new_stage = RomanceStage.DIVORCED

    if not can_transition_laterally(relationship.stage, new_stage):
        raise StageTransitionError(
            f"Cannot move from {_stage_name(relationship.stage)} to {new_stage.value}"
        )

    now = _resolve_now(now)
    definition = get_stage_definition(relationship.stage)
    was_public = definition.is_public if definition is not None else False

    consequences = calculate_rejection_consequences(
        relationship.stage,
        relationship.commitment_score,
        was_public
    )

    is_ending = new_stage == RomanceStage.DIVORCED or reason == EndReason.REJECTION

    updated = relationship.model_copy(update={
        "stage": new_stage,
        "stage_changed_at": now,
        "ended_by": ended_by,
        "end_reason": reason,
        "updated_at": now,
    })

    event = RomanticEvent(
        romance_id=relationship.id,
        event_type="romance_ended" if is_ending else "stage_regress",
        old_stage=relationship.stage,
        new_stage=new_stage,
        reputation_axis=ReputationAxis.RELIABILITY if was_public else None,
        reputation_change=consequences.reputation_change,
        description=f"Romance ended: {reason.value}",
        metadata={"consequences": consequences.model_dump()},
        created_at=now
    )

    with with_romance_id(relationship.id):
        logger.info(f"Romance {_stage_name(relationship.stage)} -> {new_stage.value} ({reason.value})")

    return RomanceEnding(
        relationship=updated,
        old_stage=relationship.stage,
        new_stage=new_stage,
        consequences=consequences,
        is_ending=is_ending,
        event=event
    )


def archive_romance(relationship: RomanticRelationship,
                    now: Optional[datetime] = None) -> RomanticRelationship:
    """Mark a relationship as no longer a going concern"""
    return relationship.model_copy(update={
        "is_active": False,
        "updated_at": _resolve_now(now),
    })
