"""
Data models for the romance progression engine.

Relationship rows, stage definitions, scorer inputs and the result records
returned by the progression operations. Every model is a plain value: the
engine never mutates a model it was given and always returns fresh copies.
"""

from typing import Dict, List, Optional, Any, Tuple
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
import uuid


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clamp(value, low, high):
    return max(low, min(high, value))


class RomanceStage(str, Enum):
    """Stages a romantic relationship can be in"""
    FLIRTING = "flirting"
    DATING = "dating"
    EXCLUSIVE = "exclusive"
    PUBLIC_RELATIONSHIP = "public_relationship"
    ENGAGED = "engaged"
    MARRIED = "married"
    SEPARATED = "separated"
    DIVORCED = "divorced"
    SECRET_AFFAIR = "secret_affair"


class PartnerType(str, Enum):
    """Who sits on each side of a relationship"""
    PLAYER = "player"
    NPC = "npc"


class ReputationAxis(str, Enum):
    """Reputation ledger axes touched by romance events"""
    AUTHENTICITY = "authenticity"
    ATTITUDE = "attitude"
    RELIABILITY = "reliability"
    CREATIVITY = "creativity"


class EndReason(str, Enum):
    """Why a relationship was ended"""
    MUTUAL = "mutual"
    REJECTION = "rejection"
    AFFAIR_CAUGHT = "affair_caught"
    INCOMPATIBLE = "incompatible"
    ABANDONED = "abandoned"


# === Stage catalog records ===

class StageRequirements(BaseModel):
    """Minimum scores needed to enter a stage (tension is a maximum)"""
    model_config = ConfigDict(frozen=True)

    attraction: int = 0
    passion: int = 0
    commitment: int = 0
    max_tension: int = 100


class EmotionalImpact(BaseModel):
    """Signed emotional deltas applied once on entering a stage"""
    model_config = ConfigDict(frozen=True)

    happiness: int = 0
    loneliness: int = 0
    jealousy: int = 0
    obsession: int = 0


class ReputationImpact(BaseModel):
    """A single reputation ledger entry"""
    model_config = ConfigDict(frozen=True)

    axis: ReputationAxis
    change: int


class RomanceStageDefinition(BaseModel):
    """Static definition of one relationship stage"""
    model_config = ConfigDict(frozen=True)

    id: RomanceStage
    label: str
    emoji: str
    order: int  # negative order marks a stage outside the forward chain
    requirements: StageRequirements
    unlocks: Tuple[str, ...] = ()
    emotional_impact: EmotionalImpact
    reputation_impact: Optional[ReputationImpact] = None  # public stages only
    band_chemistry_modifier: int = 0  # only when both partners share a band
    is_public: bool = False


# === Relationship row ===

class RomanticRelationship(BaseModel):
    """One romantic relationship between two characters"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    partner_a_id: str
    partner_a_type: PartnerType = PartnerType.PLAYER
    partner_b_id: str
    partner_b_type: PartnerType = PartnerType.NPC
    partner_b_name: str = ""

    stage: RomanceStage = RomanceStage.FLIRTING

    # Running scores (0-100)
    attraction_score: int = Field(default=0, ge=0, le=100)
    compatibility_score: int = Field(default=0, ge=0, le=100)
    passion_score: int = Field(default=0, ge=0, le=100)
    commitment_score: int = Field(default=0, ge=0, le=100)
    tension_score: int = Field(default=0, ge=0, le=100)  # friction, must stay below a maximum

    # Affair tracking
    is_secret: bool = False
    affair_suspicion: int = Field(default=0, ge=0, le=100)
    affair_detected: bool = False
    affair_detected_at: Optional[datetime] = None

    is_active: bool = True

    # Audit
    initiated_by: Optional[str] = None
    ended_by: Optional[str] = None
    end_reason: Optional[EndReason] = None
    stage_changed_at: Optional[datetime] = None
    last_date_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    # Caller extensions, never read or written by the engine
    metadata: Dict[str, Any] = Field(default_factory=dict)


class RomanticEvent(BaseModel):
    """Audit record produced by every progression operation"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    romance_id: str
    event_type: str
    old_stage: Optional[RomanceStage] = None
    new_stage: Optional[RomanceStage] = None
    attraction_change: int = 0
    passion_change: int = 0
    commitment_change: int = 0
    tension_change: int = 0
    suspicion_change: int = 0
    reputation_axis: Optional[ReputationAxis] = None
    reputation_change: int = 0
    description: Optional[str] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=_utcnow)


# === Scorer inputs ===
# Inputs are clamped into their documented ranges instead of rejected;
# game data drifts and the scorers must still produce in-range results.

class AttractionFactors(BaseModel):
    """Inputs to the attraction score"""
    fame_gap: float  # signed difference in fame
    shared_genres: int  # 0-5 overlapping musical tastes
    personality_match: float
    physical_attraction: float
    reputation_alignment: float
    proximity_bonus: float

    @field_validator("shared_genres")
    @classmethod
    def _clamp_genres(cls, value: int) -> int:
        return _clamp(value, 0, 5)

    @field_validator("personality_match", "physical_attraction", "reputation_alignment", "proximity_bonus")
    @classmethod
    def _clamp_percent(cls, value: float) -> float:
        return _clamp(value, 0.0, 100.0)


class CompatibilityFactors(BaseModel):
    """Inputs to the compatibility score"""
    trait_overlap: float
    trait_conflicts: int  # 0-5 incompatible trait pairs
    genre_alignment: float
    ambition_match: float
    lifestyle_match: float

    @field_validator("trait_conflicts")
    @classmethod
    def _clamp_conflicts(cls, value: int) -> int:
        return _clamp(value, 0, 5)

    @field_validator("trait_overlap", "genre_alignment", "ambition_match", "lifestyle_match")
    @classmethod
    def _clamp_percent(cls, value: float) -> float:
        return _clamp(value, 0.0, 100.0)


class AffairDetectionParams(BaseModel):
    """Inputs to the per-interaction affair detection chance"""
    current_suspicion: float
    partner_fame: float
    is_public_venue: bool = False
    interaction_intensity: float  # 1 casual chat .. 5 passionate encounter
    partner_has_rival: bool = False
    social_media_activity: float

    @field_validator("current_suspicion", "social_media_activity")
    @classmethod
    def _clamp_percent(cls, value: float) -> float:
        return _clamp(value, 0.0, 100.0)

    @field_validator("partner_fame")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        return max(0.0, value)

    @field_validator("interaction_intensity")
    @classmethod
    def _clamp_intensity(cls, value: float) -> float:
        return _clamp(value, 1.0, 5.0)


# === Results ===

class AdvancementCheck(BaseModel):
    """Whether a relationship may move to its next forward stage"""
    can_advance: bool
    next_stage: Optional[RomanceStage] = None
    missing_requirements: List[str] = Field(default_factory=list)


class RejectionConsequences(BaseModel):
    """Penalties for a rejected advance or a breakup"""
    happiness_change: int
    loneliness_change: int
    resentment_change: int
    obsession_change: int
    attraction_loss: int
    reputation_change: int
    band_chemistry_change: int


class StageEntryEffects(BaseModel):
    """One-time effects of entering a stage"""
    stage: RomanceStage
    emotional_impact: EmotionalImpact
    reputation_impact: Optional[ReputationImpact] = None
    band_chemistry_change: int = 0


class InteractionOutcome(BaseModel):
    """Result of applying one interaction to a relationship"""
    relationship: RomanticRelationship
    event: RomanticEvent
    detected: bool = False
    detection_chance: Optional[int] = None
    suspicion_change: int = 0


class StageAdvance(BaseModel):
    """Result of committing a stage change"""
    relationship: RomanticRelationship
    old_stage: RomanceStage
    new_stage: RomanceStage
    effects: StageEntryEffects
    event: RomanticEvent


class RomanceEnding(BaseModel):
    """Result of ending a relationship"""
    relationship: RomanticRelationship
    old_stage: RomanceStage
    new_stage: RomanceStage
    consequences: RejectionConsequences
    is_ending: bool
    event: RomanticEvent
