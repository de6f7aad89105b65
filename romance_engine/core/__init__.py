"""
Shared core foundation for the romance engine.

Components:
- models: relationship rows, stage definitions, scorer inputs and result records
"""

from .models import (
    RomanceStage,
    PartnerType,
    ReputationAxis,
    EndReason,
    StageRequirements,
    EmotionalImpact,
    ReputationImpact,
    RomanceStageDefinition,
    RomanticRelationship,
    RomanticEvent,
    AttractionFactors,
    CompatibilityFactors,
    AffairDetectionParams,
    AdvancementCheck,
    RejectionConsequences,
    StageEntryEffects,
    InteractionOutcome,
    StageAdvance,
    RomanceEnding
)

__all__ = [
    # Enumerations
    "RomanceStage",
    "PartnerType",
    "ReputationAxis",
    "EndReason",

    # Stage catalog records
    "StageRequirements",
    "EmotionalImpact",
    "ReputationImpact",
    "RomanceStageDefinition",

    # Rows
    "RomanticRelationship",
    "RomanticEvent",

    # Scorer inputs
    "AttractionFactors",
    "CompatibilityFactors",
    "AffairDetectionParams",

    # Results
    "AdvancementCheck",
    "RejectionConsequences",
    "StageEntryEffects",
    "InteractionOutcome",
    "StageAdvance",
    "RomanceEnding"
]
