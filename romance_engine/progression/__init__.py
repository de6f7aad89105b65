"""
Relationship progression engine.

Stage catalog, attraction/compatibility scoring, stage transition checks,
rejection consequences, affair detection and the operations that commit
their results onto a relationship.
"""

from .stages import (
    ROMANCE_STAGES,
    STAGE_CATALOG,
    FORWARD_STAGES,
    ENDED_STAGES,
    LATERAL_TRANSITIONS,
    get_stage_definition,
    next_forward_stage,
    can_transition_laterally
)
from .scoring import calculate_attraction, calculate_compatibility, round_half_away
from .transitions import can_advance_stage, StageTransitionError
from .consequences import calculate_rejection_consequences
from .detection import calculate_affair_detection_chance, roll_affair_detection, draw_jitter
from .operations import (
    start_romance,
    refresh_scores,
    apply_interaction,
    stage_entry_effects,
    advance_stage,
    enter_secret_affair,
    end_romance,
    archive_romance
)

__all__ = [
    'ROMANCE_STAGES',
    'STAGE_CATALOG',
    'FORWARD_STAGES',
    'ENDED_STAGES',
    'LATERAL_TRANSITIONS',
    'get_stage_definition',
    'next_forward_stage',
    'can_transition_laterally',
    'calculate_attraction',
    'calculate_compatibility',
    'round_half_away',
    'can_advance_stage',
    'StageTransitionError',
    'calculate_rejection_consequences',
    'calculate_affair_detection_chance',
    'roll_affair_detection',
    'draw_jitter',
    'start_romance',
    'refresh_scores',
    'apply_interaction',
    'stage_entry_effects',
    'advance_stage',
    'enter_secret_affair',
    'end_romance',
    'archive_romance'
]
