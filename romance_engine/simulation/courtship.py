"""
Courtship simulation harness for exercising the progression engine
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any, Tuple

import numpy as np

from ..config import get_config
from ..core.models import EndReason, RomanticEvent, RomanticRelationship
from ..logging import get_logger
from ..progression import (
    FORWARD_STAGES,
    advance_stage,
    apply_interaction,
    calculate_attraction,
    calculate_compatibility,
    can_advance_stage,
    end_romance,
    refresh_scores,
    start_romance,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class InteractionType:
    """Score deltas of one kind of interaction"""
    name: str
    attraction: int
    passion: int
    commitment: int
    tension: int
    weight: float


INTERACTION_TYPES: Tuple[InteractionType, ...] = (
    InteractionType("chat", attraction=2, passion=1, commitment=1, tension=-1, weight=0.25),
    InteractionType("date", attraction=4, passion=5, commitment=3, tension=-2, weight=0.25),
    InteractionType("gift", attraction=3, passion=2, commitment=2, tension=-1, weight=0.15),
    InteractionType("duet", attraction=3, passion=4, commitment=2, tension=0, weight=0.15),
    InteractionType("argument", attraction=-3, passion=1, commitment=-2, tension=8, weight=0.12),
    InteractionType("tour_apart", attraction=-1, passion=-3, commitment=-1, tension=4, weight=0.08),
)


@dataclass
class TimelineEntry:
    """One event in the simulated courtship"""
    tick: int
    event: RomanticEvent


@dataclass
class SimulationResult:
    """Final state and full history of a simulation run"""
    relationship: RomanticRelationship
    timeline: List[TimelineEntry] = field(default_factory=list)
    ticks_run: int = 0
    band_chemistry: int = 0

    def summary(self) -> Dict[str, Any]:
        rel = self.relationship
        return {
            "partner": rel.partner_b_name,
            "stage": rel.stage.value,
            "ticks": self.ticks_run,
            "scores": {
                "attraction": rel.attraction_score,
                "compatibility": rel.compatibility_score,
                "passion": rel.passion_score,
                "commitment": rel.commitment_score,
                "tension": rel.tension_score,
            },
            "affair_suspicion": rel.affair_suspicion,
            "affair_detected": rel.affair_detected,
            "band_chemistry": self.band_chemistry,
            "stage_changes": [
                f"{entry.tick}: {entry.event.event_type} -> "
                f"{entry.event.new_stage.value if entry.event.new_stage else '-'}"
                for entry in self.timeline if entry.event.new_stage is not None
            ],
        }


class CourtshipSimulation:
    """Drives a single relationship through randomly chosen interactions"""

    def __init__(self, seed: Optional[int] = None, shares_band: bool = False,
                 secret: bool = False, partner_name: str = "Riley Vox"):
        config = get_config()
        self.seed = config.simulation.default_seed if seed is None else seed
        self.rng = np.random.default_rng(self.seed)
        self.shares_band = shares_band
        self.secret = secret
        self.partner_name = partner_name
        self._weights = np.array([kind.weight for kind in INTERACTION_TYPES])
        self._weights = self._weights / self._weights.sum()

    def _initial_relationship(self) -> Tuple[RomanticRelationship, RomanticEvent]:
        attraction = calculate_attraction({
            "fame_gap": float(self.rng.uniform(-3000, 3000)),
            "shared_genres": int(self.rng.integers(0, 6)),
            "personality_match": float(self.rng.uniform(30, 90)),
            "physical_attraction": float(self.rng.uniform(30, 90)),
            "reputation_alignment": float(self.rng.uniform(20, 80)),
            "proximity_bonus": float(self.rng.uniform(0, 100)),
        })
        compatibility = calculate_compatibility({
            "trait_overlap": float(self.rng.uniform(20, 90)),
            "trait_conflicts": int(self.rng.integers(0, 3)),
            "genre_alignment": float(self.rng.uniform(20, 90)),
            "ambition_match": float(self.rng.uniform(20, 90)),
            "lifestyle_match": float(self.rng.uniform(20, 90)),
        })
        return start_romance(
            partner_a_id="player",
            partner_b_id="npc-" + self.partner_name.lower().replace(" ", "-"),
            partner_b_name=self.partner_name,
            attraction_score=attraction,
            compatibility_score=compatibility,
            is_secret=self.secret
        )

    def _pick_interaction(self) -> InteractionType:
        index = int(self.rng.choice(len(INTERACTION_TYPES), p=self._weights))
        return INTERACTION_TYPES[index]

    def run(self, ticks: Optional[int] = None) -> SimulationResult:
        """Run the simulation for the given number of ticks (or until the romance ends)"""
        ticks = get_config().simulation.default_ticks if ticks is None else ticks

        relationship, started = self._initial_relationship()
        result = SimulationResult(relationship=relationship, timeline=[TimelineEntry(0, started)])

        logger.info(f"Simulating {ticks} ticks with {self.partner_name} (seed {self.seed})")

        for tick in range(1, ticks + 1):
            kind = self._pick_interaction()
            outcome = apply_interaction(
                relationship,
                kind.name,
                attraction_change=kind.attraction,
                passion_change=kind.passion,
                commitment_change=kind.commitment,
                tension_change=kind.tension,
                rng=self.rng
            )
            relationship = outcome.relationship
            result.timeline.append(TimelineEntry(tick, outcome.event))
            result.ticks_run = tick

            if outcome.detected:
                ending = end_romance(relationship, EndReason.AFFAIR_CAUGHT, ended_by="player")
                relationship = ending.relationship
                result.band_chemistry += ending.consequences.band_chemistry_change
                result.timeline.append(TimelineEntry(tick, ending.event))
                break

            if relationship.is_secret:
                continue

            check = can_advance_stage(relationship)
            if check.can_advance and check.next_stage in FORWARD_STAGES:
                advance = advance_stage(relationship, shares_band=self.shares_band)
                relationship = advance.relationship
                result.band_chemistry += advance.effects.band_chemistry_change
                result.timeline.append(TimelineEntry(tick, advance.event))

        result.relationship = relationship
        logger.info(f"Simulation finished at stage {relationship.stage.value} after {result.ticks_run} ticks")
        return result


def run_courtship_simulation(ticks: Optional[int] = None, seed: Optional[int] = None,
                             shares_band: bool = False, secret: bool = False) -> SimulationResult:
    """Convenience function to run a standalone simulation"""
    simulation = CourtshipSimulation(seed=seed, shares_band=shares_band, secret=secret)
    return simulation.run(ticks)
