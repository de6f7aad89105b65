"""
Unit tests for the progression operations
"""

import pytest

from romance_engine.core.models import (
    RomanceStage,
    PartnerType,
    EndReason,
    ReputationAxis,
)
from romance_engine.logging import get_romance_id
from romance_engine.progression import (
    StageTransitionError,
    start_romance,
    refresh_scores,
    apply_interaction,
    stage_entry_effects,
    advance_stage,
    enter_secret_affair,
    end_romance,
    archive_romance,
)


class TestStartRomance:
    """Test opening a relationship"""

    def test_start_flirting(self, now):
        rel, event = start_romance("player-001", "npc-042", "Riley Vox",
                                   attraction_score=62, compatibility_score=48, now=now)

        assert rel.stage == RomanceStage.FLIRTING
        assert rel.partner_a_type == PartnerType.PLAYER
        assert rel.partner_b_type == PartnerType.NPC
        assert rel.attraction_score == 62
        assert rel.compatibility_score == 48
        assert rel.initiated_by == "player-001"
        assert rel.is_active is True
        assert rel.is_secret is False
        assert rel.stage_changed_at == now

        assert event.romance_id == rel.id
        assert event.event_type == "romance_started"
        assert event.new_stage == RomanceStage.FLIRTING
        assert event.description == "Started flirting with Riley Vox"

    def test_start_secret_affair(self, now):
        rel, event = start_romance("player-001", "npc-077", "Jade Static", is_secret=True, now=now)

        assert rel.stage == RomanceStage.SECRET_AFFAIR
        assert rel.is_secret is True
        assert rel.affair_suspicion == 0
        assert event.event_type == "affair_started"
        assert event.description == "Started a secret affair with Jade Static"

    def test_initial_scores_are_clamped(self):
        rel, _ = start_romance("a", "b", "B", attraction_score=140, compatibility_score=-9)
        assert rel.attraction_score == 100
        assert rel.compatibility_score == 0

    def test_each_romance_gets_its_own_id(self):
        first, _ = start_romance("a", "b", "B")
        second, _ = start_romance("a", "b", "B")
        assert first.id != second.id


class TestRefreshScores:
    """Test re-running the scorers"""

    def test_refresh_attraction_and_compatibility(self, make_relationship, now):
        rel = make_relationship(attraction_score=10, compatibility_score=10)

        updated = refresh_scores(
            rel,
            attraction_factors={
                "fame_gap": 0, "shared_genres": 5, "personality_match": 100,
                "physical_attraction": 100, "reputation_alignment": 100, "proximity_bonus": 100
            },
            compatibility_factors={
                "trait_overlap": 50, "trait_conflicts": 1, "genre_alignment": 60,
                "ambition_match": 40, "lifestyle_match": 80
            },
            now=now
        )

        assert updated.attraction_score == 100
        assert updated.compatibility_score == 44
        assert updated.updated_at == now
        assert rel.attraction_score == 10

    def test_nothing_to_refresh(self, make_relationship):
        rel = make_relationship()
        assert refresh_scores(rel) is rel


class TestApplyInteraction:
    """Test applying interactions"""

    def test_open_interaction_applies_clamped_deltas(self, make_relationship, now):
        rel = make_relationship(attraction_score=95, passion_score=3, commitment_score=50, tension_score=20)

        outcome = apply_interaction(
            rel, "gift",
            attraction_change=10, passion_change=-8, commitment_change=5, tension_change=-1,
            description="Vintage guitar strap", now=now
        )

        updated = outcome.relationship
        assert updated.attraction_score == 100
        assert updated.passion_score == 0
        assert updated.commitment_score == 55
        assert updated.tension_score == 19
        assert updated.last_date_at is None
        assert outcome.detected is False
        assert outcome.detection_chance is None

        assert outcome.event.event_type == "gift"
        assert outcome.event.attraction_change == 10
        assert outcome.event.passion_change == -8
        assert outcome.event.description == "Vintage guitar strap"

    def test_input_relationship_is_not_mutated(self, make_relationship):
        rel = make_relationship(attraction_score=40)
        before = rel.model_dump()

        apply_interaction(rel, "chat", attraction_change=5)

        assert rel.model_dump() == before

    def test_date_stamps_last_date(self, make_relationship, now):
        outcome = apply_interaction(make_relationship(), "date", passion_change=4, now=now)
        assert outcome.relationship.last_date_at == now

    def test_open_interaction_never_rolls(self, make_relationship, fixed_rng):
        rng = fixed_rng()
        apply_interaction(make_relationship(), "chat", attraction_change=2, rng=rng)
        assert rng.calls == []

    def test_secret_interaction_undetected(self, make_relationship, fixed_rng, now):
        """Suspicion 10 with default risk factors gives a 21% chance; a 99 roll misses"""
        rel = make_relationship(stage=RomanceStage.SECRET_AFFAIR, is_secret=True, affair_suspicion=10)
        rng = fixed_rng(uniforms=[0.0, 99.0], integer=4)

        outcome = apply_interaction(rel, "date", passion_change=3, rng=rng, now=now)

        assert outcome.detected is False
        assert outcome.detection_chance == 21
        assert outcome.suspicion_change == 4
        assert outcome.relationship.affair_suspicion == 14
        assert outcome.relationship.affair_detected is False
        assert outcome.event.event_type == "date"
        assert outcome.event.suspicion_change == 4
        assert rng.calls == [
            ("uniform", -5.0, 5.0),
            ("uniform", 0, 100),
            ("integers", 2, 7),
        ]

    def test_secret_interaction_detected(self, make_relationship, fixed_rng, now):
        rel = make_relationship(stage=RomanceStage.SECRET_AFFAIR, is_secret=True, affair_suspicion=10)
        rng = fixed_rng(uniforms=[0.0, 5.0])

        outcome = apply_interaction(rel, "date", rng=rng, now=now)

        assert outcome.detected is True
        assert outcome.detection_chance == 21
        assert outcome.suspicion_change == 90
        assert outcome.relationship.affair_detected is True
        assert outcome.relationship.affair_detected_at == now
        assert outcome.relationship.affair_suspicion == 100
        assert outcome.event.event_type == "affair_detected"
        assert outcome.event.description == "The affair has been discovered!"
        assert ("integers", 2, 7) not in rng.calls

    def test_suspicion_gain_is_capped(self, make_relationship, fixed_rng):
        rel = make_relationship(stage=RomanceStage.SECRET_AFFAIR, is_secret=True, affair_suspicion=98)
        # 3 + 29.4 + 12 + 3 = 47.4 minus jitter 5 = 42; roll 90 misses
        rng = fixed_rng(uniforms=[-5.0, 90.0], integer=6)

        outcome = apply_interaction(rel, "chat", rng=rng)

        assert outcome.detection_chance == 42
        assert outcome.relationship.affair_suspicion == 100
        assert outcome.suspicion_change == 2

    def test_already_detected_affair_does_not_roll(self, make_relationship, fixed_rng, now):
        detected_at = now.replace(hour=1)
        rel = make_relationship(stage=RomanceStage.SECRET_AFFAIR, is_secret=True,
                                affair_suspicion=100, affair_detected=True, affair_detected_at=detected_at)
        rng = fixed_rng()

        outcome = apply_interaction(rel, "chat", attraction_change=1, rng=rng, now=now)

        assert rng.calls == []
        assert outcome.detected is False
        assert outcome.relationship.affair_detected_at == detected_at
        assert outcome.relationship.affair_suspicion == 100

    def test_detection_overrides(self, make_relationship, fixed_rng):
        """A public venue and a watching rival raise the chance to 43%"""
        rel = make_relationship(stage=RomanceStage.SECRET_AFFAIR, is_secret=True)
        rng = fixed_rng(uniforms=[0.0, 50.0])

        outcome = apply_interaction(rel, "date", rng=rng,
                                    detection={"is_public_venue": True, "partner_has_rival": True})

        assert outcome.detection_chance == 43
        assert outcome.detected is False

    def test_configured_defaults_feed_detection(self, make_relationship, fixed_rng, monkeypatch):
        monkeypatch.setenv("ROMANCE_DEFAULT_INTERACTION_INTENSITY", "5")
        monkeypatch.setenv("ROMANCE_DEFAULT_SOCIAL_MEDIA_ACTIVITY", "0")
        monkeypatch.setenv("ROMANCE_SUSPICION_GAIN_MIN", "1")
        monkeypatch.setenv("ROMANCE_SUSPICION_GAIN_MAX", "1")
        rel = make_relationship(stage=RomanceStage.SECRET_AFFAIR, is_secret=True)
        rng = fixed_rng(uniforms=[0.0, 99.0], integer=1)

        outcome = apply_interaction(rel, "chat", rng=rng)

        # 3 + 20
        assert outcome.detection_chance == 23
        assert rng.calls[-1] == ("integers", 1, 2)

    def test_romance_id_context_is_restored(self, make_relationship):
        apply_interaction(make_relationship(), "chat")
        assert get_romance_id() is None


class TestStageEntryEffects:
    """Test one-time stage entry effects"""

    def test_private_stage_without_band(self):
        effects = stage_entry_effects(RomanceStage.DATING)

        assert effects.stage == RomanceStage.DATING
        assert effects.emotional_impact.happiness == 10
        assert effects.emotional_impact.loneliness == -15
        assert effects.reputation_impact is None
        assert effects.band_chemistry_change == 0

    def test_band_chemistry_only_for_bandmates(self):
        assert stage_entry_effects(RomanceStage.MARRIED, shares_band=True).band_chemistry_change == 12
        assert stage_entry_effects(RomanceStage.MARRIED, shares_band=False).band_chemistry_change == 0

    def test_public_stage_moves_reputation(self):
        effects = stage_entry_effects(RomanceStage.SEPARATED)
        assert effects.reputation_impact.axis == ReputationAxis.ATTITUDE
        assert effects.reputation_impact.change == -5

    def test_unknown_stage(self):
        with pytest.raises(StageTransitionError):
            stage_entry_effects("going_steady")


class TestAdvanceStage:
    """Test committing forward progress"""

    def test_flirting_to_dating(self, make_relationship, now):
        rel = make_relationship(attraction_score=40, passion_score=30, commitment_score=10, tension_score=60)

        result = advance_stage(rel, shares_band=True, now=now)

        assert result.old_stage == RomanceStage.FLIRTING
        assert result.new_stage == RomanceStage.DATING
        assert result.relationship.stage == RomanceStage.DATING
        assert result.relationship.stage_changed_at == now
        assert result.effects.band_chemistry_change == 3
        assert result.event.event_type == "stage_advance"
        assert result.event.old_stage == RomanceStage.FLIRTING
        assert result.event.new_stage == RomanceStage.DATING
        assert result.event.description == "Relationship advanced to Dating"
        assert result.event.reputation_axis is None
        assert rel.stage == RomanceStage.FLIRTING

    def test_going_public_moves_reputation(self, make_relationship):
        rel = make_relationship(stage=RomanceStage.EXCLUSIVE, attraction_score=60,
                                passion_score=50, commitment_score=45, tension_score=45)

        result = advance_stage(rel)

        assert result.new_stage == RomanceStage.PUBLIC_RELATIONSHIP
        assert result.effects.reputation_impact.axis == ReputationAxis.AUTHENTICITY
        assert result.effects.band_chemistry_change == 0
        assert result.event.reputation_axis == ReputationAxis.AUTHENTICITY
        assert result.event.reputation_change == 5

    def test_blocked_advance_raises(self, make_relationship):
        rel = make_relationship(stage=RomanceStage.DATING, attraction_score=50,
                                passion_score=40, commitment_score=20, tension_score=70)

        with pytest.raises(StageTransitionError) as exc_info:
            advance_stage(rel)

        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.missing_requirements == [
            "Attraction 50/55", "Passion 40/45", "Commitment 20/30", "Tension too high 70/50"
        ]
        assert "Cannot advance" in str(exc_info.value)

    def test_divorced_cannot_advance(self, make_relationship):
        with pytest.raises(StageTransitionError, match="Already at final stage"):
            advance_stage(make_relationship(stage=RomanceStage.DIVORCED))

    def test_married_couple_cannot_advance_into_separation(self, make_relationship):
        """Separation is only reached by ending the romance"""
        rel = make_relationship(stage=RomanceStage.MARRIED, tension_score=100)

        with pytest.raises(StageTransitionError, match="end_romance"):
            advance_stage(rel)

    def test_separated_couple_cannot_advance_into_divorce(self, make_relationship):
        with pytest.raises(StageTransitionError):
            advance_stage(make_relationship(stage=RomanceStage.SEPARATED))

    def test_affair_advances_into_the_open(self, make_relationship, fixed_rng, now):
        """Leaving a secret affair clears the secrecy and stops detection rolls"""
        rel = make_relationship(stage=RomanceStage.SECRET_AFFAIR, is_secret=True, affair_suspicion=30)

        result = advance_stage(rel, now=now)

        assert result.old_stage == RomanceStage.SECRET_AFFAIR
        assert result.new_stage == RomanceStage.FLIRTING
        assert result.relationship.is_secret is False
        assert result.relationship.affair_suspicion == 30

        rng = fixed_rng()
        outcome = apply_interaction(result.relationship, "chat", rng=rng)
        assert rng.calls == []
        assert outcome.detection_chance is None


class TestSecretAffair:
    """Test the sideways move into an affair"""

    def test_enter_from_forward_stage(self, make_relationship, now):
        rel = make_relationship(stage=RomanceStage.EXCLUSIVE)

        result = enter_secret_affair(rel, shares_band=True, now=now)

        assert result.relationship.stage == RomanceStage.SECRET_AFFAIR
        assert result.relationship.is_secret is True
        assert result.old_stage == RomanceStage.EXCLUSIVE
        assert result.effects.band_chemistry_change == -5
        assert result.effects.reputation_impact is None
        assert result.event.event_type == "affair_started"
        assert result.event.description == "Started a secret affair with Riley Vox"

    def test_scores_are_not_gated(self, make_relationship):
        """The affair thresholds are not checked on a sideways move"""
        result = enter_secret_affair(make_relationship(stage=RomanceStage.MARRIED))
        assert result.new_stage == RomanceStage.SECRET_AFFAIR

    def test_cannot_enter_after_separation(self, make_relationship):
        with pytest.raises(StageTransitionError):
            enter_secret_affair(make_relationship(stage=RomanceStage.SEPARATED))


class TestEndRomance:
    """Test breakups and archiving"""

    def test_married_couple_separates(self, make_relationship, now):
        rel = make_relationship(stage=RomanceStage.MARRIED, commitment_score=80)

        result = end_romance(rel, EndReason.MUTUAL, ended_by="player-001", now=now)

        assert result.new_stage == RomanceStage.SEPARATED
        assert result.is_ending is False
        assert result.consequences.reputation_change == -18
        assert result.consequences.happiness_change == -72
        assert result.relationship.end_reason == EndReason.MUTUAL
        assert result.relationship.ended_by == "player-001"
        assert result.relationship.is_active is True
        assert result.event.event_type == "stage_regress"
        assert result.event.reputation_axis == ReputationAxis.RELIABILITY
        assert result.event.reputation_change == -18
        assert result.event.description == "Romance ended: mutual"
        assert result.event.metadata["consequences"]["resentment_change"] == 30

    def test_dating_couple_breaks_up(self, make_relationship):
        rel = make_relationship(stage=RomanceStage.DATING, commitment_score=20)

        result = end_romance(rel, "incompatible")

        assert result.new_stage == RomanceStage.DIVORCED
        assert result.is_ending is True
        assert result.event.event_type == "romance_ended"
        assert result.event.reputation_axis is None
        assert result.event.reputation_change == 0

    def test_rejection_always_ends(self, make_relationship):
        rel = make_relationship(stage=RomanceStage.ENGAGED)

        result = end_romance(rel, EndReason.REJECTION)

        assert result.new_stage == RomanceStage.SEPARATED
        assert result.is_ending is True

    def test_separated_couple_divorces(self, make_relationship):
        result = end_romance(make_relationship(stage=RomanceStage.SEPARATED), EndReason.MUTUAL)
        assert result.old_stage == RomanceStage.SEPARATED
        assert result.new_stage == RomanceStage.DIVORCED

    def test_caught_affair_ends(self, make_relationship):
        rel = make_relationship(stage=RomanceStage.SECRET_AFFAIR, is_secret=True, affair_detected=True)

        result = end_romance(rel, EndReason.AFFAIR_CAUGHT)

        assert result.new_stage == RomanceStage.DIVORCED
        assert result.consequences.happiness_change == 0

    def test_explicit_target(self, make_relationship):
        rel = make_relationship(stage=RomanceStage.MARRIED)
        result = end_romance(rel, EndReason.MUTUAL, target_stage=RomanceStage.DIVORCED)
        assert result.new_stage == RomanceStage.DIVORCED

    def test_target_must_be_an_ended_stage(self, make_relationship):
        with pytest.raises(StageTransitionError):
            end_romance(make_relationship(stage=RomanceStage.MARRIED), EndReason.MUTUAL,
                        target_stage=RomanceStage.DATING)

    def test_divorce_is_final(self, make_relationship):
        with pytest.raises(StageTransitionError):
            end_romance(make_relationship(stage=RomanceStage.DIVORCED), EndReason.MUTUAL)

    def test_unknown_reason(self, make_relationship):
        with pytest.raises(ValueError):
            end_romance(make_relationship(), "bored")

    def test_archive(self, make_relationship, now):
        ended = end_romance(make_relationship(stage=RomanceStage.DATING), EndReason.MUTUAL).relationship

        archived = archive_romance(ended, now=now)

        assert archived.is_active is False
        assert archived.updated_at == now
        assert ended.is_active is True
