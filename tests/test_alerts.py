from __future__ import annotations

from fairmint.ledger.emission import EmissionSchedule
from fairmint.runtime import metrics
from fairmint.runtime.alerts import (
    ALERT_HALVING_SOON,
    ALERT_HIGH_CONCENTRATION,
    ALERT_LARGE_CLAIM,
    ALERT_LOW_PARTICIPATION,
    distribution_alerts,
    participation_alerts,
)
from fairmint.runtime.participation import ClaimantRecord, ParticipationTracker
from fairmint.runtime.tracker_config import AlertThresholds, EmissionParams


def _schedule() -> EmissionSchedule:
    return EmissionSchedule(EmissionParams())


def _snap(height: int, n: int):
    claims = [ClaimantRecord(address=f"bc1c{i}", height=height, amount=0) for i in range(n)]
    return ParticipationTracker(_schedule()).snapshot_for_block(height, claims)


def test_single_claimant_triggers_large_claim_and_low_participation() -> None:
    alerts = participation_alerts(_snap(850_000, 1), _schedule(), AlertThresholds(), token_symbol="DIESEL")
    types = [a.type for a in alerts]
    assert types == [ALERT_LARGE_CLAIM, ALERT_LOW_PARTICIPATION]
    assert "50.00000000 DIESEL" in alerts[0].message
    assert alerts[0].details["reward_per_claimant"] == "5000000000"
    assert metrics.snapshot()["counters"]["alerts_large_claim"] == 1


def test_busy_block_raises_nothing() -> None:
    assert participation_alerts(_snap(850_000, 1_000), _schedule(), AlertThresholds()) == []


def test_empty_block_is_not_low_participation() -> None:
    types = [a.type for a in participation_alerts(_snap(850_000, 0), _schedule(), AlertThresholds())]
    assert ALERT_LOW_PARTICIPATION not in types


def test_halving_soon() -> None:
    alerts = participation_alerts(_snap(1_009_900, 1_000), _schedule(), AlertThresholds())
    assert [a.type for a in alerts] == [ALERT_HALVING_SOON]
    assert alerts[0].details["blocks_remaining"] == 100
    assert "~16 hours" in alerts[0].message


def test_high_concentration() -> None:
    assert [a.type for a in distribution_alerts(0.85, AlertThresholds(), height=5)] == [ALERT_HIGH_CONCENTRATION]
    assert distribution_alerts(0.5, AlertThresholds()) == []
