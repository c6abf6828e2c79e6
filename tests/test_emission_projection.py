from __future__ import annotations

from datetime import datetime, timedelta, timezone

from fairmint.ledger.emission import EmissionSchedule
from fairmint.runtime.tracker_config import EmissionParams

NOW = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _schedule(**kw) -> EmissionSchedule:
    return EmissionSchedule(EmissionParams(**kw))


def test_halving_events_dates_and_completion() -> None:
    s = _schedule()
    events = s.halving_events(850_000, 3, now=NOW)
    assert [e.epoch for e in events] == [0, 1, 2]

    genesis, first = events[0], events[1]
    assert genesis.height == 800_000
    assert genesis.is_completed is True
    assert genesis.previous_reward == genesis.new_reward == 5_000_000_000
    assert genesis.estimated_date == NOW - timedelta(seconds=50_000 * 600)

    assert first.height == 1_010_000
    assert first.is_completed is False
    assert first.previous_reward == 5_000_000_000
    assert first.new_reward == 2_500_000_000
    assert first.estimated_date == NOW + timedelta(seconds=160_000 * 600)


def test_halving_events_stop_after_zero_reward() -> None:
    s = _schedule(genesis_height=0, launch_height=0, halving_interval=10, initial_reward=4, max_supply=1_000)
    events = s.halving_events(0, 10, now=NOW)
    assert [e.new_reward for e in events] == [4, 2, 1, 0]


def test_project_supply_is_monotonic_and_month_spaced() -> None:
    s = _schedule()
    rows = s.project_supply(850_000, 2, now=NOW)
    assert [r.height for r in rows] == [850_000, 854_320, 858_640]
    assert rows[0].supply == s.cumulative_emission(850_000)
    assert rows[0].supply <= rows[1].supply <= rows[2].supply
    assert rows[2].estimated_date == NOW + timedelta(days=60)
    assert all(r.halving_epoch == 0 for r in rows)
    assert 0.0 <= rows[0].percent_of_cap <= 100.0


def test_supply_summary() -> None:
    s = _schedule()
    summary = s.supply_summary(850_000)
    assert summary.epoch == 0
    assert summary.reward_per_block == 5_000_000_000
    assert summary.circulating_supply == 250_005_000_000_000
    assert summary.remaining_supply == 2_100_000_000_000_000 - 250_005_000_000_000
    assert summary.premine == 400_000_000_000_000
    assert summary.next_halving_height == 1_010_000
    assert summary.blocks_until_halving == 160_000

    j = summary.to_json()
    assert j["circulating_supply"] == "250005000000000"
    assert isinstance(j["max_supply"], str)


def test_verify_integrity_healthy_defaults() -> None:
    assert _schedule().verify_integrity() == []


def test_verify_integrity_flags_supply_overflow() -> None:
    s = _schedule(genesis_height=0, launch_height=0, halving_interval=10, initial_reward=100, max_supply=1_500)
    assert s.verify_integrity() == ["max_supply_bound"]


def test_halving_dates_saturate_far_from_now() -> None:
    s = _schedule()
    events = s.halving_events(10**12, 3, now=NOW)
    assert all(e.is_completed for e in events)
    assert events[0].estimated_date == datetime.min.replace(tzinfo=timezone.utc)
    assert events[0].to_json()["estimated_date"].startswith("0001-01-01")


def test_projection_dates_saturate() -> None:
    s = _schedule(block_time_seconds=86_400)
    rows = s.project_supply(0, 2, now=datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=40))
    assert rows[2].estimated_date == datetime.max.replace(tzinfo=timezone.utc)


def test_time_until_halving_saturates_for_huge_interval() -> None:
    s = _schedule(genesis_height=0, launch_height=0, halving_interval=10**15, initial_reward=4, max_supply=10**18)
    assert s.time_until_halving(0) == timedelta.max
