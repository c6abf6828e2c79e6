from __future__ import annotations

import pytest

from fairmint.ledger.emission import EmissionSchedule
from fairmint.runtime.errors import InvalidInput
from fairmint.runtime.participation import ClaimantRecord, ParticipationTracker
from fairmint.runtime.tracker_config import EmissionParams


def _tracker(**params) -> ParticipationTracker:
    return ParticipationTracker(EmissionSchedule(EmissionParams(**params)), treasury_address="bc1treasury")


def _claims(height: int, n: int, amount: int = 0) -> list[ClaimantRecord]:
    return [ClaimantRecord(address=f"bc1addr{i}", height=height, amount=amount) for i in range(n)]


def test_ten_claimants_split_evenly_without_dust() -> None:
    t = _tracker()
    snap = t.snapshot_for_block(850_000, _claims(850_000, 10))
    assert snap.claimant_count == 10
    assert snap.total_distributed == 5_000_000_000
    assert snap.reward_per_claimant == 500_000_000
    assert snap.dust == 0


def test_odd_split_leaves_dust_unallocated() -> None:
    t = _tracker(genesis_height=0, launch_height=0, halving_interval=1_000, initial_reward=10, max_supply=100_000)
    snap = t.snapshot_for_block(5, _claims(5, 3))
    assert snap.total_distributed == 10
    assert snap.reward_per_claimant == 3
    assert snap.dust == 1
    assert snap.reward_per_claimant * snap.claimant_count <= snap.total_distributed


@pytest.mark.parametrize("k", [1, 2, 3, 7, 10, 999, 10_000])
def test_share_times_count_never_exceeds_reward(k: int) -> None:
    t = _tracker()
    snap = t.snapshot_for_block(1_010_000, _claims(1_010_000, k))
    assert snap.reward_per_claimant * k <= snap.total_distributed
    assert 0 <= snap.dust < k


def test_empty_block_distributes_nothing_per_claimant() -> None:
    t = _tracker()
    snap = t.snapshot_for_block(850_000, [])
    assert snap.claimant_count == 0
    assert snap.reward_per_claimant == 0
    assert snap.total_distributed == 5_000_000_000


def test_pre_genesis_block_has_no_reward() -> None:
    t = _tracker()
    snap = t.snapshot_for_block(799_999, _claims(799_999, 4))
    assert snap.total_distributed == 0
    assert snap.reward_per_claimant == 0


def test_claimant_from_another_height_is_rejected() -> None:
    t = _tracker()
    claims = _claims(850_000, 2) + [ClaimantRecord(address="bc1late", height=850_001, amount=0)]
    with pytest.raises(InvalidInput) as ei:
        t.snapshot_for_block(850_000, claims)
    assert ei.value.reason == "claimant_height_mismatch"


def test_snapshot_json_uses_decimal_strings() -> None:
    snap = _tracker().snapshot_for_block(850_000, _claims(850_000, 3))
    j = snap.to_json()
    assert j["reward_per_claimant"] == "1666666666"
    assert j["total_distributed"] == "5000000000"
    assert j["dust"] == "2"


def test_claimant_record_parses_indexer_entry() -> None:
    rec = ClaimantRecord.from_json({"address": "bc1x", "amount": "2,500", "txid": "ab" * 32}, height=850_000)
    assert rec.height == 850_000
    assert rec.amount == 2_500
    assert rec.tx_id == "ab" * 32


def test_claimant_record_requires_address() -> None:
    with pytest.raises(InvalidInput) as ei:
        ClaimantRecord.from_json({"amount": "1"}, height=850_000)
    assert ei.value.reason == "missing_address"
    with pytest.raises(InvalidInput):
        ClaimantRecord.from_json({"address": "  ", "amount": "1"}, height=850_000)


def test_claimant_record_rejects_malformed_timestamp() -> None:
    with pytest.raises(InvalidInput) as ei:
        ClaimantRecord.from_json({"address": "bc1x", "timestamp": "--5"}, height=850_000)
    assert ei.value.code == "invalid_timestamp"
    assert ClaimantRecord.from_json({"address": "bc1x", "timestamp": "1700000000"}, height=1).timestamp == 1_700_000_000
