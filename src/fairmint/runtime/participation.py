# src/fairmint/runtime/participation.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Sequence

from fairmint.ledger.amounts import as_amount, as_height, as_timestamp, to_decimal_string
from fairmint.ledger.emission import EmissionSchedule
from fairmint.runtime.errors import DataUnavailable, InvalidInput
from fairmint.runtime.metrics import inc_counter, set_gauge
from fairmint.runtime.runtime_logging import log_event

if TYPE_CHECKING:
    from fairmint.runtime.sources import ClaimantSource, HeightProvider

Json = Dict[str, Any]

log = logging.getLogger("fairmint.participation")


@dataclass(frozen=True, slots=True)
class ClaimantRecord:
    """One observed claim event. Immutable once the indexer reports it."""

    address: str
    height: int
    amount: int
    tx_id: str = ""
    timestamp: int = 0

    @staticmethod
    def from_json(obj: Mapping[str, Any], *, height: Optional[int] = None) -> "ClaimantRecord":
        """Parse an indexer entry. Amounts may be ints or decimal strings."""
        if not isinstance(obj, Mapping):
            raise InvalidInput("invalid_claimant", "claimant_not_object", {"type": str(type(obj))})
        h = obj.get("height", height)
        addr = str(obj.get("address") or "").strip()
        if not addr:
            raise InvalidInput("invalid_claimant", "missing_address", {"height": h})
        return ClaimantRecord(
            address=addr,
            height=as_height(h),
            amount=as_amount(obj.get("amount", 0)),
            tx_id=str(obj.get("tx_id") or obj.get("txid") or ""),
            timestamp=as_timestamp(obj.get("timestamp")),
        )

    def to_json(self) -> Json:
        return {
            "address": self.address,
            "height": self.height,
            "amount": to_decimal_string(self.amount),
            "tx_id": self.tx_id,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True, slots=True)
class ParticipationSnapshot:
    height: int
    claimant_count: int
    reward_per_claimant: int
    total_distributed: int

    @property
    def dust(self) -> int:
        """Integer-division remainder. Never allocated to any claimant."""
        return self.total_distributed - self.reward_per_claimant * self.claimant_count

    def to_json(self) -> Json:
        return {
            "height": self.height,
            "claimant_count": self.claimant_count,
            "reward_per_claimant": to_decimal_string(self.reward_per_claimant),
            "total_distributed": to_decimal_string(self.total_distributed),
            "dust": to_decimal_string(self.dust),
        }


@dataclass(frozen=True, slots=True)
class ParticipationTrend:
    start_height: int
    end_height: int
    blocks: List[ParticipationSnapshot]
    average_participants: float
    peak_participants: int
    min_participants: int
    unique_address_count: int

    def to_json(self) -> Json:
        return {
            "start_height": self.start_height,
            "end_height": self.end_height,
            "blocks": [b.to_json() for b in self.blocks],
            "average_participants": self.average_participants,
            "peak_participants": self.peak_participants,
            "min_participants": self.min_participants,
            "unique_address_count": self.unique_address_count,
        }


def _check_heights(height: int, claimants: Sequence[ClaimantRecord]) -> None:
    for c in claimants:
        if c.height != height:
            raise InvalidInput(
                "invalid_claimant",
                "claimant_height_mismatch",
                {"height": height, "claimant_height": c.height, "address": c.address},
            )


class ParticipationTracker:
    """Equal-split ("collaborative") reward accounting over per-height claimant lists.

    Every claimant at a height receives floor(block_reward / claimants); the
    remainder (dust) stays unallocated. The tracker holds no state beyond its
    schedule and treasury address.
    """

    # Treasury share of a block reward is capped at reward // TREASURY_CAP_DIVISOR.
    TREASURY_CAP_DIVISOR = 2

    def __init__(self, schedule: EmissionSchedule, *, treasury_address: Optional[str] = None) -> None:
        self.schedule = schedule
        self.treasury_address = treasury_address

    def snapshot_for_block(self, height: int, claimants: Sequence[ClaimantRecord]) -> ParticipationSnapshot:
        h = as_height(height)
        _check_heights(h, claimants)

        total = self.schedule.block_reward(h)
        count = len(claimants)
        per = total // count if count > 0 else 0
        return ParticipationSnapshot(
            height=h,
            claimant_count=count,
            reward_per_claimant=per,
            total_distributed=total,
        )

    def trend(
        self,
        start_height: int,
        end_height: int,
        claimants_by_height: Mapping[int, Sequence[ClaimantRecord]],
    ) -> ParticipationTrend:
        """Participation statistics over start..end inclusive.

        Every height in range must be present in `claimants_by_height`; a
        missing height means the indexer has not answered for it, which is
        DataUnavailable rather than an empty block.
        """
        start = as_height(start_height, field="start_height")
        end = as_height(end_height, field="end_height")
        if start > end:
            raise InvalidInput("invalid_range", "start_after_end", {"start_height": start, "end_height": end})

        blocks: List[ParticipationSnapshot] = []
        unique: set[str] = set()
        total_participants = 0
        peak = 0
        low: Optional[int] = None

        for h in range(start, end + 1):
            if h not in claimants_by_height:
                inc_counter("data_unavailable")
                raise DataUnavailable("claimants_unavailable", "height_not_indexed", {"height": h})
            claimants = claimants_by_height[h]
            snap = self.snapshot_for_block(h, claimants)
            blocks.append(snap)
            unique.update(c.address for c in claimants)

            count = snap.claimant_count
            total_participants += count
            peak = max(peak, count)
            if count > 0:
                low = count if low is None else min(low, count)

        return ParticipationTrend(
            start_height=start,
            end_height=end,
            blocks=blocks,
            average_participants=total_participants / len(blocks),
            peak_participants=peak,
            min_participants=low or 0,
            unique_address_count=len(unique),
        )

    def treasury_contribution(
        self,
        height: int,
        claimants: Sequence[ClaimantRecord],
        treasury_address: Optional[str] = None,
    ) -> int:
        """Treasury's claim at `height`, capped at half the block reward."""
        h = as_height(height)
        addr = treasury_address or self.treasury_address
        if not addr:
            raise InvalidInput("treasury_not_configured", "no_treasury_address", {"height": h})
        _check_heights(h, claimants)

        claim = next((c for c in claimants if c.address == addr), None)
        if claim is None:
            return 0
        cap = self.schedule.block_reward(h) // self.TREASURY_CAP_DIVISOR
        return min(claim.amount, cap)

    def current_snapshot(self, heights: "HeightProvider", claimants: "ClaimantSource") -> ParticipationSnapshot:
        """Snapshot at the indexer's current height.

        If the claimant source cannot answer for that height the
        DataUnavailable propagates; it is never turned into a zero snapshot.
        """
        h = as_height(heights.current_height())
        try:
            records = claimants.claimants_at(h)
        except DataUnavailable:
            inc_counter("data_unavailable")
            log_event(log, "current_participation_unavailable", level=logging.WARNING, height=h)
            raise

        snap = self.snapshot_for_block(h, records)
        inc_counter("snapshots_computed")
        set_gauge("current_height", h)
        set_gauge("current_claimants", snap.claimant_count)
        return snap
