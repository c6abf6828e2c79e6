# src/fairmint/ledger/emission.py
from __future__ import annotations

"""Halving emission schedule.

Reward at height h (h >= genesis):

    initial_reward >> ((h - genesis) // halving_interval)

All amounts are exact ints. Date estimates (halving events, supply
projections) assume a constant average block time and are display-only.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from fairmint.ledger.amounts import as_height, percent_of, to_decimal_string
from fairmint.runtime.metrics import inc_counter
from fairmint.runtime.runtime_logging import log_event
from fairmint.runtime.tracker_config import EmissionParams, validate_emission_params

Json = Dict[str, Any]

log = logging.getLogger("fairmint.emission")

DAYS_PER_MONTH: int = 30

# Horizon used by verify_integrity() for the max-supply bound.
INTEGRITY_EPOCHS: int = 100


@dataclass(frozen=True, slots=True)
class EmissionScheduleEntry:
    epoch: int
    start_height: int
    end_height: int
    reward_per_block: int
    total_emission: int
    cumulative_emission: int

    def to_json(self) -> Json:
        return {
            "epoch": self.epoch,
            "start_height": self.start_height,
            "end_height": self.end_height,
            "reward_per_block": to_decimal_string(self.reward_per_block),
            "total_emission": to_decimal_string(self.total_emission),
            "cumulative_emission": to_decimal_string(self.cumulative_emission),
        }


@dataclass(frozen=True, slots=True)
class HalvingEvent:
    epoch: int
    height: int
    estimated_date: datetime
    previous_reward: int
    new_reward: int
    is_completed: bool

    def to_json(self) -> Json:
        return {
            "epoch": self.epoch,
            "height": self.height,
            "estimated_date": self.estimated_date.isoformat(),
            "previous_reward": to_decimal_string(self.previous_reward),
            "new_reward": to_decimal_string(self.new_reward),
            "is_completed": self.is_completed,
        }


@dataclass(frozen=True, slots=True)
class ProjectedSupply:
    estimated_date: datetime
    height: int
    supply: int
    percent_of_cap: float
    halving_epoch: Optional[int]

    def to_json(self) -> Json:
        return {
            "estimated_date": self.estimated_date.isoformat(),
            "height": self.height,
            "supply": to_decimal_string(self.supply),
            "percent_of_cap": self.percent_of_cap,
            "halving_epoch": self.halving_epoch,
        }


@dataclass(frozen=True, slots=True)
class SupplySummary:
    height: int
    epoch: Optional[int]
    reward_per_block: int
    circulating_supply: int
    max_supply: int
    remaining_supply: int
    percent_minted: float
    premine: int
    next_halving_height: int
    blocks_until_halving: int

    def to_json(self) -> Json:
        return {
            "height": self.height,
            "epoch": self.epoch,
            "reward_per_block": to_decimal_string(self.reward_per_block),
            "circulating_supply": to_decimal_string(self.circulating_supply),
            "max_supply": to_decimal_string(self.max_supply),
            "remaining_supply": to_decimal_string(self.remaining_supply),
            "percent_minted": self.percent_minted,
            "premine": to_decimal_string(self.premine),
            "next_halving_height": self.next_halving_height,
            "blocks_until_halving": self.blocks_until_halving,
        }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _offset(now: datetime, delta_seconds: int) -> datetime:
    """now + delta_seconds, saturating at the datetime range limits."""
    try:
        return now + timedelta(seconds=delta_seconds)
    except OverflowError:
        edge = datetime.max if delta_seconds > 0 else datetime.min
        return edge.replace(tzinfo=now.tzinfo)


class EmissionSchedule:
    """Pure arithmetic over height. Build once from config and pass it around."""

    def __init__(self, params: EmissionParams) -> None:
        validate_emission_params(params)
        self.params = params

    @property
    def genesis_height(self) -> int:
        return self.params.genesis_height

    @property
    def halving_interval(self) -> int:
        return self.params.halving_interval

    @property
    def initial_reward(self) -> int:
        return self.params.initial_reward

    @property
    def max_supply(self) -> int:
        return self.params.max_supply

    def _reward_for_epoch(self, epoch: int) -> int:
        return self.params.initial_reward >> epoch

    def _epoch_start(self, epoch: int) -> int:
        return self.params.genesis_height + epoch * self.params.halving_interval

    def halving_epoch(self, height: int) -> Optional[int]:
        """Epoch number at `height`, or None before genesis (not started)."""
        h = as_height(height)
        if h < self.params.genesis_height:
            return None
        return (h - self.params.genesis_height) // self.params.halving_interval

    def block_reward(self, height: int) -> int:
        epoch = self.halving_epoch(height)
        if epoch is None:
            return 0
        # Shifting past the reward's width gives 0 for good.
        return self._reward_for_epoch(epoch)

    def cumulative_emission(self, height: int) -> int:
        """Total emitted over heights genesis..height inclusive.

        Walks epoch boundaries, so the cost is bounded by the number of
        epochs with a non-zero reward rather than by `height`.
        """
        h = as_height(height)
        p = self.params
        if h < p.genesis_height:
            return 0

        last_epoch = (h - p.genesis_height) // p.halving_interval
        total = 0
        epoch = 0
        while epoch <= last_epoch:
            reward = self._reward_for_epoch(epoch)
            if reward == 0:
                break
            start = self._epoch_start(epoch)
            end = min(self._epoch_start(epoch + 1), h + 1)
            total += (end - start) * reward
            epoch += 1

        if total > p.max_supply:
            inc_counter("consistency_violations")
            log_event(
                log,
                "consistency_violation",
                level=logging.WARNING,
                check="cumulative_emission_exceeds_max_supply",
                height=h,
                emitted=str(total),
                max_supply=str(p.max_supply),
            )
            return p.max_supply
        return total

    def premine(self) -> int:
        # Every premine height is in epoch 0 (enforced by config validation).
        p = self.params
        return (p.launch_height - p.genesis_height) * p.initial_reward

    def next_halving_height(self, height: int) -> int:
        epoch = self.halving_epoch(height)
        if epoch is None:
            return self._epoch_start(1)
        return self._epoch_start(epoch + 1)

    def blocks_until_halving(self, height: int) -> int:
        return self.next_halving_height(height) - as_height(height)

    def time_until_halving(self, height: int) -> timedelta:
        """Rough wall-clock estimate at the configured average block time."""
        try:
            return timedelta(seconds=self.blocks_until_halving(height) * self.params.block_time_seconds)
        except OverflowError:
            return timedelta.max

    def emission_schedule_table(self, max_epochs: int = 32) -> List[EmissionScheduleEntry]:
        out: List[EmissionScheduleEntry] = []
        cumulative = 0
        interval = self.params.halving_interval
        for epoch in range(max(0, int(max_epochs))):
            reward = self._reward_for_epoch(epoch)
            if reward == 0:
                break
            total = interval * reward
            cumulative += total
            start = self._epoch_start(epoch)
            out.append(
                EmissionScheduleEntry(
                    epoch=epoch,
                    start_height=start,
                    end_height=start + interval - 1,
                    reward_per_block=reward,
                    total_emission=total,
                    cumulative_emission=cumulative,
                )
            )
        return out

    def halving_events(
        self,
        current_height: int,
        max_halvings: int = 10,
        *,
        now: Optional[datetime] = None,
    ) -> List[HalvingEvent]:
        """Genesis (epoch 0) and subsequent halvings, past and future.

        Dates are estimated from `now` and the average block time.
        """
        cur = as_height(current_height, field="current_height")
        now = now or _utcnow()
        block_time = self.params.block_time_seconds

        out: List[HalvingEvent] = []
        for epoch in range(max(0, int(max_halvings))):
            height = self._epoch_start(epoch)
            new_reward = self._reward_for_epoch(epoch)
            previous_reward = self.params.initial_reward if epoch == 0 else self._reward_for_epoch(epoch - 1)
            out.append(
                HalvingEvent(
                    epoch=epoch,
                    height=height,
                    estimated_date=_offset(now, (height - cur) * block_time),
                    previous_reward=previous_reward,
                    new_reward=new_reward,
                    is_completed=cur >= height,
                )
            )
            if new_reward == 0:
                break
        return out

    def project_supply(
        self,
        current_height: int,
        horizon_months: int,
        *,
        now: Optional[datetime] = None,
    ) -> List[ProjectedSupply]:
        """Approximate supply month by month (30-day months, average block time).

        Display-only estimate: real block production drifts from the average.
        """
        cur = as_height(current_height, field="current_height")
        now = now or _utcnow()
        blocks_per_day = max(1, 86_400 // self.params.block_time_seconds)

        out: List[ProjectedSupply] = []
        for month in range(max(0, int(horizon_months)) + 1):
            days = month * DAYS_PER_MONTH
            height = cur + days * blocks_per_day
            supply = self.cumulative_emission(height)
            out.append(
                ProjectedSupply(
                    estimated_date=_offset(now, days * 86_400),
                    height=height,
                    supply=supply,
                    percent_of_cap=percent_of(supply, self.params.max_supply),
                    halving_epoch=self.halving_epoch(height),
                )
            )
        return out

    def supply_summary(self, height: int) -> SupplySummary:
        h = as_height(height)
        circulating = self.cumulative_emission(h)
        return SupplySummary(
            height=h,
            epoch=self.halving_epoch(h),
            reward_per_block=self.block_reward(h),
            circulating_supply=circulating,
            max_supply=self.params.max_supply,
            remaining_supply=self.params.max_supply - circulating,
            percent_minted=percent_of(circulating, self.params.max_supply),
            premine=self.premine(),
            next_halving_height=self.next_halving_height(h),
            blocks_until_halving=self.blocks_until_halving(h),
        )

    def verify_integrity(self) -> List[str]:
        """Sanity-check the configured constants.

        Returns the names of failed checks; empty means healthy.
        """
        p = self.params
        failed: List[str] = []

        if self.block_reward(p.genesis_height) != p.initial_reward:
            failed.append("genesis_reward")

        if self.block_reward(p.genesis_height + p.halving_interval) != p.initial_reward // 2:
            failed.append("first_halving_reward")

        if self.premine() != (p.launch_height - p.genesis_height) * p.initial_reward:
            failed.append("premine")

        # Unclamped total over INTEGRITY_EPOCHS epochs; the clamp in
        # cumulative_emission() would hide the overflow.
        unclamped = sum(entry.total_emission for entry in self.emission_schedule_table(INTEGRITY_EPOCHS))
        if unclamped > p.max_supply:
            failed.append("max_supply_bound")

        for name in failed:
            inc_counter("consistency_violations")
            log_event(log, "integrity_check_failed", level=logging.WARNING, check=name)
        return failed
