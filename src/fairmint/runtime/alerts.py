# src/fairmint/runtime/alerts.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from fairmint.ledger.amounts import format_units, to_decimal_string
from fairmint.ledger.emission import EmissionSchedule
from fairmint.runtime.metrics import inc_counter
from fairmint.runtime.participation import ParticipationSnapshot
from fairmint.runtime.runtime_logging import log_event
from fairmint.runtime.tracker_config import AlertThresholds

Json = Dict[str, Any]

log = logging.getLogger("fairmint.alerts")

SEVERITY_INFO = "info"
SEVERITY_WARNING = "warning"
SEVERITY_CRITICAL = "critical"

ALERT_LARGE_CLAIM = "large_claim"
ALERT_LOW_PARTICIPATION = "low_participation"
ALERT_HALVING_SOON = "halving_soon"
ALERT_HIGH_CONCENTRATION = "high_concentration"


@dataclass(frozen=True, slots=True)
class Alert:
    type: str
    severity: str
    message: str
    height: Optional[int] = None
    details: Json = field(default_factory=dict)

    def to_json(self) -> Json:
        return {
            "type": self.type,
            "severity": self.severity,
            "message": self.message,
            "height": self.height,
            "details": dict(self.details),
        }


def participation_alerts(
    snapshot: ParticipationSnapshot,
    schedule: EmissionSchedule,
    thresholds: AlertThresholds,
    *,
    token_symbol: str = "",
) -> List[Alert]:
    """Alerts for one block: large per-claimant share, thin participation, halving proximity."""
    out: List[Alert] = []
    h = snapshot.height
    unit = f" {token_symbol}" if token_symbol else ""

    if snapshot.reward_per_claimant > thresholds.large_claim_amount:
        out.append(
            Alert(
                type=ALERT_LARGE_CLAIM,
                severity=SEVERITY_WARNING,
                message=f"Large claim opportunity: {format_units(snapshot.reward_per_claimant)}{unit} per participant",
                height=h,
                details={
                    "participants": snapshot.claimant_count,
                    "reward_per_claimant": to_decimal_string(snapshot.reward_per_claimant),
                    "threshold": to_decimal_string(thresholds.large_claim_amount),
                },
            )
        )

    if 0 < snapshot.claimant_count < thresholds.low_participation_count:
        out.append(
            Alert(
                type=ALERT_LOW_PARTICIPATION,
                severity=SEVERITY_INFO,
                message=f"Low participation: only {snapshot.claimant_count} claimants this block",
                height=h,
                details={"participants": snapshot.claimant_count},
            )
        )

    remaining = schedule.blocks_until_halving(h)
    if remaining < thresholds.halving_soon_blocks:
        hours = remaining * schedule.params.block_time_seconds // 3600
        out.append(
            Alert(
                type=ALERT_HALVING_SOON,
                severity=SEVERITY_INFO,
                message=f"Halving in {remaining} blocks (~{hours} hours)",
                height=h,
                details={
                    "blocks_remaining": remaining,
                    "next_halving_height": schedule.next_halving_height(h),
                },
            )
        )

    _record(out)
    return out


def distribution_alerts(gini: float, thresholds: AlertThresholds, *, height: Optional[int] = None) -> List[Alert]:
    out: List[Alert] = []
    if float(gini) >= thresholds.high_gini:
        out.append(
            Alert(
                type=ALERT_HIGH_CONCENTRATION,
                severity=SEVERITY_WARNING,
                message=f"Holder concentration high: Gini {float(gini):.3f}",
                height=height,
                details={"gini": float(gini), "threshold": float(thresholds.high_gini)},
            )
        )
    _record(out)
    return out


def _record(alerts: List[Alert]) -> None:
    for a in alerts:
        inc_counter(f"alerts_{a.type}")
        log_event(log, "alert", type=a.type, severity=a.severity, height=a.height)
