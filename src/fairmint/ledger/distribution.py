# src/fairmint/ledger/distribution.py
from __future__ import annotations

"""Distribution-equality metrics over a holder balance snapshot.

Balances stay exact ints through every sum; ratios become floats only in the
final division. Holder brackets (whales = top 1%, dolphins = top 10%) are
sized by bracket_size(), which both categorize_holders() and
concentration_metrics() use so the two views never disagree.
"""

from dataclasses import dataclass, field, replace
from typing import AbstractSet, Any, Dict, Iterable, List, Sequence, Tuple

from fairmint.ledger.amounts import as_amount, percent_of, to_decimal_string
from fairmint.runtime.errors import InvalidInput

Json = Dict[str, Any]

WHALE_PERCENT: int = 1
DOLPHIN_PERCENT: int = 10

# |slope| below this is treated as flat.
TREND_EPSILON: float = 0.001

# Prediction when there is no history at all.
NEUTRAL_GINI: float = 0.5

TREND_IMPROVING = "improving"
TREND_STABLE = "stable"
TREND_WORSENING = "worsening"


@dataclass(frozen=True, slots=True)
class HolderBalance:
    address: str
    balance: int
    percentage_of_supply: float = 0.0

    def to_json(self) -> Json:
        return {
            "address": self.address,
            "balance": to_decimal_string(self.balance),
            "percentage_of_supply": self.percentage_of_supply,
        }


@dataclass(frozen=True, slots=True)
class HolderCategories:
    whales: List[HolderBalance]
    dolphins: List[HolderBalance]
    shrimp: List[HolderBalance]
    total_supply: int
    holder_count: int

    def to_json(self, *, include_holders: bool = True) -> Json:
        out: Json = {
            "total_supply": to_decimal_string(self.total_supply),
            "holder_count": self.holder_count,
            "counts": {"whales": len(self.whales), "dolphins": len(self.dolphins), "shrimp": len(self.shrimp)},
        }
        if include_holders:
            out["whales"] = [h.to_json() for h in self.whales]
            out["dolphins"] = [h.to_json() for h in self.dolphins]
            out["shrimp"] = [h.to_json() for h in self.shrimp]
        return out


@dataclass(frozen=True, slots=True)
class ConcentrationMetrics:
    top1_percent_share: float = 0.0
    top10_percent_share: float = 0.0
    nakamoto_coefficient: int = 0

    def to_json(self) -> Json:
        return {
            "top1_percent_share": self.top1_percent_share,
            "top10_percent_share": self.top10_percent_share,
            "nakamoto_coefficient": self.nakamoto_coefficient,
        }


@dataclass(frozen=True, slots=True)
class TrendPrediction:
    trend: str
    predicted_gini: float
    slope: float = 0.0

    def to_json(self) -> Json:
        return {"trend": self.trend, "predicted_gini": self.predicted_gini, "slope": self.slope}


@dataclass(frozen=True, slots=True)
class ParticipantAnalysis:
    first_time: List[str]
    veterans: List[str]
    total_participants: int
    new_participant_rate: float
    known_participants: frozenset = field(default_factory=frozenset)

    def to_json(self) -> Json:
        return {
            "first_time": list(self.first_time),
            "veterans": list(self.veterans),
            "total_participants": self.total_participants,
            "new_participant_rate": self.new_participant_rate,
        }


@dataclass(frozen=True, slots=True)
class DistributionReport:
    holder_count: int
    total_supply: int
    gini: float
    categories: HolderCategories
    concentration: ConcentrationMetrics
    moving_average_gini: float
    prediction: TrendPrediction

    def to_json(self) -> Json:
        return {
            "holder_count": self.holder_count,
            "total_supply": to_decimal_string(self.total_supply),
            "gini": self.gini,
            "categories": self.categories.to_json(include_holders=False),
            "concentration": self.concentration.to_json(),
            "moving_average_gini": self.moving_average_gini,
            "prediction": self.prediction.to_json(),
        }


def bracket_size(n: int, percent: int) -> int:
    """ceil(n * percent / 100) in integer arithmetic. At least 1 when n >= 1."""
    if n <= 0:
        return 0
    return -(-int(n) * int(percent) // 100)


def _clamp01(x: float) -> float:
    return max(0.0, min(1.0, x))


def _balances(values: Iterable[Any]) -> List[int]:
    return [as_amount(v, field="balance") for v in values]


def _holders(holders: Iterable[HolderBalance]) -> List[HolderBalance]:
    out: List[HolderBalance] = []
    for h in holders:
        b = as_amount(h.balance, field="balance")
        out.append(h if type(h.balance) is int else replace(h, balance=b))
    return out


def _sorted_desc(holders: Sequence[HolderBalance]) -> List[HolderBalance]:
    # sorted() is stable with reverse=True, so equal balances keep input order.
    return sorted(holders, key=lambda h: h.balance, reverse=True)


class DistributionAnalyzer:
    """Stateless statistics engine. Historical series are owned by the caller."""

    def gini_coefficient(self, balances: Iterable[Any]) -> float:
        """G = (2·Σ i·x_i) / (n·Σx) − (n+1)/n over ascending x, i = 1..n."""
        xs = sorted(_balances(balances))
        n = len(xs)
        if n <= 1:
            return 0.0
        total = sum(xs)
        if total == 0:
            return 0.0

        weighted = sum(i * x for i, x in enumerate(xs, start=1))
        # Same formula over a common denominator: one exact int numerator,
        # one float division.
        numerator = 2 * weighted - (n + 1) * total
        return _clamp01(numerator / (n * total))

    def categorize_holders(self, holders: Iterable[HolderBalance]) -> HolderCategories:
        ordered = _sorted_desc(_holders(holders))
        n = len(ordered)
        if n == 0:
            return HolderCategories(whales=[], dolphins=[], shrimp=[], total_supply=0, holder_count=0)

        total = sum(h.balance for h in ordered)
        ordered = [replace(h, percentage_of_supply=percent_of(h.balance, total)) for h in ordered]

        whale_n = bracket_size(n, WHALE_PERCENT)
        dolphin_n = bracket_size(n, DOLPHIN_PERCENT)
        return HolderCategories(
            whales=ordered[:whale_n],
            dolphins=ordered[whale_n:dolphin_n],
            shrimp=ordered[dolphin_n:],
            total_supply=total,
            holder_count=n,
        )

    def concentration_metrics(self, holders: Iterable[HolderBalance]) -> ConcentrationMetrics:
        ordered = _sorted_desc(_holders(holders))
        n = len(ordered)
        total = sum(h.balance for h in ordered)
        if n == 0 or total == 0:
            return ConcentrationMetrics()

        top1 = sum(h.balance for h in ordered[: bracket_size(n, WHALE_PERCENT)])
        top10 = sum(h.balance for h in ordered[: bracket_size(n, DOLPHIN_PERCENT)])

        # Smallest prefix holding strictly more than half of the supply.
        cumulative = 0
        nakamoto = 0
        for h in ordered:
            cumulative += h.balance
            nakamoto += 1
            if 2 * cumulative > total:
                break

        return ConcentrationMetrics(
            top1_percent_share=percent_of(top1, total),
            top10_percent_share=percent_of(top10, total),
            nakamoto_coefficient=nakamoto,
        )

    def moving_average_gini(self, history: Sequence[float], window: int = 10) -> float:
        if int(window) < 1:
            raise InvalidInput("invalid_window", "window_must_be_positive", {"window": window})
        if not history:
            return 0.0
        recent = list(history)[-int(window):]
        return sum(float(v) for v in recent) / len(recent)

    def predict_trend(self, history: Sequence[float], periods: int = 5) -> TrendPrediction:
        """Least-squares line through (index, gini); directional guidance only."""
        ys = [float(v) for v in history]
        n = len(ys)
        if n < 2:
            return TrendPrediction(trend=TREND_STABLE, predicted_gini=ys[0] if ys else NEUTRAL_GINI)

        sum_x = n * (n - 1) / 2
        sum_x2 = (n - 1) * n * (2 * n - 1) / 6
        sum_y = sum(ys)
        sum_xy = sum(i * y for i, y in enumerate(ys))

        slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
        intercept = (sum_y - slope * sum_x) / n
        predicted = _clamp01(slope * (n + int(periods) - 1) + intercept)

        if abs(slope) < TREND_EPSILON:
            trend = TREND_STABLE
        elif slope < 0:
            # Lower Gini is more equal.
            trend = TREND_IMPROVING
        else:
            trend = TREND_WORSENING
        return TrendPrediction(trend=trend, predicted_gini=predicted, slope=slope)

    def analyze_participant_history(
        self,
        addresses: Sequence[str],
        known: AbstractSet[str],
    ) -> ParticipantAnalysis:
        """Split this period's claimants into first-timers and veterans.

        An address repeated within `addresses` is a first-timer only once.
        The caller's set is not mutated; the updated set is returned in
        `known_participants`.
        """
        seen = set(known)
        first_time: List[str] = []
        veterans: List[str] = []
        for addr in addresses:
            if addr in seen:
                veterans.append(addr)
            else:
                first_time.append(addr)
                seen.add(addr)

        total = len(addresses)
        rate = (len(first_time) / total) * 100 if total > 0 else 0.0
        return ParticipantAnalysis(
            first_time=first_time,
            veterans=veterans,
            total_participants=total,
            new_participant_rate=rate,
            known_participants=frozenset(seen),
        )

    def distribution_report(
        self,
        holders: Iterable[HolderBalance],
        gini_history: Sequence[float] = (),
        *,
        window: int = 10,
        periods: int = 5,
    ) -> Tuple[DistributionReport, List[float]]:
        """Everything the dashboard needs from one balance snapshot.

        Returns the report and the Gini history extended with this snapshot's
        value, for the caller to keep and pass back next time.
        """
        hs = _holders(holders)
        gini = self.gini_coefficient(h.balance for h in hs)
        categories = self.categorize_holders(hs)
        history = [float(v) for v in gini_history] + [gini]

        report = DistributionReport(
            holder_count=categories.holder_count,
            total_supply=categories.total_supply,
            gini=gini,
            categories=categories,
            concentration=self.concentration_metrics(hs),
            moving_average_gini=self.moving_average_gini(history, window),
            prediction=self.predict_trend(history, periods),
        )
        return report, history
