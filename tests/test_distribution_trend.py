from __future__ import annotations

import pytest

from fairmint.ledger.distribution import (
    NEUTRAL_GINI,
    TREND_IMPROVING,
    TREND_STABLE,
    TREND_WORSENING,
    DistributionAnalyzer,
    HolderBalance,
)
from fairmint.runtime.errors import InvalidInput


def test_moving_average_uses_trailing_window() -> None:
    a = DistributionAnalyzer()
    assert a.moving_average_gini([0.1, 0.2, 0.3, 0.4], window=2) == pytest.approx(0.35)
    assert a.moving_average_gini([0.1, 0.2, 0.3, 0.4], window=10) == pytest.approx(0.25)
    assert a.moving_average_gini([]) == 0.0


def test_moving_average_rejects_zero_window() -> None:
    with pytest.raises(InvalidInput):
        DistributionAnalyzer().moving_average_gini([0.1], window=0)


def test_predict_trend_improving_clamps_at_zero() -> None:
    p = DistributionAnalyzer().predict_trend([0.5, 0.4, 0.3, 0.2], periods=5)
    assert p.trend == TREND_IMPROVING
    assert p.slope == pytest.approx(-0.1)
    assert p.predicted_gini == 0.0


def test_predict_trend_worsening() -> None:
    p = DistributionAnalyzer().predict_trend([0.2, 0.3, 0.4], periods=1)
    assert p.trend == TREND_WORSENING
    assert p.predicted_gini == pytest.approx(0.5)


def test_predict_trend_flat_series_is_stable() -> None:
    p = DistributionAnalyzer().predict_trend([0.4, 0.4004, 0.4])
    assert p.trend == TREND_STABLE


def test_predict_trend_short_histories() -> None:
    a = DistributionAnalyzer()
    assert a.predict_trend([]).predicted_gini == NEUTRAL_GINI
    assert a.predict_trend([]).trend == TREND_STABLE
    one = a.predict_trend([0.3])
    assert one.trend == TREND_STABLE
    assert one.predicted_gini == 0.3


def test_participant_history_splits_first_timers_and_veterans() -> None:
    known = {"c"}
    res = DistributionAnalyzer().analyze_participant_history(["a", "b", "a", "c"], known)
    assert res.first_time == ["a", "b"]
    assert res.veterans == ["a", "c"]
    assert res.total_participants == 4
    assert res.new_participant_rate == 50.0
    assert res.known_participants == frozenset({"a", "b", "c"})
    assert known == {"c"}


def test_participant_history_empty_period() -> None:
    res = DistributionAnalyzer().analyze_participant_history([], set())
    assert res.new_participant_rate == 0.0
    assert res.total_participants == 0


def test_distribution_report_extends_history() -> None:
    holders = [HolderBalance(address=f"bc1h{i}", balance=100) for i in range(4)]
    report, history = DistributionAnalyzer().distribution_report(holders, [0.2], window=10, periods=1)
    assert report.gini == 0.0
    assert history == [0.2, 0.0]
    assert report.moving_average_gini == pytest.approx(0.1)
    assert report.prediction.trend == TREND_IMPROVING
    assert report.holder_count == 4
    assert report.to_json()["total_supply"] == "400"
