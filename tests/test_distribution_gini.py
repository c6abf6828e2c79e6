from __future__ import annotations

import pytest

from fairmint.ledger.distribution import DistributionAnalyzer
from fairmint.runtime.errors import InvalidInput


def test_equal_balances_are_perfectly_equal() -> None:
    assert DistributionAnalyzer().gini_coefficient([100, 100, 100, 100]) == 0.0


@pytest.mark.parametrize("balances", [[], [7], [0, 0, 0]])
def test_degenerate_inputs_are_zero(balances) -> None:
    assert DistributionAnalyzer().gini_coefficient(balances) == 0.0


def test_one_dominant_holder() -> None:
    assert DistributionAnalyzer().gini_coefficient([1, 1, 1, 97]) == pytest.approx(0.72)


@pytest.mark.parametrize("n", [2, 10, 1000])
def test_single_holder_owns_everything(n: int) -> None:
    balances = [0] * (n - 1) + [5_000_000_000]
    assert DistributionAnalyzer().gini_coefficient(balances) == pytest.approx((n - 1) / n)


def test_order_of_input_does_not_matter() -> None:
    a = DistributionAnalyzer()
    assert a.gini_coefficient([97, 1, 1, 1]) == a.gini_coefficient([1, 1, 1, 97])


def test_balances_beyond_float_precision_stay_exact() -> None:
    big = 10**30
    g = DistributionAnalyzer().gini_coefficient([big + 1, big])
    # Exact value is 1 / (4 * big + 2); a float-sum implementation would give 0.
    assert 0.0 < g < 1e-20


def test_decimal_string_balances_are_accepted() -> None:
    assert DistributionAnalyzer().gini_coefficient(["1", "1", "1", "97"]) == pytest.approx(0.72)


@pytest.mark.parametrize("bad", [[1, -1], [1.5, 2], ["abc"]])
def test_invalid_balances_rejected(bad) -> None:
    with pytest.raises(InvalidInput):
        DistributionAnalyzer().gini_coefficient(bad)


def test_gini_always_within_unit_interval() -> None:
    a = DistributionAnalyzer()
    for balances in ([1, 2, 3], [0, 0, 1], [10**18, 1, 1, 1, 1], list(range(500))):
        g = a.gini_coefficient(balances)
        assert 0.0 <= g <= 1.0
