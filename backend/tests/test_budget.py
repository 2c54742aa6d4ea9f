import pytest

from weekend.schemas.search import DistanceBudget, TimeBudget
from weekend.services.budget import (
    BudgetError,
    clamp_radius,
    search_radius,
    translate_budget,
)


def test_distance_in_km_is_converted_to_meters():
    budget = translate_budget("distance", "1.5", "km")
    assert isinstance(budget, DistanceBudget)
    assert budget.meters == 1500


def test_distance_in_meters():
    budget = translate_budget("distance", 800, "m")
    assert budget.meters == 800
    assert budget.limit == 800


def test_time_budget_keeps_mode():
    budget = translate_budget("time", time="20", mode="driving")
    assert isinstance(budget, TimeBudget)
    assert budget.minutes == 20
    assert budget.mode == "driving"


@pytest.mark.parametrize("value", [None, "", "   ", "abc", "0", "-3", 0, -1.5, "nan", "inf"])
def test_invalid_distance_is_rejected(value):
    with pytest.raises(BudgetError):
        translate_budget("distance", value, "km")


@pytest.mark.parametrize("value", [None, "", "x", "0", -10])
def test_invalid_time_is_rejected(value):
    with pytest.raises(BudgetError):
        translate_budget("time", time=value, mode="walking")


def test_unknown_mode_is_rejected():
    with pytest.raises(BudgetError):
        translate_budget("time", time="10", mode="flying")


def test_unknown_metric_is_rejected():
    with pytest.raises(BudgetError):
        translate_budget("altitude", "10")


def test_unknown_unit_is_rejected():
    with pytest.raises(BudgetError):
        translate_budget("distance", "10", "mi")


def test_radius_is_clamped():
    assert clamp_radius(50) == 200
    assert clamp_radius(20000) == 12000
    assert clamp_radius(1234.4) == 1234


def test_search_radius_for_distance_budget():
    assert search_radius(DistanceBudget(meters=50)) == 200
    assert search_radius(DistanceBudget(meters=20000)) == 12000


def test_search_radius_for_time_budget_uses_mode_speed():
    # 10 min walking at 83.3 m/min
    assert search_radius(TimeBudget(minutes=10, mode="walking")) == 833
    # 60 min driving would be 34 km, clamped
    assert search_radius(TimeBudget(minutes=60, mode="driving")) == 12000
