import math

from weekend.schemas.search import Budget, DistanceBudget, TimeBudget

# Average speeds (m/min) used for the reachability radius and heuristic ETAs.
SPEEDS_M_PER_MIN = {
    "walking": 83.3,  # ~5 km/h
    "driving": 566.7,  # ~34 km/h urban average
}

MIN_RADIUS_M = 200
MAX_RADIUS_M = 12000


class BudgetError(ValueError):
    pass


def _parse_positive(value: str | float | int | None, label: str) -> float:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise BudgetError(f"Missing {label} value")
    if isinstance(value, bool):
        raise BudgetError(f"Invalid {label} value: {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise BudgetError(f"Invalid {label} value: {value!r}")
    if not math.isfinite(number) or number <= 0:
        raise BudgetError(f"Invalid {label} value: {value!r}")
    return number


def speed_for(mode: str) -> float:
    try:
        return SPEEDS_M_PER_MIN[mode]
    except KeyError:
        raise BudgetError(f"Unknown travel mode: {mode!r}")


def translate_budget(
    metric: str,
    distance: str | float | None = None,
    distance_unit: str = "km",
    time: str | float | None = None,
    mode: str = "walking",
) -> Budget:
    if metric == "distance":
        value = _parse_positive(distance, "distance")
        if distance_unit == "km":
            return DistanceBudget(meters=value * 1000)
        if distance_unit == "m":
            return DistanceBudget(meters=value)
        raise BudgetError(f"Unknown distance unit: {distance_unit!r}")

    if metric == "time":
        minutes = _parse_positive(time, "time")
        speed_for(mode)
        return TimeBudget(minutes=minutes, mode=mode)

    raise BudgetError(f"Unknown metric: {metric!r}")


def clamp_radius(meters: float) -> int:
    return min(max(round(meters), MIN_RADIUS_M), MAX_RADIUS_M)


def search_radius(budget: Budget) -> int:
    """Radius in meters for the geodata query, clamped to bound provider load."""
    if isinstance(budget, TimeBudget):
        return clamp_radius(budget.minutes * speed_for(budget.mode))
    return clamp_radius(budget.meters)
