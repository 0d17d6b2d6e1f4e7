"""Discretizer: map a raw feature value to a categorical bin label.

Mining looks for combinations of feature values that keep producing the same
outcome. Raw numbers almost never repeat exactly, so every value is first
dropped into a small set of named bins ("good"/"average"/"poor",
"hot"/"neutral"/"cold", ...) chosen per feature family.

Dispatch is by substring or exact match on the feature identifier, checked
in a fixed precedence order - the first rule that matches wins:

| Feature family           | Match      | Bins                                      |
|--------------------------|------------|-------------------------------------------|
| ERA                      | "era"      | < 3.5 good, < 4.5 average, else poor      |
| WHIP                     | "whip"     | < 1.2 good, < 1.4 average, else poor      |
| Win percentage           | "win_pct"  | < 0.45 poor, < 0.55 average, else good    |
| OPS                      | "ops"      | < 0.700 poor, < 0.800 average, else good  |
| Streak                   | "streak"   | < -2 cold, > 2 hot, else neutral          |
| Runs in recent games     | "last_runs"| < 3 low, > 6 high, else medium            |
| Run line                 | == primary_rl | < 0 favorite, else underdog            |
| Over/under line          | == o_u_line   | < 8.5 low, > 9.5 high, else medium     |
| Betting handle/bets (0-1)| "handle"/"bets" | <= 0 minimal, < 0.3 low, < 0.6 medium, else high |
| Flags                    | "handedness"/"same_"/"last_win" | truthy yes, else no |
| Last-3 form              | "last_3"   | < 0.333 poor, > 0.667 good, else average  |
| Anything else            |            | the value itself as a string              |

Missing values always bin to "null", and so does any value a numeric rule
cannot parse as a number. The function is pure and cheap because it runs
for every (row, feature) pair during both mining and matching.
"""

import math
from numbers import Real
from typing import Any

NULL_BIN = "null"

RUN_LINE_FEATURE = "primary_rl"
OVER_UNDER_LINE_FEATURE = "o_u_line"


def is_missing(value: Any) -> bool:
    """True for None and for NaN (how pandas reports a missing float)."""
    return value is None or (isinstance(value, float) and math.isnan(value))


def _to_number(value: Any) -> float | None:
    """Parse a value for a numeric rule, or None when it is not a number."""
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return None if math.isnan(number) else number


def _stringify(value: Any) -> str:
    # Keeps 3 and 3.0 in the same bin: pandas turns an int column holding a
    # missing value into floats, so the same value can arrive in either form.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _three_way(number: float, low: float, high: float, labels: tuple[str, str, str]) -> str:
    """Bin with strict lower bounds: < low, < high, otherwise."""
    if number < low:
        return labels[0]
    if number < high:
        return labels[1]
    return labels[2]


def _outer_band(number: float, low: float, high: float, labels: tuple[str, str, str]) -> str:
    """Bin with a middle band: < low, > high, otherwise the middle label."""
    if number < low:
        return labels[0]
    if number > high:
        return labels[2]
    return labels[1]


def _handle_bin(number: float) -> str:
    if number <= 0:
        return "minimal"
    if number < 0.3:
        return "low"
    if number < 0.6:
        return "medium"
    return "high"


def bin_value(feature: str, value: Any) -> str:
    """Return the bin label for one feature value.

    Args:
        feature: Feature identifier (column name in the flattened rows)
        value: Raw value - number, numeric string, boolean, or missing

    Returns:
        Bin label such as "good", "hot", "yes" or "null"
    """
    if is_missing(value):
        return NULL_BIN

    if "era" in feature:
        number = _to_number(value)
        return NULL_BIN if number is None else _three_way(number, 3.5, 4.5, ("good", "average", "poor"))

    if "whip" in feature:
        number = _to_number(value)
        return NULL_BIN if number is None else _three_way(number, 1.2, 1.4, ("good", "average", "poor"))

    if "win_pct" in feature:
        number = _to_number(value)
        return NULL_BIN if number is None else _three_way(number, 0.45, 0.55, ("poor", "average", "good"))

    if "ops" in feature:
        number = _to_number(value)
        return NULL_BIN if number is None else _three_way(number, 0.700, 0.800, ("poor", "average", "good"))

    if "streak" in feature:
        number = _to_number(value)
        return NULL_BIN if number is None else _outer_band(number, -2, 2, ("cold", "neutral", "hot"))

    if "last_runs" in feature:
        number = _to_number(value)
        return NULL_BIN if number is None else _outer_band(number, 3, 6, ("low", "medium", "high"))

    if feature == RUN_LINE_FEATURE:
        number = _to_number(value)
        if number is None:
            return NULL_BIN
        return "favorite" if number < 0 else "underdog"

    if feature == OVER_UNDER_LINE_FEATURE:
        number = _to_number(value)
        return NULL_BIN if number is None else _outer_band(number, 8.5, 9.5, ("low", "medium", "high"))

    if "handle" in feature or "bets" in feature:
        number = _to_number(value)
        return NULL_BIN if number is None else _handle_bin(number)

    if "handedness" in feature or "same_" in feature or "last_win" in feature:
        return "yes" if value else "no"

    if "last_3" in feature:
        number = _to_number(value)
        return NULL_BIN if number is None else _outer_band(number, 0.333, 0.667, ("poor", "average", "good"))

    return _stringify(value)


def combo_key(row: dict[str, Any], features: tuple[str, ...] | list[str], delimiter: str = "|") -> str:
    """Bin each feature of a subset on one row and join the labels in subset order.

    A feature absent from the row counts as missing.
    """
    return delimiter.join(bin_value(feature, row.get(feature)) for feature in features)
