"""Legal grade fractions and nearest-fraction snapping."""

from __future__ import annotations

from collections.abc import Sequence

FRACTION_OPTIONS: tuple[float, ...] = (
    1.0,
    0.9,
    0.8333333,
    0.8,
    0.75,
    0.7,
    0.6666667,
    0.6,
    0.5,
    0.4,
    0.3333333,
    0.3,
    0.25,
    0.2,
    0.1666667,
    0.1428571,
    0.125,
    0.1111111,
    0.1,
    0.05,
)

# Candidate order matters: ties go to the earliest candidate.
FRACTION_OPTIONS_FULL: tuple[float, ...] = (
    0.0,
    *FRACTION_OPTIONS,
    *(-value for value in FRACTION_OPTIONS),
)


def match_grade_options(grade: float, options: Sequence[float] = FRACTION_OPTIONS_FULL) -> float:
    """Return the candidate in ``options`` nearest to ``grade``."""

    if not options:
        raise ValueError("no grade options to match against")
    best = options[0]
    best_distance = abs(grade - best)
    for candidate in options[1:]:
        distance = abs(grade - candidate)
        if distance < best_distance:
            best = candidate
            best_distance = distance
    return best
