import pytest

from canvasqti.grading import FRACTION_OPTIONS_FULL, match_grade_options


def test_candidates_start_with_zero_then_positives_then_negatives() -> None:
    assert FRACTION_OPTIONS_FULL[0] == 0.0
    assert FRACTION_OPTIONS_FULL[1] == 1.0
    assert FRACTION_OPTIONS_FULL[21] == -1.0
    assert len(FRACTION_OPTIONS_FULL) == 41


@pytest.mark.parametrize(
    ("grade", "expected"),
    [
        (1 / 3, 0.3333333),
        (0.33, 0.3333333),
        (0.97, 1.0),
        (1.5, 1.0),
        (0.0, 0.0),
        (0.01, 0.0),
        (-0.5, -0.5),
        (1 / 7, 0.1428571),
    ],
)
def test_match_grade_options_snaps_to_nearest_fraction(grade: float, expected: float) -> None:
    assert match_grade_options(grade) == expected


def test_match_grade_options_ties_go_to_first_candidate() -> None:
    assert match_grade_options(0.5, [0.25, 0.75]) == 0.25
    assert match_grade_options(0.5, [0.75, 0.25]) == 0.75


def test_match_grade_options_requires_candidates() -> None:
    with pytest.raises(ValueError):
        match_grade_options(0.5, [])
