from __future__ import annotations

import random
from decimal import Decimal

import pytest

from gradeup.scoring.engine import (
    ACADEMIC_MAX,
    ATHLETIC_MAX,
    SOCIAL_MAX,
    ScoreInputs,
    academic_score,
    athletic_score,
    calculate_components,
    consistency_bonus,
    gpa_multiplier,
    is_verified,
    round_half_up,
    score_grade,
    score_statistics,
    score_trend,
    social_score,
)


def test_defaults_score_a_blank_athlete():
    components = calculate_components(ScoreInputs())
    # rating 50 at tier 3: 100 * 1.15
    assert components.athletic_score == 115
    assert components.social_score == 0
    # gpa 2.5 with every multiplier at 1.00
    assert components.academic_score == 125
    assert components.score == 240
    assert components.grade.letter == "D"


def test_maximal_athlete_is_capped_at_one_thousand():
    inputs = ScoreInputs(
        athletic_rating=100,
        sport_tier=1,
        deals_completed=40,
        avg_deal_rating=Decimal("5.0"),
        total_followers=10_000_000,
        cumulative_gpa=Decimal("4.0"),
        major_multiplier=Decimal("2.00"),
        verified_term_gpas=tuple(Decimal("3.9") for _ in range(8)),
        grades_verified=True,
        enrollment_verified=True,
    )
    components = calculate_components(inputs)
    assert components.athletic_score == ATHLETIC_MAX
    assert components.social_score == SOCIAL_MAX
    assert components.academic_score == ACADEMIC_MAX
    assert components.score == 1000
    assert components.grade.letter == "S"


def test_athletic_score_adds_deal_history():
    inputs = ScoreInputs(athletic_rating=70, sport_tier=2, deals_completed=3, avg_deal_rating=Decimal("4.2"))
    # round(140 * 1.30) + 15 + round(84)
    assert athletic_score(inputs) == 182 + 15 + 84


def test_deal_count_contribution_is_capped():
    assert athletic_score(ScoreInputs(deals_completed=50)) - athletic_score(ScoreInputs()) == 100


@pytest.mark.parametrize(
    ("followers", "expected"),
    [(0, 0), (50, 0), (100, 0), (1000, 60), (10_000, 120), (1_000_000, 240), (10**9, 300)],
)
def test_social_score_is_logarithmic(followers, expected):
    assert social_score(ScoreInputs(total_followers=followers)) == expected


def test_academic_rounds_half_up():
    # 3.8 / 4 * 200 * 1.35 = 256.5
    score, gpa_mult, major_mult, bonus = academic_score(ScoreInputs(cumulative_gpa=Decimal("3.8")))
    assert score == 257
    assert gpa_mult == Decimal("1.35")
    assert major_mult == Decimal("1.00")
    assert bonus == Decimal("1.00")


def test_cumulative_gpa_wins_over_current_gpa():
    with_cumulative = academic_score(ScoreInputs(gpa=Decimal("2.0"), cumulative_gpa=Decimal("3.0")))[0]
    assert with_cumulative == academic_score(ScoreInputs(gpa=Decimal("3.0")))[0]


def test_verification_bonuses_stack_and_stay_capped():
    base = academic_score(ScoreInputs(cumulative_gpa=Decimal("3.8")))[0]
    verified = academic_score(
        ScoreInputs(cumulative_gpa=Decimal("3.8"), grades_verified=True, enrollment_verified=True)
    )[0]
    assert verified == base + 25
    capped = academic_score(
        ScoreInputs(
            cumulative_gpa=Decimal("4.0"),
            major_multiplier=Decimal("1.00"),
            grades_verified=True,
            enrollment_verified=True,
        )
    )[0]
    assert capped == ACADEMIC_MAX


@pytest.mark.parametrize(
    ("gpa", "expected"),
    [("4.0", "1.50"), ("3.8", "1.35"), ("3.75", "1.35"), ("3.5", "1.25"), ("3.2", "1.10"), ("2.99", "1.00")],
)
def test_gpa_multiplier_thresholds(gpa, expected):
    assert gpa_multiplier(Decimal(gpa)) == Decimal(expected)


@pytest.mark.parametrize(
    ("terms", "expected"),
    [
        (["3.6"] * 6, "1.15"),
        (["3.6"] * 5, "1.10"),
        (["3.6"] * 4, "1.10"),
        (["3.2"] * 4, "1.07"),
        (["3.2", "3.0"], "1.05"),
        (["3.2", "2.9"], "1.00"),
        (["3.9"], "1.00"),
        ([], "1.00"),
    ],
)
def test_consistency_bonus(terms, expected):
    assert consistency_bonus([Decimal(value) for value in terms]) == Decimal(expected)


@pytest.mark.parametrize(
    ("score", "letter"),
    [(1000, "S"), (900, "S"), (899, "A+"), (800, "A+"), (700, "A"), (650, "B+"), (500, "B"),
     (400, "C+"), (300, "C"), (200, "D"), (199, "F"), (0, "F")],
)
def test_grade_bands(score, letter):
    assert score_grade(score).letter == letter


def test_components_always_within_bounds():
    rng = random.Random(20261019)
    for _ in range(300):
        inputs = ScoreInputs(
            athletic_rating=rng.randint(0, 100),
            sport_tier=rng.randint(1, 5),
            deals_completed=rng.randint(0, 60),
            avg_deal_rating=Decimal(str(round(rng.uniform(0, 5), 2))),
            total_followers=rng.choice([0, rng.randint(1, 10**8)]),
            cumulative_gpa=Decimal(str(round(rng.uniform(0, 4), 2))),
            major_multiplier=Decimal(str(round(rng.uniform(0.5, 2.0), 2))),
            verified_term_gpas=tuple(Decimal(str(round(rng.uniform(2, 4), 2))) for _ in range(rng.randint(0, 8))),
            grades_verified=rng.random() < 0.5,
            enrollment_verified=rng.random() < 0.5,
        )
        c = calculate_components(inputs)
        assert 0 <= c.athletic_score <= ATHLETIC_MAX
        assert 0 <= c.social_score <= SOCIAL_MAX
        assert 0 <= c.academic_score <= ACADEMIC_MAX
        assert c.score == min(c.athletic_score + c.social_score + c.academic_score, 1000)


def test_calculation_is_deterministic():
    inputs = ScoreInputs(athletic_rating=64, sport_tier=4, total_followers=12345, gpa=Decimal("3.33"))
    assert calculate_components(inputs) == calculate_components(inputs)


def test_breakdown_shape():
    breakdown = calculate_components(ScoreInputs(major_category="Engineering")).breakdown
    assert breakdown["version"] == "2.0"
    assert set(breakdown) == {"version", "athletic", "social", "academic"}
    assert breakdown["academic"]["components"]["major"] == "Engineering"
    assert breakdown["academic"]["multipliers"]["gpa_multiplier"] == 1.0


def test_verification_does_not_change_sport_side():
    plain = calculate_components(ScoreInputs())
    verified = calculate_components(ScoreInputs(sport_verified=True))
    assert plain.score == verified.score
    assert not is_verified(ScoreInputs(sport_verified=True))
    assert is_verified(ScoreInputs(grades_verified=True, enrollment_verified=True, sport_verified=True))


def test_trend_uses_deadband():
    assert score_trend([500]) == "stable"
    assert score_trend([511, 500]) == "up"
    assert score_trend([510, 500]) == "stable"
    assert score_trend([489, 500]) == "down"


def test_statistics():
    assert score_statistics([]) is None
    assert score_statistics([600, 500, 401]) == {"current": 600, "highest": 600, "lowest": 401, "average": 500}


def test_round_half_up():
    assert round_half_up(Decimal("2.5")) == 3
    assert round_half_up(Decimal("-0.4")) == 0
