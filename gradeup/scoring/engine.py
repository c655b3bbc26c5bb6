"""Deterministic GradeUp composite score engine.

The score is the sum of three bounded components:

* athletic (0-400): sport tier weighted rating plus deal history,
* social (0-300): logarithmic follower reach,
* academic (0-300): GPA scaled by excellence, major and consistency
  multipliers, plus small verification bonuses.

Nothing here touches the database; ``ScoreInputs`` is assembled by the
repository layer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

CALCULATION_VERSION = "2.0"

ATHLETIC_MAX = 400
SOCIAL_MAX = 300
ACADEMIC_MAX = 300
TOTAL_MAX = 1000

DEFAULT_ATHLETIC_RATING = 50
DEFAULT_SPORT_TIER = 3
DEFAULT_GPA = Decimal("2.5")
DEFAULT_MAJOR_CATEGORY = "General Studies"
DEFAULT_MAJOR_MULTIPLIER = Decimal("1.00")

GRADES_VERIFIED_BONUS = 15
ENROLLMENT_VERIFIED_BONUS = 10
TREND_DEADBAND = 10

# (minimum gpa, multiplier), checked top-down.
GPA_MULTIPLIERS: tuple[tuple[Decimal, Decimal], ...] = (
    (Decimal("4.0"), Decimal("1.50")),
    (Decimal("3.75"), Decimal("1.35")),
    (Decimal("3.5"), Decimal("1.25")),
    (Decimal("3.0"), Decimal("1.10")),
)

# (minimum verified terms, minimum term gpa, bonus), checked top-down.
CONSISTENCY_BONUSES: tuple[tuple[int, Decimal, Decimal], ...] = (
    (6, Decimal("3.5"), Decimal("1.15")),
    (4, Decimal("3.5"), Decimal("1.10")),
    (4, Decimal("3.0"), Decimal("1.07")),
    (2, Decimal("3.0"), Decimal("1.05")),
)


@dataclass(frozen=True)
class ScoreGrade:
    letter: str
    label: str
    color: str
    min_score: int

    def to_dict(self) -> dict[str, str]:
        return {"letter": self.letter, "label": self.label, "color": self.color}


GRADE_BANDS: tuple[ScoreGrade, ...] = (
    ScoreGrade("S", "Elite", "#FFD700", 900),
    ScoreGrade("A+", "Exceptional", "#00C853", 800),
    ScoreGrade("A", "Excellent", "#00E676", 700),
    ScoreGrade("B+", "Very Good", "#76FF03", 600),
    ScoreGrade("B", "Good", "#C6FF00", 500),
    ScoreGrade("C+", "Above Average", "#FFEB3B", 400),
    ScoreGrade("C", "Average", "#FFC107", 300),
    ScoreGrade("D", "Below Average", "#FF9800", 200),
    ScoreGrade("F", "Needs Improvement", "#FF5722", 0),
)


@dataclass(frozen=True)
class ScoreInputs:
    """Athlete attributes the score is computed from."""

    athletic_rating: int | None = None
    sport_tier: int | None = None
    deals_completed: int = 0
    avg_deal_rating: Decimal | None = None
    total_followers: int = 0
    instagram_followers: int = 0
    twitter_followers: int = 0
    tiktok_followers: int = 0
    gpa: Decimal | None = None
    cumulative_gpa: Decimal | None = None
    major_category: str | None = None
    major_multiplier: Decimal | None = None
    verified_term_gpas: tuple[Decimal, ...] = field(default_factory=tuple)
    grades_verified: bool = False
    enrollment_verified: bool = False
    sport_verified: bool = False


@dataclass(frozen=True)
class ScoreComponents:
    score: int
    athletic_score: int
    social_score: int
    academic_score: int
    gpa_multiplier: Decimal
    major_multiplier: Decimal
    consistency_bonus: Decimal
    breakdown: dict[str, Any]

    @property
    def grade(self) -> ScoreGrade:
        return score_grade(self.score)


def _dec(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def round_half_up(value: Decimal | float) -> int:
    return int(_dec(value).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def athletic_score(inputs: ScoreInputs) -> int:
    rating = inputs.athletic_rating if inputs.athletic_rating is not None else DEFAULT_ATHLETIC_RATING
    tier = inputs.sport_tier if inputs.sport_tier is not None else DEFAULT_SPORT_TIER
    tier_weight = Decimal("1.6") - Decimal(tier) * Decimal("0.15")

    score = round_half_up(Decimal(rating) * 2 * tier_weight)
    score += min(max(inputs.deals_completed, 0) * 5, 100)
    avg_rating = _dec(inputs.avg_deal_rating) if inputs.avg_deal_rating is not None else Decimal(0)
    if avg_rating > 0:
        score += round_half_up(avg_rating / 5 * 100)
    return _clamp(score, 0, ATHLETIC_MAX)


def social_score(inputs: ScoreInputs) -> int:
    followers = inputs.total_followers or 0
    if followers <= 0:
        return 0
    return _clamp(round_half_up((math.log10(followers) - 2) * 60), 0, SOCIAL_MAX)


def effective_gpa(inputs: ScoreInputs) -> Decimal:
    if inputs.cumulative_gpa is not None:
        return _dec(inputs.cumulative_gpa)
    if inputs.gpa is not None:
        return _dec(inputs.gpa)
    return DEFAULT_GPA


def gpa_multiplier(gpa: Decimal) -> Decimal:
    for threshold, multiplier in GPA_MULTIPLIERS:
        if gpa >= threshold:
            return multiplier
    return Decimal("1.00")


def consistency_bonus(term_gpas: tuple[Decimal, ...] | list[Decimal]) -> Decimal:
    count = len(term_gpas)
    if count == 0:
        return Decimal("1.00")
    lowest = min(_dec(gpa) for gpa in term_gpas)
    for min_terms, min_gpa, bonus in CONSISTENCY_BONUSES:
        if count >= min_terms and lowest >= min_gpa:
            return bonus
    return Decimal("1.00")


def academic_score(inputs: ScoreInputs) -> tuple[int, Decimal, Decimal, Decimal]:
    """Return the academic score and its three multipliers."""
    gpa = effective_gpa(inputs)
    gpa_mult = gpa_multiplier(gpa)
    major_mult = _dec(inputs.major_multiplier) if inputs.major_multiplier is not None else DEFAULT_MAJOR_MULTIPLIER
    bonus = consistency_bonus(inputs.verified_term_gpas)

    score = min(round_half_up(gpa / 4 * 200 * gpa_mult * major_mult * bonus), ACADEMIC_MAX)
    if inputs.grades_verified:
        score = min(score + GRADES_VERIFIED_BONUS, ACADEMIC_MAX)
    if inputs.enrollment_verified:
        score = min(score + ENROLLMENT_VERIFIED_BONUS, ACADEMIC_MAX)
    return max(score, 0), gpa_mult, major_mult, bonus


def calculate_components(inputs: ScoreInputs) -> ScoreComponents:
    """Compute the bounded composite score for one athlete."""
    athletic = athletic_score(inputs)
    social = social_score(inputs)
    academic, gpa_mult, major_mult, bonus = academic_score(inputs)
    total = min(athletic + social + academic, TOTAL_MAX)

    breakdown = {
        "version": CALCULATION_VERSION,
        "athletic": {
            "score": athletic,
            "max": ATHLETIC_MAX,
            "components": {
                "base_rating": inputs.athletic_rating if inputs.athletic_rating is not None else DEFAULT_ATHLETIC_RATING,
                "sport_tier": inputs.sport_tier if inputs.sport_tier is not None else DEFAULT_SPORT_TIER,
                "deals_completed": inputs.deals_completed,
                "avg_rating": float(inputs.avg_deal_rating or 0),
            },
        },
        "social": {
            "score": social,
            "max": SOCIAL_MAX,
            "components": {
                "total_followers": inputs.total_followers,
                "instagram": inputs.instagram_followers,
                "twitter": inputs.twitter_followers,
                "tiktok": inputs.tiktok_followers,
            },
        },
        "academic": {
            "score": academic,
            "max": ACADEMIC_MAX,
            "components": {
                "gpa": float(effective_gpa(inputs)),
                "major": inputs.major_category or DEFAULT_MAJOR_CATEGORY,
                "semesters_tracked": len(inputs.verified_term_gpas),
                "grades_verified": inputs.grades_verified,
                "enrollment_verified": inputs.enrollment_verified,
            },
            "multipliers": {
                "gpa_multiplier": float(gpa_mult),
                "major_multiplier": float(major_mult),
                "consistency_bonus": float(bonus),
            },
        },
    }

    return ScoreComponents(
        score=total,
        athletic_score=athletic,
        social_score=social,
        academic_score=academic,
        gpa_multiplier=gpa_mult,
        major_multiplier=major_mult,
        consistency_bonus=bonus,
        breakdown=breakdown,
    )


def score_grade(score: int) -> ScoreGrade:
    for band in GRADE_BANDS:
        if score >= band.min_score:
            return band
    return GRADE_BANDS[-1]


def score_trend(scores: list[int]) -> str:
    """Trend from newest-first scores: up, down or stable."""
    if len(scores) < 2:
        return "stable"
    diff = scores[0] - scores[1]
    if diff > TREND_DEADBAND:
        return "up"
    if diff < -TREND_DEADBAND:
        return "down"
    return "stable"


def score_statistics(scores: list[int]) -> dict[str, int] | None:
    if not scores:
        return None
    return {
        "current": scores[0],
        "highest": max(scores),
        "lowest": min(scores),
        "average": round_half_up(Decimal(sum(scores)) / len(scores)),
    }


def is_verified(inputs: ScoreInputs) -> bool:
    """Whether the athlete passes the verified-only search filter."""
    return inputs.grades_verified and inputs.enrollment_verified and inputs.sport_verified
