from gradeup.scoring.engine import (
    CALCULATION_VERSION,
    GRADE_BANDS,
    ScoreComponents,
    ScoreGrade,
    ScoreInputs,
    calculate_components,
    is_verified,
    score_grade,
    score_statistics,
    score_trend,
)

__all__ = [
    "CALCULATION_VERSION",
    "GRADE_BANDS",
    "ScoreComponents",
    "ScoreGrade",
    "ScoreInputs",
    "calculate_components",
    "is_verified",
    "score_grade",
    "score_statistics",
    "score_trend",
]
