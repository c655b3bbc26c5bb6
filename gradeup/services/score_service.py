"""GradeUp score calculation, history and search."""

from __future__ import annotations

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import SQLAlchemyError

from gradeup.core.config import get_config
from gradeup.core.dependencies import CurrentUser
from gradeup.core.exceptions import GradeUpException, NotFoundError, ValidationError
from gradeup.models.score import GradeUpScore
from gradeup.repositories.scores import AthleteSearchFilters, ScoreRepository, athlete_to_inputs
from gradeup.scoring.engine import (
    ACADEMIC_MAX,
    ATHLETIC_MAX,
    SOCIAL_MAX,
    ScoreComponents,
    calculate_components,
    is_verified,
    score_grade,
    score_statistics,
    score_trend,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 10


@dataclass(frozen=True)
class ScoreResult:
    athlete_id: uuid.UUID
    components: ScoreComponents
    history_id: uuid.UUID

    def to_dict(self) -> dict[str, Any]:
        c = self.components
        return {
            "athlete_id": str(self.athlete_id),
            "score": c.score,
            "components": {
                "athletic": _component(c.athletic_score, ATHLETIC_MAX),
                "social": _component(c.social_score, SOCIAL_MAX),
                "academic": _component(c.academic_score, ACADEMIC_MAX),
            },
            "multipliers": {
                "gpa": float(c.gpa_multiplier),
                "major": float(c.major_multiplier),
                "consistency": float(c.consistency_bonus),
            },
            "breakdown": c.breakdown,
            "grade": c.grade.to_dict(),
        }


def _component(score: int, maximum: int) -> dict[str, int]:
    return {"score": score, "max": maximum, "percentage": round(score / maximum * 100)}


class GradeUpScoreService:
    def __init__(self, repository: ScoreRepository, batch_limit: int | None = None, workers: int | None = None) -> None:
        cfg = get_config()
        self.repository = repository
        self.batch_limit = batch_limit or cfg.SCORE_BATCH_LIMIT
        self.history_max = cfg.SCORE_HISTORY_MAX
        self.workers = workers or cfg.SCORE_BATCH_WORKERS

    def calculate(self, athlete_id: uuid.UUID) -> ScoreResult:
        """Score one athlete, append a history row and cache the total."""
        inputs = self.repository.get_score_inputs(athlete_id)
        if inputs is None:
            raise NotFoundError("Athlete not found.")
        components = calculate_components(inputs)
        row = self.repository.add_score(athlete_id, components, inputs)
        self.repository.update_cached_score(athlete_id, components.score)
        self.repository.commit()
        logger.info(
            "score.calculated score=%s",
            components.score,
            extra={"event": "score.calculated", "athlete_id": str(athlete_id)},
        )
        return ScoreResult(athlete_id=athlete_id, components=components, history_id=row.id)

    def calculate_for_user(self, user: CurrentUser, athlete_id: uuid.UUID | None = None) -> ScoreResult:
        return self.calculate(athlete_id or self.resolve_athlete_id(user))

    def resolve_athlete_id(self, user: CurrentUser) -> uuid.UUID:
        athlete_id = self.repository.find_athlete_id(user.user_id)
        if athlete_id is None:
            raise ValidationError(fields={"athlete_id": ["athlete_id required or user must be an athlete"]})
        return athlete_id

    def batch_calculate(self, athlete_ids: list[uuid.UUID]) -> dict[str, Any]:
        """Score up to ``batch_limit`` athletes; one failure never aborts the rest."""
        if not athlete_ids:
            raise ValidationError(fields={"athlete_ids": ["athlete_ids must contain at least one id"]})
        if len(athlete_ids) > self.batch_limit:
            raise ValidationError(fields={"athlete_ids": [f"Maximum {self.batch_limit} athletes per batch"]})

        if self.workers > 1 and self.repository.thread_safe:
            with ThreadPoolExecutor(max_workers=self.workers) as pool:
                results = list(pool.map(self._calculate_isolated, athlete_ids))
        else:
            results = [self._calculate_isolated(athlete_id) for athlete_id in athlete_ids]

        successful = sum(1 for item in results if item["success"])
        logger.info(
            "score.batch.completed total=%s successful=%s",
            len(results),
            successful,
            extra={"event": "score.batch.completed"},
        )
        return {
            "total": len(results),
            "successful": successful,
            "failed": len(results) - successful,
            "results": results,
        }

    def _calculate_isolated(self, athlete_id: uuid.UUID) -> dict[str, Any]:
        try:
            result = self.calculate(athlete_id)
        except (GradeUpException, SQLAlchemyError) as exc:
            self.repository.rollback()
            logger.warning(
                "score.batch.item_failed: %s",
                exc,
                extra={"event": "score.batch.item_failed", "athlete_id": str(athlete_id)},
            )
            return {"athlete_id": str(athlete_id), "score": None, "success": False, "error": str(exc), "grade": None}
        return {
            "athlete_id": str(athlete_id),
            "score": result.components.score,
            "success": True,
            "error": None,
            "grade": result.components.grade.to_dict(),
        }

    def get_history(self, athlete_id: uuid.UUID, limit: int | None = None) -> dict[str, Any]:
        limit = min(max(limit or DEFAULT_HISTORY_LIMIT, 1), self.history_max)
        rows = self.repository.list_history(athlete_id, limit)
        scores = [row.score for row in rows]
        return {
            "athlete_id": str(athlete_id),
            "history": [_history_entry(row) for row in rows],
            "trend": score_trend(scores),
            "statistics": score_statistics(scores),
            "count": len(rows),
        }

    def get_breakdown(self, athlete_id: uuid.UUID) -> dict[str, Any]:
        current = self.repository.get_cached_score(athlete_id)
        if current is None:
            raise NotFoundError("Athlete not found.")
        latest = self.repository.list_history(athlete_id, 1)
        breakdown = latest[0].input_data.get("breakdown", {}) if latest else {}
        return {
            "athlete_id": str(athlete_id),
            "current_score": current,
            "breakdown": breakdown,
            "grade": score_grade(current).to_dict(),
        }

    def search_by_score(self, filters: AthleteSearchFilters) -> list[dict[str, Any]]:
        athletes = self.repository.search_athletes(filters)
        results = []
        for athlete in athletes:
            inputs = athlete_to_inputs(athlete)
            verified = is_verified(inputs)
            gpa = inputs.cumulative_gpa if inputs.cumulative_gpa is not None else inputs.gpa
            if filters.verified_only and not verified:
                continue
            results.append(
                {
                    "athlete_id": str(athlete.id),
                    "name": athlete.full_name,
                    "gradeup_score": athlete.gradeup_score,
                    "grade": score_grade(athlete.gradeup_score).to_dict(),
                    "major_category": inputs.major_category,
                    "gpa": float(gpa) if gpa is not None else None,
                    "total_followers": inputs.total_followers,
                    "verified": verified,
                }
            )
        return results[: filters.limit]


def _history_entry(row: GradeUpScore) -> dict[str, Any]:
    return {
        "id": str(row.id),
        "score": row.score,
        "athletic_score": row.athletic_score,
        "social_score": row.social_score,
        "academic_score": row.academic_score,
        "gpa_multiplier": float(row.gpa_multiplier),
        "major_multiplier": float(row.major_multiplier),
        "consistency_bonus": float(row.consistency_bonus),
        "calculation_version": row.calculation_version,
        "calculated_at": row.calculated_at.isoformat() if row.calculated_at else None,
        "grade": score_grade(row.score).to_dict(),
    }
