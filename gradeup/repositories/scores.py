"""Score persistence boundary."""

from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session, selectinload

from gradeup.models.athlete import AcademicRecord, Athlete, MajorCategory
from gradeup.models.score import GradeUpScore
from gradeup.scoring.engine import CALCULATION_VERSION, ScoreComponents, ScoreInputs
from gradeup.services.base_service import BaseService


@dataclass(frozen=True)
class AthleteSearchFilters:
    min_score: int | None = None
    max_score: int | None = None
    major_category: str | None = None
    min_gpa: Decimal | None = None
    verified_only: bool = False
    limit: int = 20


def athlete_to_inputs(athlete: Athlete, verified_term_gpas: list[Decimal] | tuple[Decimal, ...] = ()) -> ScoreInputs:
    """Project an athlete row onto the score engine inputs."""
    major = athlete.major_category
    return ScoreInputs(
        athletic_rating=athlete.athletic_rating,
        sport_tier=athlete.sport.tier if athlete.sport is not None else None,
        deals_completed=athlete.deals_completed or 0,
        avg_deal_rating=athlete.avg_deal_rating,
        total_followers=athlete.total_followers or 0,
        instagram_followers=athlete.instagram_followers or 0,
        twitter_followers=athlete.twitter_followers or 0,
        tiktok_followers=athlete.tiktok_followers or 0,
        gpa=athlete.gpa,
        cumulative_gpa=athlete.cumulative_gpa,
        major_category=major.name if major is not None else None,
        major_multiplier=major.multiplier if major is not None else None,
        verified_term_gpas=tuple(verified_term_gpas),
        grades_verified=bool(athlete.grades_verified),
        enrollment_verified=bool(athlete.enrollment_verified),
        sport_verified=bool(athlete.sport_verified),
    )


class ScoreRepository(ABC):
    """Storage operations used by the score service."""

    # Fakes backed by plain dicts can serve a thread pool; a shared session cannot.
    thread_safe: bool = False

    @abstractmethod
    def get_score_inputs(self, athlete_id: uuid.UUID) -> ScoreInputs | None:
        raise NotImplementedError

    @abstractmethod
    def find_athlete_id(self, profile_id: uuid.UUID) -> uuid.UUID | None:
        raise NotImplementedError

    @abstractmethod
    def add_score(self, athlete_id: uuid.UUID, components: ScoreComponents, inputs: ScoreInputs) -> GradeUpScore:
        raise NotImplementedError

    @abstractmethod
    def update_cached_score(self, athlete_id: uuid.UUID, score: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def get_cached_score(self, athlete_id: uuid.UUID) -> int | None:
        raise NotImplementedError

    @abstractmethod
    def list_history(self, athlete_id: uuid.UUID, limit: int) -> list[GradeUpScore]:
        """Newest first."""
        raise NotImplementedError

    @abstractmethod
    def search_athletes(self, filters: AthleteSearchFilters) -> list[Athlete]:
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        raise NotImplementedError


def build_score_row(athlete_id: uuid.UUID, components: ScoreComponents, inputs: ScoreInputs) -> GradeUpScore:
    return GradeUpScore(
        id=uuid.uuid4(),
        athlete_id=athlete_id,
        score=components.score,
        athletic_score=components.athletic_score,
        social_score=components.social_score,
        academic_score=components.academic_score,
        gpa_multiplier=components.gpa_multiplier,
        major_multiplier=components.major_multiplier,
        consistency_bonus=components.consistency_bonus,
        input_data={
            "breakdown": components.breakdown,
            "sport_verified": inputs.sport_verified,
        },
        calculation_version=CALCULATION_VERSION,
    )


class SqlScoreRepository(BaseService, ScoreRepository):
    def __init__(self, db: Session | None = None) -> None:
        super().__init__(db)

    def get_score_inputs(self, athlete_id: uuid.UUID) -> ScoreInputs | None:
        stmt = (
            select(Athlete)
            .options(selectinload(Athlete.sport), selectinload(Athlete.major_category))
            .where(Athlete.id == athlete_id)
        )
        athlete = self.db.scalars(stmt).first()
        if athlete is None:
            return None
        term_gpas = self.db.scalars(
            select(AcademicRecord.gpa).where(
                AcademicRecord.athlete_id == athlete_id,
                AcademicRecord.verified.is_(True),
            )
        ).all()
        return athlete_to_inputs(athlete, list(term_gpas))

    def find_athlete_id(self, profile_id: uuid.UUID) -> uuid.UUID | None:
        return self.db.scalar(select(Athlete.id).where(Athlete.profile_id == profile_id))

    def add_score(self, athlete_id: uuid.UUID, components: ScoreComponents, inputs: ScoreInputs) -> GradeUpScore:
        row = build_score_row(athlete_id, components, inputs)
        self.db.add(row)
        self.flush()
        return row

    def update_cached_score(self, athlete_id: uuid.UUID, score: int) -> None:
        self.db.execute(
            update(Athlete)
            .where(Athlete.id == athlete_id)
            .values(gradeup_score=score)
            .execution_options(synchronize_session="fetch")
        )

    def get_cached_score(self, athlete_id: uuid.UUID) -> int | None:
        return self.db.scalar(select(Athlete.gradeup_score).where(Athlete.id == athlete_id))

    def list_history(self, athlete_id: uuid.UUID, limit: int) -> list[GradeUpScore]:
        stmt = (
            select(GradeUpScore)
            .where(GradeUpScore.athlete_id == athlete_id)
            .order_by(GradeUpScore.calculated_at.desc(), GradeUpScore.id.desc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt))

    def search_athletes(self, filters: AthleteSearchFilters) -> list[Athlete]:
        stmt = (
            select(Athlete)
            .options(selectinload(Athlete.sport), selectinload(Athlete.major_category))
            .where(Athlete.is_searchable.is_(True), Athlete.accepting_deals.is_(True))
        )
        if filters.min_score is not None:
            stmt = stmt.where(Athlete.gradeup_score >= filters.min_score)
        if filters.max_score is not None:
            stmt = stmt.where(Athlete.gradeup_score <= filters.max_score)
        if filters.major_category:
            stmt = stmt.join(MajorCategory, MajorCategory.id == Athlete.major_category_id).where(
                func.lower(MajorCategory.name) == filters.major_category.lower()
            )
        if filters.min_gpa is not None:
            stmt = stmt.where(func.coalesce(Athlete.cumulative_gpa, Athlete.gpa) >= filters.min_gpa)
        if filters.verified_only:
            stmt = stmt.where(
                Athlete.grades_verified.is_(True),
                Athlete.enrollment_verified.is_(True),
                Athlete.sport_verified.is_(True),
            )
        stmt = stmt.order_by(Athlete.gradeup_score.desc()).limit(filters.limit)
        return list(self.db.scalars(stmt))
