from __future__ import annotations

import uuid
from decimal import Decimal

import pytest

from gradeup.core.dependencies import CurrentUser
from gradeup.core.exceptions import NotFoundError, ValidationError
from gradeup.models import Athlete
from gradeup.repositories.scores import AthleteSearchFilters
from gradeup.scoring.engine import ScoreInputs, calculate_components
from gradeup.services.score_service import GradeUpScoreService
from tests.fakes import InMemoryScoreRepository


def _inputs(seed: int) -> ScoreInputs:
    return ScoreInputs(
        athletic_rating=40 + seed * 10,
        sport_tier=2,
        total_followers=1000 * (seed + 1),
        cumulative_gpa=Decimal("3.40"),
    )


def test_calculate_appends_history_and_caches_score():
    repo = InMemoryScoreRepository()
    athlete_id = repo.add_athlete(_inputs(1))
    service = GradeUpScoreService(repo)

    result = service.calculate(athlete_id)

    expected = calculate_components(_inputs(1))
    assert result.components.score == expected.score
    assert repo.cached[athlete_id] == expected.score
    assert len(repo.history) == 1
    payload = result.to_dict()
    assert payload["components"]["athletic"]["max"] == 400
    assert payload["grade"]["letter"] == expected.grade.letter


def test_calculate_unknown_athlete_is_not_found():
    service = GradeUpScoreService(InMemoryScoreRepository())
    with pytest.raises(NotFoundError):
        service.calculate(uuid.uuid4())


def test_calculate_for_user_resolves_own_profile():
    repo = InMemoryScoreRepository()
    profile_id = uuid.uuid4()
    athlete_id = repo.add_athlete(_inputs(2), profile_id=profile_id)
    service = GradeUpScoreService(repo)

    result = service.calculate_for_user(CurrentUser(user_id=profile_id, role="athlete"))
    assert result.athlete_id == athlete_id

    with pytest.raises(ValidationError):
        service.calculate_for_user(CurrentUser(user_id=uuid.uuid4(), role="brand"))


@pytest.mark.parametrize("workers", [1, 4])
def test_batch_isolates_failures(workers):
    repo = InMemoryScoreRepository()
    valid = [repo.add_athlete(_inputs(i)) for i in range(5)]
    missing = uuid.uuid4()
    service = GradeUpScoreService(repo, workers=workers)

    summary = service.batch_calculate(valid[:2] + [missing] + valid[2:4])

    assert summary["total"] == 5
    assert summary["successful"] == 4
    assert summary["failed"] == 1
    failed = [item for item in summary["results"] if not item["success"]]
    assert failed[0]["athlete_id"] == str(missing)
    assert failed[0]["score"] is None
    assert failed[0]["error"]
    assert [item["athlete_id"] for item in summary["results"]][2] == str(missing)
    assert repo.rollbacks == 1
    assert valid[4] not in {row.athlete_id for row in repo.history}


def test_batch_limits():
    repo = InMemoryScoreRepository()
    service = GradeUpScoreService(repo, batch_limit=3)
    with pytest.raises(ValidationError):
        service.batch_calculate([])
    with pytest.raises(ValidationError):
        service.batch_calculate([uuid.uuid4() for _ in range(4)])


def test_history_is_newest_first_with_trend():
    repo = InMemoryScoreRepository()
    athlete_id = repo.add_athlete(_inputs(0))
    service = GradeUpScoreService(repo)
    service.calculate(athlete_id)
    repo.inputs[athlete_id] = _inputs(5)
    latest = service.calculate(athlete_id)

    history = service.get_history(athlete_id)
    assert history["count"] == 2
    assert history["history"][0]["score"] == latest.components.score
    assert history["trend"] == "up"
    assert history["statistics"]["current"] == latest.components.score


def test_history_limit_is_clamped():
    repo = InMemoryScoreRepository()
    athlete_id = repo.add_athlete(_inputs(1))
    service = GradeUpScoreService(repo)
    for _ in range(3):
        service.calculate(athlete_id)
    assert service.get_history(athlete_id, limit=1)["count"] == 1
    assert service.get_history(athlete_id, limit=0)["count"] == 3
    assert service.get_history(athlete_id, limit=10_000)["count"] == 3


def test_breakdown_uses_latest_row():
    repo = InMemoryScoreRepository()
    athlete_id = repo.add_athlete(_inputs(3))
    service = GradeUpScoreService(repo)
    result = service.calculate(athlete_id)

    breakdown = service.get_breakdown(athlete_id)
    assert breakdown["current_score"] == result.components.score
    assert breakdown["breakdown"]["version"] == "2.0"
    with pytest.raises(NotFoundError):
        service.get_breakdown(uuid.uuid4())


def test_search_verified_only_filters_after_query():
    repo = InMemoryScoreRepository()
    verified = Athlete(
        id=uuid.uuid4(),
        first_name="Ava",
        last_name="Lin",
        gradeup_score=720,
        grades_verified=True,
        enrollment_verified=True,
        sport_verified=True,
    )
    unverified = Athlete(id=uuid.uuid4(), first_name="Ben", last_name="Ortiz", gradeup_score=810)
    repo.athletes = [verified, unverified]
    service = GradeUpScoreService(repo)

    everyone = service.search_by_score(AthleteSearchFilters(min_score=700))
    assert [row["name"] for row in everyone] == ["Ben Ortiz", "Ava Lin"]
    only_verified = service.search_by_score(AthleteSearchFilters(verified_only=True))
    assert [row["verified"] for row in only_verified] == [True]
    assert only_verified[0]["grade"]["letter"] == "A"
