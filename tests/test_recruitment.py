from datetime import date

import pytest

import hiring.recruitment as recruitment
from hiring.errors import AuthorizationError, NotFoundError, ValidationError
from hiring.recruitment import RecruitmentService
from hiring.scoring import AutoScore, ScoreFactors
from hiring.storage import MemoryStorage

TODAY = date(2026, 1, 15)


def factors_for(total: int) -> ScoreFactors:
    """Spread ``total`` over the five factors, filling each to its max in turn."""
    values = {}
    remaining = total
    for name, cap in (("experience_match", 25), ("skills_match", 30),
                      ("availability_score", 15), ("salary_fit", 15),
                      ("application_quality", 15)):
        values[name] = min(cap, remaining)
        remaining -= values[name]
    return ScoreFactors(**values)


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def service(storage):
    return RecruitmentService(storage, today=TODAY)


@pytest.fixture
def job(storage):
    return storage.create_job(
        title="Data Analyst", company="Acme", location="Dakar",
        description="Dashboards.", contract_type="CDI",
        experience_level="Intermédiaire", salary="40k - 55k €", skills=["SQL", "Python"],
    )


@pytest.fixture
def recruiter(storage):
    return storage.create_user(email="rh@acme.test", role="recruiter")


def add_candidates(storage, job, count):
    apps = []
    for i in range(count):
        user = storage.create_user(email=f"c{i}@mail.test", role="candidate")
        apps.append(storage.create_application(user_id=user.id, job_id=job.id, status="pending"))
    return apps


@pytest.fixture
def fixed_scores(monkeypatch):
    """Replace the scoring engine with a lookup keyed by application id."""
    scores = {}

    def fake(application, job, candidate=None, today=None):
        total = scores.get(application.id, 0)
        return AutoScore(factors=factors_for(total), score=total)

    monkeypatch.setattr(recruitment, "compute_auto_score", fake)
    return scores


def test_top_candidates_returns_ten_best_in_descending_order(storage, service, job, fixed_scores):
    apps = add_candidates(storage, job, 12)
    autos = [95, 90, 88, 85, 80, 77, 70, 66, 60, 55, 50, 45]
    # insert in scrambled order so ranking cannot rely on creation order
    for app, score in zip(apps, reversed(autos)):
        fixed_scores[app.id] = score

    ranked = service.get_top_candidates(job.id)

    assert [c.total_score for c in ranked] == autos[:10]
    assert all(c.auto_score == c.total_score for c in ranked)
    assert ranked[0].application_id == apps[-1].id


def test_top_candidates_factors_sum_to_auto_score(storage, service, job):
    add_candidates(storage, job, 3)

    for entry in service.get_top_candidates(job.id):
        factors = entry.factors
        total = (factors.experience_match + factors.skills_match + factors.availability_score
                 + factors.salary_fit + factors.application_quality)
        assert total == entry.auto_score


def test_ties_are_broken_by_earliest_application(storage, service, job, fixed_scores):
    apps = add_candidates(storage, job, 3)
    for app in apps:
        fixed_scores[app.id] = 70

    ranked = service.get_top_candidates(job.id)

    assert [c.application_id for c in ranked] == [a.id for a in apps]


def test_unknown_job_yields_empty_ranking(service):
    assert service.get_top_candidates(999) == []
    assert service.get_final_top3(999) == []


def test_ranking_persists_auto_score_and_is_idempotent(storage, service, job):
    apps = add_candidates(storage, job, 4)

    first = [c.dump() for c in service.get_top_candidates(job.id)]
    second = [c.dump() for c in service.get_top_candidates(job.id)]

    assert first == second
    by_id = {c["applicationId"]: c["autoScore"] for c in first}
    for app in apps:
        assert storage.get_application(app.id).auto_score == by_id[app.id]


def test_manual_score_is_blended_into_total(storage, service, job, fixed_scores):
    low, high = add_candidates(storage, job, 2)
    fixed_scores[low.id] = 60
    fixed_scores[high.id] = 80
    storage.update_application(low.id, manual_score=100)

    ranked = service.get_top_candidates(job.id)

    # 0.6 * 60 + 0.4 * 100 = 76 < 80
    assert [(c.application_id, c.total_score) for c in ranked] == [(high.id, 80), (low.id, 76)]
    assert ranked[1].manual_score == 100


def test_assign_sets_recruiter_and_status(storage, service, job, recruiter):
    apps = add_candidates(storage, job, 3)
    ids = [apps[0].id, apps[2].id, apps[0].id]

    result = service.assign_candidates(ids, recruiter.id)

    assert result == {"success": True, "assigned": 2, "job_ids": [job.id]}
    assert storage.get_application(apps[0].id).assigned_recruiter == recruiter.id
    assert storage.get_application(apps[0].id).status == "assigned"
    assert storage.get_application(apps[2].id).assigned_recruiter == recruiter.id
    assert storage.get_application(apps[1].id).assigned_recruiter is None


@pytest.mark.parametrize("role", ["recruiter", "hr", "admin"])
def test_any_staff_role_can_receive_assignments(storage, service, job, role):
    (app,) = add_candidates(storage, job, 1)
    staff = storage.create_user(email=f"{role}@acme.test", role=role)

    service.assign_candidates([app.id], staff.id)

    assert storage.get_application(app.id).assigned_recruiter == staff.id


def test_assign_requires_selection_and_recruiter(storage, service, job, recruiter):
    (app,) = add_candidates(storage, job, 1)

    with pytest.raises(ValidationError):
        service.assign_candidates([], recruiter.id)
    with pytest.raises(ValidationError):
        service.assign_candidates([app.id], None)


def test_assign_rejects_non_staff_recruiter(storage, service, job):
    apps = add_candidates(storage, job, 2)

    with pytest.raises(ValidationError):
        service.assign_candidates([apps[0].id], apps[1].user_id)
    with pytest.raises(ValidationError):
        service.assign_candidates([apps[0].id], 12345)


def test_assign_validates_every_application_before_writing(storage, service, job, recruiter):
    (app,) = add_candidates(storage, job, 1)

    with pytest.raises(NotFoundError):
        service.assign_candidates([app.id, 999], recruiter.id)

    assert storage.get_application(app.id).assigned_recruiter is None


def test_assigned_applications_are_enriched(storage, service, job, recruiter):
    apps = add_candidates(storage, job, 2)
    service.assign_candidates([apps[1].id], recruiter.id)

    items = service.get_assigned_applications(recruiter.id)

    assert len(items) == 1
    assert items[0]["application"].id == apps[1].id
    assert items[0]["candidate"].id == apps[1].user_id
    assert items[0]["job"].id == job.id


def test_manual_score_round_trip(storage, service, job, recruiter):
    (app,) = add_candidates(storage, job, 1)
    service.assign_candidates([app.id], recruiter.id)

    service.update_manual_score(app.id, recruiter, 85, "Strong candidate")

    stored = storage.get_application(app.id)
    assert stored.manual_score == 85
    assert stored.score_notes == "Strong candidate"
    assert stored.status == "scored"


def test_manual_score_overwrites_previous(storage, service, job, recruiter):
    (app,) = add_candidates(storage, job, 1)
    service.assign_candidates([app.id], recruiter.id)

    service.update_manual_score(app.id, recruiter, 40, "first look")
    service.update_manual_score(app.id, recruiter, 70)

    stored = storage.get_application(app.id)
    assert stored.manual_score == 70
    assert stored.score_notes is None


def test_manual_score_requires_assignment_to_caller(storage, service, job, recruiter):
    (app,) = add_candidates(storage, job, 1)
    other = storage.create_user(email="other@acme.test", role="recruiter")

    with pytest.raises(AuthorizationError):
        service.update_manual_score(app.id, recruiter, 50)

    service.assign_candidates([app.id], recruiter.id)
    with pytest.raises(AuthorizationError):
        service.update_manual_score(app.id, other, 50)


@pytest.mark.parametrize("bad", [-5, 101, 85.5, True, "85"])
def test_manual_score_rejects_invalid_values(storage, service, job, recruiter, bad):
    (app,) = add_candidates(storage, job, 1)
    service.assign_candidates([app.id], recruiter.id)

    with pytest.raises(ValidationError):
        service.update_manual_score(app.id, recruiter, bad)


def test_manual_score_unknown_application(service, recruiter):
    with pytest.raises(NotFoundError):
        service.update_manual_score(404, recruiter, 50)


def test_final_top3_only_includes_scored_applications(storage, service, job, recruiter, fixed_scores):
    apps = add_candidates(storage, job, 5)
    for app in apps:
        fixed_scores[app.id] = 70
    service.get_top_candidates(job.id)
    service.assign_candidates([a.id for a in apps], recruiter.id)
    service.update_manual_score(apps[0].id, recruiter, 50)
    service.update_manual_score(apps[1].id, recruiter, 90)
    service.update_manual_score(apps[2].id, recruiter, 70)

    final = service.get_final_top3(job.id)

    assert [c.application_id for c in final] == [apps[1].id, apps[2].id, apps[0].id]
    assert [c.manual_score for c in final] == [90, 70, 50]
    # 0.6 * 70 + 0.4 * manual
    assert [c.total_score for c in final] == [78, 70, 62]


def test_final_top3_caps_at_three(storage, service, job, recruiter):
    apps = add_candidates(storage, job, 5)
    service.assign_candidates([a.id for a in apps], recruiter.id)
    for i, app in enumerate(apps):
        service.update_manual_score(app.id, recruiter, 50 + i * 10)

    final = service.get_final_top3(job.id)

    assert len(final) == 3
    assert [c.manual_score for c in final] == [90, 80, 70]


def test_final_top3_is_empty_before_any_manual_score(storage, service, job):
    add_candidates(storage, job, 2)

    assert service.get_final_top3(job.id) == []


def test_final_top3_does_not_write(storage, service, job, recruiter):
    (app,) = add_candidates(storage, job, 1)
    service.assign_candidates([app.id], recruiter.id)
    service.update_manual_score(app.id, recruiter, 60)

    final = service.get_final_top3(job.id)

    assert len(final) == 1
    assert storage.get_application(app.id).auto_score is None


def test_recruiters_lists_staff_only(storage, service, recruiter):
    storage.create_user(email="cand@mail.test", role="candidate")
    storage.create_user(email="boss@acme.test", role="admin")

    emails = sorted(u.email for u in service.get_recruiters())

    assert emails == ["boss@acme.test", "rh@acme.test"]
