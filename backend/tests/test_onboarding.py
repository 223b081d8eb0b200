"""Tests for the onboarding endpoints."""

import pytest
from sqlalchemy import select

from app.models.skill import DiagnosticResult, Skill
from app.services.llm import DiagnosticQuestion

ONBOARDING = {
    "level": "First year",
    "objectives": ["Pass exams", "<script>x</script>Sleep more"],
    "diagnosticResults": [
        {"subject": "Maths", "score": 3, "total": 5, "weakAreas": ["integrals"]},
        {"subject": "Physics", "score": 2, "total": 3},
    ],
}


@pytest.mark.asyncio
async def test_onboarding_requires_session(async_client):
    response = await async_client.post("/api/onboarding", json=ONBOARDING)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_complete_onboarding(async_client, auth_headers, db_session, test_user):
    response = await async_client.post("/api/onboarding", json=ONBOARDING, headers=auth_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True}

    me = (await async_client.get("/api/auth/me", headers=auth_headers)).json()
    assert me["onboardingComplete"] is True
    assert me["level"] == "First year"
    assert me["objectives"] == ["Pass exams", "xSleep more"]

    skills = (
        await db_session.execute(
            select(Skill).where(Skill.user_id == test_user.id).order_by(Skill.name)
        )
    ).scalars().all()
    # 3/5 -> 60, 2/3 -> 67
    assert [(s.name, s.score) for s in skills] == [("Maths", 60), ("Physics", 67)]

    results = (
        await db_session.execute(select(DiagnosticResult).where(DiagnosticResult.user_id == test_user.id))
    ).scalars().all()
    assert sorted((r.subject, r.score, r.total) for r in results) == [
        ("Maths", 3, 5),
        ("Physics", 2, 3),
    ]


@pytest.mark.asyncio
async def test_onboarding_updates_existing_skill(async_client, auth_headers, db_session, test_user):
    db_session.add(Skill(user_id=test_user.id, name="Maths", score=10))
    await db_session.flush()

    payload = {"diagnosticResults": [{"subject": "Maths", "score": 5, "total": 5}]}
    response = await async_client.post("/api/onboarding", json=payload, headers=auth_headers)
    assert response.status_code == 200

    skills = (await db_session.execute(select(Skill).where(Skill.user_id == test_user.id))).scalars().all()
    assert [(s.name, s.score) for s in skills] == [("Maths", 100)]


@pytest.mark.asyncio
async def test_skill_score_rounds_half_up(async_client, auth_headers, db_session, test_user):
    payload = {"diagnosticResults": [{"subject": "Chemistry", "score": 1, "total": 8}]}
    response = await async_client.post("/api/onboarding", json=payload, headers=auth_headers)
    assert response.status_code == 200

    skill = (await db_session.execute(select(Skill).where(Skill.user_id == test_user.id))).scalar_one()
    assert skill.score == 13


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "result",
    [
        {"subject": "Maths", "score": 1, "total": 0},
        {"subject": "Maths", "score": 6, "total": 5},
        {"subject": "Maths", "score": -1, "total": 5},
        {"subject": "<script></script>", "score": 1, "total": 5},
    ],
)
async def test_onboarding_rejects_invalid_results(async_client, auth_headers, result):
    response = await async_client.post(
        "/api/onboarding", json={"diagnosticResults": [result]}, headers=auth_headers
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_diagnostic_questions(async_client, auth_headers, mock_completion_client):
    mock_completion_client.generate_diagnostic_questions.return_value = [
        DiagnosticQuestion(question="2 + 2?", options=["3", "4"], correct_answer=1, explanation="")
    ]

    response = await async_client.get(
        "/api/onboarding/diagnostic",
        params={"subject": "<b>Maths</b><script></script>"},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["questions"][0]["correctAnswer"] == 1
    mock_completion_client.generate_diagnostic_questions.assert_awaited_once_with("<b>Maths</b>")


@pytest.mark.asyncio
async def test_diagnostic_requires_subject(async_client, auth_headers, mock_completion_client):
    response = await async_client.get("/api/onboarding/diagnostic", headers=auth_headers)
    assert response.status_code == 400
    mock_completion_client.generate_diagnostic_questions.assert_not_called()
