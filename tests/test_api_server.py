from __future__ import annotations

from fastapi.testclient import TestClient
import pytest

from quiz_player.core.quiz_exporter import quiz_to_play_data
from quiz_player.core.schemas import CompletionRequest
from quiz_player.server.api_server import CompletionStore, create_api_app, server_achievements

from tests.fakes import make_quiz

_HEADERS = {"Authorization": "Bearer tok", "X-User-Id": "user-1"}


def _payload(score: int = 4, total: int = 5, round_scores=None) -> dict[str, object]:
    return {
        "quizSlug": "weekly",
        "score": score,
        "totalQuestions": total,
        "completionTimeSeconds": 321,
        "roundScores": round_scores or [],
        "categories": ["science"],
    }


@pytest.fixture
def client() -> TestClient:
    quiz = make_quiz([2, 1], slug="weekly")
    return TestClient(create_api_app(CompletionStore(), {"weekly": quiz_to_play_data(quiz)}))


def test_completion_requires_credentials(client: TestClient) -> None:
    response = client.post("/api/quiz/completion", json=_payload())
    assert response.status_code == 401
    response = client.post(
        "/api/quiz/completion", json=_payload(), headers={"Authorization": "Bearer tok"}
    )
    assert response.status_code == 401


def test_completion_is_recorded_and_returned(client: TestClient) -> None:
    response = client.post("/api/quiz/completion", json=_payload(), headers=_HEADERS)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["completion"]["userId"] == "user-1"
    assert body["completion"]["score"] == 4
    assert body["newlyUnlockedAchievements"] == []

    fetched = client.get("/api/quiz/completion", params={"quizSlug": "weekly"}, headers=_HEADERS)
    assert fetched.json()["completion"]["completionTimeSeconds"] == 321


def test_unknown_completion_is_null(client: TestClient) -> None:
    fetched = client.get("/api/quiz/completion", params={"quizSlug": "other"}, headers=_HEADERS)
    assert fetched.status_code == 200
    assert fetched.json() == {"completion": None}


def test_best_score_is_kept(client: TestClient) -> None:
    client.post("/api/quiz/completion", json=_payload(score=4), headers=_HEADERS)
    client.post("/api/quiz/completion", json=_payload(score=2), headers=_HEADERS)
    fetched = client.get("/api/quiz/completion", params={"quizSlug": "weekly"}, headers=_HEADERS)
    assert fetched.json()["completion"]["score"] == 4


def test_perfect_score_achievement_awarded_once(client: TestClient) -> None:
    first = client.post("/api/quiz/completion", json=_payload(score=5), headers=_HEADERS)
    second = client.post("/api/quiz/completion", json=_payload(score=5), headers=_HEADERS)
    assert first.json()["newlyUnlockedAchievements"] == ["perfect-score"]
    assert second.json()["newlyUnlockedAchievements"] == []


def test_invalid_payload_is_rejected(client: TestClient) -> None:
    response = client.post("/api/quiz/completion", json=_payload(score=6, total=5), headers=_HEADERS)
    assert response.status_code == 422


def test_play_data_served_by_slug(client: TestClient) -> None:
    response = client.get("/api/quizzes/weekly/play-data")
    assert response.status_code == 200
    body = response.json()
    assert body["metadata"]["slug"] == "weekly"
    assert [q["id"] for q in body["quizData"]["questions"]] == ["q1", "q2", "q3"]
    assert client.get("/api/quizzes/missing/play-data").status_code == 404


def test_category_ace_needs_a_perfect_round_of_five() -> None:
    request = CompletionRequest(
        quiz_slug="weekly",
        score=8,
        total_questions=10,
        completion_time_seconds=60,
        round_scores=[
            {"roundNumber": 1, "category": "Pop Music", "score": 5, "totalQuestions": 5},
            {"roundNumber": 2, "category": "History", "score": 3, "totalQuestions": 3},
            {"roundNumber": 3, "category": "Science", "score": 0, "totalQuestions": 2},
        ],
    )
    assert server_achievements(request) == ["pop-music-ace"]
