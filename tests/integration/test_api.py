"""End-to-end tests of the HTTP surface via TestClient."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from grounding_engine.api.app import create_app


@pytest.fixture
def client(settings, fake_embedder):
    app = create_app(settings, embedder=fake_embedder)
    with TestClient(app) as client:
        yield client


def _auth(client: TestClient, api_key: str = "key-alice") -> dict[str, str]:
    response = client.post("/auth/token", json={"api_key": api_key})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
def alice(client):
    return _auth(client)


@pytest.fixture
def book(client, alice):
    response = client.post("/books", json={"book_id": "b1", "title": "The Lighthouse"}, headers=alice)
    assert response.status_code == 201
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "book_count": 0,
        "chunk_count": 0,
        "embedding_provider": "openai",
    }
    assert "X-Request-ID" in response.headers


def test_invalid_api_key(client):
    assert client.post("/auth/token", json={"api_key": "nope"}).status_code == 401


def test_requires_token(client):
    response = client.post("/evaluations/classify", json={"scores": {}})
    assert response.status_code == 401


def test_register_book_owned_by_caller(book):
    assert book["author_id"] == "alice"
    assert book["has_content"] is False


def test_duplicate_book_conflict(client, alice, book):
    response = client.post("/books", json={"book_id": "b1"}, headers=alice)
    assert response.status_code == 409
    assert response.json()["code"] == "already-exists"


def test_upload_content_and_get_context(client, alice, book, book_text):
    content = book_text(1000, prefix="tide")
    response = client.post("/books/b1/content", json={"content": content}, headers=alice)
    assert response.status_code == 200
    assert response.json() == {"success": True, "chunks_processed": 3, "total_chunks": 3}

    first_window = " ".join(content.split()[:400])
    response = client.post("/books/b1/context", json={"message": first_window}, headers=alice)
    assert response.status_code == 200
    body = response.json()
    assert body["passages"][0]["chunk_index"] == 0
    assert body["passages"][0]["similarity"] == 1.0
    assert "[Passage 1]:" in body["context"]

    assert client.get("/health").json()["chunk_count"] == 3


def test_context_for_book_without_content(client, alice, book):
    response = client.post("/books/b1/context", json={"message": "hello"}, headers=alice)
    assert response.status_code == 200
    assert response.json() == {"book_id": "b1", "context": "", "passages": []}


def test_context_for_missing_book(client, alice):
    response = client.post("/books/nope/context", json={"message": "hello"}, headers=alice)
    assert response.status_code == 404


def test_upload_to_someone_elses_book(client, book, book_text):
    bob = _auth(client, "key-bob")
    response = client.post("/books/b1/content", json={"content": book_text(200)}, headers=bob)
    assert response.status_code == 403
    assert response.json() == {
        "code": "permission-denied",
        "detail": "You can only upload content to your own books.",
    }


def test_upload_short_content(client, alice, book):
    response = client.post("/books/b1/content", json={"content": "short"}, headers=alice)
    assert response.status_code == 400
    assert response.json()["code"] == "invalid-argument"


def test_upload_to_missing_book(client, alice, book_text):
    response = client.post("/books/nope/content", json={"content": book_text(200)}, headers=alice)
    assert response.status_code == 404


def test_index_rate_limit(client, alice, book, settings, book_text):
    for _ in range(settings.index_rate_limit_per_minute):
        client.post("/books/b1/content", json={"content": book_text(120)}, headers=alice)
    response = client.post("/books/b1/content", json={"content": book_text(120)}, headers=alice)
    assert response.status_code == 429


def test_classify(client, alice, scores_of):
    response = client.post(
        "/evaluations/classify",
        json={
            "scores": {**scores_of(5), "boundaryAwareness": 3},
            "suggestions": ["soften the ending"],
            "character": {"name": "Pip"},
            "character_id": "pip",
        },
        headers=alice,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_score"] == 33
    assert body["passed"] is True
    assert body["rating"] == "excellent"
    assert body["definition_hash"] == "a02c9b843e80"
    assert body["alerts"][0]["type"] == "safety_risk"


def test_classify_invalid_scores(client, alice, scores_of):
    response = client.post(
        "/evaluations/classify", json={"scores": {**scores_of(4), "metaHandling": 9}}, headers=alice
    )
    assert response.status_code == 400


REPORTS = [
    {
        "judge_id": "arlea",
        "judge_name": "Internal",
        "results": [
            {
                "conv_id": "c1",
                "category": "canon",
                "scores": {"voiceFidelity": 5, "metaHandling": 4},
                "total_score": 9,
                "concerns": ["internal concern"],
            }
        ],
    },
    {
        "judge_id": "gpt",
        "judge_name": "External",
        "results": [
            {
                "conv_id": "c1",
                "category": "canon",
                "scores": {"voiceFidelity": 3, "metaHandling": 4},
                "feedback": {"voiceFidelity": "Too modern."},
                "total_score": 7,
                "concerns": ["spoiler risk", "List any specific concerns", ""],
                "suggestions": ["Suggestion: add more", "Use older idioms"],
            }
        ],
    },
]


def test_report(client, alice):
    response = client.post("/evaluations/report", json={"reports": REPORTS}, headers=alice)
    assert response.status_code == 200
    body = response.json()
    assert body["averages"]["gpt"]["voiceFidelity"] == 3.0
    assert body["concerns"] == ["spoiler risk"]
    voice = next(row for row in body["heatmap"] if row["dimension"] == "voiceFidelity")
    assert voice["high_variance"] is True
    meta = next(row for row in body["heatmap"] if row["dimension"] == "metaHandling")
    assert meta["high_variance"] is False
    assert body["batches"][1]["average_total"] == 7


def test_insights(client, alice):
    response = client.post(
        "/evaluations/insights",
        json={"reports": REPORTS, "dimension": "voiceFidelity"},
        headers=alice,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["low_scorers"] == [{"conv_id": "c1", "category": "canon", "score": 3.0}]
    assert body["suggestions"] == ["Use older idioms"]
    assert body["judge_feedback"][1]["feedback"] == "Too modern."


def test_regression(client, alice):
    response = client.post(
        "/evaluations/regression",
        json={
            "results": [
                {"golden_id": "g1", "baseline": {"voiceFidelity": 5}, "new": {"voiceFidelity": 4.5}},
                {"golden_id": "g2", "baseline": {"voiceFidelity": 5}, "new": {"voiceFidelity": 4}},
            ]
        },
        headers=alice,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["total_golden"] == 2
    assert body["passed"] == 1
    assert body["all_passed"] is False
