import pytest
from fastapi.testclient import TestClient

import suggestion_service
from suggestion_server import create_app

VALID_BOARD = [
    [2, None, None, None],
    [None, 2, None, None],
    [None, None, None, None],
    [None, None, None, None],
]


@pytest.fixture
def client():
    return TestClient(create_app())


@pytest.fixture
def model_calls(monkeypatch):
    calls = []
    replies = []

    def fake_prompt_model(board_values):
        calls.append(board_values)
        reply = replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply

    monkeypatch.setattr(suggestion_service, "prompt_model", fake_prompt_model)
    return calls, replies


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_prompt_returns_parsed_model_answer(client, model_calls):
    calls, replies = model_calls
    replies.append('{"recommended": "UP", "reasoning": "Keep the high tile in the corner."}')

    response = client.post("/prompt", json={"boardValues": VALID_BOARD})

    assert response.status_code == 200
    assert response.json() == {"recommended": "UP", "reasoning": "Keep the high tile in the corner."}
    assert calls == [VALID_BOARD]


def test_prompt_strips_code_fences(client, model_calls):
    _calls, replies = model_calls
    replies.append('```json\n{"recommended": "LEFT", "reasoning": "Merge tiles."}\n```')

    response = client.post("/prompt", json={"boardValues": VALID_BOARD})

    assert response.status_code == 200
    assert response.json() == {"recommended": "LEFT", "reasoning": "Merge tiles."}


@pytest.mark.parametrize("body", [
    {},
    {"boardValues": None},
    {"boardValues": [[2, None], [None, 2]]},
    {"boardValues": [[2, None, None, "x"]] * 4},
    [VALID_BOARD],
])
def test_prompt_rejects_bad_board_without_calling_model(client, model_calls, body):
    calls, _replies = model_calls

    response = client.post("/prompt", json=body)

    assert response.status_code == 400
    assert "error" in response.json()
    assert calls == []


def test_prompt_rejects_non_json_body(client, model_calls):
    calls, _replies = model_calls

    response = client.post("/prompt", content=b"not json", headers={"Content-Type": "application/json"})

    assert response.status_code == 400
    assert calls == []


def test_prompt_reports_upstream_failure(client, model_calls):
    _calls, replies = model_calls
    replies.append(RuntimeError("model unavailable"))

    response = client.post("/prompt", json={"boardValues": VALID_BOARD})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate prompt response"}


def test_prompt_reports_unparseable_answer(client, model_calls):
    _calls, replies = model_calls
    replies.append("I think you should go up")

    response = client.post("/prompt", json={"boardValues": VALID_BOARD})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate prompt response"}
