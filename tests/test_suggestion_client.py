import json

import httpx
import pytest

from suggestion_client import get_suggestion

BOARD = [
    [2, None, None, None],
    [None, 4, None, None],
    [None, None, 8, None],
    [None, None, None, 16],
]


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_posts_board_values_and_returns_answer():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"recommended": "DOWN", "reasoning": "Stack the column."})

    with _client(handler) as client:
        result = get_suggestion(BOARD, base_url="http://suggest.test/", client=client)

    assert result == {"recommended": "DOWN", "reasoning": "Stack the column."}
    (request,) = seen
    assert request.method == "POST"
    assert str(request.url) == "http://suggest.test/prompt"
    assert json.loads(request.content) == {"boardValues": BOARD}


def test_malformed_board_never_reaches_the_network():
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={})

    with _client(handler) as client:
        with pytest.raises(ValueError):
            get_suggestion([[2, None], [None, 2]], base_url="http://suggest.test", client=client)

    assert seen == []


def test_error_status_raises():
    def handler(request):
        return httpx.Response(500, json={"error": "Failed to generate prompt response"})

    with _client(handler) as client:
        with pytest.raises(RuntimeError, match="Failed to fetch suggestion"):
            get_suggestion(BOARD, base_url="http://suggest.test", client=client)
