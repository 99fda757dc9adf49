"""
Client for the 2048 suggestion service.
"""

import os

import httpx

from suggestion_service import is_board_values

API_BASE_URL = os.environ.get("API_BASE_URL", "http://localhost:3000")
DEFAULT_TIMEOUT = 60.0


def get_suggestion(board_values, base_url=None, client=None):
    """
    Ask the suggestion service which way to move.

    Args:
        board_values: 4x4 board values, None for empty cells
        base_url: Service URL; API_BASE_URL when omitted
        client: httpx.Client to send through (tests pass one with a mock transport)

    Returns:
        Dict with 'recommended' and 'reasoning'
    """
    if not is_board_values(board_values):
        raise ValueError("board_values must be a 4x4 array of numbers or None")

    url = f"{(base_url or API_BASE_URL).rstrip('/')}/prompt"
    payload = {"boardValues": board_values}

    if client is not None:
        response = client.post(url, json=payload)
    else:
        response = httpx.post(url, json=payload, timeout=DEFAULT_TIMEOUT)

    if not response.is_success:
        raise RuntimeError("Failed to fetch suggestion")

    return response.json()
