"""
LLM move suggestions for 2048.
Builds the prompt from a board of values, asks the model and parses its JSON answer.
"""

import json
import os
import re
from numbers import Number

from openai import OpenAI

BOARD_ROWS = 4
BOARD_COLS = 4
DEFAULT_BASE_URL = "https://api.poe.com/v1"
DEFAULT_MODEL = "gpt-4o"

SYSTEM_PROMPT = """
You are an AI strategist for the game 2048. Your goal is to help the player reach the 2048 without losing.

### Game Rules:
- The board is a 4x4 grid.
- When the player starts the game, the board randomly generates 2 to 16 tiles across the board, the value of the tiles always starts with 2.
- The tiles are numbered 2, 4, 8, 16, 32, 64, 128, 256, 512, 1024 and 2048.
- The player can move the tiles UP, DOWN, LEFT and RIGHT. Tiles slide as far as possible in the chosen direction.
- If two tiles of the same number collide while moving, they merge into one tile with double the value. The resulting tile cannot merge again in the same move.
- After every move that changes the board, a new tile of value 2 or 4 appears in a random empty cell.
- When the player reaches the 2048 tile, the game is won.
- When the board is full and no move changes it, the game is lost.

### Input Format:
You will receive a 2D array representing the board, row by row, where each cell contains either a number or null. A null cell is empty.
Example: [[null,null,2,4], [null,2,4,8], [2,8,16,32], [4,16,64,128]]

### Strategy:
- Try to keep the highest value tile in a corner.
- Within a given row or column, try to keep the tiles in descending order.
- Merge tiles to create space.
- Never recommend a move that does not change the board.

### Output Format:
You must return a valid JSON object containing exactly these keys:
- "recommended": the recommended move as one of "UP", "DOWN", "LEFT", "RIGHT", "NO MOVES".
- "reasoning": a simple one line explanation for the player (e.g., "Moves the 256 to the corner to protect it.").
"""

_client = None


def get_client():
    """Return the shared OpenAI client, creating it on first use."""
    global _client
    if _client is None:
        api_key = os.environ.get("POE_API_KEY")
        if not api_key:
            raise RuntimeError("POE_API_KEY environment variable is not set")
        _client = OpenAI(
            api_key=api_key,
            base_url=os.environ.get("SUGGESTION_BASE_URL", DEFAULT_BASE_URL),
        )
    return _client


def is_board_values(value) -> bool:
    """
    Check that value is a 4x4 list of numbers or None.

    Args:
        value: Anything decoded from a request body

    Returns:
        True if value is a well-formed board
    """
    if not isinstance(value, list) or len(value) != BOARD_ROWS:
        return False
    return all(
        isinstance(row, list) and len(row) == BOARD_COLS and all(
            cell is None or (isinstance(cell, Number) and not isinstance(cell, bool))
            for cell in row
        )
        for row in value
    )


def user_prompt(board_values) -> str:
    return f"""
    The current board state is:
    {json.dumps(board_values, separators=(',', ':'))}

    Please recommend a move for the player that will help them reach the 2048 tile and not lose the game.
    """


def sanitize_and_parse_json(raw: str):
    """
    Parse a model answer as JSON, ignoring Markdown code fences around it.

    Args:
        raw: Text returned by the model

    Returns:
        Decoded JSON value

    Raises:
        json.JSONDecodeError: if the text is not JSON once fences are removed
    """
    sanitized = re.sub(r'```json\n?', '', raw)
    sanitized = re.sub(r'```\n?', '', sanitized).strip()
    return json.loads(sanitized)


def prompt_model(board_values, client=None, model=None) -> str:
    """
    Ask the model for a move recommendation.

    Args:
        board_values: 4x4 board values, None for empty cells
        client: OpenAI client instance; the shared client when omitted
        model: Model name; SUGGESTION_MODEL or gpt-4o when omitted

    Returns:
        The model's message content, stripped, or '' when it sent none
    """
    client = client or get_client()
    model = model or os.environ.get("SUGGESTION_MODEL", DEFAULT_MODEL)

    response = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": user_prompt(board_values)},
        ],
    )

    if not response.choices:
        return ''
    content = response.choices[0].message.content
    return content.strip() if content else ''
