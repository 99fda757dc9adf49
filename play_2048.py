"""
Play 2048 in the terminal, with optional move suggestions from an LLM.
Can also let the LLM play on its own and log every move.
"""

import json
import os
from dataclasses import asdict

from game_2048 import display
from game_session import LOST, WON, Game
from suggestion_client import get_suggestion

KEY_BINDINGS = {
    "ArrowUp": "up",
    "KeyW": "up",
    "ArrowDown": "down",
    "KeyS": "down",
    "ArrowLeft": "left",
    "KeyA": "left",
    "ArrowRight": "right",
    "KeyD": "right",
}
RESET_KEYS = ("Space", "Enter")

# What the player types at the prompt -> key code
TYPED_KEYS = {
    "w": "KeyW", "a": "KeyA", "s": "KeyS", "d": "KeyD",
    "up": "ArrowUp", "down": "ArrowDown", "left": "ArrowLeft", "right": "ArrowRight",
    "": "Enter", " ": "Space",
}

MOVE_SUGGESTION = {
    "UP": "⬆️ Move Up!",
    "DOWN": "⬇️ Move Down!",
    "LEFT": "⬅️ Move Left!",
    "RIGHT": "➡️ Move Right!",
    "NO MOVES": "☹️ No Moves Available",
}


def handle_key(game, key):
    """
    Apply one key press to the game.

    Returns:
        True if the key did something
    """
    if game.is_locked:
        return False

    if game.status in (WON, LOST):
        if key in RESET_KEYS:
            game.reset_game()
            return True
        return False

    direction = KEY_BINDINGS.get(key)
    if direction is None:
        return False
    game.move(direction)
    return True


def request_suggestion(game, fetch=get_suggestion):
    """
    Fetch a suggestion for the current board while holding the input lock.

    Returns:
        The service response, or {} if the request failed
    """
    game.set_lock(True)
    try:
        result = fetch(game.get_current_board_values())
        return result if isinstance(result, dict) else {}
    except Exception as e:
        print(f"⚠️  Failed to get suggestion: {e}")
        return {}
    finally:
        game.set_lock(False)


def format_suggestion(response):
    """Return (headline, reasoning) or None unless the response names a known move and a reason."""
    if not isinstance(response, dict):
        return None
    recommended = response.get("recommended")
    reasoning = response.get("reasoning")
    if not isinstance(recommended, str) or recommended not in MOVE_SUGGESTION:
        return None
    if not isinstance(reasoning, str) or not reasoning:
        return None
    return MOVE_SUGGESTION[recommended], reasoning


def game_over_text(status):
    if status == WON:
        return "🎉 You Won! 🎉\nCongratulations! You reached 2048!"
    return "😢 Game Over 😢\nNo more moves available. Better luck next time!"


def play_interactive(game, fetch=get_suggestion):
    print("Welcome to 2048!")
    print("Commands: w/up, s/down, a/left, d/right, h (hint), q (quit)")

    game.start_game()
    suggestion = {}
    seen_moves = game.moves

    while True:
        if game.moves != seen_moves:
            suggestion = {}
            seen_moves = game.moves

        print()
        print(display(game.get_current_board_values()))
        text = format_suggestion(suggestion)
        if text:
            print(f"\n💡 {text[0]}\n   {text[1]}")
        if game.is_over:
            print(f"\n{game_over_text(game.status)}")
            print("Press Enter to play again or q to quit.")

        command = input("\nEnter move: ").lower().strip()

        if command == 'q':
            print("Thanks for playing!")
            break
        if command == 'h':
            if game.is_over:
                continue
            print("Asking for a suggestion...")
            suggestion = request_suggestion(game, fetch)
            continue

        key = TYPED_KEYS.get(command)
        if key is None or not handle_key(game, key):
            print("Invalid command! Use w/a/s/d to move, h for a hint or q to quit.")


def log_entry_for(game, action):
    """Snapshot the board for the game log: values by cell plus each tile record."""
    return {
        "game_state": game.get_current_board_values(),
        "tiles": [asdict(tile) for tile in game.get_tiles()],
        "action": action,
        "current_score": game.score,
    }


def play_game_with_llm(game, log_file="game_log.json", fetch=get_suggestion, max_moves=1000,
                       max_consecutive_invalid_moves=10, restart=True):
    """
    Play a full game of 2048 following the suggestion service and log all moves.

    Args:
        game: Game to play
        log_file: Path to the JSON log file
        fetch: Callable returning a suggestion for a board
        max_moves: Maximum number of moves to prevent infinite loops
        max_consecutive_invalid_moves: Maximum consecutive invalid moves before stopping
        restart: Start a fresh game first; False continues from the current board

    Returns:
        Final score
    """
    if restart:
        game.start_game()
    game_log = []
    move_count = 0
    consecutive_invalid_moves = 0
    game_end_reason = "unknown"

    game_log.append(log_entry_for(game, "INITIAL"))

    while not game.is_over and move_count < max_moves:
        print(f"Move {move_count + 1}, score {game.score}")

        suggestion = request_suggestion(game, fetch)
        recommended = suggestion.get("recommended")

        if recommended == "NO MOVES":
            game_end_reason = "no_moves_recommended"
            break
        if recommended not in ("UP", "DOWN", "LEFT", "RIGHT"):
            print(f"\n❌ No usable suggestion ({recommended!r}). Game stopped.")
            game_end_reason = "no_suggestion"
            break

        changed = game.move(recommended.lower())
        log_entry = log_entry_for(game, recommended)
        log_entry["llm_reasoning"] = suggestion.get("reasoning", "")

        if not changed:
            consecutive_invalid_moves += 1
            print(f"\n⚠️  Invalid move {recommended}! State didn't change. ({consecutive_invalid_moves}/{max_consecutive_invalid_moves})")
            log_entry["invalid_move"] = True
            game_log.append(log_entry)

            if consecutive_invalid_moves >= max_consecutive_invalid_moves:
                print(f"\n❌ Too many consecutive invalid moves ({max_consecutive_invalid_moves}). Game stopped.")
                game_end_reason = f"too_many_invalid_moves_{max_consecutive_invalid_moves}"
                break
            continue

        consecutive_invalid_moves = 0
        move_count += 1
        game_log.append(log_entry)

        with open(log_file, 'w') as f:
            json.dump(game_log, f, indent=2)

    if game_end_reason == "unknown":
        if game.status == WON:
            game_end_reason = "won"
        elif game.status == LOST:
            game_end_reason = "no_moves_available"
        elif move_count >= max_moves:
            game_end_reason = "max_moves_reached"

    print("\n" + "=" * 50)
    print(game_over_text(game.status) if game.is_over else "Game stopped!")
    print("=" * 50)

    final_score = game.score
    print(f"Final Score: {final_score}")
    print(f"Total Moves: {move_count}")
    print(f"Game End Reason: {game_end_reason}")
    print(f"Game log saved to: {log_file}")

    game_log.append({
        "final_score": final_score,
        "game_end_reason": game_end_reason,
        "total_moves": move_count,
    })

    with open(log_file, 'w') as f:
        json.dump(game_log, f, indent=2)

    return final_score


if __name__ == "__main__":
    import argparse
    import random

    parser = argparse.ArgumentParser(description='Play 2048 with LLM move suggestions')
    parser.add_argument('--base_url', type=str, default=os.environ.get('API_BASE_URL', 'http://localhost:3000'),
                        help='Suggestion service URL (default: $API_BASE_URL or http://localhost:3000)')
    parser.add_argument('--auto', action='store_true', help='Let the LLM play the whole game')
    parser.add_argument('--log_file', type=str, default='game_logs/game_log.json',
                        help='Where to write the move log in --auto mode')
    parser.add_argument('--max_moves', type=int, default=1000, help='Move limit in --auto mode')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for deterministic boards')

    args = parser.parse_args()

    game = Game(rng=random.Random(args.seed))

    def fetch(board_values):
        return get_suggestion(board_values, base_url=args.base_url)

    if args.auto:
        log_dir = os.path.dirname(args.log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        play_game_with_llm(game, log_file=args.log_file, fetch=fetch, max_moves=args.max_moves)
    else:
        play_interactive(game, fetch=fetch)
