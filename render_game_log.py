"""
Replay a logged 2048 game as an animated GIF.

Frames are drawn from the tile records stored in each log entry, so a tile
keeps its id label from frame to frame and merges show which id survived.
"""

import json
import os
from typing import List

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.colors import LinearSegmentedColormap
from matplotlib.patches import FancyBboxPatch
from PIL import Image

from game_2048 import SIZE, WINNING_VALUE, Tile

BACKGROUND = '#FAF8EF'
EMPTY_CELL = '#CDC1B4'
DARK_TEXT = '#776E65'
LIGHT_TEXT = '#F9F6F2'

# 2 -> 2048 along log2(value); anything above 2048 shares the last color.
TILE_CMAP = LinearSegmentedColormap.from_list(
    'tiles_2048', ['#EEE4DA', '#F2B179', '#F65E3B', '#EDCF72', '#EDC22E'])


def tile_color(value):
    top = np.log2(WINNING_VALUE)
    level = np.clip(np.log2(value), 1, top)
    return TILE_CMAP((level - 1) / (top - 1))


def text_color(value):
    return DARK_TEXT if value <= 4 else LIGHT_TEXT


def tiles_from_entry(entry) -> List[Tile]:
    return [
        Tile(id=record['id'], position=tuple(record['position']), value=record['value'])
        for record in entry['tiles']
    ]


def load_frames(log_file):
    """
    Read the tile snapshots of a game log.

    Args:
        log_file: JSON log written by play_2048.py --auto

    Returns:
        One dict per logged board with 'tiles', 'action', 'score' and 'move_num'
    """
    with open(log_file, 'r') as f:
        data = json.load(f)

    frames = []
    for i, entry in enumerate(data):
        if 'final_score' in entry:
            break
        if 'tiles' not in entry:
            continue
        frames.append({
            'tiles': tiles_from_entry(entry),
            'action': entry.get('action', 'UNKNOWN'),
            'score': entry.get('current_score', 0),
            'move_num': i,
        })

    return frames


def draw_tiles(tiles, caption, ax):
    """Draw empty cells, then every tile at its (column, row) with its id in the corner."""
    ax.clear()
    ax.set_xlim(-0.05, SIZE + 0.05)
    ax.set_ylim(-0.6, SIZE + 0.05)
    ax.set_aspect('equal')
    ax.axis('off')

    def cell(column, row, color):
        patch = FancyBboxPatch((column + 0.06, SIZE - 1 - row + 0.06), 0.88, 0.88,
                               boxstyle='round,pad=0,rounding_size=0.08',
                               facecolor=color, edgecolor='none')
        ax.add_patch(patch)

    for row in range(SIZE):
        for column in range(SIZE):
            cell(column, row, EMPTY_CELL)

    for tile in tiles:
        column, row = tile.position
        cell(column, row, tile_color(tile.value))
        digits = len(str(tile.value))
        ax.text(column + 0.5, SIZE - 1 - row + 0.5, str(tile.value),
                ha='center', va='center', fontweight='bold',
                fontsize=36 if digits < 3 else 40 - 6 * digits,
                color=text_color(tile.value))
        ax.text(column + 0.12, SIZE - row - 0.12, tile.id,
                ha='left', va='top', fontsize=7, color=text_color(tile.value), alpha=0.7)

    ax.text(SIZE / 2, -0.3, caption, ha='center', va='center',
            fontsize=13, fontweight='bold', color=DARK_TEXT)


def create_gif(log_file, output_file, fps=2, max_frames=None):
    """
    Render a game log to an animated GIF.

    Args:
        log_file: JSON log written by play_2048.py --auto
        output_file: Path of the GIF to write
        fps: Frames per second
        max_frames: Sample this many frames evenly when the log is longer

    Returns:
        Number of frames written, 0 if the log holds no tile snapshots
    """
    frames = load_frames(log_file)
    if not frames:
        print(f"  No tile snapshots found in {log_file}")
        return 0

    if max_frames and len(frames) > max_frames:
        frames = [frames[i] for i in np.linspace(0, len(frames) - 1, max_frames, dtype=int)]

    fig, ax = plt.subplots(figsize=(5, 5.6))
    fig.patch.set_facecolor(BACKGROUND)

    images = []
    for frame in frames:
        caption = f"Move {frame['move_num']} | {frame['action']} | Score {frame['score']}"
        draw_tiles(frame['tiles'], caption, ax)
        fig.canvas.draw()
        pixels = np.asarray(fig.canvas.buffer_rgba())
        images.append(Image.fromarray(pixels.copy()).convert('RGB'))

    plt.close(fig)

    output_dir = os.path.dirname(output_file)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    images[0].save(output_file, save_all=True, append_images=images[1:],
                   duration=int(1000 / fps), loop=0)

    print(f"  ✓ Saved {output_file} ({len(images)} frames)")
    return len(images)


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description='Replay a logged 2048 game as an animated GIF')
    parser.add_argument('--log_file', type=str, default='game_logs/game_log.json',
                        help='Game log JSON file written by play_2048.py --auto')
    parser.add_argument('--output', type=str, default='gifs/game.gif', help='GIF to write')
    parser.add_argument('--fps', type=int, default=2, help='Frames per second')
    parser.add_argument('--max_frames', type=int, default=None,
                        help='Maximum number of frames (samples evenly if exceeded)')

    args = parser.parse_args()

    if not os.path.exists(args.log_file):
        print(f"Log file not found: {args.log_file}")
    else:
        create_gif(args.log_file, args.output, args.fps, args.max_frames)
