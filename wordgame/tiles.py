import logging
import random
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from .constants import (BLANK_MARKER, BLANK_PLACEHOLDER, LETTER_SCORES,
                        TILE_DISTRIBUTION)
from .errors import InvalidPlacement

logger = logging.getLogger(__name__)


class Tile(BaseModel):
    """A physical tile. Identity (`id`) never changes; a blank only changes its chosen letter."""
    model_config = ConfigDict(frozen=True)

    id: str
    letter: str = BLANK_PLACEHOLDER
    value: int = 0
    is_blank: bool = False
    chosen_letter: Optional[str] = None


def make_tile(tile_id: str, letter: str) -> Tile:
    """Creates a regular tile, or a blank when given the blank marker."""
    if letter == BLANK_MARKER:
        return Tile(id=tile_id, letter=BLANK_PLACEHOLDER, value=0, is_blank=True)
    letter = letter.upper()
    return Tile(id=tile_id, letter=letter, value=LETTER_SCORES[letter])


def tile_score(tile: Tile) -> int:
    """Face value used for scoring: the fixed letter value, always 0 for a blank."""
    if tile.is_blank:
        return 0
    return LETTER_SCORES.get(tile.letter.upper(), 0)


def generate_initial_bag(rng: Optional[random.Random] = None) -> List[Tile]:
    """Materializes the full letter distribution with unique ids and shuffles it."""
    rng = rng or random.Random()
    tiles = []
    next_id = 1
    for letter, count in TILE_DISTRIBUTION.items():
        for _ in range(count):
            tiles.append(make_tile(f"tile-{next_id}", letter))
            next_id += 1
    rng.shuffle(tiles)
    return tiles


def draw(bag: Sequence[Tile], count: int) -> Tuple[List[Tile], List[Tile]]:
    """Takes up to `count` tiles from the front of the bag. Never fails when the bag runs short."""
    count = max(0, min(count, len(bag)))
    return list(bag[:count]), list(bag[count:])


def restore(tiles: Sequence[Tile], bag: Sequence[Tile], rng: Optional[random.Random] = None) -> List[Tile]:
    """Puts tiles back into the bag and reshuffles the whole bag."""
    rng = rng or random.Random()
    new_bag = list(bag) + [reset_blank(t) for t in tiles]
    rng.shuffle(new_bag)
    return new_bag


def reset_blank(tile: Tile) -> Tile:
    if not tile.is_blank:
        return tile
    return tile.model_copy(update={'chosen_letter': None, 'letter': BLANK_PLACEHOLDER})


def assign_blank(tile: Tile, letter: str) -> Tile:
    """Gives a blank tile the letter it stands for."""
    if not tile.is_blank:
        raise InvalidPlacement(f"Tile {tile.id} is not a blank tile.")
    letter = (letter or '').strip().upper()
    if len(letter) != 1 or letter not in LETTER_SCORES:
        raise InvalidPlacement(f"'{letter}' is not a valid letter for a blank tile.")
    return tile.model_copy(update={'chosen_letter': letter, 'letter': letter})


def rack_value(rack: Sequence[Tile]) -> int:
    return sum(tile_score(t) for t in rack)
