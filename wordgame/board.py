import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from .constants import (BOARD_SIZE, CENTER, DOUBLE_LETTER_BASE,
                        DOUBLE_WORD_BASE, TRIPLE_LETTER_BASE, TRIPLE_WORD_BASE)
from .tiles import Tile

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class SquareType(str, Enum):
    NORMAL = 'normal'
    DOUBLE_LETTER = 'double-letter'
    TRIPLE_LETTER = 'triple-letter'
    DOUBLE_WORD = 'double-word'
    TRIPLE_WORD = 'triple-word'
    CENTER = 'center'


LETTER_MULTIPLIERS = {SquareType.DOUBLE_LETTER: 2, SquareType.TRIPLE_LETTER: 3}
WORD_MULTIPLIERS = {SquareType.DOUBLE_WORD: 2, SquareType.TRIPLE_WORD: 3, SquareType.CENTER: 2}


def _initialize_premium_squares() -> Dict[Position, SquareType]:
    """Sets up the mapping of board coordinates to premium square types."""
    premiums: Dict[Position, SquareType] = {}
    size = BOARD_SIZE

    def mirror_and_add(base_coords, p_type):
        for r_orig, c_orig in base_coords:
            mirrored_points = [
                (r_orig, c_orig), (r_orig, size - 1 - c_orig),
                (size - 1 - r_orig, c_orig), (size - 1 - r_orig, size - 1 - c_orig)
            ]
            for mr, mc in mirrored_points:
                premiums[(mr, mc)] = p_type

    mirror_and_add(TRIPLE_WORD_BASE, SquareType.TRIPLE_WORD)
    mirror_and_add(DOUBLE_WORD_BASE, SquareType.DOUBLE_WORD)
    mirror_and_add(TRIPLE_LETTER_BASE, SquareType.TRIPLE_LETTER)
    mirror_and_add(DOUBLE_LETTER_BASE, SquareType.DOUBLE_LETTER)

    premiums[CENTER] = SquareType.CENTER
    return premiums


PREMIUM_SQUARES = _initialize_premium_squares()


def classify(row: int, col: int) -> SquareType:
    return PREMIUM_SQUARES.get((row, col), SquareType.NORMAL)


def in_bounds(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


class Board(BaseModel):
    """The committed 15x15 grid. grid[r][c] is None for an empty cell."""

    grid: List[List[Optional[Tile]]]

    @staticmethod
    def empty() -> "Board":
        return Board(grid=[[None for _ in range(BOARD_SIZE)] for _ in range(BOARD_SIZE)])

    def get(self, row: int, col: int) -> Optional[Tile]:
        if in_bounds(row, col):
            return self.grid[row][col]
        return None

    def is_occupied(self, row: int, col: int) -> bool:
        return self.get(row, col) is not None

    def is_empty(self) -> bool:
        return all(cell is None for row in self.grid for cell in row)

    def occupied_positions(self) -> List[Position]:
        return [(r, c) for r in range(BOARD_SIZE) for c in range(BOARD_SIZE) if self.grid[r][c] is not None]

    def tile_count(self) -> int:
        return len(self.occupied_positions())

    def with_tiles(self, placements: Iterable[Tuple[int, int, Tile]]) -> "Board":
        """Returns a copy of the board with the given (row, col, tile) entries set."""
        grid = [list(row) for row in self.grid]
        for r, c, tile in placements:
            grid[r][c] = tile
        return Board(grid=grid)

    def without(self, positions: Iterable[Position]) -> "Board":
        grid = [list(row) for row in self.grid]
        for r, c in positions:
            grid[r][c] = None
        return Board(grid=grid)

    def letters(self) -> List[List[Optional[str]]]:
        """Display letters, row by row."""
        return [[cell.letter if cell else None for cell in row] for row in self.grid]
