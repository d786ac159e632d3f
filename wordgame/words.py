import logging
from typing import Iterable, List, Set, Tuple

from .board import Board, Position

logger = logging.getLogger(__name__)

WordSpan = Tuple[Position, ...]

DIRECTIONS = {'horizontal': (0, 1), 'vertical': (1, 0)}


def _span_through(board: Board, row: int, col: int, dr: int, dc: int) -> WordSpan:
    """Maximal run of occupied cells through (row, col) along one axis."""
    r, c = row, col
    while board.is_occupied(r - dr, c - dc):
        r, c = r - dr, c - dc
    cells = []
    while board.is_occupied(r, c):
        cells.append((r, c))
        r, c = r + dr, c + dc
    return tuple(cells)


def extract_word_spans(board: Board, positions: Iterable[Position]) -> List[WordSpan]:
    """Every distinct word span (length >= 2) touching at least one of the given cells.

    `board` must already hold the tiles at `positions`.
    """
    spans: List[WordSpan] = []
    seen: Set[WordSpan] = set()
    for row, col in positions:
        for dr, dc in DIRECTIONS.values():
            span = _span_through(board, row, col, dr, dc)
            if len(span) > 1 and span not in seen:
                seen.add(span)
                spans.append(span)
    return spans


def span_word(board: Board, span: WordSpan) -> str:
    return ''.join(board.grid[r][c].letter for r, c in span).upper()


def words_formed(board: Board, positions: Iterable[Position]) -> List[str]:
    return [span_word(board, span) for span in extract_word_spans(board, positions)]
