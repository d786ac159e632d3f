import logging
from dataclasses import dataclass, field
from typing import List, Sequence, Set

from .board import (LETTER_MULTIPLIERS, WORD_MULTIPLIERS, Board, Position,
                    SquareType, classify)
from .constants import BINGO_BONUS, RACK_SIZE
from .state import PlacedTile
from .tiles import tile_score
from .words import WordSpan, extract_word_spans, span_word

logger = logging.getLogger(__name__)


@dataclass
class WordScore:
    word: str
    span: WordSpan
    score: int


@dataclass
class MoveScore:
    total: int = 0
    words: List[WordScore] = field(default_factory=list)
    bingo: bool = False

    @property
    def word_list(self) -> List[str]:
        return [w.word for w in self.words]


def score_span(board: Board, span: WordSpan, new_cells: Set[Position],
               first_move: bool, center_bonus_first_move_only: bool = True) -> int:
    """Scores one word. Premiums count only under tiles placed this move."""
    word_score = 0
    word_multiplier = 1
    for r, c in span:
        tile = board.grid[r][c]
        letter_value = tile_score(tile)
        if (r, c) in new_cells:
            square = classify(r, c)
            letter_value *= LETTER_MULTIPLIERS.get(square, 1)
            # The center only doubles the opening word.
            if square != SquareType.CENTER or first_move or not center_bonus_first_move_only:
                word_multiplier *= WORD_MULTIPLIERS.get(square, 1)
        word_score += letter_value
    return word_score * word_multiplier


def score_placement(board_before: Board, placements: Sequence[PlacedTile],
                    center_bonus_first_move_only: bool = True) -> MoveScore:
    """Total score of a move: every word it forms or extends, plus the bingo bonus.

    `board_before` is the committed board without this move's tiles.
    """
    if not placements:
        return MoveScore()

    first_move = board_before.is_empty()
    board_after = board_before.with_tiles((p.row, p.col, p.tile) for p in placements)
    new_cells = {(p.row, p.col) for p in placements}

    result = MoveScore()
    for span in extract_word_spans(board_after, [(p.row, p.col) for p in placements]):
        points = score_span(board_after, span, new_cells, first_move, center_bonus_first_move_only)
        result.words.append(WordScore(word=span_word(board_after, span), span=span, score=points))
        result.total += points

    if len(placements) == RACK_SIZE:
        result.bingo = True
        result.total += BINGO_BONUS

    logger.debug(f"Scored move {[w.word for w in result.words]} -> {result.total} (bingo={result.bingo})")
    return result
