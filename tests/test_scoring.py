from conftest import board_with, tiles_on_board

from wordgame.board import Board
from wordgame.constants import BINGO_BONUS
from wordgame.scoring import score_placement
from wordgame.state import PlacedTile
from wordgame.tiles import assign_blank, make_tile


def test_opening_word_gets_letter_and_center_premiums():
    # C on a double letter at (7,3), E on the center.
    result = score_placement(Board.empty(), tiles_on_board(
        [(7, 3, 'C'), (7, 4, 'R'), (7, 5, 'A'), (7, 6, 'T'), (7, 7, 'E')]))
    assert result.word_list == ['CRATE']
    assert result.total == (3 * 2 + 1 + 1 + 1 + 1) * 2 == 20
    assert not result.bingo


def test_premiums_under_existing_tiles_are_not_reused():
    board = board_with([(7, 6, 'C'), (7, 7, 'A'), (7, 8, 'T')])
    result = score_placement(board, tiles_on_board([(7, 9, 'S')]))
    assert result.word_list == ['CATS']
    assert result.total == 3 + 1 + 1 + 1


def test_center_bonus_can_apply_to_later_moves():
    # Only reachable when the center is uncovered after the opening move.
    board = board_with([(7, 8, 'T')])
    placements = tiles_on_board([(7, 6, 'C'), (7, 7, 'A')])
    assert score_placement(board, placements).total == 5
    assert score_placement(board, placements, center_bonus_first_move_only=False).total == 10


def test_cross_words_score_with_new_premium():
    board = board_with([(7, 6, 'C'), (7, 7, 'A'), (7, 8, 'T')])
    result = score_placement(board, tiles_on_board([(8, 8, 'A'), (8, 9, 'T')]))
    # (8,8) is a double letter and counts in both words.
    assert [(w.word, w.score) for w in result.words] == [('AT', 3), ('TA', 3)]
    assert result.total == 6


def test_bingo_bonus_added_once():
    placements = tiles_on_board([(7, 7 + i, letter) for i, letter in enumerate("RETAINS")])
    result = score_placement(Board.empty(), placements)
    assert result.bingo
    # I lands on the double letter at (7,11).
    assert result.total == (1 + 1 + 1 + 1 + 2 + 1 + 1) * 2 + BINGO_BONUS


def test_blank_scores_zero_even_on_premium():
    blank = assign_blank(make_tile("b1", '*'), 'C')
    placements = [PlacedTile(row=7, col=3, tile=blank)] + tiles_on_board(
        [(7, 4, 'R'), (7, 5, 'A'), (7, 6, 'T'), (7, 7, 'E')])
    result = score_placement(Board.empty(), placements)
    assert result.word_list == ['CRATE']
    assert result.total == (0 + 1 + 1 + 1 + 1) * 2


def test_score_depends_on_letters_not_tile_ids():
    first = [PlacedTile(row=7, col=7, tile=make_tile("x", 'Q')), PlacedTile(row=7, col=8, tile=make_tile("y", 'I'))]
    second = [PlacedTile(row=7, col=7, tile=make_tile("p", 'Q')), PlacedTile(row=7, col=8, tile=make_tile("q", 'I'))]
    assert score_placement(Board.empty(), first).total == score_placement(Board.empty(), second).total == 22


def test_nothing_placed_scores_zero():
    assert score_placement(Board.empty(), []).total == 0
