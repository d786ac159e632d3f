import pytest

from conftest import board_with, tiles_on_board

from wordgame.board import Board
from wordgame.placement import (AdjacencyConnectivity, ComponentConnectivity,
                                LineConnectivity, get_connectivity_strategy,
                                validate_placement)


def test_nothing_to_submit():
    assert validate_placement([], Board.empty()) == (False, "Nothing to submit.")


def test_first_move_must_cover_center():
    ok, reason = validate_placement(tiles_on_board([(0, 0, 'C'), (0, 1, 'A'), (0, 2, 'T')]), Board.empty())
    assert not ok and "center" in reason

    ok, _ = validate_placement(tiles_on_board([(7, 6, 'C'), (7, 7, 'A'), (7, 8, 'T')]), Board.empty())
    assert ok


def test_single_tile_on_center_is_a_valid_first_move():
    ok, _ = validate_placement(tiles_on_board([(7, 7, 'A')]), Board.empty())
    assert ok


def test_gap_in_line_is_rejected():
    ok, reason = validate_placement(tiles_on_board([(7, 7, 'C'), (7, 9, 'T')]), Board.empty())
    assert not ok and "gaps" in reason


def test_off_axis_placement_is_rejected():
    ok, reason = validate_placement(tiles_on_board([(7, 7, 'C'), (8, 8, 'A')]), Board.empty())
    assert not ok and "straight line" in reason


def test_existing_tile_fills_the_gap():
    board = board_with([(7, 6, 'C'), (7, 7, 'A'), (7, 8, 'T')])
    ok, _ = validate_placement(tiles_on_board([(6, 7, 'T'), (8, 7, 'X')]), board)
    assert ok


def test_disconnected_second_move_is_rejected():
    board = board_with([(7, 6, 'C'), (7, 7, 'A'), (7, 8, 'T')])
    ok, reason = validate_placement(tiles_on_board([(0, 0, 'D'), (0, 1, 'O'), (0, 2, 'G')]), board)
    assert not ok and "connect" in reason


def test_adjacent_second_move_is_accepted():
    board = board_with([(7, 6, 'C'), (7, 7, 'A'), (7, 8, 'T')])
    ok, _ = validate_placement(tiles_on_board([(7, 9, 'S')]), board)
    assert ok


def test_occupied_square_is_rejected():
    board = board_with([(7, 7, 'A')])
    ok, reason = validate_placement(tiles_on_board([(7, 7, 'B')]), board)
    assert not ok and "occupied" in reason


def test_out_of_bounds_and_duplicates_are_rejected():
    ok, reason = validate_placement(tiles_on_board([(7, 15, 'A')]), Board.empty())
    assert not ok and "out of bounds" in reason

    placements = tiles_on_board([(7, 7, 'A')]) * 2
    ok, _ = validate_placement(placements, Board.empty())
    assert not ok


def test_more_than_a_rack_is_rejected():
    placements = tiles_on_board([(7, c, 'A') for c in range(3, 11)])
    ok, reason = validate_placement(placements, Board.empty())
    assert not ok and "At most" in reason


def test_validation_does_not_mutate_board():
    board = board_with([(7, 7, 'A')])
    before = board.model_copy(deep=True)
    validate_placement(tiles_on_board([(7, 8, 'T')]), board)
    assert board == before


@pytest.mark.parametrize("strategy", [AdjacencyConnectivity(), LineConnectivity(), ComponentConnectivity()])
def test_all_strategies_agree_on_simple_cases(strategy):
    board = board_with([(7, 6, 'C'), (7, 7, 'A'), (7, 8, 'T')])
    assert strategy.is_connected(tiles_on_board([(8, 8, 'O')]), board)
    assert not strategy.is_connected(tiles_on_board([(10, 10, 'O')]), board)


def test_line_strategy_sees_existing_tile_inside_run():
    board = board_with([(7, 7, 'A')])
    placements = tiles_on_board([(7, 6, 'C'), (7, 8, 'T')])
    assert LineConnectivity().is_connected(placements, board)


def test_strategy_lookup():
    assert get_connectivity_strategy('line').name == 'line'
    with pytest.raises(ValueError):
        get_connectivity_strategy('diagonal')
