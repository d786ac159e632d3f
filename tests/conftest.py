"""
Pytest configuration and fixtures for the word game engine tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add the project root so `wordgame`, `main` and `models` import without installing.
sys.path.insert(0, str(Path(__file__).parent.parent))

from wordgame.board import Board
from wordgame.config import GameConfig
from wordgame.constants import BLANK_MARKER
from wordgame.engine import TurnEngine
from wordgame.errors import OracleUnavailable
from wordgame.state import GameState, PlacedTile, PlayerState
from wordgame.tiles import draw, generate_initial_bag, make_tile

WORDS = {"CAT", "CATS", "AT", "TA", "CRATE", "QI", "DOG", "DOGS", "GO", "TO", "AXE",
         "RETAINS", "JAB", "AB", "ZA", "ZAS", "SAT", "ACT"}


class FakeDictionary:
    def __init__(self, words=WORDS, fail=False):
        self.words = {w.upper() for w in words}
        self.fail = fail
        self.lookups = []

    def is_valid(self, word: str) -> bool:
        self.lookups.append(word)
        if self.fail:
            raise OracleUnavailable("dictionary service down")
        return word.upper() in self.words


class ManualClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def dictionary():
    return FakeDictionary()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def config():
    return GameConfig(challenge_window_seconds=30, oracle_timeout_seconds=None)


@pytest.fixture
def engine(dictionary, config, clock):
    return TurnEngine(dictionary, config, rng=random.Random(7), clock=clock)


def tiles_on_board(placements):
    """[(row, col, letter)] -> list of PlacedTile with throwaway ids."""
    return [PlacedTile(row=r, col=c, tile=make_tile(f"t{r}-{c}", letter)) for r, c, letter in placements]


def board_with(placements) -> Board:
    return Board.empty().with_tiles((p.row, p.col, p.tile) for p in tiles_on_board(placements))


@pytest.fixture
def make_game(engine):
    """Builds a full 100-tile game whose racks start with the given letters ('*' for a blank)."""

    def _make(racks, game_id="g1"):
        bag = generate_initial_bag(random.Random(3))
        players = []
        for player_id, letters in racks.items():
            rack = []
            for letter in letters:
                idx = next(i for i, t in enumerate(bag)
                           if (t.is_blank if letter == BLANK_MARKER else (not t.is_blank and t.letter == letter)))
                rack.append(bag.pop(idx))
            extra, bag = draw(bag, 7 - len(rack))
            players.append(PlayerState(id=player_id, name=player_id.title(), rack=rack + extra))
        return GameState(id=game_id, players=players, bag=bag)

    return _make


def rack_tile(state, player_id, letter):
    """First tile in the player's rack showing `letter` ('*' for an unassigned blank)."""
    player = state.player(player_id)
    if letter == BLANK_MARKER:
        return next(t for t in player.rack if t.is_blank)
    return next(t for t in player.rack if not t.is_blank and t.letter == letter)


def play(engine, state, player_id, placements):
    """Stages [(row, col, letter)] from the player's rack and submits."""
    for row, col, letter in placements:
        blank_letter = None
        if letter.islower():
            tile = rack_tile(state, player_id, BLANK_MARKER)
            blank_letter = letter.upper()
        else:
            tile = rack_tile(state, player_id, letter)
        state = engine.place_tile(state, player_id, row, col, tile.id, blank_letter)
    return engine.submit_move(state, player_id)
