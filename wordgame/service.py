import logging
from typing import Callable, List, Optional, Sequence, Tuple

from .engine import TurnEngine
from .errors import ConcurrencyConflict, NoActiveChallenge
from .state import GameState
from .store import GameStore

logger = logging.getLogger(__name__)

Transition = Callable[[GameState], GameState]


class GameService:
    """Runs each action as load -> engine transition -> compare-and-commit against the store."""

    def __init__(self, engine: TurnEngine, store: GameStore):
        self.engine = engine
        self.store = store

    def create_game(self, game_id: str, players: Sequence[Tuple[str, str]]) -> GameState:
        return self.store.create(self.engine.new_game(game_id, players))

    def get_state(self, game_id: str) -> GameState:
        return self.store.load(game_id)

    def apply(self, game_id: str, transition: Transition, expected_version: Optional[int] = None) -> GameState:
        state = self.store.load(game_id)
        if expected_version is not None and expected_version != state.version:
            raise ConcurrencyConflict(
                f"Game {game_id} is at v{state.version}, not v{expected_version}; refresh and try again.")
        new_state = transition(state)
        return self.store.commit(new_state, expected_version=state.version)

    def place_tile(self, game_id: str, player_id: str, row: int, col: int, tile_id: str,
                   letter: Optional[str] = None, expected_version: Optional[int] = None) -> GameState:
        return self.apply(game_id, lambda s: self.engine.place_tile(s, player_id, row, col, tile_id, letter),
                          expected_version)

    def assign_blank(self, game_id: str, player_id: str, tile_id: str, letter: str,
                     expected_version: Optional[int] = None) -> GameState:
        return self.apply(game_id, lambda s: self.engine.assign_blank(s, player_id, tile_id, letter),
                          expected_version)

    def retrieve(self, game_id: str, player_id: str, row: Optional[int] = None, col: Optional[int] = None,
                 expected_version: Optional[int] = None) -> GameState:
        if row is None or col is None:
            return self.apply(game_id, lambda s: self.engine.retrieve_all(s, player_id), expected_version)
        return self.apply(game_id, lambda s: self.engine.retrieve_tile(s, player_id, row, col), expected_version)

    def shuffle_rack(self, game_id: str, player_id: str, expected_version: Optional[int] = None) -> GameState:
        return self.apply(game_id, lambda s: self.engine.shuffle_rack(s, player_id), expected_version)

    def submit_move(self, game_id: str, player_id: str, expected_version: Optional[int] = None) -> GameState:
        return self.apply(game_id, lambda s: self.engine.submit_move(s, player_id), expected_version)

    def challenge_move(self, game_id: str, player_id: str, move_id: Optional[str] = None,
                       expected_version: Optional[int] = None) -> GameState:
        return self.apply(game_id, lambda s: self.engine.challenge_move(s, player_id, move_id), expected_version)

    def pass_turn(self, game_id: str, player_id: str, expected_version: Optional[int] = None) -> GameState:
        return self.apply(game_id, lambda s: self.engine.pass_turn(s, player_id), expected_version)

    def expire_due(self, now: Optional[float] = None) -> List[str]:
        """Closes every challenge window that has run out. Returns the ids of games that changed."""
        expired = []
        for game_id in self.store.game_ids():
            state = self.store.load(game_id)
            pending = state.pending_move
            if pending is None or pending.expires_at is None:
                continue
            try:
                self.apply(game_id, lambda s: self.engine.expire_challenge(s, now), expected_version=state.version)
            except NoActiveChallenge:
                continue
            except ConcurrencyConflict:
                logger.info(f"Game {game_id} changed during expiry sweep; retrying on next sweep")
                continue
            expired.append(game_id)
        return expired
