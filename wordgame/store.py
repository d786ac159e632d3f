import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

from .errors import ConcurrencyConflict, GameNotFound
from .state import GameState

logger = logging.getLogger(__name__)

Listener = Callable[[GameState], None]


class GameStore(ABC):
    """Single source of truth for game snapshots. Writes are compare-and-commit on `version`."""

    def __init__(self):
        self._listeners: List[Listener] = []

    @abstractmethod
    def create(self, state: GameState) -> GameState:
        pass

    @abstractmethod
    def load(self, game_id: str) -> GameState:
        pass

    @abstractmethod
    def commit(self, state: GameState, expected_version: int) -> GameState:
        """Stores `state` as version expected_version + 1, or raises ConcurrencyConflict."""

    @abstractmethod
    def game_ids(self) -> List[str]:
        pass

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, state: GameState):
        for listener in list(self._listeners):
            listener(state.model_copy(deep=True))


class InMemoryGameStore(GameStore):

    def __init__(self):
        super().__init__()
        self._games: Dict[str, GameState] = {}
        self._lock = threading.Lock()

    def create(self, state: GameState) -> GameState:
        with self._lock:
            if state.id in self._games:
                raise ConcurrencyConflict(f"Game {state.id} already exists.")
            stored = state.model_copy(deep=True, update={'version': 0})
            self._games[state.id] = stored
        self._notify(stored)
        return stored.model_copy(deep=True)

    def load(self, game_id: str) -> GameState:
        with self._lock:
            state = self._games.get(game_id)
            if state is None:
                raise GameNotFound(f"Game {game_id} not found.")
            return state.model_copy(deep=True)

    def commit(self, state: GameState, expected_version: int) -> GameState:
        with self._lock:
            current = self._games.get(state.id)
            if current is None:
                raise GameNotFound(f"Game {state.id} not found.")
            if current.version != expected_version:
                logger.info(
                    f"Rejected stale write to game {state.id}: expected v{expected_version}, store has v{current.version}")
                raise ConcurrencyConflict(
                    f"Game {state.id} changed (v{current.version}); refresh and try again.")
            stored = state.model_copy(deep=True, update={'version': expected_version + 1})
            self._games[state.id] = stored
        self._notify(stored)
        return stored.model_copy(deep=True)

    def game_ids(self) -> List[str]:
        with self._lock:
            return list(self._games)
