"""Turn and challenge state machine.

Every public method takes a GameState and returns a new one; the input is never
modified, so a rejected action (any GameError) leaves the caller's state intact
and a successful one is a single transition the store can commit atomically.

States: awaiting a move from the turn player, optionally with one PendingMove
open for challenge. Submitting commits the move, refills the rack, opens the
challenge window and advances the turn immediately. A challenge either confirms
the move or reverts it; otherwise the window expires and the move stands.
"""
import logging
import random
import time
import uuid
from typing import Callable, List, Optional, Sequence, Tuple

from .board import in_bounds
from .config import GameConfig
from .constants import MAX_PLAYERS, MIN_PLAYERS, PASS_LIMIT_PER_PLAYER, RACK_SIZE
from .dictionary import DictionaryOracle
from .errors import (ChallengeAlreadyResolved, GameOver, InvalidPlacement,
                     NoActiveChallenge, NotYourTurn, OracleUnavailable)
from .placement import get_connectivity_strategy, validate_placement
from .scoring import score_placement
from .state import GameState, PendingMove, PlacedTile, PlayerState
from .tiles import (assign_blank, draw, generate_initial_bag, rack_value,
                    reset_blank, restore)
from .words import extract_word_spans, span_word

logger = logging.getLogger(__name__)


class TurnEngine:

    def __init__(self, dictionary: DictionaryOracle, config: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None, clock: Callable[[], float] = time.time):
        self.dictionary = dictionary
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.clock = clock
        self.connectivity = get_connectivity_strategy(self.config.connectivity)

    # --- Setup ---

    def new_game(self, game_id: str, players: Sequence[Tuple[str, str]]) -> GameState:
        """Creates a game for the given (player_id, name) roster and deals every rack."""
        if not MIN_PLAYERS <= len(players) <= MAX_PLAYERS:
            raise ValueError(f"A game needs {MIN_PLAYERS}-{MAX_PLAYERS} players, got {len(players)}")
        if len({pid for pid, _ in players}) != len(players):
            raise ValueError("Player ids must be unique")

        bag = generate_initial_bag(self.rng)
        roster = []
        for player_id, name in players:
            rack, bag = draw(bag, RACK_SIZE)
            roster.append(PlayerState(id=player_id, name=name, rack=rack))
        logger.info(f"New game {game_id} with players {[p.id for p in roster]}")
        return GameState(id=game_id, players=roster, bag=bag)

    # --- Helpers ---

    @staticmethod
    def _begin(state: GameState) -> GameState:
        return state.model_copy(deep=True)

    @staticmethod
    def _require_active(state: GameState):
        if state.status != 'active':
            raise GameOver("The game is over.")

    @staticmethod
    def _require_player(state: GameState, player_id: str) -> PlayerState:
        player = state.player(player_id)
        if player is None:
            raise NotYourTurn(f"Player {player_id} is not in this game.")
        return player

    def _require_turn(self, state: GameState, player_id: str) -> PlayerState:
        self._require_active(state)
        player = self._require_player(state, player_id)
        if state.current_player.id != player_id:
            raise NotYourTurn("Not your turn.")
        return player

    @staticmethod
    def _return_staged(state: GameState):
        """Sends the turn player's staged tiles back to their rack."""
        if state.staged:
            state.current_player.rack.extend(reset_blank(p.tile) for p in state.staged)
            state.staged = []

    def _next_turn(self, state: GameState):
        self._return_staged(state)
        count = len(state.players)
        idx = state.turn_index
        for _ in range(count * 2):
            idx = (idx + 1) % count
            player_id = state.players[idx].id
            if player_id in state.skip_turns:
                state.skip_turns.remove(player_id)
                logger.info(f"Game {state.id}: skipping {player_id}'s turn")
                continue
            break
        state.turn_index = idx

    def _forfeit_next_turn(self, state: GameState, player_id: str):
        if state.current_player.id == player_id:
            self._next_turn(state)
        elif player_id not in state.skip_turns:
            state.skip_turns.append(player_id)

    def _settle_pending(self, state: GameState, outcome: str):
        """The pending move stands as played."""
        pending = state.pending_move
        if pending is None:
            return
        state.pending_move = None
        state.last_resolved_move_id = pending.move_id
        logger.info(f"Game {state.id}: move {pending.move_id} by {pending.original_player_id} stands ({outcome})")
        mover = state.player(pending.original_player_id)
        if mover is not None and not mover.rack and not state.bag:
            self._finish_game(state)

    def _finish_game(self, state: GameState):
        """Adjusts final scores at game end based on remaining rack tiles."""
        if state.pending_move is not None:
            self._settle_pending(state, 'game ended')
            if state.status == 'finished':
                return
        self._return_staged(state)
        went_out = next((p for p in state.players if not p.rack), None)
        if went_out:
            for p in state.players:
                if p is went_out:
                    continue
                value = rack_value(p.rack)
                p.score -= value
                went_out.score += value
        else:
            for p in state.players:
                p.score -= rack_value(p.rack)

        state.status = 'finished'
        best = max(p.score for p in state.players)
        state.winner_ids = [p.id for p in state.players if p.score == best]
        state.last_message = f"Game over! Winner: {', '.join(state.winner_ids)}."
        logger.info(f"Game {state.id} over. Final scores: {[(p.id, p.score) for p in state.players]}")

    # --- Staging ---

    def place_tile(self, state: GameState, player_id: str, row: int, col: int,
                   tile_id: str, letter: Optional[str] = None) -> GameState:
        """Stages one rack tile on an empty square for this turn."""
        new = self._begin(state)
        player = self._require_turn(new, player_id)
        if not in_bounds(row, col):
            raise InvalidPlacement(f"Placement out of bounds at ({row},{col}).")
        if new.board.is_occupied(row, col) or any((p.row, p.col) == (row, col) for p in new.staged):
            raise InvalidPlacement(f"Square ({row},{col}) is already occupied.")
        tile = next((t for t in player.rack if t.id == tile_id), None)
        if tile is None:
            raise InvalidPlacement(f"Tile {tile_id} is not in your rack.")
        if tile.is_blank and letter:
            tile = assign_blank(tile, letter)
        player.rack = [t for t in player.rack if t.id != tile_id]
        new.staged.append(PlacedTile(row=row, col=col, tile=tile))
        return new

    def assign_blank(self, state: GameState, player_id: str, tile_id: str, letter: str) -> GameState:
        """Chooses the letter a blank stands for, in the rack or among staged tiles."""
        new = self._begin(state)
        player = self._require_turn(new, player_id)
        for i, tile in enumerate(player.rack):
            if tile.id == tile_id:
                player.rack[i] = assign_blank(tile, letter)
                return new
        for placed in new.staged:
            if placed.tile.id == tile_id:
                placed.tile = assign_blank(placed.tile, letter)
                return new
        raise InvalidPlacement(f"Tile {tile_id} is not in your rack.")

    def retrieve_tile(self, state: GameState, player_id: str, row: int, col: int) -> GameState:
        new = self._begin(state)
        player = self._require_turn(new, player_id)
        placed = next((p for p in new.staged if (p.row, p.col) == (row, col)), None)
        if placed is None:
            raise InvalidPlacement(f"No tile placed this turn at ({row},{col}).")
        new.staged.remove(placed)
        player.rack.append(reset_blank(placed.tile))
        return new

    def retrieve_all(self, state: GameState, player_id: str) -> GameState:
        new = self._begin(state)
        self._require_turn(new, player_id)
        self._return_staged(new)
        return new

    def shuffle_rack(self, state: GameState, player_id: str) -> GameState:
        new = self._begin(state)
        if self.config.permissive_shuffle:
            self._require_active(new)
            player = self._require_player(new, player_id)
        else:
            player = self._require_turn(new, player_id)
        self.rng.shuffle(player.rack)
        return new

    # --- Turn actions ---

    def submit_move(self, state: GameState, player_id: str) -> GameState:
        """Commits the staged tiles, scores them, refills the rack and opens the challenge window."""
        new = self._begin(state)
        player = self._require_turn(new, player_id)
        if not new.staged:
            raise InvalidPlacement("Nothing to submit.")

        if new.pending_move is not None:
            self._settle_pending(new, 'superseded by next move')
            if new.status == 'finished':
                return new

        is_valid, reason = validate_placement(new.staged, new.board, self.connectivity)
        if not is_valid:
            logger.info(f"Game {new.id}: rejected move by {player_id}: {reason}")
            raise InvalidPlacement(reason)
        unassigned = [p for p in new.staged if p.tile.is_blank and not p.tile.chosen_letter]
        if unassigned:
            raise InvalidPlacement("Choose a letter for every blank tile before submitting.")

        placements = list(new.staged)
        move_score = score_placement(new.board, placements, self.config.center_bonus_first_move_only)

        board_before = new.board
        rack_before = list(player.rack) + [p.tile for p in placements]
        new.board = board_before.with_tiles((p.row, p.col, p.tile) for p in placements)
        player.score += move_score.total
        drawn, new.bag = draw(new.bag, RACK_SIZE - len(player.rack))
        player.rack.extend(drawn)

        now = self.clock()
        window = self.config.challenge_window_seconds
        new.pending_move = PendingMove(
            move_id=uuid.uuid4().hex,
            original_player_id=player_id,
            placed_tiles=placements,
            score=move_score.total,
            words=move_score.word_list,
            board_before=board_before,
            rack_before=rack_before,
            drawn_tiles=drawn,
            submitted_at=now,
            expires_at=now + window if window else None,
        )
        new.staged = []
        new.consecutive_passes = 0
        new.last_message = (f"{player_id} played {', '.join(move_score.word_list) or 'a tile'} "
                            f"for {move_score.total} pts. Opponents can now challenge.")
        self._next_turn(new)
        logger.info(
            f"Game {new.id}: {player_id} played {move_score.word_list} for {move_score.total} pts"
            f"{' (bingo)' if move_score.bingo else ''}; drew {len(drawn)}")
        return new

    def pass_turn(self, state: GameState, player_id: str) -> GameState:
        new = self._begin(state)
        self._require_turn(new, player_id)
        new.consecutive_passes += 1
        if new.consecutive_passes >= PASS_LIMIT_PER_PLAYER * len(new.players):
            logger.info(f"Game {new.id}: {player_id} passed. Game over (consecutive passes).")
            self._finish_game(new)
            return new
        self._next_turn(new)
        new.last_message = f"{player_id} passed turn."
        logger.info(f"Game {new.id}: {player_id} passed turn.")
        return new

    # --- Challenge ---

    def _open_pending(self, state: GameState, move_id: Optional[str]) -> PendingMove:
        pending = state.pending_move
        if move_id and move_id == state.last_resolved_move_id:
            raise ChallengeAlreadyResolved("No move to challenge: it was already resolved.")
        if pending is None or (move_id and move_id != pending.move_id):
            raise NoActiveChallenge("No move to challenge.")
        if pending.expires_at is not None and self.clock() >= pending.expires_at:
            raise NoActiveChallenge("No move to challenge: the challenge window has closed.")
        return pending

    def challenge_words(self, state: GameState) -> List[str]:
        """Words formed by the pending move, read off the committed board."""
        pending = state.pending_move
        if pending is None:
            return []
        positions = [(p.row, p.col) for p in pending.placed_tiles]
        return [span_word(state.board, span) for span in extract_word_spans(state.board, positions)]

    def challenge_move(self, state: GameState, challenger_id: str, move_id: Optional[str] = None) -> GameState:
        """Checks every word of the pending move against the dictionary.

        All valid: the move stands (and the challenger may forfeit a turn).
        Any invalid: the board, the mover's rack, score and the bag go back to
        how they were before the move.
        """
        new = self._begin(state)
        self._require_player(new, challenger_id)
        pending = self._open_pending(new, move_id)
        if challenger_id == pending.original_player_id:
            raise NotYourTurn("Players cannot challenge their own move.")

        words = self.challenge_words(new)
        try:
            invalid = [w for w in words if not self.dictionary.is_valid(w)]
        except Exception as e:
            if self.config.oracle_failure_policy == 'accept':
                logger.warning(f"Game {new.id}: dictionary unavailable ({e}); move stands without penalty")
                new.last_message = "Dictionary unavailable; the move stands."
                self._settle_pending(new, 'dictionary unavailable')
                return new
            logger.warning(f"Game {new.id}: dictionary unavailable during challenge: {e}")
            if isinstance(e, OracleUnavailable):
                raise
            raise OracleUnavailable(f"Dictionary unavailable: {e}") from e

        if not invalid:
            logger.info(f"Game {new.id}: challenge by {challenger_id} failed; {words} are valid")
            new.last_message = f"Challenge failed! All words are valid: {', '.join(words)}."
            self._settle_pending(new, 'challenge failed')
            if self.config.challenger_loses_turn and new.status == 'active':
                self._forfeit_next_turn(new, challenger_id)
            return new

        self._revert_pending(new)
        new.last_message = f"Challenge successful! Invalid words: {', '.join(invalid)}. Move has been undone."
        logger.info(f"Game {new.id}: challenge by {challenger_id} succeeded; invalid words {invalid}")
        return new

    def _revert_pending(self, state: GameState):
        pending = state.pending_move
        mover = state.player(pending.original_player_id)
        if state.current_player is mover:
            self._return_staged(state)

        drawn_ids = {t.id for t in pending.drawn_tiles}
        returned = [reset_blank(p.tile) for p in pending.placed_tiles]
        mover.rack = [t for t in mover.rack if t.id not in drawn_ids] + returned
        mover.score = max(0, mover.score - pending.score)
        state.board = pending.board_before
        state.bag = restore(pending.drawn_tiles, state.bag, self.rng)
        state.pending_move = None
        state.last_resolved_move_id = pending.move_id

    def expire_challenge(self, state: GameState, now: Optional[float] = None) -> GameState:
        """Closes a challenge window that has run out; the move stands."""
        pending = state.pending_move
        if pending is None:
            raise NoActiveChallenge("No move to challenge.")
        now = self.clock() if now is None else now
        if pending.expires_at is None or now < pending.expires_at:
            raise NoActiveChallenge("The challenge window is still open.")
        new = self._begin(state)
        new.last_message = "Challenge window closed; the move stands."
        self._settle_pending(new, 'challenge window expired')
        return new
