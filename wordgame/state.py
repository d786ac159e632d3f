from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .board import Board
from .tiles import Tile

GameStatus = Literal['active', 'finished']


class PlacedTile(BaseModel):
    row: int
    col: int
    tile: Tile


class PlayerState(BaseModel):
    id: str
    name: str
    score: int = 0
    rack: List[Tile] = Field(default_factory=list)


class PendingMove(BaseModel):
    """Snapshot of a submitted move kept open for challenge. Only the engine creates or clears it."""

    move_id: str
    original_player_id: str
    placed_tiles: List[PlacedTile]
    score: int
    words: List[str] = Field(default_factory=list)
    board_before: Board
    rack_before: List[Tile]
    drawn_tiles: List[Tile] = Field(default_factory=list)
    submitted_at: float
    expires_at: Optional[float] = None


class GameState(BaseModel):
    """Everything the synchronized store holds for one game."""

    id: str
    version: int = 0
    board: Board = Field(default_factory=Board.empty)
    players: List[PlayerState] = Field(default_factory=list)
    bag: List[Tile] = Field(default_factory=list)
    turn_index: int = 0
    staged: List[PlacedTile] = Field(default_factory=list)
    pending_move: Optional[PendingMove] = None
    last_resolved_move_id: Optional[str] = None
    skip_turns: List[str] = Field(default_factory=list)
    consecutive_passes: int = 0
    status: GameStatus = 'active'
    winner_ids: List[str] = Field(default_factory=list)
    last_message: Optional[str] = None

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.turn_index % len(self.players)]

    def player(self, player_id: str) -> Optional[PlayerState]:
        return next((p for p in self.players if p.id == player_id), None)

    def tile_count(self) -> int:
        """bag + racks + committed board + staged tiles; constant for the whole game."""
        return (len(self.bag) + sum(len(p.rack) for p in self.players)
                + self.board.tile_count() + len(self.staged))
