from pydantic import BaseModel, Field
from typing import List, Optional

from wordgame.state import PlacedTile
from wordgame.tiles import Tile


class PlayerEntry(BaseModel):
    id: str
    name: str


class CreateGameRequest(BaseModel):
    game_id: Optional[str] = None
    players: List[PlayerEntry]


class ActionRequest(BaseModel):
    player_id: str
    expected_version: Optional[int] = None


class PlaceTileRequest(ActionRequest):
    row: int
    col: int
    tile_id: str
    letter: Optional[str] = None


class AssignBlankRequest(ActionRequest):
    tile_id: str
    letter: str


class RetrieveRequest(ActionRequest):
    row: Optional[int] = None
    col: Optional[int] = None


class ChallengeRequest(ActionRequest):
    move_id: Optional[str] = None


class PlayerView(BaseModel):
    id: str
    name: str
    score: int
    rack_count: int
    rack: Optional[List[Tile]] = None


class PendingMoveView(BaseModel):
    move_id: str
    original_player_id: str
    placed_tiles: List[PlacedTile]
    score: int
    words: List[str]
    expires_at: Optional[float] = None


class GameStateResponse(BaseModel):
    game_id: str
    version: int
    board: List[List[Optional[Tile]]]
    players: List[PlayerView]
    current_player_id: str
    staged: List[PlacedTile] = Field(default_factory=list)
    tiles_in_bag: int
    pending_move: Optional[PendingMoveView] = None
    status: str
    winner_ids: List[str] = Field(default_factory=list)
    message: Optional[str] = None
