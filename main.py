import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware

from models import (ActionRequest, AssignBlankRequest, ChallengeRequest,
                    CreateGameRequest, GameStateResponse, PendingMoveView,
                    PlaceTileRequest, PlayerView, RetrieveRequest)
from wordgame.config import load_config
from wordgame.constants import EXPIRY_SWEEP_INTERVAL_SECONDS
from wordgame.dictionary import build_dictionary
from wordgame.engine import TurnEngine
from wordgame.errors import (ConcurrencyConflict, GameError, GameNotFound,
                             GameOver, InvalidPlacement, NoActiveChallenge,
                             NotYourTurn, OracleUnavailable)
from wordgame.service import GameService
from wordgame.state import GameState
from wordgame.store import InMemoryGameStore

logging.basicConfig(level=logging.INFO,
                    format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (InvalidPlacement, 400),
    (NotYourTurn, 403),
    (GameNotFound, 404),
    (NoActiveChallenge, 409),
    (ConcurrencyConflict, 409),
    (GameOver, 409),
    (OracleUnavailable, 503),
]


def build_service() -> GameService:
    config = load_config()
    engine = TurnEngine(build_dictionary(config), config)
    return GameService(engine, InMemoryGameStore())


def _http_error(error: GameError) -> HTTPException:
    status = next((code for cls, code in ERROR_STATUS if isinstance(error, cls)), 400)
    return HTTPException(status_code=status, detail={"error": type(error).__name__, "reason": error.reason})


def _state_response(state: GameState, viewer_id: Optional[str] = None,
                    message: Optional[str] = None) -> GameStateResponse:
    """Per-player view: only the viewer's own rack and staged tiles are shown."""
    players = [
        PlayerView(id=p.id, name=p.name, score=p.score, rack_count=len(p.rack),
                   rack=p.rack if p.id == viewer_id else None)
        for p in state.players
    ]
    pending = None
    if state.pending_move:
        pm = state.pending_move
        pending = PendingMoveView(move_id=pm.move_id, original_player_id=pm.original_player_id,
                                  placed_tiles=pm.placed_tiles, score=pm.score, words=pm.words,
                                  expires_at=pm.expires_at)
    current_id = state.current_player.id
    return GameStateResponse(
        game_id=state.id, version=state.version, board=state.board.grid, players=players,
        current_player_id=current_id, staged=state.staged if viewer_id == current_id else [],
        tiles_in_bag=len(state.bag), pending_move=pending, status=state.status,
        winner_ids=state.winner_ids, message=message,
    )


async def _expiry_sweeper(service: GameService):
    # Soft timeout: late challenges are rejected by the engine even between sweeps.
    try:
        while True:
            await asyncio.sleep(EXPIRY_SWEEP_INTERVAL_SECONDS)
            for game_id in service.expire_due():
                logger.info(f"Challenge window closed for game {game_id}")
    except asyncio.CancelledError:
        return


def create_app(service: Optional[GameService] = None) -> FastAPI:
    service = service or build_service()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        task = asyncio.create_task(_expiry_sweeper(service))
        try:
            yield
        finally:
            task.cancel()

    app = FastAPI(title="Word Tile Game Backend", lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/api/games", response_model=GameStateResponse, tags=["Game Flow"])
    async def create_game(request: CreateGameRequest):
        game_id = request.game_id or uuid.uuid4().hex[:8]
        try:
            state = service.create_game(game_id, [(p.id, p.name) for p in request.players])
        except ValueError as e:
            raise HTTPException(status_code=400, detail={"error": "InvalidRoster", "reason": str(e)})
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, message="New game started.")

    @app.get("/api/games/{game_id}", response_model=GameStateResponse, tags=["Game Info"])
    async def get_game(game_id: str, player_id: Optional[str] = None):
        try:
            state = service.get_state(game_id)
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, player_id)

    @app.post("/api/games/{game_id}/place", response_model=GameStateResponse, tags=["Game Actions"])
    async def place_tile(game_id: str, request: PlaceTileRequest):
        try:
            state = service.place_tile(game_id, request.player_id, request.row, request.col,
                                       request.tile_id, request.letter, request.expected_version)
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, request.player_id)

    @app.post("/api/games/{game_id}/blank", response_model=GameStateResponse, tags=["Game Actions"])
    async def assign_blank(game_id: str, request: AssignBlankRequest):
        try:
            state = service.assign_blank(game_id, request.player_id, request.tile_id,
                                         request.letter, request.expected_version)
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, request.player_id)

    @app.post("/api/games/{game_id}/retrieve", response_model=GameStateResponse, tags=["Game Actions"])
    async def retrieve(game_id: str, request: RetrieveRequest):
        try:
            state = service.retrieve(game_id, request.player_id, request.row, request.col,
                                     request.expected_version)
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, request.player_id, message="Tiles retrieved.")

    @app.post("/api/games/{game_id}/shuffle", response_model=GameStateResponse, tags=["Game Actions"])
    async def shuffle_rack(game_id: str, request: ActionRequest):
        try:
            state = service.shuffle_rack(game_id, request.player_id, request.expected_version)
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, request.player_id)

    @app.post("/api/games/{game_id}/submit", response_model=GameStateResponse, tags=["Game Actions"])
    async def submit_move(game_id: str, request: ActionRequest):
        try:
            state = service.submit_move(game_id, request.player_id, request.expected_version)
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, request.player_id, message=state.last_message)

    @app.post("/api/games/{game_id}/challenge", response_model=GameStateResponse, tags=["Game Actions"])
    async def challenge_move(game_id: str, request: ChallengeRequest):
        try:
            state = await run_in_threadpool(service.challenge_move, game_id, request.player_id,
                                            request.move_id, request.expected_version)
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, request.player_id, message=state.last_message)

    @app.post("/api/games/{game_id}/pass", response_model=GameStateResponse, tags=["Game Actions"])
    async def pass_turn(game_id: str, request: ActionRequest):
        try:
            state = service.pass_turn(game_id, request.player_id, request.expected_version)
        except GameError as e:
            raise _http_error(e)
        return _state_response(state, request.player_id, message=state.last_message)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    logger.info("Starting word tile game backend server...")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
