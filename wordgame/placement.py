"""Placement legality: alignment, contiguity, first-move and connectivity rules.

Connectivity has been played under three different rules over the life of the
game, so it is a strategy object chosen by configuration:

- ``adjacent``: some new tile touches (up/down/left/right) an existing tile.
- ``line`` (default): ``adjacent``, or the full line the new tiles form runs
  through an existing tile.
- ``component``: the new tiles sit in the same orthogonally connected group of
  occupied cells as at least one existing tile.
"""
import logging
from abc import ABC, abstractmethod
from collections import deque
from typing import Dict, List, Optional, Sequence, Set, Tuple

from .board import Board, Position, in_bounds
from .constants import CENTER, RACK_SIZE
from .state import PlacedTile

logger = logging.getLogger(__name__)

NEIGHBOURS = [(-1, 0), (1, 0), (0, -1), (0, 1)]


class ConnectivityStrategy(ABC):
    name = ''

    @abstractmethod
    def is_connected(self, placements: Sequence[PlacedTile], board: Board) -> bool:
        """`board` is the committed board, without this turn's placements."""


def _touches_existing(row: int, col: int, board: Board) -> bool:
    return any(board.is_occupied(row + dr, col + dc) for dr, dc in NEIGHBOURS)


class AdjacencyConnectivity(ConnectivityStrategy):
    name = 'adjacent'

    def is_connected(self, placements: Sequence[PlacedTile], board: Board) -> bool:
        return any(_touches_existing(p.row, p.col, board) for p in placements)


class LineConnectivity(AdjacencyConnectivity):
    name = 'line'

    def is_connected(self, placements: Sequence[PlacedTile], board: Board) -> bool:
        if super().is_connected(placements, board):
            return True
        new_cells = {(p.row, p.col) for p in placements}
        for dr, dc in _axes_for(placements):
            start_r, start_c = placements[0].row, placements[0].col
            # Walk back to the start of the run, then forward to its end.
            r, c = start_r, start_c
            while (r - dr, c - dc) in new_cells or board.is_occupied(r - dr, c - dc):
                r, c = r - dr, c - dc
            while (r, c) in new_cells or board.is_occupied(r, c):
                if (r, c) not in new_cells:
                    return True
                r, c = r + dr, c + dc
        return False


class ComponentConnectivity(ConnectivityStrategy):
    name = 'component'

    def is_connected(self, placements: Sequence[PlacedTile], board: Board) -> bool:
        new_cells = {(p.row, p.col) for p in placements}
        seen: Set[Position] = set(new_cells)
        queue = deque(new_cells)
        while queue:
            r, c = queue.popleft()
            for dr, dc in NEIGHBOURS:
                nxt = (r + dr, c + dc)
                if nxt in seen:
                    continue
                if board.is_occupied(*nxt):
                    return True
                if nxt in new_cells:
                    seen.add(nxt)
                    queue.append(nxt)
        return False


CONNECTIVITY_STRATEGIES: Dict[str, ConnectivityStrategy] = {
    s.name: s for s in (AdjacencyConnectivity(), LineConnectivity(), ComponentConnectivity())
}


def get_connectivity_strategy(name: str) -> ConnectivityStrategy:
    try:
        return CONNECTIVITY_STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Unknown connectivity rule '{name}'") from None


def _axes_for(placements: Sequence[PlacedTile]) -> List[Tuple[int, int]]:
    """Direction steps the placement lies along; a lone tile lies along both."""
    rows = {p.row for p in placements}
    cols = {p.col for p in placements}
    axes = []
    if len(rows) == 1:
        axes.append((0, 1))
    if len(cols) == 1:
        axes.append((1, 0))
    return axes


def _check_cells(placements: Sequence[PlacedTile], board: Board) -> Optional[str]:
    seen: Set[Position] = set()
    tile_ids: Set[str] = set()
    for p in placements:
        if not in_bounds(p.row, p.col):
            return f"Placement out of bounds at ({p.row},{p.col})."
        if (p.row, p.col) in seen:
            return f"Two tiles placed on ({p.row},{p.col})."
        if p.tile.id in tile_ids:
            return f"Tile {p.tile.id} placed twice."
        if board.is_occupied(p.row, p.col):
            return f"Square ({p.row},{p.col}) is already occupied."
        seen.add((p.row, p.col))
        tile_ids.add(p.tile.id)
    return None


def _check_contiguity(placements: Sequence[PlacedTile], board: Board) -> bool:
    new_cells = {(p.row, p.col) for p in placements}
    if len(placements) == 1:
        return True
    _, dc = _axes_for(placements)[0]
    if dc:
        row = placements[0].row
        cols = [p.col for p in placements]
        run = [(row, c) for c in range(min(cols), max(cols) + 1)]
    else:
        col = placements[0].col
        rows = [p.row for p in placements]
        run = [(r, col) for r in range(min(rows), max(rows) + 1)]
    return all(cell in new_cells or board.is_occupied(*cell) for cell in run)


def validate_placement(placements: Sequence[PlacedTile], board: Board,
                       connectivity: Optional[ConnectivityStrategy] = None) -> Tuple[bool, str]:
    """Decides whether this turn's placements are legal on the committed board.

    Returns (is_valid, reason); reason names the failed rule. Never mutates anything.
    """
    connectivity = connectivity or CONNECTIVITY_STRATEGIES['line']

    if not placements:
        return False, "Nothing to submit."
    if len(placements) > RACK_SIZE:
        return False, f"At most {RACK_SIZE} tiles can be placed in one move."

    cell_problem = _check_cells(placements, board)
    if cell_problem:
        return False, cell_problem

    if not _axes_for(placements):
        return False, "Tiles must be placed in a straight line (horizontal or vertical)."

    if not _check_contiguity(placements, board):
        return False, "Tiles must form a continuous word with no gaps."

    if board.is_empty():
        if not any((p.row, p.col) == CENTER for p in placements):
            return False, "First word must cover the center square."
        return True, "Placement is valid."

    if not connectivity.is_connected(placements, board):
        return False, "Word must connect to existing tiles on the board."

    return True, "Placement is valid."
