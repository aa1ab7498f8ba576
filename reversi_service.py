"""Frontera de peticiones: decodifica un estado de juego, busca y aplica la jugada."""

import logging
import time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mcts_core import MCTSConfig, search, SIMULATIONS_PER_ROLLOUT, MAX_ITERATIONS
from reversi_board import Board, ReversiError, as_position, BLACK, WHITE
from board_utils import to_notation, color_name

logger = logging.getLogger(__name__)


class InconsistentStateError(ReversiError):
    """Estado externo contradictorio (casillas repetidas o turno inválido)."""


class GameOverError(ReversiError):
    """Se pidió una jugada sobre una partida terminada."""


class GameState(BaseModel):
    """Estado recibido por la API.

    Ejemplo: {"blackFilled": [[3,4],[4,3]], "whiteFilled": [[3,3],[4,4]], "turn": 1}
    """
    model_config = ConfigDict(populate_by_name=True)

    black_filled: List[List[int]] = Field(default_factory=list, alias="blackFilled", max_length=64)
    white_filled: List[List[int]] = Field(default_factory=list, alias="whiteFilled", max_length=64)
    turn: int

    @field_validator("black_filled", "white_filled")
    @classmethod
    def _check_positions(cls, cells):
        return [list(as_position(p)) for p in cells]

    @model_validator(mode="after")
    def _check_consistency(self):
        if self.turn not in (BLACK, WHITE):
            raise InconsistentStateError(f"turn debe ser 1 o -1, no {self.turn}")
        black = {tuple(p) for p in self.black_filled}
        white = {tuple(p) for p in self.white_filled}
        if len(black) != len(self.black_filled) or len(white) != len(self.white_filled):
            raise InconsistentStateError("Casillas repetidas en blackFilled/whiteFilled")
        overlap = black & white
        if overlap:
            raise InconsistentStateError(f"Casillas ocupadas por ambos colores: {sorted(overlap)}")
        return self

    def to_board(self) -> Board:
        return Board.reconstruct_from(self.black_filled, self.white_filled, self.turn)


class DecisionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    move: List[int]
    colour: int
    turn: int
    black_score: int = Field(alias="blackScore")
    white_score: int = Field(alias="whiteScore")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


def decide_move(state: GameState, simulations_per_rollout: int = SIMULATIONS_PER_ROLLOUT,
                max_iterations: int = MAX_ITERATIONS, seed: Optional[int] = None,
                config: Optional[MCTSConfig] = None) -> DecisionResponse:
    """Reconstruye el tablero, elige una jugada con MCTS y la aplica."""
    board = state.to_board()
    if board.is_game_over():
        raise GameOverError(f"La partida ya terminó (negras {board.black_score}, blancas {board.white_score})")

    colour = board.turn
    if colour != state.turn:
        logger.info(f"{color_name(state.turn)} no tiene jugadas; pasa el turno a {color_name(colour)}")

    t0 = time.time()
    move = search(board, simulations_per_rollout, max_iterations, seed=seed, config=config)
    board.apply_move(move)
    logger.info(f"MCTS ({color_name(colour)}) jugó {to_notation(move)} en {time.time() - t0:.2f}s "
                f"[{simulations_per_rollout} sims x {max_iterations} iters] -> "
                f"negras {board.black_score}, blancas {board.white_score}")

    return DecisionResponse(
        move=list(move),
        colour=colour,
        turn=board.turn,
        black_score=board.black_score,
        white_score=board.white_score,
    )
