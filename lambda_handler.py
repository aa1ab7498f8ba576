"""Punto de entrada para desplegar el agente como función (AWS Lambda u otro FaaS).

El evento es el mismo JSON que recibe /search_move:
    {"blackFilled": [[3,4],[4,3]], "whiteFilled": [[3,3],[4,4]], "turn": 1}
"""

import logging
import os

from reversi_service import GameState, decide_move
from mcts_core import SIMULATIONS_PER_ROLLOUT, MAX_ITERATIONS

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


def handle_lambda_event(event, context=None) -> dict:
    sims = int(os.environ.get("REVERSI_SIMULATIONS", SIMULATIONS_PER_ROLLOUT))
    iters = int(os.environ.get("REVERSI_MAX_ITERATIONS", MAX_ITERATIONS))
    seed = os.environ.get("REVERSI_SEED")

    state = GameState.model_validate(event)
    logger.info(f"Evento recibido: {len(state.black_filled)} negras, {len(state.white_filled)} blancas, turno {state.turn}")
    response = decide_move(state, sims, iters, seed=int(seed) if seed else None)
    return response.to_payload()
