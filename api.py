from flask import Flask, request, jsonify, send_from_directory
from flask_cors import CORS
from pydantic import ValidationError
import logging
import os
import time

from reversi_service import GameState, decide_move, GameOverError
from mcts_core import SIMULATIONS_PER_ROLLOUT, MAX_ITERATIONS

MAX_PAYLOAD_BYTES = 1048576

app = Flask(__name__, static_folder="static")
app.config["MAX_CONTENT_LENGTH"] = MAX_PAYLOAD_BYTES
app.config["REVERSI_SIMULATIONS"] = int(os.environ.get("REVERSI_SIMULATIONS", SIMULATIONS_PER_ROLLOUT))
app.config["REVERSI_MAX_ITERATIONS"] = int(os.environ.get("REVERSI_MAX_ITERATIONS", MAX_ITERATIONS))
app.config["REVERSI_SEED"] = int(os.environ["REVERSI_SEED"]) if os.environ.get("REVERSI_SEED") else None
CORS(app, send_wildcard=True)


@app.before_request
def log_request_info():
    app.logger.debug(f"Request: {request.method} {request.path}")
    request.start_time = time.time()

@app.after_request
def log_response_info(response):
    if hasattr(request, 'start_time'):
        request_time = time.time() - request.start_time
        app.logger.info(f"{request.method} {request.path} -> {response.status_code} en {request_time:.3f}s")
    return response


@app.route("/")
def index():
    return send_from_directory(app.static_folder, "index.html")


@app.route("/search_move", methods=["POST"])
def search_move():
    """Recibe el estado del juego y responde con la jugada del agente.

    Request:  {"blackFilled": [[3,4],[4,3]], "whiteFilled": [[3,3],[4,4]], "turn": 1}
    Response: {"move": [2,3], "colour": 1, "turn": -1, "blackScore": 4, "whiteScore": 1}
    """
    payload = request.get_json(silent=True)
    if payload is None:
        return jsonify({"error": "Se esperaba un cuerpo JSON"}), 400

    try:
        state = GameState.model_validate(payload)
    except ValidationError as e:
        app.logger.warning(f"Estado inválido: {e.errors(include_url=False)}")
        return jsonify({"error": "Estado inválido", "details": e.errors(include_url=False, include_context=False)}), 400

    try:
        response = decide_move(
            state,
            app.config["REVERSI_SIMULATIONS"],
            app.config["REVERSI_MAX_ITERATIONS"],
            seed=app.config["REVERSI_SEED"],
        )
    except GameOverError as e:
        return jsonify({"error": str(e)}), 409

    return jsonify(response.to_payload())


@app.errorhandler(413)
def payload_too_large(e):
    return jsonify({"error": f"Payload mayor a {MAX_PAYLOAD_BYTES} bytes"}), 413


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get("PORT", 8080))
    print("Running reversi-mcts application...")
    print(f"Application is running at: http://localhost:{port}")
    app.run(host="0.0.0.0", port=port)
