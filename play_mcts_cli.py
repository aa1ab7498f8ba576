import argparse, json, os, time
from datetime import datetime
from reversi_board import Board, IllegalMoveError, MalformedPositionError, BLACK, WHITE
from mcts_core import mcts_search, MCTSConfig, SIMULATIONS_PER_ROLLOUT, MAX_ITERATIONS
from board_utils import (
    render_board, describe_status, to_notation, from_notation, legal_moves_notation, board_to_state,
)

HELP = """Comandos:
- Jugada: D3, f5, C4 ... (columna A-H, fila 1-8)
- moves : muestra jugadas legales
- board : vuelve a dibujar el tablero
- state : imprime el estado JSON (blackFilled/whiteFilled/turn)
- help  : muestra esta ayuda
- ENTER vacío para salir
"""

def print_board(board):
    print(render_board(board))
    print(describe_status(board) + "\n")

def load_board(path):
    if not path:
        return Board.fresh_game()
    with open(path, encoding="utf-8") as f:
        state = json.load(f)
    return Board.reconstruct_from(state["blackFilled"], state["whiteFilled"], state["turn"])

def main():
    parser = argparse.ArgumentParser(description="Jugar Reversi contra MCTS (CLI)")
    parser.add_argument("--state", type=str, default=None, help="JSON inicial con blackFilled/whiteFilled/turn (si no, partida nueva)")
    parser.add_argument("--sims", type=int, default=SIMULATIONS_PER_ROLLOUT, help="Simulaciones por rollout")
    parser.add_argument("--iters", type=int, default=MAX_ITERATIONS, help="Iteraciones MCTS por jugada")
    parser.add_argument("--you-play", choices=["black", "white", "none"], default="black", help="Tu color ('none' = MCTS contra sí mismo)")
    parser.add_argument("--heuristic-rollouts", action="store_true", help="Evita casillas X en los rollouts")
    parser.add_argument("--seed", type=int, default=42, help="Semilla")
    args = parser.parse_args()

    board = load_board(args.state)
    human = {"black": BLACK, "white": WHITE, "none": None}[args.you_play]
    config = MCTSConfig(simulations_per_rollout=args.sims, max_iterations=args.iters,
                        heuristic_rollouts=args.heuristic_rollouts)

    print("=== Reversi vs MCTS ===")
    print("Escribe 'help' para ver comandos.\n")
    print_board(board)

    os.makedirs("logs", exist_ok=True)
    log_path = os.path.join("logs", f"mcts_game_{datetime.now().strftime('%Y%m%d_%H%M%S')}.jsonl")
    def log(ev):
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(ev, ensure_ascii=False) + "\n")

    log({"type": "start", "state": board_to_state(board), "human_color": args.you_play,
         "sims": args.sims, "iters": args.iters, "seed": args.seed})

    move_no = 0
    while not board.is_game_over():
        if board.turn == human:
            # HUMANO
            cmd = input("Tu jugada: ").strip().lower()
            if cmd == "": print("Saliendo..."); break
            if cmd == "help": print(HELP); continue
            if cmd == "moves": print("Legales:", " ".join(legal_moves_notation(board))); continue
            if cmd == "board": print_board(board); continue
            if cmd == "state": print(json.dumps(board_to_state(board))); continue
            try:
                mv = from_notation(cmd)
                board.apply_move(mv)
            except MalformedPositionError as e:
                print(e); continue
            except IllegalMoveError:
                print("Jugada ilegal. Usa 'moves' para ver las legales."); continue
            print(f"Humano: {to_notation(mv)}\n")
            print_board(board)
            log({"type": "human_move", "move": to_notation(mv), "state": board_to_state(board)})
        else:
            # BOT MCTS
            colour = board.turn
            t0 = time.time()
            best, stats = mcts_search(board, config, seed=args.seed + move_no)
            board.apply_move(best)
            elapsed = time.time() - t0
            print(f"MCTS ({'X' if colour == BLACK else 'O'}): {to_notation(best)} | {elapsed:.2f}s | "
                  f"sims={stats['total_simulations']} visitas={stats['best_visits']}\n")
            print_board(board)
            log({"type": "mcts_move", "move": to_notation(best), "colour": colour,
                 "state": board_to_state(board), "stats": stats})
        move_no += 1

    print("Resultado:", describe_status(board))
    log({"type": "final", "status": int(board.status), "blackScore": board.black_score,
         "whiteScore": board.white_score})

if __name__ == "__main__":
    main()
