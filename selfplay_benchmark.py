# -*- coding: utf-8 -*-
"""
Benchmark de auto-juego para el agente MCTS de Reversi.
- MCTS (negras) contra un oponente aleatorio con heurística anti-casillas X (blancas).
- Aleatorio contra aleatorio como línea base.

Salida:
- directorio: mcts_report_output/metricas/
- raw_results_<ts>.json, CSV con resúmenes e imágenes PNG

Dependencias: matplotlib, seaborn, pandas, numpy
"""

import os
import time
import json
import random
import argparse
from dataclasses import replace
from datetime import datetime

import matplotlib.pyplot as plt
import seaborn as sns
import pandas as pd
import numpy as np

from reversi_board import Board, GameStatus, BLACK, WHITE
from mcts_core import (
    mcts_search, heuristic_random_move, MCTSConfig, EXPLORATION_C, MOBILITY_WEIGHT, INNER_WEIGHT,
    CORNER_BONUS, BAD_PENALTY, VERY_BAD_PENALTY,
)
from board_utils import to_notation

BASE_OUTPUT = "mcts_report_output"
METRICS_DIR = os.path.join(BASE_OUTPUT, "metricas")

RESULT_LABELS = {
    GameStatus.BLACK_WINS: "Ganan Negras",
    GameStatus.WHITE_WINS: "Ganan Blancas",
    GameStatus.DRAW: "Tablas",
}

# --- Agentes: callables (board) -> (jugada, stats) ---

def make_mcts_agent(config: MCTSConfig, seed=None):
    rng = random.Random(seed)
    def agent(board):
        return mcts_search(board, config, seed=rng.randrange(2**32))
    return agent

def make_random_agent(seed=None):
    rng = random.Random(seed)
    def agent(board):
        return heuristic_random_move(board, rng), {}
    return agent

# --- Partida completa ---

def play_game(black_agent, white_agent, board=None):
    """Juega una partida completa; devuelve el tablero final y el historial."""
    board = board if board is not None else Board.fresh_game()
    agents = {BLACK: black_agent, WHITE: white_agent}
    history = []
    while not board.is_game_over():
        colour = board.turn
        t0 = time.time()
        move, stats = agents[colour](board)
        board.apply_move(move)
        history.append({'move': to_notation(move), 'colour': colour, 'time': time.time() - t0,
                        'iters': stats.get('iters', 0), 'simulations': stats.get('total_simulations', 0)})
    return board, history

def _run_record(i, board, history, elapsed):
    mcts_moves = [h for h in history if h['simulations']]
    return {
        'run': i + 1,
        'result': RESULT_LABELS[board.status],
        'status': int(board.status),
        'black_score': board.black_score,
        'white_score': board.white_score,
        'total_moves': len(history),
        'game_time': elapsed,
        'avg_move_time_mcts': float(np.mean([h['time'] for h in mcts_moves])) if mcts_moves else 0.0,
        'simulations_mcts': sum(h['simulations'] for h in mcts_moves),
    }

def run_mcts_vs_random(n_games, sims=10, iters=100, seed=42, config=None, verbose=True):
    """MCTS con negras contra aleatorio con heurística con blancas."""
    config = replace(config or MCTSConfig(), simulations_per_rollout=sims, max_iterations=iters)
    rng = random.Random(seed)
    runs = []
    for i in range(n_games):
        t0 = time.time()
        board, history = play_game(make_mcts_agent(config, rng.randrange(2**32)),
                                   make_random_agent(rng.randrange(2**32)))
        runs.append(_run_record(i, board, history, time.time() - t0))
        if verbose:
            print(f"Partida #{i} {runs[-1]['result']} {board.black_score}-{board.white_score}")
    return runs

def run_random_vs_random(n_games, seed=42, verbose=True):
    rng = random.Random(seed)
    runs = []
    for i in range(n_games):
        t0 = time.time()
        board, history = play_game(make_random_agent(rng.randrange(2**32)), make_random_agent(rng.randrange(2**32)))
        runs.append(_run_record(i, board, history, time.time() - t0))
        if verbose:
            print(f"Partida #{i} {runs[-1]['result']} {board.black_score}-{board.white_score}")
    return runs

def summarize_results(all_results):
    """DataFrame con una fila por experimento: tasas de victoria y marcadores medios."""
    rows = []
    for name, runs in all_results.items():
        df = pd.DataFrame(runs)
        n = len(df)
        rows.append({
            'Experimento': name,
            'Partidas': n,
            'Negras_%': (df['status'] == GameStatus.BLACK_WINS).mean() * 100 if n else 0.0,
            'Blancas_%': (df['status'] == GameStatus.WHITE_WINS).mean() * 100 if n else 0.0,
            'Tablas_%': (df['status'] == GameStatus.DRAW).mean() * 100 if n else 0.0,
            'Negras_prom': df['black_score'].mean() if n else 0.0,
            'Blancas_prom': df['white_score'].mean() if n else 0.0,
            'Tiempo_prom_s': df['game_time'].mean() if n else 0.0,
        })
    return pd.DataFrame(rows)

# --- Visualizaciones ---

def save_figure(fig, path):
    fig.savefig(path, dpi=150, bbox_inches='tight')
    plt.close(fig)

def plot_win_rates(summary, out_path):
    df = summary.melt(id_vars='Experimento', value_vars=['Negras_%', 'Blancas_%', 'Tablas_%'],
                      var_name='Resultado', value_name='Porcentaje')
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.barplot(data=df, x='Experimento', y='Porcentaje', hue='Resultado', palette='viridis', ax=ax)
    ax.set_title('Resultados por experimento')
    ax.set_ylabel('% de partidas')
    save_figure(fig, out_path)
    df.to_csv(out_path.replace('.png', '.csv'), index=False)

def plot_score_distribution(all_results, out_path):
    rows = []
    for name, runs in all_results.items():
        for r in runs:
            rows.append({'Experimento': name, 'Diferencia': r['black_score'] - r['white_score']})
    df = pd.DataFrame(rows)
    fig, ax = plt.subplots(figsize=(10, 6))
    sns.histplot(data=df, x='Diferencia', hue='Experimento', multiple='layer', bins=32, ax=ax)
    ax.axvline(0, color='gray', linestyle='--')
    ax.set_title('Diferencia final de fichas (Negras - Blancas)')
    save_figure(fig, out_path)
    df.to_csv(out_path.replace('.png', '.csv'), index=False)

def save_mcts_characteristics(out_path, sims, iters):
    data = {
        'Característica': ['Constante UCT (c)', 'Peso movilidad', 'Peso casillas interiores',
                           'Bonus esquinas', 'Penalización casillas C', 'Penalización casillas X',
                           'Simulaciones por rollout', 'Iteraciones'],
        'Valor': [EXPLORATION_C, MOBILITY_WEIGHT, INNER_WEIGHT, CORNER_BONUS, BAD_PENALTY,
                  VERY_BAD_PENALTY, sims, iters],
    }
    df = pd.DataFrame(data)
    df.to_csv(out_path.replace('.png', '.csv'), index=False)

    fig, ax = plt.subplots(figsize=(8, 3))
    ax.axis('off')
    table = ax.table(cellText=df.values, colLabels=df.columns, cellLoc='left', loc='center')
    table.auto_set_font_size(False)
    table.set_fontsize(10)
    ax.set_title('Hiperparámetros del MCTS')
    save_figure(fig, out_path)

# --- Función central que corre todo ---

def run_full_experiment(n_games=20, sims=10, iters=100, seed=42, output_dir=METRICS_DIR):
    os.makedirs(output_dir, exist_ok=True)
    sns.set_theme(style="whitegrid")

    all_results = {
        'MCTS vs Aleatorio': run_mcts_vs_random(n_games, sims, iters, seed),
        'Aleatorio vs Aleatorio': run_random_vs_random(n_games, seed),
    }
    raw_export = {'timestamp': datetime.now().isoformat(), 'sims': sims, 'iters': iters,
                  'seed': seed, 'experiments': all_results}

    raw_path = os.path.join(output_dir, f"raw_results_{int(time.time())}.json")
    with open(raw_path, 'w', encoding='utf-8') as f:
        json.dump(raw_export, f, ensure_ascii=False, indent=2)
    print(f"Export raw: {raw_path}")

    summary = summarize_results(all_results)
    summary.to_csv(os.path.join(output_dir, 'summary.csv'), index=False)
    plot_win_rates(summary, os.path.join(output_dir, 'win_rates.png'))
    plot_score_distribution(all_results, os.path.join(output_dir, 'score_distribution.png'))
    save_mcts_characteristics(os.path.join(output_dir, 'mcts_characteristics_table.png'), sims, iters)

    print(summary.to_string(index=False))
    return all_results, raw_path

def main():
    parser = argparse.ArgumentParser(description="Benchmark de auto-juego MCTS para Reversi")
    parser.add_argument("--games", type=int, default=20)
    parser.add_argument("--sims", type=int, default=10)
    parser.add_argument("--iters", type=int, default=100)
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output-dir", type=str, default=METRICS_DIR)
    args = parser.parse_args()

    print('\n=== MCTS SELF-PLAY BENCHMARK ===\n')
    run_full_experiment(args.games, args.sims, args.iters, args.seed, args.output_dir)
    print('\nArchivos generados en:', args.output_dir)

if __name__ == '__main__':
    main()
