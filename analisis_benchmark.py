import json
import os
import argparse
import pandas as pd
import matplotlib.pyplot as plt
import seaborn as sns

# ==================================================
# Directorios de Archivos
# ==================================================
OUTPUT_DIR = "mcts_report_output/plots_adicionales"

# ==================================================
# 1. Carga y Preparación de Datos
# ==================================================

def load_and_preprocess_data(input_file):
    """Carga el JSON de selfplay_benchmark y lo aplana en un DataFrame (una fila por partida)."""
    try:
        with open(input_file, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except FileNotFoundError:
        print(f"Error: El archivo '{input_file}' no se encontró.")
        return None

    all_data = []
    for experiment, runs in data['experiments'].items():
        for run_data in runs:
            all_data.append({'experiment': experiment, **run_data})

    df = pd.DataFrame(all_data)
    df['score_diff'] = df['black_score'] - df['white_score']
    df['pieces'] = df['black_score'] + df['white_score']
    # Éxito = ganan las negras (el lado del MCTS en el benchmark)
    df['success'] = (df['status'] == 1).astype(int)
    return df

# ==================================================
# 2. Funciones de Ploteo
# ==================================================

def plot_1_result_distribution(df, output_dir):
    """Distribución de resultados por experimento (barras apiladas)."""
    counts = df.groupby(['experiment', 'result']).size().unstack(fill_value=0)
    ax = counts.plot(kind='bar', stacked=True, figsize=(10, 6), colormap='Set2')
    ax.set_title('1. Distribución de Resultados')
    ax.set_ylabel('Partidas')
    ax.set_xlabel('Experimento')
    plt.xticks(rotation=0)
    plt.tight_layout()
    plt.savefig(os.path.join(output_dir, '1_result_distribution.png'))
    plt.close()

def plot_2_score_diff_violin(df, output_dir):
    """Diferencia final de fichas por experimento (violín)."""
    plt.figure(figsize=(10, 6))
    sns.violinplot(x='experiment', y='score_diff', data=df, palette="Pastel1", inner='quartile')
    plt.axhline(0, color='gray', linestyle='--')
    plt.title('2. Diferencia de Fichas (Negras - Blancas)')
    plt.ylabel('Diferencia')
    plt.xlabel('Experimento')
    plt.tight_layout()
    plt.savefig(os.path.join(output_dir, '2_score_diff_violin.png'))
    plt.close()

def plot_3_moves_vs_time(df, output_dir):
    """Duración de la partida vs número de jugadas (dispersión)."""
    plt.figure(figsize=(10, 6))
    sns.scatterplot(x='total_moves', y='game_time', hue='experiment', data=df, palette="tab10", s=80)
    plt.title('3. Tiempo de Partida vs. Número de Jugadas')
    plt.ylabel('Tiempo (segundos)')
    plt.xlabel('Jugadas')
    plt.tight_layout()
    plt.savefig(os.path.join(output_dir, '3_moves_vs_time.png'))
    plt.close()

def plot_4_pieces_hist(df, output_dir):
    """Fichas en el tablero al terminar (partidas que acaban antes de llenar el tablero)."""
    plt.figure(figsize=(10, 6))
    sns.histplot(data=df, x='pieces', hue='experiment', bins=range(4, 66, 2), multiple='dodge')
    plt.title('4. Fichas Totales al Final de la Partida')
    plt.xlabel('Fichas')
    plt.tight_layout()
    plt.savefig(os.path.join(output_dir, '4_pieces_hist.png'))
    plt.close()

# ==================================================
# 3. Función Principal de Ejecución
# ==================================================

def generate_benchmark_plots(input_file, output_dir):
    print("Iniciando la generación de gráficos...")
    os.makedirs(output_dir, exist_ok=True)

    df = load_and_preprocess_data(input_file)
    if df is None:
        return None

    print(f"Datos cargados. Total de partidas: {len(df)}")
    plot_1_result_distribution(df, output_dir)
    plot_2_score_diff_violin(df, output_dir)
    plot_3_moves_vs_time(df, output_dir)
    plot_4_pieces_hist(df, output_dir)

    print(f"\n¡Gráficos generados con éxito! Revise la carpeta: {output_dir}")
    return df

if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Gráficos adicionales a partir de raw_results_*.json")
    parser.add_argument("input_file")
    parser.add_argument("--output-dir", default=OUTPUT_DIR)
    args = parser.parse_args()
    generate_benchmark_plots(args.input_file, args.output_dir)
