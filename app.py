import streamlit as st
import plotly.graph_objects as go
import pandas as pd
from dataclasses import replace
from reversi_board import Board, BLACK, WHITE, EMPTY, BOARD_SIZE, Position
from mcts_core import mcts_search, MCTSConfig, DEFAULT_CONFIG, CORNER_HEAVY_CONFIG
from board_utils import to_notation, describe_status, color_name, COLUMN_LABELS

HEURISTIC_PRESETS = {
    "Estándar (0.5 / -0.15 / -0.35)": DEFAULT_CONFIG,
    "Esquinas fuertes (0.35 / -0.15 / -0.65)": CORNER_HEAVY_CONFIG,
}

PIECE_ICONS = {BLACK: "⚫", WHITE: "⚪", EMPTY: " "}

def initialize_session_state():
    """Inicializa el estado de la sesión"""
    if 'board' not in st.session_state:
        st.session_state.board = Board.fresh_game()
        st.session_state.game_over = False
        st.session_state.move_history = []
        st.session_state.status_message = "¡Juego iniciado! Juegas con Negras."
        st.session_state.user_color = BLACK
        st.session_state.sims = 10
        st.session_state.iters = 100
        st.session_state.preset = list(HEURISTIC_PRESETS.keys())[0]
        st.session_state.debug_mode = False
        st.session_state.last_mcts_debug = []
        st.session_state.last_mcts_stats = {}

def check_game_over():
    """Verifica si el juego terminó"""
    board = st.session_state.board
    if board.is_game_over():
        st.session_state.game_over = True
        st.session_state.status_message = "🏁 " + describe_status(board)
        return True
    return False

def debug_callback(iter_num, debug_data):
    st.session_state.last_mcts_debug.append(debug_data)

def current_config() -> MCTSConfig:
    base = HEURISTIC_PRESETS[st.session_state.preset]
    return replace(base, simulations_per_rollout=st.session_state.sims,
                   max_iterations=st.session_state.iters)

def make_mcts_move():
    """Ejecuta el movimiento del MCTS"""
    board = st.session_state.board
    if st.session_state.game_over or board.turn == st.session_state.user_color:
        return

    st.session_state.last_mcts_debug = []
    with st.spinner(f'MCTS pensando ({st.session_state.sims} sims x {st.session_state.iters} iters)...'):
        best_move, stats = mcts_search(
            board,
            current_config(),
            debug_callback=debug_callback if st.session_state.debug_mode else None,
        )
    colour = board.turn
    board.apply_move(best_move)
    st.session_state.last_mcts_stats = stats
    st.session_state.move_history.append({'move': to_notation(best_move), 'player': 'MCTS',
                                          'colour': colour, 'stats': stats})
    st.session_state.status_message = f"MCTS jugó: {to_notation(best_move)}"
    if not check_game_over():
        if board.turn == colour:
            st.session_state.status_message += " - no tienes jugadas, MCTS vuelve a mover"
        else:
            st.session_state.status_message += " - ¡Tu turno!"

def handle_user_move(pos: Position):
    """Procesa el movimiento del usuario"""
    board = st.session_state.board
    if st.session_state.game_over:
        st.warning("El juego ya terminó")
        return False
    if board.turn != st.session_state.user_color:
        st.warning("No es tu turno")
        return False
    if not board.is_legal(pos):
        st.warning(f"Movimiento ilegal: {to_notation(pos)}")
        return False

    board.apply_move(pos)
    st.session_state.move_history.append({'move': to_notation(pos), 'player': 'Usuario',
                                          'colour': st.session_state.user_color, 'stats': None})
    st.session_state.status_message = f"Jugaste: {to_notation(pos)}"
    check_game_over()
    return True

def reset_game(user_color):
    st.session_state.board = Board.fresh_game()
    st.session_state.game_over = False
    st.session_state.move_history = []
    st.session_state.user_color = user_color
    st.session_state.last_mcts_stats = {}
    st.session_state.last_mcts_debug = []
    st.session_state.status_message = "¡Tu turno!" if user_color == BLACK else "MCTS (Negras) está pensando..."

def display_board():
    """Tablero como rejilla de botones; las casillas legales del usuario son clicables"""
    board = st.session_state.board
    user_turn = board.turn == st.session_state.user_color and not st.session_state.game_over
    legal = set(board.legal_moves) if user_turn else set()

    header = st.columns(BOARD_SIZE + 1)
    for c, label in enumerate(COLUMN_LABELS):
        header[c + 1].markdown(f"**{label}**")
    for r in range(BOARD_SIZE):
        cols = st.columns(BOARD_SIZE + 1)
        cols[0].markdown(f"**{r + 1}**")
        for c in range(BOARD_SIZE):
            pos = Position(r, c)
            value = board.cells[r][c]
            label = PIECE_ICONS[value] if value != EMPTY else ("·" if pos in legal else " ")
            if cols[c + 1].button(label, key=f"cell_{r}_{c}", disabled=pos not in legal,
                                  use_container_width=True):
                if handle_user_move(pos):
                    st.rerun()

# Configuración de la página
st.set_page_config(layout="wide", page_title="MCTS Reversi")

initialize_session_state()

st.title("⚫⚪ MCTS para Reversi / Othello")
st.markdown(f"Juega con **{color_name(st.session_state.user_color)}** contra un agente MCTS")

# Sidebar
with st.sidebar:
    st.header("⚙️ Configuración")

    user_choice = st.radio("Tu color:", ["Negras", "Blancas"],
                           index=0 if st.session_state.user_color == BLACK else 1)
    st.session_state.sims = st.slider("Simulaciones por rollout:", 1, 50, st.session_state.sims)
    st.session_state.iters = st.slider("Iteraciones MCTS:", 10, 500, st.session_state.iters, step=10)
    st.session_state.preset = st.selectbox("Heurística posicional:", list(HEURISTIC_PRESETS.keys()),
                                           index=list(HEURISTIC_PRESETS.keys()).index(st.session_state.preset))
    st.session_state.debug_mode = st.checkbox("Modo debug (iteraciones)", value=st.session_state.debug_mode)

    if st.button("🔄 Reiniciar Juego", use_container_width=True):
        reset_game(BLACK if user_choice == "Negras" else WHITE)
        st.rerun()

    st.divider()
    st.subheader("📋 Información")
    board = st.session_state.board
    st.markdown(f"**Negras:** {board.black_score} | **Blancas:** {board.white_score}")
    st.markdown(f"**Jugadas:** {len(st.session_state.move_history)}")

    if st.session_state.move_history:
        st.divider()
        st.subheader("📜 Historial")
        for move_info in reversed(st.session_state.move_history[-10:]):
            icon = "🤖" if move_info['player'] == 'MCTS' else "👤"
            st.text(f"{icon} {PIECE_ICONS[move_info['colour']]} {move_info['move']}")

col1, col2 = st.columns([2, 1])

with col1:
    st.subheader("Tablero")
    display_board()
    if st.session_state.game_over:
        st.success(st.session_state.status_message)
    else:
        st.info(st.session_state.status_message)

with col2:
    st.subheader("Estadísticas MCTS")
    stats = st.session_state.last_mcts_stats
    if stats:
        c1, c2, c3 = st.columns(3)
        c1.metric("Simulaciones", stats.get('total_simulations', 0))
        c2.metric("Visitas mejor", stats.get('best_visits', 0))
        c3.metric("Tiempo (s)", stats.get('elapsed', 0))

        moves = list(stats['all_moves'].items())[:8]
        fig = go.Figure(data=[go.Bar(x=[m for m, _ in moves], y=[s['N'] for _, s in moves],
                                     marker_color='seagreen')])
        fig.update_layout(title="Visitas por jugada (raíz)", xaxis_title="Jugada",
                          yaxis_title="Visitas", height=300)
        st.plotly_chart(fig, use_container_width=True)

        df = pd.DataFrame([{'Jugada': m, **s} for m, s in stats['all_moves'].items()])
        st.dataframe(df, use_container_width=True, hide_index=True)
    else:
        st.info("Espera a que MCTS haga un movimiento para ver estadísticas")

if st.session_state.debug_mode and st.session_state.last_mcts_debug:
    st.divider()
    st.header("🔬 Iteraciones Debug")
    debug = st.session_state.last_mcts_debug
    wins = [d['rollout']['wins'] for d in debug]
    fig = go.Figure()
    fig.add_trace(go.Scatter(x=list(range(1, len(wins) + 1)), y=wins, mode='lines',
                             name='Victorias en rollout', line=dict(color='royalblue', width=2)))
    fig.update_layout(title="Victorias por rollout (perspectiva del nodo simulado)",
                      xaxis_title="Iteración", yaxis_title="Victorias", height=300)
    st.plotly_chart(fig, use_container_width=True)

    for info in debug[-5:][::-1]:
        path = " → ".join(to_notation(s['move']) for s in info['select_path'])
        with st.expander(f"Iteración #{info['iteration']} - nodo {info['backprop_node']}"):
            st.text(f"Selección: {path or 'raíz'}")
            st.text(f"Hijos expandidos: {info['expanded']}")
            st.text(f"Rollout: {info['rollout']}")

# Turno del MCTS
if not st.session_state.game_over and st.session_state.board.turn != st.session_state.user_color:
    make_mcts_move()
    st.rerun()
