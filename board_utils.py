from __future__ import annotations
from reversi_board import (
    Board, Position, GameStatus, MalformedPositionError, BOARD_SIZE, BLACK, WHITE,
)

COLUMN_LABELS = "ABCDEFGH"

# (0,0) -> "A1" esquina superior izquierda, (0,7) -> "H1"
def to_notation(pos) -> str:
    row, col = pos
    return f"{COLUMN_LABELS[col]}{row + 1}"

def from_notation(text: str) -> Position:
    s = (text or "").strip().upper()
    if len(s) != 2 or s[0] not in COLUMN_LABELS or not s[1].isdigit():
        raise MalformedPositionError(f"Notación inválida: {text!r}. Ej: D3, F5")
    return Position(int(s[1]) - 1, COLUMN_LABELS.index(s[0]))

def color_name(turn: int) -> str:
    return "Negras" if turn == BLACK else "Blancas" if turn == WHITE else ""

def render_board(board: Board, mark_legal: bool = True) -> str:
    """Dibuja el tablero: X negras, O blancas, * jugada legal del turno."""
    legal = set(board.legal_moves) if mark_legal else set()
    lines = ["   " + " ".join(COLUMN_LABELS)]
    for r in range(BOARD_SIZE):
        cells = []
        for c in range(BOARD_SIZE):
            v = board.cells[r][c]
            if v == BLACK:
                cells.append("X")
            elif v == WHITE:
                cells.append("O")
            elif Position(r, c) in legal:
                cells.append("*")
            else:
                cells.append(".")
        lines.append(f"{r + 1:>2} " + " ".join(cells))
    return "\n".join(lines)

def describe_status(board: Board) -> str:
    if board.status == GameStatus.BLACK_WINS:
        return f"Ganan las Negras {board.black_score}-{board.white_score}"
    if board.status == GameStatus.WHITE_WINS:
        return f"Ganan las Blancas {board.white_score}-{board.black_score}"
    if board.status == GameStatus.DRAW:
        return f"Tablas {board.black_score}-{board.white_score}"
    return f"Turno: {color_name(board.turn)} | Negras {board.black_score} - Blancas {board.white_score}"

def board_to_state(board: Board) -> dict:
    """Payload {blackFilled, whiteFilled, turn} como el que recibe /search_move."""
    return {
        'blackFilled': [list(p) for p in board.pieces(BLACK)],
        'whiteFilled': [list(p) for p in board.pieces(WHITE)],
        'turn': board.turn,
    }

def legal_moves_notation(board: Board) -> list[str]:
    return [to_notation(p) for p in board.legal_moves]
