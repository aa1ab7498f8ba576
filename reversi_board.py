from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum

BOARD_SIZE = 8

EMPTY = 0
BLACK = 1
WHITE = -1


class ReversiError(ValueError):
    """Error base del motor de reglas."""


class IllegalMoveError(ReversiError):
    """Jugada fuera de legal_moves. El tablero no se modifica."""


class MalformedPositionError(ReversiError):
    """Coordenadas fuera del tablero 8x8."""


class GameStatus(IntEnum):
    # Mismos valores que el ganador: 1 negras, -1 blancas, 99 tablas
    UNDETERMINED = 0
    BLACK_WINS = BLACK
    WHITE_WINS = WHITE
    DRAW = 99


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    def __post_init__(self):
        if not is_in_range((self.row, self.col)):
            raise MalformedPositionError(f"Posición fuera del tablero: ({self.row}, {self.col})")

    def __iter__(self):
        yield self.row
        yield self.col

    def __repr__(self):
        return f"Position({self.row}, {self.col})"


def is_in_range(pos) -> bool:
    row, col = pos
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def as_position(value) -> Position:
    """Convierte (fila, col) o Position en Position validada."""
    if isinstance(value, Position):
        return value
    try:
        row, col = value
    except (TypeError, ValueError):
        raise MalformedPositionError(f"Se esperaba un par (fila, columna): {value!r}") from None
    if isinstance(row, bool) or isinstance(col, bool) or not isinstance(row, int) or not isinstance(col, int):
        raise MalformedPositionError(f"Coordenadas no enteras: {value!r}")
    return Position(row, col)


# 8 direcciones (dfila, dcol)
DIRECTIONS = ((-1, 0), (-1, 1), (0, 1), (1, 1), (1, 0), (1, -1), (0, -1), (-1, -1))

# Categorías posicionales para la heurística de selección
CORNERS = frozenset(Position(r, c) for r, c in [(0, 0), (0, 7), (7, 0), (7, 7)])
BAD_POSITIONS = frozenset(Position(r, c) for r, c in [
    (0, 1), (1, 0), (6, 0), (7, 1), (7, 6), (6, 7), (0, 6), (1, 7),
])
VERY_BAD_POSITIONS = frozenset(Position(r, c) for r, c in [(1, 1), (1, 6), (6, 1), (6, 6)])

START_LAYOUT = {(3, 3): WHITE, (4, 4): WHITE, (3, 4): BLACK, (4, 3): BLACK}


class Board:
    """Tablero de Reversi 8x8: estado + reglas, sin conocimiento de la búsqueda.

    legal_moves se mantiene como lista en orden fila-columna para que la
    expansión y los rollouts con semilla sean reproducibles.
    """

    def __init__(self, cells=None, turn: int = BLACK):
        if turn not in (BLACK, WHITE):
            raise ReversiError(f"turn debe ser 1 (negras) o -1 (blancas), no {turn!r}")
        if cells is None:
            cells = [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        if len(cells) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in cells):
            raise ReversiError("El tablero debe ser de 8x8")
        self.cells = [list(row) for row in cells]
        self.turn = turn
        self.frontier: set[Position] = set()
        self.legal_moves: list[Position] = []
        self.black_score = 0
        self.white_score = 0
        self.status = GameStatus.UNDETERMINED
        self._setup()

    @classmethod
    def fresh_game(cls) -> 'Board':
        cells = [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        for (r, c), value in START_LAYOUT.items():
            cells[r][c] = value
        return cls(cells, turn=BLACK)

    @classmethod
    def reconstruct_from(cls, black_cells, white_cells, turn: int) -> 'Board':
        """Reconstruye un tablero a partir de listas de casillas ocupadas.

        No valida solapamientos entre negras y blancas: si una casilla aparece
        en ambas listas, gana la blanca (se escribe después).
        """
        cells = [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        for p in black_cells:
            r, c = as_position(p)
            cells[r][c] = BLACK
        for p in white_cells:
            r, c = as_position(p)
            cells[r][c] = WHITE
        return cls(cells, turn=turn)

    def _setup(self):
        filled = self.filled()
        frontier = set()
        for r, c in filled:
            frontier.update(self._empty_neighbours(r, c))
        self.frontier = frontier
        self.black_score = sum(row.count(BLACK) for row in self.cells)
        self.white_score = sum(row.count(WHITE) for row in self.cells)
        self.status = GameStatus.UNDETERMINED
        self._resolve_turn()

    # --- Consultas ---

    def piece_at(self, pos) -> int:
        r, c = as_position(pos)
        return self.cells[r][c]

    def filled(self) -> list[Position]:
        return [Position(r, c) for r in range(BOARD_SIZE) for c in range(BOARD_SIZE)
                if self.cells[r][c] != EMPTY]

    def pieces(self, color: int) -> list[Position]:
        return [Position(r, c) for r in range(BOARD_SIZE) for c in range(BOARD_SIZE)
                if self.cells[r][c] == color]

    def score(self, color: int) -> int:
        return self.black_score if color == BLACK else self.white_score

    def total_pieces(self) -> int:
        return self.black_score + self.white_score

    def is_game_over(self) -> bool:
        return self.status != GameStatus.UNDETERMINED

    def _empty_neighbours(self, row: int, col: int) -> list[Position]:
        out = []
        for dr, dc in DIRECTIONS:
            r, c = row + dr, col + dc
            if 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE and self.cells[r][c] == EMPTY:
                out.append(Position(r, c))
        return out

    # --- Reglas ---

    def legal_direction(self, direction, pos) -> bool:
        """True si caminando en `direction` desde `pos` (vacía) se cruzan
        una o más fichas rivales y se termina en una propia."""
        pos = as_position(pos)
        return self._walk(direction[0], direction[1], pos.row, pos.col)

    def _walk(self, dr: int, dc: int, r: int, c: int) -> bool:
        cells = self.cells
        if cells[r][c] != EMPTY:
            return False
        r, c = r + dr, c + dc
        crossed = False
        while 0 <= r < BOARD_SIZE and 0 <= c < BOARD_SIZE:
            value = cells[r][c]
            if value == EMPTY:
                return False
            if value == self.turn:
                return crossed
            crossed = True
            r, c = r + dr, c + dc
        return False

    def has_legal_direction(self, pos) -> bool:
        pos = as_position(pos)
        return self._has_legal_direction(pos.row, pos.col)

    def _has_legal_direction(self, r: int, c: int) -> bool:
        for dr, dc in DIRECTIONS:
            if self._walk(dr, dc, r, c):
                return True
        return False

    def compute_legal_moves(self) -> list[Position]:
        return sorted(p for p in self.frontier if self._has_legal_direction(p.row, p.col))

    def is_legal(self, pos) -> bool:
        return as_position(pos) in self.legal_moves

    def _resolve_turn(self):
        # Si el turno actual no tiene jugadas, pasa; si el rival tampoco, fin.
        self.legal_moves = self.compute_legal_moves()
        if self.legal_moves:
            return
        self.turn = -self.turn
        self.legal_moves = self.compute_legal_moves()
        if not self.legal_moves:
            self.status = self._final_status()

    def _final_status(self) -> GameStatus:
        if self.black_score > self.white_score:
            return GameStatus.BLACK_WINS
        if self.black_score < self.white_score:
            return GameStatus.WHITE_WINS
        return GameStatus.DRAW

    def apply_move(self, pos) -> int:
        """Coloca una ficha del turno actual en `pos` y voltea las capturadas.

        Devuelve el número de fichas volteadas. Lanza IllegalMoveError (sin
        tocar el tablero) si `pos` no está en legal_moves.
        """
        pos = as_position(pos)
        if pos not in self.legal_moves:
            raise IllegalMoveError(f"Jugada ilegal {tuple(pos)} para el turno {self.turn}")

        mover = self.turn
        flipped = 0
        for dr, dc in DIRECTIONS:
            if not self._walk(dr, dc, pos.row, pos.col):
                continue
            r, c = pos.row + dr, pos.col + dc
            while self.cells[r][c] != mover:
                self.cells[r][c] = mover
                flipped += 1
                r, c = r + dr, c + dc
        self.cells[pos.row][pos.col] = mover

        if mover == BLACK:
            self.black_score += flipped + 1
            self.white_score -= flipped
        else:
            self.white_score += flipped + 1
            self.black_score -= flipped

        self.frontier.discard(pos)
        self.frontier.update(self._empty_neighbours(pos.row, pos.col))

        self.turn = -mover
        self._resolve_turn()
        return flipped

    def copy(self) -> 'Board':
        other = Board.__new__(Board)
        other.cells = [row[:] for row in self.cells]
        other.turn = self.turn
        other.frontier = set(self.frontier)
        other.legal_moves = list(self.legal_moves)
        other.black_score = self.black_score
        other.white_score = self.white_score
        other.status = self.status
        return other

    def __eq__(self, other):
        if not isinstance(other, Board):
            return NotImplemented
        return (self.cells == other.cells and self.turn == other.turn
                and self.frontier == other.frontier and self.legal_moves == other.legal_moves
                and self.black_score == other.black_score and self.white_score == other.white_score
                and self.status == other.status)

    __hash__ = None

    def __str__(self):
        symbols = {EMPTY: '.', BLACK: 'X', WHITE: 'O'}
        return "\n".join(" ".join(symbols[v] for v in row) for row in self.cells)
