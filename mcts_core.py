import math, random, time
from dataclasses import dataclass, field, replace
from typing import Callable, Optional

from board_utils import to_notation
from reversi_board import (
    Board, Position, GameStatus, CORNERS, BAD_POSITIONS, VERY_BAD_POSITIONS,
)

EXPLORATION_C = 3
MOBILITY_WEIGHT = 0.5
INNER_WEIGHT = 0.8
CORNER_BONUS = 0.5
BAD_PENALTY = -0.15
VERY_BAD_PENALTY = -0.35
SIMULATIONS_PER_ROLLOUT = 20
MAX_ITERATIONS = 300

MAX_MODE = "max"
MIN_MODE = "min"


class SearchInvariantError(RuntimeError):
    """Invariante interna de la búsqueda violada (p.ej. seleccionar sin hijos)."""


@dataclass(frozen=True)
class MCTSConfig:
    exploration_c: float = EXPLORATION_C
    mobility_weight: float = MOBILITY_WEIGHT
    inner_weight: float = INNER_WEIGHT
    corner_bonus: float = CORNER_BONUS
    bad_penalty: float = BAD_PENALTY
    very_bad_penalty: float = VERY_BAD_PENALTY
    simulations_per_rollout: int = SIMULATIONS_PER_ROLLOUT
    max_iterations: int = MAX_ITERATIONS
    heuristic_rollouts: bool = False  # usa simulate_random_plus en los rollouts


DEFAULT_CONFIG = MCTSConfig()
# Variante que premia más las esquinas y castiga más las casillas X
CORNER_HEAVY_CONFIG = MCTSConfig(corner_bonus=0.35, bad_penalty=-0.15, very_bad_penalty=-0.65)


@dataclass(eq=False)
class Node:
    board: Board
    parent: 'Node|None' = field(default=None, repr=False)  # referencia no propietaria
    move: Position|None = None    # jugada que llevó a este nodo
    children: list = field(default_factory=list, repr=False)
    visits: int = 0
    wins: int = 0
    mobility: float = 0.0  # suma de jugadas legales vistas en backprop
    depth: int = 0

    def is_leaf(self) -> bool:
        return not self.children

    def is_terminal(self) -> bool:
        return self.board.is_game_over()

    def expand(self) -> list:
        """Crea un hijo por cada jugada legal, en el orden de legal_moves.

        Un tablero terminal no produce hijos. Si ya se expandió, no cambia nada.
        """
        if self.children:
            return self.children
        for mv in self.board.legal_moves:
            nb = self.board.copy()
            nb.apply_move(mv)
            self.children.append(Node(nb, parent=self, move=mv, depth=self.depth + 1))
        return self.children


def uct_value(wins: float, visits: int, total_visits: int, c: float = EXPLORATION_C) -> float:
    # UCT = w/(n+1) + sqrt(c) * sqrt( ln(N+1) / (n+1) )
    return wins / (visits + 1) + math.sqrt(c) * math.sqrt(math.log(total_visits + 1) / (visits + 1))


def positional_multiplier(move: Position, config: MCTSConfig = DEFAULT_CONFIG) -> float:
    if move in CORNERS:
        return config.corner_bonus
    if move in BAD_POSITIONS:
        return config.bad_penalty
    if move in VERY_BAD_POSITIONS:
        return config.very_bad_penalty
    return 0.0


def greed_penalty(parent_board: Board, child_board: Board) -> float:
    """Fichas ganadas por quien movió, divididas por el total de fichas del hijo.

    Castiga capturas grandes al principio, cuando el denominador es pequeño.
    """
    mover = parent_board.turn
    delta = child_board.score(mover) - parent_board.score(mover)
    return delta / child_board.total_pieces()


def selection_score(parent: Node, child: Node, total_visits: int, mode: str = MAX_MODE,
                    config: MCTSConfig = DEFAULT_CONFIG) -> float:
    uct = uct_value(child.wins, child.visits, total_visits, config.exploration_c)
    mobility = config.mobility_weight * math.log(child.mobility + 1) / (child.visits + 1)
    row, col = child.move
    inner = uct * config.inner_weight / math.sqrt((row - 3.5) ** 2 + (col - 3.5) ** 2)
    positional = uct * positional_multiplier(child.move, config)
    greed = greed_penalty(parent.board, child.board)
    if mode == MAX_MODE:
        return uct + mobility + inner + positional - greed
    return uct + mobility + inner + positional + greed


def select_child(node: Node, total_visits: int, mode: str = MAX_MODE,
                 config: MCTSConfig = DEFAULT_CONFIG) -> Node:
    """Elige un hijo por puntuación compuesta.

    max: el de mayor puntuación entre todos los hijos.
    min: el de menor puntuación entre los hijos ya visitados; si ninguno
    tiene visitas se devuelve el primero. Empates: gana el primer índice.
    """
    if not node.children:
        raise SearchInvariantError(f"select_child sobre un nodo sin hijos (depth={node.depth}, move={node.move})")
    if mode not in (MAX_MODE, MIN_MODE):
        raise ValueError(f"Modo de selección desconocido: {mode!r}")

    best_idx = 0
    best_score = -math.inf if mode == MAX_MODE else math.inf
    for i, child in enumerate(node.children):
        if mode == MIN_MODE and child.visits == 0:
            continue
        score = selection_score(node, child, total_visits, mode, config)
        if (mode == MAX_MODE and score > best_score) or (mode == MIN_MODE and score < best_score):
            best_score = score
            best_idx = i
    return node.children[best_idx]


# --- Rollouts ---

def simulate_random(board: Board, rng: random.Random) -> Board:
    """Juega jugadas uniformes al azar sobre `board` (in-place) hasta el final."""
    while board.status == GameStatus.UNDETERMINED:
        board.apply_move(rng.choice(board.legal_moves))
    return board


def simulate_random_plus(board: Board, rng: random.Random) -> Board:
    """Como simulate_random, pero re-sortea hasta dos veces si cae en una casilla X."""
    while board.status == GameStatus.UNDETERMINED:
        board.apply_move(heuristic_random_move(board, rng))
    return board


def heuristic_random_move(board: Board, rng: random.Random) -> Position:
    mv = rng.choice(board.legal_moves)
    for _ in range(2):
        if mv not in VERY_BAD_POSITIONS:
            break
        mv = rng.choice(board.legal_moves)
    return mv


def rollout(board: Board, n_sim: int, rng: Optional[random.Random] = None,
            policy: Callable = simulate_random) -> tuple:
    """Simula n_sim partidas desde copias de `board`.

    Devuelve (wins, losses, draws, elapsed) desde la perspectiva de board.turn.
    """
    rng = rng if rng is not None else random.Random()
    turn = board.turn
    wins = draws = 0
    start = time.perf_counter()
    for _ in range(n_sim):
        final = policy(board.copy(), rng)
        if final.status == GameStatus.DRAW:
            draws += 1
        elif final.status == turn:
            wins += 1
    elapsed = time.perf_counter() - start
    return wins, n_sim - wins - draws, draws, elapsed


def backpropagate(node: Node, wins: int, losses: int, n_sim: int) -> None:
    turn = node.board.turn  # las victorias son de este turno
    cur = node
    while cur is not None:
        if cur.board.turn == turn:
            cur.wins += wins
            cur.mobility += len(cur.board.legal_moves)
        else:
            cur.wins += losses
        cur.visits += n_sim
        cur = cur.parent


def _move_stats(root: Node, config: MCTSConfig) -> dict:
    return {
        to_notation(ch.move): {
            'N': ch.visits,
            'W': ch.wins,
            'mobility': round(ch.mobility, 2),
            'score': round(selection_score(root, ch, 0, MIN_MODE, config), 4) if ch.visits else None,
        }
        for ch in sorted(root.children, key=lambda c: c.visits, reverse=True)
    }


def mcts_search(root_board: Board, config: MCTSConfig = DEFAULT_CONFIG, seed: int|None = None,
                debug_callback=None) -> tuple:
    """Búsqueda MCTS con presupuesto fijo de iteraciones x simulaciones.

    Devuelve (jugada, stats). Cada llamada usa su propio generador aleatorio.
    """
    rng = random.Random(seed)
    policy = simulate_random_plus if config.heuristic_rollouts else simulate_random
    n_sim = config.simulations_per_rollout
    t0 = time.perf_counter()

    root = Node(root_board.copy())
    root.expand()
    total = 0

    # Semilla de la búsqueda: el hijo menos favorecido (modo min)
    current = select_child(root, total, MIN_MODE, config)
    wins, losses, _, _ = rollout(current.board, n_sim, rng, policy)
    backpropagate(current, wins, losses, n_sim)
    total += n_sim

    for it in range(config.max_iterations):
        iter_debug = {'iteration': it + 1, 'select_path': [], 'expanded': 0}

        leaf = root
        while not leaf.is_leaf():
            leaf = select_child(leaf, total, MAX_MODE, config)
            iter_debug['select_path'].append({'move': tuple(leaf.move), 'N': leaf.visits,
                                              'W': leaf.wins, 'depth': leaf.depth})

        if leaf.visits == 0:
            target = leaf
        else:
            leaf.expand()
            iter_debug['expanded'] = len(leaf.children)
            target = select_child(leaf, total, MAX_MODE, config) if leaf.children else leaf

        wins, losses, draws, elapsed = rollout(target.board, n_sim, rng, policy)
        backpropagate(target, wins, losses, n_sim)
        total += n_sim

        if debug_callback:
            iter_debug['rollout'] = {'wins': wins, 'losses': losses, 'draws': draws,
                                     'elapsed': round(elapsed, 4)}
            iter_debug['backprop_node'] = tuple(target.move) if target.move else 'root'
            debug_callback(it + 1, iter_debug)

    best = select_child(root, 0, MIN_MODE, config)
    stats = {
        'iters': config.max_iterations,
        'root_N': root.visits,
        'total_simulations': total,
        'best_visits': best.visits,
        'best_wins': best.wins,
        'elapsed': round(time.perf_counter() - t0, 3),
        'all_moves': _move_stats(root, config),
    }
    return best.move, stats


def search(board: Board, simulations_per_rollout: int = SIMULATIONS_PER_ROLLOUT,
           max_iterations: int = MAX_ITERATIONS, seed: int|None = None,
           config: MCTSConfig|None = None) -> Position:
    base = config or DEFAULT_CONFIG
    cfg = replace(base, simulations_per_rollout=simulations_per_rollout, max_iterations=max_iterations)
    move, _ = mcts_search(board, cfg, seed=seed)
    return move
