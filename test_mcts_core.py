"""
Pruebas del MCTS: fórmula UCT, selección, rollouts, backprop y búsqueda completa.
"""

import math
import random

import pytest

from reversi_board import Board, Position, BLACK, WHITE
from mcts_core import (
    Node, MCTSConfig, SearchInvariantError, MAX_MODE, MIN_MODE,
    uct_value, positional_multiplier, greed_penalty, selection_score, select_child,
    rollout, backpropagate, mcts_search, search, heuristic_random_move, simulate_random_plus,
)

TINY = MCTSConfig(simulations_per_rollout=2, max_iterations=10)


def test_uct_value_formula():
    assert uct_value(0, 0, 0, 3) == 0
    expected = 2 / 2 + math.sqrt(3) * math.sqrt(math.log(10) / 2)
    assert uct_value(2, 1, 9, 3) == pytest.approx(expected)


def test_positional_buckets():
    assert positional_multiplier(Position(0, 0)) == 0.5
    assert positional_multiplier(Position(0, 1)) == -0.15
    assert positional_multiplier(Position(1, 1)) == -0.35
    assert positional_multiplier(Position(3, 2)) == 0.0
    heavy = MCTSConfig(corner_bonus=0.35, very_bad_penalty=-0.65)
    assert positional_multiplier(Position(7, 7), heavy) == 0.35
    assert positional_multiplier(Position(6, 6), heavy) == -0.65


def test_greed_penalty_opening():
    parent = Board.fresh_game()
    child = parent.copy()
    child.apply_move(Position(2, 3))
    # negras pasan de 2 a 4 fichas, 5 en el tablero
    assert greed_penalty(parent, child) == pytest.approx(0.4)


def test_min_mode_differs_only_by_greed_sign():
    root = Node(Board.fresh_game())
    root.expand()
    child = root.children[0]
    child.visits, child.wins = 4, 2
    greed = greed_penalty(root.board, child.board)
    diff = selection_score(root, child, 10, MIN_MODE) - selection_score(root, child, 10, MAX_MODE)
    assert diff == pytest.approx(2 * greed)


def test_expand_creates_one_child_per_legal_move():
    root = Node(Board.fresh_game())
    assert root.is_leaf()
    children = root.expand()
    assert not root.is_leaf()
    assert all(ch.is_leaf() for ch in children)
    assert [ch.move for ch in children] == root.board.legal_moves
    assert all(ch.depth == 1 and ch.parent is root for ch in children)
    assert all(ch.board.turn == WHITE for ch in children)
    assert root.expand() is children
    assert len(root.children) == 4


def test_expand_terminal_board_has_no_children():
    node = Node(Board.reconstruct_from([(0, 0)], [], BLACK))
    assert node.is_terminal()
    assert node.expand() == []


def test_select_child_without_children_raises():
    with pytest.raises(SearchInvariantError):
        select_child(Node(Board.fresh_game()), 0)


def test_select_child_ties_pick_first_index():
    # las cuatro aperturas son simétricas: misma puntuación
    root = Node(Board.fresh_game())
    root.expand()
    assert select_child(root, 0, MAX_MODE) is root.children[0]
    assert select_child(root, 0, MIN_MODE) is root.children[0]


def test_select_child_min_skips_unvisited():
    root = Node(Board.fresh_game())
    root.expand()
    root.children[2].visits = 5
    assert select_child(root, 5, MIN_MODE) is root.children[2]


def test_select_child_max_prefers_more_wins():
    root = Node(Board.fresh_game())
    root.expand()
    for ch in root.children:
        ch.visits = 10
    root.children[3].wins = 9
    assert select_child(root, 40, MAX_MODE) is root.children[3]


def test_select_child_unknown_mode():
    root = Node(Board.fresh_game())
    root.expand()
    with pytest.raises(ValueError):
        select_child(root, 0, "avg")


def test_rollout_zero_simulations():
    wins, losses, draws, elapsed = rollout(Board.fresh_game(), 0, random.Random(1))
    assert (wins, losses, draws) == (0, 0, 0)
    assert elapsed >= 0


def test_rollout_counts_sum_and_leave_board_untouched():
    board = Board.fresh_game()
    before = board.copy()
    wins, losses, draws, _ = rollout(board, 6, random.Random(3))
    assert wins + losses + draws == 6
    assert board == before


def test_rollout_on_finished_game():
    # negras ganan; el turno registrado en el tablero terminal es blancas
    board = Board.reconstruct_from([(0, 0)], [], BLACK)
    assert board.turn == WHITE
    assert rollout(board, 5, random.Random(0))[:3] == (0, 5, 0)


def test_heuristic_rollout_policy_finishes_game():
    board = simulate_random_plus(Board.fresh_game(), random.Random(11))
    assert board.is_game_over()
    mv = heuristic_random_move(Board.fresh_game(), random.Random(2))
    assert mv in Board.fresh_game().legal_moves


def test_backpropagate_alternates_perspective():
    root = Node(Board.fresh_game())
    child = root.expand()[0]
    grandchild = child.expand()[0]
    assert grandchild.board.turn == BLACK

    backpropagate(grandchild, 3, 2, 5)

    assert (grandchild.visits, grandchild.wins) == (5, 3)
    assert (child.visits, child.wins) == (5, 2)
    assert (root.visits, root.wins) == (5, 3)
    assert grandchild.mobility == len(grandchild.board.legal_moves)
    assert root.mobility == 4
    assert child.mobility == 0


def test_mcts_search_returns_root_legal_move():
    board = Board.fresh_game()
    before = board.copy()
    calls = []
    move, stats = mcts_search(board, TINY, seed=5, debug_callback=lambda i, d: calls.append(d))
    assert move in board.legal_moves
    assert board == before
    assert stats['total_simulations'] == 2 * (TINY.max_iterations + 1)
    assert stats['root_N'] == stats['total_simulations']
    assert len(calls) == TINY.max_iterations
    assert {'iteration', 'select_path', 'expanded', 'rollout', 'backprop_node'} <= set(calls[0])
    assert set(stats['all_moves']) == {"D3", "C4", "F5", "E6"}


def test_mcts_search_is_reproducible_with_seed():
    board = Board.fresh_game()
    board.apply_move(Position(2, 3))
    m1, s1 = mcts_search(board, TINY, seed=123)
    m2, s2 = mcts_search(board, TINY, seed=123)
    assert m1 == m2
    assert s1['all_moves'] == s2['all_moves']


def test_search_on_finished_game_raises():
    with pytest.raises(SearchInvariantError):
        search(Board.reconstruct_from([(0, 0)], [(7, 7)], BLACK), 1, 1)


def test_search_with_single_legal_move():
    board = Board.reconstruct_from([(0, 0)], [(0, 1)], WHITE)
    assert search(board, 2, 3, seed=1) == Position(0, 2)


def test_search_after_opponent_pass():
    board = Board.reconstruct_from([(0, 0), (7, 7)], [(0, 1), (7, 6)], BLACK)
    board.apply_move(Position(0, 2))
    assert board.turn == BLACK
    assert search(board, 2, 4, seed=3) == Position(7, 5)


def test_heuristic_rollouts_config():
    cfg = MCTSConfig(simulations_per_rollout=1, max_iterations=5, heuristic_rollouts=True)
    move = search(Board.fresh_game(), 1, 5, seed=9, config=cfg)
    assert move in Board.fresh_game().legal_moves
