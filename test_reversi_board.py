"""
Pruebas del motor de reglas: jugadas legales, volteos, frontera, pase y final.
"""

import random

import pytest

from reversi_board import (
    Board, Position, GameStatus, IllegalMoveError, MalformedPositionError, ReversiError,
    as_position, is_in_range, BLACK, WHITE, EMPTY,
)
from board_utils import to_notation, from_notation, render_board, board_to_state, describe_status


def P(r, c):
    return Position(r, c)


def assert_consistent(board):
    black = sum(row.count(BLACK) for row in board.cells)
    white = sum(row.count(WHITE) for row in board.cells)
    assert board.black_score == black
    assert board.white_score == white
    assert board.black_score + board.white_score == len(board.filled()) <= 64


def test_fresh_game_layout():
    board = Board.fresh_game()
    assert board.turn == BLACK
    assert board.status == GameStatus.UNDETERMINED
    assert (board.black_score, board.white_score) == (2, 2)
    assert board.piece_at((3, 3)) == WHITE
    assert board.piece_at((3, 4)) == BLACK
    assert board.legal_moves == [P(2, 3), P(3, 2), P(4, 5), P(5, 4)]


def test_fresh_game_frontier_is_ring_around_center():
    board = Board.fresh_game()
    ring = {P(r, c) for r in range(2, 6) for c in range(2, 6)} - {P(3, 3), P(3, 4), P(4, 3), P(4, 4)}
    assert board.frontier == ring
    assert all(board.cells[p.row][p.col] == EMPTY for p in board.frontier)


def test_apply_move_flips_and_scores():
    board = Board.fresh_game()
    flipped = board.apply_move(P(2, 3))
    assert flipped == 1
    assert board.piece_at((3, 3)) == BLACK
    assert (board.black_score, board.white_score) == (4, 1)
    assert board.turn == WHITE
    assert board.legal_moves == [P(2, 2), P(2, 4), P(4, 2)]
    assert P(2, 3) not in board.frontier
    assert {P(1, 2), P(1, 3), P(1, 4)} <= board.frontier
    assert_consistent(board)


def test_apply_move_accepts_tuples():
    board = Board.fresh_game()
    board.apply_move((5, 4))
    assert board.piece_at(P(4, 4)) == BLACK


def test_illegal_move_leaves_board_untouched():
    board = Board.fresh_game()
    before = board.copy()
    with pytest.raises(IllegalMoveError):
        board.apply_move(P(0, 0))
    # casilla ocupada
    with pytest.raises(IllegalMoveError):
        board.apply_move(P(3, 3))
    assert board == before


def test_malformed_positions():
    with pytest.raises(MalformedPositionError):
        Position(8, 0)
    with pytest.raises(MalformedPositionError):
        Position(0, -1)
    with pytest.raises(MalformedPositionError):
        as_position((1,))
    with pytest.raises(MalformedPositionError):
        as_position((True, 0))
    with pytest.raises(MalformedPositionError):
        Board.fresh_game().piece_at((-1, 0))
    assert isinstance(MalformedPositionError("x"), ValueError)


def test_position_ordering_and_range():
    assert P(0, 7) < P(1, 0)
    assert P(2, 3) == as_position([2, 3])
    assert len({P(1, 1), P(1, 1)}) == 1
    assert is_in_range((7, 7))
    assert not is_in_range((0, 8))


def test_legal_direction_cases():
    board = Board.fresh_game()
    # (2,3) hacia abajo: blanca en (3,3), negra en (4,3)
    assert board.legal_direction((1, 0), P(2, 3))
    assert not board.legal_direction((0, 1), P(2, 3))
    # casilla ocupada
    assert not board.legal_direction((1, 0), P(3, 3))
    # hacia el borde sin fichas
    assert not board.legal_direction((-1, 0), P(0, 0))
    assert board.has_legal_direction(P(4, 5))
    assert not board.has_legal_direction(P(2, 2))


def test_run_without_closing_piece_is_not_legal():
    # fila 0: blancas hasta el borde, sin negra que cierre
    board = Board.reconstruct_from([(5, 5)], [(0, 0), (0, 1), (4, 4)], BLACK)
    assert not board.legal_direction((0, -1), P(0, 2))
    assert P(0, 2) not in board.legal_moves
    assert board.legal_moves == [P(3, 3)]


def test_turn_passes_when_side_has_no_moves():
    board = Board.reconstruct_from([(0, 0)], [(0, 1)], WHITE)
    assert board.turn == BLACK
    assert board.status == GameStatus.UNDETERMINED
    assert board.legal_moves == [P(0, 2)]

    assert board.apply_move(P(0, 2)) == 1
    assert board.status == GameStatus.BLACK_WINS
    assert board.is_game_over()
    assert board.legal_moves == []
    assert (board.black_score, board.white_score) == (3, 0)


def test_opponent_without_reply_gives_turn_back_mid_game():
    # negras en A1 y H8, blancas en B1 y G8
    board = Board.reconstruct_from([(0, 0), (7, 7)], [(0, 1), (7, 6)], BLACK)
    assert board.legal_moves == [P(0, 2), P(7, 5)]
    assert board.is_legal((0, 2))
    assert not board.is_legal((1, 1))

    flipped = board.apply_move(P(0, 2))

    # blancas solo tienen G8, sin negras que encerrar: pasan
    assert flipped == 1
    assert board.turn == BLACK
    assert board.status == GameStatus.UNDETERMINED
    assert board.legal_moves == [P(7, 5)]
    assert (board.black_score, board.white_score) == (2 + flipped + 1, 2 - flipped)
    assert_consistent(board)

    assert board.apply_move(P(7, 5)) == 1
    assert board.status == GameStatus.BLACK_WINS


def test_terminal_status_by_score():
    assert Board.reconstruct_from([(0, 0)], [], BLACK).status == GameStatus.BLACK_WINS
    assert Board.reconstruct_from([], [(0, 0), (0, 1)], BLACK).status == GameStatus.WHITE_WINS
    draw = Board.reconstruct_from([(0, 0)], [(7, 7)], WHITE)
    assert draw.status == GameStatus.DRAW
    assert int(draw.status) == 99


def test_invalid_turn_rejected():
    with pytest.raises(ReversiError):
        Board.reconstruct_from([(3, 4)], [(3, 3)], 0)


def test_copy_is_independent():
    board = Board.fresh_game()
    other = board.copy()
    other.apply_move(P(2, 3))
    assert board.piece_at((3, 3)) == WHITE
    assert board.turn == BLACK
    assert P(2, 3) in board.frontier
    assert board != other


def test_random_game_keeps_invariants():
    rng = random.Random(7)
    board = Board.fresh_game()
    moves = 0
    while not board.is_game_over():
        before = board.score(board.turn)
        mover = board.turn
        flipped = board.apply_move(rng.choice(board.legal_moves))
        assert flipped >= 1
        assert board.score(mover) == before + flipped + 1
        assert_consistent(board)
        for p in board.frontier:
            assert board.cells[p.row][p.col] == EMPTY
        moves += 1
    assert 0 < moves <= 60
    assert board.status in (GameStatus.BLACK_WINS, GameStatus.WHITE_WINS, GameStatus.DRAW)


def test_reconstruct_matches_played_position():
    board = Board.fresh_game()
    for mv in [P(2, 3), P(2, 2), P(3, 2)]:
        board.apply_move(mv)
    state = board_to_state(board)
    rebuilt = Board.reconstruct_from(state['blackFilled'], state['whiteFilled'], state['turn'])
    assert rebuilt.cells == board.cells
    assert rebuilt.legal_moves == board.legal_moves
    assert rebuilt.frontier == board.frontier


def test_notation_and_rendering():
    assert to_notation(P(0, 0)) == "A1"
    assert to_notation((2, 3)) == "D3"
    assert from_notation("d3") == P(2, 3)
    with pytest.raises(MalformedPositionError):
        from_notation("Z9")
    with pytest.raises(MalformedPositionError):
        from_notation("A9")

    text = render_board(Board.fresh_game())
    lines = text.splitlines()
    assert lines[0].split() == list("ABCDEFGH")
    assert lines[3].split()[1:] == list("...*....")
    assert lines[4].split()[1:] == list("..*OX...")
    assert "Negras 2 - Blancas 2" in describe_status(Board.fresh_game())
