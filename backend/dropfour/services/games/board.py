"""Board primitives for the 7 x 6 drop grid.

A board is a tuple of ``ROWS`` row tuples, each holding ``COLS`` cells.
Row 0 is the top of the grid and row ``ROWS - 1`` the bottom, so pieces
fall towards higher row indexes. Every function here is pure: boards are
never mutated, a new value is returned instead.
"""
from typing import Iterable, List, Optional, Sequence, Tuple

from .errors import ColumnFull, ColumnOutOfRange

ROWS = 6
COLS = 7
CONNECT = 4

EMPTY = 0
PLAYER_ONE = 1
PLAYER_TWO = 2
PIECES = (PLAYER_ONE, PLAYER_TWO)

Board = Tuple[Tuple[int, ...], ...]

# (row step, column step): horizontal, vertical, down-right, up-right
_DIRECTIONS = ((0, 1), (1, 0), (1, 1), (-1, 1))


def empty_board() -> Board:
    return tuple(tuple(EMPTY for _ in range(COLS)) for _ in range(ROWS))


def _check_piece(piece: int) -> None:
    if piece not in PIECES:
        raise ValueError(f'Invalid piece {piece!r}')


def _check_column(column) -> int:
    # bool is an int subclass; True must not silently mean column 1
    if isinstance(column, bool) or not isinstance(column, int):
        raise ColumnOutOfRange(f'Column must be an integer between 0 and {COLS - 1}')
    if column < 0 or column >= COLS:
        raise ColumnOutOfRange(f'Column {column} is outside 0..{COLS - 1}')
    return column


def landing_row(board: Board, column: int) -> Optional[int]:
    """Row a piece dropped into ``column`` would land on, or None when full."""
    column = _check_column(column)
    for row in range(ROWS - 1, -1, -1):
        if board[row][column] == EMPTY:
            return row
    return None


def drop(board: Board, column: int, piece: int) -> Board:
    """Return a new board with ``piece`` placed in the lowest empty cell of ``column``.

    Raises ColumnOutOfRange for a column outside the grid and ColumnFull when
    the column has no empty cell left.
    """
    _check_piece(piece)
    row = landing_row(board, column)
    if row is None:
        raise ColumnFull(f'Column {column} is full')
    updated = list(board)
    cells = list(updated[row])
    cells[column] = piece
    updated[row] = tuple(cells)
    return tuple(updated)


def has_line(board: Board, piece: int) -> bool:
    """True if ``piece`` owns CONNECT consecutive cells in any direction."""
    _check_piece(piece)
    span = CONNECT - 1
    for dr, dc in _DIRECTIONS:
        for row in range(ROWS):
            end_row = row + dr * span
            if not 0 <= end_row < ROWS:
                continue
            for col in range(COLS - dc * span):
                if all(board[row + dr * i][col + dc * i] == piece for i in range(CONNECT)):
                    return True
    return False


def is_full(board: Board) -> bool:
    # gravity means the top row fills last
    return all(cell != EMPTY for cell in board[0])


def obeys_gravity(board: Board) -> bool:
    for col in range(COLS):
        seen_piece = False
        for row in range(ROWS):
            if board[row][col] != EMPTY:
                seen_piece = True
            elif seen_piece:
                return False
    return True


def from_rows(rows: Iterable[Sequence[int]]) -> Board:
    """Build a board from nested sequences, validating shape, cells and gravity."""
    board = tuple(tuple(int(cell) for cell in row) for row in rows)
    if len(board) != ROWS or any(len(row) != COLS for row in board):
        raise ValueError(f'Board must be {ROWS} rows of {COLS} cells')
    if any(cell not in (EMPTY,) + PIECES for row in board for cell in row):
        raise ValueError('Board cells must be 0, 1 or 2')
    if not obeys_gravity(board):
        raise ValueError('Board has a floating piece')
    return board


def to_lists(board: Board) -> List[List[int]]:
    return [list(row) for row in board]
