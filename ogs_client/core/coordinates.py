# ogs_client/core/coordinates.py
"""
Provides pure, stateless functions for converting between board coordinate systems.

The service stores moves as zero-based (x, y) pairs counted from the top-left
corner, while players read and type positions in "A1" notation: a column
letter that skips 'I' and a row number counted up from the bottom edge. Both
directions are exact inverses for every point on boards up to 25x25.
"""

from typing import Final, Union

from ogs_client.exceptions import CoordinateOutOfBoundsError, InvalidCoordinateError
from ogs_client.types import A1Coordinate, OriginCoordinate

# The letter left out of the column alphabet, to avoid confusion with 'J' and '1'.
SKIPPED_LETTER: Final[str] = "I"

MAX_ROW: Final[int] = 25


def _in_bounds(value: int, board_size: int) -> bool:
    return 0 <= value < board_size


def origin_to_a1(coord: OriginCoordinate, board_size: int) -> A1Coordinate:
    """
    Converts a zero-based coordinate into A1 notation.

    Args:
        coord: The zero-based coordinate, (0, 0) being the top-left point.
        board_size: The edge length of the square board.

    Returns:
        The matching `A1Coordinate`.

    Raises:
        CoordinateOutOfBoundsError: If x or y lies outside [0, board_size).
    """
    if not (_in_bounds(coord.x, board_size) and _in_bounds(coord.y, board_size)):
        raise CoordinateOutOfBoundsError(
            f"OriginCoordinate {coord} is out of board bounds [0-{board_size - 1}]",
            value=coord,
            board_size=board_size,
        )

    col = ord("A") + coord.x
    if coord.x >= 8:
        col += 1
    return A1Coordinate(col=chr(col), row=board_size - coord.y)


def parse_a1_string(text: str) -> A1Coordinate:
    """
    Parses a string such as "D4" or "q16" into an `A1Coordinate`.

    The column letter is upper-cased. The board size is not known here, so
    only the notation itself is validated; `a1_to_origin` checks the bounds.

    Raises:
        InvalidCoordinateError: If the string is too short, the letter is not
            A-Z or is 'I', or the row is not an integer in [1, 25].
    """
    if len(text) < 2:
        raise InvalidCoordinateError(
            f"invalid coordinate string {text!r}", value=text, valid_range="A1-Z25"
        )

    col = text[0].upper()
    if not ("A" <= col <= "Z") or col == SKIPPED_LETTER:
        raise InvalidCoordinateError(
            f"invalid column letter {col!r} in coordinate {text!r}: must be A-H or J-Z (or a-h or j-z)",
            value=text,
            valid_range="A-H, J-Z",
        )

    row_text = text[1:]
    try:
        row = int(row_text)
    except ValueError:
        row = 0
    if not row_text.isdigit() or not 1 <= row <= MAX_ROW:
        raise InvalidCoordinateError(
            f"invalid row number in coordinate {text!r}: must be 1-{MAX_ROW}",
            value=text,
            valid_range=f"1-{MAX_ROW}",
        )
    return A1Coordinate(col=col, row=row)


def a1_to_origin(a1: Union[A1Coordinate, str], board_size: int) -> OriginCoordinate:
    """
    Converts an A1 coordinate back into the zero-based form used on the wire.

    Args:
        a1: Either an `A1Coordinate` or a string to run through `parse_a1_string`.
        board_size: The edge length of the square board.

    Raises:
        InvalidCoordinateError: If the letter is outside A-H and J-Z.
        CoordinateOutOfBoundsError: If the decoded point is not on the board.
    """
    if isinstance(a1, str):
        a1 = parse_a1_string(a1)

    col = a1.col.upper()
    if "A" <= col <= "H":
        x = ord(col) - ord("A")
    elif "J" <= col <= "Z":
        x = ord(col) - ord("A") - 1  # Undo the skipped 'I'
    else:
        raise InvalidCoordinateError(
            f"invalid column letter {col!r} in A1Coordinate {str(a1)!r}: must be A-H or J-Z (or a-h or j-z)",
            value=a1,
            valid_range="A-H, J-Z",
        )

    y = board_size - a1.row
    if not (_in_bounds(x, board_size) and _in_bounds(y, board_size)):
        raise CoordinateOutOfBoundsError(
            f"coordinate {str(a1)!r} is out of board bounds [0-{board_size - 1}]",
            value=a1,
            board_size=board_size,
        )
    return OriginCoordinate(x=x, y=y)


def encode_sgf_move(coord: OriginCoordinate) -> str:
    """
    Encodes a coordinate as the two-letter SGF string the realtime API expects.

    'a' is the first column/row, so (3, 15) becomes "dp". A pass is "..".
    """
    if coord.is_pass():
        return ".."
    return f"{chr(ord('a') + coord.x)}{chr(ord('a') + coord.y)}"
