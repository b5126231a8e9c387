"""Winning pattern catalog and win detection.

The catalog order is significant: when several patterns are complete at
once, ``check_winning_patterns`` reports the first one in this order
(rows top to bottom, columns left to right, main diagonal, anti diagonal,
corners).
"""

from dataclasses import dataclass
from enum import Enum

from .cards import CARD_SIZE, get_cell


class PatternType(str, Enum):
    ROW = 'ROW'
    COLUMN = 'COLUMN'
    DIAGONAL = 'DIAGONAL'
    CORNERS = 'CORNERS'


@dataclass(frozen=True)
class WinningPattern:
    type: PatternType
    positions: tuple
    name: str

    def to_dict(self):
        return {
            'type': self.type.value,
            'positions': [{'row': row, 'col': col} for row, col in self.positions],
            'name': self.name,
        }


def _row(r):
    return WinningPattern(
        type=PatternType.ROW,
        positions=tuple((r, c) for c in range(CARD_SIZE)),
        name=f"Row {r + 1}",
    )


def _column(c):
    return WinningPattern(
        type=PatternType.COLUMN,
        positions=tuple((r, c) for r in range(CARD_SIZE)),
        name=f"Column {c + 1}",
    )


def build_pattern_catalog():
    last = CARD_SIZE - 1
    patterns = [_row(r) for r in range(CARD_SIZE)]
    patterns += [_column(c) for c in range(CARD_SIZE)]
    patterns.append(WinningPattern(
        type=PatternType.DIAGONAL,
        positions=tuple((i, i) for i in range(CARD_SIZE)),
        name='Main Diagonal',
    ))
    patterns.append(WinningPattern(
        type=PatternType.DIAGONAL,
        positions=tuple((i, last - i) for i in range(CARD_SIZE)),
        name='Anti Diagonal',
    ))
    patterns.append(WinningPattern(
        type=PatternType.CORNERS,
        positions=((0, 0), (0, last), (last, 0), (last, last)),
        name='Corners',
    ))
    return tuple(patterns)


WINNING_PATTERNS = build_pattern_catalog()

PATTERNS_BY_NAME = {pattern.name: pattern for pattern in WINNING_PATTERNS}


def get_pattern(name):
    return PATTERNS_BY_NAME.get(name)


def get_pattern_description(pattern):
    descriptions = {
        PatternType.ROW: 'Complete a horizontal line',
        PatternType.COLUMN: 'Complete a vertical line',
        PatternType.DIAGONAL: 'Complete a diagonal line through the FREE space',
        PatternType.CORNERS: 'Mark the four corners',
    }
    if pattern is None:
        return ''
    return f"{pattern.name}: {descriptions.get(pattern.type, '')}"


def is_pattern_complete(pattern, grid):
    # FREE is always marked, so lines through the center only need four marks
    return all(get_cell(grid, row, col).marked for row, col in pattern.positions)


def check_winning_patterns(grid, patterns=WINNING_PATTERNS):
    """Return the first complete pattern in catalog order, or None."""
    for pattern in patterns:
        if is_pattern_complete(pattern, grid):
            return pattern
    return None
