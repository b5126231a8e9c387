import pytest

from buzzword_app.cards import reset_marks
from buzzword_app.patterns import (
    WINNING_PATTERNS,
    PatternType,
    check_winning_patterns,
    get_pattern,
    get_pattern_description,
)

from .conftest import mark


def test_catalog_order():
    names = [pattern.name for pattern in WINNING_PATTERNS]
    assert names == [
        'Row 1', 'Row 2', 'Row 3', 'Row 4', 'Row 5',
        'Column 1', 'Column 2', 'Column 3', 'Column 4', 'Column 5',
        'Main Diagonal', 'Anti Diagonal', 'Corners',
    ]


def test_catalog_positions():
    assert get_pattern('Row 2').positions == ((1, 0), (1, 1), (1, 2), (1, 3), (1, 4))
    assert get_pattern('Column 5').positions == ((0, 4), (1, 4), (2, 4), (3, 4), (4, 4))
    assert get_pattern('Anti Diagonal').positions == ((0, 4), (1, 3), (2, 2), (3, 1), (4, 0))
    assert get_pattern('Corners').type == PatternType.CORNERS
    assert len(get_pattern('Corners').positions) == 4


def test_fresh_card_has_no_win(card):
    assert check_winning_patterns(card.grid) is None


def test_row_win(card):
    grid = mark(card.grid, *[(0, c) for c in range(5)])
    assert check_winning_patterns(grid).name == 'Row 1'


@pytest.mark.parametrize('index', range(5))
def test_every_row_and_column(card, index):
    row = mark(card.grid, *[(index, c) for c in range(5)])
    assert check_winning_patterns(row).name == f"Row {index + 1}"
    column = mark(card.grid, *[(r, index) for r in range(5)])
    assert check_winning_patterns(column).name == f"Column {index + 1}"


def test_four_of_five_is_not_a_win(card):
    grid = mark(card.grid, *[(0, c) for c in range(4)])
    assert check_winning_patterns(grid) is None


@pytest.mark.parametrize('pattern', WINNING_PATTERNS, ids=lambda p: p.name)
def test_any_pattern_missing_one_cell_is_not_a_win(card, pattern):
    positions = [pos for pos in pattern.positions if pos != (2, 2)]
    grid = mark(card.grid, *positions[1:])
    assert check_winning_patterns(grid) is None


@pytest.mark.parametrize('positions, expected', [
    ([(2, 0), (2, 1), (2, 3), (2, 4)], 'Row 3'),
    ([(0, 2), (1, 2), (3, 2), (4, 2)], 'Column 3'),
    ([(0, 0), (1, 1), (3, 3), (4, 4)], 'Main Diagonal'),
    ([(0, 4), (1, 3), (3, 1), (4, 0)], 'Anti Diagonal'),
])
def test_lines_through_free_need_four_marks(card, positions, expected):
    assert check_winning_patterns(mark(card.grid, *positions)).name == expected


def test_corners_win(card):
    grid = mark(card.grid, (0, 0), (0, 4), (4, 0), (4, 4))
    assert check_winning_patterns(grid).name == 'Corners'


def test_tie_break_follows_catalog_order(card):
    row_and_column = mark(card.grid, *[(0, c) for c in range(5)], *[(r, 0) for r in range(1, 5)])
    assert check_winning_patterns(row_and_column).name == 'Row 1'

    diagonal_and_corners = mark(card.grid, (0, 0), (1, 1), (3, 3), (4, 4), (0, 4), (4, 0))
    assert check_winning_patterns(diagonal_and_corners).name == 'Main Diagonal'


def test_reset_removes_win(card):
    grid = mark(card.grid, *[(4, c) for c in range(5)])
    assert check_winning_patterns(grid) is not None
    assert check_winning_patterns(reset_marks(grid)) is None


def test_pattern_description():
    assert get_pattern_description(None) == ''
    assert get_pattern_description(get_pattern('Row 1')) == 'Row 1: Complete a horizontal line'
    assert get_pattern_description(get_pattern('Corners')) == 'Corners: Mark the four corners'
