from buzzword_app.patterns import get_pattern
from buzzword_app.templatetags.bingo_filters import cell_classes, duration, is_winning_cell


def test_cell_classes(card):
    row = get_pattern('Row 3')
    assert cell_classes(card.grid[2][2], row) == 'bingo-cell free marked winning'
    assert cell_classes(card.grid[0][0], row) == 'bingo-cell'
    assert not is_winning_cell(card.grid[2][0], None)
    assert is_winning_cell(card.grid[2][0], row)


def test_duration():
    assert duration(0) == '0:00'
    assert duration(125.7) == '2:05'
    assert duration(None) == ''
