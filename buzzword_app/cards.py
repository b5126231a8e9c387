"""Card generation, grid mutation and card validation."""

import logging
from dataclasses import dataclass, replace
from enum import Enum

from .phrases import select_random_phrases
from .utils import epoch_millis, generate_card_id, get_random

logger = logging.getLogger(__name__)

CARD_SIZE = 5
CENTER = (2, 2)
FREE_TEXT = 'FREE'
PHRASES_PER_CARD = CARD_SIZE * CARD_SIZE - 1


class CellKind(str, Enum):
    REGULAR = 'REGULAR'
    FREE = 'FREE'


@dataclass(frozen=True)
class Cell:
    text: str
    marked: bool
    row: int
    col: int
    kind: CellKind = CellKind.REGULAR

    @property
    def is_free(self):
        return self.kind == CellKind.FREE

    def to_dict(self):
        return {
            'text': self.text,
            'marked': self.marked,
            'row': self.row,
            'col': self.col,
            'kind': self.kind.value,
        }


@dataclass(frozen=True)
class Card:
    id: str
    grid: tuple
    created_at: int

    def to_dict(self):
        return {
            'id': self.id,
            'grid': [[cell.to_dict() for cell in row] for row in self.grid],
            'created_at': self.created_at,
        }


def create_cell(text, row, col):
    return Cell(text=text, marked=False, row=row, col=col, kind=CellKind.REGULAR)


def create_free_cell(row=CENTER[0], col=CENTER[1]):
    return Cell(text=FREE_TEXT, marked=True, row=row, col=col, kind=CellKind.FREE)


def get_cell(grid, row, col):
    return grid[row][col]


def iter_cells(grid):
    for row in grid:
        yield from row


def count_marked(grid):
    """Marked REGULAR cells; the FREE cell is not counted."""
    return sum(1 for cell in iter_cells(grid) if cell.marked and not cell.is_free)


def generate_bingo_card(phrase_list, rng=None, now=None):
    """Genera un cartón 5x5 con 24 frases y el comodín FREE en el centro.

    Las frases se colocan por filas en el orden del muestreo, saltando el centro.
    ``InsufficientPhrasesError`` del muestreo se propaga tal cual.
    """
    rng = get_random(rng)
    phrases = iter(select_random_phrases(phrase_list, PHRASES_PER_CARD, rng))

    grid = []
    for row in range(CARD_SIZE):
        cells = []
        for col in range(CARD_SIZE):
            if (row, col) == CENTER:
                cells.append(create_free_cell(row, col))
            else:
                cells.append(create_cell(next(phrases).text, row, col))
        grid.append(tuple(cells))

    card = Card(
        id=generate_card_id(rng, now),
        grid=tuple(grid),
        created_at=epoch_millis(now),
    )
    logger.debug(f"Generated card {card.id}")
    return card


def _validate_grid_structure(grid):
    try:
        return len(grid) == CARD_SIZE and all(len(row) == CARD_SIZE for row in grid)
    except TypeError:
        return False


def validate_bingo_card(card):
    """Return the list of problems found on ``card``; empty means valid."""
    grid = card.grid
    if not _validate_grid_structure(grid):
        return ['Grid is not 5x5']

    errors = []
    texts = [cell.text for cell in iter_cells(grid) if not cell.is_free]
    if len(texts) != len(set(texts)):
        errors.append('Duplicate phrases found')

    center = get_cell(grid, *CENTER)
    if not (center.is_free and center.marked and center.text == FREE_TEXT):
        errors.append('Center space is not a valid FREE space')

    if any(cell.is_free for cell in iter_cells(grid) if (cell.row, cell.col) != CENTER):
        errors.append('FREE space found outside the center')

    for r, row in enumerate(grid):
        if any(cell.row != r or cell.col != c for c, cell in enumerate(row)):
            errors.append('Space positions are incorrect')
            break
    return errors


def is_valid_card(card):
    return not validate_bingo_card(card)


def _check_position(row, col):
    if not (0 <= row < CARD_SIZE and 0 <= col < CARD_SIZE):
        raise ValueError(f"Position ({row}, {col}) is outside the 5x5 card")


def toggle_mark(grid, row, col):
    """Flip the mark at (row, col). The FREE cell never changes."""
    _check_position(row, col)
    target = get_cell(grid, row, col)
    if target.is_free:
        return grid
    flipped = replace(target, marked=not target.marked)
    return tuple(
        tuple(flipped if (r, c) == (row, col) else cell for c, cell in enumerate(cells))
        for r, cells in enumerate(grid)
    )


def reset_marks(grid):
    return tuple(
        tuple(replace(cell, marked=cell.is_free) for cell in cells)
        for cells in grid
    )
