import random

import pytest

from buzzword_app.cards import generate_bingo_card, toggle_mark
from buzzword_app.game import create_initial_game_state
from buzzword_app.phrases import DEFAULT_PHRASE_LIST, build_phrase_list

START = 1_700_000_000.0


def make_phrase_list(count, category='Test'):
    return build_phrase_list({category: [f"Phrase {n}" for n in range(1, count + 1)]})


def mark(grid, *positions):
    for row, col in positions:
        grid = toggle_mark(grid, row, col)
    return grid


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def phrase_list():
    return DEFAULT_PHRASE_LIST


@pytest.fixture
def card(phrase_list, rng):
    return generate_bingo_card(phrase_list, rng=rng, now=START)


@pytest.fixture
def state(phrase_list, rng):
    return create_initial_game_state(phrase_list, rng=rng, now=START)
