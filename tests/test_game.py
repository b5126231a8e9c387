import pytest

from buzzword_app import game
from buzzword_app.cards import count_marked
from buzzword_app.exceptions import InsufficientPhrasesError
from buzzword_app.game import GameStatus

from .conftest import START, make_phrase_list


def win_first_row(state, now=None, history_limit=game.HISTORY_LIMIT):
    for col in range(5):
        state = game.toggle_space(state, 0, col, now=now, history_limit=history_limit)
    return state


def test_initial_state(state):
    assert state.status == GameStatus.PLAYING
    assert state.winning_pattern is None
    assert (state.games_played, state.wins) == (1, 0)
    assert state.started_at == START
    assert state.statistics.games_played == 1
    assert state.statistics.session.session_start == state.statistics.win_streak.start_date


def test_toggle_space_marks_without_winning(state):
    updated = game.toggle_space(state, 1, 1)
    assert updated.card.grid[1][1].marked
    assert updated.status == GameStatus.PLAYING
    assert not state.card.grid[1][1].marked


def test_winning_toggle_records_win(state):
    won = win_first_row(state, now=START + 90)
    assert won.status == GameStatus.WON
    assert won.winning_pattern.name == 'Row 1'
    assert won.wins == 1

    stats = won.statistics
    assert (stats.games_played, stats.wins, stats.win_rate) == (1, 1, 1.0)
    assert (stats.win_streak.current, stats.win_streak.best) == (1, 1)
    assert stats.pattern_stats.rows == (1, 0, 0, 0, 0)
    assert stats.last_winning_pattern == 'Row 1'
    assert stats.fastest_win_time == 90
    assert stats.avg_game_time == 90
    assert stats.avg_spaces_marked == 5
    assert stats.session.wins == 1
    assert stats.session.time_spent == 90

    entry = stats.history[-1]
    assert (entry.card_id, entry.won, entry.pattern_name) == (state.card.id, True, 'Row 1')
    assert entry.spaces_marked == count_marked(won.card.grid) == 5


def test_toggles_ignored_after_win(state):
    won = win_first_row(state)
    assert game.toggle_space(won, 4, 4) is won


def test_new_game_after_win_keeps_streak(state, phrase_list, rng):
    won = win_first_row(state)
    fresh = game.start_new_game(won, phrase_list, rng=rng, now=START + 100)
    assert fresh.status == GameStatus.PLAYING
    assert fresh.winning_pattern is None
    assert fresh.card.id != won.card.id
    assert fresh.games_played == 2
    assert fresh.statistics.games_played == 2
    assert fresh.statistics.session.games_played == 2
    assert fresh.statistics.win_rate == 0.5
    assert fresh.statistics.win_streak.current == 1
    assert fresh.started_at == START + 100

    second = win_first_row(fresh)
    assert second.statistics.win_streak.current == 2
    assert second.statistics.win_streak.best == 2


def test_abandoned_game_breaks_streak(state, phrase_list, rng):
    won = win_first_row(state)
    abandoned = game.start_new_game(won, phrase_list, rng=rng)
    again = game.start_new_game(abandoned, phrase_list, rng=rng)
    assert again.statistics.win_streak.current == 0
    assert again.statistics.win_streak.best == 1


def test_new_game_with_too_few_phrases_raises(state, rng):
    with pytest.raises(InsufficientPhrasesError):
        game.start_new_game(state, make_phrase_list(10), rng=rng)


def test_reset_card_clears_marks_and_win(state):
    won = win_first_row(state)
    reset = game.reset_card(won, now=START + 5)
    assert reset.status == GameStatus.PLAYING
    assert reset.winning_pattern is None
    assert count_marked(reset.card.grid) == 0
    assert reset.card.grid[2][2].marked
    assert reset.card.id == won.card.id
    # the win already counted stays counted
    assert reset.wins == 1


def test_pause_blocks_toggles_and_resume_shifts_timer(state):
    paused = game.pause_game(state, now=START + 10)
    assert paused.status == GameStatus.PAUSED
    assert game.toggle_space(paused, 0, 0) is paused
    assert game.elapsed_seconds(paused, now=START + 500) == 10

    resumed = game.resume_game(paused, now=START + 70)
    assert resumed.status == GameStatus.PLAYING
    assert resumed.paused_at is None
    assert resumed.started_at == START + 60

    won = win_first_row(resumed, now=START + 100)
    assert won.statistics.history[-1].time_to_complete == 40


def test_pause_and_resume_are_noops_in_wrong_status(state):
    assert game.resume_game(state) is state
    won = win_first_row(state)
    assert game.pause_game(won) is won


def test_history_is_capped(state, phrase_list, rng):
    for _ in range(3):
        state = win_first_row(state, history_limit=2)
        state = game.start_new_game(state, phrase_list, rng=rng)
    assert len(state.statistics.history) == 2
    assert state.statistics.wins == 3


def test_share_summary(state):
    won = win_first_row(state)
    assert game.share_summary(won) == 'Bingo Game Result: 1 wins, 1 games played.'
