"""Game state and its transitions.

Every function here takes a ``GameState`` and returns a new one; nothing is
modified in place. Callers swap their reference to the returned value.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from .cards import CARD_SIZE, Card, count_marked, generate_bingo_card, reset_marks, toggle_mark
from .patterns import PatternType, WinningPattern, check_winning_patterns
from .utils import isoformat, now_seconds

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 50


class GameStatus(str, Enum):
    PLAYING = 'PLAYING'
    WON = 'WON'
    PAUSED = 'PAUSED'


@dataclass(frozen=True)
class WinStreak:
    current: int = 0
    best: int = 0
    start_date: str = ''

    def to_dict(self):
        return {'current': self.current, 'best': self.best, 'start_date': self.start_date}


@dataclass(frozen=True)
class PatternStats:
    rows: tuple = (0,) * CARD_SIZE
    columns: tuple = (0,) * CARD_SIZE
    main_diagonal: int = 0
    anti_diagonal: int = 0
    corners: int = 0

    def record(self, pattern):
        if pattern.type == PatternType.ROW:
            index = pattern.positions[0][0]
            return replace(self, rows=_bump(self.rows, index))
        if pattern.type == PatternType.COLUMN:
            index = pattern.positions[0][1]
            return replace(self, columns=_bump(self.columns, index))
        if pattern.type == PatternType.DIAGONAL:
            if pattern.positions[0] == (0, 0):
                return replace(self, main_diagonal=self.main_diagonal + 1)
            return replace(self, anti_diagonal=self.anti_diagonal + 1)
        return replace(self, corners=self.corners + 1)

    def to_dict(self):
        return {
            'rows': list(self.rows),
            'columns': list(self.columns),
            'main_diagonal': self.main_diagonal,
            'anti_diagonal': self.anti_diagonal,
            'corners': self.corners,
        }


def _bump(counts, index):
    return tuple(count + 1 if i == index else count for i, count in enumerate(counts))


@dataclass(frozen=True)
class SessionStats:
    session_start: str = ''
    games_played: int = 1
    wins: int = 0
    time_spent: int = 0

    def to_dict(self):
        return {
            'session_start': self.session_start,
            'games_played': self.games_played,
            'wins': self.wins,
            'time_spent': self.time_spent,
        }


@dataclass(frozen=True)
class GameHistoryEntry:
    card_id: str
    timestamp: str
    won: bool
    pattern_name: str = ''
    time_to_complete: int = 0
    spaces_marked: int = 0

    def to_dict(self):
        return {
            'card_id': self.card_id,
            'timestamp': self.timestamp,
            'won': self.won,
            'pattern_name': self.pattern_name,
            'time_to_complete': self.time_to_complete,
            'spaces_marked': self.spaces_marked,
        }


@dataclass(frozen=True)
class Statistics:
    games_played: int = 1
    wins: int = 0
    win_rate: float = 0.0
    win_streak: WinStreak = field(default_factory=WinStreak)
    pattern_stats: PatternStats = field(default_factory=PatternStats)
    session: SessionStats = field(default_factory=SessionStats)
    history: tuple = ()
    avg_game_time: float = 0.0
    fastest_win_time: int = 0
    avg_spaces_marked: float = 0.0
    last_winning_pattern: str = ''

    def to_dict(self):
        return {
            'games_played': self.games_played,
            'wins': self.wins,
            'win_rate': self.win_rate,
            'win_streak': self.win_streak.to_dict(),
            'pattern_stats': self.pattern_stats.to_dict(),
            'session': self.session.to_dict(),
            'history': [entry.to_dict() for entry in self.history],
            'avg_game_time': self.avg_game_time,
            'fastest_win_time': self.fastest_win_time,
            'avg_spaces_marked': self.avg_spaces_marked,
            'last_winning_pattern': self.last_winning_pattern,
        }


@dataclass(frozen=True)
class GameState:
    card: Card
    status: GameStatus = GameStatus.PLAYING
    winning_pattern: Optional[WinningPattern] = None
    games_played: int = 1
    wins: int = 0
    statistics: Statistics = field(default_factory=Statistics)
    started_at: Optional[float] = None
    paused_at: Optional[float] = None

    def to_dict(self):
        return {
            'card': self.card.to_dict(),
            'status': self.status.value,
            'winning_pattern': self.winning_pattern.to_dict() if self.winning_pattern else None,
            'games_played': self.games_played,
            'wins': self.wins,
            'statistics': self.statistics.to_dict(),
            'started_at': self.started_at,
            'paused_at': self.paused_at,
        }


def new_statistics(now=None):
    started = isoformat(now)
    return Statistics(
        win_streak=WinStreak(start_date=started),
        session=SessionStats(session_start=started),
    )


def create_initial_game_state(phrase_list, rng=None, now=None):
    now = now_seconds(now)
    card = generate_bingo_card(phrase_list, rng=rng, now=now)
    return GameState(card=card, statistics=new_statistics(now), started_at=now)


def start_new_game(state, phrase_list, rng=None, now=None):
    """Deal a fresh card; the previous state is left untouched on failure."""
    now = now_seconds(now)
    card = generate_bingo_card(phrase_list, rng=rng, now=now)

    stats = state.statistics
    streak = stats.win_streak
    if state.status != GameStatus.WON:
        # abandoning an unfinished card breaks the streak
        streak = replace(streak, current=0)
    games_played = stats.games_played + 1
    stats = replace(
        stats,
        games_played=games_played,
        win_rate=stats.wins / games_played,
        win_streak=streak,
        session=replace(stats.session, games_played=stats.session.games_played + 1),
    )
    logger.info(f"Starting game #{state.games_played + 1} with card {card.id}")
    return replace(
        state,
        card=card,
        status=GameStatus.PLAYING,
        winning_pattern=None,
        games_played=state.games_played + 1,
        statistics=stats,
        started_at=now,
        paused_at=None,
    )


def reset_card(state, now=None):
    return replace(
        state,
        card=replace(state.card, grid=reset_marks(state.card.grid)),
        status=GameStatus.PLAYING,
        winning_pattern=None,
        started_at=now_seconds(now),
        paused_at=None,
    )


def toggle_space(state, row, col, now=None, history_limit=HISTORY_LIMIT):
    """Toggle one space and record a win if the new grid completes a pattern."""
    if state.status != GameStatus.PLAYING:
        logger.debug(f"Ignoring toggle at ({row}, {col}) while {state.status.value}")
        return state

    grid = toggle_mark(state.card.grid, row, col)
    updated = replace(state, card=replace(state.card, grid=grid))
    pattern = check_winning_patterns(grid)
    if pattern is not None:
        return record_win(updated, pattern, now=now, history_limit=history_limit)
    return updated


def elapsed_seconds(state, now=None):
    if state.started_at is None:
        return 0
    end = state.paused_at if state.paused_at is not None else now_seconds(now)
    return max(0, int(end - state.started_at))


def record_win(state, pattern, now=None, history_limit=HISTORY_LIMIT):
    now = now_seconds(now)
    time_to_complete = elapsed_seconds(state, now)
    stats = state.statistics

    wins = stats.wins + 1
    games_played = state.games_played

    streak = stats.win_streak
    if streak.current == 0:
        streak = replace(streak, start_date=isoformat(now))
    current = streak.current + 1
    streak = replace(streak, current=current, best=max(streak.best, current))

    entry = GameHistoryEntry(
        card_id=state.card.id,
        timestamp=isoformat(now),
        won=True,
        pattern_name=pattern.name,
        time_to_complete=time_to_complete,
        spaces_marked=count_marked(state.card.grid),
    )
    history = (stats.history + (entry,))[-history_limit:]
    won_times = [item.time_to_complete for item in history if item.won]

    session = stats.session
    session = replace(
        session,
        wins=session.wins + 1,
        games_played=games_played,
        time_spent=session.time_spent + time_to_complete,
    )

    stats = replace(
        stats,
        games_played=games_played,
        wins=wins,
        win_rate=wins / games_played if games_played else 0.0,
        win_streak=streak,
        pattern_stats=stats.pattern_stats.record(pattern),
        session=session,
        history=history,
        avg_game_time=sum(item.time_to_complete for item in history) / len(history),
        fastest_win_time=min(won_times) if won_times else 0,
        avg_spaces_marked=sum(item.spaces_marked for item in history) / len(history),
        last_winning_pattern=pattern.name,
    )
    logger.info(f"Card {state.card.id} won with {pattern.name} after {time_to_complete}s")
    return replace(
        state,
        status=GameStatus.WON,
        winning_pattern=pattern,
        wins=state.wins + 1,
        statistics=stats,
    )


def pause_game(state, now=None):
    if state.status != GameStatus.PLAYING:
        return state
    return replace(state, status=GameStatus.PAUSED, paused_at=now_seconds(now))


def resume_game(state, now=None):
    if state.status != GameStatus.PAUSED:
        return state
    now = now_seconds(now)
    started_at = state.started_at
    if started_at is not None and state.paused_at is not None:
        started_at += now - state.paused_at
    return replace(state, status=GameStatus.PLAYING, started_at=started_at, paused_at=None)


def share_summary(state):
    return f"Bingo Game Result: {state.wins} wins, {state.games_played} games played."
