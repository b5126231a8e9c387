import logging

from . import game
from .exceptions import InsufficientPhrasesError
from .phrases import (
    DEFAULT_PHRASE_LIST,
    MIN_PHRASES,
    add_phrase,
    has_enough_phrases,
    remove_phrase,
    total_phrase_count,
)

logger = logging.getLogger(__name__)


class GameController:
    """Applies user intents to the stored game, one atomic transition each.

    Built per request (or per socket message) around a store such as
    ``SessionGameStore``. Each intent reads the current state, computes the
    next one with a pure function from ``game`` and writes it back.
    """

    INTENTS = (
        'new_game',
        'reset_card',
        'toggle_space',
        'pause_game',
        'resume_game',
        'import_phrases',
    )

    def __init__(self, store, rng=None, history_limit=game.HISTORY_LIMIT, min_phrases=MIN_PHRASES):
        self.store = store
        self.rng = rng
        self.history_limit = history_limit
        self.min_phrases = min_phrases
        self._phrase_list = None
        self._state = None

    @property
    def phrase_list(self):
        if self._phrase_list is None:
            self._phrase_list = self.store.load_phrase_list() or DEFAULT_PHRASE_LIST
        return self._phrase_list

    @property
    def state(self):
        if self._state is None:
            self._state = self.store.load()
            if self._state is None:
                self._commit(self._fresh_state())
        return self._state

    def _fresh_state(self):
        try:
            return game.create_initial_game_state(self.phrase_list, rng=self.rng)
        except InsufficientPhrasesError as e:
            logger.warning(f"Stored phrase list cannot fill a card ({e}); using the default list")
            return game.create_initial_game_state(DEFAULT_PHRASE_LIST, rng=self.rng)

    def _commit(self, state):
        self._state = state
        self.store.save(state)
        return state

    def _commit_phrases(self, phrase_list):
        self._phrase_list = phrase_list
        self.store.save_phrase_list(phrase_list)
        return phrase_list

    # Intents

    def new_game(self):
        # Umbral de la interfaz sobre el total bruto, antes de repartir
        if not has_enough_phrases(self.phrase_list, self.min_phrases):
            raise InsufficientPhrasesError(self.min_phrases, total_phrase_count(self.phrase_list))
        return self._commit(game.start_new_game(self.state, self.phrase_list, rng=self.rng))

    def reset_card(self):
        return self._commit(game.reset_card(self.state))

    def toggle_space(self, row, col):
        return self._commit(
            game.toggle_space(self.state, row, col, history_limit=self.history_limit)
        )

    def pause_game(self):
        return self._commit(game.pause_game(self.state))

    def resume_game(self):
        return self._commit(game.resume_game(self.state))

    def import_phrases(self, phrase_list):
        logger.info(f"Imported phrase list with {len(phrase_list.categories)} categories")
        return self._commit_phrases(phrase_list)

    def add_phrase(self, text, category):
        return self._commit_phrases(add_phrase(self.phrase_list, text, category))

    def remove_phrase(self, category, phrase_id):
        return self._commit_phrases(remove_phrase(self.phrase_list, category, phrase_id))

    def clear_data(self):
        self.store.clear()
        self._phrase_list = None
        self._state = None

    def dispatch(self, intent, payload=None):
        """Run ``intent`` by name with arguments taken from ``payload``."""
        payload = payload or {}
        if intent not in self.INTENTS:
            raise ValueError(f"Unknown intent: {intent}")
        if intent == 'toggle_space':
            return self.toggle_space(_coordinate(payload, 'row'), _coordinate(payload, 'col'))
        if intent == 'import_phrases':
            self.import_phrases(payload['phrase_list'])
            return self.state
        return getattr(self, intent)()


def _coordinate(payload, key):
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer between 0 and 4")
    return value
