"""Session-backed persistence for the game state and the phrase list.

Anything that fails validation on load is discarded and reported as missing,
so the caller falls back to a fresh game or the default phrase list.
"""

import logging

from .exceptions import MalformedPersistedStateError
from .serializers import restore_game_state, restore_phrase_list

logger = logging.getLogger(__name__)

GAME_STATE_KEY = 'bingo_game_state'
PHRASE_LIST_KEY = 'bingo_phrase_list'


class SessionGameStore:
    def __init__(self, session):
        self.session = session

    def _load(self, key, restore):
        raw = self.session.get(key)
        if raw is None:
            return None
        try:
            return restore(raw)
        except MalformedPersistedStateError as e:
            logger.warning(f"Discarding stored '{key}': {e.errors}")
            del self.session[key]
            return None

    def load(self):
        return self._load(GAME_STATE_KEY, restore_game_state)

    def save(self, state):
        self.session[GAME_STATE_KEY] = state.to_dict()

    def load_phrase_list(self):
        return self._load(PHRASE_LIST_KEY, restore_phrase_list)

    def save_phrase_list(self, phrase_list):
        self.session[PHRASE_LIST_KEY] = phrase_list.to_dict()

    def clear(self):
        for key in (GAME_STATE_KEY, PHRASE_LIST_KEY):
            self.session.pop(key, None)
