import json

import pytest

from buzzword_app import game
from buzzword_app.exceptions import ImportParseError, MalformedPersistedStateError
from buzzword_app.phrases import DEFAULT_PHRASE_LIST
from buzzword_app.serializers import (
    export_phrase_list,
    parse_phrase_import,
    restore_game_state,
    restore_phrase_list,
)

from .conftest import START


def won_state(state):
    for col in range(5):
        state = game.toggle_space(state, 0, col, now=START + 30)
    return state


def test_game_state_survives_storage(state):
    state = won_state(state)
    restored = restore_game_state(json.loads(json.dumps(state.to_dict())))
    assert restored == state
    assert restored.winning_pattern is state.winning_pattern


def test_missing_statistics_are_rebuilt(state):
    data = state.to_dict()
    del data['statistics']
    restored = restore_game_state(data)
    assert restored.statistics.games_played == 1
    assert restored.card == state.card


def test_won_state_needs_pattern(state):
    data = won_state(state).to_dict()
    data['winning_pattern'] = None
    with pytest.raises(MalformedPersistedStateError) as excinfo:
        restore_game_state(data)
    assert 'winning_pattern' in excinfo.value.errors


def test_unknown_pattern_rejected(state):
    data = won_state(state).to_dict()
    data['winning_pattern']['name'] = 'Zigzag'
    with pytest.raises(MalformedPersistedStateError):
        restore_game_state(data)


def test_pattern_positions_must_match_catalog(state):
    data = won_state(state).to_dict()
    data['winning_pattern']['positions'][0] = {'row': 4, 'col': 4}
    with pytest.raises(MalformedPersistedStateError):
        restore_game_state(data)


def test_short_grid_rejected(state):
    data = state.to_dict()
    data['card']['grid'] = data['card']['grid'][:4]
    with pytest.raises(MalformedPersistedStateError) as excinfo:
        restore_game_state(data)
    assert 'card' in excinfo.value.errors


def test_duplicate_phrases_rejected(state):
    data = state.to_dict()
    data['card']['grid'][0][1]['text'] = data['card']['grid'][0][0]['text']
    with pytest.raises(MalformedPersistedStateError):
        restore_game_state(data)


def test_unmarked_free_rejected(state):
    data = state.to_dict()
    data['card']['grid'][2][2]['marked'] = False
    with pytest.raises(MalformedPersistedStateError):
        restore_game_state(data)


def test_garbage_rejected():
    with pytest.raises(MalformedPersistedStateError):
        restore_game_state({'status': 'DANCING'})
    with pytest.raises(MalformedPersistedStateError):
        restore_phrase_list({'categories': 'nope'})


def test_phrase_list_restore():
    assert restore_phrase_list(DEFAULT_PHRASE_LIST.to_dict()) == DEFAULT_PHRASE_LIST


def test_export_envelope():
    exported = export_phrase_list(DEFAULT_PHRASE_LIST, now=0)
    assert exported['version'] == 1
    assert exported['created'] == '1970-01-01T00:00:00+00:00'
    assert exported['phrases'] == DEFAULT_PHRASE_LIST.to_dict()


def test_import_accepts_exported_file():
    raw = json.dumps(export_phrase_list(DEFAULT_PHRASE_LIST)).encode('utf-8')
    assert parse_phrase_import(raw) == DEFAULT_PHRASE_LIST


def test_import_without_envelope_metadata():
    assert parse_phrase_import({'phrases': DEFAULT_PHRASE_LIST.to_dict()}) == DEFAULT_PHRASE_LIST


@pytest.mark.parametrize('raw, message', [
    (b'\xff\xfe\x00', 'The file must be UTF-8 encoded JSON'),
    ('{not json', 'The file must be valid JSON'),
    ('[]', 'Invalid format: missing "phrases"'),
    ({'categories': []}, 'Invalid format: missing "phrases"'),
])
def test_import_errors(raw, message):
    with pytest.raises(ImportParseError, match=message):
        parse_phrase_import(raw)


def test_import_invalid_phrase_list():
    with pytest.raises(ImportParseError, match='Invalid phrase list'):
        parse_phrase_import({'phrases': {'categories': [{'name': 'A', 'phrases': [{'text': 'x'}]}]}})
