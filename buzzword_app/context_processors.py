# buzzword_app/context_processors.py
from .storage import GAME_STATE_KEY


def bingo_summary(request):
    # Solo lee lo guardado; no crea una partida nueva en cada página
    stored = request.session.get(GAME_STATE_KEY) if hasattr(request, 'session') else None
    if isinstance(stored, dict):
        return {
            'global_games_played': stored.get('games_played', 0),
            'global_wins': stored.get('wins', 0),
        }
    return {}
