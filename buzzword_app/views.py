import json
import logging

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.contrib import messages
from django.http import JsonResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods

from .consumers import board_group_name
from .controller import GameController
from .exceptions import BingoError, DuplicatePhraseError, InsufficientPhrasesError
from .forms import AddPhraseForm, ImportPhrasesForm
from .game import GameStatus, share_summary
from .patterns import WINNING_PATTERNS, get_pattern_description
from .phrases import has_enough_phrases, total_phrase_count
from .serializers import export_phrase_list, parse_phrase_import
from .storage import SessionGameStore

logger = logging.getLogger(__name__)

# Acciones que se pueden enviar desde el formulario del cartón
BOARD_ACTIONS = ('new_game', 'reset_card', 'toggle_space', 'pause_game', 'resume_game')


def get_controller(request):
    return GameController(
        SessionGameStore(request.session),
        history_limit=settings.BINGO_HISTORY_LIMIT,
        min_phrases=settings.BINGO_MIN_PHRASES,
    )


def notify_board(request, state):
    """Push the new snapshot to every socket open on this browser session."""
    session_key = request.session.session_key
    channel_layer = get_channel_layer()
    if not session_key or channel_layer is None:
        return
    async_to_sync(channel_layer.group_send)(
        board_group_name(session_key),
        {
            'type': 'game_state',
            'state': state.to_dict(),
        }
    )


def board_signature(state):
    """Card id, status and marked cells; the board script builds the same string."""
    marked = [
        str(row * 5 + col)
        for row, cells in enumerate(state.card.grid)
        for col, cell in enumerate(cells)
        if cell.marked
    ]
    return f"{state.card.id}|{state.status.value}|{','.join(marked)}"


def download(data, filename):
    response = JsonResponse(data, json_dumps_params={'indent': 2})
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@require_http_methods(["GET", "POST"])
def board(request):
    controller = get_controller(request)

    if request.method == 'POST':
        action = request.POST.get('action')
        if action not in BOARD_ACTIONS:
            messages.error(request, 'Unknown action')
            return redirect('board')

        was_won = controller.state.status == GameStatus.WON
        try:
            payload = {}
            if action == 'toggle_space':
                payload = {'row': int(request.POST.get('row', '')), 'col': int(request.POST.get('col', ''))}
            state = controller.dispatch(action, payload)
        except InsufficientPhrasesError as e:
            logger.info(f"New game blocked: {e}")
            messages.error(
                request,
                f"You need at least {e.required} phrases to play Bingo. Add more phrases!"
            )
        except ValueError as e:
            messages.error(request, f"Invalid move: {e}")
        else:
            notify_board(request, state)
            if state.status == GameStatus.WON and not was_won:
                messages.success(request, f"BINGO! {state.winning_pattern.name}")
        return redirect('board')

    state = controller.state
    return render(request, 'buzzword_app/board.html', {
        'state': state,
        'card': state.card,
        'board_signature': board_signature(state),
        'pattern_description': get_pattern_description(state.winning_pattern),
        'patterns': WINNING_PATTERNS,
        'has_enough_phrases': has_enough_phrases(controller.phrase_list, settings.BINGO_MIN_PHRASES),
        'min_phrases': settings.BINGO_MIN_PHRASES,
    })


@require_http_methods(["GET", "POST"])
def phrase_manager(request):
    controller = get_controller(request)

    if request.method == 'POST':
        form = AddPhraseForm(request.POST, phrase_list=controller.phrase_list)
        if form.is_valid():
            try:
                controller.add_phrase(form.cleaned_data['text'], form.cleaned_data['category_name'])
            except DuplicatePhraseError:
                form.add_error(None, 'Duplicate phrase in category.')
            else:
                messages.success(request, 'Phrase added')
                return redirect('phrase_manager')
    else:
        form = AddPhraseForm(phrase_list=controller.phrase_list)

    phrase_list = controller.phrase_list
    return render(request, 'buzzword_app/phrases.html', {
        'form': form,
        'import_form': ImportPhrasesForm(),
        'phrase_list': phrase_list,
        'total_phrases': total_phrase_count(phrase_list),
        'has_enough_phrases': has_enough_phrases(phrase_list, settings.BINGO_MIN_PHRASES),
        'min_phrases': settings.BINGO_MIN_PHRASES,
    })


@require_http_methods(["POST"])
def delete_phrase(request):
    # Nombre e id van en el cuerpo: son texto libre y pueden contener '/'
    category = request.POST.get('category', '')
    phrase_id = request.POST.get('phrase_id', '')
    get_controller(request).remove_phrase(category, phrase_id)
    messages.success(request, 'Phrase deleted')
    return redirect('phrase_manager')


@require_http_methods(["POST"])
def import_phrases(request):
    form = ImportPhrasesForm(request.POST, request.FILES)
    if form.is_valid():
        phrase_list = form.cleaned_data['phrase_list']
        get_controller(request).import_phrases(phrase_list)
        messages.success(request, f"Imported {total_phrase_count(phrase_list)} phrases")
    else:
        for field, errors in form.errors.items():
            for error in errors:
                messages.error(request, error)
    return redirect('phrase_manager')


def export_phrases(request):
    return download(export_phrase_list(get_controller(request).phrase_list), 'bingo-phrases.json')


def statistics(request):
    state = get_controller(request).state
    return render(request, 'buzzword_app/statistics.html', {
        'state': state,
        'statistics': state.statistics,
        'win_rate_percent': round(state.statistics.win_rate * 100),
    })


def export_statistics(request):
    return download(get_controller(request).state.statistics.to_dict(), 'bingo-statistics.json')


def export_card(request):
    return download(get_controller(request).state.card.to_dict(), 'bingo-card.json')


def share_result(request):
    return JsonResponse({'text': share_summary(get_controller(request).state)})


@require_http_methods(["POST"])
def clear_data(request):
    get_controller(request).clear_data()
    messages.info(request, 'Saved game and phrases cleared')
    return redirect('board')


# JSON API

def state_api(request):
    controller = get_controller(request)
    state = controller.state
    return JsonResponse({
        'success': True,
        'state': state.to_dict(),
        'description': get_pattern_description(state.winning_pattern),
        'phrase_count': total_phrase_count(controller.phrase_list),
        'has_enough_phrases': has_enough_phrases(controller.phrase_list, settings.BINGO_MIN_PHRASES),
    })


@require_http_methods(["POST"])
def intent_api(request, intent):
    try:
        payload = json.loads(request.body or b'{}')
    except json.JSONDecodeError:
        return JsonResponse({'success': False, 'error': 'Invalid JSON format'}, status=400)
    if not isinstance(payload, dict):
        return JsonResponse({'success': False, 'error': 'Expected a JSON object'}, status=400)

    controller = get_controller(request)
    try:
        if intent == 'import_phrases':
            payload = {'phrase_list': parse_phrase_import(payload)}
        state = controller.dispatch(intent, payload)
    except (BingoError, ValueError) as e:
        logger.info(f"Intent '{intent}' rejected: {e}")
        return JsonResponse({'success': False, 'error': str(e)}, status=400)

    notify_board(request, state)
    return JsonResponse({
        'success': True,
        'state': state.to_dict(),
        'description': get_pattern_description(state.winning_pattern),
    })
