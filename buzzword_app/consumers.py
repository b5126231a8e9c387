import json
import logging

from channels.db import database_sync_to_async
from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings

from .controller import GameController
from .exceptions import BingoError
from .serializers import parse_phrase_import
from .storage import SessionGameStore

logger = logging.getLogger(__name__)


def board_group_name(session_key):
    return f'board_{session_key}'


class BoardConsumer(AsyncWebsocketConsumer):
    """Live board for one browser session.

    Clients send ``{"type": <intent>, ...}`` and receive ``game_state``
    snapshots, both for their own intents and for intents applied from
    other tabs of the same session.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.board_group_name = None

    async def connect(self):
        await self.accept()
        # Cargar (o crear) el estado antes de unirse: la sesión obtiene su clave al guardarse
        state = await self.apply_intent(None, {})
        await self.join_board_group()
        await self.send_state(state)

    async def disconnect(self, close_code):
        if self.board_group_name:
            await self.channel_layer.group_discard(
                self.board_group_name,
                self.channel_name
            )

    async def join_board_group(self):
        if self.board_group_name or self.channel_layer is None:
            return
        session_key = self.scope['session'].session_key
        if session_key:
            self.board_group_name = board_group_name(session_key)
            await self.channel_layer.group_add(
                self.board_group_name,
                self.channel_name
            )

    @database_sync_to_async
    def apply_intent(self, intent, payload):
        session = self.scope['session']
        controller = GameController(
            SessionGameStore(session),
            history_limit=settings.BINGO_HISTORY_LIMIT,
            min_phrases=settings.BINGO_MIN_PHRASES,
        )
        if intent is None:
            state = controller.state
        else:
            if intent == 'import_phrases':
                payload = {'phrase_list': parse_phrase_import(payload)}
            state = controller.dispatch(intent, payload)
        session.save()
        return state.to_dict()

    async def receive(self, text_data):
        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_error('Invalid JSON format')
            return
        if not isinstance(data, dict) or 'type' not in data:
            await self.send_error('Missing message type')
            return

        intent = data.pop('type')
        try:
            state = await self.apply_intent(intent, data)
        except (BingoError, ValueError) as e:
            logger.info(f"Socket intent '{intent}' rejected: {e}")
            await self.send_error(str(e))
            return

        await self.join_board_group()
        if self.board_group_name:
            await self.channel_layer.group_send(
                self.board_group_name,
                {
                    'type': 'game_state',
                    'state': state,
                }
            )
        else:
            await self.send_state(state)

    async def send_state(self, state):
        await self.send(text_data=json.dumps({
            'type': 'game_state',
            'state': state,
        }))

    async def send_error(self, message):
        await self.send(text_data=json.dumps({
            'type': 'error',
            'message': message,
        }))

    # Handlers para mensajes recibidos del grupo
    async def game_state(self, event):
        await self.send_state(event['state'])
