import json
import logging

from rest_framework import serializers

from .cards import Card, Cell, CellKind, validate_bingo_card
from .exceptions import ImportParseError, MalformedPersistedStateError
from .game import (
    GameHistoryEntry,
    GameState,
    GameStatus,
    PatternStats,
    SessionStats,
    Statistics,
    WinStreak,
    new_statistics,
)
from .patterns import PATTERNS_BY_NAME, PatternType
from .phrases import Phrase, PhraseCategory, PhraseList
from .utils import isoformat

logger = logging.getLogger(__name__)

PHRASE_EXPORT_VERSION = 1


# Phrase lists

class PhraseSerializer(serializers.Serializer):
    id = serializers.CharField()
    text = serializers.CharField(trim_whitespace=False)
    category = serializers.CharField(trim_whitespace=False)
    frequency = serializers.IntegerField(min_value=0)


class PhraseCategorySerializer(serializers.Serializer):
    name = serializers.CharField(trim_whitespace=False)
    phrases = PhraseSerializer(many=True)


class PhraseListSerializer(serializers.Serializer):
    categories = PhraseCategorySerializer(many=True)

    def create(self, validated_data):
        return build_phrase_list_from_data(validated_data)


class PhraseExportSerializer(serializers.Serializer):
    """Envelope used by phrase list export and import files."""
    phrases = PhraseListSerializer()
    created = serializers.CharField(required=False)
    version = serializers.IntegerField(required=False, min_value=1)

    def create(self, validated_data):
        return build_phrase_list_from_data(validated_data['phrases'])


def build_phrase_list_from_data(data):
    return PhraseList(categories=tuple(
        PhraseCategory(
            name=category['name'],
            phrases=tuple(Phrase(**phrase) for phrase in category['phrases']),
        )
        for category in data['categories']
    ))


# Cards

class CellSerializer(serializers.Serializer):
    text = serializers.CharField(allow_blank=True, trim_whitespace=False)
    marked = serializers.BooleanField()
    row = serializers.IntegerField(min_value=0, max_value=4)
    col = serializers.IntegerField(min_value=0, max_value=4)
    kind = serializers.ChoiceField(choices=[kind.value for kind in CellKind])


class CardSerializer(serializers.Serializer):
    id = serializers.CharField()
    grid = serializers.ListField(child=serializers.ListField(child=CellSerializer()))
    created_at = serializers.IntegerField(min_value=0)

    def validate(self, attrs):
        errors = validate_bingo_card(build_card_from_data(attrs))
        if errors:
            raise serializers.ValidationError({'grid': errors})
        return attrs

    def create(self, validated_data):
        return build_card_from_data(validated_data)


def build_card_from_data(data):
    grid = tuple(
        tuple(
            Cell(
                text=cell['text'],
                marked=cell['marked'],
                row=cell['row'],
                col=cell['col'],
                kind=CellKind(cell['kind']),
            )
            for cell in row
        )
        for row in data['grid']
    )
    return Card(id=data['id'], grid=grid, created_at=data['created_at'])


# Winning patterns are restored from the catalog by name

class PositionSerializer(serializers.Serializer):
    row = serializers.IntegerField(min_value=0, max_value=4)
    col = serializers.IntegerField(min_value=0, max_value=4)


class WinningPatternSerializer(serializers.Serializer):
    name = serializers.ChoiceField(choices=list(PATTERNS_BY_NAME))
    type = serializers.ChoiceField(choices=[kind.value for kind in PatternType], required=False)
    positions = PositionSerializer(many=True, required=False)

    def validate(self, attrs):
        pattern = PATTERNS_BY_NAME[attrs['name']]
        if 'type' in attrs and attrs['type'] != pattern.type.value:
            raise serializers.ValidationError(f"Pattern '{pattern.name}' is not of type {attrs['type']}")
        if 'positions' in attrs:
            positions = tuple((pos['row'], pos['col']) for pos in attrs['positions'])
            if positions != pattern.positions:
                raise serializers.ValidationError(f"Positions do not match pattern '{pattern.name}'")
        return attrs


# Statistics

class WinStreakSerializer(serializers.Serializer):
    current = serializers.IntegerField(min_value=0)
    best = serializers.IntegerField(min_value=0)
    start_date = serializers.CharField(allow_blank=True)


class PatternStatsSerializer(serializers.Serializer):
    rows = serializers.ListField(child=serializers.IntegerField(min_value=0), min_length=5, max_length=5)
    columns = serializers.ListField(child=serializers.IntegerField(min_value=0), min_length=5, max_length=5)
    main_diagonal = serializers.IntegerField(min_value=0)
    anti_diagonal = serializers.IntegerField(min_value=0)
    corners = serializers.IntegerField(min_value=0)


class SessionStatsSerializer(serializers.Serializer):
    session_start = serializers.CharField(allow_blank=True)
    games_played = serializers.IntegerField(min_value=0)
    wins = serializers.IntegerField(min_value=0)
    time_spent = serializers.IntegerField(min_value=0)


class GameHistoryEntrySerializer(serializers.Serializer):
    card_id = serializers.CharField()
    timestamp = serializers.CharField()
    won = serializers.BooleanField()
    pattern_name = serializers.CharField(allow_blank=True)
    time_to_complete = serializers.IntegerField(min_value=0)
    spaces_marked = serializers.IntegerField(min_value=0)


class StatisticsSerializer(serializers.Serializer):
    games_played = serializers.IntegerField(min_value=0)
    wins = serializers.IntegerField(min_value=0)
    win_rate = serializers.FloatField(min_value=0)
    win_streak = WinStreakSerializer()
    pattern_stats = PatternStatsSerializer()
    session = SessionStatsSerializer()
    history = GameHistoryEntrySerializer(many=True)
    avg_game_time = serializers.FloatField(min_value=0)
    fastest_win_time = serializers.IntegerField(min_value=0)
    avg_spaces_marked = serializers.FloatField(min_value=0)
    last_winning_pattern = serializers.CharField(allow_blank=True)


def build_statistics_from_data(data):
    return Statistics(
        games_played=data['games_played'],
        wins=data['wins'],
        win_rate=data['win_rate'],
        win_streak=WinStreak(**data['win_streak']),
        pattern_stats=PatternStats(
            rows=tuple(data['pattern_stats']['rows']),
            columns=tuple(data['pattern_stats']['columns']),
            main_diagonal=data['pattern_stats']['main_diagonal'],
            anti_diagonal=data['pattern_stats']['anti_diagonal'],
            corners=data['pattern_stats']['corners'],
        ),
        session=SessionStats(**data['session']),
        history=tuple(GameHistoryEntry(**entry) for entry in data['history']),
        avg_game_time=data['avg_game_time'],
        fastest_win_time=data['fastest_win_time'],
        avg_spaces_marked=data['avg_spaces_marked'],
        last_winning_pattern=data['last_winning_pattern'],
    )


# Game state

class GameStateSerializer(serializers.Serializer):
    card = CardSerializer()
    status = serializers.ChoiceField(choices=[status.value for status in GameStatus])
    winning_pattern = WinningPatternSerializer(allow_null=True, required=False)
    games_played = serializers.IntegerField(min_value=0)
    wins = serializers.IntegerField(min_value=0)
    statistics = StatisticsSerializer(required=False)
    started_at = serializers.FloatField(allow_null=True, required=False)
    paused_at = serializers.FloatField(allow_null=True, required=False)

    def validate(self, attrs):
        if attrs['status'] == GameStatus.WON.value and not attrs.get('winning_pattern'):
            raise serializers.ValidationError({'winning_pattern': 'A won game needs its winning pattern'})
        return attrs

    def create(self, validated_data):
        pattern_data = validated_data.get('winning_pattern')
        if 'statistics' in validated_data:
            statistics = build_statistics_from_data(validated_data['statistics'])
        else:
            statistics = new_statistics()
        return GameState(
            card=build_card_from_data(validated_data['card']),
            status=GameStatus(validated_data['status']),
            winning_pattern=PATTERNS_BY_NAME[pattern_data['name']] if pattern_data else None,
            games_played=validated_data['games_played'],
            wins=validated_data['wins'],
            statistics=statistics,
            started_at=validated_data.get('started_at'),
            paused_at=validated_data.get('paused_at'),
        )


def restore_game_state(data):
    """Validate a stored payload and rebuild the GameState, or raise."""
    serializer = GameStateSerializer(data=data)
    if not serializer.is_valid():
        raise MalformedPersistedStateError(serializer.errors)
    return serializer.save()


def restore_phrase_list(data):
    serializer = PhraseListSerializer(data=data)
    if not serializer.is_valid():
        raise MalformedPersistedStateError(serializer.errors)
    return serializer.save()


def export_phrase_list(phrase_list, now=None):
    return {
        'phrases': phrase_list.to_dict(),
        'created': isoformat(now),
        'version': PHRASE_EXPORT_VERSION,
    }


def parse_phrase_import(raw):
    """Parse an uploaded phrase file (bytes, str or already-decoded dict)."""
    if isinstance(raw, bytes):
        try:
            raw = raw.decode('utf-8')
        except UnicodeDecodeError:
            raise ImportParseError('The file must be UTF-8 encoded JSON')
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError:
            raise ImportParseError('The file must be valid JSON')
    if not isinstance(raw, dict) or 'phrases' not in raw:
        raise ImportParseError('Invalid format: missing "phrases"')

    serializer = PhraseExportSerializer(data=raw)
    if not serializer.is_valid():
        logger.info(f"Rejected phrase import: {serializer.errors}")
        raise ImportParseError(f"Invalid phrase list: {serializer.errors}")
    return serializer.save()
