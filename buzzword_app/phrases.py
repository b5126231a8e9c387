"""Phrase pool: categorised phrases, de-duplication and random sampling."""

import logging
import re
from dataclasses import dataclass, field, replace

from .exceptions import DuplicatePhraseError, InsufficientPhrasesError
from .utils import epoch_millis, get_random

logger = logging.getLogger(__name__)

FREE_SYNONYM_RE = re.compile(r'^free(\s+space)?$', re.IGNORECASE)

MIN_PHRASES = 24


@dataclass(frozen=True)
class Phrase:
    id: str
    text: str
    category: str
    frequency: int = 1

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'category': self.category,
            'frequency': self.frequency,
        }


@dataclass(frozen=True)
class PhraseCategory:
    name: str
    phrases: tuple = field(default_factory=tuple)

    def to_dict(self):
        return {
            'name': self.name,
            'phrases': [phrase.to_dict() for phrase in self.phrases],
        }


@dataclass(frozen=True)
class PhraseList:
    categories: tuple = field(default_factory=tuple)

    def get_category(self, name):
        for category in self.categories:
            if category.name == name:
                return category
        return None

    @property
    def category_names(self):
        return [category.name for category in self.categories]

    def to_dict(self):
        return {'categories': [category.to_dict() for category in self.categories]}


def build_phrase_list(mapping):
    """Build a PhraseList from ``{category: [text, ...]}`` keeping insertion order."""
    categories = []
    for name, texts in mapping.items():
        slug = re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-')
        phrases = tuple(
            Phrase(id=f"{slug}-{index}", text=text, category=name)
            for index, text in enumerate(texts, start=1)
        )
        categories.append(PhraseCategory(name=name, phrases=phrases))
    return PhraseList(categories=tuple(categories))


def flatten_phrase_list(phrase_list):
    return [phrase for category in phrase_list.categories for phrase in category.phrases]


def total_phrase_count(phrase_list):
    return sum(len(category.phrases) for category in phrase_list.categories)


def has_enough_phrases(phrase_list, minimum=MIN_PHRASES):
    return total_phrase_count(phrase_list) >= minimum


def normalize_phrase_text(text):
    return text.strip().lower()


def is_free_synonym(text):
    return bool(FREE_SYNONYM_RE.match(text.strip()))


def unique_eligible_phrases(phrase_list):
    """Flatten, drop "free"/"free space" and de-duplicate by exact text (first wins)."""
    seen = set()
    unique = []
    for phrase in flatten_phrase_list(phrase_list):
        if is_free_synonym(phrase.text) or phrase.text in seen:
            continue
        seen.add(phrase.text)
        unique.append(phrase)
    return unique


def shuffle_phrases(phrases, rng=None):
    """Fisher-Yates over a copy of ``phrases``."""
    rng = get_random(rng)
    shuffled = list(phrases)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def select_random_phrases(phrase_list, count, rng=None):
    candidates = unique_eligible_phrases(phrase_list)
    if len(candidates) < count:
        raise InsufficientPhrasesError(count, len(candidates))
    return shuffle_phrases(candidates, rng)[:count]


def validate_phrase_selection(phrases, count):
    return len(phrases) == count and len({phrase.text for phrase in phrases}) == count


def find_duplicate(phrase_list, text, category):
    existing = phrase_list.get_category(category)
    if existing is None:
        return None
    wanted = normalize_phrase_text(text)
    for phrase in existing.phrases:
        if normalize_phrase_text(phrase.text) == wanted:
            return phrase
    return None


def add_phrase(phrase_list, text, category, phrase_id=None, now=None):
    """Return a new PhraseList with ``text`` appended to ``category``.

    The category is created when it does not exist yet. Duplicates are
    detected case-insensitively inside the target category only.
    """
    text = text.strip()
    category = category.strip()
    if find_duplicate(phrase_list, text, category) is not None:
        raise DuplicatePhraseError(text, category)

    new_phrase = Phrase(
        id=phrase_id or str(epoch_millis(now)),
        text=text,
        category=category,
        frequency=1,
    )

    if phrase_list.get_category(category) is None:
        categories = phrase_list.categories + (PhraseCategory(name=category, phrases=(new_phrase,)),)
    else:
        categories = tuple(
            replace(cat, phrases=cat.phrases + (new_phrase,)) if cat.name == category else cat
            for cat in phrase_list.categories
        )
    logger.debug(f"Added phrase '{text}' to category '{category}'")
    return replace(phrase_list, categories=categories)


def _without_first(phrases, phrase_id):
    for index, phrase in enumerate(phrases):
        if phrase.id == phrase_id:
            return phrases[:index] + phrases[index + 1:]
    return phrases


def remove_phrase(phrase_list, category, phrase_id):
    """Drop the first phrase with ``phrase_id``; imported lists may repeat ids."""
    categories = tuple(
        replace(cat, phrases=_without_first(cat.phrases, phrase_id))
        if cat.name == category else cat
        for cat in phrase_list.categories
    )
    return replace(phrase_list, categories=categories)


DEFAULT_PHRASE_LIST = build_phrase_list({
    'Meetings': [
        "Let's take this offline",
        'Can everyone see my screen?',
        "You're on mute",
        'Circle back',
        'Hard stop',
        'Quick sync',
        'Parking lot',
        'Action items',
        'Per my last email',
        'Sorry, go ahead',
    ],
    'Strategy': [
        'Synergy',
        'Move the needle',
        'Low-hanging fruit',
        'Paradigm shift',
        'Think outside the box',
        'Deep dive',
        'North star',
        'Value add',
        'Best practice',
        'Game changer',
    ],
    'Delivery': [
        'Bandwidth',
        'Deliverables',
        'Scope creep',
        'Blocker',
        'Pivot',
        'Touch base',
        'Deadline',
        'Stakeholders',
        'Roadmap',
        'Leverage',
    ],
    'Culture': [
        'Win-win',
        'Open door policy',
        'Thought leader',
        'Rockstar',
        'Work hard, play hard',
        'Team player',
    ],
})
