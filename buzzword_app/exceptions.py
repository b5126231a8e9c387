class BingoError(Exception):
    """Base class for every error raised by the bingo engine."""


class InsufficientPhrasesError(BingoError):
    def __init__(self, required, available):
        self.required = required
        self.available = available
        super().__init__(
            f"Not enough unique phrases to fill the card: need at least {required}, "
            f"found {available}"
        )


class DuplicatePhraseError(BingoError):
    def __init__(self, text, category):
        self.text = text
        self.category = category
        super().__init__(f"Duplicate phrase in category '{category}': {text}")


class MalformedPersistedStateError(BingoError):
    """Stored game state or phrase list failed validation."""

    def __init__(self, errors):
        self.errors = errors
        super().__init__(f"Persisted state is malformed: {errors}")


class ImportParseError(BingoError):
    """A phrase list upload could not be parsed or validated."""
