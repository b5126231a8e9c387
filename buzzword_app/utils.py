import random
import string
import time
from datetime import datetime, timezone

_BASE36 = string.digits + string.ascii_lowercase


def get_random(rng=None):
    """Devuelve el generador recibido o uno nuevo, sin tocar el PRNG global."""
    if rng is None:
        return random.Random()
    return rng


def now_seconds(now=None):
    return time.time() if now is None else now


def epoch_millis(now=None):
    return int(now_seconds(now) * 1000)


def isoformat(now=None):
    return datetime.fromtimestamp(now_seconds(now), tz=timezone.utc).isoformat()


def generate_card_id(rng=None, now=None):
    """Timestamp plus a random suffix; unique enough within one session."""
    rng = get_random(rng)
    suffix = ''.join(rng.choice(_BASE36) for _ in range(8))
    return f"card_{epoch_millis(now)}_{suffix}"
