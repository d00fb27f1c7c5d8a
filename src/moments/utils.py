import time
from datetime import UTC, datetime


def now() -> datetime:
    return datetime.now(UTC)


def epoch_seconds() -> int:
    """Current Unix time in whole seconds."""
    return int(time.time())
