"""
Detections Core - Recent Detection History.

Provides the bounded, newest-first detection feed.
"""

from detectors.interfaces import DetectionEvent, InvalidInput, PersistenceInterface


def parse_limit(raw_limit) -> int:
    """
    Converts a limit given as int or query-string text into a positive int.

    Raises:
        InvalidInput: If the value is not an integer or is not positive.
    """
    if isinstance(raw_limit, bool):
        raise InvalidInput("limit must be a positive integer")
    if isinstance(raw_limit, str):
        try:
            raw_limit = int(raw_limit.strip())
        except ValueError as e:
            raise InvalidInput(f"limit {raw_limit!r} is not an integer") from e
    if not isinstance(raw_limit, int):
        raise InvalidInput("limit must be a positive integer")
    if raw_limit <= 0:
        raise InvalidInput(f"limit must be positive, got {raw_limit}")
    return raw_limit


def recent_detections(store: PersistenceInterface, limit) -> list[DetectionEvent]:
    """
    Returns the most recent detection events, newest first.

    Args:
        store: Detection store to read.
        limit: Number of events wanted; must be a positive integer.

    Returns:
        Up to ``limit`` events ordered by detected_at descending, ties by
        id descending.

    Raises:
        InvalidInput: If ``limit`` is not a positive integer.
        UnavailableError: If the store cannot be read.
    """
    return store.fetch_recent(parse_limit(limit))
