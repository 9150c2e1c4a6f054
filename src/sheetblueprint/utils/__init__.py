import logging

logger = logging.getLogger(__name__)
_warned_keys = set()


def warn_once(key: str, message: str, registry: set[str] | None = None):
    """Log ``message`` once per ``key``.

    ``registry`` scopes the keys; the process-wide set is used without one.
    """
    seen = _warned_keys if registry is None else registry
    if key not in seen:
        logger.warning(message)
        seen.add(key)


def longest_line_length(text: object) -> int:
    """Length of the longest line of ``text``; 0 for empty text."""
    return max(len(line) for line in str(text).split("\n"))


def line_count(text: object) -> int:
    return len(str(text).split("\n"))
