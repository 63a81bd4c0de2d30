import re
import time

_WHITESPACE_RUN = re.compile(r"\s+")


def make_recipe_id(name: str, timestamp_ms: int | None = None) -> str:
    """
    Build a recipe id from its name and creation time.

    Whitespace runs in the name collapse to a single hyphen and the epoch
    milliseconds are appended. Two recipes with the same name created within
    the same millisecond get the same id.
    """
    if timestamp_ms is None:
        timestamp_ms = time.time_ns() // 1_000_000
    return f"{_WHITESPACE_RUN.sub('-', name)}-{timestamp_ms}"
