"""Creation timestamps for completion responses."""

import time


def get_timestamp() -> int:
    """Return the current Unix time in whole seconds."""
    return int(time.time())
