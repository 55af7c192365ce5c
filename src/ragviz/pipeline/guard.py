"""Single-flight guard for the pipeline driver."""

from loguru import logger


class FlightGuard:
    """
    Epoch-tagged single-flight lock.

    At most one unit of pipeline work holds the guard. ``try_acquire`` never
    waits: it returns a token (the current epoch) or None when busy, so
    callers drop the extra trigger instead of queueing it.

    ``invalidate`` (reset, mode switch) bumps the epoch and frees the guard
    immediately. The stale holder's later ``release`` carries an old token
    and is ignored, and its in-flight work can tell it is stale by comparing
    its token with ``epoch``.
    """

    def __init__(self):
        self._epoch = 0
        self._holder: int | None = None

    @property
    def epoch(self) -> int:
        return self._epoch

    @property
    def busy(self) -> bool:
        return self._holder is not None

    def try_acquire(self) -> int | None:
        if self._holder is not None:
            return None
        self._holder = self._epoch
        return self._epoch

    def release(self, token: int) -> bool:
        if self._holder is None or token != self._holder:
            logger.debug(f"Ignoring release of stale token {token} (epoch={self._epoch})")
            return False
        self._holder = None
        return True

    def invalidate(self) -> int:
        self._epoch += 1
        self._holder = None
        return self._epoch
