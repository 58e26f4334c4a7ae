import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

logger = logging.getLogger(__name__)

Probe = Callable[[], Awaitable[bool]]


class Deadline:
    """A wall-clock budget shared by a chain of waits.

    Inner waits take a ``share`` of whatever is left at the moment they start,
    so a slow first step shrinks the later ones instead of extending the whole
    chain past its outer bound.
    """

    def __init__(self, timeout_ms: float, clock: Callable[[], float] = time.monotonic):
        self.timeout_ms = timeout_ms
        self._clock = clock
        self._start = clock()

    @property
    def elapsed_ms(self) -> float:
        return (self._clock() - self._start) * 1000

    @property
    def remaining_ms(self) -> float:
        return max(0.0, self.timeout_ms - self.elapsed_ms)

    @property
    def expired(self) -> bool:
        return self.remaining_ms <= 0

    def share(self, fraction: float = 0.5, cap_ms: Optional[float] = None) -> float:
        slice_ms = self.remaining_ms * fraction
        if cap_ms is not None:
            slice_ms = min(slice_ms, cap_ms)
        return slice_ms

    def __repr__(self) -> str:
        return f"Deadline(timeout_ms={self.timeout_ms}, remaining_ms={self.remaining_ms:.0f})"


async def poll(
    probe: Probe,
    *,
    timeout_ms: Optional[float] = None,
    deadline: Optional[Deadline] = None,
    interval_ms: float = 250,
    label: str = "condition",
) -> bool:
    """Probe until it returns True or the budget runs out.

    The probe always runs at least once, so a condition that already holds
    returns immediately whatever the timeout. Exceptions raised by the probe
    count as "not yet".
    """
    if deadline is None:
        deadline = Deadline(timeout_ms if timeout_ms is not None else 0)

    while True:
        try:
            if await probe():
                return True
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.debug(f"Probe for {label} raised {e.__class__.__name__}: {e}")

        remaining = deadline.remaining_ms
        if remaining <= 0:
            logger.debug(f"Gave up on {label} after {deadline.elapsed_ms:.0f}ms")
            return False
        await asyncio.sleep(min(interval_ms, remaining) / 1000)
