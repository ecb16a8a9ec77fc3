import asyncio
import logging
from collections.abc import Callable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C")


class Debouncer(Generic[T, C]):
    """Collapse rapid ``schedule`` calls into one call of ``fire`` after a quiet window.

    ``fire`` receives the last scheduled value and the result of the ``context``
    callable passed with it. The context is evaluated when the window elapses,
    not when ``schedule`` is called, so the fired call always sees current state
    (page number, filters) even if it changed while the timer was armed.

    ``fire`` runs synchronously on the event loop. Anything slow it starts
    (a network fetch) should be spawned as its own task so that a later
    ``schedule`` never cancels work already dispatched.
    """

    def __init__(self, fire: Callable[[T, C], None], wait: float = 0.3):
        self._fire = fire
        self.wait = wait
        self._timer: asyncio.Task | None = None
        self._closed = False

    @property
    def pending(self) -> bool:
        return self._timer is not None and not self._timer.done()

    @property
    def closed(self) -> bool:
        return self._closed

    def schedule(self, value: T, context: Callable[[], C]) -> None:
        if self._closed:
            logger.debug("Ignoring schedule on closed debouncer")
            return
        self.cancel()
        self._timer = asyncio.get_running_loop().create_task(self._wait_then_fire(value, context))

    def cancel(self) -> None:
        if self._timer is not None and not self._timer.done():
            self._timer.cancel()
        self._timer = None

    def close(self) -> None:
        self.cancel()
        self._closed = True

    async def wait_idle(self) -> None:
        """Block until the armed timer (if any) has fired or been cancelled."""
        timer = self._timer
        if timer is None:
            return
        try:
            await asyncio.shield(timer)
        except asyncio.CancelledError:
            if not timer.cancelled():
                raise

    async def _wait_then_fire(self, value: T, context: Callable[[], C]) -> None:
        await asyncio.sleep(self.wait)
        self._timer = None
        self._fire(value, context())
