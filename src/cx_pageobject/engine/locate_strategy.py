# engine/locate_strategy.py

"""
Reads and switches the driver's process-wide locate strategy.

Switching is a queued driver operation for every strategy. Restoring ahead of
a callback is different: by the time the driver fires the callback the queue
has moved past the point where a queued switch would land, so the field is
written directly instead.
"""

import traceback
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog

from .driver import Driver
from .models import LocateStrategy

logger = structlog.get_logger(__name__)

_SWITCH_METHODS = {
    LocateStrategy.CSS: "use_css",
    LocateStrategy.XPATH: "use_xpath",
    LocateStrategy.RECURSION: "use_recursion",
}


def set_locate_strategy(driver: Any, strategy: Any) -> bool:
    """
    Queues a strategy switch on the driver.

    Returns:
        True if a switch was queued, False when `strategy` is not one of the
        recognised kinds (which leaves the driver untouched).
    """
    desired = LocateStrategy.coerce(strategy)
    if desired is None:
        logger.debug("Ignoring unrecognised locate strategy.", strategy=strategy)
        return False
    getattr(driver, _SWITCH_METHODS[desired])()
    return True


def get_locate_strategy(driver: Any) -> Optional[str]:
    return getattr(driver, "locate_strategy", None)


class RestoreToken:
    """
    Handle for putting the strategy back to the value captured before an
    invocation. A callback that takes over restoration calls `defer()` up
    front and `restore()` once the driver finally runs it.
    """

    def __init__(self, session: "DriverSession", previous: Optional[str]):
        self.session = session
        self.previous = previous
        self.deferred = False
        self.restored = False

    def defer(self) -> None:
        self.deferred = True

    def restore(self) -> None:
        """Writes the captured strategy straight into the driver. Runs once."""
        if self.restored:
            return
        self.restored = True
        self.session.restore_now(self.previous)


class DriverSession:
    """
    Explicit locate-strategy state for one shared driver.

    Every wrapped command of a page and its sections goes through the same
    session, so switching and restoring always happens against one driver.
    """

    def __init__(self, driver: Driver):
        if driver is None:
            raise ValueError("A driver is required for DriverSession.")
        self.driver = driver

    @property
    def current(self) -> Optional[str]:
        return get_locate_strategy(self.driver)

    def switch(self, strategy: Any) -> bool:
        return set_locate_strategy(self.driver, strategy)

    def restore_now(self, strategy: Optional[str]) -> None:
        self.driver.locate_strategy = strategy

    @contextmanager
    def scoped(self, strategy: Any) -> Iterator[RestoreToken]:
        """
        Switches to `strategy` for the duration of the block.

        On exit the previous strategy is queued back unless the yielded token
        was deferred to a callback. If the block raises, the callback may never
        fire, so the previous strategy is queued back regardless.
        """
        token = RestoreToken(self, self.current)
        self.switch(strategy)
        try:
            yield token
        except BaseException:
            if not token.restored:
                self.switch(token.previous)
            raise
        if not token.deferred:
            self.switch(token.previous)

    def record_failure(self, error: BaseException) -> None:
        """Counts the failure against the run and logs its diagnostic."""
        self.driver.error_count = getattr(self.driver, "error_count", 0) + 1
        diagnostic = "".join(
            traceback.format_exception_only(type(error), error)
        ) + "".join(traceback.format_stack()[:-1])
        error_log = getattr(self.driver, "error_log", None)
        if error_log is None:
            error_log = []
            self.driver.error_log = error_log
        error_log.append(diagnostic)
        logger.error(
            "Recorded page-object failure.",
            error=str(error),
            error_count=self.driver.error_count,
        )
