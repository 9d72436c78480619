# engine/driver.py

"""
The boundary with the automation driver.

The driver itself (session handling, browser protocol, the command queue) is
not part of this package. Commands invoked through the engine are appended to
the driver's queue and executed later in strict FIFO order; the engine relies
on that ordering and does not reimplement it.
"""

from typing import Any, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class Driver(Protocol):
    """What the command engine needs from the shared driver/client."""

    # The strategy currently used to interpret selectors. Written directly
    # when a callback has to observe the restored value immediately.
    locate_strategy: Optional[str]

    # Run-level bookkeeping owned by the driver's runtime.
    error_count: int
    error_log: List[str]

    def use_css(self) -> Any:
        """Queues a switch to the `css selector` strategy."""
        ...

    def use_xpath(self) -> Any:
        """Queues a switch to the `xpath` strategy."""
        ...

    def use_recursion(self) -> Any:
        """Queues a switch to chain-based recursive lookup."""
        ...
