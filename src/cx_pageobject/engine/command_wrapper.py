# engine/command_wrapper.py

"""
Wraps driver commands and assertions so they can be aimed at named elements
and sections of a page object.

A call such as `page.click("@submitButton")` is turned into
`driver.click("#submit")` with the element's locate strategy switched on
around it. Elements nested inside sections are handed to the driver as their
full ancestor chain with the `recursion` strategy, and the driver walks the
chain itself.

Ordering assumption: the driver queues commands and runs them in strict FIFO
order. The strategy switch, the command and the queued restore are enqueued
back to back, so no other targeted command can interleave between them.
Commands that take a callback run the callback later, once the queue reaches
them; for those the restore is written directly inside the callback instead.
"""

from typing import Any, Callable, List, Optional

import structlog

from ..config import Settings
from .ancestors import ancestor_chain
from .locate_strategy import DriverSession, RestoreToken
from .models import (
    SECTION_ASSERTION,
    CommandKind,
    CommandSpec,
    LocateStrategy,
    Section,
    TargetDescriptor,
    TargetRef,
)
from .selector_resolver import as_target_ref, resolve_element, resolve_section

logger = structlog.get_logger(__name__)


class StrategyRestoringCallback:
    """
    Stands in for a user callback. When the driver finally calls it, the
    locate strategy captured before the command is written back first, then
    the original callback runs with the arguments the driver supplied.
    """

    def __init__(self, callback: Callable[..., Any], token: RestoreToken):
        self.callback = callback
        self.token = token
        self.__wrapped__ = callback

    def __call__(self, *args, **kwargs):
        self.token.restore()
        return self.callback(*args, **kwargs)


def find_callback_index(args: List[Any], position: Optional[int] = None) -> int:
    """
    Returns the index of the callback in `args`, or -1.

    With an explicit `position` only that slot is checked. Otherwise the last
    argument is checked, then the second to last (waitFor-style commands
    accept a message after the callback).
    """
    if not args:
        return -1
    if position is not None:
        index = position if position >= 0 else len(args) + position
        if 0 <= index < len(args) and callable(args[index]):
            return index
        return -1
    for index in (len(args) - 1, len(args) - 2):
        if index >= 0 and callable(args[index]):
            return index
    return -1


class WrappedCommand:
    """
    The callable attached to a page or section for one registered command.

    `container` is the page or section the command was registered on; it is
    both the namespace for target lookups and the value returned for chaining.
    """

    def __init__(
        self,
        container: Section,
        spec: CommandSpec,
        session: DriverSession,
        settings: Optional[Settings] = None,
    ):
        self.container = container
        self.spec = spec
        self.session = session
        self.settings = settings or Settings()
        self.__name__ = spec.name
        self.__doc__ = getattr(spec.fn, "__doc__", None)

    @property
    def name(self) -> str:
        return self.spec.name

    @property
    def kind(self) -> CommandKind:
        return self.spec.kind

    def __repr__(self) -> str:
        return (
            f"<WrappedCommand {self.kind.value}:{self.name} "
            f"on {self.container.name!r}>"
        )

    def __call__(self, *args, **kwargs):
        args = list(args)
        ref = as_target_ref(args[0], self.settings.target_sigil) if args else None
        if ref is None:
            return self._result(self.spec.fn(*args, **kwargs))

        args.pop(0)
        target = self._resolve(ref)
        chain = ancestor_chain(target)
        if len(chain) == 1:
            first_arg: Any = target.selector
            strategy: Any = target.locate_strategy
        else:
            first_arg = chain
            strategy = LocateStrategy.RECURSION.value
        args.insert(0, first_arg)

        log = logger.bind(command=self.name, target=str(ref))
        log.debug(
            "Dispatching targeted command.",
            strategy=strategy,
            chain_length=len(chain),
        )

        with self.session.scoped(strategy) as token:
            index = find_callback_index(args, self.spec.callback_position)
            if index != -1:
                args[index] = StrategyRestoringCallback(args[index], token)
                token.defer()
                log.debug("Strategy restore deferred to callback.", position=index)
            result = self.spec.fn(*args, **kwargs)

        return self._result(result)

    def _resolve(self, ref: TargetRef) -> TargetDescriptor:
        if self.kind is CommandKind.EXPECT and self.name == SECTION_ASSERTION:
            return resolve_section(self.container, ref)
        return resolve_element(self.container, ref)

    def _result(self, result: Any) -> Any:
        if self.spec.returns_result:
            return result
        return self.container


def make_wrapped_command(
    container: Section,
    spec: CommandSpec,
    session: DriverSession,
    settings: Optional[Settings] = None,
) -> WrappedCommand:
    return WrappedCommand(container, spec, session, settings)
