# engine/registrar.py

"""
Attaches wrapped commands and assertions to pages and sections.

A command catalog maps command names to driver callables. The keys `assert`,
`verify` and `expect` are assertion namespaces whose values are themselves
mappings of assertion name to callable:

    {
        "click": driver.click,
        "waitForElementVisible": CommandSpec(driver.wait_for, callback_position=-2),
        "expect": {"visible": driver.expect_visible, "section": driver.expect_present},
    }

registers `page.click(...)`, `page.waitForElementVisible(...)`,
`page.expect.visible(...)` and `page.expect.section(...)`.
"""

from dataclasses import fields, is_dataclass, replace
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Union

import structlog

from ..config import Settings, load_settings
from .command_wrapper import WrappedCommand, make_wrapped_command
from .exceptions import ConfigurationError, DuplicateCommandError
from .locate_strategy import DriverSession
from .models import CommandKind, CommandSpec, Page, Section

logger = structlog.get_logger(__name__)

Catalog = Dict[str, Any]
CommandLoader = Union[Callable[[Catalog], Mapping[str, Any]], Mapping[str, Any]]


class AssertionNamespace:
    """Holds the wrapped assertions of one kind (`page.expect`, `page.assert_`...)."""

    def __init__(self, kind: CommandKind, container: Section):
        self._kind = kind
        self._container = container
        self._names: list = []

    def __iter__(self) -> Iterator[str]:
        return iter(self._names)

    def __contains__(self, name: str) -> bool:
        return name in self._names

    def __repr__(self) -> str:
        return (
            f"<AssertionNamespace {self._kind.value} on {self._container.name!r}: "
            f"{', '.join(self._names)}>"
        )

    def _attach(self, name: str, command: WrappedCommand) -> None:
        setattr(self, name, command)
        self._names.append(name)


def _to_spec(value: Any, name: str, kind: CommandKind) -> CommandSpec:
    if isinstance(value, CommandSpec):
        return replace(value, name=name, kind=kind)
    if callable(value):
        return CommandSpec(fn=value, name=name, kind=kind)
    raise ConfigurationError(
        f'The command "{name}" must be callable, got {type(value).__name__}.'
    )


def _reject_duplicate(name: str, session: DriverSession) -> None:
    error = DuplicateCommandError(name)
    session.record_failure(error)
    raise error


def _is_occupied(target: Any, name: str) -> bool:
    """True if `name` is already taken on `target`, including unset tree fields."""
    if hasattr(type(target), name):
        return True
    if is_dataclass(target) and name in {f.name for f in fields(target)}:
        return True
    return getattr(target, name, None) is not None


def _attach_command(
    target: Any,
    container: Section,
    spec: CommandSpec,
    session: DriverSession,
    settings: Settings,
) -> WrappedCommand:
    if _is_occupied(target, spec.name):
        _reject_duplicate(spec.name, session)
    command = make_wrapped_command(container, spec, session, settings)
    if isinstance(target, AssertionNamespace):
        target._attach(spec.name, command)
    else:
        setattr(target, spec.name, command)
    return command


def _namespace_for(
    container: Section, kind: CommandKind, session: DriverSession
) -> AssertionNamespace:
    namespace = getattr(container, kind.value, None)
    if namespace is None:
        namespace = AssertionNamespace(kind, container)
        setattr(container, kind.value, namespace)
        if kind is CommandKind.ASSERT:
            # `assert` is a keyword, so attribute access needs an alias.
            setattr(container, "assert_", namespace)
    elif not isinstance(namespace, AssertionNamespace):
        _reject_duplicate(kind.value, session)
    return namespace


def apply_commands(
    container: Section,
    commands: Mapping[str, Any],
    session: DriverSession,
    settings: Optional[Settings] = None,
) -> int:
    """
    Attaches every entry of `commands` to `container`.

    Returns:
        The number of commands and assertions attached.
    """
    settings = settings or Settings()
    attached = 0
    for key, value in commands.items():
        kind = CommandKind.for_namespace(key)
        if kind is None:
            _attach_command(
                container, container, _to_spec(value, key, CommandKind.PLAIN), session, settings
            )
            attached += 1
            continue

        if not isinstance(value, Mapping):
            raise ConfigurationError(
                f'"{key}" is an assertion namespace and must map names to callables.'
            )
        namespace = _namespace_for(container, kind, session)
        for assertion_name, fn in value.items():
            _attach_command(
                namespace, container, _to_spec(fn, assertion_name, kind), session, settings
            )
            attached += 1
    return attached


def _session_for(container: Section, session: Optional[DriverSession]) -> DriverSession:
    if session is not None:
        return session
    driver = container.driver
    if driver is None:
        raise ConfigurationError(
            f'"{container.name}" is not attached to a page with a driver.'
        )
    return DriverSession(driver)


def add_wrapped_commands(
    container: Section,
    command_loader: CommandLoader,
    session: Optional[DriverSession] = None,
    settings: Optional[Settings] = None,
) -> Section:
    """
    Loads the command catalog once and attaches it to `container`.

    `command_loader` is called with an empty catalog to fill and return; a
    ready-made mapping is accepted as well.
    """
    session = _session_for(container, session)
    settings = settings or load_settings()
    commands = command_loader({}) if callable(command_loader) else command_loader
    attached = apply_commands(container, commands, session, settings)
    logger.info("Commands registered.", container=container.name, count=attached)
    return container


def add_wrapped_commands_recursively(
    page: Page,
    command_loader: CommandLoader,
    session: Optional[DriverSession] = None,
    settings: Optional[Settings] = None,
) -> Page:
    """
    Registers the catalog on the page and on every nested section.

    Nested elements are only reachable through the section that owns them,
    so each section needs its own copy of the commands.
    """
    session = _session_for(page, session)
    settings = settings or load_settings()
    for container in (page, *page.iter_sections()):
        add_wrapped_commands(container, command_loader, session, settings)
    return page
