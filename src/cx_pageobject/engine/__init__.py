"""Command dispatch and selector resolution for page objects."""

from .exceptions import (
    ConfigurationError,
    DuplicateCommandError,
    ElementNotFoundError,
    InvalidTargetError,
    NotFoundError,
    PageObjectError,
    SectionNotFoundError,
)
from .models import (
    CommandKind,
    CommandSpec,
    Element,
    LocateStrategy,
    Page,
    Section,
    TargetDescriptor,
    TargetRef,
)
from .ancestors import ancestor_chain
from .driver import Driver
from .locate_strategy import (
    DriverSession,
    RestoreToken,
    get_locate_strategy,
    set_locate_strategy,
)
from .selector_resolver import resolve_element, resolve_section
from .command_wrapper import WrappedCommand, make_wrapped_command
from .registrar import (
    AssertionNamespace,
    add_wrapped_commands,
    add_wrapped_commands_recursively,
)
from .definitions import PageDefinition, build_page

__all__ = [
    "AssertionNamespace",
    "CommandKind",
    "CommandSpec",
    "ConfigurationError",
    "Driver",
    "DriverSession",
    "DuplicateCommandError",
    "Element",
    "ElementNotFoundError",
    "InvalidTargetError",
    "LocateStrategy",
    "NotFoundError",
    "Page",
    "PageDefinition",
    "PageObjectError",
    "RestoreToken",
    "Section",
    "SectionNotFoundError",
    "TargetDescriptor",
    "TargetRef",
    "WrappedCommand",
    "add_wrapped_commands",
    "add_wrapped_commands_recursively",
    "ancestor_chain",
    "build_page",
    "get_locate_strategy",
    "make_wrapped_command",
    "resolve_element",
    "resolve_section",
    "set_locate_strategy",
]
