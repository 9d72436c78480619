"""
Custom exceptions raised by the page-object command engine.

All of these signal programmer or configuration mistakes. They are raised
synchronously at resolution or registration time and are never retried.
"""

from typing import Sequence


class PageObjectError(Exception):
    """Base exception for all page-object engine errors."""

    pass


class ConfigurationError(PageObjectError):
    """A page, section or element definition cannot be used as requested."""

    pass


class InvalidTargetError(PageObjectError):
    """A target reference is malformed (e.g. an empty name after the sigil)."""

    pass


class NotFoundError(PageObjectError):
    """A referenced element or section does not exist in its container."""

    kind = "elements"

    def __init__(self, name: str, container: str, available: Sequence[str]):
        self.name = name
        self.container = container
        self.available = list(available)
        super().__init__(
            f'{name} was not found in "{container}". '
            f"Available {self.kind}: {', '.join(self.available)}"
        )


class ElementNotFoundError(NotFoundError):
    """Failed to find a named element in a page or section."""

    kind = "elements"


class SectionNotFoundError(NotFoundError):
    """Failed to find a named section in a page or section."""

    kind = "sections"


class DuplicateCommandError(PageObjectError):
    """A command or assertion with this name is already attached to the target."""

    def __init__(self, command_name: str):
        self.command_name = command_name
        super().__init__(f'The command "{command_name}" is already defined!')
