# engine/models.py

"""
Data structures for the page-object tree and the command registration table.

Pages, sections and elements are produced by a definition loader (see
`definitions.py`) and are read-only as far as the command engine is
concerned. A `TargetDescriptor` is the per-invocation snapshot of the element
or section a command is aimed at.
"""

from __future__ import annotations

import re
import weakref
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple, Union

from .exceptions import ConfigurationError, InvalidTargetError

SelectorFn = Callable[..., str]
SelectorLike = Union[str, SelectorFn]

DEFAULT_SIGIL = "@"

# Name of the `expect` assertion that targets a section instead of an element.
SECTION_ASSERTION = "section"


class LocateStrategy(str, Enum):
    """How the driver interprets the selector handed to a command."""

    CSS = "css selector"
    XPATH = "xpath"
    RECURSION = "recursion"

    @classmethod
    def coerce(cls, value: Any) -> Optional["LocateStrategy"]:
        """Returns the matching strategy, or None for anything unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


class CommandKind(Enum):
    """Registration variants. Every kind except PLAIN is an assertion namespace."""

    PLAIN = "plain"
    ASSERT = "assert"
    VERIFY = "verify"
    EXPECT = "expect"

    @classmethod
    def for_namespace(cls, key: str) -> Optional["CommandKind"]:
        """Maps a catalog key onto its assertion namespace, if it names one."""
        for kind in cls:
            if kind is not cls.PLAIN and kind.value == key:
                return kind
        return None

    @property
    def is_assertion(self) -> bool:
        return self is not CommandKind.PLAIN

    @property
    def returns_result(self) -> bool:
        # expect-style assertions hand back their own result instead of chaining
        return self is CommandKind.EXPECT


@dataclass
class CommandSpec:
    """
    A single entry of the registration table.

    `callback_position` pins the slot (an index into the final positional
    arguments, negative values allowed) where the command accepts a callback.
    When it is None the wrapper scans the last and second-to-last arguments.
    """

    fn: Callable[..., Any]
    name: str = ""
    kind: CommandKind = CommandKind.PLAIN
    callback_position: Optional[int] = None

    @property
    def is_assertion(self) -> bool:
        return self.kind.is_assertion

    @property
    def returns_result(self) -> bool:
        return self.kind.returns_result


@dataclass(eq=False)
class Element:
    """A named, locatable node owned by exactly one page or section."""

    name: str
    selector: SelectorLike
    locate_strategy: str = LocateStrategy.CSS.value
    parent: Optional["Section"] = field(default=None, repr=False)

    @property
    def is_dynamic(self) -> bool:
        return callable(self.selector)


@dataclass(eq=False)
class Section:
    """
    A container of elements and nested sections. A section is itself locatable
    through its own selector and can be targeted by `expect.section(...)`.
    """

    name: str
    selector: Optional[str] = None
    locate_strategy: str = LocateStrategy.CSS.value
    parent: Optional["Section"] = field(default=None, repr=False)
    elements: Dict[str, Element] = field(default_factory=dict, repr=False)
    sections: Dict[str, "Section"] = field(default_factory=dict, repr=False)

    def add_element(self, element: Element) -> Element:
        if element.name in self.elements:
            raise ConfigurationError(
                f'Element "{element.name}" is defined twice in "{self.name}".'
            )
        element.parent = self
        self.elements[element.name] = element
        return element

    def add_section(self, section: "Section") -> "Section":
        if section.name in self.sections:
            raise ConfigurationError(
                f'Section "{section.name}" is defined twice in "{self.name}".'
            )
        section.parent = self
        self.sections[section.name] = section
        return section

    @property
    def root(self) -> "Section":
        node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def driver(self) -> Any:
        """The shared driver, held by the page at the root of the tree."""
        return getattr(self.root, "client", None)

    def iter_sections(self):
        """Yields every nested section, depth first."""
        for section in self.sections.values():
            yield section
            yield from section.iter_sections()


@dataclass(eq=False)
class Page(Section):
    """The root container. It has no parent and no selector of its own."""

    client: Any = field(default=None, repr=False)

    def __post_init__(self):
        if self.parent is not None:
            raise ConfigurationError(f'Page "{self.name}" cannot have a parent.')


@dataclass(frozen=True)
class TargetDescriptor:
    """
    Snapshot of a resolved element or section.

    The parent is held through a weak reference: a descriptor never keeps the
    page tree alive, and `descriptor.parent` is the very same container object
    the source element belongs to.
    """

    name: str
    selector: str
    locate_strategy: str
    _parent_ref: Optional[weakref.ReferenceType] = field(
        default=None, repr=False, compare=False
    )

    @property
    def parent(self) -> Optional[Section]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @classmethod
    def from_target(
        cls, target: Union[Element, Section], selector: Optional[str] = None
    ) -> "TargetDescriptor":
        """Copies the target's fields, optionally overriding the selector."""
        parent = target.parent
        return cls(
            name=target.name,
            selector=target.selector if selector is None else selector,
            locate_strategy=target.locate_strategy,
            _parent_ref=weakref.ref(parent) if parent is not None else None,
        )


@dataclass(frozen=True)
class TargetRef:
    """
    An explicit reference to a named element or section, optionally with the
    arguments for a dynamic selector: `TargetRef("row", ("3",))`.

    `token` is the raw name as written after the sigil. It is checked for an
    exact match before the parameterized form is tried.
    `sigil` only affects how the reference prints.
    """

    name: str
    args: Optional[Tuple[str, ...]] = None
    token: Optional[str] = field(default=None, compare=False)
    sigil: str = field(default=DEFAULT_SIGIL, compare=False)

    PARAMETERIZED: ClassVar[re.Pattern] = re.compile(r"^[^<]+<.*>$")

    def __post_init__(self):
        if not self.name:
            raise InvalidTargetError("A target reference needs a non-empty name.")
        if self.args is not None and not isinstance(self.args, tuple):
            object.__setattr__(self, "args", tuple(self.args))
        if self.token is None:
            object.__setattr__(self, "token", self.name)

    @property
    def is_parameterized(self) -> bool:
        return self.args is not None

    @classmethod
    def parse(cls, value: str, sigil: str = DEFAULT_SIGIL) -> "TargetRef":
        """Parses `@name` or `@name<arg1,arg2>` into a reference."""
        if not value.startswith(sigil):
            raise InvalidTargetError(
                f'"{value}" is not a target reference (expected prefix "{sigil}").'
            )
        token = value[len(sigil) :]
        if not token:
            raise InvalidTargetError(f'"{value}" names no element or section.')
        if cls.PARAMETERIZED.match(token):
            name = token[: token.index("<")]
            args = tuple(token[token.index("<") + 1 : token.rindex(">")].split(","))
            return cls(name=name, args=args, token=token, sigil=sigil)
        return cls(name=token, token=token, sigil=sigil)

    def __str__(self) -> str:
        if self.token != self.name or self.args is None:
            return f"{self.sigil}{self.token}"
        return f"{self.sigil}{self.name}<{','.join(self.args)}>"
