# engine/selector_resolver.py

"""
Resolves element and section references against a page or section.

A reference is either an explicit `TargetRef` or, at the call site, a string
carrying the target sigil (`"@submitButton"`, `"@row<3,name>"`).
"""

from typing import Any, Optional, Union

import structlog

from .exceptions import (
    ConfigurationError,
    ElementNotFoundError,
    SectionNotFoundError,
)
from .models import (
    DEFAULT_SIGIL,
    Element,
    Section,
    TargetDescriptor,
    TargetRef,
)

logger = structlog.get_logger(__name__)

RefLike = Union[TargetRef, str]


def as_target_ref(value: Any, sigil: str = DEFAULT_SIGIL) -> Optional[TargetRef]:
    """
    Returns `value` as a TargetRef, or None if it is ordinary command data.

    Only strings that start with the sigil are treated as references; pass
    `sigil=None` to accept explicit `TargetRef` values only.
    """
    if isinstance(value, TargetRef):
        return value
    if sigil and isinstance(value, str) and value.startswith(sigil):
        return TargetRef.parse(value, sigil)
    return None


def build_dynamic_descriptor(element: Element, args) -> TargetDescriptor:
    """
    Applies `args` to a dynamic element's selector function.

    The element itself is left untouched; the result is a fresh descriptor
    sharing the element's name, strategy and parent.
    """
    if not element.is_dynamic:
        raise ConfigurationError(
            f"{element.name} was called as a dynamic target with a "
            "non-function selector."
        )
    try:
        selector = element.selector(*args)
    except TypeError as e:
        raise ConfigurationError(
            f"{element.name} could not build its selector from arguments "
            f"{list(args)}: {e}"
        ) from e
    logger.debug(
        "Built dynamic selector.", element=element.name, args=list(args), selector=selector
    )
    return TargetDescriptor.from_target(element, selector=selector)


def resolve_element(container: Section, ref: RefLike) -> TargetDescriptor:
    """Resolves an element reference within `container.elements`."""
    if isinstance(ref, str):
        ref = TargetRef.parse(ref)

    # A literal name hit wins, even if it happens to contain "<...>".
    element = container.elements.get(ref.token)
    if element is not None:
        if ref.is_parameterized and ref.token == ref.name:
            return build_dynamic_descriptor(element, ref.args)
        if element.is_dynamic:
            raise ConfigurationError(
                f"{element.name} has a dynamic selector and must be called "
                f"with arguments, e.g. @{element.name}<value>."
            )
        return TargetDescriptor.from_target(element)

    if ref.is_parameterized and ref.name in container.elements:
        return build_dynamic_descriptor(container.elements[ref.name], ref.args)

    raise ElementNotFoundError(ref.name, container.name, container.elements.keys())


def resolve_section(container: Section, ref: RefLike) -> TargetDescriptor:
    """Resolves a section reference within `container.sections`."""
    if isinstance(ref, str):
        ref = TargetRef.parse(ref)

    section = container.sections.get(ref.token)
    if section is None:
        raise SectionNotFoundError(ref.token, container.name, container.sections.keys())
    return TargetDescriptor.from_target(section)
