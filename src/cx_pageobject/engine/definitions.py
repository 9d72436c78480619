# engine/definitions.py

"""
Pydantic models for page-object definitions.

A definition loader hands over plain mappings; these models validate them and
build the runtime `Page` / `Section` / `Element` tree with parent links set.

    PageDefinition.model_validate({
        "name": "login",
        "elements": {"submitButton": "#submit"},
        "sections": {
            "menu": {
                "selector": "#menu",
                "elements": {"help": {"selector": "//a[@id='help']", "locateStrategy": "xpath"}},
            }
        },
    }).build(driver)
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Optional, Union

import structlog
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from ..config import Settings, load_settings
from .exceptions import ConfigurationError
from .models import Element, LocateStrategy, Page, Section

logger = structlog.get_logger(__name__)


def _expand_shorthand(value: Any) -> Any:
    """Turns `{"name": "#sel"}` into `{"name": {"selector": "#sel"}}`."""
    if isinstance(value, dict):
        return {
            name: {"selector": spec} if isinstance(spec, str) or callable(spec) else spec
            for name, spec in value.items()
        }
    return value


def _populate(
    container: Section,
    elements: Dict[str, "ElementDefinition"],
    sections: Dict[str, "SectionDefinition"],
    default_strategy: LocateStrategy,
) -> None:
    for element_name, element_def in elements.items():
        container.add_element(element_def.build(element_name, default_strategy))
    for section_name, section_def in sections.items():
        container.add_section(section_def.build(section_name, default_strategy))


class ElementDefinition(BaseModel):
    """Definition of a single element. A bare string is shorthand for its selector."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    selector: Union[str, Callable[..., str]] = Field(
        ..., description="Selector string, or a function building one from arguments."
    )
    locate_strategy: Optional[LocateStrategy] = Field(
        None,
        validation_alias=AliasChoices("locate_strategy", "locateStrategy"),
        description="Overrides the page default when set.",
    )

    @field_validator("selector")
    @classmethod
    def _validate_selector(cls, value):
        if isinstance(value, str) and not value.strip():
            raise ValueError("selector must not be empty")
        return value

    def build(self, name: str, default_strategy: LocateStrategy) -> Element:
        strategy = self.locate_strategy or default_strategy
        return Element(name=name, selector=self.selector, locate_strategy=strategy.value)


class SectionDefinition(BaseModel):
    """Definition of a section: its own selector plus nested elements and sections."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    selector: str
    locate_strategy: Optional[LocateStrategy] = Field(
        None, validation_alias=AliasChoices("locate_strategy", "locateStrategy")
    )
    elements: Dict[str, ElementDefinition] = Field(default_factory=dict)
    sections: Dict[str, "SectionDefinition"] = Field(default_factory=dict)

    @field_validator("elements", mode="before")
    @classmethod
    def _expand_elements(cls, value: Any) -> Any:
        return _expand_shorthand(value)

    def build(self, name: str, default_strategy: LocateStrategy) -> Section:
        strategy = self.locate_strategy or default_strategy
        section = Section(name=name, selector=self.selector, locate_strategy=strategy.value)
        _populate(section, self.elements, self.sections, default_strategy)
        return section


class PageDefinition(BaseModel):
    """Definition of a page, the root of the tree."""

    model_config = ConfigDict(extra="forbid", arbitrary_types_allowed=True)

    name: str
    default_locate_strategy: LocateStrategy = Field(
        LocateStrategy.CSS,
        validation_alias=AliasChoices("default_locate_strategy", "locateStrategy"),
    )
    elements: Dict[str, ElementDefinition] = Field(default_factory=dict)
    sections: Dict[str, SectionDefinition] = Field(default_factory=dict)

    @field_validator("elements", mode="before")
    @classmethod
    def _expand_elements(cls, value: Any) -> Any:
        return _expand_shorthand(value)

    def build(self, driver: Any = None) -> Page:
        page = Page(
            name=self.name,
            locate_strategy=self.default_locate_strategy.value,
            client=driver,
        )
        _populate(page, self.elements, self.sections, self.default_locate_strategy)
        logger.debug(
            "Page tree built.",
            page=self.name,
            elements=len(page.elements),
            sections=len(page.sections),
        )
        return page


def build_page(
    definition: Dict[str, Any],
    driver: Any = None,
    default_locate_strategy: Optional[LocateStrategy] = None,
    settings: Optional[Settings] = None,
) -> Page:
    """
    Validates a raw page definition and builds its runtime tree.

    Elements and sections without a locate strategy inherit the page's, which
    falls back to `default_locate_strategy` and then to the settings.
    """
    data = dict(definition)
    if "locateStrategy" not in data and "default_locate_strategy" not in data:
        if default_locate_strategy is None:
            default_locate_strategy = (settings or load_settings()).default_locate_strategy
        data["default_locate_strategy"] = default_locate_strategy
    try:
        page_def = PageDefinition.model_validate(data)
    except ValidationError as e:
        name = definition.get("name", "<unnamed>")
        raise ConfigurationError(f'Invalid definition for page "{name}": {e}') from e
    return page_def.build(driver)
