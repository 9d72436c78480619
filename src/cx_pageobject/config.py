# ~/repositories/cx-pageobject/src/cx_pageobject/config.py
import os
from pathlib import Path
from typing import Any, Dict, Optional

import structlog
from dotenv import dotenv_values
from pydantic import BaseModel, Field, ValidationError, field_validator

from .engine.exceptions import ConfigurationError
from .engine.models import DEFAULT_SIGIL, LocateStrategy

logger = structlog.get_logger(__name__)

ENV_PREFIX = "CX_PAGEOBJECT_"


class Settings(BaseModel):
    """Runtime options for the command engine."""

    sigil: str = Field(
        DEFAULT_SIGIL, description="Prefix marking a string argument as a target."
    )
    accept_sigil_strings: bool = Field(
        True,
        description="Treat sigil-prefixed strings as targets, not only TargetRef.",
    )
    default_locate_strategy: LocateStrategy = Field(
        LocateStrategy.CSS,
        description="Strategy for definitions that do not declare one.",
    )
    verbose: bool = Field(False, description="Enable debug logging.")

    @field_validator("sigil")
    @classmethod
    def _validate_sigil(cls, value: str) -> str:
        if not value or value.isspace():
            raise ValueError("sigil must be a non-blank string")
        return value

    @property
    def target_sigil(self) -> Optional[str]:
        return self.sigil if self.accept_sigil_strings else None


def _collect(source: Dict[str, Any]) -> Dict[str, Any]:
    values = {}
    for key, value in source.items():
        if key.startswith(ENV_PREFIX) and value is not None:
            values[key[len(ENV_PREFIX) :].lower()] = value
    return values


def load_settings(env_file: Optional[Path] = None, **overrides: Any) -> Settings:
    """
    Builds Settings from `CX_PAGEOBJECT_*` variables.

    Values from `env_file` (dotenv format) are applied first, then the process
    environment, then explicit keyword overrides.
    """
    values: Dict[str, Any] = {}
    if env_file is not None:
        if not Path(env_file).is_file():
            raise ConfigurationError(f"Settings file not found: {env_file}")
        values.update(_collect(dotenv_values(env_file)))
    values.update(_collect(dict(os.environ)))
    values.update(overrides)

    try:
        settings = Settings(**values)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid page-object settings: {e}") from e

    logger.debug("Page-object settings loaded.", **settings.model_dump(mode="json"))
    return settings
