"""Page-object command dispatch for browser test automation."""

# Engine first: its modules import config, which imports engine submodules.
from .engine import *  # noqa: F401,F403
from .engine import __all__ as _engine_all
from .config import Settings, load_settings
from .logging_config import setup_logging
from ._bootstrap import bootstrap_models

bootstrap_models()

__all__ = ["Settings", "load_settings", "setup_logging", "bootstrap_models", *_engine_all]
