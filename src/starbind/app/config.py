"""
Configuration for StarBind pages.

Settings are a pydantic model so values read from the environment are
validated the same way as values passed in code.
"""

import logging
import os
from typing import Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

ENV_PREFIX = "STARBIND_"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class StarBindSettings(BaseModel):
    """Page-level settings."""
    model_config = ConfigDict(frozen=True)

    # "ignore" drops payload keys nobody registered, "forbid" rejects the payload
    extra_keys: Literal["ignore", "forbid"] = "ignore"
    # Re-send every binding when a known action is not claimed by any handler
    resync_on_unhandled: bool = False
    content_selector: str = "#Content"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "StarBindSettings":
        """Build settings from STARBIND_* variables, e.g. STARBIND_EXTRA_KEYS=forbid."""
        environ = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None:
                values[name] = raw
        values.update(overrides)
        return cls.model_validate(values)


def configure_logging(settings: Optional[StarBindSettings] = None, handler: Optional[logging.Handler] = None) -> logging.Logger:
    """Attach a handler to the ``starbind`` logger at the configured level."""
    settings = settings or StarBindSettings()
    logger = logging.getLogger("starbind")
    logger.setLevel(settings.log_level.upper())
    if handler is None:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
    if handler not in logger.handlers:
        logger.addHandler(handler)
    return logger
