"""Bind environment variables to the fields of pydantic models and dataclasses.

Examples
--------
>>> from pydantic import BaseModel
>>> from envbind import MappingSource, parse
>>> class Settings(BaseModel):
...     iter: int = 0
...     debug: bool = False
>>> settings = Settings()
>>> parse(settings, source=MappingSource({"iter": "1", "debug": "true"}))
>>> settings.iter, settings.debug
(1, True)
"""

from __future__ import annotations

__version__ = "0.1.0"

from envbind.api import must_parse, new_schema, parse
from envbind.errors import (
    ConversionError,
    DefaultEncodingError,
    EnvBindError,
    FieldNotWritableError,
    FieldRequiredError,
    NotInstanceError,
    NotRecordError,
    RequiredWithDefaultError,
    SliceDefaultError,
    StructuralError,
    TagError,
    UnrecognizedTagError,
    UnsupportedFieldError,
)
from envbind.schema import Schema, Slot
from envbind.sources import EnvironmentSource, MappingSource, ProcessEnvironment, load_yaml_source
from envbind.tags import Embed, Env
from envbind.types import HardwareAddr, MailAddress, TextDecoder, TextEncoder

__all__ = [
    # Entry points
    "parse",
    "must_parse",
    "new_schema",
    "Schema",
    "Slot",
    # Field annotations
    "Env",
    "Embed",
    # Sources
    "EnvironmentSource",
    "MappingSource",
    "ProcessEnvironment",
    "load_yaml_source",
    # Types
    "HardwareAddr",
    "MailAddress",
    "TextDecoder",
    "TextEncoder",
    # Errors
    "EnvBindError",
    "StructuralError",
    "NotInstanceError",
    "NotRecordError",
    "UnsupportedFieldError",
    "FieldNotWritableError",
    "TagError",
    "UnrecognizedTagError",
    "RequiredWithDefaultError",
    "SliceDefaultError",
    "ConversionError",
    "FieldRequiredError",
    "DefaultEncodingError",
]
