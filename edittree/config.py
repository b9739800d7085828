"""Option models for edit tree containers."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TypeVar

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

OptionsT = TypeVar("OptionsT", bound="EditTreeOptions")


class ConfigError(ValueError):
    """Raised when container options cannot be loaded."""


class EditTreeOptions(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # base offset of the container source inside the whole document
    offset: int = 0


class DeclarationOptions(EditTreeOptions):
    before: str = ""
    separator: str = ":"
    terminator: str = ";"


class AttributeOptions(EditTreeOptions):
    quote: str = Field(default='"', pattern=r"^[\"']?$")


def coerce_options(options: object, model: type[OptionsT]) -> OptionsT:
    """Return ``options`` as an instance of ``model``."""
    if isinstance(options, model):
        return options
    if options is None:
        return model()
    if isinstance(options, EditTreeOptions):
        shared = {key: getattr(options, key) for key in options.model_fields_set if key in model.model_fields}
        return model.model_validate(shared)
    if isinstance(options, Mapping):
        return model.model_validate(dict(options))
    raise TypeError(f"Unsupported options type: {type(options).__name__}")


def load_options(path: Path, model: type[OptionsT] = EditTreeOptions) -> OptionsT:  # type: ignore[assignment]
    """Read container options from a YAML mapping."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except OSError as error:
        raise ConfigError(f"Failed to read {path}: {error}") from error
    except yaml.YAMLError as error:
        raise ConfigError(f"Failed to parse {path}: {error}") from error
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    try:
        return model.model_validate(data)
    except ValidationError as error:
        raise ConfigError(f"Invalid options in {path}: {error}") from error


__all__ = [
    "AttributeOptions",
    "ConfigError",
    "DeclarationOptions",
    "EditTreeOptions",
    "coerce_options",
    "load_options",
]
