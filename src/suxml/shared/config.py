"""Configuration classes for suxml.

Each processing layer has its own dataclass validated in ``__post_init__``;
``EditorConfig`` aggregates them into one immutable object that can be
overridden field by field and round-tripped through JSON.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

_SECTIONS = ["scanner", "serializer", "projection", "global_"]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass
class ScannerConfig:
    """How input bytes are turned into characters for the scanner."""

    encoding: str = "utf-8"
    # surrogateescape keeps undecodable bytes intact through a round trip
    errors: str = "surrogateescape"

    def __post_init__(self) -> None:
        """Validate scanner configuration."""
        if not self.encoding:
            raise ValueError("encoding cannot be empty")
        try:
            "".encode(self.encoding)
        except LookupError as e:
            raise ValueError(f"unknown encoding: {self.encoding}") from e
        valid_errors = ["strict", "replace", "surrogateescape"]
        if self.errors not in valid_errors:
            raise ValueError(f"errors must be one of {valid_errors}")


@dataclass
class SerializerConfig:
    """Canonical output settings."""

    indent: str = "\t"
    trailing_newline: bool = False

    def __post_init__(self) -> None:
        """Validate serializer configuration."""
        if not isinstance(self.indent, str) or not self.indent:
            raise ValueError("indent must be a non-empty string")
        if self.indent.strip(" \t"):
            raise ValueError("indent must consist of spaces or tabs")


@dataclass
class ProjectionConfig:
    """Line projection settings for the presentation layer."""

    include_prolog: bool = True
    collapsed_marker: str = " ..."
    expand_root_on_parse: bool = True

    def __post_init__(self) -> None:
        """Validate projection configuration."""
        if "\n" in self.collapsed_marker:
            raise ValueError("collapsed_marker cannot contain newlines")


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
    enable_correlation_tracking: bool = True

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


@dataclass(frozen=True)
class EditorConfig:
    """Complete configuration for parsing, serializing and projecting documents.

    Immutable; use ``override`` to derive a modified copy.
    """

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    serializer: SerializerConfig = field(default_factory=SerializerConfig)
    projection: ProjectionConfig = field(default_factory=ProjectionConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Re-validate every section so mutated sections are caught."""
        try:
            for section in _SECTIONS:
                getattr(self, section).__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "EditorConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = EditorConfig().override(serializer__indent="  ")
            >>> config.serializer.indent
            '  '
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                section, field_name = key.split("__", 1)
                if section == "global":
                    section = "global_"
                if section not in _SECTIONS:
                    raise ConfigValidationError(
                        f"Unknown configuration section: {section}",
                        field_name=key,
                        suggestions=[f"{s}__{field_name}" for s in _SECTIONS],
                    )
                nested_overrides.setdefault(section, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = {}
        for section, overrides in nested_overrides.items():
            current = getattr(self, section)
            unknown = [name for name in overrides if name not in current.__dataclass_fields__]
            if unknown:
                raise ConfigValidationError(
                    f"Unknown field(s) for {section}: {', '.join(unknown)}",
                    field_name=unknown[0],
                    suggestions=sorted(current.__dataclass_fields__),
                )
            try:
                new_fields[section] = replace(current, **overrides)
            except ValueError as e:
                raise ConfigValidationError(str(e), field_name=section) from e
        new_fields.update(top_level)
        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            return obj

        result = _dataclass_to_dict(self)
        if not isinstance(result, dict):
            raise ConfigValidationError("Configuration serialization failed")
        return result

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create configuration from a (possibly partial) dictionary.

        Missing sections and fields keep their defaults; unknown keys are
        rejected.
        """
        section_types: Dict[str, Any] = {
            "scanner": ScannerConfig,
            "serializer": SerializerConfig,
            "projection": ProjectionConfig,
            "global_": GlobalConfig,
        }
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            section_key = "global_" if key == "global" else key
            if section_key in section_types:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"Section {key} must be an object", field_name=key
                    )
                try:
                    kwargs[section_key] = section_types[section_key](**value)
                except TypeError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
                except ValueError as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key == "name":
                kwargs["name"] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}",
                    field_name=key,
                    suggestions=_SECTIONS + ["name"],
                )
        return cls(**kwargs)

    @classmethod
    def from_json(cls, json_str: str) -> "EditorConfig":
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "EditorConfig":
        """Load configuration from a JSON file."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
        return cls.from_json(text)

    # Preset factory methods
    @classmethod
    def default(cls) -> "EditorConfig":
        """Tab indentation, UTF-8 input, prolog shown in the projection."""
        return cls(name="default")

    @classmethod
    def spaces(cls, width: int = 4) -> "EditorConfig":
        """Indent with ``width`` spaces instead of tabs."""
        if width <= 0:
            raise ConfigValidationError(
                "Indent width must be > 0", field_name="serializer.indent"
            )
        return cls(serializer=SerializerConfig(indent=" " * width), name=f"spaces{width}")
