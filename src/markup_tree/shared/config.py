"""Configuration classes for markup tree building.

This module provides configuration objects for the event reader, the tree
builder and cross-cutting concerns, plus presets for common setups.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional

DEFAULT_MAX_DEPTH = 1000


class DuplicateAttributePolicy(Enum):
    """Which occurrence of a repeated attribute name is kept."""

    FIRST_WINS = auto()  # Later duplicates are discarded
    LAST_WINS = auto()   # Later duplicates overwrite earlier ones


class TextPolicy(Enum):
    """How multiple text runs directly inside one element are combined."""

    CONCATENATE = auto()  # All runs joined in document order
    KEEP_LAST = auto()    # Only the last run is kept


@dataclass
class ReaderConfig:
    """Configuration for the lxml-backed event reader."""

    chunk_size: int = 65536
    resolve_entities: bool = False
    no_network: bool = True
    huge_tree: bool = False
    remove_comments: bool = False
    remove_pis: bool = False

    def __post_init__(self) -> None:
        """Validate reader configuration."""
        if not isinstance(self.chunk_size, int) or isinstance(self.chunk_size, bool):
            raise ValueError("chunk_size must be an integer")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")


@dataclass
class TreeConfig:
    """Configuration for tree building."""

    max_depth: Optional[int] = DEFAULT_MAX_DEPTH
    duplicate_attributes: DuplicateAttributePolicy = DuplicateAttributePolicy.FIRST_WINS
    text_policy: TextPolicy = TextPolicy.CONCATENATE

    def __post_init__(self) -> None:
        """Validate tree configuration."""
        if self.max_depth is not None and (
            not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool)
        ):
            raise ValueError("max_depth must be an integer or None")
        if self.max_depth is not None and self.max_depth <= 0:
            raise ValueError("max_depth must be > 0 or None")
        if not isinstance(self.duplicate_attributes, DuplicateAttributePolicy):
            raise ValueError(
                "duplicate_attributes must be a DuplicateAttributePolicy"
            )
        if not isinstance(self.text_policy, TextPolicy):
            raise ValueError("text_policy must be a TextPolicy")


@dataclass
class GlobalConfig:
    """Settings that apply across all components."""

    logging_level: str = "WARNING"  # DEBUG, INFO, WARNING, ERROR, CRITICAL

    def __post_init__(self) -> None:
        """Validate global configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.logging_level not in valid_levels:
            raise ValueError(f"logging_level must be one of {valid_levels}")


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


_COMPONENTS = ("reader", "tree", "global_")


@dataclass(frozen=True)
class ParserConfig:
    """Complete configuration for reading markup and building trees.

    Immutable; use ``override`` to derive a changed copy.
    """

    reader: ReaderConfig = field(default_factory=ReaderConfig)
    tree: TreeConfig = field(default_factory=TreeConfig)
    global_: GlobalConfig = field(default_factory=GlobalConfig)

    name: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            self.reader.__post_init__()
            self.tree.__post_init__()
            self.global_.__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

    def override(self, **kwargs: Any) -> "ParserConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: ``component__field`` keys for component settings, plain
                keys for top-level fields

        Returns:
            New ParserConfig instance with overrides applied

        Example:
            >>> config = ParserConfig().override(tree__max_depth=64)
            >>> config.tree.max_depth
            64
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        top_level: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                component, field_name = key.split("__", 1)
                if component not in _COMPONENTS:
                    raise ConfigValidationError(
                        f"Unknown configuration component: {component}",
                        field_name=key,
                    )
                nested_overrides.setdefault(component, {})[field_name] = value
            else:
                top_level[key] = value

        new_fields: Dict[str, Any] = dict(top_level)
        for component, overrides in nested_overrides.items():
            try:
                new_fields[component] = replace(getattr(self, component), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=component) from e

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

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ParserConfig":
        """Create configuration from dictionary.

        Enum settings may be given by member name. Unknown keys are rejected.
        """
        component_types = {
            "reader": ReaderConfig,
            "tree": TreeConfig,
            "global_": GlobalConfig,
        }
        enum_fields = {
            "duplicate_attributes": DuplicateAttributePolicy,
            "text_policy": TextPolicy,
        }

        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration must be a mapping")

        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key in component_types:
                if not isinstance(value, dict):
                    raise ConfigValidationError(
                        f"{key} settings must be a mapping", field_name=key
                    )
                component_cls = component_types[key]
                known = component_cls.__dataclass_fields__
                unknown = set(value) - set(known)
                if unknown:
                    raise ConfigValidationError(
                        f"Unknown {key} settings: {sorted(unknown)}", field_name=key
                    )
                converted = {}
                for field_name, field_value in value.items():
                    enum_type = enum_fields.get(field_name)
                    if enum_type is not None and isinstance(field_value, str):
                        try:
                            field_value = enum_type[field_value]
                        except KeyError as e:
                            raise ConfigValidationError(
                                f"Invalid {field_name}: {field_value}",
                                field_name=f"{key}.{field_name}",
                                suggestions=[m.name for m in enum_type],
                            ) from e
                    converted[field_name] = field_value
                try:
                    values[key] = component_cls(**converted)
                except (TypeError, ValueError) as e:
                    raise ConfigValidationError(str(e), field_name=key) from e
            elif key in ("name", "description"):
                values[key] = value
            else:
                raise ConfigValidationError(
                    f"Unknown configuration key: {key}", field_name=key
                )

        return cls(**values)

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigValidationError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ParserConfig":
        """First-wins attributes, concatenated text, depth limit 1000."""
        return cls(name="default")

    @classmethod
    def legacy(cls) -> "ParserConfig":
        """Reproduce the historical last-wins and keep-last behaviour."""
        return cls(
            tree=TreeConfig(
                duplicate_attributes=DuplicateAttributePolicy.LAST_WINS,
                text_policy=TextPolicy.KEEP_LAST,
            ),
            name="legacy",
            description=(
                "Last duplicate attribute wins and only the last text run is kept"
            ),
        )

    @classmethod
    def hardened(cls) -> "ParserConfig":
        """Tight limits for untrusted input."""
        return cls(
            reader=ReaderConfig(
                chunk_size=16384,
                remove_comments=True,
                remove_pis=True,
            ),
            tree=TreeConfig(max_depth=256),
            name="hardened",
            description="Shallow depth limit and reduced reader surface",
        )

    @classmethod
    def preset(cls, name: str) -> "ParserConfig":
        """Look up a preset by name."""
        presets = {
            "default": cls.default,
            "legacy": cls.legacy,
            "hardened": cls.hardened,
        }
        if not isinstance(name, str) or name not in presets:
            raise ConfigValidationError(
                f"Unknown preset: {name}", suggestions=sorted(presets)
            )
        return presets[name]()
