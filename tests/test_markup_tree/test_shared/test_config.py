"""Tests for the configuration system."""

import json

import pytest

from markup_tree.shared.config import (
    DEFAULT_MAX_DEPTH,
    ConfigError,
    ConfigValidationError,
    DuplicateAttributePolicy,
    GlobalConfig,
    ParserConfig,
    ReaderConfig,
    TextPolicy,
    TreeConfig,
)


class TestReaderConfig:
    """Test suite for ReaderConfig."""

    def test_default_configuration(self):
        """Test default reader configuration values."""
        config = ReaderConfig()

        assert config.chunk_size == 65536
        assert config.resolve_entities is False
        assert config.no_network is True
        assert config.huge_tree is False
        assert config.remove_comments is False
        assert config.remove_pis is False

    @pytest.mark.parametrize("chunk_size", [0, -1])
    def test_invalid_chunk_size(self, chunk_size):
        """Test that non-positive chunk sizes are rejected."""
        with pytest.raises(ValueError, match="chunk_size must be > 0"):
            ReaderConfig(chunk_size=chunk_size)

    @pytest.mark.parametrize("chunk_size", ["4096", 1.5, None, True])
    def test_chunk_size_must_be_integer(self, chunk_size):
        """Test that chunk sizes of other types are rejected."""
        with pytest.raises(ValueError, match="chunk_size must be an integer"):
            ReaderConfig(chunk_size=chunk_size)


class TestTreeConfig:
    """Test suite for TreeConfig."""

    def test_default_configuration(self):
        """Test default tree configuration values."""
        config = TreeConfig()

        assert config.max_depth == DEFAULT_MAX_DEPTH == 1000
        assert config.duplicate_attributes is DuplicateAttributePolicy.FIRST_WINS
        assert config.text_policy is TextPolicy.CONCATENATE

    def test_unlimited_depth(self):
        """Test that None disables the depth limit."""
        assert TreeConfig(max_depth=None).max_depth is None

    def test_invalid_max_depth(self):
        """Test that a zero depth limit is rejected."""
        with pytest.raises(ValueError, match="max_depth must be > 0 or None"):
            TreeConfig(max_depth=0)

    @pytest.mark.parametrize("max_depth", ["x", "10", 2.5, True, [10]])
    def test_max_depth_must_be_integer(self, max_depth):
        """Test that depth limits of other types are rejected."""
        with pytest.raises(ValueError, match="max_depth must be an integer or None"):
            TreeConfig(max_depth=max_depth)

    def test_policies_must_be_enum_members(self):
        """Test that policy names are not accepted in place of members."""
        with pytest.raises(ValueError, match="duplicate_attributes"):
            TreeConfig(duplicate_attributes="LAST_WINS")
        with pytest.raises(ValueError, match="text_policy"):
            TreeConfig(text_policy="KEEP_LAST")


class TestGlobalConfig:
    """Test suite for GlobalConfig."""

    def test_default_level(self):
        """Test default logging level."""
        assert GlobalConfig().logging_level == "WARNING"

    def test_invalid_level(self):
        """Test that unknown logging levels are rejected."""
        with pytest.raises(ValueError, match="logging_level must be one of"):
            GlobalConfig(logging_level="LOUD")


class TestParserConfig:
    """Test suite for the complete ParserConfig."""

    def test_default_configuration(self):
        """Test that defaults compose the component defaults."""
        config = ParserConfig()

        assert config.reader == ReaderConfig()
        assert config.tree == TreeConfig()
        assert config.global_ == GlobalConfig()
        assert config.name is None

    def test_config_is_immutable(self):
        """Test that ParserConfig fields cannot be reassigned."""
        config = ParserConfig()
        with pytest.raises(AttributeError):
            config.name = "changed"

    def test_validation_error_is_wrapped(self):
        """Test that invalid components surface as ConfigValidationError."""
        tree = TreeConfig()
        tree.max_depth = -5  # bypasses TreeConfig validation

        with pytest.raises(ConfigValidationError, match="max_depth"):
            ParserConfig(tree=tree)

    def test_override_nested_field(self):
        """Test component__field overrides."""
        config = ParserConfig().override(
            tree__max_depth=64, reader__chunk_size=1024
        )

        assert config.tree.max_depth == 64
        assert config.reader.chunk_size == 1024
        # untouched settings keep their values
        assert config.tree.text_policy is TextPolicy.CONCATENATE

    def test_override_leaves_original_unchanged(self):
        """Test that override returns a new configuration."""
        original = ParserConfig()
        original.override(tree__max_depth=3)

        assert original.tree.max_depth == DEFAULT_MAX_DEPTH

    def test_override_top_level_field(self):
        """Test overriding name and description."""
        config = ParserConfig().override(name="custom", description="test")

        assert config.name == "custom"
        assert config.description == "test"

    def test_override_unknown_component(self):
        """Test that unknown components are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration component"):
            ParserConfig().override(parser__strict=True)

    def test_override_unknown_field(self):
        """Test that unknown fields of a known component are rejected."""
        with pytest.raises(ConfigValidationError):
            ParserConfig().override(tree__colour="blue")

    def test_override_invalid_value(self):
        """Test that invalid override values are rejected."""
        with pytest.raises(ConfigValidationError, match="max_depth"):
            ParserConfig().override(tree__max_depth=0)

    def test_to_dict_uses_enum_names(self):
        """Test dictionary conversion."""
        data = ParserConfig.legacy().to_dict()

        assert data["tree"]["duplicate_attributes"] == "LAST_WINS"
        assert data["tree"]["text_policy"] == "KEEP_LAST"
        assert data["reader"]["chunk_size"] == 65536
        assert data["global_"]["logging_level"] == "WARNING"
        assert data["name"] == "legacy"

    def test_dict_round_trip(self):
        """Test that to_dict output is accepted by from_dict."""
        config = ParserConfig.hardened()
        assert ParserConfig.from_dict(config.to_dict()) == config

    def test_json_round_trip(self):
        """Test that to_json output is accepted by from_json."""
        config = ParserConfig.legacy()
        restored = ParserConfig.from_json(config.to_json())

        assert restored == config
        assert json.loads(config.to_json())["name"] == "legacy"

    def test_from_dict_partial(self):
        """Test that missing sections keep their defaults."""
        config = ParserConfig.from_dict({"tree": {"max_depth": 10}})

        assert config.tree.max_depth == 10
        assert config.reader == ReaderConfig()

    def test_from_dict_unknown_key(self):
        """Test that unknown top-level keys are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown configuration key"):
            ParserConfig.from_dict({"tokenization": {}})

    def test_from_dict_unknown_setting(self):
        """Test that unknown component settings are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown tree settings"):
            ParserConfig.from_dict({"tree": {"strict": True}})

    def test_from_dict_invalid_enum_name(self):
        """Test that invalid enum names come with suggestions."""
        with pytest.raises(ConfigValidationError) as exc_info:
            ParserConfig.from_dict({"tree": {"text_policy": "SOMETIMES"}})

        assert exc_info.value.field_name == "tree.text_policy"
        assert exc_info.value.suggestions == ["CONCATENATE", "KEEP_LAST"]

    def test_from_dict_invalid_value(self):
        """Test that invalid component values are rejected."""
        with pytest.raises(ConfigValidationError, match="chunk_size"):
            ParserConfig.from_dict({"reader": {"chunk_size": 0}})

    @pytest.mark.parametrize(
        "data, field_name",
        [
            ([1], None),
            ("tree", None),
            ({"tree": 5}, "tree"),
            ({"reader": ["chunk_size"]}, "reader"),
            ({"global_": None}, "global_"),
        ],
    )
    def test_from_dict_rejects_non_mappings(self, data, field_name):
        """Test that wrongly shaped data raises ConfigValidationError."""
        with pytest.raises(ConfigValidationError, match="must be a mapping") as exc_info:
            ParserConfig.from_dict(data)

        assert exc_info.value.field_name == field_name

    def test_from_dict_wrongly_typed_value(self):
        """Test that a wrongly typed setting is a validation error."""
        with pytest.raises(ConfigValidationError, match="max_depth") as exc_info:
            ParserConfig.from_dict({"tree": {"max_depth": "x"}})

        assert exc_info.value.field_name == "tree"

    def test_override_wrongly_typed_value(self):
        """Test that override rejects a wrongly typed depth limit."""
        with pytest.raises(ConfigValidationError, match="max_depth"):
            ParserConfig().override(tree__max_depth="deep")

    def test_from_json_invalid(self):
        """Test malformed and non-object JSON."""
        with pytest.raises(ConfigValidationError, match="Invalid configuration JSON"):
            ParserConfig.from_json("{not json")
        with pytest.raises(ConfigValidationError, match="must be an object"):
            ParserConfig.from_json("[1, 2]")

    def test_validation_error_is_config_error(self):
        """Test the configuration exception hierarchy."""
        assert issubclass(ConfigValidationError, ConfigError)


class TestPresets:
    """Test preset factory methods."""

    def test_default_preset(self):
        """Test the default preset."""
        config = ParserConfig.default()

        assert config.name == "default"
        assert config.tree == TreeConfig()

    def test_legacy_preset(self):
        """Test the legacy preset policies."""
        config = ParserConfig.legacy()

        assert config.tree.duplicate_attributes is DuplicateAttributePolicy.LAST_WINS
        assert config.tree.text_policy is TextPolicy.KEEP_LAST
        assert config.tree.max_depth == DEFAULT_MAX_DEPTH

    def test_hardened_preset(self):
        """Test the hardened preset limits."""
        config = ParserConfig.hardened()

        assert config.tree.max_depth == 256
        assert config.reader.chunk_size == 16384
        assert config.reader.remove_comments is True
        assert config.reader.remove_pis is True
        assert config.reader.resolve_entities is False

    @pytest.mark.parametrize("name", ["default", "legacy", "hardened"])
    def test_preset_lookup(self, name):
        """Test looking presets up by name."""
        assert ParserConfig.preset(name).name == name

    def test_unknown_preset(self):
        """Test that unknown preset names are rejected."""
        with pytest.raises(ConfigValidationError, match="Unknown preset") as exc_info:
            ParserConfig.preset("fastest")

        assert exc_info.value.suggestions == ["default", "hardened", "legacy"]

    @pytest.mark.parametrize("name", [["default"], None, 3])
    def test_preset_name_must_be_string(self, name):
        """Test that non-string preset names are validation errors."""
        with pytest.raises(ConfigValidationError, match="Unknown preset"):
            ParserConfig.preset(name)
