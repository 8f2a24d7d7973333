"""Tests for PluginRegistryBase config coercion and the plugin contract helpers."""

from dataclasses import dataclass
import os
import sys
import unittest

# Add project root directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import BaseModel  # noqa: E402

from preset_core.plugin_contract import (  # noqa: E402
    forbid_unknown_keys,
    require_config_type,
    require_plugin_name,
)
from preset_core.plugin_registry_base import PluginRegistryBase  # noqa: E402


class DummyRegistry(PluginRegistryBase[object]):
    """Minimal registry subclass for exercising _coerce_config."""

    _plugin_kind = "dummy"

    @classmethod
    def _discover_internal(cls):
        return {"listed": (PluginWithDataclass, "test fixture")}

    @classmethod
    def _is_valid_plugin(cls, plugin_cls):
        return bool(getattr(plugin_cls, "plugin_name", ""))


@dataclass
class RequiredConfig:
    required: str


class PluginWithRequiredConfig:
    plugin_name = "with_required"
    ConfigType = RequiredConfig


class PluginWithoutConfigType:
    plugin_name = "no_config_type"


class PlainConfig:
    def __init__(self, value):
        self.value = value


class PluginWithPlainClass:
    plugin_name = "plain_class"
    ConfigType = PlainConfig


class PluginWithDataclass:
    plugin_name = "dataclass_plugin"
    ConfigType = RequiredConfig


class StrictModel(BaseModel):
    level: int = 1


class PluginWithModel:
    plugin_name = "model_plugin"
    ConfigType = StrictModel


class TestPluginRegistryBaseCoerceConfig(unittest.TestCase):
    """Covers input variations to lock down _coerce_config contract."""

    def test_none_with_required_args_raises_typeerror(self):
        with self.assertRaises(TypeError) as ctx:
            DummyRegistry._coerce_config(PluginWithRequiredConfig, None)

        self.assertIn("requires arguments", str(ctx.exception))

    def test_none_without_configtype_returns_none(self):
        marker = object()
        self.assertIs(
            marker, DummyRegistry._coerce_config(PluginWithoutConfigType, marker)
        )

    def test_dict_to_dataclass(self):
        config = DummyRegistry._coerce_config(PluginWithDataclass, {"required": "x"})
        self.assertEqual(config, RequiredConfig("x"))

    def test_dict_to_dataclass_with_bad_keys(self):
        with self.assertRaises(TypeError):
            DummyRegistry._coerce_config(PluginWithDataclass, {"other": "x"})

    def test_dict_to_pydantic_model(self):
        config = DummyRegistry._coerce_config(PluginWithModel, {"level": "3"})
        self.assertEqual(config.level, 3)
        with self.assertRaises(ValueError):
            DummyRegistry._coerce_config(PluginWithModel, {"level": "high"})

    def test_dict_to_non_dataclass_non_pydantic_raises_typeerror(self):
        with self.assertRaises(TypeError) as ctx:
            DummyRegistry._coerce_config(PluginWithPlainClass, {"value": 1})

        self.assertIn("Cannot coerce dict", str(ctx.exception))

    def test_unhandled_type_passes_through(self):
        config = ("not", "a", "dict")
        self.assertIs(
            config,
            DummyRegistry._coerce_config(PluginWithDataclass, config),
        )


class TestPluginRegistryBaseLookup(unittest.TestCase):
    def tearDown(self):
        DummyRegistry._reset()

    def test_discovered_plugins_and_origin(self):
        self.assertIs(DummyRegistry.get("LISTED"), PluginWithDataclass)
        self.assertEqual(DummyRegistry.origin_of("listed"), "test fixture")
        self.assertIsNone(DummyRegistry.origin_of("missing"))

    def test_runtime_registration_overrides_discovery(self):
        DummyRegistry.register(PluginWithModel)
        self.assertEqual(DummyRegistry.list_available(), ["listed", "model_plugin"])
        with self.assertWarns(UserWarning):
            DummyRegistry.register(PluginWithModel)

    def test_unknown_plugin_lists_available(self):
        with self.assertRaises(KeyError) as ctx:
            DummyRegistry.get("missing")
        self.assertIn("listed", str(ctx.exception))


class TestPluginContractHelpers(unittest.TestCase):
    def test_require_plugin_name(self):
        self.assertEqual(
            require_plugin_name(PluginWithModel, kind="parameter package"), "model_plugin"
        )
        with self.assertRaises(ValueError) as ctx:
            require_plugin_name(object, kind="parameter package")
        self.assertIn("Parameter package subclasses", str(ctx.exception))

    def test_require_config_type(self):
        self.assertIs(require_config_type(PluginWithModel), StrictModel)
        self.assertIsNone(require_config_type(PluginWithoutConfigType))

    def test_forbid_unknown_keys(self):
        @forbid_unknown_keys
        class LooseModel(BaseModel):
            size: int = 0

        with self.assertRaises(ValueError):
            LooseModel(size=1, colour="red")

    def test_forbid_unknown_keys_rejects_non_model(self):
        with self.assertRaises(TypeError):
            forbid_unknown_keys(PlainConfig)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
