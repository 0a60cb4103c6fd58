"""Plugin configuration parsed from the command line."""

from .plugin_spec import PluginSpec, PluginSpecParseError, PluginSpecs, parse_plugin_spec

__all__ = [
    "PluginSpec",
    "PluginSpecParseError",
    "PluginSpecs",
    "parse_plugin_spec",
]
