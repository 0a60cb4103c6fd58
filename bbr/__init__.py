"""Body-based routing (BBR) server configuration.

Imports are lazy so ``python -m bbr`` does not load every subpackage up front.
"""

__all__ = [
    "FlagSet",
    "PluginSpec",
    "PluginSpecs",
    "LoggingOptions",
    "ServerOptions",
]


def __getattr__(name):
    if name == "FlagSet":
        from bbr.flags import FlagSet
        return FlagSet
    if name in ("PluginSpec", "PluginSpecs"):
        from bbr.config import plugin_spec
        return getattr(plugin_spec, name)
    if name == "LoggingOptions":
        from bbr.observability.logging.options import LoggingOptions
        return LoggingOptions
    if name == "ServerOptions":
        from bbr.server.options import ServerOptions
        return ServerOptions
    raise AttributeError(f"module 'bbr' has no attribute {name!r}")
