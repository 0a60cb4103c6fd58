"""BBR server configuration."""

from .options import (
    DEFAULT_GRPC_HEALTH_PORT,
    DEFAULT_GRPC_PORT,
    DEFAULT_METRICS_PORT,
    PortCollisionError,
    PortRangeError,
    ServerOptions,
    new_options,
)

__all__ = [
    "DEFAULT_GRPC_HEALTH_PORT",
    "DEFAULT_GRPC_PORT",
    "DEFAULT_METRICS_PORT",
    "PortCollisionError",
    "PortRangeError",
    "ServerOptions",
    "new_options",
]
