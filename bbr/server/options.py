"""Server options - command-line configuration for the body-based routing server."""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from bbr.config.plugin_spec import PLUGIN_SPEC_FORMAT, PluginSpecs
from bbr.flags import FlagSet
from bbr.observability.logging.options import LoggingOptions
from bbr.observability.logging.options import new_options as new_logging_options

logger = logging.getLogger(__name__)

DEFAULT_GRPC_PORT = 9004
DEFAULT_GRPC_HEALTH_PORT = 9005
DEFAULT_METRICS_PORT = 9090

MIN_PORT = 1
MAX_PORT = 65535


class PortRangeError(ValueError):
    """Raised when a port flag is outside 1-65535."""

    def __init__(self, flag_name: str, port: int):
        super().__init__(
            f'invalid value {port} for flag "{flag_name}": must be between {MIN_PORT} and {MAX_PORT}'
        )
        self.flag_name = flag_name
        self.port = port


class PortCollisionError(ValueError):
    """Raised when two of the server ports are the same."""

    def __init__(self, grpc_port: int, grpc_health_port: int, metrics_port: int):
        super().__init__(
            f"port conflict: grpc-port ({grpc_port}), grpc-health-port ({grpc_health_port}), "
            f"and metrics-port ({metrics_port}) must all be different"
        )
        self.ports = (grpc_port, grpc_health_port, metrics_port)


@dataclass
class ServerOptions:
    """Command-line configuration for the BBR server."""

    # ext_proc configuration.
    grpc_port: int = DEFAULT_GRPC_PORT  # gRPC port for communicating with Envoy proxy
    streaming: bool = False  # Envoy full-duplex streaming mode

    # Diagnostics.
    logging_options: LoggingOptions = field(default_factory=new_logging_options)
    metrics_port: int = DEFAULT_METRICS_PORT
    grpc_health_port: int = DEFAULT_GRPC_HEALTH_PORT  # gRPC liveness and readiness probes
    enable_pprof: bool = True
    secure_serving: bool = True
    metrics_endpoint_auth: bool = True

    # Plugins.
    plugin_specs: PluginSpecs = field(default_factory=PluginSpecs)

    def add_flags(self, fs: FlagSet) -> None:
        """Bind the option fields to flags on ``fs``, logging flags included."""
        fs.int_var(self, "grpc_port", "grpc-port", self.grpc_port,
                   "The gRPC port used for communicating with Envoy proxy.")
        fs.int_var(self, "grpc_health_port", "grpc-health-port", self.grpc_health_port,
                   "The port used for gRPC liveness and readiness probes.")
        fs.int_var(self, "metrics_port", "metrics-port", self.metrics_port,
                   "The metrics port exposed by BBR.")
        fs.bool_var(self, "metrics_endpoint_auth", "metrics-endpoint-auth", self.metrics_endpoint_auth,
                    "Enables authentication and authorization of the metrics endpoint.")
        fs.bool_var(self, "streaming", "streaming", self.streaming,
                    "Enables streaming support for Envoy full-duplex streaming mode.")
        fs.bool_var(self, "secure_serving", "secure-serving", self.secure_serving,
                    "Enables secure serving.")
        fs.bool_var(self, "enable_pprof", "enable-pprof", self.enable_pprof,
                    "Enables pprof handlers. Set to false to disable pprof handlers.")

        fs.var(self.plugin_specs, "plugin", f"Repeatable. --plugin {PLUGIN_SPEC_FORMAT}")

        self.logging_options.add_flags(fs)

    def complete(self) -> None:
        """Post-process parsed flags."""
        self.logging_options.complete()

    def validate(self) -> None:
        """Check the options for invalid or conflicting values.

        Raises:
            PortRangeError: if a port is outside 1-65535
            PortCollisionError: if any two ports are equal
            InvalidLogVerbosityError: if -v is negative
        """
        ports = [
            ("grpc-port", self.grpc_port),
            ("grpc-health-port", self.grpc_health_port),
            ("metrics-port", self.metrics_port),
        ]
        for flag_name, port in ports:
            if port < MIN_PORT or port > MAX_PORT:
                raise PortRangeError(flag_name, port)

        if len({port for _, port in ports}) < len(ports):
            raise PortCollisionError(self.grpc_port, self.grpc_health_port, self.metrics_port)

        self.logging_options.validate()

    def describe(self) -> Dict[str, Any]:
        """Serialize the resolved options for startup logging."""
        backend = self.logging_options.backend
        return {
            "grpc_port": self.grpc_port,
            "grpc_health_port": self.grpc_health_port,
            "metrics_port": self.metrics_port,
            "streaming": self.streaming,
            "secure_serving": self.secure_serving,
            "enable_pprof": self.enable_pprof,
            "metrics_endpoint_auth": self.metrics_endpoint_auth,
            "log_verbosity": self.logging_options.log_verbosity,
            "log_level": backend.resolved_level(),
            "log_encoder": backend.resolved_encoder(),
            "plugins": self.plugin_specs.describe(),
        }


def new_options() -> ServerOptions:
    """Return ServerOptions initialized with default values."""
    return ServerOptions()
