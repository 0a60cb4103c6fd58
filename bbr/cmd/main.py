#!/usr/bin/env python
"""
BBR server - command-line entry point

Usage:
    bbr --grpc-port 9004 --plugin body-field-to-header:model:{"field":"model"}
    python -m bbr -v 4 --zap-encoder json

Flags are parsed, completed and validated before the options reach the
server bootstrap; any configuration error ends startup with exit status 1.
"""

import logging
import sys
from typing import Callable, Optional, Sequence

from dotenv import load_dotenv

from bbr.flags import FlagParseError, FlagSet
from bbr.observability.logging.levels import VERBOSE, level_name, v_level
from bbr.server.options import ServerOptions, new_options

logger = logging.getLogger(__name__)

Bootstrap = Callable[[ServerOptions], None]


def parse_options(argv: Sequence[str]) -> ServerOptions:
    """Build ServerOptions from command-line arguments.

    Raises:
        FlagParseError: if the arguments cannot be parsed
        ValueError: if the parsed options fail validation
    """
    opts = new_options()
    fs = FlagSet("bbr")
    opts.add_flags(fs)
    fs.parse(argv)

    opts.complete()
    opts.validate()
    return opts


def log_configuration(opts: ServerOptions) -> None:
    """Log the resolved configuration."""
    logger.info("Starting BBR server")
    logger.info(f"  - gRPC port: {opts.grpc_port} (streaming={opts.streaming})")
    logger.info(f"  - gRPC health port: {opts.grpc_health_port}")
    logger.info(
        f"  - Metrics port: {opts.metrics_port} "
        f"(auth={opts.metrics_endpoint_auth}, secure={opts.secure_serving}, pprof={opts.enable_pprof})"
    )
    logger.info(
        f"  - Log level: {level_name(opts.logging_options.backend.resolved_level())} "
        f"(-v={opts.logging_options.log_verbosity})"
    )
    logger.info(f"  - Plugins: {len(opts.plugin_specs)}")
    for i, spec in enumerate(opts.plugin_specs, 1):
        logger.log(v_level(VERBOSE), f"    {i}. {spec.type}/{spec.name} parameters={spec.parameters}")


def main(argv: Optional[Sequence[str]] = None, bootstrap: Optional[Bootstrap] = None) -> int:
    """Parse the command line and hand the options to ``bootstrap``."""
    load_dotenv('.env')

    if argv is None:
        argv = sys.argv[1:]

    try:
        opts = parse_options(argv)
    except (FlagParseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    opts.logging_options.configure()
    logger.debug(f"Resolved options: {opts.describe()}")

    try:
        (bootstrap or log_configuration)(opts)
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
