"""Main application entry point for the Impala JMX GC exporter."""

import argparse
import logging
import os
import signal
import sys
import threading
from typing import List, Optional

from prometheus_client import CollectorRegistry, generate_latest, start_http_server

from .collectors.coordinator import ScrapeCoordinator
from .config.loader import ConfigLoader
from .config.models import ExporterConfig
from .config.settings import Settings
from .services.publisher import MetricSnapshotPublisher
from .utils.logger import setup_logger


class ExporterApp:
    """
    Exporter application.

    Wires configuration, the scrape coordinator and the Prometheus
    publisher, then serves pulls until a shutdown signal arrives.
    """

    def __init__(self, config: ExporterConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize exporter application.

        Args:
            config: Validated exporter configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or setup_logger("impala_exporter", config.log_level)
        self.coordinator = ScrapeCoordinator(config, self.logger)
        self.publisher = MetricSnapshotPublisher(config, self.coordinator, self.logger)
        self.registry = self.publisher.register(CollectorRegistry())
        self._stop = threading.Event()

    def render_once(self) -> bytes:
        """Run one scrape cycle and return the exposition text."""
        return generate_latest(self.registry)

    def serve(self) -> None:
        """
        Start the exposition server and block until SIGINT/SIGTERM.

        Raises:
            OSError: If the listen port cannot be bound
        """
        start_http_server(
            self.config.exporter_port,
            addr=self.config.listen_address,
            registry=self.registry
        )
        self.logger.info(
            f"Serving metrics on {self.config.listen_address}:{self.config.exporter_port}",
            extra={"nodes": self.config.nodes, "workers": self.config.num_workers}
        )

        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)
        self._stop.wait()
        self.logger.info("Exporter stopped")

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, shutting down...")
        self._stop.set()


def build_config(args: argparse.Namespace) -> ExporterConfig:
    """
    Resolve configuration: YAML file, then environment, then CLI flags.

    Args:
        args: Parsed command-line arguments

    Returns:
        ExporterConfig: Validated configuration
    """
    config_path = args.config or Settings.config_path()
    base = ConfigLoader.load_from_file(config_path) if config_path else None
    config = ConfigLoader.load_from_env(base)

    overrides = {}
    if args.nodes is not None:
        overrides["nodes"] = args.nodes
    if args.port is not None:
        overrides["exporter_port"] = args.port
    if args.workers is not None:
        overrides["num_workers"] = args.workers
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if overrides:
        config = ExporterConfig(**{**config.model_dump(), **overrides})
    return config


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='Prometheus exporter for Impala JVM garbage-collector metrics',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Serve metrics for two daemons
  impala-exporter --nodes 10.0.0.14,10.0.0.15

  # Scrape once and print the exposition text
  impala-exporter --nodes 10.0.0.14 --run-once

  # Use a config file
  impala-exporter --config config/config.yaml
        """
    )

    parser.add_argument(
        '--config',
        default=None,
        help='Path to YAML configuration file (default: IMPALA_EXPORTER_CONFIG env var)'
    )

    parser.add_argument(
        '--nodes',
        default=None,
        help='Comma-separated Impala daemon hosts (overrides NODE_IP)'
    )

    parser.add_argument(
        '--port',
        type=int,
        default=None,
        help='Exporter listen port (overrides PORT, default 9206)'
    )

    parser.add_argument(
        '--workers',
        type=int,
        default=None,
        help='Maximum concurrent scrapes (overrides NUM_WORKERS, default 3)'
    )

    parser.add_argument(
        '--log-level',
        default=None,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (overrides LOG_LEVEL, default INFO)'
    )

    parser.add_argument(
        '--run-once',
        action='store_true',
        help='Scrape once, print metrics and exit'
    )

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    CLI entry point.

    Returns:
        int: Process exit code
    """
    args = parse_args(argv)
    # Level is applied once the configuration has been validated
    logger = setup_logger("impala_exporter")

    try:
        config = build_config(args)
    except Exception as e:
        logger.error(f"Invalid configuration: {e}", extra={"error_type": type(e).__name__})
        return 1

    logger.setLevel(config.log_level)
    app = ExporterApp(config, logger)

    if args.run_once:
        sys.stdout.write(app.render_once().decode("utf-8"))
        return 0

    try:
        app.serve()
    except OSError as e:
        app.logger.error(
            f"Failed to bind {config.listen_address}:{config.exporter_port}: {e}",
            extra={"pid": os.getpid()}
        )
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
