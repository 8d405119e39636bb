"""Command-line entry point for the deployment bucket reconciler."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Sequence

import yaml
from prometheus_client import REGISTRY, write_to_textfile

from . import logging as structured_logging
from .builders.provider import create_provider_from_config
from .constants import HOOK_BEFORE_VALIDATE
from .plugin import DeploymentBucketPlugin
from .tracing import initialize_tracing
from .utils.errors import ConfigurationError, sanitize_exception

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_CONFIG_ERROR = 2


def load_service_config(path: Path) -> dict[str, Any]:
    """Load a service configuration file (YAML or JSON).

    Raises:
        ConfigurationError: If the file cannot be read or is not a mapping
    """
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Cannot parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{path} must contain a mapping at the top level")
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deployment-bucket",
        description="Reconcile the deployment bucket declared in a service configuration",
    )
    parser.add_argument("--config", "-c", type=Path, default=Path("serverless.yml"),
                        help="Service configuration file (default: serverless.yml)")
    parser.add_argument("--command", dest="commands", action="append", default=None,
                        help="Command of the current deployment invocation; repeatable (default: deploy)")
    parser.add_argument("--host-version", default=None,
                        help="Version of the deployment tool, selects where the bucket is declared")
    parser.add_argument("--region", default=None, help="AWS region override")
    parser.add_argument("--profile", default=None, help="AWS shared-config profile")
    parser.add_argument("--endpoint-url", default=None, help="S3 endpoint URL for S3-compatible services")
    parser.add_argument("--metrics-file", type=Path, default=None,
                        help="Write Prometheus metrics to this file after the run")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    parser.add_argument("--json-logs", action="store_true", help="Emit structured JSON log events")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the reconciler once and return the process exit code.

    A failed reconciliation is reported but still exits 0 so the
    surrounding deployment is not blocked. Only a configuration file that
    cannot be read or parsed exits 2.
    """
    args = build_parser().parse_args(argv)

    structured_logging.setup_structured_logging(level=args.log_level, json_output=args.json_logs)
    initialize_tracing()

    try:
        service = load_service_config(args.config)
    except ConfigurationError as e:
        logger.error(f"Invalid configuration: {sanitize_exception(e)}")
        return EXIT_CONFIG_ERROR

    try:
        plugin = DeploymentBucketPlugin(
            service,
            commands=args.commands or ["deploy"],
            host_version=args.host_version,
            provider_factory=lambda: create_provider_from_config(
                service,
                region=args.region,
                profile=args.profile,
                endpoint=args.endpoint_url,
            ),
        )
    except ConfigurationError as e:
        logger.error(f"Deployment bucket settings rejected, skipping: {sanitize_exception(e)}")
    else:
        if plugin.run_hook(HOOK_BEFORE_VALIDATE) is None:
            logger.info("Deployment bucket plugin inactive, nothing to do")

    if args.metrics_file is not None:
        try:
            write_to_textfile(str(args.metrics_file), REGISTRY)
        except OSError as e:
            logger.error(f"Cannot write metrics to {args.metrics_file}: {e}")

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
