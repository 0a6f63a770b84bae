#!/usr/bin/env python3
"""
dogseries CLI tool

Command line interface for sending a metrics snapshot to Datadog once and
printing the backend's sample configuration.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from dogseries.client import DatadogClient
from dogseries.config import SAMPLE_CONFIG, DatadogConfig
from dogseries.exceptions import DogseriesError
from dogseries.logger import logger, setup_logger
from dogseries.models import MetricMap


def load_snapshot(path: str) -> MetricMap:
    """
    Load a MetricMap from a JSON file

    Args:
        path: Path to the snapshot JSON file

    Returns:
        Parsed snapshot

    Raises:
        ValueError: If the file cannot be read or is not a valid snapshot
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ValueError(f"Unable to read snapshot {path}: {e}") from e
    try:
        return MetricMap.model_validate_json(content)
    except ValidationError as e:
        raise ValueError(f"Invalid snapshot {path}: {e.error_count()} validation error(s)\n{e}") from e


def run_send(
    snapshot_path: str,
    api_key: str | None = None,
    endpoint: str | None = None,
    timeout: float | None = None,
    max_elapsed_time: float | None = None,
    hostname: str | None = None,
) -> None:
    """
    Send one snapshot file to Datadog

    Configuration comes from DATADOG_* environment variables; arguments that
    are not None override them. Exits with status 1 on failure.
    """
    try:
        metrics = load_snapshot(snapshot_path)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        config = DatadogConfig.from_env(
            api_key=api_key,
            api_endpoint=endpoint,
            timeout=timeout,
            max_elapsed_time=max_elapsed_time,
        )
        client = DatadogClient(config, hostname=hostname)
        if metrics.num_stats == 0:
            logger.info("Snapshot holds no stats, nothing to send")
            return
        client.send_metrics(metrics)
    except DogseriesError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    logger.info(f"Sent {metrics.num_stats} stats to {config.api_endpoint}")


def main(argv: list[str] | None = None) -> None:
    """
    CLI main entry point
    """
    parser = argparse.ArgumentParser(description="Send statsd snapshots to Datadog")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log the outgoing payload and retries")
    subparsers = parser.add_subparsers(dest="command", help="Subcommands")

    subparsers.add_parser("sample-config", help="Print the backend's sample configuration")

    send_parser = subparsers.add_parser("send", help="Send a MetricMap JSON snapshot once")
    send_parser.add_argument("snapshot", help="Path to the snapshot JSON file")
    send_parser.add_argument("--api-key", default=None, help="Datadog API key (default: DATADOG_API_KEY)")
    send_parser.add_argument("--endpoint", default=None, help="Series ingestion URL (default: DATADOG_API_ENDPOINT or Datadog US)")
    send_parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds (default: 5)")
    send_parser.add_argument("--max-elapsed-time", type=float, default=None, help="Retry budget in seconds (default: 10)")
    send_parser.add_argument("--hostname", default=None, help="Default metric host (default: this machine's hostname)")

    args = parser.parse_args(argv)

    setup_logger(logging.DEBUG if args.verbose else logging.INFO)

    if args.command == "sample-config":
        print(SAMPLE_CONFIG)
    elif args.command == "send":
        run_send(
            snapshot_path=args.snapshot,
            api_key=args.api_key,
            endpoint=args.endpoint,
            timeout=args.timeout,
            max_elapsed_time=args.max_elapsed_time,
            hostname=args.hostname,
        )
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
