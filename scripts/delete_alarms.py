#!/usr/bin/env python3
"""
Delete Amazon CloudWatch alarms by name.

Usage:
    python scripts/delete_alarms.py --alarm-name Web_Server_CPU_Utilization

Failures are logged and suppressed by default, so the exit status is 0
even when CloudWatch rejects the request. Pass --on-error propagate to
exit non-zero instead.
"""
import argparse
import json
import sys

import structlog

from cloud_calls.alarm_deletion import delete_alarms
from cloud_calls.config import ALARM_FIELDS, CallConfig, load_config
from cloud_calls.error_handler import CloudCallError, ErrorPolicy
from cloud_calls.logging_config import setup_logging

SERVICE_NAME = "delete-alarms"


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Delete CloudWatch alarms by name")
    parser.add_argument(
        "--alarm-name",
        dest="alarm_names",
        action="append",
        help="Alarm to delete; repeat for several (default: Web_Server_CPU_Utilization)"
    )
    parser.add_argument(
        "--region",
        type=str,
        help="AWS region (default: from environment, else us-east-1)"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="JSON configuration file"
    )
    parser.add_argument(
        "--on-error",
        choices=[p.value for p in ErrorPolicy],
        help="What to do when CloudWatch rejects the request (default: suppress)"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Emit JSON log lines"
    )
    return parser.parse_args(argv)


def main(argv=None, client=None) -> int:
    """Main function."""
    args = parse_args(argv)

    try:
        config = load_config(
            path=args.config,
            base=CallConfig(on_error=ErrorPolicy.SUPPRESS),
            fields=ALARM_FIELDS,
            overrides={
                "alarm_names": args.alarm_names,
                "region": args.region,
                "on_error": args.on_error,
                "json_logs": args.json_logs,
            }
        )
    except CloudCallError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(SERVICE_NAME, config.log_level, config.json_logs)
    log = structlog.get_logger(SERVICE_NAME).bind(region=config.region)
    log.info("deleting alarms", alarm_names=list(config.alarm_names))

    try:
        response = delete_alarms(
            config.alarm_names,
            client=client,
            on_error=config.on_error,
            region=config.region
        )
    except CloudCallError as e:
        log.error("alarm deletion failed", error_type=e.error_type.value)
        return 1

    if response is None:
        log.warning("alarm deletion failed; error suppressed")
        return 0

    metadata = response.get("ResponseMetadata", {})
    log.info("alarms deleted", request_id=metadata.get("RequestId"))
    print(json.dumps(metadata, indent=2, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())
