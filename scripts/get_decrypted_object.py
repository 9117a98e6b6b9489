#!/usr/bin/env python3
"""
Fetch an object from Amazon S3 and decrypt it with AWS KMS.

Usage:
    python scripts/get_decrypted_object.py --bucket my_bucket --key my_item

The object must hold a KMS ciphertext blob. The plaintext is written to
standard output; logs go to standard error. Any failure terminates the
process with a non-zero status unless --on-error suppress is given.
"""
import argparse
import sys

import structlog

from cloud_calls.config import OBJECT_FIELDS, CallConfig, load_config
from cloud_calls.encrypted_object import retrieve_and_decrypt, write_plaintext
from cloud_calls.error_handler import CloudCallError, ErrorPolicy
from cloud_calls.logging_config import setup_logging
from cloud_calls.models import ObjectLocator

SERVICE_NAME = "get-decrypted-object"
DEFAULT_REGION = "us-west-2"


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Fetch an S3 object and decrypt it with KMS")
    parser.add_argument("--bucket", type=str, help="S3 bucket (default: my_bucket)")
    parser.add_argument("--key", type=str, help="Object key (default: my_item)")
    parser.add_argument(
        "--region",
        type=str,
        help=f"AWS region (default: from environment, else {DEFAULT_REGION})"
    )
    parser.add_argument("--config", type=str, help="JSON configuration file")
    parser.add_argument(
        "--on-error",
        choices=[p.value for p in ErrorPolicy],
        help="What to do when a call fails (default: propagate)"
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        default=None,
        help="Emit JSON log lines"
    )
    return parser.parse_args(argv)


def main(argv=None, s3_client=None, kms_client=None, stream=None) -> int:
    """Main function."""
    args = parse_args(argv)

    try:
        config = load_config(
            path=args.config,
            base=CallConfig(region=DEFAULT_REGION, on_error=ErrorPolicy.PROPAGATE),
            fields=OBJECT_FIELDS,
            overrides={
                "bucket": args.bucket,
                "key": args.key,
                "region": args.region,
                "on_error": args.on_error,
                "json_logs": args.json_logs,
            }
        )
    except CloudCallError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    setup_logging(SERVICE_NAME, config.log_level, config.json_logs)
    locator = ObjectLocator(config.bucket, config.key)
    log = structlog.get_logger(SERVICE_NAME).bind(region=config.region, object=str(locator))
    log.info("retrieving encrypted object")

    # Propagated failures are left uncaught so the process exits non-zero
    plaintext = retrieve_and_decrypt(
        locator,
        s3_client=s3_client,
        kms_client=kms_client,
        on_error=config.on_error,
        region=config.region
    )

    if plaintext is None:
        log.warning("retrieval failed; error suppressed")
        return 0

    write_plaintext(plaintext, stream)
    return 0


if __name__ == "__main__":
    sys.exit(main())
