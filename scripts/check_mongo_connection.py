"""Check that MongoDB is reachable with the configured credentials."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from mongo_probe.config.logging import build_logging_config, configure_logging, get_logger
from mongo_probe.config.settings import ENV_FILE
from mongo_probe.db.mongo_client import DEFAULT_TIMEOUT
from mongo_probe.errors import ProbeFailure
from mongo_probe.smoke import check_connectivity

LOGGER = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Connect to MongoDB, ping it and disconnect")
    parser.add_argument("--env-file", type=Path, default=ENV_FILE, help="Dotfile with MONGODB_URI")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT, help="Deadline in seconds")
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    args = parser.parse_args(argv)

    configure_logging(build_logging_config(formatter="json" if args.json_logs else "console"))

    try:
        elapsed = check_connectivity(args.env_file, args.timeout)
    except ProbeFailure as exc:
        LOGGER.critical("Connectivity check failed at %s: %s", exc.step, exc.message)
        return 1

    print(f"MongoDB reachable, round trip finished in {elapsed:.2f}s")
    return 0


if __name__ == "__main__":
    sys.exit(main())
