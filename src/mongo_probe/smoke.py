"""Load, connect, ping and disconnect in one bounded round."""

from __future__ import annotations

import os
import time

from mongo_probe.config import dotenv_loader
from mongo_probe.config.logging import get_logger
from mongo_probe.config.settings import ENV_FILE
from mongo_probe.db.mongo_client import DEFAULT_TIMEOUT, new_client
from mongo_probe.deadline import Deadline

LOGGER = get_logger(__name__)


def check_connectivity(
    env_file: str | os.PathLike[str] = ENV_FILE,
    timeout: float = DEFAULT_TIMEOUT,
) -> float:
    """Run the connectivity round and return the elapsed seconds.

    Any failure propagates as a ``ProbeFailure`` naming its step.
    """
    started = time.monotonic()
    dotenv_loader.load(env_file)

    with Deadline(timeout) as deadline:
        connection = new_client(deadline)
        try:
            connection.ping(deadline)
        except BaseException:
            # the ping failure is what gets reported, so skip the graceful path
            connection.client.close()
            raise
        LOGGER.info("MongoDB answered ping", extra={"remaining": round(deadline.remaining(), 3)})
        connection.disconnect(deadline)

    elapsed = time.monotonic() - started
    LOGGER.info("Connectivity check passed", extra={"elapsed": round(elapsed, 3)})
    return elapsed
