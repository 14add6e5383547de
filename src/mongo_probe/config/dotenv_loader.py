"""Overlay a dotfile onto the process environment."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv.parser import parse_stream

from mongo_probe.config.logging import get_logger
from mongo_probe.errors import LoadError

LOGGER = get_logger(__name__)


def read_dotenv(path: str | os.PathLike[str]) -> dict[str, str]:
    """Parse ``KEY=VALUE`` lines from ``path`` without touching the environment."""
    dotfile = Path(path)
    values: dict[str, str] = {}

    try:
        with dotfile.open(encoding="utf-8") as stream:
            for binding in parse_stream(stream):
                if binding.error:
                    raise LoadError(
                        f"{dotfile}:{binding.original.line}: cannot parse {binding.original.string.strip()!r}"
                    )
                if binding.key is None:
                    continue
                if binding.value is None:
                    raise LoadError(f"{dotfile}:{binding.original.line}: missing '=' after {binding.key!r}")
                values[binding.key] = binding.value
    except OSError as exc:
        raise LoadError(f"cannot read {dotfile}: {exc.strerror or exc}") from exc
    except UnicodeDecodeError as exc:
        raise LoadError(f"{dotfile} is not valid UTF-8: {exc.reason}") from exc

    return values


def load(path: str | os.PathLike[str]) -> dict[str, str]:
    """Set every key from the dotfile that is not already in ``os.environ``.

    Returns the parsed mapping. Keys already present in the environment keep
    their value, so calling this twice has no further effect.
    """
    values = read_dotenv(path)

    applied = []
    for key, value in values.items():
        if key in os.environ:
            continue
        os.environ[key] = value
        applied.append(key)

    LOGGER.debug("Loaded dotenv file", extra={"path": str(path), "applied": applied})
    return values
