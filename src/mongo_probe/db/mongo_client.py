"""MongoDB client factory and handle."""

from __future__ import annotations

from typing import Any
from urllib.parse import quote_plus, urlparse

from pydantic import ValidationError
from pymongo import MongoClient
from pymongo.errors import InvalidURI, PyMongoError

from mongo_probe.config.logging import get_logger
from mongo_probe.config.settings import MongoSettings, get_settings
from mongo_probe.deadline import Deadline
from mongo_probe.errors import ConfigError, ConnectError, DisconnectError, ProbeError

LOGGER = get_logger(__name__)

# Budget, in seconds, for one connect/ping/disconnect round.
DEFAULT_TIMEOUT = 10.0


def build_mongo_uri(settings: MongoSettings) -> str:
    """Embed credentials into the URI unless it already carries some."""
    uri = settings.mongodb_uri
    if not settings.mongodb_user:
        return uri

    parsed = urlparse(uri)
    if "@" in parsed.netloc:
        return uri

    credentials = quote_plus(settings.mongodb_user)
    if settings.mongodb_password:
        credentials += f":{quote_plus(settings.mongodb_password)}"
    return f"{parsed.scheme}://{credentials}@{uri[len(parsed.scheme) + 3:]}"


class MongoConnection:
    """Owns one ``MongoClient`` until it is disconnected."""

    def __init__(self, client: MongoClient[Any]) -> None:
        self._client = client
        self._closed = False

    @property
    def client(self) -> MongoClient[Any]:
        return self._client

    @property
    def closed(self) -> bool:
        return self._closed

    def ping(self, deadline: Deadline) -> dict[str, Any]:
        """Send the ``ping`` admin command within the deadline."""
        if self._closed:
            raise ProbeError("client is disconnected")

        try:
            with deadline.scope(ProbeError):
                response = self._client.admin.command("ping")
        except PyMongoError as exc:
            raise ProbeError(str(exc)) from exc

        if response.get("ok", 0) != 1:
            raise ProbeError(f"unexpected ping response: {response}")
        return response

    def disconnect(self, deadline: Deadline) -> None:
        """Close the client. A handle can only be disconnected once."""
        if self._closed:
            raise DisconnectError("client already disconnected")
        self._closed = True

        try:
            with deadline.scope(DisconnectError):
                self._client.close()
        except DisconnectError:
            # deadline missed before close ran, release the pool anyway
            self._client.close()
            raise
        except PyMongoError as exc:
            raise DisconnectError(str(exc)) from exc
        LOGGER.info("Disconnected from MongoDB")


def _load_settings() -> MongoSettings:
    try:
        return get_settings()
    except ValidationError as exc:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        raise ConfigError(f"invalid MongoDB settings ({problems})") from exc


def new_client(
    deadline: Deadline,
    settings: MongoSettings | None = None,
    *,
    verify: bool = False,
) -> MongoConnection:
    """Build a client whose setup work is bounded by ``deadline``.

    Construction does not wait for a server unless ``verify`` is set, in which
    case a ``hello`` handshake must complete before the deadline.
    """
    cfg = settings or _load_settings()
    uri = build_mongo_uri(cfg)
    LOGGER.info("Connecting to MongoDB", extra={"uri": cfg.sanitize_uri(uri)})

    try:
        with deadline.scope(ConnectError):
            budget_ms = deadline.remaining_ms()
            client: MongoClient[Any] = MongoClient(
                uri,
                appname=cfg.app_name,
                tz_aware=True,
                serverSelectionTimeoutMS=budget_ms,
                connectTimeoutMS=budget_ms,
            )
    except (InvalidURI, ValueError) as exc:
        # bad ports surface as ValueError
        raise ConfigError(str(exc)) from exc
    except PyMongoError as exc:
        # includes ConfigurationError from SRV lookups of unresolvable hosts
        raise ConnectError(str(exc)) from exc

    connection = MongoConnection(client)
    if not verify:
        return connection

    try:
        with deadline.scope(ConnectError):
            client.admin.command("hello")
    except ConnectError:
        client.close()
        raise
    except PyMongoError as exc:
        client.close()
        raise ConnectError(str(exc)) from exc

    return connection
