from __future__ import annotations

import logging
import time
from typing import Callable, Optional

from amq_admin.core.config import Settings, get_settings
from amq_admin.core.exceptions import ConnectivityError
from amq_admin.infra.activemq.broker import BrokerClient
from amq_admin.infra.activemq.jolokia import JolokiaBrokerClient

log = logging.getLogger(__name__)


class BrokerSession:
    """
    Connection context handed to every command handler.
    Created at connect time, torn down at disconnect time; there is no
    process-wide "current broker".
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        factory: Optional[Callable[[Settings], BrokerClient]] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self._factory = factory or JolokiaBrokerClient
        self.broker: BrokerClient | None = None

    @property
    def connected(self) -> bool:
        return self.broker is not None

    def connect(self) -> BrokerClient:
        if self.broker is not None:
            return self.broker

        last_exc: ConnectivityError | None = None
        tries = self.settings.connect_max_tries
        for attempt in range(1, tries + 1):
            client = self._factory(self.settings)
            try:
                ping = getattr(client, "ping", None)
                if ping is not None:
                    ping()
            except ConnectivityError as exc:
                _close(client)
                last_exc = exc
                log.warning("connect attempt %d/%d failed: %s", attempt, tries, exc)
                if attempt < tries:
                    time.sleep(self.settings.connect_backoff_sec * attempt)
                continue
            except Exception:
                _close(client)
                raise
            self.broker = client
            log.info("connected to broker '%s'", self.settings.broker_name)
            return client
        # give up
        raise last_exc or ConnectivityError("Failed to connect to broker")

    def close(self) -> None:
        if self.broker is not None:
            _close(self.broker)
            self.broker = None
            log.info("disconnected from broker '%s'", self.settings.broker_name)

    def __enter__(self) -> "BrokerSession":
        self.connect()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def broker_connected(session: BrokerSession) -> bool:
    """Availability predicate shared by all topic commands."""
    return session.connected


def _close(client: object) -> None:
    close = getattr(client, "close", None)
    if close is not None:
        close()
