"""ActiveMQ management façade built on the Jolokia HTTP bridge (httpx)."""
from __future__ import annotations

import logging
from typing import Any, List, Optional
from urllib.parse import urlsplit

import httpx

from amq_admin.core.config import Settings, get_settings
from amq_admin.core.exceptions import BrokerOperationError, ConnectivityError
from amq_admin.domain.models.topic import TopicView

log = logging.getLogger(__name__)

_TOPIC_ATTRIBUTES = ["Name", "EnqueueCount", "DequeueCount"]


class JolokiaBrokerClient:
    """Encapsulates topic admin operations against one ActiveMQ broker.

    Parameters
    ----------
    settings : Settings, optional
        Endpoint, broker name, credentials and timeout.
    transport : httpx.BaseTransport, optional
        Alternate transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.BaseTransport] = None) -> None:
        self._settings = settings or get_settings()
        self.url = self._settings.jolokia_url.rstrip("/")
        self.broker_mbean = f"org.apache.activemq:type=Broker,brokerName={self._settings.broker_name}"
        auth = None
        if self._settings.username:
            auth = (self._settings.username, self._settings.password or "")
        parts = urlsplit(self.url)
        self._client = httpx.Client(
            auth=auth,
            timeout=self._settings.request_timeout_sec,
            transport=transport,
            # Jolokia's CORS strict checking rejects requests without an Origin
            headers={"Origin": f"{parts.scheme}://{parts.netloc}"},
        )

    def close(self) -> None:
        self._client.close()

    # ---------- Jolokia request plumbing ------------------------------------

    def _request(self, payload: dict) -> Any:
        log.debug("jolokia %s %s", payload.get("type"), payload.get("mbean"))
        try:
            resp = self._client.post(self.url, json=payload)
        except httpx.TransportError as exc:
            raise ConnectivityError(f"Broker management endpoint {self.url} unreachable: {exc}") from exc
        if resp.status_code in (401, 403):
            raise ConnectivityError(f"Access to {self.url} denied (HTTP {resp.status_code})")
        try:
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPStatusError, ValueError) as exc:
            raise BrokerOperationError(f"Unexpected response from {self.url}: {exc}") from exc

        # Jolokia reports failures in-band with HTTP 200
        status = body.get("status", 200)
        if status != 200:
            raise BrokerOperationError(
                body.get("error") or f"Jolokia request failed with status {status}",
                error_type=body.get("error_type"),
            )
        return body.get("value")

    def _read(self, mbean: str, attribute: Any) -> Any:
        return self._request({"type": "read", "mbean": mbean, "attribute": attribute})

    def _exec(self, mbean: str, operation: str, *arguments: Any) -> Any:
        return self._request({"type": "exec", "mbean": mbean, "operation": operation, "arguments": list(arguments)})

    # ---------- Broker ------------------------------------------------------

    def ping(self) -> str:
        """Return the broker id; fails if the broker bean is not reachable."""
        return str(self._read(self.broker_mbean, "BrokerId"))

    def list_topics(self) -> List[str]:
        refs = self._read(self.broker_mbean, "Topics") or []
        return [r["objectName"] if isinstance(r, dict) else str(r) for r in refs]

    def add_topic(self, name: str) -> None:
        self._exec(self.broker_mbean, "addTopic(java.lang.String)", name)

    def remove_topic(self, name: str) -> None:
        self._exec(self.broker_mbean, "removeTopic(java.lang.String)", name)

    # ---------- Topic views -------------------------------------------------

    def topic_view(self, ref: str) -> TopicView:
        return TopicView.model_validate(self._read(ref, _TOPIC_ATTRIBUTES))

    def get_name(self, ref: str) -> str:
        return str(self._read(ref, "Name"))

    def get_enqueue_count(self, ref: str) -> int:
        return int(self._read(ref, "EnqueueCount"))

    def get_dequeue_count(self, ref: str) -> int:
        return int(self._read(ref, "DequeueCount"))
