"""Capability set the topic commands need from a broker management handle."""
from __future__ import annotations

from typing import List, Protocol, runtime_checkable

from amq_admin.domain.models.topic import TopicView


@runtime_checkable
class BrokerClient(Protocol):
    """Typed view over the broker and topic management beans.

    Topic references are JMX object names as returned by the broker's
    ``Topics`` attribute. Commands read topics through :meth:`topic_view`;
    ``get_name``, ``get_enqueue_count`` and ``get_dequeue_count`` are the
    single-attribute accessors of the same bean, one request each.
    """

    def list_topics(self) -> List[str]:
        """Return object names of every registered topic."""
        ...

    def topic_view(self, ref: str) -> TopicView:
        """Read name and both counters of one topic in a single request."""
        ...

    def get_name(self, ref: str) -> str: ...

    def get_enqueue_count(self, ref: str) -> int: ...

    def get_dequeue_count(self, ref: str) -> int: ...

    def add_topic(self, name: str) -> None: ...

    def remove_topic(self, name: str) -> None: ...
