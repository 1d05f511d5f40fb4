"""
Shared fixtures: an in-memory broker standing in for the Jolokia adapter.
"""
import threading

import pytest

from amq_admin.core.config import Settings
from amq_admin.core.exceptions import BrokerOperationError
from amq_admin.domain.models.topic import TopicView
from amq_admin.services.console import Console


def object_name(name: str, broker: str = "localhost") -> str:
    return f"org.apache.activemq:brokerName={broker},destinationName={name},destinationType=Topic,type=Broker"


class FakeBroker:
    """Thread-safe in-memory broker recording every call."""

    def __init__(self, topics=None):
        self._topics = {name: [enq, deq] for name, (enq, deq) in (topics or {}).items()}
        self._lock = threading.Lock()
        self.calls = []
        self.fail_remove = set()
        self.closed = False

    def _record(self, *call):
        with self._lock:
            self.calls.append(call)

    @property
    def mutations(self):
        return [c for c in self.calls if c[0] in ("add_topic", "remove_topic")]

    def ping(self):
        return "ID:fake"

    def list_topics(self):
        self._record("list_topics")
        with self._lock:
            return [object_name(n) for n in self._topics]

    def _lookup(self, ref):
        name = ref.split("destinationName=")[1].split(",")[0]
        with self._lock:
            enq, deq = self._topics[name]
        return name, enq, deq

    def topic_view(self, ref):
        self._record("topic_view", ref)
        name, enq, deq = self._lookup(ref)
        return TopicView(name=name, enqueued=enq, dequeued=deq)

    def get_name(self, ref):
        return self._lookup(ref)[0]

    def get_enqueue_count(self, ref):
        return self._lookup(ref)[1]

    def get_dequeue_count(self, ref):
        return self._lookup(ref)[2]

    def add_topic(self, name):
        self._record("add_topic", name)
        with self._lock:
            self._topics[name] = [0, 0]

    def remove_topic(self, name):
        self._record("remove_topic", name)
        if name in self.fail_remove:
            raise BrokerOperationError(f"cannot remove {name}")
        with self._lock:
            self._topics.pop(name, None)

    def topic_names(self):
        with self._lock:
            return sorted(self._topics)

    def close(self):
        self.closed = True


@pytest.fixture
def broker() -> FakeBroker:
    return FakeBroker({"A": (5, 2), "B": (10, 1)})


@pytest.fixture
def empty_broker() -> FakeBroker:
    return FakeBroker()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        jolokia_url="http://broker.test:8161/api/jolokia",
        broker_name="localhost",
        connect_max_tries=1,
        connect_backoff_sec=0,
        _env_file=None,
    )


class PromptRecorder:
    def __init__(self, answer: bool):
        self.answer = answer
        self.asked = 0

    def __call__(self, text: str) -> bool:
        self.asked += 1
        return self.answer


@pytest.fixture
def yes() -> PromptRecorder:
    return PromptRecorder(True)


@pytest.fixture
def no() -> PromptRecorder:
    return PromptRecorder(False)


@pytest.fixture
def console_factory():
    def _make(prompt=None):
        return Console(prompt=prompt or PromptRecorder(True), table_format="psql")

    return _make
