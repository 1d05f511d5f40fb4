import pytest

from amq_admin.core.exceptions import ConnectivityError
from amq_admin.infra.activemq.session import BrokerSession, broker_connected
from conftest import FakeBroker


class FlakyBroker(FakeBroker):
    def __init__(self, failures):
        super().__init__()
        self.failures = failures

    def ping(self):
        if self.failures:
            self.failures -= 1
            raise ConnectivityError("down")
        return super().ping()


def test_connect_and_close(settings):
    broker = FakeBroker()
    session = BrokerSession(settings, factory=lambda s: broker)
    assert not broker_connected(session)
    with session:
        assert broker_connected(session)
        assert session.broker is broker
    assert not session.connected
    assert broker.closed


def test_connect_retries_then_succeeds(settings):
    flaky = FlakyBroker(failures=2)
    session = BrokerSession(settings.model_copy(update={"connect_max_tries": 3}), factory=lambda s: flaky)
    assert session.connect() is flaky


def test_connect_gives_up(settings):
    session = BrokerSession(settings.model_copy(update={"connect_max_tries": 2}), factory=lambda s: FlakyBroker(9))
    with pytest.raises(ConnectivityError):
        session.connect()
    assert not session.connected
