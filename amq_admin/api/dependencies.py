"""Reusable FastAPI dependencies (session, topic service)."""
from fastapi import Depends, Request

from amq_admin.core.exceptions import CommandUnavailableError
from amq_admin.domain.services.topic_service import TopicService
from amq_admin.infra.activemq.session import BrokerSession, broker_connected
from amq_admin.services.console import non_interactive


def get_session(request: Request) -> BrokerSession:
    return request.app.state.session


def get_topic_service(session: BrokerSession = Depends(get_session)) -> TopicService:
    """TopicService bound to the app's session; refused while disconnected."""
    if not broker_connected(session):
        raise CommandUnavailableError("No broker connected")
    return TopicService(
        session.broker,
        non_interactive(),
        order_field=session.settings.topics_order_field,
        max_workers=session.settings.max_workers,
    )
