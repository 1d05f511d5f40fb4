"""Use-case coordination for topic add / remove / list / bulk remove."""
from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional

from pydantic import BaseModel

from amq_admin.core.exceptions import AlreadyExistsError, InvalidArgumentError, NotFoundError
from amq_admin.domain.models.filter import FilterCriteria
from amq_admin.domain.models.topic import TopicView, destination_name
from amq_admin.infra.activemq.broker import BrokerClient
from amq_admin.services.console import Console

log = logging.getLogger(__name__)

HEADERS = ["Topic Name", "Enqueued", "Dequeued"]
NO_TOPICS = "No topics found"


class BulkResult(BaseModel):
    """Sorted report lines of a bulk command plus its summary line."""

    lines: List[str]
    summary: str

    def render(self) -> str:
        return "\n".join([*self.lines, self.summary])


class TopicService:
    """Topic command set bound to one broker handle and one console.

    Parameters
    ----------
    broker : BrokerClient
        Management handle of the connected broker.
    console : Console
        Confirmation prompts, messages and table rendering.
    order_field : str, optional
        ``"Enqueued"`` or ``"Dequeued"`` to sort listings by that counter;
        anything else sorts by topic name.
    max_workers : int
        Pool size for the per-topic fan-out.
    """

    def __init__(
        self,
        broker: BrokerClient,
        console: Console,
        *,
        order_field: Optional[str] = None,
        max_workers: int = 8,
    ) -> None:
        self._broker = broker
        self._console = console
        self._order_field = order_field
        self._max_workers = max_workers
        self._mutation_lock = threading.Lock()

    # ------------------------------------------------------------------ #
    # Guards                                                              #
    # ------------------------------------------------------------------ #
    def _topic_names(self) -> set[str]:
        return {destination_name(ref) for ref in self._broker.list_topics()}

    def validate_topic_exists(self, name: str) -> None:
        if name not in self._topic_names():
            raise NotFoundError(f"Topic '{name}' not found")

    def validate_topic_not_exists(self, name: str) -> None:
        if name in self._topic_names():
            raise AlreadyExistsError(f"Topic '{name}' already exists")

    # ------------------------------------------------------------------ #
    # Queries                                                             #
    # ------------------------------------------------------------------ #
    def query_topics(self, criteria: FilterCriteria) -> List[TopicView]:
        """Fetch views of topics matching *criteria*, in listing order."""
        views = self._filtered_views(criteria)
        return sorted(views, key=self._sort_key())

    def list_topics(
        self,
        filter: Optional[str] = None,
        enqueued: Optional[str] = None,
        dequeued: Optional[str] = None,
    ) -> str:
        criteria = FilterCriteria.from_options(filter, enqueued, dequeued)
        views = self.query_topics(criteria)
        if not views:
            return self._console.warn(NO_TOPICS)
        table = self._console.render_table([v.as_row() for v in views], HEADERS)
        return f"{table}\nTotal topics: {len(views)}"

    # ------------------------------------------------------------------ #
    # Commands                                                            #
    # ------------------------------------------------------------------ #
    def add_topic(self, name: str) -> str:
        name = _required_name(name)
        self.validate_topic_not_exists(name)
        self._broker.add_topic(name)
        return self._console.info(f"Topic '{name}' added")

    def remove_topic(self, name: str, force: bool = False) -> str:
        name = _required_name(name)
        self.validate_topic_exists(name)
        self._console.confirm(force)
        self._broker.remove_topic(name)
        return self._console.info(f"Topic '{name}' removed")

    def remove_all_topics(
        self,
        force: bool = False,
        filter: Optional[str] = None,
        dry_run: bool = False,
        enqueued: Optional[str] = None,
        dequeued: Optional[str] = None,
    ) -> str:
        result = self.bulk_remove(force=force, filter=filter, dry_run=dry_run, enqueued=enqueued, dequeued=dequeued)
        if result is None:
            return self._console.warn(NO_TOPICS)
        return result.render()

    def bulk_remove(
        self,
        *,
        force: bool = False,
        filter: Optional[str] = None,
        dry_run: bool = False,
        enqueued: Optional[str] = None,
        dequeued: Optional[str] = None,
    ) -> BulkResult | None:
        """Remove every topic matching the filters.

        Returns ``None`` when nothing matched.
        """
        return self.with_filtered_topics(
            "removed",
            lambda view: self._broker.remove_topic(view.name),
            force=force,
            filter=filter,
            dry_run=dry_run,
            enqueued=enqueued,
            dequeued=dequeued,
        )

    def with_filtered_topics(
        self,
        action: str,
        callback: Callable[[TopicView], None],
        *,
        force: bool = False,
        filter: Optional[str] = None,
        dry_run: bool = False,
        enqueued: Optional[str] = None,
        dequeued: Optional[str] = None,
    ) -> BulkResult | None:
        """Apply *callback* to each matching topic after one confirmation.

        A failing item propagates; items already processed stay processed.
        """
        criteria = FilterCriteria.from_options(filter, enqueued, dequeued)
        if not dry_run:
            self._console.confirm(force)

        views = self._filtered_views(criteria)

        def _one(view: TopicView) -> str:
            if dry_run:
                return f"Topic to be {action}: '{view.name}'"
            with self._mutation_lock:
                callback(view)
            log.info("topic '%s' %s", view.name, action)
            return f"Topic {action}: '{view.name}'"

        lines = self._fan_out(_one, views)
        if not lines:
            return None
        dry_run_text = "to be " if dry_run else ""
        return BulkResult(lines=sorted(lines), summary=f"Total topics {dry_run_text}{action}: {len(lines)}")

    # ------------------------------------------------------------------ #
    # Helpers                                                             #
    # ------------------------------------------------------------------ #
    def _filtered_views(self, criteria: FilterCriteria) -> List[TopicView]:
        refs = [ref for ref in self._broker.list_topics() if criteria.matches_name(destination_name(ref))]
        views = self._fan_out(self._broker.topic_view, refs)
        return [v for v in views if criteria.matches_counts(v.enqueued, v.dequeued)]

    def _fan_out(self, fn, items: list) -> list:
        # returns once every item is done
        if not items:
            return []
        with ThreadPoolExecutor(max_workers=min(self._max_workers, len(items))) as ex:
            return list(ex.map(fn, items))

    def _sort_key(self):
        if self._order_field == "Enqueued":
            return lambda v: (v.enqueued, v.name)
        if self._order_field == "Dequeued":
            return lambda v: (v.dequeued, v.name)
        return lambda v: v.name


def _required_name(name: Optional[str]) -> str:
    if name is None or not name.strip():
        raise InvalidArgumentError("Topic name must not be empty")
    return name
