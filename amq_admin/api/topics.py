# amq_admin/api/topics.py
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from amq_admin.api.dependencies import get_topic_service
from amq_admin.domain.models.filter import FilterCriteria
from amq_admin.domain.services.topic_service import TopicService
from amq_admin.models.topics import BulkRemoveResponse, CreateTopicRequest, MessageResponse, TopicRow

router = APIRouter(prefix="/topics", tags=["topics"])


def _clean_q(q: Optional[str]) -> Optional[str]:
    """None, empty or blank -> None."""
    if not q or not q.strip():
        return None
    return q.strip()


@router.get("", response_model=list[TopicRow])
def list_topics(
    filter: Optional[str] = Query(None, description="Optional name substring (case-insensitive)"),
    enqueued: Optional[str] = Query(None, description="Enqueued filter, e.g. '>100'"),
    dequeued: Optional[str] = Query(None, description="Dequeued filter, e.g. '=0'"),
    svc: TopicService = Depends(get_topic_service),
):
    """
    Returns topics with their counters, in listing order:
      [{ name, enqueued, dequeued }, ...]
    """
    criteria = FilterCriteria.from_options(_clean_q(filter), enqueued, dequeued)
    return [TopicRow(name=v.name, enqueued=v.enqueued, dequeued=v.dequeued) for v in svc.query_topics(criteria)]


@router.post("", status_code=status.HTTP_201_CREATED, response_model=MessageResponse)
def add_topic(body: CreateTopicRequest, svc: TopicService = Depends(get_topic_service)):
    return MessageResponse(message=svc.add_topic(body.name))


@router.post("/remove-all", response_model=BulkRemoveResponse)
def remove_all_topics(
    force: bool = Query(False, description="Required unless dry_run"),
    filter: Optional[str] = Query(None),
    dry_run: bool = Query(False),
    enqueued: Optional[str] = Query(None),
    dequeued: Optional[str] = Query(None),
    svc: TopicService = Depends(get_topic_service),
):
    result = svc.bulk_remove(
        force=force, filter=_clean_q(filter), dry_run=dry_run, enqueued=enqueued, dequeued=dequeued
    )
    if result is None:
        return BulkRemoveResponse(lines=[], summary="No topics found")
    return BulkRemoveResponse(lines=result.lines, summary=result.summary)


@router.delete("/{name}", response_model=MessageResponse)
def remove_topic(
    name: str,
    force: bool = Query(False, description="Must be true; there is no interactive prompt"),
    svc: TopicService = Depends(get_topic_service),
):
    return MessageResponse(message=svc.remove_topic(name, force=force))
