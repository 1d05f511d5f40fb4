from pydantic import BaseModel, Field
from typing import List


class TopicRow(BaseModel):
    name: str
    enqueued: int
    dequeued: int


class CreateTopicRequest(BaseModel):
    name: str = Field(..., min_length=1, examples=["orders.events"])


class MessageResponse(BaseModel):
    message: str


class BulkRemoveResponse(BaseModel):
    lines: List[str]
    summary: str


class HealthResponse(BaseModel):
    status: str
    brokerConnected: bool
