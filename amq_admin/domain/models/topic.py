"""Topic view model built from the broker's topic management bean."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TopicView(BaseModel):
    """Point-in-time view of a topic's name and traffic counters."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(..., alias="Name", min_length=1, examples=["orders.events"])
    enqueued: int = Field(0, alias="EnqueueCount", ge=0)
    dequeued: int = Field(0, alias="DequeueCount", ge=0)

    @field_validator("name")
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("topic name must not be blank")
        return v

    def as_row(self) -> list:
        return [self.name, self.enqueued, self.dequeued]


def destination_name(object_name: str) -> str:
    """Return the ``destinationName`` key property of a JMX object name.

    Quoted values may contain ``,``, ``=`` and ``\\``-escapes.

    >>> destination_name("org.apache.activemq:brokerName=localhost,destinationName=a.b,destinationType=Topic,type=Broker")
    'a.b'
    """
    return key_properties(object_name).get("destinationName", "")


def key_properties(object_name: str) -> dict[str, str]:
    """Split the key property list of a JMX object name, unquoting values."""
    _, _, props = object_name.partition(":")
    out: dict[str, str] = {}
    i, n = 0, len(props)
    while i < n:
        eq = props.find("=", i)
        if eq < 0:
            break
        key = props[i:eq].strip()
        i = eq + 1
        if i < n and props[i] == '"':
            chars = []
            i += 1
            while i < n and props[i] != '"':
                if props[i] == "\\" and i + 1 < n:
                    i += 1
                    chars.append({"n": "\n"}.get(props[i], props[i]))
                else:
                    chars.append(props[i])
                i += 1
            value = "".join(chars)
            comma = props.find(",", i + 1)
        else:
            comma = props.find(",", i)
            value = props[i:comma if comma >= 0 else n].strip()
        out[key] = value
        if comma < 0:
            break
        i = comma + 1
    return out
