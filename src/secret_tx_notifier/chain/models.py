from __future__ import annotations

from pydantic import BaseModel, Field


class Attribute(BaseModel):
    key: str
    value: str | None = None

    @property
    def key_name(self) -> str:
        # contracts sometimes emit keys with padding
        return self.key.strip()


class Event(BaseModel):
    type: str
    attributes: list[Attribute] = Field(default_factory=list)


class LogEntry(BaseModel):
    msg_index: int | None = None
    events: list[Event] = Field(default_factory=list)

    def first_event(self, event_type: str) -> Event | None:
        for ev in self.events:
            if ev.type == event_type:
                return ev
        return None


class Receipt(BaseModel):
    txhash: str = ""
    height: int | None = None
    code: int = 0
    raw_log: str = ""
    logs: list[LogEntry] = Field(default_factory=list)
    # flat, msg_index-tagged events; the only log data on cosmos-sdk 0.50 nodes
    events: list[Event] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.code == 0

    def log(self, index: int) -> LogEntry | None:
        if 0 <= index < len(self.logs):
            return self.logs[index]
        return None
