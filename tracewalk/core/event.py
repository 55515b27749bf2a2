from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Iterable, Optional, List, Dict

@dataclass(frozen=True)
class Event:
    name: str
    timestamp: float = 0.0
    payload: Any = None
    origin: Optional[str] = None

class EventLog:
    """A recorded, timestamped sequence of events, replayable through a walker."""

    def __init__(self, events: Iterable[Event] | None = None) -> None:
        self.events: List[Event] = list(events or [])

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self):
        return iter(self.events)

    def names(self) -> List[str]:
        return [e.name for e in self.events]

    def sort_by_time(self, in_place: bool = True) -> "EventLog":
        # sorted() is stable, so events sharing a timestamp keep their recorded order
        sorted_events = sorted(self.events, key=lambda e: e.timestamp)
        if in_place:
            self.events = sorted_events
            return self
        return EventLog(sorted_events)

    def zero_time(self, zero_at: Optional[float] = None, in_place: bool = True) -> "EventLog":
        if not self.events:
            return self if in_place else EventLog([])
        if zero_at is None:
            zero_at = self.events[0].timestamp
        adjusted = [
            Event(e.name, float(e.timestamp) - float(zero_at), e.payload, e.origin)
            for e in self.events
        ]
        if in_place:
            self.events = adjusted
            return self
        return EventLog(adjusted)

    def filter_by_origin(self, origin: Optional[str]) -> "EventLog":
        return EventLog([e for e in self.events if e.origin == origin])

    def canonicalize(self, alias_map: Dict[str, str]) -> "EventLog":
        return EventLog([
            Event(alias_map.get(e.name, e.name), e.timestamp, e.payload, e.origin)
            for e in self.events
        ])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": "1",
            "events": [self._event_to_dict(e) for e in self.events],
        }

    @staticmethod
    def _event_to_dict(e: Event) -> Dict[str, Any]:
        return {
            "name": e.name,
            "timestamp": float(e.timestamp),
            "payload": e.payload,
            "origin": e.origin,
        }

    @staticmethod
    def from_dict(d: Dict[str, Any]) -> "EventLog":
        events = []
        for item in d.get("events", []):
            if isinstance(item, str):
                events.append(Event(item))
                continue
            # DOM-style recordings name the event "type"
            if "name" in item:
                name = item["name"]
            elif "type" in item:
                name = item["type"]
            else:
                raise ValueError("event item needs a 'name' or 'type'")
            origin = item.get("origin")
            events.append(Event(
                name=str(name),
                timestamp=float(item.get("timestamp", 0.0)),
                payload=item.get("payload"),
                origin=None if origin is None else str(origin),
            ))
        return EventLog(events)

    @staticmethod
    def from_names(names: Iterable[str], *, step: float = 0.0, origin: Optional[str] = None) -> "EventLog":
        return EventLog([Event(n, i * step, None, origin) for i, n in enumerate(names)])
