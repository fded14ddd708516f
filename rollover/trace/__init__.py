"""Optional JSONL trace of a rollover run."""

from rollover.trace.schema import Event, EventType, new_event, now_iso
from rollover.trace.store_jsonl import JsonlTraceStore, load_events

__all__ = ["Event", "EventType", "new_event", "now_iso", "JsonlTraceStore", "load_events"]
