"""JSONL trace store implementation."""

import json
import logging
from pathlib import Path
from typing import Iterator, List

from pydantic import ValidationError

from rollover.trace.schema import Event

logger = logging.getLogger(__name__)


class JsonlTraceStore:
    """Append trace events to a JSONL file, one event per line."""

    def __init__(self, path: Path):
        """Initialize trace store.

        Args:
            path: Path to JSONL file. Parent directories will be created if needed.
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._file = None

    def append(self, event: Event):
        if self._file is None:
            self._file = open(self.path, "a", encoding="utf-8")
        self._file.write(json.dumps(event.model_dump(), ensure_ascii=False) + "\n")
        self._file.flush()

    def iter_events(self) -> Iterator[Event]:
        """Iterate over all events in the store.

        Yields:
            Event objects, skipping lines that do not parse.
        """
        if not self.path.exists():
            return

        with open(self.path, "r", encoding="utf-8") as f:
            for lineno, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    yield Event(**json.loads(line))
                except (json.JSONDecodeError, ValidationError) as e:
                    logger.warning("Skipping malformed trace line %s:%d: %s", self.path, lineno, e)

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


def load_events(path: Path) -> List[Event]:
    """Load all events from a trace file."""
    return list(JsonlTraceStore(path).iter_events())
