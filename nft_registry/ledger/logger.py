"""JSONL event logger - append-only audit trail of registry mutations"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..config import get


class EventLogger:
    """Append-only JSONL event log.

    Every event gets a monotonic ``sequence`` and a UTC ``timestamp``.
    The registry logs one event per successful mutation, tagged with the
    txid that mutation received.
    """

    output_path: Path
    _sequence: int

    def __init__(self, output_file: str | Path | None = None, truncate: bool = True) -> None:
        """Initialize the event logger.

        Args:
            output_file: JSONL file path (default: logging.output_file from config)
            truncate: Clear the file on init (new run). Pass False to keep
                appending after a restart.
        """
        resolved = output_file or get("logging.output_file") or "registry_events.jsonl"
        self.output_path = Path(resolved)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._sequence = 0
        if truncate or not self.output_path.exists():
            self.output_path.write_text("")
        else:
            self._sequence = sum(1 for line in self.output_path.read_text().splitlines() if line)

    def log(self, event_type: str, data: dict[str, Any]) -> None:
        """Log an event to the JSONL file."""
        self._sequence += 1
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "sequence": self._sequence,
            "event_type": event_type,
            **data,
        }
        with open(self.output_path, "a") as f:
            f.write(json.dumps(event) + "\n")

    def read_recent(self, n: int | None = None) -> list[dict[str, Any]]:
        """Read the last N events from the log.

        N defaults to logging.default_recent from config.
        """
        if n is None:
            default_recent = get("logging.default_recent")
            n = default_recent if isinstance(default_recent, int) else 50
        if not self.output_path.exists():
            return []
        lines = [line for line in self.output_path.read_text().split("\n") if line]
        recent = lines[-n:] if len(lines) > n else lines
        return [json.loads(line) for line in recent]

    @property
    def sequence(self) -> int:
        return self._sequence
