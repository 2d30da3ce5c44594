"""
Writes one game's events to a run directory as JSON lines.
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

EVENTS_FILENAME = "events.jsonl"
METADATA_FILENAME = "metadata.json"


class RunRecorder:
    """
    Records the events of one game under ``<runs_dir>/<run_name>/``.

    Nothing is written until create_run() has been called.
    """

    def __init__(self, runs_dir: str = "runs"):
        self.runs_dir = Path(runs_dir)
        self.run_dir: Optional[Path] = None
        self._sequence = 0

    def create_run(self, run_name: Optional[str] = None) -> str:
        """Create the run directory and return its name (timestamped if not given)."""
        run_name = run_name or datetime.now().strftime("game_%Y%m%d_%H%M%S")
        self.run_dir = self.runs_dir / run_name
        self.run_dir.mkdir(parents=True, exist_ok=True)
        self._sequence = 0
        return run_name

    def get_run_path(self) -> Optional[Path]:
        return self.run_dir

    def record_event(self, event_type: str, data: Dict[str, Any]) -> None:
        """Append an event; ids that JSON cannot encode are written with str()."""
        if self.run_dir is None:
            return
        line = json.dumps({
            "sequence": self._sequence,
            "timestamp": datetime.now().isoformat(),
            "event_type": event_type,
            "data": data,
        }, default=str)
        self._sequence += 1
        with (self.run_dir / EVENTS_FILENAME).open("a") as f:
            f.write(line + "\n")

    def save_metadata(self, metadata: Dict[str, Any]) -> None:
        if self.run_dir is None:
            return
        (self.run_dir / METADATA_FILENAME).write_text(json.dumps(metadata, indent=2, default=str))

    def load_events(self) -> List[Dict[str, Any]]:
        """Events recorded so far in this run, oldest first."""
        if self.run_dir is None:
            return []
        events_file = self.run_dir / EVENTS_FILENAME
        if not events_file.exists():
            return []
        with events_file.open() as f:
            return [json.loads(line) for line in f if line.strip()]
