"""Per-conversion stage timing.

Usage:
    tel = Telemetry()

    with tel.span("parsing"):
        handle = await parse(backend, data)

    result.timings = tel.to_dict()
    print(tel.summary())

One Telemetry instance belongs to one conversion call; concurrent calls each
get their own.
"""
import time
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Dict, List, Optional


class Telemetry:
    """Tracks named, sequential timing spans for one pipeline run."""

    def __init__(self, label: Optional[str] = None):
        self.label = label
        self.spans: List[Dict] = []
        self._start_time = time.monotonic()

    @contextmanager
    def span(self, name: str):
        """Time a named stage. A stage that raises is recorded as failed."""
        entry = {
            "name": name,
            "start": time.monotonic(),
            "duration": None,
            "failed": False,
        }
        self.spans.append(entry)
        try:
            yield entry
        except BaseException:
            entry["failed"] = True
            raise
        finally:
            entry["duration"] = time.monotonic() - entry["start"]

    def total_seconds(self) -> float:
        """Wall-clock time since telemetry was created."""
        return time.monotonic() - self._start_time

    def summary(self) -> str:
        """Return formatted timing table."""
        return self.format_timings(self.to_dict())

    @classmethod
    def format_timings(cls, timings: Dict) -> str:
        """Render a to_dict() payload (e.g. ConversionResult.timings) as a table."""
        stages = timings.get("stages", [])
        if not stages:
            return "No timing data."

        total = timings.get("total_seconds", 0.0)
        label = timings.get("label")
        title = f"TIMING BREAKDOWN ({label})" if label else "TIMING BREAKDOWN"
        lines = ["", title, "─" * 52]
        lines.append(f"{'Stage':<30} {'Duration':>9} {'% Total':>9}")
        lines.append("─" * 52)

        for stage in stages:
            dur = stage.get("duration_seconds")
            if dur is None:
                continue
            pct = (dur / total) * 100 if total else 0.0
            name = f"{stage['name']} (failed)" if stage.get("failed") else stage["name"]
            lines.append(f"{name:<30} {dur * 1000:>7.1f}ms {pct:>8.1f}%")

        lines.append("─" * 52)
        lines.append(f"{'Total':<30} {total * 1000:>7.1f}ms")
        lines.append("")

        return "\n".join(lines)

    def to_dict(self) -> Dict:
        """Return JSON-serializable timing data."""
        return {
            "label": self.label,
            "total_seconds": round(self.total_seconds(), 4),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "stages": [
                {
                    "name": s["name"],
                    "duration_seconds": round(s["duration"], 4) if s["duration"] is not None else None,
                    "failed": s["failed"],
                }
                for s in self.spans
            ],
        }
