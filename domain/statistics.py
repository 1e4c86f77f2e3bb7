"""
Statistics-related domain models.

Immutable data structures for tracking event processing in one analysis run.
"""

from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime


@dataclass(frozen=True)
class FileStatistics:
    """Statistics for a single input file."""

    path: str
    entries: int
    accepted_events: int
    processing_time_sec: float
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        """Validate file statistics."""
        if self.entries < 0:
            raise ValueError(f"entries must be non-negative, got {self.entries}")
        if self.accepted_events < 0:
            raise ValueError(f"accepted_events must be non-negative, got {self.accepted_events}")
        if self.accepted_events > self.entries:
            raise ValueError(
                f"accepted_events ({self.accepted_events}) cannot exceed entries ({self.entries})"
            )

    @property
    def rejected_events(self) -> int:
        return self.entries - self.accepted_events


@dataclass(frozen=True)
class RunStatistics:
    """
    Statistics for one analysis run.

    Immutable snapshot of event processing progress and results.
    """

    # Counts
    files_processed: int
    entries_read: int
    accepted_events: int

    # Timing
    start_time: datetime
    end_time: Optional[datetime] = None

    # Per-file breakdown
    files: tuple[FileStatistics, ...] = field(default_factory=tuple)

    def __post_init__(self):
        """Validate run statistics."""
        if self.files_processed < 0:
            raise ValueError(f"files_processed must be non-negative, got {self.files_processed}")
        if self.entries_read < 0:
            raise ValueError(f"entries_read must be non-negative, got {self.entries_read}")
        if self.accepted_events < 0:
            raise ValueError(f"accepted_events must be non-negative, got {self.accepted_events}")
        if self.accepted_events > self.entries_read:
            raise ValueError(
                f"accepted_events ({self.accepted_events}) cannot exceed "
                f"entries_read ({self.entries_read})"
            )
        if self.end_time is not None and self.end_time < self.start_time:
            raise ValueError("end_time must be after start_time")

    @property
    def rejected_events(self) -> int:
        return self.entries_read - self.accepted_events

    @property
    def acceptance_rate(self) -> float:
        """Accepted fraction of entries read, as percentage."""
        if self.entries_read == 0:
            return 0.0
        return (self.accepted_events / self.entries_read) * 100

    @property
    def total_time_sec(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "files_processed": self.files_processed,
            "entries_read": self.entries_read,
            "accepted_events": self.accepted_events,
            "rejected_events": self.rejected_events,
            "acceptance_rate": f"{self.acceptance_rate:.1f}%",
            "total_time_sec": f"{self.total_time_sec:.1f}",
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "files": [
                {
                    "path": f.path,
                    "entries": f.entries,
                    "accepted_events": f.accepted_events,
                    "processing_time_sec": round(f.processing_time_sec, 3),
                }
                for f in self.files
            ],
        }
