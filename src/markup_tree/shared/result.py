"""Metrics collected while building markup trees."""

from dataclasses import dataclass


@dataclass
class BuildMetrics:
    """Counters and timing for one build call."""

    processing_time_ms: float = 0.0
    events_consumed: int = 0
    elements_built: int = 0
    text_runs: int = 0
    trivia_skipped: int = 0
    duplicate_attributes_discarded: int = 0
    max_depth_reached: int = 0

    @property
    def events_per_second(self) -> float:
        """Calculate events consumed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.events_consumed * 1000.0) / self.processing_time_ms

    def to_dict(self) -> dict:
        """Convert metrics to dictionary representation."""
        return {
            "processing_time_ms": self.processing_time_ms,
            "events_consumed": self.events_consumed,
            "elements_built": self.elements_built,
            "text_runs": self.text_runs,
            "trivia_skipped": self.trivia_skipped,
            "duplicate_attributes_discarded": self.duplicate_attributes_discarded,
            "max_depth_reached": self.max_depth_reached,
        }
