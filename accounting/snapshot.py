"""
Snapshot Model

Point-in-time readings of wall-clock time and process resource usage.

DESIGN RULES:
- Pure data containers
- Immutable after creation
- No OS access (see accounting.sampler)
"""

from dataclasses import dataclass, field


MICROS_PER_SECOND = 1_000_000


@dataclass(frozen=True, order=True)
class TimeVal:
    """
    A (seconds, microseconds) pair.

    Ordering is lexicographic: seconds first, then microseconds.
    """
    seconds: int = 0
    micros: int = 0

    @classmethod
    def from_seconds(cls, value: float) -> "TimeVal":
        """Split float seconds (as reported by getrusage) into a TimeVal."""
        seconds = int(value)
        micros = int(round((value - seconds) * MICROS_PER_SECOND))
        if micros >= MICROS_PER_SECOND:
            seconds += 1
            micros -= MICROS_PER_SECOND
        return cls(seconds=seconds, micros=micros)

    @classmethod
    def from_nanoseconds(cls, value: int) -> "TimeVal":
        """Truncate an integer nanosecond timestamp to microsecond resolution."""
        seconds, nanos = divmod(value, 1_000_000_000)
        return cls(seconds=seconds, micros=nanos // 1000)

    def __str__(self) -> str:
        return f"{self.seconds}.{self.micros:06d}sec."


@dataclass(frozen=True)
class Usage:
    """Accumulated CPU time and block I/O counts for one rusage scope."""
    utime: TimeVal = field(default_factory=TimeVal)
    stime: TimeVal = field(default_factory=TimeVal)
    inblock: int = 0
    oublock: int = 0


@dataclass(frozen=True)
class Snapshot:
    """
    Resource readings captured at one instant.

    Captures:
    - Wall-clock time
    - Usage of the running process
    - Usage of its terminated (reaped) children
    """
    time: TimeVal = field(default_factory=TimeVal)
    self_usage: Usage = field(default_factory=Usage)
    children_usage: Usage = field(default_factory=Usage)
