"""
Measurement model for WebSocket benchmark reports.

A report file holds a list of steps, one per client load level. Points are
grouped per category (the report label) and per client count, and each
statistic is averaged across the points of a step when series are built.
"""

import math
from typing import Dict, Iterator, List, Optional
from dataclasses import dataclass, field


# Statistics charted in the HTML report, in panel order
SERIES_FIELDS = ["median", "p95", "max"]

# Every statistic a step can average
STAT_FIELDS = ["median", "p95", "max", "min"]

# Report record key for each point attribute
RECORD_KEYS = {
    "clients": "clients",
    "max": "max-rtt",
    "min": "min-rtt",
    "median": "median-rtt",
    "p95": "per-rtt",
}


class InvalidReportError(ValueError):
    """A report file or one of its step records cannot be used."""


class EmptyStepError(ValueError):
    """A statistic was requested from a step without points."""


def _is_number(value) -> bool:
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return False
    return isinstance(value, int) or math.isfinite(value)


@dataclass(frozen=True)
class SamplePoint:
    """One benchmark observation at a given client count."""

    clients: int
    max: float
    min: float
    median: float
    p95: float

    @classmethod
    def from_record(cls, record) -> "SamplePoint":
        """Build a point from a report step record, validating every field."""
        if not isinstance(record, dict):
            raise InvalidReportError(
                f"step record must be an object, got {type(record).__name__}"
            )

        values = {}
        for attr, key in RECORD_KEYS.items():
            if key not in record:
                raise InvalidReportError(f"step record is missing '{key}'")
            value = record[key]
            if attr == "clients":
                if not isinstance(value, int) or isinstance(value, bool):
                    raise InvalidReportError(
                        f"'{key}' must be an integer, got {value!r}"
                    )
            elif not _is_number(value):
                raise InvalidReportError(f"'{key}' must be a number, got {value!r}")
            values[attr] = value

        return cls(
            clients=values["clients"],
            max=float(values["max"]),
            min=float(values["min"]),
            median=float(values["median"]),
            p95=float(values["p95"]),
        )


@dataclass(order=True)
class Step:
    """All points of one category recorded at the same client count."""

    clients: int
    points: List[SamplePoint] = field(default_factory=list, compare=False)

    def add(self, point: SamplePoint):
        self.points.append(point)

    def mean(self, stat: str) -> float:
        if stat not in STAT_FIELDS:
            raise ValueError(f"Unknown statistic: {stat}")
        if not self.points:
            raise EmptyStepError(f"No points recorded for {self.clients} clients")
        return sum(getattr(p, stat) for p in self.points) / len(self.points)

    @property
    def max(self) -> float:
        return self.mean("max")

    @property
    def min(self) -> float:
        return self.mean("min")

    @property
    def median(self) -> float:
        return self.mean("median")

    @property
    def p95(self) -> float:
        return self.mean("p95")


class Measurement:
    """Steps of one benchmark category, keyed by client count."""

    def __init__(self, label: str):
        self.label = label
        self._steps: Dict[int, Step] = {}

    def add(self, point: SamplePoint):
        """Append a point to its step, creating the step on first use."""
        step = self._steps.get(point.clients)
        if step is None:
            step = self._steps[point.clients] = Step(point.clients)
        step.add(point)

    def get_step(self, clients: int) -> Optional[Step]:
        return self._steps.get(clients)

    def sorted_steps(self) -> List[Step]:
        return sorted(self._steps.values())

    def client_counts(self) -> List[int]:
        return sorted(self._steps)

    def __len__(self):
        return len(self._steps)


class Aggregator:
    """
    Groups sample points by category and client count.

    Categories keep the order in which their labels were first recorded;
    steps are always reported in ascending client count. Not safe for
    concurrent use.
    """

    def __init__(self):
        self._measurements: Dict[str, Measurement] = {}

    def record(self, label: str, point: SamplePoint):
        """Record a point under a category, creating the category if needed."""
        measurement = self._measurements.get(label)
        if measurement is None:
            measurement = self._measurements[label] = Measurement(label)
        measurement.add(point)

    def record_step(self, label: str, record) -> SamplePoint:
        """Validate a raw report step record and record it."""
        point = SamplePoint.from_record(record)
        self.record(label, point)
        return point

    def get_measurement(self, label: str) -> Optional[Measurement]:
        return self._measurements.get(label)

    def labels(self) -> List[str]:
        return list(self._measurements)

    def measurements(self) -> Iterator[Measurement]:
        return iter(self._measurements.values())

    def client_counts(self) -> List[int]:
        """Sorted union of client counts across all categories."""
        counts = set()
        for measurement in self._measurements.values():
            counts.update(measurement.client_counts())
        return sorted(counts)

    def series_for(self, stat: str) -> List[dict]:
        """Per-category mean series for one statistic."""
        if stat not in STAT_FIELDS:
            raise ValueError(
                f"Unknown statistic: {stat} (expected one of {', '.join(STAT_FIELDS)})"
            )
        return [
            {
                "name": m.label,
                "data": [step.mean(stat) for step in m.sorted_steps()],
            }
            for m in self._measurements.values()
        ]

    def series(self) -> Dict[str, List[dict]]:
        """Series for every charted statistic."""
        return {stat: self.series_for(stat) for stat in SERIES_FIELDS}

    def __len__(self):
        return len(self._measurements)

    def __contains__(self, label):
        return label in self._measurements
