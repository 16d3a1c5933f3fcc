"""Refresh windows: weekday/hour ranges during which polling may run."""
from datetime import datetime
from typing import Dict, Iterable, List, Mapping, Tuple

WEEKDAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

# NFL slate, US Eastern: Thursday night, Sunday, Monday night
DEFAULT_WINDOWS: Dict[int, List[Tuple[int, int]]] = {
    3: [(20, 24)],
    6: [(13, 24)],
    0: [(20, 24)],
}


class RefreshWindow:
    """
    Set of allowed weekday -> [start_hour, end_hour) ranges.

    Weekdays follow datetime.weekday() (0 = Monday). The hour of the moment
    passed to `contains` is used as-is, so pass a clock in the right timezone.
    """

    def __init__(self, ranges: Mapping[int, Iterable[Tuple[int, int]]]):
        self.ranges: Dict[int, Tuple[Tuple[int, int], ...]] = {}
        for weekday, hours in ranges.items():
            day = int(weekday)
            if not 0 <= day <= 6:
                raise ValueError(f"Weekday must be 0-6, got {weekday}")
            normalized = []
            for start, end in hours:
                if not (0 <= start < end <= 24):
                    raise ValueError(f"Invalid hour range ({start}, {end}) for {WEEKDAY_NAMES[day]}")
                normalized.append((int(start), int(end)))
            self.ranges[day] = tuple(normalized)

    @classmethod
    def default(cls) -> "RefreshWindow":
        return cls(DEFAULT_WINDOWS)

    @classmethod
    def always(cls) -> "RefreshWindow":
        return cls({day: [(0, 24)] for day in range(7)})

    @classmethod
    def never(cls) -> "RefreshWindow":
        return cls({})

    def contains(self, moment: datetime) -> bool:
        hour = moment.hour
        return any(start <= hour < end for start, end in self.ranges.get(moment.weekday(), ()))

    def describe(self) -> Dict[str, List[str]]:
        return {
            WEEKDAY_NAMES[day]: [f"{start:02d}:00-{end:02d}:00" for start, end in hours]
            for day, hours in sorted(self.ranges.items())
        }

    def __repr__(self) -> str:
        return f"RefreshWindow({self.ranges!r})"
