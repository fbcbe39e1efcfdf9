from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from tale.domain.errors import ScriptValidationError


@dataclass(frozen=True)
class ScheduleEntry:
    """One weekly time-table rule: `[start, end)` hours at `location`.

    `start > end` wraps past midnight. `days` uses 0..6 from Sunday and
    accepts 7 as Sunday too.
    """

    start: float
    end: float
    location: str
    days: Optional[tuple[int, ...]] = None

    @classmethod
    def coerce(cls, value: object) -> "ScheduleEntry":
        if isinstance(value, ScheduleEntry):
            return value
        if not isinstance(value, (list, tuple)) or len(value) not in (3, 4):
            raise ScriptValidationError(f"Invalid schedule entry: {value!r}")
        start, end, location = value[0], value[1], value[2]
        if not isinstance(location, str) or not location:
            raise ScriptValidationError(f"Schedule entry needs a location id: {value!r}")
        days = None
        if len(value) == 4 and value[3] is not None:
            days = tuple(int(day) for day in value[3])
        return cls(start=float(start), end=float(end), location=location, days=days)

    def applies_on(self, day_of_week: int) -> bool:
        if self.days is None:
            return True
        return any(day % 7 == day_of_week for day in self.days)

    def covers(self, hour: float) -> bool:
        if self.start <= self.end:
            return self.start <= hour < self.end
        return hour >= self.start or hour < self.end

    def matches(self, hour: float, day_of_week: int) -> bool:
        return self.applies_on(day_of_week) and self.covers(hour)


def coerce_schedule(entries: Iterable[object]) -> list[ScheduleEntry]:
    return [ScheduleEntry.coerce(entry) for entry in entries or ()]


def resolve_location(entries: Sequence[ScheduleEntry], hour: float, day_of_week: int) -> Optional[str]:
    for entry in entries:
        if entry.matches(hour, day_of_week):
            return entry.location
    return None


def scheduled_locations(entries: Sequence[ScheduleEntry]) -> set[str]:
    return {entry.location for entry in entries}
