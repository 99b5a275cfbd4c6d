"""Recurring health-check schedule (the editable form of a cron expression)."""
from dataclasses import dataclass, asdict

from models.enums import ScheduleType

DEFAULT_HOUR = 9
DEFAULT_MINUTE = 0
DEFAULT_WEEKDAY = 1  # Monday


class ScheduleError(ValueError):
    """Schedule field outside its allowed range."""


def _type_value(schedule_type):
    return getattr(schedule_type, "value", schedule_type)


@dataclass(eq=False)
class Schedule:
    type: str = ScheduleType.DAILY.value
    hour: int = DEFAULT_HOUR
    minute: int = DEFAULT_MINUTE
    weekday: int = DEFAULT_WEEKDAY

    @property
    def is_weekly(self):
        return self.type == ScheduleType.WEEKLY

    def _key(self):
        # weekday carries no meaning for a daily schedule
        weekday = self.weekday if self.is_weekly else None
        return (_type_value(self.type), self.hour, self.minute, weekday)

    def __eq__(self, other):
        if not isinstance(other, Schedule):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self):
        return hash(self._key())

    def validate(self):
        if self.type not in (ScheduleType.DAILY, ScheduleType.WEEKLY):
            raise ScheduleError(f"Unknown schedule type: {self.type}")
        for name, low, high in (("hour", 0, 23), ("minute", 0, 59), ("weekday", 0, 6)):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
                raise ScheduleError(f"{name} must be an integer in [{low}, {high}], got {value!r}")
        return self

    def to_dict(self):
        data = asdict(self)
        data["type"] = _type_value(self.type)
        return data

    @classmethod
    def from_dict(cls, data):
        return cls(
            type=data.get("type", ScheduleType.DAILY.value),
            hour=data.get("hour", DEFAULT_HOUR),
            minute=data.get("minute", DEFAULT_MINUTE),
            weekday=data.get("weekday", DEFAULT_WEEKDAY),
        )
