"""Conversion between a daily/weekly Schedule and a 5-field cron expression.

Only the two shapes this module writes are understood on the way back:

    "M H * * D"  -> weekly on weekday D (0-6)
    "M H * * *"  -> daily

Anything else, including interval crons such as "*/15 * * * *" or
"0 */2 * * *" left behind by the older interval scheduler, decodes to the
default schedule (daily at 09:00). The original interval is discarded. The
schedule editor must always open, so this is the documented fallback and
not an error. encode(decode(c)) == c therefore only holds for the two
recognised shapes.
"""
import logging
import re

from models.enums import ScheduleType
from models.schedule import Schedule, DEFAULT_HOUR, DEFAULT_MINUTE, DEFAULT_WEEKDAY

logger = logging.getLogger("mtmonitor.alerts.schedule")

_WEEKLY_RE = re.compile(r"([0-9]+) ([0-9]+) \* \* ([0-6])")
_DAILY_RE = re.compile(r"([0-9]+) ([0-9]+) \* \* \*")

WEEKDAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


def default_schedule():
    return Schedule(ScheduleType.DAILY.value, DEFAULT_HOUR, DEFAULT_MINUTE, DEFAULT_WEEKDAY)


def encode_schedule(schedule):
    """Schedule (or an equivalent dict) -> cron string."""
    if isinstance(schedule, dict):
        schedule = Schedule.from_dict(schedule)
    minute, hour = int(schedule.minute), int(schedule.hour)
    if schedule.is_weekly:
        return f"{minute} {hour} * * {int(schedule.weekday)}"
    return f"{minute} {hour} * * *"


def match_schedule(cron):
    """Cron string -> Schedule for the daily/weekly shapes, None for anything else."""
    if not isinstance(cron, str):
        return None

    match = _WEEKLY_RE.fullmatch(cron)
    if match:
        minute, hour, weekday = (int(g) for g in match.groups())
        schedule_type = ScheduleType.WEEKLY.value
    else:
        match = _DAILY_RE.fullmatch(cron)
        if not match:
            return None
        minute, hour = (int(g) for g in match.groups())
        weekday = DEFAULT_WEEKDAY
        schedule_type = ScheduleType.DAILY.value

    if minute > 59 or hour > 23:
        return None
    return Schedule(schedule_type, hour, minute, weekday)


def decode_schedule(cron):
    """Cron string -> Schedule. Never raises; unknown shapes get the default."""
    schedule = match_schedule(cron)
    if schedule is None:
        logger.debug(f"Unrecognised cron {cron!r}, using default schedule")
        return default_schedule()
    return schedule


def describe_schedule(schedule):
    """Human-readable preview, e.g. 'Every Wednesday at 14:30'."""
    at = f"{int(schedule.hour):02d}:{int(schedule.minute):02d}"
    if schedule.is_weekly:
        return f"Every {WEEKDAY_NAMES[int(schedule.weekday) % 7]} at {at}"
    return f"Daily at {at}"
