"""
Timeline Helpers

Pure functions that map the simulation clock onto rows of the ``Time``
table. Every reporting frequency shares one timeline; this module decides
which calendar columns each frequency populates.
"""

from .models import ReportingFrequency, TimeRecord

# Non-leap year, January first
DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)

MINUTES_PER_DAY = 24 * 60


def adjust_reporting_hour_and_minutes(hour: int, minutes: int) -> tuple[int, int]:
    """Convert an end-of-interval clock reading into hour/minute columns.

    The simulation reports hour ``h`` for the interval ending in that hour,
    with minute 60 meaning the top of the hour.

    Examples:
        >>> adjust_reporting_hour_and_minutes(10, 60)
        (10, 0)
        >>> adjust_reporting_hour_and_minutes(10, 45)
        (9, 45)
    """
    if minutes == 60:
        return hour, 0
    return hour - 1, minutes


def encode_mon_day_hr_min(month: int, day: int, hour: int, minute: int) -> int:
    """Pack a point in time into one integer (MMDDHHmm).

    Examples:
        >>> encode_mon_day_hr_min(7, 21, 14, 30)
        7211430
    """
    return ((month * 100 + day) * 100 + hour) * 100 + minute


def decode_mon_day_hr_min(packed: int) -> tuple[int, int, int, int]:
    """Unpack an integer produced by :func:`encode_mon_day_hr_min`.

    Returns:
        (month, day, hour, minute)

    Examples:
        >>> decode_mon_day_hr_min(7211430)
        (7, 21, 14, 30)
    """
    month, rest = divmod(packed, 1_000_000)
    day, rest = divmod(rest, 10_000)
    hour, minute = divmod(rest, 100)
    return month, day, hour, minute


def round_minute(value: float) -> int:
    """Round a non-negative fractional minute to the nearest whole minute."""
    return int(value + 0.5)


def _require(frequency: ReportingFrequency, **values: object) -> None:
    missing = [name for name, value in values.items() if value is None]
    if missing:
        raise ValueError(
            f"{frequency.label} time record requires {', '.join(missing)}"
        )


def build_time_row(
    time_index: int,
    reporting_interval: int,
    cumulative_simulation_days: int,
    month: int | None = None,
    day_of_month: int | None = None,
    hour: int | None = None,
    end_minute: float | None = None,
    start_minute: float | None = None,
    dst: int | None = None,
    day_type: str | None = None,
    warmup: bool = False,
    environment_period_index: int | None = None,
) -> TimeRecord:
    """Build the ``Time`` row for one firing of a reporting frequency.

    Args:
        time_index: Index to assign to the row
        reporting_interval: ReportingFrequency code
        cumulative_simulation_days: Days elapsed since the run period started
        month, day_of_month, hour: Calendar position of the interval end
        end_minute, start_minute: Fractional minute bounds (timestep frequencies)
        dst: Daylight saving indicator
        day_type: Day-of-week or holiday label
        warmup: True while the simulation is in warmup days
        environment_period_index: Environment period the tick belongs to

    Returns:
        Validated TimeRecord

    Raises:
        ValueError: If the frequency code is unknown or a field the
            frequency needs is missing
    """
    frequency = ReportingFrequency(reporting_interval)

    row = {
        "time_index": time_index,
        "interval_type": int(frequency),
        "simulation_days": cumulative_simulation_days,
        "environment_period_index": environment_period_index,
        "warmup_flag": warmup,
    }

    if frequency in (ReportingFrequency.EACH_CALL, ReportingFrequency.TIMESTEP):
        _require(
            frequency,
            month=month,
            day_of_month=day_of_month,
            hour=hour,
            end_minute=end_minute,
            start_minute=start_minute,
        )
        int_end_minute = round_minute(end_minute)
        interval = int_end_minute - round_minute(start_minute)
        t_hour, t_minute = adjust_reporting_hour_and_minutes(hour, int_end_minute)
        row.update(
            month=month,
            day=day_of_month,
            hour=t_hour,
            minute=t_minute,
            dst=dst,
            interval=interval,
            day_type=day_type,
        )
    elif frequency == ReportingFrequency.HOURLY:
        _require(frequency, month=month, day_of_month=day_of_month, hour=hour)
        row.update(
            month=month,
            day=day_of_month,
            hour=hour,
            minute=0,
            dst=dst,
            interval=60,
            day_type=day_type,
        )
    elif frequency == ReportingFrequency.DAILY:
        _require(frequency, month=month, day_of_month=day_of_month)
        row.update(
            month=month,
            day=day_of_month,
            hour=24,
            minute=0,
            dst=dst,
            interval=MINUTES_PER_DAY,
            day_type=day_type,
        )
    elif frequency == ReportingFrequency.MONTHLY:
        _require(frequency, month=month)
        if not 1 <= month <= 12:
            raise ValueError(f"Month out of range: {month}")
        days = DAYS_IN_MONTH[month - 1]
        row.update(
            month=month,
            day=days,
            hour=24,
            minute=0,
            interval=MINUTES_PER_DAY * days,
        )
    else:  # RUN_PERIOD
        row.update(interval=MINUTES_PER_DAY * cumulative_simulation_days)

    return TimeRecord(**row)
