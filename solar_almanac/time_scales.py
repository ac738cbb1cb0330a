"""Calendar and time-scale conversions shared by every calculator.

Julian Day arithmetic, the piecewise Delta T (TT - UT) model and the
Terrestrial Time to UTC conversion used by the season and lunar modules.
"""

import datetime
import math
from typing import Iterator

J2000 = 2451545.0
UNIX_EPOCH_JD = 2440587.5
DAYS_PER_CENTURY = 36525.0
SECONDS_PER_DAY = 86400


def leap_year(year: int) -> bool:
    """Returns True if year is a leap year."""
    return (year % 400 == 0) or (year % 4 == 0 and year % 100 != 0)


def days_in_year(year: int) -> int:
    return 366 if leap_year(year) else 365


def days_in_months(year: int) -> list[int]:
    """Returns a list of days per month for the given year."""
    return [31, 29 if leap_year(year) else 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]


def day_of_year(year: int, month: int, day: int) -> int:
    """Calculate day of year (1-366) from year, month, day."""
    return sum(days_in_months(year)[: month - 1]) + day


def doy_to_month_day(year: int, doy: int) -> tuple[int, int]:
    """Convert day-of-year to (month, day) for a given year."""
    remaining = doy
    for month_idx, dim in enumerate(days_in_months(year)):
        if remaining <= dim:
            return (month_idx + 1, remaining)
        remaining -= dim
    return (12, 31)  # shouldn't reach here for valid input


def day_of_year_info(year: int, month: int, day: int) -> tuple[int, int]:
    """Return (day of year, total days in year)."""
    return day_of_year(year, month, day), days_in_year(year)


def iter_year_dates(year: int) -> Iterator[tuple[int, int, int]]:
    """Yield (year, month, day) for every calendar day of the year."""
    for doy in range(1, days_in_year(year) + 1):
        month, day = doy_to_month_day(year, doy)
        yield year, month, day


def normalize_month(year: int, month: int) -> tuple[int, int]:
    """Roll an out-of-range month (0, 13, ...) into the adjacent year."""
    y, m = divmod(month - 1, 12)
    return year + y, m + 1


def julian_day(year: int, month: int, day: int, hour_utc: float = 0.0) -> float:
    """Civil (proleptic Gregorian) date to Julian Day.

    January and February count as months 13 and 14 of the previous year.
    hour_utc may fall outside 0-24; it is simply added as a day fraction.
    """
    if month <= 2:
        year -= 1
        month += 12
    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)
    return (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day
        + b
        - 1524.5
        + hour_utc / 24.0
    )


def julian_century(jd: float) -> float:
    """Julian centuries since J2000.0."""
    return (jd - J2000) / DAYS_PER_CENTURY


def delta_t(year: int) -> float:
    """Delta T = TT - UT in seconds for the given year.

    Polynomial fits over 1900-2050; a quadratic in centuries from 1820
    outside that span.
    """
    if 2005 <= year <= 2050:
        t = year - 2000
        return 62.92 + 0.32217 * t + 0.005589 * t * t
    if 1986 <= year < 2005:
        t = year - 2000
        return (
            63.86
            + 0.3345 * t
            - 0.060374 * t**2
            + 0.0017275 * t**3
            + 0.000651814 * t**4
            + 0.00002373599 * t**5
        )
    if 1961 <= year < 1986:
        t = year - 1975
        return 45.45 + 1.067 * t - t**2 / 260.0 - t**3 / 718.0
    if 1941 <= year < 1961:
        t = year - 1950
        return 29.07 + 0.407 * t - t**2 / 233.0 + t**3 / 2547.0
    if 1920 <= year < 1941:
        t = year - 1920
        return 21.20 + 0.84493 * t - 0.076100 * t**2 + 0.0020936 * t**3
    if 1900 <= year < 1920:
        t = year - 1900
        return (
            -2.79
            + 1.494119 * t
            - 0.0598939 * t**2
            + 0.0061966 * t**3
            - 0.000197 * t**4
        )
    u = (year - 1820) / 100.0
    return -20.0 + 32.0 * u * u


def jde_to_year(jde: float) -> int:
    """Approximate calendar year of a Julian Ephemeris Day."""
    return round(2000 + (jde - J2000) / 365.25)


def jde_to_unix(jde: float, year: int | None = None) -> int:
    """Convert a Julian Ephemeris Day (TT) to a Unix timestamp.

    With a year, Delta T for that year is subtracted to give UTC; without
    one the result stays on the TT scale.
    """
    seconds = (jde - UNIX_EPOCH_JD) * SECONDS_PER_DAY
    if year is not None:
        seconds -= delta_t(year)
    return round(seconds)


def utc_offset_tz(utc_offset_hours: float) -> datetime.timezone:
    return datetime.timezone(datetime.timedelta(hours=utc_offset_hours))


def fraction_to_timestamp(
    year: int, month: int, day: int, frac: float, utc_offset_hours: float = 0.0
) -> int:
    """Map a civil date plus a day fraction to a Unix timestamp.

    The fraction is measured from local midnight at the given UTC offset.
    """
    midnight = datetime.datetime(year, month, day, tzinfo=utc_offset_tz(utc_offset_hours))
    return int(midnight.timestamp()) + round(frac * SECONDS_PER_DAY)


def timestamp_to_local_date(timestamp: int, utc_offset_hours: float = 0.0) -> datetime.date:
    return datetime.datetime.fromtimestamp(
        timestamp, tz=utc_offset_tz(utc_offset_hours)
    ).date()
